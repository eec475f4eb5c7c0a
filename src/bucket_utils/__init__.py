from importlib import metadata

version = metadata.version('bucket-utils')
