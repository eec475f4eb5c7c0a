"""Logging configuration for the bucket-utils command line."""

import copy
import typing
from logging import config as logging_config

DEFAULT_LOG_CONFIG: dict[str, typing.Any] = {
    'version': 1,
    'formatters': {
        'verbose': {
            'format': '%(levelname) -10s %(asctime)s %(process)-6d '
            '%(name) -20s %(message)s',
            'datefmt': '%Y-%m-%d %H:%M:%S',
        }
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        }
    },
    'loggers': {
        'bucket_utils': {'level': 'INFO'},
        'botocore': {'level': 'WARNING'},
        'aiobotocore': {'level': 'WARNING'},
    },
    'root': {
        'level': 'WARNING',
        'handlers': ['console'],
    },
    'disable_existing_loggers': False,
    'incremental': False,
}


def get_log_config(debug: bool = False) -> dict[str, typing.Any]:
    """Return a fresh copy of the logging configuration.

    Args:
        debug: Raise the ``bucket_utils`` logger to DEBUG

    Returns:
        A :func:`logging.config.dictConfig` compatible mapping.

    """
    config = copy.deepcopy(DEFAULT_LOG_CONFIG)
    if debug:
        config['loggers']['bucket_utils']['level'] = 'DEBUG'
    return config


def configure_logging(config: dict[str, typing.Any]) -> None:
    """Apply a logging configuration built by :func:`get_log_config`."""
    logging_config.dictConfig(config)
