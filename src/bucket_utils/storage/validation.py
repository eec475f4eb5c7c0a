"""Argument validation and content type detection for uploads."""

import datetime
import logging
import mimetypes
import os
import pathlib
import typing

import filetype

from bucket_utils import models, settings
from bucket_utils.storage import errors

LOGGER = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = 'application/octet-stream'

# filetype never inspects more than this many leading bytes
_SNIFF_SIZE = 261

UploadValidationError = errors.UploadValidationError


def validate_names(bucket: str, key: str | None = None) -> None:
    """Check that the bucket and, when given, object names are set.

    Raises:
        UploadValidationError: If a name is empty.

    """
    if not bucket or not bucket.strip():
        raise UploadValidationError('Bucket name is empty')
    if key is not None and not key.strip():
        raise UploadValidationError('Object name is empty')


def validate_upload(upload: models.UploadSource | None) -> None:
    """Check that a multipart upload is present and not empty.

    Raises:
        UploadValidationError: If the upload is missing or empty.

    """
    if upload is None:
        raise UploadValidationError('Upload is missing')
    if upload.size == 0:
        raise UploadValidationError(
            f'Upload {upload.filename!r} is empty'
        )


def expiry_seconds(
    expires_in: int | datetime.timedelta | None,
    storage_settings: settings.Storage,
) -> int:
    """Normalize a presigned URL lifetime to whole seconds.

    Args:
        expires_in: Lifetime in seconds or as a timedelta. ``None``
            selects the configured default.
        storage_settings: Settings providing the default lifetime

    Raises:
        UploadValidationError: If the lifetime is outside 1s to 7 days.

    """
    if expires_in is None:
        return storage_settings.presigned_url_expiry
    if isinstance(expires_in, datetime.timedelta):
        seconds = int(expires_in.total_seconds())
    else:
        seconds = int(expires_in)
    if not 1 <= seconds <= settings.MAX_PRESIGNED_EXPIRY:
        raise UploadValidationError(
            f'Expiry must be between 1 and {settings.MAX_PRESIGNED_EXPIRY} '
            f'seconds, got {seconds}'
        )
    return seconds


def detect_stream_content_type(
    stream: typing.BinaryIO,
    filename: str | None = None,
) -> str:
    """Guess the MIME type of a stream without consuming it.

    Magic bytes are only inspected when the stream is seekable and the
    read position is restored afterwards.

    """
    if stream.seekable():
        position = stream.tell()
        header = stream.read(_SNIFF_SIZE)
        stream.seek(position)
        detected = filetype.guess(header) if header else None
        if detected is not None:
            return str(detected.mime)
    return _guess_from_name(filename)


def detect_file_content_type(path: str | os.PathLike[str]) -> str:
    """Guess the MIME type of a local file."""
    path = pathlib.Path(path)
    detected = filetype.guess(str(path))
    if detected is not None:
        return str(detected.mime)
    return _guess_from_name(path.name)


def _guess_from_name(filename: str | None) -> str:
    if filename:
        guessed, _encoding = mimetypes.guess_type(filename)
        if guessed:
            return guessed
    LOGGER.debug(
        'Unable to detect content type for %r, using %s',
        filename,
        DEFAULT_CONTENT_TYPE,
    )
    return DEFAULT_CONTENT_TYPE
