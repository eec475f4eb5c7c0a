"""Exceptions raised by the storage client."""

import collections.abc
import contextlib

from botocore import exceptions as botocore_exceptions


class StorageError(Exception):
    """Raised when an object storage operation fails."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


class BucketNotFoundError(StorageError):
    """The bucket does not exist."""


class BucketAlreadyExistsError(StorageError):
    """The bucket name is already taken."""


class BucketNotEmptyError(StorageError):
    """The bucket still contains objects."""


class ObjectNotFoundError(StorageError):
    """The object does not exist."""


class AccessDeniedError(StorageError):
    """The credentials are not permitted to perform the operation."""


class UploadValidationError(StorageError):
    """Raised when arguments fail validation before reaching S3."""


_ERROR_CODES: dict[str, type[StorageError]] = {
    'AccessDenied': AccessDeniedError,
    'AllAccessDisabled': AccessDeniedError,
    'BucketAlreadyExists': BucketAlreadyExistsError,
    'BucketAlreadyOwnedByYou': BucketAlreadyExistsError,
    'BucketNotEmpty': BucketNotEmptyError,
    'Forbidden': AccessDeniedError,
    'InvalidAccessKeyId': AccessDeniedError,
    'NoSuchBucket': BucketNotFoundError,
    'NoSuchKey': ObjectNotFoundError,
    'SignatureDoesNotMatch': AccessDeniedError,
    '403': AccessDeniedError,
}

# HEAD requests carry no error body, only the status code
_NOT_FOUND_CODES = frozenset({'404', 'NotFound'})


def from_client_error(
    error: botocore_exceptions.ClientError,
    operation: str,
) -> StorageError:
    """Map a botocore ClientError onto the StorageError hierarchy.

    Args:
        error: The error raised by botocore
        operation: Human readable name of the failed operation

    Returns:
        The matching StorageError subclass instance.

    """
    code = str(error.response.get('Error', {}).get('Code', ''))
    message = f'{operation} failed: {error}'
    if code in _NOT_FOUND_CODES:
        if 'Bucket' in error.operation_name:
            return BucketNotFoundError(message, code)
        return ObjectNotFoundError(message, code)
    return _ERROR_CODES.get(code, StorageError)(message, code or None)


@contextlib.contextmanager
def translate_errors(operation: str) -> collections.abc.Iterator[None]:
    """Re-raise botocore failures inside the block as StorageError."""
    try:
        yield
    except botocore_exceptions.ClientError as err:
        raise from_client_error(err, operation) from err
    except botocore_exceptions.BotoCoreError as err:
        raise StorageError(f'{operation} failed: {err}') from err
