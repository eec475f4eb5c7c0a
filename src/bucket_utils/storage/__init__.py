"""Object storage utilities for S3-compatible services.

Thin module-level wrappers around the :class:`client.StorageClient`
singleton. Failures are logged and reported with a sentinel return
value (``False``, ``''``, ``[]`` or ``None``) rather than raised; use
:func:`get_client` directly when the cause of a failure matters.
"""

import datetime
import logging
import os
import pathlib
import typing
import uuid

from bucket_utils import models

from . import client, errors, validation

LOGGER = logging.getLogger(__name__)

__all__ = [
    'aclose',
    'bucket_exists',
    'create_bucket',
    'get_client',
    'list_buckets',
    'list_object_names',
    'object_url',
    'presigned_url',
    'put_object_and_get_url',
    'remove_bucket',
    'remove_object',
    'remove_objects',
    'upload_file',
    'upload_multipart',
    'upload_stream',
]


def get_client() -> client.StorageClient:
    """Return the shared StorageClient, creating it on first use."""
    return client.StorageClient.get_instance()


async def aclose() -> None:
    """Drop the shared client so the next call re-reads settings."""
    LOGGER.debug('Closing storage module')
    with client.StorageClient._lock:
        client.StorageClient._instance = None


async def bucket_exists(bucket: str) -> bool:
    """Check whether a bucket exists.

    Args:
        bucket: Bucket name

    Returns:
        True if the bucket exists, False if it does not or the check
        failed.

    """
    try:
        return await get_client().bucket_exists(bucket)
    except errors.StorageError as err:
        LOGGER.error('Failed to check bucket %s: %s', bucket, err)
    return False


async def create_bucket(bucket: str) -> bool:
    """Create a bucket with a public read/write policy.

    Args:
        bucket: Bucket name

    Returns:
        True if the bucket was created and the policy applied.

    """
    try:
        validation.validate_names(bucket)
        await get_client().create_bucket(bucket)
    except errors.StorageError as err:
        LOGGER.error('Failed to create bucket %s: %s', bucket, err)
        return False
    return True


async def remove_bucket(bucket: str) -> bool:
    """Remove a bucket if it exists and is empty.

    Args:
        bucket: Bucket name

    Returns:
        True if the bucket was removed.

    """
    try:
        return await get_client().remove_bucket(bucket)
    except errors.StorageError as err:
        LOGGER.error('Failed to remove bucket %s: %s', bucket, err)
    return False


async def list_buckets() -> list[models.Bucket]:
    """Return all buckets, or an empty list if listing failed."""
    try:
        return await get_client().list_buckets()
    except errors.StorageError as err:
        LOGGER.error('Failed to list buckets: %s', err)
    return []


async def list_object_names(
    bucket: str,
    folder: str | None = None,
    recursive: bool = False,
) -> list[str] | None:
    """List the object names in a bucket.

    Args:
        bucket: Bucket name
        folder: Only list objects below ``folder/``
        recursive: Include objects in nested folders

    Returns:
        The object names, or None if the bucket does not exist or
        the listing failed.

    """
    if not await bucket_exists(bucket):
        return None
    prefix = f'{folder}/' if folder else None
    try:
        return await get_client().list_object_names(
            bucket,
            prefix,
            recursive,
        )
    except errors.StorageError as err:
        LOGGER.error('Failed to list objects in %s: %s', bucket, err)
    return None


async def presigned_url(
    bucket: str,
    key: str,
    expires_in: int | datetime.timedelta | None = None,
) -> str:
    """Generate a presigned GET URL for an object.

    Args:
        bucket: Bucket name
        key: S3 object key
        expires_in: URL lifetime, at most 7 days (default: 7 days)

    Returns:
        Presigned URL string, or ``''`` if the bucket does not exist or
        the URL could not be generated.

    """
    if not await bucket_exists(bucket):
        return ''
    try:
        return await get_client().presigned_url(bucket, key, expires_in)
    except errors.StorageError as err:
        LOGGER.error(
            'Failed to generate presigned URL for %s/%s: %s',
            bucket,
            key,
            err,
        )
    return ''


async def object_url(bucket: str, key: str) -> str:
    """Generate a presigned GET URL with the configured default expiry."""
    return await presigned_url(bucket, key)


async def put_object_and_get_url(
    bucket: str,
    upload: models.UploadSource | None,
) -> str:
    """Store a multipart upload under a unique name and return its URL.

    The object is named with a random hex prefix followed by the
    upload's original file name.

    Args:
        bucket: Bucket name
        upload: The received file

    Returns:
        Presigned URL of the stored object, or ``''`` on failure.

    """
    try:
        validation.validate_upload(upload)
    except errors.UploadValidationError as err:
        LOGGER.error('Failed to upload to %s: %s', bucket, err)
        return ''
    upload = typing.cast(models.UploadSource, upload)
    if not await bucket_exists(bucket):
        LOGGER.error('Failed to upload to %s: bucket does not exist', bucket)
        return ''

    key = f'{uuid.uuid4().hex}{upload.filename or ""}'
    storage_client = get_client()
    try:
        await storage_client.upload_stream(
            bucket,
            key,
            upload.file,
            upload.size,
            upload.content_type,
        )
        return await storage_client.presigned_url(bucket, key)
    except errors.StorageError as err:
        LOGGER.error('Failed to upload %s/%s: %s', bucket, key, err)
    return ''


async def upload_stream(
    bucket: str,
    key: str,
    stream: typing.BinaryIO,
    size: int | None = None,
    content_type: str | None = None,
) -> bool:
    """Upload the contents of a binary stream.

    Args:
        bucket: Bucket name
        key: S3 object key
        stream: Readable binary file object
        size: Number of bytes in the stream, if known
        content_type: MIME type, ``image/jpeg`` displays inline in a
            browser while most other types download

    Returns:
        True if the upload succeeded.

    """
    try:
        await get_client().upload_stream(
            bucket,
            key,
            stream,
            size,
            content_type,
        )
    except errors.StorageError as err:
        LOGGER.error('Failed to upload stream to %s/%s: %s', bucket, key, err)
        return False
    return True


async def upload_file(
    bucket: str,
    key: str,
    path: str | os.PathLike[str],
    content_type: str | None = None,
) -> bool:
    """Upload a local file.

    Args:
        bucket: Bucket name
        key: S3 object key
        path: Path of the file to upload
        content_type: MIME type, detected from the file if unset

    Returns:
        True if the upload succeeded, False if the bucket or file does
        not exist or the upload failed.

    """
    if not await bucket_exists(bucket):
        LOGGER.debug('Bucket %s does not exist', bucket)
        return False
    if not pathlib.Path(path).is_file():
        LOGGER.debug('File %s does not exist', path)
        return False
    try:
        await get_client().upload_file(bucket, key, path, content_type)
    except (errors.StorageError, OSError) as err:
        LOGGER.error(
            'Failed to upload %s to %s/%s: %s',
            path,
            bucket,
            key,
            err,
        )
        return False
    return True


async def upload_multipart(
    bucket: str,
    upload: models.UploadSource | None,
    key: str | None = None,
    content_type: str | None = None,
) -> bool:
    """Upload a file received from a multipart form.

    Args:
        bucket: Bucket name
        upload: The received file
        key: S3 object key, defaults to the upload's file name
        content_type: MIME type, defaults to the type the client sent

    Returns:
        True if the upload succeeded.

    """
    if upload is None:
        LOGGER.error('Failed to upload to %s: upload is missing', bucket)
        return False
    key = upload.filename if key is None else key
    try:
        validation.validate_names(bucket, key or '')
        await get_client().upload_stream(
            bucket,
            typing.cast(str, key),
            upload.file,
            upload.size,
            content_type or upload.content_type,
        )
    except errors.StorageError as err:
        LOGGER.error('Failed to upload %s to %s: %s', key, bucket, err)
        return False
    return True


async def remove_object(bucket: str, key: str) -> bool:
    """Delete an object.

    Args:
        bucket: Bucket name
        key: S3 object key

    Returns:
        True if the delete request succeeded, False if the bucket does
        not exist or the request failed.

    """
    if not await bucket_exists(bucket):
        return False
    try:
        await get_client().delete_object(bucket, key)
    except errors.StorageError as err:
        LOGGER.error('Failed to remove %s/%s: %s', bucket, key, err)
        return False
    return True


async def remove_objects(bucket: str, keys: typing.Iterable[str]) -> bool:
    """Delete many objects in batches.

    Keys that could not be deleted are logged individually; they do
    not make the call fail.

    Args:
        bucket: Bucket name
        keys: S3 object keys

    Returns:
        True if the delete requests were sent, False if the bucket
        does not exist or a request failed.

    """
    if not await bucket_exists(bucket):
        return False
    try:
        failures = await get_client().delete_objects(bucket, keys)
    except errors.StorageError as err:
        LOGGER.error('Failed to remove objects from %s: %s', bucket, err)
        return False
    for failure in failures:
        LOGGER.error(
            'Error deleting object %s: %s',
            failure.object_name,
            failure.message,
        )
    return True
