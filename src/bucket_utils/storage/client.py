"""S3 client singleton for object storage operations."""

import datetime
import logging
import os
import threading
import typing

import aioboto3
from botocore import config as botocore_config

from bucket_utils import models, settings
from bucket_utils.storage import errors, policy, validation

LOGGER = logging.getLogger(__name__)

# S3 rejects DeleteObjects requests with more keys than this
DELETE_BATCH_SIZE = 1000

_PRESIGN_METHODS = {
    'GET': 'get_object',
    'PUT': 'put_object',
    'DELETE': 'delete_object',
}


class StorageClient:
    """Singleton S3 client for object storage operations.

    Uses aioboto3 for native async S3 operations against AWS S3 or any
    S3-compatible service such as MinIO. Operations raise
    :class:`~bucket_utils.storage.errors.StorageError` subclasses so
    callers can tell a missing bucket from a permission problem.

    """

    _instance: typing.ClassVar[typing.Optional['StorageClient']] = None
    _lock: typing.ClassVar[threading.Lock] = threading.Lock()

    def __init__(
        self,
        storage_settings: settings.Storage | None = None,
    ) -> None:
        self._settings = storage_settings or settings.Storage()
        self._session = aioboto3.Session(
            aws_access_key_id=self._settings.access_key or None,
            aws_secret_access_key=self._settings.secret_key or None,
            region_name=self._settings.region,
        )
        self._config = botocore_config.Config(
            signature_version=self._settings.signature_version,
            s3={'addressing_style': self._settings.addressing_style},
        )
        LOGGER.debug(
            'Storage client created for %s',
            self._settings.endpoint_url or 'AWS S3',
        )

    @classmethod
    def get_instance(cls) -> 'StorageClient':
        """Get the singleton StorageClient instance.

        The instance is built on first use. Concurrent first callers
        block on a lock so that exactly one instance is constructed.

        Returns:
            The singleton StorageClient instance.

        """
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @property
    def storage_settings(self) -> settings.Storage:
        return self._settings

    async def bucket_exists(self, bucket: str) -> bool:
        """Check whether a bucket exists.

        Args:
            bucket: Bucket name

        Returns:
            True if the bucket exists.

        Raises:
            StorageError: For any failure other than a missing bucket.

        """
        async with self._s3_client() as s3:
            try:
                with errors.translate_errors(f'HeadBucket {bucket}'):
                    await s3.head_bucket(Bucket=bucket)
            except errors.BucketNotFoundError:
                return False
        return True

    async def create_bucket(self, bucket: str) -> None:
        """Create a bucket and make it publicly accessible.

        Args:
            bucket: Bucket name

        """
        params: dict[str, typing.Any] = {'Bucket': bucket}
        if self._settings.region and self._settings.region != 'us-east-1':
            params['CreateBucketConfiguration'] = {
                'LocationConstraint': self._settings.region,
            }
        async with self._s3_client() as s3:
            with errors.translate_errors(f'CreateBucket {bucket}'):
                await s3.create_bucket(**params)
            LOGGER.info('Created bucket %s', bucket)
            with errors.translate_errors(f'PutBucketPolicy {bucket}'):
                await s3.put_bucket_policy(
                    Bucket=bucket,
                    Policy=policy.public_policy_json(bucket),
                )
        LOGGER.debug('Applied public policy to bucket %s', bucket)

    async def remove_bucket(self, bucket: str) -> bool:
        """Remove an empty bucket.

        Args:
            bucket: Bucket name

        Returns:
            True if the bucket no longer exists, False if it was
            missing to begin with or still holds objects.

        """
        if not await self.bucket_exists(bucket):
            LOGGER.debug('Bucket %s does not exist', bucket)
            return False
        async with self._s3_client() as s3:
            with errors.translate_errors(f'ListObjectsV2 {bucket}'):
                response = await s3.list_objects_v2(Bucket=bucket, MaxKeys=1)
            if response.get('KeyCount', 0) or response.get('Contents'):
                LOGGER.info('Bucket %s is not empty, not removing', bucket)
                return False
            with errors.translate_errors(f'DeleteBucket {bucket}'):
                await s3.delete_bucket(Bucket=bucket)
        LOGGER.info('Removed bucket %s', bucket)
        return not await self.bucket_exists(bucket)

    async def list_buckets(self) -> list[models.Bucket]:
        """Return every bucket visible to the configured credentials."""
        async with self._s3_client() as s3:
            with errors.translate_errors('ListBuckets'):
                response = await s3.list_buckets()
        return [
            models.Bucket(
                name=entry['Name'],
                creation_date=entry.get('CreationDate'),
            )
            for entry in response.get('Buckets', [])
        ]

    async def list_object_names(
        self,
        bucket: str,
        prefix: str | None = None,
        recursive: bool = False,
    ) -> list[str]:
        """List object names in a bucket, following pagination.

        Without ``recursive`` the listing stops at ``/`` and the
        "directories" below the prefix are returned as names ending
        in ``/``.

        Args:
            bucket: Bucket name
            prefix: Only return names starting with this prefix
            recursive: Descend into every "directory" below the prefix

        Returns:
            Object names in key order.

        """
        params: dict[str, typing.Any] = {'Bucket': bucket}
        if prefix:
            params['Prefix'] = prefix
        if not recursive:
            params['Delimiter'] = '/'

        names: list[str] = []
        async with self._s3_client() as s3:
            paginator = s3.get_paginator('list_objects_v2')
            with errors.translate_errors(f'ListObjectsV2 {bucket}'):
                async for page in paginator.paginate(**params):
                    names.extend(
                        entry['Key'] for entry in page.get('Contents', [])
                    )
                    names.extend(
                        entry['Prefix']
                        for entry in page.get('CommonPrefixes', [])
                    )
        return sorted(names)

    async def presigned_url(
        self,
        bucket: str,
        key: str,
        expires_in: int | datetime.timedelta | None = None,
        method: typing.Literal['GET', 'PUT', 'DELETE'] = 'GET',
    ) -> str:
        """Generate a presigned URL for an S3 object.

        Args:
            bucket: Bucket name
            key: S3 object key
            expires_in: URL lifetime in seconds or as a timedelta,
                defaults to the configured expiry (7 days)
            method: HTTP method the URL is signed for

        Returns:
            Presigned URL string

        Raises:
            UploadValidationError: If the lifetime or method is invalid.

        """
        if method not in _PRESIGN_METHODS:
            raise errors.UploadValidationError(
                f'Unsupported presign method {method!r}'
            )
        seconds = validation.expiry_seconds(expires_in, self._settings)
        async with self._s3_client() as s3:
            with errors.translate_errors(f'Presign {method} {bucket}/{key}'):
                url: str = await s3.generate_presigned_url(
                    _PRESIGN_METHODS[method],
                    Params={'Bucket': bucket, 'Key': key},
                    ExpiresIn=seconds,
                )
        if not url:
            raise errors.StorageError('Generated presigned URL is empty')
        return url

    async def upload_stream(
        self,
        bucket: str,
        key: str,
        stream: typing.BinaryIO,
        size: int | None = None,
        content_type: str | None = None,
    ) -> None:
        """Upload the contents of a binary stream.

        With a known ``size`` the object is sent as a single PutObject.
        Otherwise the managed transfer is used, which switches to a
        multipart upload for large streams.

        Args:
            bucket: Bucket name
            key: S3 object key
            stream: Readable binary file object
            size: Number of bytes to read from the stream
            content_type: MIME type, detected from the content if unset

        """
        content_type = (
            content_type
            or validation.detect_stream_content_type(stream, key)
        )
        async with self._s3_client() as s3:
            with errors.translate_errors(f'Upload {bucket}/{key}'):
                if size is not None:
                    await s3.put_object(
                        Bucket=bucket,
                        Key=key,
                        Body=stream,
                        ContentLength=size,
                        ContentType=content_type,
                    )
                else:
                    await s3.upload_fileobj(
                        stream,
                        bucket,
                        key,
                        ExtraArgs={'ContentType': content_type},
                    )
        LOGGER.debug('Uploaded %s/%s (%s)', bucket, key, content_type)

    async def upload_file(
        self,
        bucket: str,
        key: str,
        path: str | os.PathLike[str],
        content_type: str | None = None,
    ) -> None:
        """Upload a local file.

        Args:
            bucket: Bucket name
            key: S3 object key
            path: Path of the file to upload
            content_type: MIME type, detected from the file if unset

        """
        content_type = content_type or validation.detect_file_content_type(
            path
        )
        async with self._s3_client() as s3:
            with errors.translate_errors(f'Upload {bucket}/{key}'):
                await s3.upload_file(
                    os.fspath(path),
                    bucket,
                    key,
                    ExtraArgs={'ContentType': content_type},
                )
        LOGGER.debug('Uploaded %s to %s/%s', path, bucket, key)

    async def delete_object(self, bucket: str, key: str) -> None:
        """Delete an object from S3.

        Args:
            bucket: Bucket name
            key: S3 object key

        """
        async with self._s3_client() as s3:
            with errors.translate_errors(f'DeleteObject {bucket}/{key}'):
                await s3.delete_object(Bucket=bucket, Key=key)
        LOGGER.debug('Deleted %s/%s', bucket, key)

    async def delete_objects(
        self,
        bucket: str,
        keys: typing.Iterable[str],
    ) -> list[models.DeleteError]:
        """Delete many objects using batched DeleteObjects requests.

        Args:
            bucket: Bucket name
            keys: S3 object keys

        Returns:
            One entry per key that could not be deleted.

        """
        pending = list(keys)
        failures: list[models.DeleteError] = []
        async with self._s3_client() as s3:
            for offset in range(0, len(pending), DELETE_BATCH_SIZE):
                batch = pending[offset : offset + DELETE_BATCH_SIZE]
                with errors.translate_errors(f'DeleteObjects {bucket}'):
                    response = await s3.delete_objects(
                        Bucket=bucket,
                        Delete={
                            'Objects': [{'Key': key} for key in batch],
                            'Quiet': True,
                        },
                    )
                failures.extend(
                    models.DeleteError(
                        object_name=entry.get('Key', ''),
                        code=entry.get('Code'),
                        message=entry.get('Message'),
                    )
                    for entry in response.get('Errors', [])
                )
        LOGGER.debug(
            'Deleted %d of %d objects from %s',
            len(pending) - len(failures),
            len(pending),
            bucket,
        )
        return failures

    def _s3_client(self) -> typing.Any:
        """Create an S3 client context manager.

        Returns:
            Async context manager yielding an S3 client.

        """
        kwargs: dict[str, typing.Any] = {'config': self._config}
        if self._settings.endpoint_url:
            kwargs['endpoint_url'] = self._settings.endpoint_url
        return self._session.client('s3', **kwargs)
