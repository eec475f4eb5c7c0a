import os
import unittest
from unittest import mock

import pydantic

from bucket_utils import settings


class StorageSettingsTestCase(unittest.TestCase):
    """Test cases for Storage settings."""

    def test_default_settings(self) -> None:
        """Test Storage settings defaults without environment."""
        with mock.patch.dict(os.environ, {}, clear=True):
            storage = settings.Storage(_env_file=None)
        self.assertIsNone(storage.endpoint_url)
        self.assertIsNone(storage.access_key)
        self.assertIsNone(storage.secret_key)
        self.assertEqual(storage.region, 'us-east-1')
        self.assertEqual(storage.addressing_style, 'path')
        self.assertEqual(storage.signature_version, 's3v4')
        self.assertEqual(storage.presigned_url_expiry, 604800)

    def test_from_environment(self) -> None:
        """Test that STORAGE_ prefixed variables are read."""
        with mock.patch.dict(
            os.environ,
            {
                'STORAGE_ENDPOINT_URL': 'http://127.0.0.1:9000',
                'storage_access_key': 'minioadmin',
                'STORAGE_SECRET_KEY': 'minio-secret',
                'STORAGE_PRESIGNED_URL_EXPIRY': '600',
            },
            clear=True,
        ):
            storage = settings.Storage(_env_file=None)
        self.assertEqual(storage.endpoint_url, 'http://127.0.0.1:9000')
        self.assertEqual(storage.access_key, 'minioadmin')
        self.assertEqual(storage.secret_key, 'minio-secret')
        self.assertEqual(storage.presigned_url_expiry, 600)

    def test_endpoint_normalized(self) -> None:
        """Test that trailing slashes and blanks are stripped."""
        self.assertEqual(
            settings.Storage(
                _env_file=None,
                endpoint_url=' http://minio:9000/ ',
            ).endpoint_url,
            'http://minio:9000',
        )
        self.assertIsNone(
            settings.Storage(_env_file=None, endpoint_url='').endpoint_url
        )

    def test_expiry_out_of_range(self) -> None:
        """Test that the expiry must be between 1s and 7 days."""
        for value in (0, 604801):
            with self.subTest(value=value):
                with self.assertRaises(pydantic.ValidationError):
                    settings.Storage(
                        _env_file=None,
                        presigned_url_expiry=value,
                    )

    def test_invalid_addressing_style(self) -> None:
        with self.assertRaises(pydantic.ValidationError):
            settings.Storage(_env_file=None, addressing_style='sideways')
