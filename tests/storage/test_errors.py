"""Tests for botocore error translation."""

import unittest

from botocore import exceptions as botocore_exceptions

from bucket_utils.storage import errors


def _client_error(
    code: str,
    operation: str,
) -> botocore_exceptions.ClientError:
    return botocore_exceptions.ClientError(
        {'Error': {'Code': code, 'Message': 'message'}},
        operation,
    )


class FromClientErrorTestCase(unittest.TestCase):
    """Test cases for from_client_error."""

    def test_known_codes(self) -> None:
        """Test that S3 error codes map to specific exceptions."""
        expectations = {
            'NoSuchBucket': errors.BucketNotFoundError,
            'NoSuchKey': errors.ObjectNotFoundError,
            'AccessDenied': errors.AccessDeniedError,
            'BucketAlreadyExists': errors.BucketAlreadyExistsError,
            'BucketNotEmpty': errors.BucketNotEmptyError,
        }
        for code, expected in expectations.items():
            with self.subTest(code=code):
                result = errors.from_client_error(
                    _client_error(code, 'GetObject'),
                    'op',
                )
                self.assertIsInstance(result, expected)
                self.assertEqual(result.code, code)

    def test_head_not_found_uses_operation(self) -> None:
        """Test that bare 404s are told apart by the operation name."""
        self.assertIsInstance(
            errors.from_client_error(_client_error('404', 'HeadBucket'), 'op'),
            errors.BucketNotFoundError,
        )
        self.assertIsInstance(
            errors.from_client_error(_client_error('404', 'HeadObject'), 'op'),
            errors.ObjectNotFoundError,
        )

    def test_unknown_code(self) -> None:
        """Test that unmapped codes become a plain StorageError."""
        result = errors.from_client_error(
            _client_error('SlowDown', 'PutObject'),
            'Upload photos/a.png',
        )
        self.assertIs(type(result), errors.StorageError)
        self.assertEqual(result.code, 'SlowDown')
        self.assertIn('Upload photos/a.png failed', str(result))


class TranslateErrorsTestCase(unittest.TestCase):
    """Test cases for the translate_errors context manager."""

    def test_client_error(self) -> None:
        with self.assertRaises(errors.BucketNotFoundError) as ctx:
            with errors.translate_errors('ListObjectsV2 photos'):
                raise _client_error('NoSuchBucket', 'ListObjectsV2')
        self.assertIsInstance(
            ctx.exception.__cause__,
            botocore_exceptions.ClientError,
        )

    def test_botocore_error(self) -> None:
        with self.assertRaises(errors.StorageError) as ctx:
            with errors.translate_errors('ListBuckets'):
                raise botocore_exceptions.NoCredentialsError()
        self.assertIsNone(ctx.exception.code)

    def test_other_errors_propagate(self) -> None:
        with self.assertRaises(KeyError):
            with errors.translate_errors('ListBuckets'):
                raise KeyError('Buckets')
