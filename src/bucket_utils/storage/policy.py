"""Bucket policy documents."""

import json
import typing

POLICY_VERSION = '2012-10-17'

BUCKET_ACTIONS = (
    's3:ListBucket',
    's3:ListBucketMultipartUploads',
    's3:GetBucketLocation',
)

OBJECT_ACTIONS = (
    's3:PutObject',
    's3:AbortMultipartUpload',
    's3:DeleteObject',
    's3:GetObject',
    's3:ListMultipartUploadParts',
)


def public_policy(bucket: str) -> dict[str, typing.Any]:
    """Build a policy granting anonymous access to a bucket.

    Anyone may list the bucket and its in-progress multipart uploads,
    and read, write and delete its objects.

    Args:
        bucket: Bucket the policy applies to

    Returns:
        The policy document as a mapping.

    """
    return {
        'Version': POLICY_VERSION,
        'Statement': [
            {
                'Effect': 'Allow',
                'Principal': {'AWS': ['*']},
                'Action': list(BUCKET_ACTIONS),
                'Resource': [f'arn:aws:s3:::{bucket}'],
            },
            {
                'Effect': 'Allow',
                'Principal': {'AWS': ['*']},
                'Action': list(OBJECT_ACTIONS),
                'Resource': [f'arn:aws:s3:::{bucket}/*'],
            },
        ],
    }


def public_policy_json(bucket: str) -> str:
    """Serialize :func:`public_policy` for PutBucketPolicy."""
    return json.dumps(public_policy(bucket), separators=(',', ':'))
