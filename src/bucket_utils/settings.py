import typing

import pydantic
import pydantic_settings

MAX_PRESIGNED_EXPIRY = 604800  # 7 days, the SigV4 maximum


class Storage(pydantic_settings.BaseSettings):
    """Connection settings for the S3-compatible object store."""

    model_config = pydantic_settings.SettingsConfigDict(
        env_prefix='STORAGE_',
        case_sensitive=False,
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
    )
    endpoint_url: str | None = None
    access_key: str | None = None
    secret_key: str | None = None
    region: str = 'us-east-1'
    addressing_style: typing.Literal['auto', 'path', 'virtual'] = 'path'
    signature_version: str = 's3v4'
    presigned_url_expiry: int = MAX_PRESIGNED_EXPIRY

    @pydantic.field_validator('presigned_url_expiry')
    @classmethod
    def validate_presigned_url_expiry(cls, value: int) -> int:
        if not 1 <= value <= MAX_PRESIGNED_EXPIRY:
            raise ValueError(
                f'presigned_url_expiry must be between 1 and '
                f'{MAX_PRESIGNED_EXPIRY} seconds'
            )
        return value

    @pydantic.field_validator('endpoint_url')
    @classmethod
    def strip_endpoint_url(cls, value: str | None) -> str | None:
        """Treat an empty endpoint as unset so AWS S3 is used."""
        if value is None:
            return None
        return value.strip().rstrip('/') or None
