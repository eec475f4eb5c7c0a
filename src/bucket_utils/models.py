import datetime
import typing

import pydantic


class Bucket(pydantic.BaseModel):
    """A bucket as reported by ListBuckets."""

    model_config = pydantic.ConfigDict(extra='ignore')

    name: str
    creation_date: datetime.datetime | None = None


class DeleteError(pydantic.BaseModel):
    """A key that a batch delete could not remove."""

    model_config = pydantic.ConfigDict(extra='ignore')

    object_name: str
    code: str | None = None
    message: str | None = None


@typing.runtime_checkable
class UploadSource(typing.Protocol):
    """A file received from a multipart form.

    ``fastapi.UploadFile`` and ``starlette.datastructures.UploadFile``
    both satisfy this protocol.

    """

    filename: str | None
    size: int | None
    file: typing.BinaryIO

    @property
    def content_type(self) -> str | None: ...
