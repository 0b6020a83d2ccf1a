from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, BinaryIO

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from application.ports.blob_backend import BlobStream
    from domain.value_objects.blob_record import BlobRecord


@dataclass(frozen=True)
class UploadedBlob:
    """A file received from a multipart upload."""

    stream: BinaryIO | None
    filename: str | None
    content_type: str | None
    size: int | None = None


@dataclass(frozen=True)
class BlobResource:
    """A stored record together with an open stream over its content."""

    record: BlobRecord
    stream: BlobStream


@dataclass(frozen=True)
class BlobDownload:
    """Everything an HTTP layer needs to stream a blob to a client.

    ``stream`` is None when there is no body to send. Whoever sends the
    response is responsible for closing the stream afterwards.
    """

    headers: dict[str, str]
    stream: BlobStream | None
    status_code: int = 200
    record: BlobRecord | None = field(default=None, compare=False)


class StoreBase64Request(BaseModel):
    data: str = Field(..., description="Standard base64 encoded file content")
    filename: str = Field(..., description="Filename used to derive the content type")


class StoreBlobResponse(BaseModel):
    file_id: str = Field(..., description="Identifier of the stored blob")


class BlobRecordResponse(BaseModel):
    file_id: str = Field(..., description="Identifier of the stored blob")
    filename: str | None = Field(None, description="Original filename of the blob")
    length: int = Field(..., description="Size of the blob in bytes")
    content_type: str | None = Field(None, description="MIME type recorded at upload")
    metadata: dict[str, Any] | None = Field(None, description="Metadata stored with the blob")
    upload_date: datetime.datetime | None = Field(None, description="Upload timestamp")
