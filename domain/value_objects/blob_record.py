import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class BlobRecord(BaseModel):
    """Value object describing a blob stored in the chunked blob backend.

    Records are created by the backend on upload and never mutated afterwards.
    The file content itself is not part of the record; it is streamed separately.
    """

    model_config = ConfigDict(frozen=True)

    file_id: str = Field(..., description="Printable form of the backend identifier")
    filename: str | None = Field(None, description="Original filename, may be empty")
    length: int = Field(0, ge=0, description="Size of the stored content in bytes")
    metadata: dict[str, Any] | None = Field(
        None,
        description="Metadata stored alongside the blob (contentType and extras)",
    )
    upload_date: datetime.datetime | None = Field(
        None,
        description="Timestamp assigned by the backend on upload",
    )
    chunk_size: int | None = Field(None, description="Chunk size used by the backend")

    @property
    def content_type(self) -> str | None:
        if self.metadata is None:
            return None
        value = self.metadata.get("contentType")
        return None if value is None else str(value)
