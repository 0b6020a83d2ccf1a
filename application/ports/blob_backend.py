from __future__ import annotations

from typing import TYPE_CHECKING, Any, BinaryIO, Protocol

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from domain.value_objects.blob_record import BlobRecord


class BlobStream(Protocol):
    """Readable stream over the content of a stored blob."""

    async def read(self, size: int = -1) -> bytes: ...
    def chunks(self) -> AsyncIterator[bytes]:
        """Iterate over the content chunk by chunk until exhausted."""
        ...

    async def close(self) -> None: ...


class BlobBackend(Protocol):
    """Port for a chunked blob storage facility (e.g. MongoDB GridFS)."""

    async def store(
        self,
        stream: BinaryIO,
        filename: str | None,
        metadata: dict[str, Any],
    ) -> str | None:
        """Write the stream and return the printable identifier of the new record.

        Returns None when the backend did not assign an identifier.
        """
        ...

    async def find_one(self, file_id: str) -> BlobRecord | None:
        """Return the record matching the identifier, or None.

        Identifiers that are not well formed never match a record.
        """
        ...

    async def open_stream(self, file_id: str) -> BlobStream: ...
    async def delete(self, file_id: str) -> None:
        """Remove the record and all of its chunks."""
        ...
