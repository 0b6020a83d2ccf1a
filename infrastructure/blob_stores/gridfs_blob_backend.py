from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any, BinaryIO

import structlog
from bson import ObjectId
from gridfs.errors import NoFile
from motor.motor_asyncio import AsyncIOMotorGridFSBucket
from pymongo.errors import PyMongoError

from application.ports.blob_backend import BlobBackend
from domain.exceptions import BlobNotFoundError, InfrastructureError
from domain.value_objects.blob_record import BlobRecord

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from motor.motor_asyncio import AsyncIOMotorDatabase, AsyncIOMotorGridOut

logger = structlog.get_logger()


class GridFsBlobStream:
    """Async stream over a GridFS file, read chunk by chunk."""

    def __init__(self, grid_out: AsyncIOMotorGridOut) -> None:
        self._grid_out = grid_out
        self._closed = False

    async def read(self, size: int = -1) -> bytes:
        return await self._grid_out.read(size)

    async def chunks(self) -> AsyncIterator[bytes]:
        while True:
            chunk = await self._grid_out.readchunk()
            if not chunk:
                break
            yield chunk

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        result = self._grid_out.close()
        if inspect.isawaitable(result):
            await result


class GridFsBlobBackend(BlobBackend):
    """Adapter storing blobs in MongoDB GridFS.

    Uploads and downloads go through the GridFS bucket; record lookups read the
    bucket's ``<bucket>.files`` collection directly so that a missing file is a
    plain ``None`` rather than an exception.
    """

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        bucket_name: str = "fs",
        *,
        bucket: AsyncIOMotorGridFSBucket | None = None,
    ) -> None:
        self.db = db
        self.bucket_name = bucket_name
        self.bucket = (
            bucket if bucket is not None else AsyncIOMotorGridFSBucket(db, bucket_name=bucket_name)
        )
        self.files = db[f"{bucket_name}.files"]

    async def store(
        self,
        stream: BinaryIO,
        filename: str | None,
        metadata: dict[str, Any],
    ) -> str | None:
        try:
            object_id = await self.bucket.upload_from_stream(filename, stream, metadata=metadata)
        except PyMongoError as exc:
            msg = f"GridFS upload failed: {exc}"
            raise InfrastructureError(msg) from exc

        if object_id is None:
            return None
        logger.debug("gridfs_file_uploaded", file_id=str(object_id), bucket=self.bucket_name)
        return str(object_id)

    async def find_one(self, file_id: str) -> BlobRecord | None:
        if not ObjectId.is_valid(file_id):
            return None
        try:
            doc = await self.files.find_one({"_id": ObjectId(file_id)})
        except PyMongoError as exc:
            msg = f"GridFS lookup failed: {exc}"
            raise InfrastructureError(msg) from exc

        if not doc:
            return None
        return _to_record(doc)

    async def open_stream(self, file_id: str) -> GridFsBlobStream:
        object_id = _object_id(file_id)
        try:
            grid_out = await self.bucket.open_download_stream(object_id)
        except NoFile as exc:
            raise BlobNotFoundError(str(exc)) from exc
        except PyMongoError as exc:
            msg = f"GridFS download failed: {exc}"
            raise InfrastructureError(msg) from exc
        return GridFsBlobStream(grid_out)

    async def delete(self, file_id: str) -> None:
        object_id = _object_id(file_id)
        try:
            await self.bucket.delete(object_id)
        except NoFile as exc:
            raise BlobNotFoundError(str(exc)) from exc
        except PyMongoError as exc:
            msg = f"GridFS delete failed: {exc}"
            raise InfrastructureError(msg) from exc
        logger.debug("gridfs_file_deleted", file_id=file_id, bucket=self.bucket_name)


def _object_id(file_id: str) -> ObjectId:
    if not ObjectId.is_valid(file_id):
        msg = f"File not found with id {file_id}"
        raise BlobNotFoundError(msg)
    return ObjectId(file_id)


def _to_record(doc: dict[str, Any]) -> BlobRecord:
    return BlobRecord(
        file_id=str(doc["_id"]),
        filename=doc.get("filename"),
        length=doc.get("length", 0),
        metadata=doc.get("metadata"),
        upload_date=doc.get("uploadDate"),
        chunk_size=doc.get("chunkSize"),
    )
