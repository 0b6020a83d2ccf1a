import io
from typing import Any, BinaryIO

import structlog
from returns.result import Failure, Result, Success

from application.dtos.blob_dtos import BlobDownload, BlobResource, UploadedBlob
from application.dtos.errors import AppError
from application.ports.blob_backend import BlobBackend
from domain.exceptions import (
    BlobDecodeError,
    BlobNotFoundError,
    InfrastructureError,
    ValidationError,
)
from domain.services.blob_metadata import build_download_headers, create_metadata, decode_base64
from domain.value_objects.blob_record import BlobRecord
from domain.value_objects.mime_type import MimeType

logger = structlog.get_logger()


class BlobStore:
    """Store, retrieve, delete and download files in the chunked blob backend.

    Every operation returns a Result; failures carry one of the categories
    'validation', 'decode_error', 'not_found' or 'io_error'. The store keeps no
    state of its own, so one instance can serve concurrent requests.
    """

    def __init__(self, blob_backend: BlobBackend) -> None:
        self.blob_backend = blob_backend

    async def store(self, upload: UploadedBlob | None) -> Result[str, AppError]:
        """Store a multipart upload under its original filename.

        Args:
            upload: The uploaded file with its stream, filename and declared type

        Returns:
            Result containing the identifier of the stored blob or an error

        """
        try:
            _validate_upload(upload)
        except ValidationError as e:
            logger.warning("blob_store_rejected", error=str(e))
            return Failure(AppError("validation", str(e)))
        except OSError as e:
            logger.exception("blob_store_failed", error=str(e))
            return Failure(AppError("io_error", f"Failed to read uploaded file: {e!s}"))

        return await self._write(upload.stream, upload.filename, upload.content_type)

    async def store_stream(
        self,
        stream: BinaryIO,
        filename: str | None,
        content_type: str | None,
    ) -> Result[str, AppError]:
        """Store a stream as-is; inputs are trusted and not validated."""
        return await self._write(stream, filename, content_type)

    async def store_base64(self, data: str | None, filename: str) -> Result[str, AppError]:
        """Decode a standard base64 payload and store it.

        The content type is derived from the filename extension.

        Args:
            data: Base64 encoded file content
            filename: Name to store the file under

        Returns:
            Result containing the identifier of the stored blob or an error

        """
        if not data:
            logger.warning("blob_store_rejected", filename=filename, error="empty base64 content")
            return Failure(AppError("validation", "Base64 content is null or empty."))

        try:
            content = decode_base64(data)
        except BlobDecodeError as e:
            logger.warning("blob_base64_decode_failed", filename=filename, error=str(e))
            return Failure(AppError("decode_error", str(e)))

        content_type = MimeType.from_filename(filename).value
        with io.BytesIO(content) as stream:
            return await self._write(stream, filename, content_type)

    async def find_record(self, file_id: str) -> Result[BlobRecord, AppError]:
        """Look up the stored record without opening its content."""
        try:
            record = await self.blob_backend.find_one(file_id)
        except InfrastructureError as e:
            logger.exception("blob_lookup_failed", file_id=file_id, error=str(e))
            return Failure(AppError("io_error", f"Failed to look up file: {e!s}"))

        if record is None:
            return _not_found(file_id)
        return Success(record)

    async def retrieve(self, file_id: str) -> Result[BlobResource, AppError]:
        """Open a readable resource over the stored content.

        The caller owns the returned stream and must close it.
        """
        found = await self.find_record(file_id)
        if isinstance(found, Failure):
            return found
        record = found.unwrap()

        try:
            stream = await self.blob_backend.open_stream(record.file_id)
        except BlobNotFoundError:
            return _not_found(file_id)
        except (OSError, InfrastructureError) as e:
            logger.exception("blob_retrieve_failed", file_id=file_id, error=str(e))
            return Failure(AppError("io_error", f"Failed to open file {file_id}: {e!s}"))
        return Success(BlobResource(record=record, stream=stream))

    async def delete(self, file_id: str) -> Result[None, AppError]:
        """Delete the record and all of its chunks."""
        found = await self.find_record(file_id)
        if isinstance(found, Failure):
            return found

        try:
            await self.blob_backend.delete(found.unwrap().file_id)
        except BlobNotFoundError:
            return _not_found(file_id)
        except InfrastructureError as e:
            logger.exception("blob_delete_failed", file_id=file_id, error=str(e))
            return Failure(AppError("io_error", f"Failed to delete file {file_id}: {e!s}"))

        logger.info("blob_deleted", file_id=file_id)
        return Success(None)

    async def download(self, file_id: str) -> Result[BlobDownload, AppError]:
        """Prepare a streaming download with headers derived from the record.

        Records stored without metadata are served with an empty body.
        """
        found = await self.find_record(file_id)
        if isinstance(found, Failure):
            return found
        record = found.unwrap()

        stream = None
        if record.metadata is not None:
            try:
                stream = await self.blob_backend.open_stream(record.file_id)
            except BlobNotFoundError:
                return _not_found(file_id)
            except (OSError, InfrastructureError) as e:
                logger.exception("blob_download_failed", file_id=file_id, error=str(e))
                return Failure(AppError("io_error", f"Failed to download file {file_id}: {e!s}"))

        return Success(
            BlobDownload(
                headers=build_download_headers(record),
                stream=stream,
                record=record,
            ),
        )

    async def _write(
        self,
        stream: BinaryIO | None,
        filename: str | None,
        content_type: str | None,
    ) -> Result[str, AppError]:
        try:
            file_id = await self.blob_backend.store(stream, filename, create_metadata(content_type))
        except (OSError, InfrastructureError) as e:
            logger.exception("blob_store_failed", filename=filename, error=str(e))
            return Failure(AppError("io_error", f"Failed to store file: {e!s}"))

        if file_id is None:
            logger.error("blob_store_failed", filename=filename, error="no identifier returned")
            return Failure(AppError("io_error", "Blob backend did not return an identifier"))

        logger.info("blob_stored", file_id=file_id, filename=filename, content_type=content_type)
        return Success(file_id)


def _validate_upload(upload: UploadedBlob | None) -> None:
    if upload is None or _is_empty(upload):
        msg = "File is null or empty."
        raise ValidationError(msg)
    if not upload.filename:
        msg = "File name is null or empty."
        raise ValidationError(msg)
    if upload.stream is None:
        msg = "Failed to get input stream from the file."
        raise OSError(msg)


def _is_empty(upload: UploadedBlob) -> bool:
    if upload.size is not None:
        return upload.size == 0
    stream = upload.stream
    if stream is None or not stream.seekable():
        return False
    position = stream.tell()
    head = stream.read(1)
    stream.seek(position)
    return not head


def _not_found(file_id: str) -> Result[Any, AppError]:
    logger.error("blob_not_found", file_id=file_id)
    return Failure(AppError("not_found", f"File not found with id {file_id}"))
