from collections.abc import AsyncIterator
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.responses import StreamingResponse
from returns.result import Result

from application.dtos.blob_dtos import (
    BlobRecordResponse,
    StoreBase64Request,
    StoreBlobResponse,
    UploadedBlob,
)
from application.dtos.errors import AppError
from application.mappers.blob_mappers import BlobMapper
from application.ports.blob_backend import BlobStream
from application.use_cases.blob_use_cases import BlobStore
from interfaces.api.middleware import handle_use_case_errors, unwrap_result
from interfaces.dependencies import get_blob_store

logger = structlog.get_logger()

router = APIRouter(prefix="/blobs", tags=["blobs"])


@router.post("", status_code=status.HTTP_201_CREATED)
@handle_use_case_errors
async def upload_blob(
    blob_store: Annotated[BlobStore, Depends(get_blob_store)],
    file: Annotated[UploadFile, File()],
) -> StoreBlobResponse:
    """Store a multipart upload under its original filename and content type.

    Returns:
        201 Created: Blob stored, body carries its identifier
        400 Bad Request: Empty file or missing filename
        503 Service Unavailable: Blob backend failure

    """
    result = await blob_store.store(
        UploadedBlob(
            stream=file.file,
            filename=file.filename,
            content_type=file.content_type,
            size=file.size,
        ),
    )
    return _to_store_response(result)


@router.post("/base64", status_code=status.HTTP_201_CREATED)
@handle_use_case_errors
async def upload_base64_blob(
    request: StoreBase64Request,
    blob_store: Annotated[BlobStore, Depends(get_blob_store)],
) -> StoreBlobResponse:
    """Store a base64 payload; the content type is derived from the filename."""
    result = await blob_store.store_base64(request.data, request.filename)
    return _to_store_response(result)


@router.get("/{file_id}", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def get_blob_record(
    file_id: str,
    blob_store: Annotated[BlobStore, Depends(get_blob_store)],
) -> BlobRecordResponse:
    """Return the stored record of a blob without its content."""
    result = await blob_store.find_record(file_id)
    return result.map(BlobMapper.to_blob_record_response)


@router.get("/{file_id}/download", response_class=StreamingResponse)
async def download_blob(
    file_id: str,
    blob_store: Annotated[BlobStore, Depends(get_blob_store)],
) -> StreamingResponse:
    """Stream the blob content as an attachment."""
    download = unwrap_result(await blob_store.download(file_id))
    try:
        response = StreamingResponse(
            _iter_stream(download.stream),
            status_code=download.status_code,
            headers=download.headers,
        )
    except Exception:
        # The body iterator never runs, so nothing else releases the stream
        if download.stream is not None:
            await download.stream.close()
        logger.exception("blob_download_failed", file_id=file_id)
        raise
    logger.info("blob_download_started", file_id=file_id)
    return response


@router.delete("/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
@handle_use_case_errors
async def delete_blob(
    file_id: str,
    blob_store: Annotated[BlobStore, Depends(get_blob_store)],
) -> None:
    """Delete a blob and all of its chunks."""
    return await blob_store.delete(file_id)


def _to_store_response(result: Result[str, AppError]) -> Result[StoreBlobResponse, AppError]:
    return result.map(lambda file_id: StoreBlobResponse(file_id=file_id))


async def _iter_stream(stream: BlobStream | None) -> AsyncIterator[bytes]:
    if stream is None:
        return
    try:
        async for chunk in stream.chunks():
            yield chunk
    finally:
        await stream.close()
