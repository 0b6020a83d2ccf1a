"""Domain rules for blob metadata and download headers."""

from __future__ import annotations

import base64
import binascii
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from domain.exceptions import BlobDecodeError
from domain.value_objects.mime_type import MimeType

if TYPE_CHECKING:
    from domain.value_objects.blob_record import BlobRecord

CACHE_CONTROL = "no-cache, no-store, must-revalidate"
UNKNOWN_FILENAME = "unknown"


def create_metadata(content_type: str | None) -> dict[str, Any]:
    """Build the metadata document stored alongside a blob."""
    return {"contentType": content_type}


def decode_base64(data: str) -> bytes:
    """Decode standard base64, rejecting characters outside the alphabet.

    Trailing ``=`` padding is optional.
    """
    padded = data + "=" * (-len(data) % 4)
    try:
        return base64.b64decode(padded, validate=True)
    except (binascii.Error, ValueError) as exc:
        msg = f"Invalid base64 content: {exc}"
        raise BlobDecodeError(msg) from exc


def content_disposition(filename: str) -> str:
    """Build an attachment disposition that HTTP headers can carry.

    Header values are latin-1, so other names get an ASCII ``filename`` fallback
    plus the percent-encoded UTF-8 ``filename*`` parameter.
    """
    try:
        filename.encode("latin-1")
    except UnicodeEncodeError:
        fallback = filename.encode("ascii", "replace").decode("ascii").replace('"', "?")
        encoded = quote(filename, safe="")
        return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{encoded}"
    return f"attachment; filename={filename}"


def build_download_headers(record: BlobRecord | None) -> dict[str, str]:
    """Build the HTTP headers for downloading a stored blob.

    The rules are deterministic per record:

    - Content-Disposition names the stored filename, or ``unknown``; names
      outside latin-1 are sent in the RFC 6266 ``filename*`` form.
    - Content-Type is the stored ``contentType``, ``application/octet-stream``
      when metadata lacks it, and ``text/plain`` when metadata is absent.
    - Content-Length is the stored length, or ``0`` when the record or its
      metadata is absent.

    Args:
        record: The stored record, or None when nothing was found

    Returns:
        Header mapping in insertion order

    """
    if record is None:
        return {
            "Content-Disposition": f"attachment; filename={UNKNOWN_FILENAME}",
            "Content-Type": MimeType.OCTET_STREAM.value,
            "Content-Length": "0",
            "Cache-Control": CACHE_CONTROL,
        }

    headers = {"Content-Disposition": content_disposition(record.filename or UNKNOWN_FILENAME)}

    if record.metadata is None:
        headers["Content-Type"] = MimeType.TXT.value
        headers["Content-Length"] = "0"
        headers["Cache-Control"] = CACHE_CONTROL
        return headers

    headers["Content-Type"] = record.content_type or MimeType.OCTET_STREAM.value
    headers["Content-Length"] = str(record.length)
    headers["Cache-Control"] = CACHE_CONTROL
    return headers
