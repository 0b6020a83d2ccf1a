from .blob_record import BlobRecord
from .mime_type import MimeType

__all__ = [
    "BlobRecord",
    "MimeType",
]
