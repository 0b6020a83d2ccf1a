from enum import Enum


class MimeType(str, Enum):
    """Represent MIME types recognised for stored blobs."""

    XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    XLS = "application/vnd.ms-excel"
    CSV = "text/csv"
    PDF = "application/pdf"

    DOC = "application/msword"
    DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

    TXT = "text/plain"
    PNG = "image/png"
    JPEG = "image/jpeg"

    OCTET_STREAM = "application/octet-stream"

    @classmethod
    def from_filename(cls, filename: str | None) -> "MimeType":
        """Resolve the MIME type from the extension after the last dot.

        Lookup is case-insensitive; unknown or missing extensions fall back to
        ``application/octet-stream``.
        """
        if not filename or "." not in filename:
            return cls.OCTET_STREAM
        extension = filename.rsplit(".", 1)[1].lower()
        return _EXTENSIONS.get(extension, cls.OCTET_STREAM)


_EXTENSIONS: dict[str, MimeType] = {
    "xlsx": MimeType.XLSX,
    "xls": MimeType.XLS,
    "csv": MimeType.CSV,
    "pdf": MimeType.PDF,
    "doc": MimeType.DOC,
    "docx": MimeType.DOCX,
    "txt": MimeType.TXT,
    "png": MimeType.PNG,
    "jpg": MimeType.JPEG,
    "jpeg": MimeType.JPEG,
}
