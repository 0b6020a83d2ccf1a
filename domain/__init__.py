"""Domain layer exports."""

from domain.exceptions import (
    BlobDecodeError,
    BlobNotFoundError,
    DomainError,
    InfrastructureError,
    TemplateError,
    ValidationError,
)
from domain.value_objects import BlobRecord, MimeType

__all__ = [
    "BlobDecodeError",
    "BlobNotFoundError",
    "BlobRecord",
    "DomainError",
    "InfrastructureError",
    "MimeType",
    "TemplateError",
    "ValidationError",
]
