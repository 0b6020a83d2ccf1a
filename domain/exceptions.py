"""Domain exceptions for business rule violations."""


class DomainError(Exception):
    """Base exception for domain layer."""


class ValidationError(DomainError):
    """Raised when input validation fails."""


class BlobDecodeError(DomainError):
    """Raised when a base64 payload cannot be decoded."""


class BlobNotFoundError(DomainError):
    """Raised when no stored blob matches an identifier."""


class TemplateError(DomainError):
    """Raised when a pipeline template is missing or does not compile."""


class InfrastructureError(DomainError):
    """Raised when infrastructure operations fail (DB, network, etc.)."""
