"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
Status codes are assigned in exception_handlers.EXCEPTION_STATUS_MAP.
"""

from typing import Any


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """Raised when a resource cannot be found."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class ValidationError(ApplicationError):
    """Raised when validation fails."""

    def __init__(self, message: str = "Validation failed", details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class OriginNotAllowedError(ApplicationError):
    """Raised when a request arrives from an origin outside the CORS allow-list."""

    def __init__(self, origin: str) -> None:
        self.origin = origin
        super().__init__("Origin not allowed", code="CORS_ORIGIN_NOT_ALLOWED")


class UpstreamError(ApplicationError):
    """Raised when a CMS, image host or verification call fails or times out."""

    def __init__(
        self,
        message: str = "Upstream service error",
        details: dict[str, Any] | None = None,
    ) -> None:
        self.details = details or {}
        super().__init__(message, code="SYS_UPSTREAM_ERROR")


class DatabaseError(ApplicationError):
    """Raised when a document store operation fails."""

    def __init__(self, message: str = "Database error") -> None:
        super().__init__(message, code="SYS_DATABASE_ERROR")


class StorageConnectionError(ApplicationError):
    """
    Raised when the document store cannot be reached.

    Drives the reconnect loop in core.database; never rendered to clients
    directly because requests wait behind the readiness gate instead.
    """

    def __init__(self, message: str = "Document store unavailable") -> None:
        super().__init__(message, code="SYS_STORAGE_UNAVAILABLE")
