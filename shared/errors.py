"""
Shared error handling for the Community Platform services.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel

from shared.logging import request_id_var


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class CommunityException(Exception):
    """Base exception for Community Platform services."""

    status_code = 400

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id_var.get(),
            code=self.code,
            message=self.message,
            details=self.details
        )


class ValidationError(CommunityException):
    """Validation-related errors."""

    status_code = 400

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class NotFoundError(CommunityException):
    """Requested record does not exist."""

    status_code = 404

    def __init__(self, message: str = "Resource not found", details: Optional[Dict[str, Any]] = None):
        super().__init__("NOT_FOUND", message, details)


class ServiceError(CommunityException):
    """Service-related errors."""

    status_code = 500

    def __init__(self, message: str = "Service error", details: Optional[Dict[str, Any]] = None):
        super().__init__("SERVICE_ERROR", message, details)


class CacheError(CommunityException):
    """Base class for cache layer failures.

    These never reach an HTTP client: the cache accessor logs them and
    degrades to a miss (reads) or a no-op (writes).
    """

    status_code = 503


class CacheStoreError(CacheError):
    """Key-value store unreachable, timed out or rejected the command."""

    def __init__(self, operation: str, message: str = "Cache store unavailable", details: Optional[Dict[str, Any]] = None):
        self.operation = operation
        super().__init__("CACHE_STORE_ERROR", f"{operation}: {message}", details)


class CacheSerializationError(CacheError):
    """Payload could not be encoded to or decoded from JSON."""

    def __init__(self, key: str, message: str = "Cache payload is not valid JSON", details: Optional[Dict[str, Any]] = None):
        self.key = key
        super().__init__("CACHE_SERIALIZATION_ERROR", message, details)
