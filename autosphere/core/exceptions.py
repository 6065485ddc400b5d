"""App-wide exception hierarchy.

This module provides a unified exception system with automatic HTTP status code
mapping and consistent error response formatting.

The four kinds every marketplace operation can surface to its caller are
authorization denials (``autosphere.access.exceptions``), ``ValidationFailed``,
``NotFoundError`` and ``StoreUnavailableError``.
"""

from typing import Any


class AppException(Exception):
    """Base exception for all application errors.

    All custom exceptions inherit from this class and define their own
    status_code and error_type for consistent API responses.
    """

    status_code: int = 500
    error_type: str = "internal_error"

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(message)

    @property
    def context(self) -> dict[str, Any]:
        """Extra machine-readable fields rendered alongside type and message."""
        return {}


# Not found errors (404)
class NotFoundError(AppException):
    """Base class for resource not found errors.

    Raised when a target record vanished between read and write; callers
    should refresh and retry.
    """

    status_code = 404
    error_type = "not_found"

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message)


# Conflict errors (409)
class ConflictError(AppException):
    """Base class for resource conflict errors."""

    status_code = 409
    error_type = "conflict"

    def __init__(self, message: str = "Resource conflict"):
        super().__init__(message)


# Validation errors (400)
class ValidationFailed(AppException):
    """Base class for domain validation errors.

    Raised before any write is attempted (missing rejection reason,
    incomplete KYC packet, illegal state transition).
    """

    status_code = 400
    error_type = "validation_failed"

    def __init__(self, message: str = "Validation failed"):
        super().__init__(message)


class BadRequestError(ValidationFailed):
    """Raised for general bad request errors."""

    error_type = "bad_request"

    def __init__(self, message: str = "Bad request"):
        super().__init__(message)


class InvalidTransitionError(ValidationFailed):
    """Raised when a state machine is asked for a move its state forbids."""

    error_type = "invalid_transition"

    def __init__(self, entity: str, current: str, target: str):
        self.entity = entity
        self.current = current
        self.target = target
        super().__init__(f"Cannot move {entity} from '{current}' to '{target}'")

    @property
    def context(self) -> dict[str, Any]:
        return {"current": self.current, "target": self.target}


class MissingReasonError(ValidationFailed):
    """Raised when a rejection is issued without a reason."""

    error_type = "missing_reason"

    def __init__(self, message: str = "A reason is required"):
        super().__init__(message)


# Rate limit errors (429)
class RateLimitError(AppException):
    """Raised when rate limit is exceeded."""

    status_code = 429
    error_type = "rate_limit_exceeded"

    def __init__(
        self,
        message: str = "Too many requests, please try again later",
        retry_after: int | None = None,
    ):
        self.retry_after = retry_after
        super().__init__(message)


# External service errors (502)
class ExternalServiceError(AppException):
    """Base class for external service failures."""

    status_code = 502
    error_type = "external_service_error"

    def __init__(self, message: str = "External service error"):
        super().__init__(message)


class ProviderError(ExternalServiceError):
    """Raised when upstream provider returns an unexpected response."""

    error_type = "provider_error"

    def __init__(
        self, message: str = "Authentication provider returned an invalid response"
    ):
        super().__init__(message)


# Store errors (503)
class StoreUnavailableError(AppException):
    """Raised when the entity or blob store cannot be reached.

    The core never retries; the caller decides whether to try again.
    """

    status_code = 503
    error_type = "store_unavailable"

    def __init__(self, message: str = "Storage is temporarily unavailable"):
        super().__init__(message)

