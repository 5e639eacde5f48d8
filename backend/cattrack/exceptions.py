"""
CatTrack Backend — Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions, one per failure kind the API reports.
How:   Each exception class carries a message, an optional context dict and
       the HTTP status it maps to. Global exception handlers (registered in
       main.py) catch these and return structured JSON error responses.
Who:   Raised by services, dependencies and middleware; caught by global handlers.

Exception Hierarchy:
    CatTrackError (base)
    ├── ValidationError          → 400 Bad Request
    ├── AuthenticationError      → 401 Unauthorized
    ├── ForbiddenError           → 403 Forbidden (carries the denial reason)
    ├── NotFoundError            → 404 Not Found
    ├── RateLimitExceededError   → 429 Too Many Requests
    └── OperationFailedError     → 500 Internal Server Error

Information loss:
    OperationFailedError always carries a fixed, operation-specific message
    ("Cat update failed", "User creation failed", ...). The underlying store
    error is kept in `context` for the server log and never reaches the client.
"""

from typing import Any, Dict, Optional


class CatTrackError(Exception):
    """
    Base exception for all CatTrack application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, only whitelisted keys returned)
        status_code: HTTP status the global handler responds with
        error_code:  Machine-readable code placed in the response body
    """

    status_code: int = 500
    error_code: str = "internal_server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    def public_details(self) -> Optional[Dict[str, Any]]:
        """Context that may be returned to the client. None by default."""
        return None


class ValidationError(CatTrackError):
    """
    Raised when client input fails validation.

    The request validation handler in main.py builds one of these from
    FastAPI's per-field errors, joined into a single message
    ("Field required: weight, Input should be greater than 0: weight").
    """

    status_code = 400
    error_code = "validation_error"

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field

    def public_details(self) -> Optional[Dict[str, Any]]:
        return self.context or None


class AuthenticationError(CatTrackError):
    """Raised when the bearer token is missing or invalid, or a login fails."""

    status_code = 401
    error_code = "unauthorized"

    def __init__(
        self,
        message: str = "Token is invalid",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(CatTrackError):
    """
    Raised when the authorization evaluator denies an action.

    What:    The actor is authenticated but may not act on this resource.
    HTTP:    403 Forbidden

    `message` is the operation-specific text ("Only owner can delete cat");
    `reason` is the rule's short reason ("owner required", "admin required").
    """

    status_code = 403
    error_code = "forbidden"

    def __init__(
        self,
        message: str = "Forbidden",
        reason: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if reason:
            ctx["reason"] = reason
        super().__init__(message=message, context=ctx)
        self.reason = reason

    def public_details(self) -> Optional[Dict[str, Any]]:
        if self.reason:
            return {"reason": self.reason}
        return None


class NotFoundError(CatTrackError):
    """
    Raised when a requested resource does not exist.

    The store returns None for missing documents (not an exception); services
    convert that None into this exception.
    """

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        message: str = "The requested resource was not found",
        resource: Optional[str] = None,
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if resource:
            ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class RateLimitExceededError(CatTrackError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    Response includes:
        - retry_after: Seconds until the rate limit window resets
        - Retry-After header for HTTP-compliant clients
    """

    status_code = 429
    error_code = "rate_limit_exceeded"

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Too many requests. Please wait {retry_after} seconds before retrying."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after

    def public_details(self) -> Optional[Dict[str, Any]]:
        return {"retry_after": self.retry_after}


class OperationFailedError(CatTrackError):
    """
    Raised when a store call (or anything unexpected) fails during an
    otherwise permitted operation.

    HTTP:    500 Internal Server Error

    The message is always the fixed text for the operation kind. The original
    exception type and text go into `context` and are only logged.
    """

    status_code = 500
    error_code = "operation_failed"

    def __init__(
        self,
        message: str = "Operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
