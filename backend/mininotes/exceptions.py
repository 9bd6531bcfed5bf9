"""
Mini Notes Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions, one per failure class the API reports.
Why:   Services raise a typed error and the router maps it to a status code
       in one place, so handlers never build error responses themselves.
How:   Each class carries a user-facing message, an optional context dict
       (logged, never returned) and the HTTP status it maps to.

Exception Hierarchy:
    MiniNotesError (base)
    ├── ValidationError          → 400 Bad Request
    ├── AuthError                → 401 Unauthorized
    ├── NotFoundError            → 404 Not Found
    ├── ConflictError            → 409 Conflict
    ├── RateLimitExceededError   → 429 Too Many Requests
    └── InternalError            → 500 Internal Server Error
        └── StorageError         → 500 (key-value backend failed)

Response body for every class is `{"error": message}`. Internal errors are
answered with a generic message; their real message stays in the logs.
"""

from typing import Any, Dict, Optional


class MiniNotesError(Exception):
    """
    Base exception for all Mini Notes application errors.

    Attributes:
        message:     User-facing error description
        context:     Additional debug info (logged but NOT returned to client)
        status_code: HTTP status the router answers with
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(MiniNotesError):
    """
    Raised when client input is missing or malformed.

    When:  Missing username/password, weak password, missing note fields,
           request body that is not a JSON object.
    """

    status_code = 400

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


class AuthError(MiniNotesError):
    """
    Raised for bad credentials or a missing/invalid/expired bearer token.

    Login uses one message for "no such user" and "wrong password" so the
    response cannot be used to enumerate usernames.
    """

    status_code = 401

    def __init__(
        self,
        message: str = "Unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(MiniNotesError):
    """
    Raised when a requested resource does not exist for the caller.

    A note owned by another user is reported exactly like a missing note:
    the key lookup is scoped to the caller's prefix, so the service cannot
    tell the two apart and neither can the client.
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)


class ConflictError(MiniNotesError):
    """Raised when a create would violate a uniqueness rule (duplicate username)."""

    status_code = 409

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(MiniNotesError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    Response includes a Retry-After header with the seconds until the
    oldest request leaves the window.
    """

    status_code = 429

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after


class InternalError(MiniNotesError):
    """
    Raised for failures the client cannot fix.

    Security Note:
        The router never returns `message` for this class; clients always
        see "Internal server error". Details go to the server log only.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Internal server error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StorageError(InternalError):
    """
    Raised when the key-value backend fails (connection lost, constraint
    violation, corrupt record).

    Kept distinct from validation and auth failures so a database outage is
    a 500, never a misleading 401 or 404.
    """

    def __init__(
        self,
        message: str = "Storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
