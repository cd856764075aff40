"""
Cursebreakers Backend - Custom Exception Hierarchy
===================================================

What:  Defines application-specific exceptions for different error scenarios.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services and dependencies; caught by global handlers.

Exception Hierarchy:
    CursebreakersError (base)
    ├── ValidationError          → 400 Bad Request (bad format, mismatch, duplicate)
    ├── UnauthorizedError        → 401 Unauthorized (missing/invalid/expired token)
    ├── NotFoundError            → 404 Not Found (missing user/blog/post)
    └── DatabaseError            → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class CursebreakersError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(CursebreakersError):
    """
    Raised when client input fails a business rule.

    When:    Password mismatch or too short, malformed username, email or
             username already registered, blog title already taken.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Passwords do not match",
            "details": {"field": "confirmPassword"}
        }
    """

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


class UnauthorizedError(CursebreakersError):
    """
    Raised when a request cannot be tied to a signed-in user.

    When:    No bearer token, bad signature, expired token, the token's user
             no longer exists, wrong password at login, or the caller tries
             to edit a profile that is not theirs.
    HTTP:    401 Unauthorized (with WWW-Authenticate: Bearer)
    """

    def __init__(
        self,
        message: str = "Unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(CursebreakersError):
    """
    Raised when a requested resource does not exist.

    When:    Unknown username, blog, post id, or a search with no hits.
    HTTP:    404 Not Found

    The service layer converts SQLAlchemy's `None` results into this
    exception so routes never deal with missing rows themselves.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"The requested {resource} was not found"
            if resource_id:
                message = f"{resource} '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(CursebreakersError):
    """
    Raised when database operations fail unexpectedly.

    When:    Connection lost mid-query, deadlock, driver errors.
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. Details
    (statement, constraint name, original error type) are logged server-side.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
