"""
Post Service: Custom Exception Hierarchy
==========================================

What:  Application-specific exceptions for the two failure kinds the API knows.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services; caught by global handlers.

Exception Hierarchy:
    PostServiceError (base)
    ├── NotFoundError   → 404 Not Found
    └── DatabaseError   → 500 Internal Server Error

Request bodies that fail to parse are not a separate kind: FastAPI's
RequestValidationError is answered exactly like DatabaseError (see main.py).
"""

from typing import Any, Dict, Optional


class PostServiceError(Exception):
    """
    Base exception for all Post Service application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class NotFoundError(PostServiceError):
    """
    Raised when an identifier-scoped query matched zero rows.

    When:    GET, PATCH or DELETE /api/posts/{post_id} for an unknown id.
    HTTP:    404 Not Found

    SQLAlchemy returns None for missing rows; the service layer converts that
    into this exception so routes stay free of status-code logic.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class DatabaseError(PostServiceError):
    """
    Raised when a database statement fails.

    When:    Connection lost mid-query, constraint violation, driver error.
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic; the context
    (statement kind, post id, original exception type) is logged only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
