"""
Family Docs Backend - Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the failure modes of the API.
How:   Each exception carries a human-readable message and an optional context
       dict. Global exception handlers (registered in main.py) catch these and
       return JSON error envelopes with the matching HTTP status code.
Who:   Raised by services; caught by the handlers in main.py.

Exception Hierarchy:
    FamilyDocsError (base)
    ├── ValidationError      → 400 Bad Request
    ├── NotFoundError        → 404 Not Found
    ├── FileStorageError     → 500 Internal Server Error
    └── DatabaseError        → 500 Internal Server Error

Error envelope (see main.register_exception_handlers):
    {"message": "...", "error": "...", "request_id": "..."}
"""

from typing import Any, Dict, Optional


class FamilyDocsError(Exception):
    """
    Base exception for all Family Docs application errors.

    Attributes:
        message:  User-facing error description (returned in the envelope)
        context:  Additional debug info (logged; "detail" may be returned
                  when error details are exposed)
    """

    code = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    @property
    def detail(self) -> str:
        """Underlying failure text, or the machine code when none was recorded."""
        return str(self.context.get("detail") or self.code)


class ValidationError(FamilyDocsError):
    """
    Raised when client input breaks a rule FastAPI's schema validation can't see.

    When:    Upload larger than the configured maximum.
    HTTP:    400 Bad Request

    Malformed or missing form/JSON fields never reach this exception; FastAPI
    rejects those with its own 422 response.
    """

    code = "validation_error"

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


class NotFoundError(FamilyDocsError):
    """
    Raised when a requested record does not exist.

    When:    GET/PUT/DELETE /documents/{id} with an id that matches nothing,
             including ids that are not valid ObjectIds.
    HTTP:    404 Not Found

    pymongo returns None for missing records; services convert that None into
    this exception so routes never deal with it.
    """

    code = "not_found"

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


class FileStorageError(FamilyDocsError):
    """
    Raised when file system operations fail.

    What:    Could not read, write, or delete bytes in the upload directory.
    When:    Disk full, permission denied, stored file missing on read.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(FamilyDocsError):
    """
    Raised when a MongoDB operation fails.

    What:    An insert, find, update or delete was rejected or timed out.
    HTTP:    500 Internal Server Error

    The message names the operation ("Error uploading document"); the driver's
    error text travels in context["detail"].
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
