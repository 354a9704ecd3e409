"""
Family Docs Backend - Request ID Middleware
============================================

What:  Gives each request a short correlation ID and returns it in the
       X-Request-ID response header.
How:   A client-provided X-Request-ID is reused when it looks like an ID
       (letters, digits, ".", "_", "-", at most 64 chars); anything else is
       replaced by a fresh one so headers can't inject text into log lines.
       The ID is kept in a ContextVar for loggers and exception handlers.
"""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on the same loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"

_CLIENT_ID_PATTERN = re.compile(r"[A-Za-z0-9._-]{1,64}")


def new_request_id() -> str:
    """First 8 hex chars of a UUID4."""
    return uuid.uuid4().hex[:8]


def accept_request_id(candidate: str) -> str:
    """The client's ID if it is well formed, otherwise a generated one."""
    if candidate and _CLIENT_ID_PATTERN.fullmatch(candidate):
        return candidate
    return new_request_id()


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Stamps request.state.request_id and the X-Request-ID response header."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = accept_request_id(request.headers.get(REQUEST_ID_HEADER, ""))
        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
