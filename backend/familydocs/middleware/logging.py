"""
Family Docs Backend - Request Logging Middleware
=================================================

What:  One access log line per HTTP request.
How:   Measures wall time around the downstream handler and logs method,
       path, status, duration, request size, request ID and client IP. The
       level follows the status class (5xx ERROR, 4xx WARNING, otherwise INFO).

Example line:
    2024-06-10T14:03:11 [INFO] familydocs.access: POST /upload 200 41.7ms 18230B in [1f0c9a2b] from 192.168.1.20

Request bodies (uploaded files, family names) are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from familydocs.middleware.request_id import request_id_var

logger = logging.getLogger("familydocs.access")

# Probed every few seconds by Docker; not worth a log line each time
QUIET_PATHS = frozenset({"/health"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs one line per request once the response status is known."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        entry = {
            "request_id": request_id_var.get(""),
            "method": request.method,
            "path": path,
            "status": response.status_code,
            "duration_ms": round(elapsed_ms, 2),
            "client_ip": request.client.host if request.client else "unknown",
            # Multipart uploads announce their size; GETs have no body
            "bytes_in": _content_length(request),
        }
        logger.log(
            level_for_status(entry["status"]),
            "%(method)s %(path)s %(status)d %(duration_ms).1fms %(bytes_in)dB in [%(request_id)s] from %(client_ip)s",
            entry,
            extra=entry,
        )
        return response


def level_for_status(status: int) -> int:
    """5xx ERROR, 4xx WARNING, everything else INFO."""
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def _content_length(request: Request) -> int:
    value = request.headers.get("content-length", "")
    return int(value) if value.isdigit() else 0
