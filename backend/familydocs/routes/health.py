"""
Family Docs Backend - Banner and Health Check Routes
=====================================================

What:  GET / (plain-text banner) and GET /health (dependency status).
Who:   The banner is what the frontend and humans hit to see the server is up;
       /health is for Docker health checks and monitoring.

Status levels:
    - healthy:   MongoDB answers a ping (HTTP 200)
    - unhealthy: MongoDB unreachable (HTTP 503)
"""

import logging
import time
from typing import Any

from fastapi import APIRouter, Depends, Response
from fastapi.responses import PlainTextResponse

from familydocs import __version__
from familydocs.database import get_database, ping
from familydocs.schemas.document import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

BANNER = "Family Document Management Backend is running"

_start_time = time.time()


@router.get("/", response_class=PlainTextResponse, summary="Service banner")
async def banner() -> str:
    return BANNER


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(
    response: Response,
    database: Any = Depends(get_database),
) -> HealthResponse:
    """
    Probes MongoDB with a ping command and reports the aggregate status.

    The ping is the cheapest round trip the server supports, so this is safe
    to call every few seconds.
    """
    connected = await ping(database)
    if not connected:
        response.status_code = 503

    return HealthResponse(
        status="healthy" if connected else "unhealthy",
        version=__version__,
        database="connected" if connected else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
