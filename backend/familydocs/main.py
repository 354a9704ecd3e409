"""
Family Docs Backend - FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app(settings, database) returns a configured FastAPI instance.
       Both arguments are optional: settings default to the environment, and
       without a database the lifespan opens a MongoDB client itself.
Who:   uvicorn (uvicorn familydocs.main:app, or the `familydocs` script) and
       the test suite (create_app with an injected database).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────────┐ ┌──────────┐ ┌─────────────────┐  │
    │  │  Request ID  │→│ Logging  │→│ CORS            │  │
    │  └──────────────┘ └──────────┘ └─────────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌──────────┐ ┌─────────────────┐  │
    │  │ /upload      │ │ /profile │ │ / and /health   │  │
    │  │ /documents/* │ └──────────┘ └─────────────────┘  │
    │  └──────────────┘  static: /uploads/<name>          │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ NotFound→404 │ DB/File→500   │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Open the MongoDB client (unless a database was injected)
    Shutdown:
    1. Close the MongoDB client (only if the lifespan opened it)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from familydocs import __version__
from familydocs.config import Settings, settings as default_settings
from familydocs.database import close_client, create_client
from familydocs.exceptions import (
    DatabaseError,
    FamilyDocsError,
    FileStorageError,
    NotFoundError,
    ValidationError,
)
from familydocs.middleware.logging import RequestLoggingMiddleware
from familydocs.middleware.request_id import RequestIDMiddleware, request_id_var
from familydocs.routes import documents, health, profile
from familydocs.services.file_service import URL_PREFIX, FileService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str) -> None:
    """
    Configure logging for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our access middleware already logs every request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("python_multipart").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Opens and closes the MongoDB client around the application's lifetime.

    A database injected through create_app() is left alone: whoever created
    it owns its lifecycle.
    """
    config: Settings = app.state.settings
    setup_logging(config.log_level)
    logger.info("Family Docs Backend starting up...")

    client = None
    if app.state.database is None:
        client = create_client(config)
        app.state.database = client[config.mongo_db_name]
        logger.info("Using MongoDB database: %s", config.mongo_db_name)

    logger.info("Upload directory: %s", app.state.file_service.upload_dir)
    logger.info("Server ready at http://%s:%d", config.backend_host, config.backend_port)

    yield

    logger.info("Family Docs Backend shutting down...")
    if client is not None:
        await close_client(client)
        app.state.database = None
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "") or request_id_var.get("")


def _error_response(
    request: Request, status_code: int, message: str, error: str
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"message": message, "error": error, "request_id": _request_id(request)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP status codes and the error envelope.

    Handler hierarchy:
        ValidationError          → 400
        NotFoundError            → 404
        DatabaseError            → 500 (detail exposed if configured)
        FileStorageError         → 500 (detail exposed if configured)
        FamilyDocsError (base)   → 500
        Exception (fallback)     → 500 (never exposes details)

    FastAPI's own RequestValidationError keeps its default 422 response.
    """

    def _server_error_detail(exc: FamilyDocsError) -> str:
        if app.state.settings.expose_error_details:
            return exc.detail
        return exc.code

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", _request_id(request), exc.message)
        return _error_response(request, 400, exc.message, exc.code)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(request, 404, exc.message, exc.code)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s", _request_id(request), exc.message, exc.context
        )
        return _error_response(request, 500, exc.message, _server_error_detail(exc))

    @app.exception_handler(FileStorageError)
    async def handle_file_storage_error(request: Request, exc: FileStorageError):
        logger.error(
            "[%s] File storage error: %s | Context: %s", _request_id(request), exc.message, exc.context
        )
        return _error_response(request, 500, exc.message, _server_error_detail(exc))

    @app.exception_handler(FamilyDocsError)
    async def handle_app_error(request: Request, exc: FamilyDocsError):
        logger.error("[%s] Application error: %s", _request_id(request), exc.message)
        return _error_response(request, 500, exc.message, _server_error_detail(exc))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: generic 500, stack trace goes to the server log only."""
        logger.error(
            "[%s] Unexpected error: %s", _request_id(request), str(exc), exc_info=True
        )
        return _error_response(
            request,
            500,
            "An unexpected error occurred. Please try again.",
            "internal_server_error",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Any] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration; defaults to the environment-loaded settings.
        database: An already-open database handle (anything supporting
                  database["<collection>"]). When None, the lifespan opens
                  and later closes a MongoDB client.

    Returns:
        Fully configured FastAPI instance ready to receive requests.
    """
    config = settings or default_settings

    app = FastAPI(
        title="Family Docs API",
        description=(
            "Family document repository: upload files with a name and uploader, "
            "list, download, rename and delete them, and keep a household profile."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = config
    app.state.database = database
    app.state.file_service = FileService(config.upload_dir, config.max_file_size)

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added executes first: RequestID → Logging → GZip → CORS
    origins = config.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Browsers refuse credentials with a wildcard origin
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Content-Disposition"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(health.router)
    app.include_router(documents.router)
    app.include_router(profile.router)

    app.mount(
        f"/{URL_PREFIX}",
        StaticFiles(directory=str(app.state.file_service.upload_dir)),
        name=URL_PREFIX,
    )

    return app


def run() -> None:
    """Entry point for the `familydocs` console script."""
    uvicorn.run(
        "familydocs.main:app",
        host=default_settings.backend_host,
        port=default_settings.backend_port,
    )


app = create_app()
