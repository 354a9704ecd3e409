"""
Family Docs Backend - Database Client Management
=================================================

What:  MongoDB client lifecycle, collection names, and the FastAPI dependency
       that hands the database to route handlers.
How:   The lifespan handler in main.py opens one AsyncMongoClient per process
       and stores the database handle on app.state. Handlers receive it through
       get_database(); nothing in this module holds a global connection.
Who:   main.py (open/close), services (collections), routes (Depends).

Architecture Decision:
    We use pymongo's native asyncio API (AsyncMongoClient) so a slow query
    suspends only its own request. The client pools connections internally
    and connects lazily on first use, so creating it never blocks startup.

Collections:
    documents: one record per uploaded file
    profiles:  the household profile (single record, fixed _id)
"""

import logging
from typing import Any

from fastapi import Request
from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from familydocs.config import Settings

logger = logging.getLogger(__name__)

DOCUMENTS_COLLECTION = "documents"
PROFILES_COLLECTION = "profiles"


def create_client(settings: Settings) -> AsyncMongoClient:
    """
    Build the MongoDB client from settings.

    tz_aware=True makes stored datetimes come back as UTC-aware values,
    matching what the services write.
    """
    logger.info("Creating MongoDB client for %s", settings.mongo_url)
    return AsyncMongoClient(
        settings.mongo_url,
        tz_aware=True,
        serverSelectionTimeoutMS=settings.mongo_server_selection_timeout_ms,
    )


async def close_client(client: AsyncMongoClient) -> None:
    """Closes all pooled connections. Called during application shutdown."""
    await client.close()
    logger.info("MongoDB client closed")


async def ping(database: Any) -> bool:
    """Lightweight reachability probe used by the health check."""
    try:
        await database.command("ping")
        return True
    except PyMongoError as e:
        logger.warning("Database ping failed: %s", str(e))
        return False


def get_database(request: Request) -> AsyncDatabase:
    """
    FastAPI dependency returning the database bound to this application.

    Example usage in a route:
        @router.get("/documents")
        async def list_documents(db: AsyncDatabase = Depends(get_database)):
            ...
    """
    return request.app.state.database
