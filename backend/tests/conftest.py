"""
Family Docs Backend - Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── database:      In-memory stand-in for the MongoDB database handle
    ├── upload_dir:    Temporary upload directory
    ├── test_settings: Settings pointing at upload_dir
    ├── file_service:  FileService over upload_dir
    ├── app:           create_app() with the in-memory database injected
    └── test_client:   HTTPX AsyncClient for API endpoint testing
"""

import copy
import os
import tempfile
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

# Keep the module-level app in familydocs.main away from the real ./uploads
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="familydocs_test_")
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from pymongo import ReturnDocument

from familydocs.config import Settings
from familydocs.main import create_app
from familydocs.services.file_service import FileService


# ══════════════════════════════════════════════════════════════════════════
# In-memory database double
# ══════════════════════════════════════════════════════════════════════════
#
# Implements exactly the collection calls the services make, with equality
# filters only. Tests that need a failing driver patch a method on the
# collection with AsyncMock(side_effect=PyMongoError(...)).


def _matches(doc: Dict[str, Any], query: Dict[str, Any]) -> bool:
    return all(doc.get(key) == value for key, value in query.items())


class _Cursor:
    def __init__(self, docs: List[Dict[str, Any]]):
        self._docs = docs

    async def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]:
        return self._docs if length is None else self._docs[:length]


class InMemoryCollection:
    def __init__(self, name: str):
        self.name = name
        self.docs: List[Dict[str, Any]] = []

    def _find(self, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return next((doc for doc in self.docs if _matches(doc, query)), None)

    async def insert_one(self, document: Dict[str, Any]) -> SimpleNamespace:
        stored = copy.deepcopy(document)
        stored.setdefault("_id", ObjectId())
        self.docs.append(stored)
        return SimpleNamespace(inserted_id=stored["_id"])

    def find(self, query: Optional[Dict[str, Any]] = None) -> _Cursor:
        return _Cursor([copy.deepcopy(d) for d in self.docs if _matches(d, query or {})])

    async def find_one(self, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        doc = self._find(query)
        return copy.deepcopy(doc) if doc is not None else None

    async def find_one_and_update(
        self,
        query: Dict[str, Any],
        update: Dict[str, Any],
        upsert: bool = False,
        return_document: bool = ReturnDocument.BEFORE,
    ) -> Optional[Dict[str, Any]]:
        doc = self._find(query)
        if doc is None:
            if not upsert:
                return None
            doc = {**query, **update.get("$setOnInsert", {})}
            doc.setdefault("_id", ObjectId())
            self.docs.append(doc)
            before = None
        else:
            before = copy.deepcopy(doc)
        doc.update(update.get("$set", {}))
        return copy.deepcopy(doc) if return_document == ReturnDocument.AFTER else before

    async def find_one_and_delete(self, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        doc = self._find(query)
        if doc is not None:
            self.docs.remove(doc)
        return doc


class InMemoryDatabase:
    def __init__(self):
        self.collections: Dict[str, InMemoryCollection] = {}

    def __getitem__(self, name: str) -> InMemoryCollection:
        return self.collections.setdefault(name, InMemoryCollection(name))

    async def command(self, name: str) -> Dict[str, Any]:
        return {"ok": 1.0}


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def database():
    """A fresh, empty in-memory database per test."""
    return InMemoryDatabase()


@pytest.fixture
def upload_dir(tmp_path):
    """Upload directory under pytest's tmp_path (cleaned up automatically)."""
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def test_settings(upload_dir):
    return Settings(upload_dir=str(upload_dir), log_level="WARNING", max_file_size=1024 * 1024)


@pytest.fixture
def file_service(test_settings):
    return FileService(test_settings.upload_dir, test_settings.max_file_size)


@pytest.fixture
def sample_pdf_bytes():
    """Tiny stand-in for a scanned document: a PDF header and trailer."""
    return b"%PDF-1.4\n%%EOF\n"


@pytest.fixture
def app(test_settings, database):
    return create_app(settings=test_settings, database=database)


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient routed straight into the ASGI app.

    Usage:
        async def test_banner(test_client):
            response = await test_client.get("/")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
