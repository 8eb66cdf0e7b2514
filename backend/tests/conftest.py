"""
Daymare Backend: Test Configuration (conftest.py)
==================================================

What:  Shared pytest fixtures for the whole suite.
How:   API tests run the real FastAPI app over httpx's ASGITransport, with the
       ArticleStore backed by an in-memory collection double instead of
       MongoDB. Unit tests of the store use plain Mock/AsyncMock collections.

Fixture Hierarchy (all function-scoped):
    ├── fake_collection:       in-memory stand-in for a Motor collection
    ├── article_store:         ArticleStore over fake_collection
    ├── mock_mongo_collection: Mock collection with AsyncMock operations
    ├── static_dir:            temporary static root with a few assets
    ├── sample_article:        a ready-made Article
    └── test_client:           httpx AsyncClient bound to create_app(...)
"""

import os
import tempfile
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, Mock

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from pymongo.errors import DuplicateKeyError

# Before any daymare import: keep tests away from a real deployment.
os.environ["MONGO_URL"] = "mongodb://localhost:1"
os.environ["MONGO_DATABASE"] = "daymare_test"
os.environ["STATIC_ROOT"] = tempfile.mkdtemp(prefix="daymare_static_")
os.environ["LOG_LEVEL"] = "WARNING"

from daymare.schemas.article import Article  # noqa: E402
from daymare.services.article_store import ArticleStore  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# In-memory collection double
# ══════════════════════════════════════════════════════════════════════════

class FakeCursor:
    """The subset of AsyncIOMotorCursor that ArticleStore uses."""

    def __init__(self, documents: List[Dict[str, Any]]):
        self._documents = list(documents)

    def sort(self, key: str, direction: int = 1) -> "FakeCursor":
        if key == "$natural":
            if direction < 0:
                self._documents.reverse()
        else:
            self._documents.sort(key=lambda doc: doc[key], reverse=direction < 0)
        return self

    async def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]:
        documents = self._documents if length is None else self._documents[:length]
        return [dict(doc) for doc in documents]


class FakeCollection:
    """
    Keeps documents in insertion order, which doubles as natural order.

    ``calls`` records every operation name so tests can assert that a request
    never reached the store.
    """

    def __init__(self):
        self.documents: List[Dict[str, Any]] = []
        self.calls: List[str] = []
        self.database = SimpleNamespace(command=AsyncMock(return_value={"ok": 1.0}))

    def _index_of(self, oid: ObjectId) -> Optional[int]:
        for i, doc in enumerate(self.documents):
            if doc["_id"] == oid:
                return i
        return None

    async def insert_one(self, document: Dict[str, Any]):
        self.calls.append("insert_one")
        if self._index_of(document["_id"]) is not None:
            raise DuplicateKeyError(f"duplicate key: {document['_id']}")
        self.documents.append(dict(document))
        return SimpleNamespace(inserted_id=document["_id"], acknowledged=True)

    def find(self, filter: Optional[Dict[str, Any]] = None) -> FakeCursor:
        self.calls.append("find")
        return FakeCursor(self.documents)

    async def find_one(self, filter: Dict[str, Any]):
        self.calls.append("find_one")
        i = self._index_of(filter["_id"])
        return None if i is None else dict(self.documents[i])

    async def replace_one(self, filter: Dict[str, Any], replacement: Dict[str, Any]):
        self.calls.append("replace_one")
        i = self._index_of(filter["_id"])
        if i is None:
            return SimpleNamespace(matched_count=0, modified_count=0)
        self.documents[i] = {"_id": filter["_id"], **replacement}
        return SimpleNamespace(matched_count=1, modified_count=1)

    async def delete_one(self, filter: Dict[str, Any]):
        self.calls.append("delete_one")
        i = self._index_of(filter["_id"])
        if i is None:
            return SimpleNamespace(deleted_count=0)
        del self.documents[i]
        return SimpleNamespace(deleted_count=1)


# ══════════════════════════════════════════════════════════════════════════
# Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def fake_collection():
    return FakeCollection()


@pytest.fixture
def article_store(fake_collection):
    return ArticleStore(fake_collection)


@pytest.fixture
def mock_mongo_collection():
    """
    A Mock collection whose awaitable operations are AsyncMocks.

    ``find`` is synchronous in Motor (it returns a cursor), so it stays a
    plain Mock returning a cursor mock.
    """
    cursor = Mock()
    cursor.sort = Mock(return_value=cursor)
    cursor.to_list = AsyncMock(return_value=[])

    collection = Mock()
    collection.find = Mock(return_value=cursor)
    collection.find_one = AsyncMock(return_value=None)
    collection.insert_one = AsyncMock()
    collection.replace_one = AsyncMock()
    collection.delete_one = AsyncMock()
    collection.database.command = AsyncMock(return_value={"ok": 1.0})
    return collection


@pytest.fixture
def static_dir(tmp_path):
    """A static root with an index page, a stylesheet and a nested index."""
    root = tmp_path / "static"
    (root / "css").mkdir(parents=True)
    (root / "docs").mkdir()
    (root / "index.html").write_text("<h1>Daymare</h1>")
    (root / "css" / "site.css").write_text("body { color: #666 }")
    (root / "docs" / "index.html").write_text("<p>docs</p>")
    (tmp_path / "secret.txt").write_text("outside the static root")
    return root


@pytest.fixture
def sample_article():
    return Article(
        id=str(ObjectId()),
        title="Night",
        body="How can a daylight know the darkness of night",
        ctime=datetime(2024, 1, 15, 12, 0, 0, 123000, tzinfo=timezone.utc),
    )


@pytest_asyncio.fixture
async def test_client(article_store, static_dir):
    """
    HTTPX AsyncClient talking to a fresh app wired to ``article_store``.

    ASGITransport does not run the lifespan, so nothing tries to reach
    MongoDB.
    """
    from daymare.main import create_app

    app = create_app(store=article_store, static_root=str(static_dir))
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
