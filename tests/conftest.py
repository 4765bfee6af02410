"""Shared pytest fixtures.

Services run against an in-memory stand-in for pymongo's async collection API
that covers the calls the services make and enforces unique indexes.
"""

import asyncio
import copy
from collections.abc import AsyncIterator, Iterator
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
import pytest_asyncio
from nacl.signing import SigningKey
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError
from pymongo.results import DeleteResult, InsertOneResult, UpdateResult

from watchhub.app import App
from watchhub.config import Config
from watchhub.core.core import Core
from watchhub.utils import bytes_to_b64url

TEST_SECRET = "test-crypto-secret-that-is-long-enough-for-hs256"

_OPERATORS = {
    "$eq": lambda actual, expected: actual == expected,
    "$ne": lambda actual, expected: actual != expected,
    "$gt": lambda actual, expected: actual is not None and actual > expected,
    "$gte": lambda actual, expected: actual is not None and actual >= expected,
    "$lt": lambda actual, expected: actual is not None and actual < expected,
    "$lte": lambda actual, expected: actual is not None and actual <= expected,
}


def _matches(document: dict[str, Any], query: dict[str, Any]) -> bool:
    for key, condition in query.items():
        actual = document.get(key)
        if isinstance(condition, dict) and condition and all(op.startswith("$") for op in condition):
            if not all(_OPERATORS[op](actual, expected) for op, expected in condition.items()):
                return False
        elif actual != condition:
            return False
    return True


class InMemoryCursor:
    def __init__(self, documents: list[dict[str, Any]]) -> None:
        self._documents = documents

    def sort(self, key: str, direction: int = 1) -> "InMemoryCursor":
        self._documents.sort(key=lambda doc: doc.get(key), reverse=direction < 0)
        return self

    def __aiter__(self) -> AsyncIterator[dict[str, Any]]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[dict[str, Any]]:
        for document in self._documents:
            yield document


class InMemoryCollection:
    def __init__(self, name: str) -> None:
        self.name = name
        self.documents: dict[Any, dict[str, Any]] = {}
        self._unique_fields: list[str] = []

    async def create_index(self, keys: list[tuple[str, int]], unique: bool = False, **_: Any) -> str:
        if unique:
            self._unique_fields.append(keys[0][0])
        return "_".join(f"{field}_{direction}" for field, direction in keys)

    def _check_unique(self, document: dict[str, Any]) -> None:
        if document["_id"] in self.documents:
            raise DuplicateKeyError("E11000 duplicate key error: _id", code=11000)
        for field in self._unique_fields:
            if any(existing.get(field) == document.get(field) for existing in self.documents.values()):
                raise DuplicateKeyError(f"E11000 duplicate key error: {field}", code=11000)

    def _first(self, query: dict[str, Any]) -> dict[str, Any] | None:
        return next((doc for doc in self.documents.values() if _matches(doc, query)), None)

    async def insert_one(self, document: dict[str, Any]) -> InsertOneResult:
        document = copy.deepcopy(document)
        self._check_unique(document)
        self.documents[document["_id"]] = document
        return InsertOneResult(document["_id"], acknowledged=True)

    async def find_one(self, query: dict[str, Any]) -> dict[str, Any] | None:
        # Yield like a real round trip so gathered tasks interleave between read and write
        await asyncio.sleep(0)
        document = self._first(query)
        return copy.deepcopy(document) if document is not None else None

    def find(self, query: dict[str, Any] | None = None) -> InMemoryCursor:
        query = query or {}
        return InMemoryCursor([copy.deepcopy(doc) for doc in self.documents.values() if _matches(doc, query)])

    async def update_one(self, query: dict[str, Any], update: dict[str, Any]) -> UpdateResult:
        document = self._first(query)
        if document is not None:
            document.update(copy.deepcopy(update.get("$set", {})))
        count = int(document is not None)
        return UpdateResult({"n": count, "nModified": count}, acknowledged=True)

    async def find_one_and_update(
        self,
        query: dict[str, Any],
        update: dict[str, Any],
        return_document: ReturnDocument = ReturnDocument.BEFORE,
        **_: Any,
    ) -> dict[str, Any] | None:
        document = self._first(query)
        if document is None:
            return None
        before = copy.deepcopy(document)
        document.update(copy.deepcopy(update.get("$set", {})))
        return copy.deepcopy(document) if return_document == ReturnDocument.AFTER else before

    async def delete_one(self, query: dict[str, Any]) -> DeleteResult:
        document = self._first(query)
        if document is not None:
            del self.documents[document["_id"]]
        return DeleteResult({"n": int(document is not None)}, acknowledged=True)

    async def delete_many(self, query: dict[str, Any]) -> DeleteResult:
        doomed = [key for key, doc in self.documents.items() if _matches(doc, query)]
        for key in doomed:
            del self.documents[key]
        return DeleteResult({"n": len(doomed)}, acknowledged=True)


class InMemoryDatabase:
    def __init__(self) -> None:
        self._collections: dict[str, InMemoryCollection] = {}

    def get_collection(self, name: str) -> InMemoryCollection:
        return self._collections.setdefault(name, InMemoryCollection(name))


class InMemoryMongoClient:
    def __init__(self) -> None:
        self._databases: dict[str, InMemoryDatabase] = {}
        self.closed = False

    def get_database(self, name: str) -> InMemoryDatabase:
        return self._databases.setdefault(name, InMemoryDatabase())

    async def aclose(self) -> None:
        self.closed = True


class FrozenClock:
    """Replaces the module-level now() used by the services."""

    PATCHED_MODULES = (
        "watchhub.core.modules.challenge.service",
        "watchhub.core.modules.session.service",
        "watchhub.core.modules.user.service",
    )

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, delta: timedelta) -> datetime:
        self.current += delta
        return self.current


@pytest.fixture
def config() -> Config:
    return Config(database_url="mongodb://localhost:27017/watchhub_test", crypto_secret=TEST_SECRET)


@pytest.fixture
def mongo_client() -> InMemoryMongoClient:
    return InMemoryMongoClient()


@pytest.fixture
def app(config, mongo_client) -> App:
    return App(config, mongo_client)  # type: ignore[arg-type]


@pytest_asyncio.fixture
async def core(app) -> AsyncIterator[Core]:
    """Started core with indexes in place."""
    core = app._core
    async with core.lifespan():
        yield core


@pytest.fixture
def clock(monkeypatch) -> Iterator[FrozenClock]:
    clock = FrozenClock(datetime(2025, 3, 1, 12, 0, tzinfo=UTC))
    for module in FrozenClock.PATCHED_MODULES:
        monkeypatch.setattr(f"{module}.now", clock)
    yield clock


@pytest.fixture
def signing_key() -> SigningKey:
    return SigningKey.generate()


@pytest.fixture
def public_key(signing_key) -> str:
    return bytes_to_b64url(bytes(signing_key.verify_key))


def sign_code(signing_key: SigningKey, code: str) -> str:
    """Detached signature of a challenge code, URL-safe base64 like real clients send."""
    return bytes_to_b64url(signing_key.sign(code.encode("utf-8")).signature)


@pytest.fixture
def sign(signing_key):
    return lambda code: sign_code(signing_key, code)


@pytest.fixture
def profile_data() -> dict[str, str]:
    return {"icon": "clapperboard", "colorA": "#2E65CF", "colorB": "#2E65CF"}
