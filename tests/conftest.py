"""Pytest configuration and fixtures."""

import asyncio
import copy
from types import SimpleNamespace
from typing import AsyncGenerator

import pytest
from pymongo import errors as mongo_errors

from shortener.database.filestore import FileMappingStore
from shortener.database.mongodb import MongoMappingStore
from shortener.service import URLShortenerService
from shortener.shortcode import ShortCodeGenerator
from shortener.common.logging_config import setup_logging


async def _iterate(docs):
    for doc in docs:
        yield doc


class FakeCollection:
    """In-memory stand-in for a pymongo AsyncCollection.

    Enforces the unique index on ``short_url``. With ``read_delay`` set,
    ``find_one`` yields to the event loop after reading, so concurrent
    read-then-write callers interleave the way they can against a server.
    """

    def __init__(self, client):
        self.client = client
        self.docs = []
        self.indexes = []

    def _check(self):
        if self.client.fail_with is not None:
            raise self.client.fail_with

    @staticmethod
    def _matches(doc, query):
        return all(doc.get(k) == v for k, v in query.items())

    async def create_index(self, key, unique=False):
        self._check()
        self.indexes.append((key, unique))
        return f"{key}_1"

    async def insert_one(self, doc):
        self._check()
        if any(d["short_url"] == doc["short_url"] for d in self.docs):
            raise mongo_errors.DuplicateKeyError("E11000 duplicate key error: short_url")
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=len(self.docs))

    async def find_one(self, query, projection=None):
        self._check()
        doc = next((copy.deepcopy(d) for d in self.docs if self._matches(d, query)), None)
        if self.client.read_delay:
            await asyncio.sleep(0)
        return doc

    def find(self, query, projection=None):
        self._check()
        return _iterate([copy.deepcopy(d) for d in self.docs if self._matches(d, query)])

    async def update_one(self, query, update):
        self._check()
        for doc in self.docs:
            if self._matches(doc, query):
                doc.update(update["$set"])
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)


class FakeAdmin:
    def __init__(self, client):
        self.client = client

    async def command(self, name):
        if self.client.fail_with is not None:
            raise self.client.fail_with
        return {"ok": 1.0}


class FakeMongoClient:
    """In-memory stand-in for pymongo's AsyncMongoClient."""

    def __init__(self):
        self.fail_with = None
        self.read_delay = False
        self.closed = False
        self.admin = FakeAdmin(self)
        self._databases = {}

    def __getitem__(self, name):
        return self._databases.setdefault(name, _FakeDatabase(self))

    async def close(self):
        self.closed = True


class _FakeDatabase:
    def __init__(self, client):
        self.client = client
        self._collections = {}

    def __getitem__(self, name):
        return self._collections.setdefault(name, FakeCollection(self.client))


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator()


@pytest.fixture
def data_file(tmp_path):
    """Snapshot path inside a not-yet-existing directory."""
    return str(tmp_path / "data" / "urls.json")


@pytest.fixture
async def file_store(data_file, logger) -> AsyncGenerator[FileMappingStore, None]:
    """Create a connected file store."""
    store = FileMappingStore(db_config=data_file, logger=logger)
    await store.connect()

    yield store

    await store.close()


@pytest.fixture
def fake_mongo_client():
    """In-memory MongoDB client."""
    return FakeMongoClient()


@pytest.fixture
async def mongo_store(fake_mongo_client, logger) -> AsyncGenerator[MongoMappingStore, None]:
    """Create a MongoDB store connected to the in-memory client."""
    store = MongoMappingStore(
        db_config="mongodb://localhost:27017",
        client=fake_mongo_client,
        logger=logger,
    )
    await store.connect()

    yield store

    await store.close()


@pytest.fixture(params=["file", "mongodb"])
async def store(request, data_file, fake_mongo_client, logger):
    """Each backend in turn, connected."""
    if request.param == "file":
        backend = FileMappingStore(db_config=data_file, logger=logger)
    else:
        backend = MongoMappingStore(
            db_config="mongodb://localhost:27017",
            client=fake_mongo_client,
            logger=logger,
        )
    await backend.connect()

    yield backend

    await backend.close()


@pytest.fixture
def service(file_store, short_code_generator, logger) -> URLShortenerService:
    """Create service instance over the file store."""
    return URLShortenerService(
        store=file_store,
        short_code_generator=short_code_generator,
        logger=logger,
    )


@pytest.fixture
def mongo_service(mongo_store, short_code_generator, logger) -> URLShortenerService:
    """Create service instance over the in-memory MongoDB store."""
    return URLShortenerService(
        store=mongo_store,
        short_code_generator=short_code_generator,
        logger=logger,
    )


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "http://example.com/page",
    ]
