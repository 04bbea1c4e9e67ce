"""Pytest configuration for the Request Analytics test suite."""

from __future__ import annotations

import asyncio

import pytest
from fastapi.testclient import TestClient

from request_analytics.app.core.config import Settings
from request_analytics.app.main import create_app
from request_analytics.app.schemas.record import Record
from request_analytics.app.services.stores import BlobRecordStore, TableRecordStore
from request_analytics.app.services.stores.buckets import FileBucket

AUTH_KEY = "test-secret"
BLOB_KEY = "analytics/requests.json"


def make_record(**overrides) -> Record:
    """Build a record with sensible defaults."""
    values = {
        "timestamp": 1700000000,
        "domain": "example.com",
        "method": "GET",
        "path": "/",
        "country": "DE",
    }
    values.update(overrides)
    return Record(**values)


def seed(store, *records: Record) -> None:
    for record in records:
        asyncio.run(store.append(record))


@pytest.fixture(params=["table", "blob"])
def store(request, tmp_path):
    """A ready-to-use record store, once per backend."""
    if request.param == "table":
        record_store = TableRecordStore(str(tmp_path / "analytics.db"))
    else:
        record_store = BlobRecordStore(FileBucket(str(tmp_path / "bucket")), BLOB_KEY)
    asyncio.run(record_store.setup())
    return record_store


@pytest.fixture
def settings() -> Settings:
    return Settings(auth_key=AUTH_KEY)


@pytest.fixture
def client(settings, store):
    app = create_app(settings, store=store)
    with TestClient(app) as test_client:
        yield test_client
