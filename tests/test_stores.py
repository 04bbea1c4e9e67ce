"""Tests for the record store backends.

Contract tests run against both the SQLite table store and the
file-bucket blob store through the parametrised ``store`` fixture.
"""

from __future__ import annotations

import asyncio
import io
import json
import threading

import pytest

from request_analytics.app.core.config import Settings
from request_analytics.app.core.errors import StoreWriteFailure
from request_analytics.app.services.query import RecordQuery
from request_analytics.app.services.stores import (
    BlobRecordStore,
    TableRecordStore,
    build_store,
)
from request_analytics.app.services.stores.buckets import BucketError, FileBucket, S3Bucket

from .conftest import BLOB_KEY, make_record, seed


def test_append_then_query_round_trip(store) -> None:
    record = make_record(timestamp=1234, domain="blog.example.com", method="POST", path="/comments", country="JP")
    seed(store, record)

    result = asyncio.run(store.query(RecordQuery(start=1000, end=2000)))

    assert result == [record]


def test_count_tracks_appends(store) -> None:
    assert asyncio.run(store.count()) == 0

    seed(store, make_record(timestamp=1), make_record(timestamp=2), make_record(timestamp=3))

    assert asyncio.run(store.count()) == 3


def test_query_orders_newest_first_and_applies_offset(store) -> None:
    seed(
        store,
        make_record(timestamp=20, path="/b"),
        make_record(timestamp=30, path="/c"),
        make_record(timestamp=10, path="/a"),
        make_record(timestamp=20, path="/b2"),
    )

    everything = asyncio.run(store.query(RecordQuery()))
    page = asyncio.run(store.query(RecordQuery(count=2, offset=1)))

    assert [record.path for record in everything] == ["/c", "/b2", "/b", "/a"]
    assert [record.path for record in page] == ["/b2", "/b"]


def test_query_filters_are_conjunctive(store) -> None:
    seed(
        store,
        make_record(timestamp=1, domain="a"),
        make_record(timestamp=2, domain="b"),
        make_record(timestamp=3, domain="a", country="US"),
        make_record(timestamp=50, domain="a"),
    )

    result = asyncio.run(store.query(RecordQuery(start=0, end=10, domain="a", country="DE")))

    assert [record.timestamp for record in result] == [1]


def test_query_default_bounds_cover_large_timestamps(store) -> None:
    seed(store, make_record(timestamp=1), make_record(timestamp=2**62))

    result = asyncio.run(store.query(RecordQuery.from_params({})))

    assert [record.timestamp for record in result] == [2**62, 1]


def test_query_page_is_capped(store) -> None:
    seed(store, *[make_record(timestamp=t) for t in range(1, 106)])

    result = asyncio.run(store.query(RecordQuery.from_params({"count": "500"})))

    assert len(result) == 100
    assert result[0].timestamp == 105


def test_blob_store_reads_missing_object_as_empty(tmp_path) -> None:
    store = BlobRecordStore(FileBucket(str(tmp_path)), BLOB_KEY)

    assert asyncio.run(store.count()) == 0
    assert asyncio.run(store.query(RecordQuery())) == []


def test_blob_store_recovers_from_malformed_content(tmp_path) -> None:
    bucket = FileBucket(str(tmp_path))
    bucket.put(BLOB_KEY, "{not json")
    store = BlobRecordStore(bucket, BLOB_KEY)

    assert asyncio.run(store.count()) == 0

    seed(store, make_record())

    assert asyncio.run(store.count()) == 1
    assert json.loads(bucket.get(BLOB_KEY)) == [make_record().to_dict()]


def test_blob_store_recovers_from_content_that_is_not_utf8(tmp_path) -> None:
    bucket = FileBucket(str(tmp_path))
    (tmp_path / BLOB_KEY).parent.mkdir(parents=True)
    (tmp_path / BLOB_KEY).write_bytes(b"[\xff\xfe]")
    store = BlobRecordStore(bucket, BLOB_KEY)

    assert asyncio.run(store.count()) == 0
    assert asyncio.run(store.query(RecordQuery())) == []

    seed(store, make_record())

    assert json.loads(bucket.get(BLOB_KEY)) == [make_record().to_dict()]


def test_blob_store_reads_legacy_entries_and_skips_broken_ones(tmp_path) -> None:
    bucket = FileBucket(str(tmp_path))
    legacy = {"timestamp": 5, "domain": "a", "method": "GET", "path": "/", "ipcountry": "CH"}
    bucket.put(BLOB_KEY, json.dumps([legacy, {"timestamp": "soon"}, "garbage"]))
    store = BlobRecordStore(bucket, BLOB_KEY)

    result = asyncio.run(store.query(RecordQuery()))

    assert result == [make_record(timestamp=5, domain="a", method="GET", path="/", country="CH")]


class _BrokenBucket:
    def get(self, key):
        raise BucketError("unreachable")

    def put(self, key, body):
        raise BucketError("unreachable")


def test_blob_store_write_failure_raises_and_reads_are_swallowed() -> None:
    store = BlobRecordStore(_BrokenBucket(), BLOB_KEY)

    with pytest.raises(StoreWriteFailure):
        asyncio.run(store.append(make_record()))
    assert asyncio.run(store.count()) == 0
    assert asyncio.run(store.query(RecordQuery())) == []


class _ThreadRecordingBucket(FileBucket):
    def __init__(self, root: str) -> None:
        super().__init__(root)
        self.threads = set()

    def get(self, key):
        self.threads.add(threading.get_ident())
        return super().get(key)

    def put(self, key, body):
        self.threads.add(threading.get_ident())
        super().put(key, body)


def test_blob_store_bucket_calls_run_off_the_event_loop_thread(tmp_path) -> None:
    bucket = _ThreadRecordingBucket(str(tmp_path))
    store = BlobRecordStore(bucket, BLOB_KEY)

    seed(store, make_record())
    asyncio.run(store.count())

    assert bucket.threads
    assert threading.get_ident() not in bucket.threads


def test_query_with_offset_beyond_integer_range_is_empty(store) -> None:
    seed(store, make_record())

    assert asyncio.run(store.query(RecordQuery(offset=2**70))) == []


def test_table_store_without_schema_reads_empty(tmp_path) -> None:
    store = TableRecordStore(str(tmp_path / "empty.db"))

    assert asyncio.run(store.count()) == 0
    assert asyncio.run(store.query(RecordQuery())) == []


def test_table_store_write_failure_raises(tmp_path) -> None:
    store = TableRecordStore(str(tmp_path / "missing" / "dir" / "analytics.db"))

    with pytest.raises(StoreWriteFailure):
        asyncio.run(store.append(make_record()))


def test_file_bucket_rejects_keys_outside_root(tmp_path) -> None:
    bucket = FileBucket(str(tmp_path / "bucket"))

    with pytest.raises(BucketError):
        bucket.get("../outside.json")


class _NoSuchKey(Exception):
    pass


class _FakeS3Client:
    """Minimal stand-in for a boto3 S3 client."""

    class exceptions:
        NoSuchKey = _NoSuchKey

    def __init__(self) -> None:
        self.objects = {}

    def get_object(self, Bucket, Key):
        if (Bucket, Key) not in self.objects:
            raise _NoSuchKey(Key)
        return {"Body": io.BytesIO(self.objects[(Bucket, Key)])}

    def put_object(self, Bucket, Key, Body, ContentType):
        self.objects[(Bucket, Key)] = Body


def test_blob_store_on_s3_bucket() -> None:
    client = _FakeS3Client()
    store = BlobRecordStore(S3Bucket("analytics", client=client), BLOB_KEY)

    assert asyncio.run(store.count()) == 0
    seed(store, make_record(timestamp=1), make_record(timestamp=2))

    assert asyncio.run(store.count()) == 2
    stored = json.loads(client.objects[("analytics", BLOB_KEY)].decode("utf-8"))
    assert [item["timestamp"] for item in stored] == [1, 2]


def test_build_store_selects_backend(tmp_path) -> None:
    table = build_store(Settings(store_backend="table", database_url=str(tmp_path / "a.db")))
    blob = build_store(Settings(store_backend="blob", blob_root=str(tmp_path / "bucket")))

    assert isinstance(table, TableRecordStore)
    assert table.database_path == str(tmp_path / "a.db")
    assert isinstance(blob, BlobRecordStore)
    assert isinstance(blob.bucket, FileBucket)

    with pytest.raises(ValueError):
        build_store(Settings(store_backend="memory"))
    with pytest.raises(ValueError):
        build_store(Settings(store_backend="blob", blob_backend="ftp"))
