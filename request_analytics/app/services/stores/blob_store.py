"""
Single‑object record store.

All records live in one JSON array stored under a fixed key.  Every
operation loads the whole array: ``append`` reads it, adds the new
record at the end and writes the whole array back; ``query`` and
``count`` evaluate in memory.  Cost is linear in the number of stored
records, which is fine for low‑volume logging.

There is no lock and no conditional write.  Two concurrent appends may
both read the same array and the later write wins, silently dropping
the other record.  Because each write replaces the whole object, a
reader never sees a partially written array.
"""

from __future__ import annotations

import json
import logging
from typing import List

from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from request_analytics.app.core.errors import StoreWriteFailure
from request_analytics.app.schemas.record import Record
from request_analytics.app.services.query import RecordQuery
from request_analytics.app.services.stores.base import RecordStore
from request_analytics.app.services.stores.buckets import BucketError

logger = logging.getLogger(__name__)


class BlobRecordStore(RecordStore):
    """Store records as one JSON array in object storage."""

    def __init__(self, bucket, key: str) -> None:
        self.bucket = bucket
        self.key = key

    async def _load(self) -> List[Record]:
        """Return stored records in insertion order.

        A missing object, an unreachable bucket, content that is not
        UTF‑8 and unparsable JSON all read as an empty list.
        Individual entries that do not describe a record are skipped.
        Bucket calls run in a worker thread.
        """
        try:
            text = await run_in_threadpool(self.bucket.get, self.key)
        except BucketError as exc:
            logger.error("Error fetching records from %s: %s", self.key, exc)
            return []
        except UnicodeDecodeError as exc:
            logger.error("Stored records at %s are not UTF-8: %s", self.key, exc)
            return []
        if text is None:
            return []
        try:
            data = json.loads(text)
        except ValueError as exc:
            logger.error("Stored records at %s are not valid JSON: %s", self.key, exc)
            return []
        if not isinstance(data, list):
            logger.error("Stored records at %s are not a JSON array", self.key)
            return []

        records: List[Record] = []
        for position, item in enumerate(data):
            if not isinstance(item, dict):
                logger.warning("Skipping stored entry %d: not an object", position)
                continue
            try:
                records.append(Record.from_stored(item))
            except ValidationError as exc:
                logger.warning("Skipping stored entry %d: %s", position, exc.errors()[0]["msg"])
        return records

    async def append(self, record: Record) -> None:
        records = await self._load()
        records.append(record)
        body = json.dumps([item.to_dict() for item in records])
        try:
            await run_in_threadpool(self.bucket.put, self.key, body)
        except BucketError as exc:
            logger.error("Error uploading records to %s: %s", self.key, exc)
            raise StoreWriteFailure() from exc

    async def query(self, query: RecordQuery) -> List[Record]:
        return query.apply(await self._load())

    async def count(self) -> int:
        return len(await self._load())
