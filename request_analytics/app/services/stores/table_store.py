"""
SQLite‑backed record store.

Each record is one row of the ``requests`` table.  Ingestion is a
single parameterised INSERT and queries are answered with a single
parameterised SELECT, so filtering, ordering and the page window are
all evaluated by SQLite.  Atomicity of each insert is left to SQLite.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import List

from request_analytics.app.core.db import get_connection, init_db
from request_analytics.app.core.errors import StoreWriteFailure
from request_analytics.app.schemas.record import Record
from request_analytics.app.services.query import RecordQuery
from request_analytics.app.services.stores.base import RecordStore

logger = logging.getLogger(__name__)


class TableRecordStore(RecordStore):
    """Store records as rows of the ``requests`` table."""

    def __init__(self, database_path: str) -> None:
        self.database_path = database_path

    async def setup(self) -> None:
        init_db(self.database_path)
        logger.info("Using SQLite record store at %s", self.database_path)

    async def append(self, record: Record) -> None:
        try:
            conn = get_connection(self.database_path)
        except sqlite3.Error as exc:
            logger.error("Could not open database %s: %s", self.database_path, exc)
            raise StoreWriteFailure() from exc
        try:
            conn.execute(
                """
                INSERT INTO requests (timestamp, domain, method, path, country)
                VALUES (?, ?, ?, ?, ?)
                """,
                (record.timestamp, record.domain, record.method, record.path, record.country),
            )
            conn.commit()
        except (sqlite3.Error, OverflowError) as exc:
            logger.error("Failed to insert request record: %s", exc)
            raise StoreWriteFailure() from exc
        finally:
            conn.close()

    async def query(self, query: RecordQuery) -> List[Record]:
        where, params = query.to_sql()
        sql = (
            "SELECT timestamp, domain, method, path, country FROM requests"
            f" WHERE {where} ORDER BY timestamp DESC, id DESC LIMIT ? OFFSET ?"
        )
        params.extend([query.count, query.offset])
        try:
            conn = get_connection(self.database_path)
            try:
                rows = conn.execute(sql, tuple(params)).fetchall()
            finally:
                conn.close()
        except (sqlite3.Error, OverflowError) as exc:
            logger.error("Failed to query request records: %s", exc)
            return []
        return [Record.from_stored(dict(row)) for row in rows]

    async def count(self) -> int:
        try:
            conn = get_connection(self.database_path)
            try:
                return conn.execute("SELECT COUNT(*) FROM requests").fetchone()[0]
            finally:
                conn.close()
        except sqlite3.Error as exc:
            logger.error("Failed to count request records: %s", exc)
            return 0
