"""Store interface shared by every persistence backend."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from request_analytics.app.schemas.record import Record
from request_analytics.app.services.query import RecordQuery


class RecordStore(ABC):
    """Persists records and answers queries over them.

    ``append`` raises ``StoreWriteFailure`` when the backend rejects the
    write.  ``query`` and ``count`` never raise: a failed read is logged
    and reported as an empty result.
    """

    async def setup(self) -> None:
        """Prepare the backend (create tables, etc.).  Optional."""

    @abstractmethod
    async def append(self, record: Record) -> None:
        ...

    @abstractmethod
    async def query(self, query: RecordQuery) -> List[Record]:
        ...

    @abstractmethod
    async def count(self) -> int:
        ...
