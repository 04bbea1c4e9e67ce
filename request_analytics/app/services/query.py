"""
Query engine for recorded requests.

A ``RecordQuery`` captures the filters and the page window requested
by a client.  The blob store evaluates it in memory with ``apply``;
the table store pushes it into SQL with ``to_sql``.  Both paths agree
on one canonical order: newest ``timestamp`` first, and among equal
timestamps the most recently stored record first.  ``offset`` counts
positions in that order.

Numeric parameters never cause a client error.  Values that cannot be
parsed fall back to their defaults.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from request_analytics.app.schemas.record import LEGACY_COUNTRY_FIELD, Record

# Largest value SQLite can hold in an INTEGER column.
MAX_TIMESTAMP = 2**63 - 1
MIN_TIMESTAMP = -(2**63)

DEFAULT_COUNT = 100
MAX_COUNT = 100

EQUALITY_FIELDS = ("domain", "method", "path", "country")


def _parse_int(value: Optional[str], default: int) -> int:
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


def _clamp(value: int, lowest: int, highest: int) -> int:
    return max(lowest, min(value, highest))


@dataclass(frozen=True)
class RecordQuery:
    """Filters plus the pagination window for a record lookup."""

    start: int = 0
    end: int = MAX_TIMESTAMP
    domain: Optional[str] = None
    method: Optional[str] = None
    path: Optional[str] = None
    country: Optional[str] = None
    count: int = DEFAULT_COUNT
    offset: int = 0

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> "RecordQuery":
        """Build a query from raw query‑string values.

        ``count`` is capped at 100 and replaced by the default when it
        is not positive; ``offset`` is clamped into
        ``[0, MAX_TIMESTAMP]``.  Empty equality filters are treated as
        absent.
        """
        count = _parse_int(params.get("count"), DEFAULT_COUNT)
        if count <= 0:
            count = DEFAULT_COUNT
        offset = _clamp(_parse_int(params.get("offset"), 0), 0, MAX_TIMESTAMP)
        country = params.get("country") or params.get(LEGACY_COUNTRY_FIELD)
        return cls(
            start=_clamp(_parse_int(params.get("start"), 0), MIN_TIMESTAMP, MAX_TIMESTAMP),
            end=_clamp(_parse_int(params.get("end"), MAX_TIMESTAMP), MIN_TIMESTAMP, MAX_TIMESTAMP),
            domain=params.get("domain") or None,
            method=params.get("method") or None,
            path=params.get("path") or None,
            country=country or None,
            count=min(count, MAX_COUNT),
            offset=offset,
        )

    def equality_filters(self) -> List[Tuple[str, str]]:
        """Return the active ``(field, value)`` equality clauses."""
        return [(name, getattr(self, name)) for name in EQUALITY_FIELDS if getattr(self, name)]

    def matches(self, record: Record) -> bool:
        if not self.start <= record.timestamp <= self.end:
            return False
        return all(getattr(record, name) == value for name, value in self.equality_filters())

    def apply(self, records: Sequence[Record]) -> List[Record]:
        """Filter, order and window records held in insertion order."""
        matching = [(index, record) for index, record in enumerate(records) if self.matches(record)]
        matching.sort(key=lambda item: (item[1].timestamp, item[0]), reverse=True)
        window = matching[self.offset:self.offset + self.count]
        return [record for _, record in window]

    def to_sql(self) -> Tuple[str, List[Any]]:
        """Return the WHERE clause (without the keyword) and its parameters."""
        where_clauses: List[str] = ["timestamp >= ?", "timestamp <= ?"]
        params: List[Any] = [self.start, self.end]
        for name, value in self.equality_filters():
            # Column names come from EQUALITY_FIELDS, never from the client.
            where_clauses.append(f"{name} = ?")
            params.append(value)
        return " AND ".join(where_clauses), params
