"""Unit tests for the query engine."""

from __future__ import annotations

import pytest

from request_analytics.app.services.query import MAX_TIMESTAMP, RecordQuery

from .conftest import make_record


def test_from_params_defaults() -> None:
    query = RecordQuery.from_params({})

    assert query == RecordQuery()
    assert query.start == 0
    assert query.end == MAX_TIMESTAMP
    assert query.count == 100
    assert query.offset == 0
    assert query.equality_filters() == []


@pytest.mark.parametrize("name", ["start", "end", "count", "offset"])
def test_from_params_unparsable_numbers_fall_back_to_defaults(name: str) -> None:
    assert RecordQuery.from_params({name: "abc"}) == RecordQuery()


@pytest.mark.parametrize("requested,expected", [("500", 100), ("100", 100), ("5", 5), ("0", 100), ("-3", 100)])
def test_from_params_caps_page_size(requested: str, expected: int) -> None:
    assert RecordQuery.from_params({"count": requested}).count == expected


def test_from_params_negative_offset_becomes_zero() -> None:
    assert RecordQuery.from_params({"offset": "-10"}).offset == 0


def test_from_params_clamps_huge_offset() -> None:
    assert RecordQuery.from_params({"offset": "99999999999999999999"}).offset == MAX_TIMESTAMP


def test_from_params_clamps_bounds_to_integer_range() -> None:
    query = RecordQuery.from_params({"start": str(-(2**70)), "end": str(2**70)})

    assert query.start == -(2**63)
    assert query.end == MAX_TIMESTAMP


def test_from_params_reads_filters_and_ignores_empty_ones() -> None:
    query = RecordQuery.from_params({"domain": "a.test", "method": "", "ipcountry": "NL"})

    assert query.equality_filters() == [("domain", "a.test"), ("country", "NL")]


def test_matches_is_a_conjunction() -> None:
    query = RecordQuery(start=10, end=20, domain="a.test", method="POST")

    assert query.matches(make_record(timestamp=10, domain="a.test", method="POST"))
    assert query.matches(make_record(timestamp=20, domain="a.test", method="POST"))
    assert not query.matches(make_record(timestamp=21, domain="a.test", method="POST"))
    assert not query.matches(make_record(timestamp=15, domain="b.test", method="POST"))
    assert not query.matches(make_record(timestamp=15, domain="a.test", method="GET"))


def test_apply_orders_newest_first_with_latest_insert_winning_ties() -> None:
    first = make_record(timestamp=5, path="/first")
    newest = make_record(timestamp=9, path="/newest")
    second = make_record(timestamp=5, path="/second")

    assert RecordQuery().apply([first, newest, second]) == [newest, second, first]


def test_apply_windows_after_filtering() -> None:
    records = [make_record(timestamp=t, domain="a.test" if t % 2 else "b.test") for t in range(1, 11)]

    page = RecordQuery(domain="a.test", count=2, offset=1).apply(records)

    assert [record.timestamp for record in page] == [7, 5]


def test_to_sql_builds_parameterised_clause() -> None:
    where, params = RecordQuery(start=1, end=2, domain="a.test", path="/x").to_sql()

    assert where == "timestamp >= ? AND timestamp <= ? AND domain = ? AND path = ?"
    assert params == [1, 2, "a.test", "/x"]
