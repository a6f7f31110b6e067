"""Tests for the match-and-consume rules of the expectation store."""

from __future__ import annotations

import logging

import pytest

from provider_double.core.errors import InvalidRegistrationError, MalformedRowError
from provider_double.core.store import ExpectationStore

URI = "content://c/1"


def test_first_registered_match_wins_and_is_removed() -> None:
    store = ExpectationStore()
    first = store.add_query(URI).with_any_projection()
    second = store.add_query(URI).with_any_projection()

    matched = store.match_query(URI, ["a"], None, None, None)

    assert matched is not None
    assert matched[0] is first
    assert matched[1].columns == ["a"]
    assert first.executed
    assert store.queries == [second]


def test_non_matching_call_leaves_store_untouched() -> None:
    store = ExpectationStore()
    query = store.add_query(URI).with_projection("a")

    assert store.match_query(URI, ["b"], None, None, None) is None
    assert store.queries == [query]
    assert not query.executed


def test_repeatable_query_is_kept_after_matching() -> None:
    store = ExpectationStore()
    query = store.add_query(URI).any_number_of_times()

    for _ in range(3):
        matched = store.match_query(URI, None, None, None, None)
        assert matched is not None and matched[0] is query

    assert store.queries == [query]
    assert query.match_count == 3


def test_later_expectation_matches_after_earlier_is_consumed() -> None:
    store = ExpectationStore()
    store.add_query(URI).with_default_projection("a").return_row(1)
    second = store.add_query(URI).with_default_projection("a").return_row(2)

    store.match_query(URI, None, None, None, None)

    expectation, cursor = store.match_query(URI, None, None, None, None)
    assert expectation is second
    assert cursor.rows == [(2,)]
    assert store.match_query(URI, None, None, None, None) is None


def test_malformed_row_leaves_expectation_outstanding() -> None:
    store = ExpectationStore()
    query = store.add_query(URI).with_default_projection("a", "b").return_row(1)

    with pytest.raises(MalformedRowError):
        store.match_query(URI, None, None, None, None)

    assert store.queries == [query]
    assert not query.executed
    assert query.match_count == 0


def test_type_registration_overwrites_by_default() -> None:
    store = ExpectationStore()
    store.add_type(URI, "vnd.a")
    store.add_type(URI, "vnd.b")

    lookup = store.lookup_type(URI)

    assert lookup is not None
    assert lookup.mime_type == "vnd.b"


def test_type_registration_can_reject_duplicates() -> None:
    store = ExpectationStore(reject_duplicate_types=True)
    store.add_type(URI, "vnd.a")

    with pytest.raises(InvalidRegistrationError):
        store.add_type(URI, "vnd.b")


def test_insert_matching_consumes_unless_repeatable() -> None:
    store = ExpectationStore()
    once = store.add_insert(URI, {"a": 1}, "content://c/2")
    always = store.add_insert(URI, {"a": 2}, "content://c/3").any_number_of_times()

    assert store.match_insert(URI, {"a": 1}) is once
    assert store.match_insert(URI, {"a": 1}) is None
    assert store.match_insert(URI, {"a": 2}) is always
    assert store.match_insert(URI, {"a": 2}) is always
    assert store.inserts == [always]


def test_duplicate_insert_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    store = ExpectationStore()
    store.add_insert(URI, {"a": 1}, "content://c/2")

    with caplog.at_level(logging.WARNING, logger="provider_double.core.store"):
        store.add_insert(URI, {"a": 1}, "content://c/2")

    assert "Duplicate insert expectation" in caplog.text
    assert len(store.inserts) == 2


def test_reset_clears_everything() -> None:
    store = ExpectationStore()
    store.add_query(URI)
    store.add_type(URI, "vnd.a")
    store.add_insert(URI, {}, "content://c/2")

    store.reset()

    assert store.queries == []
    assert store.types == {}
    assert store.inserts == []
