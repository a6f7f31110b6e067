"""Programmable content provider double.

Tests register the calls they expect, the code under test talks to the double
through the ``ContentProvider`` protocol, and ``verify`` confirms at the end
that every non-repeatable expectation was used:

    provider = MockContentProvider()
    provider.expect_query("content://c/1").with_projection("a", "b").return_row({"a": 1, "b": 2})
    provider.expect_insert("content://c", {"a": 1}, "content://c/2")

    ...  # exercise the code under test

    provider.verify()

Any call that does not match fails immediately with an ``ExpectationError``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, NoReturn

from provider_double.core.errors import (
    ExpectationError,
    MalformedRowError,
    NoMatchingExpectationError,
    UnexpectedCallError,
    UnknownTypeError,
    UnmetExpectationError,
)
from provider_double.core.expectations import (
    InsertExpectation,
    QueryExpectation,
    TypeLookupExpectation,
    describe_insert,
    describe_query,
)
from provider_double.core.observability import CallObservationSink
from provider_double.core.provider import ContentProvider, FailureHandler
from provider_double.core.results import MatrixCursor
from provider_double.core.store import ExpectationStore
from provider_double.core.verifier import VerificationReport, verify_expectations

LOGGER = logging.getLogger(__name__)


def _candidates(items: Sequence[object]) -> str:
    return "[" + ", ".join(str(item) for item in items) + "]"


@dataclass(slots=True)
class MockContentProvider(ContentProvider):
    """Answers queries, type lookups and inserts from registered expectations."""

    store: ExpectationStore = field(default_factory=ExpectationStore)
    failure_handler: FailureHandler | None = None
    logger: CallObservationSink | None = None
    session_id: str = "default"

    def expect_query(self, uri: str) -> QueryExpectation:
        """Register a query expectation and return it for further configuration."""

        return self.store.add_query(uri)

    def expect_type_query(self, uri: str, mime_type: str) -> TypeLookupExpectation:
        return self.store.add_type(uri, mime_type)

    def expect_insert(
        self, uri: str, values: Mapping[str, Any], result_uri: str
    ) -> InsertExpectation:
        """Register an insert expectation; every argument is required."""

        return self.store.add_insert(uri, values, result_uri)

    def query(
        self,
        uri: str,
        projection: Sequence[str] | None = None,
        selection: str | None = None,
        selection_args: Sequence[str] | None = None,
        sort_order: str | None = None,
    ) -> MatrixCursor:
        actual = describe_query(uri, projection, selection, selection_args, sort_order)
        call = {
            "uri": uri,
            "projection": list(projection) if projection is not None else None,
            "selection": selection,
            "selection_args": list(selection_args) if selection_args is not None else None,
            "sort_order": sort_order,
        }
        if not self.store.queries:
            self._fail(UnexpectedCallError(f"Unexpected query: Actual: {actual}"), "query_failed", call)

        try:
            matched = self.store.match_query(uri, projection, selection, selection_args, sort_order)
        except MalformedRowError as exc:
            self._fail(exc, "query_failed", call)
        if matched is None:
            outstanding = list(self.store.queries)
            self._fail(
                NoMatchingExpectationError(
                    f"Incorrect query. Expected one of: {_candidates(outstanding)}. Actual: {actual}",
                    candidates=outstanding,
                    actual=actual,
                ),
                "query_failed",
                call,
            )

        expectation, cursor = matched
        LOGGER.debug("Query matched %s (%d rows)", expectation, len(cursor))
        self._log_event("query_matched", {**call, "row_count": len(cursor)})
        return cursor

    def get_type(self, uri: str) -> str:
        if not self.store.types:
            self._fail(UnexpectedCallError(f"Unexpected getType query: {uri}"), "type_failed", {"uri": uri})

        expectation = self.store.lookup_type(uri)
        if expectation is None:
            self._fail(UnknownTypeError(uri), "type_failed", {"uri": uri})

        self._log_event("type_resolved", {"uri": uri, "mime_type": expectation.mime_type})
        return expectation.mime_type

    def insert(self, uri: str, values: Mapping[str, Any]) -> str:
        actual = describe_insert(uri, values)
        call = {"uri": uri, "values": dict(values) if values is not None else None}
        if not self.store.inserts:
            self._fail(UnexpectedCallError(f"Unexpected insert. Actual: {actual}"), "insert_failed", call)

        expectation = self.store.match_insert(uri, values)
        if expectation is None:
            outstanding = list(self.store.inserts)
            self._fail(
                NoMatchingExpectationError(
                    f"Incorrect insert. Expected one of: {_candidates(outstanding)}. Actual: {actual}",
                    candidates=outstanding,
                    actual=actual,
                ),
                "insert_failed",
                call,
            )

        LOGGER.debug("Insert matched %s", expectation)
        self._log_event("insert_matched", {**call, "result_uri": expectation.result_uri})
        return expectation.result_uri

    def verify(self) -> VerificationReport:
        """Fail unless every non-repeatable query and insert has been called."""

        try:
            report = verify_expectations(self.store)
        except UnmetExpectationError as exc:
            self._fail(
                exc,
                "verification_failed",
                {
                    "missed_queries": [str(query) for query in exc.missed_queries],
                    "missed_inserts": [str(insert) for insert in exc.missed_inserts],
                },
            )
        self._log_event("verification_passed", {})
        return report

    def reset(self) -> None:
        self.store.reset()

    def _fail(self, error: ExpectationError, event: str, payload: dict[str, Any]) -> NoReturn:
        LOGGER.debug("Provider double failure: %s", error)
        self._log_event(event, {**payload, "error": str(error)})
        if self.failure_handler is not None:
            self.failure_handler(error)
        raise error

    def _log_event(self, event: str, payload: dict[str, Any]) -> None:
        if self.logger is None:
            return
        self.logger.log_event(self.session_id, event, payload)
