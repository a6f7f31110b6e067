"""Outstanding expectations and the match-and-consume rules applied to them."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from provider_double.core.errors import InvalidRegistrationError
from provider_double.core.expectations import (
    InsertExpectation,
    QueryExpectation,
    TypeLookupExpectation,
)
from provider_double.core.results import MatrixCursor

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ExpectationStore:
    """Holds registered expectations in registration order.

    Queries and inserts are scanned first-match-wins; a match is removed
    unless it was marked repeatable. Type lookups are keyed by uri.
    """

    reject_duplicate_types: bool = False
    queries: list[QueryExpectation] = field(default_factory=list)
    types: dict[str, TypeLookupExpectation] = field(default_factory=dict)
    inserts: list[InsertExpectation] = field(default_factory=list)

    def add_query(self, uri: str) -> QueryExpectation:
        expectation = QueryExpectation(uri=uri)
        self.queries.append(expectation)
        LOGGER.debug("Registered query expectation #%d for %s", len(self.queries), uri)
        return expectation

    def add_type(self, uri: str, mime_type: str) -> TypeLookupExpectation:
        previous = self.types.get(uri)
        if previous is not None:
            if self.reject_duplicate_types:
                raise InvalidRegistrationError(
                    f"Type for {uri} already registered as {previous.mime_type}"
                )
            LOGGER.debug("Overwriting type for %s: %s -> %s", uri, previous.mime_type, mime_type)
        expectation = TypeLookupExpectation(uri=uri, mime_type=mime_type)
        self.types[uri] = expectation
        return expectation

    def add_insert(
        self, uri: str, values: Mapping[str, Any], result_uri: str
    ) -> InsertExpectation:
        expectation = InsertExpectation(uri=uri, values=values, result_uri=result_uri)
        if expectation in self.inserts:
            LOGGER.warning("Duplicate insert expectation registered: %s", expectation)
        self.inserts.append(expectation)
        return expectation

    def match_query(
        self,
        uri: str,
        projection: Sequence[str] | None,
        selection: str | None,
        selection_args: Sequence[str] | None,
        sort_order: str | None,
    ) -> tuple[QueryExpectation, MatrixCursor] | None:
        """Consume the first query expectation accepting the call.

        Returns the expectation together with its result. The result is built
        before anything is consumed, so a malformed canned row raises and
        leaves the expectation outstanding.
        """

        for index, expectation in enumerate(self.queries):
            if expectation.matches(uri, projection, selection, selection_args, sort_order):
                break
        else:
            return None
        cursor = expectation.result(projection)
        expectation.mark_executed()
        if not expectation.repeatable:
            del self.queries[index]
        return expectation, cursor

    def lookup_type(self, uri: str) -> TypeLookupExpectation | None:
        return self.types.get(uri)

    def match_insert(
        self, uri: str, values: Mapping[str, Any] | None
    ) -> InsertExpectation | None:
        """Consume and return the first insert expectation accepting the call."""

        for index, expectation in enumerate(self.inserts):
            if expectation.matches(uri, values):
                break
        else:
            return None
        expectation.mark_executed()
        if not expectation.repeatable:
            del self.inserts[index]
        return expectation

    def reset(self) -> None:
        """Forget every registered expectation."""

        self.queries.clear()
        self.types.clear()
        self.inserts.clear()
