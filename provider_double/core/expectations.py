"""Expectation records registered against the provider double.

Three kinds of calls can be expected:

- ``QueryExpectation`` for ``query`` calls, configured through chained
  ``with_*``/``return_*`` methods after registration.
- ``TypeLookupExpectation`` for ``get_type`` calls, a plain uri to MIME type pair.
- ``InsertExpectation`` for ``insert`` calls, fully specified up front.

Query and insert expectations carry an ``executed`` marker flipped on their
first match; the store reads it during verification.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from provider_double.core.errors import InvalidRegistrationError
from provider_double.core.results import MatrixCursor, Row, RowByField, RowByPosition, build_result


def format_values(values: Sequence[Any] | None) -> str:
    """Render *values* as ``[a, b]``; ``None`` renders as ``null``."""

    if values is None:
        return "null"
    return "[" + ", ".join(str(value) for value in values) + "]"


def describe_query(
    uri: str,
    projection: Sequence[str] | None,
    selection: str | None,
    selection_args: Sequence[str] | None,
    sort_order: str | None,
) -> str:
    """Return a one-line description of a query call used in diagnostics."""

    parts = [f"{uri} {format_values(projection)}"]
    if selection is not None:
        parts.append(f" selection: '{selection}'{format_values(selection_args)}")
    if sort_order is not None:
        parts.append(f" sort: '{sort_order}'")
    return "".join(parts)


def describe_insert(uri: str, values: Mapping[str, Any] | None) -> str:
    """Return a one-line description of an insert call used in diagnostics."""

    return f"Insert {{ uri={uri}, values={dict(values) if values is not None else None} }}"


def _same_sequence(expected: tuple[Any, ...] | None, actual: Sequence[Any] | None) -> bool:
    if expected is None or actual is None:
        return expected is None and actual is None
    return expected == tuple(actual)


@dataclass(slots=True, eq=False)
class QueryExpectation:
    """Expected ``query`` call plus the rows to answer it with."""

    uri: str
    projection: tuple[str, ...] | None = None
    default_projection: tuple[str, ...] | None = None
    selection: str | None = None
    selection_args: tuple[str, ...] | None = None
    sort_order: str | None = None
    rows: list[Row] = field(default_factory=list)
    any_projection: bool = False
    any_selection: bool = False
    any_sort_order: bool = False
    repeatable: bool = False
    executed: bool = False
    match_count: int = 0

    def __str__(self) -> str:
        return describe_query(
            self.uri, self.projection, self.selection, self.selection_args, self.sort_order
        )

    def with_projection(self, *projection: str) -> QueryExpectation:
        """Require the call to request exactly these columns, in this order."""

        self.projection = tuple(projection)
        return self

    def with_default_projection(self, *projection: str) -> QueryExpectation:
        """Shape results with these columns when no projection is configured."""

        self.default_projection = tuple(projection)
        return self

    def with_any_projection(self) -> QueryExpectation:
        """Accept any projection and echo the requested columns in the result."""

        self.any_projection = True
        return self

    def with_selection(self, selection: str | None, *selection_args: str) -> QueryExpectation:
        """Require this selection and exactly these arguments.

        A selection with no arguments expects an empty argument list; only
        ``with_selection(None)`` expects ``selection_args=None``.
        """

        self.selection = selection
        if selection is None and not selection_args:
            self.selection_args = None
        else:
            self.selection_args = tuple(selection_args)
        return self

    def with_any_selection(self) -> QueryExpectation:
        """Accept any selection together with any selection arguments."""

        self.any_selection = True
        return self

    def with_sort_order(self, sort_order: str | None) -> QueryExpectation:
        """Require this sort order; ``None`` expects the call to pass none."""

        self.sort_order = sort_order
        return self

    def with_any_sort_order(self) -> QueryExpectation:
        """Accept any sort order."""

        self.any_sort_order = True
        return self

    def return_row(self, *values: Any) -> QueryExpectation:
        """Append a canned row.

        A single mapping argument is read by column name; anything else is
        taken as positional values lined up with the resolved columns.
        """

        if len(values) == 1 and isinstance(values[0], Mapping):
            self.rows.append(RowByField(dict(values[0])))
        else:
            self.rows.append(RowByPosition(tuple(values)))
        return self

    def return_empty_cursor(self) -> QueryExpectation:
        """Drop any canned rows so the match yields an empty result."""

        self.rows.clear()
        return self

    def any_number_of_times(self) -> QueryExpectation:
        """Keep this expectation after it matches and skip it during verification."""

        self.repeatable = True
        return self

    def matches(
        self,
        uri: str,
        projection: Sequence[str] | None,
        selection: str | None,
        selection_args: Sequence[str] | None,
        sort_order: str | None,
    ) -> bool:
        """Return ``True`` if every non-wildcarded criterion equals the call's value."""

        if uri != self.uri:
            return False
        if not self.any_projection and not _same_sequence(self.projection, projection):
            return False
        if not self.any_selection:
            if selection != self.selection:
                return False
            if not _same_sequence(self.selection_args, selection_args):
                return False
        if not self.any_sort_order and sort_order != self.sort_order:
            return False
        return True

    def resolve_columns(self, projection: Sequence[str] | None) -> list[str]:
        """Return the result schema for a call that requested *projection*."""

        if self.any_projection:
            columns = projection
        else:
            columns = self.projection if self.projection is not None else self.default_projection
        return list(columns) if columns is not None else []

    def result(self, projection: Sequence[str] | None) -> MatrixCursor:
        return build_result(self.resolve_columns(projection), self.rows)

    def mark_executed(self) -> None:
        self.executed = True
        self.match_count += 1


@dataclass(frozen=True, slots=True)
class TypeLookupExpectation:
    """Static ``get_type`` answer for one uri."""

    uri: str
    mime_type: str

    def __str__(self) -> str:
        return f"{self.uri} --> {self.mime_type}"

    def matches(self, uri: str) -> bool:
        return uri == self.uri


@dataclass(slots=True)
class InsertExpectation:
    """Expected ``insert`` call and the uri handed back for it.

    Two inserts are equal when uri, values and result uri are equal; the
    lifecycle fields do not take part in the comparison.
    """

    uri: str
    values: dict[str, Any]
    result_uri: str
    repeatable: bool = field(default=False, compare=False)
    executed: bool = field(default=False, compare=False)
    match_count: int = field(default=0, compare=False)

    def __post_init__(self) -> None:
        if self.uri is None:
            raise InvalidRegistrationError("Insert expectation requires a uri")
        if self.values is None:
            raise InvalidRegistrationError("Insert expectation requires values")
        if self.result_uri is None:
            raise InvalidRegistrationError("Insert expectation requires a result uri")
        self.values = dict(self.values)

    def __str__(self) -> str:
        return f"Insert{{uri={self.uri}, values={self.values}, result_uri={self.result_uri}}}"

    def any_number_of_times(self) -> InsertExpectation:
        """Allow this insert to satisfy repeated calls instead of just one."""

        self.repeatable = True
        return self

    def matches(self, uri: str, values: Mapping[str, Any] | None) -> bool:
        if values is None:
            return False
        return uri == self.uri and dict(values) == self.values

    def mark_executed(self) -> None:
        self.executed = True
        self.match_count += 1


__all__ = [
    "InsertExpectation",
    "QueryExpectation",
    "TypeLookupExpectation",
    "describe_insert",
    "describe_query",
    "format_values",
]
