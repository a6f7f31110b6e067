"""Collaborator interface implemented by the provider double."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any, Protocol

from provider_double.core.errors import ExpectationError
from provider_double.core.results import MatrixCursor

FailureHandler = Callable[[ExpectationError], Any]
"""Hook that fails the current test, e.g. ``lambda error: pytest.fail(str(error))``."""


class ContentProvider(Protocol):
    """Structured-query data provider as seen by the code under test."""

    def query(
        self,
        uri: str,
        projection: Sequence[str] | None,
        selection: str | None,
        selection_args: Sequence[str] | None,
        sort_order: str | None,
    ) -> MatrixCursor:  # pragma: no cover - interface
        """Return the rows answering the query."""

    def get_type(self, uri: str) -> str:  # pragma: no cover - interface
        """Return the MIME type of the resource at *uri*."""

    def insert(self, uri: str, values: Mapping[str, Any]) -> str:  # pragma: no cover - interface
        """Store *values* under *uri* and return the uri of the new item."""
