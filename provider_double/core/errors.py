"""Exception hierarchy raised by the provider double.

Every failure caused by the code under test derives from ``AssertionError`` so
test runners report it as a failed assertion rather than an error.
"""

from __future__ import annotations

from typing import Any, Sequence


class ProviderDoubleError(Exception):
    """Base class for all provider double errors."""


class ExpectationError(ProviderDoubleError, AssertionError):
    """A call or verification did not line up with the registered expectations."""


class UnexpectedCallError(ExpectationError):
    """No expectation of the called kind was registered at all."""


class NoMatchingExpectationError(ExpectationError):
    """Expectations exist but none of them accepts the received call."""

    def __init__(self, message: str, *, candidates: Sequence[Any], actual: str) -> None:
        super().__init__(message)
        self.candidates = list(candidates)
        self.actual = actual


class UnknownTypeError(ExpectationError):
    """A type lookup named a uri missing from a non-empty type registry."""

    def __init__(self, uri: str) -> None:
        super().__init__(f"Unknown mime type for: {uri}")
        self.uri = uri


class MalformedRowError(ExpectationError, ValueError):
    """A canned positional row does not line up with the result columns."""


class UnmetExpectationError(ExpectationError):
    """Verification found non-repeatable expectations that never matched."""

    def __init__(
        self,
        message: str,
        *,
        missed_queries: Sequence[Any] = (),
        missed_inserts: Sequence[Any] = (),
    ) -> None:
        super().__init__(message)
        self.missed_queries = list(missed_queries)
        self.missed_inserts = list(missed_inserts)


class InvalidRegistrationError(ProviderDoubleError, ValueError):
    """An expectation was registered with missing or conflicting arguments."""


__all__ = [
    "ExpectationError",
    "InvalidRegistrationError",
    "MalformedRowError",
    "NoMatchingExpectationError",
    "ProviderDoubleError",
    "UnexpectedCallError",
    "UnknownTypeError",
    "UnmetExpectationError",
]
