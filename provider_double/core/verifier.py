"""End-of-test verification of outstanding expectations."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from provider_double.core.errors import UnmetExpectationError
from provider_double.core.expectations import InsertExpectation, QueryExpectation
from provider_double.core.store import ExpectationStore


@dataclass(slots=True)
class VerificationReport:
    """Non-repeatable expectations that were never matched."""

    missed_queries: list[QueryExpectation] = field(default_factory=list)
    missed_inserts: list[InsertExpectation] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.missed_queries and not self.missed_inserts

    def describe(self) -> str:
        lines = []
        if self.missed_queries:
            lines.append(
                "Not all expected queries have been called: "
                + _format_list(self.missed_queries)
            )
        if self.missed_inserts:
            lines.append(
                "Not all expected inserts have been called: "
                + _format_list(self.missed_inserts)
            )
        return "\n".join(lines)


def _format_list(items: Sequence[object]) -> str:
    return "[" + ", ".join(str(item) for item in items) + "]"


def collect_unmet(store: ExpectationStore) -> VerificationReport:
    """Scan queries and inserts independently; type lookups are never checked."""

    return VerificationReport(
        missed_queries=[
            query for query in store.queries if not query.executed and not query.repeatable
        ],
        missed_inserts=[
            insert for insert in store.inserts if not insert.executed and not insert.repeatable
        ],
    )


def verify_expectations(store: ExpectationStore) -> VerificationReport:
    """Raise ``UnmetExpectationError`` unless every non-repeatable expectation ran."""

    report = collect_unmet(store)
    if not report.passed:
        raise UnmetExpectationError(
            report.describe(),
            missed_queries=report.missed_queries,
            missed_inserts=report.missed_inserts,
        )
    return report
