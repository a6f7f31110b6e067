"""Declarative YAML fixtures: expectations to register plus calls to replay."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field

from provider_double.core.errors import ExpectationError
from provider_double.integrations.mock_content_provider import MockContentProvider


class QueryFixture(BaseModel):
    uri: str = Field(..., min_length=1)
    projection: list[str] | None = None
    default_projection: list[str] | None = None
    any_projection: bool = False
    selection: str | None = None
    selection_args: list[str] | None = None
    any_selection: bool = False
    sort_order: str | None = None
    any_sort_order: bool = False
    rows: list[dict[str, Any] | list[Any]] = Field(default_factory=list)
    any_number_of_times: bool = False


class InsertFixture(BaseModel):
    uri: str = Field(..., min_length=1)
    values: dict[str, Any]
    result_uri: str = Field(..., min_length=1)
    any_number_of_times: bool = False


class CallFixture(BaseModel):
    kind: Literal["query", "get_type", "insert"]
    uri: str = Field(..., min_length=1)
    projection: list[str] | None = None
    selection: str | None = None
    selection_args: list[str] | None = None
    sort_order: str | None = None
    values: dict[str, Any] | None = Field(None, description="Field values for insert calls")


class FixtureDocument(BaseModel):
    queries: list[QueryFixture] = Field(default_factory=list)
    types: dict[str, str] = Field(default_factory=dict)
    inserts: list[InsertFixture] = Field(default_factory=list)
    calls: list[CallFixture] = Field(default_factory=list)


@dataclass(slots=True)
class YamlFixtureLoader:
    """Loads fixture documents from YAML files located under a base directory."""

    base_dir: Path

    def load(self, name: str) -> FixtureDocument:
        target = self.resolve(name)
        with target.open("r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle) or {}
        if not isinstance(payload, dict):
            raise ValueError("Fixture file must contain a top-level mapping")
        return FixtureDocument.model_validate(payload)

    def resolve(self, name: str) -> Path:
        """Accept either a path to a fixture file or a fixture name under ``base_dir``."""

        direct = Path(name).expanduser()
        if direct.suffix in {".yaml", ".yml"} and direct.exists():
            return direct
        target = self.base_dir / f"{name}.yaml"
        if not target.exists():
            raise FileNotFoundError(f"Fixture not found: {target}")
        return target


def apply_fixture(provider: MockContentProvider, document: FixtureDocument) -> None:
    """Register every expectation described by *document* on *provider*."""

    for entry in document.queries:
        query = provider.expect_query(entry.uri)
        if entry.projection is not None:
            query.with_projection(*entry.projection)
        if entry.default_projection is not None:
            query.with_default_projection(*entry.default_projection)
        if entry.any_projection:
            query.with_any_projection()
        if entry.selection is not None or entry.selection_args is not None:
            query.with_selection(entry.selection, *(entry.selection_args or ()))
        if entry.any_selection:
            query.with_any_selection()
        if entry.sort_order is not None:
            query.with_sort_order(entry.sort_order)
        if entry.any_sort_order:
            query.with_any_sort_order()
        for row in entry.rows:
            if isinstance(row, dict):
                query.return_row(row)
            else:
                query.return_row(*row)
        if entry.any_number_of_times:
            query.any_number_of_times()

    for uri, mime_type in document.types.items():
        provider.expect_type_query(uri, mime_type)

    for entry in document.inserts:
        insert = provider.expect_insert(entry.uri, entry.values, entry.result_uri)
        if entry.any_number_of_times:
            insert.any_number_of_times()


def replay_calls(provider: MockContentProvider, document: FixtureDocument) -> list[dict[str, Any]]:
    """Issue the recorded calls in order, stopping at the first failure."""

    outcomes: list[dict[str, Any]] = []
    for call in document.calls:
        outcome: dict[str, Any] = {"kind": call.kind, "uri": call.uri}
        try:
            outcome.update(_dispatch(provider, call))
        except ExpectationError as exc:
            outcome["status"] = "failed"
            outcome["error"] = str(exc)
            outcomes.append(outcome)
            break
        outcome["status"] = "ok"
        outcomes.append(outcome)
    return outcomes


def _dispatch(provider: MockContentProvider, call: CallFixture) -> dict[str, Any]:
    if call.kind == "query":
        cursor = provider.query(
            call.uri, call.projection, call.selection, call.selection_args, call.sort_order
        )
        return {"columns": list(cursor.columns), "rows": cursor.to_dicts()}
    if call.kind == "get_type":
        return {"mime_type": provider.get_type(call.uri)}
    if call.values is None:
        raise ValueError(f"Insert call for {call.uri} requires values")
    return {"result_uri": provider.insert(call.uri, call.values)}
