"""Tests for YAML fixture loading, registration and replay."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from provider_double.core.fixtures import FixtureDocument, YamlFixtureLoader, apply_fixture, replay_calls
from provider_double.integrations.mock_content_provider import MockContentProvider

FIXTURE = """
queries:
  - uri: content://c/1
    projection: [a, b]
    rows:
      - {a: 1, b: 2}
      - [3, 4]
  - uri: content://c
    any_projection: true
    selection: "a = ?"
    selection_args: ["1"]
    any_sort_order: true
    any_number_of_times: true
types:
  content://c/1: vnd.android.cursor.item/x
inserts:
  - uri: content://c
    values: {a: 1}
    result_uri: content://c/2
calls:
  - {kind: query, uri: content://c/1, projection: [a, b]}
  - {kind: get_type, uri: content://c/1}
  - {kind: insert, uri: content://c, values: {a: 1}}
"""


@pytest.fixture()
def fixtures_dir(tmp_path: Path) -> Path:
    (tmp_path / "sample.yaml").write_text(FIXTURE, encoding="utf-8")
    return tmp_path


def test_loader_reads_named_fixture(fixtures_dir: Path) -> None:
    document = YamlFixtureLoader(base_dir=fixtures_dir).load("sample")

    assert len(document.queries) == 2
    assert document.queries[0].rows == [{"a": 1, "b": 2}, [3, 4]]
    assert document.types == {"content://c/1": "vnd.android.cursor.item/x"}
    assert [call.kind for call in document.calls] == ["query", "get_type", "insert"]


def test_loader_accepts_direct_path(fixtures_dir: Path, tmp_path: Path) -> None:
    loader = YamlFixtureLoader(base_dir=tmp_path / "elsewhere")

    document = loader.load(str(fixtures_dir / "sample.yaml"))

    assert len(document.inserts) == 1


def test_loader_missing_fixture_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        YamlFixtureLoader(base_dir=tmp_path).load("absent")


def test_invalid_fixture_is_rejected(tmp_path: Path) -> None:
    (tmp_path / "bad.yaml").write_text("inserts:\n  - uri: content://c\n", encoding="utf-8")

    with pytest.raises(ValidationError):
        YamlFixtureLoader(base_dir=tmp_path).load("bad")


def test_apply_fixture_registers_expectations(fixtures_dir: Path) -> None:
    provider = MockContentProvider()
    apply_fixture(provider, YamlFixtureLoader(base_dir=fixtures_dir).load("sample"))

    exact, wildcard = provider.store.queries
    assert exact.projection == ("a", "b")
    assert len(exact.rows) == 2
    assert wildcard.any_projection and wildcard.any_sort_order and wildcard.repeatable
    assert wildcard.selection_args == ("1",)
    assert provider.get_type("content://c/1") == "vnd.android.cursor.item/x"
    assert provider.store.inserts[0].result_uri == "content://c/2"


def test_replay_calls_reports_each_outcome(fixtures_dir: Path) -> None:
    provider = MockContentProvider()
    document = YamlFixtureLoader(base_dir=fixtures_dir).load("sample")
    apply_fixture(provider, document)

    outcomes = replay_calls(provider, document)

    assert [outcome["status"] for outcome in outcomes] == ["ok", "ok", "ok"]
    assert outcomes[0]["rows"] == [{"a": 1, "b": 2}, {"a": 3, "b": 4}]
    assert outcomes[1]["mime_type"] == "vnd.android.cursor.item/x"
    assert outcomes[2]["result_uri"] == "content://c/2"
    assert provider.verify().passed


def test_replay_stops_at_first_failure() -> None:
    document = FixtureDocument.model_validate(
        {
            "calls": [
                {"kind": "get_type", "uri": "content://c/1"},
                {"kind": "query", "uri": "content://c/1"},
            ]
        }
    )

    outcomes = replay_calls(MockContentProvider(), document)

    assert len(outcomes) == 1
    assert outcomes[0]["status"] == "failed"
    assert "Unexpected getType query" in outcomes[0]["error"]


def test_empty_selection_args_are_kept_distinct_from_null() -> None:
    document = FixtureDocument.model_validate(
        {
            "queries": [
                {"uri": "content://c", "selection": "deleted = 0", "selection_args": []},
                {"uri": "content://c", "selection": "deleted = 1"},
            ]
        }
    )
    provider = MockContentProvider()

    apply_fixture(provider, document)

    empty_args, omitted_args = provider.store.queries
    assert empty_args.selection_args == ()
    assert omitted_args.selection_args == ()
    assert empty_args.matches("content://c", None, "deleted = 0", [], None)
    assert not empty_args.matches("content://c", None, "deleted = 0", None, None)
