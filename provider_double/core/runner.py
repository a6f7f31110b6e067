"""Command-line entry point for replaying a fixture against the provider double."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Sequence

from provider_double.core.config import Settings, load_settings
from provider_double.core.dependencies import build_provider
from provider_double.core.errors import UnmetExpectationError
from provider_double.core.fixtures import YamlFixtureLoader, apply_fixture, replay_calls

LOGGER = logging.getLogger(__name__)


def run_fixture(settings: Settings, fixture: str, fixtures_dir: Path | None = None) -> dict[str, Any]:
    """Register *fixture*'s expectations, replay its calls and verify the outcome."""

    loader = YamlFixtureLoader(base_dir=fixtures_dir or settings.paths.resolve_fixtures_dir())
    document = loader.load(fixture)
    provider = build_provider(settings)
    apply_fixture(provider, document)
    LOGGER.info(
        "Replaying %d calls from fixture %s (%d queries, %d types, %d inserts registered)",
        len(document.calls),
        fixture,
        len(document.queries),
        len(document.types),
        len(document.inserts),
    )

    calls = replay_calls(provider, document)
    report: dict[str, Any] = {"fixture": fixture, "calls": calls}
    if any(call["status"] == "failed" for call in calls):
        report["status"] = "failed"
        return report

    try:
        provider.verify()
    except UnmetExpectationError as exc:
        report["status"] = "failed"
        report["verification"] = {
            "status": "failed",
            "missed_queries": [str(query) for query in exc.missed_queries],
            "missed_inserts": [str(insert) for insert in exc.missed_inserts],
        }
    else:
        report["status"] = "ok"
        report["verification"] = {"status": "ok"}
    return report


def _configure_logging(debug: bool) -> None:
    root_logger = logging.getLogger()
    if root_logger.handlers:
        if debug:
            root_logger.setLevel(logging.DEBUG)
        return
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point for checking a fixture's recorded calls."""

    parser = argparse.ArgumentParser(description="Replay fixture calls against the provider double")
    parser.add_argument("--config", default=None, help="Path to the YAML config file")
    parser.add_argument("--fixture", required=True, help="Fixture name or path to a fixture YAML file")
    parser.add_argument("--fixtures-dir", default=None, help="Directory containing fixture YAML files")
    parser.add_argument("--debug", action="store_true", help="Log every registration and match")
    args = parser.parse_args(argv)

    _configure_logging(debug=args.debug)
    settings = load_settings(args.config) if args.config else Settings.default()
    fixtures_dir = Path(args.fixtures_dir) if args.fixtures_dir else None

    report = run_fixture(settings, args.fixture, fixtures_dir)
    print(json.dumps(report, indent=2, ensure_ascii=False, default=str))
    if report["status"] != "ok":
        raise SystemExit(1)


if __name__ == "__main__":
    main()
