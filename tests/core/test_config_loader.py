"""Tests for loading provider double settings from YAML."""

from __future__ import annotations

from pathlib import Path

import pytest

from provider_double.core.config import Settings, load_settings
from provider_double.core.dependencies import build_provider
from provider_double.core.errors import InvalidRegistrationError
from provider_double.core.observability import JSONLCallLogger


def test_load_settings_parses_sections(tmp_path: Path) -> None:
    config_path = tmp_path / "dev.yaml"
    config_path.write_text(
        """
provider:
  session_id: ci
  reject_duplicate_types: true
paths:
  call_logs_dir: logs/calls
  fixtures_dir: fixtures
        """,
        encoding="utf-8",
    )

    settings = load_settings(config_path)

    assert settings.provider.session_id == "ci"
    assert settings.provider.reject_duplicate_types is True
    assert settings.paths.call_logs_dir == "logs/calls"
    assert settings.paths.resolve_fixtures_dir() == Path("fixtures")


def test_load_settings_defaults_missing_sections(tmp_path: Path) -> None:
    config_path = tmp_path / "empty.yaml"
    config_path.write_text("", encoding="utf-8")

    settings = load_settings(config_path)

    assert settings == Settings.default()
    assert settings.paths.call_logs_dir is None


def test_load_settings_requires_existing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "missing.yaml")


def test_build_provider_wires_settings(tmp_path: Path) -> None:
    settings = Settings.default()
    settings.provider.session_id = "wired"
    settings.provider.reject_duplicate_types = True
    settings.paths.call_logs_dir = str(tmp_path / "calls")

    provider = build_provider(settings)

    assert provider.session_id == "wired"
    assert isinstance(provider.logger, JSONLCallLogger)
    provider.expect_type_query("content://c/1", "vnd.a")
    with pytest.raises(InvalidRegistrationError):
        provider.expect_type_query("content://c/1", "vnd.b")


def test_build_provider_without_call_logs() -> None:
    provider = build_provider(Settings.default())

    assert provider.logger is None
