"""Utilities for loading provider double settings from YAML configuration files."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


@dataclass(slots=True)
class ProviderSettings:
    session_id: str = "default"
    reject_duplicate_types: bool = False


@dataclass(slots=True)
class PathsSettings:
    call_logs_dir: str | None = None
    fixtures_dir: str | None = None

    def resolve_fixtures_dir(self) -> Path:
        return Path(self.fixtures_dir or "assets/fixtures").expanduser()


@dataclass(slots=True)
class Settings:
    provider: ProviderSettings = field(default_factory=ProviderSettings)
    paths: PathsSettings = field(default_factory=PathsSettings)

    @classmethod
    def default(cls) -> Settings:
        return cls()


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        payload = yaml.safe_load(handle) or {}
    if not isinstance(payload, dict):
        raise ValueError(f"Configuration file {path} must contain a mapping")
    return payload


def load_settings(path: str | Path) -> Settings:
    """Read configuration from *path* and return structured settings."""

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")
    raw = _load_yaml(config_path)

    provider_raw = raw.get("provider") or {}
    provider = ProviderSettings(
        session_id=str(provider_raw.get("session_id", "default")),
        reject_duplicate_types=bool(provider_raw.get("reject_duplicate_types", False)),
    )

    paths_raw = raw.get("paths") or {}
    call_logs_dir = paths_raw.get("call_logs_dir")
    fixtures_dir = paths_raw.get("fixtures_dir")
    paths = PathsSettings(
        call_logs_dir=str(call_logs_dir) if call_logs_dir else None,
        fixtures_dir=str(fixtures_dir) if fixtures_dir else None,
    )

    return Settings(provider=provider, paths=paths)
