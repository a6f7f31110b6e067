"""Sinks that record every call dispatched to the provider double.

Each event becomes a ``CallRecord``: a per-session sequence number, the event
name, an ``ok``/``failed`` outcome derived from that name, and the call
arguments exactly as received. ``None`` values are kept because a ``null``
argument list and an empty one are different calls.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9_.-]+")


class CallObservationSink(Protocol):
    """Receives one event per dispatched call or verification pass."""

    def log_event(self, session_id: str, event: str, payload: dict[str, Any]) -> None:  # pragma: no cover - interface
        ...


def call_log_name(session_id: str) -> str:
    """Return the JSONL file name used for *session_id*."""

    stem = _UNSAFE_NAME_CHARS.sub("_", session_id).strip("._")
    return f"calls-{stem or 'default'}.jsonl"


@dataclass(slots=True)
class CallRecord:
    session_id: str
    sequence: int
    event: str
    call: dict[str, Any]
    recorded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def outcome(self) -> str:
        return "failed" if self.event.endswith("_failed") else "ok"

    def to_dict(self) -> dict[str, Any]:
        return {
            "seq": self.sequence,
            "session_id": self.session_id,
            "event": self.event,
            "outcome": self.outcome,
            "recorded_at": self.recorded_at.isoformat(timespec="milliseconds"),
            "call": dict(self.call),
        }


@dataclass(slots=True)
class JSONLCallLogger(CallObservationSink):
    """Appends call records to ``calls-<session>.jsonl`` under *base_dir*.

    Sequence numbers restart at 1 for every session this logger sees, so a
    file shared by several runs still reads in call order within each run.
    """

    base_dir: Path
    _sequences: dict[str, int] = field(default_factory=dict, init=False, repr=False)

    def path_for(self, session_id: str) -> Path:
        return self.base_dir.expanduser() / call_log_name(session_id)

    def log_event(self, session_id: str, event: str, payload: dict[str, Any]) -> None:  # type: ignore[override]
        sequence = self._sequences.get(session_id, 0) + 1
        self._sequences[session_id] = sequence
        record = CallRecord(session_id=session_id, sequence=sequence, event=event, call=payload)

        target = self.path_for(session_id)
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("a", encoding="utf-8") as handle:
            json.dump(record.to_dict(), handle, ensure_ascii=False, default=str)
            handle.write("\n")


@dataclass(slots=True)
class RecordingCallLogger(CallObservationSink):
    """Keeps records in memory for tests that inspect the call log."""

    records: list[CallRecord] = field(default_factory=list)

    def log_event(self, session_id: str, event: str, payload: dict[str, Any]) -> None:  # type: ignore[override]
        self.records.append(
            CallRecord(session_id=session_id, sequence=len(self.records) + 1, event=event, call=dict(payload))
        )

    def names(self) -> list[str]:
        return [record.event for record in self.records]
