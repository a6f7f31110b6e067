"""Factory helpers for constructing a provider double from settings."""

from __future__ import annotations

from pathlib import Path

from provider_double.core.config import Settings
from provider_double.core.observability import CallObservationSink, JSONLCallLogger
from provider_double.core.provider import FailureHandler
from provider_double.core.store import ExpectationStore
from provider_double.integrations.mock_content_provider import MockContentProvider


def build_provider(
    settings: Settings,
    *,
    failure_handler: FailureHandler | None = None,
    logger: CallObservationSink | None = None,
) -> MockContentProvider:
    """Create an empty provider double configured by *settings*."""

    store = ExpectationStore(reject_duplicate_types=settings.provider.reject_duplicate_types)
    return MockContentProvider(
        store=store,
        failure_handler=failure_handler,
        logger=logger if logger is not None else _build_call_logger(settings),
        session_id=settings.provider.session_id,
    )


def _build_call_logger(settings: Settings) -> CallObservationSink | None:
    if not settings.paths.call_logs_dir:
        return None
    path = Path(settings.paths.call_logs_dir).expanduser()
    path.mkdir(parents=True, exist_ok=True)
    return JSONLCallLogger(base_dir=path)
