"""pytest plugin exposing a ``mock_provider`` fixture.

Enable it from a ``conftest.py``::

    pytest_plugins = ["provider_double.integrations.pytest_plugin"]

Verification runs as part of the test's call phase, right after a test body
that passed, so an expectation left unused is reported as a test failure.
A body that already failed is not verified.
"""

from __future__ import annotations

from collections.abc import Generator, Iterator

import pytest

from provider_double.core.config import Settings
from provider_double.core.dependencies import build_provider
from provider_double.integrations.mock_content_provider import MockContentProvider

_PROVIDER_KEY = pytest.StashKey[MockContentProvider]()


@pytest.hookimpl(wrapper=True)
def pytest_runtest_call(item: pytest.Item) -> Generator[None, object, object]:
    result = yield
    provider = item.stash.get(_PROVIDER_KEY, None)
    if provider is not None:
        provider.verify()
    return result


@pytest.fixture()
def mock_provider(request: pytest.FixtureRequest) -> Iterator[MockContentProvider]:
    provider = build_provider(Settings.default())
    request.node.stash[_PROVIDER_KEY] = provider
    yield provider
    del request.node.stash[_PROVIDER_KEY]
    provider.reset()
