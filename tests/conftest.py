"""Shared fixtures for the prompt batch test suite."""

from collections.abc import Iterator

import pytest
import structlog

from prompt_batch.dispatch.metrics import DispatchMetrics


_ENV_VARS = ("CLAUDE_API_KEY", "CLAUDE_API_URL", "MODEL", "PROMPT_KEY", "TIMEOUT")


@pytest.fixture(autouse=True)
def _isolate_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory
) -> Iterator[None]:
    """Keep real credentials and .env files out of every test."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path_factory.mktemp("cwd"))
    DispatchMetrics.reset()
    yield
    DispatchMetrics.reset()
    structlog.reset_defaults()
