"""Test doubles for HTTP transport and configuration."""

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

import httpx

from prompt_batch.config.models import RunConfig


API_URL = "https://api.example.test/v1/complete"


def make_config(tmp_path: Path, **overrides: object) -> RunConfig:
    """Create a run configuration rooted in ``tmp_path``."""
    values: dict[str, object] = {
        "prompts_dir": tmp_path / "prompts",
        "output_dir": tmp_path / "outputs",
        "api_key": "sk-test-key",
        "api_url": API_URL,
        "model": "claude-2",
        "prompt_key": "input",
        "timeout_seconds": 5.0,
    }
    values.update(overrides)
    return RunConfig(**values)  # type: ignore[arg-type]


@dataclass
class RecordingTransport:
    """Mock endpoint that replays scripted responses and records requests.

    Each script entry is either an ``httpx.Response`` or an exception
    instance to raise. The last entry repeats once the script runs out.
    """

    script: list[httpx.Response | Exception]
    requests: list[httpx.Request] = field(default_factory=list)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        index = min(len(self.requests), len(self.script)) - 1
        entry = self.script[index]
        if isinstance(entry, Exception):
            raise entry
        # Fresh copy so a scripted response can be served more than once
        return httpx.Response(
            entry.status_code, headers=entry.headers, content=entry.content
        )

    def client(self) -> httpx.Client:
        """Build an httpx client backed by this transport."""
        return httpx.Client(transport=httpx.MockTransport(self))


def always(body: str, status_code: int = 200) -> RecordingTransport:
    """Endpoint that always answers with the same body."""
    return RecordingTransport(script=[httpx.Response(status_code, text=body)])


def recording_sleeper() -> tuple[list[float], Callable[[float], None]]:
    """Sleeper that records requested delays instead of sleeping."""
    delays: list[float] = []
    return delays, delays.append
