"""Batch orchestration over a directory of prompt files."""

from prompt_batch.orchestrator.errors import DiscoveryError
from prompt_batch.orchestrator.runner import (
    BatchResult,
    BatchRunner,
    SourceOutcome,
    SourceStatus,
    discover_prompt_files,
)


__all__ = [
    "BatchResult",
    "BatchRunner",
    "DiscoveryError",
    "SourceOutcome",
    "SourceStatus",
    "discover_prompt_files",
]
