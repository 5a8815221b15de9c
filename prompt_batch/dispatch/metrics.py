"""Dispatch metrics collection."""

import threading
from dataclasses import dataclass, field
from typing import ClassVar

from prompt_batch.dispatch.models import AttemptOutcome


@dataclass
class DispatchMetrics:
    """Process-wide counters for request dispatch.

    Collects requests_total, retries_total, succeeded_total,
    exhausted_total and bytes_written_total. Safe to update from
    worker threads.
    """

    _requests_total: int = 0
    _retries_total: int = 0
    _succeeded_total: int = 0
    _exhausted_total: int = 0
    _bytes_written_total: int = 0
    _outcomes: dict[str, int] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    _instance: ClassVar["DispatchMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "DispatchMetrics":
        """Get or create the singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance for testing."""
        cls._instance = None

    def record_attempt(self, outcome: AttemptOutcome) -> None:
        """Record one HTTP exchange and its outcome."""
        with self._lock:
            self._requests_total += 1
            self._outcomes[outcome.value] = self._outcomes.get(outcome.value, 0) + 1

    def record_retry(self) -> None:
        """Record a scheduled retry."""
        with self._lock:
            self._retries_total += 1

    def record_success(self, bytes_written: int) -> None:
        """Record a persisted response."""
        with self._lock:
            self._succeeded_total += 1
            self._bytes_written_total += bytes_written

    def record_exhausted(self) -> None:
        """Record a source that ran out of attempts."""
        with self._lock:
            self._exhausted_total += 1

    @property
    def requests_total(self) -> int:
        """Get total HTTP exchanges."""
        return self._requests_total

    @property
    def retries_total(self) -> int:
        """Get total retries."""
        return self._retries_total

    @property
    def succeeded_total(self) -> int:
        """Get total successful sources."""
        return self._succeeded_total

    @property
    def exhausted_total(self) -> int:
        """Get total exhausted sources."""
        return self._exhausted_total

    def get_outcome_count(self, outcome: AttemptOutcome) -> int:
        """Get the number of attempts with a given outcome."""
        return self._outcomes.get(outcome.value, 0)

    def to_dict(self) -> dict[str, int | dict[str, int]]:
        """Export metrics as a dictionary."""
        return {
            "requests_total": self._requests_total,
            "retries_total": self._retries_total,
            "succeeded_total": self._succeeded_total,
            "exhausted_total": self._exhausted_total,
            "bytes_written_total": self._bytes_written_total,
            "outcomes": dict(self._outcomes),
        }
