"""Data models for request dispatch."""

from enum import Enum
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from prompt_batch.dispatch.state_machine import DispatchState


class SuccessMode(str, Enum):
    """How a response is judged successful.

    - NON_EMPTY: any non-empty body, whatever the status code
    - STRICT: non-empty body and a 2xx status code
    """

    NON_EMPTY = "NON_EMPTY"
    STRICT = "STRICT"


class AttemptOutcome(str, Enum):
    """Classification of a single HTTP exchange.

    - SUCCESS: usable response body
    - EMPTY_RESPONSE: request completed but the body was empty
    - TRANSPORT_ERROR: connection failure, timeout or other transport error
    - HTTP_ERROR: non-2xx status in strict mode
    """

    SUCCESS = "SUCCESS"
    EMPTY_RESPONSE = "EMPTY_RESPONSE"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    HTTP_ERROR = "HTTP_ERROR"


class RetryPolicy(BaseModel):
    """Configuration for retry behavior.

    A request is attempted at most ``max_retries + 1`` times. After failed
    attempt ``n`` (1-based) the dispatcher sleeps ``backoff_base ** n``
    seconds if attempts remain. There is no jitter.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_retries: Annotated[int, Field(ge=0, le=20)] = 3
    backoff_base: Annotated[float, Field(ge=0.0, le=60.0)] = 2.0

    @property
    def max_attempts(self) -> int:
        """Total attempts including the first one."""
        return self.max_retries + 1

    def has_attempts_left(self, attempt: int) -> bool:
        """Check if another attempt may follow attempt ``attempt`` (1-based)."""
        return attempt <= self.max_retries

    def get_delay_seconds(self, attempt: int) -> float:
        """Backoff delay after failed attempt ``attempt`` (1-based)."""
        return float(self.backoff_base**attempt)


class DispatchAttempt(BaseModel):
    """Record of one HTTP exchange."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    attempt: int = Field(ge=1)
    outcome: AttemptOutcome
    status_code: int | None = None
    delay_seconds: float = Field(
        default=0.0, ge=0.0, description="Backoff slept after this attempt"
    )
    error: str | None = None


class DispatchResult(BaseModel):
    """Final artifact of dispatching one prompt source."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    output_path: Path
    state: DispatchState
    attempts: list[DispatchAttempt] = Field(default_factory=list)
    content: bytes

    @property
    def success(self) -> bool:
        """Check if a response body was written."""
        return self.state == DispatchState.SUCCEEDED

    @property
    def attempt_count(self) -> int:
        """Number of HTTP exchanges made."""
        return len(self.attempts)
