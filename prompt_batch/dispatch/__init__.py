"""Request dispatch with retries and exponential backoff."""

from prompt_batch.dispatch.client import EXHAUSTED_MARKER, PromptDispatcher
from prompt_batch.dispatch.metrics import DispatchMetrics
from prompt_batch.dispatch.models import (
    AttemptOutcome,
    DispatchAttempt,
    DispatchResult,
    RetryPolicy,
    SuccessMode,
)
from prompt_batch.dispatch.state_machine import (
    DispatchState,
    DispatchStateError,
    DispatchStateMachine,
)


__all__ = [
    "EXHAUSTED_MARKER",
    "AttemptOutcome",
    "DispatchAttempt",
    "DispatchMetrics",
    "DispatchResult",
    "DispatchState",
    "DispatchStateError",
    "DispatchStateMachine",
    "PromptDispatcher",
    "RetryPolicy",
    "SuccessMode",
]
