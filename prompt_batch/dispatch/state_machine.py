"""Dispatch lifecycle state machine."""

from enum import Enum, auto
from typing import ClassVar

import structlog

from prompt_batch.config.constants import COMPONENT_DISPATCH


logger = structlog.get_logger()


class DispatchState(Enum):
    """Dispatch lifecycle states.

    State transitions:
        PENDING -> ATTEMPTING: First request issued
        ATTEMPTING -> ATTEMPTING: Failed attempt, retrying after backoff
        ATTEMPTING -> SUCCEEDED: Usable response persisted
        ATTEMPTING -> EXHAUSTED: Retry budget spent, failure marker persisted
    """

    PENDING = auto()
    ATTEMPTING = auto()
    SUCCEEDED = auto()
    EXHAUSTED = auto()


class DispatchStateError(Exception):
    """Raised when an invalid dispatch state transition is attempted."""

    def __init__(self, from_state: DispatchState, to_state: DispatchState) -> None:
        """Initialize the error.

        Args:
            from_state: The current state.
            to_state: The attempted target state.
        """
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid dispatch state transition: {from_state.name} -> {to_state.name}"
        )


class DispatchStateMachine:
    """State machine for a single prompt source's dispatch.

    Counts attempts as it enters ATTEMPTING.
    """

    VALID_TRANSITIONS: ClassVar[dict[DispatchState, set[DispatchState]]] = {
        DispatchState.PENDING: {DispatchState.ATTEMPTING},
        DispatchState.ATTEMPTING: {
            DispatchState.ATTEMPTING,
            DispatchState.SUCCEEDED,
            DispatchState.EXHAUSTED,
        },
        DispatchState.SUCCEEDED: set(),  # Terminal state
        DispatchState.EXHAUSTED: set(),  # Terminal state
    }

    def __init__(self, source_label: str) -> None:
        """Initialize the state machine in PENDING state.

        Args:
            source_label: Identity of the prompt source for logging.
        """
        self._state = DispatchState.PENDING
        self._attempt = 0
        self._log = logger.bind(component=COMPONENT_DISPATCH, source=source_label)

    @property
    def state(self) -> DispatchState:
        """Get the current state."""
        return self._state

    @property
    def attempt(self) -> int:
        """Get the current 1-based attempt number, 0 before the first."""
        return self._attempt

    def can_transition(self, to_state: DispatchState) -> bool:
        """Check if a transition to the given state is valid."""
        return to_state in self.VALID_TRANSITIONS.get(self._state, set())

    def transition(self, to_state: DispatchState) -> None:
        """Transition to a new state.

        Args:
            to_state: The target state.

        Raises:
            DispatchStateError: If the transition is invalid.
        """
        if not self.can_transition(to_state):
            self._log.error(
                "invariant_violation",
                error_type="illegal_state_transition",
                from_state=self._state.name,
                to_state=to_state.name,
            )
            raise DispatchStateError(self._state, to_state)

        old_state = self._state
        self._state = to_state
        if to_state == DispatchState.ATTEMPTING:
            self._attempt += 1
        self._log.debug(
            "dispatch_state_transition",
            from_state=old_state.name,
            to_state=to_state.name,
            attempt=self._attempt,
        )

    def to_attempting(self) -> None:
        """Transition to ATTEMPTING, starting the next attempt."""
        self.transition(DispatchState.ATTEMPTING)

    def to_succeeded(self) -> None:
        """Transition to SUCCEEDED state."""
        self.transition(DispatchState.SUCCEEDED)

    def to_exhausted(self) -> None:
        """Transition to EXHAUSTED state."""
        self.transition(DispatchState.EXHAUSTED)

    def is_terminal(self) -> bool:
        """Check if the current state is terminal."""
        return self._state in (DispatchState.SUCCEEDED, DispatchState.EXHAUSTED)
