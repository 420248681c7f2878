"""Per-request state machine for the request controller."""

from enum import Enum

import structlog


logger = structlog.get_logger()


class RequestState(Enum):
    """States one request call moves through.

    State transitions:
    IDLE -> ENVIRONMENT_CHECK -> AUTH_GATE -> ATTEMPT -> SUCCESS
    ENVIRONMENT_CHECK -> MOCK -> SUCCESS
    ATTEMPT -> RETRY_DECISION -> ATTEMPT (bounded by the retry budget)
    Any non-terminal state can transition to FAILURE.
    """

    IDLE = "idle"
    ENVIRONMENT_CHECK = "environment_check"
    MOCK = "mock"
    AUTH_GATE = "auth_gate"
    ATTEMPT = "attempt"
    RETRY_DECISION = "retry_decision"
    SUCCESS = "success"
    FAILURE = "failure"


# Valid state transitions (from_state -> [to_states])
_VALID_TRANSITIONS: dict[RequestState, list[RequestState]] = {
    RequestState.IDLE: [RequestState.ENVIRONMENT_CHECK, RequestState.FAILURE],
    RequestState.ENVIRONMENT_CHECK: [
        RequestState.MOCK,
        RequestState.AUTH_GATE,
        RequestState.FAILURE,
    ],
    RequestState.MOCK: [RequestState.SUCCESS, RequestState.FAILURE],
    RequestState.AUTH_GATE: [RequestState.ATTEMPT, RequestState.FAILURE],
    RequestState.ATTEMPT: [
        RequestState.SUCCESS,
        RequestState.RETRY_DECISION,
        RequestState.FAILURE,
    ],
    RequestState.RETRY_DECISION: [RequestState.ATTEMPT, RequestState.FAILURE],
    RequestState.SUCCESS: [],
    RequestState.FAILURE: [],
}


class RequestStateTransitionError(Exception):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_state: RequestState, to_state: RequestState) -> None:
        """Initialize the error.

        Args:
            from_state: Current state.
            to_state: Attempted target state.
        """
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid request state transition: {from_state.value} -> {to_state.value}"
        )


class RequestStateMachine:
    """Tracks one request call from IDLE to SUCCESS or FAILURE.

    Created fresh for every call, so nothing survives a finished request.
    """

    def __init__(self, endpoint_name: str) -> None:
        """Initialize the state machine.

        Args:
            endpoint_name: Endpoint identity for logging.
        """
        self._state = RequestState.IDLE
        self._attempt = -1
        self._log = logger.bind(component="controller", endpoint=endpoint_name)

    @property
    def state(self) -> RequestState:
        """Get the current state."""
        return self._state

    @property
    def attempt(self) -> int:
        """Get the current 0-based attempt index (-1 before the first)."""
        return self._attempt

    def is_terminal(self) -> bool:
        """Check if in a terminal state (SUCCESS or FAILURE)."""
        return self._state in (RequestState.SUCCESS, RequestState.FAILURE)

    def can_transition(self, to_state: RequestState) -> bool:
        """Check if a transition to the given state is valid.

        Args:
            to_state: Target state.

        Returns:
            True if transition is valid.
        """
        return to_state in _VALID_TRANSITIONS.get(self._state, [])

    def transition(self, to_state: RequestState) -> None:
        """Transition to a new state.

        Entering ATTEMPT advances the attempt index.

        Args:
            to_state: Target state.

        Raises:
            RequestStateTransitionError: If transition is invalid.
        """
        if not self.can_transition(to_state):
            raise RequestStateTransitionError(self._state, to_state)

        old_state = self._state
        self._state = to_state
        if to_state == RequestState.ATTEMPT:
            self._attempt += 1

        self._log.debug(
            "request_state_transition",
            from_state=old_state.value,
            to_state=to_state.value,
            attempt=self._attempt,
        )
