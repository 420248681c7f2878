"""Unit tests for the per-request state machine."""

import pytest

from apiflux.controller.state_machine import (
    RequestState,
    RequestStateMachine,
    RequestStateTransitionError,
)


class TestRequestStateMachine:
    """Tests for RequestStateMachine transitions."""

    def test_initial_state(self) -> None:
        """Test that a new machine is idle before any attempt."""
        machine = RequestStateMachine("users.detail")

        assert machine.state == RequestState.IDLE
        assert machine.attempt == -1
        assert not machine.is_terminal()

    def test_live_path_with_retries(self) -> None:
        """Test a live request that succeeds on its third attempt."""
        machine = RequestStateMachine("users.detail")

        machine.transition(RequestState.ENVIRONMENT_CHECK)
        machine.transition(RequestState.AUTH_GATE)
        for _ in range(2):
            machine.transition(RequestState.ATTEMPT)
            machine.transition(RequestState.RETRY_DECISION)
        machine.transition(RequestState.ATTEMPT)
        machine.transition(RequestState.SUCCESS)

        assert machine.attempt == 2
        assert machine.is_terminal()

    def test_mock_path(self) -> None:
        """Test the sample-data path."""
        machine = RequestStateMachine("users.detail")

        machine.transition(RequestState.ENVIRONMENT_CHECK)
        machine.transition(RequestState.MOCK)
        machine.transition(RequestState.SUCCESS)

        assert machine.attempt == -1

    def test_mock_path_cannot_attempt(self) -> None:
        """Test that the sample path never reaches the transport."""
        machine = RequestStateMachine("users.detail")
        machine.transition(RequestState.ENVIRONMENT_CHECK)
        machine.transition(RequestState.MOCK)

        assert not machine.can_transition(RequestState.ATTEMPT)
        with pytest.raises(RequestStateTransitionError):
            machine.transition(RequestState.ATTEMPT)

    def test_terminal_states_are_final(self) -> None:
        """Test that nothing follows FAILURE."""
        machine = RequestStateMachine("users.detail")
        machine.transition(RequestState.FAILURE)

        with pytest.raises(RequestStateTransitionError) as exc_info:
            machine.transition(RequestState.ENVIRONMENT_CHECK)

        assert exc_info.value.from_state == RequestState.FAILURE
        assert exc_info.value.to_state == RequestState.ENVIRONMENT_CHECK
        assert "failure -> environment_check" in str(exc_info.value)

    def test_success_requires_attempt(self) -> None:
        """Test that the auth gate cannot succeed without an attempt."""
        machine = RequestStateMachine("users.detail")
        machine.transition(RequestState.ENVIRONMENT_CHECK)
        machine.transition(RequestState.AUTH_GATE)

        assert not machine.can_transition(RequestState.SUCCESS)
