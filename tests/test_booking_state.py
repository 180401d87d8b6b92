"""Tests for the booking state machine."""

import pytest

from app.core.exceptions import AuthorizationError, InvalidTransition, ValidationError
from app.domain import booking_state
from app.domain.booking_state import BookingParty


def test_happy_path_transitions_are_allowed():
    path = [
        booking_state.PENDING,
        booking_state.ACCEPTED,
        booking_state.IN_PROGRESS,
        booking_state.COMPLETED,
    ]
    for current, target in zip(path, path[1:]):
        booking_state.assert_booking_transition(current, target)


@pytest.mark.parametrize("status", sorted(booking_state.TERMINAL_STATUSES))
def test_terminal_states_have_no_exits(status):
    assert booking_state.BOOKING_TRANSITIONS[status] == set()
    with pytest.raises(InvalidTransition) as exc_info:
        booking_state.assert_booking_transition(status, booking_state.ACCEPTED)
    assert exc_info.value.status_code == 409


def test_cannot_skip_in_progress():
    with pytest.raises(InvalidTransition):
        booking_state.assert_booking_transition(booking_state.ACCEPTED, booking_state.COMPLETED)


def test_in_progress_cannot_be_cancelled():
    with pytest.raises(InvalidTransition):
        booking_state.assert_booking_transition(booking_state.IN_PROGRESS, booking_state.CANCELLED)


def test_unknown_status_is_a_validation_error():
    with pytest.raises(ValidationError) as exc_info:
        booking_state.assert_valid_status("done")
    assert exc_info.value.status_code == 400
    assert "pending" in exc_info.value.detail


def test_only_staff_accepts():
    booking_state.assert_transition_actor(
        booking_state.PENDING, booking_state.ACCEPTED, BookingParty.STAFF
    )
    with pytest.raises(AuthorizationError):
        booking_state.assert_transition_actor(
            booking_state.PENDING, booking_state.ACCEPTED, BookingParty.CLIENT
        )


def test_only_client_cancels():
    booking_state.assert_transition_actor(
        booking_state.ACCEPTED, booking_state.CANCELLED, BookingParty.CLIENT
    )
    with pytest.raises(AuthorizationError):
        booking_state.assert_transition_actor(
            booking_state.ACCEPTED, booking_state.CANCELLED, BookingParty.STAFF
        )


def test_actor_check_reports_illegal_transition_first():
    with pytest.raises(InvalidTransition):
        booking_state.assert_transition_actor(
            booking_state.COMPLETED, booking_state.CANCELLED, BookingParty.CLIENT
        )


def test_is_terminal():
    assert booking_state.is_terminal(booking_state.REJECTED)
    assert not booking_state.is_terminal(booking_state.IN_PROGRESS)
