"""Booking state machine.

States: pending → accepted → in_progress → completed, with rejected and
cancelled as alternate terminal branches.
"""

from enum import Enum

from app.core.exceptions import AuthorizationError, InvalidTransition, ValidationError


class BookingParty(str, Enum):
    """Which side of a booking an actor is on."""

    CLIENT = "client"
    STAFF = "staff"


PENDING = "pending"
ACCEPTED = "accepted"
IN_PROGRESS = "in_progress"
COMPLETED = "completed"
REJECTED = "rejected"
CANCELLED = "cancelled"

BOOKING_STATUSES = (PENDING, ACCEPTED, IN_PROGRESS, REJECTED, COMPLETED, CANCELLED)

TERMINAL_STATUSES = frozenset({COMPLETED, REJECTED, CANCELLED})

# (current, target) -> party allowed to perform it
TRANSITION_ACTORS: dict[tuple[str, str], BookingParty] = {
    (PENDING, ACCEPTED): BookingParty.STAFF,
    (PENDING, REJECTED): BookingParty.STAFF,
    (PENDING, CANCELLED): BookingParty.CLIENT,
    (ACCEPTED, CANCELLED): BookingParty.CLIENT,
    (ACCEPTED, IN_PROGRESS): BookingParty.STAFF,
    (IN_PROGRESS, COMPLETED): BookingParty.STAFF,
}

BOOKING_TRANSITIONS: dict[str, set[str]] = {status: set() for status in BOOKING_STATUSES}
for _current, _target in TRANSITION_ACTORS:
    BOOKING_TRANSITIONS[_current].add(_target)


def assert_valid_status(status: str) -> None:
    if status not in BOOKING_STATUSES:
        raise ValidationError(
            f"Invalid status. Must be one of: {', '.join(BOOKING_STATUSES)}"
        )


def assert_booking_transition(current: str, target: str) -> None:
    allowed = BOOKING_TRANSITIONS.get(current, set())
    if target not in allowed:
        raise InvalidTransition(current, target)


def assert_transition_actor(current: str, target: str, party: BookingParty) -> None:
    """Check that ``party`` is the side allowed to move ``current`` to ``target``."""
    assert_booking_transition(current, target)
    required = TRANSITION_ACTORS[(current, target)]
    if party != required:
        raise AuthorizationError(
            f"Only the {required.value} can move a booking from {current} to {target}"
        )


def is_terminal(status: str) -> bool:
    return status in TERMINAL_STATUSES
