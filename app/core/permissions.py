"""Role and booking-party access rules."""

from enum import Enum
from typing import TYPE_CHECKING

from app.core.exceptions import AuthorizationError
from app.domain.booking_state import BookingParty

if TYPE_CHECKING:
    from app.models.booking import Booking


class UserRole(str, Enum):
    """User roles in the system."""

    CUSTOMER = "customer"
    STAFF = "staff"


def staff_uid(booking: "Booking") -> str | None:
    """Staff party of a booking: the assigned staff once bound, else the requested stylist."""
    return booking.assigned_staff_id or booking.stylist_uid


def resolve_party(booking: "Booking", uid: str) -> BookingParty | None:
    if uid == booking.client_uid:
        return BookingParty.CLIENT
    if uid == staff_uid(booking):
        return BookingParty.STAFF
    return None


def assert_booking_party(booking: "Booking", uid: str, action: str = "access") -> BookingParty:
    """Return the caller's party or deny anyone who is neither client nor staff."""
    party = resolve_party(booking, uid)
    if party is None:
        raise AuthorizationError(f"Not authorized to {action} this booking")
    return party


def assert_booking_owner(booking: "Booking", uid: str, action: str = "pay for") -> None:
    if uid != booking.client_uid:
        raise AuthorizationError(f"Not authorized to {action} this booking")


def assert_same_user(caller_uid: str, uid: str) -> None:
    if caller_uid != uid:
        raise AuthorizationError("Can only view your own bookings")
