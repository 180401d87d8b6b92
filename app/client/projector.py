"""Client-side view state derived from the live booking feed.

The view is a pure function of the booking records the feed delivers. The
request-level ``loading`` flag is carried along for spinner display only.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from enum import Enum

from app.core.permissions import UserRole
from app.domain.booking_state import CANCELLED, COMPLETED, PENDING
from app.realtime.feed import BookingFeed, BookingQuery, Subscription
from app.schemas.booking import BookingResponse

logger = logging.getLogger(__name__)

PROJECTION_CLOSED_STATUSES = frozenset({COMPLETED, CANCELLED})


class View(str, Enum):
    AUTH = "auth"
    HOME = "home"
    STAFF_DASH = "staff-dash"
    ACTIVE_JOB = "active-job"


@dataclass(frozen=True)
class ViewState:
    view: View
    active_booking: BookingResponse | None = None
    queue: tuple[BookingResponse, ...] = field(default_factory=tuple)
    loading: bool = False


def _is_active_for(uid: str, role: UserRole, booking: BookingResponse) -> bool:
    if booking.status in PROJECTION_CLOSED_STATUSES:
        return False
    if role == UserRole.STAFF:
        return booking.assigned_staff_id == uid
    return booking.client_uid == uid


def project(
    uid: str | None,
    role: UserRole | None,
    bookings: Iterable[BookingResponse],
    loading: bool = False,
) -> ViewState:
    """Compute the view state for an identity from a set of booking records."""
    if uid is None or role is None:
        return ViewState(view=View.AUTH, loading=loading)

    bookings = list(bookings)
    active = [b for b in bookings if _is_active_for(uid, role, b)]
    active_booking = max(active, key=lambda b: b.updated_at, default=None)

    queue: tuple[BookingResponse, ...] = ()
    if role == UserRole.STAFF:
        queue = tuple(
            sorted(
                (b for b in bookings if b.status == PENDING),
                key=lambda b: b.date_time,
            )
        )

    if active_booking is not None:
        view = View.ACTIVE_JOB
    elif role == UserRole.STAFF:
        view = View.STAFF_DASH
    else:
        view = View.HOME

    return ViewState(view=view, active_booking=active_booking, queue=queue, loading=loading)


class ViewStateProjector:
    """Keeps a ``ViewState`` current by subscribing to the booking feed.

    Customers subscribe to their own bookings. Staff subscribe to bookings
    they are the staff party of, plus the pending queue.
    """

    def __init__(
        self,
        uid: str | None,
        role: UserRole | None,
        feed: BookingFeed,
        on_change: Callable[[ViewState], None] | None = None,
    ):
        self.uid = uid
        self.role = role
        self.feed = feed
        self.on_change = on_change
        self._results: dict[str, list[BookingResponse]] = {}
        self._subscriptions: list[Subscription] = []
        self._state = project(uid, role, ())

    @property
    def state(self) -> ViewState:
        return self._state

    def start(self) -> None:
        if self._subscriptions or self.uid is None or self.role is None:
            return

        if self.role == UserRole.STAFF:
            queries = {
                "assigned": BookingQuery(staff_uid=self.uid),
                "queue": BookingQuery(statuses=frozenset({PENDING})),
            }
        else:
            queries = {"own": BookingQuery(client_uid=self.uid)}

        for name, query in queries.items():
            self._subscriptions.append(
                self.feed.subscribe(query, self._make_callback(name))
            )

    def stop(self) -> None:
        for subscription in self._subscriptions:
            subscription.cancel()
        self._subscriptions.clear()
        self._results.clear()

    def set_loading(self, loading: bool) -> None:
        if loading != self._state.loading:
            self._emit(replace(self._state, loading=loading))

    def _make_callback(self, name: str) -> Callable[[list[BookingResponse]], None]:
        def callback(bookings: list[BookingResponse]) -> None:
            self._results[name] = bookings
            self._recompute()

        return callback

    def _recompute(self) -> None:
        merged: dict[str, BookingResponse] = {}
        for bookings in self._results.values():
            for booking in bookings:
                seen = merged.get(booking.id)
                if seen is None or booking.updated_at >= seen.updated_at:
                    merged[booking.id] = booking
        self._emit(project(self.uid, self.role, merged.values(), loading=self._state.loading))

    def _emit(self, state: ViewState) -> None:
        self._state = state
        if self.on_change is not None:
            self.on_change(state)
