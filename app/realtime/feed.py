"""Live booking feed.

A subscription takes a query and a callback. The callback is invoked with
the full current matching result set right away and again after every
change; the returned handle cancels delivery.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from itertools import count

from app.core import permissions
from app.schemas.booking import BookingResponse

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[list[BookingResponse]], None]


@dataclass(frozen=True)
class BookingQuery:
    """Filter over the booking collection. Empty query matches everything."""

    client_uid: str | None = None
    staff_uid: str | None = None
    statuses: frozenset[str] = field(default_factory=frozenset)

    def matches(self, booking: BookingResponse) -> bool:
        if self.client_uid is not None and booking.client_uid != self.client_uid:
            return False
        if self.staff_uid is not None and self.staff_uid != permissions.staff_uid(booking):
            return False
        if self.statuses and booking.status not in self.statuses:
            return False
        return True


class Subscription:
    """Handle returned by ``BookingFeed.subscribe``."""

    def __init__(self, cancel: Callable[[], None]):
        self._cancel = cancel
        self.active = True

    def cancel(self) -> None:
        if self.active:
            self.active = False
            self._cancel()


class BookingFeed(ABC):
    """Fan-out of booking changes to live subscribers."""

    @abstractmethod
    def subscribe(self, query: BookingQuery, callback: SnapshotCallback) -> Subscription:
        pass

    @abstractmethod
    def publish(self, booking: BookingResponse) -> None:
        """Record a committed booking write and notify matching subscribers."""
        pass


class InMemoryBookingFeed(BookingFeed):
    """Process-local feed holding the latest snapshot of every booking."""

    def __init__(self, bookings: Iterable[BookingResponse] = ()):
        self._bookings: dict[str, BookingResponse] = {b.id: b for b in bookings}
        self._subscribers: dict[int, tuple[BookingQuery, SnapshotCallback]] = {}
        self._ids = count(1)

    def subscribe(self, query: BookingQuery, callback: SnapshotCallback) -> Subscription:
        key = next(self._ids)
        self._subscribers[key] = (query, callback)
        self._deliver(query, callback)
        return Subscription(lambda: self._subscribers.pop(key, None))

    def publish(self, booking: BookingResponse) -> None:
        previous = self._bookings.get(booking.id)
        self._bookings[booking.id] = booking
        for query, callback in list(self._subscribers.values()):
            # A record leaving the result set is also a change for that query
            if query.matches(booking) or (previous is not None and query.matches(previous)):
                self._deliver(query, callback)

    def snapshot(self, query: BookingQuery | None = None) -> list[BookingResponse]:
        query = query or BookingQuery()
        return [b for b in self._bookings.values() if query.matches(b)]

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def _deliver(self, query: BookingQuery, callback: SnapshotCallback) -> None:
        try:
            callback(self.snapshot(query))
        except Exception:
            logger.exception("Booking feed subscriber failed")
