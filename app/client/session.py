"""Client session: write intents plus a live view state."""

from collections.abc import Awaitable, Callable
from typing import TypeVar

from app.client.api_client import RoomApiClient
from app.client.projector import ViewState, ViewStateProjector
from app.core.permissions import UserRole
from app.domain.booking_state import CANCELLED
from app.realtime.feed import BookingFeed
from app.schemas.booking import BookingResponse

T = TypeVar("T")


class ClientSession:
    """One signed-in user.

    Writes go through the API client. The view never changes as a direct
    result of a write: it follows the feed, so the screen only moves once
    the server has committed the new state.
    """

    def __init__(
        self,
        uid: str | None,
        role: UserRole | None,
        api: RoomApiClient,
        feed: BookingFeed,
        on_change: Callable[[ViewState], None] | None = None,
    ):
        self.uid = uid
        self.role = role
        self.api = api
        self.projector = ViewStateProjector(uid, role, feed, on_change)

    @property
    def state(self) -> ViewState:
        return self.projector.state

    def start(self) -> None:
        self.projector.start()

    def stop(self) -> None:
        self.projector.stop()

    async def _run(self, intent: Callable[[], Awaitable[T]]) -> T:
        self.projector.set_loading(True)
        try:
            return await intent()
        finally:
            self.projector.set_loading(False)

    async def request_service(
        self,
        stylist_uid: str,
        service_id: str,
        date_time: str,
        **extra,
    ) -> BookingResponse:
        return await self._run(
            lambda: self.api.create_booking(stylist_uid, service_id, date_time, **extra)
        )

    async def accept_job(self, booking_id: str) -> BookingResponse:
        return await self._run(lambda: self.api.accept_booking(booking_id))

    async def advance_status(self, booking_id: str, status: str) -> str:
        return await self._run(lambda: self.api.update_status(booking_id, status))

    async def cancel_request(self, booking_id: str) -> str:
        return await self._run(lambda: self.api.update_status(booking_id, CANCELLED))

    async def pay(self, booking_id: str) -> str:
        """Create a payment intent and return its client secret."""
        return await self._run(lambda: self.api.create_payment_intent(booking_id))
