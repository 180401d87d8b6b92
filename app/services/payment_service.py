"""Payment service.

Creates payment intents for bookings and applies signed gateway callbacks
to the booking's payment status. Callback processing failures are logged
and swallowed so the gateway does not keep retrying.
"""

import logging
from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config import Settings
from app.core.exceptions import ExternalServiceError, NotFoundError, ValidationError
from app.core.permissions import assert_booking_owner, assert_booking_party
from app.domain import booking_state, payment_state
from app.gateways.base import PaymentGateway
from app.models.booking import Booking
from app.realtime.feed import BookingFeed
from app.schemas.booking import BookingResponse

logger = logging.getLogger(__name__)


class InvalidWebhookSignature(Exception):
    """Webhook payload failed signature verification."""


class PaymentService:
    """Service for booking payments."""

    def __init__(
        self,
        session_factory: async_sessionmaker,
        gateway: PaymentGateway,
        feed: BookingFeed,
        settings: Settings,
    ) -> None:
        self._session_factory = session_factory
        self._gateway = gateway
        self._feed = feed
        self._currency = settings.payment_currency

    async def create_payment_intent(self, caller_uid: str, booking_id: str) -> str:
        """Create a gateway payment intent for a booking and return its client secret."""
        async with self._session_factory() as db:
            booking = await self._get_booking(db, booking_id)
            assert_booking_owner(booking, caller_uid)

            if booking.payment_status in (payment_state.PAID, payment_state.REFUNDED):
                raise ValidationError("Booking is already paid")
            if booking.status in (booking_state.CANCELLED, booking_state.REJECTED):
                raise ValidationError(f"Cannot pay for a {booking.status} booking")
            payment_state.assert_payment_transition(
                booking.payment_status, payment_state.REQUIRES_PAYMENT
            )

            amount = round((booking.price or 0) * 100)
            result = await self._gateway.create_intent(
                amount_minor=amount,
                currency=self._currency,
                booking_id=booking.id,
                description=f"Room booking: {booking.service_name or booking.service_id}",
                metadata={
                    "bookingId": booking.id,
                    "clientUid": caller_uid,
                    "serviceName": booking.service_name or "",
                },
            )
            if not result.ok or not result.intent_id:
                raise ExternalServiceError(self._gateway.name.value, result.error)

            booking.payment_intent_id = result.intent_id
            booking.payment_status = payment_state.REQUIRES_PAYMENT
            booking.updated_at = datetime.now(UTC)
            await db.commit()
            # Status may have moved while the gateway call was in flight
            stored = await self._get_booking(db, booking_id)

        logger.info(f"Payment intent {result.intent_id} created for booking {booking_id}")
        self._publish(stored)
        return result.client_secret or ""

    async def get_payment_status(self, caller_uid: str, booking_id: str) -> dict:
        async with self._session_factory() as db:
            booking = await self._get_booking(db, booking_id)
        assert_booking_party(booking, caller_uid, action="view payments for")
        return {
            "payment_status": booking.payment_status or "pending",
            "price": booking.price,
            "payment_intent_id": booking.payment_intent_id,
        }

    async def handle_webhook(self, payload: bytes, signature: str | None) -> None:
        """Verify and apply a gateway callback.

        Raises:
            InvalidWebhookSignature: if the payload cannot be trusted. Any
                failure after verification is logged, not raised.
        """
        event = self._gateway.parse_event(payload, signature)
        if event is None:
            raise InvalidWebhookSignature()

        try:
            await self._apply_event(event)
        except Exception:
            logger.exception(f"Error processing webhook event {event.get('id')}")

    async def _apply_event(self, event: dict) -> None:
        """Process a verified gateway event and update the booking's payment status."""
        event_type = event.get("type")
        target = payment_state.SETTLEMENT_EVENTS.get(event_type)
        if target is None:
            logger.debug(f"Ignoring webhook event type {event_type}")
            return

        data = event["data"]["object"]
        if event_type == "charge.refunded":
            intent_id = data.get("payment_intent")
        else:
            intent_id = data.get("id")
        metadata_booking_id = (data.get("metadata") or {}).get("bookingId")

        async with self._session_factory() as db:
            booking = None
            if intent_id:
                result = await db.execute(
                    select(Booking).where(Booking.payment_intent_id == intent_id)
                )
                booking = result.scalars().first()
            if booking is None and metadata_booking_id:
                booking = await db.get(Booking, metadata_booking_id)
            if booking is None:
                logger.warning(f"No booking for {event_type} (intent {intent_id})")
                return

            current = booking.payment_status
            if payment_state.is_replay(current, target):
                logger.info(f"Replayed {event_type} for booking {booking.id}; already {target}")
                return
            if not payment_state.can_transition_payment(current, target):
                logger.warning(
                    f"Skipping {event_type} for booking {booking.id}: {current} → {target} not allowed"
                )
                return

            now = datetime.now(UTC)
            booking.payment_status = target
            if intent_id and not booking.payment_intent_id:
                booking.payment_intent_id = intent_id
            if target == payment_state.FAILED:
                error = data.get("last_payment_error") or {}
                booking.payment_failure_reason = error.get("message") or "Unknown"
            elif target == payment_state.REFUNDED:
                booking.refunded_at = now
            booking.updated_at = now
            await db.commit()
            stored = await self._get_booking(db, booking.id)

        logger.info(f"Booking {stored.id} payment {current or 'none'} → {target}")
        self._publish(stored)

    async def _get_booking(self, db: AsyncSession, booking_id: str) -> Booking:
        result = await db.execute(
            select(Booking).where(Booking.id == booking_id).execution_options(populate_existing=True)
        )
        booking = result.scalar_one_or_none()
        if not booking:
            raise NotFoundError("Booking", booking_id)
        return booking

    def _publish(self, booking: Booking) -> None:
        self._feed.publish(BookingResponse.model_validate(booking))
