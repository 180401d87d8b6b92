"""Booking lifecycle service.

Every status change is a conditional UPDATE on the row: the WHERE clause
repeats the state the change was validated against, so a concurrent writer
turns into a conflict instead of a lost update.
"""

import logging
from datetime import UTC, datetime

from sqlalchemy import and_, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.exceptions import (
    AuthorizationError,
    BookingAlreadyAccepted,
    ConflictError,
    NotFoundError,
)
from app.core.permissions import (
    UserRole,
    assert_booking_party,
    assert_same_user,
)
from app.domain import booking_state
from app.domain.catalog import get_service
from app.models.booking import Booking
from app.models.user import UserProfile
from app.realtime.feed import BookingFeed
from app.schemas.booking import BookingCreate, BookingResponse
from app.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

# Timestamp column stamped when a booking enters each status
STATUS_TIMESTAMPS = {
    booking_state.ACCEPTED: "accepted_at",
    booking_state.COMPLETED: "completed_at",
    booking_state.CANCELLED: "cancelled_at",
}


class BookingService:
    """Create, read and transition bookings."""

    def __init__(
        self,
        session_factory: async_sessionmaker,
        feed: BookingFeed,
        notifications: NotificationService,
    ) -> None:
        self._session_factory = session_factory
        self._feed = feed
        self._notifications = notifications

    async def create_booking(self, client_uid: str, data: BookingCreate) -> Booking:
        """Create a pending booking and notify the requested stylist."""
        service = get_service(data.service_id)
        service_name = data.service_name or (service.name if service else None)
        price = data.price if data.price is not None else (service.price if service else 0)

        async with self._session_factory() as db:
            profile = await db.get(UserProfile, client_uid)
            booking = Booking(
                client_uid=client_uid,
                stylist_uid=data.stylist_uid,
                service_id=data.service_id,
                service_name=service_name,
                price=price,
                client_notes=data.client_notes or "",
                date_time=data.date_time,
                location=data.location,
                client_name=profile.name if profile else None,
                client_phone=profile.phone if profile else None,
                status=booking_state.PENDING,
            )
            db.add(booking)
            await db.commit()

        logger.info(f"Booking {booking.id} created by {client_uid} for stylist {data.stylist_uid}")
        self._publish(booking)

        try:
            await self._notifications.notify_booking_request(booking)
        except Exception:
            logger.exception(f"Notification send failed for booking {booking.id} (non-critical)")

        return booking

    async def get_booking(self, caller_uid: str, booking_id: str) -> Booking:
        async with self._session_factory() as db:
            booking = await self._load(db, booking_id)
        assert_booking_party(booking, caller_uid, action="view")
        return booking

    async def list_bookings_for_user(self, caller_uid: str, uid: str) -> list[Booking]:
        """Bookings where ``uid`` is the client or the staff party, newest appointment first."""
        assert_same_user(caller_uid, uid)

        async with self._session_factory() as db:
            result = await db.execute(
                select(Booking)
                .where(
                    or_(
                        Booking.client_uid == uid,
                        Booking.assigned_staff_id == uid,
                        and_(Booking.assigned_staff_id.is_(None), Booking.stylist_uid == uid),
                    )
                )
                .order_by(Booking.date_time.desc(), Booking.created_at.desc())
            )
            return list(result.scalars().all())

    async def update_status(self, caller_uid: str, booking_id: str, status: str) -> Booking:
        """Move a booking to ``status`` on behalf of one of its parties."""
        booking_state.assert_valid_status(status)

        async with self._session_factory() as db:
            booking = await self._load(db, booking_id)

        party = assert_booking_party(booking, caller_uid, action="update")

        booking_state.assert_transition_actor(booking.status, status, party)
        if status == booking_state.ACCEPTED:
            return await self._accept(booking, caller_uid)
        return await self._transition(booking, status)

    async def accept_booking(self, caller_uid: str, booking_id: str) -> Booking:
        """Accept a pending booking from the staff queue; first writer wins."""
        async with self._session_factory() as db:
            profile = await db.get(UserProfile, caller_uid)
            if not profile or profile.role != UserRole.STAFF.value:
                raise AuthorizationError("Staff access required")
            booking = await self._load(db, booking_id)

        if booking.assigned_staff_id is not None:
            raise BookingAlreadyAccepted()
        booking_state.assert_booking_transition(booking.status, booking_state.ACCEPTED)
        return await self._accept(booking, caller_uid, staff_name=profile.name)

    async def _accept(self, booking: Booking, staff_uid: str, staff_name: str | None = None) -> Booking:
        now = datetime.now(UTC)
        async with self._session_factory() as db:
            if staff_name is None:
                profile = await db.get(UserProfile, staff_uid)
                staff_name = profile.name if profile else None

            result = await db.execute(
                update(Booking)
                .where(
                    Booking.id == booking.id,
                    Booking.status == booking_state.PENDING,
                    Booking.assigned_staff_id.is_(None),
                )
                .values(
                    status=booking_state.ACCEPTED,
                    assigned_staff_id=staff_uid,
                    staff_name=staff_name,
                    accepted_at=now,
                    updated_at=now,
                )
            )
            if result.rowcount != 1:
                await db.rollback()
                logger.info(f"Accept of booking {booking.id} by {staff_uid} lost the race")
                raise BookingAlreadyAccepted()
            await db.commit()
            accepted = await self._load(db, booking.id)

        logger.info(f"Booking {booking.id} accepted by {staff_uid}")
        self._publish(accepted)
        return accepted

    async def _transition(self, booking: Booking, status: str) -> Booking:
        now = datetime.now(UTC)
        values = {"status": status, "updated_at": now}
        if status in STATUS_TIMESTAMPS:
            values[STATUS_TIMESTAMPS[status]] = now

        async with self._session_factory() as db:
            result = await db.execute(
                update(Booking)
                .where(Booking.id == booking.id, Booking.status == booking.status)
                .values(**values)
            )
            if result.rowcount != 1:
                await db.rollback()
                raise ConflictError("Booking status changed; reload and retry")
            await db.commit()
            updated = await self._load(db, booking.id)

        logger.info(f"Booking {booking.id}: {booking.status} → {status}")
        self._publish(updated)
        return updated

    async def _load(self, db: AsyncSession, booking_id: str) -> Booking:
        result = await db.execute(
            select(Booking).where(Booking.id == booking_id).execution_options(populate_existing=True)
        )
        booking = result.scalar_one_or_none()
        if not booking:
            raise NotFoundError("Booking", booking_id)
        return booking

    def _publish(self, booking: Booking) -> None:
        self._feed.publish(BookingResponse.model_validate(booking))
