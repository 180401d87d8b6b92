"""Booking database model."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base, UTCDateTime


def utcnow() -> datetime:
    return datetime.now(UTC)


class Booking(Base):
    """One customer-to-staff service request and its lifecycle."""

    __tablename__ = "bookings"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    client_uid: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    stylist_uid: Mapped[str] = mapped_column(
        String(128), nullable=False, index=True
    )  # requested stylist, notified on creation
    assigned_staff_id: Mapped[str | None] = mapped_column(
        String(128), index=True
    )  # bound once by the accept compare-and-swap
    staff_name: Mapped[str | None] = mapped_column(String(200))

    # Request payload (immutable after creation)
    service_id: Mapped[str] = mapped_column(String(50), nullable=False)
    service_name: Mapped[str | None] = mapped_column(String(200))
    price: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    client_notes: Mapped[str] = mapped_column(Text, default="")
    date_time: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, index=True)
    location: Mapped[str | None] = mapped_column(String(255))
    client_name: Mapped[str | None] = mapped_column(String(200))
    client_phone: Mapped[str | None] = mapped_column(String(30))

    # Status
    status: Mapped[str] = mapped_column(
        String(20), default="pending", index=True
    )  # pending, accepted, in_progress, completed, rejected, cancelled
    payment_status: Mapped[str | None] = mapped_column(
        String(20)
    )  # requires_payment, paid, failed, refunded
    payment_intent_id: Mapped[str | None] = mapped_column(String(255), index=True)
    payment_failure_reason: Mapped[str | None] = mapped_column(Text)

    # Timestamps
    accepted_at: Mapped[datetime | None] = mapped_column(UTCDateTime)
    completed_at: Mapped[datetime | None] = mapped_column(UTCDateTime)
    cancelled_at: Mapped[datetime | None] = mapped_column(UTCDateTime)
    refunded_at: Mapped[datetime | None] = mapped_column(UTCDateTime)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utcnow, onupdate=utcnow
    )
