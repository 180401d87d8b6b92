"""User profile and device token models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base, UTCDateTime
from app.models.booking import utcnow


class UserProfile(Base):
    """Customer or staff profile, keyed by the identity provider's uid."""

    __tablename__ = "user_profiles"

    uid: Mapped[str] = mapped_column(String(128), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default="customer"
    )  # customer, staff
    email: Mapped[str | None] = mapped_column(String(255))
    phone: Mapped[str | None] = mapped_column(String(30))
    bio: Mapped[str] = mapped_column(Text, default="")
    location: Mapped[str | None] = mapped_column(String(255))

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utcnow, onupdate=utcnow
    )


class DeviceToken(Base):
    """Push token registered by one installed client."""

    __tablename__ = "device_tokens"
    __table_args__ = (UniqueConstraint("user_uid", "token", name="uq_device_tokens_user_token"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_uid: Mapped[str] = mapped_column(
        String(128), ForeignKey("user_profiles.uid", ondelete="CASCADE"), nullable=False, index=True
    )
    token: Mapped[str] = mapped_column(String(512), nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
