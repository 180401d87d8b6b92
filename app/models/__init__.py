"""Database models."""

from app.models.booking import Booking
from app.models.user import DeviceToken, UserProfile

__all__ = [
    "Booking",
    "UserProfile",
    "DeviceToken",
]
