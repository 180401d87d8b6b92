"""Pydantic schemas for API validation."""

from app.schemas.booking import (
    BookingCreate,
    BookingDetailResponse,
    BookingEnvelope,
    BookingListResponse,
    BookingResponse,
    BookingStatusResponse,
    BookingStatusUpdate,
    ServiceCatalogResponse,
)
from app.schemas.payment import (
    PaymentIntentCreate,
    PaymentIntentResponse,
    PaymentStatusResponse,
    WebhookAck,
)
from app.schemas.user import (
    DeviceTokenRegister,
    UserDetailResponse,
    UserEnvelope,
    UserRegister,
    UserResponse,
    UserUpdate,
)

__all__ = [
    # Booking
    "BookingCreate",
    "BookingStatusUpdate",
    "BookingResponse",
    "BookingEnvelope",
    "BookingDetailResponse",
    "BookingListResponse",
    "BookingStatusResponse",
    "ServiceCatalogResponse",
    # Payment
    "PaymentIntentCreate",
    "PaymentIntentResponse",
    "PaymentStatusResponse",
    "WebhookAck",
    # User
    "UserRegister",
    "UserUpdate",
    "UserResponse",
    "UserEnvelope",
    "UserDetailResponse",
    "DeviceTokenRegister",
]
