"""Booking-related Pydantic schemas."""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema exchanging camelCase JSON while accepting snake_case input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class BookingCreate(CamelModel):
    """Schema for creating a booking."""

    stylist_uid: str = Field(..., min_length=1)
    service_id: str = Field(..., min_length=1)
    service_name: str | None = Field(None, max_length=200)
    date_time: datetime
    price: float | None = Field(None, ge=0)
    client_notes: str = Field(default="", max_length=1000)
    location: str | None = Field(None, max_length=255)

    @field_validator("date_time")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v


class BookingStatusUpdate(CamelModel):
    """Schema for a status change request."""

    status: str = Field(..., min_length=1)

    @field_validator("status")
    @classmethod
    def normalize_status(cls, v: str) -> str:
        return v.strip().lower()


class BookingResponse(CamelModel):
    """Schema for booking response."""

    id: str
    client_uid: str
    stylist_uid: str
    assigned_staff_id: str | None = None
    staff_name: str | None = None

    service_id: str
    service_name: str | None = None
    price: float
    client_notes: str = ""
    date_time: datetime
    location: str | None = None
    client_name: str | None = None
    client_phone: str | None = None

    status: str
    payment_status: str | None = None
    payment_intent_id: str | None = None
    payment_failure_reason: str | None = None

    accepted_at: datetime | None = None
    completed_at: datetime | None = None
    cancelled_at: datetime | None = None
    refunded_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class BookingEnvelope(CamelModel):
    ok: bool = True
    booking: BookingResponse


class BookingDetailResponse(CamelModel):
    booking: BookingResponse


class BookingListResponse(CamelModel):
    bookings: list[BookingResponse]


class BookingStatusResponse(CamelModel):
    ok: bool = True
    status: str


class SalonServiceResponse(CamelModel):
    id: str
    name: str
    price: float
    description: str


class ServiceCatalogResponse(CamelModel):
    services: list[SalonServiceResponse]
