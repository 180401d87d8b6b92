"""Booking endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.deps import CurrentIdentity, get_booking_service
from app.domain.catalog import SERVICE_CATALOG
from app.schemas.booking import (
    BookingCreate,
    BookingDetailResponse,
    BookingEnvelope,
    BookingListResponse,
    BookingResponse,
    BookingStatusResponse,
    BookingStatusUpdate,
    SalonServiceResponse,
    ServiceCatalogResponse,
)
from app.services.booking_service import BookingService

router = APIRouter()

Bookings = Annotated[BookingService, Depends(get_booking_service)]


@router.post("", response_model=BookingEnvelope)
async def create_booking(
    booking_data: BookingCreate,
    identity: CurrentIdentity,
    bookings: Bookings,
) -> BookingEnvelope:
    """Create a new booking and notify the stylist."""
    booking = await bookings.create_booking(identity.uid, booking_data)
    return BookingEnvelope(booking=BookingResponse.model_validate(booking))


@router.patch("/{booking_id}/status", response_model=BookingStatusResponse)
async def update_booking_status(
    booking_id: str,
    request: BookingStatusUpdate,
    identity: CurrentIdentity,
    bookings: Bookings,
) -> BookingStatusResponse:
    """Move a booking through its lifecycle (client or staff party only)."""
    booking = await bookings.update_status(identity.uid, booking_id, request.status)
    return BookingStatusResponse(status=booking.status)


@router.post("/{booking_id}/accept", response_model=BookingEnvelope)
async def accept_booking(
    booking_id: str,
    identity: CurrentIdentity,
    bookings: Bookings,
) -> BookingEnvelope:
    """Accept a pending booking from the staff queue."""
    booking = await bookings.accept_booking(identity.uid, booking_id)
    return BookingEnvelope(booking=BookingResponse.model_validate(booking))


@router.get("/user/{uid}", response_model=BookingListResponse)
async def list_user_bookings(
    uid: str,
    identity: CurrentIdentity,
    bookings: Bookings,
) -> BookingListResponse:
    """Get bookings where the caller is the client or the staff."""
    results = await bookings.list_bookings_for_user(identity.uid, uid)
    return BookingListResponse(bookings=[BookingResponse.model_validate(b) for b in results])


@router.get("/{booking_id}", response_model=BookingDetailResponse)
async def get_booking(
    booking_id: str,
    identity: CurrentIdentity,
    bookings: Bookings,
) -> BookingDetailResponse:
    """Get a booking by ID."""
    booking = await bookings.get_booking(identity.uid, booking_id)
    return BookingDetailResponse(booking=BookingResponse.model_validate(booking))


services_router = APIRouter()


@services_router.get("", response_model=ServiceCatalogResponse)
async def list_services(identity: CurrentIdentity) -> ServiceCatalogResponse:
    """List the salon services that can be booked."""
    return ServiceCatalogResponse(
        services=[SalonServiceResponse.model_validate(s) for s in SERVICE_CATALOG.values()]
    )
