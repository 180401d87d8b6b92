"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from app.api.v1 import auth, bookings, notifications, payments

api_router = APIRouter()

# Authentication
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])

# Bookings
api_router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])

# Service catalog
api_router.include_router(bookings.services_router, prefix="/services", tags=["Bookings"])

# Payments
api_router.include_router(payments.router, prefix="/payments", tags=["Payments"])

# Notifications
api_router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
