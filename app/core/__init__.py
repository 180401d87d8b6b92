"""Core utilities and security modules."""

from app.core.exceptions import (
    AppException,
    AuthenticationError,
    AuthorizationError,
    BookingAlreadyAccepted,
    ConflictError,
    ExternalServiceError,
    InvalidTransition,
    NotFoundError,
    ValidationError,
)
from app.core.security import Identity, JwtIdentityProvider

__all__ = [
    "AppException",
    "AuthenticationError",
    "AuthorizationError",
    "BookingAlreadyAccepted",
    "ConflictError",
    "ExternalServiceError",
    "InvalidTransition",
    "NotFoundError",
    "ValidationError",
    "Identity",
    "JwtIdentityProvider",
]
