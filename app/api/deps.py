"""API dependencies for authentication and service lookup."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.container import Container
from app.core.exceptions import AuthenticationError
from app.core.security import Identity
from app.services.booking_service import BookingService
from app.services.notification_service import NotificationService
from app.services.payment_service import PaymentService
from app.services.user_service import UserService

# Security scheme
security = HTTPBearer(auto_error=False)


def get_container(request: Request) -> Container:
    return request.app.state.container


async def get_current_identity(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    container: Annotated[Container, Depends(get_container)],
) -> Identity:
    """Verify the bearer token and return the caller's identity."""
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise AuthenticationError(
            "Missing or invalid Authorization header. Format: Bearer <token>"
        )
    return container.identity_provider.verify(credentials.credentials.strip())


def get_booking_service(container: Annotated[Container, Depends(get_container)]) -> BookingService:
    return container.bookings


def get_payment_service(container: Annotated[Container, Depends(get_container)]) -> PaymentService:
    return container.payments


def get_user_service(container: Annotated[Container, Depends(get_container)]) -> UserService:
    return container.users


def get_notification_service(
    container: Annotated[Container, Depends(get_container)],
) -> NotificationService:
    return container.notifications


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
