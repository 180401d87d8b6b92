"""Service wiring.

The container owns every collaborator the API needs. ``create_application``
receives one, so tests can substitute fakes for the gateway, push sender
or database.
"""

from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from app.config import Settings, get_settings
from app.core.security import JwtIdentityProvider
from app.database import create_engine, create_session_factory
from app.gateways.base import PaymentGateway
from app.gateways.stripe_gateway import StripeGateway
from app.realtime.feed import BookingFeed, InMemoryBookingFeed
from app.services.booking_service import BookingService
from app.services.notification_service import (
    FirebasePushSender,
    NotificationService,
    PushSender,
)
from app.services.payment_service import PaymentService
from app.services.user_service import UserService


@dataclass
class Container:
    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker
    identity_provider: JwtIdentityProvider
    payment_gateway: PaymentGateway
    push_sender: PushSender
    feed: BookingFeed = field(default_factory=InMemoryBookingFeed)

    def __post_init__(self) -> None:
        self.notifications = NotificationService(self.session_factory, self.push_sender)
        self.bookings = BookingService(self.session_factory, self.feed, self.notifications)
        self.payments = PaymentService(
            self.session_factory, self.payment_gateway, self.feed, self.settings
        )
        self.users = UserService(self.session_factory)

    async def close(self) -> None:
        await self.engine.dispose()


def build_container(
    settings: Settings | None = None,
    engine: AsyncEngine | None = None,
    payment_gateway: PaymentGateway | None = None,
    push_sender: PushSender | None = None,
    feed: BookingFeed | None = None,
) -> Container:
    """Build the production container, overriding any collaborator given."""
    settings = settings or get_settings()
    engine = engine or create_engine(settings)
    return Container(
        settings=settings,
        engine=engine,
        session_factory=create_session_factory(engine),
        identity_provider=JwtIdentityProvider(settings),
        payment_gateway=payment_gateway or StripeGateway(settings),
        push_sender=push_sender or FirebasePushSender(settings),
        feed=feed or InMemoryBookingFeed(),
    )
