"""Notification Service for push notifications.

Handles:
- Device token registration (set semantics per user)
- Booking request pushes to the requested stylist (Firebase Cloud Messaging)
- Pruning of tokens the push service reports as permanently invalid
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import firebase_admin
from firebase_admin import credentials, exceptions as firebase_exceptions, messaging
from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config import Settings
from app.core.exceptions import NotFoundError, ValidationError
from app.models.booking import Booking
from app.models.user import DeviceToken, UserProfile

logger = logging.getLogger(__name__)


@dataclass
class PushOutcome:
    """Delivery result for a single device token."""

    token: str
    success: bool
    invalid_token: bool = False
    error_message: str | None = None


@dataclass
class NotificationResult:
    """Summary of one notification dispatch."""

    sent: int = 0
    failed: int = 0
    pruned_tokens: list[str] = field(default_factory=list)


class PushSender(ABC):
    """Push delivery collaborator."""

    @abstractmethod
    async def send_multicast(
        self,
        tokens: list[str],
        title: str,
        body: str,
        data: dict[str, str] | None = None,
    ) -> list[PushOutcome]:
        """Send one notification to every token, returning one outcome per token."""
        pass


# FCM rejects multicast messages with more tokens than this
MULTICAST_BATCH_SIZE = 500

# Errors meaning the token will never work again
PERMANENT_TOKEN_ERRORS = (
    messaging.UnregisteredError,
    messaging.SenderIdMismatchError,
    firebase_exceptions.InvalidArgumentError,
)


class FirebasePushSender(PushSender):
    """Firebase Cloud Messaging sender using firebase-admin."""

    APP_NAME = "room-push"

    def __init__(self, settings: Settings):
        self.credentials_path = settings.firebase_credentials_path
        self.project_id = settings.firebase_project_id
        self._app: firebase_admin.App | None = None

    def _get_app(self) -> firebase_admin.App:
        """Lazy-initialize the Firebase app."""
        if self._app is None:
            cred = credentials.Certificate(self.credentials_path)
            options = {"projectId": self.project_id} if self.project_id else None
            self._app = firebase_admin.initialize_app(cred, options, name=self.APP_NAME)
        return self._app

    async def send_multicast(
        self,
        tokens: list[str],
        title: str,
        body: str,
        data: dict[str, str] | None = None,
    ) -> list[PushOutcome]:
        if not self.credentials_path:
            logger.info("Firebase credentials not configured; push skipped")
            return []

        outcomes = []
        for start in range(0, len(tokens), MULTICAST_BATCH_SIZE):
            batch = tokens[start:start + MULTICAST_BATCH_SIZE]
            message = messaging.MulticastMessage(
                tokens=batch,
                notification=messaging.Notification(title=title, body=body),
                data=data or {},
            )
            response = await asyncio.to_thread(
                messaging.send_each_for_multicast, message, app=self._get_app()
            )

            for token, send_response in zip(batch, response.responses):
                exc = send_response.exception
                outcomes.append(
                    PushOutcome(
                        token=token,
                        success=send_response.success,
                        invalid_token=isinstance(exc, PERMANENT_TOKEN_ERRORS),
                        error_message=str(exc) if exc else None,
                    )
                )
        return outcomes


class NotificationService:
    """Service for device tokens and booking push notifications."""

    # Notification types
    NEW_BOOKING = "NEW_BOOKING"

    def __init__(self, session_factory: async_sessionmaker, push_sender: PushSender) -> None:
        self._session_factory = session_factory
        self._push_sender = push_sender

    # ==================== DEVICE TOKENS ====================

    async def register_device_token(self, uid: str, token: str) -> None:
        """Add ``token`` to the user's token set (no-op if already present)."""
        if not token:
            raise ValidationError("uid and token are required")

        async with self._session_factory() as db:
            profile = await db.get(UserProfile, uid)
            if not profile:
                raise NotFoundError("Profile", uid)

            await db.execute(self._insert_ignore(db, uid, token))
            await db.commit()

        logger.info(f"Device token registered for user {uid}")

    async def unregister_device_token(self, uid: str, token: str) -> None:
        """Remove ``token`` from the user's token set."""
        async with self._session_factory() as db:
            await db.execute(
                delete(DeviceToken).where(DeviceToken.user_uid == uid, DeviceToken.token == token)
            )
            await db.commit()

        logger.info(f"Device token unregistered for user {uid}")

    async def get_device_tokens(self, uid: str) -> list[str]:
        async with self._session_factory() as db:
            result = await db.execute(
                select(DeviceToken.token).where(DeviceToken.user_uid == uid).order_by(DeviceToken.id)
            )
            return list(result.scalars().all())

    @staticmethod
    def _insert_ignore(db: AsyncSession, uid: str, token: str):
        values = {"user_uid": uid, "token": token}
        if db.bind.dialect.name == "postgresql":
            return pg_insert(DeviceToken).values(**values).on_conflict_do_nothing()
        return sqlite_insert(DeviceToken).values(**values).on_conflict_do_nothing()

    # ==================== PUSH NOTIFICATIONS ====================

    async def send_to_user(
        self,
        uid: str,
        title: str,
        body: str,
        data: dict[str, Any] | None = None,
    ) -> NotificationResult:
        """Push a notification to every device registered by ``uid``.

        Tokens rejected as permanently invalid are removed in the same call.
        """
        result = NotificationResult()

        async with self._session_factory() as db:
            profile = await db.get(UserProfile, uid)
        if not profile:
            logger.warning(f"User {uid} not found; notification skipped")
            return result

        tokens = await self.get_device_tokens(uid)
        if not tokens:
            logger.info(f"No device tokens for user {uid}")
            return result

        payload = {key: str(value) for key, value in (data or {}).items()}
        outcomes = await self._push_sender.send_multicast(tokens, title, body, payload)

        result.sent = sum(1 for o in outcomes if o.success)
        result.failed = sum(1 for o in outcomes if not o.success)
        logger.info(f"Notification sent to {result.sent} devices for user {uid}")

        if result.failed:
            logger.error(f"Failed to send to {result.failed} devices for user {uid}")
            result.pruned_tokens = [o.token for o in outcomes if o.invalid_token]
            if result.pruned_tokens:
                await self._prune_tokens(uid, result.pruned_tokens)

        return result

    async def notify_booking_request(self, booking: Booking) -> NotificationResult:
        """Tell the requested stylist about a new booking."""
        service = booking.service_name or booking.service_id
        when = booking.date_time.strftime("%Y-%m-%d %H:%M")
        return await self.send_to_user(
            booking.stylist_uid,
            title="New booking request",
            body=f"You have a booking for {service} at {when}",
            data={"bookingId": booking.id, "type": self.NEW_BOOKING},
        )

    async def _prune_tokens(self, uid: str, tokens: list[str]) -> None:
        async with self._session_factory() as db:
            await db.execute(
                delete(DeviceToken).where(
                    DeviceToken.user_uid == uid,
                    DeviceToken.token.in_(tokens),
                )
            )
            await db.commit()
        logger.info(f"Cleaned up {len(tokens)} invalid tokens for user {uid}")
