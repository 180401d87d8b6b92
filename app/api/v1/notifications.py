"""Notification device endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from app.api.deps import CurrentIdentity, get_notification_service
from app.schemas.user import DeviceTokenRegister
from app.services.notification_service import NotificationService

router = APIRouter()

Notifications = Annotated[NotificationService, Depends(get_notification_service)]


@router.post("/devices", status_code=status.HTTP_204_NO_CONTENT)
async def register_device_token(
    request: DeviceTokenRegister,
    identity: CurrentIdentity,
    notifications: Notifications,
) -> None:
    """Register push notification token."""
    await notifications.register_device_token(identity.uid, request.token)


@router.delete("/devices/{token}", status_code=status.HTTP_204_NO_CONTENT)
async def unregister_device_token(
    token: str,
    identity: CurrentIdentity,
    notifications: Notifications,
) -> None:
    """Remove a push notification token (e.g. on logout)."""
    await notifications.unregister_device_token(identity.uid, token)
