"""Payment endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from app.api.deps import CurrentIdentity, get_payment_service
from app.schemas.payment import (
    PaymentIntentCreate,
    PaymentIntentResponse,
    PaymentStatusResponse,
    WebhookAck,
)
from app.services.payment_service import InvalidWebhookSignature, PaymentService


router = APIRouter()

Payments = Annotated[PaymentService, Depends(get_payment_service)]


@router.post("/create-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    payment_data: PaymentIntentCreate,
    identity: CurrentIdentity,
    payments: Payments,
) -> PaymentIntentResponse:
    """Create a payment intent for a booking the caller owns."""
    client_secret = await payments.create_payment_intent(identity.uid, payment_data.booking_id)
    return PaymentIntentResponse(client_secret=client_secret)


@router.post("/webhook", response_model=WebhookAck, status_code=status.HTTP_200_OK)
async def payment_webhook(
    request: Request,
    payments: Payments,
    stripe_signature: str | None = Header(None, alias="Stripe-Signature"),
) -> WebhookAck:
    """Handle payment gateway webhook events."""
    # Raw body is required for signature verification
    payload = await request.body()

    try:
        await payments.handle_webhook(payload, stripe_signature)
    except InvalidWebhookSignature:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid signature",
        )

    return WebhookAck()


@router.get("/status/{booking_id}", response_model=PaymentStatusResponse)
async def get_payment_status(
    booking_id: str,
    identity: CurrentIdentity,
    payments: Payments,
) -> PaymentStatusResponse:
    """Get payment status for a booking."""
    result = await payments.get_payment_status(identity.uid, booking_id)
    return PaymentStatusResponse(**result)
