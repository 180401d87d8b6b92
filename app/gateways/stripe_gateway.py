"""Stripe adapter."""

import asyncio
import json
import logging

import stripe

from app.config import Settings
from app.gateways.base import GatewayType, IntentResult, PaymentGateway

logger = logging.getLogger(__name__)


class StripeGateway(PaymentGateway):
    name = GatewayType.STRIPE

    def __init__(self, settings: Settings):
        self._api_key = settings.stripe_secret_key
        self._webhook_secret = settings.stripe_webhook_secret

    async def create_intent(
        self,
        amount_minor: int,
        currency: str,
        booking_id: str,
        description: str,
        metadata: dict[str, str] | None = None,
    ) -> IntentResult:
        if not self._api_key:
            return IntentResult(ok=False, error="Stripe not configured")

        try:
            intent = await asyncio.to_thread(
                stripe.PaymentIntent.create,
                api_key=self._api_key,
                amount=amount_minor,
                currency=currency.lower(),
                description=description,
                metadata=metadata or {"bookingId": booking_id},
                automatic_payment_methods={"enabled": True},
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe intent for booking {booking_id} failed: {e.user_message or e}")
            return IntentResult(ok=False, error=e.user_message or str(e))

        return IntentResult(ok=True, intent_id=intent.id, client_secret=intent.client_secret)

    def parse_event(self, payload: bytes, signature: str | None) -> dict | None:
        if not self._webhook_secret:
            logger.error("STRIPE_WEBHOOK_SECRET is not set; rejecting webhook")
            return None
        if not signature:
            return None

        body = payload.decode("utf-8", errors="replace")
        try:
            stripe.WebhookSignature.verify_header(body, signature, self._webhook_secret)
        except stripe.SignatureVerificationError as e:
            logger.warning(f"Webhook signature rejected: {e}")
            return None

        try:
            event = json.loads(body)
        except ValueError:
            logger.warning("Signed webhook body is not JSON")
            return None
        return event if isinstance(event, dict) else None
