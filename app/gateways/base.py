"""Payment gateway interface.

Adapters only talk to the provider. What a booking owes and what a callback
means for it are decided by the payment service.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class GatewayType(str, Enum):
    STRIPE = "stripe"


@dataclass
class IntentResult:
    """Outcome of opening a payment intent with the provider."""

    ok: bool
    intent_id: str | None = None
    client_secret: str | None = None
    error: str | None = None


class PaymentGateway(ABC):
    """Provider adapter used by ``PaymentService``."""

    name: GatewayType

    @abstractmethod
    async def create_intent(
        self,
        amount_minor: int,
        currency: str,
        booking_id: str,
        description: str,
        metadata: dict[str, str] | None = None,
    ) -> IntentResult:
        """Open an intent for ``amount_minor`` units (cents) of ``currency``."""

    @abstractmethod
    def parse_event(self, payload: bytes, signature: str | None) -> dict | None:
        """Return the event in a signed callback body.

        ``None`` means the signature is missing or wrong, or the body is not
        an event. Callers must not act on the payload in that case.
        """
