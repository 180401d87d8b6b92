"""Payment-related Pydantic schemas."""

from pydantic import Field

from app.schemas.booking import CamelModel


class PaymentIntentCreate(CamelModel):
    booking_id: str = Field(..., min_length=1)


class PaymentIntentResponse(CamelModel):
    client_secret: str


class PaymentStatusResponse(CamelModel):
    payment_status: str
    price: float
    payment_intent_id: str | None = None


class WebhookAck(CamelModel):
    received: bool = True
