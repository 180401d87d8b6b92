"""Payment state machine.

Runs independently of the booking status. ``None`` means no payment intent
has been requested yet.
"""

from app.core.exceptions import ValidationError

REQUIRES_PAYMENT = "requires_payment"
PAID = "paid"
FAILED = "failed"
REFUNDED = "refunded"

PAYMENT_TRANSITIONS: dict[str | None, set[str]] = {
    None: {REQUIRES_PAYMENT},
    REQUIRES_PAYMENT: {REQUIRES_PAYMENT, PAID, FAILED},
    FAILED: {REQUIRES_PAYMENT, PAID},
    PAID: {REFUNDED},
    REFUNDED: set(),
}

# Gateway event type -> payment status it settles to
SETTLEMENT_EVENTS: dict[str, str] = {
    "payment_intent.succeeded": PAID,
    "payment_intent.payment_failed": FAILED,
    "charge.refunded": REFUNDED,
}


def can_transition_payment(current: str | None, target: str) -> bool:
    return target in PAYMENT_TRANSITIONS.get(current, set())


def assert_payment_transition(current: str | None, target: str) -> None:
    if not can_transition_payment(current, target):
        raise ValidationError(
            f"Invalid payment transition: {current or 'none'} → {target}"
        )


def is_replay(current: str | None, target: str) -> bool:
    """A settlement event that would not change anything."""
    return current == target and target != REQUIRES_PAYMENT
