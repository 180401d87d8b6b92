"""Tests for the payment state machine."""

import pytest

from app.core.exceptions import ValidationError
from app.domain import payment_state


def test_first_intent_requires_payment():
    assert payment_state.can_transition_payment(None, payment_state.REQUIRES_PAYMENT)
    assert not payment_state.can_transition_payment(None, payment_state.PAID)


def test_failed_payment_can_be_retried():
    assert payment_state.can_transition_payment(payment_state.FAILED, payment_state.REQUIRES_PAYMENT)


def test_refund_only_after_paid():
    assert payment_state.can_transition_payment(payment_state.PAID, payment_state.REFUNDED)
    assert not payment_state.can_transition_payment(
        payment_state.REQUIRES_PAYMENT, payment_state.REFUNDED
    )


def test_refunded_is_final():
    for target in (payment_state.REQUIRES_PAYMENT, payment_state.PAID, payment_state.FAILED):
        assert not payment_state.can_transition_payment(payment_state.REFUNDED, target)


def test_assert_payment_transition_raises():
    with pytest.raises(ValidationError):
        payment_state.assert_payment_transition(payment_state.PAID, payment_state.REQUIRES_PAYMENT)


def test_replay_detection():
    assert payment_state.is_replay(payment_state.PAID, payment_state.PAID)
    assert not payment_state.is_replay(payment_state.REQUIRES_PAYMENT, payment_state.PAID)
    # A fresh intent on top of an open one is a real change
    assert not payment_state.is_replay(
        payment_state.REQUIRES_PAYMENT, payment_state.REQUIRES_PAYMENT
    )


def test_settlement_events():
    assert payment_state.SETTLEMENT_EVENTS["payment_intent.succeeded"] == payment_state.PAID
    assert payment_state.SETTLEMENT_EVENTS["payment_intent.payment_failed"] == payment_state.FAILED
    assert payment_state.SETTLEMENT_EVENTS["charge.refunded"] == payment_state.REFUNDED
