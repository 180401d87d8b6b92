"""Shared fixtures: in-memory database, fake collaborators and an API client."""

from __future__ import annotations

import hashlib
import hmac
import json
import time
from itertools import count

import httpx
import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from app.config import Settings
from app.container import build_container
from app.database import init_db
from app.gateways.base import IntentResult
from app.gateways.stripe_gateway import StripeGateway
from app.main import create_application
from app.services.notification_service import PushOutcome, PushSender

WEBHOOK_SECRET = "whsec_test_secret"
APPOINTMENT = "2026-11-01T10:00:00Z"


class FakeGateway(StripeGateway):
    """Stripe gateway with canned intents; webhook verification is the real one."""

    def __init__(self, settings: Settings):
        super().__init__(settings)
        self._ids = count(1)
        self.calls: list[dict] = []
        self.fail_with: str | None = None
        self.on_create = None

    async def create_intent(self, amount_minor, currency, booking_id, description, metadata=None):
        self.calls.append(
            {
                "amount": amount_minor,
                "currency": currency,
                "booking_id": booking_id,
                "metadata": metadata or {},
            }
        )
        if self.on_create is not None:
            await self.on_create(booking_id)
        if self.fail_with:
            return IntentResult(ok=False, error=self.fail_with)
        intent_id = f"pi_test_{next(self._ids)}"
        return IntentResult(ok=True, intent_id=intent_id, client_secret=f"{intent_id}_secret_abc")


class FakePushSender(PushSender):
    def __init__(self):
        self.sent: list[dict] = []
        self.invalid_tokens: set[str] = set()
        self.error: Exception | None = None

    async def send_multicast(self, tokens, title, body, data=None):
        if self.error is not None:
            raise self.error
        self.sent.append({"tokens": list(tokens), "title": title, "body": body, "data": data})
        return [
            PushOutcome(
                token=token,
                success=token not in self.invalid_tokens,
                invalid_token=token in self.invalid_tokens,
                error_message="Requested entity was not found." if token in self.invalid_tokens else None,
            )
            for token in tokens
        ]


def sign_payload(payload: str, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    """Build a ``Stripe-Signature`` header for ``payload``."""
    timestamp = timestamp or int(time.time())
    signature = hmac.new(
        secret.encode("utf-8"),
        f"{timestamp}.{payload}".encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    return f"t={timestamp},v1={signature}"


def gateway_event(event_type: str, obj: dict) -> str:
    return json.dumps({"id": f"evt_{event_type}", "type": event_type, "data": {"object": obj}})


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        environment="development",
        debug=False,
        jwt_secret_key="test-secret-key",
        stripe_secret_key=None,
        stripe_webhook_secret=WEBHOOK_SECRET,
        firebase_credentials_path=None,
    )


@pytest.fixture
async def engine(settings):
    engine = create_async_engine(
        settings.database_url,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def gateway(settings) -> FakeGateway:
    return FakeGateway(settings)


@pytest.fixture
def push_sender() -> FakePushSender:
    return FakePushSender()


@pytest.fixture
def container(settings, engine, gateway, push_sender):
    return build_container(
        settings=settings,
        engine=engine,
        payment_gateway=gateway,
        push_sender=push_sender,
    )


@pytest.fixture
def app(container):
    return create_application(container)


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture
def auth_headers(container):
    """Return a function producing bearer headers for a uid."""

    def _headers(uid: str, **claims) -> dict[str, str]:
        token = container.identity_provider.issue_token(uid, claims=claims or None)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def register(client, auth_headers):
    """Register a profile through the API and return its auth headers."""

    async def _register(uid: str, name: str | None = None, role: str = "customer") -> dict[str, str]:
        headers = auth_headers(uid)
        response = await client.post(
            "/api/auth/register",
            json={"name": name or uid, "role": role},
            headers=headers,
        )
        assert response.status_code == 200, response.text
        return headers

    return _register


@pytest.fixture
def create_booking(client):
    async def _create(headers: dict[str, str], stylist_uid: str = "s1", **fields) -> dict:
        payload = {"stylistUid": stylist_uid, "serviceId": "hair", "dateTime": APPOINTMENT, **fields}
        response = await client.post("/api/bookings", json=payload, headers=headers)
        assert response.status_code == 200, response.text
        return response.json()["booking"]

    return _create
