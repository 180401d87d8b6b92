"""End-to-end client session tests over the ASGI app."""

import pytest

from app.client.api_client import ApiError, RoomApiClient
from app.client.projector import View
from app.client.session import ClientSession
from app.core.permissions import UserRole

APPOINTMENT = "2026-11-01T10:00:00Z"


@pytest.fixture
def make_session(client, container):
    sessions = []

    def _make(uid: str, role: UserRole) -> ClientSession:
        token = container.identity_provider.issue_token(uid)
        session = ClientSession(uid, role, RoomApiClient(client, token), container.feed)
        session.start()
        sessions.append(session)
        return session

    yield _make
    for session in sessions:
        session.stop()


async def test_book_to_completion_clears_customer_view(make_session):
    customer = make_session("c1", UserRole.CUSTOMER)
    staff = make_session("s1", UserRole.STAFF)
    await customer.api.register("Ayesha")
    await staff.api.register("Sana", role="staff")

    assert customer.state.view == View.HOME
    assert staff.state.view == View.STAFF_DASH

    booking = await customer.request_service("s1", "hair", APPOINTMENT, price=350)
    assert booking.status == "pending"
    assert booking.assigned_staff_id is None
    assert customer.state.view == View.ACTIVE_JOB
    assert [b.id for b in staff.state.queue] == [booking.id]

    accepted = await staff.accept_job(booking.id)
    assert accepted.status == "accepted"
    assert accepted.assigned_staff_id == "s1"
    assert staff.state.view == View.ACTIVE_JOB
    assert staff.state.queue == ()
    assert customer.state.active_booking.status == "accepted"

    assert await staff.advance_status(booking.id, "in_progress") == "in_progress"
    assert customer.state.active_booking.status == "in_progress"

    assert await staff.advance_status(booking.id, "completed") == "completed"
    assert customer.state.view == View.HOME
    assert customer.state.active_booking is None
    assert staff.state.view == View.STAFF_DASH


async def test_cancelled_request_cannot_be_accepted(make_session):
    customer = make_session("c1", UserRole.CUSTOMER)
    staff = make_session("s2", UserRole.STAFF)
    await customer.api.register("Ayesha")
    await staff.api.register("Zara", role="staff")

    booking = await customer.request_service("s1", "nails", APPOINTMENT)
    assert await customer.cancel_request(booking.id) == "cancelled"
    assert customer.state.view == View.HOME
    assert staff.state.queue == ()

    with pytest.raises(ApiError) as exc_info:
        await staff.accept_job(booking.id)
    assert exc_info.value.status_code == 409


async def test_pay_returns_client_secret(make_session):
    customer = make_session("c1", UserRole.CUSTOMER)
    await customer.api.register("Ayesha")
    booking = await customer.request_service("s1", "barber", APPOINTMENT)

    secret = await customer.pay(booking.id)

    assert secret.startswith("pi_test_")
    status = await customer.api.get_payment_status(booking.id)
    assert status.payment_status == "requires_payment"
    assert status.price == 200


async def test_loading_flag_wraps_intents(client, container):
    states = []
    token = container.identity_provider.issue_token("c1")
    session = ClientSession(
        "c1", UserRole.CUSTOMER, RoomApiClient(client, token), container.feed, states.append
    )
    session.start()
    await session.api.register("Ayesha")

    await session.request_service("s1", "hair", APPOINTMENT)
    session.stop()

    assert [s.loading for s in states] == [False, True, True, False]
    assert [s.view for s in states] == [View.HOME, View.HOME, View.ACTIVE_JOB, View.ACTIVE_JOB]


async def test_api_error_carries_detail(client):
    api = RoomApiClient(client, token=None)

    with pytest.raises(ApiError) as exc_info:
        await api.me()

    assert exc_info.value.status_code == 401
    assert "Bearer" in exc_info.value.detail


async def test_services_and_devices_through_client(make_session, container):
    staff = make_session("s1", UserRole.STAFF)
    await staff.api.register("Sana", role="staff")

    services = await staff.api.list_services()
    await staff.api.register_device("tok-1")
    assert await container.notifications.get_device_tokens("s1") == ["tok-1"]
    await staff.api.unregister_device("tok-1")

    assert {s.id for s in services} == {"hair", "barber", "nails", "makeup"}
    assert await container.notifications.get_device_tokens("s1") == []
