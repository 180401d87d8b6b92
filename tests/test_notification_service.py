"""Device token and booking push tests."""

from types import SimpleNamespace

import pytest
from firebase_admin import messaging

from app.core.exceptions import NotFoundError
from app.services.notification_service import FirebasePushSender


async def test_register_device_requires_profile(client, auth_headers):
    response = await client.post(
        "/api/notifications/devices", json={"token": "tok-1"}, headers=auth_headers("ghost")
    )

    assert response.status_code == 404


async def test_device_tokens_are_a_set(client, register, container):
    headers = await register("s1", role="staff")

    for token in ("tok-1", "tok-1", "tok-2"):
        response = await client.post("/api/notifications/devices", json={"token": token}, headers=headers)
        assert response.status_code == 204

    assert await container.notifications.get_device_tokens("s1") == ["tok-1", "tok-2"]


async def test_unregister_device(client, register, container):
    headers = await register("s1", role="staff")
    await client.post("/api/notifications/devices", json={"token": "tok-1"}, headers=headers)

    response = await client.delete("/api/notifications/devices/tok-1", headers=headers)
    again = await client.delete("/api/notifications/devices/tok-1", headers=headers)

    assert response.status_code == 204
    assert again.status_code == 204
    assert await container.notifications.get_device_tokens("s1") == []


async def test_booking_creation_pushes_to_stylist(client, register, create_booking, push_sender):
    customer = await register("c1")
    stylist = await register("s1", role="staff")
    await client.post("/api/notifications/devices", json={"token": "tok-1"}, headers=stylist)

    booking = await create_booking(customer)

    assert len(push_sender.sent) == 1
    push = push_sender.sent[0]
    assert push["tokens"] == ["tok-1"]
    assert push["title"] == "New booking request"
    assert "Signature Cut" in push["body"]
    assert push["data"] == {"bookingId": booking["id"], "type": "NEW_BOOKING"}


async def test_status_changes_do_not_push(client, register, create_booking, push_sender):
    customer = await register("c1")
    stylist = await register("s1", role="staff")
    await client.post("/api/notifications/devices", json={"token": "tok-1"}, headers=stylist)
    booking = await create_booking(customer)

    await client.post(f"/api/bookings/{booking['id']}/accept", headers=stylist)

    assert len(push_sender.sent) == 1


async def test_invalid_tokens_are_pruned(container, register, push_sender):
    await register("s1", role="staff")
    for token in ("good", "stale"):
        await container.notifications.register_device_token("s1", token)
    push_sender.invalid_tokens = {"stale"}

    result = await container.notifications.send_to_user("s1", "Hi", "There")

    assert result.sent == 1
    assert result.failed == 1
    assert result.pruned_tokens == ["stale"]
    assert await container.notifications.get_device_tokens("s1") == ["good"]


async def test_no_push_without_profile_or_tokens(container, register, push_sender):
    await register("s1", role="staff")

    missing = await container.notifications.send_to_user("nobody", "Hi", "There")
    no_tokens = await container.notifications.send_to_user("s1", "Hi", "There")

    assert missing.sent == 0
    assert no_tokens.sent == 0
    assert push_sender.sent == []


async def test_push_failure_does_not_fail_booking(client, register, create_booking, push_sender):
    customer = await register("c1")
    stylist = await register("s1", role="staff")
    await client.post("/api/notifications/devices", json={"token": "tok-1"}, headers=stylist)
    push_sender.error = RuntimeError("FCM unavailable")

    booking = await create_booking(customer)

    assert booking["status"] == "pending"


async def test_register_device_token_unknown_user(container):
    with pytest.raises(NotFoundError):
        await container.notifications.register_device_token("ghost", "tok")


async def test_firebase_sender_batches_large_token_sets(settings, monkeypatch):
    batches = []

    def fake_send(message, app=None):
        batches.append(list(message.tokens))
        return SimpleNamespace(
            responses=[SimpleNamespace(success=True, exception=None) for _ in message.tokens]
        )

    monkeypatch.setattr(messaging, "send_each_for_multicast", fake_send)
    sender = FirebasePushSender(settings.model_copy(update={"firebase_credentials_path": "creds.json"}))
    monkeypatch.setattr(sender, "_get_app", lambda: None)
    tokens = [f"tok-{i}" for i in range(1201)]

    outcomes = await sender.send_multicast(tokens, "New booking", "Signature Cut")

    assert [len(batch) for batch in batches] == [500, 500, 201]
    assert [o.token for o in outcomes] == tokens
    assert all(o.success for o in outcomes)
