"""Profile registration and management tests."""


async def test_register_creates_profile(client, auth_headers):
    headers = auth_headers("c1", email="ayesha@example.com", phone_number="+923001234567")

    response = await client.post(
        "/api/auth/register",
        json={"name": "  Ayesha ", "bio": "Regular", "location": "Lahore"},
        headers=headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    user = body["user"]
    assert user["uid"] == "c1"
    assert user["name"] == "Ayesha"
    assert user["role"] == "customer"
    assert user["email"] == "ayesha@example.com"
    assert user["phone"] == "+923001234567"
    assert user["location"] == "Lahore"


async def test_register_requires_name(client, auth_headers):
    response = await client.post("/api/auth/register", json={"role": "staff"}, headers=auth_headers("c1"))

    assert response.status_code == 400


async def test_register_rejects_unknown_role(client, auth_headers):
    response = await client.post(
        "/api/auth/register", json={"name": "Eve", "role": "admin"}, headers=auth_headers("c1")
    )

    assert response.status_code == 400
    assert "role" in response.json()["detail"]


async def test_reregister_keeps_original_role(client, auth_headers):
    headers = auth_headers("s1")
    await client.post("/api/auth/register", json={"name": "Sana", "role": "staff"}, headers=headers)

    response = await client.post(
        "/api/auth/register", json={"name": "Sana K", "role": "customer"}, headers=headers
    )

    assert response.json()["user"]["role"] == "staff"
    assert response.json()["user"]["name"] == "Sana K"


async def test_me_without_profile_is_not_found(client, auth_headers):
    response = await client.get("/api/auth/me", headers=auth_headers("ghost"))

    assert response.status_code == 404
    assert response.json()["detail"] == "Profile not found"


async def test_me_returns_profile(client, register):
    headers = await register("c1", name="Ayesha")

    response = await client.get("/api/auth/me", headers=headers)

    assert response.status_code == 200
    assert response.json()["user"]["name"] == "Ayesha"


async def test_update_profile_changes_only_given_fields(client, register):
    headers = await register("c1", name="Ayesha")

    response = await client.put("/api/auth/profile", json={"bio": "Prefers mornings"}, headers=headers)

    assert response.status_code == 200
    user = response.json()["user"]
    assert user["bio"] == "Prefers mornings"
    assert user["name"] == "Ayesha"


async def test_update_profile_without_profile(client, auth_headers):
    response = await client.put("/api/auth/profile", json={"name": "X"}, headers=auth_headers("ghost"))

    assert response.status_code == 404
