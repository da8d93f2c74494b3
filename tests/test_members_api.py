"""
Member registration and authentication flow.
"""


def _cookie_value(response, name):
    for header in response.headers.get_list("set-cookie"):
        if header.startswith(f"{name}="):
            return header.split(";", 1)[0].split("=", 1)[1]
    return None


async def test_health(client):
    res = await client.get("/api/v1/system/health")

    assert res.status_code == 200
    assert res.json() == {"status": "healthy"}
    assert "X-Correlation-ID" in res.headers


async def test_register_login_and_me(client):
    res = await client.post("/api/v1/members/register", json={
        "display_name": "Dev",
        "email": "Dev@Example.com",
        "password": "supersecret",
    })
    assert res.status_code == 201
    assert res.json()["email"] == "dev@example.com"

    res = await client.post("/api/v1/members/login", json={
        "email": "dev@example.com",
        "password": "supersecret",
    })
    assert res.status_code == 200
    access = _cookie_value(res, "access_token")
    assert access
    assert _cookie_value(res, "refresh_token")

    res = await client.get("/api/v1/members/me", headers={"Authorization": f"Bearer {access}"})
    assert res.status_code == 200
    assert res.json()["display_name"] == "Dev"


async def test_duplicate_registration_rejected(client):
    payload = {"display_name": "Dev", "email": "dev@example.com", "password": "supersecret"}
    await client.post("/api/v1/members/register", json=payload)

    res = await client.post("/api/v1/members/register", json=payload)

    assert res.status_code == 400
    assert res.json()["detail"] == "Member already exists"


async def test_wrong_password(client, make_member):
    await make_member("Alice")

    res = await client.post("/api/v1/members/login", json={
        "email": "alice@example.com",
        "password": "not-the-password",
    })

    assert res.status_code == 401


async def test_me_requires_token(client):
    res = await client.get("/api/v1/members/me")
    assert res.status_code == 401

    res = await client.get("/api/v1/members/me", headers={"Authorization": "Bearer garbage"})
    assert res.status_code == 401


async def test_refresh_rotates_tokens(client, make_member):
    await make_member("Alice")
    res = await client.post("/api/v1/members/login", json={
        "email": "alice@example.com",
        "password": "password123",
    })
    refresh = _cookie_value(res, "refresh_token")

    res = await client.post("/api/v1/members/refresh", headers={"Cookie": f"refresh_token={refresh}"})

    assert res.status_code == 200
    assert _cookie_value(res, "access_token")


async def test_access_token_cannot_refresh(client, make_member):
    _, headers = await make_member("Alice")
    access = headers["Authorization"].split(" ", 1)[1]

    res = await client.post("/api/v1/members/refresh", headers={"Cookie": f"refresh_token={access}"})

    assert res.status_code == 401
