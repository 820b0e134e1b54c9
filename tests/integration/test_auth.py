import pytest

from app.core.config import settings
from app.db.repositories.user_repository import UserRepository

DEFAULT_PASSWORD = "Passw0rd!"


@pytest.mark.asyncio
async def test_signup_login_and_current_user(client, register):
    user, headers = await register("alice@example.com", name="Alice")

    response = await client.get("/api/user", headers=headers)

    assert response.status_code == 200
    assert response.json()["uuid"] == user["uuid"]
    assert response.json()["name"] == "Alice"


@pytest.mark.asyncio
async def test_email_is_case_insensitive(client, register):
    await register("Bob@Example.com")

    response = await client.post("/api/auth/login", json={"email": "bob@example.com", "password": DEFAULT_PASSWORD})
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_duplicate_signup_is_rejected(client, register):
    await register("carol@example.com")

    response = await client.post(
        "/api/auth/signup",
        json={"email": "carol@example.com", "password": DEFAULT_PASSWORD, "name": "Carol"}
    )
    assert response.status_code == 400
    assert response.json()["code"] == "BAD_REQUEST"


@pytest.mark.asyncio
@pytest.mark.parametrize("password", ["short1", "lettersonly", "1234567890"])
async def test_weak_password_is_rejected(client, password):
    response = await client.post(
        "/api/auth/signup",
        json={"email": "weak@example.com", "password": password, "name": "Weak"}
    )
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_wrong_password_gives_generic_error(client, register):
    await register("dave@example.com")

    wrong = await client.post("/api/auth/login", json={"email": "dave@example.com", "password": "Wrong1234"})
    unknown = await client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "Wrong1234"})

    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json()["error"] == unknown.json()["error"]


@pytest.mark.asyncio
async def test_request_without_session_is_unauthorized(client):
    response = await client.get("/api/user")
    assert response.status_code == 401
    assert response.json()["code"] == "UNAUTHORIZED"


@pytest.mark.asyncio
async def test_session_cookie_authenticates(client, register):
    await register("erin@example.com")

    login = await client.post("/api/auth/login", json={"email": "erin@example.com", "password": DEFAULT_PASSWORD})
    assert settings.session_cookie_name in login.cookies

    response = await client.get("/api/user")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_logout_revokes_token(client, register):
    _, headers = await register("frank@example.com")

    response = await client.post("/api/auth/logout", headers=headers)
    assert response.status_code == 200

    response = await client.get("/api/user", headers=headers)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_logout_leaves_other_sessions_alive(client, register):
    _, first_headers = await register("gina@example.com")
    login = await client.post("/api/auth/login", json={"email": "gina@example.com", "password": DEFAULT_PASSWORD})
    client.cookies.clear()
    second_headers = {"Authorization": f"Bearer {login.json()['access_token']}"}

    await client.post("/api/auth/logout", headers=first_headers)

    assert (await client.get("/api/user", headers=second_headers)).status_code == 200


@pytest.mark.asyncio
async def test_password_change_revokes_old_sessions(client, register):
    _, headers = await register("henry@example.com")

    response = await client.put(
        "/api/user",
        json={"name": "Henry", "current_password": DEFAULT_PASSWORD, "new_password": "NewPassw0rd"},
        headers=headers
    )
    assert response.status_code == 200
    new_token = response.json()["access_token"]
    assert new_token
    client.cookies.clear()

    assert (await client.get("/api/user", headers=headers)).status_code == 401
    fresh = await client.get("/api/user", headers={"Authorization": f"Bearer {new_token}"})
    assert fresh.status_code == 200
    assert fresh.json()["name"] == "Henry"


@pytest.mark.asyncio
async def test_password_change_requires_current_password(client, register):
    _, headers = await register("ivy@example.com")

    response = await client.put(
        "/api/user",
        json={"name": "Ivy", "current_password": "Wrong1234", "new_password": "NewPassw0rd"},
        headers=headers
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_password_reset_flow(client, register, db_session):
    _, headers = await register("jack@example.com")

    response = await client.post("/api/auth/request-reset", json={"email": "jack@example.com"})
    assert response.status_code == 200

    user = await UserRepository(db_session).get_by_email("jack@example.com")
    assert user.reset_token

    response = await client.post(
        "/api/auth/reset-password", json={"token": user.reset_token, "new_password": "Reset1234"}
    )
    assert response.status_code == 200

    # Токен одноразовый
    again = await client.post(
        "/api/auth/reset-password", json={"token": user.reset_token, "new_password": "Other1234"}
    )
    assert again.status_code == 400

    assert (await client.get("/api/user", headers=headers)).status_code == 401
    login = await client.post("/api/auth/login", json={"email": "jack@example.com", "password": "Reset1234"})
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_reset_request_for_unknown_email_looks_the_same(client):
    response = await client.post("/api/auth/request-reset", json={"email": "ghost@example.com"})
    assert response.status_code == 200
