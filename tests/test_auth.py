"""Tests for authentication: register, login lockout, logout, token handling."""

from datetime import timedelta

from sqlalchemy import update

from conftest import PASSWORD, create_user, fetch_user, register
from vidya.config import settings
from vidya.core.security import create_access_token
from vidya.models.user import User


async def _login(client, email="learner@example.com", password=PASSWORD):
    return await client.post("/api/auth/login", json={"email": email, "password": password})


async def _set_failed_count(database, email, count):
    async with database.session() as session:
        await session.execute(
            update(User).where(User.email == email).values(failed_login_count=count)
        )
        await session.commit()


class TestRegister:
    async def test_register_success_sets_cookie(self, client):
        resp = await register(client)
        assert resp.status_code == 201
        body = resp.json()
        assert body["message"] == "User registered successfully"
        assert body["user"]["email"] == "learner@example.com"
        assert body["user"]["surveyCompleted"] is False
        assert "passwordHash" not in body["user"]
        assert settings.AUTH_COOKIE_NAME in resp.cookies

    async def test_auth_cookie_attributes(self, client):
        resp = await register(client)
        name_value, attributes = resp.headers["set-cookie"].split(";", 1)
        assert name_value.startswith(f"{settings.AUTH_COOKIE_NAME}=")
        attributes = attributes.lower()
        assert "httponly" in attributes
        assert "samesite=lax" in attributes
        assert "max-age=604800" in attributes
        assert "path=/" in attributes
        # Secure is only set in production
        assert "secure" not in attributes

    async def test_client_supplied_role_is_ignored(self, client, database):
        resp = await client.post("/api/auth/register", json={
            "email": "a@x.com",
            "password": "longenough1",
            "firstName": "A",
            "lastName": "B",
            "role": "trainer",
        })
        assert resp.status_code == 201
        assert resp.json()["user"]["role"] == "learner"
        user = await fetch_user(database, "a@x.com")
        assert user.role == "learner"

    async def test_policymaker_role_is_ignored(self, client, database):
        resp = await register(client, email="p@x.com", role="policymaker")
        assert resp.status_code == 201
        assert (await fetch_user(database, "p@x.com")).role == "learner"

    async def test_duplicate_email(self, client):
        await register(client)
        resp = await register(client)
        assert resp.status_code == 409
        assert "already exists" in resp.json()["detail"]

    async def test_duplicate_email_differs_only_in_case(self, client):
        await register(client, email="case@example.com")
        resp = await register(client, email="CASE@example.com")
        assert resp.status_code == 409

    async def test_short_password_rejected(self, client):
        resp = await register(client, password="short")
        assert resp.status_code == 400
        body = resp.json()
        assert body["detail"] == "Validation error"
        assert body["errors"][0]["field"] == "password"
        assert "at least 8" in body["errors"][0]["message"]

    async def test_invalid_email_rejected(self, client):
        resp = await register(client, email="not-an-email")
        assert resp.status_code == 400


class TestLogin:
    async def test_login_success(self, client, database):
        await register(client)
        await client.post("/api/auth/logout")
        resp = await _login(client)
        assert resp.status_code == 200
        assert resp.json()["message"] == "Login successful"
        user = await fetch_user(database, "learner@example.com")
        assert user.last_login is not None
        assert user.failed_login_count == 0

    async def test_unknown_email_has_no_side_effects(self, client, database):
        await register(client)
        resp = await _login(client, email="ghost@example.com")
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Invalid email or password"
        user = await fetch_user(database, "learner@example.com")
        assert user.failed_login_count == 0

    async def test_wrong_password_increments_counter(self, client, database):
        await register(client)
        resp = await _login(client, password="wrong-password")
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Invalid email or password"
        assert (await fetch_user(database, "learner@example.com")).failed_login_count == 1

    async def test_successful_login_resets_counter(self, client, database):
        await register(client)
        await _login(client, password="wrong-password")
        await _login(client, password="wrong-password")
        resp = await _login(client)
        assert resp.status_code == 200
        assert (await fetch_user(database, "learner@example.com")).failed_login_count == 0

    async def test_lockout_transition_at_two_three_four(self, client, database):
        await register(client)
        for _ in range(2):
            assert (await _login(client, password="wrong-password")).status_code == 401

        # count == 2: still open, a third wrong password is a plain 401
        assert (await fetch_user(database, "learner@example.com")).failed_login_count == 2
        assert (await _login(client, password="wrong-password")).status_code == 401

        # count == 3: locked, even with the right password
        assert (await fetch_user(database, "learner@example.com")).failed_login_count == 3
        resp = await _login(client)
        assert resp.status_code == 423
        assert "contact support" in resp.json()["detail"]
        assert (await fetch_user(database, "learner@example.com")).failed_login_count == 3

        # count == 4: still locked
        await _set_failed_count(database, "learner@example.com", 4)
        assert (await _login(client)).status_code == 423
        assert (await _login(client, password="wrong-password")).status_code == 423

    async def test_locked_message_differs_from_invalid_credentials(self, client, database):
        await register(client)
        await _set_failed_count(database, "learner@example.com", 3)
        locked = await _login(client)
        wrong = await _login(client, email="ghost@example.com")
        assert locked.json()["detail"] != wrong.json()["detail"]


class TestSession:
    async def test_me_returns_principal(self, auth_client):
        resp = await auth_client.get("/api/auth/me")
        assert resp.status_code == 200
        user = resp.json()["user"]
        assert set(user) == {"id", "email", "role", "surveyCompleted"}
        assert user["role"] == "learner"

    async def test_me_requires_cookie(self, client):
        resp = await client.get("/api/auth/me")
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Authentication required"

    async def test_logout_clears_cookie(self, auth_client):
        resp = await auth_client.post("/api/auth/logout")
        assert resp.status_code == 200
        assert settings.AUTH_COOKIE_NAME in resp.headers["set-cookie"]
        assert (await auth_client.get("/api/auth/me")).status_code == 401

    async def test_logout_without_session_still_succeeds(self, client):
        resp = await client.post("/api/auth/logout")
        assert resp.status_code == 200

    async def test_invalid_token_clears_cookie(self, client):
        client.cookies.set(settings.AUTH_COOKIE_NAME, "not-a-jwt")
        resp = await client.get("/api/auth/me")
        assert resp.status_code == 401
        set_cookie = resp.headers["set-cookie"]
        assert set_cookie.startswith(f"{settings.AUTH_COOKIE_NAME}=")
        assert "Max-Age=0" in set_cookie

    async def test_token_for_deleted_user_is_rejected(self, client):
        client.cookies.set(
            settings.AUTH_COOKIE_NAME,
            create_access_token("00000000-0000-0000-0000-000000000000"),
        )
        resp = await client.get("/api/auth/me")
        assert resp.status_code == 401
        assert "set-cookie" in resp.headers

    async def test_role_is_read_from_storage_not_token(self, client, database):
        user = await create_user(database, "trainer@example.com", "trainer")
        client.cookies.set(settings.AUTH_COOKIE_NAME, create_access_token(str(user.id)))
        resp = await client.get("/api/auth/me")
        assert resp.json()["user"]["role"] == "trainer"

    async def test_expired_token_clears_cookie(self, client, database):
        user = await create_user(database, "expired@example.com", "learner")
        client.cookies.set(
            settings.AUTH_COOKIE_NAME,
            create_access_token(str(user.id), expires_delta=timedelta(seconds=-1)),
        )
        resp = await client.get("/api/auth/me")
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Invalid or expired token"
        assert "Max-Age=0" in resp.headers["set-cookie"]
