"""HTTP tests for the auth endpoints and the request authentication gate."""

from datetime import timedelta

import pytest
from freezegun import freeze_time
from redis.exceptions import ConnectionError as RedisConnectionError

from app.domains.user.models import UserRecord, UserRole

API = "/api"


class _UnreachableRedis:
    """Redis client whose lookups fail at the transport level."""

    async def exists(self, *args, **kwargs):
        raise RedisConnectionError("connection refused")


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


async def _register(client, data) -> dict:
    response = await client.post(f"{API}/auth/register", json=data)
    assert response.status_code == 201, response.text
    return response.json()


class TestEndToEnd:

    @pytest.mark.asyncio
    async def test_register_login_refresh_flow(self, client, sample_user_data, codec):
        registered = await _register(client, sample_user_data)

        assert registered["token_type"] == "bearer"
        assert registered["expires_in"] == 15 * 60
        assert "password_hash" not in registered["user"]
        assert "password" not in registered["user"]

        login = await client.post(
            f"{API}/auth/login",
            json={"email": "ana@example.com", "password": "Str0ng!Pass"},
        )
        assert login.status_code == 200
        tokens = login.json()
        assert tokens["access_token"] != registered["access_token"]
        assert tokens["refresh_token"] != registered["refresh_token"]

        wrong = await client.post(
            f"{API}/auth/login",
            json={"email": "ana@example.com", "password": "Wr0ng!Pass"},
        )
        assert wrong.status_code == 401
        assert wrong.json()["error"]["code"] == "INVALID_CREDENTIALS"

        refreshed = await client.post(
            f"{API}/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
        )
        assert refreshed.status_code == 200
        new_claims = codec.validate_access(refreshed.json()["access_token"])
        assert new_claims.sub == registered["user"]["id"]


class TestRegisterEndpoint:

    @pytest.mark.asyncio
    async def test_weak_password_reports_first_violation(self, client, sample_user_data):
        response = await client.post(
            f"{API}/auth/register", json={**sample_user_data, "password": "Strong!Pass"}
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "WEAK_PASSWORD"
        assert error["details"]["violation"] == "no_number"

    @pytest.mark.asyncio
    async def test_duplicate_email_is_conflict(self, client, sample_user_data):
        await _register(client, sample_user_data)

        response = await client.post(f"{API}/auth/register", json=sample_user_data)

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_craftsman_registration(self, client, sample_craftsman_data):
        response = await client.post(
            f"{API}/auth/register/craftsman", json=sample_craftsman_data
        )

        assert response.status_code == 201
        body = response.json()
        assert body["user"]["role"] == "craftsman"
        assert body["craftsman"]["user_id"] == body["user"]["id"]
        assert body["craftsman"]["location"] == "Ljubljana"

        profile = await client.get(
            f"{API}/craftsmen/me", headers=_bearer(body["access_token"])
        )
        assert profile.status_code == 200
        assert profile.json()["bio"] == "Woodturner"

    @pytest.mark.asyncio
    async def test_craftsman_registration_rolls_back_on_profile_failure(
        self, app, sample_craftsman_data, craftsman_repository, user_repository
    ):
        from httpx import ASGITransport, AsyncClient

        craftsman_repository.fail_inserts = True
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post(
                f"{API}/auth/register/craftsman", json=sample_craftsman_data
            )

        assert response.status_code == 500
        assert user_repository.users == {}


class TestRefreshEndpoint:

    @pytest.mark.asyncio
    async def test_expired_refresh_token_has_expired_reason(self, client, sample_user_data):
        with freeze_time("2026-03-01 12:00:00") as frozen:
            registered = await _register(client, sample_user_data)
            frozen.tick(timedelta(days=8))

            response = await client.post(
                f"{API}/auth/refresh", json={"refresh_token": registered["refresh_token"]}
            )

        assert response.status_code == 401
        error = response.json()["error"]
        assert error["code"] == "TOKEN_EXPIRED"
        assert error["details"]["reason"] == "expired"

    @pytest.mark.asyncio
    async def test_access_token_is_invalid_refresh_token(self, client, sample_user_data):
        registered = await _register(client, sample_user_data)

        response = await client.post(
            f"{API}/auth/refresh", json={"refresh_token": registered["access_token"]}
        )

        assert response.status_code == 401
        error = response.json()["error"]
        assert error["code"] == "INVALID_TOKEN"
        assert error["details"]["reason"] == "invalid"


class TestAuthenticationGate:

    @pytest.mark.asyncio
    async def test_me_returns_public_projection(self, client, sample_user_data):
        registered = await _register(client, sample_user_data)

        response = await client.get(
            f"{API}/users/me", headers=_bearer(registered["access_token"])
        )

        assert response.status_code == 200
        body = response.json()
        assert body["email"] == "ana@example.com"
        assert body["role"] == "customer"
        assert "password_hash" not in body

    @pytest.mark.asyncio
    async def test_missing_header_is_rejected(self, client):
        response = await client.get(f"{API}/users/me")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTHENTICATION_ERROR"

    @pytest.mark.asyncio
    async def test_refresh_token_is_not_an_access_token(self, client, sample_user_data):
        registered = await _register(client, sample_user_data)

        response = await client.get(
            f"{API}/users/me", headers=_bearer(registered["refresh_token"])
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_TOKEN"

    @pytest.mark.asyncio
    async def test_expired_access_token(self, client, sample_user_data):
        with freeze_time("2026-03-01 12:00:00") as frozen:
            registered = await _register(client, sample_user_data)
            frozen.tick(timedelta(minutes=16))

            response = await client.get(
                f"{API}/users/me", headers=_bearer(registered["access_token"])
            )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "TOKEN_EXPIRED"

    @pytest.mark.asyncio
    async def test_logout_revokes_access_token(self, client, sample_user_data):
        registered = await _register(client, sample_user_data)
        headers = _bearer(registered["access_token"])

        response = await client.post(
            f"{API}/auth/logout",
            headers=headers,
            json={"refresh_token": registered["refresh_token"]},
        )
        assert response.status_code == 200

        me = await client.get(f"{API}/users/me", headers=headers)
        assert me.status_code == 401
        assert me.json()["error"]["code"] == "TOKEN_REVOKED"

        refreshed = await client.post(
            f"{API}/auth/refresh", json={"refresh_token": registered["refresh_token"]}
        )
        assert refreshed.status_code == 401

    @pytest.mark.asyncio
    async def test_logout_without_body(self, client, sample_user_data):
        registered = await _register(client, sample_user_data)

        response = await client.post(
            f"{API}/auth/logout", headers=_bearer(registered["access_token"])
        )

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_role_guard(self, client, sample_user_data, user_repository, hasher, codec):
        registered = await _register(client, sample_user_data)
        user_id = registered["user"]["id"]

        forbidden = await client.get(
            f"{API}/users/{user_id}", headers=_bearer(registered["access_token"])
        )
        assert forbidden.status_code == 403
        assert forbidden.json()["error"]["code"] == "INSUFFICIENT_PERMISSIONS"

        admin = await user_repository.insert(
            UserRecord(
                username="root",
                email="root@example.com",
                password_hash=hasher.hash("Adm1n!Pass"),
                role=UserRole.ADMIN,
            )
        )
        admin_token = codec.issue_pair(admin.id, UserRole.ADMIN).access_token

        allowed = await client.get(f"{API}/users/{user_id}", headers=_bearer(admin_token))
        assert allowed.status_code == 200
        assert allowed.json()["id"] == user_id

    @pytest.mark.asyncio
    async def test_revocation_store_failure_is_reported(self, app, client, codec):
        app.state.redis = _UnreachableRedis()
        token = codec.issue_pair("65f1c0ffee0000000000abcd", UserRole.CUSTOMER).access_token

        response = await client.get(f"{API}/users/me", headers=_bearer(token))

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "STORE_UNAVAILABLE"

    @pytest.mark.asyncio
    async def test_customer_cannot_read_craftsman_profile(self, client, sample_user_data):
        registered = await _register(client, sample_user_data)

        response = await client.get(
            f"{API}/craftsmen/me", headers=_bearer(registered["access_token"])
        )

        assert response.status_code == 403
