"""
Settings API Tests
==================

Email and password changes, data export, and account deletion.
"""

from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient

from app.core.errors import ErrorCodes
from app.services.supabase_auth import SupabaseAuthError

from tests.conftest import USER_ID


class TestUpdatePassword:
    @pytest.mark.asyncio
    async def test_too_short(self, client: AsyncClient, auth_client, auth_headers):
        response = await client.put(
            "/api/v1/settings/password",
            data={"password": "abc", "confirm_password": "abc"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"]["field"] == "password"
        auth_client.update_user.assert_not_called()

    @pytest.mark.asyncio
    async def test_mismatch(self, client: AsyncClient, auth_client, auth_headers):
        response = await client.put(
            "/api/v1/settings/password",
            data={"password": "secret1", "confirm_password": "secret2"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Passwords do not match"

    @pytest.mark.asyncio
    async def test_success(self, client: AsyncClient, auth_client, auth_headers):
        response = await client.put(
            "/api/v1/settings/password",
            data={"password": "secret1", "confirm_password": "secret1"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Password updated successfully"
        token = auth_headers["Authorization"].split()[1]
        auth_client.update_user.assert_awaited_once_with(token, {"password": "secret1"})


class TestUpdateEmail:
    @pytest.mark.asyncio
    async def test_invalid_email(self, client: AsyncClient, auth_headers):
        response = await client.put("/api/v1/settings/email", data={"email": "nope"}, headers=auth_headers)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_success(self, client: AsyncClient, auth_client, auth_headers):
        response = await client.put(
            "/api/v1/settings/email",
            data={"email": "new@example.com"},
            headers=auth_headers,
        )

        assert response.json()["message"] == "Check your new email to confirm the change"

    @pytest.mark.asyncio
    async def test_provider_rejection_keeps_status(self, client: AsyncClient, auth_client, auth_headers):
        auth_client.update_user.side_effect = SupabaseAuthError("Email address already registered", 422)

        response = await client.put(
            "/api/v1/settings/email",
            data={"email": "taken@example.com"},
            headers=auth_headers,
        )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == ErrorCodes.AUTH_PROVIDER_ERROR


class TestDeleteAccount:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("confirmation", ["", "delete", "DELETE ME"])
    async def test_requires_exact_confirmation(self, client: AsyncClient, auth_client, auth_headers, confirmation):
        response = await client.post(
            "/api/v1/settings/delete-account",
            data={"confirmation": confirmation},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == ErrorCodes.SETTINGS_DELETE_NOT_CONFIRMED
        auth_client.rpc.assert_not_called()

    @pytest.mark.asyncio
    async def test_deletes_and_signs_out(self, client: AsyncClient, auth_client, auth_headers):
        with patch("app.api.v1.settings.AccountService") as service_cls:
            service_cls.return_value.delete_profile = AsyncMock()
            response = await client.post(
                "/api/v1/settings/delete-account",
                data={"confirmation": "DELETE"},
                headers=auth_headers,
            )

        assert response.status_code == 303
        assert response.headers["location"] == "/login"
        service_cls.return_value.delete_profile.assert_awaited_once_with(USER_ID)
        assert auth_client.rpc.await_args.args[0] == "delete_user"
        auth_client.sign_out.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_rpc_failure_is_reported(self, client: AsyncClient, auth_client, auth_headers, db):
        auth_client.rpc.side_effect = SupabaseAuthError("permission denied", 500)

        with patch("app.api.v1.settings.AccountService") as service_cls:
            service_cls.return_value.delete_profile = AsyncMock()
            response = await client.post(
                "/api/v1/settings/delete-account",
                data={"confirmation": "DELETE"},
                headers=auth_headers,
            )

        assert response.status_code == 502
        assert response.json()["error"]["code"] == ErrorCodes.SETTINGS_DELETE_FAILED
        auth_client.sign_out.assert_not_called()


class TestProfileAndExport:
    @pytest.mark.asyncio
    async def test_stats(self, client: AsyncClient, auth_headers):
        with patch("app.api.v1.settings.AccountService") as service_cls:
            service_cls.return_value.get_account_stats = AsyncMock(
                return_value={"goalsCount": 2, "journalsCount": 1, "moodsCount": 7},
            )
            response = await client.get("/api/v1/settings/stats", headers=auth_headers)

        assert response.json()["data"] == {"goalsCount": 2, "journalsCount": 1, "moodsCount": 7}

    @pytest.mark.asyncio
    async def test_account_without_profile_row(self, client: AsyncClient, auth_headers):
        with patch("app.api.v1.settings.AccountService") as service_cls:
            service_cls.return_value.get_profile = AsyncMock(return_value=None)
            response = await client.get("/api/v1/settings/account", headers=auth_headers)

        data = response.json()["data"]
        assert data["id"] == str(USER_ID)
        assert data["email"] == "sam@example.com"
        assert data["username"] is None
