"""Tests for API key authentication and actor resolution."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from fastapi import HTTPException

from league_api.dependencies.auth import api_key_accepted, get_actor, verify_api_key


class TestVerifyApiKey:
    """Tests for verify_api_key dependency."""

    @pytest.fixture
    def mock_request(self) -> MagicMock:
        request = MagicMock()
        request.client.host = "127.0.0.1"
        request.url.path = "/api/drafts/1/picks"
        return request

    @pytest.mark.asyncio
    async def test_valid_api_key_accepted(self, mock_request: MagicMock) -> None:
        test_key = "a" * 32
        with patch("league_api.dependencies.auth.settings") as mock_settings:
            mock_settings.api_key = test_key

            assert await verify_api_key(mock_request, test_key) == test_key

    @pytest.mark.asyncio
    async def test_invalid_api_key_rejected(self, mock_request: MagicMock) -> None:
        with patch("league_api.dependencies.auth.settings") as mock_settings:
            mock_settings.api_key = "correct_key_" + "x" * 20

            with pytest.raises(HTTPException) as exc_info:
                await verify_api_key(mock_request, "wrong_key_" + "y" * 22)

            assert exc_info.value.status_code == 401
            assert exc_info.value.detail == "Invalid API key"
            assert exc_info.value.headers == {"WWW-Authenticate": "ApiKey"}

    @pytest.mark.asyncio
    async def test_missing_api_key_rejected(self, mock_request: MagicMock) -> None:
        with patch("league_api.dependencies.auth.settings") as mock_settings:
            mock_settings.api_key = "configured_key_" + "x" * 18

            with pytest.raises(HTTPException) as exc_info:
                await verify_api_key(mock_request, None)

            assert exc_info.value.detail == "Missing API key"

    @pytest.mark.asyncio
    async def test_open_when_unconfigured(self, mock_request: MagicMock) -> None:
        with patch("league_api.dependencies.auth.settings") as mock_settings:
            mock_settings.api_key = None

            assert await verify_api_key(mock_request, None) == ""

    @pytest.mark.asyncio
    async def test_uses_constant_time_comparison(self, mock_request: MagicMock) -> None:
        with patch("league_api.dependencies.auth.settings") as mock_settings, patch(
            "league_api.dependencies.auth.secrets.compare_digest", return_value=True
        ) as mock_compare:
            mock_settings.api_key = "k" * 32

            await verify_api_key(mock_request, "k" * 32)

            mock_compare.assert_called_once_with("k" * 32, "k" * 32)


class TestApiKeyAccepted:
    def test_query_key(self) -> None:
        with patch("league_api.dependencies.auth.settings") as mock_settings:
            mock_settings.api_key = "k" * 32

            assert api_key_accepted("k" * 32)
            assert not api_key_accepted("nope")
            assert not api_key_accepted(None)

    def test_open_when_unconfigured(self) -> None:
        with patch("league_api.dependencies.auth.settings") as mock_settings:
            mock_settings.api_key = None

            assert api_key_accepted(None)


class TestGetActor:
    @pytest.mark.asyncio
    async def test_resolves_role_from_profile(self, store, league) -> None:
        actor = await get_actor("captain-b", store)

        assert actor.user_id == "captain-b"
        assert actor.role == "captain"
        assert not actor.is_owner

    @pytest.mark.asyncio
    async def test_owner(self, store, league) -> None:
        actor = await get_actor("owner-1", store)
        assert actor.is_owner

    @pytest.mark.asyncio
    async def test_missing_header(self, store) -> None:
        with pytest.raises(HTTPException) as exc_info:
            await get_actor(None, store)
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_unknown_profile(self, store) -> None:
        with pytest.raises(HTTPException) as exc_info:
            await get_actor("nobody", store)
        assert exc_info.value.detail == "Unknown user"
