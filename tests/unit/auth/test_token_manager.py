"""Unit tests for the OAuth token lifecycle manager.

The token endpoint is replaced by a mocked HTTPClient returning RawResponse
objects, and time by a settable clock.
"""

from __future__ import annotations

import asyncio
import base64
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from fortnox.auth import TokenManager
from fortnox.config import TOKEN_URL, TokenPolicy
from fortnox.core import (
    AuthRefreshError,
    ErrorKind,
    FortnoxError,
    HTTPError,
    RefreshMode,
    ThrottleError,
    TokenState,
    TransportError,
)
from fortnox.models import Credentials
from fortnox.runtime.rest import RawResponse

T0 = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


class Clock:
    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def _token_response(access="access-2", refresh="refresh-2", expires_in=3600):
    return RawResponse(
        status=200,
        data={"access_token": access, "refresh_token": refresh, "expires_in": expires_in},
    )


def _manager(*responses, expires_in=3600, mode=RefreshMode.PROACTIVE, clock=None):
    clock = clock or Clock()
    http = MagicMock()
    http.post = AsyncMock(side_effect=list(responses))
    http.close = AsyncMock()
    manager = TokenManager.from_expires_in(
        "access-1",
        "refresh-1",
        expires_in,
        "client-id",
        "client-secret",
        http=http,
        clock=clock,
        mode=mode,
    )
    return manager, http, clock


class TestTokenState:
    """Test validity bookkeeping."""

    def test_valid_until_safety_margin(self):
        manager, _, clock = _manager()

        assert manager.expires_at == T0 + timedelta(hours=1)
        assert manager.state is TokenState.VALID

        clock.now = T0 + timedelta(minutes=54, seconds=59)
        assert manager.state is TokenState.VALID

        clock.now = T0 + timedelta(minutes=55)
        assert manager.state is TokenState.EXPIRED

    def test_unknown_expiry_is_expired(self):
        manager = TokenManager(Credentials(access_token="a"), http=MagicMock())
        assert manager.is_expired()
        assert manager.state is TokenState.EXPIRED

    def test_safety_margin_must_be_positive(self):
        with pytest.raises(ValueError):
            TokenPolicy(safety_margin=timedelta(0))

    def test_repr_hides_tokens(self):
        manager, _, _ = _manager()
        text = repr(manager) + repr(manager.credentials)
        assert "access-1" not in text
        assert "refresh-1" not in text
        assert "client-secret" not in text


class TestGetToken:
    """Test proactive refresh through get_token()."""

    @pytest.mark.asyncio
    async def test_valid_token_does_not_refresh(self):
        manager, http, _ = _manager()

        assert await manager.get_token() == "access-1"
        assert await manager.get_token() == "access-1"

        http.post.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_expired_token_refreshes_once(self):
        manager, http, clock = _manager(_token_response())
        clock.now = T0 + timedelta(hours=2)
        before = manager.expires_at

        assert await manager.get_token() == "access-2"
        assert await manager.get_token() == "access-2"

        assert http.post.await_count == 1
        assert manager.refresh_count == 1
        assert manager.expires_at > before
        assert manager.expires_at == clock.now + timedelta(seconds=3600)
        assert manager.credentials.refresh_token.get_secret_value() == "refresh-2"
        assert manager.state is TokenState.VALID

    @pytest.mark.asyncio
    async def test_inside_safety_margin_refreshes_once(self):
        manager, http, clock = _manager(_token_response())
        clock.now = T0 + timedelta(minutes=57)

        await manager.get_token()
        await manager.get_token()

        assert http.post.await_count == 1
        assert manager.expires_at == T0 + timedelta(minutes=57, hours=1)

    @pytest.mark.asyncio
    async def test_refresh_request_shape(self):
        manager, http, clock = _manager(_token_response())
        clock.now = T0 + timedelta(hours=2)

        await manager.get_token()

        call = http.post.call_args
        assert call.args[0] == TOKEN_URL
        assert call.kwargs["data"] == {
            "grant_type": "refresh_token",
            "refresh_token": "refresh-1",
        }
        expected = base64.b64encode(b"client-id:client-secret").decode("ascii")
        assert call.kwargs["headers"]["Authorization"] == f"Basic {expected}"
        assert call.kwargs["headers"]["Content-Type"] == "application/x-www-form-urlencoded"

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_refresh(self):
        release = asyncio.Event()

        async def slow_post(*args, **kwargs):
            await release.wait()
            return _token_response()

        manager, http, clock = _manager()
        http.post = AsyncMock(side_effect=slow_post)
        clock.now = T0 + timedelta(hours=2)

        tasks = [asyncio.create_task(manager.get_token()) for _ in range(5)]
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        assert manager.refreshing
        release.set()
        tokens = await asyncio.gather(*tasks)

        assert tokens == ["access-2"] * 5
        assert http.post.await_count == 1
        assert manager.refresh_count == 1
        assert not manager.refreshing

    @pytest.mark.asyncio
    async def test_server_may_keep_refresh_token(self):
        response = RawResponse(status=200, data={"access_token": "access-2", "expires_in": 1800})
        manager, _, clock = _manager(response)
        clock.now = T0 + timedelta(hours=2)

        await manager.get_token()

        assert manager.credentials.refresh_token.get_secret_value() == "refresh-1"
        assert manager.expires_at == clock.now + timedelta(seconds=1800)

    @pytest.mark.asyncio
    async def test_auth_headers(self):
        manager, _, _ = _manager()
        assert await manager.auth_headers() == {"Authorization": "Bearer access-1"}


class TestRefreshModes:
    """Test ON_DEMAND mode and explicit refresh()."""

    @pytest.mark.asyncio
    async def test_on_demand_never_refreshes_implicitly(self):
        manager, http, clock = _manager(_token_response(), mode=RefreshMode.ON_DEMAND)
        clock.now = T0 + timedelta(hours=2)

        assert await manager.get_token() == "access-1"
        http.post.assert_not_awaited()

        credentials = await manager.refresh()

        assert credentials.access_token.get_secret_value() == "access-2"
        assert await manager.get_token() == "access-2"
        assert http.post.await_count == 1

    @pytest.mark.asyncio
    async def test_refresh_is_unconditional(self):
        manager, http, _ = _manager(_token_response())

        await manager.refresh()

        assert manager.state is TokenState.VALID
        assert http.post.await_count == 1

    @pytest.mark.asyncio
    async def test_missing_refresh_credentials(self):
        manager = TokenManager(Credentials(access_token="a"), http=MagicMock())

        with pytest.raises(AuthRefreshError, match="refresh token or client credentials missing"):
            await manager.refresh()


class TestRefreshFailures:
    """Test classification of refresh failures."""

    @pytest.mark.asyncio
    async def test_invalid_grant_is_terminal(self):
        rejected = RawResponse(
            status=400,
            reason="Bad Request",
            data={"error": "invalid_grant", "error_description": "Invalid refresh token"},
        )
        manager, http, clock = _manager(rejected)
        clock.now = T0 + timedelta(hours=2)

        with pytest.raises(AuthRefreshError) as exc_info:
            await manager.get_token()

        assert exc_info.value.retryable is False
        assert exc_info.value.status_code == 400
        assert manager.state is TokenState.REVOKED

        with pytest.raises(AuthRefreshError):
            await manager.get_token()
        with pytest.raises(AuthRefreshError):
            await manager.refresh()
        assert http.post.await_count == 1

    @pytest.mark.asyncio
    async def test_replace_credentials_leaves_revoked_state(self):
        rejected = RawResponse(status=400, data={"error": "invalid_grant"})
        manager, _, clock = _manager(rejected)
        clock.now = T0 + timedelta(hours=2)
        with pytest.raises(AuthRefreshError):
            await manager.get_token()

        manager.replace_credentials(
            Credentials.from_expires_in("access-9", "refresh-9", 3600, "client-id", "client-secret", now=clock.now)
        )

        assert manager.state is TokenState.VALID
        assert await manager.get_token() == "access-9"

    @pytest.mark.asyncio
    async def test_throttled_refresh_is_retryable(self):
        throttled = RawResponse(status=429, headers={"Retry-After": "30"})
        manager, http, clock = _manager(throttled, _token_response())
        clock.now = T0 + timedelta(hours=2)

        with pytest.raises(ThrottleError) as exc_info:
            await manager.get_token()

        assert exc_info.value.retryable is True
        assert exc_info.value.retry_after == 30.0
        assert manager.state is TokenState.EXPIRED

        # The caller decides to retry
        assert await manager.get_token() == "access-2"
        assert http.post.await_count == 2

    @pytest.mark.asyncio
    async def test_other_http_failure_is_not_terminal(self):
        manager, _, clock = _manager(RawResponse(status=500, reason="Internal Server Error"))
        clock.now = T0 + timedelta(hours=2)

        with pytest.raises(HTTPError):
            await manager.get_token()

        assert manager.state is TokenState.EXPIRED

    @pytest.mark.asyncio
    async def test_network_failure(self):
        manager, _, clock = _manager(aiohttp.ClientConnectionError("refused"))
        clock.now = T0 + timedelta(hours=2)

        with pytest.raises(TransportError):
            await manager.get_token()

    @pytest.mark.asyncio
    async def test_unexpected_failure_is_classified(self):
        cause = UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
        manager, _, clock = _manager(cause)
        clock.now = T0 + timedelta(hours=2)

        with pytest.raises(FortnoxError) as exc_info:
            await manager.get_token()

        assert exc_info.value.error.kind is ErrorKind.OTHER
        assert exc_info.value.__cause__ is cause
        assert manager.state is TokenState.EXPIRED

    @pytest.mark.asyncio
    async def test_response_without_access_token(self):
        manager, _, clock = _manager(RawResponse(status=200, data={"token_type": "bearer"}))
        clock.now = T0 + timedelta(hours=2)

        with pytest.raises(AuthRefreshError, match="missing access_token"):
            await manager.get_token()

        assert manager.credentials.access_token.get_secret_value() == "access-1"


class TestCancellation:
    """Test that a caller timeout never leaves a half-finished refresh."""

    @pytest.mark.asyncio
    async def test_cancelled_caller_does_not_cancel_refresh(self):
        started = asyncio.Event()
        release = asyncio.Event()

        async def slow_post(*args, **kwargs):
            started.set()
            await release.wait()
            return _token_response()

        manager, http, clock = _manager()
        http.post = AsyncMock(side_effect=slow_post)
        clock.now = T0 + timedelta(hours=2)

        caller = asyncio.create_task(manager.get_token())
        await started.wait()
        caller.cancel()
        with pytest.raises(asyncio.CancelledError):
            await caller

        assert manager.refreshing
        release.set()
        credentials = await manager.refresh()

        assert credentials.access_token.get_secret_value() == "access-2"
        assert http.post.await_count == 1

    @pytest.mark.asyncio
    async def test_replace_credentials_rejected_while_refreshing(self):
        release = asyncio.Event()

        async def slow_post(*args, **kwargs):
            await release.wait()
            return _token_response()

        manager, http, _ = _manager()
        http.post = AsyncMock(side_effect=slow_post)
        task = asyncio.create_task(manager.refresh())
        await asyncio.sleep(0)

        with pytest.raises(RuntimeError):
            manager.replace_credentials(Credentials(access_token="x"))

        release.set()
        await task


@pytest.mark.asyncio
async def test_close_only_closes_owned_client():
    manager, http, _ = _manager()
    await manager.close()
    http.close.assert_not_awaited()
