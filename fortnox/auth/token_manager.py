"""OAuth token lifecycle manager.

Architecture:
    TokenManager owns the current Credentials and is their only writer. The
    access token is either VALID (now < expires_at - safety_margin) or
    EXPIRED (at/after that point, or expiry unknown). A rejected refresh
    token moves the manager to REVOKED, which is terminal until the caller
    installs new credentials with replace_credentials().

Design Decisions:
    - Single-flight refresh: one refresh task at a time; concurrent callers
      await the same task. Most OAuth servers (Fortnox included) invalidate
      the old refresh token on use, so a duplicate refresh would lock the
      integration out.
    - Shielded task: a caller timeout never cancels a refresh mid-flight.
      The task always completes or fails before the next one may start.
    - No local retry: rate limits and transport failures surface to the
      caller as normalized errors.
"""

from __future__ import annotations

import asyncio
import base64
import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

from pydantic import SecretStr

from ..config import TOKEN_URL, TokenPolicy
from ..core.enums import ErrorKind, RefreshMode, TokenState
from ..core.errors import NormalizedError
from ..core.exceptions import AuthRefreshError, FortnoxError, exception_for
from ..core.sanitize import sanitize_error_for_logging
from ..models.credentials import Credentials
from ..runtime.rest.classifier import classify
from ..runtime.rest.http_client import HTTPClient, RawResponse

logger = logging.getLogger(__name__)

# OAuth error codes meaning the refresh token itself is no longer usable
INVALID_REFRESH_TOKEN_ERRORS = frozenset({"invalid_grant", "invalid_refresh_token"})

# Used when the token endpoint omits expires_in
DEFAULT_EXPIRES_IN = 3600


class TokenManager:
    """Owns access/refresh tokens and refreshes them before they expire.

    Example:
        >>> manager = TokenManager.from_expires_in(
        ...     access_token, refresh_token, 3600, client_id, client_secret
        ... )
        >>> token = await manager.get_token()
    """

    def __init__(
        self,
        credentials: Credentials,
        *,
        policy: TokenPolicy | None = None,
        mode: RefreshMode = RefreshMode.PROACTIVE,
        token_url: str = TOKEN_URL,
        http: HTTPClient | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            credentials: Initial credentials (expires_at None means expired)
            policy: Refresh policy; the safety margin must be positive
            mode: PROACTIVE refreshes inside get_token(); ON_DEMAND only on refresh()
            token_url: OAuth token endpoint
            http: Optional HTTP client (one is created and owned otherwise)
            clock: Returns the current aware UTC time (tests inject a fake clock)
        """
        self._credentials = credentials
        self._policy = policy or TokenPolicy()
        self.mode = mode
        self._token_url = token_url
        self._http = http or HTTPClient()
        self._owns_http = http is None
        self._clock = clock or (lambda: datetime.now(UTC))
        self._refresh_task: asyncio.Task[Credentials] | None = None
        self._revoked: AuthRefreshError | None = None
        self.refresh_count = 0

    @classmethod
    def from_expires_in(
        cls,
        access_token: str,
        refresh_token: str,
        expires_in: float,
        client_id: str,
        client_secret: str,
        **kwargs: Any,
    ) -> TokenManager:
        """Create a manager from a fresh OAuth token response."""
        clock = kwargs.get("clock")
        credentials = Credentials.from_expires_in(
            access_token,
            refresh_token,
            expires_in,
            client_id,
            client_secret,
            now=clock() if clock else None,
        )
        return cls(credentials, **kwargs)

    @property
    def credentials(self) -> Credentials:
        """Current credentials (read-only snapshot)."""
        return self._credentials

    @property
    def safety_margin(self) -> timedelta:
        return self._policy.safety_margin

    @property
    def expires_at(self) -> datetime | None:
        return self._credentials.expires_at

    @property
    def state(self) -> TokenState:
        if self._revoked is not None:
            return TokenState.REVOKED
        return TokenState.EXPIRED if self.is_expired() else TokenState.VALID

    @property
    def refreshing(self) -> bool:
        """Whether a refresh is in flight."""
        return self._refresh_task is not None and not self._refresh_task.done()

    def is_expired(self, now: datetime | None = None) -> bool:
        """Whether the safety margin before expiry has been reached."""
        expires_at = self._credentials.expires_at
        if expires_at is None:
            return True
        return (now or self._clock()) >= expires_at - self.safety_margin

    async def get_token(self) -> str:
        """Return a usable access token, refreshing first if needed (PROACTIVE)."""
        if self._revoked is not None:
            raise self._revoked
        if self.mode is RefreshMode.PROACTIVE and self.is_expired():
            await self.refresh()
        return self._credentials.access_token.get_secret_value()

    async def auth_headers(self) -> dict[str, str]:
        """Bearer authorization header for the dispatcher."""
        return {"Authorization": f"Bearer {await self.get_token()}"}

    async def refresh(self) -> Credentials:
        """Refresh now; joins an in-flight refresh instead of starting another.

        Raises:
            AuthRefreshError: Refresh token rejected (terminal) or unusable
            ThrottleError: Token endpoint rate limited the refresh (retryable)
            FortnoxError: Any other classified failure
        """
        if self._revoked is not None:
            raise self._revoked
        task = self._refresh_task
        if task is None or task.done():
            task = asyncio.ensure_future(self._refresh())
            self._refresh_task = task
            task.add_done_callback(self._on_refresh_done)
        return await asyncio.shield(task)

    def replace_credentials(self, credentials: Credentials) -> None:
        """Install credentials obtained out of band (e.g. after re-authentication).

        Raises:
            RuntimeError: If a refresh is in flight
        """
        if self.refreshing:
            raise RuntimeError("Cannot replace credentials while a refresh is in flight")
        self._credentials = credentials
        self._revoked = None

    def _on_refresh_done(self, task: asyncio.Task[Credentials]) -> None:
        if self._refresh_task is task:
            self._refresh_task = None
        # Waiters receive the outcome through shield(); mark it retrieved
        if not task.cancelled():
            task.exception()

    async def _refresh(self) -> Credentials:
        current = self._credentials
        if not current.can_refresh:
            raise AuthRefreshError(
                "Cannot refresh access token: refresh token or client credentials missing"
            )

        logger.info(
            "token_refresh_started",
            extra={"client_id": current.client_id, "expires_at": _iso(current.expires_at)},
        )

        basic = base64.b64encode(
            f"{current.client_id}:{current.client_secret.get_secret_value()}".encode()
        ).decode("ascii")
        headers = {
            "Authorization": f"Basic {basic}",
            "Content-Type": "application/x-www-form-urlencoded",
            "Accept": "application/json",
        }
        body = {
            "grant_type": "refresh_token",
            "refresh_token": current.refresh_token.get_secret_value(),
        }

        try:
            response = await self._http.post(self._token_url, data=body, headers=headers)
        except Exception as e:
            error = exception_for(classify(e))
            self._log_failure(error)
            raise error from e

        if not response.ok:
            error = self._refresh_failure(response)
            self._log_failure(error)
            if isinstance(error, AuthRefreshError):
                self._revoked = error
            raise error

        updated = self._parse_token_response(response, current)
        self._credentials = updated
        self.refresh_count += 1
        logger.info(
            "token_refresh_completed",
            extra={"client_id": updated.client_id, "expires_at": _iso(updated.expires_at)},
        )
        return updated

    def _parse_token_response(self, response: RawResponse, current: Credentials) -> Credentials:
        data = response.data if isinstance(response.data, dict) else {}
        access_token = data.get("access_token")
        if not access_token:
            error = AuthRefreshError(
                NormalizedError(
                    kind=ErrorKind.AUTH_REFRESH,
                    message="Token endpoint response is missing access_token",
                    status_code=response.status,
                )
            )
            self._log_failure(error)
            raise error

        try:
            expires_in = float(data.get("expires_in", DEFAULT_EXPIRES_IN))
        except (TypeError, ValueError):
            expires_in = DEFAULT_EXPIRES_IN

        # Keep the old refresh token only if the server did not rotate it
        refresh_token = data.get("refresh_token") or current.refresh_token.get_secret_value()
        return current.model_copy(
            update={
                "access_token": SecretStr(access_token),
                "refresh_token": SecretStr(refresh_token),
                "expires_at": self._clock() + timedelta(seconds=expires_in),
            }
        )

    def _refresh_failure(self, response: RawResponse) -> FortnoxError:
        error = classify(response=response)
        if error.kind is ErrorKind.THROTTLE:
            return exception_for(error, retry_after=response.retry_after())
        if _is_invalid_refresh_token(response):
            return AuthRefreshError(
                NormalizedError(
                    kind=ErrorKind.AUTH_REFRESH,
                    message="Refresh token rejected; re-authentication is required",
                    status_code=response.status,
                    sanitized_response=error.sanitized_response,
                    retryable=False,
                )
            )
        return exception_for(error)

    def _log_failure(self, error: FortnoxError) -> None:
        logger.error(
            "token_refresh_failed",
            extra={
                "error_kind": error.error.kind.value,
                "status_code": error.status_code,
                "error_message": sanitize_error_for_logging(error),
            },
        )

    async def close(self) -> None:
        """Close the HTTP client if this manager created it."""
        if self._owns_http:
            await self._http.close()

    def __repr__(self) -> str:
        return (
            f"TokenManager(client_id={self._credentials.client_id!r}, "
            f"state={self.state.value}, mode={self.mode.value})"
        )


def _is_invalid_refresh_token(response: RawResponse) -> bool:
    if response.status not in (400, 401):
        return False
    data = response.data
    if not isinstance(data, dict):
        return False
    code = str(data.get("error", "")).lower()
    if code in INVALID_REFRESH_TOKEN_ERRORS:
        return True
    description = str(data.get("error_description", "")).lower()
    return "refresh token" in description or "refresh_token" in description


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None
