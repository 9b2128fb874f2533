"""Authentication providers for the dispatcher.

Any object with an async ``auth_headers()`` works as a provider. The
dispatcher asks for headers before every request, so a token refreshed
mid-session is picked up on the next call.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pydantic import SecretStr

from ..core.exceptions import ValidationError


@runtime_checkable
class AuthProvider(Protocol):
    """Protocol for objects that supply request authentication headers."""

    async def auth_headers(self) -> dict[str, str]:
        """Return headers authenticating one request."""
        ...


class StaticTokenAuth:
    """Fixed bearer token, no refresh.

    Useful for short-lived scripts where the caller already holds a fresh
    access token.
    """

    def __init__(self, access_token: str) -> None:
        if not access_token:
            raise ValidationError("access_token must be a non-empty string")
        self._token = SecretStr(access_token)

    async def auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._token.get_secret_value()}"}

    def __repr__(self) -> str:
        return "StaticTokenAuth(access_token=**********)"


class LegacyTokenAuth:
    """Legacy Fortnox integration headers (Access-Token + Client-Secret)."""

    def __init__(self, access_token: str, client_secret: str) -> None:
        if not access_token or not client_secret:
            raise ValidationError("access_token and client_secret must be non-empty strings")
        self._token = SecretStr(access_token)
        self._secret = SecretStr(client_secret)

    async def auth_headers(self) -> dict[str, str]:
        return {
            "Access-Token": self._token.get_secret_value(),
            "Client-Secret": self._secret.get_secret_value(),
        }

    def __repr__(self) -> str:
        return "LegacyTokenAuth(access_token=**********, client_secret=**********)"
