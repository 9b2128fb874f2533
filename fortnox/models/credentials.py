"""OAuth credentials data model."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator


class Credentials(BaseModel):
    """Access/refresh token pair plus client identity.

    Secrets are SecretStr so they never show up in repr() or log output.
    Instances are frozen; a refresh replaces the whole object.
    """

    access_token: SecretStr
    refresh_token: SecretStr = SecretStr("")
    client_id: str = ""
    client_secret: SecretStr = SecretStr("")
    expires_at: datetime | None = Field(default=None)

    model_config = ConfigDict(frozen=True)

    @field_validator("expires_at")
    @classmethod
    def validate_expires_at(cls, v: datetime | None) -> datetime | None:
        """Store expiry as an aware UTC timestamp."""
        if v is None:
            return v
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v.astimezone(UTC)

    @classmethod
    def from_expires_in(
        cls,
        access_token: str,
        refresh_token: str,
        expires_in: float,
        client_id: str,
        client_secret: str,
        *,
        now: datetime | None = None,
    ) -> Credentials:
        """Build credentials from an OAuth ``expires_in`` lifetime in seconds."""
        issued = now or datetime.now(UTC)
        return cls(
            access_token=SecretStr(access_token),
            refresh_token=SecretStr(refresh_token),
            client_id=client_id,
            client_secret=SecretStr(client_secret),
            expires_at=issued + timedelta(seconds=expires_in),
        )

    @property
    def can_refresh(self) -> bool:
        """Whether the refresh grant can be attempted with these credentials."""
        return bool(
            self.refresh_token.get_secret_value()
            and self.client_id
            and self.client_secret.get_secret_value()
        )
