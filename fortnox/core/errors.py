"""Normalized error value and sanitized response snapshot."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .enums import ErrorKind


class SanitizedResponse(BaseModel):
    """Response snapshot that is safe to log or serialize.

    Only status, status text and body are kept. Headers, request config and
    credentials are never part of it.
    """

    status: int | None = None
    status_text: str | None = None
    data: Any = None

    model_config = ConfigDict(frozen=True)


class NormalizedError(BaseModel):
    """Single error shape for every failure surfaced by the client."""

    kind: ErrorKind
    message: str
    status_code: int | None = None
    api_error_code: int | None = None
    api_error_number: int | None = None
    sanitized_response: SanitizedResponse | None = None
    retryable: bool = Field(default=False)

    model_config = ConfigDict(frozen=True)

    def describe(self) -> str:
        """One-line summary suitable for log messages."""
        parts = [f"[{self.kind.value}] {self.message}"]
        if self.status_code is not None:
            parts.append(f"HTTP {self.status_code}")
        if self.api_error_code is not None:
            parts.append(f"code {self.api_error_code}")
        return " ".join(parts)
