"""Async HTTP client wrapper.

The client returns a RawResponse for every status code and only raises for
transport-level failures (connection errors, timeouts). Interpreting the
status is left to the transport and the error classifier.
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from typing import Any

import aiohttp

from ...config import DEFAULT_TIMEOUT, SIE_ENCODING


@dataclass(frozen=True)
class RawResponse:
    """Status, reason, decoded body and headers of one HTTP response.

    Headers are kept for protocol handling (Retry-After) and never leave the
    runtime layer; use sanitize_response() before logging or attaching.
    """

    status: int
    reason: str | None = None
    data: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None

    def retry_after(self, now: datetime | None = None) -> float | None:
        """Seconds requested by a Retry-After header, or None if absent/invalid."""
        return parse_retry_after(self.header("Retry-After"), now=now)


class HTTPClient:
    """Async HTTP client wrapper."""

    def __init__(self, base_url: str | None = None, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.base_url = base_url
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    def _url(self, url: str) -> str:
        # Relative paths are joined onto base_url with exactly one slash
        if self.base_url and not url.startswith("http"):
            return f"{self.base_url.rstrip('/')}/{url.lstrip('/')}"
        return url

    async def get(
        self,
        url: str,
        params: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> RawResponse:
        """GET request."""
        async with self.session.get(
            self._url(url),
            params=dict(params) if params else None,
            headers=dict(headers) if headers else None,
        ) as response:
            return await self._to_raw(response)

    async def post(
        self,
        url: str,
        data: Mapping[str, str] | str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> RawResponse:
        """POST request with a form-encoded (or pre-encoded) body."""
        async with self.session.post(
            self._url(url),
            data=dict(data) if isinstance(data, Mapping) else data,
            headers=dict(headers) if headers else None,
        ) as response:
            return await self._to_raw(response)

    @staticmethod
    async def _to_raw(response: aiohttp.ClientResponse) -> RawResponse:
        body = await response.read()
        return RawResponse(
            status=response.status,
            reason=response.reason,
            data=decode_body(body, content_type=response.content_type, charset=response.charset),
            headers=dict(response.headers or {}),
        )

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> HTTPClient:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()


def decode_text(body: bytes, charset: str | None = None) -> str:
    """Decode body bytes to text.

    A declared charset wins. Without one, UTF-8 is tried first and CP437 is
    the fallback, since SIE files are CP437 encoded and usually served
    without a charset.
    """
    if charset:
        try:
            return body.decode(charset, errors="replace")
        except LookupError:
            pass
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError:
        return body.decode(SIE_ENCODING, errors="replace")


def decode_body(
    body: bytes | str | None,
    *,
    content_type: str | None = None,
    charset: str | None = None,
) -> Any:
    """Decode a response body.

    JSON is parsed unless the content type says the body is something else
    (e.g. ``text/plain`` SIE files); anything that does not parse is returned
    as text. Undeclared or octet-stream bodies are parsed opportunistically.
    """
    if not body:
        return None
    text = body if isinstance(body, str) else decode_text(body, charset)
    mime = (content_type or "").lower()
    if mime and mime != "application/octet-stream" and "json" not in mime:
        return text
    try:
        return json.loads(text)
    except ValueError:
        return text


def parse_retry_after(value: str | None, now: datetime | None = None) -> float | None:
    """Parse a Retry-After value (delta-seconds or HTTP-date) into seconds."""
    if value is None or not str(value).strip():
        return None
    value = str(value).strip()
    try:
        seconds = float(value)
        if not math.isfinite(seconds):
            return None
    except ValueError:
        try:
            when = parsedate_to_datetime(value)
        except (TypeError, ValueError):
            return None
        if when.tzinfo is None:
            when = when.replace(tzinfo=UTC)
        seconds = (when - (now or datetime.now(UTC))).total_seconds()
    return max(0.0, seconds)
