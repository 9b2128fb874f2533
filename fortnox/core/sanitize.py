"""Sanitizes responses and errors before they can reach a log sink.

Strips Authorization, Cookie and the legacy Access-Token/Client-Secret keys
at any nesting level, and never copies headers or request configuration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..config import SENSITIVE_KEYS
from .errors import SanitizedResponse
from .exceptions import FortnoxError

if TYPE_CHECKING:
    from ..runtime.rest.http_client import RawResponse


def scrub(value: Any) -> Any:
    """Return a copy of ``value`` without sensitive keys, recursively."""
    if isinstance(value, dict):
        return {
            key: scrub(item)
            for key, item in value.items()
            if not (isinstance(key, str) and key.lower() in SENSITIVE_KEYS)
        }
    if isinstance(value, (list, tuple)):
        return [scrub(item) for item in value]
    return value


def sanitize_response(response: RawResponse | None) -> SanitizedResponse | None:
    """Snapshot of a response limited to status, status text and body."""
    if response is None:
        return None
    return SanitizedResponse(
        status=response.status,
        status_text=response.reason,
        data=scrub(response.data),
    )


def sanitize_error_for_logging(error: BaseException | None) -> str:
    """Safe one-line representation of an error for logging."""
    if error is None:
        return "Unknown error"
    if isinstance(error, FortnoxError):
        return error.error.describe()
    status = getattr(error, "status", None)
    message = str(error) or type(error).__name__
    if isinstance(status, int):
        return f"{message} (HTTP {status})"
    return message
