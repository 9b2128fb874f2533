"""Error classifier: maps any failure into one NormalizedError.

Branches on failure origin, in priority order:
    0. HTTP 429                         -> THROTTLE (retryable)
    a. Structured ErrorInformation body -> API (error number, code, message)
    b. Other HTTP response or a session -> HTTP (status, generic message)
       ClientResponseError with status
    c. Sent but no response             -> TRANSPORT (fixed message, no status)
    d. Anything else                    -> OTHER (raw message)

A sanitized response snapshot is attached whenever a response exists.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import aiohttp

from ...config import ERROR_KEY
from ...core.enums import ErrorKind
from ...core.errors import NormalizedError
from ...core.exceptions import FortnoxError
from ...core.sanitize import sanitize_response
from .http_client import RawResponse

NO_RESPONSE_MESSAGE = "No response received from Fortnox API"
RATE_LIMIT_MESSAGE = "Fortnox API rate limit exceeded"

# Failures where the request left but no usable response came back
_NO_RESPONSE_ERRORS: tuple[type[BaseException], ...] = (
    aiohttp.ClientConnectionError,
    aiohttp.ClientPayloadError,
    asyncio.TimeoutError,
)


@dataclass(frozen=True)
class APIErrorInfo:
    """Fields of an ``ErrorInformation`` body."""

    message: str | None
    error: int | None
    code: int | None


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _get_ci(mapping: Mapping[str, Any], key: str) -> Any:
    lowered = key.lower()
    for k, v in mapping.items():
        if isinstance(k, str) and k.lower() == lowered:
            return v
    return None


def extract_api_error(data: Any) -> APIErrorInfo | None:
    """Extract ErrorInformation fields; keys are matched case-insensitively."""
    if not isinstance(data, Mapping):
        return None
    info = _get_ci(data, ERROR_KEY)
    if not isinstance(info, Mapping):
        return None
    message = _get_ci(info, "message")
    return APIErrorInfo(
        message=str(message) if message is not None else None,
        error=_as_int(_get_ci(info, "error")),
        code=_as_int(_get_ci(info, "code")),
    )


def classify(
    error: BaseException | None = None,
    response: RawResponse | None = None,
) -> NormalizedError:
    """Classify a failed call into a NormalizedError."""
    if response is not None:
        return _classify_response(response)

    if isinstance(error, FortnoxError):
        return error.error

    if isinstance(error, _NO_RESPONSE_ERRORS):
        return NormalizedError(
            kind=ErrorKind.TRANSPORT,
            message=NO_RESPONSE_MESSAGE,
            retryable=True,
        )

    # Raised by the session itself (e.g. too many redirects) but carries a status
    if isinstance(error, aiohttp.ClientResponseError) and error.status:
        return NormalizedError(
            kind=ErrorKind.HTTP,
            message=f"Request failed with status {error.status}",
            status_code=error.status,
            retryable=error.status >= 500,
        )

    message = (str(error) or type(error).__name__) if error is not None else "Unknown error"
    return NormalizedError(kind=ErrorKind.OTHER, message=message)


def _classify_response(response: RawResponse) -> NormalizedError:
    sanitized = sanitize_response(response)
    api = extract_api_error(response.data)

    if response.status == 429:
        return NormalizedError(
            kind=ErrorKind.THROTTLE,
            message=(api.message if api and api.message else RATE_LIMIT_MESSAGE),
            status_code=429,
            api_error_code=api.code if api else None,
            api_error_number=api.error if api else None,
            sanitized_response=sanitized,
            retryable=True,
        )

    if api is not None:
        return NormalizedError(
            kind=ErrorKind.API,
            message=api.message or f"Fortnox API error (HTTP {response.status})",
            status_code=response.status,
            api_error_code=api.code,
            api_error_number=api.error,
            sanitized_response=sanitized,
            retryable=response.status >= 500,
        )

    return NormalizedError(
        kind=ErrorKind.HTTP,
        message=f"Request failed with status {response.status}",
        status_code=response.status,
        sanitized_response=sanitized,
        retryable=response.status >= 500,
    )
