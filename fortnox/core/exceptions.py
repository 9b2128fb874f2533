"""Custom exception hierarchy.

Every exception carries a fully built NormalizedError in ``.error``. The
message is fixed at construction and never rewritten afterwards.
"""

from __future__ import annotations

from .enums import ErrorKind
from .errors import NormalizedError, SanitizedResponse


class FortnoxError(Exception):
    """Base exception for all client errors."""

    kind: ErrorKind = ErrorKind.OTHER

    def __init__(
        self,
        error: NormalizedError | str,
        *,
        status_code: int | None = None,
    ) -> None:
        if isinstance(error, str):
            error = NormalizedError(
                kind=self.kind,
                message=error,
                status_code=status_code,
                retryable=self.kind.retryable,
            )
        super().__init__(error.message)
        self.error = error

    @property
    def message(self) -> str:
        return self.error.message

    @property
    def status_code(self) -> int | None:
        return self.error.status_code

    @property
    def api_error_code(self) -> int | None:
        return self.error.api_error_code

    @property
    def api_error_number(self) -> int | None:
        return self.error.api_error_number

    @property
    def sanitized_response(self) -> SanitizedResponse | None:
        return self.error.sanitized_response

    @property
    def retryable(self) -> bool:
        return self.error.retryable


class TransportError(FortnoxError):
    """Request was sent but no response was received."""

    kind = ErrorKind.TRANSPORT


class HTTPError(FortnoxError):
    """Non-2xx response without a structured error body."""

    kind = ErrorKind.HTTP


class APIError(FortnoxError):
    """Structured ErrorInformation body returned by the API."""

    kind = ErrorKind.API


class ThrottleError(FortnoxError):
    """Rate limit exceeded (HTTP 429). Retryable by the caller."""

    kind = ErrorKind.THROTTLE

    def __init__(
        self,
        error: NormalizedError | str,
        *,
        status_code: int | None = 429,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(error, status_code=status_code)
        self.retry_after = retry_after


class AuthRefreshError(FortnoxError):
    """Refresh token rejected. Terminal: the caller must re-authenticate."""

    kind = ErrorKind.AUTH_REFRESH


class ResponseFormatError(FortnoxError):
    """Response body does not match the expected envelope."""

    kind = ErrorKind.RESPONSE_FORMAT


class ValidationError(FortnoxError, ValueError):
    """Malformed caller input, rejected before any network call."""

    kind = ErrorKind.VALIDATION


_EXCEPTIONS_BY_KIND: dict[ErrorKind, type[FortnoxError]] = {
    ErrorKind.TRANSPORT: TransportError,
    ErrorKind.HTTP: HTTPError,
    ErrorKind.API: APIError,
    ErrorKind.THROTTLE: ThrottleError,
    ErrorKind.AUTH_REFRESH: AuthRefreshError,
    ErrorKind.RESPONSE_FORMAT: ResponseFormatError,
    ErrorKind.VALIDATION: ValidationError,
    ErrorKind.OTHER: FortnoxError,
}


def exception_for(error: NormalizedError, *, retry_after: float | None = None) -> FortnoxError:
    """Build the exception matching a normalized error's kind."""
    exc_cls = _EXCEPTIONS_BY_KIND[error.kind]
    if exc_cls is ThrottleError:
        return ThrottleError(error, status_code=error.status_code, retry_after=retry_after)
    return exc_cls(error)
