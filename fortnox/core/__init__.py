"""Core components."""

from .enums import ErrorKind, RefreshMode, SIEType, TokenState
from .errors import NormalizedError, SanitizedResponse
from .exceptions import (
    APIError,
    AuthRefreshError,
    FortnoxError,
    HTTPError,
    ResponseFormatError,
    ThrottleError,
    TransportError,
    ValidationError,
    exception_for,
)
from .query import Query, normalize_key
from .sanitize import sanitize_error_for_logging, sanitize_response, scrub
from .validation import (
    validate_filters,
    validate_limit,
    validate_numeric_path_param,
    validate_resource_path,
    validate_sie_type,
    validate_voucher_series,
)

__all__ = [
    "ErrorKind",
    "RefreshMode",
    "SIEType",
    "TokenState",
    "NormalizedError",
    "SanitizedResponse",
    "FortnoxError",
    "TransportError",
    "HTTPError",
    "APIError",
    "ThrottleError",
    "AuthRefreshError",
    "ResponseFormatError",
    "ValidationError",
    "exception_for",
    "Query",
    "normalize_key",
    "sanitize_error_for_logging",
    "sanitize_response",
    "scrub",
    "validate_filters",
    "validate_limit",
    "validate_numeric_path_param",
    "validate_resource_path",
    "validate_sie_type",
    "validate_voucher_series",
]
