"""Fortnox - async, rate limited, read-only client for the Fortnox REST API."""

from .auth import AuthProvider, LegacyTokenAuth, StaticTokenAuth, TokenManager
from .config import ClientSettings, PagePolicy, RateLimitPolicy, TokenPolicy
from .connector import FortnoxClient
from .core import (
    APIError,
    AuthRefreshError,
    ErrorKind,
    FortnoxError,
    HTTPError,
    NormalizedError,
    Query,
    RefreshMode,
    ResponseFormatError,
    SanitizedResponse,
    SIEType,
    ThrottleError,
    TokenState,
    TransportError,
    ValidationError,
)
from .models import AggregatedResult, Credentials, MetaInformation

__version__ = "0.1.0"

__all__ = [
    # Client
    "FortnoxClient",
    "ClientSettings",
    # Auth
    "AuthProvider",
    "StaticTokenAuth",
    "LegacyTokenAuth",
    "TokenManager",
    "Credentials",
    "RefreshMode",
    "TokenState",
    # Policies
    "RateLimitPolicy",
    "PagePolicy",
    "TokenPolicy",
    # Results
    "AggregatedResult",
    "MetaInformation",
    "Query",
    "SIEType",
    # Errors
    "ErrorKind",
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
]
