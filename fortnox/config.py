"""Shared Fortnox client constants and tunable policies.

This module centralizes URLs, wire keys and default pacing so the transport,
token manager and connector can stay small and focused.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timedelta

# REST base URL (API version 3)
API_BASE_URL = "https://api.fortnox.se/3/"

# OAuth2 token endpoint (refresh_token grant)
TOKEN_URL = "https://apps.fortnox.se/oauth-v1/token"

# Wire keys of the listing envelope
META_KEY = "MetaInformation"
TOTAL_PAGES_KEY = "@TotalPages"
CURRENT_PAGE_KEY = "@CurrentPage"
TOTAL_RESOURCES_KEY = "@TotalResources"
ERROR_KEY = "ErrorInformation"

# Query parameter names owned by the pagination layer
PAGE_PARAM = "page"
LIMIT_PARAM = "limit"

# Fortnox allows 25 requests per 5 seconds per client; 250ms keeps us under it
DEFAULT_MIN_INTERVAL = 0.25
DEFAULT_MAX_THROTTLE_RETRIES = 1
DEFAULT_TIMEOUT = 30.0

# SIE files are served as text/plain, usually without a charset
SIE_ENCODING = "cp437"

# Fortnox max page size
MAX_PAGE_SIZE = 500

# Access tokens live one hour
DEFAULT_SAFETY_MARGIN = timedelta(minutes=5)

# Keys scrubbed from any payload that may reach a log sink
SENSITIVE_KEYS = frozenset(
    {
        "authorization",
        "access-token",
        "client-secret",
        "cookie",
        "set-cookie",
        "proxy-authorization",
    }
)

# Query keys that would carry secrets (normalized form)
SECRET_QUERY_KEYS = frozenset(
    {"accesstoken", "refreshtoken", "clientsecret", "clientid", "authorization"}
)


@dataclass(frozen=True)
class RateLimitPolicy:
    """Pacing policy for the dispatcher.

    Attributes:
        min_interval: Minimum seconds between the start of consecutive requests
        max_throttle_retries: Automatic retries on a 429 carrying Retry-After
    """

    min_interval: float = DEFAULT_MIN_INTERVAL
    max_throttle_retries: int = DEFAULT_MAX_THROTTLE_RETRIES

    def __post_init__(self) -> None:
        if self.min_interval < 0:
            raise ValueError("min_interval must be >= 0")
        if self.max_throttle_retries < 0:
            raise ValueError("max_throttle_retries must be >= 0")


@dataclass(frozen=True)
class PagePolicy:
    """Pagination policy for the aggregator.

    Attributes:
        max_page_size: Upper bound applied to a caller supplied limit
        max_pages: Maximum pages to fetch when paginating (None = all)
    """

    max_page_size: int = MAX_PAGE_SIZE
    max_pages: int | None = None

    def __post_init__(self) -> None:
        if self.max_page_size < 1:
            raise ValueError("max_page_size must be >= 1")
        if self.max_pages is not None and self.max_pages < 1:
            raise ValueError("max_pages must be >= 1")


@dataclass(frozen=True)
class TokenPolicy:
    """Refresh policy for the token manager."""

    safety_margin: timedelta = DEFAULT_SAFETY_MARGIN

    def __post_init__(self) -> None:
        if self.safety_margin <= timedelta(0):
            raise ValueError("safety_margin must be positive")


@dataclass(frozen=True)
class ClientSettings:
    """Connection settings, typically read from the environment.

    Used by examples and integration tests; the library itself never reads
    the environment implicitly.
    """

    access_token: str
    refresh_token: str = ""
    client_id: str = ""
    client_secret: str = ""
    expires_in: int | None = None
    api_base_url: str = API_BASE_URL
    token_url: str = TOKEN_URL
    rate_limit: RateLimitPolicy = field(default_factory=RateLimitPolicy)

    @classmethod
    def from_env(cls, prefix: str = "FORTNOX_") -> ClientSettings:
        """Build settings from ``<prefix>*`` environment variables.

        Raises:
            KeyError: If ``<prefix>ACCESS_TOKEN`` is not set
        """
        env = os.environ
        expires_in = env.get(f"{prefix}EXPIRES_IN")
        min_interval = env.get(f"{prefix}MIN_INTERVAL")
        return cls(
            access_token=env[f"{prefix}ACCESS_TOKEN"],
            refresh_token=env.get(f"{prefix}REFRESH_TOKEN", ""),
            client_id=env.get(f"{prefix}CLIENT_ID", ""),
            client_secret=env.get(f"{prefix}CLIENT_SECRET", ""),
            expires_in=int(expires_in) if expires_in else None,
            api_base_url=env.get(f"{prefix}API_BASE_URL", API_BASE_URL),
            token_url=env.get(f"{prefix}TOKEN_URL", TOKEN_URL),
            rate_limit=RateLimitPolicy(
                min_interval=float(min_interval) if min_interval else DEFAULT_MIN_INTERVAL
            ),
        )

    @property
    def can_refresh(self) -> bool:
        """Whether refresh-token credentials are complete."""
        return bool(self.refresh_token and self.client_id and self.client_secret)
