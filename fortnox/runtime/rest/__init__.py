"""REST runtime abstractions."""

from ...core.sanitize import sanitize_error_for_logging, sanitize_response, scrub
from .classifier import classify, extract_api_error
from .http_client import HTTPClient, RawResponse, parse_retry_after
from .rate_limiter import RateLimiter
from .runner import RestEndpointSpec, RestRunner, default_query
from .transport import RESTTransport

__all__ = [
    "HTTPClient",
    "RawResponse",
    "RateLimiter",
    "RESTTransport",
    "RestRunner",
    "RestEndpointSpec",
    "classify",
    "default_query",
    "extract_api_error",
    "parse_retry_after",
    "sanitize_error_for_logging",
    "sanitize_response",
    "scrub",
]
