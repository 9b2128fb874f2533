"""Runtime layer: transport, rate limiting, pagination and error classification."""

from .pagination import PageAggregator
from .rest import HTTPClient, RateLimiter, RESTTransport, RestEndpointSpec, RestRunner

__all__ = [
    "HTTPClient",
    "PageAggregator",
    "RateLimiter",
    "RESTTransport",
    "RestEndpointSpec",
    "RestRunner",
]
