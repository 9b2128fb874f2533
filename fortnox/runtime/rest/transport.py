"""Rate-limited REST transport: the single entry point for outbound GETs.

Architecture:
    RESTTransport combines an HTTPClient, a RateLimiter gate and an
    AuthProvider. Every request:
    1. waits for the concurrency-1 gate,
    2. waits out the minimum spacing since the previous request start,
    3. asks the auth provider for headers (never cached across calls),
    4. issues the GET and classifies any failure.

    A 429 carrying Retry-After is retried after exactly that delay, at most
    ``max_throttle_retries`` times (default once). The gate stays held during
    the wait so no other request starts while the server asked us to back off.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from time import perf_counter
from typing import TYPE_CHECKING, Any

from ...config import API_BASE_URL, DEFAULT_TIMEOUT, RateLimitPolicy
from ...core.enums import ErrorKind
from ...core.exceptions import exception_for
from ...core.query import Query
from ...core.sanitize import sanitize_error_for_logging
from .classifier import classify
from .http_client import HTTPClient
from .rate_limiter import RateLimiter

if TYPE_CHECKING:
    from ...auth.base import AuthProvider

logger = logging.getLogger(__name__)


class RESTTransport:
    """Serializes, paces and authenticates GET requests."""

    def __init__(
        self,
        auth: AuthProvider,
        *,
        base_url: str = API_BASE_URL,
        policy: RateLimitPolicy | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        http: HTTPClient | None = None,
        limiter: RateLimiter | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the transport.

        Args:
            auth: Supplies authentication headers for each request
            base_url: API base URL; relative paths are joined onto it
            policy: Pacing and throttle retry policy
            timeout: Total timeout per HTTP request in seconds
            http: Optional pre-built HTTPClient
            limiter: Optional pre-built RateLimiter (shares pacing across transports)
            sleep: Awaitable used for the Retry-After wait
        """
        self._auth = auth
        self._policy = policy or RateLimitPolicy()
        self._http = http or HTTPClient(base_url=base_url, timeout=timeout)
        self._limiter = limiter or RateLimiter(self._policy.min_interval, sleep=sleep)
        self._sleep = sleep

    @property
    def policy(self) -> RateLimitPolicy:
        return self._policy

    async def get(self, path: str, params: Query | Mapping[str, Any] | None = None) -> Any:
        """Dispatch one GET and return the decoded body unchanged.

        Raises:
            ThrottleError: 429 without Retry-After, or still 429 after the retry
            APIError: Structured ErrorInformation response
            HTTPError: Any other non-2xx response
            TransportError: No response received
            FortnoxError: Request could not be built or sent
        """
        query = params if isinstance(params, Query) or params is None else Query(params)
        retries = 0

        async with self._limiter:
            while True:
                await self._limiter.pace()
                start = perf_counter()
                headers = {"Accept": "application/json", **await self._auth.auth_headers()}
                try:
                    response = await self._http.get(
                        path,
                        params=query.to_dict() if query else None,
                        headers=headers,
                    )
                except Exception as e:
                    error = classify(e)
                    logger.error(
                        "request_failed",
                        extra={
                            "path": path,
                            "error_kind": error.kind.value,
                            "error_message": sanitize_error_for_logging(e),
                        },
                    )
                    raise exception_for(error) from e

                latency_ms = (perf_counter() - start) * 1000.0
                if response.ok:
                    logger.debug(
                        "request_completed",
                        extra={"path": path, "status": response.status, "latency_ms": latency_ms},
                    )
                    return response.data

                error = classify(response=response)
                retry_after = response.retry_after() if error.kind is ErrorKind.THROTTLE else None

                if retry_after is not None and retries < self._policy.max_throttle_retries:
                    retries += 1
                    logger.warning(
                        "request_throttled",
                        extra={
                            "path": path,
                            "retry_after": retry_after,
                            "retry": retries,
                        },
                    )
                    await self._sleep(retry_after)
                    continue

                logger.error(
                    "request_failed",
                    extra={
                        "path": path,
                        "status": response.status,
                        "error_kind": error.kind.value,
                        "error_message": error.describe(),
                        "latency_ms": latency_ms,
                    },
                )
                raise exception_for(error, retry_after=retry_after)

    async def close(self) -> None:
        """Close underlying HTTP resources."""
        await self._http.close()

    async def __aenter__(self) -> RESTTransport:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
