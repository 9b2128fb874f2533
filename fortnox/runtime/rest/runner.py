"""REST request runner using declarative endpoint specs."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ...config import LIMIT_PARAM
from ...core.query import Query
from ...models.meta import AggregatedResult
from ..pagination import PageAggregator
from .transport import RESTTransport


def default_query(params: dict[str, Any]) -> Query:
    """Query built from the caller filters, minus the page size limit."""
    filters = params.get("filters") or {}
    return Query({k: v for k, v in filters.items() if k != LIMIT_PARAM})


@dataclass(frozen=True)
class RestEndpointSpec:
    """Declarative description of one resource endpoint.

    Attributes:
        id: Endpoint identifier (e.g. "vouchers", "account_details")
        build_path: Builds the path (relative to the API base URL) from params
        payload_key: Key of the payload in the response envelope; None means
            "discover the one non-meta key" and is meant for ad-hoc paths
        build_query: Builds the base query; defaults to the caller filters
        paginated: Whether the endpoint is a listing that supports paging
        raw: Response body is returned as-is (no envelope, e.g. SIE files)
    """

    id: str
    build_path: Callable[[dict[str, Any]], str]
    payload_key: str | None = None
    build_query: Callable[[dict[str, Any]], Query] = default_query
    paginated: bool = True
    raw: bool = False


class RestRunner:
    """Executes endpoint specs through the aggregator and transport."""

    def __init__(self, transport: RESTTransport, aggregator: PageAggregator | None = None) -> None:
        self._t = transport
        self._aggregator = aggregator or PageAggregator(transport)

    @property
    def aggregator(self) -> PageAggregator:
        return self._aggregator

    async def run(
        self,
        *,
        spec: RestEndpointSpec,
        params: dict[str, Any],
        paginate: bool = False,
    ) -> AggregatedResult | Any:
        """Build path and query from ``params`` and fetch.

        ``params`` carries path parameters at the top level and the caller
        filters (already validated and normalized) under ``"filters"``.
        """
        path = spec.build_path(params)
        query = spec.build_query(params)

        if spec.raw:
            return await self._t.get(path, query)

        filters = params.get("filters") or {}
        return await self._aggregator.fetch_all(
            path,
            query=query,
            limit=filters.get(LIMIT_PARAM),
            paginate=paginate and spec.paginated,
            payload_key=spec.payload_key,
        )
