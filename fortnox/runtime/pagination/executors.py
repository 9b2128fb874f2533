"""Page aggregation: drives sequential page fetches and merges the results.

This module provides the PageAggregator class that fetches page 1, reads
TotalPages, fetches the remaining pages in order and concatenates their
payload arrays.
"""

from __future__ import annotations

from time import perf_counter
from typing import Any, Protocol

from ...config import PagePolicy
from ...core.exceptions import ResponseFormatError
from ...core.query import Query
from ...core.sanitize import sanitize_error_for_logging
from ...core.validation import validate_limit
from ...models.meta import AggregatedResult
from .envelope import Page, parse_page
from .telemetry import (
    log_page_error,
    log_page_fetched,
    log_page_limit_reached,
    log_pagination_complete,
)


class PageFetcher(Protocol):
    """Anything that can GET a path with a query (RESTTransport)."""

    async def get(self, path: str, params: Query | None = None) -> Any: ...


class PageAggregator:
    """Fetches listing pages sequentially and merges them.

    Pages are never requested in parallel: page N+1 is only issued after
    page N has been decoded, and the merged items keep page order without
    de-duplication.
    """

    def __init__(self, transport: PageFetcher, policy: PagePolicy | None = None) -> None:
        """Initialize aggregator.

        Args:
            transport: Dispatcher used for every page request
            policy: Page size cap and optional maximum page count
        """
        self._transport = transport
        self._policy = policy or PagePolicy()

    @property
    def policy(self) -> PagePolicy:
        return self._policy

    async def fetch_all(
        self,
        path: str,
        *,
        query: Query | None = None,
        limit: int | None = None,
        paginate: bool = False,
        payload_key: str | None = None,
    ) -> AggregatedResult:
        """Fetch page 1 and, if ``paginate`` is set, every following page.

        Args:
            path: Endpoint path relative to the API base URL
            query: Base query applied to every page
            limit: Page size, capped at ``policy.max_page_size``
            paginate: Fetch pages 2..TotalPages; otherwise only page 1
            payload_key: Declared payload key (discovered when None)

        Returns:
            AggregatedResult with the concatenated items and the meta of the
            last page that carried one (a later page without meta keeps the
            previous page's meta).
            Singleton payloads are returned verbatim and never paginated.

        Raises:
            ResponseFormatError: If a page does not match the envelope contract
            FortnoxError: Any dispatcher failure, unchanged
        """
        base = query if query is not None else Query()
        if limit is not None:
            base = base.with_params(limit=min(validate_limit(limit), self._policy.max_page_size))

        start = perf_counter()
        first = await self._fetch_page(path, base, 1, payload_key)
        key = first.payload_key

        if not first.is_collection:
            result = AggregatedResult(
                payload_key=key,
                data={key: first.payload},
                meta=first.meta,
                pages_fetched=1,
            )
            log_pagination_complete(
                path=path, result=result, total_latency_ms=(perf_counter() - start) * 1000.0
            )
            return result

        items: list[Any] = list(first.payload)
        meta = first.meta
        pages_fetched = 1

        if paginate and meta is not None and meta.total_pages > 1:
            last_page = meta.total_pages
            max_pages = self._policy.max_pages
            if max_pages is not None and last_page > max_pages:
                log_page_limit_reached(path=path, max_pages=max_pages, total_pages=last_page)
                last_page = max_pages

            for page_number in range(2, last_page + 1):
                page = await self._fetch_page(
                    path, base.with_params(page=page_number), page_number, key
                )
                if not page.is_collection:
                    raise ResponseFormatError(
                        f"Page {page_number} of {path} returned a non-list '{key}' payload"
                    )
                items.extend(page.payload)
                if page.meta is not None:
                    meta = page.meta
                pages_fetched += 1

        result = AggregatedResult(
            payload_key=key,
            data={key: items},
            meta=meta,
            pages_fetched=pages_fetched,
        )
        log_pagination_complete(
            path=path, result=result, total_latency_ms=(perf_counter() - start) * 1000.0
        )
        return result

    async def _fetch_page(
        self, path: str, query: Query, page_number: int, payload_key: str | None
    ) -> Page:
        page_start = perf_counter()
        try:
            body = await self._transport.get(path, query)
            page = parse_page(body, payload_key)
        except Exception as e:
            log_page_error(
                path=path,
                page=page_number,
                error_type=type(e).__name__,
                error_message=sanitize_error_for_logging(e),
            )
            raise

        log_page_fetched(
            path=path,
            page=page_number,
            items=len(page.payload) if page.is_collection else 1,
            total_pages=page.meta.total_pages if page.meta else None,
            latency_ms=(perf_counter() - page_start) * 1000.0,
        )
        return page
