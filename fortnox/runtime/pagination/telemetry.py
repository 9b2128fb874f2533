"""Structured logging for pagination.

This module provides telemetry hooks for multi-page fetches, emitting
structured logs for observability.
"""

from __future__ import annotations

import logging

from ...models.meta import AggregatedResult

logger = logging.getLogger(__name__)


def log_page_fetched(
    *,
    path: str,
    page: int,
    items: int,
    total_pages: int | None,
    latency_ms: float | None = None,
) -> None:
    """Log completion of a single page.

    Args:
        path: Endpoint path
        page: One-based page number
        items: Number of items on this page
        total_pages: TotalPages reported by the server (None if no meta)
        latency_ms: Latency in milliseconds (optional)
    """
    logger.debug(
        "page_fetched",
        extra={
            "path": path,
            "page": page,
            "items": items,
            "total_pages": total_pages,
            "latency_ms": latency_ms,
        },
    )


def log_page_limit_reached(*, path: str, max_pages: int, total_pages: int) -> None:
    """Log that the page cap stopped pagination before TotalPages."""
    logger.warning(
        "page_limit_reached",
        extra={"path": path, "max_pages": max_pages, "total_pages": total_pages},
    )


def log_pagination_complete(
    *,
    path: str,
    result: AggregatedResult,
    total_latency_ms: float | None = None,
) -> None:
    """Log completion of an aggregated fetch."""
    logger.info(
        "pagination_complete",
        extra={
            "path": path,
            "payload_key": result.payload_key,
            "pages_fetched": result.pages_fetched,
            "total_items": len(result),
            "total_resources": result.meta.total_resources if result.meta else None,
            "total_latency_ms": total_latency_ms,
        },
    )


def log_page_error(*, path: str, page: int, error_type: str, error_message: str) -> None:
    """Log a failed page fetch.

    Args:
        path: Endpoint path
        page: One-based page number that failed
        error_type: Exception class name
        error_message: Sanitized error message
    """
    logger.error(
        "page_error",
        extra={
            "path": path,
            "page": page,
            "error_type": error_type,
            "error_message": error_message,
        },
    )
