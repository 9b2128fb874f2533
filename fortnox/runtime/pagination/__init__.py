"""Pagination layer for Fortnox listing endpoints.

Architecture:
    - envelope.py: Envelope decoding (payload key, MetaInformation)
    - executors.py: PageAggregator (sequential fetch and merge)
    - telemetry.py: Structured logging

Usage:
    The aggregator is generic over resource shape: endpoint specs declare
    their payload key, and ad-hoc paths fall back to discovering it.
"""

from __future__ import annotations

from .envelope import Page, discover_payload_key, parse_meta, parse_page
from .executors import PageAggregator, PageFetcher

__all__ = [
    "Page",
    "PageAggregator",
    "PageFetcher",
    "discover_payload_key",
    "parse_meta",
    "parse_page",
]
