"""Listing envelope metadata and aggregated result models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MetaInformation(BaseModel):
    """Pagination metadata of a Fortnox listing response."""

    total_pages: int = Field(default=1, alias="@TotalPages", ge=0)
    current_page: int = Field(default=1, alias="@CurrentPage", ge=0)
    total_resources: int = Field(default=0, alias="@TotalResources", ge=0)

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class AggregatedResult(BaseModel):
    """Result of a (possibly multi-page) fetch.

    ``data`` maps the payload key to the concatenation of every fetched
    page's items, in page order. ``meta`` is the last fetched page's meta.
    Singleton resources carry their object verbatim and no meta.
    """

    payload_key: str
    data: dict[str, Any]
    meta: MetaInformation | None = None
    pages_fetched: int = Field(default=1, ge=0)

    model_config = ConfigDict(frozen=True)

    @property
    def items(self) -> Any:
        """Payload value (list of items, or the singleton object)."""
        return self.data[self.payload_key]

    @property
    def is_singleton(self) -> bool:
        return not isinstance(self.items, list)

    def __len__(self) -> int:
        items = self.items
        return len(items) if isinstance(items, list) else 1
