"""Immutable query parameter mapping.

Keys are case-normalized (lower-cased, underscores removed) so that
``from_date``, ``fromDate`` and ``fromdate`` all address the same Fortnox
parameter. Values are rendered to the string form the API expects.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from datetime import date, datetime
from enum import Enum
from typing import Any

from ..config import SECRET_QUERY_KEYS
from .exceptions import ValidationError


def normalize_key(key: str) -> str:
    """Normalize a parameter name to its Fortnox wire form."""
    if not isinstance(key, str) or not key.strip():
        raise ValidationError(f"Invalid query parameter name: {key!r}")
    return key.strip().replace("_", "").replace("-", "").lower()


def render_value(value: Any) -> str:
    """Render a parameter value as Fortnox expects it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    # datetime before date: datetime is a date subclass
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (int, float, str)):
        return str(value)
    raise ValidationError(
        f"Unsupported query value type: {type(value).__name__}"
    )


class Query(Mapping[str, str]):
    """Ordered, immutable mapping of query parameters.

    Construction drops ``None`` values and rejects keys that would carry
    secrets. ``with_params`` returns a new instance.
    """

    __slots__ = ("_items",)

    def __init__(self, params: Mapping[str, Any] | None = None, **kwargs: Any) -> None:
        items: dict[str, str] = {}
        for source in (params or {}, kwargs):
            for key, value in source.items():
                if value is None:
                    continue
                name = normalize_key(key)
                if name in SECRET_QUERY_KEYS:
                    raise ValidationError(f"Query parameter '{key}' must not carry secrets")
                items[name] = render_value(value)
        self._items = items

    def with_params(self, **params: Any) -> Query:
        """Return a copy with ``params`` added or overwritten."""
        merged: dict[str, Any] = dict(self._items)
        merged.update(Query(params)._items)
        return Query(merged)

    def without(self, *keys: str) -> Query:
        """Return a copy without ``keys``."""
        drop = {normalize_key(k) for k in keys}
        return Query({k: v for k, v in self._items.items() if k not in drop})

    def __getitem__(self, key: str) -> str:
        return self._items[normalize_key(key)]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and bool(key.strip()) and normalize_key(key) in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Query):
            return list(self._items.items()) == list(other._items.items())
        if isinstance(other, Mapping):
            return dict(self._items) == dict(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(self._items.items()))

    def __repr__(self) -> str:
        return f"Query({self._items!r})"

    def to_dict(self) -> dict[str, str]:
        """Plain dict copy, suitable for aiohttp ``params``."""
        return dict(self._items)
