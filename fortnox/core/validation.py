"""Input validation for URL path parameters and caller filters.

Fortnox uses short alphanumeric voucher series (e.g. A, B, K) and numeric
identifiers. Everything that ends up in a URL path goes through here before
any request is built.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from ..config import LIMIT_PARAM, PAGE_PARAM, SECRET_QUERY_KEYS
from .enums import SIEType
from .exceptions import ValidationError
from .query import normalize_key

VOUCHER_SERIES_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,10}$")
MAX_SAFE_INTEGER = 2**53 - 1


def validate_voucher_series(value: str) -> str:
    """Validate and return a voucher series safe for a URL path.

    Raises:
        ValidationError: On path traversal, special characters or overlong input
    """
    trimmed = str(value).strip()
    if not trimmed or "/" in trimmed or ".." in trimmed:
        raise ValidationError("Invalid voucher series: contains invalid characters")
    if not VOUCHER_SERIES_PATTERN.match(trimmed):
        raise ValidationError("Invalid voucher series: must be alphanumeric (max 10 chars)")
    return trimmed


def validate_numeric_path_param(value: int | str, param_name: str) -> int:
    """Validate a numeric path parameter (voucher number, account number)."""
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {param_name}: must be a non-negative integer")
    if isinstance(value, str):
        stripped = value.strip()
        if not (stripped.isascii() and stripped.isdigit()):
            raise ValidationError(f"Invalid {param_name}: must be a non-negative integer")
        value = int(stripped)
    if not isinstance(value, int) or value < 0 or value > MAX_SAFE_INTEGER:
        raise ValidationError(f"Invalid {param_name}: must be a non-negative integer")
    return value


def validate_sie_type(value: SIEType | str | int) -> SIEType:
    """Validate an SIE export type (1-4)."""
    try:
        return SIEType(str(value.value if isinstance(value, SIEType) else value))
    except ValueError:
        raise ValidationError("Invalid SIE type: must be one of 1, 2, 3 or 4") from None


def validate_resource_path(value: str) -> str:
    """Validate an ad-hoc resource path relative to the API base URL.

    Absolute URLs, traversal segments and embedded queries are rejected so
    the bearer token is only ever sent to the configured API host.
    """
    raw = str(value).strip()
    path = raw.strip("/")
    if not path or "//" in raw or ":" in path or "?" in path or "#" in path:
        raise ValidationError(f"Invalid resource path: {value!r}")
    if any(segment in ("", ".", "..") for segment in path.split("/")):
        raise ValidationError(f"Invalid resource path: {value!r}")
    return path


def validate_limit(value: Any) -> int:
    """Validate a page size limit."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError("Invalid limit: must be a positive integer")
    return value


def validate_filters(filters: Mapping[str, Any] | None) -> dict[str, Any]:
    """Validate caller filters and split off the page size limit.

    Returns:
        A plain dict copy of the filters; ``limit`` is kept so the caller can
        pop it for the aggregator.

    Raises:
        ValidationError: If filters is not a mapping, names the ``page``
            parameter (owned by the aggregator) or a secret-bearing key
    """
    if filters is None:
        return {}
    if not isinstance(filters, Mapping):
        raise ValidationError(
            f"Filters must be a mapping, got {type(filters).__name__}"
        )
    result: dict[str, Any] = {}
    for key, value in filters.items():
        name = normalize_key(key)
        if name == PAGE_PARAM:
            raise ValidationError("The 'page' filter is managed by pagination; use paginate=True")
        if name in SECRET_QUERY_KEYS:
            raise ValidationError(f"Filter '{key}' must not carry secrets")
        if name == LIMIT_PARAM and value is not None:
            value = validate_limit(value)
        result[name] = value
    return result
