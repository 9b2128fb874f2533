"""Listing envelope parsing.

A Fortnox listing response looks like::

    {"MetaInformation": {"@TotalPages": 3, ...}, "Vouchers": [...]}

Exactly one key besides MetaInformation carries the payload. Endpoint
specs declare that key; generic callers may leave it to discovery.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ...config import META_KEY
from ...core.exceptions import ResponseFormatError
from ...models.meta import MetaInformation


@dataclass(frozen=True)
class Page:
    """One decoded listing page."""

    payload_key: str
    payload: Any
    meta: MetaInformation | None

    @property
    def is_collection(self) -> bool:
        return isinstance(self.payload, list)


def discover_payload_key(response: Mapping[str, Any]) -> str:
    """Return the single non-meta key of an envelope.

    Raises:
        ResponseFormatError: If there is not exactly one such key
    """
    keys = [key for key in response if key != META_KEY]
    if len(keys) != 1:
        raise ResponseFormatError(
            f"Expected exactly one payload key besides {META_KEY}, found {sorted(keys)}"
        )
    return keys[0]


def parse_meta(response: Mapping[str, Any]) -> MetaInformation | None:
    """Parse MetaInformation if present."""
    raw = response.get(META_KEY)
    if raw is None:
        return None
    try:
        return MetaInformation.model_validate(raw)
    except PydanticValidationError as e:
        raise ResponseFormatError(f"Invalid {META_KEY}: {e.errors()[0]['msg']}") from e


def parse_page(response: Any, payload_key: str | None = None) -> Page:
    """Decode a response body into a Page.

    Args:
        response: Decoded JSON body
        payload_key: Declared payload key, or None to discover it

    Raises:
        ResponseFormatError: If the body is not an envelope or lacks the key
    """
    if not isinstance(response, Mapping):
        raise ResponseFormatError(
            f"Invalid response format: expected object, got {type(response).__name__}"
        )
    key = payload_key or discover_payload_key(response)
    if key not in response:
        raise ResponseFormatError(f"Response is missing payload key '{key}'")
    return Page(payload_key=key, payload=response[key], meta=parse_meta(response))
