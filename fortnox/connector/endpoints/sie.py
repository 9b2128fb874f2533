"""Fortnox SIE export endpoint definition.

``sie/{type}`` answers with an SIE file (plain text, CP437/UTF-8 depending
on the account), not a JSON envelope, so the body is returned as decoded text.
"""

from __future__ import annotations

from typing import Any

from fortnox.core.validation import validate_sie_type
from fortnox.runtime.rest import RestEndpointSpec


def build_path(params: dict[str, Any]) -> str:
    sie_type = validate_sie_type(params["sie_type"])
    return f"sie/{sie_type.value}"


SPEC = RestEndpointSpec(
    id="sie_export",
    build_path=build_path,
    paginated=False,
    raw=True,
)
