"""Fortnox financial years endpoint definition.

The listing accepts an optional ``date`` filter returning the financial
year that contains it.
"""

from __future__ import annotations

from typing import Any

from fortnox.runtime.rest import RestEndpointSpec


def build_path(_params: dict[str, Any]) -> str:
    return "financialyears"


SPEC = RestEndpointSpec(
    id="financial_years",
    build_path=build_path,
    payload_key="FinancialYears",
)
