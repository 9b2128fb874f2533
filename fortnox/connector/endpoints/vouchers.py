"""Fortnox voucher endpoint definitions.

Listing: ``vouchers`` (paginated, payload ``Vouchers``).
Details: ``vouchers/{series}/{number}`` (singleton, payload ``Voucher``).
"""

from __future__ import annotations

from typing import Any

from fortnox.core.validation import validate_numeric_path_param, validate_voucher_series
from fortnox.runtime.rest import RestEndpointSpec


def build_path(_params: dict[str, Any]) -> str:
    return "vouchers"


def build_details_path(params: dict[str, Any]) -> str:
    """Build the voucher details path.

    Both path segments are validated here as well, so no endpoint caller
    can put an unchecked value into the URL.
    """
    series = validate_voucher_series(params["voucher_series"])
    number = validate_numeric_path_param(params["voucher_number"], "voucher number")
    return f"vouchers/{series}/{number}"


SPEC = RestEndpointSpec(
    id="vouchers",
    build_path=build_path,
    payload_key="Vouchers",
)

DETAILS_SPEC = RestEndpointSpec(
    id="voucher_details",
    build_path=build_details_path,
    payload_key="Voucher",
    paginated=False,
)
