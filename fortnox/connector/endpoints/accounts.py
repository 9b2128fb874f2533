"""Fortnox chart of accounts endpoint definitions.

Listing filters commonly used: ``accountnumberfrom``, ``accountnumberto``
and ``financialyear``. No financial year is assumed when none is given;
Fortnox then answers for the current one.
"""

from __future__ import annotations

from typing import Any

from fortnox.core.validation import validate_numeric_path_param
from fortnox.runtime.rest import RestEndpointSpec


def build_path(_params: dict[str, Any]) -> str:
    return "accounts"


def build_details_path(params: dict[str, Any]) -> str:
    number = validate_numeric_path_param(params["account_number"], "account number")
    return f"accounts/{number}"


SPEC = RestEndpointSpec(
    id="accounts",
    build_path=build_path,
    payload_key="Accounts",
)

DETAILS_SPEC = RestEndpointSpec(
    id="account_details",
    build_path=build_details_path,
    payload_key="Account",
    paginated=False,
)
