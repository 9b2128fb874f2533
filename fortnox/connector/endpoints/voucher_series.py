"""Fortnox voucher series endpoint definition."""

from __future__ import annotations

from typing import Any

from fortnox.runtime.rest import RestEndpointSpec


def build_path(_params: dict[str, Any]) -> str:
    return "voucherseries"


SPEC = RestEndpointSpec(
    id="voucher_series",
    build_path=build_path,
    payload_key="VoucherSeriesCollection",
)
