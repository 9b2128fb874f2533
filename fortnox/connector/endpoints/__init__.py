"""Endpoint registry for the Fortnox REST connector.

Maps endpoint ids to their RestEndpointSpec so the client (and callers
using ``FortnoxClient.fetch``) can resolve an endpoint by name.
"""

from __future__ import annotations

from fortnox.runtime.rest import RestEndpointSpec

from . import (
    accounts,
    company_information,
    financial_years,
    invoices,
    sie,
    voucher_series,
    vouchers,
)

_SPECS: dict[str, RestEndpointSpec] = {
    spec.id: spec
    for spec in (
        vouchers.SPEC,
        vouchers.DETAILS_SPEC,
        voucher_series.SPEC,
        financial_years.SPEC,
        accounts.SPEC,
        accounts.DETAILS_SPEC,
        company_information.SPEC,
        invoices.SPEC,
        invoices.SUPPLIER_SPEC,
        sie.SPEC,
    )
}


def get_endpoint_spec(endpoint_id: str) -> RestEndpointSpec | None:
    """Return the spec registered under ``endpoint_id``, or None."""
    return _SPECS.get(endpoint_id)


def list_endpoint_ids() -> list[str]:
    return sorted(_SPECS)


__all__ = ["get_endpoint_spec", "list_endpoint_ids"]
