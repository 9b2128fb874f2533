"""Fortnox customer and supplier invoice endpoint definitions."""

from __future__ import annotations

from typing import Any

from fortnox.runtime.rest import RestEndpointSpec


def build_path(_params: dict[str, Any]) -> str:
    return "invoices"


def build_supplier_path(_params: dict[str, Any]) -> str:
    return "supplierinvoices"


SPEC = RestEndpointSpec(
    id="invoices",
    build_path=build_path,
    payload_key="Invoices",
)

SUPPLIER_SPEC = RestEndpointSpec(
    id="supplier_invoices",
    build_path=build_supplier_path,
    payload_key="SupplierInvoices",
)
