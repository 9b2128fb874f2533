"""Fortnox company information endpoint definition (singleton)."""

from __future__ import annotations

from typing import Any

from fortnox.runtime.rest import RestEndpointSpec


def build_path(_params: dict[str, Any]) -> str:
    return "companyinformation"


SPEC = RestEndpointSpec(
    id="company_information",
    build_path=build_path,
    payload_key="CompanyInformation",
    paginated=False,
)
