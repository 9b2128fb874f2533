"""Unit tests for listing envelope decoding."""

from __future__ import annotations

import pytest

from fortnox.core import ResponseFormatError
from fortnox.runtime.pagination import discover_payload_key, parse_meta, parse_page


def test_discovers_single_payload_key():
    body = {"MetaInformation": {"@TotalPages": 3}, "Invoices": []}
    assert discover_payload_key(body) == "Invoices"


@pytest.mark.parametrize(
    "body",
    [
        {"MetaInformation": {}},
        {"MetaInformation": {}, "Invoices": [], "Extra": []},
    ],
)
def test_discovery_requires_exactly_one_key(body):
    with pytest.raises(ResponseFormatError, match="exactly one payload key"):
        discover_payload_key(body)


def test_parse_meta():
    meta = parse_meta(
        {"MetaInformation": {"@TotalPages": 4, "@CurrentPage": 2, "@TotalResources": 310}}
    )
    assert (meta.total_pages, meta.current_page, meta.total_resources) == (4, 2, 310)


def test_parse_meta_absent():
    assert parse_meta({"CompanyInformation": {}}) is None


def test_parse_meta_invalid():
    with pytest.raises(ResponseFormatError, match="Invalid MetaInformation"):
        parse_meta({"MetaInformation": {"@TotalPages": "many"}})


def test_parse_page_with_declared_key():
    body = {"MetaInformation": {"@TotalPages": 1}, "Vouchers": [{"VoucherNumber": 1}]}

    page = parse_page(body, "Vouchers")

    assert page.payload_key == "Vouchers"
    assert page.is_collection
    assert page.meta.total_pages == 1


def test_parse_page_singleton():
    page = parse_page({"CompanyInformation": {"CompanyName": "Test AB"}})

    assert page.payload_key == "CompanyInformation"
    assert not page.is_collection
    assert page.meta is None


def test_parse_page_missing_declared_key():
    with pytest.raises(ResponseFormatError, match="missing payload key 'Vouchers'"):
        parse_page({"MetaInformation": {}, "Accounts": []}, "Vouchers")


def test_parse_page_rejects_non_object():
    with pytest.raises(ResponseFormatError, match="expected object"):
        parse_page("#FLAGGA 0")
