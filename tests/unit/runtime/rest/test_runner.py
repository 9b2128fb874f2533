"""Unit tests for RestRunner and declarative endpoint specs."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from fortnox.core import Query
from fortnox.runtime.rest import RestEndpointSpec, RestRunner, default_query


def _runner(*bodies):
    transport = MagicMock()
    transport.get = AsyncMock(side_effect=list(bodies))
    return RestRunner(transport), transport


def test_default_query_drops_limit():
    query = default_query({"filters": {"fromdate": "2024-01-01", "limit": 50}})
    assert query == Query(fromdate="2024-01-01")


def test_default_query_without_filters():
    assert default_query({}) == Query()


@pytest.mark.asyncio
async def test_run_listing_goes_through_aggregator():
    spec = RestEndpointSpec(id="accounts", build_path=lambda p: "accounts", payload_key="Accounts")
    runner, transport = _runner(
        {"MetaInformation": {"@TotalPages": 1}, "Accounts": [{"Number": 1930}]}
    )

    result = await runner.run(spec=spec, params={"filters": {"limit": 10}})

    assert result.items == [{"Number": 1930}]
    path, query = transport.get.call_args.args
    assert path == "accounts"
    assert query == Query(limit=10)


@pytest.mark.asyncio
async def test_run_raw_returns_body():
    spec = RestEndpointSpec(
        id="sie_export",
        build_path=lambda p: f"sie/{p['sie_type']}",
        paginated=False,
        raw=True,
    )
    runner, transport = _runner("#FLAGGA 0\n")

    result = await runner.run(
        spec=spec, params={"sie_type": "4", "filters": {"financialyear": 2}}, paginate=True
    )

    assert result == "#FLAGGA 0\n"
    transport.get.assert_awaited_once_with("sie/4", Query(financialyear=2))


@pytest.mark.asyncio
async def test_non_paginated_spec_ignores_paginate():
    spec = RestEndpointSpec(
        id="account_details",
        build_path=lambda p: "accounts/1930",
        payload_key="Account",
        paginated=False,
    )
    runner, transport = _runner({"Account": {"Number": 1930}})

    result = await runner.run(spec=spec, params={"filters": {}}, paginate=True)

    assert result.is_singleton
    assert transport.get.await_count == 1


@pytest.mark.asyncio
async def test_path_errors_raise_before_any_request():
    def build_path(_params):
        raise ValueError("bad path")

    spec = RestEndpointSpec(id="broken", build_path=build_path)
    runner, transport = _runner()

    with pytest.raises(ValueError, match="bad path"):
        await runner.run(spec=spec, params={})

    transport.get.assert_not_awaited()
