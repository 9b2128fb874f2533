"""Fortnox REST client.

One method per resource. Every method validates its input (path segments,
filters) before anything is sent, then delegates to RestRunner, which
drives the PageAggregator and the rate limited RESTTransport.

Architecture:
    FortnoxClient -> RestRunner -> PageAggregator -> RESTTransport
                                                  -> AuthProvider (token per request)
"""

from __future__ import annotations

from collections.abc import Mapping
from time import perf_counter
from typing import Any

from ..auth.base import AuthProvider, StaticTokenAuth
from ..auth.token_manager import TokenManager
from ..config import API_BASE_URL, DEFAULT_TIMEOUT, ClientSettings, PagePolicy, RateLimitPolicy
from ..core.enums import SIEType
from ..core.exceptions import ResponseFormatError
from ..core.validation import (
    validate_filters,
    validate_numeric_path_param,
    validate_resource_path,
    validate_sie_type,
    validate_voucher_series,
)
from ..models.credentials import Credentials
from ..models.meta import AggregatedResult
from ..runtime.pagination import PageAggregator
from ..runtime.rest import RestEndpointSpec, RestRunner, RESTTransport
from .endpoints import get_endpoint_spec

Filters = Mapping[str, Any] | None


class FortnoxClient:
    """Async client for the Fortnox REST API (read-only).

    Example:
        >>> async with FortnoxClient(StaticTokenAuth(token)) as client:
        ...     result = await client.get_vouchers({"financialyear": 3}, paginate=True)
        ...     vouchers = result.items
    """

    def __init__(
        self,
        auth: AuthProvider,
        *,
        base_url: str = API_BASE_URL,
        rate_limit: RateLimitPolicy | None = None,
        page_policy: PagePolicy | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: RESTTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            auth: Authentication provider (TokenManager, StaticTokenAuth, ...)
            base_url: API base URL
            rate_limit: Pacing policy for the dispatcher
            page_policy: Page size cap and optional max page count
            timeout: Total timeout per HTTP request in seconds
            transport: Optional pre-built transport (auth/base_url are then unused)
        """
        self._auth = auth
        self._transport = transport or RESTTransport(
            auth, base_url=base_url, policy=rate_limit, timeout=timeout
        )
        self._aggregator = PageAggregator(self._transport, page_policy)
        self._runner = RestRunner(self._transport, self._aggregator)
        self._owned_auth: TokenManager | None = None

    @classmethod
    def from_settings(cls, settings: ClientSettings, **kwargs: Any) -> FortnoxClient:
        """Build a client from settings.

        Refresh-capable settings get a TokenManager (owned and closed by the
        client); otherwise the access token is used as a static bearer token.
        """
        auth: AuthProvider
        manager: TokenManager | None = None
        if settings.can_refresh:
            if settings.expires_in is not None:
                manager = TokenManager.from_expires_in(
                    settings.access_token,
                    settings.refresh_token,
                    settings.expires_in,
                    settings.client_id,
                    settings.client_secret,
                    token_url=settings.token_url,
                )
            else:
                # Unknown expiry counts as expired; first request refreshes
                manager = TokenManager(
                    Credentials(
                        access_token=settings.access_token,
                        refresh_token=settings.refresh_token,
                        client_id=settings.client_id,
                        client_secret=settings.client_secret,
                    ),
                    token_url=settings.token_url,
                )
            auth = manager
        else:
            auth = StaticTokenAuth(settings.access_token)

        kwargs.setdefault("base_url", settings.api_base_url)
        kwargs.setdefault("rate_limit", settings.rate_limit)
        client = cls(auth, **kwargs)
        client._owned_auth = manager
        return client

    @property
    def auth(self) -> AuthProvider:
        return self._auth

    @property
    def transport(self) -> RESTTransport:
        return self._transport

    async def fetch(
        self,
        endpoint_id: str,
        params: Mapping[str, Any] | None = None,
        *,
        filters: Filters = None,
        paginate: bool = False,
    ) -> AggregatedResult | Any:
        """Fetch a registered endpoint by id.

        Args:
            endpoint_id: Endpoint identifier (e.g. "vouchers", "account_details")
            params: Path parameters (e.g. {"account_number": 1930})
            filters: Query filters
            paginate: Fetch every page of a listing

        Raises:
            ValueError: If endpoint_id is not registered
            ValidationError: If a path parameter or filter is malformed
        """
        spec = get_endpoint_spec(endpoint_id)
        if spec is None:
            raise ValueError(f"Unknown REST endpoint: {endpoint_id}")
        return await self._run(spec, dict(params or {}), filters, paginate)

    async def get_vouchers(self, filters: Filters = None, *, paginate: bool = False) -> AggregatedResult:
        """Fetch vouchers (filters e.g. ``fromdate``, ``todate``, ``financialyear``)."""
        return await self.fetch("vouchers", filters=filters, paginate=paginate)

    async def get_voucher_series(
        self, filters: Filters = None, *, paginate: bool = False
    ) -> AggregatedResult:
        return await self.fetch("voucher_series", filters=filters, paginate=paginate)

    async def get_voucher_details(
        self,
        voucher_series: str,
        voucher_number: int | str,
        filters: Filters = None,
    ) -> AggregatedResult:
        """Fetch a single voucher including its rows.

        Raises:
            ValidationError: If the series or number is unsafe for a URL path
        """
        params = {
            "voucher_series": validate_voucher_series(voucher_series),
            "voucher_number": validate_numeric_path_param(voucher_number, "voucher number"),
        }
        return await self.fetch("voucher_details", params, filters=filters)

    async def get_financial_years(
        self, filters: Filters = None, *, paginate: bool = False
    ) -> AggregatedResult:
        return await self.fetch("financial_years", filters=filters, paginate=paginate)

    async def get_accounts(self, filters: Filters = None, *, paginate: bool = False) -> AggregatedResult:
        """Fetch the chart of accounts.

        Typical filters: ``accountnumberfrom``, ``accountnumberto``,
        ``financialyear``.
        """
        return await self.fetch("accounts", filters=filters, paginate=paginate)

    async def get_account_details(
        self, account_number: int | str, filters: Filters = None
    ) -> AggregatedResult:
        params = {"account_number": validate_numeric_path_param(account_number, "account number")}
        return await self.fetch("account_details", params, filters=filters)

    async def get_company_information(self) -> AggregatedResult:
        return await self.fetch("company_information")

    async def get_invoices(self, filters: Filters = None, *, paginate: bool = False) -> AggregatedResult:
        return await self.fetch("invoices", filters=filters, paginate=paginate)

    async def get_supplier_invoices(
        self, filters: Filters = None, *, paginate: bool = False
    ) -> AggregatedResult:
        return await self.fetch("supplier_invoices", filters=filters, paginate=paginate)

    async def get_sie_export(self, sie_type: SIEType | int | str, filters: Filters = None) -> str:
        """Download an SIE export as text.

        Args:
            sie_type: SIE type 1-4 (4 includes all transactions)
            filters: e.g. ``financialyear``

        Raises:
            ValidationError: If sie_type is not 1-4
            ResponseFormatError: If the body is not text
        """
        params = {"sie_type": validate_sie_type(sie_type)}
        body = await self.fetch("sie_export", params, filters=filters)
        if not isinstance(body, str):
            raise ResponseFormatError(
                f"SIE export returned {type(body).__name__}, expected text"
            )
        return body

    async def fetch_all(
        self,
        path: str,
        filters: Filters = None,
        *,
        paginate: bool = False,
        payload_key: str | None = None,
    ) -> AggregatedResult:
        """Fetch any listing or singleton resource by path.

        The payload key is discovered from the response when not given.
        """
        resource = validate_resource_path(path)
        spec = RestEndpointSpec(
            id=f"adhoc:{resource}",
            build_path=lambda _params: resource,
            payload_key=payload_key,
        )
        return await self._run(spec, {}, filters, paginate)

    async def fetch_health(self) -> dict[str, object]:
        """Probe the API with a company information request."""
        path = "companyinformation"
        start = perf_counter()
        await self._transport.get(path)
        latency_ms = (perf_counter() - start) * 1000.0
        return {
            "service": "fortnox",
            "status": "ok",
            "latency_ms": latency_ms,
            "endpoint": path,
        }

    async def _run(
        self,
        spec: RestEndpointSpec,
        params: dict[str, Any],
        filters: Filters,
        paginate: bool,
    ) -> AggregatedResult | Any:
        params["filters"] = validate_filters(filters)
        return await self._runner.run(spec=spec, params=params, paginate=paginate)

    async def close(self) -> None:
        """Close the transport and any token manager this client created."""
        await self._transport.close()
        if self._owned_auth is not None:
            await self._owned_auth.close()

    async def __aenter__(self) -> FortnoxClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
