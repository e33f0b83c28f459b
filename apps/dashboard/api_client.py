from __future__ import annotations

import logging
from typing import Any

import httpx

from apps.dashboard.settings import DashboardSettings
from core.domain.drafts import CreateHoldingRequest, UpdateBalanceRequest
from core.domain.errors import ApiError, LoadError, WriteError

logger = logging.getLogger(__name__)


class PortfolioApiClient:
    """httpx implementation of the ``PortfolioApi`` port.

    A fresh ``AsyncClient`` is opened per request so the client can be reused
    across event loops (Streamlit runs each interaction in its own loop).
    """

    def __init__(
        self,
        base_url: str,
        *,
        snapshot_path: str = "/portfolio",
        holdings_path: str = "/portfolio/equities",
        account_path: str = "/portfolio/account",
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.snapshot_path = snapshot_path
        self.holdings_path = holdings_path
        self.account_path = account_path
        self._timeout = httpx.Timeout(timeout_seconds)
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: DashboardSettings, **kwargs: Any) -> PortfolioApiClient:
        return cls(
            settings.api_base_url,
            snapshot_path=settings.snapshot_path,
            holdings_path=settings.holdings_path,
            account_path=settings.account_path,
            timeout_seconds=settings.request_timeout_seconds,
            **kwargs,
        )

    async def _request(
        self,
        method: str,
        path: str,
        *,
        payload: dict[str, Any] | None = None,
        error_cls: type[ApiError] = ApiError,
    ) -> httpx.Response:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.request(method, url, json=payload)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.exception("API request failed: %s %s", method, url)
            raise error_cls(f"Failed to call API: {exc}") from exc
        return response

    async def fetch_snapshot(self) -> Any:
        response = await self._request("GET", self.snapshot_path, error_cls=LoadError)
        try:
            return response.json()
        except ValueError as exc:
            logger.exception("Portfolio snapshot is not valid JSON")
            raise LoadError(f"Portfolio snapshot is not valid JSON: {exc}") from exc

    async def create_holding(self, request: CreateHoldingRequest) -> None:
        await self._request("POST", self.holdings_path, payload=request.payload(), error_cls=WriteError)

    async def update_balance(self, request: UpdateBalanceRequest) -> None:
        await self._request("PATCH", self.account_path, payload=request.payload(), error_cls=WriteError)
