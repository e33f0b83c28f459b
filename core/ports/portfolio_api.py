from __future__ import annotations

from typing import Any, Protocol

from core.domain.drafts import CreateHoldingRequest, UpdateBalanceRequest


class PortfolioApi(Protocol):
    """Backend that owns the portfolio document and its write endpoints."""

    async def fetch_snapshot(self) -> Any:
        """Return the decoded portfolio document."""

    async def create_holding(self, request: CreateHoldingRequest) -> None:
        """Create a holding; raise ``WriteError`` unless the backend answers 2xx."""

    async def update_balance(self, request: UpdateBalanceRequest) -> None:
        """Replace the account balance; raise ``WriteError`` unless the backend answers 2xx."""
