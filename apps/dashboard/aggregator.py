from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from apps.dashboard.balance import reconcile_total_value
from core.domain.coercion import is_blank, to_number
from core.domain.portfolio import EnrichedHolding, PortfolioTotals, PortfolioView, RawHolding, Snapshot

logger = logging.getLogger(__name__)


def _lookup_fallback(symbol: str | None, fallback_prices: Mapping[str, Any]) -> Any:
    if is_blank(symbol):
        return None
    key = str(symbol).strip()
    if key in fallback_prices:
        return fallback_prices[key]
    return fallback_prices.get(key.upper())


def resolve_price(holding: RawHolding, fallback_prices: Mapping[str, Any]) -> float:
    """Explicit price, then fallback quote, then legacy ``price``, then cost basis."""
    candidates = (
        holding.current_price,
        _lookup_fallback(holding.symbol, fallback_prices),
        holding.price,
    )
    for candidate in candidates:
        if not is_blank(candidate):
            return to_number(candidate)
    return to_number(holding.average_cost)


def enrich_holding(holding: RawHolding, fallback_prices: Mapping[str, Any]) -> EnrichedHolding:
    shares = to_number(holding.shares)
    avg = to_number(holding.average_cost)
    price = resolve_price(holding, fallback_prices)
    return EnrichedHolding(
        raw=holding,
        name=holding.name,
        symbol=holding.symbol,
        shares=shares,
        avg=avg,
        price=price,
        value=shares * price,
        pnl=shares * (price - avg),
        pnl_percent=0.0 if avg == 0 else (price - avg) / avg * 100,
    )


def sort_key(holding: EnrichedHolding | RawHolding) -> str:
    raw = holding.raw if isinstance(holding, EnrichedHolding) else holding
    return raw.sort_label.casefold()


def aggregate_holdings(
    holdings: Sequence[RawHolding],
    fallback_prices: Mapping[str, Any] | None = None,
) -> list[EnrichedHolding]:
    prices = fallback_prices or {}
    enriched = [enrich_holding(holding, prices) for holding in holdings]
    enriched.sort(key=sort_key)
    return enriched


def compute_totals(
    holdings: Sequence[EnrichedHolding],
    total_value: float,
    *,
    balance_source: str = "computed",
) -> PortfolioTotals:
    market_value = sum(holding.value for holding in holdings)
    return PortfolioTotals(
        market_value=market_value,
        total_value=total_value,
        cash=total_value - market_value,
        total_pnl=sum(holding.pnl for holding in holdings),
        balance_source=balance_source,
    )


class PortfolioAggregator:
    """Derives the portfolio view, reusing the last result while its inputs are unchanged.

    Only the most recent call is remembered and inputs are compared by
    identity; a new snapshot always produces a fresh view.
    """

    def __init__(self) -> None:
        self._last_inputs: tuple[object, object] | None = None
        self._last_view: PortfolioView | None = None

    def __call__(self, snapshot: Snapshot, fallback_prices: Mapping[str, Any] | None = None) -> PortfolioView:
        if (
            self._last_view is not None
            and self._last_inputs is not None
            and self._last_inputs[0] is snapshot
            and self._last_inputs[1] is fallback_prices
        ):
            return self._last_view

        view = build_portfolio_view(snapshot, fallback_prices)
        self._last_inputs = (snapshot, fallback_prices)
        self._last_view = view
        return view


def build_portfolio_view(snapshot: Snapshot, fallback_prices: Mapping[str, Any] | None = None) -> PortfolioView:
    holdings = aggregate_holdings(snapshot.equities, fallback_prices)
    market_value = sum(holding.value for holding in holdings)
    resolution = reconcile_total_value(snapshot.document, market_value)
    totals = compute_totals(holdings, resolution.value, balance_source=resolution.source)
    logger.debug(
        "Built portfolio view v%s: %s holdings, total=%s (%s)",
        snapshot.version,
        len(holdings),
        totals.total_value,
        totals.balance_source,
    )
    return PortfolioView(snapshot_version=snapshot.version, holdings=tuple(holdings), totals=totals)
