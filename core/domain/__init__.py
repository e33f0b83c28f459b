"""Domain models."""

from core.domain.drafts import BalanceDraft, HoldingDraft
from core.domain.portfolio import EnrichedHolding, PortfolioTotals, PortfolioView, RawHolding, Snapshot

__all__ = [
    "BalanceDraft",
    "EnrichedHolding",
    "HoldingDraft",
    "PortfolioTotals",
    "PortfolioView",
    "RawHolding",
    "Snapshot",
]
