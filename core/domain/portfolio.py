from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.domain.coercion import is_blank
from core.domain.errors import LoadError

logger = logging.getLogger(__name__)

EQUITIES_KEY = "Equities"


class RawHolding(BaseModel):
    """A holding record exactly as the backend sent it.

    Numeric fields are left untyped: they may be numbers, numeric strings,
    garbage or missing, and are only coerced when the view model is derived.
    """

    name: str | None = None
    symbol: str | None = None
    shares: Any = None
    average_cost: Any = None
    current_price: Any = None
    price: Any = None

    model_config = ConfigDict(extra="allow", frozen=True)

    @field_validator("name", "symbol", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        if value is None:
            return None
        return str(value)

    @property
    def sort_label(self) -> str:
        if not is_blank(self.name):
            return self.name or ""
        return self.symbol or ""


class EnrichedHolding(BaseModel):
    """Raw holding plus the numbers the dashboard displays."""

    raw: RawHolding
    name: str | None
    symbol: str | None
    shares: float
    avg: float
    price: float
    value: float
    pnl: float
    pnl_percent: float

    model_config = ConfigDict(frozen=True)


class PortfolioTotals(BaseModel):
    market_value: float
    total_value: float
    cash: float
    total_pnl: float
    balance_source: str = "computed"

    model_config = ConfigDict(frozen=True)


class Snapshot(BaseModel):
    """Immutable copy of one successfully fetched portfolio document."""

    version: int = Field(ge=0)
    fetched_at: datetime
    document: dict[str, Any]
    equities: tuple[RawHolding, ...] = ()

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_document(
        cls,
        document: Any,
        *,
        version: int,
        fetched_at: datetime | None = None,
    ) -> Snapshot:
        if not isinstance(document, Mapping):
            raise LoadError(f"Portfolio snapshot must be a JSON object, got {type(document).__name__}")

        raw_equities = document.get(EQUITIES_KEY)
        if raw_equities is None:
            raw_equities = []
        if not isinstance(raw_equities, list):
            raise LoadError(f"'{EQUITIES_KEY}' must be a list, got {type(raw_equities).__name__}")

        equities: list[RawHolding] = []
        for index, item in enumerate(raw_equities):
            if not isinstance(item, Mapping):
                logger.warning("Skipping non-object holding at %s[%s]", EQUITIES_KEY, index)
                continue
            equities.append(RawHolding.model_validate(dict(item)))

        return cls(
            version=version,
            fetched_at=fetched_at or datetime.now(UTC),
            document=copy.deepcopy(dict(document)),
            equities=tuple(equities),
        )


class PortfolioView(BaseModel):
    """Everything the dashboard renders for a single snapshot."""

    snapshot_version: int
    holdings: tuple[EnrichedHolding, ...]
    totals: PortfolioTotals

    model_config = ConfigDict(frozen=True)


__all__ = ["EnrichedHolding", "PortfolioTotals", "PortfolioView", "RawHolding", "Snapshot"]
