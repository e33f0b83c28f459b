from __future__ import annotations

from collections.abc import Sequence

import pandas as pd

from core.domain.portfolio import EnrichedHolding

HOLDING_COLUMNS = ["name", "symbol", "shares", "avg", "price", "value", "pnl", "pnl_percent", "weight"]


def holdings_to_frame(holdings: Sequence[EnrichedHolding]) -> pd.DataFrame:
    """Tabulate enriched holdings in the order given; no re-sorting happens here."""
    records: list[dict[str, object]] = []
    for holding in holdings:
        records.append(
            {
                "name": holding.name or "",
                "symbol": holding.symbol or "",
                "shares": holding.shares,
                "avg": holding.avg,
                "price": holding.price,
                "value": holding.value,
                "pnl": holding.pnl,
                "pnl_percent": holding.pnl_percent,
            }
        )

    df = pd.DataFrame.from_records(records)
    if df.empty:
        return pd.DataFrame(columns=HOLDING_COLUMNS)

    df["exposure_value"] = df["value"].abs()
    total_exposure = df["exposure_value"].sum()
    df["weight"] = df["exposure_value"] / total_exposure if total_exposure else 0.0
    return df.drop(columns="exposure_value").reset_index(drop=True)
