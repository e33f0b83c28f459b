from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from core.domain.coercion import is_real_number

COMPUTED_SOURCE = "computed"

BalanceAccessor = Callable[[Mapping[str, Any]], Any]


def _path(*keys: str) -> BalanceAccessor:
    def accessor(document: Mapping[str, Any]) -> Any:
        node: Any = document
        for key in keys:
            if not isinstance(node, Mapping):
                return None
            node = node.get(key)
        return node

    return accessor


# Order matters: the first numeric value wins.
BALANCE_SOURCES: tuple[tuple[str, BalanceAccessor], ...] = (
    ("account.balance", _path("account", "balance")),
    ("total", _path("total")),
    ("account_total", _path("account_total")),
    ("Account.total", _path("Account", "total")),
    ("account.total", _path("account", "total")),
    ("totals.account", _path("totals", "account")),
    ("AccountBalance", _path("AccountBalance")),
)


@dataclass(frozen=True)
class BalanceResolution:
    value: float
    source: str


def reconcile_total_value(
    document: Mapping[str, Any],
    market_value: float,
    sources: tuple[tuple[str, BalanceAccessor], ...] = BALANCE_SOURCES,
) -> BalanceResolution:
    """Pick the authoritative account total from the snapshot.

    Numeric strings are ignored; if no source carries a real number the
    computed market value is used instead.
    """
    for label, accessor in sources:
        value = accessor(document)
        if is_real_number(value):
            return BalanceResolution(value=float(value), source=label)
    return BalanceResolution(value=market_value, source=COMPUTED_SOURCE)


__all__ = ["BALANCE_SOURCES", "COMPUTED_SOURCE", "BalanceResolution", "reconcile_total_value"]
