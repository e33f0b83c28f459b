from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

_CENTS = Decimal("0.01")


def _round2(value: float) -> Decimal:
    amount = Decimal(repr(float(value))).quantize(_CENTS, rounding=ROUND_HALF_UP)
    # Collapse negative zero so it never renders as "-$0.00".
    return amount if amount != 0 else Decimal("0.00")


def format_currency(value: float) -> str:
    """US-style currency: ``$1,234.56`` and ``-$1,234.56``."""
    amount = _round2(value)
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_percent(value: float) -> str:
    """Two-decimal percentage with an explicit ``+`` for non-negative values."""
    amount = _round2(value)
    sign = "+" if amount >= 0 else "-"
    return f"{sign}{abs(amount):.2f}%"


def format_shares(value: float) -> str:
    return f"{value:,.4f}".rstrip("0").rstrip(".")
