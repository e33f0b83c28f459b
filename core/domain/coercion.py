from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation
from typing import Any


def parse_number(value: Any) -> float | None:
    """Parse a raw JSON/form value into a finite float, or ``None`` if it is not one."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(Decimal(text))
        except (InvalidOperation, ValueError):
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def to_number(value: Any) -> float:
    """Coerce a raw value into a float, falling back to ``0.0``.

    Booleans, blanks, unparsable text and non-finite values all map to zero so
    that a malformed record never breaks the rest of the portfolio.
    """
    number = parse_number(value)
    return 0.0 if number is None else number


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def is_real_number(value: Any) -> bool:
    """True for finite ints, floats and Decimals; strings and bools never count."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return False
    return math.isfinite(float(value))


__all__ = ["is_blank", "is_real_number", "parse_number", "to_number"]
