from __future__ import annotations

import pytest

from apps.dashboard.formatting import format_currency, format_percent, format_shares


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (0, "$0.00"),
        (60, "$60.00"),
        (1234567.891, "$1,234,567.89"),
        (-20, "-$20.00"),
        (0.005, "$0.01"),
        (-0.001, "$0.00"),
    ],
)
def test_format_currency(value: float, expected: str) -> None:
    assert format_currency(value) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [(20, "+20.00%"), (0, "+0.00%"), (-5.5, "-5.50%"), (-0.001, "+0.00%"), (12.345, "+12.35%")],
)
def test_format_percent(value: float, expected: str) -> None:
    assert format_percent(value) == expected


def test_format_shares_trims_trailing_zeros() -> None:
    assert format_shares(10.0) == "10"
    assert format_shares(1234.5) == "1,234.5"
