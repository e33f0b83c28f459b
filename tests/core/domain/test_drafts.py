import pytest

from core.domain.drafts import BalanceDraft, HoldingDraft
from core.domain.errors import DraftValidationError


def test_holding_draft_builds_numeric_request() -> None:
    draft = HoldingDraft(name=" Apple ", symbol="AAPL", shares="10", average_cost="150.5")

    request = draft.to_request()

    assert request.payload() == {"name": "Apple", "symbol": "AAPL", "shares": 10.0, "average_cost": 150.5}


def test_holding_draft_includes_current_price_only_when_supplied() -> None:
    with_price = HoldingDraft(name="A", symbol="A", shares="1", average_cost="1", current_price="2.5")
    blank_price = HoldingDraft(name="A", symbol="A", shares="1", average_cost="1", current_price="  ")

    assert with_price.to_request().payload()["current_price"] == 2.5
    assert "current_price" not in blank_price.to_request().payload()


def test_holding_draft_coerces_unparsable_numbers_to_zero() -> None:
    request = HoldingDraft(name="A", symbol="A", shares="lots", average_cost="1").to_request()

    assert request.shares == 0.0


def test_holding_draft_reports_every_missing_field() -> None:
    draft = HoldingDraft(name="Apple", symbol="", shares=None, average_cost="1")

    with pytest.raises(DraftValidationError) as excinfo:
        draft.to_request()

    assert excinfo.value.fields == ("symbol", "shares")


def test_holding_draft_accepts_numeric_inputs() -> None:
    request = HoldingDraft(name="A", symbol="A", shares=0, average_cost=0).to_request()

    assert request.shares == 0.0
    assert request.average_cost == 0.0


def test_balance_draft_builds_request() -> None:
    assert BalanceDraft(amount="1234.5").to_request().payload() == {"balance": 1234.5}


@pytest.mark.parametrize("amount", [None, "", "  ", "ten"], ids=["none", "empty", "blank", "text"])
def test_balance_draft_requires_a_number(amount: object) -> None:
    with pytest.raises(DraftValidationError) as excinfo:
        BalanceDraft(amount=amount).to_request()

    assert excinfo.value.fields == ("amount",)
