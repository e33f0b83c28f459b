from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from core.domain.coercion import is_blank, parse_number, to_number
from core.domain.errors import DraftValidationError

REQUIRED_HOLDING_FIELDS = ("name", "symbol", "shares", "average_cost")

TextOrNumber = str | int | float | None


class CreateHoldingRequest(BaseModel):
    """Body of the create-holding call."""

    name: str
    symbol: str
    shares: float
    average_cost: float
    current_price: float | None = None

    model_config = ConfigDict(frozen=True)

    def payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class UpdateBalanceRequest(BaseModel):
    """Body of the update-balance call."""

    balance: float

    model_config = ConfigDict(frozen=True)

    def payload(self) -> dict[str, Any]:
        return self.model_dump()


class HoldingDraft(BaseModel):
    """Add-holding form contents as typed by the user."""

    name: TextOrNumber = None
    symbol: TextOrNumber = None
    shares: TextOrNumber = None
    average_cost: TextOrNumber = None
    current_price: TextOrNumber = None

    model_config = ConfigDict(frozen=True)

    def missing_fields(self) -> list[str]:
        return [field for field in REQUIRED_HOLDING_FIELDS if is_blank(getattr(self, field))]

    def to_request(self) -> CreateHoldingRequest:
        missing = self.missing_fields()
        if missing:
            raise DraftValidationError(missing)

        current_price = None if is_blank(self.current_price) else to_number(self.current_price)
        return CreateHoldingRequest(
            name=str(self.name).strip(),
            symbol=str(self.symbol).strip(),
            shares=to_number(self.shares),
            average_cost=to_number(self.average_cost),
            current_price=current_price,
        )


class BalanceDraft(BaseModel):
    """Update-balance form contents as typed by the user."""

    amount: TextOrNumber = None

    model_config = ConfigDict(frozen=True)

    def to_request(self) -> UpdateBalanceRequest:
        if is_blank(self.amount):
            raise DraftValidationError(["amount"])
        balance = parse_number(self.amount)
        if balance is None:
            raise DraftValidationError(["amount"], "Balance must be a number")
        return UpdateBalanceRequest(balance=balance)


__all__ = [
    "BalanceDraft",
    "CreateHoldingRequest",
    "HoldingDraft",
    "REQUIRED_HOLDING_FIELDS",
    "UpdateBalanceRequest",
]
