from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from core.domain.errors import LoadError
from core.domain.portfolio import RawHolding, Snapshot


def test_from_document_parses_equities_in_order() -> None:
    document = {
        "Equities": [
            {"name": "Beta", "symbol": "B", "shares": "1", "average_cost": 2},
            {"name": "Alpha", "symbol": "A", "shares": 3, "average_cost": "4", "sector": "tech"},
        ],
        "total": 100,
    }

    snapshot = Snapshot.from_document(document, version=3, fetched_at=datetime(2024, 1, 1, tzinfo=UTC))

    assert snapshot.version == 3
    assert [holding.name for holding in snapshot.equities] == ["Beta", "Alpha"]
    assert snapshot.equities[0].shares == "1"
    assert snapshot.equities[1].model_extra == {"sector": "tech"}
    assert snapshot.document["total"] == 100


def test_from_document_copies_the_document() -> None:
    document = {"Equities": [], "account": {"balance": 10}}

    snapshot = Snapshot.from_document(document, version=1)
    document["account"]["balance"] = 99

    assert snapshot.document["account"]["balance"] == 10


def test_from_document_treats_missing_equities_as_empty() -> None:
    snapshot = Snapshot.from_document({"total": 5}, version=1)

    assert snapshot.equities == ()


def test_from_document_skips_non_object_holdings() -> None:
    snapshot = Snapshot.from_document({"Equities": [{"symbol": "A"}, "junk", 3]}, version=1)

    assert [holding.symbol for holding in snapshot.equities] == ["A"]


@pytest.mark.parametrize("document", [[], "text", None], ids=["list", "str", "none"])
def test_from_document_rejects_non_objects(document: object) -> None:
    with pytest.raises(LoadError):
        Snapshot.from_document(document, version=1)


def test_from_document_rejects_non_list_equities() -> None:
    with pytest.raises(LoadError):
        Snapshot.from_document({"Equities": {"symbol": "A"}}, version=1)


def test_snapshot_is_frozen() -> None:
    snapshot = Snapshot.from_document({"Equities": []}, version=1)

    with pytest.raises(ValidationError):
        snapshot.version = 2


def test_sort_label_falls_back_to_symbol() -> None:
    assert RawHolding(name="Apple", symbol="AAPL").sort_label == "Apple"
    assert RawHolding(name="  ", symbol="AAPL").sort_label == "AAPL"
    assert RawHolding(symbol=None).sort_label == ""


def test_raw_holding_stringifies_numeric_names() -> None:
    holding = RawHolding.model_validate({"name": 123, "symbol": 7})

    assert holding.name == "123"
    assert holding.symbol == "7"
