"""Tests for the receipt and assignment value types."""

import dataclasses

import pytest

from data_models import (
    AnalysisErr,
    AnalysisErrorKind,
    AssignedItem,
    Person,
    Receipt,
    ReceiptItem,
    Reconciliation,
)


def test_receipt_creation(receipt):
    assert len(receipt.items) == 2
    assert receipt.total == 25.47
    assert receipt.currency == "USD"
    assert receipt.subtotal == pytest.approx(17.98)


def test_receipt_items_are_frozen(receipt, burger):
    assert isinstance(receipt.items, tuple)
    with pytest.raises(dataclasses.FrozenInstanceError):
        burger.price = 1.0


def test_receipt_total_is_not_recomputed():
    """The stated total is kept even when it disagrees with the items."""
    receipt = Receipt(items=[ReceiptItem(name="Soup", price=5.0)], total=99.0)
    assert receipt.total == 99.0
    assert receipt.subtotal == 5.0


def test_item_ids_are_unique():
    a = ReceiptItem(name="Coke", price=2.99)
    b = ReceiptItem(name="Coke", price=2.99)
    assert a.id != b.id
    assert a != b


def test_assigned_item_total_price():
    item = ReceiptItem(name="Coke", price=2.99, quantity=2)
    assert AssignedItem(receipt_item=item).total_price == pytest.approx(2.99)
    assert AssignedItem(receipt_item=item, quantity=2).total_price == pytest.approx(5.98)
    assert AssignedItem(receipt_item=item, quantity=2, share_percentage=0.5).total_price == pytest.approx(2.99)


def test_assigned_item_quantity_not_bounded():
    """Quantity above the printed quantity is accepted as is."""
    item = ReceiptItem(name="Coke", price=2.0, quantity=1)
    assert AssignedItem(receipt_item=item, quantity=3).total_price == pytest.approx(6.0)


def test_assigned_item_shares_receipt_item(burger):
    assigned = AssignedItem(receipt_item=burger)
    assert assigned.receipt_item is burger


def test_person_matches_case_insensitively():
    person = Person(name="Julia")
    assert person.matches("julia")
    assert person.matches("  JULIA ")
    assert not person.matches("Jules")


def test_receipt_from_dict_defaults():
    receipt = Receipt.from_dict({
        "items": [
            {"name": "Burger", "price": 12.99},
            {"name": "Coke", "price": "2.99", "quantity": 2},
            {"name": "", "price": 1.0},
        ],
        "total": 18.97,
    })
    assert [item.name for item in receipt.items] == ["Burger", "Coke"]
    assert receipt.items[0].quantity == 1
    assert receipt.items[1].price == pytest.approx(2.99)
    assert receipt.items[1].quantity == 2
    assert receipt.tax == 0.0
    assert receipt.tip == 0.0
    assert receipt.total == pytest.approx(18.97)
    assert receipt.currency == "USD"


def test_receipt_from_dict_bad_numbers():
    receipt = Receipt.from_dict({
        "items": [{"name": "Soup", "price": "n/a", "quantity": "lots"}],
        "tax": None,
        "tip": -3,
    })
    assert receipt.items[0].price == 0.0
    assert receipt.items[0].quantity == 1
    assert receipt.tax == 0.0
    assert receipt.tip == 0.0


def test_receipt_to_dict(receipt):
    data = receipt.to_dict()
    assert data["id"] == receipt.id
    assert [item["name"] for item in data["items"]] == ["Burger", "Fries"]
    assert data["tax"] == 2.99
    assert "created_at" in data


def test_reconciliation_difference_is_signed():
    over = Reconciliation(calculated_total=30.0, receipt_total=25.0, is_match=False)
    under = Reconciliation(calculated_total=20.0, receipt_total=25.0, is_match=False)
    assert over.difference == pytest.approx(5.0)
    assert under.difference == pytest.approx(-5.0)
    assert under.absolute_difference == pytest.approx(5.0)


def test_analysis_error_message():
    assert AnalysisErr(AnalysisErrorKind.NO_DATA).message == "No data received from server"
    err = AnalysisErr(AnalysisErrorKind.INVALID_RESPONSE, "no JSON object in reply")
    assert err.message == "Invalid response from server: no JSON object in reply"
