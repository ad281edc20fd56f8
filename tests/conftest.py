"""Shared fixtures for BillChat tests."""

import pytest

from assignment_store import AssignmentStore
from conversation import ConversationEngine
from data_models import Receipt, ReceiptItem


@pytest.fixture
def burger():
    return ReceiptItem(name="Burger", price=12.99)


@pytest.fixture
def fries():
    return ReceiptItem(name="Fries", price=4.99)


@pytest.fixture
def receipt(burger, fries):
    return Receipt(items=(burger, fries), tax=2.99, tip=4.50, total=25.47, currency="USD")


@pytest.fixture
def store(receipt):
    store = AssignmentStore()
    store.set_receipt(receipt)
    return store


@pytest.fixture
def engine(store):
    return ConversationEngine(store)
