"""
Data models for BillChat - Receipts, people and their item assignments
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Tuple, Union

from config import CURRENCY_DEFAULT


def _new_id(prefix: str) -> str:
    """Generate a unique identifier with a readable prefix"""
    return f"{prefix}_{uuid.uuid4().hex}"


def _as_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


@dataclass(frozen=True)
class ReceiptItem:
    """Represents a single printed line of a receipt"""
    name: str
    price: float = 0.0
    quantity: int = 1
    id: str = field(default_factory=lambda: _new_id("item"))

    @property
    def line_total(self) -> float:
        return self.price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'price': self.price,
            'quantity': self.quantity,
        }


@dataclass(frozen=True)
class Receipt:
    """The whole receipt as stated by the merchant.

    ``total`` is whatever the merchant printed and is never recomputed from
    ``items``; a disagreement between the two is reported by reconciliation.
    """
    items: Tuple[ReceiptItem, ...] = ()
    tax: float = 0.0
    tip: float = 0.0
    total: float = 0.0
    currency: str = CURRENCY_DEFAULT
    id: str = field(default_factory=lambda: _new_id("receipt"))
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        object.__setattr__(self, 'items', tuple(self.items))

    @property
    def subtotal(self) -> float:
        """Merchant's pre-tax/tip basis"""
        return sum(item.line_total for item in self.items)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Receipt":
        """Build a receipt from the analysis JSON shape"""
        items = []
        for raw in payload.get('items') or []:
            if not isinstance(raw, dict):
                continue
            name = str(raw.get('name', '')).strip()
            if not name:
                continue
            quantity = raw.get('quantity') or 1
            try:
                quantity = max(1, int(quantity))
            except (TypeError, ValueError):
                quantity = 1
            items.append(ReceiptItem(
                name=name,
                price=max(0.0, _as_float(raw.get('price'))),
                quantity=quantity,
            ))

        return cls(
            items=tuple(items),
            tax=max(0.0, _as_float(payload.get('tax'))),
            tip=max(0.0, _as_float(payload.get('tip'))),
            total=max(0.0, _as_float(payload.get('total'))),
            currency=payload.get('currency') or CURRENCY_DEFAULT,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'items': [item.to_dict() for item in self.items],
            'tax': self.tax,
            'tip': self.tip,
            'total': self.total,
            'currency': self.currency,
            'created_at': self.created_at.isoformat(),
        }


@dataclass
class AssignedItem:
    """A person's claim on some quantity/share of a receipt item"""
    receipt_item: ReceiptItem
    quantity: int = 1
    share_percentage: float = 1.0
    id: str = field(default_factory=lambda: _new_id("assigned"))

    @property
    def total_price(self) -> float:
        return self.receipt_item.price * self.quantity * self.share_percentage

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'item_id': self.receipt_item.id,
            'item_name': self.receipt_item.name,
            'quantity': self.quantity,
            'share_percentage': self.share_percentage,
            'total_price': round(self.total_price, 2),
        }


@dataclass
class Person:
    """Someone at the table and everything assigned to them"""
    name: str
    assignments: List[AssignedItem] = field(default_factory=list)
    id: str = field(default_factory=lambda: _new_id("person"))

    def matches(self, name: str) -> bool:
        """Case-insensitive name comparison"""
        return self.name.lower() == name.strip().lower()

    def has_item(self, item_id: str) -> bool:
        return any(a.receipt_item.id == item_id for a in self.assignments)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'assignments': [a.to_dict() for a in self.assignments],
        }


@dataclass(frozen=True)
class ConversationMessage:
    """One entry of the append-only conversation log"""
    text: str
    is_user: bool
    id: str = field(default_factory=lambda: _new_id("msg"))
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'text': self.text,
            'is_user': self.is_user,
            'timestamp': self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class Reconciliation:
    """Calculated total compared with the receipt's stated total"""
    calculated_total: float
    receipt_total: float
    is_match: bool

    @property
    def difference(self) -> float:
        """Signed difference, positive when people are charged more than the receipt"""
        return self.calculated_total - self.receipt_total

    @property
    def absolute_difference(self) -> float:
        return abs(self.difference)


class SessionState(Enum):
    """Session phase as observed by the display layer"""
    AWAITING_RECEIPT = "awaiting_receipt"
    AWAITING_ASSIGNMENT = "awaiting_assignment"
    COMPLETE = "complete"


class AnalysisErrorKind(Enum):
    """Why receipt analysis could not produce a receipt"""
    NO_DATA = "No data received from server"
    INVALID_RESPONSE = "Invalid response from server"
    FILE_NOT_FOUND = "Receipt file not found"


@dataclass(frozen=True)
class AnalysisOk:
    receipt: Receipt


@dataclass(frozen=True)
class AnalysisErr:
    kind: AnalysisErrorKind
    detail: str = ""

    @property
    def message(self) -> str:
        if self.detail:
            return f"{self.kind.value}: {self.detail}"
        return self.kind.value


AnalysisResult = Union[AnalysisOk, AnalysisErr]
