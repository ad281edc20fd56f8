"""
Bill Splitter module for BillChat
Proportional allocation of subtotal, tax and tip across people
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, Optional

from config import RECONCILE_TOLERANCE
from data_models import Person, Receipt, Reconciliation

DECIMAL_QUANTIZE = Decimal("0.01")


def round_money(amount: float) -> float:
    """Round to cents, half up"""
    return float(Decimal(str(amount)).quantize(DECIMAL_QUANTIZE, rounding=ROUND_HALF_UP))


def person_subtotal(person: Person) -> float:
    return sum(assignment.total_price for assignment in person.assignments)


def receipt_subtotal(receipt: Optional[Receipt]) -> float:
    if receipt is None:
        return 0.0
    return sum(item.price * item.quantity for item in receipt.items)


def _proportional_share(person: Person, receipt: Optional[Receipt], amount: float) -> float:
    basis = receipt_subtotal(receipt)
    if basis <= 0:
        return 0.0
    return (person_subtotal(person) / basis) * amount


def tax_share(person: Person, receipt: Optional[Receipt]) -> float:
    """Tax weighted by the person's share of the item subtotal"""
    if receipt is None:
        return 0.0
    return _proportional_share(person, receipt, receipt.tax)


def tip_share(person: Person, receipt: Optional[Receipt]) -> float:
    """Tip weighted by the person's share of the item subtotal"""
    if receipt is None:
        return 0.0
    return _proportional_share(person, receipt, receipt.tip)


def final_total(person: Person, receipt: Optional[Receipt]) -> float:
    return person_subtotal(person) + tax_share(person, receipt) + tip_share(person, receipt)


def calculated_total(people: Iterable[Person], receipt: Optional[Receipt]) -> float:
    """Sum of everyone's final total, for reconciliation only"""
    return sum(final_total(person, receipt) for person in people)


def is_reconciled(calculated: float, stated: float, tolerance: float = RECONCILE_TOLERANCE) -> bool:
    """Totals agree when they differ by less than ``tolerance`` once rounded to cents"""
    difference = Decimal(str(abs(calculated - stated))).quantize(DECIMAL_QUANTIZE, rounding=ROUND_HALF_UP)
    return difference < Decimal(str(tolerance))


def reconcile(people: Iterable[Person], receipt: Receipt,
              tolerance: float = RECONCILE_TOLERANCE) -> Reconciliation:
    """Compare the calculated total against the receipt's stated total.

    A mismatch is advisory: unassigned items, rounding and double assignment
    all show up here and nothing is corrected automatically.
    """
    calculated = calculated_total(people, receipt)
    return Reconciliation(
        calculated_total=calculated,
        receipt_total=receipt.total,
        is_match=is_reconciled(calculated, receipt.total, tolerance),
    )


def person_breakdown(person: Person, receipt: Optional[Receipt]) -> Dict[str, Any]:
    """Per-person figures rounded for display and export"""
    return {
        'name': person.name,
        'items': [
            {
                'item_name': a.receipt_item.name,
                'quantity': a.quantity,
                'share_percentage': a.share_percentage,
                'price': round_money(a.total_price),
            }
            for a in person.assignments
        ],
        'subtotal': round_money(person_subtotal(person)),
        'tax': round_money(tax_share(person, receipt)),
        'tip': round_money(tip_share(person, receipt)),
        'total': round_money(final_total(person, receipt)),
    }


def split_summary(people: Iterable[Person], receipt: Optional[Receipt],
                  tolerance: float = RECONCILE_TOLERANCE) -> Dict[str, Any]:
    """Everything the display layer needs to render the final breakdown"""
    people = list(people)
    summary: Dict[str, Any] = {
        'people': [person_breakdown(person, receipt) for person in people],
        'receipt_subtotal': round_money(receipt_subtotal(receipt)),
    }
    if receipt is None:
        return summary

    assigned_ids = {a.receipt_item.id for person in people for a in person.assignments}
    summary['unassigned_items'] = [item.name for item in receipt.items if item.id not in assigned_ids]

    result = reconcile(people, receipt, tolerance)
    summary['reconciliation'] = {
        'calculated_total': round_money(result.calculated_total),
        'receipt_total': round_money(result.receipt_total),
        'difference': round_money(result.difference),
        'is_match': result.is_match,
    }
    summary['currency'] = receipt.currency
    return summary
