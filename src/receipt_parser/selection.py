"""Item selection and running totals over parsed receipts.

Receipts are immutable, so every change returns a new ParsedReceipt.
"""

from dataclasses import replace
from decimal import Decimal
from typing import List

from .models import LineItem, ParsedReceipt, sum_amounts


def set_item_selected(receipt: ParsedReceipt, index: int, selected: bool) -> ParsedReceipt:
    """Return a copy of the receipt with one item (0-based) (de)selected."""
    if not 0 <= index < len(receipt.line_items):
        raise IndexError(f"Line item {index} out of range (receipt has {len(receipt.line_items)})")
    items = list(receipt.line_items)
    items[index] = replace(items[index], selected=selected)
    return replace(receipt, line_items=tuple(items))


def set_all_selected(receipt: ParsedReceipt, selected: bool) -> ParsedReceipt:
    """Return a copy with every item (de)selected."""
    items = tuple(replace(item, selected=selected) for item in receipt.line_items)
    return replace(receipt, line_items=items)


def selected_items(receipt: ParsedReceipt) -> List[LineItem]:
    return [item for item in receipt.line_items if item.selected]


def selected_total(receipt: ParsedReceipt) -> Decimal:
    """Sum of the selected item amounts; 0.00 when nothing is selected."""
    return sum_amounts(item.amount for item in selected_items(receipt))
