"""Data models for parsed receipts."""

from dataclasses import dataclass, field
from decimal import Context, Decimal, ROUND_HALF_UP
from enum import Enum
from functools import reduce
from typing import Optional, Dict, Any, Tuple, Iterable

CENT = Decimal("0.01")

# Wide enough that sums of amounts up to MAX_AMOUNT_EXPONENT never lose cents
MONEY_CONTEXT = Context(prec=1000, rounding=ROUND_HALF_UP)

# Values at or above 1e309 overflow a double and count as non-finite
MAX_AMOUNT_EXPONENT = 308


def to_cents(value: Decimal) -> Decimal:
    """Round a decimal amount to the nearest cent."""
    return value.quantize(CENT, context=MONEY_CONTEXT)


def sum_amounts(amounts: Iterable[Decimal]) -> Decimal:
    """Sum amounts and round the result to the nearest cent."""
    return to_cents(reduce(MONEY_CONTEXT.add, amounts, Decimal("0")))


def _amount_to_json(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


class Currency(str, Enum):
    """Currencies the parser can detect."""
    USD = "USD"


@dataclass(frozen=True)
class LineItem:
    """One purchased good or service on a receipt."""
    description: str
    amount: Decimal
    selected: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'description': self.description,
            'amount': float(self.amount),
            'selected': self.selected,
        }


@dataclass(frozen=True)
class ParsedReceipt:
    """
    Structured record produced from recognized receipt text.

    Optional fields are None when nothing was found, never zero or an
    empty string, so callers can tell "not found" from "found and empty".
    """
    raw_text: str
    vendor: Optional[str] = None
    date: Optional[str] = None
    subtotal: Optional[Decimal] = None
    tax: Optional[Decimal] = None
    total: Optional[Decimal] = None
    currency: Optional[Currency] = None
    line_items: Tuple[LineItem, ...] = field(default_factory=tuple)

    @property
    def items_total(self) -> Decimal:
        """Sum of all line item amounts."""
        return sum_amounts(item.amount for item in self.line_items)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-ready dictionary."""
        return {
            'vendor': self.vendor,
            'date': self.date,
            'subtotal': _amount_to_json(self.subtotal),
            'tax': _amount_to_json(self.tax),
            'total': _amount_to_json(self.total),
            'currency': self.currency.value if self.currency else None,
            'line_items': [item.to_dict() for item in self.line_items],
            'raw_text': self.raw_text,
        }
