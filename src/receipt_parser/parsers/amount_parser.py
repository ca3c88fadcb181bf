"""Monetary token scanning and normalization."""

import re
import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional, List

from ..models import MAX_AMOUNT_EXPONENT, to_cents

logger = logging.getLogger(__name__)

# Optional $ sign, comma-grouped or plain digits, optional two-digit cents
MONEY_PATTERN = re.compile(r'(?:\$\s*)?(?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d{2})?', re.ASCII)
NON_NUMERIC = re.compile(r'[^0-9.]')


@dataclass(frozen=True)
class MoneyToken:
    """A substring of a line that looks like an amount."""
    text: str
    start: int
    value: Optional[Decimal]


def normalize_money(token: str) -> Optional[Decimal]:
    """
    Convert a monetary token to a cent-rounded Decimal.

    Everything except digits and the decimal point is discarded first.
    Returns None when nothing numeric remains or the value is not finite.
    """
    cleaned = NON_NUMERIC.sub('', token)
    if not cleaned:
        return None
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not value.is_finite() or value.adjusted() > MAX_AMOUNT_EXPONENT:
        return None
    return to_cents(value)


def find_money_tokens(line: str) -> List[MoneyToken]:
    """Find every amount-like substring in a line, in order."""
    return [
        MoneyToken(text=match.group(), start=match.start(), value=normalize_money(match.group()))
        for match in MONEY_PATTERN.finditer(line)
    ]


class AmountParser:
    """Extracts the candidate amount of a line.

    Receipts print the price at the end of the line, so only the last
    token counts even when a line holds several numbers.
    """

    def last_token(self, line: str) -> Optional[MoneyToken]:
        """Return the last amount-like token of a line, parsed or not."""
        tokens = find_money_tokens(line)
        return tokens[-1] if tokens else None

    def trailing_amount(self, line: str) -> Optional[Decimal]:
        """Return the normalized value of the last token, if any."""
        token = self.last_token(line)
        return token.value if token else None
