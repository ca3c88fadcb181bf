"""Single-pass line classification into summary amounts and line items."""

import re
import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Optional, Tuple, Iterable

from ..models import LineItem
from ..pages import is_page_marker
from .amount_parser import AmountParser
from .date_parser import DATE_PATTERN
from .summary_parser import SummaryField, classify_summary, is_tender_line

logger = logging.getLogger(__name__)

HAS_DIGIT = re.compile(r'\d', re.ASCII)
HAS_LETTER = re.compile(r'[a-z]', re.IGNORECASE)
TRAILING_DASHES = re.compile(r'[\-\s]+$')

_amounts = AmountParser()


@dataclass(frozen=True)
class ScanState:
    """Accumulator carried through the scan.

    items_seen flips to True on the first accepted item and never goes back;
    it only enables continuation lines.
    """
    subtotal: Optional[Decimal] = None
    tax: Optional[Decimal] = None
    total: Optional[Decimal] = None
    items: Tuple[LineItem, ...] = ()
    items_seen: bool = False


def item_description(line: str, token_start: int) -> str:
    """Text of the line without its trailing amount token."""
    if token_start <= 0:
        return line
    return TRAILING_DASHES.sub('', line[:token_start].strip())


def amount_in_date(line: str, token_start: int) -> bool:
    """True when the amount token is part of a date, as in a bare 01/02/2024 line."""
    return any(match.start() <= token_start < match.end() for match in DATE_PATTERN.finditer(line))


def scan_line(state: ScanState, line: str) -> ScanState:
    """Classify one retained line and return the updated state."""
    if is_page_marker(line):
        return state

    lower = line.lower()
    token = _amounts.last_token(line)
    amount = token.value if token else None

    # Last match wins: a later subtotal/tax/total line overwrites an earlier one
    summary_field = classify_summary(lower)
    if summary_field is not None and amount is not None:
        logger.debug(f"{summary_field.value} = {amount} from {line!r}")
        return replace(state, **{summary_field.value: amount})

    if (HAS_DIGIT.search(line) and amount is not None
            and not is_tender_line(lower) and not amount_in_date(line, token.start)):
        description = item_description(line, token.start)
        if not description:
            return state
        logger.debug(f"item {description!r} = {amount}")
        item = LineItem(description=description, amount=amount)
        return replace(state, items=state.items + (item,), items_seen=True)

    if state.items_seen and token is None and HAS_LETTER.search(line):
        if not state.items:
            return state
        last = state.items[-1]
        wrapped = replace(last, description=f"{last.description} {line}")
        logger.debug(f"continuation {line!r} appended to item {len(state.items) - 1}")
        return replace(state, items=state.items[:-1] + (wrapped,))

    return state


def scan_lines(lines: Iterable[str]) -> ScanState:
    """Fold scan_line over all lines, starting from an empty state."""
    state = ScanState()
    for line in lines:
        state = scan_line(state, line)
    return state
