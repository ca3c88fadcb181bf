"""Heuristic conversion of recognized receipt text into a ParsedReceipt."""

import logging
from .models import Currency, ParsedReceipt, sum_amounts
from .parsers import DateParser, VendorParser, scan_lines
from .parsers.base import ReceiptContext

logger = logging.getLogger(__name__)


class ReceiptTextParser:
    """
    Stateless receipt parser composed of the field parsers.

    parse() is a pure function of its input: it keeps no state between
    calls and is safe to share across threads.
    """

    def __init__(self):
        self.vendor_parser = VendorParser()
        self.date_parser = DateParser()

    def parse(self, text: str) -> ParsedReceipt:
        """
        Parse recognized receipt text.

        Args:
            text: Full recognized text, possibly combined from several pages

        Returns:
            ParsedReceipt; never raises for string input
        """
        context = ReceiptContext(full_text=text)
        currency = Currency.USD if '$' in text else None

        if not context.lines:
            logger.debug("No non-empty lines in input")
            return ParsedReceipt(raw_text=text, currency=currency)

        vendor_result = self.vendor_parser.parse(context)
        date_result = self.date_parser.parse(context)
        state = scan_lines(context.lines)

        total = state.total
        # Fallback sums items only; tax and subtotal are not added
        if total is None and state.items:
            total = sum_amounts(item.amount for item in state.items)
            logger.debug(f"No total line, using item sum {total}")

        receipt = ParsedReceipt(
            raw_text=text,
            vendor=vendor_result.value if vendor_result else None,
            date=date_result.value if date_result else None,
            subtotal=state.subtotal,
            tax=state.tax,
            total=total,
            currency=currency,
            line_items=state.items,
        )

        logger.debug(f"Parsed receipt: vendor={receipt.vendor!r}, date={receipt.date!r}, "
                     f"items={len(receipt.line_items)}, total={receipt.total}")
        return receipt


_default_parser = ReceiptTextParser()


def parse(text: str) -> ParsedReceipt:
    """Parse recognized receipt text with the shared default parser."""
    return _default_parser.parse(text)
