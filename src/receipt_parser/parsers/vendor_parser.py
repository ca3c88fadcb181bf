"""Vendor/merchant name extraction."""

import logging
from typing import Optional
from .base import BaseParser, ParseResult, ReceiptContext

logger = logging.getLogger(__name__)


class VendorParser(BaseParser):
    """Takes the first retained line of the receipt as the vendor name.

    No validation is applied: when a multi-page combiner puts a page marker
    on the first line, that marker becomes the vendor.
    """

    def parse(self, context: ReceiptContext) -> Optional[ParseResult]:
        if not context.lines:
            self._log_result(None, context)
            return None

        result = ParseResult(
            value=context.lines[0],
            source_text=context.lines[0],
            line_index=0,
            metadata={'type': 'first_line'}
        )
        self._log_result(result, context)
        return result
