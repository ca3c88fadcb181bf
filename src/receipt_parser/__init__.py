"""Receipt Text Parser - Extract structured data from recognized receipt text."""

__version__ = "1.0.0"
__author__ = "Receipt OCR Team"
__email__ = ""

from .models import Currency, LineItem, ParsedReceipt
from .parse import ReceiptTextParser, parse
from .pages import OcrProgress, OcrStage, combine_pages
from .review import ReviewQueue, ReviewItem
from .selection import set_all_selected, set_item_selected, selected_total

__all__ = [
    'Currency',
    'LineItem',
    'ParsedReceipt',
    'ReceiptTextParser',
    'parse',
    'OcrProgress',
    'OcrStage',
    'combine_pages',
    'ReviewQueue',
    'ReviewItem',
    'set_all_selected',
    'set_item_selected',
    'selected_total',
]
