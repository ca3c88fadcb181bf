"""Keyword matchers for summary (subtotal/tax/total) and tender lines."""

import re
from enum import Enum
from typing import Callable, Optional, List, Tuple

SUBTOTAL_PATTERNS = [
    re.compile(r'\bsub\s*-?\s*total\b'),
    re.compile(r'\bsubtotal\b'),
]
TAX_PATTERN = re.compile(r'\b(tax|vat|sales tax)\b')
TOTAL_PATTERN = re.compile(r'\btotal\b')

# Payment lines, not purchased items
TENDER_PATTERNS = [
    re.compile(r'\bchange\b'),
    re.compile(r'\bcash\b'),
]


class SummaryField(str, Enum):
    SUBTOTAL = "subtotal"
    TAX = "tax"
    TOTAL = "total"


def is_subtotal_line(lower: str) -> bool:
    return any(pattern.search(lower) for pattern in SUBTOTAL_PATTERNS)


def is_tax_line(lower: str) -> bool:
    return TAX_PATTERN.search(lower) is not None


def is_total_line(lower: str) -> bool:
    return TOTAL_PATTERN.search(lower) is not None


def is_tender_line(lower: str) -> bool:
    return any(pattern.search(lower) for pattern in TENDER_PATTERNS)


# "subtotal" contains "total", so subtotal must be checked first
SUMMARY_MATCHERS: List[Tuple[SummaryField, Callable[[str], bool]]] = [
    (SummaryField.SUBTOTAL, is_subtotal_line),
    (SummaryField.TAX, is_tax_line),
    (SummaryField.TOTAL, is_total_line),
]


def classify_summary(lower: str) -> Optional[SummaryField]:
    """Return the highest-priority summary field a lowercased line names."""
    for summary_field, matcher in SUMMARY_MATCHERS:
        if matcher(lower):
            return summary_field
    return None
