"""Review queue for sparse or inconsistent parse results."""

import logging
from decimal import Decimal
from typing import Dict, List, Optional, Any
from dataclasses import dataclass
from pathlib import Path

from .models import ParsedReceipt, sum_amounts

logger = logging.getLogger(__name__)

SNIPPET_LENGTH = 200


@dataclass
class ReviewItem:
    """Represents a receipt that needs manual review."""
    file_path: str
    reason: str
    vendor: Optional[str] = None
    date: Optional[str] = None
    total: Optional[Decimal] = None
    raw_snippet: str = ""


def make_snippet(raw_text: str) -> str:
    """First characters of the raw text on one line, cleaned for spreadsheets."""
    snippet = raw_text.replace('\n', ' ')[:SNIPPET_LENGTH]
    snippet = ''.join(char for char in snippet if ord(char) >= 32 or char == '\t')
    if len(raw_text) > SNIPPET_LENGTH:
        snippet += "..."
    return snippet


class ReviewQueue:
    """Manages receipts that need manual review."""

    def __init__(self, tolerance: float = 0.01):
        """
        Initialize review queue.

        Args:
            tolerance: Largest difference between amounts still treated as equal
        """
        self.items: List[ReviewItem] = []
        self.tolerance = Decimal(str(tolerance))

    def should_review(self, receipt: ParsedReceipt) -> List[str]:
        """
        Determine why a parsed receipt should be reviewed.

        Returns:
            List of reasons; empty when the receipt looks complete
        """
        reasons = []

        if receipt.vendor is None:
            reasons.append("missing vendor")
        if receipt.date is None:
            reasons.append("missing date")
        if not receipt.line_items:
            reasons.append("no line items")
        if receipt.total is None:
            reasons.append("missing total")

        if receipt.subtotal is not None and receipt.line_items:
            if abs(receipt.subtotal - receipt.items_total) > self.tolerance:
                reasons.append("subtotal does not match items")

        if None not in (receipt.subtotal, receipt.tax, receipt.total):
            expected = sum_amounts([receipt.subtotal, receipt.tax])
            if abs(receipt.total - expected) > self.tolerance:
                reasons.append("total does not match subtotal + tax")

        return reasons

    def add_item(self,
                 file_path: str,
                 reason: str,
                 vendor: Optional[str] = None,
                 date: Optional[str] = None,
                 total: Optional[Decimal] = None,
                 raw_snippet: str = ""):
        """Add an item to the review queue."""
        item = ReviewItem(
            file_path=file_path,
            reason=reason,
            vendor=vendor,
            date=date,
            total=total,
            raw_snippet=raw_snippet
        )

        self.items.append(item)
        logger.debug(f"Added to review queue: {Path(file_path).name} - {reason}")

    def add_from_parse(self, file_path: str, receipt: ParsedReceipt) -> bool:
        """
        Add a parsed receipt to review if it looks incomplete.

        Returns:
            True if the receipt was queued
        """
        reasons = self.should_review(receipt)
        if not reasons:
            return False

        logger.info(f"Sending {Path(file_path).name} to review: {'; '.join(reasons)}")
        self.add_item(
            file_path=file_path,
            reason="; ".join(reasons),
            vendor=receipt.vendor,
            date=receipt.date,
            total=receipt.total,
            raw_snippet=make_snippet(receipt.raw_text)
        )
        return True

    def get_summary(self) -> Dict[str, Any]:
        """Get summary statistics for the review queue."""
        if not self.items:
            return {"total": 0}

        reason_counts = {}
        for item in self.items:
            for reason in item.reason.split(';'):
                reason = reason.strip()
                reason_counts[reason] = reason_counts.get(reason, 0) + 1

        return {
            "total": len(self.items),
            "reason_breakdown": reason_counts
        }

    def clear(self):
        """Clear all items from the review queue."""
        self.items.clear()
        logger.info("Review queue cleared")
