"""Date extraction. Dates are kept as the matched text, never normalized."""

import re
import logging
from typing import Optional, List, Tuple
from .base import BaseParser, ParseResult, ReceiptContext

logger = logging.getLogger(__name__)

# Individual alternatives, tried left-to-right inside the combined pattern
DAY_FIRST = r'\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4}'        # 01/02/2024, 1-2-24
YEAR_FIRST = r'\d{4}[/\-]\d{1,2}[/\-]\d{1,2}'         # 2024-01-02
MONTH_NAME = (
    r'(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|'
    r'aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)'
    r'\.?\s+\d{1,2}(?:,\s*|\s+)\d{2,4}'                # Jan 5, 2024
)

DATE_ALTERNATIVES: List[Tuple[str, str]] = [
    ('day_first', DAY_FIRST),
    ('year_first', YEAR_FIRST),
    ('month_name', MONTH_NAME),
]

DATE_PATTERN = re.compile(
    r'(?:\b|^)(?:'
    + '|'.join(f'(?P<{name}>{pattern})' for name, pattern in DATE_ALTERNATIVES)
    + r')(?:\b|$)',
    re.IGNORECASE | re.ASCII,
)


def match_date(line: str) -> Optional[re.Match]:
    """Return the leftmost date match in a single line."""
    return DATE_PATTERN.search(line)


class DateParser(BaseParser):
    """Finds the first line carrying a date and returns the matched text."""

    def parse(self, context: ReceiptContext) -> Optional[ParseResult]:
        for line_idx, line in enumerate(context.lines):
            match = match_date(line)
            if not match:
                continue

            result = ParseResult(
                value=match.group(match.lastgroup),
                source_text=line,
                line_index=line_idx,
                metadata={'pattern_type': match.lastgroup}
            )
            self._log_result(result, context)
            return result

        self._log_result(None, context)
        return None
