"""Base classes for receipt field parsers."""

import re
from abc import ABC, abstractmethod
from typing import Optional, Any, Dict, List
from dataclasses import dataclass, field
import logging

logger = logging.getLogger(__name__)

LINE_BREAK = re.compile(r'\r?\n')


def split_lines(text: str) -> List[str]:
    """Split text on line breaks, trim each line and drop empty ones."""
    lines = (line.strip() for line in LINE_BREAK.split(text))
    return [line for line in lines if line]


@dataclass
class ParseResult:
    """Result of a parsing operation with the line it came from."""
    value: Any
    source_text: str = ""
    line_index: Optional[int] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ReceiptContext:
    """Recognized receipt text plus its retained, trimmed lines."""
    full_text: str
    lines: List[str] = None

    def __post_init__(self):
        if self.lines is None:
            self.lines = split_lines(self.full_text) if self.full_text else []


class BaseParser(ABC):
    """Base class for all receipt field parsers."""

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def parse(self, context: ReceiptContext) -> Optional[ParseResult]:
        """
        Parse the specific field from receipt context.

        Args:
            context: Receipt context with text and retained lines

        Returns:
            ParseResult with the extracted value, or None if nothing was found
        """
        pass

    def _log_result(self, result: Optional[ParseResult], context: ReceiptContext):
        """Log parsing result for debugging."""
        if result:
            self.logger.debug(f"Parsed: {result.value!r} (line {result.line_index})")
        else:
            self.logger.debug(f"Nothing found in {len(context.lines)} lines")
