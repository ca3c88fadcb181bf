"""Multi-page text combination and acquisition progress reporting."""

import re
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional

logger = logging.getLogger(__name__)

PAGE_MARKER = "[[PAGE {number}]]"
PAGE_MARKER_PATTERN = re.compile(r'^\[\[PAGE (\d+)\]\]$')


class OcrStage(str, Enum):
    """Stages reported by the text acquisition pipeline."""
    LOADING = "loading"
    RECOGNIZING = "recognizing"
    RENDERING = "rendering"
    DONE = "done"
    ERROR = "error"


@dataclass(frozen=True)
class OcrProgress:
    """One progress notification; percent is clamped to 0..100."""
    stage: OcrStage
    percent: Optional[int] = None
    message: Optional[str] = None

    def __post_init__(self):
        if self.percent is not None:
            object.__setattr__(self, 'percent', max(0, min(100, int(self.percent))))


ProgressCallback = Callable[[OcrProgress], None]


def page_marker(number: int) -> str:
    return PAGE_MARKER.format(number=number)


def is_page_marker(line: str) -> bool:
    """True for a synthetic page-boundary line such as [[PAGE 2]]."""
    return PAGE_MARKER_PATTERN.match(line.strip()) is not None


def combine_pages(page_texts: Iterable[str]) -> str:
    """
    Join per-page recognized texts into one document.

    Every page, the first included, is preceded by its marker line. The
    result is stripped, so a single page still starts with [[PAGE 1]].
    """
    combined = ""
    count = 0
    for count, text in enumerate(page_texts, 1):
        combined += f"\n\n{page_marker(count)}\n" + text
    logger.debug(f"Combined {count} pages")
    return combined.strip()
