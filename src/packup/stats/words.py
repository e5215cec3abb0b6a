"""Word counting that copes with languages written without spaces."""

import math
import re
from typing import Iterable

from ..models import CollectedNote, WordStats
from ..vault.frontmatter import strip_frontmatter

# Hiragana/Katakana, CJK Ext A, CJK Unified, CJK Compatibility, halfwidth Katakana
_CJK_RE = re.compile(r"[\u3040-\u30ff\u3400-\u4dbf\u4e00-\u9fff\uf900-\ufaff\uff66-\uff9f]")
_WHITESPACE_RE = re.compile(r"\s+")

CJK_THRESHOLD = 0.15


def count_words(text: str | None, has_metadata_block: bool = True) -> int:
    """Count words in a note body.

    Text where more than 15% of characters are CJK is counted per character
    (whitespace excluded); anything else is counted per whitespace-separated
    token. A leading front matter block is skipped when ``has_metadata_block``
    is set.
    """
    if not text:
        return 0

    clean = strip_frontmatter(text) if has_metadata_block else text.strip()
    if not clean:
        return 0

    cjk_ratio = len(_CJK_RE.findall(clean)) / len(clean)
    if cjk_ratio > CJK_THRESHOLD:
        return len(_WHITESPACE_RE.sub("", clean))
    return len([token for token in _WHITESPACE_RE.split(clean) if token])


def aggregate(records: Iterable[CollectedNote]) -> WordStats:
    """Total, average, min and max word counts over collected notes."""
    counts = [count_words(r.content) for r in records]
    if not counts:
        return WordStats()

    total = sum(counts)
    # round half up, not Python's banker's rounding
    average = math.floor(total / len(counts) + 0.5)
    return WordStats(total=total, average=average, minimum=min(counts), maximum=max(counts))
