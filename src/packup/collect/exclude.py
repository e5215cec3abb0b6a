"""Exclusion patterns: exact paths and folder prefixes."""

import re
from typing import Iterable


def is_excluded(path: str, patterns: Iterable[str] | None) -> bool:
    """True if ``path`` equals a pattern or sits under a pattern ending in ``/``."""
    for pattern in patterns or ():
        if not pattern:
            continue
        pattern = pattern.strip()
        if not pattern:
            continue
        if pattern == path:
            return True
        if pattern.endswith("/") and path.startswith(pattern):
            return True
    return False


def normalize_patterns(lines: Iterable[str]) -> list[str]:
    """Clean user-entered patterns, one per entry.

    Folder patterns keep their trailing ``/``.
    """
    patterns = []
    for line in lines:
        pattern = re.sub(r"[\\/]+", "/", line.strip()).lstrip("/")
        if pattern:
            patterns.append(pattern)
    return patterns
