"""Leading YAML front matter detection."""

import re
from dataclasses import dataclass, field
from typing import Any

import yaml

# Opening line, block body, closing line. The body may be empty.
_FRONTMATTER_RE = re.compile(r"\A---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)", re.DOTALL)


@dataclass
class FrontMatter:
    exists: bool
    content_start: int = 0
    data: dict[str, Any] = field(default_factory=dict)


def split_frontmatter(text: str) -> FrontMatter:
    """Locate a front matter block at the very start of ``text``.

    ``content_start`` is the offset of the first character after the closing
    ``---`` line, or 0 when there is no block.
    """
    if not text:
        return FrontMatter(exists=False)
    match = _FRONTMATTER_RE.match(text)
    if not match:
        return FrontMatter(exists=False)

    data: dict[str, Any] = {}
    body = match.group(1)
    if body:
        try:
            loaded = yaml.safe_load(body)
        except yaml.YAMLError:
            loaded = None
        if isinstance(loaded, dict):
            data = loaded
    return FrontMatter(exists=True, content_start=match.end(), data=data)


def strip_frontmatter(text: str) -> str:
    """Return the note body without its front matter, trimmed."""
    if not text:
        return ""
    fm = split_frontmatter(text)
    return text[fm.content_start:].strip()
