"""Filesystem vault: note store, front matter and link index."""

from .frontmatter import FrontMatter, split_frontmatter, strip_frontmatter
from .links import LinkIndex, extract_links
from .store import VaultStore, normalize_path

__all__ = [
    "FrontMatter",
    "LinkIndex",
    "VaultStore",
    "extract_links",
    "normalize_path",
    "split_frontmatter",
    "strip_frontmatter",
]
