"""Graph collection: BFS traversal, exclusion and change detection."""

from .changes import has_changed, path_set
from .collector import READ_ERROR_CONTENT, Collector, collect
from .exclude import is_excluded, normalize_patterns
from .resolver import DocumentReader, LinkResolver, VaultLinkResolver

__all__ = [
    "READ_ERROR_CONTENT",
    "Collector",
    "DocumentReader",
    "LinkResolver",
    "VaultLinkResolver",
    "collect",
    "has_changed",
    "is_excluded",
    "normalize_patterns",
    "path_set",
]
