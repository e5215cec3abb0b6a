"""Detect whether a new collection differs from the previous one."""

from typing import Iterable

from ..models import CollectedNote


def path_set(records: Iterable[CollectedNote]) -> set[str]:
    return {r.path for r in records}


def has_changed(previous_paths: set[str] | None, records: Iterable[CollectedNote] | None) -> bool:
    """Compare by path membership only; order and content are ignored."""
    if records is None or previous_paths is None:
        return True
    new_paths = path_set(records)
    if len(new_paths) != len(previous_paths):
        return True
    return any(p not in previous_paths for p in new_paths)
