"""Breadth-first collection of the notes around a starting note."""

import logging
from collections import deque
from typing import Callable, Iterable

from ..errors import CollectionError
from ..models import CollectedNote, NoteRef
from .exclude import is_excluded
from .resolver import DocumentReader, LinkResolver

logger = logging.getLogger(__name__)

READ_ERROR_CONTENT = "*Error reading file*"


async def collect(
    start: NoteRef,
    max_depth: int,
    resolver: LinkResolver,
    exclude: Callable[[str], bool],
    reader: DocumentReader,
) -> list[CollectedNote]:
    """Collect ``start`` and every note within ``max_depth`` hops of it.

    Args:
        start: The note to start from. It is always returned at depth 0.
        max_depth: Hop limit. Notes at this depth are collected but not expanded.
        resolver: Supplies the neighbors of a note.
        exclude: Predicate over paths; excluded notes are neither collected nor expanded.
        reader: Supplies note content.

    Returns:
        Records in discovery order, so depths never decrease.

    Raises:
        CollectionError: if the traversal cannot complete, e.g. the start
            note is unreadable.
    """
    if max_depth < 0:
        raise ValueError(f"max_depth must be >= 0, got {max_depth}")

    logger.debug(f"Starting collection from {start.path} with depth {max_depth}")
    queue: deque[tuple[NoteRef, int]] = deque([(start, 0)])
    visited = {start.path}
    collected: list[CollectedNote] = []

    try:
        content = await reader.read(start)
        collected.append(CollectedNote(note=start, depth=0, content=content, parent_path=None))

        while queue:
            note, depth = queue.popleft()
            if depth >= max_depth:
                continue

            for neighbor in await resolver.related(note):
                if neighbor.path in visited or exclude(neighbor.path):
                    continue
                # mark before reading so a second frontier member cannot enqueue it again
                visited.add(neighbor.path)
                try:
                    content = await reader.read(neighbor)
                except OSError as e:
                    logger.warning(f"Error reading file {neighbor.path}: {e}")
                    collected.append(CollectedNote(
                        note=neighbor,
                        depth=depth + 1,
                        content=READ_ERROR_CONTENT,
                        parent_path=note.path,
                    ))
                    continue
                collected.append(CollectedNote(
                    note=neighbor,
                    depth=depth + 1,
                    content=content,
                    parent_path=note.path,
                ))
                queue.append((neighbor, depth + 1))
    except Exception as e:
        raise CollectionError(f"Collection failed: {e}") from e

    logger.debug(f"Collected {len(collected)} notes")
    return collected


class Collector:
    """Bundles a resolver, exclusion patterns and a reader for repeated collections.

    Every call to :meth:`collect` gets its own queue and visited set.
    """

    def __init__(self, resolver: LinkResolver, reader: DocumentReader, exclude_paths: Iterable[str] = ()):
        self.resolver = resolver
        self.reader = reader
        self.exclude_paths = list(exclude_paths)

    def is_excluded(self, path: str) -> bool:
        return is_excluded(path, self.exclude_paths)

    async def collect(self, start: NoteRef, max_depth: int) -> list[CollectedNote]:
        return await collect(start, max_depth, self.resolver, self.is_excluded, self.reader)
