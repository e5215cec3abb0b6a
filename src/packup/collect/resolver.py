"""Neighbor lookup for the collector."""

from typing import Protocol

from ..models import NoteRef
from ..vault.links import LinkIndex


class LinkResolver(Protocol):
    """Anything that can list the notes directly related to a note."""

    async def related(self, note: NoteRef) -> list[NoteRef]:
        """Return collectable neighbors of ``note``, without duplicates."""
        ...


class DocumentReader(Protocol):
    async def read(self, note: NoteRef) -> str:
        ...


class VaultLinkResolver:
    """Resolve neighbors through a vault ``LinkIndex``.

    Forward links come first in the order they appear in the note, then
    backlinks sorted by path when ``include_backlinks`` is set. Only markdown
    notes are returned.
    """

    def __init__(self, index: LinkIndex, include_backlinks: bool = True):
        self.index = index
        self.include_backlinks = include_backlinks

    async def related(self, note: NoteRef) -> list[NoteRef]:
        related: dict[str, NoteRef] = {}
        neighbors = self.index.forward_links(note)
        if self.include_backlinks:
            neighbors += self.index.backlinks(note)
        for neighbor in neighbors:
            if neighbor.is_markdown and neighbor.path not in related:
                related[neighbor.path] = neighbor
        return list(related.values())
