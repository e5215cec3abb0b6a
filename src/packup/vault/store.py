"""Filesystem-backed vault: note lookup, reads and writes."""

import asyncio
import logging
import posixpath
import re
import unicodedata
from pathlib import Path
from typing import Iterator

from ..errors import NoteNotFoundError, NoteReadError
from ..models import NoteRef

logger = logging.getLogger(__name__)


def normalize_path(path: str) -> str:
    """Normalize a vault path the way the note app does.

    Backslashes become ``/``, repeated separators collapse, leading and
    trailing separators are removed.
    """
    path = path.replace("\u00a0", " ").replace("\u202f", " ")
    path = re.sub(r"[\\/]+", "/", path)
    path = path.strip("/")
    path = unicodedata.normalize("NFC", path)
    return path or "/"


class VaultStore:
    """Reads and writes notes under a vault root directory."""

    def __init__(self, root: str | Path):
        self.root = Path(root).expanduser().resolve()

    def _full_path(self, path: str) -> Path:
        path = posixpath.normpath(path)
        if path == ".." or path.startswith("../"):
            raise ValueError(f"Path is outside the vault: {path}")
        return self.root / path

    def iter_notes(self) -> Iterator[NoteRef]:
        """Yield every non-hidden file in the vault, sorted by path."""
        if not self.root.exists():
            return
        paths = []
        for file_path in self.root.rglob("*"):
            rel = file_path.relative_to(self.root)
            if any(part.startswith(".") for part in rel.parts):
                continue
            if file_path.is_file():
                paths.append(rel.as_posix())
        for path in sorted(paths):
            yield NoteRef.from_path(path)

    def get(self, path: str) -> NoteRef | None:
        path = normalize_path(path)
        try:
            full_path = self._full_path(path)
        except ValueError:
            return None
        if full_path.is_file():
            return NoteRef.from_path(path)
        return None

    def resolve_start(self, ref: str) -> NoteRef:
        """Find a starting note from a vault path, absolute path, or note name."""
        candidate = Path(ref).expanduser()
        if candidate.is_absolute():
            try:
                ref = candidate.resolve().relative_to(self.root).as_posix()
            except ValueError:
                raise NoteNotFoundError(f"Note is outside the vault: {candidate}") from None

        for path in (ref, ref if ref.endswith(".md") else f"{ref}.md"):
            note = self.get(path)
            if note and note.is_markdown:
                return note

        wanted = ref.lower().removesuffix(".md")
        matches = [n for n in self.iter_notes() if n.is_markdown and n.name.lower() == wanted]
        if matches:
            matches.sort(key=lambda n: (len(n.path), n.path))
            return matches[0]
        raise NoteNotFoundError(f"Note not found in vault: {ref}")

    def read_text(self, note: NoteRef) -> str:
        try:
            return self._full_path(note.path).read_text(encoding="utf-8-sig")
        except (OSError, ValueError) as e:
            raise NoteReadError(f"Cannot read {note.path}: {e}") from e

    async def read(self, note: NoteRef) -> str:
        """Read a note's content without blocking the event loop."""
        return await asyncio.to_thread(self.read_text, note)

    def write(self, path: str, content: str) -> bool:
        """Write ``content`` to ``path``. Returns True if an existing file was updated."""
        file_path = self._full_path(normalize_path(path))
        existed = file_path.is_file()
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")
        logger.debug(f"{'Updated' if existed else 'Created'} {file_path}")
        return existed
