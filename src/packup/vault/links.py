"""Link extraction and resolution over a vault."""

import logging
import re
from pathlib import PurePosixPath
from typing import Iterable
from urllib.parse import unquote

from ..errors import NoteReadError
from ..models import NoteRef
from .frontmatter import split_frontmatter
from .store import VaultStore

logger = logging.getLogger(__name__)

_FENCED_CODE_RE = re.compile(r"^[ \t]*(`{3,}|~{3,}).*?^[ \t]*\1[`~]*[ \t]*$", re.DOTALL | re.MULTILINE)
_INLINE_CODE_RE = re.compile(r"(`+)(?!`).+?(?<!`)\1(?!`)")
# [[target]], [[target|alias]], [[target\|alias]] in tables, [[target#heading]]; embeds (![[...]]) are not links
_WIKILINK_RE = re.compile(r"(?<!!)\[\[([^\]\|\n]+?)\\?(?:\|[^\]\n]*)?\]\]")
# [text](target) and [text](<target with spaces> "title"); images are not links
_MDLINK_RE = re.compile(r"(?<!!)\[[^\]\n]*\]\(\s*(<[^>\n]+>|[^)\s]+)(?:\s+\"[^\"]*\")?\s*\)")
_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")


def extract_links(text: str) -> list[str]:
    """Return raw link paths in order of appearance.

    The front matter, fenced code blocks and inline code are ignored. Returned
    values still carry any ``#heading`` suffix.
    """
    if not text:
        return []
    body = text[split_frontmatter(text).content_start:]
    body = _FENCED_CODE_RE.sub("", body)
    body = _INLINE_CODE_RE.sub("", body)

    found: list[tuple[int, str]] = []
    for match in _WIKILINK_RE.finditer(body):
        found.append((match.start(), match.group(1).strip()))
    for match in _MDLINK_RE.finditer(body):
        target = match.group(1).strip()
        if target.startswith("<") and target.endswith(">"):
            target = target[1:-1]
        if _SCHEME_RE.match(target):
            continue
        found.append((match.start(), unquote(target)))
    found.sort(key=lambda item: item[0])
    return [link for _, link in found]


class LinkIndex:
    """Forward links and backlinks for every note in a vault.

    Built once per scan; the graph itself is never stored beyond these two
    adjacency maps.
    """

    def __init__(self, notes: Iterable[NoteRef], raw_links: dict[str, list[str]]):
        self.notes = {n.path: n for n in notes}
        self._by_name: dict[str, list[NoteRef]] = {}
        for note in self.notes.values():
            # markdown notes answer to their bare name, every file to its file name
            keys = {PurePosixPath(note.path).name.lower()}
            if note.is_markdown:
                keys.add(note.name.lower())
            for key in keys:
                self._by_name.setdefault(key, []).append(note)

        self._forward: dict[str, list[NoteRef]] = {}
        self._backward: dict[str, set[str]] = {}
        for source_path, links in raw_links.items():
            source = self.notes.get(source_path)
            if source is None:
                continue
            resolved: dict[str, NoteRef] = {}
            for link in links:
                dest = self.resolve(link, source)
                if dest is not None and dest.path not in resolved:
                    resolved[dest.path] = dest
            self._forward[source_path] = list(resolved.values())
            for dest_path in resolved:
                self._backward.setdefault(dest_path, set()).add(source_path)

    @classmethod
    def from_store(cls, store: VaultStore) -> "LinkIndex":
        """Scan every markdown note in ``store`` and index its links."""
        notes = list(store.iter_notes())
        raw_links: dict[str, list[str]] = {}
        for note in notes:
            if not note.is_markdown:
                continue
            try:
                raw_links[note.path] = extract_links(store.read_text(note))
            except NoteReadError as e:
                logger.warning(f"Skipping links of unreadable note: {e}")
        logger.debug(f"Indexed {len(raw_links)} notes from {store.root}")
        return cls(notes, raw_links)

    def resolve(self, link: str, source: NoteRef) -> NoteRef | None:
        """Resolve a link path as written in ``source`` to a note, if any."""
        linkpath = link.split("#", 1)[0].strip()
        if not linkpath:
            return None
        linkpath = linkpath.replace("\\", "/").lstrip("/")

        candidates = [linkpath]
        if source.folder:
            relative = PurePosixPath(source.folder, linkpath)
            parts: list[str] = []
            for part in relative.parts:
                if part == "..":
                    if parts:
                        parts.pop()
                elif part != ".":
                    parts.append(part)
            candidates.append("/".join(parts))
        for candidate in candidates:
            for path in (candidate, f"{candidate}.md"):
                if path in self.notes:
                    return self.notes[path]

        name = PurePosixPath(linkpath).name.lower()
        matches = self._by_name.get(name, [])
        if "/" in linkpath:
            tails = (f"/{linkpath.lower()}", f"/{linkpath.lower()}.md")
            matches = [n for n in matches if f"/{n.path.lower()}".endswith(tails)]
        if not matches:
            return None
        return min(matches, key=lambda n: (n.folder != source.folder, len(n.path), n.path))

    def forward_links(self, note: NoteRef) -> list[NoteRef]:
        return list(self._forward.get(note.path, []))

    def backlinks(self, note: NoteRef) -> list[NoteRef]:
        return [self.notes[p] for p in sorted(self._backward.get(note.path, ()))]
