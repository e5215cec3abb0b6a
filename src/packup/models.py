"""Data models used throughout packup."""

from dataclasses import dataclass, field
from pathlib import PurePosixPath


@dataclass(frozen=True)
class NoteRef:
    """A file in the vault, identified by its vault-relative path."""
    path: str
    name: str
    extension: str

    @classmethod
    def from_path(cls, path: str) -> "NoteRef":
        p = PurePosixPath(path)
        return cls(path=path, name=p.stem, extension=p.suffix.lstrip(".").lower())

    @property
    def is_markdown(self) -> bool:
        return self.extension == "md"

    @property
    def folder(self) -> str:
        parent = str(PurePosixPath(self.path).parent)
        return "" if parent == "." else parent


@dataclass(frozen=True)
class CollectedNote:
    """One note included in a traversal result."""
    note: NoteRef
    depth: int
    content: str
    parent_path: str | None = None

    @property
    def path(self) -> str:
        return self.note.path


@dataclass
class Settings:
    """User-facing collection settings."""
    max_depth: int = 3
    exclude_paths: list[str] = field(default_factory=lambda: ["packup-output.md"])
    output_file: str = "packup-output.md"
    include_backlinks: bool = True


@dataclass(frozen=True)
class WordStats:
    """Word count summary over a collected set."""
    total: int = 0
    average: int = 0
    minimum: int = 0
    maximum: int = 0


@dataclass
class CollectionResult:
    """What a session hands to the presentation layer after one collection."""
    records: list[CollectedNote]
    stats: WordStats
    changed: bool


@dataclass(frozen=True)
class GraphNode:
    id: str
    name: str
    depth: int
    word_count: int
    radius: float
    color: str


@dataclass(frozen=True)
class GraphLink:
    source: str
    target: str


@dataclass
class Graph:
    """Node/link data for drawing the collected neighborhood."""
    nodes: list[GraphNode] = field(default_factory=list)
    links: list[GraphLink] = field(default_factory=list)
