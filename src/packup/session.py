"""A collection session around one starting note.

Holds what the export and graph views need between actions: the last
collected notes, their path set for change detection, word statistics and a
busy flag that turns away overlapping collections.
"""

import logging
from dataclasses import asdict
from typing import Callable

from .collect.changes import has_changed, path_set
from .collect.collector import Collector
from .collect.resolver import VaultLinkResolver
from .config import load_settings
from .errors import CollectionError, ExportError
from .export.formatter import format_export
from .export.sinks import ClipboardSink, FileSink, normalize_output_name
from .models import CollectedNote, CollectionResult, NoteRef, Settings, WordStats
from .stats.words import aggregate
from .vault.links import LinkIndex
from .vault.store import VaultStore

logger = logging.getLogger(__name__)


class CollectionSession:
    """Collects, summarizes and exports the neighborhood of ``start``."""

    def __init__(
        self,
        start: NoteRef,
        settings: Settings,
        store: VaultStore,
        index: LinkIndex | None = None,
        notify: Callable[[str], None] | None = None,
    ):
        self.start = start
        self.settings = settings
        self.store = store
        self.index = index or LinkIndex.from_store(store)
        self.notify = notify or (lambda message: logger.info(message))

        self.records: list[CollectedNote] | None = None
        self.last_paths: set[str] | None = None
        self.stats: WordStats | None = None
        self.last_export: str | None = None
        self.status = "No data collected yet."
        self.is_collecting = False

    def refresh_index(self) -> None:
        """Rescan the vault's links, e.g. after files changed."""
        self.index = LinkIndex.from_store(self.store)

    def update_settings(self, **changes) -> Settings:
        """Apply setting changes; the next collection uses them."""
        merged = {**asdict(self.settings), **changes}
        self.settings = load_settings(merged)
        return self.settings

    def _collector(self) -> Collector:
        resolver = VaultLinkResolver(self.index, include_backlinks=self.settings.include_backlinks)
        return Collector(resolver, self.store, self.settings.exclude_paths)

    async def collect(self) -> CollectionResult | None:
        """Run one collection. Returns None if busy or the collection failed."""
        if self.is_collecting:
            self.notify("Collection already in progress...")
            return None

        self.is_collecting = True
        self.status = "Collecting notes..."
        try:
            records = await self._collector().collect(self.start, self.settings.max_depth)
        except CollectionError as e:
            self.status = f"Error: {e}"
            self.notify(f"Collection error: {e}")
            return None
        finally:
            self.is_collecting = False

        changed = has_changed(self.last_paths, records)
        self.records = records
        self.last_paths = path_set(records)
        self.stats = aggregate(records)
        self.status = f"Collected {len(records)} notes."
        if not changed:
            logger.debug("Collection unchanged, graph refresh not needed")
        return CollectionResult(records=records, stats=self.stats, changed=changed)

    async def ensure_collection(self) -> None:
        if self.is_collecting:
            self.notify("Collection already in progress...")
            return
        if self.records is None:
            await self.collect()

    def format(self) -> str:
        self.last_export = format_export(self.records or [], self.settings.max_depth, self.start.name)
        return self.last_export

    async def copy_to_clipboard(self, sink: ClipboardSink | None = None) -> bool:
        await self.ensure_collection()
        if not self.records:
            self.notify("No notes to copy.")
            return False

        formatted = self.format()
        try:
            (sink or ClipboardSink()).write(formatted)
        except ExportError as e:
            self.notify(f"Error copying to clipboard: {e}")
            return False
        self.notify(f"Copied {len(self.records)} notes to clipboard!")
        return True

    async def save_to_file(self, sink: FileSink | None = None, filename: str | None = None) -> bool:
        await self.ensure_collection()
        if not self.records:
            self.notify("No notes to save.")
            return False

        formatted = self.format()
        sink = sink or FileSink(self.store)
        filename = filename or self.settings.output_file
        try:
            outcome = sink.write(formatted, filename)
        except ExportError as e:
            self.notify(f"Error saving file: {e}")
            return False
        self.notify(f"{outcome.capitalize()} file: {normalize_output_name(filename)}")
        return True
