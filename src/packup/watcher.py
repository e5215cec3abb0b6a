"""Vault watcher that re-collects when notes change."""

import asyncio
import logging
import threading
import time
from pathlib import Path
from typing import Callable

from rich.console import Console
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .models import CollectionResult
from .session import CollectionSession

console = Console()
logger = logging.getLogger(__name__)


class VaultChangeHandler(FileSystemEventHandler):
    """Collects markdown change events under the vault and debounces them."""

    def __init__(self, root: Path, ignored: set[str] | None = None, debounce: float = 2.0):
        super().__init__()
        self._root = root
        self._ignored = ignored or set()
        self._pending: set[str] = set()
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._debounce = debounce
        self._callback: Callable[[list[str]], None] | None = None

    def set_callback(self, callback: Callable[[list[str]], None]) -> None:
        self._callback = callback

    def _relevant(self, path: str) -> str | None:
        """Vault-relative path for a markdown file we care about, else None."""
        try:
            rel = Path(path).resolve().relative_to(self._root).as_posix()
        except ValueError:
            return None
        if not rel.endswith(".md") or rel in self._ignored:
            return None
        if any(part.startswith(".") for part in rel.split("/")):
            return None
        return rel

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in ("created", "modified", "deleted", "moved"):
            return
        paths = [event.src_path, getattr(event, "dest_path", "")]
        for path in filter(None, paths):
            rel = self._relevant(str(path))
            if rel:
                self._add(rel)

    def _add(self, path: str) -> None:
        with self._lock:
            self._pending.add(path)
            if self._timer:
                self._timer.cancel()
            self._timer = threading.Timer(self._debounce, self._flush)
            self._timer.daemon = True
            self._timer.start()

    def _flush(self) -> None:
        with self._lock:
            paths = sorted(self._pending)
            self._pending.clear()
        if paths and self._callback:
            self._callback(paths)


class VaultWatcher:
    """Watches the vault and re-runs a session's collection on changes."""

    def __init__(
        self,
        session: CollectionSession,
        on_result: Callable[[CollectionResult], None] | None = None,
        debounce: float = 2.0,
    ):
        self.session = session
        self.on_result = on_result
        self.root = session.store.root
        ignored = {session.settings.output_file}
        self.handler = VaultChangeHandler(self.root, ignored=ignored, debounce=debounce)
        self.handler.set_callback(self.process_batch)
        self.observer = Observer()
        self._run_lock = threading.Lock()

    def process_batch(self, paths: list[str]) -> CollectionResult | None:
        """Rebuild the link index and collect again. One batch at a time."""
        with self._run_lock:
            logger.debug(f"Changed: {', '.join(paths)}")
            console.print(f"\n[blue]{len(paths)} note(s) changed, collecting again...[/]")
            self.session.refresh_index()
            result = asyncio.run(self.session.collect())
            if result is not None and self.on_result:
                self.on_result(result)
            return result

    def run(self) -> None:
        """Start watching (blocks until Ctrl+C)."""
        self.observer.schedule(self.handler, str(self.root), recursive=True)
        self.observer.start()
        console.print(f"[bold]Watching {self.root} for changes... (Ctrl+C to stop)[/]")

        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            console.print("\n[yellow]Stopping watcher...[/]")
            self.observer.stop()
        self.observer.join()
        console.print("[green]✓ Watcher stopped.[/]")
