"""Destinations for a formatted export: clipboard or a vault file."""

import logging

import pyperclip

from ..errors import ExportError
from ..vault.store import VaultStore, normalize_path

logger = logging.getLogger(__name__)


def normalize_output_name(name: str) -> str:
    """Normalize an export filename and make sure it ends in ``.md``."""
    name = name.strip()
    if not name.endswith(".md"):
        name += ".md"
    return normalize_path(name)


class ClipboardSink:
    """Copies the export to the system clipboard."""

    def write(self, content: str) -> None:
        try:
            pyperclip.copy(content)
        except pyperclip.PyperclipException as e:
            raise ExportError(str(e)) from e
        logger.debug(f"Copied {len(content):,} chars to clipboard")


class FileSink:
    """Writes the export into the vault, replacing any previous export."""

    def __init__(self, store: VaultStore):
        self.store = store

    def write(self, content: str, filename: str) -> str:
        """Write the export. Returns ``"updated"`` or ``"created"``."""
        filename = normalize_output_name(filename)
        try:
            updated = self.store.write(filename, content)
        except (OSError, ValueError) as e:
            raise ExportError(str(e)) from e
        return "updated" if updated else "created"
