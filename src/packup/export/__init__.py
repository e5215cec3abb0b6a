"""Export formatting and sinks."""

from .formatter import NO_RELATED_FILES, format_export
from .sinks import ClipboardSink, FileSink, normalize_output_name

__all__ = ["NO_RELATED_FILES", "ClipboardSink", "FileSink", "format_export", "normalize_output_name"]
