"""Exception classes for packup.

Kept in their own module so the vault, collect and export layers can share
them without importing each other.
"""


class PackupError(Exception):
    """Base exception for packup operations."""

    pass


class CollectionError(PackupError):
    """Raised when a traversal cannot produce a result."""

    pass


class NoteReadError(PackupError, OSError):
    """Raised when a note's content cannot be read."""

    pass


class NoteNotFoundError(PackupError, LookupError):
    """Raised when a starting note does not exist in the vault."""

    pass


class ExportError(PackupError):
    """Raised when the export could not be written to its sink."""

    pass


class ConfigError(PackupError, ValueError):
    """Raised for invalid settings."""

    pass
