"""Word counts and statistics over collected notes."""

from .words import aggregate, count_words

__all__ = ["aggregate", "count_words"]
