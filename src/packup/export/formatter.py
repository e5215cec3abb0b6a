"""Render collected notes into a single Markdown context document."""

import re
from typing import Sequence

from ..models import CollectedNote
from ..vault.frontmatter import strip_frontmatter

NO_RELATED_FILES = "No related files found."

# Four backticks so ordinary ``` blocks inside a note cannot close the wrapper
MIN_FENCE = 4
_BACKTICK_RUN_RE = re.compile(r"`{%d,}" % MIN_FENCE)


def depth_description(depth: int) -> str:
    if depth == 0:
        return "The starting file itself."
    if depth == 1:
        return "Files directly linked to/from the starting file."
    return f"Files {depth} hops away."


def section_title(depth: int, start_name: str) -> str:
    if depth == 0:
        return f"Starting file: {start_name}"
    if depth == 1:
        return "Directly linked files"
    return f"Files {depth} hops away"


def fence_for(body: str) -> str:
    """Backtick fence longer than any backtick run in ``body``, at least four long."""
    longest = max((len(m.group(0)) for m in _BACKTICK_RUN_RE.finditer(body)), default=MIN_FENCE - 1)
    return "`" * (longest + 1)


def render_header(start_name: str, max_depth: int) -> str:
    lines = [
        "# Context for AI",
        "",
        f'These are related files around "**{start_name}**" up to **{max_depth}** hops:',
        "",
    ]
    for depth in range(max_depth + 1):
        lines.append(f"- Depth {depth}: {depth_description(depth)}")
    lines += ["", "---", "", ""]
    return "\n".join(lines)


def render_note(record: CollectedNote) -> str:
    body = strip_frontmatter(record.content)
    fence = fence_for(body)
    return (
        f"### {record.note.name}  \n"
        f"Path: {record.note.path}\n\n"
        f"{fence}markdown\n{body}\n{fence}\n\n"
    )


def format_export(records: Sequence[CollectedNote], max_depth: int, start_name: str | None = None) -> str:
    """Format collected notes as Markdown grouped by depth.

    Args:
        records: Collected notes in discovery order.
        max_depth: The hop limit the notes were collected with.
        start_name: Display name of the starting note; taken from the depth 0
            record when omitted.

    Returns:
        The Markdown document, or ``NO_RELATED_FILES`` for an empty collection.
    """
    if not records:
        return NO_RELATED_FILES

    if start_name is None:
        start = next((r for r in records if r.depth == 0), None)
        start_name = start.note.name if start else ""

    by_depth: dict[int, list[CollectedNote]] = {}
    for record in records:
        by_depth.setdefault(record.depth, []).append(record)

    parts = [render_header(start_name, max_depth)]
    for depth in sorted(by_depth):
        parts.append(f"## {section_title(depth, start_name)} (Depth {depth})\n\n")
        for record in by_depth[depth]:
            parts.append(render_note(record))
    return "".join(parts)
