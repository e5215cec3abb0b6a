"""Tests for the Markdown export formatter."""

from packup.export import NO_RELATED_FILES, format_export
from packup.models import CollectedNote, NoteRef


def _rec(path: str, depth: int, content: str, parent: str | None = None) -> CollectedNote:
    return CollectedNote(note=NoteRef.from_path(path), depth=depth, content=content, parent_path=parent)


RECORDS = [
    _rec("Start.md", 0, "---\ntitle: Start\n---\nStart body\n"),
    _rec("notes/B.md", 1, "B body", "Start.md"),
    _rec("notes/C.md", 1, "C body", "Start.md"),
    _rec("deep/D.md", 2, "D body", "notes/B.md"),
]


def test_empty_collection_returns_sentinel():
    assert format_export([], 3, "X") == NO_RELATED_FILES == "No related files found."


def test_full_document():
    expected = (
        "# Context for AI\n\n"
        'These are related files around "**Start**" up to **2** hops:\n\n'
        "- Depth 0: The starting file itself.\n"
        "- Depth 1: Files directly linked to/from the starting file.\n"
        "- Depth 2: Files 2 hops away.\n"
        "\n---\n\n"
        "## Starting file: Start (Depth 0)\n\n"
        "### Start  \nPath: Start.md\n\n````markdown\nStart body\n````\n\n"
        "## Directly linked files (Depth 1)\n\n"
        "### B  \nPath: notes/B.md\n\n````markdown\nB body\n````\n\n"
        "### C  \nPath: notes/C.md\n\n````markdown\nC body\n````\n\n"
        "## Files 2 hops away (Depth 2)\n\n"
        "### D  \nPath: deep/D.md\n\n````markdown\nD body\n````\n\n"
    )
    assert format_export(RECORDS, 2) == expected


def test_header_lists_every_depth_up_to_max():
    text = format_export(RECORDS[:1], 4, "Start")
    for depth in range(5):
        assert f"- Depth {depth}:" in text
    assert "- Depth 4: Files 4 hops away." in text
    assert "- Depth 5" not in text


def test_empty_depth_levels_are_skipped():
    records = [RECORDS[0], _rec("far/E.md", 2, "E", "Start.md")]
    text = format_export(records, 3)
    assert "(Depth 1)" not in text
    assert "## Files 2 hops away (Depth 2)" in text
    assert "(Depth 3)" not in text


def test_collection_order_within_depth_is_kept():
    records = [RECORDS[0], RECORDS[2], RECORDS[1]]
    text = format_export(records, 1)
    assert text.index("### C") < text.index("### B")


def test_triple_backtick_content_stays_inside_wrapper():
    content = "Intro\n```python\nprint('hi')\n```\nOutro"
    text = format_export([_rec("Code.md", 0, content)], 1)
    assert f"````markdown\n{content}\n````\n\n" in text


def test_longer_backtick_runs_widen_the_fence():
    content = "````\nraw\n````"
    text = format_export([_rec("Code.md", 0, content)], 1)
    assert f"`````markdown\n{content}\n`````\n\n" in text


def test_deterministic():
    assert format_export(RECORDS, 3) == format_export(list(RECORDS), 3)


def test_start_name_override():
    text = format_export(RECORDS, 2, start_name="Custom")
    assert '"**Custom**"' in text
    assert "## Starting file: Custom (Depth 0)" in text
