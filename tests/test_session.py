"""Tests for the collection session, graph data and config."""

import asyncio
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest
import pyperclip

from packup.config import DEFAULT_CONFIG, load_config, load_settings, parse_setting, save_config
from packup.errors import ConfigError
from packup.graph import MAX_RADIUS, MIN_RADIUS, build_graph, depth_color
from packup.models import Settings
from packup.session import CollectionSession
from packup.vault import VaultStore


def _vault(tmpdir: str) -> VaultStore:
    root = Path(tmpdir)
    files = {
        "A.md": "Start links to [[B]] and [[C]]",
        "B.md": "Middle note with [[D]]",
        "C.md": "Another note",
        "D.md": "Far away note with quite a few more words in it",
    }
    for rel, content in files.items():
        (root / rel).write_text(content, encoding="utf-8")
    return VaultStore(root)


def _session(store: VaultStore, messages: list[str], **settings) -> CollectionSession:
    start = store.resolve_start("A")
    return CollectionSession(start, Settings(**settings), store, notify=messages.append)


def test_collect_sets_records_stats_and_status():
    with tempfile.TemporaryDirectory() as tmpdir:
        messages: list[str] = []
        session = _session(_vault(tmpdir), messages, max_depth=1)
        result = asyncio.run(session.collect())
        assert [r.path for r in result.records] == ["A.md", "B.md", "C.md"]
        assert result.changed
        assert result.stats.total == sum(len(r.content.split()) for r in result.records)
        assert session.status == "Collected 3 notes."
        assert session.last_paths == {"A.md", "B.md", "C.md"}


def test_second_collection_reports_unchanged_until_settings_change():
    with tempfile.TemporaryDirectory() as tmpdir:
        session = _session(_vault(tmpdir), [], max_depth=1)
        asyncio.run(session.collect())
        assert not asyncio.run(session.collect()).changed

        session.update_settings(max_depth=2)
        result = asyncio.run(session.collect())
        assert result.changed
        assert {r.path: r.depth for r in result.records}["D.md"] == 2


def test_concurrent_collect_is_rejected_with_notice():
    with tempfile.TemporaryDirectory() as tmpdir:
        messages: list[str] = []
        session = _session(_vault(tmpdir), messages)

        async def both():
            return await asyncio.gather(session.collect(), session.collect())

        first, second = asyncio.run(both())
        assert first is not None
        assert second is None
        assert "Collection already in progress..." in messages
        assert not session.is_collecting


def test_unreadable_start_becomes_notice():
    with tempfile.TemporaryDirectory() as tmpdir:
        messages: list[str] = []
        store = _vault(tmpdir)
        session = _session(store, messages)
        (store.root / "A.md").unlink()
        assert asyncio.run(session.collect()) is None
        assert session.status.startswith("Error: Collection failed")
        assert messages[-1].startswith("Collection error:")
        assert not session.is_collecting


def test_save_to_file_creates_then_updates():
    with tempfile.TemporaryDirectory() as tmpdir:
        messages: list[str] = []
        store = _vault(tmpdir)
        session = _session(store, messages, max_depth=1, output_file="context")
        assert asyncio.run(session.save_to_file(filename="context"))
        assert asyncio.run(session.save_to_file(filename="context"))
        assert messages == ["Created file: context.md", "Updated file: context.md"]
        text = (store.root / "context.md").read_text(encoding="utf-8")
        assert text.startswith("# Context for AI")
        assert "### C  \nPath: C.md" in text


def test_copy_to_clipboard():
    with tempfile.TemporaryDirectory() as tmpdir:
        messages: list[str] = []
        session = _session(_vault(tmpdir), messages, max_depth=1)
        with patch("packup.export.sinks.pyperclip.copy") as copy:
            assert asyncio.run(session.copy_to_clipboard())
        copy.assert_called_once_with(session.last_export)
        assert messages == ["Copied 3 notes to clipboard!"]


def test_clipboard_failure_keeps_formatted_export():
    with tempfile.TemporaryDirectory() as tmpdir:
        messages: list[str] = []
        session = _session(_vault(tmpdir), messages)
        with patch("packup.export.sinks.pyperclip.copy", side_effect=pyperclip.PyperclipException("no clipboard")):
            assert not asyncio.run(session.copy_to_clipboard())
        assert messages == ["Error copying to clipboard: no clipboard"]
        assert session.last_export.startswith("# Context for AI")


def test_build_graph():
    with tempfile.TemporaryDirectory() as tmpdir:
        session = _session(_vault(tmpdir), [], max_depth=2)
        result = asyncio.run(session.collect())
        graph = build_graph(result.records)
        assert [n.id for n in graph.nodes] == ["A.md", "B.md", "C.md", "D.md"]
        assert {(link.source, link.target) for link in graph.links} == {
            ("A.md", "B.md"), ("A.md", "C.md"), ("B.md", "D.md"),
        }
        assert all(MIN_RADIUS <= n.radius <= MAX_RADIUS for n in graph.nodes)
        largest = max(graph.nodes, key=lambda n: n.word_count)
        assert largest.radius == MAX_RADIUS
        assert graph.nodes[0].color == depth_color(0)
        assert depth_color(12) == depth_color(2)


def test_build_graph_empty():
    graph = build_graph([])
    assert graph.nodes == [] and graph.links == []


def test_load_config_from_file_and_env():
    with tempfile.TemporaryDirectory() as tmpdir:
        cfg_path = Path(tmpdir) / "packup.yaml"
        cfg_path.write_text("max_depth: 5\ninclude_backlinks: false\n")
        cfg = load_config(cfg_path)
        assert cfg["max_depth"] == 5
        assert cfg["exclude_paths"] == DEFAULT_CONFIG["exclude_paths"]

        with patch.dict("os.environ", {"PACKUP_VAULT_PATH": tmpdir}):
            cfg = load_config(cfg_path)
        assert cfg["vault_path"] == str(Path(tmpdir).resolve())

        settings = load_settings(cfg)
        assert settings.max_depth == 5
        assert settings.include_backlinks is False


def test_save_config_round_trip():
    with tempfile.TemporaryDirectory() as tmpdir:
        target = Path(tmpdir) / "nested" / "config.yaml"
        cfg = dict(DEFAULT_CONFIG, max_depth=7, exclude_paths=["Templates/"])
        save_config(cfg, target)
        loaded = load_settings(load_config(target))
        assert loaded.max_depth == 7
        assert loaded.exclude_paths == ["Templates/"]


def test_invalid_settings():
    with pytest.raises(ConfigError):
        load_settings({"max_depth": 0})
    with pytest.raises(ConfigError):
        load_settings({"max_depth": 11})
    with pytest.raises(ConfigError):
        load_settings({"max_depth": "3"})
    with pytest.raises(ConfigError):
        load_settings({"include_backlinks": "yes"})


def test_settings_normalization():
    settings = load_settings({"output_file": "exports//ctx", "exclude_paths": "Drafts/\n\n x.md "})
    assert settings.output_file == "exports/ctx.md"
    assert settings.exclude_paths == ["Drafts/", "x.md"]


def test_parse_setting():
    assert parse_setting("max_depth", "4") == 4
    assert parse_setting("include_backlinks", "off") is False
    assert parse_setting("exclude_paths", "A/, b.md") == ["A/", "b.md"]
    with pytest.raises(ConfigError):
        parse_setting("colour", "blue")
