"""CLI entry point for packup."""

import asyncio
import json
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from .config import DEFAULT_CONFIG, MAX_DEPTH_LIMIT, load_config, load_settings, parse_setting, save_config
from .errors import PackupError
from .models import CollectedNote, CollectionResult, WordStats
from .session import CollectionSession
from .vault.store import VaultStore

console = Console()

DEFAULT_CONFIG_FILE = Path.home() / ".packup" / "config.yaml"


@click.group()
@click.option("--config", "-c", "config_path", default=None, help="Path to config file")
@click.option("--vault", "-v", "vault_path", default=None, help="Vault directory (overrides config)")
@click.option("--verbose", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx, config_path, vault_path, verbose):
    """packup - Collect linked notes into one Markdown context file."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["vault_path"] = vault_path


def _get_config(ctx) -> dict:
    try:
        config = load_config(ctx.obj.get("config_path"))
    except PackupError as e:
        _fail(ctx, str(e))
    if ctx.obj.get("vault_path"):
        config["vault_path"] = str(Path(ctx.obj["vault_path"]).expanduser().resolve())
    return config


def _fail(ctx, message: str):
    console.print(f"[red]{escape(message)}[/]")
    ctx.exit(1)


def _notify(message: str) -> None:
    console.print(f"[cyan]{escape(message)}[/]")


def collection_options(func):
    """Options shared by every command that collects notes."""
    func = click.option("--exclude", "-x", multiple=True, help="Extra path or folder/ to exclude")(func)
    func = click.option("--backlinks/--no-backlinks", default=None, help="Follow backlinks too")(func)
    func = click.option(
        "--depth", "-d", type=click.IntRange(1, MAX_DEPTH_LIMIT), default=None, help="Max link hops"
    )(func)
    func = click.argument("note")(func)
    return func


def _get_session(ctx, note, depth, backlinks, exclude) -> CollectionSession:
    config = _get_config(ctx)
    if depth is not None:
        config["max_depth"] = depth
    if backlinks is not None:
        config["include_backlinks"] = backlinks
    if exclude:
        config["exclude_paths"] = list(config.get("exclude_paths") or []) + list(exclude)

    try:
        settings = load_settings(config)
        store = VaultStore(config["vault_path"])
        start = store.resolve_start(note)
    except PackupError as e:
        _fail(ctx, str(e))

    return CollectionSession(start, settings, store, notify=_notify)


def _run_collection(ctx, session: CollectionSession) -> CollectionResult:
    result = asyncio.run(session.collect())
    if result is None:
        _fail(ctx, session.status)
    return result


def _stats_table(stats: WordStats) -> Table:
    table = Table(title="Word Statistics", show_header=False)
    table.add_column("Metric", style="dim")
    table.add_column("Value", justify="right", style="green")
    table.add_row("Total words", f"{stats.total:,}")
    table.add_row("Average words per note", f"{stats.average:,}")
    table.add_row("Range", f"{stats.minimum:,} - {stats.maximum:,} words")
    return table


def graph_tree(records: list[CollectedNote]) -> Tree:
    """Render the discovery tree: each note under the note that found it."""
    from .graph import build_graph

    graph = build_graph(records)
    nodes = {n.id: n for n in graph.nodes}
    branches: dict[str, Tree] = {}
    root = None
    for record in records:
        node = nodes[record.path]
        label = f"[{node.color}]{escape(node.name)}[/] [dim]({node.word_count:,} words)[/]"
        if record.parent_path is None:
            root = branches[record.path] = Tree(label)
        else:
            branches[record.path] = branches[record.parent_path].add(label)
    return root


def _print_result(session: CollectionSession, result: CollectionResult, tree: bool) -> None:
    console.print(f"[green]✓ {session.status}[/]")
    console.print(_stats_table(result.stats))
    if tree and result.records:
        console.print(graph_tree(result.records))


@cli.command()
@click.option("--path", default=None, help="Vault directory (default: current directory)")
@click.pass_context
def init(ctx, path):
    """Write a default configuration for a vault."""
    vault_path = Path(path or ".").expanduser().resolve()
    config_file = Path(ctx.obj.get("config_path") or DEFAULT_CONFIG_FILE).expanduser()
    if config_file.exists():
        console.print(f"[yellow]Config already exists: {config_file}[/]")
        return

    cfg = dict(DEFAULT_CONFIG)
    cfg["vault_path"] = str(vault_path)
    save_config(cfg, config_file)
    console.print(f"[bold green]✓ Created config: {config_file}[/]")
    console.print(f"  Vault: {vault_path}")
    console.print("  Run: packup collect <note>")


@cli.command()
@collection_options
@click.option("--tree/--no-tree", default=True, help="Show the link graph")
@click.pass_context
def collect(ctx, note, depth, backlinks, exclude, tree):
    """Collect the notes around NOTE and show statistics."""
    session = _get_session(ctx, note, depth, backlinks, exclude)
    console.print(f"[blue]Starting note: {escape(session.start.name)}[/]")
    result = _run_collection(ctx, session)
    _print_result(session, result, tree)


@cli.command()
@collection_options
@click.pass_context
def copy(ctx, note, depth, backlinks, exclude):
    """Collect the notes around NOTE and copy the export to the clipboard."""
    session = _get_session(ctx, note, depth, backlinks, exclude)
    _run_collection(ctx, session)
    asyncio.run(session.copy_to_clipboard())


@cli.command()
@collection_options
@click.option("--output", "-o", default=None, help="Export filename inside the vault")
@click.pass_context
def save(ctx, note, depth, backlinks, exclude, output):
    """Collect the notes around NOTE and save the export in the vault."""
    session = _get_session(ctx, note, depth, backlinks, exclude)
    _run_collection(ctx, session)
    asyncio.run(session.save_to_file(filename=output))


@cli.command()
@collection_options
@click.pass_context
def show(ctx, note, depth, backlinks, exclude):
    """Print the export for NOTE to stdout."""
    session = _get_session(ctx, note, depth, backlinks, exclude)
    _run_collection(ctx, session)
    click.echo(session.format())


@cli.command()
@collection_options
@click.option("--json", "as_json", is_flag=True, help="Print node/link data as JSON")
@click.pass_context
def graph(ctx, note, depth, backlinks, exclude, as_json):
    """Show the link graph around NOTE."""
    from .graph import build_graph, graph_to_dict

    session = _get_session(ctx, note, depth, backlinks, exclude)
    result = _run_collection(ctx, session)
    if as_json:
        click.echo(json.dumps(graph_to_dict(build_graph(result.records)), indent=2))
    else:
        console.print(graph_tree(result.records))


@cli.command()
@collection_options
@click.option("--debounce", default=2.0, help="Seconds to wait after last change before collecting")
@click.option("--save", "save_export", is_flag=True, help="Rewrite the export file after each collection")
@click.pass_context
def watch(ctx, note, depth, backlinks, exclude, debounce, save_export):
    """Collect NOTE's neighborhood again whenever the vault changes."""
    from .watcher import VaultWatcher

    session = _get_session(ctx, note, depth, backlinks, exclude)

    def on_result(result: CollectionResult) -> None:
        _print_result(session, result, tree=result.changed)
        if not result.changed:
            console.print("[dim]Collection unchanged, graph not redrawn[/]")
        if save_export:
            asyncio.run(session.save_to_file())

    on_result(_run_collection(ctx, session))
    VaultWatcher(session, on_result=on_result, debounce=debounce).run()


@cli.command("config")
@click.argument("key", required=False)
@click.argument("value", required=False)
@click.pass_context
def config_cmd(ctx, key, value):
    """Show settings, or set KEY to VALUE and save."""
    config = _get_config(ctx)

    if key is None:
        table = Table(title="Settings")
        table.add_column("Key", style="cyan")
        table.add_column("Value")
        table.add_row("vault_path", config["vault_path"])
        try:
            settings = load_settings(config)
        except PackupError as e:
            _fail(ctx, str(e))
        table.add_row("max_depth", str(settings.max_depth))
        table.add_row("include_backlinks", str(settings.include_backlinks).lower())
        table.add_row("output_file", settings.output_file)
        table.add_row("exclude_paths", "\n".join(settings.exclude_paths) or "-")
        console.print(table)
        return

    if value is None:
        _fail(ctx, f"Missing value for {key}")
    try:
        config[key] = parse_setting(key, value)
        load_settings(config)
    except PackupError as e:
        _fail(ctx, str(e))

    target = ctx.obj.get("config_path") or config.get("config_file") or DEFAULT_CONFIG_FILE
    path = save_config(config, target)
    console.print(f"[green]✓ Saved {key} to {path}[/]")


if __name__ == "__main__":
    cli()
