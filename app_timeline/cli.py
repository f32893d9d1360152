"""CLI entry point for app-timeline.

Usage:
    app-timeline show --tree tree.json [--application app.json] [--events events.json]
    app-timeline summary --tree tree.json [--application app.json] [--json]
    app-timeline init
"""

from __future__ import annotations

import json
import logging
import sys

import click
import yaml
from rich.console import Console

from app_timeline import __version__
from app_timeline.aggregator import summarize
from app_timeline.config import Config, parse_group_by, parse_sort_order
from app_timeline.events import query_events
from app_timeline.loader import (
    SnapshotError,
    load_application_resources,
    load_events,
    load_tree,
)
from app_timeline.models import GroupBy
from app_timeline.output import render_summary, render_timeline

console = Console()


def _setup_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)


def _fail(what: str, exc: Exception) -> None:
    console.print(f"[bold red]Invalid {what}:[/bold red] {exc}")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="app-timeline")
def main():
    """Operational timeline for a deployed application.

    Reads resource tree, application status and event snapshots, aggregates
    sync and capacity metrics, and shows a filtered, sorted event timeline.
    """
    pass


@main.command()
@click.option("--tree", "-t", "tree_path", required=True, help="Resource tree snapshot (JSON/YAML)")
@click.option("--application", "-a", "app_path", default="", help="Application object with status.resources")
@click.option("--events", "-e", "events_path", default="", help="Event list (JSON/YAML)")
@click.option(
    "--sort",
    "-s",
    "sort_order",
    type=click.Choice(["new", "old"], case_sensitive=False),
    default=None,
    help="Most recent first (new) or earliest first (old)",
)
@click.option("--warnings-only", "-w", is_flag=True, help="Show only Warning events")
@click.option(
    "--group-by",
    "-g",
    type=click.Choice([g.value for g in GroupBy], case_sensitive=False),
    default=None,
    help="Group interval (reserved)",
)
@click.option(
    "--max-events",
    type=click.IntRange(min=0),
    default=None,
    help="Limit the number of events shown (0 = all)",
)
@click.option("--config", "config_path", default="", help="Path to config file")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def show(
    tree_path: str,
    app_path: str,
    events_path: str,
    sort_order: str | None,
    warnings_only: bool,
    group_by: str | None,
    max_events: int | None,
    config_path: str,
    verbose: bool,
):
    """Show application metrics and the event timeline."""
    _setup_logging(verbose)

    # Load config (file -> env -> CLI flags)
    try:
        cfg = Config.load(config_path or None)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        _fail("config", exc)

    # CLI flag overrides
    if sort_order:
        cfg.sort_order = parse_sort_order(sort_order)
    if warnings_only:
        cfg.warnings_only = True
    if group_by:
        cfg.group_by = parse_group_by(group_by)
    if max_events is not None:
        cfg.max_events = max_events

    try:
        tree = load_tree(tree_path)
        resources = load_application_resources(app_path) if app_path else []
        events = load_events(events_path) if events_path else []
    except SnapshotError as exc:
        _fail("snapshot", exc)

    stats = summarize(tree, resources)
    result = query_events(events, cfg.query())

    render_timeline(
        stats,
        result,
        console,
        max_events=cfg.max_events,
        message_width=cfg.message_width,
    )


@main.command()
@click.option("--tree", "-t", "tree_path", required=True, help="Resource tree snapshot (JSON/YAML)")
@click.option("--application", "-a", "app_path", default="", help="Application object with status.resources")
@click.option("--json", "as_json", is_flag=True, help="Print metrics as JSON")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def summary(tree_path: str, app_path: str, as_json: bool, verbose: bool):
    """Print aggregated metrics only."""
    _setup_logging(verbose)

    try:
        tree = load_tree(tree_path)
        resources = load_application_resources(app_path) if app_path else []
    except SnapshotError as exc:
        _fail("snapshot", exc)

    stats = summarize(tree, resources)
    if as_json:
        click.echo(json.dumps(stats.to_dict(), indent=2))
        return
    render_summary(stats, console)


@main.command()
def init():
    """Generate a sample configuration file."""
    sample = """\
# app-timeline configuration
# Place this file at .app-timeline.yaml in your project or home directory.

# Default event query
sort_order: New  # New (most recent first) or Old
warnings_only: false
group_by: OneMin  # TenSec, OneMin, FiveMin, TwentyMin

# Output
max_events: 0  # 0 = show all
message_width: 80
"""
    from pathlib import Path

    out_path = Path.cwd() / ".app-timeline.yaml"
    if out_path.exists():
        console.print(f"[yellow]Config file already exists:[/yellow] {out_path}")
        return

    out_path.write_text(sample)
    console.print(f"[green]Created config file:[/green] {out_path}")
    console.print("[dim]Edit it to change the default sort order and filters.[/dim]")


if __name__ == "__main__":
    main()
