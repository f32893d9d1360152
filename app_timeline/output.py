"""Rich terminal output for the application timeline."""

from __future__ import annotations

from datetime import datetime, timezone

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from app_timeline.aggregator import color_for_pressure
from app_timeline.events import humanize_age, parse_timestamp
from app_timeline.models import (
    ApplicationSummary,
    Event,
    EventQueryResult,
    SortOrder,
)


def render_timeline(
    summary: ApplicationSummary,
    result: EventQueryResult,
    console: Console,
    max_events: int = 0,
    message_width: int = 80,
    now: datetime | None = None,
) -> None:
    """Render the metric scorecard followed by the event timeline."""
    console.print()
    render_summary(summary, console)
    console.print()
    _render_query_bar(result, console)
    _render_events(result, console, max_events, message_width, now)


def render_summary(summary: ApplicationSummary, console: Console) -> None:
    """Render the metric scorecard."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("metric", style="bold")
    table.add_column("value", justify="right")

    table.add_row("TOTAL RESOURCES", str(summary.total_resources))
    table.add_row("TOTAL PODS", str(summary.tree_stats.pods))

    sync_style = "bold yellow" if summary.resource_stats.out_of_sync > 0 else "green"
    table.add_row(
        Text("OUT OF SYNC", style=sync_style),
        Text(str(summary.resource_stats.out_of_sync), style=sync_style),
    )
    table.add_row("NODES", str(summary.hosts))
    table.add_row("", "")
    table.add_row("MEMORY PRESSURE", _pressure_text(summary.usage.memory))
    table.add_row("CPU PRESSURE", _pressure_text(summary.usage.cpu))

    console.print(Panel(table, title="[bold]Application[/bold]", border_style="dim"))


def _pressure_text(percent: float | None) -> Text:
    if percent is None:
        return Text("n/a", style="dim")
    level = color_for_pressure(percent)
    return Text(f"{percent:g} %", style=level.style)


def _render_query_bar(result: EventQueryResult, console: Console) -> None:
    query = result.query
    sort_label = "NEW" if query.sort_order == SortOrder.NEW else "OLD"
    bar = Text()
    bar.append("SORT BY: ", style="bold")
    bar.append(sort_label, style="cyan")
    bar.append("  |  GROUP INTERVAL: ", style="bold")
    bar.append(query.group_by.label, style="cyan")
    bar.append("  |  WARNINGS ONLY: ", style="bold")
    bar.append("on" if query.warnings_only else "off", style="yellow" if query.warnings_only else "dim")
    bar.append(f"  |  {len(result)}/{result.total} events", style="dim")
    console.print(bar)


def _render_events(
    result: EventQueryResult,
    console: Console,
    max_events: int,
    message_width: int,
    now: datetime | None,
) -> None:
    if result.is_empty:
        console.print(Panel(Text("No events!", style="dim"), border_style="dim"))
        return

    now = now or datetime.now(timezone.utc)
    # Zero or negative limits show everything
    events = result.events[:max_events] if max_events > 0 else result.events

    table = Table(show_lines=True)
    table.add_column("Type", width=9)
    table.add_column("Reason", style="cyan", max_width=30)
    table.add_column("Message", max_width=message_width)
    table.add_column("Age", style="bold", max_width=20)
    table.add_column("First Seen", style="dim")

    for event in events:
        table.add_row(
            _type_text(event),
            event.reason,
            event.message,
            humanize_age(parse_timestamp(event.first_timestamp), now),
            event.first_timestamp,
        )

    if len(result.events) > len(events):
        table.add_row("", "", f"... {len(result.events) - len(events)} more events", "", "")

    console.print(table)


def _type_text(event: Event) -> Text:
    if event.is_warning:
        return Text(event.type, style="bold yellow")
    return Text(event.type, style="green")
