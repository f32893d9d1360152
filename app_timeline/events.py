"""Event query engine.

Turns the unordered event collection into the sequence shown on the
timeline: optionally keep only warnings, then order by first timestamp.
The result is recomputed from scratch for every query; nothing is cached.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from datetime import datetime, timezone

from app_timeline.models import (
    WARNING,
    Event,
    EventQueryResult,
    QueryState,
    SortOrder,
)

logger = logging.getLogger(__name__)

# Unparsable timestamps compare as the epoch
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# fromisoformat on 3.10 only takes 3 or 6 fractional digits
_FRACTION = re.compile(r"\.(\d+)")


def parse_timestamp(value: str | datetime | None) -> datetime | None:
    """Parse an ISO-8601 timestamp into an aware datetime, or None."""
    if isinstance(value, datetime):
        ts = value
    elif not isinstance(value, str) or not value:
        return None
    else:
        try:
            ts = datetime.fromisoformat(_normalize_iso(value))
        except ValueError:
            return None

    # Ensure timezone-aware
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def _normalize_iso(value: str) -> str:
    value = value.strip().replace("Z", "+00:00")
    return _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), value, count=1)


def event_time(event: Event) -> datetime:
    """Sort key for an event: its parsed first timestamp, or the epoch."""
    ts = parse_timestamp(event.first_timestamp)
    if ts is None:
        logger.warning(
            "Event %s (%s) has unparsable firstTimestamp %r, ordering it as epoch",
            event.uid or "<no uid>",
            event.reason,
            event.first_timestamp,
        )
        return EPOCH
    return ts


def filter_events(events: Iterable[Event] | None, warnings_only: bool = False) -> list[Event]:
    """Keep warnings only when asked, otherwise everything."""
    if warnings_only:
        return [e for e in events or () if e.type == WARNING]
    return list(events or ())


def sort_events(events: Iterable[Event] | None, sort_order: SortOrder = SortOrder.NEW) -> list[Event]:
    """Order events by first timestamp.

    Ties keep their input order in both directions.
    """
    keyed = [(event_time(e), e) for e in events or ()]
    keyed.sort(key=lambda pair: pair[0], reverse=sort_order == SortOrder.NEW)
    return [e for _, e in keyed]


def query_events(
    events: Iterable[Event] | None, query: QueryState | None = None
) -> EventQueryResult:
    """Filter then sort the event collection for display.

    `query.group_by` is carried through untouched; events are not bucketed.
    """
    query = query or QueryState()
    collection = list(events or ())
    selected = sort_events(
        filter_events(collection, query.warnings_only), query.sort_order
    )
    logger.debug(
        "Event query %s/%s: %d of %d events selected",
        query.sort_order.value,
        "warnings" if query.warnings_only else "all",
        len(selected),
        len(collection),
    )
    return EventQueryResult(events=tuple(selected), query=query, total=len(collection))


def humanize_age(ts: datetime | None, now: datetime | None = None) -> str:
    """Relative age of a timestamp, e.g. '5 minutes ago'."""
    if ts is None:
        return "unknown"
    now = now or datetime.now(timezone.utc)
    seconds = (now - ts).total_seconds()
    suffix = "ago" if seconds >= 0 else "from now"
    return f"{_age_phrase(abs(seconds))} {suffix}"


def _age_phrase(seconds: float) -> str:
    # Each unit hands over to the next before it reaches a full count of it
    minutes = seconds / 60
    hours = minutes / 60
    days = hours / 24
    if seconds < 45:
        return "a few seconds"
    if seconds < 90:
        return "a minute"
    if minutes < 45:
        return f"{round(minutes)} minutes"
    if minutes < 90:
        return "an hour"
    if hours < 22:
        return f"{round(hours)} hours"
    if hours < 36:
        return "a day"
    if days < 26:
        return f"{round(days)} days"
    if days < 45:
        return "a month"
    if days < 320:
        return f"{round(days / 30)} months"
    if days < 548:
        return "a year"
    return f"{round(days / 365)} years"
