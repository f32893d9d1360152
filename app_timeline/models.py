"""Data models for the application timeline engine.

Core concepts:
- ApplicationTree: Snapshot of the resource tree and the hosts it runs on
- ResourceStatus: Sync status of one tracked resource
- Event: A lifecycle notice (Warning or Normal) for the application
- QueryState: Sort/filter/grouping selection passed into the event query
- ApplicationSummary: Aggregated metrics for display
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ResourceName(str, Enum):
    """Resource kinds tracked per host."""

    CPU = "cpu"
    MEMORY = "memory"
    STORAGE = "storage"


class PressureLevel(str, Enum):
    """Three-tier pressure classification for a usage percentage."""

    OK = "ok"
    WARN = "warn"
    CRITICAL = "critical"

    @property
    def color(self) -> str:
        return {
            PressureLevel.OK: "#1aab85",
            PressureLevel.WARN: "#d28f20",
            PressureLevel.CRITICAL: "#b80118",
        }[self]

    @property
    def style(self) -> str:
        return {
            PressureLevel.OK: "bold green",
            PressureLevel.WARN: "bold yellow",
            PressureLevel.CRITICAL: "bold red",
        }[self]


class SortOrder(str, Enum):
    """Event ordering by first timestamp."""

    NEW = "New"  # most recent first
    OLD = "Old"  # earliest first


class GroupBy(str, Enum):
    """Grouping interval for the timeline (reserved, no bucketing yet)."""

    TEN_SEC = "TenSec"
    ONE_MIN = "OneMin"
    FIVE_MIN = "FiveMin"
    TWENTY_MIN = "TwentyMin"

    @property
    def seconds(self) -> int:
        return {
            GroupBy.TEN_SEC: 10,
            GroupBy.ONE_MIN: 60,
            GroupBy.FIVE_MIN: 300,
            GroupBy.TWENTY_MIN: 1200,
        }[self]

    @property
    def label(self) -> str:
        return {
            GroupBy.TEN_SEC: "10 sec",
            GroupBy.ONE_MIN: "1 min",
            GroupBy.FIVE_MIN: "5 min",
            GroupBy.TWENTY_MIN: "20 min",
        }[self]


WARNING = "Warning"
NORMAL = "Normal"
OUT_OF_SYNC = "OutOfSync"
POD_KIND = "Pod"


# ---------------------------------------------------------------------------
# Resource tree
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ResourceNode:
    """A managed resource in the application tree."""

    kind: str
    name: str = ""
    namespace: str = ""
    resource_version: str = ""
    parent_refs: tuple[dict[str, Any], ...] = ()
    images: tuple[str, ...] = ()
    created_at: str = ""

    def __str__(self) -> str:
        if self.namespace:
            return f"{self.kind}/{self.namespace}/{self.name}"
        return f"{self.kind}/{self.name}"


@dataclass(frozen=True)
class HostResourceInfo:
    """Requested vs. available amount of one resource kind on a host."""

    resource_name: ResourceName | str
    requested_by_app: float = 0.0
    requested_by_neighbors: float = 0.0
    capacity: float = 0.0


@dataclass(frozen=True)
class HostSystemInfo:
    architecture: str = ""
    operating_system: str = ""
    kernel_version: str = ""


@dataclass(frozen=True)
class HostNode:
    """A cluster host the application runs on."""

    name: str = ""
    system_info: HostSystemInfo = field(default_factory=HostSystemInfo)
    resources_info: tuple[HostResourceInfo, ...] = ()


@dataclass(frozen=True)
class ApplicationTree:
    """Resource tree snapshot handed in by the host.

    `orphaned_nodes` are resources detached from their parent; they count
    towards the total but never towards pod counts.
    """

    nodes: tuple[ResourceNode, ...] = ()
    orphaned_nodes: tuple[ResourceNode, ...] = ()
    hosts: tuple[HostNode, ...] = ()


@dataclass(frozen=True)
class ResourceStatus:
    """Sync status of a single resource tracked by the application."""

    status: str = ""
    kind: str = ""
    name: str = ""
    namespace: str = ""
    group: str = ""
    version: str = ""
    health: str = ""


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InvolvedObject:
    kind: str = ""
    name: str = ""
    namespace: str = ""


@dataclass(frozen=True)
class Event:
    """A lifecycle event for the application. Never mutated by the engine."""

    type: str = NORMAL  # "Normal" or "Warning"
    reason: str = ""
    message: str = ""
    first_timestamp: str = ""
    last_timestamp: str = ""
    uid: str = ""  # render key, not guaranteed unique
    count: int = 1
    involved_object: InvolvedObject = field(default_factory=InvolvedObject)

    @property
    def is_warning(self) -> bool:
        return self.type == WARNING


@dataclass(frozen=True)
class QueryState:
    """Query selection for the event timeline, passed by value per call."""

    sort_order: SortOrder = SortOrder.NEW
    warnings_only: bool = False
    group_by: GroupBy = GroupBy.ONE_MIN


@dataclass(frozen=True)
class EventQueryResult:
    """Ordered, filtered events ready for display."""

    events: tuple[Event, ...]
    query: QueryState
    total: int = 0  # size of the collection before filtering

    @property
    def is_empty(self) -> bool:
        return not self.events

    def __len__(self) -> int:
        return len(self.events)


# ---------------------------------------------------------------------------
# Derived statistics
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ResourceStats:
    out_of_sync: int = 0


@dataclass(frozen=True)
class TreeStats:
    pods: int = 0


@dataclass(frozen=True)
class ResourceUsageStats:
    """Requested/capacity percentages. None means no capacity was reported."""

    cpu: float | None = None
    memory: float | None = None


@dataclass(frozen=True)
class ApplicationSummary:
    """All metrics shown above the timeline."""

    total_resources: int
    hosts: int
    resource_stats: ResourceStats
    tree_stats: TreeStats
    usage: ResourceUsageStats

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_resources": self.total_resources,
            "pods": self.tree_stats.pods,
            "out_of_sync": self.resource_stats.out_of_sync,
            "hosts": self.hosts,
            "memory_pressure": self.usage.memory,
            "cpu_pressure": self.usage.cpu,
        }
