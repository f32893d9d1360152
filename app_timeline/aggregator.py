"""Application metrics aggregator.

Reduces the resource tree and resource status snapshots into the summary
metrics shown above the timeline: out-of-sync count, pod count, total
resources, host count, and CPU/memory pressure across hosts.
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from collections.abc import Iterable

from app_timeline.models import (
    OUT_OF_SYNC,
    POD_KIND,
    ApplicationSummary,
    ApplicationTree,
    HostNode,
    PressureLevel,
    ResourceName,
    ResourceStats,
    ResourceStatus,
    ResourceUsageStats,
    TreeStats,
)

logger = logging.getLogger(__name__)

# Pressure thresholds (percent of capacity requested)
PRESSURE_WARN = 50
PRESSURE_CRIT = 75

TRACKED_RESOURCES = (ResourceName.CPU, ResourceName.MEMORY)


def compute_sync_stats(resources: Iterable[ResourceStatus] | None) -> ResourceStats:
    """Count resources whose live state differs from the desired state."""
    out_of_sync = sum(1 for r in resources or () if r.status == OUT_OF_SYNC)
    return ResourceStats(out_of_sync=out_of_sync)


def compute_tree_stats(tree: ApplicationTree | None) -> TreeStats:
    """Count pods in the tree. Orphaned nodes are not scanned."""
    if tree is None:
        return TreeStats()
    return TreeStats(pods=sum(1 for n in tree.nodes or () if n.kind == POD_KIND))


def count_resources(tree: ApplicationTree | None) -> int:
    if tree is None:
        return 0
    return len(tree.nodes or ()) + len(tree.orphaned_nodes or ())


def count_hosts(tree: ApplicationTree | None) -> int:
    if tree is None:
        return 0
    return len(tree.hosts or ())


def compute_resource_usage(hosts: Iterable[HostNode] | None) -> ResourceUsageStats:
    """Average CPU and memory pressure across hosts.

    Requested amounts and capacities are summed per resource kind over every
    host, then expressed as a percentage rounded to two decimals. Storage and
    unknown kinds are ignored. A kind with no reported capacity yields None
    rather than 0%.
    """
    requested: dict[str, float] = defaultdict(float)
    capacity: dict[str, float] = defaultdict(float)

    for host in hosts or ():
        for info in host.resources_info or ():
            if info.resource_name not in TRACKED_RESOURCES:
                continue
            key = ResourceName(info.resource_name)
            requested[key] += info.requested_by_app
            capacity[key] += info.capacity

    return ResourceUsageStats(
        cpu=_percent(requested[ResourceName.CPU], capacity[ResourceName.CPU], "cpu"),
        memory=_percent(
            requested[ResourceName.MEMORY], capacity[ResourceName.MEMORY], "memory"
        ),
    )


def _percent(requested: float, capacity: float, label: str) -> float | None:
    if capacity == 0:
        logger.debug("No %s capacity reported by any host, pressure undefined", label)
        return None
    scaled = requested / capacity * 10000
    if not math.isfinite(scaled):
        logger.debug(
            "Non-finite %s pressure (%s / %s), treating as undefined",
            label,
            requested,
            capacity,
        )
        return None
    # Half-up rounding to hundredths of a percent
    return math.floor(scaled + 0.5) / 100


def color_for_pressure(percent: float) -> PressureLevel:
    """Classify a pressure percentage. Total over all real inputs."""
    if percent < PRESSURE_WARN:
        return PressureLevel.OK
    if percent < PRESSURE_CRIT:
        return PressureLevel.WARN
    return PressureLevel.CRITICAL


def summarize(
    tree: ApplicationTree | None,
    resources: Iterable[ResourceStatus] | None = None,
) -> ApplicationSummary:
    """Compute every metric for the scorecard in one pass over the snapshots."""
    tree = tree or ApplicationTree()
    return ApplicationSummary(
        total_resources=count_resources(tree),
        hosts=count_hosts(tree),
        resource_stats=compute_sync_stats(resources),
        tree_stats=compute_tree_stats(tree),
        usage=compute_resource_usage(tree.hosts),
    )
