"""Snapshot loader.

Converts the host's JSON/YAML shapes (camelCase keys, as the application
controller emits them) into the engine's models. Absent collections are
normalized to empty here, once; wrongly-shaped input raises SnapshotError so
the aggregation and query code never sees it.
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path
from typing import Any

import yaml

from app_timeline.models import (
    NORMAL,
    ApplicationTree,
    Event,
    HostNode,
    HostResourceInfo,
    HostSystemInfo,
    InvolvedObject,
    ResourceName,
    ResourceNode,
    ResourceStatus,
)

logger = logging.getLogger(__name__)


class SnapshotError(ValueError):
    """Raised when a snapshot does not have the expected shape."""


# ---------------------------------------------------------------------------
# Generic helpers
# ---------------------------------------------------------------------------


def _as_list(value: Any, what: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise SnapshotError(f"{what}: expected a list, got {type(value).__name__}")
    return value


def _as_mapping(value: Any, what: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise SnapshotError(f"{what}: expected a mapping, got {type(value).__name__}")
    return value


def _as_float(value: Any, what: str) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise SnapshotError(f"{what}: expected a number, got bool")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise SnapshotError(f"{what}: expected a number, got {value!r}") from exc
    if not math.isfinite(number):
        raise SnapshotError(f"{what}: expected a finite number, got {value!r}")
    return number


def _as_str(value: Any) -> str:
    return "" if value is None else str(value)


def _as_timestamp(value: Any) -> str:
    # Unquoted YAML timestamps arrive as datetime objects
    if isinstance(value, datetime):
        return value.isoformat()
    return _as_str(value)


# ---------------------------------------------------------------------------
# Resource tree
# ---------------------------------------------------------------------------


def parse_resource_node(data: Any, where: str = "node") -> ResourceNode:
    data = _as_mapping(data, where)
    return ResourceNode(
        kind=_as_str(data.get("kind")),
        name=_as_str(data.get("name")),
        namespace=_as_str(data.get("namespace")),
        resource_version=_as_str(data.get("resourceVersion")),
        parent_refs=tuple(_as_list(data.get("parentRefs"), f"{where}.parentRefs")),
        images=tuple(_as_str(i) for i in _as_list(data.get("images"), f"{where}.images")),
        created_at=_as_str(data.get("createdAt")),
    )


def parse_host_resource_info(data: Any, where: str = "resourcesInfo") -> HostResourceInfo:
    data = _as_mapping(data, where)
    raw_name = _as_str(data.get("resourceName"))
    try:
        name: ResourceName | str = ResourceName(raw_name)
    except ValueError:
        logger.debug("%s: untracked resource %r", where, raw_name)
        name = raw_name
    return HostResourceInfo(
        resource_name=name,
        requested_by_app=_as_float(data.get("requestedByApp"), f"{where}.requestedByApp"),
        requested_by_neighbors=_as_float(
            data.get("requestedByNeighbors"), f"{where}.requestedByNeighbors"
        ),
        capacity=_as_float(data.get("capacity"), f"{where}.capacity"),
    )


def parse_host(data: Any, where: str = "host") -> HostNode:
    data = _as_mapping(data, where)
    info = _as_mapping(data.get("systemInfo"), f"{where}.systemInfo")
    resources = _as_list(data.get("resourcesInfo"), f"{where}.resourcesInfo")
    return HostNode(
        name=_as_str(data.get("name")),
        system_info=HostSystemInfo(
            architecture=_as_str(info.get("architecture")),
            operating_system=_as_str(info.get("operatingSystem")),
            kernel_version=_as_str(info.get("kernelVersion")),
        ),
        resources_info=tuple(
            parse_host_resource_info(r, f"{where}.resourcesInfo[{i}]")
            for i, r in enumerate(resources)
        ),
    )


def parse_tree(data: Any) -> ApplicationTree:
    """Build an ApplicationTree; missing nodes/orphanedNodes/hosts become empty."""
    data = _as_mapping(data, "tree")
    return ApplicationTree(
        nodes=tuple(
            parse_resource_node(n, f"nodes[{i}]")
            for i, n in enumerate(_as_list(data.get("nodes"), "tree.nodes"))
        ),
        orphaned_nodes=tuple(
            parse_resource_node(n, f"orphanedNodes[{i}]")
            for i, n in enumerate(_as_list(data.get("orphanedNodes"), "tree.orphanedNodes"))
        ),
        hosts=tuple(
            parse_host(h, f"hosts[{i}]")
            for i, h in enumerate(_as_list(data.get("hosts"), "tree.hosts"))
        ),
    )


# ---------------------------------------------------------------------------
# Application status
# ---------------------------------------------------------------------------


def parse_resource_status(data: Any, where: str = "resource") -> ResourceStatus:
    data = _as_mapping(data, where)
    health = data.get("health")
    if isinstance(health, Mapping):
        health = health.get("status")
    return ResourceStatus(
        status=_as_str(data.get("status")),
        kind=_as_str(data.get("kind")),
        name=_as_str(data.get("name")),
        namespace=_as_str(data.get("namespace")),
        group=_as_str(data.get("group")),
        version=_as_str(data.get("version")),
        health=_as_str(health),
    )


def parse_application_resources(data: Any) -> list[ResourceStatus]:
    """Extract `status.resources` from an application object.

    A bare list of resource statuses is accepted too.
    """
    if isinstance(data, list):
        resources = data
    else:
        status = _as_mapping(_as_mapping(data, "application").get("status"), "application.status")
        resources = _as_list(status.get("resources"), "application.status.resources")
    return [
        parse_resource_status(r, f"status.resources[{i}]") for i, r in enumerate(resources)
    ]


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


def parse_event(data: Any, where: str = "event") -> Event:
    data = _as_mapping(data, where)
    meta = _as_mapping(data.get("metadata"), f"{where}.metadata")
    obj = _as_mapping(data.get("involvedObject"), f"{where}.involvedObject")
    count = data.get("count")
    return Event(
        type=_as_str(data.get("type")) or NORMAL,
        reason=_as_str(data.get("reason")),
        message=_as_str(data.get("message")),
        first_timestamp=_as_timestamp(data.get("firstTimestamp")),
        last_timestamp=_as_timestamp(data.get("lastTimestamp")),
        uid=_as_str(meta.get("uid")),
        count=int(_as_float(count, f"{where}.count")) if count is not None else 1,
        involved_object=InvolvedObject(
            kind=_as_str(obj.get("kind")),
            name=_as_str(obj.get("name")),
            namespace=_as_str(obj.get("namespace")),
        ),
    )


def parse_events(data: Any) -> list[Event]:
    """Parse a list of events, or a Kubernetes `List` object with `items`."""
    if isinstance(data, Mapping):
        data = data.get("items")
    return [parse_event(e, f"events[{i}]") for i, e in enumerate(_as_list(data, "events"))]


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


def read_document(path: str | Path) -> Any:
    """Read a JSON or YAML document from disk.

    `.json` files go through the json parser, which accepts tab indentation
    that YAML rejects; anything else is parsed as YAML.
    """
    p = Path(path)
    try:
        with open(p) as f:
            if p.suffix.lower() == ".json":
                return json.load(f)
            return yaml.safe_load(f)
    except OSError as exc:
        raise SnapshotError(f"cannot read {p}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise SnapshotError(f"{p} is not valid JSON: {exc}") from exc
    except yaml.YAMLError as exc:
        raise SnapshotError(f"{p} is not valid YAML: {exc}") from exc


def load_tree(path: str | Path) -> ApplicationTree:
    return parse_tree(read_document(path))


def load_application_resources(path: str | Path) -> list[ResourceStatus]:
    return parse_application_resources(read_document(path))


def load_events(path: str | Path) -> list[Event]:
    return parse_events(read_document(path))
