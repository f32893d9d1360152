"""Shared fixtures and helpers for app-timeline tests.

Factories build both engine models and the raw camelCase mappings the host
hands to the loader, so tests can exercise either side of the boundary.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from app_timeline.models import (
    ApplicationTree,
    Event,
    HostNode,
    HostResourceInfo,
    ResourceName,
    ResourceNode,
    ResourceStatus,
)


# ---------------------------------------------------------------------------
# Model factories
# ---------------------------------------------------------------------------


def make_node(kind: str = "Pod", name: str = "", namespace: str = "default") -> ResourceNode:
    return ResourceNode(kind=kind, name=name or kind.lower(), namespace=namespace)


def make_host(
    name: str = "host-1",
    cpu: tuple[float, float] | None = None,
    memory: tuple[float, float] | None = None,
    storage: tuple[float, float] | None = None,
) -> HostNode:
    """Host with (requested_by_app, capacity) pairs per resource kind."""
    infos = []
    for rname, pair in (
        (ResourceName.CPU, cpu),
        (ResourceName.MEMORY, memory),
        (ResourceName.STORAGE, storage),
    ):
        if pair is None:
            continue
        requested, capacity = pair
        infos.append(
            HostResourceInfo(
                resource_name=rname,
                requested_by_app=requested,
                requested_by_neighbors=1000.0,
                capacity=capacity,
            )
        )
    return HostNode(name=name, resources_info=tuple(infos))


def make_tree(
    nodes: list[ResourceNode] | None = None,
    orphaned: list[ResourceNode] | None = None,
    hosts: list[HostNode] | None = None,
) -> ApplicationTree:
    return ApplicationTree(
        nodes=tuple(nodes or ()),
        orphaned_nodes=tuple(orphaned or ()),
        hosts=tuple(hosts or ()),
    )


def make_status(status: str = "Synced", kind: str = "Deployment", name: str = "app") -> ResourceStatus:
    return ResourceStatus(status=status, kind=kind, name=name)


def make_event(
    event_type: str = "Normal",
    first_timestamp: str = "2024-01-01T00:00:00Z",
    reason: str = "Scheduled",
    message: str = "",
    uid: str = "",
) -> Event:
    return Event(
        type=event_type,
        reason=reason,
        message=message or f"{reason} at {first_timestamp}",
        first_timestamp=first_timestamp,
        uid=uid,
    )


# ---------------------------------------------------------------------------
# Raw (host-shaped) documents
# ---------------------------------------------------------------------------


def raw_tree() -> dict[str, Any]:
    return {
        "nodes": [
            {"kind": "Deployment", "name": "web", "namespace": "shop", "resourceVersion": "10"},
            {
                "kind": "ReplicaSet",
                "name": "web-5d4f",
                "namespace": "shop",
                "parentRefs": [{"kind": "Deployment", "name": "web"}],
            },
            {
                "kind": "Pod",
                "name": "web-5d4f-a",
                "namespace": "shop",
                "parentRefs": [{"kind": "ReplicaSet", "name": "web-5d4f"}],
                "images": ["shop/web:1.2"],
            },
            {
                "kind": "Pod",
                "name": "web-5d4f-b",
                "namespace": "shop",
                "parentRefs": [{"kind": "ReplicaSet", "name": "web-5d4f"}],
            },
        ],
        "orphanedNodes": [{"kind": "Pod", "name": "stray", "namespace": "shop"}],
        "hosts": [
            {
                "name": "node-a",
                "systemInfo": {
                    "architecture": "amd64",
                    "operatingSystem": "linux",
                    "kernelVersion": "6.1.0",
                },
                "resourcesInfo": [
                    {"resourceName": "cpu", "requestedByApp": 500, "requestedByNeighbors": 700, "capacity": 2000},
                    {"resourceName": "memory", "requestedByApp": 256, "requestedByNeighbors": 100, "capacity": 1024},
                    {"resourceName": "storage", "requestedByApp": 10, "requestedByNeighbors": 0, "capacity": 10},
                ],
            },
            {
                "name": "node-b",
                "resourcesInfo": [
                    {"resourceName": "cpu", "requestedByApp": 1500, "capacity": 2000},
                    {"resourceName": "memory", "requestedByApp": 768, "capacity": 1024},
                ],
            },
        ],
    }


def raw_application() -> dict[str, Any]:
    return {
        "metadata": {"name": "shop"},
        "status": {
            "resources": [
                {"kind": "Deployment", "name": "web", "status": "OutOfSync", "health": {"status": "Healthy"}},
                {"kind": "Service", "name": "web", "status": "Synced"},
                {"kind": "ConfigMap", "name": "web-config", "status": "OutOfSync"},
            ]
        },
    }


def raw_events() -> list[dict[str, Any]]:
    return [
        {
            "metadata": {"uid": "e1"},
            "involvedObject": {"kind": "Pod", "name": "web-5d4f-a", "namespace": "shop"},
            "type": "Warning",
            "reason": "BackOff",
            "message": "Back-off restarting failed container",
            "firstTimestamp": "2024-01-01T00:00:00Z",
            "lastTimestamp": "2024-01-01T00:05:00Z",
            "count": 4,
        },
        {
            "metadata": {"uid": "e2"},
            "type": "Normal",
            "reason": "Pulled",
            "message": "Successfully pulled image",
            "firstTimestamp": "2024-01-02T00:00:00Z",
        },
    ]


@pytest.fixture
def snapshot_files(tmp_path: Path) -> dict[str, Path]:
    """Tree, application and events written as JSON files."""
    paths = {
        "tree": tmp_path / "tree.json",
        "application": tmp_path / "app.json",
        "events": tmp_path / "events.json",
    }
    paths["tree"].write_text(json.dumps(raw_tree()))
    paths["application"].write_text(json.dumps(raw_application()))
    paths["events"].write_text(json.dumps(raw_events()))
    return paths


@pytest.fixture
def empty_tree() -> ApplicationTree:
    return ApplicationTree()
