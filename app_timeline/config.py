"""Configuration management for app-timeline."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from app_timeline.models import GroupBy, QueryState, SortOrder

CONFIG_FILENAME = ".app-timeline.yaml"
DEFAULT_PATHS = [
    Path.cwd() / CONFIG_FILENAME,
    Path.home() / CONFIG_FILENAME,
    Path.home() / ".config" / "app-timeline" / "config.yaml",
]

_TRUTHY = {"1", "true", "yes", "on"}


def parse_bool(value: Any) -> bool:
    """YAML booleans as-is; strings such as "false" or "yes" by their text."""
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return bool(value)


def parse_sort_order(value: str) -> SortOrder:
    """Accept 'new'/'old' in any case."""
    for order in SortOrder:
        if order.value.lower() == str(value).strip().lower():
            return order
    raise ValueError(f"unknown sort order: {value!r}")


def parse_group_by(value: str) -> GroupBy:
    """Accept the enum value ('OneMin') or its label ('1 min', '1min')."""
    needle = str(value).strip().lower().replace(" ", "")
    for group in GroupBy:
        if needle in (group.value.lower(), group.label.replace(" ", "")):
            return group
    raise ValueError(f"unknown group interval: {value!r}")


@dataclass
class Config:
    """Application configuration."""

    # Default query selection
    sort_order: SortOrder = SortOrder.NEW
    warnings_only: bool = False
    group_by: GroupBy = GroupBy.ONE_MIN

    # Output
    max_events: int = 0  # 0 = show all
    message_width: int = 80

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """Create config from a dictionary (e.g., parsed YAML)."""
        return cls(
            sort_order=parse_sort_order(data.get("sort_order", SortOrder.NEW.value)),
            warnings_only=parse_bool(data.get("warnings_only", False)),
            group_by=parse_group_by(data.get("group_by", GroupBy.ONE_MIN.value)),
            max_events=int(data.get("max_events", 0)),
            message_width=int(data.get("message_width", 80)),
        )

    @classmethod
    def load(cls, path: str | None = None) -> Config:
        """Load config from file, with env var overrides."""
        config_data: dict[str, Any] = {}

        # Find config file
        if path:
            config_path = Path(path)
        else:
            config_path = None
            for p in DEFAULT_PATHS:
                if p.exists():
                    config_path = p
                    break

        if config_path and config_path.exists():
            with open(config_path) as f:
                config_data = yaml.safe_load(f) or {}
            if not isinstance(config_data, dict):
                raise ValueError(
                    f"{config_path}: expected a mapping at the top level, "
                    f"got {type(config_data).__name__}"
                )

        config = cls.from_dict(config_data)

        # Environment variable overrides
        if env_sort := os.environ.get("APP_TIMELINE_SORT"):
            config.sort_order = parse_sort_order(env_sort)

        if env_warn := os.environ.get("APP_TIMELINE_WARNINGS_ONLY"):
            config.warnings_only = parse_bool(env_warn)

        if env_group := os.environ.get("APP_TIMELINE_GROUP_BY"):
            config.group_by = parse_group_by(env_group)

        return config

    def query(self) -> QueryState:
        return QueryState(
            sort_order=self.sort_order,
            warnings_only=self.warnings_only,
            group_by=self.group_by,
        )
