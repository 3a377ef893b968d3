"""3-layer configuration system for AutoGRC.

Loads and merges configuration from:
1. Default settings (built-in)
2. Project config (.autogrc/config.yaml)
3. CLI parameters (override)
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Optional

import yaml

CONFIG_DIR = ".autogrc"

DEFAULT_CONFIG: dict = {
    "project": {
        "name": "",
    },
    "data": {
        "snapshot": "data",
        "match": "control",
    },
    "mapping": {
        "sort_key": "ID",
        "descending": False,
    },
    "output": {
        "format": "markdown",
        "reports_dir": "reports",
    },
    "ci": {
        "exit_codes": {"compliant": 0, "warning": 2, "critical": 1},
        "fail_on": ["critical"],
    },
    "ssllabs": {
        "endpoint": "https://api.ssllabs.com/api/v3",
        "poll_interval_seconds": 10,
        "max_attempts": 30,
        "timeout_seconds": 30,
    },
}


def deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dicts. Arrays are replaced, not merged."""
    result = {}
    for key in base:
        result[key] = base[key]
    for key, value in override.items():
        base_value = result.get(key)
        if isinstance(base_value, dict) and isinstance(value, dict):
            result[key] = deep_merge(base_value, value)
        else:
            result[key] = value
    return result


def load_project_config(project_path: Path) -> dict:
    """Load project configuration from .autogrc/config.yaml."""
    config_path = project_path / CONFIG_DIR / "config.yaml"
    if not config_path.exists():
        return {}
    try:
        content = config_path.read_text(encoding="utf-8-sig")  # utf-8-sig strips BOM
        return yaml.safe_load(content) or {}
    except (OSError, yaml.YAMLError):
        return {}


def get_effective_config(
    project_path: Path,
    cli_overrides: Optional[dict] = None,
) -> dict:
    """Get the fully resolved configuration for a project."""
    config = copy.deepcopy(DEFAULT_CONFIG)

    project_config = load_project_config(project_path)
    if project_config:
        config = deep_merge(config, project_config)

    if cli_overrides:
        config = deep_merge(config, cli_overrides)

    config["_project_path"] = str(project_path)

    return config


def resolve_snapshot_path(config: dict) -> Path:
    """Snapshot location, relative paths taken from the project root."""
    snapshot = Path(config.get("data", {}).get("snapshot", "data"))
    if snapshot.is_absolute():
        return snapshot
    return Path(config.get("_project_path", ".")) / snapshot


def resolve_reports_dir(config: dict) -> Path:
    reports = config.get("output", {}).get("reports_dir", "reports")
    return Path(config.get("_project_path", ".")) / CONFIG_DIR / reports
