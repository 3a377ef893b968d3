"""Loading store snapshots from exported YAML/JSON files.

A snapshot is either a single file holding every table, or a directory
with one file per table (``applications.json``, ``controls.yaml`` ...).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from ..models.records import Snapshot

# Snapshot field -> accepted table names, store names last
TABLE_NAMES: dict[str, tuple[str, ...]] = {
    "applications": ("applications",),
    "frameworks": ("frameworks",),
    "controls": ("controls",),
    "assessments": ("assessments", "compliance_assessment"),
    "mappings": ("mappings", "framework_mappings"),
}

SUFFIXES = (".yaml", ".yml", ".json")


class SnapshotError(ValueError):
    """Raised when a snapshot cannot be read or does not validate."""


def _read_file(path: Path):
    try:
        content = path.read_text(encoding="utf-8-sig")
        if path.suffix == ".json":
            return json.loads(content)
        return yaml.safe_load(content)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise SnapshotError(f"Cannot read {path.name}: {e}") from e


def _find_table(directory: Path, names: tuple[str, ...]) -> Optional[Path]:
    for name in names:
        for suffix in SUFFIXES:
            candidate = directory / f"{name}{suffix}"
            if candidate.exists():
                return candidate
    return None


def _normalize_tables(data: dict) -> dict:
    tables: dict = {}
    for field, names in TABLE_NAMES.items():
        for name in names:
            if data.get(name) is not None:
                tables[field] = data[name]
                break
    return tables


def load_snapshot(path: Path) -> Snapshot:
    """Load a snapshot file or directory.

    Raises:
        SnapshotError: the path is missing, unreadable or rows are invalid.
    """
    if not path.exists():
        raise SnapshotError(f"Snapshot not found: {path}")

    if path.is_dir():
        data: dict = {}
        for field, names in TABLE_NAMES.items():
            table_path = _find_table(path, names)
            if table_path is not None:
                data[field] = _read_file(table_path) or []
    else:
        content = _read_file(path) or {}
        if not isinstance(content, dict):
            raise SnapshotError(f"{path.name} must contain a mapping of tables")
        data = _normalize_tables(content)

    try:
        return Snapshot.model_validate(data)
    except ValidationError as e:
        raise SnapshotError(f"Invalid snapshot rows in {path.name}: {e}") from e

