"""Diffing of edited framework mappings against the stored set.

The store applies the change set; this module only computes it.
"""

from __future__ import annotations

import uuid

from ..models.mapping import MappingChangeSet
from ..models.records import FrameworkMapping


def _pair(mapping: FrameworkMapping) -> tuple[str, str]:
    return (mapping.source_control_id, mapping.target_control_id)


def _changed(edited: FrameworkMapping, existing: FrameworkMapping) -> bool:
    return (
        edited.mapping_score != existing.mapping_score
        or edited.status != existing.status
        or edited.explanation != existing.explanation
    )


def diff_mappings(
    edited: list[FrameworkMapping],
    existing: list[FrameworkMapping],
) -> MappingChangeSet:
    """Split an edited mapping list into inserts, updates and deletes.

    Mappings are identified by their (source, target) control pair. New
    mappings get a fresh id. An edit only counts as an update when it keeps
    the stored id and changes the score, status or explanation.
    """
    existing_pairs = {_pair(m) for m in existing}
    # A pair can be stored more than once; edits match on pair and id
    existing_by_key = {(_pair(m), m.id): m for m in existing}
    edited_pairs = {_pair(m) for m in edited}

    inserts: list[FrameworkMapping] = []
    updates: list[FrameworkMapping] = []
    for mapping in edited:
        if _pair(mapping) not in existing_pairs:
            inserts.append(mapping.model_copy(update={"id": str(uuid.uuid4())}))
            continue
        stored = existing_by_key.get((_pair(mapping), mapping.id))
        if stored is not None and _changed(mapping, stored):
            updates.append(mapping)

    deletes = [m for m in existing if _pair(m) not in edited_pairs]

    return MappingChangeSet(inserts=inserts, updates=updates, deletes=deletes)
