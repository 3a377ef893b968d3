"""Cross-framework mapping resolution.

A mapping row links two controls. Either side may belong to the master
framework, so every lookup checks both directions.
"""

from __future__ import annotations

from typing import Iterable, Optional

from ..core.aggregator import framework_controls
from ..core.domains import domain_of, group_by_domain
from ..models.mapping import ComparisonRow, DomainComparison, UnmappedControls
from ..models.records import Control, Framework, FrameworkMapping

# Store column names accepted as sort keys
SORT_KEY_ALIASES = {
    "ID": "code",
    "Domain": "domain",
    "Sub-Domain": "sub_domain",
    "Controls": "description",
}


def resolve_sort_key(sort_key: str) -> str:
    field = SORT_KEY_ALIASES.get(sort_key, sort_key)
    if field not in Control.model_fields:
        raise ValueError(f"Unknown control sort key: {sort_key}")
    return field


def sort_controls(controls: list[Control], sort_key: str = "ID", descending: bool = False) -> list[Control]:
    field = resolve_sort_key(sort_key)
    return sorted(controls, key=lambda c: getattr(c, field), reverse=descending)


def _other_side(mapping: FrameworkMapping, control_id: str) -> Optional[str]:
    if mapping.source_control_id == control_id:
        return mapping.target_control_id
    if mapping.target_control_id == control_id:
        return mapping.source_control_id
    return None


def _mapped_controls(
    master_control: Control,
    controls_by_id: dict[str, Control],
    mappings: Iterable[FrameworkMapping],
    other_framework_ids: Optional[set[str]],
) -> dict[str, list[Control]]:
    mapped: dict[str, list[Control]] = {}
    for mapping in mappings:
        other_id = _other_side(mapping, master_control.id)
        if other_id is None:
            continue
        other = controls_by_id.get(other_id)
        if other is None or other.framework_id == master_control.framework_id:
            continue
        if other_framework_ids is not None and other.framework_id not in other_framework_ids:
            continue
        group = mapped.setdefault(other.framework_id, [])
        if all(c.id != other.id for c in group):
            group.append(other)
    return mapped


def mapped_controls_for(
    master_control: Control,
    controls: Iterable[Control],
    mappings: Iterable[FrameworkMapping],
    other_framework_ids: Optional[Iterable[str]] = None,
) -> dict[str, list[Control]]:
    """Controls of other frameworks linked to a master control, by framework id.

    Controls that are unknown, or that belong to the master control's own
    framework, are skipped. Pass ``other_framework_ids`` to only report
    those frameworks.
    """
    controls_by_id = {c.id: c for c in controls}
    wanted = set(other_framework_ids) if other_framework_ids is not None else None
    return _mapped_controls(master_control, controls_by_id, mappings, wanted)


def compare_frameworks(
    master: Framework,
    others: list[Framework],
    controls: list[Control],
    mappings: list[FrameworkMapping],
    sort_key: str = "ID",
    descending: bool = False,
) -> list[DomainComparison]:
    """Build the master-vs-others comparison table, one entry per master domain."""
    field = resolve_sort_key(sort_key)
    controls_by_id = {c.id: c for c in controls}
    other_ids = {f.id for f in others}

    comparison: list[DomainComparison] = []
    for domain, domain_controls in group_by_domain(framework_controls(master.id, controls)).items():
        rows = [
            ComparisonRow(
                master_control=control,
                mapped_controls=_mapped_controls(control, controls_by_id, mappings, other_ids),
            )
            for control in domain_controls
        ]
        rows.sort(key=lambda r: getattr(r.master_control, field), reverse=descending)
        comparison.append(DomainComparison(domain=domain, rows=rows))

    return comparison


def mapped_control_ids(
    master_framework_id: str,
    controls: Iterable[Control],
    mappings: Iterable[FrameworkMapping],
) -> set[str]:
    """Ids of every control sitting opposite a master control in some mapping."""
    master_ids = {c.id for c in framework_controls(master_framework_id, controls)}
    mapped: set[str] = set()
    for mapping in mappings:
        if mapping.source_control_id in master_ids:
            mapped.add(mapping.target_control_id)
        if mapping.target_control_id in master_ids:
            mapped.add(mapping.source_control_id)
    return mapped


def unmapped_controls(
    master: Framework,
    others: list[Framework],
    controls: list[Control],
    mappings: list[FrameworkMapping],
    sort_key: str = "ID",
    descending: bool = False,
) -> list[UnmappedControls]:
    """Controls of each other framework that map to nothing in the master.

    Frameworks where every control is mapped are left out.
    """
    resolve_sort_key(sort_key)
    mapped = mapped_control_ids(master.id, controls, mappings)

    result: list[UnmappedControls] = []
    for framework in others:
        if framework.id == master.id:
            continue
        unmapped = [c for c in framework_controls(framework.id, controls) if c.id not in mapped]
        if not unmapped:
            continue

        by_domain: dict[str, list[Control]] = {}
        for control in unmapped:
            by_domain.setdefault(domain_of(control), []).append(control)

        result.append(UnmappedControls(
            framework=framework,
            by_domain={
                domain: sort_controls(group, sort_key, descending)
                for domain, group in by_domain.items()
            },
            total_unmapped=len(unmapped),
        ))

    return result
