"""Per-domain compliance of applications against the master framework."""

from __future__ import annotations

from collections import defaultdict
from typing import Optional

from ..models.records import Application, ComplianceAssessment, Control, Framework
from ..models.scores import AssessmentBand, DomainCompliance
from .aggregator import framework_controls, select_best_assessments
from .classifier import classify_assessment

DOMAIN_COMPLIANCE_RATE = 0.8

# Bucket for controls without a domain
DEFAULT_DOMAIN = "Other"


def domain_of(control: Control) -> str:
    return control.domain or DEFAULT_DOMAIN


def find_master(frameworks: list[Framework]) -> Optional[Framework]:
    return next((f for f in frameworks if f.master), None)


def group_by_domain(controls: list[Control]) -> dict[str, list[Control]]:
    """Group controls by domain, domains in sorted order."""
    groups: dict[str, list[Control]] = defaultdict(list)
    for control in controls:
        groups[domain_of(control)].append(control)
    return {domain: groups[domain] for domain in sorted(groups)}


def domain_compliance_rate(
    domain_controls: list[Control],
    assessments: list[ComplianceAssessment],
    application_id: str,
) -> float:
    """Share of a domain's controls the application passes (0 with no controls)."""
    if not domain_controls:
        return 0.0
    control_ids = {c.id for c in domain_controls}
    relevant = [
        a for a in assessments
        if a.application_id == application_id and a.control_id in control_ids
    ]
    best = select_best_assessments(relevant)
    passed = sum(
        1 for a in best.values()
        if classify_assessment(a.score, a.status) is AssessmentBand.PASS
    )
    return passed / len(domain_controls)


def partition_domains(
    applications: list[Application],
    frameworks: list[Framework],
    controls: list[Control],
    assessments: list[ComplianceAssessment],
) -> list[DomainCompliance]:
    """Split applications into compliant/non-compliant for each master domain.

    Returns an empty list when no framework is flagged as master.
    """
    master = find_master(frameworks)
    if master is None:
        return []

    result: list[DomainCompliance] = []
    for domain, domain_controls in group_by_domain(framework_controls(master.id, controls)).items():
        entry = DomainCompliance(domain=domain, total_controls=len(domain_controls))
        for app in applications:
            rate = domain_compliance_rate(domain_controls, assessments, app.id)
            if rate >= DOMAIN_COMPLIANCE_RATE:
                entry.compliant_applications.append(app)
            else:
                entry.non_compliant_applications.append(app)
        result.append(entry)

    return result
