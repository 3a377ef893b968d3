"""Per-framework control aggregation.

Reduces the assessments of one application into a single compliance
percentage for one framework.
"""

from __future__ import annotations

from enum import Enum
from functools import reduce
from typing import Iterable, Optional

from ..models.records import ComplianceAssessment, Control, Framework
from ..models.scores import AssessmentBand, ControlAggregate
from .classifier import classify, classify_assessment, round_half_up


class AssessmentMatch(str, Enum):
    """How assessments are attributed to a framework."""

    CONTROL = "control"
    MAPPED_FROM = "mapped-from"


def framework_controls(framework_id: str, controls: Iterable[Control]) -> list[Control]:
    return [c for c in controls if c.framework_id == framework_id]


def _keep_highest(
    best: dict[str, ComplianceAssessment],
    assessment: ComplianceAssessment,
) -> dict[str, ComplianceAssessment]:
    current = best.get(assessment.control_id)
    # Strictly greater: the first assessment seen wins ties
    if current is None or assessment.score > current.score:
        best[assessment.control_id] = assessment
    return best


def select_best_assessments(
    assessments: Iterable[ComplianceAssessment],
) -> dict[str, ComplianceAssessment]:
    """Pick one assessment per control: the highest score, first seen on ties."""
    return reduce(_keep_highest, assessments, {})


def match_assessments(
    framework: Framework,
    controls: list[Control],
    assessments: Iterable[ComplianceAssessment],
    application_id: Optional[str] = None,
    match: AssessmentMatch = AssessmentMatch.CONTROL,
) -> list[ComplianceAssessment]:
    """Filter assessments down to those counting toward a framework."""
    match = AssessmentMatch(match)
    control_ids = {c.id for c in controls}

    matched: list[ComplianceAssessment] = []
    for assessment in assessments:
        if application_id is not None and assessment.application_id != application_id:
            continue
        if match is AssessmentMatch.MAPPED_FROM:
            if assessment.mapped_from != framework.id:
                continue
        elif assessment.control_id not in control_ids:
            continue
        matched.append(assessment)
    return matched


def aggregate_framework(
    framework: Framework,
    controls: Iterable[Control],
    assessments: Iterable[ComplianceAssessment],
    application_id: Optional[str] = None,
    match: AssessmentMatch = AssessmentMatch.CONTROL,
) -> ControlAggregate:
    """Compute the compliance percentage of a framework.

    Args:
        framework: Framework being scored.
        controls: Controls of any framework; only ``framework``'s are used.
        assessments: Assessments to consider. Pass ``application_id`` to
            restrict them to one application.
        match: Attribute assessments by control membership or by the
            framework they were mapped from.
    """
    fw_controls = framework_controls(framework.id, controls)
    total = len(fw_controls)

    matched = match_assessments(framework, fw_controls, assessments, application_id, match)
    best = select_best_assessments(matched)

    passing = 0
    partial = 0
    for assessment in best.values():
        band = classify_assessment(assessment.score, assessment.status)
        if band is AssessmentBand.PASS:
            passing += 1
        elif band is AssessmentBand.PARTIAL:
            partial += 1

    # Mapped-from attribution can select controls outside the framework
    passing = min(passing, total)
    partial = min(partial, total - passing)
    compliant = passing + partial
    percentage = round_half_up(compliant / total * 100) if total > 0 else 0

    return ControlAggregate(
        percentage=percentage,
        total_controls=total,
        passing_controls=passing,
        partial_controls=partial,
        status=classify(percentage),
    )
