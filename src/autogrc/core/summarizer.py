"""Application and dashboard level compliance summaries."""

from __future__ import annotations

from typing import Iterable

from ..models.records import Application, ComplianceAssessment, Control, Framework, Snapshot
from ..models.scores import (
    ApplicationKPIs,
    ApplicationScorecard,
    ComplianceStatus,
    ControlAggregate,
    DashboardSummary,
    FrameworkOverview,
    FrameworkScore,
)
from .aggregator import AssessmentMatch, aggregate_framework, framework_controls
from .classifier import classify, round_half_up


def _framework_score(framework: Framework, aggregate: ControlAggregate) -> FrameworkScore:
    return FrameworkScore(
        framework_id=framework.id,
        framework_name=framework.name,
        score=aggregate.percentage,
        passed_controls=aggregate.passing_controls,
        partial_controls=aggregate.partial_controls,
        total_controls=aggregate.total_controls,
        status=aggregate.status,
    )


def score_application(
    application: Application,
    frameworks: list[Framework],
    controls: list[Control],
    assessments: list[ComplianceAssessment],
    match: AssessmentMatch = AssessmentMatch.CONTROL,
) -> ApplicationScorecard:
    """Score one application against every framework.

    The overall score is the plain mean of the framework scores; frameworks
    with many controls do not weigh more.
    """
    framework_scores: list[FrameworkScore] = []
    for framework in frameworks:
        aggregate = aggregate_framework(
            framework, controls, assessments, application_id=application.id, match=match
        )
        framework_scores.append(_framework_score(framework, aggregate))

    if framework_scores:
        overall = round_half_up(sum(fs.score for fs in framework_scores) / len(framework_scores))
    else:
        overall = 0

    return ApplicationScorecard(
        application=application,
        framework_scores=framework_scores,
        overall_score=overall,
        status=classify(overall),
    )


def score_applications(
    applications: list[Application],
    frameworks: list[Framework],
    controls: list[Control],
    assessments: list[ComplianceAssessment],
    match: AssessmentMatch = AssessmentMatch.CONTROL,
) -> list[ApplicationScorecard]:
    return [
        score_application(app, frameworks, controls, assessments, match)
        for app in applications
    ]


def framework_compliance(
    frameworks: list[Framework],
    controls: list[Control],
    assessments: list[ComplianceAssessment],
    match: AssessmentMatch = AssessmentMatch.CONTROL,
) -> list[FrameworkScore]:
    """Compliance of each framework across every application.

    Assessments of all applications are pooled and the best one per control
    counts, so a control passed by any application counts as passed.
    """
    result: list[FrameworkScore] = []
    for framework in frameworks:
        aggregate = aggregate_framework(framework, controls, assessments, match=match)
        result.append(_framework_score(framework, aggregate))
    return result


def overall_compliance(scorecards: list[ApplicationScorecard]) -> int:
    """Mean of each application's overall score (a mean of means)."""
    if not scorecards:
        return 0
    return round_half_up(sum(sc.overall_score for sc in scorecards) / len(scorecards))


def application_kpis(scorecards: list[ApplicationScorecard]) -> ApplicationKPIs:
    """Count applications per status band for the KPI tiles."""
    total = len(scorecards)
    statuses = [sc.status for sc in scorecards]
    return ApplicationKPIs(
        total=total,
        compliant=statuses.count(ComplianceStatus.COMPLIANT),
        warning=statuses.count(ComplianceStatus.WARNING),
        critical=statuses.count(ComplianceStatus.CRITICAL),
        average_score=overall_compliance(scorecards),
    )


def framework_overview(
    frameworks: list[Framework],
    controls: list[Control],
    assessments: Iterable[ComplianceAssessment],
) -> list[FrameworkOverview]:
    """Control and passed-assessment counts per framework, master first."""
    assessments = list(assessments)
    overview: list[FrameworkOverview] = []
    for framework in frameworks:
        control_ids = {c.id for c in framework_controls(framework.id, controls)}
        passed = sum(
            1 for a in assessments
            if a.control_id in control_ids and (a.status or "").lower() == "pass"
        )
        overview.append(FrameworkOverview(
            framework_id=framework.id,
            framework_name=framework.name,
            version=framework.version,
            master=framework.master,
            control_count=len(control_ids),
            passed_count=passed,
        ))

    # Stable sort keeps store order among non-master frameworks
    overview.sort(key=lambda o: not o.master)
    return overview


def dashboard_summary(
    snapshot: Snapshot,
    scorecards: list[ApplicationScorecard],
) -> DashboardSummary:
    failed = sum(1 for a in snapshot.assessments if (a.status or "").lower() == "fail")
    return DashboardSummary(
        active_frameworks=len(snapshot.frameworks),
        applications=len(snapshot.applications),
        total_controls=len(snapshot.controls),
        failed_assessments=failed,
        overall_compliance=overall_compliance(scorecards),
    )
