"""Markdown compliance dashboard report."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from .. import __version__
from ..models.scores import (
    ApplicationKPIs,
    ApplicationScorecard,
    DashboardSummary,
    DomainCompliance,
    FrameworkOverview,
    FrameworkScore,
)

STATUS_LABELS = {"compliant": "PASS", "warning": "REVIEW", "critical": "FAIL"}


def generate_dashboard_report(
    scorecards: list[ApplicationScorecard],
    summary: DashboardSummary,
    kpis: ApplicationKPIs,
    frameworks: list[FrameworkOverview],
    domains: Optional[list[DomainCompliance]] = None,
    project_name: str = "",
    compliance: Optional[list[FrameworkScore]] = None,
) -> str:
    """Generate the COMPLIANCE-REPORT.md dashboard report."""
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

    lines: list[str] = []
    lines.append("# Compliance Report")
    lines.append("")
    if project_name:
        lines.append(f"**Project:** {project_name}")
    lines.append(f"**Date:** {timestamp}")
    lines.append(f"**Overall Compliance:** {summary.overall_compliance}%")
    lines.append("")

    lines.append("## Summary")
    lines.append("")
    lines.append("| Metric | Value |")
    lines.append("|--------|-------|")
    lines.append(f"| Active Frameworks | {summary.active_frameworks} |")
    lines.append(f"| Applications | {summary.applications} |")
    lines.append(f"| Total Controls | {summary.total_controls} |")
    lines.append(f"| Failed Assessments | {summary.failed_assessments} |")
    lines.append(f"| Compliant Applications | {kpis.compliant} |")
    lines.append(f"| Warning Applications | {kpis.warning} |")
    lines.append(f"| Critical Applications | {kpis.critical} |")
    lines.append("")

    if frameworks:
        lines.append("## Frameworks")
        lines.append("")
        lines.append("| Framework | Version | Controls | Passed |")
        lines.append("|-----------|---------|----------|--------|")
        for fw in frameworks:
            name = f"{fw.framework_name} (Master)" if fw.master else fw.framework_name
            lines.append(f"| {name} | {fw.version} | {fw.control_count} | {fw.passed_count} |")
        lines.append("")

    if compliance:
        lines.append("## Framework Compliance")
        lines.append("")
        lines.append("| Framework | Compliance | Passed | Partial | Controls |")
        lines.append("|-----------|------------|--------|---------|----------|")
        for fs in compliance:
            lines.append(
                f"| {fs.framework_name} | {fs.score}% {STATUS_LABELS[fs.status.value]} "
                f"| {fs.passed_controls} | {fs.partial_controls} | {fs.total_controls} |"
            )
        lines.append("")

    if scorecards:
        framework_names = [fs.framework_name for fs in scorecards[0].framework_scores]
        lines.append("## Applications")
        lines.append("")
        lines.append("| Application | " + " | ".join(framework_names) + " | Overall |")
        lines.append("|" + "---|" * (len(framework_names) + 2))
        for sc in scorecards:
            cells = [
                f"{fs.score}% {STATUS_LABELS[fs.status.value]}" for fs in sc.framework_scores
            ]
            overall = f"{sc.overall_score}% {STATUS_LABELS[sc.status.value]}"
            lines.append(f"| {sc.application.name} | " + " | ".join(cells) + f" | {overall} |")
        lines.append("")

    if domains:
        lines.append("## Domains")
        lines.append("")
        for domain in domains:
            lines.append(f"### {domain.domain} ({domain.total_controls} controls)")
            compliant = ", ".join(a.name for a in domain.compliant_applications) or "none"
            non_compliant = ", ".join(a.name for a in domain.non_compliant_applications) or "none"
            lines.append(f"- **Compliant:** {compliant}")
            lines.append(f"- **Non-compliant:** {non_compliant}")
            lines.append("")

    lines.append("---")
    lines.append(f"*Generated by AutoGRC v{__version__} at {timestamp}*")

    return "\n".join(lines)
