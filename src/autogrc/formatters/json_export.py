"""JSON export of scoring results."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Optional

from .. import __version__
from ..models.scores import ApplicationScorecard, DashboardSummary, DomainCompliance, FrameworkScore


def build_scorecard_document(
    scorecards: list[ApplicationScorecard],
    summary: DashboardSummary,
    domains: Optional[list[DomainCompliance]] = None,
    project_name: str = "",
    compliance: Optional[list[FrameworkScore]] = None,
) -> dict:
    """Assemble the JSON document written by ``export_scorecards_json``."""
    applications = []
    for sc in scorecards:
        applications.append({
            "id": sc.application.id,
            "name": sc.application.name,
            "overall_score": sc.overall_score,
            "status": sc.status.value,
            "frameworks": [fs.model_dump(mode="json") for fs in sc.framework_scores],
        })

    document: dict = {
        "version": __version__,
        "generated_at": datetime.now().strftime("%Y-%m-%dT%H:%M:%S"),
        "project": project_name,
        "summary": summary.model_dump(mode="json"),
        "applications": applications,
    }

    if compliance is not None:
        document["frameworks"] = [fs.model_dump(mode="json") for fs in compliance]

    if domains is not None:
        document["domains"] = [
            {
                "domain": d.domain,
                "total_controls": d.total_controls,
                "compliant": [a.id for a in d.compliant_applications],
                "non_compliant": [a.id for a in d.non_compliant_applications],
            }
            for d in domains
        ]

    return document


def export_scorecards_json(document: dict, output_path: Path) -> Path:
    """Write a scorecard document to a JSON file (UTF-8, no BOM)."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(document, indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    return output_path
