"""Tests for core/summarizer.py."""

from __future__ import annotations

from autogrc.core.classifier import classify
from autogrc.core.summarizer import (
    application_kpis,
    dashboard_summary,
    framework_compliance,
    framework_overview,
    overall_compliance,
    score_application,
    score_applications,
)
from autogrc.models.records import Application, ComplianceAssessment, Control, Framework
from autogrc.models.scores import ApplicationScorecard, ComplianceStatus

APP = Application(id="app", name="App")


def _framework_with_passes(fw_id: str, total: int, passing: int):
    framework = Framework(id=fw_id, name=fw_id.upper())
    controls = [Control(id=f"{fw_id}-{i}", framework_id=fw_id) for i in range(total)]
    assessments = [
        ComplianceAssessment(application_id="app", control_id=controls[i].id, score=0.9)
        for i in range(passing)
    ]
    return framework, controls, assessments


def _scorecard(score: int) -> ApplicationScorecard:
    return ApplicationScorecard(
        application=Application(id=f"app-{score}"),
        overall_score=score,
        status=classify(score),
    )


class TestScoreApplication:
    def test_mean_of_framework_scores(self):
        frameworks, controls, assessments = [], [], []
        for fw_id, total, passing in [("a", 1, 1), ("b", 5, 3), ("c", 5, 1)]:
            fw, c, a = _framework_with_passes(fw_id, total, passing)
            frameworks.append(fw)
            controls += c
            assessments += a

        card = score_application(APP, frameworks, controls, assessments)
        assert [fs.score for fs in card.framework_scores] == [100, 60, 20]
        assert card.overall_score == 60
        assert card.status == ComplianceStatus.WARNING

    def test_no_frameworks(self):
        card = score_application(APP, [], [], [])
        assert card.framework_scores == []
        assert card.overall_score == 0
        assert card.status == ComplianceStatus.CRITICAL

    def test_framework_order_preserved(self):
        fw_b, c_b, _ = _framework_with_passes("b", 1, 0)
        fw_a, c_a, _ = _framework_with_passes("a", 1, 0)
        card = score_application(APP, [fw_b, fw_a], c_b + c_a, [])
        assert [fs.framework_id for fs in card.framework_scores] == ["b", "a"]

    def test_idempotent(self, snapshot):
        app = snapshot.applications[0]
        first = score_application(app, snapshot.frameworks, snapshot.controls, snapshot.assessments)
        second = score_application(app, snapshot.frameworks, snapshot.controls, snapshot.assessments)
        assert first == second

    def test_sample_web_portal(self, snapshot):
        app = snapshot.applications[0]
        card = score_application(app, snapshot.frameworks, snapshot.controls, snapshot.assessments)
        scores = {fs.framework_id: fs.score for fs in card.framework_scores}
        assert scores == {"fw-iso": 75, "fw-nist": 33, "fw-soc2": 0}
        assert card.overall_score == 36
        assert card.status == ComplianceStatus.CRITICAL

    def test_sample_framework_counts(self, snapshot):
        app = snapshot.applications[0]
        card = score_application(app, snapshot.frameworks, snapshot.controls, snapshot.assessments)
        iso = card.framework_scores[0]
        assert iso.passed_controls == 2
        assert iso.partial_controls == 1
        assert iso.total_controls == 4


class TestScoreApplications:
    def test_one_scorecard_per_application(self, snapshot):
        cards = score_applications(
            snapshot.applications, snapshot.frameworks, snapshot.controls, snapshot.assessments
        )
        assert [c.application.id for c in cards] == ["app-web", "app-api"]
        assert cards[1].overall_score == 0


class TestFrameworkCompliance:
    def test_pools_every_application(self, snapshot):
        result = framework_compliance(snapshot.frameworks, snapshot.controls, snapshot.assessments)
        assert [fs.framework_id for fs in result] == ["fw-iso", "fw-nist", "fw-soc2"]
        assert [fs.score for fs in result] == [75, 33, 0]
        iso = result[0]
        assert (iso.passed_controls, iso.partial_controls, iso.total_controls) == (2, 1, 4)
        assert iso.status == ComplianceStatus.WARNING

    def test_best_assessment_across_applications(self):
        framework = Framework(id="f", name="F")
        controls = [Control(id="c1", framework_id="f"), Control(id="c2", framework_id="f")]
        assessments = [
            ComplianceAssessment(application_id="a", control_id="c1", score=0.1),
            ComplianceAssessment(application_id="b", control_id="c1", score=0.9),
        ]
        result = framework_compliance([framework], controls, assessments)
        assert result[0].passed_controls == 1
        assert result[0].score == 50

    def test_no_frameworks(self):
        assert framework_compliance([], [], []) == []

class TestOverallCompliance:
    def test_mean_of_means(self):
        assert overall_compliance([_scorecard(36), _scorecard(0)]) == 18

    def test_half_rounds_up(self):
        assert overall_compliance([_scorecard(50), _scorecard(51)]) == 51

    def test_empty(self):
        assert overall_compliance([]) == 0


class TestApplicationKpis:
    def test_counts_per_band(self):
        kpis = application_kpis([_scorecard(90), _scorecard(80), _scorecard(45), _scorecard(10)])
        assert kpis.total == 4
        assert kpis.compliant == 2
        assert kpis.warning == 1
        assert kpis.critical == 1
        assert kpis.average_score == 56

    def test_counts_sum_to_total(self, snapshot):
        cards = score_applications(
            snapshot.applications, snapshot.frameworks, snapshot.controls, snapshot.assessments
        )
        kpis = application_kpis(cards)
        assert kpis.compliant + kpis.warning + kpis.critical == kpis.total

    def test_empty(self):
        kpis = application_kpis([])
        assert kpis.total == 0
        assert kpis.average_score == 0


class TestFrameworkOverview:
    def test_master_first(self):
        frameworks = [
            Framework(id="b", name="B"),
            Framework(id="m", name="M", master=True),
            Framework(id="a", name="A"),
        ]
        overview = framework_overview(frameworks, [], [])
        assert [o.framework_id for o in overview] == ["m", "b", "a"]

    def test_passed_counts(self, snapshot):
        overview = framework_overview(snapshot.frameworks, snapshot.controls, snapshot.assessments)
        passed = {o.framework_id: o.passed_count for o in overview}
        counts = {o.framework_id: o.control_count for o in overview}
        assert passed == {"fw-iso": 2, "fw-nist": 1, "fw-soc2": 0}
        assert counts == {"fw-iso": 4, "fw-nist": 3, "fw-soc2": 2}


class TestDashboardSummary:
    def test_sample_summary(self, snapshot):
        cards = score_applications(
            snapshot.applications, snapshot.frameworks, snapshot.controls, snapshot.assessments
        )
        summary = dashboard_summary(snapshot, cards)
        assert summary.active_frameworks == 3
        assert summary.applications == 2
        assert summary.total_controls == 9
        assert summary.failed_assessments == 3
        assert summary.overall_compliance == 18
