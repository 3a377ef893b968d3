"""Derived compliance score models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from .records import Application


class ComplianceStatus(str, Enum):
    COMPLIANT = "compliant"
    WARNING = "warning"
    CRITICAL = "critical"


class AssessmentBand(str, Enum):
    PASS = "pass"
    PARTIAL = "partial"
    FAIL = "fail"


class ControlAggregate(BaseModel):
    """Compliance of one application against one framework."""

    percentage: int = 0
    total_controls: int = 0
    passing_controls: int = 0
    partial_controls: int = 0
    status: ComplianceStatus = ComplianceStatus.CRITICAL


class FrameworkScore(BaseModel):
    framework_id: str
    framework_name: str
    score: int = 0
    passed_controls: int = 0
    partial_controls: int = 0
    total_controls: int = 0
    status: ComplianceStatus = ComplianceStatus.CRITICAL


class ApplicationScorecard(BaseModel):
    application: Application
    framework_scores: list[FrameworkScore] = []
    overall_score: int = 0
    status: ComplianceStatus = ComplianceStatus.CRITICAL


class ApplicationKPIs(BaseModel):
    total: int = 0
    compliant: int = 0
    warning: int = 0
    critical: int = 0
    average_score: int = 0


class FrameworkOverview(BaseModel):
    framework_id: str
    framework_name: str
    version: str = ""
    master: bool = False
    control_count: int = 0
    passed_count: int = 0


class DashboardSummary(BaseModel):
    active_frameworks: int = 0
    applications: int = 0
    total_controls: int = 0
    failed_assessments: int = 0
    overall_compliance: int = 0


class DomainCompliance(BaseModel):
    """Applications split by compliance for one master-framework domain."""

    domain: str
    total_controls: int = 0
    compliant_applications: list[Application] = []
    non_compliant_applications: list[Application] = []
