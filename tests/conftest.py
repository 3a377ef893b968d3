"""Shared fixtures for AutoGRC tests."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from autogrc.models.records import (
    Application,
    ComplianceAssessment,
    Control,
    Framework,
    FrameworkMapping,
    Snapshot,
)

# Rows as exported by the store, with its column names
STORE_ROWS: dict = {
    "applications": [
        {"id": "app-web", "name": "Web Portal", "owner_email": "web@example.com",
         "criticality": "high", "cloud-provider": "aws", "overall_score": 0},
        {"id": "app-api", "name": "Payments API", "owner_email": "pay@example.com",
         "criticality": "critical", "cloud-provider": "azure", "overall_score": 0},
    ],
    "frameworks": [
        {"id": "fw-iso", "name": "ISO 27001", "version": "2022", "master": True},
        {"id": "fw-nist", "name": "NIST CSF", "version": "2.0", "master": False},
        {"id": "fw-soc2", "name": "SOC 2", "version": "2017", "master": False},
    ],
    "controls": [
        {"id": "m1", "framework_id": "fw-iso", "ID": "A.5.1", "Domain": "Access Control",
         "Controls": "Access control policy"},
        {"id": "m2", "framework_id": "fw-iso", "ID": "A.5.2", "Domain": "Access Control",
         "Controls": "User access provisioning"},
        {"id": "m3", "framework_id": "fw-iso", "ID": "A.8.1", "Domain": "Asset Management",
         "Controls": "Inventory of assets"},
        {"id": "m4", "framework_id": "fw-iso", "ID": "A.9.1", "Domain": None,
         "Controls": "Unclassified control"},
        {"id": "n1", "framework_id": "fw-nist", "ID": "PR.AC-1", "Domain": "Protect",
         "Controls": "Identities and credentials are managed"},
        {"id": "n2", "framework_id": "fw-nist", "ID": "PR.AC-2", "Domain": "Protect",
         "Controls": "Physical access is managed"},
        {"id": "n3", "framework_id": "fw-nist", "ID": "ID.AM-1", "Domain": "Identify",
         "Controls": "Devices are inventoried"},
        {"id": "s1", "framework_id": "fw-soc2", "ID": "CC6.1", "Domain": "Logical Access",
         "Controls": "Logical access security"},
        {"id": "s2", "framework_id": "fw-soc2", "ID": "CC6.2", "Domain": "Logical Access",
         "Controls": "User registration"},
    ],
    "compliance_assessment": [
        {"id": "a1", "application_id": "app-web", "control_id": "m1", "score": 0.9, "status": "pass"},
        {"id": "a2", "application_id": "app-web", "control_id": "m2", "score": 0.85, "status": "pass"},
        {"id": "a3", "application_id": "app-web", "control_id": "m3", "score": 0.5, "status": "partial"},
        {"id": "a4", "application_id": "app-web", "control_id": "m4", "score": 0.2, "status": "fail"},
        {"id": "a5", "application_id": "app-web", "control_id": "n1", "score": 0.9, "status": "pass"},
        {"id": "a6", "application_id": "app-web", "control_id": "n2", "score": 0.3, "status": "fail"},
        {"id": "a7", "application_id": "app-api", "control_id": "m1", "score": 0.1, "status": "fail"},
    ],
    "framework_mappings": [
        {"id": "map1", "source_control_id": "m1", "target_control_id": "n1", "mapping_score": 0.9},
        {"id": "map2", "source_control_id": "n2", "target_control_id": "m1", "mapping_score": 0.7},
        {"id": "map3", "source_control_id": "m2", "target_control_id": "s1", "mapping_score": 0.8},
        {"id": "map4", "source_control_id": "m3", "target_control_id": "s2", "mapping_score": 0.6},
    ],
}


@pytest.fixture
def snapshot() -> Snapshot:
    """Return the sample store rows as a snapshot."""
    return Snapshot(
        applications=[Application.model_validate(r) for r in STORE_ROWS["applications"]],
        frameworks=[Framework.model_validate(r) for r in STORE_ROWS["frameworks"]],
        controls=[Control.model_validate(r) for r in STORE_ROWS["controls"]],
        assessments=[ComplianceAssessment.model_validate(r) for r in STORE_ROWS["compliance_assessment"]],
        mappings=[FrameworkMapping.model_validate(r) for r in STORE_ROWS["framework_mappings"]],
    )


@pytest.fixture
def tmp_project(tmp_path: Path) -> Path:
    """Create a project with a single-file snapshot in data.yaml."""
    project = tmp_path / "grc-project"
    project.mkdir()
    (project / "data.yaml").write_text(yaml.safe_dump(STORE_ROWS, sort_keys=False), encoding="utf-8")
    return project


@pytest.fixture
def initialized_project(tmp_project: Path) -> Path:
    """Create a project with .autogrc initialized and pointing at data.yaml."""
    grc_dir = tmp_project / ".autogrc"
    grc_dir.mkdir()
    (grc_dir / "reports").mkdir()

    config = grc_dir / "config.yaml"
    config.write_text(
        'project:\n  name: "test-project"\n\ndata:\n  snapshot: data.yaml\n',
        encoding="utf-8",
    )
    return tmp_project
