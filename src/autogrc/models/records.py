"""Row models for records owned by the compliance store.

Column names used by the store (``ID``, ``Domain``, ``cloud-provider`` ...)
are accepted as aliases so rows can be loaded as exported.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class Application(_Record):
    id: str
    name: str = ""
    owner_email: str = Field(default="", alias="owner")
    criticality: Optional[str] = None
    cloud_provider: Optional[str] = Field(default=None, alias="cloud-provider")
    overall_score: float = 0
    applicability: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("overall_score", mode="before")
    @classmethod
    def _clamp_score(cls, value):
        if value is None:
            return 0
        return min(max(float(value), 0.0), 100.0)


class Framework(_Record):
    id: str
    name: str = ""
    version: str = ""
    master: bool = False
    created_at: Optional[datetime] = None

    @field_validator("master", mode="before")
    @classmethod
    def _none_is_false(cls, value):
        return False if value is None else value


class Control(_Record):
    id: str
    framework_id: str
    code: str = Field(default="", alias="ID")
    domain: str = Field(default="", alias="Domain")
    sub_domain: str = Field(default="", alias="Sub-Domain")
    description: str = Field(default="", alias="Controls")

    @field_validator("code", "domain", "sub_domain", "description", mode="before")
    @classmethod
    def _none_is_empty(cls, value):
        return "" if value is None else str(value)


class ComplianceAssessment(_Record):
    id: str = ""
    application_id: str
    control_id: str
    score: float = 0
    status: Optional[str] = None
    mapped_from: Optional[str] = None
    source: Optional[str] = None
    assessed_at: Optional[datetime] = None
    explanation: Optional[str] = None

    @field_validator("score", mode="before")
    @classmethod
    def _none_is_zero(cls, value):
        return 0 if value is None else value


class FrameworkMapping(_Record):
    id: str = ""
    source_control_id: str
    target_control_id: str
    source_framework_id: Optional[str] = None
    target_framework_id: Optional[str] = None
    mapping_type: str = "manual"
    mapping_score: float = 0
    status: Optional[str] = None
    explanation: Optional[str] = None
    created_at: Optional[datetime] = None


class Snapshot(BaseModel):
    """Everything fetched from the store for one computation."""

    applications: list[Application] = []
    frameworks: list[Framework] = []
    controls: list[Control] = []
    assessments: list[ComplianceAssessment] = []
    mappings: list[FrameworkMapping] = []

    @property
    def master_framework(self) -> Optional[Framework]:
        return next((f for f in self.frameworks if f.master), None)

    @property
    def other_frameworks(self) -> list[Framework]:
        master = self.master_framework
        return [f for f in self.frameworks if master is None or f.id != master.id]
