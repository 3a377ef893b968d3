"""Cross-framework mapping result models."""

from __future__ import annotations

from pydantic import BaseModel

from .records import Control, Framework, FrameworkMapping


class ComparisonRow(BaseModel):
    """One master control and the controls of other frameworks mapped to it."""

    master_control: Control
    mapped_controls: dict[str, list[Control]] = {}


class DomainComparison(BaseModel):
    domain: str
    rows: list[ComparisonRow] = []


class UnmappedControls(BaseModel):
    """Controls of one framework with no mapping to the master framework."""

    framework: Framework
    by_domain: dict[str, list[Control]] = {}
    total_unmapped: int = 0


class MappingChangeSet(BaseModel):
    inserts: list[FrameworkMapping] = []
    updates: list[FrameworkMapping] = []
    deletes: list[FrameworkMapping] = []

    @property
    def is_empty(self) -> bool:
        return not (self.inserts or self.updates or self.deletes)
