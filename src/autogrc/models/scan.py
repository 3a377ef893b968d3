"""SSL Labs scan data models."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel


class SslEndpoint(BaseModel):
    ip_address: str = ""
    server_name: Optional[str] = None
    grade: Optional[str] = None
    status_message: Optional[str] = None
    has_warnings: bool = False


class SslScanResult(BaseModel):
    host: str
    status: str
    engine_version: Optional[str] = None
    criteria_version: Optional[str] = None
    start_time: Optional[datetime] = None
    test_time: Optional[datetime] = None
    endpoints: list[SslEndpoint] = []

    @classmethod
    def from_api(cls, data: dict) -> "SslScanResult":
        """Build a result from an SSL Labs ``analyze`` response body."""
        endpoints = [
            SslEndpoint(
                ip_address=ep.get("ipAddress", ""),
                server_name=ep.get("serverName"),
                grade=ep.get("grade"),
                status_message=ep.get("statusMessage"),
                has_warnings=bool(ep.get("hasWarnings")),
            )
            for ep in data.get("endpoints") or []
        ]
        return cls(
            host=data.get("host", ""),
            status=data.get("status", ""),
            engine_version=data.get("engineVersion"),
            criteria_version=data.get("criteriaVersion"),
            start_time=_from_millis(data.get("startTime")),
            test_time=_from_millis(data.get("testTime")),
            endpoints=endpoints,
        )

    @property
    def lowest_grade(self) -> Optional[str]:
        grades = [ep.grade for ep in self.endpoints if ep.grade]
        if not grades:
            return None
        return max(grades, key=_grade_rank)


# SSL Labs grades from best to worst
GRADE_ORDER = ["A+", "A", "A-", "B", "C", "D", "E", "F", "T", "M"]


def _grade_rank(grade: str) -> int:
    try:
        return GRADE_ORDER.index(grade)
    except ValueError:
        return len(GRADE_ORDER)


def _from_millis(value) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc)
