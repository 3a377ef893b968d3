"""Score classification.

Two scales are in use:
- percentage scores (0-100) for applications and frameworks
- fractional assessment scores (0-1) for single controls

Every band is inclusive on its lower bound.
"""

from __future__ import annotations

import math
from typing import Optional

from ..models.scores import AssessmentBand, ComplianceStatus

COMPLIANT_THRESHOLD = 80
WARNING_THRESHOLD = 40

PASS_SCORE = 0.8
PARTIAL_SCORE = 0.4


def classify(score: float) -> ComplianceStatus:
    """Map a 0-100 score to a compliance status."""
    if score >= COMPLIANT_THRESHOLD:
        return ComplianceStatus.COMPLIANT
    if score >= WARNING_THRESHOLD:
        return ComplianceStatus.WARNING
    return ComplianceStatus.CRITICAL


def classify_assessment(score: float, status: Optional[str] = None) -> AssessmentBand:
    """Map a 0-1 assessment score to a pass/partial/fail band.

    A stored ``pass`` status counts as passing. Any other stored status is
    ignored in favour of the score.
    """
    if score >= PASS_SCORE or (status or "").lower() == AssessmentBand.PASS.value:
        return AssessmentBand.PASS
    if score >= PARTIAL_SCORE:
        return AssessmentBand.PARTIAL
    return AssessmentBand.FAIL


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 going up (2.5 -> 3, not 2)."""
    return int(math.floor(value + 0.5))
