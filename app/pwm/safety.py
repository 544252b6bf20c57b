"""
Weight-cut safety checks.

Plausibility of a scale reading (50-400 lb) and a coarse danger level
for the weight still to lose given the time left:

    final 24 h   > 3 lb over → danger,  >= 2 lb → warning, else caution
    final 48 h   > 5 lb over → danger,  >= 3 lb → warning, else caution
    otherwise    > 8 % over  → warning, > 5 lb  → caution, else safe
"""

from __future__ import annotations

import math
from typing import Any, Optional

from app.schemas.safety import SafetyAssessment, SafetyLevel

MIN_WEIGHT_LBS = 50
MAX_WEIGHT_LBS = 400

MAX_SAFE_TOTAL_CUT_PERCENT = 8.0
CRITICAL_DAYS_THRESHOLD = 2
DANGER_DELTA_24H_LBS = 3.0
WARNING_DELTA_24H_LBS = 2.0
DANGER_DELTA_48H_LBS = 5.0
WARNING_DELTA_48H_LBS = 3.0
CAUTION_DELTA_LBS = 5.0


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def is_valid_weight(weight: Any) -> bool:
    """True for a finite number within the plausible scale range."""
    return _is_number(weight) and MIN_WEIGHT_LBS <= weight <= MAX_WEIGHT_LBS


def get_weight_validation_error(weight: Any) -> Optional[str]:
    """User-facing error for an implausible weight, ``None`` when valid."""
    if not _is_number(weight):
        return "Please enter a valid weight."
    if weight < MIN_WEIGHT_LBS:
        return f"Weight must be at least {MIN_WEIGHT_LBS} lbs."
    if weight > MAX_WEIGHT_LBS:
        return f"Weight must be less than {MAX_WEIGHT_LBS} lbs."
    return None


def assess_weight_cut_safety(current_weight: float, target_weight: float, days_until: int) -> SafetyAssessment:
    """Danger level for cutting from *current_weight* to *target_weight*."""
    lbs_over = current_weight - target_weight
    if lbs_over <= 0 or target_weight <= 0:
        return SafetyAssessment(level=SafetyLevel.SAFE, message="At or below target weight.", lbs_over=0.0,
                                percent_over=0.0, )

    percent_over = lbs_over / target_weight * 100

    def _result(level: SafetyLevel, message: str) -> SafetyAssessment:
        return SafetyAssessment(level=level, message=message, lbs_over=round(lbs_over, 1),
                                percent_over=round(percent_over, 2), )

    if days_until <= 1:
        if lbs_over > DANGER_DELTA_24H_LBS:
            return _result(SafetyLevel.DANGER,
                           f"{lbs_over:.1f} lbs over with under 24 hours left. Talk to your coach now.")
        if lbs_over >= WARNING_DELTA_24H_LBS:
            return _result(SafetyLevel.WARNING, f"{lbs_over:.1f} lbs over with under 24 hours left.")
        return _result(SafetyLevel.CAUTION, f"{lbs_over:.1f} lbs to go in the final 24 hours.")

    if days_until <= CRITICAL_DAYS_THRESHOLD:
        if lbs_over > DANGER_DELTA_48H_LBS:
            return _result(SafetyLevel.DANGER,
                           f"{lbs_over:.1f} lbs over with under 48 hours left. Talk to your coach now.")
        if lbs_over >= WARNING_DELTA_48H_LBS:
            return _result(SafetyLevel.WARNING, f"{lbs_over:.1f} lbs over with under 48 hours left.")
        return _result(SafetyLevel.CAUTION, f"{lbs_over:.1f} lbs to go in the final 48 hours.")

    if percent_over > MAX_SAFE_TOTAL_CUT_PERCENT:
        return _result(SafetyLevel.WARNING,
                       f"{percent_over:.1f}% over target exceeds the {MAX_SAFE_TOTAL_CUT_PERCENT:g}% safe cut limit.")
    if lbs_over > CAUTION_DELTA_LBS:
        return _result(SafetyLevel.CAUTION, f"{lbs_over:.1f} lbs to lose. Stay on the plan.")
    return _result(SafetyLevel.SAFE, f"{lbs_over:.1f} lbs to go. On track.")
