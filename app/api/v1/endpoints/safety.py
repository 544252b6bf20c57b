"""
Weight safety endpoints.
"""

from fastapi import APIRouter, Query

from app.pwm.safety import assess_weight_cut_safety, get_weight_validation_error
from app.schemas.safety import SafetyAssessment

router = APIRouter()


@router.get(
    "/assess",
    summary="Assess how risky the remaining cut is.",
    response_model=SafetyAssessment,
)
def assess(
    current_weight: float = Query(..., gt=0),
    target_weight: float = Query(..., gt=0),
    days_until: int = Query(..., description="Days until weigh-in"),
):
    return assess_weight_cut_safety(current_weight, target_weight, days_until)


@router.get(
    "/validate-weight",
    summary="Check that a scale reading is plausible.",
)
def validate_weight(weight: float):
    error = get_weight_validation_error(weight)
    return {"valid": error is None, "error": error}
