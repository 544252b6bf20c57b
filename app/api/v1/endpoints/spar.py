"""
SPAR endpoints: slice targets, five-slice plans and gram → slice equivalents.
"""

from fastapi import APIRouter, Query

from app.pwm.spar import (
    get_competition_calorie_adjustment,
    get_spar_plan_targets,
    get_spar_slice_targets,
    grams_to_slices,
)
from app.schemas.spar import (
    CompetitionCalorieAdjustment,
    SliceEquivalents,
    SliceRequest,
    SliceTargets,
    SparPlanRequest,
    SparPlanTargets,
)
from app.schemas.targets import MacroTargets

router = APIRouter()


@router.post(
    "/slices",
    summary="Get daily slice targets from biometrics.",
    response_model=SliceTargets,
)
def slice_targets(request: SliceRequest):
    return get_spar_slice_targets(request.biometrics, calorie_adjustment=request.calorie_adjustment)


@router.post(
    "/plan",
    summary="Get five-slice targets (protein, carb, veg, fruit, fat).",
    response_model=SparPlanTargets,
)
def plan_targets(request: SparPlanRequest):
    competition = None
    if request.competition is not None:
        context = request.competition
        competition = get_competition_calorie_adjustment(context.current_weight, context.target_weight_class,
                                                         context.days_until, )
    return get_spar_plan_targets(request.plan, competition)


@router.post(
    "/equivalents",
    summary="Express gram-based macro targets as slices.",
    response_model=SliceEquivalents,
)
def slice_equivalents(macros: MacroTargets):
    return grams_to_slices(macros)


@router.get(
    "/competition-adjustment",
    summary="Get the SPAR Competition calorie adjustment for the day.",
    response_model=CompetitionCalorieAdjustment,
)
def competition_adjustment(
    current_weight: float = Query(..., gt=0),
    target_weight_class: float = Query(..., gt=0),
    days_until: int = Query(..., description="Days until weigh-in (negative = recovery)"),
):
    return get_competition_calorie_adjustment(current_weight, target_weight_class, days_until)
