"""
Day-target endpoints: weight, macros, water, sodium, rehydration.
"""

import datetime
from typing import Optional

from fastapi import APIRouter, Query

from app.pwm.targets import (
    WATER_CAP_OZ,
    get_day_targets,
    get_rehydration_plan,
    get_sodium_target,
    get_water_target,
    get_weight_adjusted_macros,
    get_weight_target,
)
from app.schemas.profile import Protocol
from app.schemas.targets import (
    DayTargets,
    DayTargetsRequest,
    RehydrationPlan,
    SodiumTarget,
    WaterTarget,
    WeightAdjustedMacros,
    WeightTarget,
)

router = APIRouter()


@router.post(
    "/day",
    summary="Get every target for one athlete on one day.",
    response_model=DayTargets,
)
def day_targets(request: DayTargetsRequest):
    as_of = request.as_of or datetime.date.today()
    return get_day_targets(request.profile, as_of)


@router.get(
    "/weight",
    summary="Get the target scale weight for the day.",
    response_model=WeightTarget,
)
def weight_target(
    protocol: Protocol,
    days_until: int = Query(..., description="Days until weigh-in (negative = recovery)"),
    weight_class: int = Query(..., gt=0),
):
    return get_weight_target(protocol, days_until, weight_class)


@router.get(
    "/macros",
    summary="Get carb / protein ranges, with the behind-schedule override when current weight is given.",
    response_model=WeightAdjustedMacros,
)
def macro_targets(
    protocol: Protocol,
    days_until: int = Query(..., description="Days until weigh-in (negative = recovery)"),
    weight: float = Query(..., gt=0, description="Body weight used for per-pound protein"),
    current_weight: Optional[float] = Query(None, gt=0),
    target_class: Optional[float] = Query(None, ge=0),
):
    return get_weight_adjusted_macros(
        weight,
        protocol,
        days_until,
        current_weight if current_weight is not None else weight,
        target_class if target_class is not None else 0,
    )


@router.get(
    "/water",
    summary="Get the daily water target (oz).",
    response_model=WaterTarget,
)
def water_target(
    days_until: int = Query(..., description="Days until weigh-in (negative = recovery)"),
    weight: float = Query(..., gt=0),
):
    return WaterTarget(days_until_weigh_in=days_until, water_oz=get_water_target(days_until, weight),
                       cap_oz=WATER_CAP_OZ, )


@router.get(
    "/sodium",
    summary="Get the daily sodium target (mg).",
    response_model=SodiumTarget,
)
def sodium_target(days_until: int = Query(..., description="Days until weigh-in (negative = recovery)")):
    return get_sodium_target(days_until)


@router.get(
    "/rehydration",
    summary="Get the post-weigh-in rehydration plan.",
    response_model=RehydrationPlan,
)
def rehydration_plan(lost_weight: float = Query(..., description="Pounds lost to make weight")):
    return get_rehydration_plan(lost_weight)
