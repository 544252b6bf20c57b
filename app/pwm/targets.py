"""
Day targets: weight, macros, water, sodium and rehydration.

Every function here is pure, deterministic and total over its inputs:
out-of-range day indices clamp into the tables rather than raise, and
degenerate inputs (zero weight class, zero pounds lost) produce finite
neutral values.

Weight target
-------------
``base = round(weight_class × multiplier[clamp(days)])``::

    recovery 1.07   5 → 1.07   4 → 1.06   3 → 1.05
    2 → 1.04        1 → 1.03   0 → 1.00

The optimal protocol holds a gentler ladder (1.05 from day 3 out and in
recovery, then 1.04, 1.03, 1.00).  Aggressive, standard weekly and SPAR
Competition also get a water-loading allowance on days 3-5
(``base + 2`` to ``base + 4``).  Build and SPAR target the class itself
every day.

Behind-schedule override
------------------------
On days 1-3, being over the weight class scales the day's macros down
for every protocol.  The percentage over is amplified the closer
weigh-in is (×1.5 on day 1, ×1.2 on day 2) and matched against ordered
bands, first match wins.  Each band scales the min and max of a range
by its own factor::

    band                 carbs min/max    protein min/max
    DO NOT EAT           0 / 0            0 / 0
    survival only        0 / 0.15         0 / 0.20
    heavy restriction    0.30 / 0.40      0.50 / 0.50
    moderate reduction   0.60 / 0.70      0.80 / 0.80
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Union

from pydantic import BaseModel, Field

from app.pwm.bands import first_at_least
from app.pwm.days import DateLike, clamp_days, days_until_for_profile, is_water_loading_day
from app.pwm.protocols import (
    get_food_phase_flags,
    get_macro_rule,
    get_protocol_phase,
    is_cutting_protocol,
    is_water_loading_protocol,
)
from app.schemas.profile import AthleteProfile, Protocol
from app.schemas.targets import (
    DayTargets,
    GramRange,
    MacroTargets,
    RehydrationPlan,
    SodiumTarget,
    WeightAdjustedMacros,
    WeightTarget,
)

logger = logging.getLogger(__name__)

# ======================================================================
# Tables
# ======================================================================

# Keyed by clamped day index (-1 = recovery).
WEIGHT_MULTIPLIERS: dict[int, float] = {
    -1: 1.07,
    0: 1.00,
    1: 1.03,
    2: 1.04,
    3: 1.05,
    4: 1.06,
    5: 1.07,
}

HOLD_WEIGHT_MULTIPLIERS: dict[int, float] = {
    -1: 1.05,
    0: 1.00,
    1: 1.03,
    2: 1.04,
    3: 1.05,
    4: 1.05,
    5: 1.05,
}

PROTOCOL_WEIGHT_MULTIPLIERS: dict[Protocol, dict[int, float]] = {
    Protocol.OPTIMAL: HOLD_WEIGHT_MULTIPLIERS,
}

WATER_LOAD_MIN_BONUS = 2
WATER_LOAD_MAX_BONUS = 4

WATER_OZ_PER_LB: dict[int, float] = {
    -1: 0.75,
    0: 0.0,
    1: 0.08,
    2: 0.3,
    3: 1.5,
    4: 1.5,
    5: 1.2,
}

WATER_CAP_OZ = 320

SODIUM_TARGETS: dict[int, SodiumTarget] = {
    -1: SodiumTarget(target=3000, label="Replenish electrolytes", color="green"),
    0: SodiumTarget(target=0, label="Reintroduce after weigh-in", color="yellow"),
    1: SodiumTarget(target=1000, label="Restrict (<1 g)", color="blue"),
    2: SodiumTarget(target=2500, label="Taper", color="cyan"),
    3: SodiumTarget(target=5000, label="Salt load", color="orange"),
    4: SodiumTarget(target=5000, label="Salt load", color="orange"),
    5: SodiumTarget(target=5000, label="Salt load", color="orange"),
}

REHYDRATION_FLUID_OZ_PER_LB = (16, 24)
REHYDRATION_SODIUM_MG_PER_LB = (500, 700)

# ======================================================================
# Behind-schedule override
# ======================================================================

OVERRIDE_DAYS = (1, 3)

OVERRIDE_DAY_MULTIPLIERS: dict[int, float] = {1: 1.5, 2: 1.2, 3: 1.0}


class ScaleFactors(BaseModel):
    """Multipliers applied to the two ends of a gram range."""

    min: float = Field(..., ge=0.0, le=1.0)
    max: float = Field(..., ge=0.0, le=1.0)

    def apply(self, grams: GramRange) -> GramRange:
        return GramRange(min=round(grams.min * self.min), max=round(grams.max * self.max))


class OverrideBand(BaseModel):
    carbs: ScaleFactors
    protein: ScaleFactors
    warning: str


def _band(carbs: tuple[float, float], protein: tuple[float, float], warning: str) -> OverrideBand:
    return OverrideBand(carbs=ScaleFactors(min=carbs[0], max=carbs[1]),
                        protein=ScaleFactors(min=protein[0], max=protein[1]), warning=warning, )


# Descending: first band whose threshold <= effective percent over wins.
OVERRIDE_BANDS: list[tuple[float, OverrideBand]] = [
    (10.0, _band((0.0, 0.0), (0.0, 0.0), "DO NOT EAT")),
    (7.0, _band((0.0, 0.15), (0.0, 0.20), "survival only")),
    (5.0, _band((0.30, 0.40), (0.50, 0.50), "heavy restriction")),
    (3.0, _band((0.60, 0.70), (0.80, 0.80), "moderate reduction")),
]


def _override_band(effective_percent_over: float) -> Optional[OverrideBand]:
    return first_at_least(effective_percent_over, OVERRIDE_BANDS, None)


# ======================================================================
# Queries
# ======================================================================


def get_weight_target(protocol: Union[Protocol, str], days_until: int, weight_class: int) -> WeightTarget:
    """Target scale weight for the day."""
    if not is_cutting_protocol(protocol):
        return WeightTarget(base=weight_class)

    multipliers = PROTOCOL_WEIGHT_MULTIPLIERS.get(Protocol(protocol), WEIGHT_MULTIPLIERS)
    base = round(weight_class * multipliers[clamp_days(days_until)])
    if is_water_loading_protocol(protocol) and is_water_loading_day(days_until):
        return WeightTarget(
            base=base,
            with_water_load=base + WATER_LOAD_MAX_BONUS,
            water_load_range=(base + WATER_LOAD_MIN_BONUS, base + WATER_LOAD_MAX_BONUS),
        )
    return WeightTarget(base=base)


def get_macro_targets(weight: float, protocol: Union[Protocol, str], days_until: int) -> MacroTargets:
    """Carb / protein ranges from the protocol's day-bucket table."""
    return get_macro_rule(protocol, days_until).resolve(weight)


def get_weight_adjusted_macros(weight: float, protocol: Union[Protocol, str], days_until: int,
                               current_weight: float, target_class: float, ) -> WeightAdjustedMacros:
    """Macro targets with the behind-schedule override applied.

    Returns the unchanged table values outside the override window, when
    at or under the class, or when the target class is zero.
    """
    base = get_macro_targets(weight, protocol, days_until)
    unchanged = WeightAdjustedMacros(**base.model_dump())

    low, high = OVERRIDE_DAYS
    if not low <= days_until <= high:
        return unchanged
    if target_class <= 0 or current_weight <= target_class:
        return unchanged

    percent_over = (current_weight - target_class) / target_class * 100
    effective = percent_over * OVERRIDE_DAY_MULTIPLIERS[days_until]
    band = _override_band(effective)
    if band is None:
        return unchanged.model_copy(update={
            "percent_over": round(percent_over, 2),
            "effective_percent_over": round(effective, 2),
        })

    logger.debug("Macro override '%s' (%.2f%% effective, day %d)", band.warning, effective, days_until)
    return WeightAdjustedMacros(
        carbs=band.carbs.apply(base.carbs),
        protein=band.protein.apply(base.protein),
        ratio=base.ratio,
        warning=band.warning,
        percent_over=round(percent_over, 2),
        effective_percent_over=round(effective, 2),
    )


def get_water_target(days_until: int, current_weight: float) -> int:
    """Daily water target in ounces, capped and never negative."""
    if not math.isfinite(current_weight) or current_weight <= 0:
        return 0
    oz = round(WATER_OZ_PER_LB[clamp_days(days_until)] * current_weight)
    return max(0, min(WATER_CAP_OZ, oz))


def get_sodium_target(days_until: int) -> SodiumTarget:
    return SODIUM_TARGETS[clamp_days(days_until)]


def get_rehydration_plan(lost_weight: float) -> RehydrationPlan:
    """Post-weigh-in fluid (oz) and sodium (mg) ranges for pounds lost."""
    if not math.isfinite(lost_weight) or lost_weight <= 0:
        return RehydrationPlan(fluid_min=0, fluid_max=0, sodium_min=0, sodium_max=0)
    fluid_low, fluid_high = REHYDRATION_FLUID_OZ_PER_LB
    sodium_low, sodium_high = REHYDRATION_SODIUM_MG_PER_LB
    return RehydrationPlan(
        fluid_min=round(fluid_low * lost_weight),
        fluid_max=round(fluid_high * lost_weight),
        sodium_min=round(sodium_low * lost_weight),
        sodium_max=round(sodium_high * lost_weight),
    )


def get_day_targets(profile: AthleteProfile, as_of: Optional[DateLike] = None) -> DayTargets:
    """Everything prescribed for *profile* on the day given by *as_of*.

    The profile's ``simulated_date`` wins over *as_of* when set.
    """
    days_until = days_until_for_profile(profile, as_of)
    weight = profile.current_weight
    return DayTargets(
        protocol=profile.protocol,
        days_until_weigh_in=days_until,
        weight=get_weight_target(profile.protocol, days_until, profile.target_weight_class),
        macros=get_weight_adjusted_macros(weight, profile.protocol, days_until, weight,
                                          profile.target_weight_class, ),
        water_oz=get_water_target(days_until, weight),
        sodium=get_sodium_target(days_until),
        phase_flags=get_food_phase_flags(profile.protocol, days_until),
        phase=get_protocol_phase(profile.protocol, days_until),
    )
