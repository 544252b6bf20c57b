"""
SPAR: portion-based ("slice") nutrition.

Daily slice targets are derived from a calorie budget, independent of
weigh-in proximity:

    BMR  (Mifflin-St Jeor)
      male:    10 × kg + 6.25 × cm − 5 × age + 5
      female:  10 × kg + 6.25 × cm − 5 × age − 161
    TDEE = BMR × activity multiplier
    budget = max(1200, TDEE + goal adjustment)

The budget is split protein 35 % / carb 40 % / veg 25 % and each share
divided by the calories of one slice (palm of protein 110, fist of carb
120, fist of veg 50), rounded, with a floor of one slice per category.

Gram-based protocols can also be shown in slices: 25 g protein or 30 g
carbs per slice, veg at ~40 % of the carb slices when protein is on the
menu.

SPAR Competition layers a day-indexed calorie adjustment on top of the
budget (:func:`get_competition_calorie_adjustment`), scaled by how far
the athlete sits above walk-around weight (class × 1.07).

Five-slice plan
---------------
:func:`get_spar_plan_targets` extends the budget to fruit and fat.
Protein is anchored to body weight (g/lb by goal), 5 veg and 2 fruit
slices are fixed, and what is left is split between fat and starch::

    TDEE      = BMR × activity[sessions][workday]
    budget    = max(1200, TDEE + goal adjustment)
    remaining = budget − 4 × protein g − 360 (fixed veg + fruit)
    fat g     = remaining × fat % / 9
    starch g  = max(0, remaining × carb % / 4 − 90)

Slices: protein 25 g, starch 26 g, fat 14 g, rounded; at least 2 protein,
1 carb and 1 fat.
"""

from __future__ import annotations

import math
from typing import Optional

from pydantic import BaseModel, Field

from app.pwm.bands import clamp
from app.schemas.profile import (
    ActivityLevel,
    Gender,
    GoalIntensity,
    MaintainPriority,
    SparBiometrics,
    SparGoal,
    SparPlanInput,
    TrainingSessions,
    WeeklyGoal,
    WorkdayActivity,
)
from app.schemas.spar import CompetitionCalorieAdjustment, SliceEquivalents, SliceTargets, SparPlanTargets
from app.schemas.targets import MacroTargets

# ======================================================================
# Constants
# ======================================================================

LB_TO_KG = 0.453592
IN_TO_CM = 2.54

ACTIVITY_MULTIPLIERS: dict[ActivityLevel, float] = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.VERY_ACTIVE: 1.9,
}

GOAL_ADJUSTMENTS: dict[WeeklyGoal, int] = {
    WeeklyGoal.CUT: -500,
    WeeklyGoal.MAINTAIN: 0,
    WeeklyGoal.BUILD: 300,
}

MIN_DAILY_CALORIES = 1200

# Share of the calorie budget per category.
MACRO_SPLIT: dict[str, float] = {"protein": 0.35, "carb": 0.40, "veg": 0.25}

CALORIES_PER_SLICE: dict[str, int] = {"protein": 110, "carb": 120, "veg": 50}

PROTEIN_GRAMS_PER_SLICE = 25
CARB_GRAMS_PER_SLICE = 30
VEG_TO_CARB_SLICE_RATIO = 0.4

WALK_AROUND_MULTIPLIER = 1.07
CAL_PER_LB_OVER = 150
MIN_DEFICIT = -250
MAX_DEFICIT = -750
WATER_CUT_DEFICIT = -500
COMPETITION_SURPLUS = 250
RECOVERY_SURPLUS = 500


# ======================================================================
# Calorie budget
# ======================================================================


def calculate_bmr(weight_lbs: float, height_inches: float, age: int, gender: Gender) -> float:
    """Mifflin-St Jeor basal metabolic rate (kcal/day)."""
    kg = weight_lbs * LB_TO_KG
    cm = height_inches * IN_TO_CM
    base = 10 * kg + 6.25 * cm - 5 * age
    return base + 5 if gender == Gender.MALE else base - 161


def calculate_tdee(bmr: float, activity_level: ActivityLevel) -> float:
    return bmr * ACTIVITY_MULTIPLIERS[activity_level]


def _slices(calories: float, category: str) -> int:
    share = calories * MACRO_SPLIT[category] / CALORIES_PER_SLICE[category]
    return max(1, round(share))


def get_spar_slice_targets(biometrics: SparBiometrics, calorie_adjustment: Optional[int] = None) -> SliceTargets:
    """Daily slice targets for a SPAR athlete.

    *calorie_adjustment* replaces the weekly-goal adjustment when given
    (used by SPAR Competition).
    """
    bmr = calculate_bmr(biometrics.weight_lbs, biometrics.height_inches, biometrics.age, biometrics.gender)
    tdee = calculate_tdee(bmr, biometrics.activity_level)
    adjustment = GOAL_ADJUSTMENTS[biometrics.weekly_goal] if calorie_adjustment is None else calorie_adjustment
    total = max(MIN_DAILY_CALORIES, tdee + adjustment)

    return SliceTargets(
        protein=_slices(total, "protein"),
        carb=_slices(total, "carb"),
        veg=_slices(total, "veg"),
        total_calories=round(total),
        bmr=round(bmr),
        tdee=round(tdee),
        calorie_adjustment=adjustment,
    )


# ======================================================================
# Gram → slice equivalence
# ======================================================================


def _grams_to_slices(grams: float, per_slice: int) -> int:
    if grams <= 0:
        return 0
    return max(1, round(grams / per_slice))


def grams_to_slices(macros: MacroTargets) -> SliceEquivalents:
    """Express a gram-based macro target (its max) as slices."""
    protein = _grams_to_slices(macros.protein.max, PROTEIN_GRAMS_PER_SLICE)
    carb = _grams_to_slices(macros.carbs.max, CARB_GRAMS_PER_SLICE)
    veg = max(1, round(carb * VEG_TO_CARB_SLICE_RATIO)) if protein > 0 and carb > 0 else 0
    return SliceEquivalents(protein=protein, carb=carb, veg=veg)


# ======================================================================
# SPAR Competition
# ======================================================================


def _scaled_deficit(lbs_over: float) -> int:
    return int(clamp(-round(lbs_over * CAL_PER_LB_OVER), MAX_DEFICIT, MIN_DEFICIT))


def get_competition_calorie_adjustment(current_weight: float, target_weight_class: float,
                                       days_until: int, ) -> CompetitionCalorieAdjustment:
    """Calorie adjustment for SPAR Competition on a given day.

    ======================  ====================  ==========================
    Period                  At/below walk-around  Over walk-around
    ======================  ====================  ==========================
    Training (6+ days)      0                     −150/lb, clamped −250…−750
    Water load (3-5 days)   −250                  −150/lb, clamped −250…−750
    Water cut (1-2 days)    −500                  −500
    Competition day         +250                  +250
    Recovery                +500                  +500
    ======================  ====================  ==========================

    Goal and intensity follow the period: recovery gain/aggressive,
    competition gain/lean, water cut lose/aggressive, training at
    walk-around maintain; scaled deficits are lose/aggressive from
    −500 down, lose/lean above.
    """
    lbs_over = current_weight - target_weight_class * WALK_AROUND_MULTIPLIER
    if not math.isfinite(lbs_over):
        lbs_over = 0.0
    over = lbs_over > 0

    def _result(adjustment: int, goal: SparGoal, intensity: GoalIntensity,
                reason: str, ) -> CompetitionCalorieAdjustment:
        return CompetitionCalorieAdjustment(calorie_adjustment=adjustment, lbs_over_walk_around=round(lbs_over, 1),
                                            spar_goal=goal, goal_intensity=intensity, reason=reason, )

    def _scaled(period: str) -> CompetitionCalorieAdjustment:
        deficit = _scaled_deficit(lbs_over)
        intensity = GoalIntensity.AGGRESSIVE if deficit <= WATER_CUT_DEFICIT else GoalIntensity.LEAN
        return _result(deficit, SparGoal.LOSE, intensity,
                       f"{period}: {lbs_over:.1f} lbs over walk-around ({abs(deficit)} cal deficit)", )

    if days_until < 0:
        return _result(RECOVERY_SURPLUS, SparGoal.GAIN, GoalIntensity.AGGRESSIVE,
                       "Recovery: full refeed to restore glycogen and energy", )
    if days_until == 0:
        return _result(COMPETITION_SURPLUS, SparGoal.GAIN, GoalIntensity.LEAN,
                       "Competition day: refuel for performance", )
    if days_until <= 2:
        return _result(WATER_CUT_DEFICIT, SparGoal.LOSE, GoalIntensity.AGGRESSIVE,
                       "Water cut: minimal portions, restrict water", )
    if days_until <= 5:
        if not over:
            return _result(MIN_DEFICIT, SparGoal.LOSE, GoalIntensity.LEAN,
                           "Water load: balanced portions, peak hydration", )
        return _scaled("Water load")
    if not over:
        return _result(0, SparGoal.MAINTAIN, GoalIntensity.LEAN, "Training: at walk-around weight, maintain")
    return _scaled("Training")


# ======================================================================
# Five-slice plan
# ======================================================================


class SparPlanConfig(BaseModel):
    """Protein factor, calorie adjustment and fat/carb split for one goal."""

    protein_per_lb: float = Field(..., ge=0.0)
    calorie_adjustment: int
    fat_percent: float = Field(..., ge=0.0)
    carb_percent: float = Field(..., ge=0.0)


# Keyed by (goal, intensity) for lose/gain and (goal, priority) for maintain.
SPAR_PLAN_CONFIGS: dict[tuple[SparGoal, str], SparPlanConfig] = {
    (SparGoal.LOSE, GoalIntensity.LEAN): SparPlanConfig(
        protein_per_lb=0.85, calorie_adjustment=-250, fat_percent=50, carb_percent=50),
    (SparGoal.LOSE, GoalIntensity.AGGRESSIVE): SparPlanConfig(
        protein_per_lb=0.85, calorie_adjustment=-500, fat_percent=50, carb_percent=50),
    (SparGoal.MAINTAIN, MaintainPriority.GENERAL): SparPlanConfig(
        protein_per_lb=0.65, calorie_adjustment=0, fat_percent=45, carb_percent=55),
    (SparGoal.MAINTAIN, MaintainPriority.PERFORMANCE): SparPlanConfig(
        protein_per_lb=0.75, calorie_adjustment=0, fat_percent=30, carb_percent=70),
    (SparGoal.GAIN, GoalIntensity.LEAN): SparPlanConfig(
        protein_per_lb=0.95, calorie_adjustment=250, fat_percent=30, carb_percent=70),
    (SparGoal.GAIN, GoalIntensity.AGGRESSIVE): SparPlanConfig(
        protein_per_lb=0.95, calorie_adjustment=500, fat_percent=30, carb_percent=70),
}

# [training sessions][workday activity]
PLAN_ACTIVITY_MULTIPLIERS: dict[TrainingSessions, dict[WorkdayActivity, float]] = {
    TrainingSessions.ONE_TWO: {
        WorkdayActivity.MOSTLY_SITTING: 1.2,
        WorkdayActivity.ON_FEET_SOME: 1.35,
        WorkdayActivity.ON_FEET_MOST: 1.35,
    },
    TrainingSessions.THREE_FOUR: {
        WorkdayActivity.MOSTLY_SITTING: 1.35,
        WorkdayActivity.ON_FEET_SOME: 1.55,
        WorkdayActivity.ON_FEET_MOST: 1.55,
    },
    TrainingSessions.FIVE_SIX: {
        WorkdayActivity.MOSTLY_SITTING: 1.55,
        WorkdayActivity.ON_FEET_SOME: 1.55,
        WorkdayActivity.ON_FEET_MOST: 1.725,
    },
    TrainingSessions.SEVEN_PLUS: {
        WorkdayActivity.MOSTLY_SITTING: 1.55,
        WorkdayActivity.ON_FEET_SOME: 1.725,
        WorkdayActivity.ON_FEET_MOST: 1.725,
    },
}

PLAN_SLICE_CALORIES: dict[str, int] = {"protein": 125, "carb": 104, "veg": 32, "fruit": 100, "fat": 126}
PLAN_SLICE_GRAMS: dict[str, int] = {"protein": 25, "carb": 26, "veg": 8, "fruit": 25, "fat": 14}

FIXED_VEG_SLICES = 5
FIXED_FRUIT_SLICES = 2
FIXED_CARB_GRAMS = FIXED_VEG_SLICES * PLAN_SLICE_GRAMS["veg"] + FIXED_FRUIT_SLICES * PLAN_SLICE_GRAMS["fruit"]
FIXED_CALORIES = FIXED_VEG_SLICES * PLAN_SLICE_CALORIES["veg"] + FIXED_FRUIT_SLICES * PLAN_SLICE_CALORIES["fruit"]

MIN_PROTEIN_SLICES = 2


def calculate_lean_mass_bmr(weight_lbs: float, body_fat_percent: float) -> float:
    """Cunningham BMR: ``500 + 22 × lean mass (kg)``."""
    lean_kg = weight_lbs * LB_TO_KG * (1 - body_fat_percent / 100)
    return 500 + 22 * lean_kg


def get_plan_config(goal: SparGoal, intensity: GoalIntensity = GoalIntensity.AGGRESSIVE,
                    priority: MaintainPriority = MaintainPriority.GENERAL, ) -> SparPlanConfig:
    key = (goal, priority) if goal == SparGoal.MAINTAIN else (goal, intensity)
    return SPAR_PLAN_CONFIGS[key]


def get_spar_plan_targets(plan: SparPlanInput,
                          competition: Optional[CompetitionCalorieAdjustment] = None, ) -> SparPlanTargets:
    """Five-slice daily targets.

    With *competition* set, its goal and intensity pick the config and its
    calorie adjustment replaces the config's.
    """
    if plan.body_fat_percent is not None:
        bmr = calculate_lean_mass_bmr(plan.weight_lbs, plan.body_fat_percent)
    else:
        bmr = calculate_bmr(plan.weight_lbs, plan.height_inches, plan.age, plan.gender)
    tdee = bmr * PLAN_ACTIVITY_MULTIPLIERS[plan.training_sessions][plan.workday_activity]

    if competition is not None:
        config = get_plan_config(competition.spar_goal, competition.goal_intensity, plan.maintain_priority)
        adjustment = competition.calorie_adjustment
    else:
        config = get_plan_config(plan.goal, plan.goal_intensity, plan.maintain_priority)
        adjustment = config.calorie_adjustment
    adjusted_tdee = max(MIN_DAILY_CALORIES, tdee + adjustment)

    protein_per_lb = plan.custom_protein_per_lb if plan.custom_protein_per_lb is not None else config.protein_per_lb
    protein_grams = plan.weight_lbs * protein_per_lb
    remaining = adjusted_tdee - protein_grams * 4 - FIXED_CALORIES

    fat_percent = plan.custom_fat_percent if plan.custom_fat_percent is not None else config.fat_percent
    carb_percent = plan.custom_carb_percent if plan.custom_carb_percent is not None else config.carb_percent
    split_total = fat_percent + carb_percent

    fat_grams = remaining * fat_percent / split_total / 9
    carb_grams_total = remaining * carb_percent / split_total / 4
    starch_grams = max(0.0, carb_grams_total - FIXED_CARB_GRAMS)

    protein = round(protein_grams / PLAN_SLICE_GRAMS["protein"])
    carb = round(starch_grams / PLAN_SLICE_GRAMS["carb"])
    fat = round(fat_grams / PLAN_SLICE_GRAMS["fat"])
    slice_calories = (
        protein * PLAN_SLICE_CALORIES["protein"]
        + carb * PLAN_SLICE_CALORIES["carb"]
        + FIXED_CALORIES
        + fat * PLAN_SLICE_CALORIES["fat"]
    )

    return SparPlanTargets(
        protein=max(MIN_PROTEIN_SLICES, protein),
        carb=max(1, carb),
        veg=FIXED_VEG_SLICES,
        fruit=FIXED_FRUIT_SLICES,
        fat=max(1, fat),
        bmr=round(bmr),
        tdee=round(tdee),
        adjusted_tdee=round(adjusted_tdee),
        protein_grams=round(protein_grams),
        carb_grams_total=round(carb_grams_total),
        starch_carb_grams=round(starch_grams),
        fat_grams=round(fat_grams),
        total_slice_calories=round(slice_calories),
        calorie_adjustment=adjustment,
        protein_per_lb=protein_per_lb,
        fat_percent=fat_percent,
        carb_percent=carb_percent,
    )
