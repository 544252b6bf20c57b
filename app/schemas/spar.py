"""
SPAR (portion-based) schemas.

A *slice* is a hand-sized portion:

    protein   1 palm  (~110 kcal)
    carb      1 fist  (~120 kcal)
    veg       1 fist  (~50 kcal)

The five-slice plan adds fruit (1 piece) and fat (1 thumb) and re-prices
every slice; see :mod:`app.pwm.spar`.
"""

from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.profile import GoalIntensity, SparBiometrics, SparGoal, SparPlanInput


class SliceTargets(BaseModel):
    """Daily slice targets derived from BMR → TDEE → calorie split."""

    protein: int = Field(..., ge=0)
    carb: int = Field(..., ge=0)
    veg: int = Field(..., ge=0)
    total_calories: int = Field(..., description="Adjusted daily calorie budget")
    bmr: int
    tdee: int
    calorie_adjustment: int = Field(0, description="Goal or competition adjustment applied (kcal)")


class SliceEquivalents(BaseModel):
    """Gram-based macro targets expressed as slices."""

    protein: int = Field(..., ge=0)
    carb: int = Field(..., ge=0)
    veg: int = Field(..., ge=0)


class SparPlanTargets(BaseModel):
    """Five-slice daily targets plus the numbers behind them."""

    protein: int = Field(..., ge=0, description="Palms")
    carb: int = Field(..., ge=0, description="Fists of starch")
    veg: int = Field(..., ge=0, description="Fists of vegetables")
    fruit: int = Field(..., ge=0, description="Pieces of fruit")
    fat: int = Field(..., ge=0, description="Thumbs of fat")

    bmr: int
    tdee: int
    adjusted_tdee: int
    protein_grams: int
    carb_grams_total: int
    starch_carb_grams: int
    fat_grams: int
    total_slice_calories: int

    calorie_adjustment: int
    protein_per_lb: float
    fat_percent: float
    carb_percent: float

    @property
    def total_slices(self) -> int:
        return self.protein + self.carb + self.veg + self.fruit + self.fat


class CompetitionCalorieAdjustment(BaseModel):
    """Calorie adjustment for the SPAR competition protocol.

    ``spar_goal`` / ``goal_intensity`` select the five-slice plan config
    used alongside the adjustment.
    """

    calorie_adjustment: int
    lbs_over_walk_around: float
    spar_goal: SparGoal
    goal_intensity: GoalIntensity
    reason: str


class SliceRequest(BaseModel):
    biometrics: SparBiometrics
    calorie_adjustment: Optional[int] = Field(
        None, description="Replaces the weekly-goal adjustment (kcal) when given",
    )


class CompetitionContext(BaseModel):
    current_weight: float = Field(..., gt=0.0)
    target_weight_class: float = Field(..., gt=0.0)
    days_until: int = Field(..., description="Days until weigh-in (negative = recovery)")


class SparPlanRequest(BaseModel):
    plan: SparPlanInput
    competition: Optional[CompetitionContext] = Field(
        None, description="Apply the SPAR Competition adjustment for this day",
    )
