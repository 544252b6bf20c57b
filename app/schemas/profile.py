"""
Athlete profile, weight log and daily tracking schemas.

These are the shapes the surrounding application hands to the engine.
The engine never stores them: profiles, logs and tracking records are
read-only inputs for a single computation.

Weight classes are the standard folkstyle set (lb)::

    125  133  141  149  157  165  174  184  197  285
"""

from __future__ import annotations

import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

WEIGHT_CLASSES: list[int] = [125, 133, 141, 149, 157, 165, 174, 184, 197, 285]


class Protocol(str, Enum):
    """Nutrition / weight regimen selected per athlete."""

    AGGRESSIVE = "aggressive"  # extreme cut, extended zero-protein window
    STANDARD_WEEKLY = "standard_weekly"  # rapid weekly cut
    OPTIMAL = "optimal"  # gentle cut, protein protected
    BUILD = "build"  # off-season gain
    SPAR = "spar"  # portion-based, no competition schedule
    SPAR_COMPETITION = "spar_competition"  # portions + competition water/weight


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class ActivityLevel(str, Enum):
    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    VERY_ACTIVE = "very_active"


class WeeklyGoal(str, Enum):
    CUT = "cut"
    MAINTAIN = "maintain"
    BUILD = "build"


class WeightLogType(str, Enum):
    MORNING = "morning"
    PRE_PRACTICE = "pre-practice"
    POST_PRACTICE = "post-practice"
    BEFORE_BED = "before-bed"
    WEIGH_IN = "weigh-in"
    CHECK_IN = "check-in"
    EXTRA_WORKOUT_BEFORE = "extra-workout-before"
    EXTRA_WORKOUT_AFTER = "extra-workout-after"
    RECOVERY = "recovery"


class SparBiometrics(BaseModel):
    """Inputs for the portion-based (SPAR) calorie budget."""

    weight_lbs: float = Field(..., ge=0.0, description="Body weight (lb)")
    height_inches: float = Field(..., ge=0.0, description="Height (in)")
    age: int = Field(..., ge=0, le=120)
    gender: Gender = Gender.MALE
    activity_level: ActivityLevel = ActivityLevel.ACTIVE
    weekly_goal: WeeklyGoal = WeeklyGoal.MAINTAIN


class SparGoal(str, Enum):
    LOSE = "lose"
    MAINTAIN = "maintain"
    GAIN = "gain"


class GoalIntensity(str, Enum):
    LEAN = "lean"
    AGGRESSIVE = "aggressive"


class MaintainPriority(str, Enum):
    GENERAL = "general"
    PERFORMANCE = "performance"


class TrainingSessions(str, Enum):
    """Training sessions per week."""

    ONE_TWO = "1-2"
    THREE_FOUR = "3-4"
    FIVE_SIX = "5-6"
    SEVEN_PLUS = "7+"


class WorkdayActivity(str, Enum):
    MOSTLY_SITTING = "mostly_sitting"
    ON_FEET_SOME = "on_feet_some"
    ON_FEET_MOST = "on_feet_most"


class SparPlanInput(BaseModel):
    """Inputs for the five-slice SPAR plan (protein, carb, veg, fruit, fat).

    ``body_fat_percent`` switches BMR to the lean-mass (Cunningham)
    formula.  The ``custom_*`` fields override the goal's protein factor
    and fat/carb split.
    """

    weight_lbs: float = Field(..., ge=0.0, description="Body weight (lb)")
    height_inches: float = Field(..., ge=0.0, description="Height (in)")
    age: int = Field(..., ge=0, le=120)
    gender: Gender = Gender.MALE
    training_sessions: TrainingSessions = TrainingSessions.THREE_FOUR
    workday_activity: WorkdayActivity = WorkdayActivity.MOSTLY_SITTING
    goal: SparGoal = SparGoal.MAINTAIN
    goal_intensity: GoalIntensity = GoalIntensity.AGGRESSIVE
    maintain_priority: MaintainPriority = MaintainPriority.GENERAL
    goal_weight_lbs: Optional[float] = Field(None, ge=0.0)
    body_fat_percent: Optional[float] = Field(None, gt=0.0, lt=100.0)
    custom_protein_per_lb: Optional[float] = Field(None, ge=0.0)
    custom_fat_percent: Optional[float] = Field(None, ge=0.0)
    custom_carb_percent: Optional[float] = Field(None, ge=0.0)

    @model_validator(mode="after")
    def _split_not_empty(self) -> "SparPlanInput":
        if self.custom_fat_percent == 0 and self.custom_carb_percent == 0:
            raise ValueError("Custom fat and carb percents cannot both be zero")
        return self


class AthleteProfile(BaseModel):
    """Athlete profile as maintained by the application state layer."""

    current_weight: float = Field(..., ge=0.0, description="Most recent body weight (lb)")
    target_weight_class: int = Field(..., description="Competition weight class (lb)")
    protocol: Protocol = Protocol.STANDARD_WEEKLY
    weigh_in_date: datetime.date
    weigh_in_time: Optional[datetime.time] = None
    simulated_date: Optional[datetime.date] = Field(
        None,
        description="Override for 'today' used in testing / previewing",
    )
    biometrics: Optional[SparBiometrics] = None
    spar_plan: Optional[SparPlanInput] = Field(
        None,
        description="Five-slice SPAR inputs; preferred over biometrics when set",
    )

    @field_validator("target_weight_class")
    @classmethod
    def _known_weight_class(cls, value: int) -> int:
        if value not in WEIGHT_CLASSES:
            raise ValueError(
                f"Unknown weight class {value}. Available: {WEIGHT_CLASSES}"
            )
        return value


class WeightLogEntry(BaseModel):
    """A single timestamped scale reading."""

    timestamp: datetime.datetime
    weight: float = Field(..., ge=0.0)
    type: WeightLogType = WeightLogType.MORNING
    sleep_hours: Optional[float] = Field(
        None, ge=0.0, le=24.0,
        description="Hours slept the night before (morning entries)",
    )


class FoodLogEntry(BaseModel):
    """One logged food item contributing to a daily record."""

    name: str
    timestamp: datetime.datetime
    carbs: float = Field(0.0, ge=0.0)
    protein: float = Field(0.0, ge=0.0)
    water_oz: float = Field(0.0, ge=0.0)
    protein_slices: int = Field(0, ge=0)
    carb_slices: int = Field(0, ge=0)
    veg_slices: int = Field(0, ge=0)
    fruit_slices: int = Field(0, ge=0)
    fat_slices: int = Field(0, ge=0)


class DailyTrackingRecord(BaseModel):
    """Per-calendar-day consumption aggregate.

    Aggregate fields are kept equal to the sum of ``food_log`` by the
    application; the engine treats them as ground truth.
    """

    date: datetime.date
    carbs_consumed: float = Field(0.0, ge=0.0)
    protein_consumed: float = Field(0.0, ge=0.0)
    water_consumed: float = Field(0.0, ge=0.0)
    protein_slices: int = Field(0, ge=0)
    carb_slices: int = Field(0, ge=0)
    veg_slices: int = Field(0, ge=0)
    fruit_slices: int = Field(0, ge=0)
    fat_slices: int = Field(0, ge=0)
    food_log: list[FoodLogEntry] = Field(default_factory=list)

    @property
    def total_slices(self) -> int:
        return (
            self.protein_slices + self.carb_slices + self.veg_slices
            + self.fruit_slices + self.fat_slices
        )
