"""
Cut Score schemas.

The Cut Score (0-100) answers "are you tracking to make weight and
perform well?" from three pillars:

    WEIGHT     Are you tracking to make weight?
    RECOVERY   Will you feel good when you get there?
    PROTOCOL   Are you following the nutrition / water plan?

Recovery and protocol data arrive in tiers (basic → enhanced → premium).
The flat :class:`CutScoreInput` is what callers send; the engine converts
it to one tagged tier variant per pillar before scoring, so a scoring
function only ever sees the fields its tier actually uses.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field

from app.schemas.profile import AthleteProfile, DailyTrackingRecord, WeightLogEntry


class DataTier(str, Enum):
    NONE = "none"
    BASIC = "basic"
    ENHANCED = "enhanced"
    PREMIUM = "premium"


class ScoreZone(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


# ======================================================================
# Request
# ======================================================================


class CutScoreInput(BaseModel):
    """Flat request as assembled by the application layer."""

    # -- Weight pillar --
    projected_weigh_in: Optional[float] = Field(None, description="Projected weigh-in weight (lb)")
    target_weight: float = Field(..., ge=0.0, description="Weight that must be made (lb)")
    current_weight: Optional[float] = Field(None, ge=0.0, description="Most recent weight (lb)")
    gross_daily_loss: Optional[float] = Field(
        None, description="Daily loss capacity: overnight drift + practice (lb)",
    )
    days_remaining: int = Field(..., description="Days until weigh-in")

    # -- Recovery pillar --
    recent_sleep_hours: list[float] = Field(
        default_factory=list, description="Newest first, up to 5 nights",
    )
    avg_overnight_drift: Optional[float] = Field(None, description="Average overnight loss (lb)")
    bed_time: Optional[str] = Field(None, description="HH:MM")
    wake_time: Optional[str] = Field(None, description="HH:MM")
    feel_rating: Optional[int] = Field(None, ge=1, le=5, description="1 = terrible, 5 = great")
    hrv: Optional[float] = Field(None, ge=0.0, description="Heart rate variability (ms)")
    resting_heart_rate: Optional[float] = Field(None, ge=0.0)
    sleep_score: Optional[float] = Field(None, ge=0.0, le=100.0)
    strain_score: Optional[float] = Field(None, ge=0.0)
    recovery_score: Optional[float] = Field(None, ge=0.0, le=100.0)

    # -- Protocol pillar --
    food_servings_logged: float = Field(0.0, ge=0.0)
    food_servings_target: float = Field(0.0, ge=0.0)
    water_consumed_oz: float = Field(0.0, ge=0.0)
    water_target_oz: float = Field(0.0, ge=0.0)
    correct_food_types: Optional[bool] = None
    meal_timing_score: Optional[float] = Field(None, ge=0.0, le=100.0)
    macro_compliance_score: Optional[float] = Field(None, ge=0.0, le=100.0)


# ======================================================================
# Tier variants
# ======================================================================


class BasicRecovery(BaseModel):
    tier: Literal["basic"] = "basic"
    sleep_hours: list[float] = Field(default_factory=list)
    overnight_drift: Optional[float] = None


class EnhancedRecovery(BasicRecovery):
    tier: Literal["enhanced"] = "enhanced"  # type: ignore[assignment]
    feel_rating: Optional[int] = None


class PremiumRecovery(EnhancedRecovery):
    tier: Literal["premium"] = "premium"  # type: ignore[assignment]
    hrv: Optional[float] = None
    resting_heart_rate: Optional[float] = None
    sleep_score: Optional[float] = None
    strain_score: Optional[float] = None
    recovery_score: Optional[float] = None


class BasicProtocol(BaseModel):
    tier: Literal["basic"] = "basic"
    food_servings_logged: float = 0.0
    food_servings_target: float = 0.0
    water_consumed_oz: float = 0.0
    water_target_oz: float = 0.0


class EnhancedProtocol(BasicProtocol):
    tier: Literal["enhanced"] = "enhanced"  # type: ignore[assignment]
    correct_food_types: Optional[bool] = None
    meal_timing_score: Optional[float] = None


class PremiumProtocol(EnhancedProtocol):
    tier: Literal["premium"] = "premium"  # type: ignore[assignment]
    macro_compliance_score: Optional[float] = None


RecoveryData = Union[PremiumRecovery, EnhancedRecovery, BasicRecovery]
ProtocolData = Union[PremiumProtocol, EnhancedProtocol, BasicProtocol]


# ======================================================================
# Response
# ======================================================================


class PillarScore(BaseModel):
    """Diagnostic detail for one pillar."""

    raw: float = Field(..., ge=0.0, le=100.0, description="Score before weighting")
    weighted: float = Field(..., ge=0.0, description="raw × weight")
    weight: float = Field(..., ge=0.0, le=1.0, description="Dynamic weight applied")
    has_data: bool
    tier: DataTier


class CutScorePillars(BaseModel):
    weight: PillarScore
    recovery: PillarScore
    protocol: PillarScore


class CutScoreResult(BaseModel):
    score: int = Field(..., ge=0, le=100)
    label: str = Field(..., description="Dialed In, On Track, Manageable, Tight, Needs Work, Behind, Critical")
    zone: ScoreZone
    rationale: str = Field(..., description="One sentence naming what drives the score")
    pillars: CutScorePillars


# ======================================================================
# Log-derived metrics
# ======================================================================


class DriftMetrics(BaseModel):
    """Average losses derived from paired weight-log entries (lb, positive = lost)."""

    avg_overnight_drift: Optional[float] = Field(None, description="Evening reading → next morning")
    avg_practice_loss: Optional[float] = Field(None, description="Pre-practice → post-practice")
    gross_daily_loss: Optional[float] = Field(None, description="Overnight drift + practice loss")
    overnight_pairs: int = 0
    practice_pairs: int = 0


class CutScoreFromLogsRequest(BaseModel):
    """Raw application data for one athlete, assembled server-side."""

    profile: AthleteProfile
    weight_logs: list[WeightLogEntry] = Field(default_factory=list)
    tracking: Optional[DailyTrackingRecord] = Field(None, description="Today's tracking record")
