"""Pydantic schemas for request/response validation."""

from app.schemas.profile import (
    WEIGHT_CLASSES,
    AthleteProfile,
    DailyTrackingRecord,
    FoodLogEntry,
    Protocol,
    SparBiometrics,
    SparPlanInput,
    WeightLogEntry,
    WeightLogType,
)
from app.schemas.targets import (
    DayTargets,
    FoodPhaseFlags,
    GramRange,
    MacroTargets,
    RehydrationPlan,
    SodiumTarget,
    WeightAdjustedMacros,
    WeightTarget,
)
from app.schemas.spar import SliceEquivalents, SliceTargets, SparPlanTargets
from app.schemas.cut_score import CutScoreInput, CutScoreResult, PillarScore

__all__ = [
    "WEIGHT_CLASSES",
    "AthleteProfile",
    "DailyTrackingRecord",
    "FoodLogEntry",
    "Protocol",
    "SparBiometrics",
    "SparPlanInput",
    "WeightLogEntry",
    "WeightLogType",
    "DayTargets",
    "FoodPhaseFlags",
    "GramRange",
    "MacroTargets",
    "RehydrationPlan",
    "SodiumTarget",
    "WeightAdjustedMacros",
    "WeightTarget",
    "SliceEquivalents",
    "SliceTargets",
    "SparPlanTargets",
    "CutScoreInput",
    "CutScoreResult",
    "PillarScore",
]
