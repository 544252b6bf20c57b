"""
Day-target schemas produced by the protocol rule engine.

Every value here is a prescription for a single calendar day, indexed by
the signed number of days until weigh-in.
"""

from __future__ import annotations

import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.profile import AthleteProfile, Protocol


class GramRange(BaseModel):
    """Inclusive gram range."""

    min: int = Field(..., ge=0)
    max: int = Field(..., ge=0)


class MacroTargets(BaseModel):
    """Carbohydrate / protein prescription for the day."""

    carbs: GramRange
    protein: GramRange
    ratio: str = Field(..., description="Short label for the carb/protein emphasis")


class WeightAdjustedMacros(MacroTargets):
    """Macro targets after the behind-schedule override."""

    warning: Optional[str] = Field(
        None,
        description="DO NOT EAT / survival only / heavy restriction / moderate reduction",
    )
    percent_over: Optional[float] = None
    effective_percent_over: Optional[float] = None


class WeightTarget(BaseModel):
    """Target scale weight for the day."""

    base: int = Field(..., description="Strict target (lb)")
    with_water_load: Optional[int] = Field(
        None,
        description="Target including the maximum water-loading allowance",
    )
    water_load_range: Optional[tuple[int, int]] = Field(
        None,
        description="Loading-inclusive range (base + 2, base + 4)",
    )


class SodiumTarget(BaseModel):
    target: int = Field(..., ge=0, description="Sodium (mg)")
    label: str
    color: str


class RehydrationPlan(BaseModel):
    fluid_min: int = Field(..., ge=0, description="oz")
    fluid_max: int = Field(..., ge=0, description="oz")
    sodium_min: int = Field(..., ge=0, description="mg")
    sodium_max: int = Field(..., ge=0, description="mg")


class FoodPhaseFlags(BaseModel):
    """Categorical food-phase guidance for the day."""

    fructose_only: bool = False
    glucose: bool = False
    zero_fiber: bool = False
    competition: bool = False
    recovery: bool = False


class ProtocolPhase(BaseModel):
    phase: str
    food_tip: str


class DayTargets(BaseModel):
    """Everything the rule engine prescribes for one athlete on one day."""

    protocol: Protocol
    days_until_weigh_in: int
    weight: WeightTarget
    macros: WeightAdjustedMacros
    water_oz: int = Field(..., ge=0)
    sodium: SodiumTarget
    phase_flags: FoodPhaseFlags
    phase: ProtocolPhase


class WaterTarget(BaseModel):
    days_until_weigh_in: int
    water_oz: int = Field(..., ge=0)
    cap_oz: int


class DayTargetsRequest(BaseModel):
    profile: AthleteProfile
    as_of: Optional[datetime.date] = Field(
        None, description="Reference date (defaults to today; ignored when the profile has a simulated_date)",
    )
