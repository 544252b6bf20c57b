"""Protocol library listing schemas."""

from pydantic import BaseModel, Field

from app.schemas.profile import Protocol
from app.schemas.targets import FoodPhaseFlags, MacroTargets, ProtocolPhase


class ProtocolSummary(BaseModel):
    protocol: Protocol
    name: str
    description: str
    cutting: bool = Field(..., description="Weight multipliers and water-loading allowance apply")
    food_phase: bool = Field(..., description="Fructose / glucose phases and behind-schedule override apply")


class ProtocolDay(BaseModel):
    """A protocol's prescription for one day at a reference body weight."""

    protocol: Protocol
    days_until_weigh_in: int
    phase: ProtocolPhase
    phase_flags: FoodPhaseFlags
    macros: MacroTargets
