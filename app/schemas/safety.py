"""Weight-cut safety assessment schemas."""

from enum import Enum

from pydantic import BaseModel, Field


class SafetyLevel(str, Enum):
    SAFE = "safe"
    CAUTION = "caution"
    WARNING = "warning"
    DANGER = "danger"


class SafetyAssessment(BaseModel):
    level: SafetyLevel
    message: str
    lbs_over: float = Field(..., description="Pounds above target (0 when at or under)")
    percent_over: float = Field(..., description="Percent above target (0 when at or under)")
