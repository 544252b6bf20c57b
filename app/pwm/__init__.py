"""PWM core engines: protocol rule tables, SPAR slices, Cut Score."""

from app.pwm.cut_score import CutScoreConfig, compute_cut_score
from app.pwm.protocols import ProtocolRegistry, ProtocolTableError
from app.pwm.targets import get_day_targets

__all__ = ["CutScoreConfig", "ProtocolRegistry", "ProtocolTableError", "compute_cut_score", "get_day_targets"]
