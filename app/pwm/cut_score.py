"""
Cut Score: "are you tracking to make weight and perform well?"

A 0-100 composite of three pillars with dynamic weighting:

    WEIGHT    (60-100 %)  Are you tracking to make weight?
    RECOVERY  (0-25 %)    Will you feel good when you get there?
    PROTOCOL  (0-20 %)    Are you following the nutrition / water plan?

The score works with nothing but a scale reading and gets richer as
more data arrives.

Data tiers
----------
Recovery and protocol data are detected per pillar, richest signal wins:

    premium   wearable metric (HRV, RHR, sleep score, strain, recovery
              score) / macro-compliance score
    enhanced  bed/wake time, feel rating / food-type or meal-timing
              compliance
    basic     sleep hours, overnight drift / any food or water logged
    none      pillar excluded, its weight goes to the weight pillar

The flat input is converted into one tagged variant per pillar
(``Basic*`` / ``Enhanced*`` / ``Premium*``) and scoring only ever reads
the variant.

Dynamic weights
---------------
Exactly four weight vectors, selected by ``(has_recovery, has_protocol)``:

    (yes, yes)  0.60 / 0.25 / 0.15
    (yes, no)   0.75 / 0.25 / 0.00
    (no,  yes)  0.80 / 0.00 / 0.20
    (no,  no)   1.00 / 0.00 / 0.00

Guardrail
---------
In competition week, a projection over target caps the composite
(gap > 3 lb → 40, > 1 lb → 55, otherwise 75): good sleep and a clean
diet never mask an unmakeable weight.  Not applied in the training
phase, where the projection is unreliable.
"""

from __future__ import annotations

import datetime
import logging
import math
from typing import Optional

from pydantic import BaseModel, Field

from app.pwm.bands import clamp, first_at_least, first_below
from app.schemas.cut_score import (
    BasicProtocol,
    BasicRecovery,
    CutScoreInput,
    CutScorePillars,
    CutScoreResult,
    DataTier,
    EnhancedProtocol,
    EnhancedRecovery,
    PillarScore,
    PremiumProtocol,
    PremiumRecovery,
    ProtocolData,
    RecoveryData,
    ScoreZone,
)

logger = logging.getLogger(__name__)

# ======================================================================
# Configuration
# ======================================================================


class PillarWeights(BaseModel):
    weight: float = Field(..., ge=0.0, le=1.0)
    recovery: float = Field(..., ge=0.0, le=1.0)
    protocol: float = Field(..., ge=0.0, le=1.0)


# Keyed by (has_recovery, has_protocol).
PILLAR_WEIGHTS: dict[tuple[bool, bool], PillarWeights] = {
    (True, True): PillarWeights(weight=0.60, recovery=0.25, protocol=0.15),
    (True, False): PillarWeights(weight=0.75, recovery=0.25, protocol=0.0),
    (False, True): PillarWeights(weight=0.80, recovery=0.0, protocol=0.20),
    (False, False): PillarWeights(weight=1.0, recovery=0.0, protocol=0.0),
}


class CutScoreConfig(BaseModel):
    """Tunables for the Cut Score computation.

    Passed explicitly to every pillar function; defaults match the published bands.
    """

    neutral_score: float = Field(50.0, ge=0.0, le=100.0)
    training_phase_after_days: int = Field(5, ge=0, description="Days beyond which the athlete is in training phase")
    walk_around_multiplier: float = Field(1.07, ge=1.0)
    intake_flag_hour: int = Field(12, ge=0, le=23, description="No low-intake rationale before this hour")

    # Guardrail: (gap strictly above, cap); fallback cap applies to any positive gap.
    guardrail_caps: list[tuple[float, float]] = Field(default_factory=lambda: [(3.0, 40.0), (1.0, 55.0)])
    guardrail_fallback_cap: float = 75.0


DEFAULT_CUT_SCORE_CONFIG = CutScoreConfig()

# ======================================================================
# Bands
# ======================================================================

# Ascending upper limits: value < threshold.
WALK_AROUND_GAP_BANDS: list[tuple[float, float]] = [(2.0, 75), (4.0, 60), (6.0, 45)]
PROJECTION_GAP_BANDS: list[tuple[float, float]] = [
    (0.5, 90), (1.0, 75), (1.5, 60), (2.0, 50), (3.0, 40), (4.0, 25), (5.0, 15),
]
CAPACITY_USED_BANDS: list[tuple[float, float]] = [(0.5, 85), (0.75, 65), (1.0, 45), (1.25, 25)]
RAW_GAP_BANDS: list[tuple[float, float]] = [(2.0, 65), (5.0, 40)]

# Descending lower limits: value >= threshold.
SLEEP_HOURS_BANDS: list[tuple[float, float]] = [(8.0, 20), (7.0, 10), (6.0, 0), (5.0, -10)]
DRIFT_BANDS: list[tuple[float, float]] = [(1.5, 10), (1.0, 5), (0.5, 0)]
FEEL_BANDS: list[tuple[float, float]] = [(4, 10), (3, 0), (2, -10)]
HRV_BANDS: list[tuple[float, float]] = [(70.0, 10), (50.0, 5), (30.0, 0)]
RHR_ELEVATED_BANDS: list[tuple[float, float]] = [(80.0, -10), (70.0, -5)]
SLEEP_SCORE_BANDS: list[tuple[float, float]] = [(80.0, 10), (60.0, 5), (40.0, 0)]

# (low, high, bonus), inclusive, checked in order.
COMPLIANCE_BANDS: list[tuple[float, float, float]] = [(0.9, 1.1, 20), (0.75, 1.25, 10)]

_LABELS: list[tuple[float, str, ScoreZone]] = [
    (90, "Dialed In", ScoreZone.GREEN),
    (75, "On Track", ScoreZone.GREEN),
    (60, "Manageable", ScoreZone.YELLOW),
    (50, "Tight", ScoreZone.YELLOW),
    (35, "Needs Work", ScoreZone.RED),
    (20, "Behind", ScoreZone.RED),
]


def get_zone_and_label(score: float) -> tuple[str, ScoreZone]:
    """Map a score to its ``(label, zone)``."""
    for threshold, label, zone in _LABELS:
        if score >= threshold:
            return label, zone
    return "Critical", ScoreZone.RED


# ======================================================================
# Tier detection
# ======================================================================


def get_recovery_tier(data: CutScoreInput) -> DataTier:
    wearable = (data.hrv, data.resting_heart_rate, data.sleep_score, data.strain_score, data.recovery_score)
    if any(v is not None for v in wearable):
        return DataTier.PREMIUM
    if data.bed_time is not None or data.wake_time is not None or data.feel_rating is not None:
        return DataTier.ENHANCED
    if data.recent_sleep_hours or data.avg_overnight_drift is not None:
        return DataTier.BASIC
    return DataTier.NONE


def get_protocol_tier(data: CutScoreInput) -> DataTier:
    if data.macro_compliance_score is not None:
        return DataTier.PREMIUM
    if data.correct_food_types is not None or data.meal_timing_score is not None:
        return DataTier.ENHANCED
    if data.food_servings_logged > 0 or data.water_consumed_oz > 0:
        return DataTier.BASIC
    return DataTier.NONE


def build_recovery_data(data: CutScoreInput, tier: DataTier) -> Optional[RecoveryData]:
    """Project the flat input onto the recovery variant for *tier*."""
    if tier == DataTier.NONE:
        return None
    basic = {"sleep_hours": list(data.recent_sleep_hours), "overnight_drift": data.avg_overnight_drift}
    if tier == DataTier.BASIC:
        return BasicRecovery(**basic)
    if tier == DataTier.ENHANCED:
        return EnhancedRecovery(**basic, feel_rating=data.feel_rating)
    return PremiumRecovery(
        **basic,
        feel_rating=data.feel_rating,
        hrv=data.hrv,
        resting_heart_rate=data.resting_heart_rate,
        sleep_score=data.sleep_score,
        strain_score=data.strain_score,
        recovery_score=data.recovery_score,
    )


def build_protocol_data(data: CutScoreInput, tier: DataTier) -> Optional[ProtocolData]:
    """Project the flat input onto the protocol variant for *tier*."""
    if tier == DataTier.NONE:
        return None
    basic = {
        "food_servings_logged": data.food_servings_logged,
        "food_servings_target": data.food_servings_target,
        "water_consumed_oz": data.water_consumed_oz,
        "water_target_oz": data.water_target_oz,
    }
    if tier == DataTier.BASIC:
        return BasicProtocol(**basic)
    if tier == DataTier.ENHANCED:
        return EnhancedProtocol(**basic, correct_food_types=data.correct_food_types,
                                meal_timing_score=data.meal_timing_score, )
    return PremiumProtocol(
        **basic,
        correct_food_types=data.correct_food_types,
        meal_timing_score=data.meal_timing_score,
        macro_compliance_score=data.macro_compliance_score,
    )


def get_pillar_weights(recovery_tier: DataTier, protocol_tier: DataTier) -> PillarWeights:
    return PILLAR_WEIGHTS[(recovery_tier != DataTier.NONE, protocol_tier != DataTier.NONE)]


# ======================================================================
# Weight pillar
# ======================================================================


def _is_training_phase(data: CutScoreInput, config: CutScoreConfig) -> bool:
    return data.days_remaining > config.training_phase_after_days


def _walk_around_gap(current_weight: float, data: CutScoreInput, config: CutScoreConfig) -> float:
    return current_weight - data.target_weight * config.walk_around_multiplier


def compute_weight_pillar(data: CutScoreInput, config: CutScoreConfig = DEFAULT_CUT_SCORE_CONFIG) -> float:
    """Weight pillar (0-100).

    Training phase scores distance above walk-around weight (being over
    the class is expected that far out).  Competition week scores the
    projected gap, falling back to the current gap scaled by remaining
    loss capacity, then to the raw current gap.  No weight data → neutral.
    """
    if _is_training_phase(data, config) and data.current_weight is not None:
        gap = _walk_around_gap(data.current_weight, data, config)
        if gap <= 0:
            return 85.0
        return float(first_below(gap, WALK_AROUND_GAP_BANDS, 30))

    if data.projected_weigh_in is not None:
        gap = data.projected_weigh_in - data.target_weight
        if gap <= 0:
            return 100.0
        return float(first_below(gap, PROJECTION_GAP_BANDS, 10))

    if data.current_weight is not None:
        gap = data.current_weight - data.target_weight
        if gap <= 0:
            return 100.0
        if data.gross_daily_loss and data.gross_daily_loss > 0 and data.days_remaining > 0:
            used = gap / (data.gross_daily_loss * data.days_remaining)
            return float(first_below(used, CAPACITY_USED_BANDS, 10))
        return float(first_below(gap, RAW_GAP_BANDS, 15))

    return config.neutral_score


# ======================================================================
# Recovery pillar
# ======================================================================


def _mean(values: list[float]) -> float:
    return sum(values) / len(values)


def _std_dev(values: list[float]) -> float:
    avg = _mean(values)
    return math.sqrt(sum((v - avg) ** 2 for v in values) / len(values))


def compute_recovery_pillar(data: RecoveryData, config: CutScoreConfig = DEFAULT_CUT_SCORE_CONFIG) -> float:
    """Recovery pillar (0-100), starting from neutral and adjusted per tier."""
    score = config.neutral_score

    if data.sleep_hours:
        score += first_at_least(_mean(data.sleep_hours), SLEEP_HOURS_BANDS, -20)
        if len(data.sleep_hours) >= 3:
            spread = _std_dev(data.sleep_hours)
            if spread < 0.5:
                score += 5
            elif spread > 1.5:
                score -= 5

    if data.overnight_drift is not None:
        score += first_at_least(data.overnight_drift, DRIFT_BANDS, -10)

    if isinstance(data, EnhancedRecovery) and data.feel_rating is not None:
        score += first_at_least(data.feel_rating, FEEL_BANDS, -15)

    if isinstance(data, PremiumRecovery):
        if data.recovery_score is not None:
            score = score * 0.3 + data.recovery_score * 0.7
        else:
            if data.hrv is not None:
                score += first_at_least(data.hrv, HRV_BANDS, -10)
            if data.resting_heart_rate is not None:
                if data.resting_heart_rate <= 55:
                    score += 5
                else:
                    score += first_at_least(data.resting_heart_rate, RHR_ELEVATED_BANDS, 0)
            if data.sleep_score is not None:
                score += first_at_least(data.sleep_score, SLEEP_SCORE_BANDS, -10)

        # High strain during a cut: overreaching.
        if data.strain_score is not None:
            if data.strain_score > 80:
                score -= 10
            elif data.strain_score > 60:
                score -= 5

    return clamp(score, 0.0, 100.0)


# ======================================================================
# Protocol pillar
# ======================================================================


def _compliance_adjustment(ratio: float) -> float:
    for low, high, bonus in COMPLIANCE_BANDS:
        if low <= ratio <= high:
            return bonus
    if ratio < 0.5:
        return -15
    if ratio > 1.5:
        return -10
    return 0


def compute_protocol_pillar(data: ProtocolData, config: CutScoreConfig = DEFAULT_CUT_SCORE_CONFIG) -> float:
    """Protocol pillar (0-100), starting from neutral and adjusted per tier."""
    score = config.neutral_score

    if data.food_servings_target > 0 and data.food_servings_logged > 0:
        score += _compliance_adjustment(data.food_servings_logged / data.food_servings_target)
    if data.water_target_oz > 0 and data.water_consumed_oz > 0:
        score += _compliance_adjustment(data.water_consumed_oz / data.water_target_oz)

    if isinstance(data, EnhancedProtocol):
        if data.correct_food_types is True:
            score += 10
        elif data.correct_food_types is False:
            score -= 10
        if data.meal_timing_score is not None:
            score += (data.meal_timing_score - 50) * 0.2

    if isinstance(data, PremiumProtocol) and data.macro_compliance_score is not None:
        score += (data.macro_compliance_score - 50) * 0.2

    return clamp(score, 0.0, 100.0)


# ======================================================================
# Guardrail
# ======================================================================


def apply_guardrail(raw_score: float, data: CutScoreInput, config: CutScoreConfig = DEFAULT_CUT_SCORE_CONFIG) -> float:
    """Cap the composite when competition week projects over target."""
    if _is_training_phase(data, config) or data.projected_weigh_in is None:
        return raw_score
    gap = data.projected_weigh_in - data.target_weight
    if gap <= 0:
        return raw_score

    cap = config.guardrail_fallback_cap
    for above, band_cap in config.guardrail_caps:
        if gap > above:
            cap = band_cap
            break
    if raw_score > cap:
        logger.debug("Guardrail capped score %.1f → %.1f (projected %.1f lb over)", raw_score, cap, gap)
    return min(raw_score, cap)


# ======================================================================
# Rationale
# ======================================================================


def _weight_rationale(data: CutScoreInput, config: CutScoreConfig) -> str:
    if _is_training_phase(data, config) and data.current_weight is not None:
        gap = _walk_around_gap(data.current_weight, data, config)
        if gap <= 2:
            return "Holding near walk-around weight."
        if gap <= 5:
            return f"{gap:.1f} lbs above walk-around, monitor intake."
        return f"{gap:.1f} lbs above walk-around, consider adjusting."
    if data.projected_weigh_in is not None and data.projected_weigh_in > data.target_weight:
        return f"Projected {data.projected_weigh_in - data.target_weight:.1f} lbs over target at weigh-in."
    if data.current_weight is not None and data.current_weight > data.target_weight:
        return f"{data.current_weight - data.target_weight:.1f} lbs over target, keep tracking."
    return "On track to make weight."


def _recovery_rationale(data: CutScoreInput) -> str:
    if data.recent_sleep_hours:
        avg = _mean(data.recent_sleep_hours)
        if avg < 6:
            return f"Averaging {avg:.1f} hrs sleep, rest is critical for performance."
        if avg < 7:
            return f"Averaging {avg:.1f} hrs sleep, aim for 7-8 hrs."
    if data.avg_overnight_drift is not None and data.avg_overnight_drift < 0.5:
        return "Low overnight drift, could indicate dehydration."
    if data.feel_rating is not None and data.feel_rating <= 2:
        return "Not feeling great, recovery matters for performance."
    if data.recovery_score is not None and data.recovery_score < 40:
        return f"Recovery score is {data.recovery_score:g}%, body needs rest."
    return "Recovery looks good, keep it up."


def _protocol_rationale(data: CutScoreInput, as_of: datetime.datetime, config: CutScoreConfig) -> str:
    afternoon = as_of.hour >= config.intake_flag_hour
    if afternoon and data.water_target_oz > 0 and data.water_consumed_oz < data.water_target_oz * 0.5:
        return "Water intake is well below target for today."
    if afternoon and data.food_servings_target > 0 and data.food_servings_logged < data.food_servings_target * 0.5:
        return "Food intake is well below target, follow the plan."
    if data.food_servings_target > 0 and data.food_servings_logged > data.food_servings_target * 1.5:
        return "Eating significantly over target for today."
    if not afternoon:
        return "Morning, start fueling when ready."
    return "Stay on the nutrition plan."


def get_rationale(pillars: CutScorePillars, data: CutScoreInput, as_of: datetime.datetime,
                  config: CutScoreConfig = DEFAULT_CUT_SCORE_CONFIG, ) -> str:
    """One sentence about the weakest pillar that has data.

    Ties go to weight, then recovery, then protocol.
    """
    active = [(name, pillar) for name, pillar in
              (("weight", pillars.weight), ("recovery", pillars.recovery), ("protocol", pillars.protocol))
              if pillar.has_data]
    if not active:
        return "Log your weight to get started."

    weakest, _ = min(active, key=lambda item: item[1].raw)
    if weakest == "weight":
        return _weight_rationale(data, config)
    if weakest == "recovery":
        return _recovery_rationale(data)
    return _protocol_rationale(data, as_of, config)


# ======================================================================
# Public API
# ======================================================================


def compute_cut_score(data: CutScoreInput, as_of: datetime.datetime,
                      config: CutScoreConfig = DEFAULT_CUT_SCORE_CONFIG, ) -> CutScoreResult:
    """Compute the Cut Score.

    Parameters
    ----------
    data : CutScoreInput
        Flat weight / recovery / protocol inputs.
    as_of : datetime
        "Now" for the athlete.  Only the hour is used (rationale gating).
    config : CutScoreConfig
        Tunables (defaults to :data:`DEFAULT_CUT_SCORE_CONFIG`).
    """
    recovery_tier = get_recovery_tier(data)
    protocol_tier = get_protocol_tier(data)
    weights = get_pillar_weights(recovery_tier, protocol_tier)

    recovery_data = build_recovery_data(data, recovery_tier)
    protocol_data = build_protocol_data(data, protocol_tier)

    has_weight = data.current_weight is not None or data.projected_weigh_in is not None
    weight_raw = compute_weight_pillar(data, config)
    recovery_raw = compute_recovery_pillar(recovery_data, config) if recovery_data is not None else config.neutral_score
    protocol_raw = compute_protocol_pillar(protocol_data, config) if protocol_data is not None else config.neutral_score

    pillars = CutScorePillars(
        weight=PillarScore(raw=weight_raw, weighted=weight_raw * weights.weight, weight=weights.weight,
                           has_data=has_weight, tier=DataTier.BASIC if has_weight else DataTier.NONE, ),
        recovery=PillarScore(raw=recovery_raw, weighted=recovery_raw * weights.recovery, weight=weights.recovery,
                             has_data=recovery_data is not None, tier=recovery_tier, ),
        protocol=PillarScore(raw=protocol_raw, weighted=protocol_raw * weights.protocol, weight=weights.protocol,
                             has_data=protocol_data is not None, tier=protocol_tier, ),
    )

    raw_score = pillars.weight.weighted + pillars.recovery.weighted + pillars.protocol.weighted
    raw_score = apply_guardrail(raw_score, data, config)

    score = int(round(clamp(raw_score, 0.0, 100.0)))
    label, zone = get_zone_and_label(score)

    return CutScoreResult(
        score=score,
        label=label,
        zone=zone,
        rationale=get_rationale(pillars, data, as_of, config),
        pillars=pillars,
    )
