"""
Cut Score input assembly from raw weight logs and daily tracking.

The scoring engine takes a flat :class:`CutScoreInput`; this module
builds one from what the application actually stores:

- **current weight**: the most recent reading on or before ``as_of``;
  for trend points (one reading per day) morning / weigh-in readings win
  over other types, then the latest reading.
- **overnight drift**: an evening reading (post-practice or before-bed)
  followed by a morning reading 6-16 h later.
- **practice loss**: a pre-practice reading followed by a post-practice
  reading under 4 h later.
- **gross daily loss**: drift + practice loss; with days remaining this
  gives the projected weigh-in weight.
- **sleep history**: ``sleep_hours`` recorded on morning entries, newest
  first.
- **protocol compliance**: servings and water from the day's
  :class:`DailyTrackingRecord` against the day's targets.  SPAR athletes
  with a five-slice plan count fruit and fat slices too.

Only entries stamped at or before ``as_of`` are considered.  Stamps are
aligned to ``as_of`` first (naive values read as local time), so logs
sent with a UTC offset mix freely with a naive reference time.
"""

from __future__ import annotations

import datetime
from typing import Iterable, Optional

from app.pwm.days import days_until_for_profile
from app.pwm.spar import (
    get_competition_calorie_adjustment,
    get_spar_plan_targets,
    get_spar_slice_targets,
    grams_to_slices,
)
from app.pwm.targets import get_water_target, get_weight_adjusted_macros
from app.schemas.cut_score import CutScoreInput, DriftMetrics
from app.schemas.profile import AthleteProfile, DailyTrackingRecord, Protocol, WeightLogEntry, WeightLogType

# Lower is preferred when picking one reading per day.
TYPE_PRIORITY: dict[WeightLogType, int] = {
    WeightLogType.WEIGH_IN: 0,
    WeightLogType.MORNING: 1,
    WeightLogType.CHECK_IN: 2,
    WeightLogType.PRE_PRACTICE: 3,
    WeightLogType.POST_PRACTICE: 4,
    WeightLogType.BEFORE_BED: 5,
    WeightLogType.EXTRA_WORKOUT_BEFORE: 6,
    WeightLogType.EXTRA_WORKOUT_AFTER: 7,
    WeightLogType.RECOVERY: 8,
}

EVENING_TYPES = frozenset({WeightLogType.POST_PRACTICE, WeightLogType.BEFORE_BED})

OVERNIGHT_MIN_HOURS = 6.0
OVERNIGHT_MAX_HOURS = 16.0
PRACTICE_MAX_HOURS = 4.0

LOOKBACK_DAYS = 14
MAX_SLEEP_NIGHTS = 5


# ======================================================================
# Reading selection
# ======================================================================


def _aligned(moment: datetime.datetime, reference: datetime.datetime) -> datetime.datetime:
    """*moment* with the same tz-awareness as *reference*.

    Naive values are read as local time.
    """
    if (moment.tzinfo is None) == (reference.tzinfo is None):
        return moment
    if reference.tzinfo is None:
        return moment.astimezone().replace(tzinfo=None)
    return moment.astimezone(reference.tzinfo)


def _up_to(entries: Iterable[WeightLogEntry], as_of: datetime.datetime) -> list[WeightLogEntry]:
    """Entries at or before *as_of*, oldest first, stamped like *as_of*."""
    aligned = (e.model_copy(update={"timestamp": _aligned(e.timestamp, as_of)}) for e in entries)
    return sorted((e for e in aligned if e.timestamp <= as_of), key=lambda e: e.timestamp)


def latest_reading(entries: Iterable[WeightLogEntry], as_of: datetime.datetime) -> Optional[WeightLogEntry]:
    """Most recent reading at or before *as_of*."""
    history = _up_to(entries, as_of)
    return history[-1] if history else None


def trend_reading(entries: Iterable[WeightLogEntry], day: datetime.date) -> Optional[WeightLogEntry]:
    """The reading that represents *day* on a trend line."""
    same_day = [e for e in entries if e.timestamp.date() == day]
    if not same_day:
        return None
    return min(same_day, key=lambda e: (TYPE_PRIORITY[e.type], -e.timestamp.timestamp()))


# ======================================================================
# Drift metrics
# ======================================================================


def _hours_between(earlier: WeightLogEntry, later: WeightLogEntry) -> float:
    return (later.timestamp - earlier.timestamp).total_seconds() / 3600.0


def compute_drift_metrics(entries: Iterable[WeightLogEntry], as_of: datetime.datetime,
                          lookback_days: int = LOOKBACK_DAYS, ) -> DriftMetrics:
    """Average overnight and practice losses from consecutive log pairs."""
    since = as_of - datetime.timedelta(days=lookback_days)
    history = [e for e in _up_to(entries, as_of) if e.timestamp >= since]

    overnight: list[float] = []
    practice: list[float] = []
    for earlier, later in zip(history, history[1:]):
        hours = _hours_between(earlier, later)
        if earlier.type in EVENING_TYPES and later.type == WeightLogType.MORNING:
            if OVERNIGHT_MIN_HOURS < hours < OVERNIGHT_MAX_HOURS:
                overnight.append(earlier.weight - later.weight)
        elif earlier.type == WeightLogType.PRE_PRACTICE and later.type == WeightLogType.POST_PRACTICE:
            if hours < PRACTICE_MAX_HOURS:
                practice.append(earlier.weight - later.weight)

    avg_drift = round(sum(overnight) / len(overnight), 2) if overnight else None
    avg_practice = round(sum(practice) / len(practice), 2) if practice else None

    gross: Optional[float] = None
    if avg_drift is not None or avg_practice is not None:
        gross = round((avg_drift or 0.0) + (avg_practice or 0.0), 2)

    return DriftMetrics(
        avg_overnight_drift=avg_drift,
        avg_practice_loss=avg_practice,
        gross_daily_loss=gross,
        overnight_pairs=len(overnight),
        practice_pairs=len(practice),
    )


def project_weigh_in(current_weight: float, gross_daily_loss: Optional[float], days_remaining: int) -> Optional[float]:
    """Projected weigh-in weight, ``None`` without a positive loss rate."""
    if gross_daily_loss is None or gross_daily_loss <= 0:
        return None
    if days_remaining <= 0:
        return round(current_weight, 1)
    return round(current_weight - gross_daily_loss * days_remaining, 1)


def recent_sleep_hours(entries: Iterable[WeightLogEntry], as_of: datetime.datetime,
                       nights: int = MAX_SLEEP_NIGHTS, ) -> list[float]:
    """Sleep hours from morning entries, newest first."""
    hours = [e.sleep_hours for e in _up_to(entries, as_of)
             if e.type == WeightLogType.MORNING and e.sleep_hours is not None]
    return hours[::-1][:nights]


# ======================================================================
# Protocol compliance targets
# ======================================================================


def servings_target(profile: AthleteProfile, days_until: int, current_weight: float) -> int:
    """Total slices the athlete should eat today."""
    if profile.protocol in (Protocol.SPAR, Protocol.SPAR_COMPETITION):
        adjustment = None
        if profile.protocol == Protocol.SPAR_COMPETITION:
            adjustment = get_competition_calorie_adjustment(current_weight, profile.target_weight_class,
                                                            days_until, )
        if profile.spar_plan is not None:
            return get_spar_plan_targets(profile.spar_plan, adjustment).total_slices
        if profile.biometrics is not None:
            kcal = adjustment.calorie_adjustment if adjustment is not None else None
            slices = get_spar_slice_targets(profile.biometrics, calorie_adjustment=kcal)
            return slices.protein + slices.carb + slices.veg

    macros = get_weight_adjusted_macros(current_weight, profile.protocol, days_until, current_weight,
                                        profile.target_weight_class, )
    slices = grams_to_slices(macros)
    return slices.protein + slices.carb + slices.veg


# ======================================================================
# Assembly
# ======================================================================


def assemble_cut_score_input(profile: AthleteProfile, entries: list[WeightLogEntry],
                             tracking: Optional[DailyTrackingRecord], as_of: datetime.datetime, ) -> CutScoreInput:
    """Build a :class:`CutScoreInput` for *profile* as of *as_of*."""
    days_until = days_until_for_profile(profile, as_of)
    reading = latest_reading(entries, as_of)
    current = reading.weight if reading is not None else None

    drift = compute_drift_metrics(entries, as_of)
    projected = project_weigh_in(current, drift.gross_daily_loss, days_until) if current is not None else None

    basis = current if current is not None else profile.current_weight
    return CutScoreInput(
        projected_weigh_in=projected,
        target_weight=profile.target_weight_class,
        current_weight=current,
        gross_daily_loss=drift.gross_daily_loss,
        days_remaining=days_until,
        recent_sleep_hours=recent_sleep_hours(entries, as_of),
        avg_overnight_drift=drift.avg_overnight_drift,
        food_servings_logged=tracking.total_slices if tracking is not None else 0,
        food_servings_target=servings_target(profile, days_until, basis),
        water_consumed_oz=tracking.water_consumed if tracking is not None else 0.0,
        water_target_oz=get_water_target(days_until, basis),
    )
