"""What does a competition week look like for a 133 lb wrestler?

Walks a sample athlete on the standard weekly protocol from 7 days out
to the day after weigh-in, with a plausible weight log, and prints the
day's targets and Cut Score.

Usage:
    python scripts/simulate_week.py
"""

import datetime
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from app.pwm.cut_score import compute_cut_score
from app.pwm.logs import assemble_cut_score_input
from app.pwm.safety import assess_weight_cut_safety
from app.pwm.spar import grams_to_slices
from app.pwm.targets import get_day_targets, get_rehydration_plan
from app.schemas.profile import AthleteProfile, DailyTrackingRecord, Protocol, WeightLogEntry, WeightLogType

WEIGH_IN = datetime.date(2026, 2, 14)
WEIGHT_CLASS = 133

# ─── Sample week: (days out, morning, pre-practice, post-practice, before bed, sleep) ───
WEEK = [
    (7, 143.0, 144.2, 141.8, 143.0, 7.5),
    (6, 142.2, 143.4, 141.0, 142.2, 8.0),
    (5, 141.6, 143.0, 140.4, 141.8, 7.0),
    (4, 141.0, 142.6, 139.8, 141.2, 7.5),
    (3, 140.2, 141.8, 139.0, 140.4, 6.5),
    (2, 138.8, 139.8, 137.2, 137.8, 6.0),
    (1, 136.4, 137.0, 134.6, 134.8, 7.0),
    (0, 133.0, None, None, None, 8.0),
]

# Fraction of the day's slice target actually eaten.
COMPLIANCE = 0.9


def build_logs():
    """Expand the sample week into timestamped weight-log entries."""
    entries = []
    for days_out, morning, pre, post, bed, sleep in WEEK:
        day = WEIGH_IN - datetime.timedelta(days=days_out)
        at = lambda hour: datetime.datetime.combine(day, datetime.time(hour))  # noqa: E731
        entries.append(WeightLogEntry(timestamp=at(7), weight=morning, type=WeightLogType.MORNING,
                                      sleep_hours=sleep, ))
        if pre is not None:
            entries.append(WeightLogEntry(timestamp=at(15), weight=pre, type=WeightLogType.PRE_PRACTICE))
            entries.append(WeightLogEntry(timestamp=at(17), weight=post, type=WeightLogType.POST_PRACTICE))
            entries.append(WeightLogEntry(timestamp=at(22), weight=bed, type=WeightLogType.BEFORE_BED))
    return entries


def main():
    logs = build_logs()

    print()
    print("=" * 72)
    print(f"  PWM week simulation: {WEIGHT_CLASS} lb, standard weekly, weigh-in {WEIGH_IN}")
    print("=" * 72)
    print()
    print(f"  {'Day':>4} {'Wt':>6} {'Target':>7} {'Carbs':>9} {'Prot':>5} {'Water':>6} {'Na':>5}  "
          f"{'Score':>5} {'Label':<11} Phase")
    print("  " + "-" * 70)

    for days_out, morning, *_ in WEEK:
        day = WEIGH_IN - datetime.timedelta(days=days_out)
        as_of = datetime.datetime.combine(day, datetime.time(18))
        profile = AthleteProfile(current_weight=morning, target_weight_class=WEIGHT_CLASS,
                                 protocol=Protocol.STANDARD_WEEKLY, weigh_in_date=WEIGH_IN, )

        targets = get_day_targets(profile, day)
        slices = grams_to_slices(targets.macros)
        tracking = DailyTrackingRecord(
            date=day,
            protein_slices=round(slices.protein * COMPLIANCE),
            carb_slices=round(slices.carb * COMPLIANCE),
            veg_slices=round(slices.veg * COMPLIANCE),
            water_consumed=targets.water_oz * COMPLIANCE,
        )
        data = assemble_cut_score_input(profile, logs, tracking, as_of)
        result = compute_cut_score(data, as_of)

        macros = targets.macros
        print(f"  {days_out:>4} {morning:>6.1f} {targets.weight.base:>7} "
              f"{macros.carbs.min:>4}-{macros.carbs.max:<4} {macros.protein.max:>5} "
              f"{targets.water_oz:>6} {targets.sodium.target:>5}  "
              f"{result.score:>5} {result.label:<11} {targets.phase.phase}")
        if macros.warning:
            print(f"       ! {macros.warning} ({macros.effective_percent_over}% effective over)")
        print(f"       {result.rationale}")

        safety = assess_weight_cut_safety(morning, WEIGHT_CLASS, days_out)
        if safety.level.value != "safe":
            print(f"       safety: {safety.level.value}: {safety.message}")

    lost = WEEK[-2][1] - WEIGHT_CLASS
    plan = get_rehydration_plan(lost)
    print()
    print(f"  Rehydration after weigh-in ({lost:.1f} lb cut): "
          f"{plan.fluid_min}-{plan.fluid_max} oz fluid, {plan.sodium_min}-{plan.sodium_max} mg sodium")
    print()


if __name__ == "__main__":
    main()
