"""Tests for Cut Score input assembly from weight logs and daily tracking."""

import datetime

import pytest

from app.pwm.logs import (
    assemble_cut_score_input,
    compute_drift_metrics,
    latest_reading,
    project_weigh_in,
    recent_sleep_hours,
    servings_target,
    trend_reading,
)
from app.schemas.profile import (
    AthleteProfile,
    DailyTrackingRecord,
    Protocol,
    SparBiometrics,
    SparPlanInput,
    WeightLogEntry,
    WeightLogType,
)

WEIGH_IN = datetime.date(2026, 2, 14)
AS_OF = datetime.datetime(2026, 2, 11, 18, 0)


# ======================================================================
# Helpers
# ======================================================================


def _entry(day: int, hour: int, weight: float, log_type: WeightLogType, sleep=None) -> WeightLogEntry:
    return WeightLogEntry(timestamp=datetime.datetime(2026, 2, day, hour, 0), weight=weight, type=log_type,
                          sleep_hours=sleep, )


def _two_days():
    """Two overnight pairs (1.2 and 1.0 lb) and one practice (2.0 lb)."""
    return [
        _entry(9, 22, 141.0, WeightLogType.BEFORE_BED),
        _entry(10, 7, 139.8, WeightLogType.MORNING, sleep=7.5),
        _entry(10, 15, 140.6, WeightLogType.PRE_PRACTICE),
        _entry(10, 17, 138.6, WeightLogType.POST_PRACTICE),
        _entry(10, 22, 139.6, WeightLogType.BEFORE_BED),
        _entry(11, 7, 138.6, WeightLogType.MORNING, sleep=6.5),
    ]


def _profile(**overrides) -> AthleteProfile:
    defaults = dict(current_weight=140.0, target_weight_class=133, protocol=Protocol.STANDARD_WEEKLY,
                    weigh_in_date=WEIGH_IN, )
    defaults.update(overrides)
    return AthleteProfile(**defaults)


# ======================================================================
# Reading selection
# ======================================================================


class TestReadings:
    def test_latest_reading(self):
        assert latest_reading(_two_days(), AS_OF).weight == 138.6

    def test_future_entries_ignored(self):
        entries = _two_days() + [_entry(11, 20, 137.0, WeightLogType.BEFORE_BED)]
        assert latest_reading(entries, AS_OF).weight == 138.6

    def test_no_entries(self):
        assert latest_reading([], AS_OF) is None

    def test_trend_prefers_morning(self):
        reading = trend_reading(_two_days(), datetime.date(2026, 2, 10))
        assert reading.type == WeightLogType.MORNING
        assert reading.weight == 139.8

    def test_trend_falls_back_by_priority(self):
        entries = [
            _entry(12, 17, 138.0, WeightLogType.POST_PRACTICE),
            _entry(12, 15, 139.5, WeightLogType.PRE_PRACTICE),
        ]
        assert trend_reading(entries, datetime.date(2026, 2, 12)).weight == 139.5

    def test_trend_latest_within_type(self):
        entries = [
            _entry(12, 6, 139.0, WeightLogType.MORNING),
            _entry(12, 8, 138.8, WeightLogType.MORNING),
        ]
        assert trend_reading(entries, datetime.date(2026, 2, 12)).weight == 138.8

    def test_trend_empty_day(self):
        assert trend_reading(_two_days(), datetime.date(2026, 2, 1)) is None


# ======================================================================
# Drift metrics
# ======================================================================


class TestDriftMetrics:
    def test_overnight_and_practice(self):
        drift = compute_drift_metrics(_two_days(), AS_OF)
        assert drift.avg_overnight_drift == pytest.approx(1.1)
        assert drift.avg_practice_loss == pytest.approx(2.0)
        assert drift.gross_daily_loss == pytest.approx(3.1)
        assert drift.overnight_pairs == 2
        assert drift.practice_pairs == 1

    def test_no_pairs(self):
        drift = compute_drift_metrics([_entry(10, 7, 139.8, WeightLogType.MORNING)], AS_OF)
        assert drift.avg_overnight_drift is None
        assert drift.avg_practice_loss is None
        assert drift.gross_daily_loss is None
        assert drift.overnight_pairs == 0

    @pytest.mark.parametrize(
        "bed_day, bed_hour, morning_hour",
        [
            (10, 3, 7),  # 4 h, a nap
            (9, 12, 7),  # 19 h
        ],
    )
    def test_overnight_window(self, bed_day, bed_hour, morning_hour):
        entries = [
            _entry(bed_day, bed_hour, 141.0, WeightLogType.BEFORE_BED),
            _entry(10, morning_hour, 139.8, WeightLogType.MORNING),
        ]
        assert compute_drift_metrics(entries, AS_OF).overnight_pairs == 0

    def test_long_practice_not_counted(self):
        entries = [
            _entry(10, 10, 140.6, WeightLogType.PRE_PRACTICE),
            _entry(10, 15, 138.6, WeightLogType.POST_PRACTICE),
        ]
        assert compute_drift_metrics(entries, AS_OF).practice_pairs == 0

    def test_post_practice_counts_as_evening(self):
        entries = [
            _entry(10, 19, 140.0, WeightLogType.POST_PRACTICE),
            _entry(11, 7, 139.0, WeightLogType.MORNING),
        ]
        assert compute_drift_metrics(entries, AS_OF).avg_overnight_drift == pytest.approx(1.0)

    def test_lookback_window(self):
        old = [
            _entry(1, 22, 150.0, WeightLogType.BEFORE_BED),
            _entry(2, 7, 145.0, WeightLogType.MORNING),
        ]
        drift = compute_drift_metrics(old + _two_days(), AS_OF, lookback_days=5)
        assert drift.overnight_pairs == 2
        assert drift.avg_overnight_drift == pytest.approx(1.1)

    def test_unsorted_input(self):
        drift = compute_drift_metrics(list(reversed(_two_days())), AS_OF)
        assert drift.overnight_pairs == 2


class TestProjection:
    @pytest.mark.parametrize(
        "current, gross, days, expected",
        [
            (138.6, 3.1, 3, 129.3),
            (140.0, 1.0, 2, 138.0),
            (140.0, 2.0, 0, 140.0),
            (140.0, 2.0, -1, 140.0),
            (140.0, None, 3, None),
            (140.0, 0.0, 3, None),
            (140.0, -0.5, 3, None),
        ],
    )
    def test_project_weigh_in(self, current, gross, days, expected):
        assert project_weigh_in(current, gross, days) == (pytest.approx(expected) if expected else None)


class TestSleepHours:
    def test_newest_first(self):
        assert recent_sleep_hours(_two_days(), AS_OF) == [6.5, 7.5]

    def test_limit(self):
        assert recent_sleep_hours(_two_days(), AS_OF, nights=1) == [6.5]

    def test_only_morning_entries_with_sleep(self):
        entries = [
            _entry(10, 7, 139.8, WeightLogType.MORNING),
            _entry(10, 22, 139.6, WeightLogType.BEFORE_BED, sleep=8.0),
        ]
        assert recent_sleep_hours(entries, AS_OF) == []


class TestTimezoneAlignment:
    def _utc(self, entries):
        return [e.model_copy(update={"timestamp": e.timestamp.replace(tzinfo=datetime.timezone.utc)})
                for e in entries]

    def test_aware_logs_with_naive_reference(self):
        as_of = datetime.datetime(2026, 2, 12, 12, 0)
        entries = self._utc(_two_days())
        drift = compute_drift_metrics(entries, as_of)
        assert drift.overnight_pairs == 2
        assert drift.avg_overnight_drift == pytest.approx(1.1)
        assert latest_reading(entries, as_of).weight == 138.6

    def test_naive_logs_with_aware_reference(self):
        as_of = datetime.datetime(2026, 2, 12, 12, 0, tzinfo=datetime.timezone.utc)
        drift = compute_drift_metrics(_two_days(), as_of)
        assert drift.practice_pairs == 1
        assert drift.avg_practice_loss == pytest.approx(2.0)

    def test_mixed_awareness(self):
        entries = [
            _entry(10, 7, 139.8, WeightLogType.MORNING, sleep=7.0),
            WeightLogEntry(timestamp=datetime.datetime(2026, 2, 11, 7, 0, tzinfo=datetime.timezone.utc),
                           weight=138.6, type=WeightLogType.MORNING, sleep_hours=8.0, ),
        ]
        as_of = datetime.datetime(2026, 2, 12, 12, 0)
        assert latest_reading(entries, as_of).weight == 138.6
        assert recent_sleep_hours(entries, as_of) == [8.0, 7.0]

    def test_assembles_from_utc_logs(self):
        as_of = datetime.datetime(2026, 2, 12, 12, 0)
        data = assemble_cut_score_input(_profile(), self._utc(_two_days()), None, as_of)
        assert data.days_remaining == 2
        assert data.current_weight == 138.6
        assert data.gross_daily_loss == pytest.approx(3.1)


# ======================================================================
# Servings target
# ======================================================================


class TestServingsTarget:
    def test_zero_protein_day(self):
        # 450 g carbs → 15 slices, no protein, no veg
        assert servings_target(_profile(), 4, 140.0) == 15

    def test_training_day(self):
        assert servings_target(_profile(), 10, 140.0) == 25

    def test_spar_uses_biometrics(self):
        biometrics = SparBiometrics(weight_lbs=150.0, height_inches=70.0, age=20)
        assert servings_target(_profile(protocol=Protocol.SPAR, biometrics=biometrics), 3, 150.0) == 34

    def test_spar_without_biometrics_uses_grams(self):
        assert servings_target(_profile(protocol=Protocol.SPAR), 10, 150.0) == 22

    def test_spar_plan_counts_fruit_and_fat(self):
        plan = SparPlanInput(weight_lbs=150.0, height_inches=70.0, age=20)
        # 4 protein, 5 carb, 5 veg, 2 fruit, 6 fat
        assert servings_target(_profile(protocol=Protocol.SPAR, spar_plan=plan), 3, 150.0) == 22

    def test_spar_plan_preferred_over_biometrics(self):
        plan = SparPlanInput(weight_lbs=150.0, height_inches=70.0, age=20)
        biometrics = SparBiometrics(weight_lbs=150.0, height_inches=70.0, age=20)
        profile = _profile(protocol=Protocol.SPAR, spar_plan=plan, biometrics=biometrics)
        assert servings_target(profile, 3, 150.0) == 22

    def test_spar_competition_plan_follows_the_adjustment(self):
        plan = SparPlanInput(weight_lbs=150.0, height_inches=70.0, age=20)
        profile = _profile(protocol=Protocol.SPAR_COMPETITION, spar_plan=plan)
        assert servings_target(profile, 1, 140.0) == 17
        assert servings_target(profile, 0, 140.0) == 24

    def test_spar_competition_cuts_portions_in_water_cut(self):
        biometrics = SparBiometrics(weight_lbs=140.0, height_inches=68.0, age=18)
        profile = _profile(protocol=Protocol.SPAR_COMPETITION, biometrics=biometrics)
        assert servings_target(profile, 1, 140.0) < servings_target(profile, 0, 140.0)


# ======================================================================
# Assembly
# ======================================================================


class TestAssembleCutScoreInput:
    def test_from_logs(self):
        tracking = DailyTrackingRecord(date=datetime.date(2026, 2, 11), protein_slices=1, carb_slices=12,
                                       water_consumed=150.0, )
        data = assemble_cut_score_input(_profile(), _two_days(), tracking, AS_OF)
        assert data.days_remaining == 3
        assert data.current_weight == 138.6
        assert data.gross_daily_loss == pytest.approx(3.1)
        assert data.projected_weigh_in == pytest.approx(129.3)
        assert data.recent_sleep_hours == [6.5, 7.5]
        assert data.avg_overnight_drift == pytest.approx(1.1)
        assert data.food_servings_logged == 13
        assert data.food_servings_target == servings_target(_profile(), 3, 138.6)
        assert data.water_consumed_oz == 150.0
        assert data.water_target_oz == 208
        assert data.target_weight == 133

    def test_no_logs_no_tracking(self):
        data = assemble_cut_score_input(_profile(), [], None, AS_OF)
        assert data.current_weight is None
        assert data.projected_weigh_in is None
        assert data.recent_sleep_hours == []
        assert data.food_servings_logged == 0
        assert data.water_target_oz == 210

    def test_simulated_date(self):
        profile = _profile(simulated_date=datetime.date(2026, 2, 13))
        assert assemble_cut_score_input(profile, _two_days(), None, AS_OF).days_remaining == 1
