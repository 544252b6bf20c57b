"""Tests for the protocol library: tables, validation, registry, phases."""

import pytest

from app.pwm.days import DayBucket
from app.pwm.protocols import (
    DEFAULT_PLANS,
    MacroRule,
    ProtocolRegistry,
    ProtocolTableError,
    get_food_phase_flags,
    get_macro_rule,
    get_protocol_phase,
    is_cutting_protocol,
    is_food_phase_protocol,
    is_water_loading_protocol,
    register_default_plans,
    validate_protocol_tables,
)
from app.schemas.profile import WEIGHT_CLASSES, Protocol

# ======================================================================
# Helpers
# ======================================================================


def _rule(carbs=(300, 400), protein=(50, 50), ratio="Test") -> MacroRule:
    return MacroRule(carbs_min=carbs[0], carbs_max=carbs[1], protein_min=protein[0], protein_max=protein[1],
                     ratio=ratio, )


def _plans_with(protocol: Protocol, bucket: DayBucket, rule: MacroRule):
    """Default plans with one bucket of one protocol replaced."""
    plans = []
    for plan in DEFAULT_PLANS:
        if plan.protocol == protocol:
            plan = plan.model_copy(update={"macros": {**plan.macros, bucket: rule}})
        plans.append(plan)
    return plans


@pytest.fixture
def empty_registry():
    saved = ProtocolRegistry.all()
    ProtocolRegistry.clear()
    yield
    ProtocolRegistry.clear()
    for plan in saved.values():
        ProtocolRegistry.register(plan)


# ======================================================================
# Classification
# ======================================================================


class TestClassification:
    @pytest.mark.parametrize(
        "protocol, cutting, water_loading, food_phase",
        [
            (Protocol.AGGRESSIVE, True, True, True),
            (Protocol.STANDARD_WEEKLY, True, True, True),
            (Protocol.OPTIMAL, True, False, True),
            (Protocol.BUILD, False, False, False),
            (Protocol.SPAR, False, False, False),
            (Protocol.SPAR_COMPETITION, True, True, False),
        ],
    )
    def test_protocol_classes(self, protocol, cutting, water_loading, food_phase):
        assert is_cutting_protocol(protocol) is cutting
        assert is_water_loading_protocol(protocol) is water_loading
        assert is_food_phase_protocol(protocol) is food_phase

    def test_accepts_plain_string(self):
        assert is_cutting_protocol("standard_weekly")


# ======================================================================
# Library tables
# ======================================================================


class TestDefaultTables:
    def test_default_library_validates(self):
        validate_protocol_tables(DEFAULT_PLANS)

    def test_every_plan_covers_every_bucket(self):
        for plan in DEFAULT_PLANS:
            assert set(plan.macros) == set(DayBucket)

    @pytest.mark.parametrize("days", [2, 3, 4, 5])
    def test_aggressive_zero_protein_window(self, days):
        assert get_macro_rule(Protocol.AGGRESSIVE, days).resolve(150).protein.max == 0

    @pytest.mark.parametrize("days", [4, 5])
    def test_standard_weekly_zero_protein_days(self, days):
        assert get_macro_rule(Protocol.STANDARD_WEEKLY, days).resolve(150).protein.max == 0

    def test_per_pound_protein_resolved_from_weight(self):
        macros = get_macro_rule(Protocol.AGGRESSIVE, 1).resolve(140)
        assert macros.protein.min == 28
        assert macros.protein.max == 28

    def test_recovery_protein_scales_with_weight(self):
        assert get_macro_rule(Protocol.STANDARD_WEEKLY, -1).resolve(150).protein.max == 210

    def test_competition_day_protein(self):
        assert get_macro_rule(Protocol.STANDARD_WEEKLY, 0).resolve(140).protein.max == 70

    def test_training_bucket_used_far_out(self):
        rule = get_macro_rule(Protocol.STANDARD_WEEKLY, 30)
        assert rule.ratio == "Maintenance"

    def test_protein_ordering_holds_outside_competition_day(self):
        ordered = [Protocol.AGGRESSIVE, Protocol.STANDARD_WEEKLY, Protocol.OPTIMAL, Protocol.BUILD]
        for days in [-1, 1, 2, 3, 4, 5, 10]:
            for weight in WEIGHT_CLASSES:
                maxima = [get_macro_rule(p, days).resolve(weight).protein.max for p in ordered]
                assert maxima == sorted(maxima), (days, weight)

    def test_build_carbs_never_below_floor(self):
        for days in range(-1, 8):
            assert get_macro_rule(Protocol.BUILD, days).carbs_min >= 200


# ======================================================================
# Validation
# ======================================================================


class TestValidation:
    def test_missing_bucket_rejected(self):
        plans = list(DEFAULT_PLANS)
        macros = dict(plans[1].macros)
        del macros[DayBucket.DAY_3]
        plans[1] = plans[1].model_copy(update={"macros": macros})
        with pytest.raises(ProtocolTableError, match="missing day buckets"):
            validate_protocol_tables(plans)

    def test_min_above_max_rejected(self):
        plans = _plans_with(Protocol.BUILD, DayBucket.TRAINING, _rule(carbs=(600, 350), protein=(125, 150)))
        with pytest.raises(ProtocolTableError, match="min > max"):
            validate_protocol_tables(plans)

    def test_aggressive_protein_in_zero_window_rejected(self):
        plans = _plans_with(Protocol.AGGRESSIVE, DayBucket.DAY_3, _rule(protein=(10, 10)))
        with pytest.raises(ProtocolTableError, match="zero protein"):
            validate_protocol_tables(plans)

    def test_standard_weekly_protein_on_day_4_rejected(self):
        plans = _plans_with(Protocol.STANDARD_WEEKLY, DayBucket.DAY_4, _rule(protein=(10, 10)))
        with pytest.raises(ProtocolTableError, match="zero protein"):
            validate_protocol_tables(plans)

    def test_optimal_protein_floor(self):
        plans = _plans_with(Protocol.OPTIMAL, DayBucket.DAY_5, _rule(protein=(20, 20)))
        with pytest.raises(ProtocolTableError, match="below 25 g"):
            validate_protocol_tables(plans)

    def test_build_carb_floor(self):
        plans = _plans_with(Protocol.BUILD, DayBucket.DAY_2, _rule(carbs=(150, 600), protein=(125, 125)))
        with pytest.raises(ProtocolTableError, match="below 200 g"):
            validate_protocol_tables(plans)

    def test_protein_ordering_violation(self):
        plans = _plans_with(Protocol.OPTIMAL, DayBucket.DAY_2, _rule(carbs=(300, 450), protein=(50, 50)))
        with pytest.raises(ProtocolTableError, match="Protein ordering"):
            validate_protocol_tables(plans)

    def test_build_carb_ceiling_violation(self):
        plans = _plans_with(Protocol.STANDARD_WEEKLY, DayBucket.TRAINING,
                            _rule(carbs=(300, 700), protein=(75, 100)))
        with pytest.raises(ProtocolTableError, match="Build carb ceiling"):
            validate_protocol_tables(plans)

    def test_competition_day_exempt_from_ordering(self):
        aggressive = get_macro_rule(Protocol.AGGRESSIVE, 0).resolve(150)
        standard = get_macro_rule(Protocol.STANDARD_WEEKLY, 0).resolve(150)
        assert aggressive.protein.max > standard.protein.max
        validate_protocol_tables(DEFAULT_PLANS)

    def test_table_error_is_value_error(self):
        assert issubclass(ProtocolTableError, ValueError)


# ======================================================================
# Registry
# ======================================================================


class TestProtocolRegistry:
    def test_all_defaults_registered(self):
        assert ProtocolRegistry.available_protocol_ids() == sorted(p.value for p in Protocol)

    def test_get_by_string_and_enum(self):
        assert ProtocolRegistry.get("optimal") is ProtocolRegistry.get(Protocol.OPTIMAL)

    def test_get_unknown_returns_none(self):
        assert ProtocolRegistry.get("keto") is None

    def test_get_or_raise_unknown(self):
        with pytest.raises(KeyError, match="keto"):
            ProtocolRegistry.get_or_raise("keto")

    def test_register_duplicate_raises(self):
        with pytest.raises(ValueError, match="already registered"):
            ProtocolRegistry.register(DEFAULT_PLANS[0])

    def test_register_defaults_is_idempotent(self):
        register_default_plans()
        register_default_plans()
        assert len(ProtocolRegistry.all()) == len(DEFAULT_PLANS)

    def test_clear_and_register(self, empty_registry):
        assert ProtocolRegistry.all() == {}
        ProtocolRegistry.register(DEFAULT_PLANS[0])
        assert ProtocolRegistry.available_protocol_ids() == ["aggressive"]

    def test_queries_fail_on_empty_registry(self, empty_registry):
        with pytest.raises(KeyError):
            get_macro_rule(Protocol.STANDARD_WEEKLY, 3)


# ======================================================================
# Food-phase flags
# ======================================================================


class TestFoodPhaseFlags:
    @pytest.mark.parametrize("days", [3, 4, 5])
    def test_fructose_window(self, days):
        flags = get_food_phase_flags(Protocol.STANDARD_WEEKLY, days)
        assert flags.fructose_only
        assert not flags.glucose
        assert not flags.zero_fiber

    @pytest.mark.parametrize("days", [1, 2])
    def test_glucose_window(self, days):
        flags = get_food_phase_flags(Protocol.AGGRESSIVE, days)
        assert flags.glucose
        assert flags.zero_fiber
        assert not flags.fructose_only

    def test_competition_and_recovery_apply_to_all(self):
        for protocol in Protocol:
            assert get_food_phase_flags(protocol, 0).competition
            assert get_food_phase_flags(protocol, -2).recovery

    @pytest.mark.parametrize("protocol", [Protocol.BUILD, Protocol.SPAR, Protocol.SPAR_COMPETITION])
    def test_non_food_phase_protocols_raise_no_food_flags(self, protocol):
        for days in range(1, 6):
            flags = get_food_phase_flags(protocol, days)
            assert not (flags.fructose_only or flags.glucose or flags.zero_fiber)

    def test_training_days_raise_nothing(self):
        flags = get_food_phase_flags(Protocol.STANDARD_WEEKLY, 9)
        assert flags.model_dump() == {
            "fructose_only": False,
            "glucose": False,
            "zero_fiber": False,
            "competition": False,
            "recovery": False,
        }


# ======================================================================
# Phases
# ======================================================================


class TestProtocolPhase:
    @pytest.mark.parametrize(
        "protocol, days, expected",
        [
            (Protocol.STANDARD_WEEKLY, 10, "RAPID CUT"),
            (Protocol.STANDARD_WEEKLY, 5, "CUT"),
            (Protocol.STANDARD_WEEKLY, 4, "CUT"),
            (Protocol.STANDARD_WEEKLY, 3, "CUT → PERFORMANCE"),
            (Protocol.STANDARD_WEEKLY, 2, "PERFORMANCE"),
            (Protocol.STANDARD_WEEKLY, 1, "PERFORMANCE"),
            (Protocol.AGGRESSIVE, 4, "MAX FAT BURN"),
            (Protocol.AGGRESSIVE, 1, "PERFORMANCE PREP"),
            (Protocol.OPTIMAL, 5, "FGF21 ACTIVATION"),
            (Protocol.OPTIMAL, 4, "MIXED"),
            (Protocol.OPTIMAL, 2, "PERFORMANCE"),
            (Protocol.BUILD, 5, "BALANCED"),
            (Protocol.BUILD, 2, "GLUCOSE EMPHASIS"),
            (Protocol.BUILD, 8, "GAIN"),
            (Protocol.SPAR, 2, "BALANCED"),
            (Protocol.SPAR_COMPETITION, 4, "WATER LOAD"),
            (Protocol.SPAR_COMPETITION, 1, "WATER CUT"),
            (Protocol.SPAR_COMPETITION, 7, "TRAINING"),
        ],
    )
    def test_phase_names(self, protocol, days, expected):
        assert get_protocol_phase(protocol, days).phase == expected

    @pytest.mark.parametrize("protocol", list(Protocol))
    def test_competition_and_recovery_phases_shared(self, protocol):
        assert get_protocol_phase(protocol, 0).phase == "COMPETITION DAY"
        assert get_protocol_phase(protocol, -3).phase == "RECOVERY"

    def test_every_phase_has_food_tip(self):
        for protocol in Protocol:
            for days in range(-2, 9):
                assert get_protocol_phase(protocol, days).food_tip
