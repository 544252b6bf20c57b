"""
Protocol library: day-bucketed macro tables, phase names and flags.

Each protocol is a :class:`ProtocolPlan` that maps every
:class:`~app.pwm.days.DayBucket` to a :class:`MacroRule`.  Rules are data,
not branching code, which turns "is the table right" into a validation
step run once when the library is built:

- every plan covers every bucket, with ``min <= max``;
- aggressive carries zero protein on days 2-5;
- standard weekly carries zero protein on days 4-5;
- optimal never drops protein below 25 g outside recovery/competition;
- build never drops carbs below 200 g;
- protein ceilings rise aggressive → standard weekly → optimal → build in
  every bucket except competition day, and build's carb ceiling is never
  below any other protocol's.

Per-pound protein is resolved at every standard weight class during
validation, so the ordering holds for each athlete the engine can see.

Classification
--------------
*Cutting* protocols get the weight multipliers; optimal uses its own
hold ladder.  *Water-loading* protocols add the days 3-5 loading
allowance on top.  *Food-phase* protocols are the only ones that raise
the fructose / glucose / zero-fiber flags.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from pydantic import BaseModel, Field

from app.pwm.bands import first_below
from app.pwm.days import DayBucket, bucket_for
from app.schemas.profile import WEIGHT_CLASSES, Protocol
from app.schemas.targets import FoodPhaseFlags, GramRange, MacroTargets, ProtocolPhase

logger = logging.getLogger(__name__)


class ProtocolTableError(ValueError):
    """A protocol table violates one of the library invariants."""


CUTTING_PROTOCOLS: frozenset[Protocol] = frozenset({
    Protocol.AGGRESSIVE,
    Protocol.STANDARD_WEEKLY,
    Protocol.OPTIMAL,
    Protocol.SPAR_COMPETITION,
})

WATER_LOADING_PROTOCOLS: frozenset[Protocol] = frozenset({
    Protocol.AGGRESSIVE,
    Protocol.STANDARD_WEEKLY,
    Protocol.SPAR_COMPETITION,
})

FOOD_PHASE_PROTOCOLS: frozenset[Protocol] = frozenset({
    Protocol.AGGRESSIVE,
    Protocol.STANDARD_WEEKLY,
    Protocol.OPTIMAL,
})

# Lightest → heaviest protein allowance.
ORDERED_PROTOCOLS: list[Protocol] = [
    Protocol.AGGRESSIVE,
    Protocol.STANDARD_WEEKLY,
    Protocol.OPTIMAL,
    Protocol.BUILD,
]


def is_cutting_protocol(protocol: Union[Protocol, str]) -> bool:
    return Protocol(protocol) in CUTTING_PROTOCOLS


def is_water_loading_protocol(protocol: Union[Protocol, str]) -> bool:
    return Protocol(protocol) in WATER_LOADING_PROTOCOLS


def is_food_phase_protocol(protocol: Union[Protocol, str]) -> bool:
    return Protocol(protocol) in FOOD_PHASE_PROTOCOLS


# ======================================================================
# Table primitives
# ======================================================================


class MacroRule(BaseModel):
    """Macro prescription for one day bucket.

    Protein is either fixed grams or, when ``protein_per_lb`` is set, a
    grams-per-pound factor applied to body weight and rounded.
    """

    carbs_min: int = Field(..., ge=0)
    carbs_max: int = Field(..., ge=0)
    protein_min: float = Field(0.0, ge=0.0)
    protein_max: float = Field(0.0, ge=0.0)
    protein_per_lb: bool = False
    ratio: str

    def resolve(self, weight: float) -> MacroTargets:
        if self.protein_per_lb:
            protein = GramRange(min=round(weight * self.protein_min), max=round(weight * self.protein_max))
        else:
            protein = GramRange(min=round(self.protein_min), max=round(self.protein_max))
        return MacroTargets(carbs=GramRange(min=self.carbs_min, max=self.carbs_max), protein=protein,
                            ratio=self.ratio, )


def _grams(carbs: tuple[int, int], protein: tuple[float, float], ratio: str) -> MacroRule:
    return MacroRule(carbs_min=carbs[0], carbs_max=carbs[1], protein_min=protein[0], protein_max=protein[1],
                     ratio=ratio, )


def _per_lb(carbs: tuple[int, int], factor: float, ratio: str) -> MacroRule:
    return MacroRule(carbs_min=carbs[0], carbs_max=carbs[1], protein_min=factor, protein_max=factor,
                     protein_per_lb=True, ratio=ratio, )


class PhaseRule(BaseModel):
    """Phase shown while ``days_until < before_day``."""

    before_day: int
    phase: str
    food_tip: str


class ProtocolPlan(BaseModel):
    """A named regimen: macro table plus phase naming."""

    protocol: Protocol
    name: str
    description: str
    macros: dict[DayBucket, MacroRule]
    phases: list[PhaseRule] = Field(default_factory=list, description="Ascending by before_day")
    default_phase: ProtocolPhase

    def macro_rule(self, days_until: int) -> MacroRule:
        return self.macros[bucket_for(days_until)]

    def phase(self, days_until: int) -> ProtocolPhase:
        if days_until < 0:
            return _RECOVERY_PHASE
        if days_until == 0:
            return _COMPETITION_PHASE
        bands = [(rule.before_day, ProtocolPhase(phase=rule.phase, food_tip=rule.food_tip)) for rule in self.phases]
        return first_below(days_until, bands, self.default_phase)


_RECOVERY_PHASE = ProtocolPhase(phase="RECOVERY", food_tip="Eat everything: full recovery refeed")
_COMPETITION_PHASE = ProtocolPhase(phase="COMPETITION DAY",
                                   food_tip="Post-weigh-in refuel. Fast carbs between matches.", )


# ======================================================================
# Protocol tables
# ======================================================================

_RECOVERY_RATIO = "Full Recovery"

AGGRESSIVE_PLAN = ProtocolPlan(
    protocol=Protocol.AGGRESSIVE,
    name="Extreme Cut",
    description="Extended zero-protein fructose window for maximum fat loss",
    macros={
        DayBucket.TRAINING: _grams((300, 450), (75, 100), "Maintenance"),
        DayBucket.DAY_5: _grams((250, 400), (0, 0), "Fructose Only (60:40)"),
        DayBucket.DAY_4: _grams((250, 400), (0, 0), "Fructose Only (60:40)"),
        DayBucket.DAY_3: _grams((250, 400), (0, 0), "Fructose Only (60:40)"),
        DayBucket.DAY_2: _grams((250, 400), (0, 0), "Fructose Only (60:40)"),
        DayBucket.DAY_1: _per_lb((200, 300), 0.2, "Fructose + MCT (Evening Protein)"),
        DayBucket.COMPETITION: _per_lb((150, 300), 1.0, "Low Carb / Protein Refeed"),
        DayBucket.RECOVERY: _per_lb((300, 450), 1.4, _RECOVERY_RATIO),
    },
    phases=[
        PhaseRule(before_day=2, phase="PERFORMANCE PREP", food_tip="Fructose + evening protein only"),
        PhaseRule(before_day=6, phase="MAX FAT BURN", food_tip="Fructose only: zero protein for FGF21 activation"),
    ],
    default_phase=ProtocolPhase(phase="EXTREME CUT", food_tip="Moderate protein + fructose carbs"),
)

STANDARD_WEEKLY_PLAN = ProtocolPlan(
    protocol=Protocol.STANDARD_WEEKLY,
    name="Rapid Cut",
    description="Weekly cut: fructose-heavy early, glucose switch for the last two days",
    macros={
        DayBucket.TRAINING: _grams((300, 450), (75, 100), "Maintenance"),
        DayBucket.DAY_5: _grams((325, 450), (0, 0), "Fructose Heavy (60:40)"),
        DayBucket.DAY_4: _grams((325, 450), (0, 0), "Fructose Heavy (60:40)"),
        DayBucket.DAY_3: _grams((325, 450), (25, 25), "Fructose Heavy (60:40)"),
        DayBucket.DAY_2: _grams((300, 400), (60, 60), "Glucose Heavy (Switch to Starch)"),
        DayBucket.DAY_1: _grams((300, 400), (60, 60), "Glucose Heavy (Switch to Starch)"),
        DayBucket.COMPETITION: _per_lb((200, 400), 0.5, "Fast Carbs (Between Matches)"),
        DayBucket.RECOVERY: _per_lb((300, 450), 1.4, _RECOVERY_RATIO),
    },
    phases=[
        PhaseRule(before_day=3, phase="PERFORMANCE",
                  food_tip="Switch to glucose/starch. Collagen + seafood protein.", ),
        PhaseRule(before_day=4, phase="CUT → PERFORMANCE", food_tip="Fructose heavy: collagen + leucine at dinner"),
        PhaseRule(before_day=6, phase="CUT", food_tip="Fructose only: zero protein for maximum fat loss"),
    ],
    default_phase=ProtocolPhase(phase="RAPID CUT", food_tip="Moderate protein + fructose carbs"),
)

OPTIMAL_PLAN = ProtocolPlan(
    protocol=Protocol.OPTIMAL,
    name="Optimal Cut",
    description="Gentle cut with protein protected on every training day",
    macros={
        DayBucket.TRAINING: _grams((300, 450), (100, 100), "Maintenance"),
        DayBucket.DAY_5: _grams((300, 450), (25, 25), "Fructose Heavy"),
        DayBucket.DAY_4: _grams((300, 450), (75, 75), "Mixed Fructose/Glucose"),
        DayBucket.DAY_3: _grams((300, 450), (75, 75), "Mixed Fructose/Glucose"),
        DayBucket.DAY_2: _grams((300, 450), (100, 100), "Performance (Glucose)"),
        DayBucket.DAY_1: _grams((300, 450), (100, 100), "Performance (Glucose)"),
        DayBucket.COMPETITION: _per_lb((200, 400), 0.5, "Competition Day"),
        DayBucket.RECOVERY: _per_lb((300, 450), 1.4, _RECOVERY_RATIO),
    },
    phases=[
        PhaseRule(before_day=3, phase="PERFORMANCE", food_tip="Glucose emphasis: full protein for performance"),
        PhaseRule(before_day=5, phase="MIXED", food_tip="Mixed fructose/glucose: moderate protein"),
        PhaseRule(before_day=6, phase="FGF21 ACTIVATION", food_tip="Fructose heavy: brief FGF21 activation"),
    ],
    default_phase=ProtocolPhase(phase="OPTIMAL CUT", food_tip="Full protein + balanced carbs"),
)

BUILD_PLAN = ProtocolPlan(
    protocol=Protocol.BUILD,
    name="Gain",
    description="Off-season building: high protein, high carbs",
    macros={
        DayBucket.TRAINING: _grams((350, 600), (125, 150), "Build Phase"),
        DayBucket.DAY_5: _grams((350, 600), (100, 100), "Balanced Carbs"),
        DayBucket.DAY_4: _grams((350, 600), (125, 125), "Glucose Emphasis"),
        DayBucket.DAY_3: _grams((350, 600), (125, 125), "Glucose Emphasis"),
        DayBucket.DAY_2: _grams((350, 600), (125, 125), "Glucose Emphasis"),
        DayBucket.DAY_1: _grams((350, 600), (125, 125), "Glucose Emphasis"),
        DayBucket.COMPETITION: _per_lb((200, 400), 0.8, "Competition Day"),
        DayBucket.RECOVERY: _per_lb((300, 450), 1.6, "Full Recovery (Max Protein)"),
    },
    phases=[
        PhaseRule(before_day=5, phase="GLUCOSE EMPHASIS", food_tip="Glucose/starch carbs: high protein for growth"),
        PhaseRule(before_day=6, phase="BALANCED", food_tip="Balanced carbs: moderate protein"),
    ],
    default_phase=ProtocolPhase(phase="GAIN", food_tip="Off-season building: high protein, high carbs"),
)

# Portion-based protocols track slices; the gram table is guidance only.
_BALANCED_RULE = _grams((300, 400), (75, 100), "Balanced")

SPAR_PLAN = ProtocolPlan(
    protocol=Protocol.SPAR,
    name="SPAR Nutrition",
    description="Portion-based eating from a BMR/TDEE calorie budget",
    macros={bucket: _BALANCED_RULE for bucket in DayBucket},
    default_phase=ProtocolPhase(phase="BALANCED", food_tip="All macros: hit your portion targets"),
)

SPAR_COMPETITION_PLAN = ProtocolPlan(
    protocol=Protocol.SPAR_COMPETITION,
    name="SPAR Competition",
    description="SPAR portions plus the competition water and weight schedule",
    macros={bucket: _BALANCED_RULE for bucket in DayBucket},
    phases=[
        PhaseRule(before_day=3, phase="WATER CUT", food_tip="Light portions, restrict water"),
        PhaseRule(before_day=6, phase="WATER LOAD", food_tip="Balanced portions, peak hydration"),
    ],
    default_phase=ProtocolPhase(phase="TRAINING", food_tip="SPAR portions, auto-adjusting for walk-around"),
)

DEFAULT_PLANS: list[ProtocolPlan] = [
    AGGRESSIVE_PLAN,
    STANDARD_WEEKLY_PLAN,
    OPTIMAL_PLAN,
    BUILD_PLAN,
    SPAR_PLAN,
    SPAR_COMPETITION_PLAN,
]


# ======================================================================
# Validation
# ======================================================================


def _check_plan_shape(plan: ProtocolPlan) -> None:
    missing = [bucket.value for bucket in DayBucket if bucket not in plan.macros]
    if missing:
        raise ProtocolTableError(f"Protocol '{plan.protocol.value}' is missing day buckets: {missing}")
    for bucket, rule in plan.macros.items():
        if rule.carbs_min > rule.carbs_max or rule.protein_min > rule.protein_max:
            raise ProtocolTableError(f"Protocol '{plan.protocol.value}' has min > max on {bucket.value}")


def _check_policy(plans: dict[Protocol, ProtocolPlan]) -> None:
    aggressive = plans.get(Protocol.AGGRESSIVE)
    if aggressive is not None:
        for bucket in (DayBucket.DAY_2, DayBucket.DAY_3, DayBucket.DAY_4, DayBucket.DAY_5):
            if aggressive.macros[bucket].protein_max != 0:
                raise ProtocolTableError(f"Aggressive protocol must carry zero protein on {bucket.value}")

    standard = plans.get(Protocol.STANDARD_WEEKLY)
    if standard is not None:
        for bucket in (DayBucket.DAY_4, DayBucket.DAY_5):
            if standard.macros[bucket].protein_max != 0:
                raise ProtocolTableError(f"Standard weekly protocol must carry zero protein on {bucket.value}")

    optimal = plans.get(Protocol.OPTIMAL)
    if optimal is not None:
        for bucket, rule in optimal.macros.items():
            if bucket in (DayBucket.RECOVERY, DayBucket.COMPETITION):
                continue
            if rule.protein_min < 25:
                raise ProtocolTableError(f"Optimal protocol drops protein below 25 g on {bucket.value}")

    build = plans.get(Protocol.BUILD)
    if build is not None:
        for bucket, rule in build.macros.items():
            if rule.carbs_min < 200:
                raise ProtocolTableError(f"Build protocol drops carbs below 200 g on {bucket.value}")


def _check_ordering(plans: dict[Protocol, ProtocolPlan]) -> None:
    ordered = [plans[p] for p in ORDERED_PROTOCOLS if p in plans]
    build = plans.get(Protocol.BUILD)

    for bucket in DayBucket:
        # Competition-day refeed is exempt: aggressive refeeds harder than
        # standard weekly after a longer zero-protein window.
        if bucket is DayBucket.COMPETITION:
            continue
        for weight in WEIGHT_CLASSES:
            resolved = [(plan.protocol, plan.macros[bucket].resolve(weight)) for plan in ordered]
            for (low_id, low), (high_id, high) in zip(resolved, resolved[1:]):
                if low.protein.max > high.protein.max:
                    raise ProtocolTableError(
                        f"Protein ordering violated on {bucket.value} at {weight} lb: "
                        f"{low_id.value} ({low.protein.max} g) > {high_id.value} ({high.protein.max} g)"
                    )
            if build is None:
                continue
            build_carbs = build.macros[bucket].carbs_max
            for plan in ordered:
                if plan.macros[bucket].carbs_max > build_carbs:
                    raise ProtocolTableError(
                        f"Build carb ceiling below {plan.protocol.value} on {bucket.value}"
                    )


def validate_protocol_tables(plans: list[ProtocolPlan]) -> None:
    """Check every library invariant.

    Raises :class:`ProtocolTableError` on the first violation.
    """
    by_id: dict[Protocol, ProtocolPlan] = {}
    for plan in plans:
        _check_plan_shape(plan)
        by_id[plan.protocol] = plan
    _check_policy(by_id)
    _check_ordering(by_id)


# ======================================================================
# Registry
# ======================================================================


class ProtocolRegistry:
    """Registry of available protocol plans, keyed by protocol id."""

    _plans: dict[Protocol, ProtocolPlan] = {}

    @classmethod
    def register(cls, plan: ProtocolPlan) -> None:
        """Register a protocol plan.

        Raises :class:`ValueError` if the protocol id is already taken.
        """
        if plan.protocol in cls._plans:
            raise ValueError(
                f"Protocol '{plan.protocol.value}' already registered"
            )
        cls._plans[plan.protocol] = plan

    @classmethod
    def get(cls, protocol_id: Union[Protocol, str]) -> Optional[ProtocolPlan]:
        """Get a plan by *protocol_id*.  Returns ``None`` if not found."""
        try:
            key = Protocol(protocol_id)
        except ValueError:
            return None
        return cls._plans.get(key)

    @classmethod
    def get_or_raise(cls, protocol_id: Union[Protocol, str]) -> ProtocolPlan:
        """Get a plan by *protocol_id*.

        Raises :class:`KeyError` if not found.
        """
        plan = cls.get(protocol_id)
        if plan is None:
            raise KeyError(
                f"Protocol '{protocol_id}' not registered. "
                f"Available: {cls.available_protocol_ids()}"
            )
        return plan

    @classmethod
    def all(cls) -> dict[Protocol, ProtocolPlan]:
        """Return all registered plans as ``{protocol: plan}``."""
        return dict(cls._plans)

    @classmethod
    def available_protocol_ids(cls) -> list[str]:
        """Return sorted list of all registered protocol ids."""
        return sorted(p.value for p in cls._plans)

    @classmethod
    def clear(cls) -> None:
        """Remove all plans.  Useful for testing."""
        cls._plans.clear()


def register_default_plans() -> None:
    """Validate and register the built-in library (idempotent)."""
    validate_protocol_tables(DEFAULT_PLANS)
    for plan in DEFAULT_PLANS:
        if ProtocolRegistry.get(plan.protocol) is None:
            ProtocolRegistry.register(plan)
    logger.debug("Registered protocols: %s", ProtocolRegistry.available_protocol_ids())


register_default_plans()


# ======================================================================
# Queries
# ======================================================================


def get_macro_rule(protocol: Union[Protocol, str], days_until: int) -> MacroRule:
    return ProtocolRegistry.get_or_raise(protocol).macro_rule(days_until)


def get_food_phase_flags(protocol: Union[Protocol, str], days_until: int) -> FoodPhaseFlags:
    """Categorical food guidance for the day.

    Fructose-only (days 3-5) and glucose / zero-fiber (days 1-2) apply to
    food-phase protocols only; competition and recovery apply to all.
    """
    food_phase = is_food_phase_protocol(protocol)
    return FoodPhaseFlags(
        fructose_only=food_phase and 3 <= days_until <= 5,
        glucose=food_phase and 1 <= days_until <= 2,
        zero_fiber=food_phase and 1 <= days_until <= 2,
        competition=days_until == 0,
        recovery=days_until < 0,
    )


def get_protocol_phase(protocol: Union[Protocol, str], days_until: int) -> ProtocolPhase:
    """Phase name and food tip for a protocol on a given day."""
    return ProtocolRegistry.get_or_raise(protocol).phase(days_until)
