"""
core/energy.py
────────────────────────────────────────────────────────────────────────
Daily energy target for the Forza Fuel plan generator.

1. BMR  (Harris–Benedict, Roza & Shizgal revision 1984)
2. Maintenance = BMR × activity factor
3. Goal adjustment (fat loss −500, muscle gain +300, everything else 0)
4. Round half-up → integer kcal/day

All rounding in the service goes through `round_half_up` so the same
input always yields the same integers.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from enum import Enum

_LOG = logging.getLogger(__name__)

ACTIVITY_FACTORS: tuple[float, ...] = (1.2, 1.375, 1.55, 1.725, 1.9)
MEAL_COUNT_RANGE = (3, 6)


class Sex(str, Enum):
    male = "male"
    female = "female"


class Goal(str, Enum):
    fat_loss = "fat_loss"
    muscle_gain = "muscle_gain"
    recomposition = "recomposition"
    performance = "performance"
    integrative = "integrative"


GOAL_ADJUSTMENT: dict[Goal, int] = {
    Goal.fat_loss: -500,
    Goal.muscle_gain: 300,
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties away from zero (2.5 → 3, −2.5 → −3)."""
    if not math.isfinite(value):
        raise ValueError(f"cannot round non-finite value {value!r}")
    # a float has at most 309 integral digits; the default 28-digit context overflows
    with localcontext() as ctx:
        ctx.prec = 400
        return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


# ──────────────────────────────────────────────────────────────────────
#  Input
# ──────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class BiometricProfile:
    weight_kg: float
    height_cm: float
    age_years: int
    sex: Sex
    activity_factor: float   # one of ACTIVITY_FACTORS
    goal: Goal = Goal.performance
    meal_count: int = 4      # 3–6


# ──────────────────────────────────────────────────────────────────────
#  Estimator
# ──────────────────────────────────────────────────────────────────────
class EnergyEstimator:
    """Source-of-truth for the headline kcal number.

    Range checks happen at the HTTP boundary; out-of-domain input is the
    caller's problem.
    """

    def estimate(self, p: BiometricProfile) -> int:
        kcal = self.maintenance(p) + self.adjustment(p.goal)
        target = round_half_up(kcal)
        _LOG.debug("energy target %s kcal for %s", target, p)
        return target

    def bmr(self, p: BiometricProfile) -> float:
        if Sex(p.sex) is Sex.male:
            return 88.362 + 13.397 * p.weight_kg + 4.799 * p.height_cm - 5.677 * p.age_years
        return 447.593 + 9.247 * p.weight_kg + 3.098 * p.height_cm - 4.330 * p.age_years

    def maintenance(self, p: BiometricProfile) -> float:
        return self.bmr(p) * p.activity_factor

    @staticmethod
    def adjustment(goal: Goal) -> int:
        return GOAL_ADJUSTMENT.get(Goal(goal), 0)
