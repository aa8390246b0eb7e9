"""
scripts/generate_plan.py
────────────────────────────────────────────────────────────────────────
Generate one reconciled meal plan from the command line:

    python -m scripts.generate_plan --weight 75 --height 175 --age 25 \
        --sex male --activity 1.55 --goal performance --meals 4

Only the energy target (no Gemini call):

    python -m scripts.generate_plan ... --target-only
"""
from __future__ import annotations

import json
import sys
from argparse import ArgumentParser, Namespace

from dotenv import load_dotenv
load_dotenv()

from config import Settings
from core.energy import ACTIVITY_FACTORS, MEAL_COUNT_RANGE, BiometricProfile, EnergyEstimator, Goal, Sex
from core.errors import PlanError
from core.models.questionnaire import HealthQuestionnaire
from services.gemini import MealPlanGenerator


def _parser() -> ArgumentParser:
    ap = ArgumentParser(description="Forza Fuel meal plan generator")
    ap.add_argument("--weight", type=float, required=True, help="kg")
    ap.add_argument("--height", type=float, required=True, help="cm")
    ap.add_argument("--age", type=int, required=True)
    ap.add_argument("--sex", choices=[s.value for s in Sex], required=True)
    ap.add_argument("--activity", type=float, choices=ACTIVITY_FACTORS, default=1.55)
    ap.add_argument("--goal", choices=[g.value for g in Goal], default=Goal.performance.value)
    ap.add_argument("--meals", type=int, choices=range(MEAL_COUNT_RANGE[0], MEAL_COUNT_RANGE[1] + 1), default=4)
    ap.add_argument("--allergies", default="")
    ap.add_argument("--injuries", default="")
    ap.add_argument("--target-only", action="store_true", help="print the kcal target and exit")
    return ap


def _profile(args: Namespace) -> BiometricProfile:
    return BiometricProfile(
        weight_kg=args.weight,
        height_cm=args.height,
        age_years=args.age,
        sex=Sex(args.sex),
        activity_factor=args.activity,
        goal=Goal(args.goal),
        meal_count=args.meals,
    )


def main(argv: list[str] | None = None) -> int:
    args = _parser().parse_args(argv)
    profile = _profile(args)

    if args.target_only:
        print(EnergyEstimator().estimate(profile))
        return 0

    try:
        gen = MealPlanGenerator(Settings())
    except RuntimeError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1

    health = HealthQuestionnaire(allergies=args.allergies, injuries=args.injuries)
    try:
        plan = gen.generate_plan(profile, health)
    except PlanError as e:
        print(f"✗ plan generation failed: {e}", file=sys.stderr)
        return 1

    print(json.dumps(plan.as_draft(), indent=2, ensure_ascii=False))
    if plan.calorie_drift:
        print(f"· meal calories drift {plan.calorie_drift:+d} kcal from target", file=sys.stderr)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
