"""
core/plan_reconciler.py
────────────────────────────────────────────────────────────────────────
Post-processing for the LLM meal plan.

The generator is asked for integers and for a day that adds up to the
target, but nothing it returns is trusted:

* `parse_draft()`  – raw text ➜ dict, or `EmptyResponse`
* `PlanReconciler.reconcile()` – dict ➜ `ReconciledMealPlan`
    - every meal macro rounded half-up and clamped at 0
    - dailyTotals.calories / .tdee overwritten with the local target
    - dailyTotals.protein / carbs / fats rounded when present, never invented

Per-meal calories are *not* redistributed to match the daily total; the
difference is exposed as `ReconciledMealPlan.calorie_drift`.
"""

from __future__ import annotations

import json
import logging
import math
import re
from collections.abc import Mapping
from typing import Any

from core.energy import round_half_up
from core.errors import EmptyResponse, MalformedPlan
from core.models.plan import DailyTotals, Meal, MealMacros, ReconciledMealPlan

_LOG = logging.getLogger(__name__)

MACRO_KEYS = ("protein", "carbs", "fats", "calories")
TOTAL_MACRO_KEYS = ("protein", "carbs", "fats")
# no single day or meal gets anywhere near this many grams or kcal
MAX_PLAUSIBLE = 1_000_000

_FENCE = re.compile(r"^\s*```(?:json)?\s*([\s\S]*?)\s*```\s*$")


def parse_draft(raw: str | bytes | None) -> dict[str, Any]:
    """Decode the collaborator's raw payload into a JSON object."""
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    if raw is None or not raw.strip():
        raise EmptyResponse("generator returned an empty payload")

    match = _FENCE.match(raw)
    text = match.group(1) if match else raw.strip()

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise EmptyResponse(f"payload is not valid JSON: {exc}") from exc

    if not isinstance(data, dict) or not data:
        raise EmptyResponse("payload is not a non-empty JSON object")
    return data


def _number(value: Any, where: str) -> float:
    # bool is an int subclass – a `true` macro is still garbage
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedPlan(f"{where} is not a number: {value!r}")
    if not math.isfinite(value):
        raise MalformedPlan(f"{where} is not finite: {value!r}")
    if abs(value) > MAX_PLAUSIBLE:
        raise MalformedPlan(f"{where} is implausibly large: {value!r}")
    return value


class PlanReconciler:
    """Force a draft plan onto integer macros and the trusted energy target."""

    def reconcile(self, draft: Mapping[str, Any], target: int) -> ReconciledMealPlan:
        if not isinstance(draft, Mapping):
            raise MalformedPlan("plan is not an object")

        raw_meals = draft.get("meals")
        if not isinstance(raw_meals, list):
            raise MalformedPlan("plan has no 'meals' list")

        meals = [self._meal(m, i) for i, m in enumerate(raw_meals)]
        if not meals:
            _LOG.warning("plan has an empty 'meals' list – accepting a plan with no meals")
        plan = ReconciledMealPlan(
            meals=meals,
            daily_totals=self._totals(draft.get("dailyTotals"), target),
            recommendations=self._recommendations(draft.get("recommendations")),
        )

        if plan.calorie_drift:
            _LOG.warning(
                "meal calories sum to %s, target is %s (drift %+d) – left as is",
                target + plan.calorie_drift, target, plan.calorie_drift,
            )
        return plan

    # ─────────────────────────────── meals ─────────────────────────── #
    def _meal(self, raw: Any, idx: int) -> Meal:
        if not isinstance(raw, Mapping):
            raise MalformedPlan(f"meals[{idx}] is not an object")
        macros = raw.get("macros")
        if not isinstance(macros, Mapping):
            raise MalformedPlan(f"meals[{idx}] has no 'macros' object")

        rounded = {}
        for key in MACRO_KEYS:
            if macros.get(key) is None:
                _LOG.debug("meals[%d].macros.%s missing – using 0", idx, key)
                rounded[key] = 0
                continue
            value = _number(macros[key], f"meals[{idx}].macros.{key}")
            rounded[key] = max(round_half_up(value), 0)

        return Meal(
            name=str(raw.get("name") or ""),
            description=str(raw.get("description") or ""),
            macros=MealMacros(**rounded),
            image=_optional_str(raw, "image"),
            image_description=_optional_str(raw, "imageDescription"),
        )

    # ─────────────────────────────── totals ────────────────────────── #
    def _totals(self, raw: Any, target: int) -> DailyTotals:
        if raw is None:
            raw = {}
        elif not isinstance(raw, Mapping):
            raise MalformedPlan("'dailyTotals' is not an object")

        totals: dict[str, int] = {"calories": target, "tdee": target}
        for key in TOTAL_MACRO_KEYS:
            if raw.get(key) is not None:
                totals[key] = round_half_up(_number(raw[key], f"dailyTotals.{key}"))
        return DailyTotals(**totals)

    @staticmethod
    def _recommendations(raw: Any) -> list[str]:
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise MalformedPlan("'recommendations' is not a list")
        return [str(r) for r in raw if r is not None]


def _optional_str(raw: Mapping[str, Any], key: str) -> str | None:
    if key not in raw or raw[key] is None:
        return None
    return str(raw[key])
