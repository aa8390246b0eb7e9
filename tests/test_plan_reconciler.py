"""
PlanReconciler – rounding, trusted totals, error surfacing.
"""
from __future__ import annotations

import json
import logging

import pytest

from core.errors import EmptyResponse, MalformedPlan, PlanError
from core.plan_reconciler import PlanReconciler, parse_draft

rec = PlanReconciler()
TARGET = 2776


# ── numbers ──────────────────────────────────────────────────────────
def test_totals_forced_to_target(draft):
    plan = rec.reconcile(draft, TARGET)
    assert plan.daily_totals.calories == TARGET
    assert plan.daily_totals.tdee == TARGET


def test_meal_macros_rounded_half_up(draft):
    plan = rec.reconcile(draft, TARGET)
    first = plan.meals[0].macros
    assert (first.protein, first.carbs, first.fats, first.calories) == (35, 71, 10, 651)
    for m in plan.meals:
        for v in (m.macros.protein, m.macros.carbs, m.macros.fats, m.macros.calories):
            assert isinstance(v, int) and v >= 0


def test_daily_macros_rounded(draft):
    t = rec.reconcile(draft, TARGET).daily_totals
    assert (t.protein, t.carbs, t.fats) == (151, 236, 68)


def test_daily_macros_absent_stay_unset(draft):
    draft["dailyTotals"] = {"calories": 1000}
    plan = rec.reconcile(draft, TARGET)
    assert plan.daily_totals.protein is None
    assert plan.daily_totals.carbs is None
    assert "protein" not in plan.as_draft()["dailyTotals"]


def test_missing_daily_totals_created_from_target(draft):
    del draft["dailyTotals"]
    plan = rec.reconcile(draft, TARGET)
    assert plan.as_draft()["dailyTotals"] == {"calories": TARGET, "tdee": TARGET}


def test_negative_macros_clamped(draft):
    draft["meals"][1]["macros"]["fats"] = -3.2
    assert rec.reconcile(draft, TARGET).meals[1].macros.fats == 0


def test_missing_macro_subfield_tolerated(draft):
    del draft["meals"][2]["macros"]["carbs"]
    assert rec.reconcile(draft, TARGET).meals[2].macros.carbs == 0


def test_calorie_drift_is_exposed_not_fixed(draft, caplog):
    with caplog.at_level(logging.WARNING, logger="core.plan_reconciler"):
        plan = rec.reconcile(draft, TARGET)
    meal_sum = sum(m.macros.calories for m in plan.meals)   # 651 + 720 + 700 + 400
    assert meal_sum == 2471
    assert plan.calorie_drift == meal_sum - TARGET
    assert "drift" in caplog.text


def test_no_drift_warning_when_meals_add_up(draft, caplog):
    with caplog.at_level(logging.WARNING, logger="core.plan_reconciler"):
        plan = rec.reconcile(draft, 2471)
    assert plan.calorie_drift == 0
    assert caplog.text == ""


def test_reconcile_is_idempotent(draft):
    once = rec.reconcile(draft, TARGET)
    twice = rec.reconcile(once.as_draft(), TARGET)
    assert twice == once
    assert twice.as_draft() == once.as_draft()


def test_optional_image_fields_pass_through(draft):
    draft["meals"][0]["imageDescription"] = "bowl of oats"
    draft["meals"][1]["image"] = "https://img/chicken.jpg"
    plan = rec.reconcile(draft, TARGET)
    out = plan.as_draft()["meals"]
    assert out[0]["imageDescription"] == "bowl of oats"
    assert "image" not in out[0]
    assert out[1]["image"] == "https://img/chicken.jpg"
    assert "imageDescription" not in out[1]


def test_recommendations_kept(draft):
    assert rec.reconcile(draft, TARGET).recommendations == ["Drink 3 L of water", "Sleep 8 h"]
    del draft["recommendations"]
    assert rec.reconcile(draft, TARGET).recommendations == []


# ── structure errors ─────────────────────────────────────────────────
def test_missing_meals_is_malformed(draft):
    del draft["meals"]
    with pytest.raises(MalformedPlan):
        rec.reconcile(draft, TARGET)


@pytest.mark.parametrize("bad", [None, "3 meals", {"0": {}}, 4])
def test_meals_not_a_list_is_malformed(draft, bad):
    draft["meals"] = bad
    with pytest.raises(MalformedPlan):
        rec.reconcile(draft, TARGET)


def test_meal_without_macros_is_malformed(draft):
    del draft["meals"][3]["macros"]
    with pytest.raises(MalformedPlan, match=r"meals\[3\]"):
        rec.reconcile(draft, TARGET)


@pytest.mark.parametrize("bad", ["lots", True, [1, 2]])
def test_non_numeric_macro_is_malformed(draft, bad):
    draft["meals"][0]["macros"]["protein"] = bad
    with pytest.raises(MalformedPlan):
        rec.reconcile(draft, TARGET)


def test_wrong_container_types_are_malformed(draft):
    with pytest.raises(MalformedPlan):
        rec.reconcile(["not", "a", "plan"], TARGET)
    draft["dailyTotals"] = [2000]
    with pytest.raises(MalformedPlan):
        rec.reconcile(draft, TARGET)


def test_empty_meal_list_is_allowed_with_warning(draft, caplog):
    draft["meals"] = []
    with caplog.at_level(logging.WARNING, logger="core.plan_reconciler"):
        plan = rec.reconcile(draft, TARGET)
    assert "empty 'meals'" in caplog.text
    assert plan.meals == []
    assert plan.daily_totals.calories == TARGET


# ── non-finite / absurd numbers from the JSON text ─────────────────
@pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity", "1e30", "1e300"])
@pytest.mark.parametrize(
    "path",
    [("meals", 0, "macros", "protein"), ("meals", 2, "macros", "calories"), ("dailyTotals", "protein")],
)
def test_unusable_numbers_are_malformed(draft, path, literal):
    node = draft
    for key in path[:-1]:
        node = node[key]
    node[path[-1]] = "__VALUE__"
    raw = json.dumps(draft).replace('"__VALUE__"', literal)

    with pytest.raises(MalformedPlan):
        rec.reconcile(parse_draft(raw), TARGET)


# ── raw payload ──────────────────────────────────────────────────────
@pytest.mark.parametrize("raw", [None, "", "   \n", "{}", "not json", "[1, 2]", b""])
def test_unusable_payload_is_empty_response(raw):
    with pytest.raises(EmptyResponse):
        parse_draft(raw)


def test_parse_draft_plain_and_fenced(draft):
    text = json.dumps(draft)
    assert parse_draft(text) == draft
    assert parse_draft(f"```json\n{text}\n```") == draft
    assert parse_draft(text.encode()) == draft


def test_errors_share_a_base():
    assert issubclass(MalformedPlan, PlanError)
    assert issubclass(EmptyResponse, PlanError)
