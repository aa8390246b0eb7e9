# services/gemini.py
from __future__ import annotations

import logging
import random
import time
from typing import Any

from google import genai
from google.genai import types, errors as gerrors

from config import Settings
from core.energy import BiometricProfile, EnergyEstimator, Goal
from core.models.plan import ReconciledMealPlan
from core.models.questionnaire import HealthQuestionnaire
from core.plan_reconciler import PlanReconciler, parse_draft

_LOG = logging.getLogger(__name__)

# ───────────── Response contract ─────────────
_MACROS = {
    "type": "OBJECT",
    "properties": {
        "protein": {"type": "NUMBER"},
        "carbs": {"type": "NUMBER"},
        "fats": {"type": "NUMBER"},
        "calories": {"type": "NUMBER"},
    },
    "required": ["protein", "carbs", "fats", "calories"],
}

RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "meals": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "name": {"type": "STRING"},
                    "description": {"type": "STRING"},
                    "macros": _MACROS,
                },
                "required": ["name", "description", "macros"],
            },
        },
        "dailyTotals": {
            "type": "OBJECT",
            "properties": {
                "protein": {"type": "NUMBER"},
                "carbs": {"type": "NUMBER"},
                "fats": {"type": "NUMBER"},
                "calories": {"type": "NUMBER"},
                "tdee": {"type": "NUMBER"},
            },
            "required": ["protein", "carbs", "fats", "calories", "tdee"],
        },
        "recommendations": {"type": "ARRAY", "items": {"type": "STRING"}},
    },
    "required": ["meals", "dailyTotals", "recommendations"],
}


# ───────────── Prompts ─────────────
def system_instruction(target: int) -> str:
    return (
        "You are the head nutritionist at Forza Cangas Nutrition. "
        "You build meal plans from EXACT numbers.\n"
        f"GOLDEN RULE: the daily calorie total MUST be exactly {target}.\n"
        "Every macronutrient and calorie value must be a whole number. NO decimals."
    )


def build_prompt(
    profile: BiometricProfile,
    health: HealthQuestionnaire,
    target: int,
) -> str:
    lines = [
        "GENERATE AN ELITE NUTRITION PROTOCOL:",
        f"- CALCULATED TDEE (FIXED): {target} kcal",
        f"- Goal: {Goal(profile.goal).value.replace('_', ' ')}",
        f"- Number of meals: {profile.meal_count}",
        f"- Metabolic profile: stress {health.stress_level.value}, "
        f"sleep {health.sleep_quality.value}, water intake {health.water_intake.value}.",
    ]
    if health.injuries.strip():
        lines.append(f"- Injuries: {health.injuries.strip()}")
    if health.allergies.strip():
        lines.append(f"- Allergies / intolerances (NEVER include): {health.allergies.strip()}")
    lines += [
        "",
        "JSON RULES:",
        f"1. dailyTotals.calories = {target}.",
        f"2. The sum of macros.calories over all meals = {target}.",
        "3. All values (protein, carbs, fats, calories) are rounded WHOLE numbers.",
        "4. Use realistic dish names that list their ingredients.",
    ]
    return "\n".join(lines)


# ───────────── Generator ─────────────
class MealPlanGenerator:
    """estimate ➜ Gemini ➜ parse ➜ reconcile, in that order."""

    def __init__(
        self,
        settings: Settings,
        client: genai.Client | None = None,
        estimator: EnergyEstimator | None = None,
        reconciler: PlanReconciler | None = None,
    ) -> None:
        if client is None:
            if not settings.gemini_api_key:
                raise RuntimeError("GEMINI_API_KEY not set in settings")
            client = genai.Client(api_key=settings.gemini_api_key)
        self._client = client
        self._settings = settings
        self._estimator = estimator or EnergyEstimator()
        self._reconciler = reconciler or PlanReconciler()

    def generate_plan(
        self,
        profile: BiometricProfile,
        health: HealthQuestionnaire | None = None,
    ) -> ReconciledMealPlan:
        health = health or HealthQuestionnaire()
        target = self._estimator.estimate(profile)

        raw = self.generate(build_prompt(profile, health, target), system_instruction(target))
        draft = parse_draft(raw)
        return self._reconciler.reconcile(draft, target)

    def generate(self, prompt: str, instruction: str) -> str | None:
        """Run one structured completion, retrying on rate limits."""
        cfg = types.GenerateContentConfig(
            system_instruction=instruction,
            temperature=self._settings.gemini_temperature,
            max_output_tokens=self._settings.gemini_max_output_tokens,
            response_mime_type="application/json",
            response_schema=RESPONSE_SCHEMA,
        )
        retries = self._settings.gemini_max_retries
        for attempt in range(retries + 1):
            try:
                resp = self._client.models.generate_content(
                    model=self._settings.gemini_model,
                    contents=[prompt],
                    config=cfg,
                )
                return resp.text
            except gerrors.ClientError as e:
                if _rate_limited(e) and attempt < retries:
                    backoff = (2 ** attempt) + random.random()
                    _LOG.warning("Gemini 429, retrying in %.1fs (attempt %d)", backoff, attempt + 1)
                    time.sleep(backoff)
                    continue
                _LOG.error("Gemini generation failed: %s", e)
                raise
            except Exception as e:
                _LOG.error("Gemini generation failed: %s", e)
                raise
        raise RuntimeError("Gemini retries exhausted")  # pragma: no cover


def _rate_limited(e: gerrors.ClientError) -> bool:
    return getattr(e, "status", None) == "RESOURCE_EXHAUSTED" or getattr(e, "code", None) == 429
