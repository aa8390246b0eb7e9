from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    # JSON side speaks the LLM contract (camelCase), Python side snake_case
    model_config = ConfigDict(populate_by_name=True)


class MealMacros(_CamelModel):
    protein: int = 0
    carbs: int = 0
    fats: int = 0
    calories: int = 0


class Meal(_CamelModel):
    name: str = ""
    description: str = ""
    macros: MealMacros
    # only some prompt variants ask for these – present or absent, never guessed
    image: str | None = None
    image_description: str | None = Field(None, alias="imageDescription")


class DailyTotals(_CamelModel):
    calories: int
    tdee: int
    protein: int | None = None
    carbs: int | None = None
    fats: int | None = None


class ReconciledMealPlan(_CamelModel):
    """Meal plan whose numbers have been forced onto the local energy target."""

    meals: list[Meal]
    daily_totals: DailyTotals = Field(alias="dailyTotals")
    recommendations: list[str] = []

    @property
    def calorie_drift(self) -> int:
        """Sum of meal calories minus the headline target (may be non-zero)."""
        return sum(m.macros.calories for m in self.meals) - self.daily_totals.calories

    def as_draft(self) -> dict[str, Any]:
        """Back to the raw JSON shape the generator produces."""
        return self.model_dump(by_alias=True, exclude_none=True)
