from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from core.energy import ACTIVITY_FACTORS, MEAL_COUNT_RANGE, BiometricProfile, Goal, Sex
from core.models.questionnaire import HealthQuestionnaire


class ProfileIn(BaseModel):
    weight_kg: float = Field(..., gt=0, le=400, examples=[75])
    height_cm: float = Field(..., gt=0, le=260, examples=[175])
    age_years: int = Field(..., gt=0, le=120, examples=[25])
    sex: Sex = Field(..., description="male or female")
    activity_factor: float = Field(1.55, description=f"one of {ACTIVITY_FACTORS}")
    goal: Goal = Goal.performance
    meal_count: int = Field(4, ge=MEAL_COUNT_RANGE[0], le=MEAL_COUNT_RANGE[1])

    @field_validator("activity_factor")
    @classmethod
    def _known_factor(cls, v: float) -> float:
        # only these five multipliers are offered on the form
        for f in ACTIVITY_FACTORS:
            if abs(v - f) < 1e-9:
                return f
        raise ValueError(f"activity_factor must be one of {ACTIVITY_FACTORS}")

    def to_profile(self) -> BiometricProfile:
        return BiometricProfile(**self.model_dump())


class EnergyOut(BaseModel):
    bmr: float
    maintenance: float
    adjustment: int
    target: int


class PlanRequest(BaseModel):
    profile: ProfileIn
    questionnaire: HealthQuestionnaire = HealthQuestionnaire()
