from __future__ import annotations
from typing import Literal

from pydantic import BaseModel

Category = Literal["protein", "carb", "fat"]


class FoodOut(BaseModel):
    name: str
    category: Category
    protein: float
    carbs: float
    fat: float
    calories: float


class EquivalentOut(FoodOut):
    amount_g: int


class PortionOut(BaseModel):
    name: str
    category: Category
    amount_g: int
    protein: int
    carbs: int
    fat: int
    calories: int


class ExchangeOut(BaseModel):
    selected: PortionOut
    mode: Literal["macros", "calories"]
    equivalents: list[EquivalentOut]
