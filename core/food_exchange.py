"""
core/food_exchange.py
────────────────────────────────────────────────────────────────────────
"Smart exchanger": swap one food for another of the same category and
get the grams that keep the plan on track.

Values are per 100 g.  Two matching modes:

* ``macros``   – match the category's dominant macro
                 (protein → protein, carb → carbs, fat → fat)
* ``calories`` – match total kcal
"""

from __future__ import annotations

import logging
import math
from typing import Literal

import pandas as pd

from core.energy import round_half_up

_LOG = logging.getLogger(__name__)

Mode = Literal["macros", "calories"]

MAX_AMOUNT_G = 10_000

DOMINANT = {"protein": "protein", "carb": "carbs", "fat": "fat"}

_CATALOGUE = [
    # proteins
    ("Chicken Breast", "protein", 23, 0, 1, 110),
    ("Hake", "protein", 18, 0, 2, 90),
    ("Pork Loin", "protein", 21, 0, 8, 155),
    ("Tofu", "protein", 8, 2, 5, 76),
    ("Salmon", "protein", 20, 0, 13, 200),
    ("Egg Whites", "protein", 11, 0.7, 0, 50),
    ("Whey Protein (powder)", "protein", 75, 5, 3, 350),
    ("Tuna in Water", "protein", 24, 0, 0.8, 105),
    ("Lean Beef", "protein", 22, 0, 6, 145),
    ("Prawns", "protein", 20, 0, 1.5, 95),
    ("Quark", "protein", 8, 3.5, 0.1, 47),
    # carbs
    ("White Rice", "carb", 2.7, 28, 0.3, 130),
    ("Brown Rice", "carb", 2.6, 25, 1, 115),
    ("Boiled Potato", "carb", 2, 17, 0.1, 77),
    ("Wholewheat Pasta", "carb", 5.3, 26, 1.5, 140),
    ("Oats", "carb", 13, 66, 7, 389),
    ("Sweet Potato", "carb", 1.6, 20, 0.1, 86),
    ("Cooked Quinoa", "carb", 4.4, 21, 1.9, 120),
    ("Rye Bread", "carb", 8, 48, 3, 250),
    ("Cooked Lentils", "carb", 9, 20, 0.4, 116),
    ("Cooked Chickpeas", "carb", 9, 27, 2.6, 164),
    # fats
    ("Avocado", "fat", 2, 9, 15, 160),
    ("Olive Oil", "fat", 0, 0, 100, 884),
    ("Walnuts", "fat", 15, 14, 65, 654),
    ("Almonds", "fat", 21, 22, 50, 579),
    ("Peanuts", "fat", 26, 16, 49, 567),
    ("Peanut Butter", "fat", 24, 20, 50, 590),
]

COLUMNS = ["name", "category", "protein", "carbs", "fat", "calories"]


def default_catalogue() -> pd.DataFrame:
    return pd.DataFrame(_CATALOGUE, columns=COLUMNS)


class FoodExchanger:
    def __init__(self, foods: pd.DataFrame | None = None) -> None:
        self._foods = (foods if foods is not None else default_catalogue()).copy()
        missing = [c for c in COLUMNS if c not in self._foods.columns]
        if missing:
            raise KeyError(f"Food DataFrame missing columns: {missing}")

    # ─────────────────────────────── lookup ───────────────────────── #
    def search(self, term: str) -> pd.DataFrame:
        """Case-insensitive substring match on the food name."""
        if not term or not term.strip():
            return self._foods.iloc[0:0]
        mask = self._foods["name"].str.contains(term.strip(), case=False, regex=False)
        return self._foods[mask].reset_index(drop=True)

    def get(self, name: str) -> pd.Series:
        hits = self._foods[self._foods["name"].str.lower() == name.strip().lower()]
        if hits.empty:
            raise KeyError(f"unknown food: {name}")
        return hits.iloc[0]

    # ─────────────────────────────── maths ────────────────────────── #
    def portion(self, name: str, amount: float = 100) -> dict[str, float | str | int]:
        """Rounded macros for `amount` grams of `name`."""
        food = self.get(name)
        amount = _clamp_amount(amount)
        scale = amount / 100
        return {
            "name": food["name"],
            "category": food["category"],
            "amount_g": round_half_up(amount),
            **{k: round_half_up(food[k] * scale) for k in ("protein", "carbs", "fat", "calories")},
        }

    def equivalents(
        self,
        name: str,
        amount: float = 100,
        mode: Mode = "macros",
    ) -> pd.DataFrame:
        """Same-category alternatives with the grams needed to match `amount` of `name`."""
        selected = self.get(name)
        amount = _clamp_amount(amount)
        key = "calories" if mode == "calories" else DOMINANT[selected["category"]]

        df = self._foods[
            (self._foods["category"] == selected["category"])
            & (self._foods["name"] != selected["name"])
        ]
        # nothing sensible to match against
        df = df[df[key] > 0]

        grams = [round_half_up(amount * selected[key] / v) for v in df[key]]
        _LOG.debug("%d equivalents for %s (%s mode)", len(grams), selected["name"], mode)
        return df.assign(amount_g=grams).reset_index(drop=True)


def _clamp_amount(amount: float) -> float:
    if not math.isfinite(amount) or amount > MAX_AMOUNT_G:
        raise ValueError(f"amount must be a finite number of grams ≤ {MAX_AMOUNT_G}: {amount!r}")
    return max(amount, 1)
