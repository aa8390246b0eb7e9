from __future__ import annotations
from typing import Literal

from fastapi import APIRouter, HTTPException, Query

from core.food_exchange import MAX_AMOUNT_G, FoodExchanger
from api.v1.schemas import EquivalentOut, ExchangeOut, FoodOut, PortionOut

router = APIRouter()
_exchanger = FoodExchanger()


# ───────────────────────── search ───────────────────────────
@router.get("", response_model=list[FoodOut])
def search_foods(q: str = Query("", description="substring of the food name")) -> list[FoodOut]:
    return [FoodOut(**row) for row in _exchanger.search(q).to_dict(orient="records")]


# ───────────────────────── exchange ─────────────────────────
@router.get("/{name}/equivalents", response_model=ExchangeOut)
def food_equivalents(
    name: str,
    amount: float = Query(
        100, gt=0, le=MAX_AMOUNT_G, allow_inf_nan=False, description="grams of the selected food",
    ),
    mode: Literal["macros", "calories"] = "macros",
) -> ExchangeOut:
    try:
        selected = _exchanger.portion(name, amount)
        alts = _exchanger.equivalents(name, amount, mode)
    except KeyError:
        raise HTTPException(status_code=404, detail="Food not found")

    return ExchangeOut(
        selected=PortionOut(**selected),
        mode=mode,
        equivalents=[EquivalentOut(**row) for row in alts.to_dict(orient="records")],
    )
