# api/v1/router.py
from fastapi import APIRouter

from . import energy, plans, foods

api_router = APIRouter()

api_router.include_router(energy.router, prefix="/energy", tags=["Energy"])
api_router.include_router(plans.router, prefix="/plans", tags=["Plans"])
api_router.include_router(foods.router, prefix="/foods", tags=["Food exchange"])
