"""Re-export individual schema modules for easy imports."""

from .profile import ProfileIn, EnergyOut, PlanRequest
from .food import FoodOut, EquivalentOut, PortionOut, ExchangeOut

__all__ = [
    "ProfileIn",
    "EnergyOut",
    "PlanRequest",
    "FoodOut",
    "EquivalentOut",
    "PortionOut",
    "ExchangeOut",
]
