from __future__ import annotations

from fastapi import APIRouter, status

from core.energy import EnergyEstimator
from api.v1.schemas import EnergyOut, ProfileIn

router = APIRouter()
_estimator = EnergyEstimator()


@router.post("", response_model=EnergyOut, status_code=status.HTTP_200_OK)
def estimate_energy(body: ProfileIn) -> EnergyOut:
    p = body.to_profile()
    return EnergyOut(
        bmr=round(_estimator.bmr(p), 3),
        maintenance=round(_estimator.maintenance(p), 3),
        adjustment=_estimator.adjustment(p.goal),
        target=_estimator.estimate(p),
    )
