# api/v1/plans.py
from __future__ import annotations
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from core.errors import EmptyResponse, MalformedPlan
from core.models.plan import ReconciledMealPlan
from services.gemini import MealPlanGenerator
from api.v1.schemas import PlanRequest

router = APIRouter()
_LOG = logging.getLogger(__name__)


def get_generator(request: Request) -> MealPlanGenerator:
    gen = getattr(request.app.state, "generator", None)
    if gen is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Plan generation is not configured",
        )
    return gen


@router.post(
    "",
    response_model=ReconciledMealPlan,
    response_model_by_alias=True,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
)
def create_plan(
    body: PlanRequest,
    gen: MealPlanGenerator = Depends(get_generator),
) -> ReconciledMealPlan:
    try:
        return gen.generate_plan(body.profile.to_profile(), body.questionnaire)
    except EmptyResponse as exc:
        _LOG.warning("empty plan from generator: %s", exc)
        raise HTTPException(status.HTTP_502_BAD_GATEWAY, "Generator returned no plan") from exc
    except MalformedPlan as exc:
        _LOG.warning("malformed plan from generator: %s", exc)
        raise HTTPException(status.HTTP_502_BAD_GATEWAY, f"Generator returned a malformed plan: {exc}") from exc
