"""Plan router — validates a travel request and returns one brief per provider."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from tripbrief.dependencies import get_plan_orchestrator
from tripbrief.schemas.plan import PlanRequest, PlanResponse, ValidationResponse
from tripbrief.services.plan_orchestrator import PlanOrchestrator
from tripbrief.services.request_validator import request_validator
from tripbrief.services.result_normalizer import present

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/validate", response_model=ValidationResponse)
async def validate_request(body: PlanRequest):
    """Run only the request heuristics, without calling any provider."""
    outcome = request_validator.validate(body.text)
    return ValidationResponse(
        valid=outcome.valid,
        reason=outcome.reason.value if outcome.reason else None,
        message=outcome.message,
    )


@router.post("", response_model=PlanResponse)
async def create_plan(
    body: PlanRequest,
    orchestrator: PlanOrchestrator = Depends(get_plan_orchestrator),
):
    result = await orchestrator.plan(body.text)
    if not result.valid:
        raise HTTPException(
            status_code=422,
            detail={
                "reason": result.validation.reason.value,
                "message": result.validation.message,
            },
        )
    return PlanResponse(results=present(result.results_by_provider))
