"""Guided walkthrough endpoints."""

from fastapi import APIRouter, Depends

from batchtrace.api.dependencies import get_guided_step_use_case
from batchtrace.application.dto.responses import ErrorResponse, GuidedStepResponse
from batchtrace.application.use_cases import RunGuidedStepUseCase

router = APIRouter(prefix="/api/guided", tags=["guided"])


@router.post(
    "/{step_id}",
    response_model=GuidedStepResponse,
    responses={404: {"model": ErrorResponse}},
)
async def run_guided_step(
    step_id: str,
    use_case: RunGuidedStepUseCase = Depends(get_guided_step_use_case),
) -> GuidedStepResponse:
    result = await use_case.execute(step_id)
    return use_case.to_response(result)
