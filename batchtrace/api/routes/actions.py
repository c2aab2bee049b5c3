"""Engine action endpoints."""

from fastapi import APIRouter, Depends

from batchtrace.api.dependencies import get_execute_action_use_case
from batchtrace.application.dto.requests import ActionRequest
from batchtrace.application.dto.responses import ActionResultResponse, ErrorResponse
from batchtrace.application.use_cases import ExecuteActionUseCase

router = APIRouter(prefix="/api/actions", tags=["actions"])


@router.post(
    "",
    response_model=ActionResultResponse,
    responses={500: {"model": ErrorResponse}},
)
async def execute_action(
    request: ActionRequest,
    use_case: ExecuteActionUseCase = Depends(get_execute_action_use_case),
) -> ActionResultResponse:
    """
    Apply one action to the engine.

    Rejected actions return 200 with ``success=false`` and the reason in
    ``messages``; nothing is applied in that case.
    """
    result = await use_case.execute(request)
    return use_case.to_response(result)
