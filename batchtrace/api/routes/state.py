"""Engine state, KPI and reset endpoints."""

from fastapi import APIRouter, Depends

from batchtrace.api.dependencies import get_engine_state_use_case, get_reset_use_case
from batchtrace.application.dto.requests import ResetRequest
from batchtrace.application.dto.responses import (
    EngineStateResponse,
    ErrorResponse,
    KpiResponse,
    ResetResponse,
)
from batchtrace.application.use_cases import GetEngineStateUseCase, ResetEngineUseCase
from batchtrace.application.use_cases.engine_session import kpi_response

router = APIRouter(prefix="/api", tags=["state"])


@router.get("/state", response_model=EngineStateResponse)
async def get_state(
    use_case: GetEngineStateUseCase = Depends(get_engine_state_use_case),
) -> EngineStateResponse:
    """Positions, batches, lots, ledger, alerts and guided progress."""
    state = await use_case.execute()
    return use_case.to_response(state)


@router.get("/kpi", response_model=KpiResponse)
async def get_kpi(
    use_case: GetEngineStateUseCase = Depends(get_engine_state_use_case),
) -> KpiResponse:
    return kpi_response(await use_case.kpi())


@router.post(
    "/reset",
    response_model=ResetResponse,
    responses={500: {"model": ErrorResponse}},
)
async def reset_engine(
    request: ResetRequest | None = None,
    use_case: ResetEngineUseCase = Depends(get_reset_use_case),
) -> ResetResponse:
    """Discard all movements and reload the seed catalog."""
    snapshot = await use_case.execute(request)
    return use_case.to_response(snapshot)
