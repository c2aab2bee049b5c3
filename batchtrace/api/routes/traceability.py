"""Batch traceability endpoints."""

from fastapi import APIRouter, Depends

from batchtrace.api.dependencies import get_traceability_use_case
from batchtrace.application.dto.responses import ErrorResponse, TraceabilityResponse
from batchtrace.application.use_cases import GetTraceabilityUseCase

router = APIRouter(prefix="/api/traceability", tags=["traceability"])


@router.get(
    "/{batch_code}",
    response_model=TraceabilityResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def get_traceability(
    batch_code: str,
    use_case: GetTraceabilityUseCase = Depends(get_traceability_use_case),
) -> TraceabilityResponse:
    """Recall graph from a batch back to its origin batch."""
    graph = await use_case.execute(batch_code)
    return use_case.to_response(graph)
