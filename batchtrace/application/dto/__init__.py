"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.
"""

from batchtrace.application.dto.requests import ActionRequest, ResetRequest
from batchtrace.application.dto.responses import (
    ActionResultResponse,
    AlertResponse,
    BatchResponse,
    ComponentHealthResponse,
    EngineStateResponse,
    ErrorResponse,
    GuidedProgressResponse,
    GuidedStepResponse,
    HealthResponse,
    KpiResponse,
    LedgerEntryResponse,
    LotResponse,
    ResetResponse,
    StockPositionResponse,
    TraceabilityResponse,
)

__all__ = [
    # Requests
    "ActionRequest",
    "ResetRequest",
    # Responses
    "ActionResultResponse",
    "AlertResponse",
    "BatchResponse",
    "ComponentHealthResponse",
    "EngineStateResponse",
    "ErrorResponse",
    "GuidedProgressResponse",
    "GuidedStepResponse",
    "HealthResponse",
    "KpiResponse",
    "LedgerEntryResponse",
    "LotResponse",
    "ResetResponse",
    "StockPositionResponse",
    "TraceabilityResponse",
]
