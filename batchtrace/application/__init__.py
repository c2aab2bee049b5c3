"""
Application layer - use cases and DTOs.

Use cases wrap the synchronous engine in an async load/execute/save cycle
against a snapshot store. They are the only entry point for API handlers.
"""

from batchtrace.application.dto.requests import ActionRequest, ResetRequest
from batchtrace.application.use_cases import (
    ExecuteActionUseCase,
    GetEngineStateUseCase,
    GetTraceabilityUseCase,
    ResetEngineUseCase,
    RunGuidedStepUseCase,
)

__all__ = [
    # Request DTOs
    "ActionRequest",
    "ResetRequest",
    # Use Cases
    "ExecuteActionUseCase",
    "GetEngineStateUseCase",
    "GetTraceabilityUseCase",
    "ResetEngineUseCase",
    "RunGuidedStepUseCase",
]
