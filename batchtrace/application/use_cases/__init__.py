"""Application use cases."""

from batchtrace.application.use_cases.execute_action import ExecuteActionUseCase
from batchtrace.application.use_cases.get_engine_state import (
    EngineState,
    GetEngineStateUseCase,
)
from batchtrace.application.use_cases.get_traceability import GetTraceabilityUseCase
from batchtrace.application.use_cases.reset_engine import ResetEngineUseCase
from batchtrace.application.use_cases.run_guided_step import (
    GuidedStepResult,
    RunGuidedStepUseCase,
)

__all__ = [
    "ExecuteActionUseCase",
    "GetEngineStateUseCase",
    "EngineState",
    "GetTraceabilityUseCase",
    "ResetEngineUseCase",
    "RunGuidedStepUseCase",
    "GuidedStepResult",
]
