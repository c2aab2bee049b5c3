"""Response DTOs for the API layer."""

from datetime import datetime

from pydantic import BaseModel, Field

from batchtrace.core.entities.results import TraceabilityNode


class KpiResponse(BaseModel):
    """Headline stock and wastage figures."""

    raw_quantity_kg: float
    raw_value: float
    bulk_quantity_kg: float
    bulk_value: float
    fg_quantity_pcs: float
    fg_value: float
    wastage_percent: float
    low_stock_count: int
    currency: str


class ActionResultResponse(BaseModel):
    """Outcome of one engine action."""

    action_type: str
    success: bool
    messages: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    error_code: str | None = None
    kpi: KpiResponse | None = None


class StockPositionResponse(BaseModel):
    """Stock position DTO."""

    item_id: str
    unit: str
    quantity: float
    value: float
    avg_cost: float
    updated_at: datetime | None = None


class BatchResponse(BaseModel):
    """Batch DTO."""

    code: str
    item_id: str
    quantity: float
    remaining_qty: float
    unit: str
    value: float
    source_batch_code: str | None = None
    source_type: str
    created_at: datetime


class LotResponse(BaseModel):
    code: str
    item_id: str
    quantity: float
    expiry_date: datetime
    source_ref: str


class LedgerEntryResponse(BaseModel):
    ref_code: str
    type: str
    item_id: str
    quantity: float
    value: float
    description: str
    occurred_at: datetime


class AlertResponse(BaseModel):
    level: str
    item_id: str
    message: str


class GuidedProgressResponse(BaseModel):
    """Guided walkthrough progress."""

    current_step_id: str | None = None
    completed_steps: list[str] = Field(default_factory=list)
    step_ids: list[str] = Field(default_factory=list)


class EngineStateResponse(BaseModel):
    """Full engine state as seen by readers."""

    seed_profile: str
    currency: str
    positions: list[StockPositionResponse]
    batches: list[BatchResponse]
    lots: list[LotResponse]
    ledger: list[LedgerEntryResponse]
    alerts: list[AlertResponse]
    kpi: KpiResponse
    guided: GuidedProgressResponse
    activity_timeline: list[str] = Field(default_factory=list)


class TraceabilityResponse(BaseModel):
    """Recall graph rooted at the queried batch."""

    batch_code: str
    depth: int
    root: TraceabilityNode


class GuidedStepResponse(BaseModel):
    """Result of running one guided step."""

    step_id: str
    results: list[ActionResultResponse] = Field(default_factory=list)
    guided: GuidedProgressResponse
    kpi: KpiResponse


class ResetResponse(BaseModel):
    """Result of an engine reset."""

    seed_profile: str
    items: int
    recipes: int
    guided: GuidedProgressResponse


class ComponentHealthResponse(BaseModel):
    """Health of one backing component."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ComponentHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. BATCH_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
