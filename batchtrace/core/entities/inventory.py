"""Inventory domain entities: positions, batches, lots and the ledger."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, computed_field

from batchtrace.core.precision import round2


class StockPosition(BaseModel):
    """Running quantity and value of one item.

    ``avg_cost`` is always derived from ``value`` and ``quantity``.
    """

    item_id: str
    unit: str = ""
    quantity: float = Field(default=0.0, ge=0)
    value: float = Field(default=0.0, ge=0)
    updated_at: datetime | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def avg_cost(self) -> float:
        """Weighted Average Cost per unit."""
        if self.quantity > 0:
            return round2(self.value / self.quantity)
        return 0.0


class BatchSourceType(str, Enum):
    """How a batch came into existence."""

    IN_HOUSE = "in-house"
    EXTERNAL = "external"
    PACKED = "packed"


class Batch(BaseModel):
    """Discrete production, packing or bulk receipt output."""

    code: str
    item_id: str
    quantity: float
    remaining_qty: float = Field(..., ge=0)
    unit: str = ""
    value: float
    source_batch_code: str | None = None
    source_type: BatchSourceType
    created_at: datetime


class Lot(BaseModel):
    """Shelf-life record for a RAW or PACK receipt."""

    code: str
    item_id: str
    quantity: float
    expiry_date: datetime
    source_ref: str


class MovementType(str, Enum):
    """Kinds of ledger movement."""

    GRN = "GRN"
    PRODUCTION_CONSUME = "PRODUCTION_CONSUME"
    PRODUCTION_OUTPUT = "PRODUCTION_OUTPUT"
    PACKING_CONSUME_BULK = "PACKING_CONSUME_BULK"
    PACKING_CONSUME_PACKING = "PACKING_CONSUME_PACKING"
    PACKING_OUTPUT_FG = "PACKING_OUTPUT_FG"
    DISPATCH = "DISPATCH"


class LedgerEntry(BaseModel):
    """Append-only stock movement. Positive quantity/value means stock in."""

    ref_code: str
    type: MovementType
    item_id: str
    quantity: float
    value: float
    description: str = ""
    occurred_at: datetime


class Alert(BaseModel):
    """Derived low-stock warning."""

    level: str = "warning"
    item_id: str
    message: str


class ProductionStats(BaseModel):
    """Aggregate production input and wastage for the wastage KPI."""

    total_raw_input_kg: float = 0.0
    total_wastage_kg: float = 0.0
