"""Full serializable engine state exchanged with the persistence boundary."""

from pydantic import BaseModel, Field

from batchtrace.core.entities.catalog import Item, Party, Recipe
from batchtrace.core.entities.inventory import (
    Alert,
    Batch,
    LedgerEntry,
    Lot,
    ProductionStats,
    StockPosition,
)

SERIAL_PREFIXES = ("LOT", "BAT", "GRN", "DIS", "PRD", "PCK")


def default_serials() -> dict[str, int]:
    """Fresh serial counters, one per code prefix."""
    return {prefix: 1 for prefix in SERIAL_PREFIXES}


class GuidedStep(BaseModel):
    """One scripted step of the guided walkthrough."""

    id: str
    title: str
    description: str
    expected_outcome: str


class GuidedProgress(BaseModel):
    """Where the guided walkthrough currently stands."""

    steps: list[GuidedStep] = Field(default_factory=list)
    current_step_id: str | None = None
    completed_steps: list[str] = Field(default_factory=list)


class EngineSnapshot(BaseModel):
    """Everything the engine owns, plus the catalog it was built with."""

    seed_profile: str = "standard"
    currency: str = "INR"
    items: list[Item] = Field(default_factory=list)
    recipes: list[Recipe] = Field(default_factory=list)
    suppliers: list[Party] = Field(default_factory=list)
    customers: list[Party] = Field(default_factory=list)
    positions: dict[str, StockPosition] = Field(default_factory=dict)
    batches: list[Batch] = Field(default_factory=list)
    lots: list[Lot] = Field(default_factory=list)
    ledger: list[LedgerEntry] = Field(default_factory=list)
    alerts: list[Alert] = Field(default_factory=list)
    serials: dict[str, int] = Field(default_factory=default_serials)
    stats: ProductionStats = Field(default_factory=ProductionStats)
    guided: GuidedProgress = Field(default_factory=GuidedProgress)
    activity_timeline: list[str] = Field(default_factory=list)
