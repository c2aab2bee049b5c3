"""Core domain entities."""

from batchtrace.core.entities.actions import (
    Action,
    ActionType,
    DispatchAction,
    DispatchPayload,
    ExternalBulkReceiptAction,
    PackingAction,
    PackingPayload,
    ProductionAction,
    ProductionPayload,
    ReceiptAction,
    ReceiptPayload,
    parse_action,
)
from batchtrace.core.entities.catalog import (
    Item,
    ItemCategory,
    Party,
    Recipe,
    RecipeIngredient,
)
from batchtrace.core.entities.inventory import (
    Alert,
    Batch,
    BatchSourceType,
    LedgerEntry,
    Lot,
    MovementType,
    ProductionStats,
    StockPosition,
)
from batchtrace.core.entities.results import (
    ActionResult,
    Kpi,
    TraceabilityGraph,
    TraceabilityNode,
)
from batchtrace.core.entities.snapshot import (
    EngineSnapshot,
    GuidedProgress,
    GuidedStep,
)

__all__ = [
    # Catalog entities
    "Item",
    "ItemCategory",
    "Party",
    "Recipe",
    "RecipeIngredient",
    # Inventory entities
    "StockPosition",
    "Batch",
    "BatchSourceType",
    "Lot",
    "LedgerEntry",
    "MovementType",
    "Alert",
    "ProductionStats",
    # Actions
    "Action",
    "ActionType",
    "ReceiptAction",
    "ReceiptPayload",
    "ExternalBulkReceiptAction",
    "ProductionAction",
    "ProductionPayload",
    "PackingAction",
    "PackingPayload",
    "DispatchAction",
    "DispatchPayload",
    "parse_action",
    # Results
    "ActionResult",
    "Kpi",
    "TraceabilityNode",
    "TraceabilityGraph",
    # Snapshot
    "EngineSnapshot",
    "GuidedProgress",
    "GuidedStep",
]
