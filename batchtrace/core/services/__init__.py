"""Domain services: the costing engine and its collaborators."""

from batchtrace.core.services.alerting import rebuild_alerts
from batchtrace.core.services.catalog import Catalog
from batchtrace.core.services.engine import InventoryEngine
from batchtrace.core.services.fifo_allocator import FifoAllocator
from batchtrace.core.services.guided_sequencer import GuidedSequencer
from batchtrace.core.services.kpi import compute_kpi, wastage_percent
from batchtrace.core.services.registries import (
    BatchRegistry,
    LotRegistry,
    SerialCounters,
    StockPositionTable,
    TransactionLedger,
)
from batchtrace.core.services.seed import GUIDED_STEPS, SEED_PROFILES, make_seed
from batchtrace.core.services.traceability import TraceabilityResolver

__all__ = [
    "BatchRegistry",
    "Catalog",
    "FifoAllocator",
    "GUIDED_STEPS",
    "GuidedSequencer",
    "InventoryEngine",
    "LotRegistry",
    "SEED_PROFILES",
    "SerialCounters",
    "StockPositionTable",
    "TraceabilityResolver",
    "TransactionLedger",
    "compute_kpi",
    "make_seed",
    "rebuild_alerts",
    "wastage_percent",
]
