"""Engine outputs: action results, KPIs and traceability graphs."""

from __future__ import annotations

from pydantic import BaseModel, Field


class Kpi(BaseModel):
    """Headline stock and wastage figures."""

    raw_quantity_kg: float = 0.0
    raw_value: float = 0.0
    bulk_quantity_kg: float = 0.0
    bulk_value: float = 0.0
    fg_quantity_pcs: float = 0.0
    fg_value: float = 0.0
    wastage_percent: float = 0.0
    low_stock_count: int = 0
    currency: str = "INR"


class ActionResult(BaseModel):
    """Outcome of one engine action. Failures carry messages, never raise."""

    action_type: str
    success: bool = False
    messages: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    error_code: str | None = None
    kpi: Kpi | None = None


class TraceabilityNode(BaseModel):
    """One batch in a recall graph, with its upstream source batches."""

    batch_code: str
    item_id: str
    quantity: float
    children: list[TraceabilityNode] = Field(default_factory=list)

    def depth(self) -> int:
        """Number of nodes on the longest path from this node."""
        node, count = self, 1
        while node.children:
            node = node.children[0]
            count += 1
        return count


class TraceabilityGraph(BaseModel):
    """Recall graph rooted at the queried batch."""

    root: TraceabilityNode
