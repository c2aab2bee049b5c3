"""
Recall graph resolution.

Walks ``source_batch_code`` links from a batch back to its origin. The walk
is iterative with an explicit depth counter so corrupted provenance data
(a cycle or an absurdly long chain) fails instead of looping.
"""

from batchtrace.config import get_logger
from batchtrace.core.entities.inventory import Batch
from batchtrace.core.entities.results import TraceabilityGraph, TraceabilityNode
from batchtrace.core.exceptions import TraceDepthExceededError, ValidationError
from batchtrace.core.services.registries import BatchRegistry

logger = get_logger(__name__)

DEFAULT_MAX_DEPTH = 64


class TraceabilityResolver:
    """Builds provenance trees over the batch registry."""

    def __init__(self, batches: BatchRegistry, max_depth: int = DEFAULT_MAX_DEPTH):
        self._batches = batches
        self._max_depth = max_depth

    def chain(self, batch_code: str) -> list[Batch]:
        """Batches from ``batch_code`` back to its origin, root first.

        Raises:
            ValidationError: empty batch code
            BatchNotFoundError: the root or an ancestor is unknown
            TraceDepthExceededError: chain longer than the depth cap
        """
        if not batch_code:
            raise ValidationError("batch_code", "batch_code is required", batch_code)

        chain = [self._batches.get(batch_code)]
        while chain[-1].source_batch_code:
            if len(chain) >= self._max_depth:
                raise TraceDepthExceededError(batch_code, self._max_depth)
            chain.append(self._batches.get(chain[-1].source_batch_code))
        return chain

    def resolve(self, batch_code: str) -> TraceabilityNode:
        *descendants, origin = self.chain(batch_code)

        node = TraceabilityNode(
            batch_code=origin.code, item_id=origin.item_id, quantity=origin.quantity
        )
        for batch in reversed(descendants):
            node = TraceabilityNode(
                batch_code=batch.code,
                item_id=batch.item_id,
                quantity=batch.quantity,
                children=[node],
            )

        logger.info(
            "traceability_resolved", batch_code=batch_code, depth=len(descendants) + 1
        )
        return node

    def graph(self, batch_code: str) -> TraceabilityGraph:
        return TraceabilityGraph(root=self.resolve(batch_code))
