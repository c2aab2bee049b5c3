"""First-in-first-out batch selection."""

from batchtrace.config import get_logger
from batchtrace.core.entities.inventory import Batch
from batchtrace.core.exceptions import NoEligibleBatchError
from batchtrace.core.services.registries import BatchRegistry

logger = get_logger(__name__)


class FifoAllocator:
    """Picks the oldest batch of an item that still has stock.

    Ties on ``created_at`` go to the batch registered first.
    """

    def __init__(self, batches: BatchRegistry):
        self._batches = batches

    def candidates(self, item_id: str) -> list[Batch]:
        """Eligible batches for an item in FIFO order."""
        eligible = [
            (batch.created_at, index, batch)
            for index, batch in enumerate(self._batches)
            if batch.item_id == item_id and batch.remaining_qty > 0
        ]
        eligible.sort(key=lambda entry: (entry[0], entry[1]))
        return [batch for _, _, batch in eligible]

    def select(self, item_id: str) -> Batch:
        candidates = self.candidates(item_id)
        if not candidates:
            raise NoEligibleBatchError(item_id)
        chosen = candidates[0]
        logger.debug("fifo_batch_selected", item_id=item_id, batch_code=chosen.code)
        return chosen
