"""
Domain exceptions for the batchtrace engine.

Four recoverable kinds are raised inside the engine and converted into a
failed ``ActionResult`` at its boundary: validation, reference, insufficiency
and policy errors. Storage errors come from the persistence collaborators and
propagate.
"""

from typing import Any


class BatchTraceError(Exception):
    """Base exception for all batchtrace errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Validation Exceptions
class ValidationError(BatchTraceError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            message,
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "value": str(value)[:100] if value is not None else None,
            },
        )
        self.field = field


class UnsupportedActionError(ValidationError):
    """Action type is not one the engine knows how to apply."""

    def __init__(self, action_type: str):
        super().__init__(
            field="type",
            message=f"unsupported action type: {action_type}",
            value=action_type,
        )
        self.code = "UNSUPPORTED_ACTION"


# Reference Exceptions
class ReferenceNotFoundError(BatchTraceError):
    """Base exception for unknown item, batch, recipe or step references."""

    pass


class ItemNotFoundError(ReferenceNotFoundError):
    """Item is not in the catalog."""

    def __init__(self, item_id: str):
        super().__init__(
            f"item not found: {item_id}",
            code="ITEM_NOT_FOUND",
            details={"item_id": item_id},
        )


class BatchNotFoundError(ReferenceNotFoundError):
    """Batch code is not in the batch registry."""

    def __init__(self, batch_code: str):
        super().__init__(
            f"batch not found: {batch_code}",
            code="BATCH_NOT_FOUND",
            details={"batch_code": batch_code},
        )


class RecipeNotFoundError(ReferenceNotFoundError):
    """Recipe code is not in the catalog."""

    def __init__(self, recipe_code: str):
        super().__init__(
            f"recipe not found: {recipe_code}",
            code="RECIPE_NOT_FOUND",
            details={"recipe_code": recipe_code},
        )


class StepNotFoundError(ReferenceNotFoundError):
    """Guided step id is not part of the script."""

    def __init__(self, step_id: str):
        super().__init__(
            f"guided step not found: {step_id}",
            code="STEP_NOT_FOUND",
            details={"step_id": step_id},
        )


# Insufficiency Exceptions
class InsufficiencyError(BatchTraceError):
    """Requested quantity exceeds what is available."""

    pass


class InsufficientStockError(InsufficiencyError):
    """Item position cannot cover the requested quantity."""

    def __init__(self, item_id: str, requested: float, available: float, label: str | None = None):
        super().__init__(
            f"insufficient stock for {label or item_id}: "
            f"requested {requested:.4f}, available {available:.4f}",
            code="INSUFFICIENT_STOCK",
            details={
                "item_id": item_id,
                "requested": requested,
                "available": available,
            },
        )


class InsufficientBatchQuantityError(InsufficiencyError):
    """Batch remainder cannot cover the requested quantity."""

    def __init__(self, batch_code: str, requested: float, available: float):
        super().__init__(
            f"insufficient quantity in batch {batch_code}: "
            f"requested {requested:.4f}, remaining {available:.4f}",
            code="INSUFFICIENT_BATCH_QUANTITY",
            details={
                "batch_code": batch_code,
                "requested": requested,
                "available": available,
            },
        )


class NoEligibleBatchError(InsufficiencyError):
    """No batch with remaining quantity exists for the item."""

    def __init__(self, item_id: str):
        super().__init__(
            f"no eligible batch for {item_id}",
            code="NO_ELIGIBLE_BATCH",
            details={"item_id": item_id},
        )


# Policy Exceptions
class PolicyViolationError(BatchTraceError):
    """Action contradicts an allocation policy."""

    pass


class FifoPolicyViolationError(PolicyViolationError):
    """Dispatch batch differs from the FIFO suggestion without override."""

    def __init__(self, requested_batch: str, suggested_batch: str):
        super().__init__(
            f"selected batch {requested_batch} is not the FIFO suggestion "
            f"({suggested_batch}); set override_fifo=true",
            code="FIFO_POLICY_VIOLATION",
            details={
                "requested_batch": requested_batch,
                "suggested_batch": suggested_batch,
            },
        )


# Traceability Exceptions
class TraceDepthExceededError(BatchTraceError):
    """Provenance chain is longer than the configured cap."""

    def __init__(self, batch_code: str, max_depth: int):
        super().__init__(
            f"traceability for {batch_code} exceeds max depth {max_depth}",
            code="TRACE_DEPTH_EXCEEDED",
            details={"batch_code": batch_code, "max_depth": max_depth},
        )


# Storage Exceptions
class StorageError(BatchTraceError):
    """Base exception for snapshot persistence."""

    pass


class SnapshotCorruptedError(StorageError):
    """Persisted snapshot cannot be decoded."""

    def __init__(self, key: str, reason: str):
        super().__init__(
            f"Snapshot '{key}' is corrupted: {reason}",
            code="SNAPSHOT_CORRUPTED",
            details={"key": key, "reason": reason[:200]},
        )


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class ConfigurationError(BatchTraceError):
    """Configuration error."""

    pass
