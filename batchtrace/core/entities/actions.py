"""
Engine actions as a tagged union.

Every action is ``{"type": ..., "payload": {...}}``. Payloads are strict:
missing fields, unknown fields, wrong types and out-of-range numbers are
rejected at the boundary instead of being coerced.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from batchtrace.core.exceptions import UnsupportedActionError, ValidationError

MAX_QUANTITY = 1e9
MAX_UNIT_RATE = 1e9
MAX_EXPIRY_DAYS = 36500


class ActionType(str, Enum):
    """Supported action types."""

    RECEIPT = "receipt"
    EXTERNAL_BULK_RECEIPT = "external_bulk_receipt"
    PRODUCTION = "production"
    PACKING = "packing"
    DISPATCH = "dispatch"


class _Payload(BaseModel):
    model_config = ConfigDict(strict=True, extra="forbid", frozen=True)


class ReceiptPayload(_Payload):
    """Goods received note for any catalog item."""

    item_id: str = Field(..., min_length=1)
    quantity: float = Field(..., gt=0, le=MAX_QUANTITY, allow_inf_nan=False)
    unit_rate: float = Field(..., ge=0, le=MAX_UNIT_RATE, allow_inf_nan=False)
    supplier_id: str = Field(..., min_length=1)
    expiry_days: int | None = Field(default=None, ge=0, le=MAX_EXPIRY_DAYS)
    source: str = "raw"


class ProductionPayload(_Payload):
    """Run a recipe to produce a bulk batch."""

    recipe_code: str = Field(..., min_length=1)
    output_qty_kg: float = Field(..., gt=0, le=MAX_QUANTITY, allow_inf_nan=False)
    wastage_kg: float = Field(default=0.0, ge=0, le=MAX_QUANTITY, allow_inf_nan=False)


class PackingPayload(_Payload):
    """Pack bulk from one batch into finished goods units."""

    source_batch_code: str = Field(..., min_length=1)
    fg_item_id: str = Field(..., min_length=1)
    packaging_item_id: str = Field(..., min_length=1)
    units_produced: int = Field(..., gt=0, le=int(MAX_QUANTITY))


class DispatchPayload(_Payload):
    """Dispatch finished goods to a customer."""

    fg_item_id: str = Field(..., min_length=1)
    quantity: float = Field(..., gt=0, le=MAX_QUANTITY, allow_inf_nan=False)
    batch_code: str | None = None
    override_fifo: bool = False
    customer_id: str = Field(..., min_length=1)


class _Action(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class ReceiptAction(_Action):
    type: Literal["receipt"] = "receipt"
    payload: ReceiptPayload


class ExternalBulkReceiptAction(_Action):
    type: Literal["external_bulk_receipt"] = "external_bulk_receipt"
    payload: ReceiptPayload


class ProductionAction(_Action):
    type: Literal["production"] = "production"
    payload: ProductionPayload


class PackingAction(_Action):
    type: Literal["packing"] = "packing"
    payload: PackingPayload


class DispatchAction(_Action):
    type: Literal["dispatch"] = "dispatch"
    payload: DispatchPayload


Action = Annotated[
    ReceiptAction
    | ExternalBulkReceiptAction
    | ProductionAction
    | PackingAction
    | DispatchAction,
    Field(discriminator="type"),
]

_action_adapter: TypeAdapter[Action] = TypeAdapter(Action)

SUPPORTED_ACTION_TYPES = frozenset(t.value for t in ActionType)


def parse_action(raw: Mapping[str, Any]) -> Action:
    """Validate a raw ``{type, payload}`` mapping into a typed action.

    Raises:
        UnsupportedActionError: type is missing or unknown
        ValidationError: payload is incomplete or out of range
    """
    action_type = raw.get("type") if isinstance(raw, Mapping) else None
    if not isinstance(action_type, str) or action_type not in SUPPORTED_ACTION_TYPES:
        raise UnsupportedActionError(str(action_type))

    try:
        return _action_adapter.validate_python(dict(raw))
    except PydanticValidationError as e:
        first = e.errors()[0]
        # Drop the union tag and the "payload" wrapper from the location
        parts = [str(part) for part in first["loc"][1:]]
        if parts[:1] == ["payload"]:
            parts = parts[1:]
        loc = ".".join(parts) or "payload"
        raise ValidationError(
            field=loc,
            message=f"invalid {action_type} payload: {loc}: {first['msg']}",
            value=first.get("input"),
        ) from e
