"""
Request DTOs for the API layer.

Action payloads are deliberately untyped here; the engine boundary
validates them against the typed action union so HTTP and in-process
callers get the same messages.
"""

from typing import Any

from pydantic import BaseModel, Field


class ActionRequest(BaseModel):
    """Submit one engine action."""

    type: str = Field(
        ...,
        description="Action type: receipt, external_bulk_receipt, production, packing or dispatch",
        examples=["receipt"],
    )
    payload: dict[str, Any] = Field(
        default_factory=dict,
        description="Action payload; fields depend on the action type",
        examples=[
            {
                "item_id": "raw-coriander",
                "quantity": 50,
                "unit_rate": 190,
                "supplier_id": "sup-local-spice",
            }
        ],
    )


class ResetRequest(BaseModel):
    """Reset the engine to a deterministic seed."""

    profile: str | None = Field(
        default=None,
        description="Seed profile; defaults to ENGINE_SEED_PROFILE",
    )
