"""Catalog reference data: items, recipes, suppliers and customers."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ItemCategory(str, Enum):
    """Stage of the manufacturing flow an item belongs to."""

    RAW = "RAW"
    BULK = "BULK"
    PACK = "PACK"
    FG = "FG"


class Item(BaseModel):
    """Catalog item. Never mutated by the engine."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    category: ItemCategory
    unit: str
    pack_weight_grams: float | None = Field(default=None, gt=0)
    min_stock: float = Field(default=0.0, ge=0)

    @model_validator(mode="after")
    def _pack_weight_only_for_fg(self) -> "Item":
        if self.pack_weight_grams is not None and self.category != ItemCategory.FG:
            raise ValueError("pack_weight_grams is only valid for FG items")
        return self

    @property
    def is_lot_tracked(self) -> bool:
        """RAW and PACK receipts carry shelf-life lots."""
        return self.category in (ItemCategory.RAW, ItemCategory.PACK)


class RecipeIngredient(BaseModel):
    """One input line of a recipe, per kg of bulk output."""

    model_config = ConfigDict(frozen=True)

    item_id: str
    ratio_per_kg_out: float = Field(..., gt=0)


class Recipe(BaseModel):
    """Bill of materials producing one bulk item."""

    model_config = ConfigDict(frozen=True)

    code: str = Field(..., min_length=1)
    name: str
    output_item_id: str
    loss_percent: float = Field(default=0.0, ge=0, le=1)
    ingredients: list[RecipeIngredient] = Field(..., min_length=1)


class Party(BaseModel):
    """Supplier or customer."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
