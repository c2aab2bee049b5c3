"""Deterministic seed catalog for a masala manufacturing unit."""

from batchtrace.core.entities.catalog import (
    Item,
    ItemCategory,
    Party,
    Recipe,
    RecipeIngredient,
)
from batchtrace.core.entities.inventory import StockPosition
from batchtrace.core.entities.snapshot import EngineSnapshot, GuidedProgress, GuidedStep
from batchtrace.core.exceptions import ConfigurationError

SEED_PROFILES = ("standard",)

GUIDED_STEPS = [
    GuidedStep(
        id="step-1",
        title="Master Setup",
        description="Loaded masters and recipe model.",
        expected_outcome="Catalog configuration is ready.",
    ),
    GuidedStep(
        id="step-2",
        title="Raw GRN",
        description="Receive raw spices and packing material.",
        expected_outcome="Raw and pack inventory increases with lots.",
    ),
    GuidedStep(
        id="step-3",
        title="Third-Party Bulk GRN",
        description="Receive external bulk.",
        expected_outcome="Bulk stock available from external source.",
    ),
    GuidedStep(
        id="step-4",
        title="In-House Production",
        description="Execute recipe and record wastage.",
        expected_outcome="Raw reduces and in-house bulk created.",
    ),
    GuidedStep(
        id="step-5",
        title="Packing Run",
        description="Convert bulk to FG.",
        expected_outcome="FG increases with source traceability.",
    ),
    GuidedStep(
        id="step-6",
        title="Sales Dispatch",
        description="Dispatch FG with FIFO + override.",
        expected_outcome="FG reduced and dispatch recorded.",
    ),
    GuidedStep(
        id="step-7",
        title="Reports",
        description="Review valuation/wastage/traceability.",
        expected_outcome="Full end-to-end visibility shown.",
    ),
]


def seed_items() -> list[Item]:
    return [
        Item(
            id="raw-coriander",
            name="Coriander Seed",
            category=ItemCategory.RAW,
            unit="kg",
            min_stock=80,
        ),
        Item(
            id="raw-chilli",
            name="Red Chilli",
            category=ItemCategory.RAW,
            unit="kg",
            min_stock=50,
        ),
        Item(
            id="pack-pouch-100",
            name="100g Pouch",
            category=ItemCategory.PACK,
            unit="pcs",
            min_stock=2500,
        ),
        Item(
            id="bulk-garam",
            name="Garam Masala Bulk",
            category=ItemCategory.BULK,
            unit="kg",
            min_stock=20,
        ),
        Item(
            id="fg-garam-100",
            name="Garam Masala 100g",
            category=ItemCategory.FG,
            unit="pcs",
            pack_weight_grams=100,
            min_stock=1000,
        ),
    ]


def seed_recipes() -> list[Recipe]:
    return [
        Recipe(
            code="RCP-GARAM-001",
            name="Garam Masala Base",
            output_item_id="bulk-garam",
            loss_percent=0.05,
            ingredients=[
                RecipeIngredient(item_id="raw-coriander", ratio_per_kg_out=0.7),
                RecipeIngredient(item_id="raw-chilli", ratio_per_kg_out=0.35),
            ],
        ),
    ]


def make_seed(profile: str = "standard", currency: str = "INR") -> EngineSnapshot:
    """Build a fresh snapshot with zero stock for every catalog item."""
    if profile not in SEED_PROFILES:
        raise ConfigurationError(
            f"Unknown seed profile: {profile}",
            details={"profile": profile, "available": list(SEED_PROFILES)},
        )

    items = seed_items()
    return EngineSnapshot(
        seed_profile=profile,
        currency=currency,
        items=items,
        recipes=seed_recipes(),
        suppliers=[
            Party(id="sup-local-spice", name="Arihant Spices Traders"),
            Party(id="sup-ext-bulk", name="Third Party Bulk Mills"),
            Party(id="sup-packaging", name="SmartPack Industries"),
        ],
        customers=[
            Party(id="cust-a1", name="City Retail Mart"),
            Party(id="cust-a2", name="Krishna Wholesale"),
        ],
        positions={
            item.id: StockPosition(item_id=item.id, unit=item.unit) for item in items
        },
        guided=GuidedProgress(
            steps=[step.model_copy() for step in GUIDED_STEPS],
            current_step_id="step-1",
        ),
        activity_timeline=["Engine initialized with deterministic seed data."],
    )
