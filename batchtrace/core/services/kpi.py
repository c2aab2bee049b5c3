"""Headline KPIs over the current stock positions."""

from collections.abc import Iterable, Mapping

from batchtrace.core.entities.catalog import Item, ItemCategory
from batchtrace.core.entities.inventory import ProductionStats, StockPosition
from batchtrace.core.entities.results import Kpi
from batchtrace.core.precision import round2


def wastage_percent(stats: ProductionStats) -> float:
    """Wastage as a percentage of all production input."""
    if stats.total_raw_input_kg <= 0:
        return 0.0
    return round2(stats.total_wastage_kg / stats.total_raw_input_kg * 100)


def compute_kpi(
    items: Iterable[Item],
    positions: Mapping[str, StockPosition],
    stats: ProductionStats,
    currency: str = "INR",
) -> Kpi:
    totals = {
        ItemCategory.RAW: [0.0, 0.0],
        ItemCategory.BULK: [0.0, 0.0],
        ItemCategory.FG: [0.0, 0.0],
    }
    low = 0

    for item in items:
        position = positions.get(item.id)
        if position is None:
            continue
        if item.category in totals:
            totals[item.category][0] += position.quantity
            totals[item.category][1] += position.value
        if position.quantity < item.min_stock:
            low += 1

    return Kpi(
        raw_quantity_kg=round2(totals[ItemCategory.RAW][0]),
        raw_value=round2(totals[ItemCategory.RAW][1]),
        bulk_quantity_kg=round2(totals[ItemCategory.BULK][0]),
        bulk_value=round2(totals[ItemCategory.BULK][1]),
        fg_quantity_pcs=round2(totals[ItemCategory.FG][0]),
        fg_value=round2(totals[ItemCategory.FG][1]),
        wastage_percent=wastage_percent(stats),
        low_stock_count=low,
        currency=currency,
    )
