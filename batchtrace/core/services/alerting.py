"""Low-stock alerts derived from positions and catalog thresholds."""

from collections.abc import Iterable, Mapping

from batchtrace.core.entities.catalog import Item
from batchtrace.core.entities.inventory import Alert, StockPosition


def rebuild_alerts(
    items: Iterable[Item], positions: Mapping[str, StockPosition]
) -> list[Alert]:
    """Flag every item whose quantity is below its ``min_stock``."""
    alerts: list[Alert] = []
    for item in items:
        position = positions.get(item.id)
        if position is None:
            continue
        if position.quantity < item.min_stock:
            alerts.append(
                Alert(
                    level="warning",
                    item_id=item.id,
                    message=(
                        f"Low stock: {item.name} is below min level "
                        f"({position.quantity:.2f} < {item.min_stock:.2f})"
                    ),
                )
            )
    return alerts
