"""Fixed-precision rounding applied after every costing arithmetic step."""

from decimal import ROUND_HALF_UP, Decimal

MONEY_PLACES = Decimal("0.01")
QUANTITY_PLACES = Decimal("0.0001")


def round2(value: float) -> float:
    """Round a monetary amount to 2 decimal places, half away from zero."""
    return float(Decimal(str(value)).quantize(MONEY_PLACES, rounding=ROUND_HALF_UP))


def round4(value: float) -> float:
    """Round a physical quantity to 4 decimal places, half away from zero."""
    return float(Decimal(str(value)).quantize(QUANTITY_PLACES, rounding=ROUND_HALF_UP))
