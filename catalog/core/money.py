# catalog/core/money.py
from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def to_cents(amount: Decimal | float | int | str) -> int:
    """
    Convert a dollar amount to integer cents, rounding half-up.

    Floats go through `str()` first so 299.99 becomes 29999, not 29998.
    """
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    return int((value.quantize(CENT, rounding=ROUND_HALF_UP) * 100).to_integral_value())


def to_dollars(cents: int | None) -> float | None:
    if cents is None:
        return None
    return float(Decimal(cents) / 100)
