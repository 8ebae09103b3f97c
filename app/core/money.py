"""Money helpers. Amounts are Decimal and stored as Numeric(12, 2)."""

from decimal import Decimal

CENT = Decimal("0.01")


def to_decimal(val) -> Decimal:
    if val is None:
        return Decimal("0")
    return val if isinstance(val, Decimal) else Decimal(str(val))


def has_sub_cent_digits(amount: Decimal) -> bool:
    """True when amount carries precision a Numeric(12, 2) column would round away."""
    return amount != amount.quantize(CENT)
