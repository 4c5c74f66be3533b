"""Decimal helpers shared by every money computation."""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENT = Decimal('0.01')
ZERO = Decimal('0')
# Largest accepted amount or budget
MAX_AMOUNT = Decimal('1000000000000')


def to_decimal(value) -> Decimal:
    """Build a Decimal from a stored or submitted amount.

    Goes through ``str`` so floats read back from the store do not carry
    binary noise into the arithmetic.
    """
    if isinstance(value, Decimal):
        return value
    if value is None or isinstance(value, bool):
        raise InvalidOperation(f"not an amount: {value!r}")
    return Decimal(str(value).strip())


def round_money(value: Decimal) -> float:
    return float(value.quantize(CENT, rounding=ROUND_HALF_UP))
