"""
Decimal helpers

Intermediate results stay unrounded; terminal outputs (areas, bid prices,
price scores) are rounded half-up, the way commercial rounding works, not
half-to-even like Python's round().
"""

from decimal import ROUND_HALF_UP, Decimal

_ONE = Decimal("1")


def to_decimal(value: int | float | str | Decimal) -> Decimal:
    """
    Convert a number to Decimal via its shortest string form

    Example:
        >>> to_decimal(0.1)
        Decimal('0.1')
    """
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_half_up(value: Decimal) -> int:
    """
    Round to the nearest integer, halves away from zero

    Example:
        >>> round_half_up(Decimal("356.5"))
        357
    """
    return int(value.quantize(_ONE, rounding=ROUND_HALF_UP))
