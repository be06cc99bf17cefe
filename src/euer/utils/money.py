"""Currency rounding and formatting utilities."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

CENT = Decimal("0.01")


def round2(value: Decimal | int | str) -> Decimal:
    """Round to cents, half away from zero.

    ``ROUND_HALF_UP`` in the decimal module rounds ties away from zero for
    both signs, so -0.005 becomes -0.01.
    """
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def sum_rounded(values: Iterable[Decimal]) -> Decimal:
    """Sum values and round the result to cents."""
    return round2(sum(values, Decimal("0")))


def format_de(amount: Decimal) -> str:
    """Format an amount with two decimals and a German decimal comma.

    No thousands separator is emitted: 1234.5 becomes "1234,50".
    """
    return f"{round2(amount):.2f}".replace(".", ",")
