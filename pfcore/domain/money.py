from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

_EXACT_INT_LIMIT = 2.0 ** 52


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round like a person would on paper: halves go away from zero.

    Works on the shortest repr of the float so 2.675 rounds to 2.68,
    unlike the builtin round() which rounds half to even on the binary value.
    """
    value = float(value)
    if abs(value) >= _EXACT_INT_LIMIT:
        # no fractional part left to round at this magnitude
        return value
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def round_cents(value: float) -> int:
    return int(round_half_up(value, 0))
