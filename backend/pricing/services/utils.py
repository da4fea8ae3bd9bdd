from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP

TWOPLACES = Decimal("0.01")
HUNDRED = Decimal("100")
ZERO = Decimal("0")


def d(val) -> Decimal:
    """Coerce incoming values to Decimal safely."""
    if isinstance(val, Decimal):
        return val
    if val is None:
        return ZERO
    return Decimal(str(val))


def q2(amount) -> Decimal:
    """Round a money or weight amount to 2 decimal places, half up."""
    return d(amount).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def clamp_pct(value) -> Decimal:
    """Clamp a percentage to the closed range [0, 100]."""
    return min(max(d(value), ZERO), HUNDRED)
