from __future__ import annotations

from decimal import Decimal

from ..dataclasses import DiscountPolicy, DiscountType
from .utils import HUNDRED, ZERO, clamp_pct, d, q2


def compute_discount(subtotal, policy: DiscountPolicy) -> Decimal:
    """
    Quotation-level discount on the subtotal.

    The result always lies within [0, subtotal], so the taxable amount can
    never go negative.
    """
    subtotal = max(d(subtotal), ZERO)

    if policy.type == DiscountType.NONE:
        return ZERO
    if policy.type == DiscountType.PERCENTAGE:
        return min(q2(subtotal * clamp_pct(policy.value) / HUNDRED), subtotal)
    return q2(min(max(policy.value, ZERO), subtotal))
