"""
Tax policy for quotation totals.

Exclusive tax is added on top of the taxable amount. Inclusive tax is
already inside the taxable amount and is only extracted for display: the
amount the customer pays does not change.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Optional

from ..conf import get_sst_rate
from ..dataclasses import TaxPolicy, TaxResult, TaxType
from .utils import HUNDRED, ZERO, clamp_pct, d, q2


def effective_tax_rate(policy: TaxPolicy, sst_rate: Optional[Decimal] = None) -> Decimal:
    if policy.type == TaxType.NONE:
        return ZERO
    if policy.type == TaxType.FLAT_RATE:
        return d(sst_rate) if sst_rate is not None else get_sst_rate()
    return clamp_pct(policy.rate)


def compute_tax(taxable_amount, policy: TaxPolicy, sst_rate: Optional[Decimal] = None) -> TaxResult:
    taxable = d(taxable_amount)
    rate = effective_tax_rate(policy, sst_rate)

    if rate == 0:
        return TaxResult(tax_amount=ZERO, grand_after_tax=taxable, effective_rate=rate)

    if policy.inclusive:
        tax_amount = q2(taxable - taxable / (1 + rate / HUNDRED))
        return TaxResult(tax_amount=tax_amount, grand_after_tax=taxable, effective_rate=rate)

    tax_amount = q2(taxable * rate / HUNDRED)
    return TaxResult(tax_amount=tax_amount, grand_after_tax=taxable + tax_amount, effective_rate=rate)
