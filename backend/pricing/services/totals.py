"""
Quotation totals.

`compute_totals` is the single entry point that turns a quotation into the
figures printed on the document. Stages run in a fixed order, each consuming
the previous stage's output:

    lines -> subtotal -> discount -> taxable amount -> tax -> shipping -> grand total

It has no side effects and returns a fresh, frozen TotalsBreakdown on every
call, so two calls with equal inputs give equal results.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from ..conf import get_base_currency
from ..dataclasses import (
    Quotation,
    ShippingMethod,
    ShippingRateTier,
    ShippingWeights,
    TotalsBreakdown,
)
from ..exceptions import UnknownCurrencyPairError
from .discounts import compute_discount
from .fx_service import RateTable, convert
from .line_pricing import compute_lines
from .shipping import compute_weights, estimate_shipping
from .tax import compute_tax
from .utils import ZERO, q2

logger = logging.getLogger(__name__)


def _resolve_shipping(
    quotation: Quotation,
    rate_tiers: Sequence[ShippingRateTier],
) -> Tuple[Decimal, Optional[ShippingWeights], List[str]]:
    """
    Shipping cost added to the grand total.

    An override wins over an estimate. When neither can be produced the cost
    stays at zero and a reason is returned so the total is flagged.
    """
    shipping = quotation.shipping
    weights: Optional[ShippingWeights] = None
    if shipping.method != ShippingMethod.PICKUP and shipping.packages:
        weights = compute_weights(shipping.packages, shipping.method)

    if not shipping.included_in_total:
        return ZERO, weights, []
    if shipping.cost_override is not None:
        return q2(shipping.cost_override), weights, []
    if shipping.method == ShippingMethod.PICKUP:
        return ZERO, weights, []

    if weights is None:
        return ZERO, weights, [
            f"No packages or cost override for {shipping.method.value} shipping; "
            f"enter the shipping cost manually"
        ]

    estimate = estimate_shipping(
        shipping.packages, shipping.method, shipping.zone_id, rate_tiers, shipping.country_code
    )
    if not estimate.is_resolved:
        return ZERO, weights, [str(estimate.warning)]
    return estimate.estimated_cost, weights, []


def compute_totals(
    quotation: Quotation,
    rate_tiers: Sequence[ShippingRateTier] = (),
    sst_rate: Optional[Decimal] = None,
) -> TotalsBreakdown:
    # 1. Lines and subtotal
    lines = compute_lines(quotation.lines)
    subtotal = sum((line.line_total for line in lines), ZERO)

    # 2. Quotation discount
    discount_amount = compute_discount(subtotal, quotation.discount_policy)

    # 3. Taxable amount
    taxable_amount = max(ZERO, subtotal - discount_amount)

    # 4. Tax
    tax = compute_tax(taxable_amount, quotation.tax_policy, sst_rate)

    # 5. Shipping
    shipping_cost, weights, reasons = _resolve_shipping(quotation, rate_tiers)

    # 6. Grand total
    grand_total = tax.grand_after_tax + shipping_cost

    if reasons:
        logger.warning("Quotation totals incomplete: %s", "; ".join(reasons))
    logger.debug(
        "Totals %s: subtotal=%s discount=%s taxable=%s tax=%s shipping=%s grand=%s",
        quotation.currency.value, subtotal, discount_amount, taxable_amount,
        tax.tax_amount, shipping_cost, grand_total,
    )

    return TotalsBreakdown(
        currency=quotation.currency,
        subtotal=q2(subtotal),
        discount_amount=discount_amount,
        taxable_amount=q2(taxable_amount),
        tax_amount=tax.tax_amount,
        shipping_cost=shipping_cost,
        grand_total=q2(grand_total),
        effective_tax_rate=tax.effective_rate,
        lines=lines,
        weights=weights,
        is_incomplete=bool(reasons),
        reasons=tuple(reasons),
    )


@dataclass(frozen=True)
class BaseCurrencyTotal:
    currency: str
    grand_total: Optional[Decimal]
    reason: Optional[str] = None


def convert_totals_to_base(
    totals: TotalsBreakdown,
    rate_table: RateTable,
    base_currency: Optional[str] = None,
) -> BaseCurrencyTotal:
    """
    Express the grand total in the company's base currency.

    A missing rate leaves the converted total unresolved instead of
    substituting an estimated rate.
    """
    base = (base_currency or get_base_currency()).upper()
    try:
        amount = convert(totals.grand_total, totals.currency, base, rate_table)
    except UnknownCurrencyPairError as exc:
        logger.warning("Grand total not converted to %s: %s", base, exc)
        return BaseCurrencyTotal(currency=base, grand_total=None, reason=str(exc))
    return BaseCurrencyTotal(currency=base, grand_total=amount)
