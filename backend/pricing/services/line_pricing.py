from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from ..dataclasses import (
    Currency,
    LineDiscount,
    LineDiscountType,
    LinePricing,
    QuotationLine,
    TierMarkupTable,
)
from ..exceptions import InvalidLineInputError, ProductNotFoundError
from .fx_service import RateTable, build_rate_table, convert
from .list_price import DiscountStructure, compute_list_price_discount, nett_cost
from .tier_markup import MarkupResolution, MarkupSource, resolve_markup, tier_resolution
from .utils import HUNDRED, ZERO, clamp_pct, d, q2

logger = logging.getLogger(__name__)


def validate_line(line: QuotationLine) -> None:
    """Reject negative cost, markup, quantity or discount values; never clamp them."""
    if line.cost_price < 0:
        raise InvalidLineInputError("cost_price", line.cost_price)
    if line.markup_percentage < 0:
        raise InvalidLineInputError("markup_percentage", line.markup_percentage)
    if isinstance(line.quantity, bool) or not isinstance(line.quantity, int):
        raise InvalidLineInputError("quantity", line.quantity, "quantity must be a whole number")
    if line.quantity < 1:
        raise InvalidLineInputError("quantity", line.quantity)
    if line.line_discount.value < 0:
        raise InvalidLineInputError("line_discount.value", line.line_discount.value)


def compute_line_discount(gross_value: Decimal, discount: LineDiscount) -> Decimal:
    if discount.type == LineDiscountType.NONE:
        return ZERO
    if discount.type == LineDiscountType.PERCENTAGE:
        return q2(gross_value * clamp_pct(discount.value) / HUNDRED)
    # Flat amount off the line, capped so the line never goes negative
    return q2(min(discount.value, gross_value))


def compute_line(line: QuotationLine) -> LinePricing:
    """
    Price a single quotation line.

    The unit price is rounded once, here, and the rounded value is what
    every later figure is built from.
    """
    validate_line(line)

    unit_price = q2(line.cost_price * (1 + line.markup_percentage / HUNDRED))
    gross_value = unit_price * line.quantity
    discount_amount = compute_line_discount(gross_value, line.line_discount)
    line_total = q2(gross_value - discount_amount)

    margin = q2(unit_price - line.cost_price)
    margin_pct = q2(margin / line.cost_price * HUNDRED) if line.cost_price > 0 else ZERO

    return LinePricing(
        unit_price=unit_price,
        gross_value=q2(gross_value),
        line_discount_amount=discount_amount,
        line_total=line_total,
        margin=margin,
        margin_percentage=margin_pct,
    )


def compute_lines(lines: Iterable[QuotationLine]) -> Tuple[LinePricing, ...]:
    # Lines have no cross dependencies; order of the result follows the input
    return tuple(compute_line(line) for line in lines)


# --------------------- Pricing from cost and tier ---------------------

@dataclass(frozen=True)
class PricedLine:
    line: QuotationLine
    pricing: LinePricing
    markup: MarkupResolution
    cost_currency: Currency
    cost_in_quote_currency: Decimal
    warnings: Tuple[Warning, ...] = field(default=(), compare=False)


def price_line_from_cost(
    cost_price,
    cost_currency,
    quote_currency,
    quantity: int = 1,
    *,
    tier_table: Optional[TierMarkupTable] = None,
    brand: Optional[str] = None,
    category: Optional[str] = None,
    rate_table: Optional[RateTable] = None,
    line_discount: Optional[LineDiscount] = None,
    markup_override=None,
    description: str = "",
    part_number: Optional[str] = None,
) -> PricedLine:
    """
    Build and price a quotation line from a supplier cost.

    The cost is converted into the quotation currency first, then marked up
    by the tier markup (or a manual override). UnknownCurrencyPairError is
    left to the caller, which decides whether to fall back to manual entry.
    """
    cost_currency = Currency(cost_currency)
    quote_currency = Currency(quote_currency)
    cost = d(cost_price)
    if cost < 0:
        raise InvalidLineInputError("cost_price", cost)

    cost_in_quote = convert(cost, cost_currency, quote_currency, rate_table or {})

    if markup_override is not None:
        if tier_table is not None:
            markup = tier_resolution(tier_table, d(markup_override), MarkupSource.MANUAL)
        else:
            markup = MarkupResolution(d(markup_override), MarkupSource.MANUAL)
    else:
        markup = resolve_markup(tier_table, brand=brand, category=category)

    line = QuotationLine(
        cost_price=cost_in_quote,
        markup_percentage=markup.markup_percentage,
        quantity=quantity,
        line_discount=line_discount or LineDiscount(),
        description=description,
        brand=brand,
        category=category,
        part_number=part_number,
    )
    pricing = compute_line(line)
    warnings = (markup.warning,) if markup.warning is not None else ()

    logger.debug(
        "Priced line %s: cost %s %s -> %s %s, markup %s%% (%s), total %s",
        part_number or description, cost, cost_currency.value, cost_in_quote,
        quote_currency.value, markup.markup_percentage, markup.source.value, pricing.line_total,
    )
    return PricedLine(
        line=line,
        pricing=pricing,
        markup=markup,
        cost_currency=cost_currency,
        cost_in_quote_currency=cost_in_quote,
        warnings=warnings,
    )


def price_catalog_line(
    product_id,
    quote_currency,
    quantity: int = 1,
    *,
    catalog,
    tier_service,
    rate_service,
    tier_name: Optional[str] = None,
    brand: Optional[str] = None,
    category: Optional[str] = None,
    line_discount: Optional[LineDiscount] = None,
    markup_override=None,
    description: str = "",
    discount_structure: Optional[DiscountStructure] = None,
    model_series: Optional[str] = None,
    market_segment: Optional[str] = None,
) -> PricedLine:
    """
    Price a catalog product for a client tier using the injected collaborators.

    When a list price book discount structure is supplied and the catalog
    knows the list price, the cost is the nett cost off the list price
    instead of the catalog cost.
    """
    cost = catalog.get_cost(product_id)
    if cost is None:
        raise ProductNotFoundError(product_id)

    cost_price = cost.cost_price
    if discount_structure is not None and cost.list_price is not None:
        discount = compute_list_price_discount(discount_structure, category, model_series, market_segment)
        cost_price = nett_cost(cost.list_price, discount)

    tier_table = tier_service.get_markup_table(tier_name) if tier_name else None
    quote_currency = Currency(quote_currency)
    rate_table = build_rate_table(
        rate_service,
        [(cost.currency.value, quote_currency.value), (quote_currency.value, cost.currency.value)],
    )
    return price_line_from_cost(
        cost_price,
        cost.currency,
        quote_currency,
        quantity,
        tier_table=tier_table,
        brand=brand,
        category=category,
        rate_table=rate_table,
        line_discount=line_discount,
        markup_override=markup_override,
        description=description,
        part_number=str(product_id),
    )
