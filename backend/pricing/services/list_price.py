"""
Supplier list price book discounts.

A price book publishes a discount structure: a discount per product
category, optional per model series discounts that replace the category
discount, and optional market segment discounts compounded on top.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Optional, Sequence

from .utils import HUNDRED, ZERO, clamp_pct, d, q2

DEFAULT_CATEGORY = "equipment"


@dataclass(frozen=True)
class DiscountStructure:
    by_category: Dict[str, Decimal] = field(default_factory=dict)
    by_model_series: Dict[str, Decimal] = field(default_factory=dict)
    by_market_segment: Dict[str, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class ListPriceDiscount:
    total_discount: Decimal
    category_discount: Decimal = ZERO
    series_discount: Optional[Decimal] = None
    segment_discount: Optional[Decimal] = None
    applied: Sequence[str] = ()


def compute_list_price_discount(
    structure: DiscountStructure,
    category: Optional[str] = None,
    model_series: Optional[str] = None,
    market_segment: Optional[str] = None,
) -> ListPriceDiscount:
    category = category or DEFAULT_CATEGORY
    category_discount = clamp_pct(structure.by_category.get(category, ZERO))
    applied = []
    if category_discount > 0:
        applied.append(f"category:{category}")

    series_discount = None
    if model_series and model_series in structure.by_model_series:
        series_discount = clamp_pct(structure.by_model_series[model_series])
        applied.append(f"series:{model_series}")

    segment_discount = None
    if market_segment and market_segment in structure.by_market_segment:
        segment_discount = clamp_pct(structure.by_market_segment[market_segment])
        applied.append(f"segment:{market_segment}")

    total = series_discount if series_discount is not None else category_discount
    if segment_discount is not None:
        # compounded: the segment discount applies to what is left after the base discount
        total = total + segment_discount * (1 - total / HUNDRED)

    return ListPriceDiscount(
        total_discount=q2(total),
        category_discount=category_discount,
        series_discount=series_discount,
        segment_discount=segment_discount,
        applied=tuple(applied),
    )


def nett_cost(list_price, discount: ListPriceDiscount) -> Decimal:
    """Cost after the supplier discount off the list price."""
    return q2(d(list_price) * (1 - discount.total_discount / HUNDRED))
