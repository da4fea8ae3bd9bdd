"""
Tier markup resolution.

A client tier carries a default markup plus ordered brand and category
overrides. Category overrides take precedence over brand overrides, which
take precedence over the tier default.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional

from ..dataclasses import TierMarkupTable
from ..exceptions import NoTierDataWarning
from .utils import ZERO

logger = logging.getLogger(__name__)


class MarkupSource(str, Enum):
    CATEGORY = "category"
    BRAND = "brand"
    DEFAULT = "default"
    MANUAL = "manual"
    NONE = "none"


@dataclass(frozen=True)
class MarkupResolution:
    markup_percentage: Decimal
    source: MarkupSource
    tier_name: Optional[str] = None
    max_line_discount: Optional[Decimal] = None
    max_overall_discount: Optional[Decimal] = None
    warning: Optional[NoTierDataWarning] = field(default=None, compare=False)


def tier_resolution(tier_table: TierMarkupTable, markup, source: MarkupSource) -> MarkupResolution:
    """Resolution carrying the tier's discount limits alongside the markup."""
    return MarkupResolution(
        markup_percentage=markup,
        source=source,
        tier_name=tier_table.tier_name,
        max_line_discount=tier_table.max_line_discount,
        max_overall_discount=tier_table.max_overall_discount,
    )


def _matches(candidate: Optional[str], wanted: Optional[str]) -> bool:
    if not candidate or not wanted:
        return False
    return candidate.strip().casefold() == wanted.strip().casefold()


def resolve_markup(
    tier_table: Optional[TierMarkupTable],
    brand: Optional[str] = None,
    category: Optional[str] = None,
) -> MarkupResolution:
    if tier_table is None:
        warning = NoTierDataWarning("No tier markup table available; markup defaults to 0 for manual pricing")
        logger.warning(str(warning))
        return MarkupResolution(markup_percentage=ZERO, source=MarkupSource.NONE, warning=warning)

    for entry in tier_table.category_markups:
        if _matches(entry.category, category):
            return tier_resolution(tier_table, entry.markup, MarkupSource.CATEGORY)

    for entry in tier_table.brand_markups:
        if _matches(entry.brand, brand):
            return tier_resolution(tier_table, entry.markup, MarkupSource.BRAND)

    return tier_resolution(tier_table, tier_table.default_markup, MarkupSource.DEFAULT)
