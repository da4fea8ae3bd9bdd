"""
Lookup services the pricing engine depends on.

The engine itself only sees plain dataclasses; these protocols describe the
collaborators that fetch them, and the Db* classes are the ORM-backed
implementations used by the API. Every lookup returns None (or an empty
list) on a miss so callers can treat it as an unresolved value.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import List, Optional, Protocol

from ..dataclasses import (
    BrandMarkup,
    CategoryMarkup,
    ProductCost,
    ShippingMethod,
    ShippingRateTier,
    TierMarkupTable,
)

logger = logging.getLogger(__name__)


class ProductCatalogService(Protocol):
    def get_cost(self, product_id) -> Optional[ProductCost]: ...


class TierMarkupService(Protocol):
    def get_markup_table(self, tier_name: str) -> Optional[TierMarkupTable]: ...


class CurrencyRateService(Protocol):
    def get_rate(self, from_currency: str, to_currency: str) -> Optional[Decimal]: ...


class ShippingRateService(Protocol):
    def get_rate_tiers(self, method, zone_id: Optional[str] = None) -> List[ShippingRateTier]: ...


class DbTierMarkupService:
    def get_markup_table(self, tier_name: str) -> Optional[TierMarkupTable]:
        from pricing.models import TierMarkupTables

        row = (
            TierMarkupTables.objects
            .filter(tier_name__iexact=(tier_name or "").strip(), is_active=True)
            .prefetch_related("brand_markups", "category_markups")
            .first()
        )
        if row is None:
            logger.warning("No tier markup table for tier '%s'", tier_name)
            return None
        return TierMarkupTable(
            tier_name=row.tier_name,
            default_markup=row.default_markup,
            brand_markups=tuple(BrandMarkup(b.brand, b.markup) for b in row.brand_markups.all()),
            category_markups=tuple(CategoryMarkup(c.category, c.markup) for c in row.category_markups.all()),
            max_line_discount=row.max_line_discount,
            max_overall_discount=row.max_overall_discount,
        )


class DbShippingRateService:
    def get_rate_tiers(self, method, zone_id: Optional[str] = None) -> List[ShippingRateTier]:
        from django.db.models import Q

        from pricing.models import ShippingRateTiers

        method = ShippingMethod(method)
        qs = ShippingRateTiers.objects.filter(method=method.value, is_active=True)
        # Rows without a zone apply to every zone
        zoneless = Q(zone_id__isnull=True) | Q(zone_id="")
        qs = qs.filter(Q(zone_id=zone_id) | zoneless if zone_id else zoneless)
        tiers = [
            ShippingRateTier(
                method=row.method,
                zone_id=row.zone_id or None,
                min_weight=row.min_weight,
                max_weight=row.max_weight,
                base_rate=row.base_rate,
                per_kg_rate=row.per_kg_rate,
                min_charge=row.min_charge,
                handling_fee=row.handling_fee,
                fuel_surcharge_pct=row.fuel_surcharge_pct,
            )
            for row in qs.order_by("min_weight", "max_weight")
        ]
        if not tiers:
            logger.warning("No shipping rate tiers for %s zone=%s", method.value, zone_id)
        return tiers


class DbCurrencyRateService:
    def get_rate(self, from_currency: str, to_currency: str) -> Optional[Decimal]:
        from core.fx import latest_rate

        row = latest_rate(str(from_currency), str(to_currency))
        if row is None:
            return None
        return row.rate
