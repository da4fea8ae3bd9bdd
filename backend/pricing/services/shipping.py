"""
Freight weights and rate lookup.

Chargeable weight is the greater of the actual weight and the dimensional
weight, where dimensional weight is package volume (cm3) divided by a
per-method divisor. The chargeable weight selects a rate tier; when no tier
covers it the cost is left unresolved for manual entry.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from ..dataclasses import Package, ShippingMethod, ShippingRateTier, ShippingWeights
from ..exceptions import InvalidPackageInputError, NoShippingRateMatchWarning
from .utils import ZERO, d, q2

logger = logging.getLogger(__name__)

# cm3 per kg
DIM_WEIGHT_DIVISORS: Dict[ShippingMethod, Decimal] = {
    ShippingMethod.AIR: Decimal("5000"),
    ShippingMethod.SEA: Decimal("6000"),
    ShippingMethod.LAND: Decimal("5000"),
    ShippingMethod.COURIER: Decimal("5000"),
}


# ISO country code to rate zone. Unlisted countries ship at international rates.
ZONE_BY_COUNTRY: Dict[str, str] = {
    "MY": "local",
    **{code: "regional" for code in ("SG", "TH", "ID", "VN", "PH", "BN", "MM", "LA", "KH")},
    **{code: "international" for code in ("CN", "JP", "KR", "US", "GB", "DE", "AU")},
}
DEFAULT_ZONE = "international"


@dataclass(frozen=True)
class RateQuote:
    base_rate: Decimal
    per_kg_rate: Decimal
    min_weight: Decimal
    max_weight: Decimal
    min_charge: Decimal = ZERO
    handling_fee: Decimal = ZERO
    fuel_surcharge_pct: Decimal = ZERO


@dataclass(frozen=True)
class ShippingCharges:
    freight: Decimal
    fuel_surcharge: Decimal
    handling_fee: Decimal
    total: Decimal


@dataclass(frozen=True)
class ShippingEstimate:
    method: ShippingMethod
    zone_id: Optional[str]
    weights: ShippingWeights
    rate: Optional[RateQuote]
    estimated_cost: Optional[Decimal]
    warning: Optional[NoShippingRateMatchWarning] = field(default=None, compare=False)
    charges: Optional[ShippingCharges] = None

    @property
    def is_resolved(self) -> bool:
        return self.estimated_cost is not None


def zone_for_country(country_code: Optional[str], default: str = DEFAULT_ZONE) -> str:
    if not country_code:
        return default
    return ZONE_BY_COUNTRY.get(country_code.strip().upper(), default)


def resolve_zone(zone_id: Optional[str], country_code: Optional[str] = None) -> Optional[str]:
    """An explicit zone wins; otherwise the destination country picks one."""
    if zone_id:
        return zone_id
    if country_code:
        return zone_for_country(country_code)
    return None


def dim_divisor(method) -> Optional[Decimal]:
    return DIM_WEIGHT_DIVISORS.get(ShippingMethod(method))


def _validate_package(index: int, pkg: Package) -> None:
    for name in ("length", "width", "height", "weight"):
        if getattr(pkg, name) < 0:
            raise InvalidPackageInputError(f"packages[{index}].{name}", getattr(pkg, name))
    if isinstance(pkg.quantity, bool) or not isinstance(pkg.quantity, int) or pkg.quantity < 1:
        raise InvalidPackageInputError(f"packages[{index}].quantity", pkg.quantity)


def compute_weights(packages: Iterable[Package], method) -> ShippingWeights:
    divisor = dim_divisor(method)

    actual = ZERO
    dim = ZERO
    volume_total = ZERO
    for index, pkg in enumerate(packages):
        _validate_package(index, pkg)
        volume = pkg.volume()
        actual += pkg.weight * pkg.quantity
        volume_total += volume * pkg.quantity
        if divisor is not None:
            dim += volume / divisor * pkg.quantity

    actual_weight = q2(actual)
    dim_weight = q2(dim)
    return ShippingWeights(
        actual_weight=actual_weight,
        dim_weight=dim_weight,
        chargeable_weight=max(actual_weight, dim_weight),
        total_volume=q2(volume_total),
    )


def _zone_matches(tier_zone: Optional[str], zone_id: Optional[str]) -> bool:
    if not tier_zone:
        return True
    return tier_zone == zone_id


def lookup_rate(
    chargeable_weight,
    method,
    zone_id: Optional[str],
    rate_tiers: Sequence[ShippingRateTier],
) -> Optional[RateQuote]:
    """
    Select the rate tier whose [min_weight, max_weight] contains the weight.

    Tiers are considered in ascending min_weight order so a weight sitting
    on a shared boundary picks the lower tier. A tier without a zone applies
    to every zone; zone specific tiers are tried first and only match their
    own zone, so a lookup without a zone sees zoneless tiers only. Returns
    None when nothing matches; the caller must fall back to manual entry.
    """
    weight = d(chargeable_weight)
    method = ShippingMethod(method)
    candidates: List[ShippingRateTier] = sorted(
        (t for t in rate_tiers if t.method == method and _zone_matches(t.zone_id, zone_id)),
        key=lambda t: (not t.zone_id, t.min_weight, t.max_weight),
    )
    for tier in candidates:
        if tier.min_weight <= weight <= tier.max_weight:
            return RateQuote(
                base_rate=tier.base_rate,
                per_kg_rate=tier.per_kg_rate,
                min_weight=tier.min_weight,
                max_weight=tier.max_weight,
                min_charge=tier.min_charge,
                handling_fee=tier.handling_fee,
                fuel_surcharge_pct=tier.fuel_surcharge_pct,
            )
    logger.warning(
        "No %s shipping rate tier for zone %s covers %s kg (%d candidate tiers)",
        method.value, zone_id, weight, len(candidates),
    )
    return None


def shipping_charges(rate: RateQuote, chargeable_weight) -> ShippingCharges:
    """
    Freight is base + per-kg x weight, raised to the tier's minimum charge.
    The fuel surcharge is a percentage of freight; the handling fee is flat.
    """
    freight = max(rate.base_rate + rate.per_kg_rate * d(chargeable_weight), rate.min_charge)
    fuel = freight * rate.fuel_surcharge_pct / Decimal("100")
    return ShippingCharges(
        freight=q2(freight),
        fuel_surcharge=q2(fuel),
        handling_fee=q2(rate.handling_fee),
        total=q2(freight + fuel + rate.handling_fee),
    )


def estimate_cost(rate: RateQuote, chargeable_weight) -> Decimal:
    return shipping_charges(rate, chargeable_weight).total


def estimate_shipping(
    packages: Iterable[Package],
    method,
    zone_id: Optional[str],
    rate_tiers: Sequence[ShippingRateTier],
    country_code: Optional[str] = None,
) -> ShippingEstimate:
    method = ShippingMethod(method)
    zone_id = resolve_zone(zone_id, country_code)
    weights = compute_weights(packages, method)
    rate = lookup_rate(weights.chargeable_weight, method, zone_id, rate_tiers)
    if rate is None:
        warning = NoShippingRateMatchWarning(
            f"No {method.value} rate for zone {zone_id or '-'} at {weights.chargeable_weight} kg; "
            f"enter the shipping cost manually"
        )
        return ShippingEstimate(method, zone_id, weights, None, None, warning)
    charges = shipping_charges(rate, weights.chargeable_weight)
    return ShippingEstimate(method, zone_id, weights, rate, charges.total, charges=charges)
