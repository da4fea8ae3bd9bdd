from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Tuple

from .services.utils import ZERO, d


class Currency(str, Enum):
    MYR = "MYR"
    USD = "USD"
    EUR = "EUR"
    RMB = "RMB"
    JPY = "JPY"
    SGD = "SGD"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str) and value.upper() in cls.__members__:
            return cls[value.upper()]
        return None


class DiscountType(str, Enum):
    NONE = "none"
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class LineDiscountType(str, Enum):
    NONE = "none"
    PERCENTAGE = "percentage"
    AMOUNT = "amount"

    @classmethod
    def _missing_(cls, value):
        # "fixed" is accepted as a synonym for a flat amount off the line
        if value == "fixed":
            return cls.AMOUNT
        return None


class TaxType(str, Enum):
    NONE = "none"
    FLAT_RATE = "flatRate"
    CUSTOM = "custom"

    @classmethod
    def _missing_(cls, value):
        if value == "sst":
            return cls.FLAT_RATE
        return None


class ShippingMethod(str, Enum):
    SEA = "sea"
    AIR = "air"
    LAND = "land"
    COURIER = "courier"
    PICKUP = "pickup"


class Incoterm(str, Enum):
    EXW = "EXW"
    FOB = "FOB"
    CIF = "CIF"
    DAP = "DAP"
    DDP = "DDP"


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DiscountPolicy:
    type: DiscountType = DiscountType.NONE
    value: Decimal = ZERO

    def __post_init__(self):
        object.__setattr__(self, "type", DiscountType(self.type))
        object.__setattr__(self, "value", d(self.value))


@dataclass(frozen=True)
class LineDiscount:
    type: LineDiscountType = LineDiscountType.NONE
    value: Decimal = ZERO

    def __post_init__(self):
        object.__setattr__(self, "type", LineDiscountType(self.type))
        object.__setattr__(self, "value", d(self.value))


@dataclass(frozen=True)
class TaxPolicy:
    type: TaxType = TaxType.NONE
    rate: Decimal = ZERO
    inclusive: bool = False

    def __post_init__(self):
        object.__setattr__(self, "type", TaxType(self.type))
        object.__setattr__(self, "rate", d(self.rate))
        object.__setattr__(self, "inclusive", bool(self.inclusive))


@dataclass(frozen=True)
class Package:
    length: Decimal
    width: Decimal
    height: Decimal
    weight: Decimal
    quantity: int = 1
    unit: str = "cm/kg"

    def __post_init__(self):
        for name in ("length", "width", "height", "weight"):
            object.__setattr__(self, name, d(getattr(self, name)))

    def volume(self) -> Decimal:
        return self.length * self.width * self.height


@dataclass
class ShippingPolicy:
    method: ShippingMethod = ShippingMethod.PICKUP
    cost_override: Optional[Decimal] = None
    included_in_total: bool = False
    zone_id: Optional[str] = None
    packages: List[Package] = field(default_factory=list)
    country_code: Optional[str] = None

    def __post_init__(self):
        self.method = ShippingMethod(self.method)
        if self.cost_override is not None:
            self.cost_override = d(self.cost_override)


@dataclass(frozen=True)
class QuotationLine:
    cost_price: Decimal
    markup_percentage: Decimal = ZERO
    quantity: int = 1
    line_discount: LineDiscount = field(default_factory=LineDiscount)
    description: str = ""
    brand: Optional[str] = None
    category: Optional[str] = None
    part_number: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "cost_price", d(self.cost_price))
        object.__setattr__(self, "markup_percentage", d(self.markup_percentage))


@dataclass
class Quotation:
    currency: Currency = Currency.MYR
    lines: List[QuotationLine] = field(default_factory=list)
    discount_policy: DiscountPolicy = field(default_factory=DiscountPolicy)
    tax_policy: TaxPolicy = field(default_factory=TaxPolicy)
    shipping: ShippingPolicy = field(default_factory=ShippingPolicy)
    incoterm: Optional[Incoterm] = None
    validity_days: int = 30

    def __post_init__(self):
        self.currency = Currency(self.currency)
        if self.incoterm is not None:
            self.incoterm = Incoterm(self.incoterm)


# ---------------------------------------------------------------------------
# Reference data (read-only, supplied by collaborator services)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BrandMarkup:
    brand: str
    markup: Decimal

    def __post_init__(self):
        object.__setattr__(self, "markup", d(self.markup))


@dataclass(frozen=True)
class CategoryMarkup:
    category: str
    markup: Decimal

    def __post_init__(self):
        object.__setattr__(self, "markup", d(self.markup))


@dataclass(frozen=True)
class TierMarkupTable:
    tier_name: str
    default_markup: Decimal
    brand_markups: Tuple[BrandMarkup, ...] = ()
    category_markups: Tuple[CategoryMarkup, ...] = ()
    max_line_discount: Optional[Decimal] = None
    max_overall_discount: Optional[Decimal] = None

    def __post_init__(self):
        object.__setattr__(self, "default_markup", d(self.default_markup))
        object.__setattr__(self, "brand_markups", tuple(self.brand_markups))
        object.__setattr__(self, "category_markups", tuple(self.category_markups))
        for name in ("max_line_discount", "max_overall_discount"):
            if getattr(self, name) is not None:
                object.__setattr__(self, name, d(getattr(self, name)))


@dataclass(frozen=True)
class ShippingRateTier:
    method: ShippingMethod
    zone_id: Optional[str]
    min_weight: Decimal
    max_weight: Decimal
    base_rate: Decimal
    per_kg_rate: Decimal
    min_charge: Decimal = ZERO
    handling_fee: Decimal = ZERO
    fuel_surcharge_pct: Decimal = ZERO

    def __post_init__(self):
        object.__setattr__(self, "method", ShippingMethod(self.method))
        for name in ("min_weight", "max_weight", "base_rate", "per_kg_rate",
                     "min_charge", "handling_fee", "fuel_surcharge_pct"):
            object.__setattr__(self, name, d(getattr(self, name)))


@dataclass(frozen=True)
class ProductCost:
    cost_price: Decimal
    currency: Currency
    list_price: Optional[Decimal] = None

    def __post_init__(self):
        object.__setattr__(self, "cost_price", d(self.cost_price))
        object.__setattr__(self, "currency", Currency(self.currency))
        if self.list_price is not None:
            object.__setattr__(self, "list_price", d(self.list_price))


# ---------------------------------------------------------------------------
# Results (immutable, compared by structure)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LinePricing:
    unit_price: Decimal
    gross_value: Decimal
    line_discount_amount: Decimal
    line_total: Decimal
    margin: Decimal = ZERO
    margin_percentage: Decimal = ZERO


@dataclass(frozen=True)
class ShippingWeights:
    actual_weight: Decimal
    dim_weight: Decimal
    chargeable_weight: Decimal
    total_volume: Decimal


@dataclass(frozen=True)
class TaxResult:
    tax_amount: Decimal
    grand_after_tax: Decimal
    effective_rate: Decimal


@dataclass(frozen=True)
class TotalsBreakdown:
    currency: Currency
    subtotal: Decimal
    discount_amount: Decimal
    taxable_amount: Decimal
    tax_amount: Decimal
    shipping_cost: Decimal
    grand_total: Decimal
    effective_tax_rate: Decimal = ZERO
    lines: Tuple[LinePricing, ...] = ()
    weights: Optional[ShippingWeights] = None
    is_incomplete: bool = False
    reasons: Tuple[str, ...] = ()
