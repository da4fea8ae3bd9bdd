from __future__ import annotations

from rest_framework import serializers

from pricing.dataclasses import (
    Currency,
    DiscountPolicy,
    DiscountType,
    Incoterm,
    LineDiscount,
    LineDiscountType,
    Package,
    Quotation,
    QuotationLine,
    ShippingMethod,
    ShippingPolicy,
    TaxPolicy,
    TaxType,
)

# Negative amounts are passed through so the engine reports them with the offending field
MONEY = dict(max_digits=14, decimal_places=2)
RATE = dict(max_digits=12, decimal_places=2)

CURRENCY_CHOICES = [c.value for c in Currency]
LINE_DISCOUNT_CHOICES = [t.value for t in LineDiscountType] + ["fixed"]
TAX_CHOICES = [t.value for t in TaxType] + ["sst"]


# --------------------------- Requests ---------------------------

class DiscountSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=[t.value for t in DiscountType], default=DiscountType.NONE.value)
    value = serializers.DecimalField(**MONEY, default=0)


class LineDiscountSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=LINE_DISCOUNT_CHOICES, default=LineDiscountType.NONE.value)
    value = serializers.DecimalField(**MONEY, default=0)


class TaxSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=TAX_CHOICES, default=TaxType.NONE.value)
    rate = serializers.DecimalField(**RATE, default=0)
    inclusive = serializers.BooleanField(default=False)


class PackageSerializer(serializers.Serializer):
    length = serializers.DecimalField(max_digits=12, decimal_places=2)
    width = serializers.DecimalField(max_digits=12, decimal_places=2)
    height = serializers.DecimalField(max_digits=12, decimal_places=2)
    weight = serializers.DecimalField(max_digits=12, decimal_places=3)
    quantity = serializers.IntegerField(default=1)


class ShippingSerializer(serializers.Serializer):
    method = serializers.ChoiceField(choices=[m.value for m in ShippingMethod], default=ShippingMethod.PICKUP.value)
    cost_override = serializers.DecimalField(**MONEY, required=False, allow_null=True)
    included_in_total = serializers.BooleanField(default=False)
    zone_id = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=32)
    country_code = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=2)
    packages = PackageSerializer(many=True, required=False)


class QuotationLineSerializer(serializers.Serializer):
    cost_price = serializers.DecimalField(**MONEY)
    markup_percentage = serializers.DecimalField(**RATE, default=0)
    quantity = serializers.IntegerField(default=1)
    line_discount = LineDiscountSerializer(required=False)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    brand = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    category = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    part_number = serializers.CharField(required=False, allow_null=True, allow_blank=True)


def build_packages(items) -> list:
    return [Package(**item) for item in items or []]


def build_line_discount(data) -> LineDiscount:
    if not data:
        return LineDiscount()
    return LineDiscount(type=data["type"], value=data["value"])


class QuotationSerializer(serializers.Serializer):
    currency = serializers.ChoiceField(choices=CURRENCY_CHOICES)
    discount = DiscountSerializer(required=False)
    tax = TaxSerializer(required=False)
    shipping = ShippingSerializer(required=False)
    lines = QuotationLineSerializer(many=True)
    incoterm = serializers.ChoiceField(choices=[i.value for i in Incoterm], required=False, allow_null=True)
    validity_days = serializers.IntegerField(min_value=1, default=30)

    def to_quotation(self) -> Quotation:
        """Build the engine's Quotation from validated data."""
        data = self.validated_data
        discount = data.get("discount")
        tax = data.get("tax")
        shipping = data.get("shipping") or {}
        return Quotation(
            currency=data["currency"],
            lines=[
                QuotationLine(
                    cost_price=line["cost_price"],
                    markup_percentage=line["markup_percentage"],
                    quantity=line["quantity"],
                    line_discount=build_line_discount(line.get("line_discount")),
                    description=line.get("description") or "",
                    brand=line.get("brand") or None,
                    category=line.get("category") or None,
                    part_number=line.get("part_number") or None,
                )
                for line in data["lines"]
            ],
            discount_policy=DiscountPolicy(**discount) if discount else DiscountPolicy(),
            tax_policy=TaxPolicy(**tax) if tax else TaxPolicy(),
            shipping=ShippingPolicy(
                method=shipping.get("method", ShippingMethod.PICKUP.value),
                cost_override=shipping.get("cost_override"),
                included_in_total=shipping.get("included_in_total", False),
                zone_id=shipping.get("zone_id") or None,
                packages=build_packages(shipping.get("packages")),
                country_code=shipping.get("country_code") or None,
            ),
            incoterm=data.get("incoterm"),
            validity_days=data["validity_days"],
        )


class LinePriceRequestSerializer(serializers.Serializer):
    tier_name = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    brand = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    category = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    cost_price = serializers.DecimalField(**MONEY)
    cost_currency = serializers.ChoiceField(choices=CURRENCY_CHOICES)
    quote_currency = serializers.ChoiceField(choices=CURRENCY_CHOICES)
    quantity = serializers.IntegerField(default=1)
    line_discount = LineDiscountSerializer(required=False)
    markup_override = serializers.DecimalField(**RATE, required=False, allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    part_number = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class ShippingEstimateRequestSerializer(serializers.Serializer):
    method = serializers.ChoiceField(choices=[m.value for m in ShippingMethod])
    zone_id = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=32)
    country_code = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=2)
    packages = PackageSerializer(many=True)


# --------------------------- Responses ---------------------------

class LinePricingSerializer(serializers.Serializer):
    unit_price = serializers.DecimalField(**MONEY)
    gross_value = serializers.DecimalField(**MONEY)
    line_discount_amount = serializers.DecimalField(**MONEY)
    line_total = serializers.DecimalField(**MONEY)
    margin = serializers.DecimalField(**MONEY)
    margin_percentage = serializers.DecimalField(**RATE)


class ShippingWeightsSerializer(serializers.Serializer):
    actual_weight = serializers.DecimalField(max_digits=14, decimal_places=2)
    dim_weight = serializers.DecimalField(max_digits=14, decimal_places=2)
    chargeable_weight = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_volume = serializers.DecimalField(max_digits=18, decimal_places=2)


class TotalsSerializer(serializers.Serializer):
    currency = serializers.CharField(source="currency.value")
    subtotal = serializers.DecimalField(**MONEY)
    discount_amount = serializers.DecimalField(**MONEY)
    taxable_amount = serializers.DecimalField(**MONEY)
    tax_amount = serializers.DecimalField(**MONEY)
    shipping_cost = serializers.DecimalField(**MONEY)
    grand_total = serializers.DecimalField(**MONEY)
    effective_tax_rate = serializers.DecimalField(**RATE)
    lines = LinePricingSerializer(many=True)
    weights = ShippingWeightsSerializer(allow_null=True)
    is_incomplete = serializers.BooleanField()
    reasons = serializers.ListField(child=serializers.CharField())


class BaseCurrencyTotalSerializer(serializers.Serializer):
    currency = serializers.CharField()
    grand_total = serializers.DecimalField(**MONEY, allow_null=True)
    reason = serializers.CharField(allow_null=True)


class PricedLineSerializer(serializers.Serializer):
    pricing = LinePricingSerializer()
    markup_percentage = serializers.DecimalField(**RATE, source="markup.markup_percentage")
    markup_source = serializers.CharField(source="markup.source.value")
    tier_name = serializers.CharField(source="markup.tier_name", allow_null=True)
    max_line_discount = serializers.DecimalField(**RATE, source="markup.max_line_discount", allow_null=True)
    max_overall_discount = serializers.DecimalField(**RATE, source="markup.max_overall_discount", allow_null=True)
    cost_currency = serializers.CharField(source="cost_currency.value")
    cost_in_quote_currency = serializers.DecimalField(**MONEY)
    warnings = serializers.SerializerMethodField()

    def get_warnings(self, obj):
        return [str(w) for w in obj.warnings]


class RateQuoteSerializer(serializers.Serializer):
    base_rate = serializers.DecimalField(**MONEY)
    per_kg_rate = serializers.DecimalField(max_digits=14, decimal_places=4)
    min_weight = serializers.DecimalField(max_digits=14, decimal_places=2)
    max_weight = serializers.DecimalField(max_digits=14, decimal_places=2)
    min_charge = serializers.DecimalField(**MONEY)
    handling_fee = serializers.DecimalField(**MONEY)
    fuel_surcharge_pct = serializers.DecimalField(**RATE)


class ShippingChargesSerializer(serializers.Serializer):
    freight = serializers.DecimalField(**MONEY)
    fuel_surcharge = serializers.DecimalField(**MONEY)
    handling_fee = serializers.DecimalField(**MONEY)
    total = serializers.DecimalField(**MONEY)


class ShippingEstimateSerializer(serializers.Serializer):
    method = serializers.CharField(source="method.value")
    zone_id = serializers.CharField(allow_null=True)
    weights = ShippingWeightsSerializer()
    rate = RateQuoteSerializer(allow_null=True)
    estimated_cost = serializers.DecimalField(**MONEY, allow_null=True)
    charges = ShippingChargesSerializer(allow_null=True)
    warning = serializers.SerializerMethodField()

    def get_warning(self, obj):
        return str(obj.warning) if obj.warning is not None else None
