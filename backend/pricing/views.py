from __future__ import annotations

import logging

from rest_framework import status, views
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from pricing.conf import get_base_currency
from pricing.dataclasses import ShippingMethod
from pricing.exceptions import PricingError
from pricing.serializers import (
    BaseCurrencyTotalSerializer,
    LinePriceRequestSerializer,
    PricedLineSerializer,
    QuotationSerializer,
    ShippingEstimateRequestSerializer,
    ShippingEstimateSerializer,
    TotalsSerializer,
    build_line_discount,
    build_packages,
)
from pricing.services.collaborators import (
    DbCurrencyRateService,
    DbShippingRateService,
    DbTierMarkupService,
)
from pricing.services.fx_service import build_rate_table
from pricing.services.line_pricing import price_line_from_cost
from pricing.services.shipping import estimate_shipping, resolve_zone
from pricing.services.totals import compute_totals, convert_totals_to_base

logger = logging.getLogger(__name__)


def pricing_error_response(exc: PricingError) -> Response:
    body = {"detail": str(exc)}
    field = getattr(exc, "field", None)
    if field:
        body["field"] = field
    return Response(body, status=status.HTTP_400_BAD_REQUEST)


class QuotationTotalsView(views.APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = QuotationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        quotation = serializer.to_quotation()

        shipping = quotation.shipping
        rate_tiers = []
        needs_estimate = shipping.included_in_total and shipping.cost_override is None
        if needs_estimate and shipping.method != ShippingMethod.PICKUP and shipping.packages:
            zone_id = resolve_zone(shipping.zone_id, shipping.country_code)
            rate_tiers = DbShippingRateService().get_rate_tiers(shipping.method, zone_id)

        try:
            totals = compute_totals(quotation, rate_tiers)
        except PricingError as e:
            logger.info("Quotation totals rejected: %s", e)
            return pricing_error_response(e)

        base = get_base_currency()
        rate_table = build_rate_table(DbCurrencyRateService(), [(quotation.currency.value, base)])
        base_total = convert_totals_to_base(totals, rate_table, base)

        data = TotalsSerializer(totals).data
        data["base_currency_total"] = BaseCurrencyTotalSerializer(base_total).data
        return Response(data, status=status.HTTP_200_OK)


class LinePriceView(views.APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = LinePriceRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        tier_name = data.get("tier_name")
        tier_table = DbTierMarkupService().get_markup_table(tier_name) if tier_name else None
        cost_ccy, quote_ccy = data["cost_currency"], data["quote_currency"]
        rate_table = build_rate_table(DbCurrencyRateService(), [(cost_ccy, quote_ccy), (quote_ccy, cost_ccy)])

        try:
            priced = price_line_from_cost(
                data["cost_price"],
                cost_ccy,
                quote_ccy,
                data["quantity"],
                tier_table=tier_table,
                brand=data.get("brand") or None,
                category=data.get("category") or None,
                rate_table=rate_table,
                line_discount=build_line_discount(data.get("line_discount")),
                markup_override=data.get("markup_override"),
                description=data.get("description") or "",
                part_number=data.get("part_number") or None,
            )
        except PricingError as e:
            logger.info("Line pricing rejected: %s", e)
            return pricing_error_response(e)

        return Response(PricedLineSerializer(priced).data, status=status.HTTP_200_OK)


class ShippingEstimateView(views.APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = ShippingEstimateRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        zone_id = resolve_zone(data.get("zone_id") or None, data.get("country_code") or None)

        rate_tiers = DbShippingRateService().get_rate_tiers(data["method"], zone_id)
        try:
            estimate = estimate_shipping(build_packages(data["packages"]), data["method"], zone_id, rate_tiers)
        except PricingError as e:
            return pricing_error_response(e)

        return Response(ShippingEstimateSerializer(estimate).data, status=status.HTTP_200_OK)
