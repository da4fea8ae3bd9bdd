from decimal import Decimal
from datetime import datetime, timezone

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from core.fx import upsert_rate
from pricing.models import ShippingRateTiers, TierCategoryMarkups, TierMarkupTables


QUOTATION = {
    "currency": "USD",
    "lines": [
        {"cost_price": "100", "markup_percentage": "25", "quantity": 3,
         "line_discount": {"type": "percentage", "value": "10"}},
    ],
    "discount": {"type": "fixed", "value": "37.50"},
    "tax": {"type": "flatRate"},
}


@override_settings(QUOTATION_SST_RATE="8", QUOTATION_BASE_CURRENCY="MYR")
class PricingApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = get_user_model().objects.create_user(username="sales", password="pass")
        self.client.force_authenticate(user=self.user)

    def test_requires_authentication(self):
        res = APIClient().post("/api/pricing/totals", QUOTATION, format="json")
        self.assertIn(res.status_code, (401, 403))

    def test_totals(self):
        upsert_rate(datetime(2024, 1, 1, tzinfo=timezone.utc), "USD", "MYR", Decimal("4.45"), "ENV")
        res = self.client.post("/api/pricing/totals", QUOTATION, format="json")
        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data["currency"], "USD")
        self.assertEqual(res.data["subtotal"], "337.50")
        self.assertEqual(res.data["taxable_amount"], "300.00")
        self.assertEqual(res.data["tax_amount"], "24.00")
        self.assertEqual(res.data["grand_total"], "324.00")
        self.assertFalse(res.data["is_incomplete"])
        self.assertIsNone(res.data["weights"])
        self.assertEqual(res.data["base_currency_total"]["grand_total"], "1441.80")

    def test_totals_without_base_rate(self):
        res = self.client.post("/api/pricing/totals", QUOTATION, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertIsNone(res.data["base_currency_total"]["grand_total"])
        self.assertIn("USD->MYR", res.data["base_currency_total"]["reason"])

    def test_totals_with_shipping_estimate(self):
        ShippingRateTiers.objects.create(method="air", zone_id="regional", min_weight=0, max_weight=500,
                                         base_rate=150, per_kg_rate=8)
        payload = dict(QUOTATION, currency="MYR", shipping={
            "method": "air", "included_in_total": True, "zone_id": "regional",
            "packages": [{"length": 50, "width": 40, "height": 30, "weight": 10, "quantity": 2}],
        })
        res = self.client.post("/api/pricing/totals", payload, format="json")
        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data["shipping_cost"], "342.00")
        self.assertEqual(res.data["grand_total"], "666.00")
        self.assertEqual(res.data["weights"]["chargeable_weight"], "24.00")

    def test_totals_incomplete_when_no_rate(self):
        payload = dict(QUOTATION, currency="MYR", shipping={
            "method": "sea", "included_in_total": True,
            "packages": [{"length": 10, "width": 10, "height": 10, "weight": 1}],
        })
        res = self.client.post("/api/pricing/totals", payload, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertTrue(res.data["is_incomplete"])
        self.assertEqual(len(res.data["reasons"]), 1)

    def test_negative_quantity_reports_field(self):
        payload = dict(QUOTATION, lines=[{"cost_price": "10", "quantity": -1}])
        res = self.client.post("/api/pricing/totals", payload, format="json")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["field"], "quantity")

    def test_unknown_tax_type_rejected(self):
        payload = dict(QUOTATION, tax={"type": "vat"})
        res = self.client.post("/api/pricing/totals", payload, format="json")
        self.assertEqual(res.status_code, 400)
        self.assertIn("tax", res.data)

    def test_line_price(self):
        table = TierMarkupTables.objects.create(tier_name="contractor", default_markup=30)
        TierCategoryMarkups.objects.create(table=table, category="plc", markup=35)
        upsert_rate(datetime(2024, 1, 1, tzinfo=timezone.utc), "USD", "MYR", Decimal("4.45"), "ENV")
        res = self.client.post("/api/pricing/lines/price", {
            "tier_name": "contractor", "category": "plc",
            "cost_price": "100", "cost_currency": "USD", "quote_currency": "MYR", "quantity": 1,
        }, format="json")
        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data["cost_in_quote_currency"], "445.00")
        self.assertEqual(res.data["markup_source"], "category")
        self.assertEqual(res.data["pricing"]["unit_price"], "600.75")
        self.assertEqual(res.data["warnings"], [])

    def test_line_price_reports_tier_discount_limits(self):
        TierMarkupTables.objects.create(tier_name="dealer", default_markup=10,
                                        max_line_discount=Decimal("12.50"), max_overall_discount=5)
        res = self.client.post("/api/pricing/lines/price", {
            "tier_name": "dealer", "cost_price": "100", "cost_currency": "MYR", "quote_currency": "MYR",
        }, format="json")
        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data["max_line_discount"], "12.50")
        self.assertEqual(res.data["max_overall_discount"], "5.00")

    def test_line_price_unknown_pair(self):
        res = self.client.post("/api/pricing/lines/price", {
            "cost_price": "100", "cost_currency": "JPY", "quote_currency": "MYR",
        }, format="json")
        self.assertEqual(res.status_code, 400)
        self.assertIn("JPY->MYR", res.data["detail"])

    def test_shipping_estimate(self):
        res = self.client.post("/api/pricing/shipping/estimate", {
            "method": "courier", "zone_id": "local",
            "packages": [{"length": 10, "width": 10, "height": 10, "weight": 2}],
        }, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertIsNone(res.data["estimated_cost"])
        self.assertIsNone(res.data["rate"])
        self.assertIn("manually", res.data["warning"])
        self.assertEqual(res.data["weights"]["chargeable_weight"], "2.00")

    def test_shipping_estimate_from_country(self):
        call_command("seed_pricing_reference")
        res = self.client.post("/api/pricing/shipping/estimate", {
            "method": "courier", "country_code": "my",
            "packages": [{"length": 10, "width": 10, "height": 10, "weight": 4}],
        }, format="json")
        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data["zone_id"], "local")
        self.assertEqual(res.data["estimated_cost"], "24.80")
        self.assertEqual(res.data["charges"]["fuel_surcharge"], "1.80")
        self.assertEqual(res.data["rate"]["min_charge"], "10.00")

    def test_totals_shipping_from_country(self):
        ShippingRateTiers.objects.create(method="air", zone_id="regional", min_weight=0, max_weight=500,
                                         base_rate=150, per_kg_rate=8, min_charge=200,
                                         handling_fee=50, fuel_surcharge_pct=15)
        payload = dict(QUOTATION, currency="MYR", shipping={
            "method": "air", "included_in_total": True, "country_code": "SG",
            "packages": [{"length": 50, "width": 40, "height": 30, "weight": 10, "quantity": 2}],
        })
        res = self.client.post("/api/pricing/totals", payload, format="json")
        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data["shipping_cost"], "443.30")

    def test_shipping_estimate_negative_weight(self):
        res = self.client.post("/api/pricing/shipping/estimate", {
            "method": "air",
            "packages": [{"length": 10, "width": 10, "height": 10, "weight": -2}],
        }, format="json")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["field"], "packages[0].weight")
