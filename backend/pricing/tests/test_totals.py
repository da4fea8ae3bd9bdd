from dataclasses import replace
from decimal import Decimal

from django.test import SimpleTestCase

from pricing.dataclasses import (
    DiscountPolicy,
    LineDiscount,
    Package,
    Quotation,
    QuotationLine,
    ShippingPolicy,
    ShippingRateTier,
    TaxPolicy,
)
from pricing.exceptions import InvalidLineInputError
from pricing.services.totals import compute_totals, convert_totals_to_base

TIERS = [ShippingRateTier("air", "regional", "0", "500", "150", "8")]


def make_quotation(**overrides):
    fields = dict(
        currency="MYR",
        lines=[
            QuotationLine(cost_price="100", markup_percentage="25", quantity=3,
                          line_discount=LineDiscount("percentage", "10")),
            QuotationLine(cost_price="200", markup_percentage="10", quantity=1),
        ],
        discount_policy=DiscountPolicy("fixed", "57.50"),
        tax_policy=TaxPolicy("flatRate"),
    )
    fields.update(overrides)
    return Quotation(**fields)


class ComputeTotalsTests(SimpleTestCase):
    def test_pipeline(self):
        t = compute_totals(make_quotation(), sst_rate=Decimal("8"))
        self.assertEqual(t.subtotal, Decimal("557.50"))
        self.assertEqual(t.discount_amount, Decimal("57.50"))
        self.assertEqual(t.taxable_amount, Decimal("500.00"))
        self.assertEqual(t.tax_amount, Decimal("40.00"))
        self.assertEqual(t.shipping_cost, Decimal("0"))
        self.assertEqual(t.grand_total, Decimal("540.00"))
        self.assertFalse(t.is_incomplete)
        self.assertEqual(len(t.lines), 2)

    def test_deterministic(self):
        q = make_quotation()
        self.assertEqual(compute_totals(q, TIERS, Decimal("8")), compute_totals(q, TIERS, Decimal("8")))

    def test_idempotent_under_revert(self):
        q = make_quotation()
        before = compute_totals(q, sst_rate=Decimal("8"))
        original = q.lines[0]
        q.lines[0] = replace(original, quantity=7)
        self.assertNotEqual(compute_totals(q, sst_rate=Decimal("8")), before)
        q.lines[0] = replace(original, quantity=3)
        self.assertEqual(compute_totals(q, sst_rate=Decimal("8")), before)

    def test_shipping_estimate_added(self):
        shipping = ShippingPolicy("air", included_in_total=True, zone_id="regional",
                                  packages=[Package(50, 40, 30, 10, quantity=2)])
        t = compute_totals(make_quotation(shipping=shipping), TIERS, Decimal("8"))
        self.assertEqual(t.shipping_cost, Decimal("342.00"))  # 150 + 8 * 24
        self.assertEqual(t.grand_total, Decimal("882.00"))
        self.assertEqual(t.weights.chargeable_weight, Decimal("24.00"))

    def test_shipping_without_zone_skips_zoned_tiers(self):
        tiers = [
            ShippingRateTier("air", "east", "0", "100", "900", "50"),
            ShippingRateTier("air", None, "0", "100", "100", "5"),
        ]
        shipping = ShippingPolicy("air", included_in_total=True, packages=[Package(50, 40, 30, 10, quantity=2)])
        t = compute_totals(make_quotation(shipping=shipping), tiers, Decimal("8"))
        self.assertEqual(t.shipping_cost, Decimal("220.00"))  # 100 + 5 * 24

    def test_shipping_zone_from_destination_country(self):
        tiers = [ShippingRateTier("air", "regional", "0", "500", "150", "8",
                                  min_charge="200", handling_fee="50", fuel_surcharge_pct="15")]
        shipping = ShippingPolicy("air", included_in_total=True, country_code="SG",
                                  packages=[Package(50, 40, 30, 10, quantity=2)])
        t = compute_totals(make_quotation(shipping=shipping), tiers, Decimal("8"))
        # freight 342, fuel 51.30, handling 50
        self.assertEqual(t.shipping_cost, Decimal("443.30"))
        self.assertFalse(t.is_incomplete)

    def test_shipping_override_wins(self):
        shipping = ShippingPolicy("air", cost_override="99.999", included_in_total=True,
                                  packages=[Package(50, 40, 30, 10)])
        t = compute_totals(make_quotation(shipping=shipping), TIERS, Decimal("8"))
        self.assertEqual(t.shipping_cost, Decimal("100.00"))
        self.assertFalse(t.is_incomplete)

    def test_shipping_not_included(self):
        shipping = ShippingPolicy("air", cost_override="50", included_in_total=False)
        t = compute_totals(make_quotation(shipping=shipping), TIERS, Decimal("8"))
        self.assertEqual(t.shipping_cost, Decimal("0"))

    def test_missing_rate_flags_incomplete(self):
        shipping = ShippingPolicy("courier", included_in_total=True, zone_id="local",
                                  packages=[Package(10, 10, 10, 5)])
        with self.assertLogs("pricing.services.totals", level="WARNING"):
            t = compute_totals(make_quotation(shipping=shipping), TIERS, Decimal("8"))
        self.assertTrue(t.is_incomplete)
        self.assertEqual(t.shipping_cost, Decimal("0"))
        self.assertIn("enter the shipping cost manually", t.reasons[0])

    def test_no_packages_flags_incomplete(self):
        shipping = ShippingPolicy("sea", included_in_total=True)
        t = compute_totals(make_quotation(shipping=shipping), TIERS, Decimal("8"))
        self.assertTrue(t.is_incomplete)

    def test_inclusive_tax_keeps_grand_total(self):
        t = compute_totals(make_quotation(tax_policy=TaxPolicy("flatRate", inclusive=True)), sst_rate=Decimal("8"))
        self.assertEqual(t.grand_total, Decimal("500.00"))
        self.assertEqual(t.tax_amount, Decimal("37.04"))

    def test_invalid_line_propagates(self):
        q = make_quotation(lines=[QuotationLine(cost_price="-1")])
        with self.assertRaises(InvalidLineInputError):
            compute_totals(q)

    def test_empty_quotation(self):
        t = compute_totals(Quotation(), sst_rate=Decimal("8"))
        self.assertEqual(t.grand_total, Decimal("0.00"))
        self.assertEqual(t.lines, ())


class ConvertTotalsToBaseTests(SimpleTestCase):
    def test_converted(self):
        t = compute_totals(make_quotation(currency="USD"), sst_rate=Decimal("8"))
        res = convert_totals_to_base(t, {("USD", "MYR"): Decimal("4.45")}, "MYR")
        self.assertEqual(res.grand_total, Decimal("2403.00"))
        self.assertIsNone(res.reason)

    def test_unknown_pair_leaves_total_unresolved(self):
        t = compute_totals(make_quotation(currency="EUR"), sst_rate=Decimal("8"))
        res = convert_totals_to_base(t, {}, "MYR")
        self.assertIsNone(res.grand_total)
        self.assertIn("EUR->MYR", res.reason)
