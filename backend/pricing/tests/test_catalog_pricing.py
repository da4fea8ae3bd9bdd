from decimal import Decimal

import pytest

from pricing.dataclasses import CategoryMarkup, ProductCost, TierMarkupTable
from pricing.exceptions import ProductNotFoundError, UnknownCurrencyPairError
from pricing.services.line_pricing import price_catalog_line, price_line_from_cost
from pricing.services.list_price import DiscountStructure
from pricing.services.tier_markup import MarkupSource


class FakeCatalog:
    def __init__(self, costs):
        self.costs = costs

    def get_cost(self, product_id):
        return self.costs.get(product_id)


class FakeTiers:
    def __init__(self, tables):
        self.tables = tables

    def get_markup_table(self, tier_name):
        return self.tables.get(tier_name)


class FakeRates:
    def __init__(self, rates):
        self.rates = rates

    def get_rate(self, from_currency, to_currency):
        return self.rates.get((from_currency, to_currency))


CATALOG = FakeCatalog({
    "6ES7": ProductCost(cost_price="100", currency="USD", list_price="200"),
    "LOCAL-1": ProductCost(cost_price="50", currency="MYR"),
})
TIERS = FakeTiers({
    "contractor": TierMarkupTable("contractor", "30", category_markups=(CategoryMarkup("plc", "35"),)),
})
RATES = FakeRates({("USD", "MYR"): Decimal("4.45")})


class TestPriceLineFromCost:
    def test_converts_then_marks_up(self):
        priced = price_line_from_cost("100", "USD", "MYR", 2,
                                      tier_table=TIERS.get_markup_table("contractor"),
                                      rate_table={("USD", "MYR"): Decimal("4.45")})
        assert priced.cost_in_quote_currency == Decimal("445.00")
        assert priced.pricing.unit_price == Decimal("578.50")
        assert priced.pricing.line_total == Decimal("1157.00")
        assert priced.markup.source == MarkupSource.DEFAULT

    def test_manual_override(self):
        priced = price_line_from_cost("10", "MYR", "MYR", markup_override="50")
        assert priced.markup.source == MarkupSource.MANUAL
        assert priced.pricing.unit_price == Decimal("15.00")

    def test_manual_override_keeps_tier_discount_limits(self):
        table = TierMarkupTable("dealer", "10", max_line_discount="12", max_overall_discount="4")
        priced = price_line_from_cost("10", "MYR", "MYR", tier_table=table, markup_override="50")
        assert priced.markup.source == MarkupSource.MANUAL
        assert priced.markup.tier_name == "dealer"
        assert priced.markup.max_line_discount == Decimal("12")
        assert priced.markup.max_overall_discount == Decimal("4")

    def test_missing_tier_warns(self):
        priced = price_line_from_cost("10", "MYR", "MYR")
        assert priced.pricing.unit_price == Decimal("10.00")
        assert len(priced.warnings) == 1

    def test_unknown_pair_propagates(self):
        with pytest.raises(UnknownCurrencyPairError):
            price_line_from_cost("10", "EUR", "MYR", rate_table={})


class TestPriceCatalogLine:
    def test_category_markup_with_conversion(self):
        priced = price_catalog_line("6ES7", "MYR", catalog=CATALOG, tier_service=TIERS,
                                    rate_service=RATES, tier_name="contractor", category="plc")
        assert priced.cost_in_quote_currency == Decimal("445.00")
        assert priced.markup.markup_percentage == Decimal("35")
        assert priced.pricing.unit_price == Decimal("600.75")
        assert priced.line.part_number == "6ES7"

    def test_inverse_rate_used(self):
        priced = price_catalog_line("LOCAL-1", "USD", catalog=CATALOG, tier_service=TIERS,
                                    rate_service=RATES, markup_override="0")
        assert priced.cost_in_quote_currency == Decimal("11.24")

    def test_list_price_nett_cost(self):
        structure = DiscountStructure(by_category={"plc": Decimal("40")})
        priced = price_catalog_line("6ES7", "USD", catalog=CATALOG, tier_service=TIERS,
                                    rate_service=RATES, category="plc", markup_override="0",
                                    discount_structure=structure)
        assert priced.cost_in_quote_currency == Decimal("120.00")

    def test_unknown_product(self):
        with pytest.raises(ProductNotFoundError):
            price_catalog_line("nope", "MYR", catalog=CATALOG, tier_service=TIERS, rate_service=RATES)
