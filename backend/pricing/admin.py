from decimal import Decimal

from django.contrib import admin, messages

from pricing.models import (
    ShippingRateTiers,
    TierBrandMarkups,
    TierCategoryMarkups,
    TierMarkupTables,
)
from pricing.services.collaborators import DbShippingRateService


class TierBrandMarkupsInline(admin.TabularInline):
    model = TierBrandMarkups
    extra = 0


class TierCategoryMarkupsInline(admin.TabularInline):
    model = TierCategoryMarkups
    extra = 0


@admin.register(TierMarkupTables)
class TierMarkupTablesAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "tier_name",
        "default_markup",
        "max_line_discount",
        "max_overall_discount",
        "is_active",
    )
    list_filter = ("is_active",)
    search_fields = ("tier_name",)
    inlines = [TierCategoryMarkupsInline, TierBrandMarkupsInline]


@admin.register(ShippingRateTiers)
class ShippingRateTiersAdmin(admin.ModelAdmin):
    list_display = (
        "id", "method", "zone_id", "min_weight", "max_weight", "base_rate", "per_kg_rate",
        "min_charge", "handling_fee", "fuel_surcharge_pct", "is_active",
    )
    list_filter = ("method", "zone_id", "is_active")
    actions = ["check_tier_gaps"]

    def check_tier_gaps(self, request, queryset):
        any_warn = False
        for method, zone_id in sorted({(row.method, row.zone_id or "") for row in queryset}):
            tiers = DbShippingRateService().get_rate_tiers(method, zone_id or None)
            tiers = [t for t in tiers if (t.zone_id or "") == zone_id]
            for prev, cur in zip(tiers, tiers[1:]):
                # chargeable weights are rounded to 0.01 kg
                if cur.min_weight > prev.max_weight + Decimal("0.01"):
                    any_warn = True
                    messages.warning(
                        request,
                        f"{method} {zone_id or 'any zone'}: no tier covers {prev.max_weight}-{cur.min_weight} kg",
                    )
        if not any_warn:
            messages.info(request, "Selected shipping tiers have no weight gaps.")

    check_tier_gaps.short_description = "Check shipping tiers for weight gaps"
