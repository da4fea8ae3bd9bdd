from django.db import models

from pricing.dataclasses import ShippingMethod


class TierMarkupTables(models.Model):
    id = models.BigAutoField(primary_key=True)
    tier_name = models.CharField(max_length=32, unique=True, help_text="e.g., end_user, contractor, dealer")
    default_markup = models.DecimalField(max_digits=7, decimal_places=2)
    max_line_discount = models.DecimalField(max_digits=5, decimal_places=2, blank=True, null=True)
    max_overall_discount = models.DecimalField(max_digits=5, decimal_places=2, blank=True, null=True)
    is_active = models.BooleanField(default=True)

    def __str__(self):
        return f"{self.tier_name} ({self.default_markup}%)"

    class Meta:
        db_table = 'tier_markup_tables'
        verbose_name_plural = "Tier markup tables"


class TierBrandMarkups(models.Model):
    id = models.BigAutoField(primary_key=True)
    table = models.ForeignKey('pricing.TierMarkupTables', models.CASCADE, related_name='brand_markups')
    brand = models.CharField(max_length=64)
    markup = models.DecimalField(max_digits=7, decimal_places=2)
    # Earlier positions win when several rows match
    position = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'tier_brand_markups'
        ordering = ['table', 'position', 'id']
        unique_together = (('table', 'brand'),)


class TierCategoryMarkups(models.Model):
    id = models.BigAutoField(primary_key=True)
    table = models.ForeignKey('pricing.TierMarkupTables', models.CASCADE, related_name='category_markups')
    category = models.CharField(max_length=64)
    markup = models.DecimalField(max_digits=7, decimal_places=2)
    position = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'tier_category_markups'
        ordering = ['table', 'position', 'id']
        unique_together = (('table', 'category'),)


class ShippingRateTiers(models.Model):
    METHOD_CHOICES = [(m.value, m.name.title()) for m in ShippingMethod if m != ShippingMethod.PICKUP]

    id = models.BigAutoField(primary_key=True)
    method = models.CharField(max_length=16, choices=METHOD_CHOICES)
    zone_id = models.CharField(max_length=32, blank=True, null=True, help_text="Blank applies to every zone")
    min_weight = models.DecimalField(max_digits=12, decimal_places=2)
    max_weight = models.DecimalField(max_digits=12, decimal_places=2)
    base_rate = models.DecimalField(max_digits=12, decimal_places=2)
    per_kg_rate = models.DecimalField(max_digits=12, decimal_places=4)
    min_charge = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    handling_fee = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    fuel_surcharge_pct = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    is_active = models.BooleanField(default=True)

    def __str__(self):
        zone = self.zone_id or "any zone"
        return f"{self.method} {zone}: {self.min_weight}-{self.max_weight} kg"

    class Meta:
        db_table = 'shipping_rate_tiers'
        ordering = ['method', 'zone_id', 'min_weight', 'max_weight']
