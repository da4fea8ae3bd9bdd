from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from pricing.models import ShippingRateTiers, TierMarkupTables

# Default markup per client tier (percent over cost)
DEFAULT_TIER_MARKUPS = {
    "end_user": Decimal("40"),
    "contractor": Decimal("30"),
    "trader": Decimal("25"),
    "si": Decimal("20"),
    "partner": Decimal("15"),
    "oem": Decimal("12"),
    "dealer": Decimal("10"),
}

# (method, zone, min kg, max kg, base rate, per kg rate, min charge, handling fee, fuel %)
DEFAULT_SHIPPING_TIERS = [
    ("courier", "local", "0", "30", "8.00", "2.50", "10.00", "5.00", "10"),
    ("courier", "regional", "0", "30", "15.00", "4.00", "20.00", "5.00", "10"),
    ("courier", "international", "0", "30", "50.00", "15.00", "80.00", "5.00", "10"),
    ("air", "regional", "0", "500", "150.00", "8.00", "200.00", "50.00", "15"),
    ("air", "international", "0", "1000", "250.00", "12.00", "350.00", "50.00", "15"),
]


@transaction.atomic
def seed_tier_tables(overwrite=False):
    created = 0
    for tier_name, markup in DEFAULT_TIER_MARKUPS.items():
        row, was_created = TierMarkupTables.objects.get_or_create(
            tier_name=tier_name,
            defaults={"default_markup": markup},
        )
        if was_created:
            created += 1
        elif overwrite and row.default_markup != markup:
            row.default_markup = markup
            row.save(update_fields=["default_markup"])
    return created


@transaction.atomic
def seed_shipping_tiers():
    created = 0
    for method, zone, lo, hi, base, per_kg, min_charge, handling, fuel in DEFAULT_SHIPPING_TIERS:
        _, was_created = ShippingRateTiers.objects.get_or_create(
            method=method,
            zone_id=zone,
            min_weight=Decimal(lo),
            max_weight=Decimal(hi),
            defaults={
                "base_rate": Decimal(base),
                "per_kg_rate": Decimal(per_kg),
                "min_charge": Decimal(min_charge),
                "handling_fee": Decimal(handling),
                "fuel_surcharge_pct": Decimal(fuel),
            },
        )
        created += int(was_created)
    return created


class Command(BaseCommand):
    help = "Seed default client tier markups and shipping rate tiers."

    def add_arguments(self, parser):
        parser.add_argument(
            "--overwrite",
            action="store_true",
            help="Reset default markups of existing tiers to the seeded values",
        )

    def handle(self, *args, **options):
        self.stdout.write("Seeding tier markup tables...")
        tiers = seed_tier_tables(overwrite=options["overwrite"])
        self.stdout.write("Seeding shipping rate tiers...")
        shipping = seed_shipping_tiers()
        self.stdout.write(self.style.SUCCESS(
            f"Pricing reference data seeded ({tiers} tier tables, {shipping} shipping tiers created)."
        ))
