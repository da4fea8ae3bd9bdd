from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from core.fx import EnvProvider, parse_pairs, refresh_fx


class Command(BaseCommand):
    help = "Load FX mid rates from the FX_MID_RATES environment variable into currency_rates."

    def add_arguments(self, parser):
        parser.add_argument("--pairs", type=str, help="Comma-separated pairs BASE:QUOTE, e.g., USD:MYR,EUR:MYR")
        parser.add_argument("--source", type=str, default="ENV", help="Source label stored with each row")

    def handle(self, *args, **options):
        pairs_arg = options.get("pairs")
        if not pairs_arg:
            raise CommandError("--pairs is required (e.g., USD:MYR,EUR:MYR)")
        try:
            pairs = parse_pairs(pairs_arg)
        except ValueError as e:
            raise CommandError(str(e))

        provider = EnvProvider()
        try:
            rows = refresh_fx(pairs, provider, source_label=options["source"])
        except ValueError as e:
            raise CommandError(str(e))

        for row in rows:
            self.stdout.write(self.style.SUCCESS(
                f"Saved {row['pair']} {row['rate']} @ {row['as_of']} [{row['source']}]"
            ))
