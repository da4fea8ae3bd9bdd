from __future__ import annotations

from decimal import Decimal

from django.conf import settings

from .services.utils import d

DEFAULT_SST_RATE = Decimal("8")
DEFAULT_BASE_CURRENCY = "MYR"


def get_sst_rate() -> Decimal:
    """Flat SST percentage applied by the flatRate tax type."""
    return d(getattr(settings, "QUOTATION_SST_RATE", DEFAULT_SST_RATE))


def get_base_currency() -> str:
    return str(getattr(settings, "QUOTATION_BASE_CURRENCY", DEFAULT_BASE_CURRENCY)).upper()
