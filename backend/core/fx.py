from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
import json
import logging
import os
from typing import Dict, Iterable, List, Optional, Protocol, Tuple

from django.db import transaction
from django.utils.timezone import now

from .models import CurrencyRates

logger = logging.getLogger(__name__)


def d(val) -> Decimal:
    if isinstance(val, Decimal):
        return val
    return Decimal(str(val))


class MissingMidRateError(ValueError):
    def __init__(self, base: str, quote: str):
        super().__init__(f"No mid rate configured in FX_MID_RATES for {base}->{quote}")
        self.base = base
        self.quote = quote


@dataclass(frozen=True)
class MidRate:
    base: str
    quote: str
    rate: Decimal
    as_of: datetime

    @property
    def pair(self) -> str:
        return f"{self.base}->{self.quote}"


class MidRateProvider(Protocol):
    def get_mid_rate(self, base: str, quote: str) -> MidRate: ...


class EnvProvider:
    """
    Mid rates configured as nested JSON in the FX_MID_RATES environment
    variable, keyed base then quote:

      FX_MID_RATES='{"USD": {"MYR": 4.45, "SGD": 1.34}, "EUR": {"MYR": 4.85}}'

    A pair configured only in the reverse direction is served as the
    reciprocal. Zero or negative entries count as not configured.
    """

    def __init__(self, as_of: Optional[datetime] = None, blob: Optional[str] = None):
        self.as_of = as_of or now()
        if blob is None:
            blob = os.environ.get("FX_MID_RATES", "{}")
        try:
            self.table: Dict[str, Dict[str, float]] = json.loads(blob)
        except json.JSONDecodeError:
            logger.exception("Invalid FX_MID_RATES JSON; no mid rates available")
            self.table = {}

    def _configured(self, base: str, quote: str) -> Optional[Decimal]:
        raw = self.table.get(base, {}).get(quote)
        if raw is None or d(raw) <= 0:
            return None
        return d(raw)

    def get_mid_rate(self, base: str, quote: str) -> MidRate:
        base, quote = base.upper(), quote.upper()
        rate = self._configured(base, quote)
        if rate is None:
            reverse = self._configured(quote, base)
            if reverse is None:
                raise MissingMidRateError(base, quote)
            rate = Decimal(1) / reverse
        return MidRate(base=base, quote=quote, rate=rate, as_of=self.as_of)


def parse_pairs(arg) -> List[Tuple[str, str]]:
    """Parse 'USD:MYR,EUR:MYR' (or a list of 'BASE:QUOTE' strings) into pairs."""
    if isinstance(arg, str):
        parts = [p.strip() for p in arg.split(",") if p.strip()]
    else:
        parts = [str(p).strip() for p in (arg or []) if str(p).strip()]
    pairs: List[Tuple[str, str]] = []
    for part in parts:
        if ":" not in part:
            raise ValueError(f"Invalid pair '{part}'. Use BASE:QUOTE, e.g., USD:MYR")
        b, q = part.split(":", 1)
        pairs.append((b.strip().upper(), q.strip().upper()))
    return pairs


def latest_rate(base: str, quote: str) -> Optional[CurrencyRates]:
    return (
        CurrencyRates.objects
        .filter(base_ccy=base.upper(), quote_ccy=quote.upper())
        .order_by("-as_of_ts")
        .first()
    )


def upsert_rate(as_of: datetime, base: str, quote: str, rate: Decimal, source: str) -> None:
    CurrencyRates.objects.update_or_create(
        as_of_ts=as_of,
        base_ccy=base.upper(),
        quote_ccy=quote.upper(),
        defaults={"rate": d(rate), "source": source},
    )


def warn_if_stale(base: str, quote: str, row: Optional[CurrencyRates], stale_hours: float) -> Optional[float]:
    if not row:
        return None
    age_hours = (now() - row.as_of_ts).total_seconds() / 3600.0
    if age_hours > stale_hours:
        logger.warning("FX staleness: %s->%s latest %.1fh old", base, quote, age_hours)
    return age_hours


def warn_if_anomalous(base: str, quote: str, prev_rate, new_rate, anomaly_pct: float) -> None:
    if prev_rate is None or d(prev_rate) <= 0:
        return
    pct = float(abs(d(new_rate) - d(prev_rate)) / d(prev_rate))
    if pct > anomaly_pct:
        logger.warning("FX anomaly: %s->%s changed by %.2f%% (old=%s new=%s)",
                       base, quote, pct * 100.0, prev_rate, new_rate)


def refresh_fx(
    pairs: Iterable[Tuple[str, str]],
    provider: MidRateProvider,
    *,
    source_label: str = "ENV",
) -> List[Dict]:
    """
    Fetch mid rates for every pair, then persist them as CurrencyRates rows
    in one transaction. A pair the provider cannot serve raises before
    anything is written, so a refresh is all or nothing.
    """
    stale_hours = float(os.environ.get("FX_STALE_HOURS", 24))
    anomaly_pct = float(os.environ.get("FX_ANOMALY_PCT", 0.05))

    fetched = [provider.get_mid_rate(base, quote) for base, quote in pairs]

    results: List[Dict] = []
    with transaction.atomic():
        for mr in fetched:
            prev = latest_rate(mr.base, mr.quote)
            age_hours = warn_if_stale(mr.base, mr.quote, prev, stale_hours)
            warn_if_anomalous(mr.base, mr.quote, prev.rate if prev else None, mr.rate, anomaly_pct)
            upsert_rate(mr.as_of, mr.base, mr.quote, mr.rate, source_label)
            logger.info("Saved FX %s %s [%s]", mr.pair, mr.rate, source_label)
            results.append({
                "pair": mr.pair,
                "as_of": mr.as_of.isoformat(),
                "rate": str(mr.rate),
                "source": source_label,
                **({"fx_age_hours": round(age_hours, 1)} if age_hours is not None else {}),
            })
    return results
