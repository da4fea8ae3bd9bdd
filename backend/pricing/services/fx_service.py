from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, Iterable, Mapping, Optional, Tuple

from ..exceptions import UnknownCurrencyPairError
from .utils import d, q2

logger = logging.getLogger(__name__)

RateTable = Mapping[Tuple[str, str], Decimal]


def _code(ccy) -> str:
    # Accepts Currency members as well as plain strings
    return str(getattr(ccy, "value", ccy)).upper()


def _usable(rate) -> Optional[Decimal]:
    # A zero or negative rate is treated as missing
    if rate is None or d(rate) <= 0:
        return None
    return d(rate)


def convert(amount, from_currency, to_currency, rate_table: RateTable) -> Decimal:
    """
    Convert `amount` between currency codes.

    Identical codes return the amount untouched. The direct rate is used
    when present and positive, then the reciprocal of the reverse rate.
    Converted amounts are rounded to 2 decimal places.
    """
    base = _code(from_currency)
    quote = _code(to_currency)
    if base == quote:
        return amount

    direct = _usable(rate_table.get((base, quote)))
    if direct is not None:
        return q2(d(amount) * direct)

    inverse = _usable(rate_table.get((quote, base)))
    if inverse is not None:
        return q2(d(amount) / inverse)

    raise UnknownCurrencyPairError(base, quote)


def build_rate_table(rate_service, pairs: Iterable[Tuple[str, str]]) -> Dict[Tuple[str, str], Decimal]:
    """
    Collect rates for the requested pairs from a CurrencyRateService.

    Pairs the service cannot resolve are left out of the table so that
    `convert` reports them as UnknownCurrencyPairError.
    """
    table: Dict[Tuple[str, str], Decimal] = {}
    for base, quote in pairs:
        base, quote = _code(base), _code(quote)
        if base == quote:
            continue
        rate: Optional[Decimal] = rate_service.get_rate(base, quote)
        if rate is None:
            logger.warning("No FX rate available for %s->%s", base, quote)
            continue
        table[(base, quote)] = d(rate)
    return table
