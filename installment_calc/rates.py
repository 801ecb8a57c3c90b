"""Indicative interest-rate ranges per loan category."""

from __future__ import annotations

import logging
from typing import Dict

from .data_models import LoanCategory, RateRange

logger = logging.getLogger(__name__)

RATE_RANGES: Dict[LoanCategory, RateRange] = {
    LoanCategory.PERSONAL: RateRange(min=5.5, max=36.0, average=11.5),
    LoanCategory.AUTO: RateRange(min=3.5, max=18.0, average=6.5),
    LoanCategory.MORTGAGE: RateRange(min=2.5, max=8.5, average=5.0),
}


def get_rate_range(category: str) -> RateRange:
    """Return the APR range for ``category``.

    Unknown categories get the ``personal`` range; this never raises.
    """
    resolved = LoanCategory.resolve(category)
    if resolved.value != category:
        logger.debug("Rate range requested for %r; using %s", category, resolved.value)
    return RATE_RANGES[resolved]


def list_rate_ranges() -> Dict[str, RateRange]:
    return {category.value: rate_range for category, rate_range in RATE_RANGES.items()}
