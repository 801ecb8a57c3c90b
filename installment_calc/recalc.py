"""Caller-side coordination of loan recalculation.

A front end recomputes the loan every time an input changes. Results can come
back out of order when the computation sits behind an asynchronous boundary,
so every submission gets a generation number and only the result of the latest
one is kept.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Optional

from .data_models import LoanCategory, LoanRequest, LoanSummary, RateRange
from .engine import compute_loan_from_request
from .rates import get_rate_range

logger = logging.getLogger(__name__)


class Recalculator:
    """Holds the current loan inputs and the latest accepted result."""

    def __init__(
        self,
        principal: float = 10000.0,
        annual_rate_percent: float = 6.5,
        term_months: int = 36,
        category: str = LoanCategory.PERSONAL.value,
        start_date: Optional[date] = None,
    ) -> None:
        self.principal = principal
        self.annual_rate_percent = annual_rate_percent
        self.term_months = term_months
        self.category = LoanCategory.resolve(category)
        self.start_date = start_date
        self.rate_range: RateRange = get_rate_range(self.category.value)
        self._generation = 0
        self._pending: Dict[int, LoanRequest] = {}
        self._result: Optional[LoanSummary] = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def result(self) -> Optional[LoanSummary]:
        return self._result

    @property
    def term_years(self) -> float:
        return self.term_months / 12

    def set_term_years(self, years: float) -> None:
        self.term_months = round(years * 12)

    def select_category(self, category: str) -> RateRange:
        """Switch category and seed the rate with the category's average."""
        self.category = LoanCategory.resolve(category)
        self.rate_range = get_rate_range(self.category.value)
        self.annual_rate_percent = self.rate_range.average
        return self.rate_range

    def current_request(self) -> LoanRequest:
        return LoanRequest(
            principal=self.principal,
            annual_rate_percent=self.annual_rate_percent,
            term_months=self.term_months,
            loan_category=self.category.value,
            start_date=self.start_date,
        )

    def submit(self) -> int:
        """Validate the current inputs and register a new generation.

        Raises ``InvalidInputError`` without consuming a generation when the
        inputs are out of domain.
        """
        request = self.current_request()
        request.validate()
        self._generation += 1
        self._pending[self._generation] = request
        return self._generation

    def compute(self, token: int) -> LoanSummary:
        """Run the engine for the inputs captured at ``token``."""
        try:
            request = self._pending[token]
        except KeyError:
            raise KeyError(f"Unknown or already completed generation {token}") from None
        return compute_loan_from_request(request)

    def accept(self, token: int, summary: LoanSummary) -> bool:
        """Store ``summary`` if ``token`` is the latest submission."""
        self._pending.pop(token, None)
        if token != self._generation:
            logger.debug("Discarding stale result for generation %s (latest %s)", token, self._generation)
            return False
        # Older requests can no longer be accepted
        self._pending = {k: v for k, v in self._pending.items() if k > token}
        self._result = summary
        return True

    def recalculate(self) -> LoanSummary:
        """Submit, compute and accept in one synchronous step."""
        token = self.submit()
        summary = self.compute(token)
        self.accept(token, summary)
        return summary
