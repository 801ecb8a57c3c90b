"""Core calculation engine for the loan calculator.

This module implements the financial logic for fixed-rate installment loans:
the level (annuity) monthly payment, the month-by-month amortization schedule
and the aggregate totals. Monetary values are plain floats and are never
rounded here; rounding is a display concern handled by ``formatter``.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from .data_models import (
    LoanCategory,
    LoanDetails,
    LoanRequest,
    LoanSummary,
    PaymentPeriod,
    validate_loan_inputs,
)
from .exceptions import InvalidInputError
from .utils import add_months

logger = logging.getLogger(__name__)


def monthly_rate_from_annual(annual_rate_percent: float) -> float:
    """Convert an APR in percent into a monthly decimal rate."""
    return annual_rate_percent / 100 / 12


def _calculate_annuity_payment(principal: float, rate_per_month: float, term: int) -> float:
    """Return the annuity (equal installment) monthly payment for a loan.

    The formula is:

        payment = P * i / (1 - (1 + i)^-n)

    where ``P`` is the principal, ``i`` is the monthly interest rate and
    ``n`` is the number of payments. When the interest rate is zero, the
    payment simplifies to ``P / n``.
    """
    if rate_per_month == 0:
        return principal / term
    # (1 + i)^-n underflows to zero for huge rates where (1 + i)^n would overflow
    return principal * rate_per_month / (1 - (1 + rate_per_month) ** -term)


def _build_schedule(principal: float, rate_per_month: float, payment: float, term: int) -> List[PaymentPeriod]:
    schedule: List[PaymentPeriod] = []
    balance = principal
    total_principal_paid = 0.0
    total_interest_paid = 0.0
    for month in range(1, term + 1):
        interest_payment = balance * rate_per_month
        principal_payment = payment - interest_payment
        balance -= principal_payment
        total_principal_paid += principal_payment
        total_interest_paid += interest_payment
        schedule.append(
            PaymentPeriod(
                month=month,
                payment_amount=payment,
                principal_portion=principal_payment,
                interest_portion=interest_payment,
                cumulative_principal_paid=total_principal_paid,
                cumulative_interest_paid=total_interest_paid,
                remaining_balance=max(0.0, balance),
            )
        )
    return schedule


def compute_loan(
    principal: float,
    annual_rate_percent: float,
    term_months: int,
    category: str = LoanCategory.PERSONAL.value,
    start_date: Optional[date] = None,
) -> LoanSummary:
    """Compute the payment, totals and amortization schedule for a loan.

    Parameters
    ----------
    principal: float
        Amount borrowed. Must be positive.
    annual_rate_percent: float
        Nominal annual rate in percent. Zero selects straight-line repayment.
    term_months: int
        Number of monthly payments, from 1 to ``MAX_TERM_MONTHS``.
    category: str
        Loan category echoed in the details; unknown values become
        ``personal``.
    start_date: date, optional
        Reference date for ``loan_details``. Defaults to today.

    Returns
    -------
    LoanSummary
        Level payment, totals, one ``PaymentPeriod`` per month and the loan
        details with derived start/end dates.

    Raises
    ------
    InvalidInputError
        If principal, rate or term fall outside the engine's domain, or
        the loan would end past the last representable date.
    """
    validate_loan_inputs(principal, annual_rate_percent, term_months)

    rate_per_month = monthly_rate_from_annual(annual_rate_percent)
    monthly_payment = _calculate_annuity_payment(principal, rate_per_month, term_months)
    schedule = _build_schedule(principal, rate_per_month, monthly_payment, term_months)

    total_paid = monthly_payment * term_months
    total_interest = total_paid - principal

    start = start_date if start_date is not None else date.today()
    try:
        end = add_months(start, term_months)
    except ValueError:
        raise InvalidInputError(
            "start_date", start, "Loan would end after the last supported calendar date"
        ) from None
    details = LoanDetails(
        principal=principal,
        annual_rate_percent=annual_rate_percent,
        term_months=term_months,
        loan_category=LoanCategory.resolve(category),
        start_date=start,
        end_date=end,
        monthly_due_day=start.day,
    )
    logger.debug(
        "Computed %s loan: principal=%s rate=%s%% term=%s payment=%.6f",
        details.loan_category.value,
        principal,
        annual_rate_percent,
        term_months,
        monthly_payment,
    )
    return LoanSummary(
        monthly_payment=monthly_payment,
        total_interest=total_interest,
        total_paid=total_paid,
        schedule=tuple(schedule),
        loan_details=details,
    )


def compute_loan_from_request(request: LoanRequest) -> LoanSummary:
    """Run ``compute_loan`` for a prepared ``LoanRequest``."""
    return compute_loan(
        request.principal,
        request.annual_rate_percent,
        request.term_months,
        request.loan_category,
        request.start_date,
    )
