"""Data models for the loan calculator.

This module defines dataclasses representing the entities used by the
calculator: the loan request a caller builds, each month of the amortization
schedule, the echoed loan details and the summary the engine returns, plus the
indicative rate range for a loan category. All of them are frozen; a new
schedule is computed wholesale whenever an input changes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .exceptions import InvalidInputError

# 100 years of monthly payments
MAX_TERM_MONTHS = 1200


class LoanCategory(str, Enum):
    """Loan categories with a configured rate range."""

    PERSONAL = "personal"
    AUTO = "auto"
    MORTGAGE = "mortgage"

    @classmethod
    def resolve(cls, value: Any) -> "LoanCategory":
        """Return the category whose value equals ``value`` exactly, else ``PERSONAL``."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                pass
        return cls.PERSONAL


@dataclass(frozen=True)
class RateRange:
    """Indicative APR bounds for a loan category, in percent.

    ``average`` is the rate a caller seeds its input with when the category
    is selected.
    """

    min: float
    max: float
    average: float

    def contains(self, rate: float) -> bool:
        return self.min <= rate <= self.max

    def to_dict(self) -> Dict[str, float]:
        return {"min": self.min, "max": self.max, "average": self.average}


@dataclass(frozen=True)
class LoanRequest:
    """Inputs for one engine invocation.

    Attributes
    ----------
    principal: float
        Amount borrowed, in currency units. Must be positive.
    annual_rate_percent: float
        Nominal annual rate in percent (``6.5`` means 6.5 % APR). Must not be
        negative.
    term_months: int
        Number of monthly installments, from 1 to ``MAX_TERM_MONTHS``.
    loan_category: str
        One of ``personal``, ``auto`` or ``mortgage``; anything else is treated
        as ``personal``.
    start_date: date, optional
        Reference date for the loan details. ``None`` means today.
    """

    principal: float
    annual_rate_percent: float
    term_months: int
    loan_category: str = LoanCategory.PERSONAL.value
    start_date: Optional[date] = None

    @property
    def category(self) -> LoanCategory:
        return LoanCategory.resolve(self.loan_category)

    def validate(self) -> None:
        """Raise ``InvalidInputError`` for the first violated precondition."""
        validate_loan_inputs(self.principal, self.annual_rate_percent, self.term_months)


def validate_loan_inputs(principal: Any, annual_rate_percent: Any, term_months: Any) -> None:
    """Check the domain the amortization engine is defined for."""
    if isinstance(principal, bool) or not isinstance(principal, (int, float)):
        raise InvalidInputError("principal", principal, "Principal must be a number")
    if not math.isfinite(principal) or principal <= 0:
        raise InvalidInputError("principal", principal, "Principal must be positive")
    if isinstance(annual_rate_percent, bool) or not isinstance(annual_rate_percent, (int, float)):
        raise InvalidInputError("annual_rate_percent", annual_rate_percent, "Interest rate must be a number")
    if not math.isfinite(annual_rate_percent) or annual_rate_percent < 0:
        raise InvalidInputError(
            "annual_rate_percent", annual_rate_percent, "Interest rate must not be negative"
        )
    if isinstance(term_months, bool) or not isinstance(term_months, int):
        raise InvalidInputError("term_months", term_months, "Term must be a whole number of months")
    if term_months < 1:
        raise InvalidInputError("term_months", term_months, "Term must be at least one month")
    if term_months > MAX_TERM_MONTHS:
        raise InvalidInputError(
            "term_months", term_months, f"Term must not exceed {MAX_TERM_MONTHS} months"
        )


@dataclass(frozen=True)
class PaymentPeriod:
    """One month of the amortization schedule.

    ``remaining_balance`` is clamped at zero so floating-point drift in the
    final period never shows a negative balance.
    """

    month: int
    payment_amount: float
    principal_portion: float
    interest_portion: float
    cumulative_principal_paid: float
    cumulative_interest_paid: float
    remaining_balance: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month,
            "payment": self.payment_amount,
            "principal": self.principal_portion,
            "interest": self.interest_portion,
            "totalPrincipal": self.cumulative_principal_paid,
            "totalInterest": self.cumulative_interest_paid,
            "balance": self.remaining_balance,
        }


@dataclass(frozen=True)
class LoanDetails:
    """Resolved inputs echoed back together with the derived dates."""

    principal: float
    annual_rate_percent: float
    term_months: int
    loan_category: LoanCategory
    start_date: date
    end_date: date
    monthly_due_day: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "monthlyDueDay": self.monthly_due_day,
            "principal": self.principal,
            "interestRate": self.annual_rate_percent,
            "termMonths": self.term_months,
            "loanType": self.loan_category.value,
        }


@dataclass(frozen=True)
class LoanSummary:
    """Everything the engine returns for one loan."""

    monthly_payment: float
    total_interest: float
    total_paid: float
    schedule: Tuple[PaymentPeriod, ...]
    loan_details: LoanDetails

    def to_dict(self) -> Dict[str, Any]:
        return {
            "monthlyPayment": self.monthly_payment,
            "totalInterest": self.total_interest,
            "totalPaid": self.total_paid,
            "schedule": [period.to_dict() for period in self.schedule],
            "loanDetails": self.loan_details.to_dict(),
        }
