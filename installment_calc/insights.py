"""Read-only views derived from a computed loan.

These helpers back the schedule and loan-management screens: the next due
dates, how far through its term a loan is, the principal/interest split and
the sorting, paging and down-sampling applied to the schedule table and charts.
None of them change the ``LoanSummary`` they are given.
"""

from __future__ import annotations

import calendar
import math
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, List, Sequence, Tuple

from .data_models import LoanDetails, LoanSummary, PaymentPeriod
from .exceptions import InvalidInputError
from .utils import add_months

SORT_KEYS: Dict[str, Callable[[PaymentPeriod], float]] = {
    "month": lambda p: p.month,
    "payment": lambda p: p.payment_amount,
    "principal": lambda p: p.principal_portion,
    "interest": lambda p: p.interest_portion,
    "balance": lambda p: p.remaining_balance,
}


@dataclass(frozen=True)
class UpcomingPayment:
    due_date: date
    amount: float
    status: str  # "due" for the next payment, "scheduled" after that


@dataclass(frozen=True)
class SchedulePage:
    page: int
    per_page: int
    total_pages: int
    rows: Tuple[PaymentPeriod, ...]


def _due_date_in_month(year: int, month: int, due_day: int) -> date:
    return date(year, month, min(due_day, calendar.monthrange(year, month)[1]))


def upcoming_payments(summary: LoanSummary, today: date, count: int = 6) -> List[UpcomingPayment]:
    """Return the next ``count`` due dates after ``today``.

    The first due date is the loan's due day in ``today``'s month, pushed one
    month forward unless it falls strictly after ``today``. Due days past the
    end of a short month are clamped to its last day.
    """
    if count < 0:
        raise InvalidInputError("count", count, "Count must not be negative")
    due_day = summary.loan_details.monthly_due_day
    anchor = date(today.year, today.month, 1)
    if _due_date_in_month(today.year, today.month, due_day) <= today:
        anchor = add_months(anchor, 1)
    payments = []
    for i in range(count):
        month_start = add_months(anchor, i)
        payments.append(
            UpcomingPayment(
                due_date=_due_date_in_month(month_start.year, month_start.month, due_day),
                amount=summary.monthly_payment,
                status="due" if i == 0 else "scheduled",
            )
        )
    return payments


def loan_progress(details: LoanDetails, today: date) -> float:
    """Percentage of the loan term elapsed at ``today``, within ``[0, 100]``."""
    total_days = (details.end_date - details.start_date).days
    if total_days <= 0:
        return 100.0
    elapsed = (today - details.start_date).days
    return min(100.0, max(0.0, elapsed / total_days * 100))


def cost_breakdown(summary: LoanSummary) -> Dict[str, float]:
    return {
        "principal": summary.loan_details.principal,
        "interest": summary.total_interest,
    }


def sample_schedule(schedule: Sequence[PaymentPeriod], max_points: int = 24) -> List[PaymentPeriod]:
    """Keep every n-th period so a chart shows at most ``max_points`` points."""
    if max_points < 1:
        raise InvalidInputError("max_points", max_points, "At least one point is required")
    if not schedule:
        return []
    step = math.ceil(len(schedule) / max_points)
    return list(schedule[::step])


def sort_schedule(
    schedule: Sequence[PaymentPeriod], key: str = "month", descending: bool = False
) -> List[PaymentPeriod]:
    try:
        sort_key = SORT_KEYS[key]
    except KeyError:
        raise InvalidInputError("key", key, f"Cannot sort schedule by {key!r}") from None
    return sorted(schedule, key=sort_key, reverse=descending)


def paginate(schedule: Sequence[PaymentPeriod], page: int, per_page: int = 12) -> SchedulePage:
    """Slice one page out of ``schedule``; out-of-range pages are clamped."""
    if per_page < 1:
        raise InvalidInputError("per_page", per_page, "Rows per page must be at least one")
    total_pages = max(1, math.ceil(len(schedule) / per_page))
    page = min(max(page, 1), total_pages)
    start = (page - 1) * per_page
    return SchedulePage(
        page=page,
        per_page=per_page,
        total_pages=total_pages,
        rows=tuple(schedule[start:start + per_page]),
    )
