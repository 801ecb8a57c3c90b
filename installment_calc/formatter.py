"""Output helpers for the loan calculator.

This module formats monetary amounts, percentages and plain numbers for
display, and renders loan summaries, amortization schedules and rate ranges as
simple text tables. Values are rounded here and nowhere else.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional

import click

from .data_models import LoanSummary, PaymentPeriod, RateRange


def format_currency(value: Optional[float], decimals: int = 2) -> str:
    """Format a number as US dollars, e.g. ``$1,234.56``."""
    if value is None:
        return "$0.00"
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.{decimals}f}"


def format_percent(value: Optional[float], decimals: int = 2) -> str:
    """Format a rate already expressed in percent, e.g. ``6.5`` -> ``6.50%``."""
    if value is None:
        return "0%"
    return f"{value:.{decimals}f}%"


def format_number(value: Optional[float], decimals: int = 0) -> str:
    """Format a number with thousands separators."""
    if value is None:
        return "0"
    return f"{value:,.{decimals}f}"


def print_summary(summary: LoanSummary) -> None:
    """Print a summary of loan metrics in a human‑readable format."""
    details = summary.loan_details
    click.echo("Summary")
    click.echo("-" * 72)
    click.echo(f"Loan type          : {details.loan_category.value}")
    click.echo(f"Principal          : {format_currency(details.principal)}")
    click.echo(f"Interest rate      : {format_percent(details.annual_rate_percent)}")
    click.echo(f"Term               : {details.term_months} months")
    click.echo(f"Monthly payment    : {format_currency(summary.monthly_payment)}")
    click.echo(f"Total interest     : {format_currency(summary.total_interest)}")
    click.echo(f"Total paid         : {format_currency(summary.total_paid)}")
    click.echo(f"Start date         : {details.start_date.isoformat()}")
    click.echo(f"End date           : {details.end_date.isoformat()}")
    click.echo(f"Due day of month   : {details.monthly_due_day}")
    click.echo("-" * 72)


def print_schedule(schedule: Iterable[PaymentPeriod]) -> None:
    """Print the amortization schedule as a simple table."""
    headers = [
        "Month",
        "Payment",
        "Principal",
        "Interest",
        "TotPrincipal",
        "TotInterest",
        "Balance",
    ]
    click.echo("\t".join(headers))
    for entry in schedule:
        row = [
            str(entry.month),
            f"{entry.payment_amount:.2f}",
            f"{entry.principal_portion:.2f}",
            f"{entry.interest_portion:.2f}",
            f"{entry.cumulative_principal_paid:.2f}",
            f"{entry.cumulative_interest_paid:.2f}",
            f"{entry.remaining_balance:.2f}",
        ]
        click.echo("\t".join(row))


def print_rates(ranges: Dict[str, RateRange]) -> None:
    click.echo(f"{'Loan type':12s} {'Min':>8s} {'Max':>8s} {'Average':>8s}")
    for name, rate_range in ranges.items():
        click.echo(
            f"{name:12s} {format_percent(rate_range.min):>8s} "
            f"{format_percent(rate_range.max):>8s} {format_percent(rate_range.average):>8s}"
        )


def print_comparison(s1: LoanSummary, s2: LoanSummary) -> None:
    """Print a comparison of two loan summaries side by side.

    The difference column is scenario2 - scenario1, so a negative value means
    the second scenario is cheaper.
    """
    click.echo("Comparison")
    click.echo("=" * 72)
    rows = [
        ("monthly_payment", s1.monthly_payment, s2.monthly_payment),
        ("total_interest", s1.total_interest, s2.total_interest),
        ("total_paid", s1.total_paid, s2.total_paid),
        ("term_months", float(s1.loan_details.term_months), float(s2.loan_details.term_months)),
    ]
    click.echo(f"{'Metric':20s} {'Scenario1':>15s} {'Scenario2':>15s} {'Difference':>15s}")
    for key, v1, v2 in rows:
        diff = v2 - v1
        click.echo(f"{key:20s} {v1:15.2f} {v2:15.2f} {diff:15.2f}")
    click.echo("=" * 72)
