"""Command‑line interface for the loan calculator.

This module uses the ``click`` library to implement a multi‑command interface.
Users can compute full amortization schedules, view summaries, list the
indicative rate ranges or compare two loan scenarios. Results can be printed to
the terminal or exported to JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
import shlex
from pathlib import Path
from typing import Any, Dict, Optional

import click

from . import config
from .data_models import LoanCategory, LoanRequest, LoanSummary
from .engine import compute_loan_from_request
from .exceptions import InvalidInputError
from .formatter import print_comparison, print_rates, print_schedule, print_summary
from .logging_config import setup_logging
from .rates import get_rate_range, list_rate_ranges
from .utils import parse_iso_date

CATEGORY_CHOICES = [c.value for c in LoanCategory]


def parse_amount(value: str) -> float:
    """Parse a numeric string with optional suffixes.

    Accepts plain floats ("500000") and shorthand with ``k``/``m`` suffixes
    (e.g., "500k" meaning 500_000). Returns a float.
    """
    value = value.strip().lower()
    value = value.replace(",", "")
    factor = 1.0
    if value.endswith("k"):
        factor = 1_000.0
        value = value[:-1]
    elif value.endswith("m"):
        factor = 1_000_000.0
        value = value[:-1]
    try:
        return float(value) * factor
    except ValueError:
        raise click.BadParameter(f"Invalid amount: {value}")


def build_request_from_options(
    principal: str,
    rate: Optional[float],
    term: int,
    category: str,
    start_date: Optional[str],
) -> LoanRequest:
    """Turn raw option values into a validated ``LoanRequest``.

    When ``rate`` is omitted the category's average rate is used.
    """
    principal_value = parse_amount(principal)
    if rate is None:
        rate = get_rate_range(category).average
    start_dt = None
    if start_date:
        try:
            start_dt = parse_iso_date(start_date)
        except ValueError as exc:
            raise click.BadParameter(str(exc))
    request = LoanRequest(
        principal=principal_value,
        annual_rate_percent=rate,
        term_months=term,
        loan_category=category,
        start_date=start_dt,
    )
    try:
        request.validate()
    except InvalidInputError as exc:
        raise click.BadParameter(str(exc), param_hint=f"'{exc.field}'")
    return request


def run_engine(request: LoanRequest) -> LoanSummary:
    try:
        return compute_loan_from_request(request)
    except InvalidInputError as exc:
        raise click.BadParameter(str(exc), param_hint=f"'{exc.field}'")


def export_to_json(path: Path, summary: LoanSummary) -> None:
    """Export summary and schedule to a JSON file."""
    with path.open("w", encoding="utf-8") as f:
        json.dump(summary.to_dict(), f, indent=2)


def export_to_csv(path: Path, summary: LoanSummary) -> None:
    """Export schedule to a CSV file."""
    header = [
        "Month",
        "Payment",
        "Principal",
        "Interest",
        "Total_Principal",
        "Total_Interest",
        "Balance",
    ]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for e in summary.schedule:
            writer.writerow(
                [
                    e.month,
                    e.payment_amount,
                    e.principal_portion,
                    e.interest_portion,
                    e.cumulative_principal_paid,
                    e.cumulative_interest_paid,
                    e.remaining_balance,
                ]
            )


def loan_options(func):
    """Options shared by the ``schedule`` and ``summary`` commands."""
    options = [
        click.option("--principal", "-p", "principal", required=True, help="Loan amount (accepts 10k, 1.5m)"),
        click.option(
            "--rate",
            "-r",
            "rate",
            type=float,
            default=None,
            help="Annual interest rate (percent). Defaults to the loan type's average rate",
        ),
        click.option("--term", "-t", "term", required=True, type=int, help="Loan term in months"),
        click.option(
            "--category",
            "-c",
            "category",
            type=click.Choice(CATEGORY_CHOICES),
            default=config.DEFAULT_CATEGORY if config.DEFAULT_CATEGORY in CATEGORY_CHOICES else "personal",
            help="Loan type",
        ),
        click.option("--start-date", "-s", "start_date", help="Loan start date (YYYY-MM-DD). Defaults to today"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.option("--log-level", "log_level", default=None, help="Logging level (DEBUG, INFO, WARNING, ...)")
def cli(log_level: Optional[str]) -> None:
    """A command‑line calculator for fixed-rate installment loans."""
    setup_logging(log_level)


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(
    principal: str,
    rate: Optional[float],
    term: int,
    category: str,
    start_date: Optional[str],
    output: Optional[str],
) -> None:
    """Compute and print the full amortization schedule."""
    request = build_request_from_options(principal, rate, term, category, start_date)
    result = run_engine(request)
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, result)
            click.echo(f"Schedule exported to {path}")
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, result)
            click.echo(f"Schedule exported to {path}")
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
    else:
        print_summary(result)
        # Limit schedule length printed to avoid flooding the terminal
        max_rows = config.MAX_SCHEDULE_ROWS
        if len(result.schedule) > max_rows:
            click.echo(f"Schedule has {len(result.schedule)} rows; showing first {max_rows} rows.")
            print_schedule(result.schedule[:max_rows])
        else:
            print_schedule(result.schedule)


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json)")
def summary(
    principal: str,
    rate: Optional[float],
    term: int,
    category: str,
    start_date: Optional[str],
    output: Optional[str],
) -> None:
    """Compute and print only the summary metrics for a loan."""
    request = build_request_from_options(principal, rate, term, category, start_date)
    result = run_engine(request)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension")
        data = result.to_dict()
        data.pop("schedule")
        with path.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(result)


@cli.command()
@click.argument("category", required=False)
def rates(category: Optional[str]) -> None:
    """Show indicative interest-rate ranges, for one loan type or all of them."""
    if category:
        resolved = LoanCategory.resolve(category)
        if resolved.value != category:
            click.echo(f"Unknown loan type '{category}'; showing {resolved.value} rates.")
        print_rates({resolved.value: get_rate_range(resolved.value)})
    else:
        print_rates(list_rate_ranges())


def parse_scenario_opts(opts: str) -> Dict[str, Any]:
    """Map a quoted option string onto ``build_request_from_options`` arguments."""
    tokens = shlex.split(opts)
    params: Dict[str, Any] = {
        "principal": None,
        "rate": None,
        "term": None,
        "category": "personal",
        "start_date": None,
    }
    i = 0
    try:
        while i < len(tokens):
            token = tokens[i]
            if token in ("-p", "--principal"):
                i += 1
                params["principal"] = tokens[i]
            elif token in ("-r", "--rate"):
                i += 1
                params["rate"] = float(tokens[i])
            elif token in ("-t", "--term"):
                i += 1
                params["term"] = int(tokens[i])
            elif token in ("-c", "--category"):
                i += 1
                params["category"] = tokens[i]
            elif token in ("-s", "--start-date"):
                i += 1
                params["start_date"] = tokens[i]
            else:
                raise click.BadParameter(f"Unknown option in scenario: {token}")
            i += 1
    except IndexError:
        raise click.BadParameter(f"Option {tokens[-1]} in scenario is missing a value")
    except ValueError as exc:
        raise click.BadParameter(f"Invalid value in scenario: {exc}")
    for required in ("principal", "term"):
        if params[required] is None:
            raise click.BadParameter(f"Scenario missing required option {required}")
    return params


@cli.command()
@click.option("--scenario1", "scenario1", required=True, help="First scenario options quoted string")
@click.option("--scenario2", "scenario2", required=True, help="Second scenario options quoted string")
def compare(scenario1: str, scenario2: str) -> None:
    """Compare two loan scenarios.

    Scenarios are provided as quoted option strings, for example:

        installment-calc compare --scenario1 "-p 300k -r 5.5 -t 360" --scenario2 "-p 300k -r 5.0 -t 240"
    """
    request1 = build_request_from_options(**parse_scenario_opts(scenario1))
    request2 = build_request_from_options(**parse_scenario_opts(scenario2))
    print_comparison(run_engine(request1), run_engine(request2))


if __name__ == "__main__":
    cli()
