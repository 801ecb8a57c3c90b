import logging
from datetime import date
from typing import Any, Dict, Optional

from flask import Flask, jsonify, render_template, request

from installment_calc import config
from installment_calc.data_models import MAX_TERM_MONTHS, LoanCategory, LoanRequest
from installment_calc.engine import compute_loan_from_request
from installment_calc.exceptions import InvalidInputError
from installment_calc.formatter import format_currency, format_number, format_percent
from installment_calc.insights import (
    SORT_KEYS,
    cost_breakdown,
    loan_progress,
    paginate,
    sample_schedule,
    sort_schedule,
    upcoming_payments,
)
from installment_calc.logging_config import setup_logging
from installment_calc.rates import get_rate_range, list_rate_ranges
from installment_calc.utils import float_from_str, parse_iso_date

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config["ASSET_VERSION"] = config.ASSET_VERSION
app.secret_key = config.SECRET_KEY
app.jinja_env.filters["currency"] = format_currency
app.jinja_env.filters["percent"] = format_percent
app.jinja_env.filters["number"] = format_number

LOAN_TYPES = [
    {"id": LoanCategory.PERSONAL.value, "name": "Personal Loan"},
    {"id": LoanCategory.AUTO.value, "name": "Auto Loan"},
    {"id": LoanCategory.MORTGAGE.value, "name": "Mortgage"},
]

SORT_COLUMNS = [
    ("month", "Month"),
    ("payment", "Payment"),
    ("principal", "Principal"),
    ("interest", "Interest"),
    ("balance", "Balance"),
]

# Engine parameter names as they appear in the API payload
API_FIELD_NAMES = {
    "annual_rate_percent": "interestRate",
    "term_months": "termMonths",
    "start_date": "startDate",
}


def _parse_number(raw: Any, field: str) -> float:
    if isinstance(raw, bool):
        raise InvalidInputError(field, raw, f"{field} must be a number")
    if isinstance(raw, (int, float)):
        return float(raw)
    try:
        return float_from_str(str(raw))
    except ValueError:
        raise InvalidInputError(field, raw, f"{field} must be a number") from None


def _parse_term(raw: Any) -> int:
    value = _parse_number(raw, "termMonths")
    if not value.is_integer():
        raise InvalidInputError("termMonths", raw, "termMonths must be a whole number of months")
    return int(value)


def _parse_start_date(raw: Optional[str]) -> Optional[date]:
    if not raw:
        return None
    try:
        return parse_iso_date(raw)
    except ValueError as exc:
        raise InvalidInputError("startDate", raw, str(exc)) from None


def _payload_to_request(payload: Dict[str, Any]) -> LoanRequest:
    """Build a validated request from API JSON or form fields.

    A missing or blank interest rate is seeded with the loan type's average.
    """
    loan_type = str(payload.get("loanType") or config.DEFAULT_CATEGORY)
    if "principal" not in payload:
        raise InvalidInputError("principal", None, "principal is required")
    if "termMonths" not in payload:
        raise InvalidInputError("termMonths", None, "termMonths is required")
    raw_rate = payload.get("interestRate")
    if raw_rate is None or raw_rate == "":
        rate = get_rate_range(loan_type).average
    else:
        rate = _parse_number(raw_rate, "interestRate")
    loan_request = LoanRequest(
        principal=_parse_number(payload["principal"], "principal"),
        annual_rate_percent=rate,
        term_months=_parse_term(payload["termMonths"]),
        loan_category=loan_type,
        start_date=_parse_start_date(payload.get("startDate")),
    )
    loan_request.validate()
    return loan_request


def _json_payload() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise InvalidInputError("body", payload, "Request body must be a JSON object")
    return payload


@app.errorhandler(InvalidInputError)
def handle_invalid_input(exc: InvalidInputError):
    logger.warning("Rejected loan input %s=%r: %s", exc.field, exc.value, exc)
    return jsonify({"error": str(exc), "field": API_FIELD_NAMES.get(exc.field, exc.field)}), 400


@app.post("/api/loans/calculate")
def calculate_loan():
    loan_request = _payload_to_request(_json_payload())
    summary = compute_loan_from_request(loan_request)
    logger.info(
        "Calculated %s loan for %s over %s months",
        summary.loan_details.loan_category.value,
        loan_request.principal,
        loan_request.term_months,
    )
    return jsonify(summary.to_dict())


@app.post("/api/loans/insights")
def loan_insights():
    payload = _json_payload()
    summary = compute_loan_from_request(_payload_to_request(payload))
    today = _parse_start_date(payload.get("today")) or date.today()
    return jsonify(
        {
            "upcomingPayments": [
                {"date": p.due_date.isoformat(), "amount": p.amount, "status": p.status}
                for p in upcoming_payments(summary, today)
            ],
            "progress": loan_progress(summary.loan_details, today),
            "breakdown": cost_breakdown(summary),
            "chart": [p.to_dict() for p in sample_schedule(summary.schedule)],
        }
    )


@app.get("/api/rates")
def all_rates():
    return jsonify({name: r.to_dict() for name, r in list_rate_ranges().items()})


@app.get("/api/rates/<loan_type>")
def rates_for_type(loan_type: str):
    return jsonify(get_rate_range(loan_type).to_dict())


@app.route("/", methods=["GET", "POST"])
def index():
    summary = None
    page = None
    error = None
    form: Dict[str, Any] = {
        "principal": "10000",
        "interestRate": "",
        "termMonths": "36",
        "loanType": config.DEFAULT_CATEGORY,
        "startDate": "",
    }
    sort_key = request.values.get("sort", "month")
    if sort_key not in SORT_KEYS:
        sort_key = "month"
    descending = request.values.get("order") == "desc"
    page_number = request.values.get("page", 1, type=int)

    if request.method == "POST":
        form.update({k: request.form.get(k, "").strip() for k in form})
        try:
            loan_request = _payload_to_request(form)
            form["interestRate"] = f"{loan_request.annual_rate_percent:g}"
            summary = compute_loan_from_request(loan_request)
            rows = sort_schedule(summary.schedule, sort_key, descending)
            page = paginate(rows, page_number, config.ROWS_PER_PAGE)
        except InvalidInputError as exc:
            logger.info("Form rejected: %s", exc)
            error = str(exc)

    rate_range = get_rate_range(form["loanType"])
    today = date.today()
    return render_template(
        "index.html",
        form=form,
        loan_types=LOAN_TYPES,
        rate_range=rate_range,
        summary=summary,
        page=page,
        sort_key=sort_key,
        sort_columns=SORT_COLUMNS,
        max_term=MAX_TERM_MONTHS,
        descending=descending,
        upcoming=upcoming_payments(summary, today) if summary else [],
        progress=loan_progress(summary.loan_details, today) if summary else None,
        error=error,
        asset_version=app.config["ASSET_VERSION"],
    )


def main() -> None:
    setup_logging()
    logger.info("Starting loan calculator web app on port %s", config.WEB_PORT)
    app.run(host="0.0.0.0", port=config.WEB_PORT, debug=True)


if __name__ == "__main__":
    main()
