from datetime import date

import pytest

from installment_calc.data_models import LoanCategory
from installment_calc.exceptions import InvalidInputError
from installment_calc.recalc import Recalculator


@pytest.fixture
def calc():
    return Recalculator(start_date=date(2026, 1, 15))


def test_defaults(calc):
    assert calc.category is LoanCategory.PERSONAL
    assert calc.rate_range.average == 11.5
    assert calc.result is None
    assert calc.generation == 0


def test_select_category_seeds_average_rate(calc):
    rate_range = calc.select_category("auto")
    assert rate_range.to_dict() == {"min": 3.5, "max": 18.0, "average": 6.5}
    assert calc.annual_rate_percent == 6.5
    assert calc.category is LoanCategory.AUTO


def test_select_unknown_category(calc):
    calc.select_category("mortgage")
    calc.select_category("yacht")
    assert calc.category is LoanCategory.PERSONAL
    assert calc.annual_rate_percent == 11.5


def test_term_years_conversion(calc):
    calc.set_term_years(2.5)
    assert calc.term_months == 30
    assert calc.term_years == 2.5
    calc.term_months = 18
    assert calc.term_years == 1.5


def test_recalculate(calc):
    summary = calc.recalculate()
    assert summary.monthly_payment == pytest.approx(306.49, abs=0.02)
    assert calc.result is summary


def test_stale_result_is_discarded(calc):
    first = calc.submit()
    calc.principal = 20000
    second = calc.submit()

    newer = calc.compute(second)
    older = calc.compute(first)

    assert calc.accept(second, newer) is True
    assert calc.accept(first, older) is False
    assert calc.result is newer
    assert calc.result.loan_details.principal == 20000


def test_earlier_result_arriving_first_is_discarded(calc):
    first = calc.submit()
    second = calc.submit()
    assert calc.accept(first, calc.compute(first)) is False
    assert calc.result is None
    assert calc.accept(second, calc.compute(second)) is True


def test_invalid_inputs_do_not_consume_generation(calc):
    calc.principal = 0
    with pytest.raises(InvalidInputError):
        calc.submit()
    assert calc.generation == 0


def test_compute_unknown_generation(calc):
    with pytest.raises(KeyError):
        calc.compute(99)
