import logging
from datetime import date

import pytest

from installment_calc.engine import compute_loan
from installment_calc.logging_config import PACKAGE_LOGGERS


@pytest.fixture(autouse=True)
def reset_package_loggers():
    """The CLI installs handlers bound to CliRunner's streams; drop them after each test."""
    yield
    for name in PACKAGE_LOGGERS:
        logging.getLogger(name).handlers = []


@pytest.fixture
def personal_loan():
    return compute_loan(10000, 6.5, 36, "personal", start_date=date(2026, 1, 15))


@pytest.fixture
def mortgage_loan():
    return compute_loan(200000, 5.0, 360, "mortgage", start_date=date(2026, 1, 15))
