"""
Logging configuration for the loan calculator.

Installs a single console handler on the package loggers. Calling
``setup_logging`` again replaces the handler instead of stacking duplicates.
"""

from __future__ import annotations

import logging
from typing import Optional

from . import config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

PACKAGE_LOGGERS = ("installment_calc", "installment_calc_web")


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure the package loggers.

    ``level`` overrides ``LOAN_CALC_LOG_LEVEL``; unknown names fall back to INFO.
    """
    level_name = (level or config.LOG_LEVEL).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler()
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))

    for name in PACKAGE_LOGGERS:
        logger = logging.getLogger(name)
        logger.setLevel(numeric_level)
        # Avoid duplicate handlers if setup_logging is called multiple times
        logger.handlers = [handler]
