"""Runtime settings read from the environment.

Values are read once at import time. The web app and the CLI both import from
here so a single set of environment variables configures every entry point.
"""

from __future__ import annotations

import os


def _int_from_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"Environment variable {name} must be an integer; got {raw!r}") from exc


LOG_LEVEL = os.environ.get("LOAN_CALC_LOG_LEVEL", "INFO").upper()
DEFAULT_CATEGORY = os.environ.get("LOAN_CALC_DEFAULT_CATEGORY", "personal").strip().lower()

# Rows of the schedule shown before truncating in the terminal and HTML preview
MAX_SCHEDULE_ROWS = _int_from_env("LOAN_CALC_MAX_ROWS", 120)
ROWS_PER_PAGE = _int_from_env("LOAN_CALC_ROWS_PER_PAGE", 12)

# Web front end
SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
ASSET_VERSION = os.environ.get("ASSET_VERSION", "1")
WEB_PORT = _int_from_env("LOAN_CALC_PORT", 8710)
