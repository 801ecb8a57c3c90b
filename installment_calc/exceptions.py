"""Exceptions raised by the loan calculator."""

from __future__ import annotations

from typing import Any, Optional


class LoanCalcError(Exception):
    """Base class for calculator errors."""


class InvalidInputError(LoanCalcError, ValueError):
    """An input is outside the domain the engine is defined for.

    ``field`` names the offending parameter so callers (CLI, web API) can point
    the user at the right input.
    """

    def __init__(self, field: str, value: Any, message: Optional[str] = None) -> None:
        self.field = field
        self.value = value
        if message is None:
            message = f"Invalid value for {field}: {value!r}"
        super().__init__(message)
