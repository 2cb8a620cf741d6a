"""Utility functions for the prepayment calculator.

This module provides helpers for parsing user input into Python data types and
the caller-side validation the engine expects before it is invoked. The
engine itself never validates; both front ends (CLI and web) run
``validate_parameters`` on every ``LoanParameters`` they build.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, getcontext

from .data_models import PREPAYMENT_STRATEGIES, REPAYMENT_METHODS, LoanParameters

getcontext().prec = 28  # increase decimal precision to avoid rounding errors

MAX_PERIODS = 1200  # 100 years
MAX_ANNUAL_RATE = Decimal(100)


class InvalidLoanParameters(ValueError):
    """Raised when loan parameters break the engine's input contract."""


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a ``Decimal``.

    The function strips any commas and handles both integer and float-like
    strings. It raises ``ValueError`` if conversion fails.
    """
    try:
        cleaned = value.strip().replace(",", "")
        result = Decimal(cleaned)
    except (InvalidOperation, AttributeError) as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc
    if not result.is_finite():
        raise ValueError(f"Invalid numeric value: {value}")
    return result


def parse_amount(value: str) -> Decimal:
    """Parse a currency amount with optional ``k``/``m`` suffixes.

    Accepts plain numbers ("500000"), grouped numbers ("500,000") and
    shorthand such as "500k" meaning 500 000.
    """
    text = value.strip().lower()
    factor = Decimal(1)
    if text.endswith("k"):
        factor = Decimal(1_000)
        text = text[:-1]
    elif text.endswith("m"):
        factor = Decimal(1_000_000)
        text = text[:-1]
    try:
        return decimal_from_str(text) * factor
    except ValueError:
        raise ValueError(f"Invalid amount: {value}")


def parse_rate(value: str) -> Decimal:
    """Parse an annual rate given in percent, with or without a trailing ``%``."""
    text = value.strip()
    if text.endswith("%"):
        text = text[:-1]
    try:
        return decimal_from_str(text)
    except ValueError:
        raise ValueError(f"Invalid interest rate: {value}")


def validate_parameters(params: LoanParameters) -> LoanParameters:
    """Check ``params`` against the engine's input contract.

    Returns the parameters unchanged so the call can be chained.

    Raises
    ------
    InvalidLoanParameters
        Naming the first rule that is violated.
    """
    if params.total_loan <= 0:
        raise InvalidLoanParameters("Total loan must be positive")
    if isinstance(params.remaining_periods, bool) or not isinstance(params.remaining_periods, int):
        raise InvalidLoanParameters("Remaining periods must be a whole number of months")
    if params.remaining_periods <= 0:
        raise InvalidLoanParameters("Remaining periods must be positive")
    if params.remaining_periods > MAX_PERIODS:
        raise InvalidLoanParameters(f"Remaining periods cannot exceed {MAX_PERIODS} months")
    if params.annual_rate < 0:
        raise InvalidLoanParameters("Annual rate cannot be negative")
    if params.annual_rate > MAX_ANNUAL_RATE:
        raise InvalidLoanParameters(f"Annual rate cannot exceed {MAX_ANNUAL_RATE}%")
    if params.prepayment_amount < 0:
        raise InvalidLoanParameters("Prepayment amount cannot be negative")
    if params.prepayment_amount >= params.total_loan:
        raise InvalidLoanParameters("Prepayment amount must be less than the total loan")
    if params.repayment_method not in REPAYMENT_METHODS:
        raise InvalidLoanParameters(f"Unknown repayment method: {params.repayment_method}")
    if params.prepayment_strategy not in PREPAYMENT_STRATEGIES:
        raise InvalidLoanParameters(f"Unknown prepayment strategy: {params.prepayment_strategy}")
    return params
