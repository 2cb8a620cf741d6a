"""Core calculation engine for the prepayment calculator.

This module implements the financial logic required to build amortization
schedules for both equal installment (annuity) and equal principal
(decreasing) loans, and to model a one-time prepayment that either lowers the
recurring payment or shortens the remaining term. Every function is pure: the
same inputs always produce the same ``CalculationResult``.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from decimal import Decimal, getcontext
from typing import Dict, List, Tuple

from .data_models import (
    EQUAL_INSTALLMENT,
    PREPAYMENT_STRATEGIES,
    REDUCE_PAYMENT,
    CalculationResult,
    LoanParameters,
    ScheduleEntry,
)

getcontext().prec = 28  # increase precision for financial calculations

logger = logging.getLogger(__name__)

MAX_SEARCH_PERIODS = 1000


def monthly_rate(annual_rate: Decimal) -> Decimal:
    """Convert an annual percentage rate into a monthly decimal rate."""
    return (annual_rate / Decimal(100)) / Decimal(12)


def calculate_equal_payment(principal: Decimal, rate_per_month: Decimal, periods: int) -> Decimal:
    """Return the equal installment (annuity) monthly payment for a loan.

    The formula is:

        payment = P * (r * (1 + r)^n) / ((1 + r)^n - 1)

    where ``P`` is the principal, ``r`` is the monthly interest rate and
    ``n`` is the number of payments. When the interest rate is zero, the
    payment simplifies to ``P / n``.
    """
    if periods <= 0:
        raise ValueError("Periods must be positive")
    if rate_per_month == 0:
        return principal / Decimal(periods)
    factor = (1 + rate_per_month) ** periods
    return principal * (rate_per_month * factor) / (factor - 1)


def equal_installment_schedule(principal: Decimal, rate_per_month: Decimal, periods: int) -> List[ScheduleEntry]:
    """Build a schedule with a constant payment in every period."""
    payment = calculate_equal_payment(principal, rate_per_month, periods)
    balance = principal
    schedule: List[ScheduleEntry] = []
    for period in range(1, periods + 1):
        interest_payment = balance * rate_per_month
        principal_payment = payment - interest_payment
        balance = max(Decimal(0), balance - principal_payment)
        schedule.append(
            ScheduleEntry(
                period=period,
                payment=payment,
                principal_payment=principal_payment,
                interest_payment=interest_payment,
                ending_balance=balance,
            )
        )
    return schedule


def equal_principal_schedule(principal: Decimal, rate_per_month: Decimal, periods: int) -> List[ScheduleEntry]:
    """Build a schedule with a constant principal portion in every period.

    The payment shrinks each month together with the interest on the
    declining balance.
    """
    principal_portion = principal / Decimal(periods)
    balance = principal
    schedule: List[ScheduleEntry] = []
    for period in range(1, periods + 1):
        interest_payment = balance * rate_per_month
        balance = max(Decimal(0), balance - principal_portion)
        schedule.append(
            ScheduleEntry(
                period=period,
                payment=principal_portion + interest_payment,
                principal_payment=principal_portion,
                interest_payment=interest_payment,
                ending_balance=balance,
            )
        )
    return schedule


def generate_schedule(method: str, principal: Decimal, rate_per_month: Decimal, periods: int) -> List[ScheduleEntry]:
    """Dispatch to the schedule generator for ``method``."""
    if method == EQUAL_INSTALLMENT:
        return equal_installment_schedule(principal, rate_per_month, periods)
    return equal_principal_schedule(principal, rate_per_month, periods)


def total_interest(schedule: List[ScheduleEntry]) -> Decimal:
    return sum((entry.interest_payment for entry in schedule), Decimal(0))


def find_minimal_term(principal: Decimal, rate_per_month: Decimal, target_payment: Decimal) -> Tuple[int, bool]:
    """Return the shortest term whose equal installment fits ``target_payment``.

    The installment falls monotonically as the term grows, so a binary search
    over ``[1, MAX_SEARCH_PERIODS]`` converges in about ten steps.

    Returns
    -------
    (periods, found): Tuple[int, bool]
        ``found`` is False when no term in range is cheap enough; ``periods``
        is then the ceiling itself.
    """
    if rate_per_month == 0:
        periods = math.ceil(principal / target_payment)
        # principal / target may land a hair above an integer
        if periods > 1 and principal / Decimal(periods - 1) <= target_payment:
            periods -= 1
        return periods, True

    low = 1
    high = MAX_SEARCH_PERIODS
    result = high
    found = False
    while low <= high:
        mid = (low + high) // 2
        if calculate_equal_payment(principal, rate_per_month, mid) <= target_payment:
            result = mid
            found = True
            high = mid - 1
        else:
            low = mid + 1
    return result, found


def _term_keeping_principal_portion(params: LoanParameters, remaining_principal: Decimal) -> int:
    # ceil(remaining / (total / n)) without dividing twice
    return math.ceil(remaining_principal * Decimal(params.remaining_periods) / params.total_loan)


def calculate_prepayment(params: LoanParameters) -> CalculationResult:
    """Compute the effect of a one-time prepayment on a loan.

    Parameters
    ----------
    params: LoanParameters
        The validated loan parameters. The engine trusts its caller; run
        ``utils.validate_parameters`` first when the input comes from a user.

    Returns
    -------
    CalculationResult
        Original and new payment, total interest before and after the
        prepayment, the term change and the new schedule.
    """
    rate_per_month = monthly_rate(params.annual_rate)
    method = params.repayment_method
    logger.debug(
        "Calculating prepayment: loan=%s periods=%s rate=%s prepayment=%s method=%s strategy=%s",
        params.total_loan,
        params.remaining_periods,
        params.annual_rate,
        params.prepayment_amount,
        method,
        params.prepayment_strategy,
    )

    original_schedule = generate_schedule(method, params.total_loan, rate_per_month, params.remaining_periods)
    # For equal principal loans this is the first (and highest) payment
    original_payment = original_schedule[0].payment
    original_interest = total_interest(original_schedule)

    remaining_principal = params.total_loan - params.prepayment_amount
    if remaining_principal <= 0:
        logger.debug("Prepayment covers the whole loan")
        return CalculationResult(
            original_monthly_payment=original_payment,
            total_interest_original=original_interest,
            new_monthly_payment=Decimal(0),
            total_interest_new=Decimal(0),
            interest_savings=original_interest,
            period_reduction=params.remaining_periods,
            new_remaining_periods=0,
            schedule=[],
        )

    term_capped = False
    if params.prepayment_strategy == REDUCE_PAYMENT:
        new_periods = params.remaining_periods
        period_reduction = 0
        new_schedule = generate_schedule(method, remaining_principal, rate_per_month, new_periods)
        new_payment = new_schedule[0].payment
    else:
        new_payment = original_payment
        if method == EQUAL_INSTALLMENT:
            new_periods, found = find_minimal_term(remaining_principal, rate_per_month, new_payment)
            term_capped = not found
            if term_capped:
                logger.warning(
                    "No term up to %d periods keeps the payment at %s; using the ceiling",
                    MAX_SEARCH_PERIODS,
                    new_payment,
                )
        else:
            new_periods = _term_keeping_principal_portion(params, remaining_principal)
        period_reduction = params.remaining_periods - new_periods
        new_schedule = generate_schedule(method, remaining_principal, rate_per_month, new_periods)

    new_interest = total_interest(new_schedule)
    result = CalculationResult(
        original_monthly_payment=original_payment,
        total_interest_original=original_interest,
        new_monthly_payment=new_payment,
        total_interest_new=new_interest,
        interest_savings=original_interest - new_interest,
        period_reduction=period_reduction,
        new_remaining_periods=new_periods,
        schedule=new_schedule,
        term_capped=term_capped,
    )
    logger.debug(
        "Prepayment result: new_payment=%s new_periods=%s savings=%s",
        result.new_monthly_payment,
        result.new_remaining_periods,
        result.interest_savings,
    )
    return result


def compare_strategies(params: LoanParameters) -> Dict[str, CalculationResult]:
    """Run the calculation once per prepayment strategy for the same loan."""
    results: Dict[str, CalculationResult] = {}
    for strategy in PREPAYMENT_STRATEGIES:
        results[strategy] = calculate_prepayment(replace(params, prepayment_strategy=strategy))
    return results


def summarize(params: LoanParameters, result: CalculationResult) -> Dict[str, object]:
    """Flatten a result into a dictionary of plain numbers for display and export."""
    if result.total_interest_original > 0:
        savings_ratio = result.interest_savings / result.total_interest_original * 100
    else:
        savings_ratio = Decimal(0)
    return {
        "total_loan": float(params.total_loan),
        "remaining_periods": params.remaining_periods,
        "annual_rate": float(params.annual_rate),
        "prepayment_amount": float(params.prepayment_amount),
        "repayment_method": params.repayment_method,
        "prepayment_strategy": params.prepayment_strategy,
        "original_monthly_payment": float(result.original_monthly_payment),
        "new_monthly_payment": float(result.new_monthly_payment),
        "payment_reduction": float(result.original_monthly_payment - result.new_monthly_payment),
        "total_interest_original": float(result.total_interest_original),
        "total_interest_new": float(result.total_interest_new),
        "interest_savings": float(result.interest_savings),
        "savings_ratio": float(savings_ratio),
        "period_reduction": result.period_reduction,
        "new_remaining_periods": result.new_remaining_periods,
        "term_capped": result.term_capped,
    }
