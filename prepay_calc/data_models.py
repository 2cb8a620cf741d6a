"""Data models for the prepayment calculator.

This module defines dataclasses representing the entities used by the
calculator: the loan parameters of a single prepayment scenario, individual
schedule entries and the overall calculation result. All of them are plain
value objects that live only for the duration of one calculation.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List

EQUAL_INSTALLMENT = "equal_installment"
EQUAL_PRINCIPAL = "equal_principal"
REPAYMENT_METHODS = (EQUAL_INSTALLMENT, EQUAL_PRINCIPAL)

REDUCE_PAYMENT = "reduce_payment"
REDUCE_TERM = "reduce_term"
PREPAYMENT_STRATEGIES = (REDUCE_PAYMENT, REDUCE_TERM)


@dataclass(frozen=True)
class LoanParameters:
    """Inputs of one prepayment calculation.

    Attributes
    ----------
    total_loan: Decimal
        The outstanding loan amount before the prepayment.
    remaining_periods: int
        Number of monthly payments left on the loan.
    annual_rate: Decimal
        Annual nominal interest rate in percent (``Decimal("3.85")``).
    prepayment_amount: Decimal
        One-time extra payment applied to the principal.
    repayment_method: str
        ``"equal_installment"`` keeps the total payment constant;
        ``"equal_principal"`` keeps the principal portion constant.
    prepayment_strategy: str
        ``"reduce_payment"`` keeps the term and lowers the payment;
        ``"reduce_term"`` keeps the payment and shortens the term.
    """

    total_loan: Decimal
    remaining_periods: int
    annual_rate: Decimal
    prepayment_amount: Decimal
    repayment_method: str = EQUAL_INSTALLMENT
    prepayment_strategy: str = REDUCE_PAYMENT


@dataclass
class ScheduleEntry:
    """An entry in the amortization schedule.

    ``ending_balance`` is clamped to zero, so floating residue in the last
    period never shows up as a negative balance.
    """

    period: int
    payment: Decimal
    principal_payment: Decimal
    interest_payment: Decimal
    ending_balance: Decimal


@dataclass
class CalculationResult:
    """Outcome of a prepayment calculation.

    ``schedule`` is the schedule *after* the prepayment. It is empty when the
    prepayment discharges the whole loan. ``term_capped`` is set when the
    minimal-term search ran into its ceiling and ``new_remaining_periods``
    therefore is a ceiling value rather than a solution.
    """

    original_monthly_payment: Decimal
    total_interest_original: Decimal
    new_monthly_payment: Decimal
    total_interest_new: Decimal
    interest_savings: Decimal
    period_reduction: int
    new_remaining_periods: int
    schedule: List[ScheduleEntry] = field(default_factory=list)
    term_capped: bool = False
