"""Output helpers for the prepayment calculator.

This module provides the currency and percentage formatters shared by the
command line and web front ends, and simple functions that render results,
amortization schedules and strategy comparisons in a tabular text format.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Dict, Iterable, Union

from .data_models import REDUCE_TERM, ScheduleEntry

Number = Union[Decimal, float, int]

CURRENCY_OPTIONS = {
    'CNY': {'label': 'Chinese yuan', 'prefix': '¥', 'suffix': ''},
    'USD': {'label': 'US dollar', 'prefix': '$', 'suffix': ''},
    'EUR': {'label': 'Euro', 'prefix': '€', 'suffix': ''},
    'GBP': {'label': 'British pound', 'prefix': '£', 'suffix': ''},
    'PLN': {'label': 'Polish złoty', 'prefix': '', 'suffix': ' zł'},
}
DEFAULT_CURRENCY = 'CNY'

METHOD_LABELS = {
    'equal_installment': 'Equal installment',
    'equal_principal': 'Equal principal',
}
STRATEGY_LABELS = {
    'reduce_payment': 'Reduce payment',
    'reduce_term': 'Reduce term',
}


def format_currency(value: Number, currency: str = DEFAULT_CURRENCY) -> str:
    """Format ``value`` with two decimals, comma grouping and a currency sign.

    Halves round away from zero (``0.125`` becomes ``0.13``).

    Unknown currency codes fall back to the default currency.
    """
    meta = CURRENCY_OPTIONS.get(currency.upper(), CURRENCY_OPTIONS[DEFAULT_CURRENCY])
    amount = Decimal(str(value)) if not isinstance(value, Decimal) else value
    if not amount.is_finite():
        return f"{meta['prefix']}{amount}{meta['suffix']}"
    with localcontext() as ctx:
        # quantize needs room for every integer digit plus the cents
        ctx.prec = max(ctx.prec, abs(amount).adjusted() + 3)
        cents = abs(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = '-' if amount < 0 and cents else ''
    return f"{sign}{meta['prefix']}{cents:,.2f}{meta['suffix']}"


def format_percent(value: Number) -> str:
    """Format ``value`` (already in percent) with two decimals and a ``%``."""
    return f"{float(value):.2f}%"


def print_summary(summary: Dict[str, object], currency: str = DEFAULT_CURRENCY) -> None:
    """Print a summary of prepayment metrics in a human-readable format."""
    def money(key: str) -> str:
        return format_currency(summary[key], currency)

    print("Summary")
    print("-" * 72)
    print(f"Total loan            : {money('total_loan')}")
    print(f"Prepayment            : {money('prepayment_amount')}")
    print(f"Annual rate           : {format_percent(summary['annual_rate'])}")
    print(f"Repayment method      : {METHOD_LABELS[summary['repayment_method']]}")
    print(f"Prepayment strategy   : {STRATEGY_LABELS[summary['prepayment_strategy']]}")
    print(f"Original payment      : {money('original_monthly_payment')}")
    print(f"New payment           : {money('new_monthly_payment')}")
    if summary['payment_reduction']:
        print(f"Payment reduction     : {money('payment_reduction')}")
    print(f"Original interest     : {money('total_interest_original')}")
    print(f"New interest          : {money('total_interest_new')}")
    print(f"Interest saved        : {money('interest_savings')} ({format_percent(summary['savings_ratio'])})")
    if summary['prepayment_strategy'] == REDUCE_TERM and summary['period_reduction'] > 0:
        print(
            f"Term reduction        : {summary['period_reduction']} months "
            f"({summary['remaining_periods']} -> {summary['new_remaining_periods']})"
        )
    print(f"Remaining periods     : {summary['new_remaining_periods']}")
    if summary.get('term_capped'):
        print("Warning               : no term within 1000 months keeps the payment; term is capped")
    if summary['new_remaining_periods'] == 0:
        print("The prepayment covers the whole loan.")
    print("-" * 72)


def print_schedule(schedule: Iterable[ScheduleEntry], currency: str = DEFAULT_CURRENCY) -> None:
    """Print the amortization schedule as a simple table."""
    headers = ["Period", "Payment", "Principal", "Interest", "Balance"]
    print("\t".join(headers))
    for entry in schedule:
        row = [
            str(entry.period),
            format_currency(entry.payment, currency),
            format_currency(entry.principal_payment, currency),
            format_currency(entry.interest_payment, currency),
            format_currency(entry.ending_balance, currency),
        ]
        print("\t".join(row))


def print_comparison(
    s1: Dict[str, object], s2: Dict[str, object], currency: str = DEFAULT_CURRENCY
) -> None:
    """Print two strategy summaries for the same loan side by side.

    The difference column is ``s2 - s1``; a negative difference means the
    second strategy is cheaper or shorter.
    """
    label1 = STRATEGY_LABELS[s1['prepayment_strategy']]
    label2 = STRATEGY_LABELS[s2['prepayment_strategy']]
    print(f"Comparison ({METHOD_LABELS[s1['repayment_method']]})")
    print("=" * 72)
    print(f"{'Metric':24s} {label1:>15s} {label2:>15s} {'Difference':>15s}")
    for key in ("new_monthly_payment", "total_interest_new", "interest_savings"):
        v1 = s1[key]
        v2 = s2[key]
        print(
            f"{key:24s} {format_currency(v1, currency):>15s} "
            f"{format_currency(v2, currency):>15s} {format_currency(v2 - v1, currency):>15s}"
        )
    for key in ("new_remaining_periods", "period_reduction"):
        v1 = s1[key]
        v2 = s2[key]
        print(f"{key:24s} {v1:15d} {v2:15d} {v2 - v1:15d}")
    print("=" * 72)
