"""Command-line interface for the prepayment calculator.

This module uses the ``click`` library to implement a multi-command
interface. Users can compute the schedule after a prepayment, view only the
summary or compare both prepayment strategies for the same loan. Results can
be printed to the terminal or exported to JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import click

from .data_models import (
    EQUAL_INSTALLMENT,
    PREPAYMENT_STRATEGIES,
    REDUCE_PAYMENT,
    REDUCE_TERM,
    REPAYMENT_METHODS,
    LoanParameters,
    ScheduleEntry,
)
from .engine import calculate_prepayment, compare_strategies, summarize
from .formatter import (
    CURRENCY_OPTIONS,
    DEFAULT_CURRENCY,
    print_comparison,
    print_schedule,
    print_summary,
)
from .utils import InvalidLoanParameters, parse_amount, parse_rate, validate_parameters

MAX_ROWS = 120


def build_params_from_options(
    loan: str,
    periods: int,
    rate: str,
    prepayment: str,
    method: str,
    strategy: str,
) -> LoanParameters:
    """Parse raw option values into validated ``LoanParameters``."""
    try:
        total_loan = parse_amount(loan)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--loan")
    try:
        prepayment_amount = parse_amount(prepayment)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--prepayment")
    try:
        annual_rate = parse_rate(rate)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--rate")
    params = LoanParameters(
        total_loan=total_loan,
        remaining_periods=periods,
        annual_rate=annual_rate,
        prepayment_amount=prepayment_amount,
        repayment_method=method.lower(),
        prepayment_strategy=strategy.lower(),
    )
    try:
        return validate_parameters(params)
    except InvalidLoanParameters as exc:
        raise click.UsageError(str(exc))


def run_calculation(calculate: Callable, params: LoanParameters):
    """Run ``calculate(params)``, turning Decimal overflow into a usage error."""
    try:
        return calculate(params)
    except ArithmeticError as exc:
        raise click.UsageError(f"Loan figures are too large to calculate: {exc.__class__.__name__}")


def serialize_schedule(schedule: List[ScheduleEntry]) -> List[Dict[str, Any]]:
    """Convert schedule entries into JSON-serialisable dictionaries."""
    return [
        {
            "period": e.period,
            "payment": float(e.payment),
            "principal": float(e.principal_payment),
            "interest": float(e.interest_payment),
            "balance": float(e.ending_balance),
        }
        for e in schedule
    ]


def export_to_json(path: Path, schedule: List[ScheduleEntry], summary: Dict[str, Any]) -> None:
    """Export schedule and summary to a JSON file."""
    data = {"summary": summary, "schedule": serialize_schedule(schedule)}
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, schedule: List[ScheduleEntry]) -> None:
    """Export schedule to a CSV file."""
    header = ["Period", "Payment", "Principal", "Interest", "Balance"]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for e in schedule:
            writer.writerow(
                [
                    e.period,
                    float(e.payment),
                    float(e.principal_payment),
                    float(e.interest_payment),
                    float(e.ending_balance),
                ]
            )


def loan_options(func: Callable) -> Callable:
    """Attach the loan options shared by every command."""
    options = [
        click.option("--loan", "-l", "loan", required=True, help="Outstanding loan amount (e.g. 500000 or 500k)"),
        click.option("--periods", "-n", "periods", required=True, type=int, help="Remaining periods in months"),
        click.option("--rate", "-r", "rate", required=True, help="Annual interest rate (percent)"),
        click.option("--prepayment", "-p", "prepayment", default="0", show_default=True, help="One-time prepayment amount"),
        click.option(
            "--method",
            "method",
            type=click.Choice(REPAYMENT_METHODS, case_sensitive=False),
            default=EQUAL_INSTALLMENT,
            show_default=True,
            help="Repayment method",
        ),
        click.option(
            "--currency",
            "currency",
            type=click.Choice(sorted(CURRENCY_OPTIONS), case_sensitive=False),
            default=DEFAULT_CURRENCY,
            show_default=True,
            help="Currency used for display",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def strategy_option(func: Callable) -> Callable:
    return click.option(
        "--strategy",
        "strategy",
        type=click.Choice(PREPAYMENT_STRATEGIES, case_sensitive=False),
        default=REDUCE_PAYMENT,
        show_default=True,
        help="Prepayment strategy",
    )(func)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """A command-line calculator for one-time loan prepayments."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("prepay_calc").setLevel(logging.DEBUG if verbose else logging.WARNING)


@cli.command()
@loan_options
@strategy_option
@click.option("--all", "show_all", is_flag=True, help="Print every row of the schedule")
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(
    loan: str,
    periods: int,
    rate: str,
    prepayment: str,
    method: str,
    currency: str,
    strategy: str,
    show_all: bool,
    output: Optional[str],
) -> None:
    """Compute and print the schedule after the prepayment."""
    params = build_params_from_options(loan, periods, rate, prepayment, method, strategy)
    result = run_calculation(calculate_prepayment, params)
    summary_data = summarize(params, result)
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, result.schedule, summary_data)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, result.schedule)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv", param_hint="--output")
        click.echo(f"Schedule exported to {path}")
        return

    print_summary(summary_data, currency)
    entries = result.schedule
    if not show_all and len(entries) > MAX_ROWS:
        click.echo(f"Schedule has {len(entries)} rows; showing first {MAX_ROWS} rows.")
        entries = entries[:MAX_ROWS]
    if entries:
        print_schedule(entries, currency)


@cli.command()
@loan_options
@strategy_option
@click.option("--output", "output", type=str, help="Output file path (.json)")
def summary(
    loan: str,
    periods: int,
    rate: str,
    prepayment: str,
    method: str,
    currency: str,
    strategy: str,
    output: Optional[str],
) -> None:
    """Compute and print only the summary metrics."""
    params = build_params_from_options(loan, periods, rate, prepayment, method, strategy)
    summary_data = summarize(params, run_calculation(calculate_prepayment, params))
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension", param_hint="--output")
        with path.open("w", encoding="utf-8") as f:
            json.dump({"summary": summary_data}, f, indent=2)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(summary_data, currency)


@cli.command()
@loan_options
def compare(
    loan: str,
    periods: int,
    rate: str,
    prepayment: str,
    method: str,
    currency: str,
) -> None:
    """Compare reducing the payment with reducing the term for the same loan.

    Example:

        prepay-calc compare -l 500k -n 240 -r 3.85 -p 100k
    """
    params = build_params_from_options(loan, periods, rate, prepayment, method, REDUCE_PAYMENT)
    results = run_calculation(compare_strategies, params)
    summaries = {
        strategy: summarize(replace(params, prepayment_strategy=strategy), result)
        for strategy, result in results.items()
    }
    print_comparison(summaries[REDUCE_PAYMENT], summaries[REDUCE_TERM], currency)


if __name__ == "__main__":
    cli()
