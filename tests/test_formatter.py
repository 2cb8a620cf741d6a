# tests/test_formatter.py

from decimal import Decimal

import pytest

from prepay_calc.data_models import REDUCE_TERM
from prepay_calc.engine import calculate_prepayment, summarize
from prepay_calc.formatter import (
    format_currency,
    format_percent,
    print_comparison,
    print_schedule,
    print_summary,
)


@pytest.mark.parametrize(
    "value, currency, expected",
    [
        (Decimal("1234567.891"), "CNY", "¥1,234,567.89"),
        (Decimal("0"), "CNY", "¥0.00"),
        (-1234.5, "USD", "-$1,234.50"),
        (0.1 + 0.2, "EUR", "€0.30"),
        (1000, "PLN", "1,000.00 zł"),
        (Decimal("5"), "gbp", "£5.00"),
        (Decimal("5"), "XYZ", "¥5.00"),
        (Decimal("0.125"), "CNY", "¥0.13"),
        (Decimal("-0.125"), "USD", "-$0.13"),
        (Decimal("2.675"), "EUR", "€2.68"),
        (Decimal("-0.001"), "CNY", "¥0.00"),
        (Decimal("123456789012345678901234567890.555"), "USD", "$123,456,789,012,345,678,901,234,567,890.56"),
    ],
)
def test_format_currency(value, currency, expected):
    assert format_currency(value, currency) == expected


def test_format_currency_defaults_to_yuan():
    assert format_currency(Decimal("2990.1")) == "¥2,990.10"


def test_format_percent():
    assert format_percent(12.345678) == "12.35%"
    assert format_percent(Decimal("0")) == "0.00%"
    assert format_percent(100) == "100.00%"


def test_print_summary_for_reduce_term(capsys, loan_params):
    params = loan_params(prepayment_strategy=REDUCE_TERM)
    summary = summarize(params, calculate_prepayment(params))
    print_summary(summary)
    out = capsys.readouterr().out
    assert "Reduce term" in out
    assert "Term reduction" in out
    assert f"240 -> {summary['new_remaining_periods']}" in out


def test_print_summary_for_discharged_loan(capsys, loan_params):
    params = loan_params(prepayment_amount=Decimal("500000"))
    print_summary(summarize(params, calculate_prepayment(params)), "USD")
    out = capsys.readouterr().out
    assert "The prepayment covers the whole loan." in out
    assert "$0.00" in out


def test_print_schedule_rows(capsys, loan_params):
    result = calculate_prepayment(loan_params())
    print_schedule(result.schedule[:3])
    lines = capsys.readouterr().out.strip().splitlines()
    assert lines[0].split("\t") == ["Period", "Payment", "Principal", "Interest", "Balance"]
    assert len(lines) == 4
    assert lines[1].startswith("1\t¥")


def test_print_comparison(capsys, loan_params):
    first = loan_params()
    second = loan_params(prepayment_strategy=REDUCE_TERM)
    print_comparison(
        summarize(first, calculate_prepayment(first)),
        summarize(second, calculate_prepayment(second)),
    )
    out = capsys.readouterr().out
    assert "Reduce payment" in out and "Reduce term" in out
    assert "new_remaining_periods" in out
