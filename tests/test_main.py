# tests/test_main.py

from __future__ import annotations

import csv
import json
import logging

from click.testing import CliRunner

from prepay_calc.main import cli


def test_summary_command(loan_options):
    result = CliRunner().invoke(cli, ["summary", *loan_options])
    assert result.exit_code == 0, result.output
    assert "Summary" in result.output
    assert "Reduce payment" in result.output
    assert "Remaining periods     : 240" in result.output


def test_schedule_command_truncates_long_schedules(loan_options):
    result = CliRunner().invoke(cli, ["schedule", *loan_options])
    assert result.exit_code == 0, result.output
    assert "Schedule has 240 rows; showing first 120 rows." in result.output
    assert "\n120\t" in result.output
    assert "\n121\t" not in result.output


def test_schedule_command_all_rows(loan_options):
    result = CliRunner().invoke(cli, ["schedule", *loan_options, "--all", "--currency", "usd"])
    assert result.exit_code == 0, result.output
    assert "\n240\t$" in result.output


def test_schedule_reduce_term_equal_principal(loan_options):
    result = CliRunner().invoke(
        cli,
        ["schedule", *loan_options, "--method", "equal_principal", "--strategy", "reduce_term"],
    )
    assert result.exit_code == 0, result.output
    assert "Term reduction        : 48 months (240 -> 192)" in result.output


def test_schedule_export_json(tmp_path, loan_options):
    path = tmp_path / "out.json"
    result = CliRunner().invoke(cli, ["schedule", *loan_options, "--output", str(path)])
    assert result.exit_code == 0, result.output
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["summary"]["new_remaining_periods"] == 240
    assert len(data["schedule"]) == 240
    assert set(data["schedule"][0]) == {"period", "payment", "principal", "interest", "balance"}


def test_schedule_export_csv(tmp_path, loan_options):
    path = tmp_path / "out.csv"
    result = CliRunner().invoke(
        cli, ["schedule", *loan_options, "--strategy", "reduce_term", "--output", str(path)]
    )
    assert result.exit_code == 0, result.output
    with path.open(newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[0] == ["Period", "Payment", "Principal", "Interest", "Balance"]
    assert 1 < len(rows) < 241


def test_schedule_rejects_unknown_export_format(tmp_path, loan_options):
    result = CliRunner().invoke(cli, ["schedule", *loan_options, "--output", str(tmp_path / "out.xlsx")])
    assert result.exit_code != 0
    assert "Unsupported output format" in result.output


def test_summary_export_requires_json(tmp_path, loan_options):
    path = tmp_path / "summary.json"
    result = CliRunner().invoke(cli, ["summary", *loan_options, "--output", str(path)])
    assert result.exit_code == 0, result.output
    assert "interest_savings" in json.loads(path.read_text(encoding="utf-8"))["summary"]

    result = CliRunner().invoke(cli, ["summary", *loan_options, "--output", str(tmp_path / "s.csv")])
    assert result.exit_code != 0


def test_compare_command(loan_options):
    result = CliRunner().invoke(cli, ["compare", *loan_options])
    assert result.exit_code == 0, result.output
    assert "Comparison (Equal installment)" in result.output
    assert "Reduce payment" in result.output
    assert "Reduce term" in result.output


def test_prepayment_must_be_below_loan():
    result = CliRunner().invoke(cli, ["summary", "-l", "500k", "-n", "240", "-r", "3.85", "-p", "500k"])
    assert result.exit_code == 2
    assert "Prepayment amount must be less than the total loan" in result.output


def test_invalid_amount_is_bad_parameter():
    result = CliRunner().invoke(cli, ["summary", "-l", "lots", "-n", "240", "-r", "3.85"])
    assert result.exit_code == 2
    assert "Invalid amount" in result.output


def test_verbose_flag_enables_debug_logging(loan_options, caplog):
    result = CliRunner().invoke(cli, ["--verbose", "summary", *loan_options])
    assert result.exit_code == 0, result.output
    debug_records = [r for r in caplog.records if r.name == "prepay_calc.engine" and r.levelno == logging.DEBUG]
    assert any("Calculating prepayment" in r.getMessage() for r in debug_records)


def test_debug_logging_is_off_by_default(loan_options, caplog):
    result = CliRunner().invoke(cli, ["summary", *loan_options])
    assert result.exit_code == 0, result.output
    assert not any("Calculating prepayment" in r.getMessage() for r in caplog.records)


def test_periods_above_limit_are_rejected():
    result = CliRunner().invoke(cli, ["summary", "-l", "500k", "-n", "200000", "-r", "3.85"])
    assert result.exit_code == 2
    assert "Remaining periods cannot exceed 1200 months" in result.output


def test_rate_above_limit_is_rejected():
    result = CliRunner().invoke(cli, ["summary", "-l", "500k", "-n", "240", "-r", "1e9999"])
    assert result.exit_code == 2
    assert "Annual rate cannot exceed 100%" in result.output


def test_overflowing_amount_is_a_usage_error():
    result = CliRunner().invoke(cli, ["schedule", "-l", "9e999999", "-n", "240", "-r", "100"])
    assert result.exit_code == 2
    assert "too large to calculate" in result.output
    assert "Traceback" not in result.output
