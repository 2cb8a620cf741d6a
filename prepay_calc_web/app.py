import os

from flask import Flask, render_template, request

from prepay_calc.data_models import (
    EQUAL_INSTALLMENT,
    REDUCE_PAYMENT,
    REDUCE_TERM,
    LoanParameters,
)
from prepay_calc.engine import calculate_prepayment, summarize
from prepay_calc.formatter import (
    CURRENCY_OPTIONS,
    DEFAULT_CURRENCY,
    METHOD_LABELS,
    STRATEGY_LABELS,
    format_currency,
    format_percent,
)
from prepay_calc.utils import parse_amount, parse_rate, validate_parameters

app = Flask(__name__)
app.secret_key = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
app.config["DEFAULT_CURRENCY"] = os.environ.get("PREPAY_CALC_CURRENCY", DEFAULT_CURRENCY).upper()
app.config["MAX_ROWS"] = int(os.environ.get("PREPAY_CALC_MAX_ROWS", "120"))

app.jinja_env.filters["currency"] = format_currency
app.jinja_env.filters["percent"] = format_percent


def _normalized_currency(form) -> str:
    default = app.config["DEFAULT_CURRENCY"]
    if default not in CURRENCY_OPTIONS:
        default = DEFAULT_CURRENCY
    code = form.get("currency", default).upper()
    return code if code in CURRENCY_OPTIONS else default


def _parse_periods(value: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        raise ValueError(f"Invalid number of periods: {value}")


def _form_to_params(form) -> LoanParameters:
    params = LoanParameters(
        total_loan=parse_amount(form.get("total_loan", "")),
        remaining_periods=_parse_periods(form.get("remaining_periods", "")),
        annual_rate=parse_rate(form.get("annual_rate", "")),
        prepayment_amount=parse_amount(form.get("prepayment_amount", "").strip() or "0"),
        repayment_method=form.get("repayment_method", EQUAL_INSTALLMENT),
        prepayment_strategy=form.get("prepayment_strategy", REDUCE_PAYMENT),
    )
    return validate_parameters(params)


def _schedule_for_view(schedule: list, show_full_schedule: bool):
    max_rows = app.config["MAX_ROWS"]
    if show_full_schedule or len(schedule) <= max_rows:
        return schedule, 0
    return schedule[:max_rows], len(schedule) - max_rows


@app.route("/", methods=["GET", "POST"])
def index():
    summary = None
    schedule = None
    truncated = 0
    error = None
    form = request.form if request.method == "POST" else {}
    currency_code = _normalized_currency(form)
    show_full_schedule = form.get("show_full_schedule") == "1"

    if request.method == "POST":
        try:
            params = _form_to_params(form)
            result = calculate_prepayment(params)
            summary = summarize(params, result)
            schedule, truncated = _schedule_for_view(result.schedule, show_full_schedule)
        except ValueError as exc:
            error = str(exc)
        except ArithmeticError as exc:
            error = f"Loan figures are too large to calculate: {exc.__class__.__name__}"

    return render_template(
        "index.html",
        form=form,
        summary=summary,
        schedule=schedule,
        truncated=truncated,
        show_full_schedule=show_full_schedule,
        error=error,
        currency_code=currency_code,
        currency_options=CURRENCY_OPTIONS,
        method_labels=METHOD_LABELS,
        strategy_labels=STRATEGY_LABELS,
        reduce_term=REDUCE_TERM,
    )


if __name__ == "__main__":
    print("Starting Prepayment Calculator web app...")
    app.run(host="0.0.0.0", port=8710, debug=True)
