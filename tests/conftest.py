# tests/conftest.py
from __future__ import annotations

from decimal import Decimal

import pytest

from prepay_calc.data_models import EQUAL_INSTALLMENT, REDUCE_PAYMENT, LoanParameters


def make_params(**overrides) -> LoanParameters:
    """Canonical 500k / 240 months / 3.85% loan with a 100k prepayment."""
    values = dict(
        total_loan=Decimal("500000"),
        remaining_periods=240,
        annual_rate=Decimal("3.85"),
        prepayment_amount=Decimal("100000"),
        repayment_method=EQUAL_INSTALLMENT,
        prepayment_strategy=REDUCE_PAYMENT,
    )
    values.update(overrides)
    return LoanParameters(**values)


@pytest.fixture
def loan_params():
    """Factory for loan parameters; keyword overrides replace the defaults."""
    return make_params


@pytest.fixture
def loan_options():
    """CLI arguments matching ``make_params()``."""
    return ["-l", "500k", "-n", "240", "-r", "3.85", "-p", "100k"]
