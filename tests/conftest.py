"""
Shared fixtures for unit and integration tests.

Provides:
- A fixed evaluation date so every score is deterministic
- A snapshot builder with sensible defaults (24% utilization, clean
  payment history, $5,000/month in paychecks, 30-month-old account)
"""

import math
from datetime import date
from typing import Callable, Iterable, Optional

import pytest

from creditkeeper.domain.entities import (
    BillingCycle,
    CreditAccount,
    Deposit,
    DepositType,
    FinancialSnapshot,
    IncomeSource,
)
from creditkeeper.utils.date_utils import add_days, add_months

AS_OF = date(2025, 6, 15)


def build_snapshot(
    balance: float = 1200.0,
    credit_limit: Optional[float] = 5000.0,
    open_months: int = 30,
    num_cycles: int = 12,
    statement_balance: Optional[float] = None,
    missed: Iterable[int] = (),
    late: Iterable[int] = (),
    monthly_income: Optional[float] = 5000.0,
    as_of: date = AS_OF,
) -> FinancialSnapshot:
    """
    Build a snapshot whose billing cycles have all fallen due before as_of.

    Cycle indices in ``missed`` are left unpaid; indices in ``late`` are
    paid after the due date. Income arrives as two paychecks inside the
    trailing 30-day window plus one older paycheck outside it.
    """
    missed = set(missed)
    late = set(late)
    statement_balance = balance if statement_balance is None else statement_balance

    cycles = []
    for i in range(num_cycles):
        statement_end = add_months(as_of, -(num_cycles - i))
        cycles.append(
            BillingCycle(
                id=f"cycle-{i}",
                statement_start=add_months(statement_end, -1),
                statement_end=statement_end,
                due_date=add_days(statement_end, 21),
                statement_balance=statement_balance,
                minimum_due=math.floor(statement_balance * 0.03),
                paid_amount=0.0 if i in missed else statement_balance,
                paid_on_time=i not in missed and i not in late,
                is_paid=i not in missed,
            )
        )

    income_source = None
    if monthly_income is not None:
        half = monthly_income / 2
        income_source = IncomeSource(
            id="checking-1",
            balance=2500.0,
            deposits=[
                Deposit("dep-old", half, add_days(as_of, -45), DepositType.PAYCHECK),
                Deposit("dep-1", half, add_days(as_of, -17), DepositType.PAYCHECK),
                Deposit("dep-2", half, add_days(as_of, -3), DepositType.PAYCHECK),
                Deposit("dep-gift", 300.0, add_days(as_of, -5), DepositType.OTHER),
            ],
        )

    return FinancialSnapshot(
        id="profile-test",
        name="Test Taylor",
        credit_account=CreditAccount(
            id="card-1",
            balance=balance,
            credit_limit=credit_limit,
            apr=19.99,
            open_date=add_months(as_of, -open_months),
        ),
        billing_cycles=cycles,
        income_source=income_source,
    )


@pytest.fixture
def as_of() -> date:
    return AS_OF


@pytest.fixture
def make_snapshot() -> Callable[..., FinancialSnapshot]:
    """Factory fixture for snapshots; see build_snapshot for the knobs."""
    return build_snapshot


@pytest.fixture
def healthy_snapshot() -> FinancialSnapshot:
    """Balance 1200 on a 5000 limit, clean history, scores 828."""
    return build_snapshot()


@pytest.fixture
def high_utilization_snapshot() -> FinancialSnapshot:
    """Balance 1950 on a 3000 limit (65% utilization)."""
    return build_snapshot(balance=1950.0, credit_limit=3000.0)
