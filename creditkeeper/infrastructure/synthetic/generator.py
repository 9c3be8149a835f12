"""
Synthetic financial profile generator.

Builds deterministic demo profiles for four archetypes. Every date is laid
out relative to an ``as_of`` date and every random draw comes from a seeded
``random.Random``, so the same (archetype, seed, as_of) always yields the
same snapshot.
"""

import math
import random
from dataclasses import dataclass
from datetime import date
from typing import Dict, FrozenSet, List, Optional, Tuple

from creditkeeper.domain.entities import (
    BillingCycle,
    CreditAccount,
    Deposit,
    DepositType,
    FinancialSnapshot,
    IncomeSource,
    Payment,
    PaymentSource,
    Transaction,
)
from creditkeeper.service.scoring.settings import ScoringSettings, scoring_settings
from creditkeeper.utils.date_utils import add_days, add_months

PAYCHECK_AMOUNT = 2000.0
PAYCHECK_INTERVAL_DAYS = 14
DUE_DAYS_AFTER_STATEMENT = 21

MERCHANTS: Dict[str, List[str]] = {
    "Groceries": ["Whole Foods", "Trader Joes", "Safeway", "Local Market"],
    "Dining": ["Italian Bistro", "Sushi Restaurant", "Coffee Shop", "Pizza Place"],
    "Transportation": ["Shell", "Chevron", "Uber", "Metro Transit"],
    "Shopping": ["Amazon", "Target", "Best Buy", "Local Store"],
    "Entertainment": ["Netflix", "Movie Theater", "Concert Venue", "Gym"],
    "Utilities": ["Electric Company", "Water Utility", "Internet Provider"],
}


@dataclass(frozen=True)
class Archetype:
    """
    Recipe for one kind of demo profile.

    Cycle balances are drawn from [balance_floor, balance_floor + balance_spread)
    except for the most recent cycle, which carries the current balance.
    Payments are the full statement balance or the minimum due, made
    ``days_early`` before the due date, or ``days_late`` after it for late
    cycles (paying ``late_payment_share`` of the usual amount).
    """
    key: str
    name: str
    nickname: str
    credit_limit: float
    balance: float
    apr: float
    open_months: int
    checking_balance: float
    num_cycles: int
    balance_floor: int
    balance_spread: int
    pays_in_full: bool
    days_early: int
    days_late: int = 0
    late_payment_share: float = 1.0
    missed_cycles: FrozenSet[int] = frozenset()
    late_cycles: FrozenSet[int] = frozenset()


ARCHETYPES: Dict[str, Archetype] = {
    "excellent": Archetype(
        key="excellent",
        name="Smart Bernard",
        nickname="Venture X",
        credit_limit=15000.0,
        balance=300.0,
        apr=14.99,
        open_months=60,
        checking_balance=12000.0,
        num_cycles=12,
        balance_floor=200,
        balance_spread=500,
        pays_in_full=True,
        days_early=10,
    ),
    "healthy": Archetype(
        key="healthy",
        name="Healthy Alex",
        nickname="Quicksilver",
        credit_limit=5000.0,
        balance=1350.0,
        apr=18.99,
        open_months=18,
        checking_balance=4500.0,
        num_cycles=12,
        balance_floor=500,
        balance_spread=1000,
        pays_in_full=True,
        days_early=5,
        days_late=5,
        late_cycles=frozenset({6}),
    ),
    "risky": Archetype(
        key="risky",
        name="Risky Jordan",
        nickname="Platinum",
        credit_limit=3000.0,
        balance=1950.0,
        apr=24.99,
        open_months=8,
        checking_balance=1200.0,
        num_cycles=8,
        balance_floor=1200,
        balance_spread=2000,
        pays_in_full=False,
        days_early=3,
        days_late=8,
        missed_cycles=frozenset({4}),
        late_cycles=frozenset({2}),
    ),
    "poor": Archetype(
        key="poor",
        name="Dangerous David",
        nickname="Secured",
        credit_limit=1500.0,
        balance=1485.0,
        apr=29.99,
        open_months=5,
        checking_balance=150.0,
        num_cycles=5,
        balance_floor=1300,
        balance_spread=200,
        pays_in_full=False,
        days_early=1,
        days_late=15,
        late_payment_share=0.7,
        missed_cycles=frozenset({1, 3}),
        late_cycles=frozenset({2}),
    ),
}


class SyntheticProfileGenerator:
    """Seeded builder of demo FinancialSnapshots."""

    def __init__(
        self,
        seed: int = 0,
        as_of: Optional[date] = None,
        settings: ScoringSettings = scoring_settings,
    ):
        self._seed = seed
        self._rng = random.Random(seed)
        self._as_of = as_of or date.today()
        self._settings = settings

    @property
    def as_of(self) -> date:
        return self._as_of

    def generate(self, archetype: str) -> FinancialSnapshot:
        """
        Build a snapshot for the named archetype.

        Raises:
            KeyError: If the archetype is unknown
        """
        recipe = ARCHETYPES[archetype]
        profile_id = f"profile-{recipe.key}-{self._seed}"

        account = CreditAccount(
            id=f"{profile_id}-card",
            balance=recipe.balance,
            credit_limit=recipe.credit_limit,
            apr=recipe.apr,
            open_date=add_months(self._as_of, -recipe.open_months),
            nickname=recipe.nickname,
        )

        billing_cycles, payments = self._billing_history(profile_id, recipe)

        return FinancialSnapshot(
            id=profile_id,
            name=recipe.name,
            archetype=recipe.key,
            credit_account=account,
            billing_cycles=billing_cycles,
            payments=payments,
            income_source=self._income_source(profile_id, recipe),
            transactions=self._transactions(profile_id, billing_cycles),
        )

    def _income_source(self, profile_id: str, recipe: Archetype) -> IncomeSource:
        deposits = []
        current = add_months(self._as_of, -recipe.open_months)

        while current <= self._as_of:
            deposits.append(
                Deposit(
                    id=f"{profile_id}-deposit-{len(deposits)}",
                    amount=PAYCHECK_AMOUNT,
                    date=current,
                    type=DepositType.PAYCHECK,
                    description="Paycheck Direct Deposit",
                )
            )
            current = add_days(current, PAYCHECK_INTERVAL_DAYS)

        return IncomeSource(
            id=f"{profile_id}-checking",
            balance=recipe.checking_balance,
            deposits=deposits,
        )

    def _billing_history(
        self,
        profile_id: str,
        recipe: Archetype,
    ) -> Tuple[List[BillingCycle], List[Payment]]:
        cycles: List[BillingCycle] = []
        payments: List[Payment] = []
        last_index = recipe.num_cycles - 1
        statement_start = add_months(self._as_of, -recipe.num_cycles)

        for i in range(recipe.num_cycles):
            statement_end = add_months(statement_start, 1)
            due_date = add_days(statement_end, DUE_DAYS_AFTER_STATEMENT)

            if i == last_index:
                balance = recipe.balance
            else:
                balance = float(recipe.balance_floor + self._rng.randrange(recipe.balance_spread))
            minimum_due = math.floor(balance * self._settings.minimum_due_rate)
            cycle_id = f"{profile_id}-cycle-{i}"

            amount = balance if recipe.pays_in_full else float(minimum_due)
            is_paid = i < last_index and i not in recipe.missed_cycles
            paid_on_time = i not in recipe.missed_cycles and i not in recipe.late_cycles

            if i in recipe.late_cycles:
                amount *= recipe.late_payment_share
                payment_date = add_days(due_date, recipe.days_late)
            else:
                payment_date = add_days(due_date, -recipe.days_early)

            # The open statement carries the intended amount but is not paid yet
            carries_amount = is_paid or (i == last_index and recipe.pays_in_full)

            cycles.append(
                BillingCycle(
                    id=cycle_id,
                    statement_start=statement_start,
                    statement_end=statement_end,
                    due_date=due_date,
                    statement_balance=balance,
                    minimum_due=minimum_due,
                    paid_amount=amount if carries_amount else 0.0,
                    paid_on_time=paid_on_time,
                    is_paid=is_paid,
                )
            )

            if is_paid:
                payments.append(
                    Payment(
                        id=f"{profile_id}-payment-{i}",
                        amount=amount,
                        date=payment_date,
                        billing_cycle_id=cycle_id,
                        source=PaymentSource.CHECKING,
                    )
                )

            statement_start = statement_end

        return cycles, payments

    def _transactions(self, profile_id: str, cycles: List[BillingCycle]) -> List[Transaction]:
        transactions: List[Transaction] = []
        categories = list(MERCHANTS)

        for cycle in cycles:
            count = self._rng.randint(5, 12)
            day_range = max(1, (cycle.statement_end - cycle.statement_start).days)
            total = 0.0

            for _ in range(count):
                if total >= cycle.statement_balance:
                    break
                category = self._rng.choice(categories)
                merchant = self._rng.choice(MERCHANTS[category])
                max_amount = min(300.0, cycle.statement_balance - total)
                amount = float(math.floor(self._rng.random() * max_amount) + 10)

                transactions.append(
                    Transaction(
                        id=f"{profile_id}-txn-{len(transactions)}",
                        description=f"{merchant} Purchase",
                        amount=amount,
                        date=add_days(cycle.statement_start, self._rng.randrange(day_range)),
                        merchant=merchant,
                        category=category,
                    )
                )
                total += amount

        transactions.sort(key=lambda t: t.date, reverse=True)
        return transactions


def generate_profile(
    archetype: str,
    seed: int = 0,
    as_of: Optional[date] = None,
    settings: ScoringSettings = scoring_settings,
) -> FinancialSnapshot:
    """
    Build one synthetic snapshot.

    Args:
        archetype: One of excellent, healthy, risky, poor
        seed: Seed for the random draws
        as_of: Date the history ends at (defaults to today)
        settings: Scoring settings (minimum due rate)

    Returns:
        A deterministic FinancialSnapshot for the archetype
    """
    return SyntheticProfileGenerator(seed=seed, as_of=as_of, settings=settings).generate(archetype)
