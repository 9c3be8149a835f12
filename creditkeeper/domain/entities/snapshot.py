"""Financial snapshot entities consumed by the score engine."""

import copy
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import List, Optional


class DepositType(str, Enum):
    """Kind of checking-account deposit."""

    PAYCHECK = "paycheck"
    OTHER = "other"


class PaymentSource(str, Enum):
    """Where a card payment was funded from."""

    CHECKING = "checking"
    EXTERNAL = "external"


@dataclass
class CreditAccount:
    """
    The revolving credit card account being scored.

    Attributes:
        id: Account identifier
        balance: Current outstanding balance (>= 0)
        credit_limit: Credit limit; None or 0 means no limit was reported
        apr: Annual percentage rate of the card
        open_date: Date the account was opened
        status: Account status (only "active" accounts are modelled)
        nickname: Display name
    """

    id: str
    balance: float
    open_date: date
    credit_limit: Optional[float] = None
    apr: float = 0.0
    status: str = "active"
    nickname: str = ""

    @property
    def has_limit(self) -> bool:
        """Check whether a usable (positive) credit limit is reported."""
        return bool(self.credit_limit) and self.credit_limit > 0


@dataclass
class BillingCycle:
    """
    One statement period with its due date, balance and payment outcome.

    The statement window is [statement_start, statement_end).
    """

    id: str
    statement_start: date
    statement_end: date
    due_date: date
    statement_balance: float
    minimum_due: float
    paid_amount: float = 0.0
    paid_on_time: bool = False
    is_paid: bool = False

    def is_past_due(self, as_of: date) -> bool:
        """Check if the due date has passed as of the given date."""
        return self.due_date < as_of

    def is_missed(self, as_of: date) -> bool:
        """Unpaid after the due date has passed."""
        return not self.is_paid and self.is_past_due(as_of)

    def is_late(self) -> bool:
        """Paid, but not on time."""
        return self.is_paid and not self.paid_on_time


@dataclass
class Payment:
    """A payment made toward a billing cycle."""

    id: str
    amount: float
    date: date
    billing_cycle_id: str
    source: PaymentSource = PaymentSource.CHECKING


@dataclass
class Deposit:
    """A dated deposit into the checking account."""

    id: str
    amount: float
    date: date
    type: DepositType = DepositType.OTHER
    description: str = ""

    @property
    def is_paycheck(self) -> bool:
        return self.type == DepositType.PAYCHECK


@dataclass
class IncomeSource:
    """Checking account used as the income signal."""

    id: str
    balance: float = 0.0
    deposits: List[Deposit] = field(default_factory=list)


@dataclass
class Transaction:
    """A card purchase."""

    id: str
    description: str
    amount: float
    date: date
    merchant: Optional[str] = None
    category: Optional[str] = None


@dataclass
class FinancialSnapshot:
    """
    Everything the score engine needs to know about one profile.

    A snapshot is read-only input to scoring. The what-if projector works on
    ``clone()`` so the caller's snapshot is never observed half-mutated.
    """

    id: str
    credit_account: CreditAccount
    billing_cycles: List[BillingCycle] = field(default_factory=list)
    payments: List[Payment] = field(default_factory=list)
    income_source: Optional[IncomeSource] = None
    transactions: List[Transaction] = field(default_factory=list)
    name: str = ""
    archetype: str = ""

    @property
    def last_cycle(self) -> Optional[BillingCycle]:
        """Most recent billing cycle, if any."""
        return self.billing_cycles[-1] if self.billing_cycles else None

    def clone(self) -> "FinancialSnapshot":
        """Structural deep copy with value semantics."""
        return copy.deepcopy(self)

    def monthly_paycheck_income(self, as_of: date, window_days: int = 30) -> float:
        """Sum of paycheck deposits in the trailing window ending at as_of."""
        if self.income_source is None:
            return 0.0
        window_start = as_of - timedelta(days=window_days)
        return sum(
            d.amount
            for d in self.income_source.deposits
            if d.is_paycheck and window_start <= d.date <= as_of
        )
