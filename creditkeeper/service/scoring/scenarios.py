"""
What-if scenario definitions.

Each scenario kind is its own frozen dataclass carrying only the fields it
needs. ``ScenarioSpec`` is the union the projector dispatches on.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Dict, Type, Union

from creditkeeper.domain.exceptions import (
    InvalidLoanRequestException,
    InvalidScenarioException,
    InvalidScenarioRequestException,
)

from .models import LoanScenario


class ScenarioType(str, Enum):
    PURCHASE = "purchase"
    MISSED_PAYMENT = "missed_payment"
    PAY_DOWN = "pay_down"
    REPLAY_TRANSACTION = "replay_transaction"
    NEW_LOAN = "new_loan"


@dataclass(frozen=True)
class Purchase:
    """A new card purchase of ``amount``."""

    type: ClassVar[ScenarioType] = ScenarioType.PURCHASE

    amount: float
    merchant: str = "Projected Merchant"
    category: str = "Shopping"


@dataclass(frozen=True)
class MissedPayment:
    """The most recent statement goes unpaid."""

    type: ClassVar[ScenarioType] = ScenarioType.MISSED_PAYMENT


@dataclass(frozen=True)
class PayDown:
    """An extra payment of ``amount`` toward the card balance."""

    type: ClassVar[ScenarioType] = ScenarioType.PAY_DOWN

    amount: float


@dataclass(frozen=True)
class ReplayTransaction:
    """Re-apply an existing transaction as if it happened again."""

    type: ClassVar[ScenarioType] = ScenarioType.REPLAY_TRANSACTION

    amount: float
    transaction_id: str = ""


@dataclass(frozen=True)
class NewLoan:
    """Take out a new loan with the given terms."""

    type: ClassVar[ScenarioType] = ScenarioType.NEW_LOAN

    loan: LoanScenario


ScenarioSpec = Union[Purchase, MissedPayment, PayDown, ReplayTransaction, NewLoan]

SCENARIO_CLASSES: Dict[ScenarioType, Type] = {
    ScenarioType.PURCHASE: Purchase,
    ScenarioType.MISSED_PAYMENT: MissedPayment,
    ScenarioType.PAY_DOWN: PayDown,
    ScenarioType.REPLAY_TRANSACTION: ReplayTransaction,
    ScenarioType.NEW_LOAN: NewLoan,
}


def validate_scenario(scenario: ScenarioSpec) -> None:
    """
    Reject unknown scenario kinds and out-of-range scenario inputs.

    Amounts must be positive and new-loan terms must pass
    ``LoanScenario.validate()``. Runs before any scenario is applied.

    Raises:
        InvalidScenarioException: If the scenario kind is not recognized
        InvalidScenarioRequestException: If a scenario amount is not positive
        InvalidLoanRequestException: If new-loan terms are invalid
    """
    if type(scenario) not in SCENARIO_CLASSES.values():
        scenario_type = getattr(scenario, "type", type(scenario).__name__)
        raise InvalidScenarioException(str(getattr(scenario_type, "value", scenario_type)))

    if isinstance(scenario, (Purchase, PayDown, ReplayTransaction)):
        if not scenario.amount > 0:
            raise InvalidScenarioRequestException(
                f"amount must be positive for {scenario.type.value}"
            )
    elif isinstance(scenario, NewLoan):
        errors = scenario.loan.validate()
        if errors:
            raise InvalidLoanRequestException("; ".join(errors))
