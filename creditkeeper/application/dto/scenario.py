"""Data transfer objects for what-if scenario requests."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from creditkeeper.domain.exceptions import InvalidScenarioException
from creditkeeper.service.scoring.scenarios import (
    MissedPayment,
    NewLoan,
    PayDown,
    Purchase,
    ReplayTransaction,
    ScenarioSpec,
    ScenarioType,
)

from .loan import LoanRequest

AMOUNT_SCENARIOS = (
    ScenarioType.PURCHASE,
    ScenarioType.PAY_DOWN,
    ScenarioType.REPLAY_TRANSACTION,
)


@dataclass(frozen=True)
class ScenarioRequest:
    """
    A what-if request as it arrives from a caller.

    ``type`` is kept as a plain string so an unknown tag can be reported as
    an invalid scenario rather than failing during parsing.
    """
    type: str
    amount: Optional[float] = None
    transaction_id: Optional[str] = None
    loan: Optional[LoanRequest] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScenarioRequest":
        """
        Build a request from a plain mapping.

        ``payment_amount`` is accepted as an alias of ``amount`` for pay_down.
        """
        amount = data.get("amount")
        if amount is None:
            amount = data.get("payment_amount")

        loan_data = data.get("loan")
        return cls(
            type=str(data.get("type", "")),
            amount=amount,
            transaction_id=data.get("transaction_id"),
            loan=LoanRequest.from_dict(loan_data) if loan_data is not None else None,
        )

    @property
    def scenario_type(self) -> Optional[ScenarioType]:
        try:
            return ScenarioType(self.type)
        except ValueError:
            return None

    def validate(self) -> List[str]:
        errors = []
        scenario_type = self.scenario_type

        if scenario_type in AMOUNT_SCENARIOS:
            if self.amount is None:
                errors.append(f"amount is required for {scenario_type.value}")
            elif self.amount <= 0:
                errors.append("amount must be positive")

        if scenario_type == ScenarioType.NEW_LOAN:
            if self.loan is None:
                errors.append("loan is required for new_loan")
            else:
                errors.extend(f"loan.{e}" for e in self.loan.validate())

        return errors

    def to_scenario(self) -> ScenarioSpec:
        """
        Convert to the scoring core's scenario type.

        Raises:
            InvalidScenarioException: If the type is not a known scenario
        """
        scenario_type = self.scenario_type

        if scenario_type == ScenarioType.PURCHASE:
            return Purchase(amount=float(self.amount))
        elif scenario_type == ScenarioType.MISSED_PAYMENT:
            return MissedPayment()
        elif scenario_type == ScenarioType.PAY_DOWN:
            return PayDown(amount=float(self.amount))
        elif scenario_type == ScenarioType.REPLAY_TRANSACTION:
            return ReplayTransaction(
                amount=float(self.amount),
                transaction_id=self.transaction_id or "",
            )
        elif scenario_type == ScenarioType.NEW_LOAN:
            return NewLoan(loan=self.loan.to_loan())

        raise InvalidScenarioException(self.type or "<empty>")
