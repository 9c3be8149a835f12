"""Data transfer objects for loan affordability requests."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from creditkeeper.service.scoring.models import LoanScenario, LoanType

LOAN_TYPES = {t.value for t in LoanType}


@dataclass(frozen=True)
class LoanRequest:
    """Input data for rating a hypothetical loan."""
    loan_amount: float
    loan_type: str
    term_months: int
    apr: float
    monthly_income: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoanRequest":
        return cls(
            loan_amount=data.get("loan_amount", 0),
            loan_type=data.get("loan_type", ""),
            term_months=data.get("term_months", 0),
            apr=data.get("apr", 0),
            monthly_income=data.get("monthly_income"),
        )

    def validate(self) -> List[str]:
        errors = []

        if self.loan_type not in LOAN_TYPES:
            errors.append(f"loan_type must be one of: {', '.join(sorted(LOAN_TYPES))}")

        if self.loan_amount is None or self.loan_amount <= 0:
            errors.append("loan_amount must be positive")

        if self.term_months is None or self.term_months <= 0:
            errors.append("term_months must be positive")

        if self.apr is None or self.apr < 0:
            errors.append("apr cannot be negative")

        if self.monthly_income is not None and self.monthly_income <= 0:
            errors.append("monthly_income must be positive when provided")

        return errors

    def to_loan(self) -> LoanScenario:
        return LoanScenario(
            loan_amount=float(self.loan_amount),
            loan_type=LoanType(self.loan_type),
            term_months=int(self.term_months),
            apr=float(self.apr),
            monthly_income=float(self.monthly_income) if self.monthly_income is not None else None,
        )
