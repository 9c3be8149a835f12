"""
Data models for the scoring core.

These models represent the outputs of the score engine, the loan
affordability classifier and the what-if projector. They are plain
dataclasses so the surrounding layers can serialize them with ``to_dict``.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional


class FactorStatus(str, Enum):
    """Qualitative status of a single scoring factor."""
    GOOD = "good"
    WARNING = "warning"
    BAD = "bad"


class HealthLevel(str, Enum):
    """Coarse bucket derived from the numeric score."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ScoringModel(str, Enum):
    """Named scoring strategies."""
    WEIGHTED = "weighted"  # Four-factor toy score
    LEGACY = "legacy"      # Flat utilization-tier model


class LoanType(str, Enum):
    AUTO = "auto"
    STUDENT = "student"
    PERSONAL = "personal"
    LINE_OF_CREDIT = "line_of_credit"


class LoanReasonableness(str, Enum):
    """Overall loan verdict, ordered from best to worst."""
    REASONABLE = "reasonable"
    STRETCH = "stretch"
    UNREASONABLE = "unreasonable"

    @property
    def severity(self) -> int:
        return list(LoanReasonableness).index(self)


class DtiImpact(str, Enum):
    HEALTHY = "healthy"
    MODERATE = "moderate"
    HIGH = "high"


class AprAssessment(str, Enum):
    HEALTHY = "healthy"
    EXPENSIVE = "expensive"
    HIGH_RISK = "high-risk"


class LoanToIncomeImpact(str, Enum):
    NORMAL = "normal"
    AGGRESSIVE = "aggressive"
    HIGH_RISK = "high-risk"


class IncomeBasis(str, Enum):
    """Where the monthly income used for a loan rating came from."""
    STATED = "stated"      # Supplied by the caller
    OBSERVED = "observed"  # Trailing paycheck deposits
    ASSUMED = "assumed"    # Configured default


@dataclass
class FactorScore:
    """
    One factor of the score with its diagnostics.

    Attributes:
        name: Display name (e.g. "Payment History")
        score: Sub-score from 0-100
        weight: Share of the weighted sum (weights sum to 1.0)
        status: good / warning / bad
        explanation: Human-readable explanation
        value: Optional literal value (utilization %, DTI %, months)
        details: Optional machine-readable detail string
    """
    name: str
    score: int
    weight: float
    status: FactorStatus
    explanation: str
    value: Optional[float] = None
    details: Optional[str] = None

    @property
    def weighted_score(self) -> float:
        return self.score * self.weight

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "score": self.score,
            "value": round(self.value, 2) if self.value is not None else None,
            "weight": self.weight,
            "status": self.status.value,
            "explanation": self.explanation,
            "details": self.details,
        }


@dataclass
class TopDrivers:
    """Up to two positive and two negative factor names."""
    positive: List[str] = field(default_factory=list)
    negative: List[str] = field(default_factory=list)


@dataclass
class ScoreResult:
    """
    The output of a scoring model.

    Attributes:
        final_score: Score clamped to 300-850
        health_level: high / medium / low
        payment_history: Payment history factor
        utilization: Credit utilization factor
        debt_to_income: Debt-to-income proxy factor. The legacy model puts its
            credit-limit factor in this slot; to_dict reports it as "credit_limit".
        history_length: Account age factor
        top_drivers: Strongest positive and negative factors
        model: Which scoring strategy produced this result
        as_of: Date the snapshot was evaluated at
    """
    final_score: int
    health_level: HealthLevel
    payment_history: FactorScore
    utilization: FactorScore
    debt_to_income: FactorScore
    history_length: FactorScore
    top_drivers: TopDrivers
    model: ScoringModel = ScoringModel.WEIGHTED
    as_of: Optional[date] = None

    @property
    def factors(self) -> List[FactorScore]:
        """The four factors in canonical order."""
        return [
            self.payment_history,
            self.utilization,
            self.debt_to_income,
            self.history_length,
        ]

    def to_dict(self) -> dict:
        """Convert to API response format."""
        third_key = "credit_limit" if self.model == ScoringModel.LEGACY else "debt_to_income"
        return {
            "final_score": self.final_score,
            "health_level": self.health_level.value,
            "factors": {
                "payment_history": self.payment_history.to_dict(),
                "utilization": self.utilization.to_dict(),
                third_key: self.debt_to_income.to_dict(),
                "history_length": self.history_length.to_dict(),
            },
            "top_drivers": {
                "positive": list(self.top_drivers.positive),
                "negative": list(self.top_drivers.negative),
            },
            "model": self.model.value,
            "as_of": self.as_of.isoformat() if self.as_of else None,
        }


@dataclass(frozen=True)
class LoanScenario:
    """
    Terms of a hypothetical new loan.

    Attributes:
        loan_amount: Principal (> 0)
        loan_type: auto / student / personal / line_of_credit
        term_months: Term in months (> 0)
        apr: Annual percentage rate in percent (>= 0)
        monthly_income: Optional stated monthly income
    """
    loan_amount: float
    loan_type: LoanType
    term_months: int
    apr: float
    monthly_income: Optional[float] = None

    def validate(self) -> List[str]:
        errors = []

        if self.loan_amount <= 0:
            errors.append("loan_amount must be positive")

        if self.term_months <= 0:
            errors.append("term_months must be positive")

        if self.apr < 0:
            errors.append("apr cannot be negative")

        if self.monthly_income is not None and self.monthly_income <= 0:
            errors.append("monthly_income must be positive when provided")

        return errors

    def to_dict(self) -> dict:
        return {
            "loan_amount": self.loan_amount,
            "loan_type": self.loan_type.value,
            "term_months": self.term_months,
            "apr": self.apr,
            "monthly_income": self.monthly_income,
        }


@dataclass
class LoanRating:
    """
    Loan reasonableness verdict with its supporting numbers.

    Attributes:
        rating: reasonable / stretch / unreasonable
        monthly_payment: Amortized payment, rounded to the cent
        new_dti: Resulting debt-to-income in percent (1 decimal)
        dti_impact: healthy / moderate / high
        apr_assessment: healthy / expensive / high-risk
        loan_to_income_impact: normal / aggressive / high-risk
        loan_to_income_ratio: Principal over annual income in percent (1 decimal)
        reasons: One sentence per dimension
        suggestions: Actionable suggestions
        income_assumed: True when the income was the configured default
    """
    rating: LoanReasonableness
    monthly_payment: float
    new_dti: float
    dti_impact: DtiImpact
    apr_assessment: AprAssessment
    loan_to_income_impact: LoanToIncomeImpact
    loan_to_income_ratio: float
    reasons: List[str]
    suggestions: List[str]
    income_assumed: bool = False

    def to_dict(self) -> dict:
        return {
            "rating": self.rating.value,
            "monthly_payment": self.monthly_payment,
            "new_dti": self.new_dti,
            "dti_impact": self.dti_impact.value,
            "apr_assessment": self.apr_assessment.value,
            "loan_to_income_impact": self.loan_to_income_impact.value,
            "loan_to_income_ratio": self.loan_to_income_ratio,
            "reasons": list(self.reasons),
            "suggestions": list(self.suggestions),
            "income_assumed": self.income_assumed,
        }


@dataclass(frozen=True)
class RecoveryTimeline:
    """Projected score at fixed offsets assuming continued good behavior."""
    days_30: int
    days_90: int
    days_180: int

    def to_dict(self) -> dict:
        return {
            "days_30": self.days_30,
            "days_90": self.days_90,
            "days_180": self.days_180,
        }


@dataclass(frozen=True)
class PrimaryFactorChange:
    """The factor whose weighted sub-score moved the most."""
    factor_name: str
    score_delta: int
    explanation: str


@dataclass
class ProjectionResult:
    """
    The outcome of a what-if simulation.

    Attributes:
        current_score: Score of the original snapshot
        projected_score: Score after the scenario is applied
        score_delta: projected_score - current_score
        factor_affected: Name of the most affected factor
        explanation: Scenario-specific explanation
        corrective_action: Optional suggested follow-up
        recovery_timeline: Optional 30/90/180-day recovery estimates
        loan_rating: LoanRating for new_loan scenarios
        primary_factor_change: Detail of the most affected factor
        current: Full current ScoreResult (None for the legacy model)
        projected: Full projected ScoreResult (None for the legacy model)
        income_basis: Source of the income used for a loan rating
    """
    current_score: int
    projected_score: int
    score_delta: int
    factor_affected: str
    explanation: str
    corrective_action: Optional[str] = None
    recovery_timeline: Optional[RecoveryTimeline] = None
    loan_rating: Optional[LoanRating] = None
    primary_factor_change: Optional[PrimaryFactorChange] = None
    current: Optional[ScoreResult] = None
    projected: Optional[ScoreResult] = None
    income_basis: Optional[IncomeBasis] = None

    def to_dict(self) -> dict:
        """Convert to API response format."""
        result = {
            "current_score": self.current_score,
            "projected_score": self.projected_score,
            "score_delta": self.score_delta,
            "factor_affected": self.factor_affected,
            "explanation": self.explanation,
            "corrective_action": self.corrective_action,
            "recovery_timeline": (
                self.recovery_timeline.to_dict() if self.recovery_timeline else None
            ),
            "loan_rating": self.loan_rating.to_dict() if self.loan_rating else None,
            "income_basis": self.income_basis.value if self.income_basis else None,
        }
        if self.primary_factor_change is not None:
            result["primary_factor_change"] = {
                "factor_name": self.primary_factor_change.factor_name,
                "score_delta": self.primary_factor_change.score_delta,
                "explanation": self.primary_factor_change.explanation,
            }
        if self.current is not None and self.projected is not None:
            result["factor_breakdown"] = {
                "current": self.current.to_dict(),
                "projected": self.projected.to_dict(),
            }
        return result
