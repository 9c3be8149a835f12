"""
Scoring core for CreditKeeper: toy score, loan classifier and what-if projector.
"""

from .models import (
    FactorScore,
    FactorStatus,
    HealthLevel,
    IncomeBasis,
    LoanRating,
    LoanReasonableness,
    LoanScenario,
    LoanType,
    ProjectionResult,
    RecoveryTimeline,
    ScoreResult,
    ScoringModel,
)
from .settings import LoanSettings, ScoringSettings, loan_settings, scoring_settings
from .factors import (
    compute_debt_to_income,
    compute_history_length,
    compute_payment_history,
    compute_utilization,
)
from .score_engine import ScoreModel, WeightedScoreModel, compute_score, get_score_model
from .loan import calculate_monthly_payment, calculate_principal_for_payment, rate_loan
from .scenarios import (
    MissedPayment,
    NewLoan,
    PayDown,
    Purchase,
    ReplayTransaction,
    ScenarioSpec,
    ScenarioType,
)
from .projector import simulate
from .legacy import LegacyScoreModel, simulate_legacy

__all__ = [
    # Settings
    "ScoringSettings",
    "LoanSettings",
    "scoring_settings",
    "loan_settings",
    # Models
    "FactorScore",
    "FactorStatus",
    "HealthLevel",
    "IncomeBasis",
    "LoanRating",
    "LoanReasonableness",
    "LoanScenario",
    "LoanType",
    "ProjectionResult",
    "RecoveryTimeline",
    "ScoreResult",
    "ScoringModel",
    # Factors
    "compute_payment_history",
    "compute_utilization",
    "compute_debt_to_income",
    "compute_history_length",
    # Scoring
    "ScoreModel",
    "WeightedScoreModel",
    "LegacyScoreModel",
    "compute_score",
    "get_score_model",
    # Loans
    "calculate_monthly_payment",
    "calculate_principal_for_payment",
    "rate_loan",
    # Scenarios
    "ScenarioType",
    "ScenarioSpec",
    "Purchase",
    "MissedPayment",
    "PayDown",
    "ReplayTransaction",
    "NewLoan",
    "simulate",
    "simulate_legacy",
]
