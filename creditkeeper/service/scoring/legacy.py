"""
Legacy flat scoring model.

The pre-toy-score model: a base score picked from three utilization tiers
with flat assumptions for everything else, and a projector that applies
fixed score deltas instead of re-scoring. Its thresholds are deliberately
separate from the weighted model so existing outputs stay reproducible.
"""

import math
from dataclasses import dataclass
from datetime import date
from typing import Optional

from creditkeeper.domain.entities import FinancialSnapshot
from creditkeeper.domain.exceptions import InvalidScenarioException
from creditkeeper.utils.numbers import clamp, round_half_up

from .factors import ACCOUNT_AGE, CREDIT_UTILIZATION, PAYMENT_HISTORY
from .models import (
    FactorScore,
    FactorStatus,
    HealthLevel,
    ProjectionResult,
    RecoveryTimeline,
    ScoreResult,
    ScoringModel,
)
from .scenarios import (
    MissedPayment,
    NewLoan,
    PayDown,
    Purchase,
    ReplayTransaction,
    ScenarioSpec,
    validate_scenario,
)
from .score_engine import ScoreModel, identify_top_drivers

CREDIT_LIMIT = "Credit Limit"

LEGACY_GOOD_UTILIZATION = 30
LEGACY_WARNING_UTILIZATION = 50
LEGACY_HIGH_SCORE = 720
LEGACY_MEDIUM_SCORE = 680
LEGACY_LOW_SCORE = 620
LEGACY_ACCOUNT_AGE_MONTHS = 24
LEGACY_SCORE_MIN = 300
LEGACY_SCORE_MAX = 850

# The legacy projector assumes this limit when none is reported
DEFAULT_LEGACY_CREDIT_LIMIT = 5000.0

MISSED_PAYMENT_DELTA = -110
LARGE_PURCHASE_LIMIT_SHARE = 0.2
LARGE_PURCHASE_DELTA = -25
HIGH_UTILIZATION_DELTA = -35
SIGNIFICANT_PAY_DOWN_SHARE = 0.15


def _legacy_utilization(snapshot: FinancialSnapshot) -> float:
    account = snapshot.credit_account
    if not account.has_limit:
        return 0.0
    return account.balance / account.credit_limit * 100


class LegacyScoreModel(ScoreModel):
    """Base score 720 / 680 / 620 for utilization below 30% / 50% / above."""

    model = ScoringModel.LEGACY

    def compute_score(
        self,
        snapshot: FinancialSnapshot,
        as_of: Optional[date] = None,
    ) -> ScoreResult:
        as_of = as_of or date.today()
        utilization = _legacy_utilization(snapshot)

        if utilization < LEGACY_GOOD_UTILIZATION:
            final_score, health_level, status = LEGACY_HIGH_SCORE, HealthLevel.HIGH, FactorStatus.GOOD
            explanation = "Your credit utilization is healthy. Keep it below 30%."
        elif utilization < LEGACY_WARNING_UTILIZATION:
            final_score, health_level, status = LEGACY_MEDIUM_SCORE, HealthLevel.MEDIUM, FactorStatus.WARNING
            explanation = "Your utilization is moderate. Try to keep it below 30%."
        else:
            final_score, health_level, status = LEGACY_LOW_SCORE, HealthLevel.LOW, FactorStatus.BAD
            explanation = "High utilization can hurt your score. Pay down your balance."

        account = snapshot.credit_account
        limit = account.credit_limit if account.has_limit else 0.0
        if account.has_limit:
            limit_explanation = f"Your credit limit is ${limit:,.0f}."
        else:
            limit_explanation = "No credit limit reported."

        factors = [
            FactorScore(
                name=PAYMENT_HISTORY,
                score=100,
                weight=0.0,
                status=FactorStatus.GOOD,
                explanation="All payments made on time. Keep up the great work!",
                value=100,
            ),
            FactorScore(
                name=CREDIT_UTILIZATION,
                score=int(clamp(100 - round_half_up(utilization), 0, 100)),
                weight=1.0,
                status=status,
                explanation=explanation,
                value=utilization,
            ),
            FactorScore(
                name=CREDIT_LIMIT,
                score=100,
                weight=0.0,
                status=FactorStatus.GOOD,
                explanation=limit_explanation,
                value=limit,
            ),
            FactorScore(
                name=ACCOUNT_AGE,
                score=100,
                weight=0.0,
                status=FactorStatus.GOOD,
                explanation="Your account has been open for 2 years.",
                value=LEGACY_ACCOUNT_AGE_MONTHS,
            ),
        ]

        return ScoreResult(
            final_score=final_score,
            health_level=health_level,
            payment_history=factors[0],
            utilization=factors[1],
            debt_to_income=factors[2],
            history_length=factors[3],
            top_drivers=identify_top_drivers(factors),
            model=self.model,
            as_of=as_of,
        )


@dataclass
class _LegacyProjection:
    """Fixed-delta outcome before it is turned into a ProjectionResult."""

    score_delta: int
    factor_affected: str
    explanation: str
    corrective_action: str
    recovery_timeline: Optional[RecoveryTimeline] = None


def _timeline(base: int, *offsets: int) -> RecoveryTimeline:
    days_30, days_90, days_180 = (min(LEGACY_SCORE_MAX, base + offset) for offset in offsets)
    return RecoveryTimeline(days_30=days_30, days_90=days_90, days_180=days_180)


def _project_purchase(
    base_score: int,
    current_utilization: float,
    balance: float,
    credit_limit: float,
    amount: float,
) -> _LegacyProjection:
    new_balance = balance + amount
    new_utilization = new_balance / credit_limit * 100
    change = new_utilization - current_utilization
    pay_down = new_balance - credit_limit * LEGACY_GOOD_UTILIZATION / 100

    before = f"{current_utilization:.1f}%"
    after = f"{new_utilization:.1f}%"

    if amount > credit_limit * LARGE_PURCHASE_LIMIT_SHARE and new_utilization > LEGACY_GOOD_UTILIZATION:
        delta = LARGE_PURCHASE_DELTA
        return _LegacyProjection(
            delta,
            CREDIT_UTILIZATION,
            f"Large purchase of ${amount:.2f} increases utilization from {before} to {after}. "
            "This is above the recommended 30% threshold.",
            f"Pay down ${pay_down:.2f} to bring utilization back below 30%.",
            _timeline(base_score, delta + 5, delta + 15, 0),
        )

    if new_utilization > LEGACY_WARNING_UTILIZATION:
        delta = HIGH_UTILIZATION_DELTA
        return _LegacyProjection(
            delta,
            CREDIT_UTILIZATION,
            f"This purchase pushes utilization to {after}, which is very high. "
            "High utilization significantly impacts credit scores.",
            f"Pay down at least ${pay_down:.2f} to improve your score.",
            _timeline(base_score, delta + 8, delta + 20, delta + 28),
        )

    if new_utilization > LEGACY_GOOD_UTILIZATION:
        return _LegacyProjection(
            math.floor(-change * 0.8),
            CREDIT_UTILIZATION,
            f"Utilization increases from {before} to {after}. "
            "Keep it below 30% for optimal credit health.",
            "Consider paying down your balance before making large purchases.",
        )

    if change < 10:
        return _LegacyProjection(
            math.floor(-change * 0.3),
            CREDIT_UTILIZATION,
            f"Small increase in utilization from {before} to {after}. Still within healthy range.",
            "Continue making on-time payments and keep utilization low.",
        )

    return _LegacyProjection(
        math.floor(-change * 0.5),
        CREDIT_UTILIZATION,
        f"Utilization increases from {before} to {after}. Still manageable.",
        "Pay down balance to maintain low utilization.",
    )


def _project_pay_down(
    current_utilization: float,
    balance: float,
    credit_limit: float,
    amount: float,
) -> _LegacyProjection:
    new_utilization = max(0.0, balance - amount) / credit_limit * 100
    change = current_utilization - new_utilization
    significant = amount > balance * SIGNIFICANT_PAY_DOWN_SHARE

    before = f"{current_utilization:.1f}%"
    after = f"{new_utilization:.1f}%"

    if (
        significant
        and current_utilization > LEGACY_GOOD_UTILIZATION
        and new_utilization < LEGACY_GOOD_UTILIZATION
    ):
        delta = math.floor(change * 1.2)
        explanation = (
            f"Paying down ${amount:.2f} brings utilization from {before} to {after}, "
            "below the 30% threshold. Excellent move!"
        )
    elif significant:
        delta = math.floor(change * 1.0)
        explanation = (
            f"Significant payment of ${amount:.2f} reduces utilization from {before} to {after}. "
            "This will help your score."
        )
    else:
        delta = math.floor(change * 0.6)
        explanation = f"Paying down ${amount:.2f} reduces utilization from {before} to {after}."

    return _LegacyProjection(
        delta,
        CREDIT_UTILIZATION,
        explanation,
        "Keep making payments on time and maintain low utilization.",
    )


def simulate_legacy(
    snapshot: FinancialSnapshot,
    scenario: ScenarioSpec,
    as_of: Optional[date] = None,
) -> ProjectionResult:
    """
    Project a scenario with the legacy fixed-delta rules.

    Raises:
        InvalidScenarioException: For new_loan (unsupported here) or an
            unrecognized scenario kind
    """
    validate_scenario(scenario)

    current = LegacyScoreModel().compute_score(snapshot, as_of)
    base_score = current.final_score
    current_utilization = current.utilization.value

    account = snapshot.credit_account
    credit_limit = account.credit_limit if account.has_limit else DEFAULT_LEGACY_CREDIT_LIMIT

    if isinstance(scenario, (Purchase, ReplayTransaction)):
        outcome = _project_purchase(
            base_score, current_utilization, account.balance, credit_limit, scenario.amount
        )
    elif isinstance(scenario, MissedPayment):
        outcome = _LegacyProjection(
            MISSED_PAYMENT_DELTA,
            PAYMENT_HISTORY,
            "Missing a payment severely impacts your credit score. "
            "Payment history is the most important factor.",
            "Make payment immediately to minimize damage. "
            "Set up autopay to prevent future missed payments.",
            _timeline(base_score, MISSED_PAYMENT_DELTA + 15, MISSED_PAYMENT_DELTA + 40, MISSED_PAYMENT_DELTA + 70),
        )
    elif isinstance(scenario, PayDown):
        outcome = _project_pay_down(
            current_utilization, account.balance, credit_limit, scenario.amount
        )
    elif isinstance(scenario, NewLoan):
        raise InvalidScenarioException(
            scenario.type.value, "not supported by the legacy scoring model"
        )
    else:
        raise InvalidScenarioException(str(scenario.type.value))

    projected_score = int(clamp(base_score + outcome.score_delta, LEGACY_SCORE_MIN, LEGACY_SCORE_MAX))

    return ProjectionResult(
        current_score=base_score,
        projected_score=projected_score,
        score_delta=projected_score - base_score,
        factor_affected=outcome.factor_affected,
        explanation=outcome.explanation,
        corrective_action=outcome.corrective_action,
        recovery_timeline=outcome.recovery_timeline,
    )
