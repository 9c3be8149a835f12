"""
Scenario Projector for CreditKeeper.

Answers "what happens to my score if ...?" by applying a hypothetical event
to a copy of the snapshot and re-scoring it:

1. Score the original snapshot
2. Apply the scenario to ``snapshot.clone()``
3. Score the modified copy
4. Find the factor whose weighted sub-score moved the most
5. Explain the change, suggest a corrective action and a recovery timeline

The caller's snapshot is never modified.
"""

import math
from datetime import date
from typing import Optional, Tuple

from creditkeeper.domain.entities import (
    BillingCycle,
    FinancialSnapshot,
    Payment,
    PaymentSource,
    Transaction,
)
from creditkeeper.domain.exceptions import InvalidScenarioException
from creditkeeper.utils.date_utils import add_days, add_months
from creditkeeper.utils.numbers import round_half_up

from .factors import CREDIT_UTILIZATION
from .loan import calculate_monthly_payment, rate_loan
from .models import (
    IncomeBasis,
    LoanRating,
    LoanReasonableness,
    LoanScenario,
    LoanType,
    PrimaryFactorChange,
    ProjectionResult,
    RecoveryTimeline,
    ScoreResult,
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
from .score_engine import WeightedScoreModel
from .settings import LoanSettings, ScoringSettings, loan_settings, scoring_settings

MAX_SCORE_CAP = 850
LINE_OF_CREDIT_LIMIT_MULTIPLE = 1.2

PURCHASE_RECOVERY_THRESHOLD = -20
PURCHASE_RECOVERY_FRACTIONS = (0.2, 0.5)
MISSED_PAYMENT_RECOVERY_OFFSETS = (15, 40, 70)
UNREASONABLE_LOAN_RECOVERY_FRACTIONS = (0.15, 0.40, 0.70)
STRETCH_LOAN_RECOVERY_FRACTIONS = (0.25, 0.60, 1.0)


# =============================================================================
# Mutations
# =============================================================================

def _apply_purchase(
    snapshot: FinancialSnapshot,
    amount: float,
    as_of: date,
    settings: ScoringSettings,
    transaction: Transaction,
) -> None:
    snapshot.credit_account.balance += amount

    last_cycle = snapshot.last_cycle
    if last_cycle is not None and last_cycle.statement_end > as_of:
        last_cycle.statement_balance += amount
        last_cycle.minimum_due = math.floor(
            last_cycle.statement_balance * settings.minimum_due_rate
        )

    snapshot.transactions.insert(0, transaction)


def _apply_missed_payment(snapshot: FinancialSnapshot, as_of: date) -> None:
    yesterday = add_days(as_of, -1)
    last_cycle = snapshot.last_cycle

    if last_cycle is None:
        # No billing history: model one unpaid statement that fell due yesterday.
        # Its minimum due stays 0 so only payment history moves, not obligations.
        statement_end = add_days(as_of, -22)
        balance = snapshot.credit_account.balance
        snapshot.billing_cycles.append(
            BillingCycle(
                id=f"cycle-projected-{as_of.isoformat()}",
                statement_start=add_months(statement_end, -1),
                statement_end=statement_end,
                due_date=yesterday,
                statement_balance=balance,
                minimum_due=0.0,
            )
        )
        return

    last_cycle.is_paid = False
    last_cycle.paid_on_time = False
    last_cycle.paid_amount = 0.0

    if not last_cycle.is_past_due(as_of):
        last_cycle.due_date = yesterday


def _apply_pay_down(snapshot: FinancialSnapshot, amount: float, as_of: date) -> None:
    account = snapshot.credit_account
    account.balance = max(0.0, account.balance - amount)

    last_cycle = snapshot.last_cycle
    if last_cycle is not None:
        last_cycle.paid_amount += amount
        if last_cycle.paid_amount >= last_cycle.minimum_due:
            last_cycle.is_paid = True
            last_cycle.paid_on_time = True

    snapshot.payments.append(
        Payment(
            id=f"payment-projected-{as_of.isoformat()}",
            amount=amount,
            date=as_of,
            billing_cycle_id=last_cycle.id if last_cycle else "",
            source=PaymentSource.CHECKING,
        )
    )


def _apply_new_loan(snapshot: FinancialSnapshot, loan: LoanScenario) -> None:
    payment = calculate_monthly_payment(loan.loan_amount, loan.apr, loan.term_months)

    # Without billing history there is no minimum due to carry the obligation
    last_cycle = snapshot.last_cycle
    if last_cycle is not None:
        last_cycle.minimum_due += payment

    if loan.loan_type == LoanType.LINE_OF_CREDIT:
        account = snapshot.credit_account
        account.balance += loan.loan_amount
        account.credit_limit = (account.credit_limit or 0.0) + (
            LINE_OF_CREDIT_LIMIT_MULTIPLE * loan.loan_amount
        )


def apply_scenario(
    snapshot: FinancialSnapshot,
    scenario: ScenarioSpec,
    as_of: date,
    settings: ScoringSettings = scoring_settings,
) -> FinancialSnapshot:
    """
    Apply a scenario to a copy of the snapshot.

    Args:
        snapshot: The original snapshot (left untouched)
        scenario: What to apply
        as_of: Evaluation date
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        A modified clone of the snapshot

    Raises:
        InvalidScenarioException: If the scenario kind is not recognized
    """
    validate_scenario(scenario)
    projected = snapshot.clone()

    if isinstance(scenario, Purchase):
        _apply_purchase(
            projected,
            scenario.amount,
            as_of,
            settings,
            Transaction(
                id=f"txn-projected-{as_of.isoformat()}",
                description="Projected Purchase",
                amount=scenario.amount,
                date=as_of,
                merchant=scenario.merchant,
                category=scenario.category,
            ),
        )
    elif isinstance(scenario, ReplayTransaction):
        _apply_purchase(
            projected,
            scenario.amount,
            as_of,
            settings,
            Transaction(
                id=f"txn-replay-{scenario.transaction_id or as_of.isoformat()}",
                description="Replayed Transaction",
                amount=scenario.amount,
                date=as_of,
            ),
        )
    elif isinstance(scenario, MissedPayment):
        _apply_missed_payment(projected, as_of)
    elif isinstance(scenario, PayDown):
        _apply_pay_down(projected, scenario.amount, as_of)
    elif isinstance(scenario, NewLoan):
        _apply_new_loan(projected, scenario.loan)
    else:
        raise InvalidScenarioException(str(scenario.type.value))

    return projected


# =============================================================================
# Analysis
# =============================================================================

def identify_primary_factor_change(
    current: ScoreResult,
    projected: ScoreResult,
) -> PrimaryFactorChange:
    """
    Find the factor whose weighted sub-score changed the most.

    Uses the current result's weights. When nothing moves, Credit Utilization
    is reported with a delta of 0.
    """
    max_change = 0.0
    factor_name = CREDIT_UTILIZATION
    explanation = projected.utilization.explanation

    for before, after in zip(current.factors, projected.factors):
        weighted_change = abs((after.score - before.score) * before.weight)
        if weighted_change > max_change:
            max_change = weighted_change
            factor_name = before.name
            explanation = after.explanation

    return PrimaryFactorChange(
        factor_name=factor_name,
        score_delta=int(round_half_up(max_change)),
        explanation=explanation,
    )


def resolve_monthly_income(
    snapshot: FinancialSnapshot,
    loan: LoanScenario,
    as_of: date,
    settings: ScoringSettings = scoring_settings,
) -> Tuple[float, IncomeBasis]:
    """
    Decide which monthly income to rate a loan against.

    Stated income wins, then trailing-window paycheck deposits, then the
    configured default assumed income.
    """
    if loan.monthly_income is not None and loan.monthly_income > 0:
        return loan.monthly_income, IncomeBasis.STATED

    observed = snapshot.monthly_paycheck_income(as_of, settings.income_window_days)
    if observed > 0:
        return observed, IncomeBasis.OBSERVED

    return settings.default_assumed_monthly_income, IncomeBasis.ASSUMED


def _utilization_pct(balance: float, limit: Optional[float]) -> float:
    if not limit or limit <= 0:
        return 0.0
    return balance / limit * 100


def _cap(value: float, *caps: float) -> int:
    return int(min(MAX_SCORE_CAP, value, *caps))


# =============================================================================
# Explanations
# =============================================================================

def _explain_purchase(
    snapshot: FinancialSnapshot,
    amount: float,
    current_score: int,
    projected_score: int,
    settings: ScoringSettings,
    replay: bool = False,
) -> Tuple[str, Optional[str], Optional[RecoveryTimeline]]:
    account = snapshot.credit_account
    limit = account.credit_limit if account.has_limit else None
    before = _utilization_pct(account.balance, limit)
    after = _utilization_pct(account.balance + amount, limit)

    if replay:
        explanation = (
            f"Replaying this ${amount:.2f} transaction would move utilization "
            f"from {before:.1f}% to {after:.1f}%."
        )
    else:
        explanation = (
            f"Purchase of ${amount:.2f} increases utilization "
            f"from {before:.1f}% to {after:.1f}%."
        )

    corrective_action = None
    threshold = settings.utilization_good_threshold
    if limit is not None and after > threshold:
        pay_down = (account.balance + amount) - limit * threshold / 100
        corrective_action = (
            f"Pay down balance to bring utilization below {threshold:.0f}% "
            f"(approximately ${pay_down:.2f})."
        )

    recovery_timeline = None
    score_delta = projected_score - current_score
    if score_delta < PURCHASE_RECOVERY_THRESHOLD:
        short, medium = PURCHASE_RECOVERY_FRACTIONS
        recovery_timeline = RecoveryTimeline(
            days_30=_cap(projected_score + abs(math.floor(score_delta * short)), current_score),
            days_90=_cap(projected_score + abs(math.floor(score_delta * medium)), current_score),
            days_180=_cap(current_score),
        )

    return explanation, corrective_action, recovery_timeline


def _explain_missed_payment(
    projected_score: int,
    settings: ScoringSettings,
) -> Tuple[str, Optional[str], Optional[RecoveryTimeline]]:
    weight_pct = f"{settings.weight_payment_history * 100:.0f}%"
    days_30, days_90, days_180 = MISSED_PAYMENT_RECOVERY_OFFSETS
    return (
        "Missing a payment severely impacts your score. "
        f"Payment history accounts for {weight_pct} of your toy score.",
        "Make payment immediately and set up autopay to prevent future missed payments.",
        RecoveryTimeline(
            days_30=_cap(projected_score + days_30),
            days_90=_cap(projected_score + days_90),
            days_180=_cap(projected_score + days_180),
        ),
    )


def _explain_pay_down(
    snapshot: FinancialSnapshot,
    amount: float,
) -> Tuple[str, Optional[str], Optional[RecoveryTimeline]]:
    account = snapshot.credit_account
    limit = account.credit_limit if account.has_limit else None
    before = _utilization_pct(account.balance, limit)
    after = _utilization_pct(max(0.0, account.balance - amount), limit)
    return (
        f"Paying down ${amount:.2f} reduces utilization from {before:.1f}% to {after:.1f}%.",
        "Continue making on-time payments and maintain low utilization "
        "for continued score improvement.",
        None,
    )


def _explain_new_loan(
    loan: LoanScenario,
    rating: LoanRating,
    current_score: int,
    projected_score: int,
) -> Tuple[str, Optional[str], Optional[RecoveryTimeline]]:
    loan_label = loan.loan_type.value.replace("_", " ")
    explanation = (
        f"A new {loan_label} loan of ${loan.loan_amount:,.2f} at {loan.apr:.1f}% APR "
        f"brings your debt-to-income ratio to {rating.new_dti:.1f}%."
    )

    score_delta = projected_score - current_score
    drop = max(0, -score_delta)

    if rating.rating == LoanReasonableness.UNREASONABLE:
        short, medium, long = UNREASONABLE_LOAN_RECOVERY_FRACTIONS
        return (
            explanation,
            "This loan is likely unaffordable. Reduce the amount, find a lower rate "
            "or delay borrowing until your income supports the payment.",
            RecoveryTimeline(
                days_30=_cap(projected_score + math.floor(drop * short)),
                days_90=_cap(projected_score + math.floor(drop * medium)),
                days_180=_cap(projected_score + math.floor(drop * long)),
            ),
        )

    if rating.rating == LoanReasonableness.REASONABLE or score_delta >= 0:
        return (
            explanation,
            "Make every loan payment on time to build a stronger payment history.",
            None,
        )

    short, medium, long = STRETCH_LOAN_RECOVERY_FRACTIONS
    return (
        explanation,
        "This loan stretches your budget. Consider a smaller amount or a longer "
        "term, and keep card utilization low while you repay it.",
        RecoveryTimeline(
            days_30=_cap(projected_score + math.floor(drop * short), current_score),
            days_90=_cap(projected_score + math.floor(drop * medium), current_score),
            days_180=_cap(projected_score + math.floor(drop * long), current_score),
        ),
    )


# =============================================================================
# Entry point
# =============================================================================

def simulate(
    snapshot: FinancialSnapshot,
    scenario: ScenarioSpec,
    as_of: Optional[date] = None,
    settings: ScoringSettings = scoring_settings,
    loan_config: LoanSettings = loan_settings,
) -> ProjectionResult:
    """
    Project the score impact of a hypothetical event.

    Args:
        snapshot: The profile to project from (never modified)
        scenario: The event to simulate
        as_of: Evaluation date (defaults to today)
        settings: Scoring settings (uses defaults if not provided)
        loan_config: Loan settings for new_loan scenarios

    Returns:
        ProjectionResult with current/projected scores, the most affected
        factor, an explanation and, where applicable, a recovery timeline
        and loan rating

    Raises:
        InvalidScenarioException: If the scenario kind is not recognized
    """
    validate_scenario(scenario)
    as_of = as_of or date.today()
    engine = WeightedScoreModel(settings)

    current = engine.compute_score(snapshot, as_of)
    projected = engine.compute_score(apply_scenario(snapshot, scenario, as_of, settings), as_of)
    primary = identify_primary_factor_change(current, projected)

    current_score = current.final_score
    projected_score = projected.final_score

    loan_rating = None
    income_basis = None

    if isinstance(scenario, (Purchase, ReplayTransaction)):
        explanation, corrective_action, recovery_timeline = _explain_purchase(
            snapshot,
            scenario.amount,
            current_score,
            projected_score,
            settings,
            replay=isinstance(scenario, ReplayTransaction),
        )
    elif isinstance(scenario, MissedPayment):
        explanation, corrective_action, recovery_timeline = _explain_missed_payment(
            projected_score, settings
        )
    elif isinstance(scenario, PayDown):
        explanation, corrective_action, recovery_timeline = _explain_pay_down(
            snapshot, scenario.amount
        )
    else:
        income, income_basis = resolve_monthly_income(snapshot, scenario.loan, as_of, settings)
        last_cycle = snapshot.last_cycle
        loan_rating = rate_loan(
            scenario.loan,
            current_monthly_debt=last_cycle.minimum_due if last_cycle else 0.0,
            monthly_income=income,
            settings=loan_config,
            income_assumed=income_basis == IncomeBasis.ASSUMED,
        )
        explanation, corrective_action, recovery_timeline = _explain_new_loan(
            scenario.loan, loan_rating, current_score, projected_score
        )

    return ProjectionResult(
        current_score=current_score,
        projected_score=projected_score,
        score_delta=projected_score - current_score,
        factor_affected=primary.factor_name,
        explanation=explanation,
        corrective_action=corrective_action,
        recovery_timeline=recovery_timeline,
        loan_rating=loan_rating,
        primary_factor_change=primary,
        current=current,
        projected=projected,
        income_basis=income_basis,
    )
