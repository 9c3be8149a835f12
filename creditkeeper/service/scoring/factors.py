"""
Factor Calculations for the CreditKeeper toy score.

This module turns a financial snapshot into the four weighted factors:
- Payment History (missed/late cycles in the last 12 statements)
- Credit Utilization (current and 3-cycle trailing average, blended)
- Debt-to-Income proxy (last minimum due over trailing paycheck income)
- Account Age (whole months since the card was opened)

Each factor returns a FactorScore with a 0-100 sub-score, a status and a
human-readable explanation. Missing optional data never raises: each factor
falls back to a documented baseline instead.
"""

from datetime import date
from typing import List, Optional, Tuple

from creditkeeper.domain.entities import FinancialSnapshot
from creditkeeper.utils.date_utils import whole_months_between
from creditkeeper.utils.numbers import clamp

from .models import FactorScore, FactorStatus
from .settings import ScoringSettings, scoring_settings

PAYMENT_HISTORY = "Payment History"
CREDIT_UTILIZATION = "Credit Utilization"
DEBT_TO_INCOME = "Debt-to-Income Proxy"
ACCOUNT_AGE = "Account Age"


def score_from_tiers(
    value: float,
    tiers: List[Tuple[float, int]],
    fallback: int,
    inclusive: bool = True,
) -> int:
    """
    Map a value onto the first tier whose upper bound contains it.

    Args:
        value: The raw value to score
        tiers: Ascending ``(upper_bound, score)`` pairs
        fallback: Score when the value exceeds every bound
        inclusive: Whether the upper bound itself belongs to the tier

    Returns:
        Score from 0-100
    """
    for bound, score in tiers:
        if value <= bound if inclusive else value < bound:
            return score
    return fallback


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


# =============================================================================
# Payment History
# =============================================================================

def count_payment_events(
    snapshot: FinancialSnapshot,
    as_of: date,
    settings: ScoringSettings = scoring_settings,
) -> Tuple[int, int]:
    """
    Count missed and late cycles among the most recent statements.

    A cycle is missed when it is unpaid and its due date has passed; it is
    late when it was paid but not on time.

    Returns:
        Tuple of (missed_count, late_count)
    """
    cycles = snapshot.billing_cycles[-settings.payment_history_window:]
    missed = sum(1 for c in cycles if c.is_missed(as_of))
    late = sum(1 for c in cycles if c.is_late())
    return missed, late


def compute_payment_history(
    snapshot: FinancialSnapshot,
    as_of: date,
    settings: ScoringSettings = scoring_settings,
) -> FactorScore:
    """
    Score payment history over the last 12 billing cycles.

    Algorithm:
        1. Start at 100
        2. Subtract 25 per missed cycle and 10 per late cycle
        3. Add a 5-point bonus when at least 6 cycles exist and each of the
           last 6 was paid on time or is not yet due
        4. Clamp to 0-100

    An empty billing history is a new account, not missing data: it gets a
    fixed baseline of 80 with status good.
    """
    weight = settings.weight_payment_history
    cycles = snapshot.billing_cycles[-settings.payment_history_window:]

    if not cycles:
        return FactorScore(
            name=PAYMENT_HISTORY,
            score=settings.no_history_score,
            weight=weight,
            status=FactorStatus.GOOD,
            explanation="No payment history yet. Starting with baseline score.",
            details="New account with no billing history",
        )

    missed, late = count_payment_events(snapshot, as_of, settings)

    score = 100
    score -= missed * settings.missed_payment_penalty
    score -= late * settings.late_payment_penalty

    recent = cycles[-settings.on_time_bonus_window:]
    recent_on_time = all(c.paid_on_time or c.due_date > as_of for c in recent)
    if recent_on_time and len(cycles) >= settings.on_time_bonus_window:
        score += settings.on_time_bonus

    score = int(clamp(score, 0, 100))

    if missed > 0:
        status = FactorStatus.BAD
        explanation = (
            f"{_plural(missed, 'missed payment')} in last 12 months. "
            "This severely impacts your score."
        )
    elif late > 0:
        status = FactorStatus.WARNING
        explanation = (
            f"{_plural(late, 'late payment')} in last 12 months. "
            "Try to pay on time to improve."
        )
    else:
        status = FactorStatus.GOOD
        explanation = f"All {_plural(len(cycles), 'payment')} made on time. Excellent!"

    return FactorScore(
        name=PAYMENT_HISTORY,
        score=score,
        weight=weight,
        status=status,
        explanation=explanation,
        value=float(missed),
        details=f"Tracking {len(cycles)} billing cycles. Missed: {missed}, Late: {late}",
    )


# =============================================================================
# Credit Utilization
# =============================================================================

def calculate_utilization(
    snapshot: FinancialSnapshot,
    settings: ScoringSettings = scoring_settings,
) -> Tuple[float, float]:
    """
    Calculate current and trailing-average utilization in percent.

    A missing or zero credit limit reports ``unknown_limit_utilization``
    (0% by default) for both values instead of dividing by zero.

    Returns:
        Tuple of (current_pct, trailing_average_pct)
    """
    account = snapshot.credit_account
    if not account.has_limit:
        unknown = settings.unknown_limit_utilization
        return unknown, unknown

    limit = account.credit_limit
    current = account.balance / limit * 100

    recent = snapshot.billing_cycles[-settings.utilization_average_cycles:]
    if recent:
        average = sum(c.statement_balance / limit * 100 for c in recent) / len(recent)
    else:
        average = current

    return current, average


def compute_utilization(
    snapshot: FinancialSnapshot,
    settings: ScoringSettings = scoring_settings,
) -> FactorScore:
    """
    Score credit utilization from a blend of current and recent utilization.

    Blended = 0.6 x current + 0.4 x 3-cycle average, mapped through the
    breakpoints <=10 -> 100, <=30 -> 90, <=50 -> 70, <=75 -> 40, else 10.
    """
    current, average = calculate_utilization(snapshot, settings)
    blended = (
        current * settings.utilization_current_weight
        + average * settings.utilization_average_weight
    )

    tiers = settings.utilization_tiers
    score = score_from_tiers(blended, tiers, settings.utilization_floor_score)

    if blended <= settings.utilization_good_threshold:
        status = FactorStatus.GOOD
    elif blended <= settings.utilization_warning_threshold:
        status = FactorStatus.WARNING
    else:
        status = FactorStatus.BAD

    shown = f"{current:.1f}%"
    if not snapshot.credit_account.has_limit:
        explanation = (
            f"No credit limit reported, so utilization is shown as {shown}. "
            "Add your credit limit for an accurate estimate."
        )
    elif blended <= tiers[0][0]:
        explanation = f"Excellent! Current utilization at {shown}. Well below the 30% threshold."
    elif blended <= settings.utilization_good_threshold:
        explanation = f"Good! Current utilization at {shown}. Stay below 30% for optimal score."
    elif blended <= settings.utilization_warning_threshold:
        explanation = f"Current utilization at {shown} is moderate. Reduce below 30% to improve score."
    elif blended <= tiers[-1][0]:
        explanation = f"High utilization at {shown}! Pay down balance to improve score significantly."
    else:
        explanation = (
            f"Critical: {shown} utilization is extremely high! "
            "This is severely impacting your score."
        )

    details = f"Current: {current:.1f}%, Avg (3 months): {average:.1f}%"
    if not snapshot.credit_account.has_limit:
        details += ", limit unknown"

    return FactorScore(
        name=CREDIT_UTILIZATION,
        score=score,
        weight=settings.weight_utilization,
        status=status,
        explanation=explanation,
        value=current,
        details=details,
    )


# =============================================================================
# Debt-to-Income
# =============================================================================

def calculate_debt_to_income(
    snapshot: FinancialSnapshot,
    as_of: date,
    settings: ScoringSettings = scoring_settings,
) -> Optional[Tuple[float, float, float]]:
    """
    Calculate the debt-to-income proxy.

    Income is the sum of paycheck deposits in the trailing 30 days; debt is
    the most recent cycle's minimum due (0 without billing history).

    Returns:
        Tuple of (ratio, monthly_income, monthly_debt), or None when no
        income is observed
    """
    income = snapshot.monthly_paycheck_income(as_of, settings.income_window_days)
    if income <= 0:
        return None

    last_cycle = snapshot.last_cycle
    debt = last_cycle.minimum_due if last_cycle else 0.0
    return debt / income, income, debt


def compute_debt_to_income(
    snapshot: FinancialSnapshot,
    as_of: date,
    settings: ScoringSettings = scoring_settings,
) -> FactorScore:
    """
    Score the debt-to-income proxy.

    Breakpoints <=0.10 -> 100, <=0.20 -> 85, <=0.35 -> 65, <=0.50 -> 40,
    else 15. Without income data the factor uses a baseline of 60 (warning).
    """
    weight = settings.weight_debt_to_income
    income_source = snapshot.income_source

    if income_source is None or not income_source.deposits:
        return FactorScore(
            name=DEBT_TO_INCOME,
            score=settings.no_income_score,
            weight=weight,
            status=FactorStatus.WARNING,
            explanation="Income data unavailable. Using baseline score.",
            details="No checking account or deposit history",
        )

    result = calculate_debt_to_income(snapshot, as_of, settings)
    if result is None:
        return FactorScore(
            name=DEBT_TO_INCOME,
            score=settings.no_income_score,
            weight=weight,
            status=FactorStatus.WARNING,
            explanation="No recent income detected. Using baseline score.",
            details=f"No paycheck deposits in last {settings.income_window_days} days",
        )

    ratio, income, debt = result
    tiers = settings.dti_tiers
    score = score_from_tiers(ratio, tiers, settings.dti_floor_score)
    shown = f"{ratio * 100:.1f}%"

    if ratio <= settings.dti_good_threshold:
        status = FactorStatus.GOOD
    elif ratio <= settings.dti_warning_threshold:
        status = FactorStatus.WARNING
    else:
        status = FactorStatus.BAD

    if ratio <= tiers[0][0]:
        explanation = f"Excellent debt-to-income ratio at {shown}. Very manageable debt."
    elif ratio <= settings.dti_good_threshold:
        explanation = f"Good debt-to-income ratio at {shown}. Debt is well-managed."
    elif ratio <= settings.dti_warning_threshold:
        explanation = f"Moderate debt-to-income ratio at {shown}. Consider reducing debt."
    elif ratio <= tiers[-1][0]:
        explanation = f"High debt-to-income ratio at {shown}. Debt is becoming burdensome."
    else:
        explanation = f"Very high debt-to-income ratio at {shown}. Urgent debt reduction needed."

    return FactorScore(
        name=DEBT_TO_INCOME,
        score=score,
        weight=weight,
        status=status,
        explanation=explanation,
        value=ratio * 100,
        details=f"Monthly Income: ${income:.0f}, Monthly Debt: ${debt:.0f}",
    )


# =============================================================================
# Account Age
# =============================================================================

def compute_history_length(
    snapshot: FinancialSnapshot,
    as_of: date,
    settings: ScoringSettings = scoring_settings,
) -> FactorScore:
    """
    Score account age in whole 30-day months since the open date.

    Breakpoints: <3 -> 30 (bad), <6 -> 45, <12 -> 60 (warning),
    <24 -> 75, <60 -> 90, else 100 (good).
    """
    months = whole_months_between(
        snapshot.credit_account.open_date, as_of, settings.days_per_month
    )
    years = months // 12

    score = score_from_tiers(
        months, settings.history_tiers, settings.history_ceiling_score, inclusive=False
    )

    if months < settings.history_bad_below_months:
        status = FactorStatus.BAD
    elif months < settings.history_good_from_months:
        status = FactorStatus.WARNING
    else:
        status = FactorStatus.GOOD

    if months < 3:
        explanation = f"Very new account ({months} months). Score will improve with time."
    elif months < 6:
        explanation = f"New account ({months} months). Keep building positive history."
    elif months < 12:
        explanation = f"Account is {months} months old. Approaching 1 year milestone."
    elif months < 24:
        explanation = f"Account is {_plural(years, 'year')} old. Good history length."
    elif months < 60:
        explanation = f"Account is {years} years old. Strong credit history."
    else:
        explanation = f"Account is {years} years old. Excellent established history."

    return FactorScore(
        name=ACCOUNT_AGE,
        score=score,
        weight=settings.weight_history_length,
        status=status,
        explanation=explanation,
        value=float(months),
        details=f"Account opened {years} years, {months % 12} months ago",
    )
