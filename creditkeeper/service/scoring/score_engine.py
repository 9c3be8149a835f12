"""
Score Engine for CreditKeeper.

This module combines the four factor sub-scores into the final 300-850 toy
score and exposes scoring strategies behind a single interface:

1. Compute each factor (payment history, utilization, DTI, account age)
2. Take the weighted sum of the 0-100 sub-scores
3. Map the weighted sum onto 300-850 and clamp
4. Derive the health level and the top positive/negative drivers
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional

from creditkeeper.domain.entities import FinancialSnapshot
from creditkeeper.utils.numbers import clamp, round_half_up

from .factors import (
    compute_debt_to_income,
    compute_history_length,
    compute_payment_history,
    compute_utilization,
)
from .models import (
    FactorScore,
    FactorStatus,
    HealthLevel,
    ScoreResult,
    ScoringModel,
    TopDrivers,
)
from .settings import ScoringSettings, scoring_settings

MAX_DRIVERS = 2
POSITIVE_DRIVER_MIN_SCORE = 80


def to_final_score(
    weighted_sum: float,
    settings: ScoringSettings = scoring_settings,
) -> int:
    """
    Map a 0-100 weighted sum onto the reportable score range.

    Args:
        weighted_sum: Weighted sum of the sub-scores (0-100)
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        Integer score clamped to score_min..score_max
    """
    raw = settings.score_min + weighted_sum * settings.score_span / 100
    return int(clamp(round_half_up(raw), settings.score_min, settings.score_max))


def health_level_for(
    score: int,
    settings: ScoringSettings = scoring_settings,
) -> HealthLevel:
    """Bucket a final score into high / medium / low."""
    if score >= settings.health_high_threshold:
        return HealthLevel.HIGH
    elif score >= settings.health_medium_threshold:
        return HealthLevel.MEDIUM
    return HealthLevel.LOW


def identify_top_drivers(factors: List[FactorScore]) -> TopDrivers:
    """
    Pick the strongest positive and negative factors.

    Positive drivers are good factors scoring at least 80, strongest weighted
    score first. Negative drivers are any non-good factors, weakest weighted
    score first. Ties keep the input order.
    """
    positive = sorted(
        (f for f in factors if f.status == FactorStatus.GOOD and f.score >= POSITIVE_DRIVER_MIN_SCORE),
        key=lambda f: f.weighted_score,
        reverse=True,
    )
    negative = sorted(
        (f for f in factors if f.status != FactorStatus.GOOD),
        key=lambda f: f.weighted_score,
    )
    return TopDrivers(
        positive=[f.name for f in positive][:MAX_DRIVERS],
        negative=[f.name for f in negative][:MAX_DRIVERS],
    )


class ScoreModel(ABC):
    """
    A named scoring strategy.

    Implementations must be pure: the same snapshot and as_of date always
    produce the same ScoreResult, and the snapshot is never modified.
    """

    model: ScoringModel

    @abstractmethod
    def compute_score(
        self,
        snapshot: FinancialSnapshot,
        as_of: Optional[date] = None,
    ) -> ScoreResult:
        """
        Score a financial snapshot.

        Args:
            snapshot: The profile to score
            as_of: Evaluation date (defaults to today)

        Returns:
            The ScoreResult for this strategy
        """
        ...


class WeightedScoreModel(ScoreModel):
    """The four-factor weighted toy score."""

    model = ScoringModel.WEIGHTED

    def __init__(self, settings: ScoringSettings = scoring_settings):
        self._settings = settings

    @property
    def settings(self) -> ScoringSettings:
        return self._settings

    def compute_score(
        self,
        snapshot: FinancialSnapshot,
        as_of: Optional[date] = None,
    ) -> ScoreResult:
        as_of = as_of or date.today()
        settings = self._settings

        payment_history = compute_payment_history(snapshot, as_of, settings)
        utilization = compute_utilization(snapshot, settings)
        debt_to_income = compute_debt_to_income(snapshot, as_of, settings)
        history_length = compute_history_length(snapshot, as_of, settings)
        factors = [payment_history, utilization, debt_to_income, history_length]

        weighted_sum = sum(f.weighted_score for f in factors)
        final_score = to_final_score(weighted_sum, settings)

        return ScoreResult(
            final_score=final_score,
            health_level=health_level_for(final_score, settings),
            payment_history=payment_history,
            utilization=utilization,
            debt_to_income=debt_to_income,
            history_length=history_length,
            top_drivers=identify_top_drivers(factors),
            model=self.model,
            as_of=as_of,
        )


def compute_score(
    snapshot: FinancialSnapshot,
    as_of: Optional[date] = None,
    settings: ScoringSettings = scoring_settings,
) -> ScoreResult:
    """
    Score a snapshot with the weighted toy-score model.

    This is the main entry point for scoring. It never raises for a
    structurally valid snapshot: absent income, billing history or credit
    limit degrade to documented baselines.

    Args:
        snapshot: The profile to score
        as_of: Evaluation date (defaults to today)
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        ScoreResult with the final score, health level, factors and drivers
    """
    return WeightedScoreModel(settings).compute_score(snapshot, as_of)


def get_score_model(
    model: ScoringModel = ScoringModel.WEIGHTED,
    settings: ScoringSettings = scoring_settings,
) -> ScoreModel:
    """
    Get the scoring strategy for a model name.

    Args:
        model: Which strategy to use
        settings: Scoring settings for the weighted model

    Returns:
        A ScoreModel implementation
    """
    if model == ScoringModel.LEGACY:
        from .legacy import LegacyScoreModel

        return LegacyScoreModel()
    return WeightedScoreModel(settings)
