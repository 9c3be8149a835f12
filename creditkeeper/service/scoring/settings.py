"""
Scoring Settings for the CreditKeeper score engine.

This module contains all configurable parameters for the weighted toy score,
the loan affordability classifier and the what-if projector. Every implicit
fallback (missing credit limit, missing income) is a named setting here.

Environment variables use the SCORING_ and LOAN_ prefixes:
    SCORING_WEIGHT_PAYMENT_HISTORY=0.40
    SCORING_DEFAULT_ASSUMED_MONTHLY_INCOME=5000
    LOAN_DTI_HEALTHY_MAX=0.30

Usage:
    from creditkeeper.service.scoring.settings import scoring_settings

    # Use default settings (loaded from env)
    weight = scoring_settings.weight_utilization

    # Or create custom settings for testing
    custom = ScoringSettings(no_history_score=70)
"""

import json
import math
from functools import lru_cache
from typing import List, Tuple

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _validate_tiers(v: str) -> str:
    """Validate a JSON tier list of ``[upper_bound, score]`` pairs."""
    try:
        tiers = json.loads(v)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON: {e}")
    if not isinstance(tiers, list) or not tiers:
        raise ValueError("Tiers must be a non-empty list")
    previous = None
    for tier in tiers:
        if not isinstance(tier, list) or len(tier) != 2:
            raise ValueError("Each tier must be [upper_bound, score]")
        bound, score = tier
        if not isinstance(bound, (int, float)) or not isinstance(score, int):
            raise ValueError("Tier bound must be numeric and score an integer")
        if not 0 <= score <= 100:
            raise ValueError(f"Tier score out of range 0-100: {score}")
        if previous is not None and bound <= previous:
            raise ValueError(f"Tier bounds must be ascending: {bound} after {previous}")
        previous = bound
    return v


def _parse_tiers(v: str) -> List[Tuple[float, int]]:
    return [(float(bound), int(score)) for bound, score in json.loads(v)]


class ScoringSettings(BaseSettings):
    """
    Configurable parameters for the weighted toy score.

    All settings can be overridden via environment variables with SCORING_ prefix.
    Sub-scores are 0-100; the final score is mapped onto score_min..score_max.
    """

    model_config = SettingsConfigDict(
        env_prefix="SCORING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Factor Weights ===
    weight_payment_history: float = Field(default=0.40, ge=0.0, le=1.0)
    weight_utilization: float = Field(default=0.30, ge=0.0, le=1.0)
    weight_debt_to_income: float = Field(default=0.20, ge=0.0, le=1.0)
    weight_history_length: float = Field(default=0.10, ge=0.0, le=1.0)

    # === Score Range & Health Levels ===
    score_min: int = Field(default=300, description="Lowest reportable score")
    score_max: int = Field(default=850, description="Highest reportable score")
    health_high_threshold: int = Field(default=700)
    health_medium_threshold: int = Field(default=640)

    # === Payment History ===
    payment_history_window: int = Field(
        default=12,
        gt=0,
        description="Number of most recent billing cycles inspected",
    )
    on_time_bonus_window: int = Field(
        default=6,
        gt=0,
        description="Most recent cycles that must be on time (or not yet due) for the bonus",
    )
    missed_payment_penalty: int = Field(default=25, ge=0)
    late_payment_penalty: int = Field(default=10, ge=0)
    on_time_bonus: int = Field(default=5, ge=0)
    no_history_score: int = Field(
        default=80,
        ge=0,
        le=100,
        description="Baseline payment history score when no billing cycles exist",
    )

    # === Utilization ===
    utilization_average_cycles: int = Field(default=3, gt=0)
    utilization_current_weight: float = Field(default=0.6, ge=0.0, le=1.0)
    utilization_average_weight: float = Field(default=0.4, ge=0.0, le=1.0)
    utilization_tiers_json: str = Field(
        default="[[10,100],[30,90],[50,70],[75,40]]",
        description="Blended utilization %: [[upper_bound_inclusive, score], ...]",
    )
    utilization_floor_score: int = Field(default=10, ge=0, le=100)
    utilization_good_threshold: float = Field(default=30.0)
    utilization_warning_threshold: float = Field(default=50.0)
    unknown_limit_utilization: float = Field(
        default=0.0,
        ge=0.0,
        description="Utilization % reported when the credit limit is absent or zero",
    )

    # === Debt-to-Income ===
    income_window_days: int = Field(default=30, gt=0)
    no_income_score: int = Field(
        default=60,
        ge=0,
        le=100,
        description="Baseline DTI score when income data is unavailable",
    )
    dti_tiers_json: str = Field(
        default="[[0.10,100],[0.20,85],[0.35,65],[0.50,40]]",
        description="DTI ratio: [[upper_bound_inclusive, score], ...]",
    )
    dti_floor_score: int = Field(default=15, ge=0, le=100)
    dti_good_threshold: float = Field(default=0.20)
    dti_warning_threshold: float = Field(default=0.35)

    # === History Length ===
    days_per_month: int = Field(default=30, gt=0)
    history_tiers_json: str = Field(
        default="[[3,30],[6,45],[12,60],[24,75],[60,90]]",
        description="Account age in months: [[upper_bound_exclusive, score], ...]",
    )
    history_ceiling_score: int = Field(default=100, ge=0, le=100)
    history_bad_below_months: int = Field(default=3)
    history_good_from_months: int = Field(default=12)

    # === Defaults for missing data ===
    minimum_due_rate: float = Field(
        default=0.03,
        gt=0.0,
        description="Minimum due as a fraction of the statement balance",
    )
    default_assumed_monthly_income: float = Field(
        default=5000.0,
        gt=0.0,
        description="Monthly income assumed for loan ratings when none is stated or observed",
    )

    @field_validator("utilization_tiers_json", "dti_tiers_json", "history_tiers_json")
    @classmethod
    def validate_tiers_json(cls, v: str) -> str:
        """Validate that tiers JSON is parseable and well-formed."""
        return _validate_tiers(v)

    @model_validator(mode="after")
    def validate_weights(self) -> "ScoringSettings":
        """Factor weights must sum to 1.0."""
        total = (
            self.weight_payment_history
            + self.weight_utilization
            + self.weight_debt_to_income
            + self.weight_history_length
        )
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(f"Factor weights must sum to 1.0, got {total}")
        if self.score_min >= self.score_max:
            raise ValueError("score_min must be below score_max")
        return self

    @property
    def utilization_tiers(self) -> List[Tuple[float, int]]:
        return _parse_tiers(self.utilization_tiers_json)

    @property
    def dti_tiers(self) -> List[Tuple[float, int]]:
        return _parse_tiers(self.dti_tiers_json)

    @property
    def history_tiers(self) -> List[Tuple[float, int]]:
        return _parse_tiers(self.history_tiers_json)

    @property
    def score_span(self) -> int:
        """Width of the reportable score range."""
        return self.score_max - self.score_min


class LoanSettings(BaseSettings):
    """
    Thresholds for the loan reasonableness heuristic.

    All settings can be overridden via environment variables with LOAN_ prefix.
    Ratios are fractions (0.30 = 30%); APR values are percentages.
    """

    model_config = SettingsConfigDict(
        env_prefix="LOAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    dti_healthy_max: float = Field(default=0.30, gt=0.0)
    dti_moderate_max: float = Field(default=0.45, gt=0.0)
    apr_healthy_max: float = Field(default=12.0, ge=0.0)
    apr_expensive_max: float = Field(default=25.0, ge=0.0)
    lti_normal_max: float = Field(default=0.50, gt=0.0)
    lti_aggressive_max: float = Field(default=1.00, gt=0.0)

    # === Suggestions ===
    target_dti: float = Field(
        default=0.30,
        gt=0.0,
        description="DTI that suggested payments and principals aim to restore",
    )
    term_extension_months: int = Field(default=12, gt=0)
    term_extension_below_months: int = Field(
        default=60,
        gt=0,
        description="Suggest a longer term only for loans shorter than this",
    )
    large_loan_income_multiple: float = Field(
        default=6.0,
        gt=0.0,
        description="Loans above this multiple of monthly income suggest a larger down payment",
    )

    @model_validator(mode="after")
    def validate_ordering(self) -> "LoanSettings":
        """Each dimension's middle tier must sit above its healthy tier."""
        if self.dti_moderate_max < self.dti_healthy_max:
            raise ValueError("dti_moderate_max must be >= dti_healthy_max")
        if self.apr_expensive_max < self.apr_healthy_max:
            raise ValueError("apr_expensive_max must be >= apr_healthy_max")
        if self.lti_aggressive_max < self.lti_normal_max:
            raise ValueError("lti_aggressive_max must be >= lti_normal_max")
        return self


@lru_cache
def get_scoring_settings() -> ScoringSettings:
    """Get cached scoring settings instance."""
    return ScoringSettings()


@lru_cache
def get_loan_settings() -> LoanSettings:
    """Get cached loan settings instance."""
    return LoanSettings()


scoring_settings = get_scoring_settings()
loan_settings = get_loan_settings()
