"""
Unit Tests for the legacy flat scoring model.

These tests verify:
1. Utilization-tier base scores
2. Fixed-delta projections and their timelines
3. Unsupported and unknown scenarios are rejected
"""

import pytest

from creditkeeper.domain.exceptions import InvalidScenarioException, InvalidScenarioRequestException
from creditkeeper.service.scoring.factors import CREDIT_UTILIZATION, PAYMENT_HISTORY
from creditkeeper.service.scoring.legacy import CREDIT_LIMIT, LegacyScoreModel, simulate_legacy
from creditkeeper.service.scoring.models import (
    HealthLevel,
    LoanScenario,
    LoanType,
    ScoringModel,
)
from creditkeeper.service.scoring.scenarios import MissedPayment, NewLoan, PayDown, Purchase
from creditkeeper.service.scoring.score_engine import get_score_model


class TestLegacyScore:
    """Tests for LegacyScoreModel.compute_score()."""

    @pytest.mark.parametrize(
        "balance, expected_score, expected_level",
        [
            (1200.0, 720, HealthLevel.HIGH),
            (2000.0, 680, HealthLevel.MEDIUM),
            (3000.0, 620, HealthLevel.LOW),
        ],
    )
    def test_utilization_tiers(self, make_snapshot, as_of, balance, expected_score, expected_level):
        result = LegacyScoreModel().compute_score(make_snapshot(balance=balance), as_of)

        assert result.final_score == expected_score
        assert result.health_level == expected_level
        assert result.model == ScoringModel.LEGACY

    def test_factor_layout(self, healthy_snapshot, as_of):
        result = LegacyScoreModel().compute_score(healthy_snapshot, as_of)

        assert result.utilization.score == 76
        assert result.utilization.weight == 1.0
        assert result.debt_to_income.name == CREDIT_LIMIT
        assert result.debt_to_income.explanation == "Your credit limit is $5,000."
        assert result.history_length.value == 24

    def test_to_dict_names_credit_limit_factor(self, healthy_snapshot, as_of):
        factors = LegacyScoreModel().compute_score(healthy_snapshot, as_of).to_dict()["factors"]

        assert factors["credit_limit"]["name"] == CREDIT_LIMIT
        assert "debt_to_income" not in factors

    def test_weighted_to_dict_keeps_debt_to_income(self, healthy_snapshot, as_of):
        result = get_score_model(ScoringModel.WEIGHTED).compute_score(healthy_snapshot, as_of)
        factors = result.to_dict()["factors"]

        assert "debt_to_income" in factors
        assert "credit_limit" not in factors

    def test_missing_limit_scores_as_zero_utilization(self, make_snapshot, as_of):
        result = LegacyScoreModel().compute_score(make_snapshot(credit_limit=None), as_of)

        assert result.final_score == 720
        assert result.debt_to_income.explanation == "No credit limit reported."

    def test_get_score_model(self):
        assert isinstance(get_score_model(ScoringModel.LEGACY), LegacyScoreModel)


class TestLegacySimulation:
    """Tests for simulate_legacy()."""

    def test_missed_payment(self, healthy_snapshot, as_of):
        result = simulate_legacy(healthy_snapshot, MissedPayment(), as_of)

        assert result.current_score == 720
        assert result.projected_score == 610
        assert result.factor_affected == PAYMENT_HISTORY
        timeline = result.recovery_timeline
        assert (timeline.days_30, timeline.days_90, timeline.days_180) == (625, 650, 680)
        assert result.current is None
        assert result.primary_factor_change is None

    def test_large_purchase(self, healthy_snapshot, as_of):
        """$1,500 is more than 20% of the limit and pushes utilization past 30%."""
        result = simulate_legacy(healthy_snapshot, Purchase(amount=1500.0), as_of)

        assert result.projected_score == 695
        assert result.score_delta == -25
        assert result.factor_affected == CREDIT_UTILIZATION
        assert result.explanation.startswith("Large purchase of $1500.00")
        timeline = result.recovery_timeline
        assert (timeline.days_30, timeline.days_90, timeline.days_180) == (700, 710, 720)

    def test_small_purchase(self, healthy_snapshot, as_of):
        result = simulate_legacy(healthy_snapshot, Purchase(amount=100.0), as_of)

        # 24% -> 26%: floor(-2 x 0.3)
        assert result.score_delta == -1
        assert result.explanation.startswith("Small increase in utilization")
        assert result.recovery_timeline is None

    def test_significant_pay_down(self, high_utilization_snapshot, as_of):
        result = simulate_legacy(high_utilization_snapshot, PayDown(amount=1000.0), as_of)

        assert result.current_score == 620
        assert result.score_delta == 33
        assert result.explanation.startswith("Significant payment of $1000.00")

    def test_purchase_without_limit_assumes_default(self, make_snapshot, as_of):
        snapshot = make_snapshot(credit_limit=None)

        result = simulate_legacy(snapshot, Purchase(amount=1500.0), as_of)

        assert result.score_delta == -25
        assert "54.0%" in result.explanation

    def test_new_loan_not_supported(self, healthy_snapshot, as_of):
        loan = LoanScenario(12000.0, LoanType.AUTO, 60, 6.0)

        with pytest.raises(InvalidScenarioException) as exc_info:
            simulate_legacy(healthy_snapshot, NewLoan(loan=loan), as_of)

        assert exc_info.value.scenario_type == "new_loan"

    def test_negative_pay_down_rejected(self, healthy_snapshot, as_of):
        with pytest.raises(InvalidScenarioRequestException):
            simulate_legacy(healthy_snapshot, PayDown(amount=-3000.0), as_of)

    def test_does_not_modify_snapshot(self, healthy_snapshot, as_of):
        before = healthy_snapshot.clone()

        simulate_legacy(healthy_snapshot, Purchase(amount=1500.0), as_of)

        assert healthy_snapshot == before
