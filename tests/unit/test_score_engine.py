"""
Unit Tests for the CreditKeeper toy score engine.

These tests verify:
1. Each factor's breakpoints, baselines and explanations
2. Aggregation onto 300-850 and health levels
3. Top driver selection
4. Determinism, range and monotonicity properties
"""

import pytest

from creditkeeper.domain.entities import Deposit, DepositType
from creditkeeper.service.scoring.factors import (
    ACCOUNT_AGE,
    CREDIT_UTILIZATION,
    DEBT_TO_INCOME,
    PAYMENT_HISTORY,
    calculate_utilization,
    compute_debt_to_income,
    compute_history_length,
    compute_payment_history,
    compute_utilization,
    score_from_tiers,
)
from creditkeeper.service.scoring.models import (
    FactorScore,
    FactorStatus,
    HealthLevel,
    ScoringModel,
)
from creditkeeper.service.scoring.score_engine import (
    WeightedScoreModel,
    compute_score,
    get_score_model,
    health_level_for,
    identify_top_drivers,
    to_final_score,
)
from creditkeeper.service.scoring.settings import ScoringSettings
from creditkeeper.utils.date_utils import add_days


# =============================================================================
# Payment History Tests
# =============================================================================

class TestPaymentHistory:
    """Tests for compute_payment_history()."""

    def test_clean_history_gets_capped_bonus(self, make_snapshot, as_of):
        """Twelve on-time cycles score 100 (bonus clamped)."""
        factor = compute_payment_history(make_snapshot(), as_of)
        assert factor.score == 100
        assert factor.status == FactorStatus.GOOD
        assert factor.explanation == "All 12 payments made on time. Excellent!"

    def test_missed_payment_penalty(self, make_snapshot, as_of):
        """A missed cycle costs 25 and voids the recent on-time bonus."""
        factor = compute_payment_history(make_snapshot(missed=[11]), as_of)
        assert factor.score == 75
        assert factor.status == FactorStatus.BAD
        assert factor.explanation.startswith("1 missed payment in last 12 months")

    def test_old_late_payment_keeps_bonus(self, make_snapshot, as_of):
        """A late cycle outside the last 6 costs 10 but keeps the +5 bonus."""
        factor = compute_payment_history(make_snapshot(late=[0]), as_of)
        assert factor.score == 95
        assert factor.status == FactorStatus.WARNING

    def test_recent_late_payment_loses_bonus(self, make_snapshot, as_of):
        factor = compute_payment_history(make_snapshot(late=[10]), as_of)
        assert factor.score == 90

    def test_short_history_gets_no_bonus(self, make_snapshot, as_of):
        """Fewer than 6 cycles never earn the bonus."""
        factor = compute_payment_history(make_snapshot(num_cycles=4), as_of)
        assert factor.score == 100
        factor = compute_payment_history(make_snapshot(num_cycles=4, late=[0]), as_of)
        assert factor.score == 90

    def test_no_billing_history_baseline(self, make_snapshot, as_of):
        """An empty billing history is a new account: baseline 80, good."""
        factor = compute_payment_history(make_snapshot(num_cycles=0), as_of)
        assert factor.score == 80
        assert factor.status == FactorStatus.GOOD

    def test_score_floors_at_zero(self, make_snapshot, as_of):
        factor = compute_payment_history(make_snapshot(missed=range(12)), as_of)
        assert factor.score == 0

    def test_only_last_twelve_cycles_count(self, make_snapshot, as_of):
        """A miss older than the 12-cycle window is forgotten."""
        factor = compute_payment_history(make_snapshot(num_cycles=15, missed=[0]), as_of)
        assert factor.score == 100


# =============================================================================
# Utilization Tests
# =============================================================================

class TestUtilization:
    """Tests for compute_utilization()."""

    def test_24_percent_utilization_scores_90(self, make_snapshot):
        """Balance 1200 on a 5000 limit sits in the <=30% tier."""
        factor = compute_utilization(make_snapshot(balance=1200.0, credit_limit=5000.0))
        assert factor.score == 90
        assert factor.status == FactorStatus.GOOD
        assert factor.value == pytest.approx(24.0)

    def test_blends_current_and_recent_average(self, make_snapshot):
        """0.6 x current + 0.4 x 3-cycle average."""
        snapshot = make_snapshot(balance=3000.0, credit_limit=5000.0, statement_balance=500.0)
        current, average = calculate_utilization(snapshot)
        assert current == pytest.approx(60.0)
        assert average == pytest.approx(10.0)
        # 0.6 x 60 + 0.4 x 10 = 40 -> <=50 tier
        factor = compute_utilization(snapshot)
        assert factor.score == 70
        assert factor.status == FactorStatus.WARNING

    @pytest.mark.parametrize(
        "balance, expected",
        [
            (0.0, 100),
            (400.0, 100),
            (1400.0, 90),
            (2400.0, 70),
            (3700.0, 40),
            (4000.0, 10),
            (9000.0, 10),
        ],
    )
    def test_breakpoints(self, make_snapshot, balance, expected):
        factor = compute_utilization(make_snapshot(balance=balance, credit_limit=5000.0))
        assert factor.score == expected

    def test_no_cycles_uses_current_for_average(self, make_snapshot):
        snapshot = make_snapshot(balance=2500.0, num_cycles=0)
        current, average = calculate_utilization(snapshot)
        assert current == average == pytest.approx(50.0)

    @pytest.mark.parametrize("credit_limit", [0.0, None])
    def test_missing_limit_reports_zero_percent(self, make_snapshot, credit_limit):
        """A zero or absent limit is 0% utilization, flagged, never an error."""
        factor = compute_utilization(make_snapshot(credit_limit=credit_limit))
        assert factor.value == 0.0
        assert factor.score == 100
        assert factor.explanation.startswith("No credit limit reported")
        assert "limit unknown" in factor.details

    def test_higher_utilization_never_scores_higher(self, make_snapshot):
        scores = [
            compute_utilization(make_snapshot(balance=float(balance))).score
            for balance in range(0, 10001, 250)
        ]
        assert all(a >= b for a, b in zip(scores, scores[1:]))


# =============================================================================
# Debt-to-Income Tests
# =============================================================================

class TestDebtToIncome:
    """Tests for compute_debt_to_income()."""

    def test_low_dti_scores_100(self, make_snapshot, as_of):
        """Minimum due 36 on 5000 of paychecks is well under 10%."""
        factor = compute_debt_to_income(make_snapshot(), as_of)
        assert factor.score == 100
        assert factor.status == FactorStatus.GOOD
        assert factor.value == pytest.approx(36 / 5000 * 100)

    def test_only_recent_paychecks_count_as_income(self, make_snapshot, as_of):
        factor = compute_debt_to_income(make_snapshot(), as_of)
        assert "Monthly Income: $5000" in factor.details

    def test_future_paychecks_ignored(self, make_snapshot, as_of):
        """A paycheck dated after as_of has not arrived yet."""
        snapshot = make_snapshot()
        snapshot.income_source.deposits.append(
            Deposit("dep-future", 9000.0, add_days(as_of, 5), DepositType.PAYCHECK)
        )

        factor = compute_debt_to_income(snapshot, as_of)

        assert snapshot.monthly_paycheck_income(as_of) == 5000.0
        assert "Monthly Income: $5000" in factor.details

    @pytest.mark.parametrize(
        "monthly_income, expected_score, expected_status",
        [
            (400.0, 100, FactorStatus.GOOD),      # 0.09
            (240.0, 85, FactorStatus.GOOD),       # 0.15
            (120.0, 65, FactorStatus.WARNING),    # 0.30
            (80.0, 40, FactorStatus.BAD),         # 0.45
            (40.0, 15, FactorStatus.BAD),         # 0.90
        ],
    )
    def test_breakpoints(self, make_snapshot, as_of, monthly_income, expected_score, expected_status):
        factor = compute_debt_to_income(make_snapshot(monthly_income=monthly_income), as_of)
        assert factor.score == expected_score
        assert factor.status == expected_status

    def test_no_income_source_baseline(self, make_snapshot, as_of):
        factor = compute_debt_to_income(make_snapshot(monthly_income=None), as_of)
        assert factor.score == 60
        assert factor.status == FactorStatus.WARNING
        assert factor.explanation == "Income data unavailable. Using baseline score."

    def test_stale_income_baseline(self, make_snapshot, as_of):
        """Deposits exist but none in the trailing 30 days."""
        snapshot = make_snapshot()
        snapshot.income_source.deposits = snapshot.income_source.deposits[:1]
        factor = compute_debt_to_income(snapshot, as_of)
        assert factor.score == 60
        assert factor.explanation == "No recent income detected. Using baseline score."

    def test_no_billing_history_means_no_debt(self, make_snapshot, as_of):
        factor = compute_debt_to_income(make_snapshot(num_cycles=0), as_of)
        assert factor.value == 0.0
        assert factor.score == 100


# =============================================================================
# Account Age Tests
# =============================================================================

class TestHistoryLength:
    """Tests for compute_history_length()."""

    @pytest.mark.parametrize(
        "open_months, expected_score, expected_status",
        [
            (1, 30, FactorStatus.BAD),
            (4, 45, FactorStatus.WARNING),
            (8, 60, FactorStatus.WARNING),
            (18, 75, FactorStatus.GOOD),
            (30, 90, FactorStatus.GOOD),
            (72, 100, FactorStatus.GOOD),
        ],
    )
    def test_breakpoints(self, make_snapshot, as_of, open_months, expected_score, expected_status):
        factor = compute_history_length(make_snapshot(open_months=open_months), as_of)
        assert factor.score == expected_score
        assert factor.status == expected_status

    def test_months_use_30_day_months(self, make_snapshot, as_of):
        """913 days since opening is 30 whole 30-day months."""
        factor = compute_history_length(make_snapshot(open_months=30), as_of)
        assert factor.value == 30
        assert factor.explanation == "Account is 2 years old. Strong credit history."

    def test_future_open_date_is_zero_months(self, make_snapshot, as_of):
        factor = compute_history_length(make_snapshot(open_months=-2), as_of)
        assert factor.value == 0
        assert factor.score == 30


# =============================================================================
# Aggregation Tests
# =============================================================================

class TestAggregation:
    """Tests for to_final_score(), health_level_for() and tier lookup."""

    def test_weighted_sum_maps_onto_range(self):
        assert to_final_score(0) == 300
        assert to_final_score(100) == 850
        assert to_final_score(96) == 828

    def test_rounds_half_up(self):
        # 300 + 50.5 / 100 x 550 = 577.75 -> 578; 300 + 0.1 x 5.5 = 300.55 -> 301
        assert to_final_score(50.5) == 578
        assert to_final_score(0.1) == 301

    def test_clamps_out_of_range_sums(self):
        assert to_final_score(-20) == 300
        assert to_final_score(140) == 850

    @pytest.mark.parametrize(
        "score, expected",
        [
            (850, HealthLevel.HIGH),
            (700, HealthLevel.HIGH),
            (699, HealthLevel.MEDIUM),
            (640, HealthLevel.MEDIUM),
            (639, HealthLevel.LOW),
            (300, HealthLevel.LOW),
        ],
    )
    def test_health_levels(self, score, expected):
        assert health_level_for(score) == expected

    def test_tier_lookup_inclusive_and_exclusive(self):
        tiers = [(10.0, 100), (30.0, 90)]
        assert score_from_tiers(10, tiers, 5) == 100
        assert score_from_tiers(10, tiers, 5, inclusive=False) == 90
        assert score_from_tiers(31, tiers, 5) == 5


# =============================================================================
# Top Driver Tests
# =============================================================================

def _factor(name: str, score: int, weight: float, status: FactorStatus) -> FactorScore:
    return FactorScore(name=name, score=score, weight=weight, status=status, explanation="")


class TestTopDrivers:
    """Tests for identify_top_drivers()."""

    def test_positive_sorted_by_weighted_score(self):
        drivers = identify_top_drivers([
            _factor(ACCOUNT_AGE, 100, 0.1, FactorStatus.GOOD),
            _factor(CREDIT_UTILIZATION, 90, 0.3, FactorStatus.GOOD),
            _factor(PAYMENT_HISTORY, 100, 0.4, FactorStatus.GOOD),
        ])
        assert drivers.positive == [PAYMENT_HISTORY, CREDIT_UTILIZATION]
        assert drivers.negative == []

    def test_good_factor_below_80_is_not_positive(self):
        drivers = identify_top_drivers([
            _factor(ACCOUNT_AGE, 75, 0.1, FactorStatus.GOOD),
        ])
        assert drivers.positive == []

    def test_negative_sorted_weakest_first(self):
        drivers = identify_top_drivers([
            _factor(PAYMENT_HISTORY, 75, 0.4, FactorStatus.BAD),
            _factor(CREDIT_UTILIZATION, 30, 0.3, FactorStatus.BAD),
            _factor(DEBT_TO_INCOME, 60, 0.2, FactorStatus.WARNING),
        ])
        assert drivers.negative == [CREDIT_UTILIZATION, DEBT_TO_INCOME]

    def test_ties_keep_input_order(self):
        drivers = identify_top_drivers([
            _factor(DEBT_TO_INCOME, 100, 0.2, FactorStatus.GOOD),
            _factor(ACCOUNT_AGE, 100, 0.2, FactorStatus.GOOD),
        ])
        assert drivers.positive == [DEBT_TO_INCOME, ACCOUNT_AGE]


# =============================================================================
# Score Engine Tests
# =============================================================================

class TestComputeScore:
    """Tests for compute_score() and the weighted model."""

    def test_healthy_snapshot(self, healthy_snapshot, as_of):
        """24% utilization with clean history lands in the high band."""
        result = compute_score(healthy_snapshot, as_of)

        # 0.4 x 100 + 0.3 x 90 + 0.2 x 100 + 0.1 x 90 = 96
        assert result.final_score == 828
        assert result.health_level in (HealthLevel.MEDIUM, HealthLevel.HIGH)
        assert result.utilization.score == 90
        assert result.top_drivers.positive == [PAYMENT_HISTORY, CREDIT_UTILIZATION]
        assert result.top_drivers.negative == []
        assert result.model == ScoringModel.WEIGHTED
        assert result.as_of == as_of

    def test_factor_weights_sum_to_one(self, healthy_snapshot, as_of):
        result = compute_score(healthy_snapshot, as_of)
        assert sum(f.weight for f in result.factors) == pytest.approx(1.0)

    def test_deterministic(self, healthy_snapshot, as_of):
        first = compute_score(healthy_snapshot, as_of)
        second = compute_score(healthy_snapshot, as_of)
        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_worst_case_stays_in_range(self, make_snapshot, as_of):
        snapshot = make_snapshot(
            balance=50000.0,
            credit_limit=1000.0,
            open_months=1,
            missed=range(12),
            monthly_income=100.0,
        )
        result = compute_score(snapshot, as_of)
        assert 300 <= result.final_score <= 850
        assert result.health_level == HealthLevel.LOW
        assert PAYMENT_HISTORY in result.top_drivers.negative

    def test_missed_payments_never_raise_score(self, make_snapshot, as_of):
        scores = [
            compute_score(make_snapshot(missed=range(count)), as_of).final_score
            for count in range(13)
        ]
        assert all(a >= b for a, b in zip(scores, scores[1:]))

    def test_empty_profile_uses_baselines(self, make_snapshot, as_of):
        snapshot = make_snapshot(balance=0.0, credit_limit=None, num_cycles=0, monthly_income=None)
        result = compute_score(snapshot, as_of)
        assert result.payment_history.score == 80
        assert result.debt_to_income.score == 60
        assert DEBT_TO_INCOME in result.top_drivers.negative

    def test_custom_settings(self, healthy_snapshot, as_of):
        settings = ScoringSettings(
            weight_payment_history=0.25,
            weight_utilization=0.25,
            weight_debt_to_income=0.25,
            weight_history_length=0.25,
        )
        result = WeightedScoreModel(settings).compute_score(healthy_snapshot, as_of)
        # (100 + 90 + 100 + 90) / 4 = 95 -> 822.5 -> 823
        assert result.final_score == 823

    def test_to_dict_shape(self, healthy_snapshot, as_of):
        data = compute_score(healthy_snapshot, as_of).to_dict()
        assert set(data["factors"]) == {
            "payment_history", "utilization", "debt_to_income", "history_length",
        }
        assert data["health_level"] == "high"
        assert data["as_of"] == "2025-06-15"

    def test_get_score_model(self):
        assert get_score_model(ScoringModel.WEIGHTED).model == ScoringModel.WEIGHTED
        assert get_score_model(ScoringModel.LEGACY).model == ScoringModel.LEGACY
