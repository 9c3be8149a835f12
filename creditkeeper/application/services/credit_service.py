"""Credit service - orchestrates scoring, loan rating and what-if use cases."""

from datetime import date
from typing import List, Optional

import structlog

from creditkeeper.application.dto import LoanRequest, ScenarioRequest
from creditkeeper.core import metrics
from creditkeeper.domain.entities import FinancialSnapshot
from creditkeeper.domain.exceptions import (
    InvalidLoanRequestException,
    InvalidScenarioRequestException,
    ProfileNotFoundException,
    UnknownArchetypeException,
)
from creditkeeper.domain.interfaces import ProfileRepository
from creditkeeper.infrastructure.synthetic import ARCHETYPES, generate_profile
from creditkeeper.service.scoring import (
    LoanRating,
    ProjectionResult,
    ScoreResult,
    ScoringModel,
    get_score_model,
    rate_loan,
    simulate,
    simulate_legacy,
)
from creditkeeper.service.scoring.models import IncomeBasis
from creditkeeper.service.scoring.projector import resolve_monthly_income
from creditkeeper.service.scoring.settings import (
    LoanSettings,
    ScoringSettings,
    loan_settings,
    scoring_settings,
)

logger = structlog.get_logger(__name__)


class CreditService:
    """
    Application service for the credit education use cases.

    Looks profiles up in the repository and hands them to the pure scoring
    core. Validation failures are raised as domain exceptions before any
    scoring math runs.
    """

    def __init__(
        self,
        profile_repository: ProfileRepository,
        scoring_config: ScoringSettings = scoring_settings,
        loan_config: LoanSettings = loan_settings,
        metrics_enabled: bool = True,
    ):
        self._profile_repo = profile_repository
        self._scoring_config = scoring_config
        self._loan_config = loan_config
        self._metrics_enabled = metrics_enabled

    def save_profile(self, profile_id: str, snapshot: FinancialSnapshot) -> FinancialSnapshot:
        """Store a snapshot under a profile ID."""
        saved = self._profile_repo.put(profile_id, snapshot)
        logger.info(
            "profile_saved",
            profile_id=profile_id,
            billing_cycles=len(snapshot.billing_cycles),
            archetype=snapshot.archetype or None,
        )
        return saved

    def get_profile(self, profile_id: str) -> FinancialSnapshot:
        """
        Get a stored snapshot.

        Raises:
            ProfileNotFoundException: If no profile is stored under the ID
        """
        snapshot = self._profile_repo.get(profile_id)
        if snapshot is None:
            logger.warning("profile_not_found", profile_id=profile_id)
            raise ProfileNotFoundException(profile_id)
        return snapshot

    def list_profiles(self) -> List[str]:
        return self._profile_repo.list_ids()

    def get_score(
        self,
        profile_id: str,
        model: ScoringModel = ScoringModel.WEIGHTED,
        as_of: Optional[date] = None,
    ) -> ScoreResult:
        """
        Score a stored profile.

        Args:
            profile_id: The profile to score
            model: Which scoring strategy to use
            as_of: Evaluation date (defaults to today)

        Returns:
            ScoreResult for the profile

        Raises:
            ProfileNotFoundException: If the profile doesn't exist
        """
        snapshot = self.get_profile(profile_id)
        result = get_score_model(model, self._scoring_config).compute_score(snapshot, as_of)

        logger.info(
            "score_computed",
            profile_id=profile_id,
            model=model.value,
            final_score=result.final_score,
            health_level=result.health_level.value,
            negative_drivers=result.top_drivers.negative,
        )
        if self._metrics_enabled:
            metrics.record_score(model.value, result.health_level.value)

        return result

    def rate_loan(
        self,
        request: LoanRequest,
        profile_id: Optional[str] = None,
        as_of: Optional[date] = None,
    ) -> LoanRating:
        """
        Rate a hypothetical loan.

        With a profile, existing obligations come from its latest minimum due
        and income falls back to its observed paychecks. Without one, the
        borrower is treated as debt-free.

        Raises:
            InvalidLoanRequestException: If request validation fails
            ProfileNotFoundException: If the profile doesn't exist
        """
        errors = request.validate()
        if errors:
            if self._metrics_enabled:
                metrics.record_invalid_request("loan")
            raise InvalidLoanRequestException("; ".join(errors))

        loan = request.to_loan()
        as_of = as_of or date.today()

        if profile_id is not None:
            snapshot = self.get_profile(profile_id)
            income, income_basis = resolve_monthly_income(snapshot, loan, as_of, self._scoring_config)
            last_cycle = snapshot.last_cycle
            current_debt = last_cycle.minimum_due if last_cycle else 0.0
        elif loan.monthly_income is not None:
            income, income_basis = loan.monthly_income, IncomeBasis.STATED
            current_debt = 0.0
        else:
            income, income_basis = self._scoring_config.default_assumed_monthly_income, IncomeBasis.ASSUMED
            current_debt = 0.0

        rating = rate_loan(
            loan,
            current_monthly_debt=current_debt,
            monthly_income=income,
            settings=self._loan_config,
            income_assumed=income_basis == IncomeBasis.ASSUMED,
        )

        logger.info(
            "loan_rated",
            profile_id=profile_id,
            loan_type=loan.loan_type.value,
            loan_amount=loan.loan_amount,
            rating=rating.rating.value,
            monthly_payment=rating.monthly_payment,
            new_dti=rating.new_dti,
            income_basis=income_basis.value,
        )
        if self._metrics_enabled:
            metrics.record_loan_rating(
                rating.rating.value, loan.loan_type.value, rating.income_assumed
            )

        return rating

    def simulate(
        self,
        profile_id: str,
        request: ScenarioRequest,
        model: ScoringModel = ScoringModel.WEIGHTED,
        as_of: Optional[date] = None,
    ) -> ProjectionResult:
        """
        Project the effect of a what-if scenario on a stored profile.

        Args:
            profile_id: The profile to project from
            request: The scenario to apply
            model: Which scoring strategy to project with
            as_of: Evaluation date (defaults to today)

        Returns:
            ProjectionResult with current and projected scores

        Raises:
            InvalidScenarioRequestException: If request validation fails
            InvalidScenarioException: If the scenario type is unknown or the
                model cannot project it
            ProfileNotFoundException: If the profile doesn't exist
        """
        errors = request.validate()
        if errors:
            if self._metrics_enabled:
                metrics.record_invalid_request("scenario")
            raise InvalidScenarioRequestException("; ".join(errors))

        scenario = request.to_scenario()
        snapshot = self.get_profile(profile_id)

        log = logger.bind(
            profile_id=profile_id,
            scenario_type=scenario.type.value,
            model=model.value,
        )
        log.info("simulation_requested")

        with metrics.track_simulation_latency():
            if model == ScoringModel.LEGACY:
                result = simulate_legacy(snapshot, scenario, as_of)
            else:
                result = simulate(
                    snapshot,
                    scenario,
                    as_of,
                    settings=self._scoring_config,
                    loan_config=self._loan_config,
                )

        log.info(
            "simulation_completed",
            current_score=result.current_score,
            projected_score=result.projected_score,
            score_delta=result.score_delta,
            factor_affected=result.factor_affected,
            income_basis=result.income_basis.value if result.income_basis else None,
        )
        if self._metrics_enabled:
            metrics.record_simulation(model.value, scenario.type.value, result.score_delta)
            if result.loan_rating is not None:
                metrics.record_loan_rating(
                    result.loan_rating.rating.value,
                    scenario.loan.loan_type.value,
                    result.loan_rating.income_assumed,
                )

        return result

    def generate_profile(
        self,
        archetype: str,
        seed: int = 0,
        as_of: Optional[date] = None,
        profile_id: Optional[str] = None,
    ) -> FinancialSnapshot:
        """
        Generate a synthetic profile and store it.

        Args:
            archetype: excellent, healthy, risky or poor
            seed: Seed for the generator's random draws
            as_of: Date the generated history ends at (defaults to today)
            profile_id: ID to store under (defaults to the snapshot's own ID)

        Returns:
            The generated snapshot

        Raises:
            UnknownArchetypeException: If the archetype is not known
        """
        if archetype not in ARCHETYPES:
            raise UnknownArchetypeException(archetype)

        snapshot = generate_profile(archetype, seed=seed, as_of=as_of, settings=self._scoring_config)
        logger.info("profile_generated", archetype=archetype, seed=seed, profile_id=snapshot.id)

        return self.save_profile(profile_id or snapshot.id, snapshot)
