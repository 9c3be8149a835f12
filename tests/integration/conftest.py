"""
Fixtures for integration tests.

Provides:
- An in-memory profile repository
- A CreditService wired to it with metrics enabled
- Stored profiles covering clean, high-utilization, income-less and
  brand-new accounts
"""

from typing import Callable

import pytest

from creditkeeper.application.dto import LoanRequest, ScenarioRequest
from creditkeeper.application.services import CreditService
from creditkeeper.domain.entities import FinancialSnapshot
from creditkeeper.infrastructure.repositories import InMemoryProfileRepository
from creditkeeper.service.scoring.settings import LoanSettings, ScoringSettings


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def profile_repository() -> InMemoryProfileRepository:
    return InMemoryProfileRepository()


@pytest.fixture
def credit_service(profile_repository: InMemoryProfileRepository) -> CreditService:
    """CreditService with default settings and metrics recording enabled."""
    return CreditService(
        profile_repository=profile_repository,
        scoring_config=ScoringSettings(),
        loan_config=LoanSettings(),
        metrics_enabled=True,
    )


@pytest.fixture
def seeded_service(
    credit_service: CreditService,
    make_snapshot: Callable[..., FinancialSnapshot],
) -> CreditService:
    """
    CreditService with four stored profiles:

    - healthy: 24% utilization, clean history, $5,000/month income
    - maxed: 65% utilization on a $3,000 limit
    - no_income: no checking account
    - brand_new: no billing history, 1-month-old account
    """
    credit_service.save_profile("healthy", make_snapshot())
    credit_service.save_profile("maxed", make_snapshot(balance=1950.0, credit_limit=3000.0))
    credit_service.save_profile("no_income", make_snapshot(monthly_income=None))
    credit_service.save_profile("brand_new", make_snapshot(num_cycles=0, open_months=1))
    return credit_service


# =============================================================================
# Request Fixtures
# =============================================================================

@pytest.fixture
def auto_loan_request() -> LoanRequest:
    """$12,000 auto loan at 6% over 60 months."""
    return LoanRequest(loan_amount=12000.0, loan_type="auto", term_months=60, apr=6.0)


@pytest.fixture
def missed_payment_request() -> ScenarioRequest:
    return ScenarioRequest.from_dict({"type": "missed_payment"})


@pytest.fixture
def new_loan_request() -> ScenarioRequest:
    return ScenarioRequest.from_dict(
        {
            "type": "new_loan",
            "loan": {
                "loan_amount": 12000,
                "loan_type": "auto",
                "term_months": 60,
                "apr": 6.0,
            },
        }
    )
