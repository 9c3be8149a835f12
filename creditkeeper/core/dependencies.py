"""Dependency wiring for the application layer."""

from functools import lru_cache

from creditkeeper.application.services import CreditService
from creditkeeper.core.config import get_settings
from creditkeeper.infrastructure.repositories import InMemoryProfileRepository
from creditkeeper.service.scoring.settings import get_loan_settings, get_scoring_settings


# Repository dependencies
@lru_cache
def get_profile_repository() -> InMemoryProfileRepository:
    """Get the process-wide ProfileRepository instance."""
    return InMemoryProfileRepository()


# Service dependencies
def get_credit_service() -> CreditService:
    """Get a CreditService instance with all dependencies."""
    return CreditService(
        profile_repository=get_profile_repository(),
        scoring_config=get_scoring_settings(),
        loan_config=get_loan_settings(),
        metrics_enabled=get_settings().metrics_enabled,
    )
