"""Domain Exceptions - Business rule violations and domain errors."""

from .base import DomainException
from .loan import InvalidLoanRequestException
from .profile import ProfileNotFoundException, UnknownArchetypeException
from .scenario import (
    InvalidScenarioException,
    InvalidScenarioRequestException,
)

__all__ = [
    "DomainException",
    "InvalidLoanRequestException",
    "ProfileNotFoundException",
    "UnknownArchetypeException",
    "InvalidScenarioException",
    "InvalidScenarioRequestException",
]
