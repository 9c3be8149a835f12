"""Data Transfer Objects for application layer."""

from .loan import LoanRequest
from .scenario import ScenarioRequest

__all__ = [
    "LoanRequest",
    "ScenarioRequest",
]
