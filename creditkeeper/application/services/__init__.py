"""Application services (use cases)."""

from .credit_service import CreditService

__all__ = [
    "CreditService",
]
