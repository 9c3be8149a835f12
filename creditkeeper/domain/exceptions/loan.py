"""Loan-related domain exceptions."""

from .base import DomainException


class InvalidLoanRequestException(DomainException):
    """Raised when loan terms fail boundary validation."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="INVALID_LOAN_REQUEST",
        )
