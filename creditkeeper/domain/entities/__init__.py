"""Domain Entities - Core business objects."""

from .snapshot import (
    BillingCycle,
    CreditAccount,
    Deposit,
    DepositType,
    FinancialSnapshot,
    IncomeSource,
    Payment,
    PaymentSource,
    Transaction,
)

__all__ = [
    "BillingCycle",
    "CreditAccount",
    "Deposit",
    "DepositType",
    "FinancialSnapshot",
    "IncomeSource",
    "Payment",
    "PaymentSource",
    "Transaction",
]
