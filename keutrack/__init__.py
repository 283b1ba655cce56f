"""
KeuTrack - Account Classification and Balance Engine

Bookkeeping core for micro-entities following SAK EMKM.

DESIGN PRINCIPLES:
1. Code first, name second, LAIN last
2. Never raise, degrade to a safe default
3. Every degradation is logged
4. normal balance always follows account type
5. Backend access is a swappable, caller-owned collaborator
"""

from keutrack.classification import (
    ClassificationService,
    category,
    classify,
    infer_category,
    is_credit_normal,
)
from keutrack.ledger import BalanceCalculator, compute_balance, compute_trial_balance
from keutrack.models import (
    Account,
    AccountBalance,
    AccountCategory,
    AccountType,
    Classification,
    NormalBalance,
    Transaction,
)

__version__ = "1.0.0"

__all__ = [
    "Account",
    "AccountBalance",
    "AccountCategory",
    "AccountType",
    "BalanceCalculator",
    "Classification",
    "ClassificationService",
    "NormalBalance",
    "Transaction",
    "category",
    "classify",
    "compute_balance",
    "compute_trial_balance",
    "infer_category",
    "is_credit_normal",
]
