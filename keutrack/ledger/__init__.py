"""Ledger balance computation package."""

from keutrack.ledger.balance import (
    BalanceCalculator,
    compute_balance,
    compute_trial_balance,
)
from keutrack.ledger.ingest import (
    to_account,
    to_accounts,
    to_transaction,
    to_transactions,
)

__all__ = [
    "BalanceCalculator",
    "compute_balance",
    "compute_trial_balance",
    "to_account",
    "to_accounts",
    "to_transaction",
    "to_transactions",
]
