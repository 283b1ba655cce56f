"""
Data Models Package

This package contains all Pydantic models used by KeuTrack.
Ledger records are read into these schemas before any computation.
"""

from keutrack.models.account import (
    Account,
    AccountBalance,
    Transaction,
    to_finite_decimal,
)
from keutrack.models.classification import (
    CREDIT_NORMAL_LABELS,
    NORMAL_BALANCE_BY_TYPE,
    UNCLASSIFIED,
    AccountCategory,
    AccountType,
    Classification,
    NormalBalance,
)
from keutrack.models.audit import (
    DiagnosticEvent,
    DiagnosticEventBuilder,
    DiagnosticEventType,
    DiagnosticSeverity,
)

__all__ = [
    # Ledger records
    "Account",
    "AccountBalance",
    "Transaction",
    "to_finite_decimal",
    # Classification
    "CREDIT_NORMAL_LABELS",
    "NORMAL_BALANCE_BY_TYPE",
    "UNCLASSIFIED",
    "AccountCategory",
    "AccountType",
    "Classification",
    "NormalBalance",
    # Diagnostics
    "DiagnosticEvent",
    "DiagnosticEventBuilder",
    "DiagnosticEventType",
    "DiagnosticSeverity",
]
