"""
Record Ingestion

Raw account and transaction records (dicts from the backend API, or
already-built models) are turned into canonical models here. Anything
that cannot be read as a record is reported and dropped; nothing raises.
"""

from collections.abc import Iterable, Mapping
from typing import Any, Optional

from pydantic import ValidationError

from keutrack.audit import DiagnosticLogger
from keutrack.models.account import Account, Transaction, to_finite_decimal
from keutrack.models.audit import DiagnosticEventBuilder

_diagnostics = DiagnosticLogger(logger_name="keutrack.ledger")


def to_account(raw: Any, diagnostics: Optional[DiagnosticLogger] = None) -> Optional[Account]:
    """Read one account record, or None if it is not a usable account."""
    diagnostics = diagnostics or _diagnostics

    if isinstance(raw, Account):
        return raw
    if not isinstance(raw, Mapping):
        diagnostics.log(DiagnosticEventBuilder.invalid_account("not a record"))
        return None

    try:
        account = Account.model_validate(raw)
    except ValidationError as e:
        diagnostics.log(
            DiagnosticEventBuilder.invalid_account(f"{e.error_count()} invalid field(s)")
        )
        return None

    raw_balance = raw.get("balance")
    if raw_balance not in (None, "") and to_finite_decimal(raw_balance) is None:
        diagnostics.log(
            DiagnosticEventBuilder.invalid_opening_balance(account.id, account.name, raw_balance)
        )
    return account


def to_transaction(
    raw: Any,
    diagnostics: Optional[DiagnosticLogger] = None,
) -> Optional[Transaction]:
    """Read one transaction record, or None if it is not well-formed."""
    diagnostics = diagnostics or _diagnostics

    if isinstance(raw, Transaction):
        return raw
    if not isinstance(raw, Mapping):
        diagnostics.log(DiagnosticEventBuilder.transaction_skipped(None, "not a record"))
        return None

    try:
        return Transaction.model_validate(raw)
    except ValidationError:
        diagnostics.log(
            DiagnosticEventBuilder.transaction_skipped(
                str(raw.get("id")) if raw.get("id") is not None else None,
                "malformed record",
            )
        )
        return None


def is_record_sequence(value: Any) -> bool:
    """True for lists, tuples, generators; False for strings, mappings and scalars."""
    return isinstance(value, Iterable) and not isinstance(value, (str, bytes, Mapping))


def to_accounts(raws: Any, diagnostics: Optional[DiagnosticLogger] = None) -> list[Account]:
    """Read many account records, dropping malformed ones."""
    if not is_record_sequence(raws):
        return []
    accounts = (to_account(raw, diagnostics) for raw in raws)
    return [account for account in accounts if account is not None]


def to_transactions(
    raws: Any,
    diagnostics: Optional[DiagnosticLogger] = None,
) -> list[Transaction]:
    """Read many transaction records, dropping malformed ones."""
    if not is_record_sequence(raws):
        return []
    transactions = (to_transaction(raw, diagnostics) for raw in raws)
    return [transaction for transaction in transactions if transaction is not None]
