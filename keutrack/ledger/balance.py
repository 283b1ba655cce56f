"""
Balance Calculation

Folds ledger transactions into an account's final balance, signed by the
account's normal balance side:

    debit leg   → +amount on DEBIT-normal accounts, -amount on CREDIT-normal
    credit leg  → -amount on DEBIT-normal accounts, +amount on CREDIT-normal

GUARANTEES:
- Never raises; an invalid account yields 0
- Transactions without a usable amount are skipped, not rejected
- The result is always finite (a non-finite result is replaced by 0)
- Transaction order does not affect the result

This module does NOT check that debits equal credits across a set of
transactions. Each leg is attributed to its account independently.
"""

from decimal import Decimal, InvalidOperation, Overflow, localcontext
from typing import Any, Iterable, Optional

from keutrack.audit import DiagnosticLogger
from keutrack.classification import ClassificationService
from keutrack.ledger.ingest import is_record_sequence, to_account, to_transaction
from keutrack.models.account import Account, AccountBalance, Transaction
from keutrack.models.audit import DiagnosticEventBuilder
from keutrack.models.classification import Classification, NormalBalance

ZERO = Decimal("0")


class BalanceCalculator:
    """Computes account balances from opening balances and transactions."""

    def __init__(
        self,
        classifier: Optional[ClassificationService] = None,
        diagnostics: Optional[DiagnosticLogger] = None,
    ):
        self._diagnostics = diagnostics or DiagnosticLogger(logger_name="keutrack.ledger")
        self._classifier = classifier or ClassificationService(self._diagnostics)

    def compute(self, account: Any, transactions: Any) -> Decimal:
        """
        Final balance of one account.

        Args:
            account: Account model or raw account record
            transactions: Sequence of Transaction models or raw records

        Returns:
            The signed balance; 0 for a missing or invalid account
        """
        if account is None:
            self._diagnostics.log(DiagnosticEventBuilder.invalid_account("missing"))
            return ZERO

        parsed = to_account(account, self._diagnostics)
        if parsed is None:
            return ZERO

        classification = self._classifier.classify(parsed.name, parsed.code)

        if not is_record_sequence(transactions):
            self._diagnostics.log(DiagnosticEventBuilder.invalid_transactions(parsed.id))
            return parsed.balance

        return self._fold(parsed, classification, transactions)

    def compute_all(self, accounts: Any, transactions: Any) -> list[AccountBalance]:
        """
        Trial balance: one row per well-formed account, in input order.

        Transactions are read once and shared by every account's fold.
        """
        if not is_record_sequence(accounts):
            return []

        if is_record_sequence(transactions):
            parsed_transactions = [
                transaction
                for transaction in (to_transaction(raw, self._diagnostics) for raw in transactions)
                if transaction is not None
            ]
        else:
            self._diagnostics.log(DiagnosticEventBuilder.invalid_transactions(None))
            parsed_transactions = []

        rows = []
        for raw in accounts:
            account = to_account(raw, self._diagnostics)
            if account is None:
                continue
            classification = self._classifier.classify(account.name, account.code)
            rows.append(AccountBalance(
                account_id=account.id,
                name=account.name,
                code=account.code,
                classification=classification,
                balance=self._fold(account, classification, parsed_transactions),
            ))
        return rows

    def _fold(
        self,
        account: Account,
        classification: Classification,
        transactions: Iterable[Any],
    ) -> Decimal:
        balance = account.balance

        # Overflow becomes Infinity here instead of raising; caught below
        with localcontext() as ctx:
            ctx.traps[Overflow] = False
            ctx.traps[InvalidOperation] = False

            for raw in transactions:
                transaction = to_transaction(raw, self._diagnostics)
                if transaction is None:
                    continue
                if not transaction.has_amount:
                    self._diagnostics.log(
                        DiagnosticEventBuilder.transaction_skipped(transaction.id, "no amount")
                    )
                    continue
                balance = self._apply(balance, transaction, account.id, classification)

        if not balance.is_finite():
            self._diagnostics.log(
                DiagnosticEventBuilder.invalid_final_balance(account.id, account.name)
            )
            return ZERO
        return balance

    @staticmethod
    def _apply(
        balance: Decimal,
        transaction: Transaction,
        account_id: Optional[str],
        classification: Classification,
    ) -> Decimal:
        if account_id is None:
            return balance

        amount = transaction.amount
        debit_normal = classification.normal_balance == NormalBalance.DEBIT

        # Both legs apply if the same account sits on both sides
        if transaction.debit_account_id == account_id:
            balance = balance + amount if debit_normal else balance - amount
        if transaction.credit_account_id == account_id:
            balance = balance - amount if debit_normal else balance + amount
        return balance


_default_calculator = BalanceCalculator()


def compute_balance(account: Any, transactions: Any) -> Decimal:
    """Final balance of one account. Never raises."""
    return _default_calculator.compute(account, transactions)


def compute_trial_balance(accounts: Any, transactions: Any) -> list[AccountBalance]:
    """Balance of every well-formed account."""
    return _default_calculator.compute_all(accounts, transactions)
