"""
Abstract Ledger Storage Interface

DESIGN DECISION: We define an abstract interface for the operations the
rest of the system needs from the backend. This allows us to:
1. Swap the HTTP backend for a local store later
2. Use fakes in tests
3. Keep classification and balance logic decoupled from I/O

The interface is intentionally simple - plain CRUD on accounts and
transactions. Reports stay on the concrete client.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Optional, Union

from keutrack.models.account import Account, Transaction


class LedgerStorageInterface(ABC):
    """
    Abstract interface for account and transaction storage.

    Any backend implementation must implement these methods.
    """

    @abstractmethod
    async def list_accounts(self) -> list[Account]:
        """
        Retrieve all accounts.

        Returns:
            Well-formed accounts; malformed records are dropped
        """
        pass

    @abstractmethod
    async def create_account(self, account: Union[Account, Mapping[str, Any]]) -> Any:
        """
        Create a new account.

        Raises:
            ApiError: If the backend rejects the account
        """
        pass

    @abstractmethod
    async def update_account(
        self,
        account_id: str,
        account: Union[Account, Mapping[str, Any]],
    ) -> Any:
        """
        Update an existing account.

        Raises:
            NotFoundError: If the account doesn't exist
        """
        pass

    @abstractmethod
    async def delete_account(self, account_id: str) -> Any:
        """Delete an account by ID."""
        pass

    @abstractmethod
    async def list_transactions(self) -> list[Transaction]:
        """
        Retrieve all transactions.

        Returns:
            Well-formed transactions; malformed records are dropped
        """
        pass

    @abstractmethod
    async def create_transaction(
        self,
        transaction: Union[Transaction, Mapping[str, Any]],
    ) -> Any:
        """Create a new transaction."""
        pass

    @abstractmethod
    async def update_transaction(
        self,
        transaction_id: str,
        transaction: Union[Transaction, Mapping[str, Any]],
    ) -> Any:
        """
        Update an existing transaction.

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        pass

    @abstractmethod
    async def delete_transaction(self, transaction_id: str) -> Any:
        """Delete a transaction by ID."""
        pass


class ApiError(Exception):
    """Base exception for backend API operations."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class NotFoundError(ApiError):
    """Entity not found on the backend."""
    pass


class AuthenticationError(ApiError):
    """Missing, invalid or insufficient credentials."""
    pass


class TransientApiError(ApiError):
    """Failure that may succeed on retry (timeouts, 5xx, 429, connection errors)."""
    pass


class ApiUnavailableError(ApiError):
    """Backend still failing after all retries."""
    pass
