"""
KeuTrack Backend API Client

DESIGN DECISION: The client is an explicit object owned by the caller.
It carries its own configuration (ApiSettings) and its own connectivity
status; there is no module-level singleton. Build one per backend and
pass it to whoever needs it.

This client handles:
1. Attaching the bearer token after login
2. Retrying transient failures with exponential backoff and jitter
3. Enforcing the per-request timeout
4. Sharing one in-flight request among concurrent identical reads
5. Reading listed records into canonical Account/Transaction models

Classification and balance computation never go through here; they run
on the records this client returns.
"""

import asyncio
from collections.abc import Mapping
from enum import Enum
from typing import Any, Optional, Union

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from keutrack.audit import DiagnosticLogger
from keutrack.config import ApiSettings, get_settings
from keutrack.ledger.ingest import to_accounts, to_transactions
from keutrack.models.account import Account, Transaction
from keutrack.models.audit import DiagnosticEventBuilder
from keutrack.services.api.interface import (
    ApiError,
    ApiUnavailableError,
    AuthenticationError,
    LedgerStorageInterface,
    NotFoundError,
    TransientApiError,
)


class ConnectionStatus(str, Enum):
    """Last known reachability of the backend."""
    UNKNOWN = "unknown"
    ONLINE = "online"
    OFFLINE = "offline"


def _records(payload: Any) -> list:
    """Record list from a bare JSON array or a {"data": [...]} envelope."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, Mapping) and isinstance(payload.get("data"), list):
        return payload["data"]
    return []


def _money(value: Any) -> Optional[float]:
    return float(value) if value is not None else None


class KeuTrackClient(LedgerStorageInterface):
    """
    Async HTTP client for the KeuTrack backend.

    Usage:
        async with KeuTrackClient(ApiSettings(base_url=...)) as client:
            await client.login("owner", "secret")
            accounts = await client.list_accounts()
    """

    def __init__(
        self,
        settings: Optional[ApiSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        diagnostics: Optional[DiagnosticLogger] = None,
    ):
        """
        Initialize the client.

        Args:
            settings: Connection and retry policy. Defaults to environment settings.
            transport: httpx transport override (tests use httpx.MockTransport).
            diagnostics: Logger for retry and failure events.
        """
        self._settings = settings or get_settings().api
        self._diagnostics = diagnostics or DiagnosticLogger(logger_name="keutrack.api")
        self._token: Optional[str] = self._settings.auth_token
        self._status = ConnectionStatus.UNKNOWN
        self._last_error: Optional[str] = None
        self._inflight: dict[str, asyncio.Future] = {}
        self._client = httpx.AsyncClient(
            base_url=self._settings.base_url,
            timeout=self._settings.timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    # ==================== LIFECYCLE ====================

    async def __aenter__(self) -> "KeuTrackClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def settings(self) -> ApiSettings:
        return self._settings

    @property
    def status(self) -> ConnectionStatus:
        return self._status

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    # ==================== TRANSPORT ====================

    async def _request(
        self,
        method: str,
        endpoint: str,
        payload: Optional[dict] = None,
    ) -> Any:
        """Send a request with retries; concurrent identical GETs share one call."""
        if method != "GET":
            return await self._send_with_retry(method, endpoint, payload)

        future = self._inflight.get(endpoint)
        if future is None:
            future = asyncio.ensure_future(self._send_with_retry(method, endpoint, None))
            self._inflight[endpoint] = future

            def _forget(done: asyncio.Future) -> None:
                if self._inflight.get(endpoint) is done:
                    del self._inflight[endpoint]

            future.add_done_callback(_forget)
        return await asyncio.shield(future)

    async def _send_with_retry(
        self,
        method: str,
        endpoint: str,
        payload: Optional[dict],
    ) -> Any:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._settings.max_retries),
            wait=wait_exponential_jitter(
                initial=self._settings.base_delay,
                max=self._settings.max_delay,
                jitter=self._settings.jitter,
            ),
            retry=retry_if_exception_type(TransientApiError),
            before_sleep=self._log_retry,
            reraise=True,
        )
        try:
            return await retrying(self._send_once, method, endpoint, payload)
        except TransientApiError as e:
            self._last_error = str(e)
            self._diagnostics.log(
                DiagnosticEventBuilder.api_request_failed(method, endpoint, str(e), e.status_code)
            )
            raise ApiUnavailableError(
                f"{method} {endpoint} failed after {self._settings.max_retries} attempts: {e}",
                status_code=e.status_code,
            ) from e
        except ApiError as e:
            self._last_error = str(e)
            self._diagnostics.log(
                DiagnosticEventBuilder.api_request_failed(method, endpoint, str(e), e.status_code)
            )
            raise

    async def _send_once(
        self,
        method: str,
        endpoint: str,
        payload: Optional[dict],
    ) -> Any:
        headers = {}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        try:
            response = await self._client.request(method, endpoint, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            self._status = ConnectionStatus.OFFLINE
            raise TransientApiError(f"Request timed out: {endpoint}") from e
        except httpx.TransportError as e:
            self._status = ConnectionStatus.OFFLINE
            raise TransientApiError(f"Could not reach backend: {e}") from e

        self._status = ConnectionStatus.ONLINE

        if response.status_code >= 400:
            message = self._error_message(response)
            status = response.status_code
            if status >= 500 or status == 429:
                raise TransientApiError(message, status_code=status)
            if status in (401, 403):
                raise AuthenticationError(message, status_code=status)
            if status == 404:
                raise NotFoundError(message, status_code=status)
            raise ApiError(message, status_code=status)

        self._last_error = None
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(
                f"Invalid JSON from {endpoint}", status_code=response.status_code
            ) from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """The backend's `error` field, or a generic HTTP status message."""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, Mapping) and body.get("error"):
            return str(body["error"])
        return f"HTTP error! status: {response.status_code}"

    def _log_retry(self, retry_state: RetryCallState) -> None:
        method, endpoint = retry_state.args[0], retry_state.args[1]
        error = retry_state.outcome.exception() if retry_state.outcome else None
        self._diagnostics.log(
            DiagnosticEventBuilder.api_retry(
                method, endpoint, retry_state.attempt_number, str(error)
            )
        )

    # ==================== HEALTH & USERS ====================

    async def health_check(self) -> Any:
        """Check that the backend is reachable."""
        return await self._request("GET", "/health")

    async def login(self, username: str, password: str) -> Any:
        """Log in and attach the returned token to later requests."""
        result = await self._request(
            "POST", "/users/login", {"username": username, "password": password}
        )
        if isinstance(result, Mapping) and result.get("token"):
            self._token = str(result["token"])
        return result

    def logout(self) -> None:
        """Forget the bearer token."""
        self._token = None

    async def register(self, username: str, email: str, password: str) -> Any:
        return await self._request(
            "POST",
            "/users/register",
            {"username": username, "email": email, "password": password},
        )

    # ==================== ACCOUNTS ====================

    async def list_accounts(self) -> list[Account]:
        payload = await self._request("GET", "/accounts")
        return to_accounts(_records(payload), self._diagnostics)

    async def create_account(self, account: Union[Account, Mapping[str, Any]]) -> Any:
        account = account if isinstance(account, Account) else Account.model_validate(account)
        return await self._request("POST", "/accounts", {
            "name": account.name,
            "balance": _money(account.balance),
            "code": account.code,
            "category": account.category,
        })

    async def add_account(self, account: Union[Account, Mapping[str, Any]]) -> Any:
        """Alias for create_account."""
        return await self.create_account(account)

    async def update_account(
        self,
        account_id: str,
        account: Union[Account, Mapping[str, Any]],
    ) -> Any:
        account = account if isinstance(account, Account) else Account.model_validate(account)
        return await self._request("PUT", f"/accounts/{account_id}", {
            "name": account.name,
            "balance": _money(account.balance),
            "category": account.category,
        })

    async def delete_account(self, account_id: str) -> Any:
        return await self._request("DELETE", f"/accounts/{account_id}")

    async def get_default_accounts(self) -> list[Account]:
        """Template chart of accounts offered to new users."""
        payload = await self._request("GET", "/default-accounts")
        return to_accounts(_records(payload), self._diagnostics)

    # ==================== TRANSACTIONS ====================

    async def list_transactions(self) -> list[Transaction]:
        payload = await self._request("GET", "/transactions")
        return to_transactions(_records(payload), self._diagnostics)

    @staticmethod
    def _transaction_payload(transaction: Union[Transaction, Mapping[str, Any]]) -> dict:
        if not isinstance(transaction, Transaction):
            transaction = Transaction.model_validate(transaction)
        return {
            "debit_account_id": transaction.debit_account_id,
            "credit_account_id": transaction.credit_account_id,
            "amount": _money(transaction.amount),
            "description": transaction.description,
            "transaction_date": (
                transaction.transaction_date.isoformat()
                if transaction.transaction_date
                else None
            ),
        }

    async def create_transaction(
        self,
        transaction: Union[Transaction, Mapping[str, Any]],
    ) -> Any:
        return await self._request(
            "POST", "/transactions", self._transaction_payload(transaction)
        )

    async def add_transaction(
        self,
        transaction: Union[Transaction, Mapping[str, Any]],
    ) -> Any:
        """Alias for create_transaction."""
        return await self.create_transaction(transaction)

    async def update_transaction(
        self,
        transaction_id: str,
        transaction: Union[Transaction, Mapping[str, Any]],
    ) -> Any:
        return await self._request(
            "PUT", f"/transactions/{transaction_id}", self._transaction_payload(transaction)
        )

    async def delete_transaction(self, transaction_id: str) -> Any:
        return await self._request("DELETE", f"/transactions/{transaction_id}")

    # ==================== REPORTS ====================

    async def get_general_journal(self) -> Any:
        return await self._request("GET", "/reports/general-journal")

    async def get_ledger(self) -> Any:
        """Ledger entries (Buku Besar)."""
        return await self._request("GET", "/reports/ledger")

    async def get_trial_balance(self) -> Any:
        """Trial balance (Neraca Saldo) as computed by the backend."""
        return await self._request("GET", "/reports/trial-balance")

    async def get_income_statement(self) -> Any:
        return await self._request("GET", "/reports/income-statement")

    async def get_balance_sheet(self) -> Any:
        return await self._request("GET", "/reports/balance-sheet")
