"""
Diagnostic Event Models

The classification and balance engine never raises. When it has to degrade
(empty name, unknown vocabulary, invalid money values) it records WHY as a
diagnostic event instead.

DESIGN DECISION: Diagnostic events are observational only. Emitting one
must never change what the engine returns.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator

DESCRIPTION_MAX_LENGTH = 500


class DiagnosticEventType(str, Enum):
    """Types of events emitted by the engine and the API client."""
    # Classification
    ACCOUNT_CLASSIFIED = "account_classified"
    ACCOUNT_NAME_EMPTY = "account_name_empty"
    ACCOUNT_TYPE_UNKNOWN = "account_type_unknown"

    # Balance folding
    INVALID_ACCOUNT = "invalid_account"
    INVALID_OPENING_BALANCE = "invalid_opening_balance"
    INVALID_TRANSACTIONS = "invalid_transactions"
    TRANSACTION_SKIPPED = "transaction_skipped"
    INVALID_FINAL_BALANCE = "invalid_final_balance"

    # API client
    API_RETRY = "api_retry"
    API_REQUEST_FAILED = "api_request_failed"


class DiagnosticSeverity(str, Enum):
    """Severity level for diagnostic events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class DiagnosticEvent(BaseModel):
    """A single diagnostic event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )
    event_type: DiagnosticEventType
    severity: DiagnosticSeverity = DiagnosticSeverity.INFO

    # What the event is about
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'account', 'transaction', 'request')"
    )
    entity_id: Optional[str] = None

    description: str = Field(
        ...,
        max_length=DESCRIPTION_MAX_LENGTH,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    @field_validator('description', mode='before')
    @classmethod
    def truncate_description(cls, v: Any) -> Any:
        """Long free text is cut so that an event can always be built."""
        if isinstance(v, str) and len(v) > DESCRIPTION_MAX_LENGTH:
            return v[: DESCRIPTION_MAX_LENGTH - 3] + "..."
        return v

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
        }


class DiagnosticEventBuilder:
    """
    Helper class to build diagnostic events with common patterns.

    Usage:
        event = DiagnosticEventBuilder.account_name_empty(code="1101")
        event = DiagnosticEventBuilder.transaction_skipped("t-9", "zero amount")
    """

    @staticmethod
    def account_classified(
        name: str,
        code: Optional[str],
        account_type: str,
        category: str,
        source: str,
    ) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.ACCOUNT_CLASSIFIED,
            severity=DiagnosticSeverity.DEBUG,
            entity_type="account",
            description=f"Account classified by {source}: {account_type}",
            details={
                "name": name,
                "code": code,
                "type": account_type,
                "category": category,
                "source": source,
            },
        )

    @staticmethod
    def account_name_empty(code: Optional[str]) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.ACCOUNT_NAME_EMPTY,
            severity=DiagnosticSeverity.WARNING,
            entity_type="account",
            description="Account name is empty",
            details={"code": code},
        )

    @staticmethod
    def account_type_unknown(name: str, code: Optional[str]) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.ACCOUNT_TYPE_UNKNOWN,
            severity=DiagnosticSeverity.WARNING,
            entity_type="account",
            description="Unknown account type, defaulting to LAIN",
            details={"name": name, "code": code},
        )

    @staticmethod
    def invalid_account(reason: str) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.INVALID_ACCOUNT,
            severity=DiagnosticSeverity.WARNING,
            entity_type="account",
            description=f"Invalid account data: {reason}",
        )

    @staticmethod
    def invalid_opening_balance(
        account_id: Optional[str],
        name: str,
        raw_balance: Any,
    ) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.INVALID_OPENING_BALANCE,
            severity=DiagnosticSeverity.WARNING,
            entity_type="account",
            entity_id=account_id,
            description="Invalid opening balance, using 0",
            details={"name": name, "raw_balance": repr(raw_balance)},
        )

    @staticmethod
    def invalid_transactions(account_id: Optional[str]) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.INVALID_TRANSACTIONS,
            severity=DiagnosticSeverity.WARNING,
            entity_type="account",
            entity_id=account_id,
            description="Transactions are not a sequence, using opening balance",
        )

    @staticmethod
    def transaction_skipped(
        transaction_id: Optional[str],
        reason: str,
    ) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.TRANSACTION_SKIPPED,
            severity=DiagnosticSeverity.DEBUG,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction skipped: {reason}",
        )

    @staticmethod
    def invalid_final_balance(account_id: Optional[str], name: str) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.INVALID_FINAL_BALANCE,
            severity=DiagnosticSeverity.ERROR,
            entity_type="account",
            entity_id=account_id,
            description="Final balance is not finite, using 0",
            details={"name": name},
        )

    @staticmethod
    def api_retry(
        method: str,
        endpoint: str,
        attempt: int,
        error: str,
    ) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.API_RETRY,
            severity=DiagnosticSeverity.WARNING,
            entity_type="request",
            entity_id=f"{method} {endpoint}",
            description=f"Retrying {method} {endpoint} after attempt {attempt}",
            details={"attempt": attempt, "error": error},
        )

    @staticmethod
    def api_request_failed(
        method: str,
        endpoint: str,
        error: str,
        status_code: Optional[int] = None,
    ) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.API_REQUEST_FAILED,
            severity=DiagnosticSeverity.ERROR,
            entity_type="request",
            entity_id=f"{method} {endpoint}",
            description=f"API call failed for {endpoint}",
            details={"error": error, "status_code": status_code},
        )
