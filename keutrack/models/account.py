"""
Ledger Record Models

Accounts and transactions are owned by the backend. These models are the
canonical shape the rest of the package reads them in.

DESIGN DECISION: Field-name variants sent by different backend versions
(credit_account_id / creditAccountId, amount / nominal, date /
transaction_date) are resolved HERE, once, when a record is built.
Nothing downstream checks for alternate spellings.

Money values that are not finite numbers never raise: an opening balance
becomes zero and a transaction amount becomes "no amount".
"""

from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from keutrack.models.classification import Classification, NormalBalance


def to_finite_decimal(value: Any) -> Optional[Decimal]:
    """
    Convert a raw money value to a finite Decimal.

    Accepts ints, floats, Decimals and numeric strings. Returns None for
    anything missing, malformed, NaN or infinite.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, Decimal):
            amount = value
        elif isinstance(value, (int, float)):
            amount = Decimal(str(value))
        elif isinstance(value, str):
            text = value.strip()
            if not text:
                return None
            amount = Decimal(text)
        else:
            return None
    except (InvalidOperation, ValueError):
        return None
    return amount if amount.is_finite() else None


def _to_identifier(value: Any) -> Optional[str]:
    """
    Identifiers are opaque; numeric and UUID ids compare as strings.

    An id of any other type is dropped (None) rather than rejecting the
    record; a leg with no id simply matches no account.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, (str, int, float, Decimal, UUID)):
        text = str(value).strip()
        return text or None
    return None


def _to_text(value: Any) -> Optional[str]:
    """Free text; scalars are rendered as strings, anything else is dropped."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (str, int, float, Decimal)):
        return str(value).strip() or None
    return None


def _first_present(data: dict, *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


class Account(BaseModel):
    """A ledger account as stored by the backend."""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True, extra="ignore")

    id: Optional[str] = Field(
        default=None,
        description="Opaque account identifier"
    )
    name: str = Field(
        ...,
        min_length=1,
        description="Account name (required)"
    )
    code: Optional[str] = Field(
        default=None,
        description="SAK EMKM account code, digits"
    )
    balance: Decimal = Field(
        default=Decimal("0"),
        description="Opening balance"
    )
    category: Optional[str] = Field(
        default=None,
        description="Category label as stored by the backend"
    )

    @field_validator('id', mode='before')
    @classmethod
    def validate_id(cls, v: Any) -> Optional[str]:
        return _to_identifier(v)

    @field_validator('name', mode='before')
    @classmethod
    def validate_name(cls, v: Any) -> Any:
        """Numeric names are read as text; other types still fail."""
        if isinstance(v, (int, float, Decimal)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator('code', mode='before')
    @classmethod
    def validate_code(cls, v: Any) -> Optional[str]:
        """Codes may arrive as integers."""
        if v is None or isinstance(v, bool):
            return None
        text = str(v).strip()
        return text or None

    @field_validator('balance', mode='before')
    @classmethod
    def validate_balance(cls, v: Any) -> Decimal:
        """Non-finite or malformed opening balances are treated as zero."""
        return to_finite_decimal(v) or Decimal("0")

    @field_validator('category', mode='before')
    @classmethod
    def validate_category(cls, v: Any) -> Optional[str]:
        return _to_text(v)


class Transaction(BaseModel):
    """
    A ledger transaction with one debit leg and one credit leg.

    A transaction with no usable amount is still a valid record: it is
    kept (the backend stores it) but contributes nothing to balances.
    """

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True, extra="ignore")

    id: Optional[str] = None
    debit_account_id: Optional[str] = None
    credit_account_id: Optional[str] = None
    amount: Optional[Decimal] = Field(
        default=None,
        description="Transaction amount; None when missing or not a finite number"
    )
    description: Optional[str] = None
    transaction_date: Optional[date] = None

    @model_validator(mode='before')
    @classmethod
    def canonicalize_fields(cls, data: Any) -> Any:
        """Resolve the alternate field names into the canonical ones."""
        if not isinstance(data, Mapping):
            return data
        data = dict(data)
        data["debit_account_id"] = _first_present(
            data, "debit_account_id", "debitAccountId"
        )
        data["credit_account_id"] = _first_present(
            data, "credit_account_id", "creditAccountId"
        )
        # A missing, zero or malformed amount defers to nominal: "abc" with a
        # valid nominal counts, unlike a plain `amount or nominal`
        amount = to_finite_decimal(data.get("amount"))
        if not amount:
            nominal = to_finite_decimal(data.get("nominal"))
            amount = nominal if nominal is not None else amount
        data["amount"] = amount
        data["transaction_date"] = _first_present(data, "transaction_date", "date")
        return data

    @field_validator('id', 'debit_account_id', 'credit_account_id', mode='before')
    @classmethod
    def validate_identifiers(cls, v: Any) -> Optional[str]:
        return _to_identifier(v)

    @field_validator('amount', mode='before')
    @classmethod
    def validate_amount(cls, v: Any) -> Optional[Decimal]:
        return to_finite_decimal(v)

    @field_validator('description', mode='before')
    @classmethod
    def validate_description(cls, v: Any) -> Optional[str]:
        return _to_text(v)

    @field_validator('transaction_date', mode='before')
    @classmethod
    def validate_transaction_date(cls, v: Any) -> Optional[date]:
        """Unparseable dates are dropped rather than rejecting the record."""
        if v is None or isinstance(v, date):
            return v.date() if isinstance(v, datetime) else v
        if isinstance(v, str):
            try:
                return date.fromisoformat(v.strip()[:10])
            except ValueError:
                return None
        return None

    @property
    def has_amount(self) -> bool:
        """True when this transaction can affect a balance."""
        return self.amount is not None and self.amount.is_finite() and self.amount != 0


class AccountBalance(BaseModel):
    """One row of a trial balance."""

    model_config = ConfigDict(frozen=True)

    account_id: Optional[str]
    name: str
    code: Optional[str] = None
    classification: Classification
    balance: Decimal

    @property
    def debit(self) -> Decimal:
        """Amount shown in the debit column."""
        if self.classification.normal_balance == NormalBalance.DEBIT:
            return max(self.balance, Decimal("0"))
        return max(-self.balance, Decimal("0"))

    @property
    def credit(self) -> Decimal:
        """Amount shown in the credit column."""
        if self.classification.normal_balance == NormalBalance.CREDIT:
            return max(self.balance, Decimal("0"))
        return max(-self.balance, Decimal("0"))
