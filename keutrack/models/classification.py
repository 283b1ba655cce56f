"""
Classification Models

An account's classification is derived, never stored: it is recomputed
from the account's name and code whenever it is needed.

CRITICAL: The normal balance side is a pure function of the account type.
Classification refuses to be built with any other pairing, so no rule can
produce an inconsistent result.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class AccountType(str, Enum):
    """
    Fundamental account types of the SAK EMKM chart of accounts.

    Values are the labels used by the bookkeeping backend.
    """
    ASSET = "ASET"
    LIABILITY = "LIABILITAS"
    EQUITY = "EKUITAS"
    REVENUE = "PENDAPATAN"
    EXPENSE = "BEBAN"
    OTHER = "LAIN"  # Unclassified


class NormalBalance(str, Enum):
    """Side on which an account's balance increases."""
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


class AccountCategory(str, Enum):
    """
    Finer-grained label within a type.

    Only assets are refined into subcategories; every other type
    carries a single fixed label.
    """
    # Asset subcategories
    CASH = "KAS"
    BANK = "BANK"
    RECEIVABLE = "PIUTANG"
    INVENTORY = "PERSEDIAAN"
    SUPPLIES = "PERLENGKAPAN"
    ASSET = "ASET"

    # Fixed labels for the remaining types
    DEBT = "UTANG"
    CAPITAL = "MODAL"
    REVENUE = "PENDAPATAN"
    EXPENSE = "BEBAN"
    OTHER = "LAIN"


NORMAL_BALANCE_BY_TYPE: dict[AccountType, NormalBalance] = {
    AccountType.ASSET: NormalBalance.DEBIT,
    AccountType.EXPENSE: NormalBalance.DEBIT,
    AccountType.OTHER: NormalBalance.DEBIT,
    AccountType.LIABILITY: NormalBalance.CREDIT,
    AccountType.EQUITY: NormalBalance.CREDIT,
    AccountType.REVENUE: NormalBalance.CREDIT,
}

DEFAULT_CATEGORY_BY_TYPE: dict[AccountType, AccountCategory] = {
    AccountType.ASSET: AccountCategory.ASSET,
    AccountType.LIABILITY: AccountCategory.DEBT,
    AccountType.EQUITY: AccountCategory.CAPITAL,
    AccountType.REVENUE: AccountCategory.REVENUE,
    AccountType.EXPENSE: AccountCategory.EXPENSE,
    AccountType.OTHER: AccountCategory.OTHER,
}

# Labels whose accounts increase on the credit side. Includes the type
# labels LIABILITAS and EKUITAS, which older data stored as categories.
CREDIT_NORMAL_LABELS: frozenset[str] = frozenset({
    AccountCategory.DEBT.value,
    AccountCategory.CAPITAL.value,
    AccountCategory.REVENUE.value,
    AccountType.LIABILITY.value,
    AccountType.EQUITY.value,
})


# =============================================================================
# CLASSIFICATION RESULT
# =============================================================================

class Classification(BaseModel):
    """Type, normal balance side and category of one account."""

    model_config = ConfigDict(frozen=True)

    type: AccountType
    normal_balance: NormalBalance
    category: AccountCategory

    @model_validator(mode='after')
    def validate_normal_balance(self) -> 'Classification':
        """Normal balance must follow the fixed type mapping."""
        expected = NORMAL_BALANCE_BY_TYPE[self.type]
        if self.normal_balance != expected:
            raise ValueError(
                f"{self.type.name} accounts are {expected.value}-normal, "
                f"got {self.normal_balance.value}"
            )
        return self

    @classmethod
    def for_type(
        cls,
        account_type: AccountType,
        category: Optional[AccountCategory] = None,
    ) -> 'Classification':
        """Build a classification with the side implied by the type."""
        return cls(
            type=account_type,
            normal_balance=NORMAL_BALANCE_BY_TYPE[account_type],
            category=category or DEFAULT_CATEGORY_BY_TYPE[account_type],
        )

    @property
    def is_debit_normal(self) -> bool:
        return self.normal_balance == NormalBalance.DEBIT


UNCLASSIFIED = Classification.for_type(AccountType.OTHER)
