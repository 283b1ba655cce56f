"""
Classification by SAK EMKM account code.

The first digit of a code identifies the account type. This is the most
reliable signal available, so it is tried before any name rule.
"""

from typing import Any

from keutrack.classification.refiner import refine_asset_category
from keutrack.models.classification import (
    UNCLASSIFIED,
    AccountType,
    Classification,
)

TYPE_BY_CODE_PREFIX: dict[str, AccountType] = {
    "1": AccountType.ASSET,
    "2": AccountType.LIABILITY,
    "3": AccountType.EQUITY,
    "4": AccountType.REVENUE,
    "5": AccountType.EXPENSE,
}


def normalize_code(value: Any) -> str:
    """Trimmed string form of an account code; empty for None."""
    if value is None or isinstance(value, bool):
        return ""
    return str(value).strip()


def classify_by_code(code: Any, name: Any = "") -> Classification:
    """
    Classify an account from the first digit of its code.

    Returns the unclassified result (LAIN) for an empty code or a
    first character outside 1-5. The name is only used to pick the
    subcategory of an asset.
    """
    account_code = normalize_code(code)
    account_type = TYPE_BY_CODE_PREFIX.get(account_code[:1])

    if account_type is None:
        return UNCLASSIFIED
    if account_type == AccountType.ASSET:
        return Classification.for_type(account_type, refine_asset_category(name))
    return Classification.for_type(account_type)
