"""
Classification by account name.

DESIGN DECISION: The rule chain is an explicit ordered tuple. ORDER
MATTERS because the types share vocabulary:

1. Expense first, so "Beban Listrik" never becomes an asset
2. Revenue before equity, so "Pendapatan Penjualan" never becomes capital
3. Asset, with its own guard against expense-prefixed names
4. Liability
5. Equity, with its own guard against revenue vocabulary
"""

from typing import Any, Callable, NamedTuple, Optional

from keutrack.classification.refiner import refine_asset_category
from keutrack.classification.rules import (
    ASSET_RULES,
    EQUITY_RULES,
    EXPENSE_RULES,
    LIABILITY_RULES,
    REVENUE_RULES,
    MatchReason,
    RuleTable,
    normalize_name,
)
from keutrack.models.classification import AccountType, Classification


class NameRule(NamedTuple):
    table: RuleTable
    resolve: Callable[[str], Classification]


class NameRuleMatch(NamedTuple):
    classification: Classification
    reason: MatchReason


def _fixed(account_type: AccountType) -> Callable[[str], Classification]:
    classification = Classification.for_type(account_type)
    return lambda name: classification


def _asset(name: str) -> Classification:
    return Classification.for_type(AccountType.ASSET, refine_asset_category(name))


NAME_RULE_CHAIN: tuple[NameRule, ...] = (
    NameRule(EXPENSE_RULES, _fixed(AccountType.EXPENSE)),
    NameRule(REVENUE_RULES, _fixed(AccountType.REVENUE)),
    NameRule(ASSET_RULES, _asset),
    NameRule(LIABILITY_RULES, _fixed(AccountType.LIABILITY)),
    NameRule(EQUITY_RULES, _fixed(AccountType.EQUITY)),
)


def match_name(name: Any) -> Optional[NameRuleMatch]:
    """First rule in the chain that claims `name`, or None."""
    account_name = normalize_name(name)
    if not account_name:
        return None

    for rule in NAME_RULE_CHAIN:
        reason = rule.table.match_reason(account_name)
        if reason is not None:
            return NameRuleMatch(rule.resolve(account_name), reason)
    return None


def classify_by_name(name: Any) -> Optional[Classification]:
    """Classification implied by the name alone, or None if unrecognized."""
    match = match_name(name)
    return match.classification if match else None
