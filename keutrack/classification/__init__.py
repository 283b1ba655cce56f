"""Account classification package."""

from keutrack.classification.refiner import refine_asset_category
from keutrack.classification.code import classify_by_code
from keutrack.classification.name import (
    NAME_RULE_CHAIN,
    classify_by_name,
    match_name,
)
from keutrack.classification.rules import (
    ASSET_RULES,
    EQUITY_RULES,
    EXPENSE_RULES,
    LIABILITY_RULES,
    REVENUE_RULES,
    MatchMode,
    MatchReason,
    RuleTable,
)
from keutrack.classification.service import (
    ClassificationService,
    category,
    classify,
    infer_category,
    is_credit_normal,
)

__all__ = [
    # Leaf classifiers
    "classify_by_code",
    "classify_by_name",
    "match_name",
    "refine_asset_category",
    # Rule tables
    "ASSET_RULES",
    "EQUITY_RULES",
    "EXPENSE_RULES",
    "LIABILITY_RULES",
    "NAME_RULE_CHAIN",
    "REVENUE_RULES",
    "MatchMode",
    "MatchReason",
    "RuleTable",
    # Service
    "ClassificationService",
    "category",
    "classify",
    "infer_category",
    "is_credit_normal",
]
