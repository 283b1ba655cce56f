"""
Account Classification Service

Single entry point for deciding an account's type, normal balance side and
category.

Flow:
1. Empty name → LAIN (nothing to classify)
2. Code given and conclusive (first digit 1-5) → type from code
3. Otherwise → ordered name rule chain
4. Nothing matched → LAIN

GUARANTEES:
- Never raises, for any input
- Same input, same output
- normal_balance always follows the type
"""

from typing import Any, Optional

from keutrack.audit import DiagnosticLogger
from keutrack.classification.code import classify_by_code, normalize_code
from keutrack.classification.name import match_name
from keutrack.classification.rules import normalize_name
from keutrack.models.audit import DiagnosticEventBuilder
from keutrack.models.classification import (
    CREDIT_NORMAL_LABELS,
    UNCLASSIFIED,
    AccountCategory,
    AccountType,
    Classification,
)


class ClassificationService:
    """Classifies accounts by code first, then by name."""

    def __init__(self, diagnostics: Optional[DiagnosticLogger] = None):
        self._diagnostics = diagnostics or DiagnosticLogger(
            logger_name="keutrack.classification"
        )

    def classify(self, name: Any, code: Any = None) -> Classification:
        """
        Classify an account.

        Args:
            name: Account name (case and surrounding whitespace ignored)
            code: Optional SAK EMKM account code

        Returns:
            The account's Classification; LAIN/DEBIT/LAIN if unrecognized
        """
        account_name = normalize_name(name)
        account_code = normalize_code(code)

        if not account_name:
            self._diagnostics.log(DiagnosticEventBuilder.account_name_empty(account_code or None))
            return UNCLASSIFIED

        if account_code:
            classification = classify_by_code(account_code, account_name)
            if classification.type != AccountType.OTHER:
                self._log_classified(account_name, account_code, classification, "code")
                return classification

        match = match_name(account_name)
        if match is not None:
            self._log_classified(
                account_name, account_code, match.classification, f"name:{match.reason.value}"
            )
            return match.classification

        self._diagnostics.log(
            DiagnosticEventBuilder.account_type_unknown(account_name, account_code or None)
        )
        return UNCLASSIFIED

    def category(self, name: Any) -> AccountCategory:
        """Category of an account known only by name."""
        return self.classify(name).category

    @staticmethod
    def is_credit_normal(category: Any) -> bool:
        """True if the category label belongs to a credit-normal account."""
        if isinstance(category, (AccountCategory, AccountType)):
            label = category.value
        elif isinstance(category, str):
            label = category.strip().upper()
        else:
            return False
        return label in CREDIT_NORMAL_LABELS

    def _log_classified(
        self,
        name: str,
        code: str,
        classification: Classification,
        source: str,
    ) -> None:
        self._diagnostics.log(
            DiagnosticEventBuilder.account_classified(
                name=name,
                code=code or None,
                account_type=classification.type.value,
                category=classification.category.value,
                source=source,
            )
        )


_default_service = ClassificationService()


def classify(name: Any, code: Any = None) -> Classification:
    """Classify an account by code, then name. Never raises."""
    return _default_service.classify(name, code)


def category(name: Any) -> AccountCategory:
    """Legacy alias: only the category of classify(name)."""
    return _default_service.category(name)


infer_category = category


def is_credit_normal(category: Any) -> bool:
    """True if the category label belongs to a credit-normal account."""
    return ClassificationService.is_credit_normal(category)
