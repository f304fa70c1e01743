"""
Account suggestion.

Maps a document type (and optionally a category) to a chart-of-accounts
entry. All mappings live in AccountRules; this module only decides which
table to consult, in which order.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from ..schemas.document import DocumentType, ExtractedDocument, SuggestedAccount
from .chart import AccountRules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountSuggestion:
    """Suggested account plus the category label shown to humans."""

    account: SuggestedAccount
    category: str
    category_key: Optional[str] = None  # Set when a category drove the choice


class AccountSuggester:
    """
    Suggests accounts from document type and category.

    Resolution order:
    1. Category hint (explicit or detected), unless the document is a bank
       statement (statements are not expenses)
    2. Document-type default
    3. Fallback "Uncategorized Expense"
    """

    def __init__(self, rules: Optional[AccountRules] = None):
        self.rules = rules or AccountRules()
        self._keyword_patterns = {
            category: [re.compile(r"\b" + re.escape(keyword) + r"\b", re.IGNORECASE) for keyword in keywords]
            for category, keywords in self.rules.category_keywords.items()
        }

    def _fallback(self) -> SuggestedAccount:
        account = self.rules.account(self.rules.fallback_expense_account)
        if account is None:
            raise KeyError(f"Fallback account {self.rules.fallback_expense_account} not in chart")
        return account

    def _category_account(self, category_hint: Optional[str]) -> Optional[SuggestedAccount]:
        if not category_hint:
            return None
        code = self.rules.category_accounts.get(category_hint.strip().lower())
        return self.rules.account(code) if code else None

    def suggest(
        self,
        document_type: DocumentType,
        category_hint: Optional[str] = None,
    ) -> SuggestedAccount:
        """Pick an account for a document type, honoring a category hint."""
        if document_type != DocumentType.BANK_STATEMENT:
            hinted = self._category_account(category_hint)
            if hinted is not None:
                return hinted
            if category_hint:
                logger.debug(f"Unknown category hint '{category_hint}', using document type")

        code = self.rules.document_type_accounts.get(document_type)
        account = self.rules.account(code) if code else None
        return account or self._fallback()

    def detect_category(self, doc: ExtractedDocument) -> Optional[str]:
        """
        Category implied by the vendor name or line-item descriptions.

        Vendor is checked first, then line items in order. Category order
        in the rules is the tie-break.
        """
        candidates = [doc.vendor or ""] + [item.description for item in doc.line_items]
        for text in candidates:
            if not text:
                continue
            for category, patterns in self._keyword_patterns.items():
                if any(p.search(text) for p in patterns):
                    return category
        return None

    def category_label(self, document_type: DocumentType, category_key: Optional[str] = None) -> str:
        """Human-readable category for display."""
        if category_key and category_key in self.rules.category_labels:
            return self.rules.category_labels[category_key]
        return self.rules.document_type_categories.get(document_type, "General Expenses")

    def suggest_for_document(
        self,
        doc: ExtractedDocument,
        category_hint: Optional[str] = None,
    ) -> AccountSuggestion:
        """
        Suggest for an extracted document.

        An explicit hint wins over a detected category.
        """
        category_key = None
        if doc.document_type != DocumentType.BANK_STATEMENT:
            if category_hint and self._category_account(category_hint) is not None:
                category_key = category_hint.strip().lower()
            else:
                category_key = self.detect_category(doc)

        account = self.suggest(doc.document_type, category_key or category_hint)
        if category_key:
            logger.debug(f"Category '{category_key}' -> account {account.code}")

        return AccountSuggestion(
            account=account,
            category=self.category_label(doc.document_type, category_key),
            category_key=category_key,
        )


_default_suggester = AccountSuggester()


def suggest(document_type: DocumentType, category_hint: Optional[str] = None) -> SuggestedAccount:
    """Suggest with the default chart."""
    return _default_suggester.suggest(document_type, category_hint)
