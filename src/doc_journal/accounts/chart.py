"""
Chart of accounts and suggestion tables (SSOT).

This is data, not logic: accounting rules change per jurisdiction and
company, so every mapping here is an explicit, reviewable table that a
rules file can replace (see doc_journal.rules).
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from ..schemas.document import AccountType, DocumentType, SuggestedAccount

DEFAULT_CHART: dict[str, SuggestedAccount] = {
    account.code: account
    for account in (
        SuggestedAccount("1000", "Cash/Bank", AccountType.ASSET),
        SuggestedAccount("1400", "Sales Tax Receivable", AccountType.ASSET),
        SuggestedAccount("2000", "Accounts Payable", AccountType.LIABILITY),
        SuggestedAccount("6100", "Office Supplies Expense", AccountType.EXPENSE),
        SuggestedAccount("6200", "Travel & Entertainment", AccountType.EXPENSE),
        SuggestedAccount("6300", "Utilities", AccountType.EXPENSE),
        SuggestedAccount("6400", "Rent", AccountType.EXPENSE),
        SuggestedAccount("6500", "Software & Subscriptions", AccountType.EXPENSE),
        SuggestedAccount("6600", "Professional Services", AccountType.EXPENSE),
        SuggestedAccount("6900", "Uncategorized Expense", AccountType.EXPENSE),
    )
}

# Default account per document type
DEFAULT_DOCUMENT_TYPE_ACCOUNTS: dict[DocumentType, str] = {
    DocumentType.INVOICE: "2000",
    DocumentType.RECEIPT: "6100",
    DocumentType.BANK_STATEMENT: "1000",
    DocumentType.UNKNOWN: "6900",
}

# Category hint -> expense account
DEFAULT_CATEGORY_ACCOUNTS: dict[str, str] = {
    "office": "6100",
    "travel": "6200",
    "utilities": "6300",
    "rent": "6400",
    "software": "6500",
    "professional": "6600",
}

# Vendor/description keywords that imply a category (English/Spanish)
DEFAULT_CATEGORY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "travel": (
        "airline", "airlines", "hotel", "uber", "lyft", "taxi", "flight",
        "travel", "viaje", "vuelo", "hospedaje",
    ),
    "utilities": (
        "electric", "electricity", "water", "gas", "internet", "phone",
        "utility", "utilities", "luz", "agua", "telefono", "teléfono",
    ),
    "rent": ("rent", "lease", "renta", "arrendamiento", "alquiler"),
    "software": ("software", "subscription", "saas", "license", "licencia", "suscripción"),
    "professional": (
        "consulting", "legal", "accounting", "attorney", "consultoría",
        "honorarios", "asesoría",
    ),
    "office": ("office", "staples", "paper", "papelería", "papeleria", "oficina"),
}

# Human-readable category labels shown next to the suggested account
DEFAULT_DOCUMENT_TYPE_CATEGORIES: dict[DocumentType, str] = {
    DocumentType.INVOICE: "Accounts Payable",
    DocumentType.RECEIPT: "Operating Expenses",
    DocumentType.BANK_STATEMENT: "Banking",
    DocumentType.UNKNOWN: "General Expenses",
}

DEFAULT_CATEGORY_LABELS: dict[str, str] = {
    "office": "Office Supplies",
    "travel": "Travel & Reimbursement",
    "utilities": "Utilities",
    "rent": "Rent & Facilities",
    "software": "Software & Subscriptions",
    "professional": "Professional Services",
}


@dataclass
class AccountRules:
    """
    All account-suggestion tables in one place.

    Special account roles:
    - cash_account: credit side for receipts
    - payable_account: credit side for invoices / unknown documents
    - tax_account: recoverable tax when the debit side is split
    - fallback_expense_account: "Uncategorized Expense"
    """

    accounts: dict[str, SuggestedAccount] = field(default_factory=lambda: dict(DEFAULT_CHART))
    document_type_accounts: dict[DocumentType, str] = field(
        default_factory=lambda: dict(DEFAULT_DOCUMENT_TYPE_ACCOUNTS)
    )
    category_accounts: dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_CATEGORY_ACCOUNTS)
    )
    category_keywords: dict[str, tuple[str, ...]] = field(
        default_factory=lambda: dict(DEFAULT_CATEGORY_KEYWORDS)
    )
    document_type_categories: dict[DocumentType, str] = field(
        default_factory=lambda: dict(DEFAULT_DOCUMENT_TYPE_CATEGORIES)
    )
    category_labels: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_CATEGORY_LABELS))

    cash_account: str = "1000"
    payable_account: str = "2000"
    tax_account: str = "1400"
    fallback_expense_account: str = "6900"

    def account(self, code: str) -> Optional[SuggestedAccount]:
        """Look up an account by code."""
        return self.accounts.get(code)

    def validate(self) -> list[str]:
        """
        Check that every referenced account code exists in the chart.

        Returns:
            List of validation errors (empty if valid)
        """
        errors: list[str] = []

        for role in ("cash_account", "payable_account", "tax_account", "fallback_expense_account"):
            code = getattr(self, role)
            if code not in self.accounts:
                errors.append(f"{role} '{code}' is not in the chart of accounts")

        fallback = self.accounts.get(self.fallback_expense_account)
        if fallback is not None and fallback.account_type != AccountType.EXPENSE:
            errors.append("fallback_expense_account must be an expense account")

        for doc_type, code in self.document_type_accounts.items():
            if code not in self.accounts:
                errors.append(f"document type {doc_type.value} maps to unknown account '{code}'")

        for category, code in self.category_accounts.items():
            if code not in self.accounts:
                errors.append(f"category '{category}' maps to unknown account '{code}'")

        return errors

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "AccountRules":
        """
        Build rules from a plain mapping (as loaded from YAML).

        Missing sections keep their defaults. Expected shape::

            chart:
              "6100": {name: "Office Supplies Expense", type: expense}
            document_types: {INVOICE: "2000", RECEIPT: "6100"}
            categories:
              travel: {account: "6200", label: "Travel", keywords: [hotel, airline]}
            cash_account: "1000"
        """
        rules = cls()

        chart = data.get("chart")
        if chart:
            rules.accounts = {
                str(code): SuggestedAccount(
                    code=str(code),
                    name=entry["name"],
                    account_type=AccountType(entry.get("type", "expense").lower()),
                )
                for code, entry in chart.items()
            }

        document_types = data.get("document_types")
        if document_types:
            rules.document_type_accounts.update(
                {DocumentType(name.upper()): str(code) for name, code in document_types.items()}
            )

        document_type_categories = data.get("document_type_categories")
        if document_type_categories:
            rules.document_type_categories.update(
                {DocumentType(name.upper()): label for name, label in document_type_categories.items()}
            )

        categories = data.get("categories")
        if categories:
            rules.category_accounts = {}
            rules.category_keywords = {}
            rules.category_labels = {}
            for name, entry in categories.items():
                key = name.lower()
                rules.category_accounts[key] = str(entry["account"])
                rules.category_keywords[key] = tuple(kw.lower() for kw in entry.get("keywords", []))
                rules.category_labels[key] = entry.get("label", name)

        for role in ("cash_account", "payable_account", "tax_account", "fallback_expense_account"):
            if role in data:
                setattr(rules, role, str(data[role]))

        return rules
