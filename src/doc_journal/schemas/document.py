"""
Canonical document value objects (SSOT).

Every stage of the pipeline reads and returns these types. They are frozen:
a stage that needs to "change" a document returns a new one via
dataclasses.replace().

Amount convention:
- All amounts are Decimal, never float
- None means "not found in the document", Decimal("0") means "found, and zero"
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional


class DocumentType(str, Enum):
    """Classification label driving account suggestion."""

    INVOICE = "INVOICE"
    RECEIPT = "RECEIPT"
    BANK_STATEMENT = "BANK_STATEMENT"
    UNKNOWN = "UNKNOWN"


class DateSource(str, Enum):
    """
    How issue/due dates were assigned.

    LABEL: every assigned date came from an explicit label ("Due Date: ...")
    POSITIONAL: every assigned date came from the first/second-date heuristic
    MIXED: one labelled, one positional
    NONE: no dates assigned
    """

    LABEL = "label"
    POSITIONAL = "positional"
    MIXED = "mixed"
    NONE = "none"


class AccountType(str, Enum):
    """Chart-of-accounts classes used by the journal synthesizer."""

    ASSET = "asset"
    LIABILITY = "liability"
    EXPENSE = "expense"


def _amount_str(value: Optional[Decimal]) -> Optional[str]:
    return str(value) if value is not None else None


def _date_str(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class LineItem:
    """Single line of an invoice/receipt."""

    description: str
    amount: Decimal
    quantity: Optional[Decimal] = None
    unit_price: Optional[Decimal] = None

    def to_dict(self) -> dict:
        return {
            "description": self.description,
            "quantity": _amount_str(self.quantity),
            "unit_price": _amount_str(self.unit_price),
            "amount": str(self.amount),
        }


@dataclass(frozen=True)
class ExtractedDocument:
    """
    Structured fields pulled from a document's text.

    Produced by the field extractor with confidence unset (None); the
    pipeline attaches the computed confidence afterwards. Nothing else
    should set confidence.
    """

    raw_text: str
    document_type: DocumentType = DocumentType.UNKNOWN

    vendor: Optional[str] = None
    document_number: Optional[str] = None

    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    date_source: DateSource = DateSource.NONE

    total: Optional[Decimal] = None
    subtotal: Optional[Decimal] = None
    tax_amount: Optional[Decimal] = None
    tax_rate: Optional[Decimal] = None  # As percentage, e.g. 16 for 16%
    currency: str = "USD"

    line_items: tuple[LineItem, ...] = ()

    tax_id: Optional[str] = None
    payment_method: Optional[str] = None

    # Amount fields filled in by reconciliation instead of read from text
    derived_fields: tuple[str, ...] = ()
    # Input was longer than the configured cap and was cut
    truncated: bool = False

    confidence: Optional[float] = None

    def to_dict(self) -> dict:
        """Serialize to JSON-ready dictionary."""
        return {
            "vendor": self.vendor,
            "document_number": self.document_number,
            "document_type": self.document_type.value,
            "issue_date": _date_str(self.issue_date),
            "due_date": _date_str(self.due_date),
            "date_source": self.date_source.value,
            "total": _amount_str(self.total),
            "subtotal": _amount_str(self.subtotal),
            "tax_amount": _amount_str(self.tax_amount),
            "tax_rate": _amount_str(self.tax_rate),
            "currency": self.currency,
            "line_items": [item.to_dict() for item in self.line_items],
            "tax_id": self.tax_id,
            "payment_method": self.payment_method,
            "derived_fields": list(self.derived_fields),
            "truncated": self.truncated,
            "confidence": self.confidence,
            "raw_text": self.raw_text,
        }


@dataclass(frozen=True)
class SuggestedAccount:
    """Chart-of-accounts entry proposed for a document."""

    code: str
    name: str
    account_type: AccountType = AccountType.EXPENSE

    def to_dict(self) -> dict:
        return {"code": self.code, "name": self.name, "account_type": self.account_type.value}


@dataclass(frozen=True)
class JournalLine:
    """One side of a journal entry. Exactly one of debit/credit is non-zero."""

    account_code: str
    account_name: str
    debit: Decimal = Decimal("0.00")
    credit: Decimal = Decimal("0.00")

    def to_dict(self) -> dict:
        return {
            "account_code": self.account_code,
            "account_name": self.account_name,
            "debit": str(self.debit),
            "credit": str(self.credit),
        }


@dataclass(frozen=True)
class JournalEntrySuggestion:
    """Double-entry journal entry proposed for a document."""

    lines: tuple[JournalLine, ...]
    description: str = ""

    @property
    def total_debit(self) -> Decimal:
        return sum((line.debit for line in self.lines), Decimal("0.00"))

    @property
    def total_credit(self) -> Decimal:
        return sum((line.credit for line in self.lines), Decimal("0.00"))

    @property
    def is_balanced(self) -> bool:
        return self.total_debit == self.total_credit

    def to_dict(self) -> dict:
        return {
            "description": self.description,
            "lines": [line.to_dict() for line in self.lines],
            "total_debit": str(self.total_debit),
            "total_credit": str(self.total_credit),
        }


@dataclass(frozen=True)
class ValidationResult:
    """
    Business-rule check outcome.

    Warnings never affect validity; is_valid is derived from errors.
    """

    errors: tuple[str, ...] = field(default_factory=tuple)
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }
