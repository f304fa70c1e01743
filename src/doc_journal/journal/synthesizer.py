"""
Journal entry synthesis (SSOT).

Core Invariants:
- Sum of debit lines equals sum of credit lines EXACTLY, at the currency's
  minimum denomination
- Balance is guaranteed by construction: every amount is quantized once and
  the credit side always carries the same quantized total as the debit side
- Every line has exactly one non-zero side
- Bank statements never get a suggestion (they summarize many transactions)

Amount Sign Convention:
- All line amounts are positive; the side (debit/credit) carries direction
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..accounts.chart import AccountRules
from ..schemas.document import (
    AccountType,
    DocumentType,
    ExtractedDocument,
    JournalEntrySuggestion,
    JournalLine,
    SuggestedAccount,
)

logger = logging.getLogger(__name__)

# Rounding precision for currency amounts
CURRENCY_PRECISION = Decimal("0.01")


class JournalBalanceError(Exception):
    """Raised when a synthesized entry does not balance (a programming error)."""

    pass


class AmountValidationError(Exception):
    """Raised when an amount handed to journal code is unusable."""

    pass


def validate_amount(
    amount: Decimal | str,
    *,
    field_name: str = "amount",
    allow_zero: bool = False,
    precision: Decimal = CURRENCY_PRECISION,
) -> Decimal:
    """Validate and quantize a journal amount.

    Args:
        amount: The amount to validate (Decimal or string)
        field_name: Name for error messages (e.g., "total", "tax")
        allow_zero: Whether zero is a valid value (default: False)
        precision: Quantum to round to (ROUND_HALF_UP)

    Returns:
        Validated Decimal amount, quantized to precision

    Raises:
        AmountValidationError: If amount is not a number, negative, or zero
            when not allowed

    Examples:
        >>> validate_amount(Decimal("10.005"))
        Decimal('10.01')
        >>> validate_amount("-5.00")  # Raises AmountValidationError
    """
    if isinstance(amount, float):
        raise AmountValidationError(f"{field_name}: float amounts are not accepted, use Decimal")
    try:
        if isinstance(amount, str):
            amount = Decimal(amount.strip())
        elif not isinstance(amount, Decimal):
            amount = Decimal(amount)
    except Exception as e:
        raise AmountValidationError(f"{field_name}: Invalid amount format - {e}") from e

    if not amount.is_finite():
        raise AmountValidationError(f"{field_name}: Amount must be finite, got {amount}")

    amount = amount.quantize(precision, rounding=ROUND_HALF_UP)

    if amount < 0:
        raise AmountValidationError(f"{field_name}: Amount must be positive, got {amount}")

    if not allow_zero and amount == 0:
        raise AmountValidationError(f"{field_name}: Amount cannot be zero (got {amount})")

    return amount


class JournalSynthesizer:
    """
    Builds double-entry journal suggestions from extracted documents.

    Line layout:
    - INVOICE / UNKNOWN: debit expense, credit Accounts Payable
    - RECEIPT: debit expense, credit Cash/Bank
    - BANK_STATEMENT: no suggestion

    With split_tax enabled and 0 < tax < total, the debit side becomes
    net expense + recoverable tax; the credit side still carries the total.
    """

    def __init__(
        self,
        rules: Optional[AccountRules] = None,
        split_tax: bool = False,
        precision: Decimal = CURRENCY_PRECISION,
    ):
        self.rules = rules or AccountRules()
        self.split_tax = split_tax
        self.precision = precision

    def _required_account(self, code: str) -> SuggestedAccount:
        account = self.rules.account(code)
        if account is None:
            raise KeyError(f"Account {code} not in chart of accounts")
        return account

    def _debit_account(self, suggested: SuggestedAccount) -> SuggestedAccount:
        """The suggested account if it is an expense, else the fallback expense."""
        if suggested.account_type == AccountType.EXPENSE:
            return suggested
        return self._required_account(self.rules.fallback_expense_account)

    def _credit_account(self, document_type: DocumentType) -> SuggestedAccount:
        if document_type == DocumentType.RECEIPT:
            return self._required_account(self.rules.cash_account)
        return self._required_account(self.rules.payable_account)

    def describe(self, doc: ExtractedDocument) -> str:
        """Human-readable entry description."""
        vendor = doc.vendor or "Unknown vendor"
        if doc.document_type == DocumentType.INVOICE:
            if doc.document_number:
                return f"{vendor} - Invoice {doc.document_number}"
            return f"{vendor} - Invoice"
        if doc.document_type == DocumentType.RECEIPT:
            return f"Purchase at {vendor}"
        return f"{vendor} - Document {doc.document_number}" if doc.document_number else vendor

    def synthesize(
        self,
        doc: ExtractedDocument,
        account: SuggestedAccount,
    ) -> Optional[JournalEntrySuggestion]:
        """
        Build a journal entry, or None when no entry applies.

        None is returned for bank statements and for documents without a
        positive total.
        """
        if doc.document_type == DocumentType.BANK_STATEMENT:
            return None
        if doc.total is None or doc.total <= 0:
            logger.debug("No journal entry: total missing or not positive")
            return None

        total = validate_amount(doc.total, field_name="total", precision=self.precision)
        debit_account = self._debit_account(account)
        credit_account = self._credit_account(doc.document_type)

        lines: list[JournalLine] = []

        tax = self._split_tax_amount(doc, total)
        if tax is not None:
            net = total - tax
            lines.append(JournalLine(debit_account.code, debit_account.name, debit=net))
            tax_account = self._required_account(self.rules.tax_account)
            lines.append(JournalLine(tax_account.code, tax_account.name, debit=tax))
        else:
            lines.append(JournalLine(debit_account.code, debit_account.name, debit=total))

        lines.append(JournalLine(credit_account.code, credit_account.name, credit=total))

        entry = JournalEntrySuggestion(lines=tuple(lines), description=self.describe(doc))

        if not entry.is_balanced:
            raise JournalBalanceError(
                f"Unbalanced entry: debit {entry.total_debit} != credit {entry.total_credit}"
            )

        logger.debug(
            f"Journal entry: {len(lines)} lines, {debit_account.code} / {credit_account.code}, {total}"
        )
        return entry

    def _split_tax_amount(self, doc: ExtractedDocument, total: Decimal) -> Optional[Decimal]:
        """Quantized tax to split out, or None when the debit side stays whole."""
        if not self.split_tax or doc.tax_amount is None:
            return None
        tax = doc.tax_amount.quantize(self.precision, rounding=ROUND_HALF_UP)
        if tax <= 0 or tax >= total:
            return None
        return tax


_default_synthesizer = JournalSynthesizer()


def synthesize(doc: ExtractedDocument, account: SuggestedAccount) -> Optional[JournalEntrySuggestion]:
    """Synthesize with the default chart, no tax split."""
    return _default_synthesizer.synthesize(doc, account)
