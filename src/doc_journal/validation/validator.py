"""
Business-rule validation of extracted documents.

Hard errors make the result invalid; warnings are advisory and never
affect validity. The validator only inspects; it never corrects a document.
"""

import logging
from decimal import Decimal
from typing import Optional

from ..extractors.reconciler import reconciliation_difference
from ..schemas.document import DateSource, ExtractedDocument, ValidationResult

logger = logging.getLogger(__name__)

VENDOR_REQUIRED = "Vendor name is required and must be at least {min_length} characters"
TOTAL_REQUIRED = "Total amount is required and must be greater than 0"
DUE_BEFORE_ISSUE = "Due date cannot be before invoice date"

ISSUE_DATE_MISSING = "Invoice date not found"
DOCUMENT_NUMBER_MISSING = "Invoice number not found"
AMOUNTS_MISMATCH = "Amounts do not reconcile: subtotal {subtotal} + tax {tax} != total {total}"
LOW_CONFIDENCE = "Low extraction confidence ({confidence:.0%}); manual review recommended"
POSITIONAL_DATES = "Dates were inferred from position, not labels; verify issue and due dates"
TRUNCATED_TEXT = "Document text was truncated; fields near the end may be missing"


class DocumentValidator:
    """
    Validates an ExtractedDocument against business rules.

    Errors:
    - vendor missing or shorter than min_vendor_length
    - total missing or <= 0
    - due date earlier than issue date (equal is fine)

    Warnings:
    - issue date missing
    - document number missing
    - |subtotal + tax - total| > tolerance
    - confidence below review_confidence
    - dates assigned by position rather than label
    - input text truncated
    """

    def __init__(
        self,
        min_vendor_length: int = 3,
        reconciliation_tolerance: Decimal = Decimal("0.01"),
        review_confidence: float = 0.5,
    ):
        self.min_vendor_length = min_vendor_length
        self.reconciliation_tolerance = reconciliation_tolerance
        self.review_confidence = review_confidence

    def validate(self, doc: ExtractedDocument) -> ValidationResult:
        """Run all checks and return a fresh result."""
        errors: list[str] = []
        warnings: list[str] = []

        # Hard errors
        if not doc.vendor or len(doc.vendor.strip()) < self.min_vendor_length:
            errors.append(VENDOR_REQUIRED.format(min_length=self.min_vendor_length))

        if doc.total is None or doc.total <= 0:
            errors.append(TOTAL_REQUIRED)

        if doc.issue_date and doc.due_date and doc.due_date < doc.issue_date:
            errors.append(DUE_BEFORE_ISSUE)

        # Warnings
        if doc.issue_date is None:
            warnings.append(ISSUE_DATE_MISSING)

        if not doc.document_number:
            warnings.append(DOCUMENT_NUMBER_MISSING)

        mismatch = self._reconciliation_mismatch(doc)
        if mismatch:
            warnings.append(mismatch)

        if doc.confidence is not None and doc.confidence < self.review_confidence:
            warnings.append(LOW_CONFIDENCE.format(confidence=doc.confidence))

        if doc.date_source in (DateSource.POSITIONAL, DateSource.MIXED):
            warnings.append(POSITIONAL_DATES)

        if doc.truncated:
            warnings.append(TRUNCATED_TEXT)

        logger.debug(f"Validation: {len(errors)} errors, {len(warnings)} warnings")
        return ValidationResult(errors=tuple(errors), warnings=tuple(warnings))

    def _reconciliation_mismatch(self, doc: ExtractedDocument) -> Optional[str]:
        difference = reconciliation_difference(doc.total, doc.subtotal, doc.tax_amount)
        if difference is None or difference <= self.reconciliation_tolerance:
            return None
        return AMOUNTS_MISMATCH.format(subtotal=doc.subtotal, tax=doc.tax_amount, total=doc.total)


_default_validator = DocumentValidator()


def validate(doc: ExtractedDocument) -> ValidationResult:
    """Validate with default thresholds."""
    return _default_validator.validate(doc)
