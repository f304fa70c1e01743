"""Tests for business-rule validation."""

from dataclasses import replace
from datetime import date, timedelta
from decimal import Decimal

import pytest

from doc_journal.schemas import DateSource, ExtractedDocument
from doc_journal.validation import DocumentValidator, validate


class TestHardErrors:
    """Errors make the result invalid."""

    def test_complete_document_valid(self, complete_document):
        result = validate(complete_document)
        assert result.is_valid
        assert result.errors == ()
        assert result.warnings == ()

    @pytest.mark.parametrize("vendor", [None, "", "AB", "  A  "])
    def test_vendor_required(self, complete_document, vendor):
        result = validate(replace(complete_document, vendor=vendor))
        assert not result.is_valid
        assert "Vendor name is required and must be at least 3 characters" in result.errors

    def test_three_char_vendor_ok(self, complete_document):
        assert validate(replace(complete_document, vendor="IBM")).is_valid

    @pytest.mark.parametrize("total", [None, "0", "-0.01"])
    def test_total_required(self, complete_document, total):
        doc = replace(complete_document, total=Decimal(total) if total is not None else None)
        result = validate(doc)
        assert not result.is_valid
        assert "Total amount is required and must be greater than 0" in result.errors

    def test_one_cent_is_valid(self, complete_document):
        """total=0.01 passes (reconciliation is only a warning)."""
        doc = replace(complete_document, total=Decimal("0.01"))
        result = validate(doc)
        assert result.is_valid

    def test_due_before_issue(self, complete_document):
        issue = date(2024, 3, 10)
        doc = replace(complete_document, issue_date=issue, due_date=issue - timedelta(days=1))
        result = validate(doc)
        assert not result.is_valid
        assert "Due date cannot be before invoice date" in result.errors

    def test_due_equal_issue_valid(self, complete_document):
        issue = date(2024, 3, 10)
        doc = replace(complete_document, issue_date=issue, due_date=issue)
        assert validate(doc).is_valid


class TestWarnings:
    """Warnings never affect validity."""

    def test_missing_issue_date(self, complete_document):
        result = validate(replace(complete_document, issue_date=None, due_date=None))
        assert result.is_valid
        assert "Invoice date not found" in result.warnings

    def test_missing_document_number(self, complete_document):
        result = validate(replace(complete_document, document_number=None))
        assert result.is_valid
        assert "Invoice number not found" in result.warnings

    def test_reconciliation_mismatch(self, complete_document):
        doc = replace(complete_document, total=Decimal("540.00"))
        result = validate(doc)
        assert result.is_valid
        assert any("do not reconcile" in w for w in result.warnings)

    def test_reconciliation_within_tolerance(self, complete_document):
        doc = replace(complete_document, total=Decimal("535.01"))
        assert not any("do not reconcile" in w for w in validate(doc).warnings)

    def test_low_confidence(self, complete_document):
        result = validate(replace(complete_document, confidence=0.4))
        assert result.is_valid
        assert any("manual review" in w for w in result.warnings)

    def test_confidence_at_threshold_no_warning(self, complete_document):
        result = validate(replace(complete_document, confidence=0.5))
        assert not any("manual review" in w for w in result.warnings)

    @pytest.mark.parametrize("source", [DateSource.POSITIONAL, DateSource.MIXED])
    def test_positional_dates(self, complete_document, source):
        result = validate(replace(complete_document, date_source=source))
        assert (
            "Dates were inferred from position, not labels; verify issue and due dates"
            in result.warnings
        )

    def test_truncated(self, complete_document):
        result = validate(replace(complete_document, truncated=True))
        assert any("truncated" in w for w in result.warnings)


class TestValidatorSettings:
    def test_custom_thresholds(self, complete_document):
        validator = DocumentValidator(
            min_vendor_length=12,
            reconciliation_tolerance=Decimal("10"),
            review_confidence=0.95,
        )
        doc = replace(complete_document, total=Decimal("540.00"), confidence=0.9)
        result = validator.validate(doc)
        assert "Vendor name is required and must be at least 12 characters" in result.errors
        assert not any("do not reconcile" in w for w in result.warnings)
        assert any("manual review" in w for w in result.warnings)

    def test_empty_document(self):
        result = validate(ExtractedDocument(raw_text=""))
        assert len(result.errors) == 2
        assert result.to_dict()["is_valid"] is False
