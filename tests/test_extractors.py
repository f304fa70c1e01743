"""Tests for the text heuristics extractor."""

import time
from datetime import date
from decimal import Decimal

import pytest

from doc_journal.extractors import (
    TextExtractor,
    collect_dates,
    extract,
    first_match,
    parse_english_amount,
)
from doc_journal.extractors.patterns import DOCUMENT_NUMBER_PATTERNS, TOTAL_PATTERNS
from doc_journal.schemas import DateSource, DocumentType


class TestAmountParsing:
    """Tests for amount parsing functions."""

    def test_english_amount_simple(self):
        """Parse simple English amount (dot decimal)."""
        assert parse_english_amount("11.48") == Decimal("11.48")
        assert parse_english_amount("0.99") == Decimal("0.99")

    def test_english_amount_thousands(self):
        """Parse English amount with thousands separator."""
        assert parse_english_amount("1,234.56") == Decimal("1234.56")
        assert parse_english_amount("$12,345.00") == Decimal("12345.00")

    def test_not_a_number(self):
        """Garbage yields None, not an exception."""
        assert parse_english_amount("abc") is None
        assert parse_english_amount("") is None


class TestFirstMatch:
    """Ordered pattern tables."""

    def test_subtotal_is_not_total(self):
        """'Subtotal' never satisfies the total pattern."""
        assert first_match(TOTAL_PATTERNS, "Subtotal: $100.00") is None

    def test_total_pattern_name_reported(self):
        """The winning pattern is reported."""
        match = first_match(TOTAL_PATTERNS, "Amount Due: 42.00")
        assert match.value == Decimal("42.00")
        assert match.pattern == "amount_due"

    def test_priority_order(self):
        """Earlier patterns win over earlier text positions."""
        text = "Receipt #R-77\nInvoice #INV-9"
        match = first_match(DOCUMENT_NUMBER_PATTERNS, text)
        assert match.value == "INV-9"


class TestTextExtractor:
    """Tests for the full extractor on sample documents."""

    @pytest.fixture
    def extractor(self):
        return TextExtractor()

    def test_can_extract(self, extractor):
        """Extractor accepts any non-blank content."""
        assert extractor.can_extract("some text")
        assert not extractor.can_extract("")
        assert not extractor.can_extract("   \n ")

    def test_extract_invoice(self, extractor, sample_invoice_text):
        """Every field of the reference invoice is found."""
        doc = extractor.extract(sample_invoice_text)

        assert doc.vendor == "ACME Corp"
        assert doc.document_number == "INV-500"
        assert doc.issue_date == date(2024, 1, 15)
        assert doc.due_date == date(2024, 2, 15)
        assert doc.date_source == DateSource.LABEL
        assert doc.subtotal == Decimal("500.00")
        assert doc.tax_amount == Decimal("35.00")
        assert doc.total == Decimal("535.00")
        assert doc.currency == "USD"
        assert doc.line_items == ()
        assert doc.derived_fields == ()
        assert doc.confidence is None
        assert doc.document_type == DocumentType.UNKNOWN

    def test_extract_receipt(self, extractor, sample_receipt_text):
        """Receipt fields, line items, tax rate and payment method."""
        doc = extractor.extract(sample_receipt_text)

        assert doc.vendor == "CORNER MARKET"
        assert doc.document_number == "10234"
        assert doc.issue_date == date(2024, 3, 2)
        assert doc.due_date is None
        assert doc.total == Decimal("22.99")
        assert doc.subtotal == Decimal("21.49")
        assert doc.tax_amount == Decimal("1.50")
        assert doc.tax_rate == Decimal("7")
        assert doc.payment_method == "VISA"

        assert [item.description for item in doc.line_items] == ["Coffee Beans", "Printer Paper"]
        assert [item.amount for item in doc.line_items] == [Decimal("12.99"), Decimal("8.50")]
        assert doc.line_items[0].quantity is None

    def test_extract_spanish_invoice(self, extractor, sample_factura_text):
        """Spanish labels, day-first numeric dates, MXN, RFC."""
        doc = extractor.extract(sample_factura_text)

        assert doc.vendor == "PAPELERIA LA ESTRELLA S.A. DE C.V."
        assert doc.document_number == "A-1234"
        assert doc.issue_date == date(2024, 3, 15)
        assert doc.due_date == date(2024, 4, 14)
        assert doc.date_source == DateSource.LABEL
        assert doc.subtotal == Decimal("1000.00")
        assert doc.tax_amount == Decimal("160.00")
        assert doc.tax_rate == Decimal("16")
        assert doc.total == Decimal("1160.00")
        assert doc.currency == "MXN"
        assert doc.tax_id == "PES850101AB1"
        assert doc.payment_method == "TRANSFER"

    def test_statement_dates_are_positional(self, extractor, sample_statement_text):
        """Without labels, first date is issue, second is due."""
        doc = extractor.extract(sample_statement_text)

        assert doc.issue_date == date(2024, 1, 1)
        assert doc.due_date == date(2024, 1, 31)
        assert doc.date_source == DateSource.POSITIONAL
        assert doc.total is None

    def test_empty_text(self, extractor):
        """Empty text degrades to an all-None document."""
        doc = extractor.extract("")
        assert doc.vendor is None
        assert doc.total is None
        assert doc.line_items == ()
        assert doc.date_source == DateSource.NONE

    def test_none_rejected(self, extractor):
        """None is a programming error."""
        with pytest.raises(TypeError):
            extractor.extract(None)

    def test_module_level_extract(self, sample_invoice_text):
        """Convenience function uses default settings."""
        assert extract(sample_invoice_text).total == Decimal("535.00")


class TestVendorExtraction:
    """Vendor heuristics."""

    @pytest.fixture
    def extractor(self):
        return TextExtractor()

    def test_skips_boilerplate_lines(self, extractor):
        """Lines with invoice keywords are not vendor names."""
        text = "INVOICE\nDate: 2024-01-01\nGlobex Industries\nTotal: 10.00"
        assert extractor.extract_vendor(text) == "Globex Industries"

    def test_skips_numeric_lines(self, extractor):
        """Lines of only digits and punctuation are skipped."""
        text = "12345\n----\nInitech LLC"
        assert extractor.extract_vendor(text) == "Initech LLC"

    def test_label_wins(self, extractor):
        """An explicit vendor label beats line position."""
        text = "Northwind Traders\nVendor: Contoso Ltd"
        assert extractor.extract_vendor(text) == "Contoso Ltd"

    def test_fallback_to_first_line_with_letters(self, extractor):
        """If no candidate qualifies, the first non-boilerplate line with letters is used."""
        text = "Invoice\nAB\nTotal 5.00"
        assert extractor.extract_vendor(text) == "AB"

    def test_fallback_skips_boilerplate(self, extractor):
        """Summary lines are never a vendor, even as a last resort."""
        assert extractor.extract_vendor("12345\nTotal: $50.00") is None
        assert extractor.extract("12345\nTotal: $50.00").vendor is None

    def test_no_letters_no_vendor(self, extractor):
        """Numeric-only text has no vendor."""
        assert extractor.extract_vendor("123\n456") is None


class TestDocumentNumberExtraction:
    """Document number patterns."""

    @pytest.fixture
    def extractor(self):
        return TextExtractor()

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Invoice #INV-500", "INV-500"),
            ("Invoice Number: 2024-0001", "2024-0001"),
            ("INVOICE NO. 7781", "7781"),
            ("Ref INV-42 attached", "INV-42"),
            ("Bill #B-9981", "B-9981"),
            ("Receipt: 000123", "000123"),
            ("Factura No. A-1234", "A-1234"),
            ("Folio: F9921", "F9921"),
        ],
    )
    def test_number_patterns(self, extractor, text, expected):
        """Each label shape yields the identifier."""
        assert extractor.extract_document_number(text) == expected

    def test_label_without_digits_is_not_a_number(self, extractor):
        """'Invoice Date' must not yield 'Date' as a number."""
        assert extractor.extract_document_number("Invoice Date: 01/02/2024") is None


class TestDateExtraction:
    """Date collection and assignment."""

    def test_formats(self):
        """Numeric, ISO and month-name dates are all collected in order."""
        text = "2024-01-15 and 02/20/2024 then March 3, 2024 and 4 de abril de 2024"
        values = [d.value for d in collect_dates(text)]
        assert values == [
            date(2024, 1, 15),
            date(2024, 2, 20),
            date(2024, 3, 3),
            date(2024, 4, 4),
        ]

    def test_two_digit_year(self):
        """Two-digit years are 20xx."""
        assert collect_dates("15.01.24")[0].value == date(2024, 1, 15)

    def test_day_first(self):
        """day_first reads ambiguous numeric dates as day/month."""
        assert collect_dates("05/04/2024")[0].value == date(2024, 5, 4)
        assert collect_dates("05/04/2024", day_first=True)[0].value == date(2024, 4, 5)

    def test_invalid_dates_skipped(self):
        """Impossible dates are ignored."""
        assert collect_dates("13/13/2024 and 02/30/2024") == []

    def test_labelled_due_date_only(self):
        """A labelled due date plus an unlabelled date is MIXED."""
        text = "Printed 01/05/2024\nPayment due: 02/05/2024"
        result = TextExtractor().extract_dates(text)
        assert result.issue_date == date(2024, 1, 5)
        assert result.due_date == date(2024, 2, 5)
        assert result.source == DateSource.MIXED

    def test_label_beats_position(self):
        """A labelled issue date is used even when another date comes first."""
        text = "Updated 2023-12-31\nInvoice Date: 2024-01-10"
        result = TextExtractor().extract_dates(text)
        assert result.issue_date == date(2024, 1, 10)
        # The remaining unlabelled date fills the due slot positionally
        assert result.due_date == date(2023, 12, 31)
        assert result.source == DateSource.MIXED

    def test_fecha_limite_is_due_date(self):
        """'Fecha límite de pago' labels the due date, not the issue date."""
        text = "Fecha límite de pago: 14/04/2024\nFecha de emisión: 15/03/2024"
        result = TextExtractor().extract_dates(text)
        assert result.issue_date == date(2024, 3, 15)
        assert result.due_date == date(2024, 4, 14)
        assert result.source == DateSource.LABEL

    def test_fecha_vencimiento_without_de(self):
        """A bare 'Fecha vencimiento' is a due label."""
        text = "Fecha vencimiento: 2024-04-30\nFecha: 2024-04-01"
        result = TextExtractor().extract_dates(text)
        assert result.issue_date == date(2024, 4, 1)
        assert result.due_date == date(2024, 4, 30)
        assert result.source == DateSource.LABEL

    @pytest.mark.parametrize(
        "text",
        [
            "Issued: 2024-01-10\nVence: 2024-02-10",
            "Vence: 2024-02-10\nFecha de emisión: 2024-01-10",
            "Fecha de expedición: 2024-01-10\nPayment due: 2024-02-10",
        ],
    )
    def test_label_aliases(self, text):
        """English and Spanish label aliases map to the right slot."""
        result = TextExtractor().extract_dates(text)
        assert result.issue_date == date(2024, 1, 10)
        assert result.due_date == date(2024, 2, 10)
        assert result.source == DateSource.LABEL

    def test_no_dates(self):
        """No dates at all."""
        result = TextExtractor().extract_dates("nothing here")
        assert result.issue_date is None
        assert result.due_date is None
        assert result.source == DateSource.NONE


class TestAmountExtraction:
    """Amounts, reconciliation and currency."""

    @pytest.fixture
    def extractor(self):
        return TextExtractor()

    def test_back_fill_total(self, extractor):
        """Missing total is derived from subtotal + tax."""
        doc = extractor.extract("Shop\nSubtotal: 100.00\nTax: 16.00")
        assert doc.total == Decimal("116.00")
        assert doc.derived_fields == ("total",)

    def test_back_fill_subtotal(self, extractor):
        """Missing subtotal is derived from total - tax."""
        doc = extractor.extract("Shop\nTax: 16.00\nTotal: 116.00")
        assert doc.subtotal == Decimal("100.00")
        assert doc.derived_fields == ("subtotal",)

    def test_negative_total(self, extractor):
        """Negative totals are kept as printed (the validator rejects them)."""
        doc = extractor.extract("Shop\nTotal: -25.00")
        assert doc.total == Decimal("-25.00")

    def test_thousands_separator(self, extractor):
        """Thousands separators are stripped."""
        doc = extractor.extract("Shop\nGrand Total: $12,345.67")
        assert doc.total == Decimal("12345.67")

    @pytest.mark.parametrize("rate_line", ["IVA 16%", "Sales Tax (8%)", "Impuesto: 16 %"])
    def test_rate_without_amount_is_not_tax(self, extractor, rate_line):
        """A printed rate with no amount on its line is not the tax amount."""
        doc = extractor.extract(f"Widget Co\nTotal: $108.00\n{rate_line}\n$8.00\n")
        assert doc.tax_amount is None
        assert doc.subtotal is None
        assert doc.derived_fields == ()

    def test_rate_then_amount(self, extractor):
        """Rate and amount on one line: both are captured."""
        doc = extractor.extract("Widget Co\nSubtotal: 100.00\nIVA 16% 16.00\nTotal: 116.00")
        assert doc.tax_amount == Decimal("16.00")
        assert doc.tax_rate == Decimal("16")

    @pytest.mark.parametrize(
        "text,currency",
        [
            ("Total: €10.00", "EUR"),
            ("Total: 10.00 GBP", "GBP"),
            ("Total: $10.00", "USD"),
            ("Total: 10.00", "USD"),
        ],
    )
    def test_currency(self, extractor, text, currency):
        """Currency codes and symbols are detected."""
        assert extractor.extract_currency(text) == currency


class TestLineItems:
    """Line item shapes and skips."""

    @pytest.fixture
    def extractor(self):
        return TextExtractor()

    def test_quantity_price_amount(self, extractor):
        """Description, quantity, unit price, amount."""
        items = extractor.extract_line_items("Consulting hours 8 150.00 1,200.00")
        assert len(items) == 1
        item = items[0]
        assert item.description == "Consulting hours"
        assert item.quantity == Decimal("8")
        assert item.unit_price == Decimal("150.00")
        assert item.amount == Decimal("1200.00")

    def test_summary_lines_skipped(self, extractor):
        """Totals, tax and change lines are not items."""
        text = "Subtotal      10.00\nTax      0.80\nChange due      5.00\nTOTAL      10.80"
        assert extractor.extract_line_items(text) == ()

    def test_description_needs_letters(self, extractor):
        """A row of only numbers is not an item."""
        assert extractor.extract_line_items("12345      9.99") == ()

    def test_long_lines_skipped(self):
        """Lines beyond max_line_length are ignored."""
        extractor = TextExtractor(max_line_length=20)
        assert extractor.extract_line_items("A very long product description      9.99") == ()

    def test_pathological_line_is_fast(self, extractor):
        """A worst-case line just under max_line_length still matches quickly."""
        line = "1 " * 255
        assert len(line) < extractor.max_line_length

        start = time.perf_counter()
        for _ in range(10):
            assert extractor.extract_line_items(line) == ()
        assert time.perf_counter() - start < 5.0
