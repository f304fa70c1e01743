"""Tests for total / subtotal / tax reconciliation."""

from decimal import Decimal

from doc_journal.extractors import reconcile_amounts, reconciliation_difference


class TestReconcileAmounts:
    """Back-fill of exactly one missing amount."""

    def test_derive_total(self):
        """subtotal=100, tax=16 -> total=116."""
        result = reconcile_amounts(None, Decimal("100"), Decimal("16"))
        assert result.total == Decimal("116")
        assert result.derived == ("total",)

    def test_derive_subtotal(self):
        """total=116, tax=16 -> subtotal=100."""
        result = reconcile_amounts(Decimal("116"), None, Decimal("16"))
        assert result.subtotal == Decimal("100")
        assert result.derived == ("subtotal",)

    def test_derive_tax(self):
        """total=116, subtotal=100 -> tax=16."""
        result = reconcile_amounts(Decimal("116"), Decimal("100"), None)
        assert result.tax_amount == Decimal("16")
        assert result.derived == ("tax_amount",)

    def test_negative_subtotal_not_invented(self):
        """Tax larger than total leaves subtotal missing."""
        result = reconcile_amounts(Decimal("10"), None, Decimal("16"))
        assert result.subtotal is None
        assert result.derived == ()

    def test_negative_tax_not_invented(self):
        """Subtotal larger than total leaves tax missing."""
        result = reconcile_amounts(Decimal("90"), Decimal("100"), None)
        assert result.tax_amount is None

    def test_all_present_untouched(self):
        """Mismatches between present values are not corrected."""
        result = reconcile_amounts(Decimal("120"), Decimal("100"), Decimal("16"))
        assert (result.total, result.subtotal, result.tax_amount) == (
            Decimal("120"),
            Decimal("100"),
            Decimal("16"),
        )
        assert result.derived == ()

    def test_two_missing_untouched(self):
        """Only one value can be derived."""
        result = reconcile_amounts(Decimal("50"), None, None)
        assert result.subtotal is None
        assert result.tax_amount is None


class TestReconciliationDifference:
    """Residual mismatch measurement."""

    def test_difference(self):
        assert reconciliation_difference(
            Decimal("120"), Decimal("100"), Decimal("16")
        ) == Decimal("4")

    def test_missing_value(self):
        assert reconciliation_difference(Decimal("120"), None, Decimal("16")) is None
