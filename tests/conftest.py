"""Test fixtures and utilities."""

from datetime import date
from decimal import Decimal

import pytest

from doc_journal.schemas import DocumentType, ExtractedDocument, LineItem

# Sample pre-OCR'd text for testing
SAMPLE_INVOICE_TEXT = (
    "ACME Corp\n"
    "Invoice #INV-500\n"
    "Date: 01/15/2024\n"
    "Due Date: 02/15/2024\n"
    "Subtotal: $500.00\n"
    "Tax: $35.00\n"
    "Total: $535.00"
)

SAMPLE_RECEIPT_TEXT = """
CORNER MARKET
123 Main St
Receipt #10234
Date: 03/02/2024

Coffee Beans        $12.99
Printer Paper       $8.50
Subtotal: $21.49
Sales Tax (7%): $1.50
Total: $22.99
Paid with VISA
Cashier: Maria
"""

SAMPLE_STATEMENT_TEXT = """
FIRST NATIONAL BANK
Account Statement
Statement Period: 01/01/2024 - 01/31/2024
Account Number: 1234567890
Beginning Balance: $5,000.00
Deposits: $2,500.00
Withdrawals: $1,200.00
Ending Balance: $6,300.00
"""

SAMPLE_FACTURA_TEXT = """
PAPELERIA LA ESTRELLA S.A. DE C.V.
RFC: PES850101AB1
Factura No. A-1234
Fecha de emisión: 15/03/2024
Fecha de vencimiento: 14/04/2024

Subtotal: $1,000.00
IVA (16%): $160.00
Total a pagar: $1,160.00 MXN
Forma de pago: Transferencia
"""


@pytest.fixture
def sample_invoice_text() -> str:
    """English invoice with labelled dates and reconciling amounts."""
    return SAMPLE_INVOICE_TEXT


@pytest.fixture
def sample_receipt_text() -> str:
    """Store receipt with single-amount line items."""
    return SAMPLE_RECEIPT_TEXT


@pytest.fixture
def sample_statement_text() -> str:
    """Bank statement summary."""
    return SAMPLE_STATEMENT_TEXT


@pytest.fixture
def sample_factura_text() -> str:
    """Spanish (Mexican) invoice."""
    return SAMPLE_FACTURA_TEXT


@pytest.fixture
def complete_document() -> ExtractedDocument:
    """A document with every scored field present."""
    return ExtractedDocument(
        raw_text="",
        document_type=DocumentType.INVOICE,
        vendor="ACME Corp",
        document_number="INV-500",
        issue_date=date(2024, 1, 15),
        due_date=date(2024, 2, 15),
        total=Decimal("535.00"),
        subtotal=Decimal("500.00"),
        tax_amount=Decimal("35.00"),
        line_items=(LineItem(description="Widgets", amount=Decimal("500.00")),),
    )
