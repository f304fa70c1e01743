"""
Financial document text → Structured fields → Balanced journal entry suggestion

A deterministic, testable pipeline that classifies invoices, receipts and
bank statements, extracts their fields from pre-OCR'd text, scores
extraction confidence, and proposes a double-entry journal entry whose
debits equal its credits exactly.
"""

__version__ = "0.1.0"
