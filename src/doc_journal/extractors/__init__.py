"""
Document field extractors.

Provides:
- TextExtractor: Heuristic extraction from pre-OCR'd text
- Pattern tables (English/Spanish) as ordered data
- Amount reconciliation (total / subtotal / tax)
- Base classes for custom extractors
"""

from .base import BaseExtractor, FieldMatch, FieldPattern, first_match, parse_english_amount
from .reconciler import ReconciledAmounts, reconcile_amounts, reconciliation_difference
from .text_extractor import DateAssignment, TextExtractor, collect_dates, extract

__all__ = [
    "BaseExtractor",
    "DateAssignment",
    "FieldMatch",
    "FieldPattern",
    "ReconciledAmounts",
    "TextExtractor",
    "collect_dates",
    "extract",
    "first_match",
    "parse_english_amount",
    "reconcile_amounts",
    "reconciliation_difference",
]
