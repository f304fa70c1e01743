"""
SSOT (Single Source of Truth) schemas for the pipeline.

These canonical value objects are the ONLY models passed between stages.
"""

from .analysis import (
    AnalysisFailure,
    AnalysisOutcome,
    BatchResult,
    ConfidenceLevel,
    DocumentAnalysis,
    DocumentInput,
    FailureKind,
)
from .document import (
    AccountType,
    DateSource,
    DocumentType,
    ExtractedDocument,
    JournalEntrySuggestion,
    JournalLine,
    LineItem,
    SuggestedAccount,
    ValidationResult,
)

__all__ = [
    # Document
    "AccountType",
    "DateSource",
    "DocumentType",
    "ExtractedDocument",
    "JournalEntrySuggestion",
    "JournalLine",
    "LineItem",
    "SuggestedAccount",
    "ValidationResult",
    # Analysis
    "AnalysisFailure",
    "AnalysisOutcome",
    "BatchResult",
    "ConfidenceLevel",
    "DocumentAnalysis",
    "DocumentInput",
    "FailureKind",
]
