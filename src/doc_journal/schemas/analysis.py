"""
Pipeline output shapes: per-document outcome and batch result.

A document either produces a DocumentAnalysis or an AnalysisFailure;
the pipeline never lets an exception escape to the caller.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .document import (
    DocumentType,
    ExtractedDocument,
    JournalEntrySuggestion,
    SuggestedAccount,
    ValidationResult,
)


class ConfidenceLevel(str, Enum):
    """Coarse label for a confidence score."""

    VERY_HIGH = "VERY_HIGH"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class FailureKind(str, Enum):
    """
    Why a document produced no analysis.

    NO_TEXT: text was empty or whitespace only
    UNUSABLE_EXTRACTION: neither vendor nor total could be resolved
    INVALID_INPUT: caller passed something other than strings
    INTERNAL_ERROR: unexpected exception inside a stage
    """

    NO_TEXT = "NO_TEXT"
    UNUSABLE_EXTRACTION = "UNUSABLE_EXTRACTION"
    INVALID_INPUT = "INVALID_INPUT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass(frozen=True)
class DocumentInput:
    """One document handed to the pipeline."""

    file_name: str
    text: str
    category_hint: Optional[str] = None


@dataclass(frozen=True)
class DocumentAnalysis:
    """Successful pipeline result for one document."""

    document_type: DocumentType
    extracted_data: ExtractedDocument
    suggested_account: Optional[SuggestedAccount]
    suggested_category: str
    journal_entry: Optional[JournalEntrySuggestion]
    confidence: int  # 0-100, for presentation
    confidence_level: ConfidenceLevel
    validation: ValidationResult
    processing_ms: float = field(default=0.0, compare=False)

    def to_dict(self) -> dict:
        return {
            "document_type": self.document_type.value,
            "extracted_data": self.extracted_data.to_dict(),
            "suggested_account": (
                self.suggested_account.to_dict() if self.suggested_account else None
            ),
            "suggested_category": self.suggested_category,
            "journal_entry": self.journal_entry.to_dict() if self.journal_entry else None,
            "confidence": self.confidence,
            "confidence_level": self.confidence_level.value,
            "validation": self.validation.to_dict(),
            "processing_ms": round(self.processing_ms, 3),
        }


@dataclass(frozen=True)
class AnalysisFailure:
    """Structured failure for one document."""

    kind: FailureKind
    message: str
    document_type: DocumentType = DocumentType.UNKNOWN

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "document_type": self.document_type.value,
        }


@dataclass(frozen=True)
class AnalysisOutcome:
    """Either an analysis or a failure, tagged with the input file name."""

    file_name: str
    analysis: Optional[DocumentAnalysis] = None
    error: Optional[AnalysisFailure] = None

    @property
    def success(self) -> bool:
        return self.analysis is not None

    def to_dict(self) -> dict:
        result: dict = {"file_name": self.file_name, "success": self.success}
        if self.analysis is not None:
            result["data"] = self.analysis.to_dict()
        if self.error is not None:
            result["error"] = self.error.to_dict()
        return result


@dataclass(frozen=True)
class BatchResult:
    """Ordered per-document outcomes plus aggregate counts."""

    outcomes: tuple[AnalysisOutcome, ...]

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def successful(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.success)

    @property
    def failed(self) -> int:
        return self.total - self.successful

    @property
    def average_confidence(self) -> float:
        """Mean presentation confidence (0-100) over successful documents."""
        scores = [o.analysis.confidence for o in self.outcomes if o.analysis is not None]
        if not scores:
            return 0.0
        return sum(scores) / len(scores)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "successful": self.successful,
            "failed": self.failed,
            "average_confidence": round(self.average_confidence, 2),
            "results": [outcome.to_dict() for outcome in self.outcomes],
        }
