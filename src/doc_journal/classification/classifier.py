"""
Rule-based document-type classifier.

Order of evaluation (fixed):
1. File name, families checked in declaration order; first family with a
   keyword hit wins. File names are short and deliberate, so they are
   trusted over body text.
2. Body text: the family whose keyword occurs EARLIEST in the text wins
   (headers beat footers, e.g. a receipt with "factura" in the fine print).
   Equal positions fall back to family order.
3. Nothing matched: UNKNOWN.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..schemas.document import DocumentType
from .keywords import DEFAULT_KEYWORDS, ClassifierKeywords

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Classification:
    """Classification result with the evidence that decided it."""

    document_type: DocumentType
    source: Optional[str] = None  # "file_name", "text" or None
    keyword: Optional[str] = None


class DocumentClassifier:
    """Assigns a DocumentType from file name and/or text."""

    def __init__(self, keywords: Optional[ClassifierKeywords] = None):
        self.keywords = keywords or DEFAULT_KEYWORDS

    def classify(self, file_name: str, text: str) -> DocumentType:
        """Return the document type for a file name / text pair."""
        return self.explain(file_name, text).document_type

    def explain(self, file_name: str, text: str) -> Classification:
        """Classify and report which keyword decided it."""
        if not isinstance(file_name, str) or not isinstance(text, str):
            raise TypeError("file_name and text must be strings")

        name_lower = file_name.lower()
        for family in self.keywords.families:
            for keyword in family.file_name:
                if keyword in name_lower:
                    logger.debug(f"Classified {family.document_type.value} by file name '{keyword}'")
                    return Classification(family.document_type, "file_name", keyword)

        text_lower = text.lower()
        best: Optional[tuple[int, int, DocumentType, str]] = None
        for order, family in enumerate(self.keywords.families):
            for keyword in family.text:
                position = text_lower.find(keyword)
                if position < 0:
                    continue
                candidate = (position, order, family.document_type, keyword)
                if best is None or candidate[:2] < best[:2]:
                    best = candidate

        if best is not None:
            _, _, document_type, keyword = best
            logger.debug(f"Classified {document_type.value} by text '{keyword}'")
            return Classification(document_type, "text", keyword)

        return Classification(DocumentType.UNKNOWN)


_default_classifier = DocumentClassifier()


def classify(file_name: str, text: str) -> DocumentType:
    """Classify with the default keyword families."""
    return _default_classifier.classify(file_name, text)
