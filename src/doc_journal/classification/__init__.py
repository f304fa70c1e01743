"""
Document classification.

File name first, then body text, with bilingual keyword families kept
as swappable data.
"""

from .classifier import Classification, DocumentClassifier, classify
from .keywords import DEFAULT_KEYWORDS, ClassifierKeywords, KeywordFamily

__all__ = [
    "Classification",
    "ClassifierKeywords",
    "DEFAULT_KEYWORDS",
    "DocumentClassifier",
    "KeywordFamily",
    "classify",
]
