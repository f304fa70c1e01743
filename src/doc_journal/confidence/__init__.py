"""
Confidence scoring module.

Computes a weighted completeness score for extracted documents and maps
it to a coarse confidence level.
"""

from .scorer import DEFAULT_RUBRIC, ConfidenceScorer, ConfidenceThresholds, RubricItem, score

__all__ = [
    "ConfidenceScorer",
    "ConfidenceThresholds",
    "DEFAULT_RUBRIC",
    "RubricItem",
    "score",
]
