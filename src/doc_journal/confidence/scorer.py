"""
Confidence scoring implementation.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Optional

from ..schemas.analysis import ConfidenceLevel
from ..schemas.document import ExtractedDocument


@dataclass(frozen=True)
class RubricItem:
    """One weighted completeness check."""

    field: str
    weight: Decimal
    check: Callable[[ExtractedDocument], bool]


# Weights total 1.0. Vendor and total dominate: a wrong or missing counterparty
# or amount costs far more downstream than a missing line-item breakdown.
DEFAULT_RUBRIC: tuple[RubricItem, ...] = (
    RubricItem("vendor", Decimal("0.30"), lambda d: bool(d.vendor) and len(d.vendor.strip()) > 3),
    RubricItem("total", Decimal("0.40"), lambda d: d.total is not None and d.total > 0),
    RubricItem("issue_date", Decimal("0.10"), lambda d: d.issue_date is not None),
    RubricItem("document_number", Decimal("0.10"), lambda d: bool(d.document_number)),
    RubricItem("line_items", Decimal("0.10"), lambda d: len(d.line_items) > 0),
)


@dataclass
class ConfidenceThresholds:
    """Configurable thresholds for confidence levels."""

    very_high: float = 0.8  # Above this: VERY_HIGH
    high: float = 0.6  # Above this: HIGH
    medium: float = 0.4  # Above this: MEDIUM, below: LOW


class ConfidenceScorer:
    """
    Computes extraction completeness scores.

    The score is a heuristic in [0, 1], not a probability. Weights are summed
    as Decimal so that e.g. 0.3 + 0.4 + 0.1 + 0.1 is exactly 0.9.
    """

    def __init__(
        self,
        thresholds: Optional[ConfidenceThresholds] = None,
        rubric: tuple[RubricItem, ...] = DEFAULT_RUBRIC,
    ):
        """Initialize scorer with thresholds and rubric."""
        self.thresholds = thresholds or ConfidenceThresholds()
        self.rubric = rubric

    def score(self, doc: ExtractedDocument) -> float:
        """Weighted sum of satisfied rubric items. Pure; no I/O."""
        total = sum(
            (item.weight for item in self.rubric if item.check(doc)),
            Decimal("0"),
        )
        return float(min(total, Decimal("1")))

    def breakdown(self, doc: ExtractedDocument) -> dict[str, bool]:
        """Which rubric items the document satisfies."""
        return {item.field: item.check(doc) for item in self.rubric}

    def level(self, score: float) -> ConfidenceLevel:
        """
        Map a score to a coarse level.

        Rules:
        - VERY_HIGH: score > very_high
        - HIGH: score > high
        - MEDIUM: score > medium
        - LOW: otherwise
        """
        if score > self.thresholds.very_high:
            return ConfidenceLevel.VERY_HIGH
        elif score > self.thresholds.high:
            return ConfidenceLevel.HIGH
        elif score > self.thresholds.medium:
            return ConfidenceLevel.MEDIUM
        else:
            return ConfidenceLevel.LOW


_default_scorer = ConfidenceScorer()


def score(doc: ExtractedDocument) -> float:
    """Score with the default rubric."""
    return _default_scorer.score(doc)
