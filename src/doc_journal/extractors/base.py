"""
Base extractor interface and per-field matching primitives.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Generic, Optional, Sequence, TypeVar

from ..schemas.document import ExtractedDocument

T = TypeVar("T")


@dataclass(frozen=True)
class FieldMatch(Generic[T]):
    """
    A successfully extracted field value.

    Extractors return Optional[FieldMatch]: None means the field is absent,
    which keeps "not found" distinct from a legitimate zero.
    """

    value: T
    pattern: str  # Name of the pattern that produced the value
    position: int = 0  # Offset of the match in the source text


@dataclass(frozen=True)
class FieldPattern:
    """
    One interpretation of the text for a field.

    convert() turns a regex match into a value, or None when the match
    does not hold a usable value (the next pattern is then tried).
    """

    name: str
    regex: re.Pattern
    convert: Callable[[re.Match], Any]


def first_match(patterns: Sequence[FieldPattern], text: str) -> Optional[FieldMatch]:
    """
    Try patterns in priority order; first converted value wins.

    Within one pattern, every occurrence is tried in text order before
    moving to the next pattern.
    """
    for field_pattern in patterns:
        for match in field_pattern.regex.finditer(text):
            value = field_pattern.convert(match)
            if value is not None:
                return FieldMatch(value=value, pattern=field_pattern.name, position=match.start())
    return None


def parse_english_amount(amount_str: str) -> Optional[Decimal]:
    """
    Parse an English-format amount (1,234.56 / $1,234.56 / -12.50) to Decimal.

    Returns None if the string is not a number.
    """
    cleaned = (
        amount_str.replace(",", "")
        .replace("$", "")
        .replace("€", "")
        .replace("£", "")
        .replace(" ", "")
        .strip()
    )
    if not cleaned:
        return None
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return None


class BaseExtractor(ABC):
    """
    Base class for text extractors.

    Each extractor implements one strategy for turning document text into
    an ExtractedDocument.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Extractor name for logging and provenance."""
        pass

    @abstractmethod
    def can_extract(self, content: str) -> bool:
        """Check if this extractor should be attempted for the content."""
        pass

    @abstractmethod
    def extract(self, content: str) -> ExtractedDocument:
        """
        Extract fields from content.

        Must never raise for malformed text; absent fields are None/empty.
        """
        pass
