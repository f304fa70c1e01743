"""
Text heuristics extractor.

Pulls vendor, document number, dates, amounts and line items out of
pre-OCR'd text using the ordered pattern tables in patterns.py.

Never raises on malformed text: every field degrades to None (or an empty
tuple) independently. Deterministic: the same text always gives the same
document, no clock or randomness involved.

Date assignment is a HEURISTIC: labelled dates ("Due Date: ...") win; any
date still unassigned falls back to position (first date found = issue
date, next = due date). The result records which happened in date_source.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..schemas.document import DateSource, ExtractedDocument, LineItem
from .base import BaseExtractor, FieldMatch, first_match, parse_english_amount
from .patterns import (
    CURRENCY_PATTERNS,
    DATE_PATTERNS,
    DOCUMENT_NUMBER_PATTERNS,
    DUE_DATE_LABEL,
    HAS_LETTER,
    ISSUE_DATE_LABEL,
    LINE_ITEM_PATTERNS,
    LINE_ITEM_SKIP,
    MONTHS,
    NON_NAME_LINE,
    PAYMENT_METHOD_PATTERNS,
    SUBTOTAL_PATTERNS,
    TAX_ID_PATTERNS,
    TAX_PATTERNS,
    TOTAL_PATTERNS,
    VENDOR_EXCLUDE_KEYWORDS,
    VENDOR_LABEL_PATTERNS,
    TaxValue,
)
from .reconciler import reconcile_amounts

logger = logging.getLogger(__name__)

MAX_VENDOR_LENGTH = 100


@dataclass(frozen=True)
class FoundDate:
    """A parsed date and where it sits in the text."""

    value: date
    start: int
    end: int
    pattern: str


@dataclass(frozen=True)
class DateAssignment:
    """Issue/due dates and how they were assigned."""

    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    source: DateSource = DateSource.NONE


@dataclass(frozen=True)
class ExtractedAmounts:
    """Raw amounts as read from text, before reconciliation."""

    total: Optional[Decimal] = None
    subtotal: Optional[Decimal] = None
    tax_amount: Optional[Decimal] = None
    tax_rate: Optional[Decimal] = None


def _build_date(year: int, month: int, day: int) -> Optional[date]:
    if year < 100:
        year += 2000
    if not 1900 <= year <= 2100:
        return None
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_date_match(match: re.Match, kind: str, day_first: bool = False) -> Optional[date]:
    """Turn a DATE_PATTERNS match into a date, or None if it is not a real date."""
    groups = match.groupdict()
    year = int(groups["y"])

    if kind == "ymd":
        return _build_date(year, int(groups["m"]), int(groups["d"]))

    if kind == "named":
        month = MONTHS.get(groups["month"].lower())
        if month is None:
            return None
        return _build_date(year, month, int(groups["d"]))

    # Numeric a/b/year: read in the preferred order, fall back to the other
    a, b = int(groups["a"]), int(groups["b"])
    first, second = (b, a) if day_first else (a, b)
    return _build_date(year, first, second) or _build_date(year, second, first)


def collect_dates(text: str, day_first: bool = False) -> list[FoundDate]:
    """
    Find every date-like substring, in order of appearance.

    Overlapping matches keep the one that starts first (longest on a tie).
    """
    found: list[FoundDate] = []
    for name, regex, kind in DATE_PATTERNS:
        for match in regex.finditer(text):
            value = parse_date_match(match, kind, day_first)
            if value is not None:
                found.append(FoundDate(value, match.start(), match.end(), name))

    found.sort(key=lambda d: (d.start, -(d.end - d.start)))

    result: list[FoundDate] = []
    for candidate in found:
        if result and candidate.start < result[-1].end:
            continue
        result.append(candidate)
    return result


def _is_boilerplate(line: str) -> bool:
    lower = line.lower()
    return any(keyword in lower for keyword in VENDOR_EXCLUDE_KEYWORDS)


class TextExtractor(BaseExtractor):
    """
    Extract document fields from plain text using pattern matching.

    Each sub-extractor (extract_vendor, extract_document_number, ...) is
    public and independently testable.
    """

    def __init__(
        self,
        day_first: bool = False,
        vendor_scan_lines: int = 5,
        max_line_length: int = 512,
        default_currency: str = "USD",
    ):
        self.day_first = day_first
        self.vendor_scan_lines = vendor_scan_lines
        self.max_line_length = max_line_length
        self.default_currency = default_currency

    @property
    def name(self) -> str:
        return "text_heuristic"

    def can_extract(self, content: str) -> bool:
        """Any non-blank text can be attempted."""
        return bool(content and content.strip())

    def extract(self, content: str) -> ExtractedDocument:
        """Extract all fields. Confidence is left unset."""
        if not isinstance(content, str):
            raise TypeError(f"content must be str, got {type(content).__name__}")

        if not self.can_extract(content):
            return ExtractedDocument(raw_text=content, currency=self.default_currency)

        dates = self.extract_dates(content)
        amounts = self.extract_amounts(content)
        reconciled = reconcile_amounts(amounts.total, amounts.subtotal, amounts.tax_amount)
        if reconciled.derived:
            logger.debug(f"Derived amounts: {', '.join(reconciled.derived)}")

        return ExtractedDocument(
            raw_text=content,
            vendor=self.extract_vendor(content),
            document_number=self.extract_document_number(content),
            issue_date=dates.issue_date,
            due_date=dates.due_date,
            date_source=dates.source,
            total=reconciled.total,
            subtotal=reconciled.subtotal,
            tax_amount=reconciled.tax_amount,
            tax_rate=amounts.tax_rate,
            currency=self.extract_currency(content),
            line_items=self.extract_line_items(content),
            tax_id=self.extract_tax_id(content),
            payment_method=self.extract_payment_method(content),
            derived_fields=reconciled.derived,
        )

    # -------------------------------------------------------------------------
    # Vendor
    # -------------------------------------------------------------------------

    def extract_vendor(self, content: str) -> Optional[str]:
        """
        Best-guess counterparty name.

        Strategy:
        1. An explicit label ("From:", "Vendor:", "Proveedor:", ...)
        2. First non-empty line among the first few that is not boilerplate
           (invoice/total/date/due/bill/receipt/...) or pure digits/punctuation
        3. The first non-boilerplate line that contains a letter
        """
        labelled = first_match(VENDOR_LABEL_PATTERNS, content)
        if labelled and 3 <= len(labelled.value) <= MAX_VENDOR_LENGTH:
            return labelled.value

        lines = [line.strip() for line in content.split("\n") if line.strip()]
        if not lines:
            return None

        for line in lines[: self.vendor_scan_lines]:
            if _is_boilerplate(line) or NON_NAME_LINE.match(line):
                continue
            if 3 < len(line) < MAX_VENDOR_LENGTH:
                return line

        for line in lines:
            if not _is_boilerplate(line) and HAS_LETTER.search(line):
                return line[:MAX_VENDOR_LENGTH]
        return None

    # -------------------------------------------------------------------------
    # Document number
    # -------------------------------------------------------------------------

    def extract_document_number(self, content: str) -> Optional[str]:
        """Invoice/receipt/statement identifier; first pattern to match wins."""
        match = first_match(DOCUMENT_NUMBER_PATTERNS, content)
        if match:
            logger.debug(f"Document number via '{match.pattern}'")
            return match.value
        return None

    # -------------------------------------------------------------------------
    # Dates
    # -------------------------------------------------------------------------

    def _labelled_date(self, regex: re.Pattern, content: str) -> Optional[FoundDate]:
        """First label occurrence whose remainder-of-line holds a parseable date."""
        for match in regex.finditer(content):
            rest = match.group("rest")
            dates = collect_dates(rest, self.day_first)
            if dates:
                offset = match.start("rest")
                found = dates[0]
                return FoundDate(found.value, offset + found.start, offset + found.end, "label")
        return None

    def extract_dates(self, content: str) -> DateAssignment:
        """
        Assign issue and due dates.

        Labelled dates are preferred. Unassigned slots are filled from the
        remaining dates in order of appearance: the first becomes the issue
        date, the next the due date. Lossy on documents with extra dates.
        """
        issue = self._labelled_date(ISSUE_DATE_LABEL, content)
        due = self._labelled_date(DUE_DATE_LABEL, content)
        labelled_spans = {(d.start, d.end) for d in (issue, due) if d is not None}

        remaining = [
            d for d in collect_dates(content, self.day_first)
            if (d.start, d.end) not in labelled_spans
        ]

        sources: set[str] = set()
        issue_date = due_date = None

        if issue is not None:
            issue_date = issue.value
            sources.add("label")
        elif remaining:
            issue_date = remaining.pop(0).value
            sources.add("positional")

        if due is not None:
            due_date = due.value
            sources.add("label")
        elif remaining:
            due_date = remaining.pop(0).value
            sources.add("positional")

        if sources == {"label"}:
            source = DateSource.LABEL
        elif sources == {"positional"}:
            source = DateSource.POSITIONAL
        elif sources:
            source = DateSource.MIXED
        else:
            source = DateSource.NONE

        return DateAssignment(issue_date=issue_date, due_date=due_date, source=source)

    # -------------------------------------------------------------------------
    # Amounts
    # -------------------------------------------------------------------------

    def extract_amounts(self, content: str) -> ExtractedAmounts:
        """Total, subtotal and tax as printed, before reconciliation."""
        total = first_match(TOTAL_PATTERNS, content)
        subtotal = first_match(SUBTOTAL_PATTERNS, content)
        tax: Optional[FieldMatch] = first_match(TAX_PATTERNS, content)
        tax_value: Optional[TaxValue] = tax.value if tax else None

        return ExtractedAmounts(
            total=total.value if total else None,
            subtotal=subtotal.value if subtotal else None,
            tax_amount=tax_value.amount if tax_value else None,
            tax_rate=tax_value.rate if tax_value else None,
        )

    def extract_currency(self, content: str) -> str:
        """ISO currency code from codes/symbols in the text."""
        for regex, currency in CURRENCY_PATTERNS:
            if regex.search(content):
                return currency
        return self.default_currency

    # -------------------------------------------------------------------------
    # Line items
    # -------------------------------------------------------------------------

    def extract_line_items(self, content: str) -> tuple[LineItem, ...]:
        """
        Line items from single-line rows.

        Rows that do not fit one of the line shapes are skipped silently;
        tables split across lines by OCR are not reassembled.
        """
        items: list[LineItem] = []

        for raw_line in content.split("\n"):
            line = raw_line.strip()
            if not line or len(line) > self.max_line_length:
                continue
            if LINE_ITEM_SKIP.search(line):
                continue

            for _name, regex in LINE_ITEM_PATTERNS:
                match = regex.match(line)
                if not match:
                    continue
                item = self._line_item_from_match(match)
                if item is not None:
                    items.append(item)
                break

        return tuple(items)

    def _line_item_from_match(self, match: re.Match) -> Optional[LineItem]:
        groups = match.groupdict()
        description = groups["description"].strip(" \t-:*.")
        if not HAS_LETTER.search(description):
            return None

        amount = parse_english_amount(groups["amount"])
        if amount is None:
            return None

        quantity = unit_price = None
        if groups.get("quantity"):
            quantity = Decimal(groups["quantity"])
        if groups.get("unit_price"):
            unit_price = parse_english_amount(groups["unit_price"])

        return LineItem(
            description=description,
            amount=amount,
            quantity=quantity,
            unit_price=unit_price,
        )

    # -------------------------------------------------------------------------
    # Tax id / payment method
    # -------------------------------------------------------------------------

    def extract_tax_id(self, content: str) -> Optional[str]:
        match = first_match(TAX_ID_PATTERNS, content)
        return match.value if match else None

    def extract_payment_method(self, content: str) -> Optional[str]:
        match = first_match(PAYMENT_METHOD_PATTERNS, content)
        return match.value if match else None


_default_extractor = TextExtractor()


def extract(text: str) -> ExtractedDocument:
    """Extract with default settings."""
    return _default_extractor.extract(text)
