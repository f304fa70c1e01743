"""
Document-to-journal pipeline (entry point).

Stages run strictly forward:
    classify -> extract -> score -> suggest account -> synthesize -> validate

The pipeline is stateless: each call builds fresh value objects and holds
nothing between calls, so one instance may serve concurrent batch workers.

Error contract:
- Business conditions (missing fields, bad totals) surface through
  confidence and ValidationResult, never exceptions
- Empty text and unusable extractions become AnalysisFailure results
- Unexpected exceptions are logged here and converted to INTERNAL_ERROR;
  nothing escapes analyze()
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from pathlib import Path
from typing import Iterable, Mapping, Optional, Union

from .accounts import AccountSuggester
from .classification import DocumentClassifier
from .confidence import ConfidenceScorer
from .config import Config
from .extractors import TextExtractor
from .journal import JournalSynthesizer
from .rules import Rules, load_rules
from .schemas import (
    AnalysisFailure,
    AnalysisOutcome,
    BatchResult,
    DocumentAnalysis,
    DocumentInput,
    DocumentType,
    FailureKind,
)
from .validation import DocumentValidator

logger = logging.getLogger(__name__)

BatchItem = Union[DocumentInput, tuple, Mapping]


class DocumentPipeline:
    """
    Runs every stage for one document, or for a batch.

    Args:
        config: Settings (defaults when omitted)
        rules: Keyword and account tables; loaded from config.rules_path
            when omitted and a path is configured
    """

    def __init__(self, config: Optional[Config] = None, rules: Optional[Rules] = None):
        self.config = config or Config()
        if rules is None:
            rules = load_rules(self.config.rules_path) if self.config.rules_path else Rules()
        self.rules = rules

        extraction = self.config.extraction
        self.classifier = DocumentClassifier(rules.keywords)
        self.extractor = TextExtractor(
            day_first=extraction.day_first,
            vendor_scan_lines=extraction.vendor_scan_lines,
            max_line_length=extraction.max_line_length,
            default_currency=extraction.default_currency,
        )
        self.scorer = ConfidenceScorer()
        self.suggester = AccountSuggester(rules.accounts)
        self.synthesizer = JournalSynthesizer(
            rules.accounts,
            split_tax=self.config.journal.split_tax,
            precision=self.config.journal.currency_precision,
        )
        self.validator = DocumentValidator(
            min_vendor_length=self.config.validation.min_vendor_length,
            reconciliation_tolerance=self.config.validation.reconciliation_tolerance,
            review_confidence=self.config.validation.review_confidence,
        )

    def analyze(
        self,
        file_name: str,
        text: str,
        category_hint: Optional[str] = None,
    ) -> AnalysisOutcome:
        """Analyze one document. Never raises."""
        problem = _input_problem(file_name, text, category_hint)
        if problem:
            logger.warning(f"Rejected input for {file_name!r}: {problem}")
            return AnalysisOutcome(
                file_name=str(file_name),
                error=AnalysisFailure(FailureKind.INVALID_INPUT, problem),
            )

        try:
            return self._analyze(file_name, text, category_hint)
        except Exception as e:
            logger.exception(f"Unexpected error analyzing {file_name!r}")
            return AnalysisOutcome(
                file_name=str(file_name),
                error=AnalysisFailure(FailureKind.INTERNAL_ERROR, f"{type(e).__name__}: {e}"),
            )

    def _analyze(
        self,
        file_name: str,
        text: str,
        category_hint: Optional[str],
    ) -> AnalysisOutcome:
        start_time = time.time()

        truncated = False
        max_length = self.config.extraction.max_text_length
        if len(text) > max_length:
            logger.warning(f"{file_name}: text truncated from {len(text)} to {max_length} chars")
            text = text[:max_length]
            truncated = True

        document_type = self.classifier.classify(file_name, text)

        if not text.strip():
            logger.info(f"{file_name}: no text")
            return AnalysisOutcome(
                file_name=file_name,
                error=AnalysisFailure(
                    FailureKind.NO_TEXT,
                    "Document contains no text to analyze",
                    document_type=document_type,
                ),
            )

        doc = self.extractor.extract(text)
        doc = replace(doc, document_type=document_type, truncated=truncated)

        if doc.vendor is None and doc.total is None:
            logger.warning(f"{file_name}: neither vendor nor total could be extracted")
            return AnalysisOutcome(
                file_name=file_name,
                error=AnalysisFailure(
                    FailureKind.UNUSABLE_EXTRACTION,
                    "Could not extract vendor or total from the document",
                    document_type=document_type,
                ),
            )

        confidence = self.scorer.score(doc)
        doc = replace(doc, confidence=confidence)

        suggestion = self.suggester.suggest_for_document(doc, category_hint)
        journal_entry = self.synthesizer.synthesize(doc, suggestion.account)
        validation = self.validator.validate(doc)

        analysis = DocumentAnalysis(
            document_type=document_type,
            extracted_data=doc,
            suggested_account=suggestion.account,
            suggested_category=suggestion.category,
            journal_entry=journal_entry,
            confidence=int(round(confidence * 100)),
            confidence_level=self.scorer.level(confidence),
            validation=validation,
            processing_ms=(time.time() - start_time) * 1000,
        )

        logger.info(
            f"{file_name}: {document_type.value}, confidence {analysis.confidence}%, "
            f"{'valid' if validation.is_valid else f'{len(validation.errors)} error(s)'}"
        )
        return AnalysisOutcome(file_name=file_name, analysis=analysis)

    def analyze_input(self, item: BatchItem) -> AnalysisOutcome:
        """Analyze a DocumentInput, a (file_name, text[, hint]) tuple, or a mapping."""
        try:
            document = coerce_input(item)
        except (TypeError, ValueError) as e:
            logger.warning(f"Rejected batch item: {e}")
            return AnalysisOutcome(
                file_name=_item_name(item),
                error=AnalysisFailure(FailureKind.INVALID_INPUT, str(e)),
            )
        return self.analyze(document.file_name, document.text, document.category_hint)

    def analyze_batch(self, items: Iterable[BatchItem]) -> BatchResult:
        """
        Analyze documents independently; one failure never stops the rest.

        Outcomes are returned in input order regardless of worker count.
        """
        items = list(items)
        workers = max(1, min(self.config.batch_workers, len(items) or 1))

        if workers == 1:
            outcomes = [self.analyze_input(item) for item in items]
        else:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                outcomes = list(executor.map(self.analyze_input, items))

        result = BatchResult(outcomes=tuple(outcomes))
        logger.info(
            f"Batch done: {result.total} total, {result.successful} ok, {result.failed} failed"
        )
        return result


def _input_problem(file_name: object, text: object, category_hint: object) -> Optional[str]:
    if not isinstance(file_name, str):
        return f"file_name must be str, got {type(file_name).__name__}"
    if not isinstance(text, str):
        return f"text must be str, got {type(text).__name__}"
    if category_hint is not None and not isinstance(category_hint, str):
        return f"category_hint must be str, got {type(category_hint).__name__}"
    return None


def coerce_input(item: BatchItem) -> DocumentInput:
    """Normalize a batch item to DocumentInput."""
    if isinstance(item, DocumentInput):
        return item
    if isinstance(item, Mapping):
        file_name = item.get("file_name", item.get("fileName"))
        if file_name is None or "text" not in item:
            raise ValueError("batch item needs 'file_name' and 'text'")
        return DocumentInput(
            file_name=file_name,
            text=item["text"],
            category_hint=item.get("category_hint"),
        )
    if isinstance(item, tuple) and len(item) in (2, 3):
        return DocumentInput(*item)
    raise TypeError(f"unsupported batch item type: {type(item).__name__}")


def _item_name(item: object) -> str:
    if isinstance(item, Mapping):
        return str(item.get("file_name", item.get("fileName", "")))
    if isinstance(item, tuple) and item:
        return str(item[0])
    return ""


def analyze_document(
    file_name: str,
    text: str,
    category_hint: Optional[str] = None,
    config: Optional[Config] = None,
) -> AnalysisOutcome:
    """One-shot convenience wrapper."""
    return DocumentPipeline(config).analyze(file_name, text, category_hint)


def analyze_file(
    path: Path,
    pipeline: DocumentPipeline,
    file_name: Optional[str] = None,
    category_hint: Optional[str] = None,
) -> AnalysisOutcome:
    """Read pre-OCR'd text from a file and analyze it."""
    text = Path(path).read_text(encoding="utf-8", errors="replace")
    return pipeline.analyze(file_name or Path(path).name, text, category_hint)
