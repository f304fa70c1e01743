"""
Configuration management (SSOT).

This module defines ALL configuration for the document-to-journal pipeline.
All config keys are defined here; no other module should invent config keys.

Key invariants:
- Every section has working defaults; an empty or missing file is valid
- Environment variables override file values
"""

import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path

import yaml


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    pass


@dataclass
class ExtractionConfig:
    """Field extraction settings."""

    # Longer input is truncated (and flagged) before any regex runs
    max_text_length: int = 100_000
    # Longer lines are skipped by the line-item matcher
    max_line_length: int = 512
    # How many leading non-empty lines are vendor candidates
    vendor_scan_lines: int = 5
    # Read numeric dates as day/month (European) instead of month/day
    day_first: bool = False
    # Currency when the text carries no code or symbol
    default_currency: str = "USD"


@dataclass
class ValidationConfig:
    """Validator thresholds."""

    # Max |subtotal + tax - total| before a mismatch warning
    reconciliation_tolerance: Decimal = Decimal("0.01")
    min_vendor_length: int = 3
    # Below this confidence: recommend manual review
    review_confidence: float = 0.5


@dataclass
class JournalConfig:
    """Journal synthesis settings."""

    # Split the debit side into net expense + recoverable tax
    split_tax: bool = False
    currency_precision: Decimal = Decimal("0.01")


@dataclass
class Config:
    """Application configuration (SSOT).

    All configuration is centralized here. No other module should define
    configuration keys or defaults.
    """

    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    journal: JournalConfig = field(default_factory=JournalConfig)
    # Optional YAML file overriding keyword and account tables
    rules_path: Path | None = None
    # Thread-pool size for batch runs (1 = sequential)
    batch_workers: int = 1

    def validate(self) -> list[str]:
        """Validate configuration completeness and consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors: list[str] = []

        if self.extraction.max_text_length <= 0:
            errors.append("extraction.max_text_length must be > 0")
        if self.extraction.max_line_length <= 0:
            errors.append("extraction.max_line_length must be > 0")
        if self.extraction.vendor_scan_lines <= 0:
            errors.append("extraction.vendor_scan_lines must be > 0")
        if len(self.extraction.default_currency) != 3:
            errors.append("extraction.default_currency must be a 3-letter ISO code")

        if self.validation.reconciliation_tolerance < 0:
            errors.append("validation.reconciliation_tolerance must be >= 0")
        if self.validation.min_vendor_length < 1:
            errors.append("validation.min_vendor_length must be >= 1")
        if not 0.0 <= self.validation.review_confidence <= 1.0:
            errors.append("validation.review_confidence must be between 0 and 1")

        if self.journal.currency_precision <= 0:
            errors.append("journal.currency_precision must be > 0")

        if self.batch_workers < 1:
            errors.append("batch_workers must be >= 1")

        if self.rules_path is not None and not self.rules_path.exists():
            errors.append(f"rules_path does not exist: {self.rules_path}")

        return errors


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name, "").lower()
    if value in ("true", "1", "yes"):
        return True
    if value in ("false", "0", "no"):
        return False
    return default


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name, "")
    if value:
        try:
            return int(value)
        except ValueError as e:
            raise ConfigValidationError(f"{name} must be an integer, got {value!r}") from e
    return default


def _decimal(value, key: str) -> Decimal:
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ConfigValidationError(f"{key} must be a number, got {value!r}") from e


def load_config(config_path: Path | None = None) -> Config:
    """
    Load configuration from YAML file.

    A missing file yields the defaults. Environment variables can override
    config values:
    - DOC_JOURNAL_MAX_TEXT_LENGTH
    - DOC_JOURNAL_DAY_FIRST (true/false)
    - DOC_JOURNAL_SPLIT_TAX (true/false)
    - DOC_JOURNAL_RULES_PATH
    - DOC_JOURNAL_BATCH_WORKERS

    Raises:
        ConfigValidationError: If the file is not a YAML mapping, a value has
            the wrong type, or the resulting config fails validate()
    """
    data: dict = {}
    if config_path is not None and Path(config_path).exists():
        with open(config_path) as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigValidationError(f"Config file is not valid YAML: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Config file must contain a mapping at the top level")

    # Extraction config
    extraction_data = data.get("extraction", {})
    extraction = ExtractionConfig(
        max_text_length=_env_int(
            "DOC_JOURNAL_MAX_TEXT_LENGTH", int(extraction_data.get("max_text_length", 100_000))
        ),
        max_line_length=int(extraction_data.get("max_line_length", 512)),
        vendor_scan_lines=int(extraction_data.get("vendor_scan_lines", 5)),
        day_first=_env_bool("DOC_JOURNAL_DAY_FIRST", bool(extraction_data.get("day_first", False))),
        default_currency=str(extraction_data.get("default_currency", "USD")).upper(),
    )

    # Validation config
    validation_data = data.get("validation", {})
    validation = ValidationConfig(
        reconciliation_tolerance=_decimal(
            validation_data.get("reconciliation_tolerance", "0.01"),
            "validation.reconciliation_tolerance",
        ),
        min_vendor_length=int(validation_data.get("min_vendor_length", 3)),
        review_confidence=float(validation_data.get("review_confidence", 0.5)),
    )

    # Journal config
    journal_data = data.get("journal", {})
    journal = JournalConfig(
        split_tax=_env_bool("DOC_JOURNAL_SPLIT_TAX", bool(journal_data.get("split_tax", False))),
        currency_precision=_decimal(
            journal_data.get("currency_precision", "0.01"), "journal.currency_precision"
        ),
    )

    rules_path = os.environ.get("DOC_JOURNAL_RULES_PATH", data.get("rules_path"))

    config = Config(
        extraction=extraction,
        validation=validation,
        journal=journal,
        rules_path=Path(rules_path) if rules_path else None,
        batch_workers=_env_int("DOC_JOURNAL_BATCH_WORKERS", int(data.get("batch_workers", 1))),
    )

    errors = config.validate()
    if errors:
        raise ConfigValidationError(f"Invalid configuration: {'; '.join(errors)}")

    return config


def create_default_config(config_path: Path) -> None:
    """Create a default configuration file."""
    default_config = """# Document -> Journal Pipeline Configuration
#
# Every key is optional; missing keys use the defaults shown here.

# Field extraction
extraction:
  max_text_length: 100000        # Longer input is truncated and flagged
  max_line_length: 512           # Longer lines are ignored for line items
  vendor_scan_lines: 5           # Leading lines considered for the vendor name
  day_first: false               # true: read 05/04/2024 as 5 April
  default_currency: "USD"        # When no currency code/symbol is found

# Validator thresholds
validation:
  reconciliation_tolerance: "0.01"   # Max |subtotal + tax - total| before warning
  min_vendor_length: 3
  review_confidence: 0.5             # Below this: recommend manual review

# Journal synthesis
journal:
  split_tax: false               # Debit net expense + recoverable tax separately
  currency_precision: "0.01"

# Optional rules file (classifier keywords, categories, chart of accounts)
rules_path: null

# Batch processing
batch_workers: 1                 # Thread-pool size (1 = sequential)
"""

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        f.write(default_config)
