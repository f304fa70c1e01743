"""
Rules file loading.

Classifier keywords, category keywords and the chart of accounts are data.
A YAML rules file can replace any of them without code changes::

    classifier:
      INVOICE: {file_name: [invoice, factura], text: [invoice, bill to]}
      RECEIPT: {file_name: [receipt], text: [receipt, cashier]}
    accounts:
      chart:
        "1000": {name: "Cash/Bank", type: asset}
        "1400": {name: "Sales Tax Receivable", type: asset}
        "2000": {name: "Accounts Payable", type: liability}
        "6200": {name: "Travel", type: expense}
        "6900": {name: "Uncategorized Expense", type: expense}
      document_types: {INVOICE: "2000", RECEIPT: "6900"}
      categories:
        travel: {account: "6200", label: "Travel", keywords: [hotel, airline]}

Sections that are absent keep their built-in defaults. A replaced chart must
still contain every account the other tables reference.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .accounts.chart import AccountRules
from .classification.keywords import DEFAULT_KEYWORDS, ClassifierKeywords

logger = logging.getLogger(__name__)


class RulesFileError(Exception):
    """Raised when a rules file cannot be read or has an invalid shape."""

    pass


@dataclass
class Rules:
    """Swappable lookup tables used by the pipeline."""

    keywords: ClassifierKeywords = field(default_factory=lambda: DEFAULT_KEYWORDS)
    accounts: AccountRules = field(default_factory=AccountRules)


def rules_from_mapping(data: dict) -> Rules:
    """Build Rules from a parsed YAML mapping."""
    if not isinstance(data, dict):
        raise RulesFileError("Rules file must contain a mapping at the top level")

    rules = Rules()
    try:
        classifier_data = data.get("classifier")
        if classifier_data:
            rules.keywords = ClassifierKeywords.from_mapping(classifier_data)

        accounts_data = data.get("accounts")
        if accounts_data:
            rules.accounts = AccountRules.from_mapping(accounts_data)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise RulesFileError(f"Invalid rules: {e}") from e

    errors = rules.accounts.validate()
    if errors:
        raise RulesFileError(f"Invalid account rules: {'; '.join(errors)}")

    return rules


def load_rules(rules_path: Path) -> Rules:
    """
    Load rules from a YAML file.

    Raises:
        RulesFileError: If the file is missing, not valid YAML, or its
            tables reference unknown accounts/document types.
    """
    rules_path = Path(rules_path)
    if not rules_path.exists():
        raise RulesFileError(f"Rules file not found: {rules_path}")

    try:
        with open(rules_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise RulesFileError(f"Rules file is not valid YAML: {e}") from e

    rules = rules_from_mapping(data)
    logger.info(f"Loaded rules from {rules_path}")
    return rules
