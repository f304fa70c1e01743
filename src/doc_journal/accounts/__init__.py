"""
Account suggestion: chart of accounts tables and the suggester.
"""

from .chart import DEFAULT_CHART, AccountRules
from .suggester import AccountSuggester, AccountSuggestion, suggest

__all__ = [
    "AccountRules",
    "AccountSuggester",
    "AccountSuggestion",
    "DEFAULT_CHART",
    "suggest",
]
