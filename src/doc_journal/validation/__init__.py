"""
Business-rule validation.
"""

from .validator import DocumentValidator, validate

__all__ = [
    "DocumentValidator",
    "validate",
]
