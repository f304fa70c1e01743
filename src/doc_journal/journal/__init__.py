"""
Journal entry synthesis.

Produces balanced double-entry suggestions from extracted documents.
"""

from .synthesizer import (
    CURRENCY_PRECISION,
    AmountValidationError,
    JournalBalanceError,
    JournalSynthesizer,
    synthesize,
    validate_amount,
)

__all__ = [
    "AmountValidationError",
    "CURRENCY_PRECISION",
    "JournalBalanceError",
    "JournalSynthesizer",
    "synthesize",
    "validate_amount",
]
