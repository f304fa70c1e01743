"""
Amount reconciliation (total / subtotal / tax).

When exactly one of the three is missing it is derived from the other two.
A derived value that would be negative is not invented; the field stays
None and the inconsistency surfaces through confidence and validation.

Mismatches between three PRESENT values are never corrected here; the
validator reports them as warnings.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconciledAmounts:
    """Amounts after back-fill, with the names of derived fields."""

    total: Optional[Decimal]
    subtotal: Optional[Decimal]
    tax_amount: Optional[Decimal]
    derived: tuple[str, ...] = ()


def reconcile_amounts(
    total: Optional[Decimal],
    subtotal: Optional[Decimal],
    tax_amount: Optional[Decimal],
) -> ReconciledAmounts:
    """
    Fill one missing amount from the other two.

    Examples:
        subtotal=100, tax=16, total=None  -> total=116
        total=116, tax=16, subtotal=None  -> subtotal=100
        total=116, subtotal=100, tax=None -> tax=16
    """
    derived: list[str] = []

    if total is None and subtotal is not None and tax_amount is not None:
        total = subtotal + tax_amount
        derived.append("total")
    elif subtotal is None and total is not None and tax_amount is not None:
        candidate = total - tax_amount
        if candidate >= 0:
            subtotal = candidate
            derived.append("subtotal")
        else:
            logger.debug(f"Not deriving subtotal: tax {tax_amount} exceeds total {total}")
    elif tax_amount is None and total is not None and subtotal is not None:
        candidate = total - subtotal
        if candidate >= 0:
            tax_amount = candidate
            derived.append("tax_amount")
        else:
            logger.debug(f"Not deriving tax: subtotal {subtotal} exceeds total {total}")

    return ReconciledAmounts(
        total=total,
        subtotal=subtotal,
        tax_amount=tax_amount,
        derived=tuple(derived),
    )


def reconciliation_difference(
    total: Optional[Decimal],
    subtotal: Optional[Decimal],
    tax_amount: Optional[Decimal],
) -> Optional[Decimal]:
    """|subtotal + tax - total|, or None unless all three are present."""
    if total is None or subtotal is None or tax_amount is None:
        return None
    return abs(subtotal + tax_amount - total)
