"""Credit application and refund/owed settlement."""

from __future__ import annotations

from decimal import Decimal
from typing import Literal

from src.tax.models import ZERO


def apply_credits(federal_tax: Decimal, credits: Decimal) -> Decimal:
    """Subtract credits from tax. Credits never take tax below zero."""
    return max(ZERO, federal_tax - credits)


def total_payments(withheld: Decimal, estimated_payments: Decimal) -> Decimal:
    """Withholding plus estimated payments."""
    return withheld + estimated_payments


def settle(
    tax_after_credits: Decimal,
    withheld: Decimal,
    estimated_payments: Decimal,
) -> Decimal:
    """Compare payments against the liability.

    Args:
        tax_after_credits: Tax remaining after credits.
        withheld: Federal tax withheld during the year.
        estimated_payments: Estimated tax payments made.

    Returns:
        Positive for a refund, negative for an amount owed. The value is not
        floored or capped.

    Example:
        >>> settle(Decimal("6053"), Decimal("12500"), Decimal("0"))
        Decimal('6447')
    """
    return total_payments(withheld, estimated_payments) - tax_after_credits


def describe_settlement(refund_or_owed: Decimal) -> Literal["refund", "owed", "even"]:
    """Label a settlement amount for display."""
    if refund_or_owed > ZERO:
        return "refund"
    if refund_or_owed < ZERO:
        return "owed"
    return "even"
