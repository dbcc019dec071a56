"""Effective and marginal rate derivation.

Rates are returned unrounded, in percent. Use ``round_rate`` only when
presenting them so dependent calculations do not compound rounding error.
"""

from __future__ import annotations

from decimal import Decimal

from src.tax.brackets import marginal_rate
from src.tax.models import ZERO, BracketTable, round_rate

HUNDRED = Decimal("100")

__all__ = ["effective_rate", "marginal_rate_percent", "round_rate"]


def effective_rate(tax_after_credits: Decimal, gross_income: Decimal) -> Decimal:
    """Tax after credits as a percentage of gross income.

    Returns 0 when gross income is not positive. The result is clamped to
    [0, 100].
    """
    if gross_income <= ZERO:
        return ZERO
    rate = tax_after_credits / gross_income * HUNDRED
    return min(HUNDRED, max(ZERO, rate))


def marginal_rate_percent(taxable_income: Decimal, table: BracketTable) -> Decimal:
    """Marginal bracket rate in percent."""
    return marginal_rate(taxable_income, table) * HUNDRED
