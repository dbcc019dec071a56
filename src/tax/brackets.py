"""Progressive bracket tax computation.

Both functions are pure: the bracket table is passed in by the caller and
nothing is cached between calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from src.core.errors import ConfigurationError
from src.tax.models import ZERO, BracketContribution, BracketTable, to_decimal


@dataclass
class BracketTaxResult:
    """Tax owed across brackets.

    Attributes:
        tax: Total tax, equal to the sum of ``breakdown`` contributions.
        breakdown: One entry per bracket with income in it, ascending.
    """

    tax: Decimal
    breakdown: list[BracketContribution] = field(default_factory=list)


def _check_income(taxable_income: Decimal | int | float) -> Decimal:
    income = to_decimal(taxable_income, "Taxable income")
    if not income.is_finite():
        raise ConfigurationError(f"Taxable income must be finite, got {taxable_income!r}")
    if income < ZERO:
        raise ConfigurationError(f"Taxable income must be >= 0, got {income}")
    return income


def compute_bracket_tax(taxable_income: Decimal | int | float, table: BracketTable) -> BracketTaxResult:
    """Calculate tax on taxable income using marginal brackets.

    Args:
        taxable_income: Income after deductions, >= 0.
        table: Bracket table for the filing status.

    Returns:
        BracketTaxResult with the total and a per-bracket breakdown.

    Raises:
        ConfigurationError: If taxable income is negative or not a finite number.

    Example:
        >>> from src.tax.year_config import TAX_YEAR_2024
        >>> table = TAX_YEAR_2024.bracket_table("single")
        >>> compute_bracket_tax(Decimal("50000"), table).tax
        Decimal('6053.00')
    """
    remaining = _check_income(taxable_income)
    tax = ZERO
    breakdown: list[BracketContribution] = []

    for bracket in table:
        if remaining <= ZERO:
            break

        width = bracket.width
        amount = remaining if width is None else min(remaining, width)
        tax_in_bracket = amount * bracket.rate
        tax += tax_in_bracket

        if amount > ZERO:
            breakdown.append(
                BracketContribution(
                    bracket=bracket.label,
                    min=bracket.min,
                    max=bracket.max,
                    rate=bracket.rate,
                    income=amount,
                    tax=tax_in_bracket,
                    range=bracket.range_label,
                )
            )

        remaining -= amount

    return BracketTaxResult(tax=tax, breakdown=breakdown)


def marginal_rate(taxable_income: Decimal | int | float, table: BracketTable) -> Decimal:
    """Rate applied to the next dollar of taxable income.

    Lower bounds are inclusive, so income sitting exactly on a boundary gets
    the upper bracket's rate. Income beyond every finite bound gets the top
    bracket's rate.

    Args:
        taxable_income: Income after deductions, >= 0.
        table: Bracket table for the filing status.

    Returns:
        Marginal rate as a fraction (e.g. Decimal("0.22")).

    Raises:
        ConfigurationError: If taxable income is negative or not a finite number.
    """
    income = _check_income(taxable_income)

    for bracket in table:
        if bracket.contains(income):
            return bracket.rate
    return table.top.rate
