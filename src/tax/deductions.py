"""Standard deduction lookup and standard-vs-itemized selection."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from src.tax.models import ZERO, DeductionMethod, DeductionTable, FilingStatus


@dataclass
class DeductionResult:
    """Result of deduction selection.

    Attributes:
        method: "standard" or "itemized".
        amount: The deduction amount that applies.
        standard_amount: Standard deduction for the filing status.
        itemized_amount: Itemized total supplied by the caller.
    """

    method: DeductionMethod
    amount: Decimal
    standard_amount: Decimal
    itemized_amount: Decimal


def standard_deduction(filing_status: FilingStatus | str, table: DeductionTable) -> Decimal:
    """Get the standard deduction for a filing status.

    Raises:
        ConfigurationError: If the filing status is unknown or missing from the
            table. There is no fallback to the single-filer amount.

    Example:
        >>> from src.tax.year_config import TAX_YEAR_2024
        >>> standard_deduction("single", TAX_YEAR_2024.standard_deductions)
        Decimal('14600')
    """
    return table.amount_for(filing_status)


def recommend(standard: Decimal, itemized_total: Decimal) -> DeductionMethod:
    """Pick whichever deduction is strictly larger; ties keep the standard one."""
    if itemized_total > standard:
        return "itemized"
    return "standard"


def itemized_total(
    medical: Decimal = ZERO,
    state_local_taxes: Decimal = ZERO,
    mortgage_interest: Decimal = ZERO,
    charitable: Decimal = ZERO,
    other: Decimal = ZERO,
) -> Decimal:
    """Sum itemized deduction categories as entered on the review screen."""
    return medical + state_local_taxes + mortgage_interest + charitable + other


def resolve_deduction(
    filing_status: FilingStatus | str,
    table: DeductionTable,
    itemized: Decimal = ZERO,
) -> DeductionResult:
    """Select the deduction to apply.

    Example:
        >>> result = resolve_deduction("single", table, Decimal("10000"))
        >>> result.method
        'standard'  # because $14,600 > $10,000
    """
    standard_amount = standard_deduction(filing_status, table)
    method = recommend(standard_amount, itemized)
    return DeductionResult(
        method=method,
        amount=itemized if method == "itemized" else standard_amount,
        standard_amount=standard_amount,
        itemized_amount=itemized,
    )
