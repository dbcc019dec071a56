"""Federal tax liability calculation.

This module chains the individual pieces into one pure call:
- standard deduction lookup and standard-vs-itemized selection
- progressive bracket tax with a per-bracket breakdown
- credit application and refund/owed settlement
- effective and marginal rates

Tables come from a TaxYearConfig passed by the caller. All monetary
values are Decimal and nothing is rounded until ``to_wire``.

Example:
    >>> from src.tax.year_config import TAX_YEAR_2024
    >>> inputs = TaxCalculationInput(income=Decimal("64600"), filing_status="single")
    >>> result = calculate_tax_liability(inputs, TAX_YEAR_2024)
    >>> result.taxable_income, result.federal_tax
    (Decimal('50000'), Decimal('6053.00'))
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal

from src.core.logging import get_logger
from src.fields.models import Field
from src.fields.parsing import parse_decimal
from src.tax.brackets import compute_bracket_tax
from src.tax.credits import apply_credits, settle, total_payments
from src.tax.deductions import resolve_deduction
from src.tax.models import (
    ZERO,
    FilingStatus,
    TaxCalculationInput,
    TaxCalculationResult,
)
from src.tax.rates import effective_rate, marginal_rate_percent
from src.tax.year_config import TaxYearConfig

logger = get_logger(__name__)

# Input key -> field id used when building inputs from reviewed form fields.
DEFAULT_TAX_FIELD_MAP: dict[str, str] = {
    "income": "total_income",
    "deductions": "itemized_deductions",
    "credits": "total_credits",
    "withheld": "federal_tax_withheld",
    "estimated_payments": "estimated_payments",
}


def calculate_tax_liability(
    inputs: TaxCalculationInput,
    config: TaxYearConfig,
) -> TaxCalculationResult:
    """Calculate the liability breakdown for one set of inputs.

    Taxable income is gross income less the larger of the standard
    deduction and the itemized total, floored at zero.

    Args:
        inputs: Income, filing status, itemized deductions, credits and payments.
        config: Bracket and deduction tables for the tax year.

    Returns:
        TaxCalculationResult with every amount and the bracket breakdown.

    Raises:
        ConfigurationError: If the config has no table for the filing status.
    """
    table = config.bracket_table(inputs.filing_status)
    deduction = resolve_deduction(
        inputs.filing_status, config.standard_deductions, inputs.deductions
    )

    taxable_income = max(ZERO, inputs.income - deduction.amount)
    bracket_tax = compute_bracket_tax(taxable_income, table)
    tax_after_credits = apply_credits(bracket_tax.tax, inputs.credits)
    payments = total_payments(inputs.withheld, inputs.estimated_payments)
    refund_or_owed = settle(tax_after_credits, inputs.withheld, inputs.estimated_payments)

    result = TaxCalculationResult(
        gross_income=inputs.income,
        standard_deduction=deduction.standard_amount,
        itemized_deductions=deduction.itemized_amount,
        taxable_income=taxable_income,
        federal_tax=bracket_tax.tax,
        credits=inputs.credits,
        tax_after_credits=tax_after_credits,
        total_payments=payments,
        refund_or_owed=refund_or_owed,
        effective_rate=effective_rate(tax_after_credits, inputs.income),
        marginal_rate=marginal_rate_percent(taxable_income, table),
        breakdown=bracket_tax.breakdown,
        deduction_method=deduction.method,
    )

    logger.info(
        "tax_liability_calculated",
        tax_year=config.tax_year,
        filing_status=inputs.filing_status.value,
        deduction_method=deduction.method,
        brackets_used=len(result.breakdown),
    )
    return result


def tax_input_from_fields(
    fields: Mapping[str, Field],
    filing_status: FilingStatus | str,
    field_map: Mapping[str, str] | None = None,
) -> TaxCalculationInput:
    """Build calculation inputs from reviewed form fields.

    Fields that are absent, empty, non-numeric or carry an error contribute
    zero. Each skipped field is logged so the reviewer can trace a
    surprising result back to the form.

    Args:
        fields: Validated and computed field set.
        filing_status: Filing status for the return.
        field_map: Input key -> field id; defaults to DEFAULT_TAX_FIELD_MAP.

    Returns:
        TaxCalculationInput ready for calculate_tax_liability.

    Raises:
        ConfigurationError: If the filing status is unknown.
    """
    field_map = field_map or DEFAULT_TAX_FIELD_MAP
    amounts: dict[str, Decimal] = {}
    for key, field_id in field_map.items():
        source = fields.get(field_id)
        amount = None
        if source is not None and not source.has_error:
            amount = parse_decimal(source.value)
        if amount is None:
            if source is not None:
                logger.warning(
                    "tax_input_field_skipped",
                    input=key,
                    field_id=field_id,
                    has_error=source.has_error,
                )
            amount = ZERO
        amounts[key] = max(ZERO, amount)

    return TaxCalculationInput(filing_status=FilingStatus.parse(filing_status), **amounts)
