"""Tax liability calculation and year-specific tables.

Components:
- Bracket tax engine: progressive bracket tax and marginal-rate lookup
- Deduction resolver: standard deduction and standard-vs-itemized choice
- Credit and payment resolver: credits, refund or amount owed
- Rate analyzer: effective and marginal rates
- Calculator: the full liability breakdown for one set of inputs
"""

from src.tax.brackets import BracketTaxResult, compute_bracket_tax, marginal_rate
from src.tax.calculator import (
    DEFAULT_TAX_FIELD_MAP,
    calculate_tax_liability,
    tax_input_from_fields,
)
from src.tax.credits import apply_credits, describe_settlement, settle, total_payments
from src.tax.deductions import (
    DeductionResult,
    itemized_total,
    recommend,
    resolve_deduction,
    standard_deduction,
)
from src.tax.models import (
    BracketContribution,
    BracketTable,
    DeductionTable,
    FilingStatus,
    TaxBracket,
    TaxCalculationInput,
    TaxCalculationResult,
)
from src.tax.rates import effective_rate, marginal_rate_percent, round_rate
from src.tax.year_config import (
    TAX_YEAR_2023,
    TAX_YEAR_2024,
    TAX_YEAR_2025,
    TAX_YEAR_CONFIGS,
    TaxYearConfig,
    get_tax_year_config,
)

__all__ = [
    # Models and tables
    "BracketContribution",
    "BracketTable",
    "DeductionTable",
    "FilingStatus",
    "TaxBracket",
    "TaxCalculationInput",
    "TaxCalculationResult",
    "TaxYearConfig",
    "TAX_YEAR_2023",
    "TAX_YEAR_2024",
    "TAX_YEAR_2025",
    "TAX_YEAR_CONFIGS",
    "get_tax_year_config",
    # Bracket engine
    "BracketTaxResult",
    "compute_bracket_tax",
    "marginal_rate",
    # Deductions
    "DeductionResult",
    "itemized_total",
    "recommend",
    "resolve_deduction",
    "standard_deduction",
    # Credits and payments
    "apply_credits",
    "describe_settlement",
    "settle",
    "total_payments",
    # Rates
    "effective_rate",
    "marginal_rate_percent",
    "round_rate",
    # Calculator
    "DEFAULT_TAX_FIELD_MAP",
    "calculate_tax_liability",
    "tax_input_from_fields",
]
