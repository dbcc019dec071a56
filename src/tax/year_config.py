"""Tax year-specific bracket and deduction tables.

This module centralizes published tax year values so calculations receive
them as explicit configuration instead of reading hardcoded constants.
Several years can coexist, and tests can inject their own tables.

Example:
    >>> from src.tax.year_config import get_tax_year_config
    >>> config = get_tax_year_config(2024)
    >>> config.standard_deductions.amount_for("single")
    Decimal('14600')
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from src.core.config import settings
from src.core.errors import ConfigurationError
from src.tax.models import BracketTable, DeductionTable, FilingStatus


@dataclass(frozen=True)
class TaxYearConfig:
    """Bracket tables and standard deductions for one tax year.

    Attributes:
        tax_year: The tax year these values apply to.
        brackets: One bracket table per filing status.
        standard_deductions: Standard deduction per filing status.
    """

    tax_year: int
    brackets: dict[FilingStatus, BracketTable]
    standard_deductions: DeductionTable

    def bracket_table(self, filing_status: FilingStatus | str) -> BracketTable:
        """Get the bracket table for a filing status.

        Raises:
            ConfigurationError: If the status is unknown or has no table.
        """
        status = FilingStatus.parse(filing_status)
        if status not in self.brackets:
            raise ConfigurationError(
                f"No bracket table for {status.value} in tax year {self.tax_year}"
            )
        return self.brackets[status]


def _table(*thresholds: tuple[str | None, str]) -> BracketTable:
    return BracketTable.from_thresholds(
        (Decimal(upper) if upper is not None else None, Decimal(rate))
        for upper, rate in thresholds
    )


# 2023 Configuration - IRS published values
TAX_YEAR_2023 = TaxYearConfig(
    tax_year=2023,
    brackets={
        FilingStatus.SINGLE: _table(
            ("11000", "0.10"), ("44725", "0.12"), ("95375", "0.22"),
            ("182100", "0.24"), ("231250", "0.32"), ("578125", "0.35"),
            (None, "0.37"),
        ),
        FilingStatus.MARRIED_FILING_JOINTLY: _table(
            ("22000", "0.10"), ("89450", "0.12"), ("190750", "0.22"),
            ("364200", "0.24"), ("462500", "0.32"), ("693750", "0.35"),
            (None, "0.37"),
        ),
        FilingStatus.MARRIED_FILING_SEPARATELY: _table(
            ("11000", "0.10"), ("44725", "0.12"), ("95375", "0.22"),
            ("182100", "0.24"), ("231250", "0.32"), ("346875", "0.35"),
            (None, "0.37"),
        ),
        FilingStatus.HEAD_OF_HOUSEHOLD: _table(
            ("15700", "0.10"), ("59850", "0.12"), ("95350", "0.22"),
            ("182100", "0.24"), ("231250", "0.32"), ("578100", "0.35"),
            (None, "0.37"),
        ),
    },
    standard_deductions=DeductionTable(
        {
            FilingStatus.SINGLE: Decimal("13850"),
            FilingStatus.MARRIED_FILING_JOINTLY: Decimal("27700"),
            FilingStatus.MARRIED_FILING_SEPARATELY: Decimal("13850"),
            FilingStatus.HEAD_OF_HOUSEHOLD: Decimal("20800"),
        }
    ),
)

# 2024 Configuration - IRS published values
TAX_YEAR_2024 = TaxYearConfig(
    tax_year=2024,
    brackets={
        FilingStatus.SINGLE: _table(
            ("11600", "0.10"), ("47150", "0.12"), ("100525", "0.22"),
            ("191950", "0.24"), ("243725", "0.32"), ("609350", "0.35"),
            (None, "0.37"),
        ),
        FilingStatus.MARRIED_FILING_JOINTLY: _table(
            ("23200", "0.10"), ("94300", "0.12"), ("201050", "0.22"),
            ("383900", "0.24"), ("487450", "0.32"), ("731200", "0.35"),
            (None, "0.37"),
        ),
        FilingStatus.MARRIED_FILING_SEPARATELY: _table(
            ("11600", "0.10"), ("47150", "0.12"), ("100525", "0.22"),
            ("191950", "0.24"), ("243725", "0.32"), ("365600", "0.35"),
            (None, "0.37"),
        ),
        FilingStatus.HEAD_OF_HOUSEHOLD: _table(
            ("16550", "0.10"), ("63100", "0.12"), ("100500", "0.22"),
            ("191950", "0.24"), ("243700", "0.32"), ("609350", "0.35"),
            (None, "0.37"),
        ),
    },
    standard_deductions=DeductionTable(
        {
            FilingStatus.SINGLE: Decimal("14600"),
            FilingStatus.MARRIED_FILING_JOINTLY: Decimal("29200"),
            FilingStatus.MARRIED_FILING_SEPARATELY: Decimal("14600"),
            FilingStatus.HEAD_OF_HOUSEHOLD: Decimal("21900"),
        }
    ),
)

# 2025 Configuration - projected values (update when IRS releases official numbers)
TAX_YEAR_2025 = TaxYearConfig(
    tax_year=2025,
    brackets={
        FilingStatus.SINGLE: _table(
            ("11925", "0.10"), ("48475", "0.12"), ("103350", "0.22"),
            ("197300", "0.24"), ("250525", "0.32"), ("626350", "0.35"),
            (None, "0.37"),
        ),
        FilingStatus.MARRIED_FILING_JOINTLY: _table(
            ("23850", "0.10"), ("96950", "0.12"), ("206700", "0.22"),
            ("394600", "0.24"), ("501050", "0.32"), ("751600", "0.35"),
            (None, "0.37"),
        ),
        FilingStatus.MARRIED_FILING_SEPARATELY: _table(
            ("11925", "0.10"), ("48475", "0.12"), ("103350", "0.22"),
            ("197300", "0.24"), ("250525", "0.32"), ("375800", "0.35"),
            (None, "0.37"),
        ),
        FilingStatus.HEAD_OF_HOUSEHOLD: _table(
            ("17000", "0.10"), ("64850", "0.12"), ("103350", "0.22"),
            ("197300", "0.24"), ("250500", "0.32"), ("626350", "0.35"),
            (None, "0.37"),
        ),
    },
    standard_deductions=DeductionTable(
        {
            FilingStatus.SINGLE: Decimal("15000"),
            FilingStatus.MARRIED_FILING_JOINTLY: Decimal("30000"),
            FilingStatus.MARRIED_FILING_SEPARATELY: Decimal("15000"),
            FilingStatus.HEAD_OF_HOUSEHOLD: Decimal("22500"),
        }
    ),
)

# Registry of available tax year configurations
TAX_YEAR_CONFIGS: dict[int, TaxYearConfig] = {
    2023: TAX_YEAR_2023,
    2024: TAX_YEAR_2024,
    2025: TAX_YEAR_2025,
}


def get_tax_year_config(year: int | None = None) -> TaxYearConfig:
    """Get configuration for a specific tax year.

    Args:
        year: The tax year (e.g., 2024). Defaults to ``settings.default_tax_year``.

    Returns:
        TaxYearConfig for the requested year.

    Raises:
        ConfigurationError: If no configuration exists for the requested year.

    Example:
        >>> get_tax_year_config(2024).tax_year
        2024
    """
    if year is None:
        year = settings.default_tax_year
    if year not in TAX_YEAR_CONFIGS:
        available = sorted(TAX_YEAR_CONFIGS.keys())
        raise ConfigurationError(
            f"No tax configuration for year {year}. Available years: {available}"
        )
    return TAX_YEAR_CONFIGS[year]
