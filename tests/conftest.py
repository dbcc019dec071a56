"""Pytest configuration and shared fixtures for tests."""

import pytest

from src.documents.models import ExtractedData
from src.fields.models import CalculationRecord, Field
from src.fields.quality import SeverityPolicy
from src.tax.year_config import TAX_YEAR_2024, TaxYearConfig


@pytest.fixture
def tax_year_2024() -> TaxYearConfig:
    """2024 bracket and deduction tables.

    Returns:
        TaxYearConfig for tax year 2024.
    """
    return TAX_YEAR_2024


@pytest.fixture
def policy() -> SeverityPolicy:
    """Default severity policy, independent of environment settings.

    Returns:
        SeverityPolicy with missing/calculation as errors, validation as warnings.
    """
    return SeverityPolicy()


@pytest.fixture
def income_fields() -> dict[str, Field]:
    """Leaf income fields of a 1040 draft plus the computed fields they feed.

    Returns:
        Mapping of field id to field.
    """
    fields = [
        Field(id="wages", label="Wages", type="currency", value="60000", original_value="60000"),
        Field(id="interest", label="Interest", type="currency", value="1500"),
        Field(id="dividends", label="Dividends", type="currency", value="3100"),
        Field(id="other_income", label="Other income", type="currency", value=None),
        Field(id="standard_deduction", label="Standard deduction", type="currency", value="14600"),
        Field(id="total_income", label="Total income", type="currency", is_calculated=True),
        Field(id="taxable_income", label="Taxable income", type="currency", is_calculated=True),
    ]
    return {item.id: item for item in fields}


@pytest.fixture
def income_records() -> list[CalculationRecord]:
    """Formulas deriving total and taxable income.

    Returns:
        Calculation records, taxable income declared before its dependency.
    """
    return [
        CalculationRecord(
            field_id="taxable_income",
            formula="MAX(total_income - standard_deduction, 0)",
            dependencies=["total_income", "standard_deduction"],
        ),
        CalculationRecord(
            field_id="total_income",
            formula="wages + interest + dividends + other_income",
            dependencies=["wages", "interest", "dividends", "other_income"],
        ),
    ]


@pytest.fixture
def w2_document() -> ExtractedData:
    """W-2 as returned by extraction, with one malformed SSN.

    Returns:
        ExtractedData pending review.
    """
    fields = [
        Field(
            id="employee_ssn",
            label="Employee SSN",
            type="ssn",
            value="123456789",
            original_value="123456789",
            confidence=0.62,
        ),
        Field(
            id="employer_ein",
            label="Employer EIN",
            type="ein",
            value="12-3456789",
            original_value="12-3456789",
            confidence=0.97,
        ),
        Field(
            id="employee_name",
            label="Employee name",
            value="Jordan Reyes",
            original_value="Jordan Reyes",
            confidence=0.99,
        ),
        Field(
            id="wages_tips",
            label="Wages, tips, other compensation",
            type="currency",
            value="$64,600.00",
            original_value="$64,600.00",
            confidence=0.95,
        ),
        Field(
            id="federal_tax_withheld",
            label="Federal income tax withheld",
            type="currency",
            value="12500",
            original_value="12500",
            confidence=0.91,
        ),
    ]
    return ExtractedData(
        document_id="doc-w2-001",
        document_type="W-2",
        extraction_date="2025-02-03",
        confidence_score=0.89,
        fields={item.id: item for item in fields},
    )
