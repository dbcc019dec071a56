"""Tests for the tax liability calculator."""

from decimal import Decimal

import orjson
import pytest

from src.core.errors import ConfigurationError
from src.core.serialization import dumps_wire
from src.fields.models import Field
from src.tax.calculator import calculate_tax_liability, tax_input_from_fields
from src.tax.models import DeductionTable, FilingStatus, TaxCalculationInput
from src.tax.year_config import TaxYearConfig


class TestCalculateTaxLiability:
    """Tests for calculate_tax_liability."""

    def test_single_filer_with_refund(self, tax_year_2024) -> None:
        """W-2 wages of $64,600 with $12,500 withheld produce a $6,447 refund."""
        inputs = TaxCalculationInput(
            income=Decimal("64600"),
            filing_status="single",
            withheld=Decimal("12500"),
        )

        result = calculate_tax_liability(inputs, tax_year_2024)

        assert result.standard_deduction == Decimal("14600")
        assert result.taxable_income == Decimal("50000")
        assert result.federal_tax == Decimal("6053")
        assert result.tax_after_credits == Decimal("6053")
        assert result.total_payments == Decimal("12500")
        assert result.refund_or_owed == Decimal("6447")
        assert result.marginal_rate == Decimal("22")
        assert result.deduction_method == "standard"
        assert sum(item.tax for item in result.breakdown) == result.federal_tax

    def test_itemized_deductions_applied_when_larger(self, tax_year_2024) -> None:
        """Only the larger deduction is subtracted from income."""
        inputs = TaxCalculationInput(
            income=Decimal("64600"),
            filing_status="single",
            deductions=Decimal("20000"),
        )

        result = calculate_tax_liability(inputs, tax_year_2024)

        assert result.deduction_method == "itemized"
        assert result.itemized_deductions == Decimal("20000")
        assert result.taxable_income == Decimal("44600")
        assert result.federal_tax == Decimal("5120")

    def test_deductions_exceeding_income_floor_at_zero(self, tax_year_2024) -> None:
        """Taxable income never goes negative."""
        inputs = TaxCalculationInput(income=Decimal("9000"), filing_status="headOfHousehold")

        result = calculate_tax_liability(inputs, tax_year_2024)

        assert result.taxable_income == Decimal("0")
        assert result.federal_tax == Decimal("0")
        assert result.breakdown == []
        assert result.effective_rate == Decimal("0")

    def test_zero_income(self, tax_year_2024) -> None:
        """Zero income gives zero tax and a zero effective rate."""
        result = calculate_tax_liability(TaxCalculationInput(), tax_year_2024)

        assert result.federal_tax == Decimal("0")
        assert result.effective_rate == Decimal("0")
        assert result.marginal_rate == Decimal("10")

    def test_credits_and_amount_owed(self, tax_year_2024) -> None:
        """Credits reduce tax; underpayment is reported as negative."""
        inputs = TaxCalculationInput(
            income=Decimal("64600"),
            filing_status="single",
            credits=Decimal("2000"),
            withheld=Decimal("1000"),
            estimated_payments=Decimal("500"),
        )

        result = calculate_tax_liability(inputs, tax_year_2024)

        assert result.tax_after_credits == Decimal("4053")
        assert result.total_payments == Decimal("1500")
        assert result.refund_or_owed == Decimal("-2553")

    def test_married_filing_jointly(self, tax_year_2024) -> None:
        """Joint filers use their own deduction and brackets."""
        inputs = TaxCalculationInput(income=Decimal("129200"), filing_status="mfj")

        result = calculate_tax_liability(inputs, tax_year_2024)

        # 10% of 23,200 + 12% of 71,100 + 22% of 5,700
        assert result.taxable_income == Decimal("100000")
        assert result.federal_tax == Decimal("12106")

    def test_missing_table_raises(self) -> None:
        """A configuration without the filing status is refused."""
        config = TaxYearConfig(
            tax_year=2024,
            brackets={},
            standard_deductions=DeductionTable({"single": 14600}),
        )
        with pytest.raises(ConfigurationError):
            calculate_tax_liability(TaxCalculationInput(income=Decimal("1")), config)

    def test_wire_shape(self, tax_year_2024) -> None:
        """Wire output uses camelCase names and numeric values."""
        inputs = TaxCalculationInput(
            income=Decimal("64600"),
            filing_status="single",
            withheld=Decimal("12500"),
        )

        wire = calculate_tax_liability(inputs, tax_year_2024).to_wire()

        assert wire["taxableIncome"] == 50000.0
        assert wire["federalTax"] == 6053.0
        assert wire["refundOrOwed"] == 6447.0
        assert wire["effectiveRate"] == 9.37
        assert wire["marginalRate"] == 22.0
        assert wire["breakdown"][0] == {
            "bracket": "10%",
            "min": 0.0,
            "max": 11600.0,
            "rate": 0.1,
            "income": 11600.0,
            "tax": 1160.0,
            "range": "$0 - $11,600",
        }
        assert orjson.loads(dumps_wire(wire)) == wire


class TestTaxInputFromFields:
    """Tests for building calculator inputs from reviewed fields."""

    def test_reads_mapped_fields(self) -> None:
        """Numeric strings and Decimals are read from the mapped fields."""
        fields = {
            "total_income": Field(id="total_income", value=Decimal("64600"), is_calculated=True),
            "federal_tax_withheld": Field(id="federal_tax_withheld", value="$12,500.00"),
            "estimated_payments": Field(id="estimated_payments", value=""),
        }

        inputs = tax_input_from_fields(fields, "single")

        assert inputs.income == Decimal("64600")
        assert inputs.withheld == Decimal("12500.00")
        assert inputs.estimated_payments == Decimal("0")
        assert inputs.deductions == Decimal("0")
        assert inputs.filing_status is FilingStatus.SINGLE

    def test_errored_fields_contribute_zero(self) -> None:
        """A field carrying an error is skipped rather than trusted."""
        fields = {
            "total_income": Field(
                id="total_income",
                value="64600",
                has_error=True,
                validation_error="Invalid currency format",
            ),
        }

        inputs = tax_input_from_fields(fields, "hoh")

        assert inputs.income == Decimal("0")
        assert inputs.filing_status is FilingStatus.HEAD_OF_HOUSEHOLD

    def test_custom_field_map(self) -> None:
        fields = {"wages_tips": Field(id="wages_tips", value="50000")}

        inputs = tax_input_from_fields(fields, "single", {"income": "wages_tips"})

        assert inputs.income == Decimal("50000")
