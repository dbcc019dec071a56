"""Tests for field models and value parsing."""

from datetime import date
from decimal import Decimal

import pytest

from src.core.errors import IssueKind
from src.fields.models import CalculationRecord, Field, FieldType
from src.fields.parsing import is_blank, parse_decimal, parse_us_date


class TestParsing:
    """Tests for lenient value parsing."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("$1,234.50", Decimal("1234.50")),
            ("12.5%", Decimal("12.5")),
            (" 42 ", Decimal("42")),
            (7, Decimal("7")),
            (0.1, Decimal("0.1")),
            (Decimal("3.14"), Decimal("3.14")),
        ],
    )
    def test_parse_decimal(self, raw, expected: Decimal) -> None:
        assert parse_decimal(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "abc", True, "NaN", "Infinity", [1]])
    def test_parse_decimal_rejects(self, raw) -> None:
        assert parse_decimal(raw) is None

    def test_parse_us_date(self) -> None:
        assert parse_us_date("02/29/2024") == date(2024, 2, 29)
        assert parse_us_date("02/29/2023") is None
        assert parse_us_date(date(2024, 1, 1)) == date(2024, 1, 1)

    def test_is_blank(self) -> None:
        assert is_blank(None)
        assert is_blank("   ")
        assert not is_blank(0)
        assert not is_blank("0")


class TestField:
    """Tests for the Field model."""

    def test_accepts_camel_and_snake_names(self) -> None:
        """Extraction payloads use snake_case; the UI sends camelCase."""
        snake = Field.model_validate({"id": "a", "field_type": "ssn", "original_value": "1"})
        camel = Field.model_validate({"id": "a", "type": "ssn", "originalValue": "1", "isModified": True})

        assert snake.type is FieldType.SSN
        assert snake.original_value == "1"
        assert camel.is_modified

    def test_required_defaults_by_type(self) -> None:
        assert Field(id="s", type="ssn").is_required
        assert Field(id="e", type="ein").is_required
        assert not Field(id="c", type="currency").is_required
        assert Field(id="c", type="currency", validation_rules={"required": True}).is_required
        assert not Field(id="s", type="ssn", validation_rules={"required": False}).is_required

    def test_with_error_and_cleared(self) -> None:
        field = Field(id="a", value="x")

        broken = field.with_error(IssueKind.VALIDATION, "Invalid format")
        fixed = broken.cleared()

        assert broken.has_error and broken.validation_error == "Invalid format"
        assert broken.value == "x"
        assert not fixed.has_error and fixed.error_kind is None
        assert not field.has_error

    def test_json_dump_uses_camel_case_and_numbers(self) -> None:
        field = Field(id="total", value=Decimal("64600.50"), is_calculated=True)

        dumped = field.model_dump(mode="json", by_alias=True)

        assert dumped["value"] == 64600.5
        assert dumped["isCalculated"] is True
        assert dumped["validationError"] is None
        assert "validationRules" in dumped

    def test_confidence_bounds(self) -> None:
        with pytest.raises(ValueError):
            Field(id="a", confidence=1.2)


class TestCalculationRecord:
    """Tests for CalculationRecord serialization."""

    def test_wire_names(self) -> None:
        record = CalculationRecord(
            field_id="total_income",
            formula="wages + interest",
            dependencies=["wages", "interest"],
            result=Decimal("61500"),
        )

        assert record.model_dump(mode="json", by_alias=True) == {
            "fieldId": "total_income",
            "formula": "wages + interest",
            "dependencies": ["wages", "interest"],
            "result": 61500.0,
            "error": None,
        }
