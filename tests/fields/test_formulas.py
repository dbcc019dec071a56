"""Tests for the formula parser and evaluator."""

from decimal import Decimal

import pytest

from src.core.errors import CalculationError
from src.fields.formulas import evaluate_formula, parse_formula

VALUES = {
    "wages": Decimal("60000"),
    "interest": Decimal("1500"),
    "dividends": Decimal("3100"),
    "standard_deduction": Decimal("14600"),
    "zero": Decimal("0"),
}


class TestParseFormula:
    """Tests for parse_formula."""

    def test_collects_field_names(self) -> None:
        """Function names are not mistaken for field ids."""
        formula = parse_formula("SUM(wages, interest) - standard_deduction")

        assert formula.names == frozenset({"wages", "interest", "standard_deduction"})

    @pytest.mark.parametrize(
        "source",
        [
            "wages **",
            "wages ** 2",
            "__import__('os')",
            "wages.real",
            "'text'",
            "wages if interest else dividends",
            "lambda: 1",
            "SUM(values=wages)",
            "True + wages",
        ],
    )
    def test_rejects_unsupported_syntax(self, source: str) -> None:
        """Only arithmetic and the whitelisted functions are accepted."""
        with pytest.raises(CalculationError):
            parse_formula(source)


class TestEvaluateFormula:
    """Tests for evaluate_formula."""

    def test_addition(self) -> None:
        result = evaluate_formula("wages + interest + dividends", VALUES)

        assert result == Decimal("64600")

    def test_precedence_and_parentheses(self) -> None:
        assert evaluate_formula("(wages + interest) * 2 - 1", VALUES) == Decimal("122999")

    def test_unary_minus(self) -> None:
        assert evaluate_formula("-interest + 100", VALUES) == Decimal("-1400")

    def test_functions(self) -> None:
        assert evaluate_formula("MAX(wages - 100000, 0)", VALUES) == Decimal("0")
        assert evaluate_formula("MIN(wages, interest, dividends)", VALUES) == Decimal("1500")
        assert evaluate_formula("ABS(interest - dividends)", VALUES) == Decimal("1600")
        assert evaluate_formula("SUM(wages, interest, dividends)", VALUES) == Decimal("64600")

    def test_round(self) -> None:
        assert evaluate_formula("ROUND(interest / 7, 2)", VALUES) == Decimal("214.29")
        assert evaluate_formula("ROUND(2.5)", {}) == Decimal("3")

    def test_decimal_literals_are_exact(self) -> None:
        """0.1 + 0.2 is exactly 0.3 with Decimal arithmetic."""
        assert evaluate_formula("0.1 + 0.2", {}) == Decimal("0.3")

    def test_division_by_zero(self) -> None:
        with pytest.raises(CalculationError, match="Arithmetic error"):
            evaluate_formula("wages / zero", VALUES)

    def test_unknown_name(self) -> None:
        with pytest.raises(CalculationError, match="other_income"):
            evaluate_formula("wages + other_income", VALUES)

    def test_wrong_arity(self) -> None:
        with pytest.raises(CalculationError):
            evaluate_formula("ABS(wages, interest)", VALUES)

    def test_overflowing_literal_rejected(self) -> None:
        with pytest.raises(CalculationError, match="out of range"):
            parse_formula("wages * 1e400")

    def test_non_finite_result_rejected(self) -> None:
        """An infinite operand never becomes a computed value."""
        with pytest.raises(CalculationError, match="finite"):
            evaluate_formula("wages * factor", {**VALUES, "factor": Decimal("Infinity")})
