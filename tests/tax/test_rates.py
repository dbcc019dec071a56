"""Tests for effective and marginal rates."""

from decimal import Decimal

from src.tax.rates import effective_rate, marginal_rate_percent, round_rate


class TestEffectiveRate:
    """Tests for effective_rate."""

    def test_ratio_in_percent(self) -> None:
        """Effective rate is tax after credits over gross income."""
        rate = effective_rate(Decimal("6053"), Decimal("64600"))

        assert round_rate(rate, 2) == Decimal("9.37")

    def test_zero_income_is_zero(self) -> None:
        """No income means a zero rate, never a division error."""
        assert effective_rate(Decimal("0"), Decimal("0")) == Decimal("0")

    def test_clamped_to_hundred(self) -> None:
        """The rate stays within [0, 100]."""
        assert effective_rate(Decimal("500"), Decimal("100")) == Decimal("100")


class TestMarginalRatePercent:
    """Tests for marginal_rate_percent."""

    def test_percent_value(self, tax_year_2024) -> None:
        table = tax_year_2024.bracket_table("single")

        assert marginal_rate_percent(Decimal("50000"), table) == Decimal("22")
