"""Tests for tax year configuration."""

from decimal import Decimal

import pytest

from src.core.errors import ConfigurationError
from src.tax.models import FilingStatus
from src.tax.year_config import (
    TAX_YEAR_2023,
    TAX_YEAR_2024,
    TAX_YEAR_2025,
    TAX_YEAR_CONFIGS,
    get_tax_year_config,
)


class TestTaxYearConfigs:
    """Tests for the published year tables."""

    @pytest.mark.parametrize("config", [TAX_YEAR_2023, TAX_YEAR_2024, TAX_YEAR_2025])
    def test_every_status_has_tables(self, config) -> None:
        """Each year covers all four filing statuses."""
        for status in FilingStatus:
            table = config.bracket_table(status)
            assert len(table) == 7
            assert table.top.rate == Decimal("0.37")
            assert config.standard_deductions.amount_for(status) > 0

    def test_2024_single_thresholds(self) -> None:
        table = TAX_YEAR_2024.bracket_table("single")

        assert [bracket.max for bracket in table][:-1] == [
            Decimal("11600"),
            Decimal("47150"),
            Decimal("100525"),
            Decimal("191950"),
            Decimal("243725"),
            Decimal("609350"),
        ]

    def test_registry(self) -> None:
        assert sorted(TAX_YEAR_CONFIGS) == [2023, 2024, 2025]


class TestGetTaxYearConfig:
    """Tests for get_tax_year_config."""

    def test_explicit_year(self) -> None:
        assert get_tax_year_config(2023) is TAX_YEAR_2023

    def test_default_year_from_settings(self, monkeypatch) -> None:
        """Without a year, the configured default applies."""
        from src.core.config import settings

        monkeypatch.setattr(settings, "default_tax_year", 2025)

        assert get_tax_year_config() is TAX_YEAR_2025

    def test_unknown_year_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="1999"):
            get_tax_year_config(1999)
