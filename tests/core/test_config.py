"""Configuration parsing tests."""

import pytest
from pydantic import ValidationError

from src.core.config import Settings


def test_defaults() -> None:
    """Defaults match the documented severity policy and thresholds."""
    cfg = Settings(_env_file=None)

    assert cfg.default_tax_year == 2024
    assert cfg.rate_precision == 2
    assert cfg.confidence_high_threshold == 0.9
    assert cfg.confidence_medium_threshold == 0.7
    assert cfg.missing_field_severity == "error"
    assert cfg.validation_error_severity == "warning"
    assert cfg.calculation_error_severity == "error"


def test_severity_from_env(monkeypatch) -> None:
    """Severities can be overridden per environment."""
    monkeypatch.setenv("VALIDATION_ERROR_SEVERITY", "error")
    monkeypatch.setenv("DEFAULT_TAX_YEAR", "2025")

    cfg = Settings(_env_file=None)

    assert cfg.validation_error_severity == "error"
    assert cfg.default_tax_year == 2025


def test_unknown_severity_rejected(monkeypatch) -> None:
    """Invalid severities fail with a clear validation error."""
    monkeypatch.setenv("MISSING_FIELD_SEVERITY", "fatal")

    with pytest.raises(ValidationError, match="missing_field_severity"):
        Settings(_env_file=None)


def test_threshold_out_of_range_rejected(monkeypatch) -> None:
    monkeypatch.setenv("CONFIDENCE_HIGH_THRESHOLD", "1.5")

    with pytest.raises(ValidationError, match="between 0 and 1"):
        Settings(_env_file=None)


def test_negative_rate_precision_rejected(monkeypatch) -> None:
    monkeypatch.setenv("RATE_PRECISION", "-1")

    with pytest.raises(ValidationError, match="RATE_PRECISION"):
        Settings(_env_file=None)
