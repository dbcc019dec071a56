"""Application configuration using Pydantic Settings."""

from pathlib import Path
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

Severity = Literal["error", "warning", "info"]


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Environment
    environment: str = "development"
    """Current environment (development, staging, production)."""

    debug: bool = False
    """Enable debug mode."""

    log_format: str | None = None
    """Logging format override (json or console). Defaults by environment."""

    # Tax calculation
    default_tax_year: int = 2024
    """Tax year used when the caller does not pass an explicit configuration."""

    rate_precision: int = 2
    """Decimal places for effective/marginal rates at the presentation boundary."""

    # Confidence tiers (per-field extraction confidence, 0-1)
    confidence_high_threshold: float = 0.9
    """Minimum field confidence shown as HIGH."""

    confidence_medium_threshold: float = 0.7
    """Minimum field confidence shown as MEDIUM."""

    # Issue severities reported in data-quality summaries
    missing_field_severity: Severity = "error"
    """Severity for required fields left empty. Blocks submission at 'error'."""

    validation_error_severity: Severity = "warning"
    """Severity for present-but-malformed values."""

    calculation_error_severity: Severity = "error"
    """Severity for computed fields that could not be evaluated."""

    @field_validator("confidence_high_threshold", "confidence_medium_threshold")
    @classmethod
    def check_threshold(cls, value: float) -> float:
        """Confidence thresholds are fractions."""
        if not 0.0 <= value <= 1.0:
            raise ValueError("confidence thresholds must be between 0 and 1")
        return value

    @field_validator("rate_precision")
    @classmethod
    def check_precision(cls, value: int) -> int:
        """Rates need a non-negative number of decimal places."""
        if value < 0:
            raise ValueError("RATE_PRECISION must be >= 0")
        return value


try:
    settings = Settings()
except Exception as exc:
    env_file = Path(".env")
    raise RuntimeError(
        "Failed to initialize engine settings. "
        f"Check environment variables in {env_file.resolve() if env_file.exists() else '.env'}.\n"
        f"Error: {exc}\n"
        "Allowed severities are: error, warning, info."
    ) from exc
