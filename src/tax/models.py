"""Tax tables, calculation inputs and results.

Bracket and deduction tables are frozen dataclasses validated on
construction, so a table that reaches the engine is always well formed.
Inputs arriving over the wire are Pydantic models using the camelCase
names the review UI sends.

All monetary values are Decimal. Rounding happens only in ``to_wire``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from src.core.config import settings
from src.core.errors import ConfigurationError

ZERO = Decimal("0")
CENT = Decimal("0.01")

DeductionMethod = Literal["standard", "itemized"]


class FilingStatus(str, Enum):
    """Taxpayer filing status."""

    SINGLE = "single"
    MARRIED_FILING_JOINTLY = "marriedFilingJointly"
    MARRIED_FILING_SEPARATELY = "marriedFilingSeparately"
    HEAD_OF_HOUSEHOLD = "headOfHousehold"

    @classmethod
    def parse(cls, value: FilingStatus | str) -> FilingStatus:
        """Resolve a filing status from its wire value or a short code.

        Accepts the enum itself, the camelCase wire values, snake_case names
        and the short codes ``mfj``, ``mfs`` and ``hoh``.

        Raises:
            ConfigurationError: If the value names no known filing status.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().replace("_", "").replace("-", "").replace(" ", "").lower()
            status = _FILING_STATUS_ALIASES.get(key)
            if status is not None:
                return status
        raise ConfigurationError(f"Unknown filing status: {value!r}")


_FILING_STATUS_ALIASES: dict[str, FilingStatus] = {
    "single": FilingStatus.SINGLE,
    "s": FilingStatus.SINGLE,
    "marriedfilingjointly": FilingStatus.MARRIED_FILING_JOINTLY,
    "mfj": FilingStatus.MARRIED_FILING_JOINTLY,
    "marriedfilingseparately": FilingStatus.MARRIED_FILING_SEPARATELY,
    "mfs": FilingStatus.MARRIED_FILING_SEPARATELY,
    "headofhousehold": FilingStatus.HEAD_OF_HOUSEHOLD,
    "hoh": FilingStatus.HEAD_OF_HOUSEHOLD,
}


def to_decimal(value: Any, label: str = "value") -> Decimal:
    """Convert a table or input value to Decimal.

    Floats go through ``str`` so 0.1 stays 0.1.

    Raises:
        ConfigurationError: If the value is not numeric.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ConfigurationError(f"{label} must be numeric, got {value!r}")
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ConfigurationError(f"{label} must be numeric, got {value!r}") from exc


def round_money(value: Decimal) -> Decimal:
    """Round an amount to cents, half up."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def round_rate(value: Decimal, places: int | None = None) -> Decimal:
    """Round a percentage for display.

    Args:
        value: Rate in percent (0-100).
        places: Decimal places; defaults to ``settings.rate_precision``.
    """
    if places is None:
        places = settings.rate_precision
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


# =============================================================================
# Tables
# =============================================================================


@dataclass(frozen=True)
class TaxBracket:
    """One income sub-range taxed at a flat rate.

    Attributes:
        min: Inclusive lower bound.
        max: Exclusive upper bound; None for the open-ended top bracket.
        rate: Fraction in (0, 1].
    """

    min: Decimal
    max: Decimal | None
    rate: Decimal

    @property
    def width(self) -> Decimal | None:
        """Size of the bracket, None when open-ended."""
        if self.max is None:
            return None
        return self.max - self.min

    def contains(self, amount: Decimal) -> bool:
        """True when ``min <= amount < max``."""
        return self.min <= amount and (self.max is None or amount < self.max)

    @property
    def label(self) -> str:
        """Rate label, e.g. ``22%``."""
        return f"{(self.rate * 100).normalize():f}%"

    @property
    def range_label(self) -> str:
        """Range label, e.g. ``$47,150 - $100,525``."""
        upper = "∞" if self.max is None else f"${self.max:,.0f}"
        return f"${self.min:,.0f} - {upper}"


@dataclass(frozen=True)
class BracketTable:
    """Ordered brackets covering [0, +inf) for one filing status.

    Raises:
        ConfigurationError: On construction, if the brackets are empty, do not
            start at zero, overlap or leave gaps, are not ascending, have an
            open bracket anywhere but last, or carry a rate outside (0, 1].
    """

    brackets: tuple[TaxBracket, ...]

    def __post_init__(self) -> None:
        brackets = tuple(self.brackets)
        object.__setattr__(self, "brackets", brackets)

        if not brackets:
            raise ConfigurationError("Bracket table must contain at least one bracket")
        if brackets[0].min != ZERO:
            raise ConfigurationError(
                f"Bracket table must start at 0, starts at {brackets[0].min}"
            )

        previous: TaxBracket | None = None
        for index, bracket in enumerate(brackets):
            if not (ZERO < bracket.rate <= Decimal("1")):
                raise ConfigurationError(
                    f"Bracket {index} rate must be in (0, 1], got {bracket.rate}"
                )
            if bracket.max is None and index != len(brackets) - 1:
                raise ConfigurationError(
                    f"Only the last bracket may be open-ended (bracket {index})"
                )
            if bracket.max is not None and bracket.max <= bracket.min:
                raise ConfigurationError(
                    f"Bracket {index} max ({bracket.max}) must exceed min ({bracket.min})"
                )
            if previous is not None and bracket.min != previous.max:
                raise ConfigurationError(
                    f"Bracket {index} starts at {bracket.min} but the previous "
                    f"bracket ends at {previous.max}"
                )
            previous = bracket

        if brackets[-1].max is not None:
            raise ConfigurationError("Last bracket must be open-ended (max = infinity)")

    @classmethod
    def from_rows(cls, rows: Iterable[Mapping[str, Any]]) -> BracketTable:
        """Build a table from ``{"min", "max", "rate"}`` mappings.

        A max of ``None`` or an infinite number marks the open top bracket.

        Example:
            >>> table = BracketTable.from_rows([
            ...     {"min": 0, "max": 10000, "rate": "0.10"},
            ...     {"min": 10000, "max": None, "rate": "0.20"},
            ... ])
        """
        brackets: list[TaxBracket] = []
        for index, row in enumerate(rows):
            try:
                raw_min, raw_max, raw_rate = row["min"], row.get("max"), row["rate"]
            except (KeyError, TypeError) as exc:
                raise ConfigurationError(
                    f"Bracket row {index} needs 'min' and 'rate' keys"
                ) from exc
            upper = None
            if raw_max is not None:
                upper = to_decimal(raw_max, f"bracket {index} max")
                if upper.is_infinite():
                    upper = None
            brackets.append(
                TaxBracket(
                    min=to_decimal(raw_min, f"bracket {index} min"),
                    max=upper,
                    rate=to_decimal(raw_rate, f"bracket {index} rate"),
                )
            )
        return cls(tuple(brackets))

    @classmethod
    def from_thresholds(
        cls, thresholds: Iterable[tuple[Decimal | None, Decimal]]
    ) -> BracketTable:
        """Build a table from ``(upper_bound, rate)`` pairs, None closing the last."""
        brackets: list[TaxBracket] = []
        lower = ZERO
        for upper, rate in thresholds:
            brackets.append(TaxBracket(min=lower, max=upper, rate=rate))
            if upper is not None:
                lower = upper
        return cls(tuple(brackets))

    def __iter__(self):
        return iter(self.brackets)

    def __len__(self) -> int:
        return len(self.brackets)

    @property
    def top(self) -> TaxBracket:
        """The open-ended top bracket."""
        return self.brackets[-1]


@dataclass(frozen=True)
class DeductionTable:
    """Standard deduction amount per filing status."""

    amounts: Mapping[FilingStatus, Decimal]

    def __post_init__(self) -> None:
        normalized: dict[FilingStatus, Decimal] = {}
        for status, amount in dict(self.amounts).items():
            key = FilingStatus.parse(status)
            value = to_decimal(amount, f"standard deduction for {key.value}")
            if value < ZERO:
                raise ConfigurationError(
                    f"Standard deduction for {key.value} must be non-negative, got {value}"
                )
            normalized[key] = value
        object.__setattr__(self, "amounts", normalized)

    def amount_for(self, filing_status: FilingStatus | str) -> Decimal:
        """Look up the standard deduction.

        Raises:
            ConfigurationError: If the status is unknown or absent from the table.
        """
        status = FilingStatus.parse(filing_status)
        if status not in self.amounts:
            raise ConfigurationError(
                f"No standard deduction configured for {status.value}"
            )
        return self.amounts[status]


# =============================================================================
# Inputs and results
# =============================================================================


class TaxCalculationInput(BaseModel):
    """Manually entered tax parameters.

    Wire shape: ``{income, filingStatus, deductions, credits, withheld,
    estimatedPayments}``. ``deductions`` is the itemized total.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    income: Decimal = Field(default=ZERO, ge=0, description="Gross income")
    filing_status: FilingStatus = Field(default=FilingStatus.SINGLE)
    deductions: Decimal = Field(default=ZERO, ge=0, description="Itemized deductions total")
    credits: Decimal = Field(default=ZERO, ge=0, description="Tax credits")
    withheld: Decimal = Field(default=ZERO, ge=0, description="Federal tax withheld")
    estimated_payments: Decimal = Field(default=ZERO, ge=0, description="Estimated payments made")

    @field_validator("filing_status", mode="before")
    @classmethod
    def parse_filing_status(cls, value: object) -> FilingStatus:
        """Accept wire values and short codes; unknown statuses are a configuration error."""
        return FilingStatus.parse(value)  # type: ignore[arg-type]


@dataclass
class BracketContribution:
    """Tax owed within a single bracket."""

    bracket: str
    min: Decimal
    max: Decimal | None
    rate: Decimal
    income: Decimal
    tax: Decimal
    range: str

    def to_wire(self) -> dict[str, Any]:
        return {
            "bracket": self.bracket,
            "min": float(self.min),
            "max": None if self.max is None else float(self.max),
            "rate": float(self.rate),
            "income": float(round_money(self.income)),
            "tax": float(round_money(self.tax)),
            "range": self.range,
        }


@dataclass
class TaxCalculationResult:
    """Full liability breakdown for one set of inputs.

    Attributes:
        gross_income: Income before deductions.
        standard_deduction: Standard deduction for the filing status.
        itemized_deductions: Itemized total supplied by the caller.
        taxable_income: Income after the chosen deduction, never negative.
        federal_tax: Tax from the bracket table, before credits.
        credits: Credits supplied by the caller.
        tax_after_credits: Federal tax less credits, floored at zero.
        total_payments: Withholding plus estimated payments.
        refund_or_owed: Positive for a refund, negative for an amount owed.
        effective_rate: Tax after credits over gross income, in percent.
        marginal_rate: Rate on the next dollar of taxable income, in percent.
        breakdown: Per-bracket contributions summing to ``federal_tax``.
        deduction_method: Which deduction was applied.
    """

    gross_income: Decimal
    standard_deduction: Decimal
    itemized_deductions: Decimal
    taxable_income: Decimal
    federal_tax: Decimal
    credits: Decimal
    tax_after_credits: Decimal
    total_payments: Decimal
    refund_or_owed: Decimal
    effective_rate: Decimal
    marginal_rate: Decimal
    breakdown: list[BracketContribution] = field(default_factory=list)
    deduction_method: DeductionMethod = "standard"

    def to_wire(self) -> dict[str, Any]:
        """Render the result with the field names the review UI consumes."""
        return {
            "grossIncome": float(round_money(self.gross_income)),
            "standardDeduction": float(round_money(self.standard_deduction)),
            "itemizedDeductions": float(round_money(self.itemized_deductions)),
            "taxableIncome": float(round_money(self.taxable_income)),
            "federalTax": float(round_money(self.federal_tax)),
            "credits": float(round_money(self.credits)),
            "taxAfterCredits": float(round_money(self.tax_after_credits)),
            "totalPayments": float(round_money(self.total_payments)),
            "refundOrOwed": float(round_money(self.refund_or_owed)),
            "effectiveRate": float(round_rate(self.effective_rate)),
            "marginalRate": float(round_rate(self.marginal_rate)),
            "breakdown": [item.to_wire() for item in self.breakdown],
        }
