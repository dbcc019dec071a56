"""Per-field-type validation of extracted and entered values.

Validators are registered by field type and share one contract:
``validate(value, rules)`` returns None for a good value and raises
``ValidationError`` for a malformed one. New field types only need a new
registry entry.

Validation never changes a field's value. Invalid fields keep their value
so the reviewer can see and fix it; the error is recorded next to it.

Example:
    >>> from src.fields.validation import validate_field
    >>> field = Field(id="employee_ssn", type="ssn", value="123456789")
    >>> validate_field(field).validation_error
    'SSN must be in format XXX-XX-XXXX'
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Protocol

from src.core.errors import FieldError, MissingRequiredFieldError, ValidationError
from src.core.logging import get_logger
from src.fields.models import Field, FieldType, ValidationRules
from src.fields.parsing import is_blank, parse_decimal, parse_us_date

logger = get_logger(__name__)

SSN_PATTERN = re.compile(r"^\d{3}-\d{2}-\d{4}$", re.ASCII)
EIN_PATTERN = re.compile(r"^\d{2}-\d{7}$", re.ASCII)

REQUIRED_MESSAGE = "This field is required"


class FieldValidator(Protocol):
    """Contract shared by every field-type validator."""

    def validate(self, value: Any, rules: ValidationRules) -> None:
        """Raise ValidationError if ``value`` is malformed under ``rules``."""
        ...


def _format_bound(value: Decimal, currency: bool) -> str:
    text = f"{value.normalize():f}"
    return f"${text}" if currency else text


@dataclass(frozen=True)
class PatternValidator:
    """Full-match a fixed identifier pattern (SSN, EIN)."""

    pattern: re.Pattern[str]
    message: str

    def validate(self, value: Any, rules: ValidationRules) -> None:
        if not self.pattern.match(str(value).strip()):
            raise ValidationError(self.message)


@dataclass(frozen=True)
class NumericValidator:
    """Numeric parse with optional bounds.

    ``default_min``/``default_max`` apply unless the rules override them.
    """

    currency: bool = False
    default_min: Decimal | None = None
    default_max: Decimal | None = None
    range_message: str | None = None

    def validate(self, value: Any, rules: ValidationRules) -> None:
        number = parse_decimal(value)
        if number is None:
            if self.range_message:
                raise ValidationError(self.range_message)
            kind = "currency" if self.currency else "number"
            raise ValidationError(f"Invalid {kind} format")

        minimum = rules.min_value if rules.min_value is not None else self.default_min
        maximum = rules.max_value if rules.max_value is not None else self.default_max

        if self.range_message and rules.min_value is None and rules.max_value is None:
            if (minimum is not None and number < minimum) or (
                maximum is not None and number > maximum
            ):
                raise ValidationError(self.range_message)
            return

        if minimum is not None and number < minimum:
            raise ValidationError(
                f"Value must be at least {_format_bound(minimum, self.currency)}"
            )
        if maximum is not None and number > maximum:
            raise ValidationError(
                f"Value must not exceed {_format_bound(maximum, self.currency)}"
            )


@dataclass(frozen=True)
class DateValidator:
    """MM/DD/YYYY, and a date that exists on the calendar."""

    message: str = "Date must be in format MM/DD/YYYY"

    def validate(self, value: Any, rules: ValidationRules) -> None:
        if parse_us_date(value) is None:
            raise ValidationError(self.message)


@dataclass(frozen=True)
class TextValidator:
    """Length bounds and an optional caller-supplied pattern."""

    def validate(self, value: Any, rules: ValidationRules) -> None:
        text = str(value).strip()
        if rules.min_length is not None and len(text) < rules.min_length:
            raise ValidationError(f"Minimum length is {rules.min_length} characters")
        if rules.max_length is not None and len(text) > rules.max_length:
            raise ValidationError(f"Maximum length is {rules.max_length} characters")
        if rules.pattern:
            try:
                matched = re.search(rules.pattern, text)
            except re.error as exc:
                raise ValidationError(f"Invalid validation pattern: {exc}") from exc
            if not matched:
                raise ValidationError(rules.custom_message or "Invalid format")


VALIDATORS: dict[str, FieldValidator] = {
    FieldType.SSN: PatternValidator(SSN_PATTERN, "SSN must be in format XXX-XX-XXXX"),
    FieldType.EIN: PatternValidator(EIN_PATTERN, "EIN must be in format XX-XXXXXXX"),
    FieldType.CURRENCY: NumericValidator(currency=True),
    FieldType.NUMBER: NumericValidator(),
    FieldType.PERCENTAGE: NumericValidator(
        default_min=Decimal("0"),
        default_max=Decimal("100"),
        range_message="Percentage must be between 0 and 100",
    ),
    FieldType.DATE: DateValidator(),
    FieldType.TEXT: TextValidator(),
}


def register_validator(field_type: str, validator: FieldValidator) -> None:
    """Register or replace the validator for a field type."""
    VALIDATORS[field_type] = validator


def get_validator(field_type: str) -> FieldValidator | None:
    """Validator for a field type, None when the type has no rules."""
    return VALIDATORS.get(field_type)


def check_value(
    value: Any,
    field_type: str,
    rules: ValidationRules,
    required: bool,
) -> None:
    """Run the required check, then the type validator.

    Raises:
        MissingRequiredFieldError: If the value is empty and required.
        ValidationError: If the value is present but malformed.
    """
    if is_blank(value):
        if required:
            raise MissingRequiredFieldError(REQUIRED_MESSAGE)
        return

    validator = get_validator(field_type)
    if validator is not None:
        validator.validate(value, rules)


def validate_field(field: Field) -> Field:
    """Validate one field and record the outcome on a copy.

    Computed fields are returned unchanged; their errors come from the
    dependency calculator.

    Args:
        field: Field to validate.

    Returns:
        Copy of the field with ``validation_error``, ``has_error`` and
        ``error_kind`` set or cleared. The value is never modified.
    """
    if field.is_calculated:
        return field

    try:
        check_value(field.value, field.type, field.validation_rules, field.is_required)
    except FieldError as exc:
        logger.debug(
            "field_validation_failed",
            field_id=field.id,
            field_type=field.type.value,
            kind=exc.kind.value,
            reason=exc.message,
        )
        return field.with_error(exc.kind, exc.message)
    return field.cleared()


def validate_fields(fields: Mapping[str, Field]) -> dict[str, Field]:
    """Validate every field in a set.

    Returns:
        New mapping of field id to validated field copy, in input order.
    """
    validated = {field_id: validate_field(field) for field_id, field in fields.items()}
    failed = sum(1 for field in validated.values() if field.has_error)
    if failed:
        logger.info("fields_validated", total=len(validated), failed=failed)
    return validated
