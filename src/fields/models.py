"""Pydantic models for reviewable form fields.

A field is either a leaf (extracted by OCR or entered by hand) or computed
(``is_calculated``), in which case its value is owned by the dependency
calculator. Wire names are camelCase; snake_case names are accepted on
input so the same model reads extraction payloads.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field as PydanticField
from pydantic import field_serializer
from pydantic.alias_generators import to_camel

from src.core.errors import IssueKind
from src.fields.parsing import is_blank

Severity = Literal["error", "warning", "info"]
DataSource = Literal["client", "extracted", "calculated", "manual"]
FieldValue = str | int | float | Decimal | None


class FieldType(str, Enum):
    """Value type of a form field. Determines which validator applies."""

    SSN = "ssn"
    EIN = "ein"
    CURRENCY = "currency"
    PERCENTAGE = "percentage"
    DATE = "date"
    TEXT = "text"
    NUMBER = "number"


# Identity fields are required unless the rules say otherwise.
REQUIRED_BY_DEFAULT = frozenset({FieldType.SSN, FieldType.EIN})


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _number_for_json(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    return value


class ValidationRules(_WireModel):
    """Per-field validation rules.

    ``required=None`` defers to the field type default (SSN and EIN are
    required, everything else optional).
    """

    required: bool | None = None
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    min_value: Decimal | None = None
    max_value: Decimal | None = None
    custom_message: str | None = None

    @field_serializer("min_value", "max_value", when_used="json")
    def _bounds_as_numbers(self, value: Decimal | None) -> Any:
        return _number_for_json(value)


class Field(_WireModel):
    """A single reviewable value on a document or form."""

    id: str
    label: str = ""
    value: FieldValue = None
    original_value: FieldValue = None
    confidence: float = PydanticField(default=1.0, ge=0.0, le=1.0)
    type: FieldType = PydanticField(
        default=FieldType.TEXT,
        validation_alias=AliasChoices("type", "field_type", "fieldType"),
    )
    validation_rules: ValidationRules = PydanticField(default_factory=ValidationRules)
    is_modified: bool = False
    is_calculated: bool = False
    data_source: DataSource | None = None
    validation_error: str | None = None
    has_error: bool = False
    error_kind: IssueKind | None = None

    @field_serializer("value", "original_value", when_used="json")
    def _values_as_numbers(self, value: FieldValue) -> Any:
        return _number_for_json(value)

    @property
    def is_required(self) -> bool:
        """Whether the field must carry a value before submission."""
        if self.validation_rules.required is not None:
            return self.validation_rules.required
        return self.type in REQUIRED_BY_DEFAULT

    @property
    def is_empty(self) -> bool:
        """True when the value is undefined or blank."""
        return is_blank(self.value)

    def with_error(self, kind: IssueKind, message: str) -> Field:
        """Copy of this field carrying an error. The value is left as is."""
        return self.model_copy(
            update={"validation_error": message, "has_error": True, "error_kind": kind}
        )

    def cleared(self) -> Field:
        """Copy of this field with any recorded error removed."""
        return self.model_copy(
            update={"validation_error": None, "has_error": False, "error_kind": None}
        )


class FieldIssue(_WireModel):
    """A problem reported against one field."""

    field_id: str
    message: str
    severity: Severity
    kind: IssueKind


class CalculationRecord(_WireModel):
    """Formula producing a computed field from other fields.

    Attributes:
        field_id: The computed field this record owns.
        formula: Expression over the dependency ids, e.g. ``wages + interest``.
        dependencies: Field ids the formula reads.
        result: Last computed value, None when not computed or failed.
        error: Why the last computation failed, if it did.
    """

    field_id: str
    formula: str
    dependencies: list[str] = PydanticField(default_factory=list)
    result: FieldValue = None
    error: str | None = None

    @field_serializer("result", when_used="json")
    def _result_as_number(self, value: FieldValue) -> Any:
        return _number_for_json(value)


class DataQuality(_WireModel):
    """Completeness/accuracy summary over a field set (scores 0-100)."""

    completeness: int
    accuracy: int
    overall_score: int
    missing_fields: list[str] = PydanticField(default_factory=list)
    validation_errors: list[FieldIssue] = PydanticField(default_factory=list)
    can_submit: bool = True

    def scores(self) -> dict[str, int]:
        """The ``{completeness, accuracy, overallScore}`` block shown in previews."""
        return {
            "completeness": self.completeness,
            "accuracy": self.accuracy,
            "overallScore": self.overall_score,
        }
