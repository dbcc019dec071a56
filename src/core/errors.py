"""Error taxonomy for the tax review engine.

Only ConfigurationError escapes the engine: it marks a broken caller
contract (unknown filing status, malformed bracket or deduction table).
The field-level errors are raised inside validators and the formula
evaluator, then caught at the field boundary and recorded on the field
so callers always get a structured, partially useful result.
"""

from __future__ import annotations

from enum import Enum


class IssueKind(str, Enum):
    """Kind of problem recorded against a single field."""

    VALIDATION = "validation"
    MISSING_REQUIRED = "missing_required"
    CALCULATION = "calculation"


class TaxEngineError(Exception):
    """Base class for all engine errors."""


class ConfigurationError(TaxEngineError):
    """Caller supplied configuration the engine refuses to guess around."""


class FieldError(TaxEngineError):
    """Problem with a single field's value.

    Attributes:
        field_id: Field the problem belongs to, when known.
        message: Human-readable message shown next to the field.
    """

    kind: IssueKind = IssueKind.VALIDATION

    def __init__(self, message: str, field_id: str | None = None) -> None:
        self.message = message
        self.field_id = field_id
        super().__init__(message)


class ValidationError(FieldError):
    """Value is present but malformed (bad pattern, out of range)."""

    kind = IssueKind.VALIDATION


class MissingRequiredFieldError(FieldError):
    """A required field has no value."""

    kind = IssueKind.MISSING_REQUIRED


class CalculationError(FieldError):
    """A computed field could not be evaluated (cycle, bad dependency, bad formula)."""

    kind = IssueKind.CALCULATION


class SubmissionBlockedError(TaxEngineError):
    """Raised when a document is submitted for approval with blocking issues."""

    def __init__(self, document_id: str, reasons: list[str]) -> None:
        self.document_id = document_id
        self.reasons = reasons
        super().__init__(
            f"Document '{document_id}' cannot be submitted: {'; '.join(reasons)}"
        )
