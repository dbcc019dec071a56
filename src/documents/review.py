"""Review flow for extracted documents and generated forms.

Ties the field pipeline together for one review session:
validate leaf fields, compute derived fields, score data quality and
confidence. Edits re-run validation for the edited field and recompute only
what depends on it. Every function returns new objects; callers that see a
newer edit arrive can discard an older result.

Example:
    >>> outcome = review_extracted_data(document, records)
    >>> outcome.quality.can_submit
    False
    >>> outcome = apply_field_edit(outcome.document, outcome.records, "employee_ssn", "123-45-6789")
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from src.core.logging import get_logger, review_context
from src.documents.confidence import (
    ConfidenceResult,
    average_confidence,
    calculate_confidence,
    get_critical_fields,
)
from src.documents.models import ExtractedData, FormPreview, FormSection, sections_for
from src.fields.dependencies import compute_all, recompute
from src.fields.models import (
    CalculationRecord,
    DataQuality,
    Field,
    FieldIssue,
    FieldType,
    FieldValue,
)
from src.fields.parsing import is_blank, parse_decimal
from src.fields.quality import SeverityPolicy, score_data_quality
from src.fields.validation import validate_field, validate_fields

logger = get_logger(__name__)


@dataclass
class ReviewOutcome:
    """State of a document after validation and recomputation.

    Attributes:
        document: Document with validated and computed fields.
        records: Calculation records with results and errors.
        quality: Completeness/accuracy summary and submission gate.
        confidence: Overall document confidence.
        recomputed: Computed field ids evaluated in this pass.
    """

    document: ExtractedData
    records: list[CalculationRecord]
    quality: DataQuality
    confidence: ConfidenceResult
    recomputed: list[str] = field(default_factory=list)


@dataclass
class SubmissionCheck:
    """Whether a document may be submitted for approval, and why not."""

    can_submit: bool
    missing_fields: list[str] = field(default_factory=list)
    blocking_issues: list[FieldIssue] = field(default_factory=list)
    messages: list[str] = field(default_factory=list)


@dataclass
class ReviewSummary:
    """Reviewer-facing summary attached to a submission."""

    modified_fields: list[str]
    average_confidence: float
    reviewer_notes: str


def _error_messages(fields: Mapping[str, Field]) -> list[str]:
    return [
        f"{item.label or field_id}: {item.validation_error}"
        for field_id, item in fields.items()
        if item.has_error
    ]


_NUMERIC_TYPES = frozenset({FieldType.CURRENCY, FieldType.NUMBER, FieldType.PERCENTAGE})


def _differs(value: FieldValue, original: FieldValue, field_type: FieldType) -> bool:
    if is_blank(value) and is_blank(original):
        return False
    if is_blank(value) or is_blank(original):
        return True
    if field_type in _NUMERIC_TYPES:
        number, original_number = parse_decimal(value), parse_decimal(original)
        if number is not None and original_number is not None:
            return number != original_number
    return str(value).strip() != str(original).strip()


def _outcome(
    document: ExtractedData,
    fields: dict[str, Field],
    records: list[CalculationRecord],
    recomputed: list[str],
    policy: SeverityPolicy | None,
) -> ReviewOutcome:
    quality = score_data_quality(fields, policy)
    confidence = calculate_confidence(fields, get_critical_fields(document.document_type))
    updated = document.model_copy(
        update={"fields": fields, "validation_errors": _error_messages(fields)}
    )
    return ReviewOutcome(
        document=updated,
        records=records,
        quality=quality,
        confidence=confidence,
        recomputed=recomputed,
    )


def review_extracted_data(
    document: ExtractedData,
    records: Iterable[CalculationRecord] = (),
    policy: SeverityPolicy | None = None,
) -> ReviewOutcome:
    """Validate, compute and score a whole document.

    Args:
        document: Extracted document as received from extraction.
        records: Calculation records for computed fields on the document.
        policy: Severity mapping; defaults to the configured policy.

    Returns:
        ReviewOutcome for the document.
    """
    with review_context(document.document_id):
        validated = validate_fields(document.fields)
        run = compute_all(validated, records)
        outcome = _outcome(document, run.fields, run.records, run.recomputed, policy)
        logger.info(
            "document_reviewed",
            completeness=outcome.quality.completeness,
            accuracy=outcome.quality.accuracy,
            confidence=outcome.confidence.level.value,
        )
    return outcome


def apply_field_edit(
    document: ExtractedData,
    records: Iterable[CalculationRecord],
    field_id: str,
    value: FieldValue,
    policy: SeverityPolicy | None = None,
    reviewer: str | None = None,
) -> ReviewOutcome:
    """Apply a reviewer's edit to one leaf field.

    The edited field is revalidated and marked modified when it differs from
    the extracted original. Only computed fields depending on it are
    recomputed.

    Raises:
        KeyError: If the document has no such field.
        ValueError: If the field is computed; computed values are owned by
            their formula.
    """
    if field_id not in document.fields:
        raise KeyError(f"Document '{document.document_id}' has no field '{field_id}'")
    current = document.fields[field_id]
    if current.is_calculated:
        raise ValueError(f"Field '{field_id}' is computed and cannot be edited")

    is_modified = _differs(value, current.original_value, current.type)
    edited = current.model_copy(update={"value": value, "is_modified": is_modified})

    with review_context(document.document_id, reviewer):
        fields = {**document.fields, field_id: validate_field(edited)}
        run = recompute(fields, records, field_id)
        logger.info(
            "field_edited",
            field_id=field_id,
            is_modified=is_modified,
            recomputed=len(run.recomputed),
        )
        return _outcome(document, run.fields, run.records, run.recomputed, policy)


def submission_readiness(
    document: ExtractedData,
    policy: SeverityPolicy | None = None,
) -> SubmissionCheck:
    """Check whether a reviewed document may go to approval.

    Missing required fields always block. Other issues block when their
    severity is ``error``.
    """
    quality = score_data_quality(document.fields, policy)
    blocking = [issue for issue in quality.validation_errors if issue.severity == "error"]
    messages = [f"Missing required field: {field_id}" for field_id in quality.missing_fields]
    messages.extend(
        f"{issue.field_id}: {issue.message}"
        for issue in blocking
        if issue.field_id not in quality.missing_fields
    )
    return SubmissionCheck(
        can_submit=quality.can_submit,
        missing_fields=quality.missing_fields,
        blocking_issues=blocking,
        messages=messages,
    )


def summarize_review(document: ExtractedData) -> ReviewSummary:
    """Count manual corrections and average confidence for the approver."""
    modified = [field_id for field_id, item in document.fields.items() if item.is_modified]
    average = average_confidence(document.fields)
    if modified:
        notes = (
            f"{len(modified)} field(s) were manually corrected. "
            f"Average confidence: {average * 100:.1f}%"
        )
    else:
        notes = f"No manual corrections needed. Average confidence: {average * 100:.1f}%"
    return ReviewSummary(modified_fields=modified, average_confidence=average, reviewer_notes=notes)


def build_form_preview(
    form_id: str,
    fields: Mapping[str, Field] | Iterable[Field],
    records: Iterable[CalculationRecord] = (),
    sections: list[FormSection] | None = None,
    form_number: str | None = None,
    title: str | None = None,
    policy: SeverityPolicy | None = None,
) -> FormPreview:
    """Validate, compute and score a generated form for preview.

    Args:
        form_id: Form identifier.
        fields: Form fields, leaf and computed.
        records: Calculation records for the computed fields.
        sections: Section layout; defaults to one general section.
        form_number: Form number, e.g. "1040".
        title: Form title.
        policy: Severity mapping; defaults to the configured policy.

    Returns:
        FormPreview with fields in their original order followed by any
        computed field that only exists in ``records``.
    """
    field_map = dict(fields) if isinstance(fields, Mapping) else {item.id: item for item in fields}
    run = compute_all(validate_fields(field_map), records)
    quality = score_data_quality(run.fields, policy)

    return FormPreview(
        form_id=form_id,
        form_number=form_number,
        title=title,
        fields=list(run.fields.values()),
        sections=sections if sections is not None else sections_for("", list(run.fields)),
        data_quality=quality.scores(),
        missing_fields=quality.missing_fields,
        validation_errors=quality.validation_errors,
        calculations=run.records,
    )
