"""Completeness and accuracy scoring over a field set.

The score gates the submit-for-approval step: a document can be
submitted only when no required field is empty and no reported issue has
``error`` severity.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from src.core.config import settings
from src.core.errors import IssueKind
from src.fields.models import DataQuality, Field, FieldIssue, Severity


@dataclass(frozen=True)
class SeverityPolicy:
    """Severity reported for each kind of field issue.

    Missing required values default to ``error`` because they block
    submission. Format problems default to ``warning``.
    """

    missing_required: Severity = "error"
    validation: Severity = "warning"
    calculation: Severity = "error"

    @classmethod
    def from_settings(cls) -> SeverityPolicy:
        return cls(
            missing_required=settings.missing_field_severity,
            validation=settings.validation_error_severity,
            calculation=settings.calculation_error_severity,
        )

    def severity_for(self, kind: IssueKind) -> Severity:
        if kind is IssueKind.MISSING_REQUIRED:
            return self.missing_required
        if kind is IssueKind.CALCULATION:
            return self.calculation
        return self.validation


def _percent(part: int, total: int) -> Decimal:
    if total == 0:
        return Decimal("0")
    return Decimal(part) * 100 / Decimal(total)


def _as_int(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def collect_issues(fields: Iterable[Field], policy: SeverityPolicy | None = None) -> list[FieldIssue]:
    """One issue per field that carries an error, in field order."""
    policy = policy or SeverityPolicy.from_settings()
    issues: list[FieldIssue] = []
    for field in fields:
        if not field.has_error:
            continue
        kind = field.error_kind or IssueKind.VALIDATION
        issues.append(
            FieldIssue(
                field_id=field.id,
                message=field.validation_error or "Validation error",
                severity=policy.severity_for(kind),
                kind=kind,
            )
        )
    return issues


def score_data_quality(
    fields: Mapping[str, Field] | Iterable[Field],
    policy: SeverityPolicy | None = None,
) -> DataQuality:
    """Score a validated and computed field set.

    - completeness: share of fields with a non-empty value
    - accuracy: share of fields without a recorded error
    - overall score: mean of the two

    Scores are kept exact internally and rounded to whole percentages only
    in the returned summary. An empty field set scores 0.

    Args:
        fields: Field mapping or iterable.
        policy: Severity mapping; defaults to the configured policy.

    Returns:
        DataQuality with scores, missing required field ids, issues and the
        submission gate.

    Example:
        >>> quality = score_data_quality(fields)
        >>> quality.completeness, len(quality.missing_fields)
        (80, 2)
    """
    field_list = list(fields.values()) if isinstance(fields, Mapping) else list(fields)
    total = len(field_list)
    completed = sum(1 for field in field_list if not field.is_empty)
    accurate = sum(1 for field in field_list if not field.has_error)

    completeness = _percent(completed, total)
    accuracy = _percent(accurate, total)
    overall = (completeness + accuracy) / 2

    missing = [field.id for field in field_list if field.is_required and field.is_empty]
    issues = collect_issues(field_list, policy)
    blocking = any(issue.severity == "error" for issue in issues)

    return DataQuality(
        completeness=_as_int(completeness),
        accuracy=_as_int(accuracy),
        overall_score=_as_int(overall),
        missing_fields=missing,
        validation_errors=issues,
        can_submit=not missing and not blocking,
    )
