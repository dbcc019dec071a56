"""Confidence scoring for extracted document data.

Every extracted field carries the extractor's own confidence (0-1). This
module turns those per-field values into display tiers and an overall
document score combining three factors: average extraction confidence,
field validation pass rate and presence of critical fields.

The overall level decides how much reviewer attention a document needs:
- HIGH: score >= 0.85 AND all critical fields present
- MEDIUM: score >= 0.60
- LOW: score < 0.60

Example:
    >>> from src.documents.confidence import calculate_confidence
    >>> result = calculate_confidence(doc.fields, get_critical_fields("W-2"))
    >>> print(f"Level: {result.level}, Score: {result.score:.2f}")
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from src.core.config import settings
from src.fields.models import Field


class ConfidenceLevel(str, Enum):
    """Extraction confidence level."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


@dataclass
class ConfidenceResult:
    """Confidence scoring result for a document.

    Attributes:
        level: Overall confidence level (HIGH, MEDIUM, LOW).
        score: Numeric score between 0.0 and 1.0.
        factors: Individual factor scores contributing to overall score.
        notes: Explanation notes, especially for low confidence cases.
    """

    level: ConfidenceLevel
    score: float
    factors: dict[str, float] = field(default_factory=dict)
    notes: list[str] = field(default_factory=list)


# Critical fields that must be present for HIGH confidence by document type
CRITICAL_FIELDS: dict[str, list[str]] = {
    "W-2": [
        "employee_ssn",
        "employer_ein",
        "wages_tips",
        "federal_tax_withheld",
    ],
    "1099-NEC": [
        "payer_tin",
        "recipient_ssn",
        "nonemployee_compensation",
    ],
    "1099-MISC": [
        "payer_tin",
        "recipient_ssn",
    ],
}

# Weights for each factor in confidence calculation
WEIGHT_EXTRACTION = 0.3  # Average per-field extraction confidence
WEIGHT_VALIDATION = 0.4  # Field format validation pass rate
WEIGHT_CRITICAL = 0.3  # Critical field presence

# Thresholds for overall document confidence levels
THRESHOLD_HIGH = 0.85
THRESHOLD_MEDIUM = 0.60


def get_critical_fields(document_type: str) -> list[str]:
    """Critical field ids for a document type; empty for unknown types."""
    return CRITICAL_FIELDS.get(document_type, [])


def confidence_tier(confidence: float) -> ConfidenceLevel:
    """Display tier for one field's extraction confidence.

    Thresholds come from settings (0.9 and 0.7 by default).
    """
    if confidence >= settings.confidence_high_threshold:
        return ConfidenceLevel.HIGH
    if confidence >= settings.confidence_medium_threshold:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def low_confidence_fields(fields: Mapping[str, Field]) -> list[str]:
    """Ids of extracted fields below the HIGH tier that reviewers should check."""
    return [
        field_id
        for field_id, item in fields.items()
        if not item.is_calculated and confidence_tier(item.confidence) is not ConfidenceLevel.HIGH
    ]


def average_confidence(fields: Mapping[str, Field]) -> float:
    """Mean extraction confidence across fields; 0.0 when there are none."""
    if not fields:
        return 0.0
    return sum(item.confidence for item in fields.values()) / len(fields)


def calculate_confidence(
    fields: Mapping[str, Field],
    critical_field_ids: list[str] | None = None,
) -> ConfidenceResult:
    """Calculate overall document confidence.

    Uses a weighted combination of three factors:
    - Extraction confidence (30%): mean of the extractor's per-field confidence.
    - Validation pass rate (40%): share of fields without a recorded error.
      Fields should already be validated.
    - Critical field presence (30%): share of critical fields with a value.

    Args:
        fields: Field id -> validated field.
        critical_field_ids: Fields required for a HIGH level. Defaults to none.

    Returns:
        ConfidenceResult with level, score, factors breakdown, and notes.
    """
    notes: list[str] = []
    critical_field_ids = critical_field_ids or []

    if fields:
        extraction_score = average_confidence(fields)
        passed = sum(1 for item in fields.values() if not item.has_error)
        validation_score = passed / len(fields)
        failed = [field_id for field_id, item in fields.items() if item.has_error]
        if failed:
            notes.append(f"Validation failed for: {', '.join(failed)}")
    else:
        extraction_score = 0.0
        validation_score = 0.5
        notes.append("No fields extracted")

    if critical_field_ids:
        missing = [
            field_id
            for field_id in critical_field_ids
            if field_id not in fields or fields[field_id].is_empty
        ]
        critical_score = (len(critical_field_ids) - len(missing)) / len(critical_field_ids)
        if missing:
            notes.append(f"Missing critical fields: {', '.join(missing)}")
    else:
        missing = []
        critical_score = 1.0

    score = (
        (WEIGHT_EXTRACTION * extraction_score)
        + (WEIGHT_VALIDATION * validation_score)
        + (WEIGHT_CRITICAL * critical_score)
    )

    # HIGH requires score >= 0.85 AND all critical fields present
    if score >= THRESHOLD_HIGH and not missing:
        level = ConfidenceLevel.HIGH
    elif score >= THRESHOLD_MEDIUM:
        level = ConfidenceLevel.MEDIUM
        if missing and score >= THRESHOLD_HIGH:
            notes.append("Score meets HIGH threshold but critical fields are missing")
    else:
        level = ConfidenceLevel.LOW

    return ConfidenceResult(
        level=level,
        score=score,
        factors={
            "extraction_confidence": extraction_score,
            "field_validation": validation_score,
            "critical_fields": critical_score,
        },
        notes=notes,
    )
