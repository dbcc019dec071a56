"""Reviewed documents and form previews.

This module provides:
- Pydantic models for extracted documents and form previews
- Confidence scoring for extraction reliability
- The review flow: validate, compute, score, edit and summarize
- The review workflow state machine gating submission for approval
"""

from src.documents.confidence import (
    CRITICAL_FIELDS,
    ConfidenceLevel,
    ConfidenceResult,
    calculate_confidence,
    confidence_tier,
    get_critical_fields,
    low_confidence_fields,
)
from src.documents.models import (
    DOCUMENT_SECTIONS,
    ExtractedData,
    FormPreview,
    FormSection,
    ReviewStatus,
    sections_for,
)
from src.documents.review import (
    ReviewOutcome,
    ReviewSummary,
    SubmissionCheck,
    apply_field_edit,
    build_form_preview,
    review_extracted_data,
    submission_readiness,
    summarize_review,
)
from src.documents.workflow import ReviewWorkflow

__all__ = [
    # Models
    "DOCUMENT_SECTIONS",
    "ExtractedData",
    "FormPreview",
    "FormSection",
    "ReviewStatus",
    "sections_for",
    # Confidence
    "CRITICAL_FIELDS",
    "ConfidenceLevel",
    "ConfidenceResult",
    "calculate_confidence",
    "confidence_tier",
    "get_critical_fields",
    "low_confidence_fields",
    # Review
    "ReviewOutcome",
    "ReviewSummary",
    "SubmissionCheck",
    "apply_field_edit",
    "build_form_preview",
    "review_extracted_data",
    "submission_readiness",
    "summarize_review",
    # Workflow
    "ReviewWorkflow",
]
