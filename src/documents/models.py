"""Pydantic models for reviewed documents and form previews.

- ExtractedData: fields pulled from one uploaded document, reviewed and
  corrected by a preparer before submission for approval
- FormPreview: a generated form with its fields, sections, data-quality
  summary and the calculations behind every computed field

ExtractedData keeps the snake_case keys of the extraction payloads;
FormPreview uses the camelCase keys the preview screen reads.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field as PydanticField
from pydantic.alias_generators import to_camel

from src.fields.models import CalculationRecord, Field, FieldIssue


class ReviewStatus(str, Enum):
    """Review lifecycle status of an extracted document."""

    PENDING_REVIEW = "pending_review"
    REVIEWED = "reviewed"
    APPROVED = "approved"
    REJECTED = "rejected"


class FormSection(BaseModel):
    """A titled group of fields on a form or document."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    field_ids: list[str] = PydanticField(default_factory=list)


# Section layout per extracted document type
DOCUMENT_SECTIONS: dict[str, list[FormSection]] = {
    "W-2": [
        FormSection(
            id="employee_info",
            title="Employee Information",
            field_ids=["employee_name", "employee_ssn", "employee_address"],
        ),
        FormSection(
            id="employer_info",
            title="Employer Information",
            field_ids=["employer_name", "employer_ein", "employer_address"],
        ),
        FormSection(
            id="wage_info",
            title="Wage and Tax Information",
            field_ids=[
                "wages_tips",
                "federal_tax_withheld",
                "social_security_wages",
                "social_security_tax",
                "medicare_wages",
                "medicare_tax",
            ],
        ),
    ],
    "1099-NEC": [
        FormSection(
            id="payer_info",
            title="Payer Information",
            field_ids=["payer_name", "payer_tin", "payer_address"],
        ),
        FormSection(
            id="recipient_info",
            title="Recipient Information",
            field_ids=["recipient_name", "recipient_ssn", "recipient_address"],
        ),
        FormSection(
            id="payment_info",
            title="Payment Information",
            field_ids=["nonemployee_compensation", "federal_tax_withheld"],
        ),
    ],
    "1099-MISC": [
        FormSection(
            id="payer_info",
            title="Payer Information",
            field_ids=["payer_name", "payer_tin", "payer_address"],
        ),
        FormSection(
            id="recipient_info",
            title="Recipient Information",
            field_ids=["recipient_name", "recipient_ssn", "recipient_address"],
        ),
        FormSection(
            id="income_info",
            title="Income Information",
            field_ids=["rents", "royalties", "other_income", "federal_tax_withheld"],
        ),
    ],
}


def sections_for(document_type: str, field_ids: list[str]) -> list[FormSection]:
    """Sections for a document type, limited to fields that exist.

    Unknown document types get a single "General Information" section.
    Fields not covered by any configured section are appended to an
    "Other" section so nothing disappears from the review screen.
    """
    present = set(field_ids)
    configured = DOCUMENT_SECTIONS.get(document_type)
    if not configured:
        return [FormSection(id="general", title="General Information", field_ids=list(field_ids))]

    sections: list[FormSection] = []
    covered: set[str] = set()
    for section in configured:
        ids = [field_id for field_id in section.field_ids if field_id in present]
        covered.update(ids)
        if ids:
            sections.append(section.model_copy(update={"field_ids": ids}))

    leftover = [field_id for field_id in field_ids if field_id not in covered]
    if leftover:
        sections.append(FormSection(id="other", title="Other", field_ids=leftover))
    return sections


class ExtractedData(BaseModel):
    """Fields extracted from one document, plus review state.

    Attributes:
        document_id: Document identifier.
        document_type: Form type, e.g. "W-2" or "1099-NEC".
        status: Review lifecycle status.
        confidence_score: Overall extraction confidence (0-1).
        fields: Field id -> field.
        validation_errors: Messages (or issue objects) from the last validation.
    """

    document_id: str
    document_type: str = "Other"
    extraction_date: str | None = None
    status: ReviewStatus = ReviewStatus.PENDING_REVIEW
    confidence_score: float = PydanticField(default=0.0, ge=0.0, le=1.0)
    fields: dict[str, Field] = PydanticField(default_factory=dict)
    validation_errors: list[str | FieldIssue] = PydanticField(default_factory=list)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class FormPreview(BaseModel):
    """Generated form with quality summary and calculation trace."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    form_id: str
    form_number: str | None = None
    title: str | None = None
    fields: list[Field] = PydanticField(default_factory=list)
    sections: list[FormSection] = PydanticField(default_factory=list)
    data_quality: dict[str, int] = PydanticField(default_factory=dict)
    missing_fields: list[str] = PydanticField(default_factory=list)
    validation_errors: list[FieldIssue] = PydanticField(default_factory=list)
    calculations: list[CalculationRecord] = PydanticField(default_factory=list)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
