"""Tests for document and preview models."""

from src.documents.models import ExtractedData, FormSection, ReviewStatus, sections_for
from src.fields.models import Field


class TestSectionsFor:
    """Tests for sections_for."""

    def test_w2_sections_limited_to_present_fields(self, w2_document) -> None:
        sections = sections_for("W-2", list(w2_document.fields))

        assert [section.id for section in sections] == ["employee_info", "employer_info", "wage_info"]
        assert sections[0].field_ids == ["employee_name", "employee_ssn"]
        assert sections[2].field_ids == ["wages_tips", "federal_tax_withheld"]

    def test_uncovered_fields_go_to_other(self) -> None:
        sections = sections_for("1099-NEC", ["payer_tin", "box_7_state_income"])

        assert [section.id for section in sections] == ["payer_info", "other"]
        assert sections[-1].field_ids == ["box_7_state_income"]

    def test_unknown_type_gets_general_section(self) -> None:
        sections = sections_for("1098-T", ["a", "b"])

        assert len(sections) == 1
        assert sections[0].title == "General Information"
        assert sections[0].field_ids == ["a", "b"]

    def test_section_wire_names(self) -> None:
        section = FormSection(id="income", title="Income", field_ids=["wages"])

        assert section.model_dump(by_alias=True) == {
            "id": "income",
            "title": "Income",
            "fieldIds": ["wages"],
        }


class TestExtractedData:
    """Tests for ExtractedData."""

    def test_defaults(self) -> None:
        document = ExtractedData(document_id="doc-1")

        assert document.status is ReviewStatus.PENDING_REVIEW
        assert document.fields == {}
        assert document.validation_errors == []

    def test_wire_shape_keeps_snake_case(self, w2_document) -> None:
        wire = w2_document.to_wire()

        assert wire["document_id"] == "doc-w2-001"
        assert wire["confidence_score"] == 0.89
        assert wire["status"] == "pending_review"
        assert wire["fields"]["wages_tips"]["value"] == "$64,600.00"
        assert wire["validation_errors"] == []

    def test_parses_extraction_payload(self) -> None:
        document = ExtractedData.model_validate(
            {
                "document_id": "doc-2",
                "document_type": "1099-NEC",
                "confidence_score": 0.7,
                "fields": {
                    "payer_tin": {"id": "payer_tin", "field_type": "ein", "value": "12-3456789"},
                },
                "validation_errors": ["payer_name: This field is required"],
            }
        )

        assert isinstance(document.fields["payer_tin"], Field)
        assert document.fields["payer_tin"].is_required
        assert document.validation_errors == ["payer_name: This field is required"]
