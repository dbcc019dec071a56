"""Reviewable form fields: validation, derived values and data quality.

This module provides:
- Pydantic models for fields, calculation records and quality summaries
- Per-type validators (SSN, EIN, currency, number, percentage, date, text)
- Dependency-ordered, incremental computation of derived fields
- Completeness/accuracy scoring that gates submission
"""

from src.fields.dependencies import (
    CalculationRun,
    DependencyGraph,
    compute_all,
    find_cycles,
    recompute,
    topological_order,
)
from src.fields.formulas import evaluate_formula, parse_formula
from src.fields.models import (
    CalculationRecord,
    DataQuality,
    Field,
    FieldIssue,
    FieldType,
    ValidationRules,
)
from src.fields.quality import SeverityPolicy, collect_issues, score_data_quality
from src.fields.validation import (
    VALIDATORS,
    FieldValidator,
    check_value,
    register_validator,
    validate_field,
    validate_fields,
)

__all__ = [
    "CalculationRecord",
    "CalculationRun",
    "DataQuality",
    "DependencyGraph",
    "Field",
    "FieldIssue",
    "FieldType",
    "FieldValidator",
    "SeverityPolicy",
    "VALIDATORS",
    "ValidationRules",
    "check_value",
    "collect_issues",
    "compute_all",
    "evaluate_formula",
    "find_cycles",
    "parse_formula",
    "recompute",
    "register_validator",
    "score_data_quality",
    "topological_order",
    "validate_field",
    "validate_fields",
]
