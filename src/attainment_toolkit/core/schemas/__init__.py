"""
Schemas Package

JSON schema definitions and validation utilities.
"""

from .validator import (
    validate_paper,
    validate_student_marks,
    validate_threshold,
    validate_indirect_value,
    validate_indirect_input,
    validate_question_paper_payload,
    validate_student_marks_payload,
    validate_choice_groups_payload,
    ValidationError,
)

__all__ = [
    "validate_paper",
    "validate_student_marks",
    "validate_threshold",
    "validate_indirect_value",
    "validate_indirect_input",
    "validate_question_paper_payload",
    "validate_student_marks_payload",
    "validate_choice_groups_payload",
    "ValidationError",
]
