"""
Utils Package

Payload adapters and JSON helpers.
"""

from .serialization import (
    sub_question_id,
    deserialize_question_paper,
    serialize_question_paper,
    deserialize_student_marks,
    serialize_student_marks,
    load_question_paper_json,
    load_student_marks_json,
)

__all__ = [
    "sub_question_id",
    "deserialize_question_paper",
    "serialize_question_paper",
    "deserialize_student_marks",
    "serialize_student_marks",
    "load_question_paper_json",
    "load_student_marks_json",
]
