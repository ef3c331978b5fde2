"""
Core Models Package

Immutable, validated data models that serve as the single source of truth
for scoring and attainment. All models are frozen dataclasses validated on
construction; derived values (totals, attainment) are always recalculated.
"""

from .questions import (
    COTag,
    SubQuestion,
    QuestionPaper,
    DEFAULT_CHOICE_GROUPS,
    UNMAPPED,
    group_by_co,
    group_by_main_question,
)
from .marks import StudentRawMarks, StudentTotal, coerce_mark
from .attainment import (
    AttainmentLevel,
    COAttainmentRecord,
    FinalAttainmentRecord,
    OverallCourseAttainment,
)

__all__ = [
    "COTag",
    "SubQuestion",
    "QuestionPaper",
    "DEFAULT_CHOICE_GROUPS",
    "UNMAPPED",
    "group_by_co",
    "group_by_main_question",
    "StudentRawMarks",
    "StudentTotal",
    "coerce_mark",
    "AttainmentLevel",
    "COAttainmentRecord",
    "FinalAttainmentRecord",
    "OverallCourseAttainment",
]
