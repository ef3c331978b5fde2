"""
Attainment Toolkit Core Package

Shared data models, validation and payload adapters. Every scoring and
attainment module builds on these types.

Design notes:

1. **Immutable Data Models**
   Frozen dataclasses; new instances are created for any change.

2. **Derived Values Never Stored**
   Student totals and attainment records are recomputed from the paper
   and raw marks on every call.

3. **Reject, Don't Clamp**
   Out-of-range marks, thresholds and indirect values raise
   ValidationError at the boundary. Only malformed (non-numeric) mark
   entries are coerced to 0, with a warning.

4. **Typed CO Tags**
   Untagged sub-questions carry COTag.UNMAPPED rather than an empty string.
"""

from .models import (
    COTag,
    SubQuestion,
    QuestionPaper,
    StudentRawMarks,
    StudentTotal,
    AttainmentLevel,
    COAttainmentRecord,
    FinalAttainmentRecord,
    OverallCourseAttainment,
)
from .schemas import ValidationError

__all__ = [
    "COTag",
    "SubQuestion",
    "QuestionPaper",
    "StudentRawMarks",
    "StudentTotal",
    "AttainmentLevel",
    "COAttainmentRecord",
    "FinalAttainmentRecord",
    "OverallCourseAttainment",
    "ValidationError",
]
