"""
Module: marks

Purpose:
    Provides per-student mark models: StudentRawMarks (marks obtained per
    sub-question) and StudentTotal (the choice-aware total derived from
    them). Totals are never stored by the engine, only recomputed.

Key Functions:
    - coerce_mark(value): Permissive parse of one raw mark entry
    - StudentRawMarks.parse(student_id, raw): Build from loose repository data
    - StudentRawMarks.marks_for(id): Mark for a sub-question (0 when missing)

Dependencies:
    - dataclasses (std)
    - logging (std)
    - ..schemas.validator

Used By:
    - scoring.totals
    - scoring.co_attainment
    - core.utils.serialization
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Tuple

from ..schemas.validator import ValidationError, is_number

logger = logging.getLogger(__name__)


def coerce_mark(value: Any, *, student_id: str = "", sub_question_id: str = "") -> float:
    """
    Parse one raw mark entry.

    Numbers pass through and numeric strings are parsed. Blank entries
    (None, "") count as unanswered. Anything else is malformed: it becomes
    0 and is reported as a data-quality warning. Negative and over-max
    numbers are kept so validation can reject them.

    Returns:
        The mark as a float
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0.0
    if is_number(value):
        return float(value)
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            parsed = math.nan
        if math.isfinite(parsed):
            return parsed
    logger.warning(
        f"Malformed mark {value!r} for {sub_question_id or '?'} "
        f"(student {student_id or '?'}); treating as 0"
    )
    return 0.0


@dataclass(frozen=True)
class StudentRawMarks:
    """
    Marks one student obtained, keyed by sub-question id (immutable).

    Missing entries count as 0. Upper bounds depend on the paper and are
    checked by `validate_student_marks` before any calculation.

    Attributes:
        student_id: Student identifier (USN, roll number...)
        marks: Mapping of sub-question id to marks obtained

    Invariants:
        - every mark is a finite number >= 0

    Example:
        >>> raw = StudentRawMarks.parse("S1", {"1a": "4", "1b": "abc"})
        >>> raw.marks_for("1a"), raw.marks_for("1b"), raw.marks_for("2a")
        (4.0, 0.0, 0.0)
    """

    student_id: str
    marks: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Freeze a copy of the mapping and validate marks on construction."""
        object.__setattr__(self, "marks", MappingProxyType(dict(self.marks)))
        if not self.student_id:
            raise ValidationError("student_id must not be empty", path="student_id")
        for sub_question_id, value in self.marks.items():
            if not is_number(value) or value < 0:
                raise ValidationError(
                    f"Mark {value!r} for {sub_question_id} must be a non-negative number "
                    f"(student {self.student_id})",
                    path=f"{self.student_id}.{sub_question_id}",
                )

    @classmethod
    def parse(cls, student_id: Any, raw: Mapping[str, Any]) -> StudentRawMarks:
        """
        Build from loose repository data, coercing malformed entries to 0.

        Args:
            student_id: Identifier, converted to str
            raw: Mapping of sub-question id to raw mark values
        """
        sid = str(student_id)
        return cls(
            student_id=sid,
            marks={
                str(key): coerce_mark(value, student_id=sid, sub_question_id=str(key))
                for key, value in raw.items()
            },
        )

    def marks_for(self, sub_question_id: str) -> float:
        return self.marks.get(sub_question_id, 0.0)

    def to_dict(self) -> dict:
        return {"student_id": self.student_id, "marks": dict(self.marks)}

    @classmethod
    def from_dict(cls, data: dict) -> StudentRawMarks:
        return cls(student_id=data["student_id"], marks=data.get("marks", {}))

    def __repr__(self) -> str:
        return f"StudentRawMarks({self.student_id!r}, entries={len(self.marks)})"


@dataclass(frozen=True)
class StudentTotal:
    """
    A student's choice-aware total (immutable, derived).

    Attributes:
        student_id: Student identifier
        total: Best valid total under the paper's choice groups
        selected_questions: Main questions that contributed, ascending
        group_scores: Raw score per main question
    """

    student_id: str
    total: float
    selected_questions: Tuple[int, ...] = ()
    group_scores: Mapping[int, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "selected_questions", tuple(self.selected_questions))
        object.__setattr__(self, "group_scores", MappingProxyType(dict(self.group_scores)))
        if self.total < 0:
            raise ValueError(f"Total cannot be negative: {self.total}")

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "total": self.total,
            "selected_questions": list(self.selected_questions),
            "group_scores": {str(k): v for k, v in self.group_scores.items()},
        }

    def __repr__(self) -> str:
        return f"StudentTotal({self.student_id!r}, total={self.total:g}, selected={list(self.selected_questions)})"
