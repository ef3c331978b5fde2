"""
Module: attainment

Purpose:
    Result records of CO attainment: per-CO direct attainment
    (COAttainmentRecord), direct + indirect merge (FinalAttainmentRecord)
    and the course-wide value (OverallCourseAttainment).

Key Classes:
    - AttainmentLevel: 1..3 ordinal classification
    - COAttainmentRecord: Method 1 and Method 2 figures for one CO
    - FinalAttainmentRecord: Weighted direct/indirect result for one CO
    - OverallCourseAttainment: Mean of final levels across COs

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - scoring.co_attainment
    - scoring.indirect
    - scoring.course
    - controller
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from attainment_toolkit.common.thresholds import ATTAINMENT_THRESHOLDS


def _rounded(value: float) -> float:
    return round(value, ATTAINMENT_THRESHOLDS.report_precision)


class AttainmentLevel(IntEnum):
    """Attainment level (compares equal to the plain ints 1, 2, 3)."""
    LEVEL_1 = 1
    LEVEL_2 = 2
    LEVEL_3 = 3

    def __str__(self) -> str:
        return f"Level {self.value}"


def _check_percentage(name: str, value: float) -> None:
    if not (0 <= value <= 100):
        raise ValueError(f"{name} must be in [0, 100]: {value}")


@dataclass(frozen=True, slots=True)
class COAttainmentRecord:
    """
    Direct attainment of one course outcome.

    Attributes:
        co: CO name, like "CO1"
        max_marks: Sum of max marks of the CO's sub-questions
        target_marks: max_marks × threshold / 100
        avg_marks: Mean CO score over all students (0 with no students)
        percentage: Method 1, avg_marks / max_marks × 100
        attainment_level: Method 1 level (70/55 bands)
        students_above_target: Students whose CO score >= target_marks
        total_students: Students considered
        method2_percentage: students_above_target / total_students × 100
        method2_level: Method 2 level (70/55 bands)

    Invariants:
        - percentages in [0, 100]
        - 0 <= students_above_target <= total_students
    """

    co: str
    max_marks: int
    target_marks: float
    avg_marks: float
    percentage: float
    attainment_level: AttainmentLevel
    students_above_target: int
    total_students: int
    method2_percentage: float
    method2_level: AttainmentLevel

    def __post_init__(self) -> None:
        _check_percentage("percentage", self.percentage)
        _check_percentage("method2_percentage", self.method2_percentage)
        if not (0 <= self.students_above_target <= self.total_students):
            raise ValueError(
                f"students_above_target ({self.students_above_target}) must be within "
                f"[0, total_students={self.total_students}]"
            )

    def to_dict(self) -> dict:
        return {
            "co": self.co,
            "max_marks": self.max_marks,
            "target_marks": _rounded(self.target_marks),
            "avg_marks": _rounded(self.avg_marks),
            "percentage": _rounded(self.percentage),
            "attainment_level": int(self.attainment_level),
            "students_above_target": self.students_above_target,
            "total_students": self.total_students,
            "method2_percentage": _rounded(self.method2_percentage),
            "method2_level": int(self.method2_level),
        }


@dataclass(frozen=True, slots=True)
class FinalAttainmentRecord:
    """
    Direct attainment merged with indirect (survey) attainment for one CO.

    Attributes:
        co: CO name
        direct: Method 1 level
        indirect: Indirect value in [0, 3] (0 when not supplied)
        final: direct_weight × direct + indirect_weight × indirect (unrounded)
        level: Level of `final` (2.7/2.0 bands)
    """

    co: str
    direct: AttainmentLevel
    indirect: float
    final: float
    level: AttainmentLevel

    def to_dict(self) -> dict:
        return {
            "co": self.co,
            "direct": int(self.direct),
            "indirect": self.indirect,
            "final": _rounded(self.final),
            "level": int(self.level),
        }


@dataclass(frozen=True, slots=True)
class OverallCourseAttainment:
    """
    Course-wide attainment.

    Attributes:
        value: Unweighted mean of every CO's final level (0 with no COs)
        level: Level of `value` (2.7/2.0 bands)
    """

    value: float
    level: AttainmentLevel

    def to_dict(self) -> dict:
        return {"value": _rounded(self.value), "level": int(self.level)}

    def __str__(self) -> str:
        return f"{self.value:.2f} ({self.level})"
