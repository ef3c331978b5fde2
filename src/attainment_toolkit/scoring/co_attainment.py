"""
Module: scoring.co_attainment

Purpose:
    Compute direct attainment per course outcome with two independent
    measures:

    Method 1 (average percentage):
        percentage = mean CO score / CO max marks × 100
    Method 2 (students above target):
        method2_percentage = share of students whose CO score reaches
        max marks × threshold / 100

    Both map onto levels with the 70/55 bands. CO scores are raw sums over
    the CO's sub-questions; either/or choice selection does not apply here.

Key Functions:
    - compute_co_scores(): One student's score per CO
    - compute_co_attainment(): COAttainmentRecord per CO

Dependencies:
    - core.models
    - core.schemas.validator
    - common.thresholds

Used By:
    - controller
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Sequence

from attainment_toolkit.common.thresholds import ATTAINMENT_THRESHOLDS, percent_to_level
from attainment_toolkit.core.models.attainment import AttainmentLevel, COAttainmentRecord
from attainment_toolkit.core.models.marks import StudentRawMarks
from attainment_toolkit.core.models.questions import QuestionPaper, SubQuestion, iter_mapped_groups
from attainment_toolkit.core.schemas.validator import validate_student_marks, validate_threshold

from .totals import RawMarksLike, as_raw_marks

logger = logging.getLogger(__name__)


def _score_for(raw: StudentRawMarks, questions: Sequence[SubQuestion]) -> float:
    return sum(raw.marks_for(sq.id) for sq in questions)


def compute_co_scores(paper: QuestionPaper, raw: RawMarksLike) -> Dict[str, float]:
    """
    One student's raw score per mapped CO.

    Raises:
        ValidationError: If any mark is outside [0, max_marks]
    """
    raw = as_raw_marks(raw)
    validate_student_marks(paper, raw)
    return {co: _score_for(raw, questions) for co, questions in iter_mapped_groups(paper)}


def _build_record(
    co: str,
    questions: List[SubQuestion],
    students: Sequence[StudentRawMarks],
    threshold_percent: float,
) -> COAttainmentRecord:
    max_marks = sum(sq.max_marks for sq in questions)
    target_marks = max_marks * threshold_percent / 100
    scores = [_score_for(raw, questions) for raw in students]
    total_students = len(scores)

    avg_marks = sum(scores) / total_students if total_students else 0.0
    percentage = avg_marks / max_marks * 100 if max_marks > 0 else 0.0
    above = sum(1 for score in scores if score >= target_marks)
    method2_percentage = above / total_students * 100 if total_students else 0.0

    return COAttainmentRecord(
        co=co,
        max_marks=max_marks,
        target_marks=target_marks,
        avg_marks=avg_marks,
        percentage=percentage,
        attainment_level=AttainmentLevel(percent_to_level(percentage)),
        students_above_target=above,
        total_students=total_students,
        method2_percentage=method2_percentage,
        method2_level=AttainmentLevel(percent_to_level(method2_percentage)),
    )


def compute_co_attainment(
    paper: QuestionPaper,
    all_raw: Iterable[RawMarksLike],
    threshold_percent: float = ATTAINMENT_THRESHOLDS.default_target_percent,
    *,
    validate: bool = True,
) -> Dict[str, COAttainmentRecord]:
    """
    Compute Method 1 and Method 2 attainment for every mapped CO.

    Sub-questions without a CO tag are skipped entirely. With no students,
    averages and percentages are 0 (level 1).

    Args:
        paper: Validated question paper
        all_raw: Marks for every student in the class
        threshold_percent: Target as a percentage of each CO's max marks
        validate: Check every student's marks first (skip when the caller
            already has)

    Returns:
        Mapping of CO name to record, in first-seen paper order

    Raises:
        ValidationError: If the threshold is outside [0, 100] or any mark
            is outside its sub-question's range

    Example:
        >>> records = compute_co_attainment(paper, students, threshold_percent=60)
        >>> records["CO1"].attainment_level
        <AttainmentLevel.LEVEL_2: 2>
    """
    threshold_percent = validate_threshold(threshold_percent)
    students = [as_raw_marks(raw, student_id=f"student-{i + 1}") for i, raw in enumerate(all_raw)]
    if validate:
        for raw in students:
            validate_student_marks(paper, raw)

    records: Dict[str, COAttainmentRecord] = {}
    for co, questions in iter_mapped_groups(paper):
        record = _build_record(co, questions, students, threshold_percent)
        logger.debug(
            f"{co}: max={record.max_marks} avg={record.avg_marks:.2f} "
            f"m1={record.percentage:.2f}% (L{int(record.attainment_level)}) "
            f"m2={record.method2_percentage:.2f}% (L{int(record.method2_level)})"
        )
        records[co] = record
    return records
