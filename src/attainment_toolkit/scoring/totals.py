"""
Module: scoring.totals

Purpose:
    Compute a student's total under the paper's either/or choice groups.
    Each choice group contributes at most one main question (the student's
    best-scoring attempted one); main questions outside every choice group
    are compulsory and always count.

    With the default groups {1, 2} and {3, 4} this gives:
        nothing attempted         -> 0
        one question attempted    -> that question's score
        Q1 + Q3 (cross pair)      -> sum
        Q1 + Q2 (same pair)       -> the larger
        all four                  -> best cross-pair sum

Key Functions:
    - compute_group_scores(): Raw score per main question
    - select_best_total(): Best valid total from group scores
    - compute_student_total(): Total for one student (float)
    - compute_student_result(): Total plus selected questions
    - compute_student_totals(): Results for a whole class

Dependencies:
    - core.models
    - core.schemas.validator

Used By:
    - controller
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Mapping, Sequence, Tuple, FrozenSet, Union

from attainment_toolkit.core.models.marks import StudentRawMarks, StudentTotal
from attainment_toolkit.core.models.questions import QuestionPaper
from attainment_toolkit.core.schemas.validator import validate_student_marks

logger = logging.getLogger(__name__)

RawMarksLike = Union[StudentRawMarks, Mapping[str, Any]]


def as_raw_marks(raw: RawMarksLike, student_id: str = "student") -> StudentRawMarks:
    """Accept StudentRawMarks or a plain {sub_question_id: mark} mapping."""
    if isinstance(raw, StudentRawMarks):
        return raw
    return StudentRawMarks.parse(student_id, raw)


def compute_group_scores(paper: QuestionPaper, raw: StudentRawMarks) -> Dict[int, float]:
    """
    Sum marks per main question.

    Returns:
        Mapping of every main question number in the paper to its score
    """
    scores: Dict[int, float] = {n: 0.0 for n in paper.main_question_numbers}
    for sq in paper.sub_questions:
        scores[sq.main_question_number] += raw.marks_for(sq.id)
    return scores


def select_best_total(
    group_scores: Mapping[int, float],
    choice_groups: Sequence[FrozenSet[int]],
) -> Tuple[float, Tuple[int, ...]]:
    """
    Pick the best valid combination of attempted main questions.

    A main question is attempted when its score is positive. From each
    choice group the highest-scoring attempted member is taken (ties go to
    the lower question number); attempted questions in no group are all
    taken. Since scores are non-negative this maximises the total.

    Args:
        group_scores: Score per main question
        choice_groups: Disjoint sets of mutually-exclusive main questions

    Returns:
        (total, selected main question numbers ascending)
    """
    attempted = {n for n, score in group_scores.items() if score > 0}
    if not attempted:
        return 0.0, ()

    selected = []
    in_choice: set[int] = set()
    for group in choice_groups:
        in_choice |= group
        candidates = sorted(n for n in group if n in attempted)
        if candidates:
            selected.append(max(candidates, key=lambda n: group_scores[n]))
    selected.extend(n for n in attempted if n not in in_choice)

    chosen = tuple(sorted(selected))
    return sum(group_scores[n] for n in chosen), chosen


def compute_student_result(
    paper: QuestionPaper,
    raw: RawMarksLike,
    *,
    validate: bool = True,
) -> StudentTotal:
    """
    Compute one student's total with the selected main questions.

    Pass validate=False when the marks were already checked against the paper.

    Raises:
        ValidationError: If any mark is outside [0, max_marks]
    """
    raw = as_raw_marks(raw)
    if validate:
        validate_student_marks(paper, raw)

    group_scores = compute_group_scores(paper, raw)
    total, selected = select_best_total(group_scores, paper.choice_groups)
    logger.debug(f"{raw.student_id}: groups={group_scores} selected={list(selected)} total={total:g}")
    return StudentTotal(
        student_id=raw.student_id,
        total=total,
        selected_questions=selected,
        group_scores=group_scores,
    )


def compute_student_total(paper: QuestionPaper, raw: RawMarksLike) -> float:
    """
    Compute one student's choice-aware total.

    Args:
        paper: Validated question paper
        raw: StudentRawMarks or {sub_question_id: mark}; missing ids count as 0

    Returns:
        Best valid total

    Example:
        >>> compute_student_total(paper, {"1a": 5, "3a": 6})
        11.0
    """
    return compute_student_result(paper, raw).total


def compute_student_totals(
    paper: QuestionPaper,
    all_raw: Iterable[RawMarksLike],
    *,
    validate: bool = True,
) -> Tuple[StudentTotal, ...]:
    """Compute results for every student, in input order."""
    return tuple(compute_student_result(paper, raw, validate=validate) for raw in all_raw)
