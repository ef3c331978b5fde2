"""
Module: questions

Purpose:
    Provides the question-paper structure used by every calculation:
    COTag (optional course-outcome tag), SubQuestion (one scorable item)
    and QuestionPaper (ordered sub-questions plus either/or choice groups).

Key Functions:
    - COTag.parse(value): Tag from loose input, unmapped when blank
    - QuestionPaper.get(id): Look up a sub-question
    - group_by_co(paper): Sub-questions bucketed by CO ("UNMAPPED" reserved)
    - group_by_main_question(paper): Sub-questions bucketed by main question
    - validate(paper): Re-run structural validation

Dependencies:
    - dataclasses (std)
    - functools (std)
    - ..schemas.validator

Used By:
    - scoring.totals
    - scoring.co_attainment
    - core.utils.serialization
    - controller
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import ClassVar, Dict, Iterable, List, Optional, Tuple, FrozenSet

from ..schemas.validator import (
    ValidationError,
    validate_main_question_number,
    validate_max_marks,
    validate_paper,
)


UNMAPPED = "UNMAPPED"

# The exam convention: answer one of Q1/Q2 and one of Q3/Q4
DEFAULT_CHOICE_GROUPS: Tuple[FrozenSet[int], ...] = (frozenset({1, 2}), frozenset({3, 4}))


@dataclass(frozen=True, slots=True)
class COTag:
    """
    Course-outcome tag of a sub-question.

    `value` is None for the unmapped variant. Unmapped sub-questions are
    kept in the paper (they still count towards student totals) but never
    enter CO attainment.

    Example:
        >>> COTag.parse("CO1").key
        'CO1'
        >>> COTag.parse("  ").is_mapped
        False
    """

    value: Optional[str] = None

    UNMAPPED: ClassVar[COTag]

    def __post_init__(self) -> None:
        if self.value is not None and (not self.value.strip() or self.value == UNMAPPED):
            raise ValidationError(f"Use COTag.UNMAPPED for untagged sub-questions, got {self.value!r}")

    @classmethod
    def parse(cls, value: object) -> COTag:
        """Build a tag from loose input; None, blank or "UNMAPPED" mean unmapped."""
        if value is None:
            return cls.UNMAPPED
        text = str(value).strip()
        if not text or text.upper() == UNMAPPED:
            return cls.UNMAPPED
        return cls(text)

    @property
    def is_mapped(self) -> bool:
        return self.value is not None

    @property
    def key(self) -> str:
        """Grouping key: the CO name, or "UNMAPPED"."""
        return self.value if self.value is not None else UNMAPPED

    def __str__(self) -> str:
        return self.key


COTag.UNMAPPED = COTag(None)


@dataclass(frozen=True, slots=True)
class SubQuestion:
    """
    One scorable item of a question paper (immutable).

    Attributes:
        id: Unique id within the paper, like "1a"
        main_question_number: Top-level question number (1..N)
        max_marks: Integer marks in [1, 10]
        subpart_label: Label within the main question, may be empty
        co: Course-outcome tag (COTag.UNMAPPED when untagged)
        blooms_level: Informational only, never used in calculation
        content: Question text, informational only

    Invariants:
        - id is non-empty
        - main_question_number > 0
        - 1 <= max_marks <= 10
    """

    id: str
    main_question_number: int
    max_marks: int
    subpart_label: str = ""
    co: COTag = COTag.UNMAPPED
    blooms_level: str = ""
    content: str = ""

    def __post_init__(self) -> None:
        """Validate sub-question on construction."""
        if not self.id:
            raise ValidationError("Sub-question id must not be empty", path="id")
        validate_main_question_number(self.main_question_number, f"{self.id}.main_question_number")
        validate_max_marks(self.max_marks, f"{self.id}.max_marks")

    def to_dict(self) -> dict:
        d = {
            "id": self.id,
            "main_question_number": self.main_question_number,
            "subpart_label": self.subpart_label,
            "max_marks": self.max_marks,
            "co": self.co.value,
        }
        if self.blooms_level:
            d["blooms_level"] = self.blooms_level
        if self.content:
            d["content"] = self.content
        return d

    @classmethod
    def from_dict(cls, data: dict) -> SubQuestion:
        return cls(
            id=data["id"],
            main_question_number=data["main_question_number"],
            max_marks=data["max_marks"],
            subpart_label=data.get("subpart_label", ""),
            co=COTag.parse(data.get("co")),
            blooms_level=data.get("blooms_level", ""),
            content=data.get("content", ""),
        )

    def __repr__(self) -> str:
        return f"SubQuestion({self.id!r}, q={self.main_question_number}, max={self.max_marks}, co={self.co.key})"


@dataclass(frozen=True)
class QuestionPaper:
    """
    Validated question paper (immutable).

    Attributes:
        sub_questions: Sub-questions in paper order
        choice_groups: Sets of mutually-exclusive main question numbers.
            A student's total takes at most one main question from each
            group. Main questions in no group are compulsory.

    Invariants:
        - sub-question ids are unique
        - every choice group has at least two members
        - choice groups are pairwise disjoint

    Example:
        >>> paper = QuestionPaper((
        ...     SubQuestion("1a", 1, 5, "a", COTag.parse("CO1")),
        ...     SubQuestion("2a", 2, 5, "a", COTag.parse("CO2")),
        ... ))
        >>> paper.total_max_marks
        10
    """

    sub_questions: Tuple[SubQuestion, ...]
    choice_groups: Tuple[FrozenSet[int], ...] = DEFAULT_CHOICE_GROUPS

    def __post_init__(self) -> None:
        """Normalise containers and validate on construction."""
        object.__setattr__(self, "sub_questions", tuple(self.sub_questions))
        object.__setattr__(
            self, "choice_groups", tuple(frozenset(group) for group in self.choice_groups)
        )
        validate_paper(self)

    # ─────────────────────────────────────────────────────────────────────────
    # Calculated Properties (NEVER stored)
    # ─────────────────────────────────────────────────────────────────────────

    @cached_property
    def _by_id(self) -> Dict[str, SubQuestion]:
        return {sq.id: sq for sq in self.sub_questions}

    @cached_property
    def total_max_marks(self) -> int:
        """Sum of max marks over every sub-question (ignores choices)."""
        return sum(sq.max_marks for sq in self.sub_questions)

    @cached_property
    def main_question_numbers(self) -> Tuple[int, ...]:
        """Main question numbers present in the paper, ascending."""
        return tuple(sorted({sq.main_question_number for sq in self.sub_questions}))

    @cached_property
    def co_tags(self) -> Tuple[str, ...]:
        """Mapped CO names in first-seen paper order."""
        return tuple(key for key in self.group_by_co() if key != UNMAPPED)

    # ─────────────────────────────────────────────────────────────────────────
    # Query Methods
    # ─────────────────────────────────────────────────────────────────────────

    def get(self, sub_question_id: str) -> Optional[SubQuestion]:
        return self._by_id.get(sub_question_id)

    def choice_group_for(self, main_question_number: int) -> Optional[FrozenSet[int]]:
        """Return the choice group containing a main question, if any."""
        for group in self.choice_groups:
            if main_question_number in group:
                return group
        return None

    def group_by_co(self) -> Dict[str, List[SubQuestion]]:
        return group_by_co(self)

    def group_by_main_question(self) -> Dict[int, List[SubQuestion]]:
        return group_by_main_question(self)

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        return {
            "sub_questions": [sq.to_dict() for sq in self.sub_questions],
            "choice_groups": [sorted(group) for group in self.choice_groups],
        }

    @classmethod
    def from_dict(cls, data: dict) -> QuestionPaper:
        groups = data.get("choice_groups")
        return cls(
            sub_questions=tuple(SubQuestion.from_dict(d) for d in data["sub_questions"]),
            choice_groups=(
                DEFAULT_CHOICE_GROUPS if groups is None
                else tuple(frozenset(group) for group in groups)
            ),
        )

    def __repr__(self) -> str:
        return (
            f"QuestionPaper(sub_questions={len(self.sub_questions)}, "
            f"max={self.total_max_marks}, cos={list(self.co_tags)})"
        )


def validate(paper: QuestionPaper) -> None:
    """Re-run structural validation on a paper (raises ValidationError)."""
    validate_paper(paper)


def group_by_co(paper: QuestionPaper) -> Dict[str, List[SubQuestion]]:
    """
    Bucket sub-questions by CO tag.

    Untagged sub-questions go to the reserved "UNMAPPED" bucket, which
    attainment calculation skips.

    Returns:
        Mapping of CO key to sub-questions, in first-seen paper order
    """
    groups: Dict[str, List[SubQuestion]] = {}
    for sq in paper.sub_questions:
        groups.setdefault(sq.co.key, []).append(sq)
    return groups


def group_by_main_question(paper: QuestionPaper) -> Dict[int, List[SubQuestion]]:
    """Bucket sub-questions by main question number, ascending."""
    groups: Dict[int, List[SubQuestion]] = {n: [] for n in paper.main_question_numbers}
    for sq in paper.sub_questions:
        groups[sq.main_question_number].append(sq)
    return groups


def iter_mapped_groups(paper: QuestionPaper) -> Iterable[Tuple[str, List[SubQuestion]]]:
    """Yield (co, sub_questions) for mapped COs only."""
    for co, questions in group_by_co(paper).items():
        if co != UNMAPPED:
            yield co, questions
