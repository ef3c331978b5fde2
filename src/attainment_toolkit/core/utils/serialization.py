"""
Serialization Utilities

Adapters between the external repositories' JSON payloads and the core
models. The engine itself performs no I/O; the `load_*_json` helpers exist
for the CLI and for scripts that feed it.

Question paper payload (QuestionPaperRepository):
    [{"mainQuestionNumber": 1, "co": "CO1", "bloomsLevel": "Apply",
      "subparts": [{"label": "a", "content": "...", "maxMarks": 5}]}]

Student marks payload (StudentMarksRepository):
    [{"studentId": "S1", "marksDetail": {"1a": 4}, "totalObtained": 4}]

Sub-question ids are `f"{mainQuestionNumber}{label}"`, e.g. "1a", or just
"1" for a question with a single unlabelled subpart.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence

from ..models.marks import StudentRawMarks, coerce_mark
from ..models.questions import COTag, DEFAULT_CHOICE_GROUPS, QuestionPaper, SubQuestion
from ..schemas.validator import (
    ValidationError,
    validate_choice_groups_payload,
    validate_question_paper_payload,
    validate_student_marks_payload,
)

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Question Paper
# ─────────────────────────────────────────────────────────────────────────────

def sub_question_id(main_question_number: int, label: str) -> str:
    """Build the sub-question id used as the key in marks payloads."""
    return f"{main_question_number}{label}"


def deserialize_question_paper(
    payload: Sequence[dict[str, Any]],
    *,
    choice_groups: Optional[Iterable[Iterable[int]]] = None,
    validate: bool = True,
    strict: bool = False,
) -> QuestionPaper:
    """
    Build a QuestionPaper from a repository payload.

    A subpart may carry its own "co"/"bloomsLevel"; otherwise it inherits
    the main question's.

    Args:
        payload: Decoded question paper payload
        choice_groups: Mutually-exclusive main question sets
            (default: {1, 2} and {3, 4})
        validate: Whether to check payload shape first
        strict: Also validate against the JSON schema

    Returns:
        Validated QuestionPaper

    Raises:
        ValidationError: If payload or resulting paper is invalid
    """
    if validate:
        validate_question_paper_payload(payload, strict=strict)

    sub_questions: list[SubQuestion] = []
    for question in payload:
        number = int(question["mainQuestionNumber"])
        for subpart in question["subparts"]:
            label = str(subpart.get("label") or "").strip()
            sub_questions.append(
                SubQuestion(
                    id=sub_question_id(number, label),
                    main_question_number=number,
                    max_marks=int(subpart["maxMarks"]),
                    subpart_label=label,
                    co=COTag.parse(subpart.get("co", question.get("co"))),
                    blooms_level=str(subpart.get("bloomsLevel") or question.get("bloomsLevel") or ""),
                    content=str(subpart.get("content") or ""),
                )
            )

    groups = (
        DEFAULT_CHOICE_GROUPS if choice_groups is None
        else validate_choice_groups_payload(choice_groups)
    )
    paper = QuestionPaper(sub_questions=tuple(sub_questions), choice_groups=groups)
    logger.debug(f"Loaded {paper!r}")
    return paper


def serialize_question_paper(paper: QuestionPaper) -> list[dict[str, Any]]:
    """
    Serialize a QuestionPaper back to the repository payload shape.

    Sub-questions are grouped under their main question in paper order.
    The CO and Bloom's level are written per subpart since they may differ
    within a main question.

    Note:
        Choice groups are not part of the repository payload.
    """
    questions: dict[int, dict[str, Any]] = {}
    for sq in paper.sub_questions:
        entry = questions.setdefault(
            sq.main_question_number,
            {"mainQuestionNumber": sq.main_question_number, "subparts": []},
        )
        entry["subparts"].append({
            "label": sq.subpart_label,
            "content": sq.content,
            "maxMarks": sq.max_marks,
            "co": sq.co.value,
            "bloomsLevel": sq.blooms_level,
        })
    return list(questions.values())


# ─────────────────────────────────────────────────────────────────────────────
# Student Marks
# ─────────────────────────────────────────────────────────────────────────────

def deserialize_student_marks(
    payload: Sequence[dict[str, Any]],
    *,
    validate: bool = True,
    strict: bool = False,
) -> tuple[StudentRawMarks, ...]:
    """
    Build StudentRawMarks from a repository payload.

    Malformed mark values become 0 with a warning. The stored
    `totalObtained` is not trusted; a mismatch with the plain sum of the
    parsed marks is logged at debug level since totals are recomputed.

    Raises:
        ValidationError: If the payload shape is invalid or a mark is negative
    """
    if validate:
        validate_student_marks_payload(payload, strict=strict)

    students = []
    for entry in payload:
        raw = StudentRawMarks.parse(entry["studentId"], entry.get("marksDetail") or {})
        stored = entry.get("totalObtained")
        if stored is not None:
            stored_total = coerce_mark(stored, student_id=raw.student_id, sub_question_id="totalObtained")
            if stored_total != sum(raw.marks.values()):
                logger.debug(
                    f"Stored total {stored_total:g} for {raw.student_id} differs from "
                    f"sum of marks {sum(raw.marks.values()):g}"
                )
        students.append(raw)
    return tuple(students)


def serialize_student_marks(students: Iterable[StudentRawMarks]) -> list[dict[str, Any]]:
    """Serialize marks back to the repository payload shape (plain sum as total)."""
    return [
        {
            "studentId": raw.student_id,
            "marksDetail": dict(raw.marks),
            "totalObtained": sum(raw.marks.values()),
        }
        for raw in students
    ]


# ─────────────────────────────────────────────────────────────────────────────
# File Helpers
# ─────────────────────────────────────────────────────────────────────────────

def _read_json(path: Path) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON in {path}: {e}", path=str(path)) from e
    except UnicodeDecodeError as e:
        raise ValidationError(f"{path} is not UTF-8 encoded: {e}", path=str(path)) from e


def load_question_paper_json(
    path: Path,
    *,
    choice_groups: Optional[Iterable[Iterable[int]]] = None,
    strict: bool = False,
) -> QuestionPaper:
    """
    Load a question paper payload from a JSON file.

    The file may hold the bare payload list, or an object with
    "questions" and optional "choiceGroups" keys.
    """
    data = _read_json(Path(path))
    if isinstance(data, dict):
        if choice_groups is None and "choiceGroups" in data:
            choice_groups = data["choiceGroups"]
        data = data.get("questions")
    return deserialize_question_paper(data, choice_groups=choice_groups, strict=strict)


def load_student_marks_json(path: Path, *, strict: bool = False) -> tuple[StudentRawMarks, ...]:
    """Load a student marks payload from a JSON file (list, or object with "students")."""
    data = _read_json(Path(path))
    if isinstance(data, dict):
        data = data.get("students")
    return deserialize_student_marks(data, strict=strict)
