"""
Validation Utilities

Boundary checks run before any scoring or attainment calculation, plus
shape validation of the question-paper and student-marks repository
payloads.

Policy:
- Out-of-range marks, thresholds and indirect values are rejected, never
  clamped, so attainment statistics are not silently distorted.
- Structural problems (duplicate ids, non-positive question numbers,
  overlapping choice groups) are fatal.
- Marks for sub-questions the paper does not define are ignored with a
  warning.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping

import jsonschema

from attainment_toolkit.common.thresholds import ATTAINMENT_THRESHOLDS

if TYPE_CHECKING:
    from ..models.marks import StudentRawMarks
    from ..models.questions import QuestionPaper

logger = logging.getLogger(__name__)


# Schema names bundled next to this module
QUESTION_PAPER_SCHEMA = "question_paper"
STUDENT_MARKS_SCHEMA = "student_marks"


# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(ValueError):
    """Raised when input data fails validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or [message]


def is_number(value: Any) -> bool:
    """True for finite ints/floats (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


# ─────────────────────────────────────────────────────────────────────────────
# Scalar Checks
# ─────────────────────────────────────────────────────────────────────────────

def validate_threshold(value: Any) -> float:
    """
    Validate a target threshold percentage.

    Args:
        value: Threshold as a percentage of max marks

    Returns:
        The threshold as a float

    Raises:
        ValidationError: If not a number in [0, 100]
    """
    if not is_number(value) or not (0 <= value <= 100):
        raise ValidationError(
            f"Invalid threshold: {value!r} (must be a number in [0, 100])",
            path="threshold",
        )
    return float(value)


def validate_indirect_value(co: str, value: Any) -> float:
    """
    Validate one indirect attainment value.

    Raises:
        ValidationError: If not a number in [indirect_min, indirect_max]
    """
    low = ATTAINMENT_THRESHOLDS.indirect_min
    high = ATTAINMENT_THRESHOLDS.indirect_max
    if not is_number(value) or not (low <= value <= high):
        raise ValidationError(
            f"Invalid indirect attainment for {co}: {value!r} (must be a number in [{low:g}, {high:g}])",
            path=f"indirect.{co}",
        )
    return float(value)


def validate_max_marks(value: Any, path: str) -> int:
    """Validate a sub-question's max marks."""
    low = ATTAINMENT_THRESHOLDS.min_sub_question_marks
    high = ATTAINMENT_THRESHOLDS.max_sub_question_marks
    if isinstance(value, bool) or not isinstance(value, int) or not (low <= value <= high):
        raise ValidationError(
            f"Invalid max marks: {value!r} (must be an integer in [{low}, {high}])",
            path=path,
        )
    return value


def validate_main_question_number(value: Any, path: str) -> int:
    """Validate a main question number (positive integer)."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(
            f"Invalid main question number: {value!r} (must be a positive integer)",
            path=path,
        )
    return value


# ─────────────────────────────────────────────────────────────────────────────
# Model Checks
# ─────────────────────────────────────────────────────────────────────────────

def validate_paper(paper: QuestionPaper) -> None:
    """
    Validate question paper structure.

    Checks every sub-question's marks and question number, id uniqueness,
    and that choice groups are well formed and disjoint.

    Raises:
        ValidationError: On the first structural problem found
    """
    seen: set[str] = set()
    for i, sq in enumerate(paper.sub_questions):
        path = f"sub_questions[{i}]"
        if not sq.id:
            raise ValidationError("Sub-question id must not be empty", path=f"{path}.id")
        if sq.id in seen:
            raise ValidationError(f"Duplicate sub-question id: {sq.id!r}", path=f"{path}.id")
        seen.add(sq.id)
        validate_main_question_number(sq.main_question_number, f"{path}.main_question_number")
        validate_max_marks(sq.max_marks, f"{path}.max_marks")

    claimed: dict[int, int] = {}
    for i, group in enumerate(paper.choice_groups):
        path = f"choice_groups[{i}]"
        if len(group) < 2:
            raise ValidationError(
                f"Choice group must list at least two main questions: {sorted(group)}",
                path=path,
            )
        for number in sorted(group):
            validate_main_question_number(number, path)
            if number in claimed:
                raise ValidationError(
                    f"Main question {number} appears in choice groups {claimed[number]} and {i}",
                    path=path,
                )
            claimed[number] = i


def validate_student_marks(paper: QuestionPaper, raw: StudentRawMarks) -> None:
    """
    Validate one student's marks against the paper.

    Every mark must lie in [0, max_marks] of its sub-question. Marks for
    ids the paper does not define take no part in any calculation and are
    only reported.

    Raises:
        ValidationError: If any mark is out of range
    """
    for sub_question_id, value in raw.marks.items():
        sq = paper.get(sub_question_id)
        path = f"{raw.student_id}.{sub_question_id}"
        if sq is None:
            logger.warning(
                f"Ignoring mark for unknown sub-question {sub_question_id!r} (student {raw.student_id})"
            )
            continue
        if not is_number(value) or not (0 <= value <= sq.max_marks):
            raise ValidationError(
                f"Mark {value!r} for {sub_question_id} is outside [0, {sq.max_marks}] "
                f"(student {raw.student_id})",
                path=path,
            )


# ─────────────────────────────────────────────────────────────────────────────
# Payload Checks
# ─────────────────────────────────────────────────────────────────────────────

def _is_integral(value: Any) -> bool:
    """True for ints and digit-only strings (payloads often carry "5")."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, str) and value.strip().isdigit()


def validate_question_paper_payload(data: Any, *, strict: bool = False) -> None:
    """
    Validate a question-paper repository payload.

    Expected shape:
        [{"mainQuestionNumber": 1, "co": "CO1", "bloomsLevel": "Apply",
          "subparts": [{"label": "a", "content": "...", "maxMarks": 5}]}]

    Args:
        data: Decoded JSON payload
        strict: If True, also validate against the bundled JSON schema

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, list):
        raise ValidationError("Question paper payload must be a list of questions")

    for i, question in enumerate(data):
        path = f"[{i}]"
        if not isinstance(question, dict):
            raise ValidationError("Question entry must be an object", path=path)
        missing = [f for f in ("mainQuestionNumber", "subparts") if f not in question]
        if missing:
            raise ValidationError(
                f"Question missing required fields: {missing}",
                path=path,
                errors=[f"Missing field: {f}" for f in missing],
            )
        if not _is_integral(question["mainQuestionNumber"]):
            raise ValidationError(
                f"Invalid mainQuestionNumber: {question['mainQuestionNumber']!r}",
                path=f"{path}.mainQuestionNumber",
            )
        subparts = question["subparts"]
        if not isinstance(subparts, list) or not subparts:
            raise ValidationError("subparts must be a non-empty list", path=f"{path}.subparts")
        for j, subpart in enumerate(subparts):
            sub_path = f"{path}.subparts[{j}]"
            if not isinstance(subpart, dict) or "maxMarks" not in subpart:
                raise ValidationError("Subpart must be an object with maxMarks", path=sub_path)
            if not _is_integral(subpart["maxMarks"]):
                raise ValidationError(
                    f"Invalid maxMarks: {subpart['maxMarks']!r}",
                    path=f"{sub_path}.maxMarks",
                )

    if strict:
        _validate_against_schema(data, QUESTION_PAPER_SCHEMA)


def validate_student_marks_payload(data: Any, *, strict: bool = False) -> None:
    """
    Validate a student-marks repository payload.

    Expected shape:
        [{"studentId": "S1", "marksDetail": {"1a": 4}, "totalObtained": 4}]

    Individual mark values are not checked here: malformed entries are
    coerced to 0 when the marks are parsed.

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, list):
        raise ValidationError("Student marks payload must be a list of students")

    seen: set[str] = set()
    for i, entry in enumerate(data):
        path = f"[{i}]"
        if not isinstance(entry, dict):
            raise ValidationError("Student entry must be an object", path=path)
        if "studentId" not in entry:
            raise ValidationError("Student entry missing studentId", path=path)
        student_id = str(entry["studentId"])
        if student_id in seen:
            raise ValidationError(f"Duplicate studentId: {student_id!r}", path=f"{path}.studentId")
        seen.add(student_id)
        detail = entry.get("marksDetail", {})
        if not isinstance(detail, dict):
            raise ValidationError("marksDetail must be an object", path=f"{path}.marksDetail")

    if strict:
        _validate_against_schema(data, STUDENT_MARKS_SCHEMA)


def validate_choice_groups_payload(data: Any) -> tuple[frozenset[int], ...]:
    """
    Validate choice groups given as a list of question-number lists.

    Expected shape:
        [[1, 2], [3, 4]]

    Overlap and group size are checked later by validate_paper().

    Returns:
        Tuple of frozensets of main question numbers

    Raises:
        ValidationError: If data is not a list of integer lists
    """
    if not isinstance(data, (list, tuple)):
        raise ValidationError(
            "choiceGroups must be a list of question-number lists, e.g. [[1, 2], [3, 4]]",
            path="choiceGroups",
        )
    groups = []
    for i, group in enumerate(data):
        path = f"choiceGroups[{i}]"
        if not isinstance(group, (list, tuple, set, frozenset)):
            raise ValidationError(
                f"Choice group must be a list of question numbers, got {group!r}",
                path=path,
            )
        groups.append(frozenset(
            validate_main_question_number(number, f"{path}[{j}]")
            for j, number in enumerate(group)
        ))
    return tuple(groups)


def _validate_against_schema(data: Any, schema_name: str) -> None:
    schema = _load_schema(schema_name)
    try:
        jsonschema.validate(data, schema)
    except jsonschema.ValidationError as e:
        raise ValidationError(
            f"Schema validation failed: {e.message}",
            path=".".join(str(p) for p in e.absolute_path),
            errors=[e.message],
        ) from e


def validate_indirect_input(indirect: Mapping[str, Any] | None) -> dict[str, float]:
    """Validate a whole indirect-attainment mapping, returning floats."""
    if not indirect:
        return {}
    return {co: validate_indirect_value(co, value) for co, value in indirect.items()}
