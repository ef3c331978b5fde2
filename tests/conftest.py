import pytest
import sys
from pathlib import Path

# Add src to sys.path so we can import attainment_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from attainment_toolkit.core.models import COTag, QuestionPaper, StudentRawMarks, SubQuestion


def make_paper(*specs, choice_groups=None) -> QuestionPaper:
    """Build a paper from (id, main_question_number, max_marks, co) tuples."""
    sub_questions = tuple(
        SubQuestion(
            id=sq_id,
            main_question_number=number,
            max_marks=max_marks,
            subpart_label=sq_id[len(str(number)):],
            co=COTag.parse(co),
        )
        for sq_id, number, max_marks, co in specs
    )
    if choice_groups is None:
        return QuestionPaper(sub_questions)
    return QuestionPaper(sub_questions, choice_groups=choice_groups)


# Common test fixtures
@pytest.fixture
def either_or_paper() -> QuestionPaper:
    """Four single-part main questions: Q1/Q2 and Q3/Q4 are either/or pairs."""
    return make_paper(
        ("1", 1, 10, "CO1"),
        ("2", 2, 10, "CO1"),
        ("3", 3, 10, "CO2"),
        ("4", 4, 10, "CO2"),
    )


@pytest.fixture
def multipart_paper() -> QuestionPaper:
    """Paper with sub-parts, shared COs and one untagged sub-question."""
    return make_paper(
        ("1a", 1, 4, "CO1"),
        ("1b", 1, 6, "CO1"),
        ("2a", 2, 10, "CO1"),
        ("3a", 3, 5, "CO2"),
        ("3b", 3, 5, None),
        ("4a", 4, 10, "CO2"),
    )


@pytest.fixture
def repository_paper_payload() -> list:
    """QuestionPaperRepository payload matching multipart_paper."""
    return [
        {
            "mainQuestionNumber": 1,
            "co": "CO1",
            "bloomsLevel": "Remember",
            "subparts": [
                {"label": "a", "content": "Define a course outcome", "maxMarks": 4},
                {"label": "b", "content": "Explain attainment levels", "maxMarks": "6"},
            ],
        },
        {
            "mainQuestionNumber": 2,
            "co": "CO1",
            "bloomsLevel": "Understand",
            "subparts": [{"label": "a", "content": "Compare two methods", "maxMarks": 10}],
        },
        {
            "mainQuestionNumber": 3,
            "co": "CO2",
            "bloomsLevel": "Apply",
            "subparts": [
                {"label": "a", "content": "Compute a target", "maxMarks": 5},
                {"label": "b", "content": "Sketch a rubric", "maxMarks": 5, "co": ""},
            ],
        },
        {
            "mainQuestionNumber": 4,
            "co": "CO2",
            "bloomsLevel": "Analyze",
            "subparts": [{"label": "a", "content": "Analyse survey data", "maxMarks": 10}],
        },
    ]


@pytest.fixture
def repository_marks_payload() -> list:
    """StudentMarksRepository payload for three students."""
    return [
        {"studentId": "CS001", "marksDetail": {"1a": 4, "1b": 5, "3a": 4, "3b": 3}, "totalObtained": 16},
        {"studentId": "CS002", "marksDetail": {"2a": 7, "4a": "8"}, "totalObtained": 15},
        {"studentId": "CS003", "marksDetail": {"1a": 2, "1b": 1, "4a": 3}, "totalObtained": 6},
    ]


@pytest.fixture
def class_marks() -> tuple:
    """Raw marks for multipart_paper."""
    return (
        StudentRawMarks("CS001", {"1a": 4, "1b": 5, "3a": 4, "3b": 3}),
        StudentRawMarks("CS002", {"2a": 7, "4a": 8}),
        StudentRawMarks("CS003", {"1a": 2, "1b": 1, "4a": 3}),
    )


@pytest.fixture
def paper_factory():
    """Return the make_paper helper for tests that need custom papers."""
    return make_paper
