"""
Unit Tests for CO Attainment (Methods 1 and 2)
"""

import pytest

from attainment_toolkit.core.models.attainment import AttainmentLevel
from attainment_toolkit.core.models.marks import StudentRawMarks
from attainment_toolkit.core.schemas.validator import ValidationError
from attainment_toolkit.scoring.co_attainment import compute_co_attainment, compute_co_scores


@pytest.fixture
def co1_paper(paper_factory):
    """CO1 spans 1a + 1b (max 10); CO2 is question 2 (max 5)."""
    return paper_factory(
        ("1a", 1, 4, "CO1"),
        ("1b", 1, 6, "CO1"),
        ("2", 2, 5, "CO2"),
    )


@pytest.fixture
def co1_students():
    """Three students scoring 8, 4 and 7 on CO1."""
    return [
        StudentRawMarks("S1", {"1a": 4, "1b": 4, "2": 5}),
        StudentRawMarks("S2", {"1a": 1, "1b": 3, "2": 1}),
        StudentRawMarks("S3", {"1a": 3, "1b": 4, "2": 4}),
    ]


class TestComputeCOAttainment:
    """Tests for compute_co_attainment."""

    def test_compute_when_worked_example_then_matches_both_methods(self, co1_paper, co1_students):
        """CO1: max 10, threshold 60, scores 8/4/7."""
        record = compute_co_attainment(co1_paper, co1_students, threshold_percent=60)["CO1"]
        assert record.max_marks == 10
        assert record.target_marks == pytest.approx(6.0)
        assert record.avg_marks == pytest.approx(19 / 3)
        assert record.percentage == pytest.approx(63.333, abs=1e-3)
        assert record.attainment_level == AttainmentLevel.LEVEL_2
        assert record.students_above_target == 2
        assert record.total_students == 3
        assert record.method2_percentage == pytest.approx(66.667, abs=1e-3)
        assert record.method2_level == 2

    def test_compute_when_second_co_then_computed_independently(self, co1_paper, co1_students):
        """CO2 scores 5/1/4 of 5: average 66.7% (level 2); S1 and S3 reach the target of 3."""
        record = compute_co_attainment(co1_paper, co1_students, threshold_percent=60)["CO2"]
        assert record.percentage == pytest.approx(66.667, abs=1e-3)
        assert record.attainment_level == 2
        assert record.students_above_target == 2

    def test_compute_when_all_full_marks_then_level_three(self, co1_paper):
        """Full marks everywhere give 100% and level 3 for both methods."""
        students = [StudentRawMarks(f"S{i}", {"1a": 4, "1b": 6, "2": 5}) for i in range(3)]
        for record in compute_co_attainment(co1_paper, students).values():
            assert record.percentage == 100
            assert record.attainment_level == 3
            assert record.method2_percentage == 100
            assert record.method2_level == 3

    @pytest.mark.parametrize(
        "score, level",
        [(7, 3), (6.9, 2), (5.5, 2), (5.4, 1)],
    )
    def test_compute_when_on_band_edges_then_levels_follow_bands(self, paper_factory, score, level):
        """70% and 55% are inclusive lower bounds."""
        paper = paper_factory(("1", 1, 10, "CO1"))
        record = compute_co_attainment(paper, [StudentRawMarks("S1", {"1": score})])["CO1"]
        assert record.attainment_level == level

    def test_compute_when_score_equals_target_then_counts_as_above(self, paper_factory):
        """Reaching the target exactly counts for Method 2."""
        paper = paper_factory(("1", 1, 10, "CO1"))
        record = compute_co_attainment(paper, [StudentRawMarks("S1", {"1": 6})], 60)["CO1"]
        assert record.students_above_target == 1

    def test_compute_when_no_students_then_zeros(self, co1_paper):
        """Zero students give 0 averages and level 1, not an error."""
        record = compute_co_attainment(co1_paper, [], 60)["CO1"]
        assert record.avg_marks == 0
        assert record.percentage == 0
        assert record.method2_percentage == 0
        assert record.total_students == 0
        assert record.attainment_level == 1
        assert record.method2_level == 1

    def test_compute_when_threshold_zero_then_everyone_above(self, co1_paper, co1_students):
        """A 0% threshold puts every student above target."""
        record = compute_co_attainment(co1_paper, co1_students, 0)["CO1"]
        assert record.students_above_target == 3
        assert record.method2_level == 3

    def test_compute_when_unmapped_questions_then_excluded(self, multipart_paper, class_marks):
        """Untagged sub-questions never appear in the output."""
        records = compute_co_attainment(multipart_paper, class_marks, 60)
        assert list(records) == ["CO1", "CO2"]
        assert records["CO2"].max_marks == 15  # 3a + 4a; 3b is untagged

    def test_compute_when_choice_pair_then_raw_sums_used(self, either_or_paper):
        """CO scores ignore the either/or selection and sum raw marks."""
        students = [StudentRawMarks("S1", {"1": 5, "2": 7})]
        record = compute_co_attainment(either_or_paper, students, 60)["CO1"]
        assert record.avg_marks == 12
        assert record.max_marks == 20

    @pytest.mark.parametrize("threshold", [-1, 100.1, float("nan")])
    def test_compute_when_threshold_invalid_then_raises_error(self, co1_paper, co1_students, threshold):
        """Thresholds outside [0, 100] are rejected."""
        with pytest.raises(ValidationError):
            compute_co_attainment(co1_paper, co1_students, threshold)

    def test_compute_when_mark_above_max_then_raises_error(self, co1_paper):
        """Out-of-range marks are rejected before any record is built."""
        with pytest.raises(ValidationError, match="outside"):
            compute_co_attainment(co1_paper, [StudentRawMarks("S1", {"2": 6})])

    def test_compute_when_mappings_given_then_accepted(self, co1_paper):
        """Plain mappings work as student marks."""
        records = compute_co_attainment(co1_paper, [{"1a": "4", "1b": 6}])
        assert records["CO1"].avg_marks == 10

    def test_compute_when_called_twice_then_identical(self, co1_paper, co1_students):
        """Pure function: identical inputs give identical records."""
        first = compute_co_attainment(co1_paper, co1_students, 55)
        second = compute_co_attainment(co1_paper, co1_students, 55)
        assert first == second

    def test_to_dict_when_called_then_rounds_to_two_places(self, co1_paper, co1_students):
        """Report dicts round floats to 2 dp."""
        d = compute_co_attainment(co1_paper, co1_students, 60)["CO1"].to_dict()
        assert d["avg_marks"] == 6.33
        assert d["percentage"] == 63.33
        assert d["method2_percentage"] == 66.67
        assert d["attainment_level"] == 2


class TestComputeCOScores:
    """Tests for compute_co_scores."""

    def test_scores_when_student_then_per_co_sums(self, multipart_paper):
        """Scores sum each CO's sub-questions and skip untagged ones."""
        raw = StudentRawMarks("S1", {"1a": 4, "2a": 3, "3a": 2, "3b": 5})
        assert compute_co_scores(multipart_paper, raw) == {"CO1": 7.0, "CO2": 2.0}
