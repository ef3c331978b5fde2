"""
Tests for the attainment report pipeline.
"""

import logging

import pytest

from attainment_toolkit.controller import REPORT_COLUMNS, build_attainment_report
from attainment_toolkit.core.models import StudentRawMarks
from attainment_toolkit.core.schemas.validator import ValidationError
from attainment_toolkit.scoring import AttainmentConfig


class TestBuildAttainmentReport:
    """Tests for build_attainment_report()."""

    def test_build_when_class_given_then_totals_in_input_order(self, multipart_paper, class_marks):
        report = build_attainment_report(multipart_paper, class_marks)
        assert [t.student_id for t in report.student_totals] == ["CS001", "CS002", "CS003"]
        assert [t.total for t in report.student_totals] == [16, 15, 6]

    def test_build_when_class_given_then_direct_records_per_co(self, multipart_paper, class_marks):
        """CO1 scores 9/7/3 of 20; CO2 scores 4/8/3 of 15."""
        report = build_attainment_report(multipart_paper, class_marks)
        assert list(report.co_records) == ["CO1", "CO2"]
        co1, co2 = report.co_records["CO1"], report.co_records["CO2"]
        assert co1.max_marks == 20
        assert co1.target_marks == pytest.approx(12.0)
        assert co1.avg_marks == pytest.approx(19 / 3)
        assert co1.students_above_target == 0
        assert co2.max_marks == 15
        assert co2.avg_marks == pytest.approx(5.0)
        assert co2.attainment_level == 1

    def test_build_when_no_indirect_then_final_is_weighted_direct(self, multipart_paper, class_marks):
        """Level 1 direct with indirect 0 gives 0.8 and overall 1.0."""
        report = build_attainment_report(multipart_paper, class_marks)
        assert report.final_records["CO1"].final == 0.8
        assert report.overall.value == 1.0
        assert report.overall.level == 1

    def test_build_when_indirect_given_then_merged(self, multipart_paper, class_marks):
        """Indirect 3 lifts CO1 to 1.4, still level 1."""
        config = AttainmentConfig(indirect={"CO1": 3})
        report = build_attainment_report(multipart_paper, class_marks, config)
        assert report.final_records["CO1"].final == 1.4
        assert report.final_records["CO2"].indirect == 0.0

    def test_build_when_high_scores_then_level_three_overall(self, either_or_paper):
        """Full marks everywhere with indirect 3 give overall level 3."""
        students = [StudentRawMarks(f"S{i}", {"1": 10, "2": 10, "3": 10, "4": 10}) for i in range(4)]
        config = AttainmentConfig(threshold_percent=60, indirect={"CO1": 3, "CO2": 3})
        report = build_attainment_report(either_or_paper, students, config)
        assert all(t.total == 20 for t in report.student_totals)
        assert report.overall.value == 3.0
        assert report.overall.level == 3

    def test_build_when_unmapped_and_unknown_then_warnings(self, multipart_paper, class_marks, caplog):
        """Untagged sub-questions and unknown indirect COs are reported."""
        config = AttainmentConfig(indirect={"CO9": 2})
        with caplog.at_level(logging.WARNING):
            report = build_attainment_report(multipart_paper, class_marks, config)
        assert report.warnings == (
            "Sub-questions without a CO excluded from attainment: 3b",
            "Indirect attainment given for unknown COs: CO9",
        )
        assert "CO9" not in report.final_records
        assert "CO9" in caplog.text

    def test_build_when_mark_out_of_range_then_raises_error(self, multipart_paper):
        """One invalid student stops the whole run."""
        students = [
            StudentRawMarks("S1", {"1a": 4}),
            StudentRawMarks("S2", {"1a": 5}),
        ]
        with pytest.raises(ValidationError) as exc_info:
            build_attainment_report(multipart_paper, students)
        assert exc_info.value.path == "S2.1a"

    def test_build_when_unknown_sub_question_then_warned_once(self, either_or_paper, caplog):
        """Marks are validated once per run, so each unknown id is reported once."""
        students = [StudentRawMarks("S1", {"1": 5, "9z": 2})]
        with caplog.at_level(logging.WARNING):
            report = build_attainment_report(either_or_paper, students)
        unknown = [r for r in caplog.records if "unknown sub-question '9z'" in r.getMessage()]
        assert len(unknown) == 1
        assert report.student_totals[0].total == 5

    def test_build_when_mappings_given_then_default_ids(self, either_or_paper):
        """Plain mappings are numbered student-1, student-2, ..."""
        report = build_attainment_report(either_or_paper, [{"1": 5}, {"3": 4}])
        assert [t.student_id for t in report.student_totals] == ["student-1", "student-2"]

    def test_build_when_called_twice_then_identical(self, multipart_paper, class_marks):
        """Repeated runs give equal reports."""
        config = AttainmentConfig(threshold_percent=50, indirect={"CO2": 2.5})
        first = build_attainment_report(multipart_paper, class_marks, config)
        second = build_attainment_report(multipart_paper, class_marks, config)
        assert first.to_dict() == second.to_dict()


class TestAttainmentReport:
    """Tests for AttainmentReport output helpers."""

    def test_rows_when_built_then_keyed_by_report_columns(self, multipart_paper, class_marks):
        rows = build_attainment_report(multipart_paper, class_marks).rows()
        assert len(rows) == 2
        assert tuple(rows[0]) == REPORT_COLUMNS
        assert rows[0]["CO"] == "CO1"
        assert rows[0]["Max Marks"] == 20
        assert rows[0]["Target Marks"] == 12.0
        assert rows[0]["Avg Marks"] == 6.33
        assert rows[0]["Method 1 Level"] == 1
        assert rows[0]["Final"] == 0.8

    def test_to_dict_when_built_then_has_all_sections(self, multipart_paper, class_marks):
        data = build_attainment_report(multipart_paper, class_marks).to_dict()
        assert set(data) == {
            "threshold_percent",
            "student_totals",
            "co_attainment",
            "final_attainment",
            "overall",
            "warnings",
        }
        assert data["threshold_percent"] == 60
        assert data["overall"] == {"value": 1.0, "level": 1}
        assert data["student_totals"][0]["selected_questions"] == [1, 3]
        assert [r["co"] for r in data["final_attainment"]] == ["CO1", "CO2"]
