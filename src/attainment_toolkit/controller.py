"""
Module: controller

Purpose:
    Orchestrate a complete attainment run.
    Validate → Totals → CO attainment → Indirect merge → Overall

Key Functions:
    - build_attainment_report(): Main entry point

Key Classes:
    - AttainmentReport: Complete, immutable result of one run

Dependencies:
    - core.models
    - scoring

Used By:
    - attainment_toolkit.cli
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from attainment_toolkit.common.thresholds import ATTAINMENT_THRESHOLDS
from attainment_toolkit.core.models import (
    COAttainmentRecord,
    FinalAttainmentRecord,
    OverallCourseAttainment,
    QuestionPaper,
    StudentTotal,
    UNMAPPED,
)
from attainment_toolkit.core.schemas.validator import validate_paper, validate_student_marks
from attainment_toolkit.scoring import (
    AttainmentConfig,
    compute_co_attainment,
    compute_overall_attainment,
    compute_student_totals,
    merge_indirect_attainment,
)
from attainment_toolkit.scoring.totals import RawMarksLike, as_raw_marks

logger = logging.getLogger(__name__)


# Column headings of the per-CO report table
REPORT_COLUMNS: Tuple[str, ...] = (
    "CO",
    "Max Marks",
    "Target Marks",
    "Avg Marks",
    "Students ≥ Target",
    "Method 1 %",
    "Method 1 Level",
    "Method 2 %",
    "Method 2 Level",
    "Indirect",
    "Final",
    "Level",
)


@dataclass(frozen=True)
class AttainmentReport:
    """
    Complete attainment result (immutable).

    Attributes:
        threshold_percent: Target threshold used for Method 2
        student_totals: Choice-aware totals, in input order
        co_records: Direct attainment per CO
        final_records: Direct + indirect attainment per CO
        overall: Course-wide attainment
        warnings: Data-quality notes gathered during the run

    Example:
        >>> report = build_attainment_report(paper, students, AttainmentConfig())
        >>> print(report.overall)
        2.50 (Level 2)
    """
    threshold_percent: float
    student_totals: Tuple[StudentTotal, ...]
    co_records: Dict[str, COAttainmentRecord]
    final_records: Dict[str, FinalAttainmentRecord]
    overall: OverallCourseAttainment
    warnings: Tuple[str, ...] = ()

    def rows(self) -> List[Dict[str, object]]:
        """Per-CO table rows keyed by REPORT_COLUMNS."""
        precision = ATTAINMENT_THRESHOLDS.report_precision
        rows = []
        for co, record in self.co_records.items():
            final = self.final_records[co]
            values = (
                co,
                record.max_marks,
                round(record.target_marks, precision),
                round(record.avg_marks, precision),
                record.students_above_target,
                round(record.percentage, precision),
                int(record.attainment_level),
                round(record.method2_percentage, precision),
                int(record.method2_level),
                final.indirect,
                round(final.final, precision),
                int(final.level),
            )
            rows.append(dict(zip(REPORT_COLUMNS, values)))
        return rows

    def to_dict(self) -> dict:
        return {
            "threshold_percent": self.threshold_percent,
            "student_totals": [t.to_dict() for t in self.student_totals],
            "co_attainment": [r.to_dict() for r in self.co_records.values()],
            "final_attainment": [r.to_dict() for r in self.final_records.values()],
            "overall": self.overall.to_dict(),
            "warnings": list(self.warnings),
        }


def _collect_warnings(paper: QuestionPaper, indirect_cos: Iterable[str]) -> List[str]:
    warnings: List[str] = []
    unmapped = [sq.id for sq in paper.group_by_co().get(UNMAPPED, [])]
    if unmapped:
        warnings.append(f"Sub-questions without a CO excluded from attainment: {', '.join(unmapped)}")
    unknown = sorted(set(indirect_cos) - set(paper.co_tags))
    if unknown:
        warnings.append(f"Indirect attainment given for unknown COs: {', '.join(unknown)}")
    return warnings


def build_attainment_report(
    paper: QuestionPaper,
    all_raw: Iterable[RawMarksLike],
    config: Optional[AttainmentConfig] = None,
) -> AttainmentReport:
    """
    Run every calculation for one paper and class.

    Pipeline:
    1. Validate paper and every student's marks
    2. Choice-aware totals per student
    3. Direct CO attainment (Methods 1 and 2)
    4. Merge indirect attainment
    5. Overall course attainment

    Args:
        paper: Validated question paper
        all_raw: Marks for every student
        config: Threshold and indirect inputs (defaults: 60%, no indirect)

    Returns:
        AttainmentReport

    Raises:
        ValidationError: If any input is invalid; nothing is computed
    """
    config = config or AttainmentConfig()
    students = tuple(as_raw_marks(raw, student_id=f"student-{i + 1}") for i, raw in enumerate(all_raw))

    validate_paper(paper)
    for raw in students:
        validate_student_marks(paper, raw)

    logger.info(
        f"Computing attainment for {len(students)} students, "
        f"{len(paper.co_tags)} COs, threshold {config.threshold_percent:g}%"
    )

    # Marks were validated above; the calculators skip their own checks
    totals = compute_student_totals(paper, students, validate=False)
    co_records = compute_co_attainment(paper, students, config.threshold_percent, validate=False)
    final_records = merge_indirect_attainment(co_records, config.indirect)
    overall = compute_overall_attainment(final_records)

    warnings = _collect_warnings(paper, config.indirect)
    for warning in warnings:
        logger.info(warning)
    logger.info(f"Overall attainment: {overall}")

    return AttainmentReport(
        threshold_percent=config.threshold_percent,
        student_totals=totals,
        co_records=co_records,
        final_records=final_records,
        overall=overall,
        warnings=tuple(warnings),
    )
