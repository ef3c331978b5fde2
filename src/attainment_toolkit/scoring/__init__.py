"""
Scoring Package

Pure calculations over a question paper and raw marks:

    totals          -> choice-aware student totals
    co_attainment   -> Method 1 / Method 2 direct attainment per CO
    indirect        -> direct + indirect merge per CO
    course          -> overall course attainment

None of these hold state or perform I/O; identical inputs always give
identical outputs.
"""

from .config import AttainmentConfig
from .totals import (
    compute_group_scores,
    select_best_total,
    compute_student_result,
    compute_student_total,
    compute_student_totals,
)
from .co_attainment import compute_co_attainment, compute_co_scores
from .indirect import merge_indirect_attainment, weighted_final
from .course import compute_overall_attainment

__all__ = [
    "AttainmentConfig",
    "compute_group_scores",
    "select_best_total",
    "compute_student_result",
    "compute_student_total",
    "compute_student_totals",
    "compute_co_attainment",
    "compute_co_scores",
    "merge_indirect_attainment",
    "weighted_final",
    "compute_overall_attainment",
]
