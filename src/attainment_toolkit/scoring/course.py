"""
Module: scoring.course

Purpose:
    Reduce every CO's final level to one course-wide attainment value:
    the unweighted mean of levels (not of `final` scores, not weighted by
    CO max marks), banded with 2.7/2.0. No COs gives value 0, level 1.

Key Functions:
    - compute_overall_attainment(): OverallCourseAttainment

Used By:
    - controller
"""

from __future__ import annotations

from typing import Mapping

from attainment_toolkit.common.thresholds import ATTAINMENT_THRESHOLDS, score_to_level
from attainment_toolkit.core.models.attainment import (
    AttainmentLevel,
    FinalAttainmentRecord,
    OverallCourseAttainment,
)


def compute_overall_attainment(
    final_records: Mapping[str, FinalAttainmentRecord],
) -> OverallCourseAttainment:
    """
    Compute overall course attainment.

    Example:
        >>> compute_overall_attainment(finals)   # levels 2 and 3
        OverallCourseAttainment(value=2.5, level=<AttainmentLevel.LEVEL_2: 2>)
    """
    if not final_records:
        return OverallCourseAttainment(value=0.0, level=AttainmentLevel.LEVEL_1)

    levels = [int(record.level) for record in final_records.values()]
    value = round(sum(levels) / len(levels), ATTAINMENT_THRESHOLDS.score_precision)
    return OverallCourseAttainment(value=value, level=AttainmentLevel(score_to_level(value)))
