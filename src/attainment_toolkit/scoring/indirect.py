"""
Module: scoring.indirect

Purpose:
    Merge direct (exam) attainment with indirect (survey) attainment:

        final = 0.8 × direct + 0.2 × indirect

    `final` is banded with 2.7/2.0 at full precision; reports show 2 dp.
    Indirect values outside [0, 3] are rejected, never clamped.

Key Functions:
    - merge_indirect_attainment(): FinalAttainmentRecord per CO
    - weighted_final(): The weighted formula on its own

Dependencies:
    - core.models.attainment
    - core.schemas.validator
    - common.thresholds

Used By:
    - controller
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from attainment_toolkit.common.thresholds import ATTAINMENT_THRESHOLDS, score_to_level
from attainment_toolkit.core.models.attainment import (
    AttainmentLevel,
    COAttainmentRecord,
    FinalAttainmentRecord,
)
from attainment_toolkit.core.schemas.validator import validate_indirect_input

logger = logging.getLogger(__name__)


def weighted_final(direct: float, indirect: float) -> float:
    """Weighted direct/indirect score, free of float noise but not rounded for display."""
    value = (
        ATTAINMENT_THRESHOLDS.direct_weight * direct
        + ATTAINMENT_THRESHOLDS.indirect_weight * indirect
    )
    return round(value, ATTAINMENT_THRESHOLDS.score_precision)


def merge_indirect_attainment(
    direct_records: Mapping[str, COAttainmentRecord],
    indirect_input: Optional[Mapping[str, Any]] = None,
) -> Dict[str, FinalAttainmentRecord]:
    """
    Combine each CO's Method 1 level with its indirect attainment.

    Args:
        direct_records: Output of compute_co_attainment
        indirect_input: Indirect value per CO in [0, 3]; missing COs use 0

    Returns:
        Mapping of CO name to FinalAttainmentRecord, in direct_records order

    Raises:
        ValidationError: If any indirect value is non-numeric or outside [0, 3]

    Example:
        >>> finals = merge_indirect_attainment(records, {"CO1": 3})
        >>> finals["CO1"].final   # direct level 2
        2.2
    """
    indirect = validate_indirect_input(indirect_input)
    for co in indirect:
        if co not in direct_records:
            logger.warning(f"Ignoring indirect attainment for {co}: no direct attainment recorded")

    finals: Dict[str, FinalAttainmentRecord] = {}
    for co, record in direct_records.items():
        indirect_value = indirect.get(co, 0.0)
        final = weighted_final(int(record.attainment_level), indirect_value)
        finals[co] = FinalAttainmentRecord(
            co=co,
            direct=record.attainment_level,
            indirect=indirect_value,
            final=final,
            level=AttainmentLevel(score_to_level(final)),
        )
    return finals
