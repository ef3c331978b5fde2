"""Centralized attainment threshold and weighting configuration.

This module contains the level bands, weights and limits used throughout
scoring and attainment calculation. Having these in one place keeps the
calculators free of magic numbers.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class AttainmentThresholds:
    """Bands and weights for CO attainment."""

    # Direct attainment bands (Method 1 and Method 2 percentages)
    level3_percent: float = 70.0  # Percentage at or above this is level 3
    level2_percent: float = 55.0  # Percentage at or above this is level 2

    # Final/overall bands (0-3 scale)
    final_level3: float = 2.7
    final_level2: float = 2.0

    # Direct + indirect weighting
    direct_weight: float = 0.8
    indirect_weight: float = 0.2

    # Indirect (survey) input range
    indirect_min: float = 0.0
    indirect_max: float = 3.0

    # Student must reach this percentage of a CO's max marks to be above target
    default_target_percent: float = 60.0

    # Sub-question mark limits
    min_sub_question_marks: int = 1
    max_sub_question_marks: int = 10

    # Decimal places in report output (to_dict, rows)
    report_precision: int = 2

    # Decimal places kept in calculated scores; drops float noise such as
    # 2.4000000000000004 without moving values near a band edge
    score_precision: int = 9


@dataclass
class LevelBands:
    """Resolved bands for mapping a value onto levels 1-3."""

    level3: float
    level2: float

    def level_for(self, value: float) -> int:
        if value >= self.level3:
            return 3
        if value >= self.level2:
            return 2
        return 1


# Global instances for easy import
ATTAINMENT_THRESHOLDS = AttainmentThresholds()
PERCENT_BANDS = LevelBands(
    level3=ATTAINMENT_THRESHOLDS.level3_percent,
    level2=ATTAINMENT_THRESHOLDS.level2_percent,
)
SCORE_BANDS = LevelBands(
    level3=ATTAINMENT_THRESHOLDS.final_level3,
    level2=ATTAINMENT_THRESHOLDS.final_level2,
)


def percent_to_level(pct: float) -> int:
    """Map a 0-100 percentage onto an attainment level (70/55 bands)."""
    return PERCENT_BANDS.level_for(pct)


def score_to_level(score: float) -> int:
    """Map a 0-3 attainment score onto a level (2.7/2.0 bands)."""
    return SCORE_BANDS.level_for(score)
