"""Shared constants for scoring and attainment."""

from .thresholds import (
    ATTAINMENT_THRESHOLDS,
    AttainmentThresholds,
    percent_to_level,
    score_to_level,
)

__all__ = [
    "ATTAINMENT_THRESHOLDS",
    "AttainmentThresholds",
    "percent_to_level",
    "score_to_level",
]
