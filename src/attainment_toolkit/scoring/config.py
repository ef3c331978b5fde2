"""
Module: scoring.config

Purpose:
    Configuration dataclass for an attainment run.
    Immutable configuration with validation on construction.

Key Classes:
    - AttainmentConfig: Threshold and indirect inputs for one calculation

Dependencies:
    - dataclasses (std)

Used By:
    - controller: Report orchestration
    - cli: Command-line entry point
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping

from attainment_toolkit.common.thresholds import ATTAINMENT_THRESHOLDS
from attainment_toolkit.core.schemas.validator import validate_indirect_input, validate_threshold


@dataclass(frozen=True)
class AttainmentConfig:
    """
    Configuration for an attainment calculation (immutable).

    Attributes:
        threshold_percent: Percentage of a CO's max marks a student must
            reach to count as above target (Method 2)
        indirect: Indirect (survey) attainment per CO, each in [0, 3].
            COs not listed default to 0.

    Invariants:
        - 0 <= threshold_percent <= 100
        - every indirect value in [0, 3]

    Example:
        >>> config = AttainmentConfig(threshold_percent=50, indirect={"CO1": 2.5})
        >>> config.indirect_for("CO2")
        0.0
    """

    threshold_percent: float = ATTAINMENT_THRESHOLDS.default_target_percent
    indirect: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        object.__setattr__(self, "threshold_percent", validate_threshold(self.threshold_percent))
        object.__setattr__(self, "indirect", validate_indirect_input(self.indirect))

    def indirect_for(self, co: str) -> float:
        return self.indirect.get(co, 0.0)

    def to_dict(self) -> Dict[str, object]:
        return {"threshold_percent": self.threshold_percent, "indirect": dict(self.indirect)}
