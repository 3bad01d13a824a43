from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence

import numpy as np

from ..utils.diagnostics import Level
from ..utils.joints import JointConfiguration
from .base import EvaluationBase


@dataclass(frozen=True)
class GroupLimits:
    min_position: np.ndarray
    max_position: np.ndarray


def _variable_bounds(joint_bounds) -> List:
    """Active-joint bounds come either as one variable bound or as a per-variable sequence."""
    if hasattr(joint_bounds, "min_position") and hasattr(joint_bounds, "max_position"):
        return [joint_bounds]
    return list(joint_bounds)


def joint_penalty(q: Sequence[float], lo: Sequence[float], hi: Sequence[float]) -> float:
    """
    Product over joints of (q - lo)(hi - q) / (hi - lo)^2.

    Peaks at 0.25 per joint at the middle of the range and goes to zero at either
    bound; a joint outside its range contributes a negative factor.
    """
    q = np.asarray(q, dtype=float)
    lo = np.asarray(lo, dtype=float)
    hi = np.asarray(hi, dtype=float)
    rng = hi - lo
    return float(np.prod(((q - lo) * (hi - q)) / (rng * rng)))


def joint_penalty_score(penalty: float) -> float:
    return float(max(0.0, 1.0 - np.exp(-1.0 * penalty)))


class JointLimitScorer(EvaluationBase):
    """Rewards configurations that keep every joint away from its position limits."""

    plugin_name = "joint_penalty"

    def __init__(self, diagnostics=None) -> None:
        super().__init__(diagnostics)
        self._limits: Dict[str, GroupLimits] = {}

    def joint_limits(self, group_name: str) -> GroupLimits:
        return self._limits[group_name]

    def _setup(self) -> bool:
        self._limits = {name: self._extract_limits(group.handle) for name, group in self._groups.items()}
        return True

    def _extract_limits(self, jmg) -> GroupLimits:
        lo: List[float] = []
        hi: List[float] = []
        for joint_bounds in jmg.active_joint_model_bounds:
            bounds = _variable_bounds(joint_bounds)
            if len(bounds) > 1:
                # Known limitation: only the first variable of a multi-DOF joint is used.
                self._diag.report(Level.FATAL, "Joint has more than one DOF; can't pull joint limits correctly")
            lo.append(float(bounds[0].min_position))
            hi.append(float(bounds[0].max_position))
        return GroupLimits(min_position=np.array(lo, dtype=float), max_position=np.array(hi, dtype=float))

    def _score(self, config: JointConfiguration, group_name: str) -> float:
        limits = self._limits[group_name]
        penalty = joint_penalty(config.as_array(), limits.min_position, limits.max_position)
        return joint_penalty_score(penalty)
