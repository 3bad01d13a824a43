from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from .diagnostics import Diagnostics, Level


def _check_unique(joint_names: Sequence[str]) -> None:
    seen = set()
    for jn in joint_names:
        if jn in seen:
            raise ValueError(f"Joint '{jn}' appears more than once in the requested joint order")
        seen.add(jn)


def transcribe_input_map(
    input_map: Mapping[str, float],
    joint_names: Sequence[str],
    diagnostics: Optional[Diagnostics] = None,
) -> Optional[np.ndarray]:
    """
    Pull the positions of `joint_names` out of `input_map`, in that order.

    Returns None (and reports an error if a sink is given) when the map is smaller
    than the requested joint set or a joint is missing.
    """
    joint_names = list(joint_names)
    _check_unique(joint_names)

    if len(joint_names) > len(input_map):
        if diagnostics is not None:
            diagnostics.report(
                Level.ERROR,
                f"Input pose map has {len(input_map)} joints; the planning group needs at least {len(joint_names)}",
            )
        return None

    out = np.empty(len(joint_names), dtype=float)
    for i, jn in enumerate(joint_names):
        if jn not in input_map:
            if diagnostics is not None:
                diagnostics.report(Level.ERROR, f"Joint '{jn}' in the planning group was not in the input map")
            return None
        out[i] = float(input_map[jn])
    return out


@dataclass(frozen=True)
class JointConfiguration:
    """Joint positions of one planning group, in the group's canonical joint order."""
    joint_names: Tuple[str, ...]
    positions: Tuple[float, ...]

    @classmethod
    def from_map(
        cls,
        input_map: Mapping[str, float],
        joint_names: Sequence[str],
        diagnostics: Optional[Diagnostics] = None,
    ) -> Optional["JointConfiguration"]:
        """Project a full pose map onto `joint_names`; None (reported) if the map does not cover them."""
        q = transcribe_input_map(input_map, joint_names, diagnostics)
        if q is None:
            return None
        return cls(joint_names=tuple(joint_names), positions=tuple(float(v) for v in q))

    @property
    def dof(self) -> int:
        return int(len(self.joint_names))

    def as_array(self) -> np.ndarray:
        return np.array(self.positions, dtype=float)

    def as_dict(self) -> Dict[str, float]:
        return dict(zip(self.joint_names, self.positions))

    def as_list(self) -> List[float]:
        return list(self.positions)
