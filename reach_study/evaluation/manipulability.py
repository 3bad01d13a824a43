from __future__ import annotations

import numpy as np

from ..utils.diagnostics import Level
from ..utils.joints import JointConfiguration
from .base import EvaluationBase


def manipulability(jacobian: np.ndarray) -> float:
    """Product of the singular values of the Jacobian (Yoshikawa measure)."""
    J = np.asarray(jacobian, dtype=float)
    if J.size == 0:
        return 0.0
    sv = np.linalg.svd(J, compute_uv=False)
    return float(np.prod(sv))


class ManipulabilityScorer(EvaluationBase):
    """Scores a configuration by the manipulability of the group's geometric Jacobian."""

    plugin_name = "manipulability"

    def _setup(self) -> bool:
        self._diag.report(Level.INFO, f"{self._label()} initialized successfully.")
        return True

    def _score(self, config: JointConfiguration, group_name: str) -> float:
        J = self._model.get_jacobian(group_name, config.as_array())
        return manipulability(J)
