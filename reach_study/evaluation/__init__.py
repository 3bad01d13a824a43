from __future__ import annotations

from typing import Dict, List, Optional, Type

from ..utils.diagnostics import Diagnostics
from .base import EvaluationBase
from .distance_penalty import DistanceScorer
from .joint_penalty import JointLimitScorer
from .manipulability import ManipulabilityScorer


EVALUATION_PLUGINS: Dict[str, Type[EvaluationBase]] = {
    DistanceScorer.plugin_name: DistanceScorer,
    JointLimitScorer.plugin_name: JointLimitScorer,
    ManipulabilityScorer.plugin_name: ManipulabilityScorer,
}


def available_evaluators() -> List[str]:
    return sorted(EVALUATION_PLUGINS)


def create_evaluator(name: str, diagnostics: Optional[Diagnostics] = None) -> EvaluationBase:
    try:
        cls = EVALUATION_PLUGINS[str(name)]
    except KeyError:
        raise KeyError(f"Unknown evaluation plugin '{name}'. Available: {available_evaluators()}") from None
    return cls(diagnostics)


__all__ = [
    "DistanceScorer",
    "EvaluationBase",
    "JointLimitScorer",
    "ManipulabilityScorer",
    "available_evaluators",
    "create_evaluator",
]
