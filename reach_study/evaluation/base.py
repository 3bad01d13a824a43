from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..utils.diagnostics import Diagnostics, Level, get_diagnostics
from ..utils.joints import JointConfiguration


@dataclass(frozen=True)
class ResolvedGroup:
    """A planning group resolved against the robot model."""
    name: str
    handle: Any
    joint_names: Tuple[str, ...]


class MissingParameterError(KeyError):
    pass


def get_param(config: Mapping[str, Any], key: str, kind: type) -> Any:
    """Fetch `key` from a plugin parameter mapping and coerce it to `kind`."""
    if key not in config or config[key] is None:
        raise MissingParameterError(key)
    value = config[key]
    if kind is list:
        if isinstance(value, str) or not isinstance(value, Sequence):
            raise TypeError(f"parameter '{key}' must be a list, got {type(value).__name__}")
        return [str(v) for v in value]
    if kind is float:
        if isinstance(value, bool):
            raise TypeError(f"parameter '{key}' must be a number, got bool")
        return float(value)
    return kind(value)


class EvaluationBase(ABC):
    """
    Scores a joint configuration of one planning group.

    Lifecycle: `initialize(...)` once, then any number of `calculate_score(...)`.
    Configuration problems are reported and turned into `False`; after a successful
    initialization the instance is read-only, so `calculate_score` may be called
    from several threads at once.
    """

    #: registry key, set on each concrete class
    plugin_name: str = ""

    def __init__(self, diagnostics: Optional[Diagnostics] = None) -> None:
        self._diag = diagnostics if diagnostics is not None else get_diagnostics(
            f"reach_study.evaluation.{self.plugin_name or type(self).__name__}"
        )
        self._name = ""
        self._model = None
        self._groups: Dict[str, ResolvedGroup] = {}
        self._initialized = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def planning_groups(self) -> List[str]:
        return list(self._groups)

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self, name: str, config: Mapping[str, Any], model) -> bool:
        self._name = str(name)
        self._initialized = False
        try:
            planning_groups = get_param(config, "planning_groups", list)
        except (KeyError, TypeError, ValueError) as e:
            self._diag.report(Level.ERROR, f"{self._label()}: invalid or missing 'planning_groups' parameter ({e})")
            return False

        if not self._load_parameters(config):
            return False

        if model is None:
            self._diag.report(Level.ERROR, f"{self._label()}: failed to initialize robot model pointer")
            return False
        self._model = model

        groups = self._resolve_groups(planning_groups)
        if groups is None:
            return False
        self._groups = groups

        if not self._setup():
            return False

        self._initialized = True
        return True

    def calculate_score(self, pose: Mapping[str, float], group_name: str) -> float:
        if not self._initialized:
            raise RuntimeError(f"{self._label()} has not been initialized")
        config = self._project(pose, self._groups[group_name])
        if config is None:
            return 0.0
        return float(self._score(config, group_name))

    def _label(self) -> str:
        return f"{type(self).__name__} '{self._name}'" if self._name else type(self).__name__

    def _resolve_groups(self, planning_groups: Sequence[str]) -> Optional[Dict[str, ResolvedGroup]]:
        groups: Dict[str, ResolvedGroup] = {}
        for group_name in planning_groups:
            jmg = self._model.get_joint_model_group(group_name)
            if jmg is None:
                self._diag.report(Level.ERROR, f"Failed to get joint model group for '{group_name}'")
                return None
            joint_names = tuple(str(jn) for jn in jmg.active_joint_model_names)
            groups[group_name] = ResolvedGroup(name=group_name, handle=jmg, joint_names=joint_names)
        return groups

    def _project(self, pose: Mapping[str, float], group: ResolvedGroup) -> Optional[JointConfiguration]:
        config = JointConfiguration.from_map(pose, group.joint_names, self._diag)
        if config is None:
            self._diag.report(Level.ERROR, f"{self._label()}.calculate_score: failed to transcribe input pose map")
            return None
        return config

    def _load_parameters(self, config: Mapping[str, Any]) -> bool:
        """Read variant-specific parameters. Default: none."""
        return True

    def _setup(self) -> bool:
        """Variant-specific setup once groups are resolved. Default: nothing."""
        return True

    @abstractmethod
    def _score(self, config: JointConfiguration, group_name: str) -> float:
        ...
