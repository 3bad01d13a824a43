from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple

import yaml


EVALUATION_PLUGIN_KEYS = ("ik_solver_config", "evaluation_plugin")


class ConfigError(ValueError):
    """Raised when a study / plugin configuration file is missing or malformed."""


@dataclass
class StudyOptimization:
    max_steps: int = 10
    step_improvement_threshold: float = 0.01
    radius: float = 0.2


@dataclass
class StudyParameters:
    """
    Parameters of one reach study.

    Notes
    -----
    - Only `results_directory`, `config_name` and `compare_dbs` are consumed here
      (database location / comparison); the rest is carried for the orchestrator.
    """
    config_name: str = "reach_study"
    results_package: str = ""
    results_directory: str = "results"
    planning_groups: List[str] = field(default_factory=list)
    object_frame: str = ""
    pcd_package: str = ""
    pcd_filename_path: str = ""
    overwrite: bool = False
    visualize_results: bool = False
    get_neighbors: bool = False
    run_initial_study_only: bool = False
    compare_dbs: List[str] = field(default_factory=list)
    optimization: StudyOptimization = field(default_factory=StudyOptimization)

    @property
    def results_dir(self) -> Path:
        return Path(self.results_directory) / self.config_name

    @property
    def database_path(self) -> Path:
        return self.results_dir / "reach.db.json"

    def database_path_for(self, config_name: str) -> Path:
        return Path(self.results_directory) / str(config_name) / "reach.db.json"


def _read_yaml(path: Path) -> Dict[str, Any]:
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config file does not exist: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML '{path}': {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Top level of '{path}' must be a mapping, got {type(data).__name__}")
    return data


def load_evaluation_config(path: Path) -> Tuple[str, Dict[str, Any]]:
    """
    Read the evaluation plugin section of a study config.

    Layout (mirrors the ROS parameter namespace
    `ik_solver_config.evaluation_plugin.<plugin>.<param>`)::

        ik_solver_config:
          evaluation_plugin:
            name: joint_penalty
            joint_penalty:
              planning_groups: [manipulator]

    Returns (plugin_name, params). `params` is empty if the plugin has no section.
    """
    data = _read_yaml(path)
    section: Any = data
    for key in EVALUATION_PLUGIN_KEYS:
        if not isinstance(section, dict) or key not in section:
            raise ConfigError(f"Missing '{'.'.join(EVALUATION_PLUGIN_KEYS)}' section in '{path}'")
        section = section[key]

    if not isinstance(section, dict):
        raise ConfigError(f"'{'.'.join(EVALUATION_PLUGIN_KEYS)}' must be a mapping in '{path}'")

    name = str(section.get("name", "")).strip()
    if not name:
        raise ConfigError(f"Evaluation plugin 'name' is not set in '{path}'")

    params = section.get(name) or {}
    if not isinstance(params, dict):
        raise ConfigError(f"Parameters of evaluation plugin '{name}' must be a mapping")
    return name, dict(params)


def load_study_parameters(path: Path) -> StudyParameters:
    """Read the top-level study parameters of a study config (unknown keys are ignored)."""
    data = _read_yaml(path)
    opt = data.get("optimization") or {}
    if not isinstance(opt, Mapping):
        raise ConfigError("'optimization' must be a mapping")

    known = {f for f in StudyParameters.__dataclass_fields__ if f != "optimization"}
    kwargs = {k: v for k, v in data.items() if k in known}
    for list_key in ("planning_groups", "compare_dbs"):
        if list_key in kwargs:
            value = kwargs[list_key] or []
            if isinstance(value, str) or not isinstance(value, list):
                raise ConfigError(f"'{list_key}' must be a list of strings")
            kwargs[list_key] = [str(v) for v in value]

    opt_known = set(StudyOptimization.__dataclass_fields__)
    optimization = StudyOptimization(**{k: v for k, v in opt.items() if k in opt_known})
    return StudyParameters(optimization=optimization, **kwargs)
