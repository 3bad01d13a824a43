from pathlib import Path

import pytest

from reach_study.evaluation import create_evaluator
from reach_study.utils.config import ConfigError, load_evaluation_config, load_study_parameters

SHIPPED_CONFIG = Path(__file__).resolve().parents[1] / "config" / "reach_study.yaml"


def _write(tmp_path, text):
    path = tmp_path / "study.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_evaluation_config(tmp_path):
    path = _write(
        tmp_path,
        """
ik_solver_config:
  evaluation_plugin:
    name: distance_penalty
    distance_penalty:
      planning_groups: [manipulator]
      distance_threshold: 0.025
      touch_links: [""]
      exponent: 2
""",
    )

    name, params = load_evaluation_config(path)

    assert name == "distance_penalty"
    assert params["planning_groups"] == ["manipulator"]
    assert params["touch_links"] == [""]
    assert params["exponent"] == 2


@pytest.mark.parametrize(
    "text",
    [
        "planning_groups: [a]\n",
        "ik_solver_config:\n  evaluation_plugin:\n    manipulability: {}\n",
        "ik_solver_config:\n  evaluation_plugin: [1, 2]\n",
        "ik_solver_config:\n  evaluation_plugin:\n    name: manipulability\n    manipulability: [1]\n",
        "- just\n- a list\n",
        "key: [unclosed\n",
    ],
)
def test_malformed_evaluation_config(tmp_path, text):
    with pytest.raises(ConfigError):
        load_evaluation_config(_write(tmp_path, text))


def test_missing_config_file(tmp_path):
    with pytest.raises(ConfigError):
        load_evaluation_config(tmp_path / "missing.yaml")


def test_load_study_parameters(tmp_path):
    path = _write(
        tmp_path,
        """
config_name: cell_a
results_directory: /data/reach
planning_groups: [manipulator]
compare_dbs: [cell_b, cell_c]
overwrite: true
optimization:
  max_steps: 25
  radius: 0.3
unknown_key: 1
""",
    )

    params = load_study_parameters(path)

    assert params.config_name == "cell_a"
    assert params.compare_dbs == ["cell_b", "cell_c"]
    assert params.overwrite is True
    assert params.optimization.max_steps == 25
    assert params.optimization.radius == 0.3
    assert params.optimization.step_improvement_threshold == 0.01
    assert params.database_path == Path("/data/reach/cell_a/reach.db.json")
    assert params.database_path_for("cell_b") == Path("/data/reach/cell_b/reach.db.json")


def test_list_parameters_must_be_lists(tmp_path):
    with pytest.raises(ConfigError):
        load_study_parameters(_write(tmp_path, "compare_dbs: cell_b\n"))


def test_shipped_config_initializes_joint_penalty(arm_model, diag):
    name, params = load_evaluation_config(SHIPPED_CONFIG)
    study = load_study_parameters(SHIPPED_CONFIG)

    assert name == "joint_penalty"
    assert study.planning_groups == ["manipulator"]
    assert create_evaluator(name, diag).initialize(name, params, arm_model)
