from __future__ import annotations

from typing import Any, List, Mapping

import numpy as np

from ..utils.diagnostics import Level
from ..utils.joints import JointConfiguration
from .base import EvaluationBase, get_param


COLLISION_OBJECT_NAME = "reach_object"


def mesh_resource_uri(package: str, filename_path: str) -> str:
    """`package://<package>/<filename_path>`; a blank package means a plain file path."""
    package = str(package).strip()
    rel = str(filename_path).lstrip("/")
    if not package:
        return str(filename_path)
    return f"package://{package}/{rel}"


def distance_score(dist: float, threshold: float, exponent: float) -> float:
    """
    (dist / threshold) ** exponent, unclamped.

    Penetration (negative distance) with a fractional exponent yields NaN.
    """
    with np.errstate(invalid="ignore"):
        return float(np.power(float(dist) / float(threshold), float(exponent)))


class DistanceScorer(EvaluationBase):
    """
    Scores a configuration by its clearance to a collision mesh attached to the scene.

    Parameters
    ----------
    planning_groups, distance_threshold, collision_mesh_package,
    collision_mesh_filename_path, collision_mesh_frame, touch_links, exponent
    """

    plugin_name = "distance_penalty"

    def __init__(self, diagnostics=None) -> None:
        super().__init__(diagnostics)
        self._dist_threshold = 1.0
        self._exponent = 1.0
        self._mesh_package = ""
        self._mesh_filename_path = ""
        self._mesh_frame = ""
        self._touch_links: List[str] = []
        self._scene = None

    @property
    def distance_threshold(self) -> float:
        return self._dist_threshold

    @property
    def exponent(self) -> float:
        return self._exponent

    @property
    def touch_links(self) -> List[str]:
        return list(self._touch_links)

    def _load_parameters(self, config: Mapping[str, Any]) -> bool:
        try:
            self._dist_threshold = get_param(config, "distance_threshold", float)
            self._mesh_package = get_param(config, "collision_mesh_package", str)
            self._mesh_filename_path = get_param(config, "collision_mesh_filename_path", str)
            self._mesh_frame = get_param(config, "collision_mesh_frame", str)
            self._touch_links = get_param(config, "touch_links", list)
            self._exponent = get_param(config, "exponent", float)
        except (KeyError, TypeError, ValueError) as e:
            self._diag.report(
                Level.ERROR,
                f"{self._label()} is missing one or more configuration parameters ({e})",
            )
            return False

        if not self._dist_threshold > 0.0:
            self._diag.report(Level.ERROR, f"'distance_threshold' must be positive, got {self._dist_threshold}")
            return False

        # A blank entry means "no touch links" rather than a link named "".
        if any(not link.strip() for link in self._touch_links):
            self._touch_links = []
        return True

    def _setup(self) -> bool:
        try:
            scene = self._model.create_planning_scene()
        except RuntimeError as e:
            self._diag.report(Level.ERROR, f"Failed to create planning scene: {e}")
            return False

        if not scene.knows_frame_transform(self._mesh_frame):
            self._diag.report(Level.ERROR, f"Specified collision mesh frame '{self._mesh_frame}' does not exist")
            return False

        resource = mesh_resource_uri(self._mesh_package, self._mesh_filename_path)
        if not scene.add_collision_mesh(COLLISION_OBJECT_NAME, resource, self._mesh_frame):
            self._diag.report(Level.ERROR, f"Failed to add collision mesh '{resource}' to planning scene")
            return False
        scene.allow_collisions(COLLISION_OBJECT_NAME, list(self._touch_links))

        self._scene = scene
        return True

    def _score(self, config: JointConfiguration, group_name: str) -> float:
        dist = self._scene.distance_to_collision(group_name, config.as_array())
        return distance_score(dist, self._dist_threshold, self._exponent)
