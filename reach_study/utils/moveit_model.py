from __future__ import annotations

import os
from typing import Optional, Sequence

import numpy as np
import trimesh

from ament_index_python.packages import PackageNotFoundError, get_package_share_directory
from geometry_msgs.msg import Point
from geometry_msgs.msg import Pose as PoseMsg
from moveit.core.planning_scene import PlanningScene
from moveit.core.robot_state import RobotState
from moveit_msgs.msg import CollisionObject
from shape_msgs.msg import Mesh, MeshTriangle


def resolve_package_uri(uri: str) -> str:
    """Resolve `package://<pkg>/<relpath>` to an absolute file path (other strings pass through)."""
    if not uri.startswith("package://"):
        return uri
    rest = uri[len("package://") :]
    parts = rest.split("/", 1)
    pkg = parts[0]
    rel = parts[1] if len(parts) == 2 else ""
    try:
        share = get_package_share_directory(pkg)
    except PackageNotFoundError as e:
        raise FileNotFoundError(f"Package '{pkg}' not found while resolving '{uri}'") from e
    return os.path.join(share, rel)


def load_mesh_msg(path: str) -> Mesh:
    """Load a mesh file (STL/OBJ/DAE/...) into a `shape_msgs/Mesh`."""
    tm = trimesh.load(path, force="mesh")
    msg = Mesh()
    for v in np.asarray(tm.vertices, dtype=float):
        msg.vertices.append(Point(x=float(v[0]), y=float(v[1]), z=float(v[2])))
    for f in np.asarray(tm.faces, dtype=np.int64):
        tri = MeshTriangle()
        tri.vertex_indices = [int(f[0]), int(f[1]), int(f[2])]
        msg.triangles.append(tri)
    return msg


def create_collision_object(mesh_resource: str, frame: str, object_id: str) -> CollisionObject:
    obj = CollisionObject()
    obj.id = str(object_id)
    obj.header.frame_id = str(frame)
    obj.meshes.append(load_mesh_msg(resolve_package_uri(mesh_resource)))
    obj.mesh_poses.append(PoseMsg())
    obj.operation = CollisionObject.ADD
    return obj


class MoveItRobotModel:
    """
    Kinematic-model capability on top of the MoveItPy robot model.

    Each query builds its own RobotState, so one instance can serve several
    scoring threads.
    """

    def __init__(self, robot_model) -> None:
        if robot_model is None:
            raise ValueError("robot_model is None")
        self._robot_model = robot_model

    @classmethod
    def from_moveit_py(cls, moveit_py) -> "MoveItRobotModel":
        return cls(moveit_py.get_robot_model())

    @property
    def robot_model(self):
        return self._robot_model

    def get_joint_model_group(self, name: str):
        if not self._robot_model.has_joint_model_group(name):
            return None
        return self._robot_model.get_joint_model_group(name)

    def make_state(self, group_name: str, positions: Sequence[float]) -> RobotState:
        state = RobotState(self._robot_model)
        state.set_to_default_values()
        state.set_joint_group_positions(group_name, np.asarray(positions, dtype=float))
        state.update()
        return state

    def get_jacobian(self, group_name: str, positions: Sequence[float]) -> np.ndarray:
        state = self.make_state(group_name, positions)
        return np.asarray(state.get_jacobian(group_name, np.zeros(3, dtype=float)), dtype=float)

    def create_planning_scene(self) -> "MoveItPlanningScene":
        return MoveItPlanningScene(self)


class MoveItPlanningScene:
    """Collision-scene capability on top of `moveit.core.planning_scene.PlanningScene`."""

    def __init__(self, model: MoveItRobotModel) -> None:
        self._model = model
        self._scene = PlanningScene(model.robot_model)
        if not hasattr(self._scene, "distance_to_collision"):
            raise RuntimeError("PlanningScene.distance_to_collision not available in this MoveItPy build")

    def knows_frame_transform(self, frame: str) -> bool:
        return bool(self._scene.knows_frame_transform(frame))

    def add_collision_mesh(self, object_id: str, mesh_resource: str, frame: str) -> bool:
        try:
            obj = create_collision_object(mesh_resource, frame, object_id)
        except (OSError, ValueError):
            return False
        # Some builds return None (void) on success.
        result = self._scene.process_collision_object(obj)
        return result is None or bool(result)

    def allow_collisions(self, object_id: str, links: Sequence[str]) -> None:
        acm = self._scene.allowed_collision_matrix
        for link in links:
            acm.set_entry(str(object_id), str(link), True)

    def distance_to_collision(self, group_name: str, positions: Sequence[float], acm: Optional[object] = None) -> float:
        state = self._model.make_state(group_name, positions)
        if acm is None:
            acm = self._scene.allowed_collision_matrix
        return float(self._scene.distance_to_collision(state, acm))
