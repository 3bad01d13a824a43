from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pytest

from reach_study.utils.diagnostics import Level


class RecordingDiagnostics:
    def __init__(self) -> None:
        self.messages: List[Tuple[Level, str]] = []

    def report(self, level: Level, message: str) -> None:
        self.messages.append((Level(level), str(message)))

    def at(self, level: Level) -> List[str]:
        return [m for lvl, m in self.messages if lvl == level]


@dataclass(frozen=True)
class FakeBounds:
    min_position: float
    max_position: float


@dataclass
class FakeGroup:
    active_joint_model_names: List[str]
    active_joint_model_bounds: List[object]


def _rot(axis: str, angle: float) -> np.ndarray:
    c, s = np.cos(angle), np.sin(angle)
    if axis == "z":
        return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])
    if axis == "y":
        return np.array([[c, 0.0, s], [0.0, 1.0, 0.0], [-s, 0.0, c]])
    return np.array([[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]])


_UNIT = {"x": np.array([1.0, 0.0, 0.0]), "y": np.array([0.0, 1.0, 0.0]), "z": np.array([0.0, 0.0, 1.0])}


@dataclass
class SerialChain:
    """Revolute chain: per joint (axis, offset from previous joint), plus a tool offset."""
    axes: Sequence[str]
    offsets: Sequence[Sequence[float]]
    tool: Sequence[float]

    def jacobian(self, q: Sequence[float]) -> np.ndarray:
        R = np.eye(3)
        p = np.zeros(3)
        origins, axes = [], []
        for axis, offset, qi in zip(self.axes, self.offsets, q):
            p = p + R @ np.asarray(offset, dtype=float)
            origins.append(p.copy())
            axes.append(R @ _UNIT[axis])
            R = R @ _rot(axis, float(qi))
        p_e = p + R @ np.asarray(self.tool, dtype=float)
        cols = [np.concatenate([np.cross(a, p_e - o), a]) for a, o in zip(axes, origins)]
        return np.stack(cols, axis=1)


# Joint 1 and joint 3 both turn about the vertical axis; they line up when joint 2 is zero.
WRIST_CHAIN = SerialChain(
    axes=("z", "y", "z"),
    offsets=((0.0, 0.0, 0.0), (0.0, 0.0, 0.4), (0.0, 0.0, 0.3)),
    tool=(0.2, 0.0, 0.0),
)


class FakeScene:
    def __init__(
        self,
        frames: Sequence[str] = ("base_link",),
        add_ok: bool = True,
        distance_fn: Optional[Callable[[np.ndarray], float]] = None,
    ) -> None:
        self.frames = set(frames)
        self.add_ok = add_ok
        self.distance_fn = distance_fn or (lambda q: float(q[0]))
        self.objects: Dict[str, Tuple[str, str]] = {}
        self.allowed: Dict[str, List[str]] = {}
        self.distance_calls: List[Tuple[str, Tuple[float, ...]]] = []

    def knows_frame_transform(self, frame: str) -> bool:
        return frame in self.frames

    def add_collision_mesh(self, object_id: str, mesh_resource: str, frame: str) -> bool:
        if not self.add_ok:
            return False
        self.objects[object_id] = (mesh_resource, frame)
        return True

    def allow_collisions(self, object_id: str, links: Sequence[str]) -> None:
        self.allowed[object_id] = list(links)

    def distance_to_collision(self, group_name: str, positions: Sequence[float]) -> float:
        q = np.asarray(positions, dtype=float)
        self.distance_calls.append((group_name, tuple(q)))
        return self.distance_fn(q)


@dataclass
class FakeModel:
    groups: Dict[str, FakeGroup]
    chains: Dict[str, SerialChain] = field(default_factory=dict)
    scene: FakeScene = field(default_factory=FakeScene)

    def get_joint_model_group(self, name: str):
        return self.groups.get(name)

    def get_jacobian(self, group_name: str, positions: Sequence[float]) -> np.ndarray:
        return self.chains[group_name].jacobian(positions)

    def create_planning_scene(self) -> FakeScene:
        return self.scene


def make_group(limits: Sequence[Tuple[float, float]], prefix: str = "joint_") -> FakeGroup:
    names = [f"{prefix}{i + 1}" for i in range(len(limits))]
    return FakeGroup(
        active_joint_model_names=names,
        active_joint_model_bounds=[FakeBounds(lo, hi) for lo, hi in limits],
    )


@pytest.fixture
def diag() -> RecordingDiagnostics:
    return RecordingDiagnostics()


@pytest.fixture
def arm_model() -> FakeModel:
    return FakeModel(
        groups={"manipulator": make_group([(-1.0, 1.0), (0.0, 2.0), (-3.0, 1.0)])},
        chains={"manipulator": WRIST_CHAIN},
    )
