from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Tuple


@dataclass(frozen=True)
class Pose:
    """Target end-effector pose in the planning frame (meters, quaternion x/y/z/w)."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    qx: float = 0.0
    qy: float = 0.0
    qz: float = 0.0
    qw: float = 1.0

    @property
    def position(self) -> Tuple[float, float, float]:
        return (float(self.x), float(self.y), float(self.z))

    @property
    def orientation_xyzw(self) -> Tuple[float, float, float, float]:
        return (float(self.qx), float(self.qy), float(self.qz), float(self.qw))

    def as_list(self) -> List[float]:
        return list(self.position) + list(self.orientation_xyzw)


@dataclass(frozen=True)
class JointState:
    """
    Named joint positions, laid out like `sensor_msgs/JointState`.

    Notes
    -----
    - `name` and `position` are parallel tuples.
    - Sequences passed in are copied to tuples so a stored state cannot be mutated.
    """
    name: Tuple[str, ...] = ()
    position: Tuple[float, ...] = ()

    def __post_init__(self) -> None:
        names = tuple(str(n) for n in self.name)
        positions = tuple(float(v) for v in self.position)
        if len(names) != len(positions):
            raise ValueError(f"JointState has {len(names)} names but {len(positions)} positions")
        object.__setattr__(self, "name", names)
        object.__setattr__(self, "position", positions)

    @classmethod
    def from_map(cls, joints: Mapping[str, float]) -> "JointState":
        names = sorted(joints)
        return cls(name=tuple(names), position=tuple(float(joints[n]) for n in names))

    def to_map(self) -> Dict[str, float]:
        return dict(zip(self.name, self.position))


@dataclass(frozen=True)
class ReachRecord:
    """
    Outcome of evaluating one target pose for one planning group.

    `score` is 0.0 when the pose was not reached.
    """
    id: str
    reached: bool
    goal: Pose = field(default_factory=Pose)
    planning_group: str = ""
    seed_state: JointState = field(default_factory=JointState)
    goal_state: JointState = field(default_factory=JointState)
    score: float = 0.0


def make_record(
    id: str,
    reached: bool,
    goal: Pose,
    group_name: str,
    seed_state: JointState,
    goal_state: JointState,
    score: float,
) -> ReachRecord:
    return ReachRecord(
        id=str(id),
        reached=bool(reached),
        goal=goal,
        planning_group=str(group_name),
        seed_state=seed_state,
        goal_state=goal_state,
        score=float(score),
    )


@dataclass
class StudyResults:
    """Aggregate statistics of a study; recomputed from the record set, never updated incrementally."""
    total_pose_score: float = 0.0
    norm_total_pose_score: float = 0.0
    reach_percentage: float = 0.0
    # Reserved for neighbor analysis; not populated by calculate_results.
    avg_num_neighbors: float = 0.0
    avg_joint_distance: float = 0.0
