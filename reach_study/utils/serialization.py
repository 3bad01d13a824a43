from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Iterable, List, Tuple

from ..types import JointState, Pose, ReachRecord, StudyResults


FORMAT_VERSION = 1

AGGREGATE_FIELDS = (
    "total_pose_score",
    "norm_total_pose_score",
    "reach_percentage",
    "avg_num_neighbors",
    "avg_joint_distance",
)


class SerializationError(ValueError):
    """Raised when a database document cannot be encoded or decoded."""


def pose_to_dict(pose: Pose) -> Dict[str, Any]:
    return {
        "position": {"x": float(pose.x), "y": float(pose.y), "z": float(pose.z)},
        "orientation": {"x": float(pose.qx), "y": float(pose.qy), "z": float(pose.qz), "w": float(pose.qw)},
    }


def _require_object(value: Any, what: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise SerializationError(f"{what} must be a JSON object, got {type(value).__name__}")
    return value


def pose_from_dict(d: Dict[str, Any]) -> Pose:
    d = _require_object(d, "Pose")
    p = _require_object(d["position"], "Pose position")
    o = _require_object(d["orientation"], "Pose orientation")
    return Pose(
        x=float(p["x"]), y=float(p["y"]), z=float(p["z"]),
        qx=float(o["x"]), qy=float(o["y"]), qz=float(o["z"]), qw=float(o["w"]),
    )


def joint_state_to_dict(state: JointState) -> Dict[str, Any]:
    return {"name": list(state.name), "position": [float(v) for v in state.position]}


def joint_state_from_dict(d: Dict[str, Any]) -> JointState:
    d = _require_object(d, "Joint state")
    return JointState(name=tuple(d.get("name", [])), position=tuple(d.get("position", [])))


def record_to_dict(record: ReachRecord) -> Dict[str, Any]:
    return {
        "id": str(record.id),
        "reached": bool(record.reached),
        "goal_pose": pose_to_dict(record.goal),
        "planning_group": str(record.planning_group),
        "seed_state": joint_state_to_dict(record.seed_state),
        "goal_state": joint_state_to_dict(record.goal_state),
        "score": float(record.score),
    }


def record_from_dict(d: Dict[str, Any]) -> ReachRecord:
    d = _require_object(d, "Record")
    reached = d["reached"]
    if not isinstance(reached, bool):
        raise SerializationError(f"Record '{d.get('id')}': 'reached' must be a bool, got {reached!r}")
    return ReachRecord(
        id=str(d["id"]),
        reached=reached,
        goal=pose_from_dict(d["goal_pose"]),
        planning_group=str(d["planning_group"]),
        seed_state=joint_state_from_dict(d["seed_state"]),
        goal_state=joint_state_from_dict(d["goal_state"]),
        score=float(d["score"]),
    )


def database_to_dict(records: Iterable[ReachRecord], results: StudyResults) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "version": FORMAT_VERSION,
        "records": [record_to_dict(r) for r in sorted(records, key=lambda r: r.id)],
    }
    for key in AGGREGATE_FIELDS:
        payload[key] = float(getattr(results, key))
    return payload


def database_from_dict(payload: Dict[str, Any]) -> Tuple[List[ReachRecord], StudyResults]:
    if not isinstance(payload, dict):
        raise SerializationError(f"Database document must be a JSON object, got {type(payload).__name__}")

    version = payload.get("version")
    if version != FORMAT_VERSION:
        raise SerializationError(f"Unsupported database format version {version!r} (expected {FORMAT_VERSION})")

    raw_records = payload.get("records", [])
    if not isinstance(raw_records, list):
        raise SerializationError("'records' must be a list")

    try:
        records = [record_from_dict(r) for r in raw_records]
        results = StudyResults(**{key: float(payload.get(key, 0.0)) for key in AGGREGATE_FIELDS})
    except SerializationError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        raise SerializationError(f"Malformed database document: {e!r}") from e
    return records, results


def to_file(path: Path, payload: Dict[str, Any]) -> None:
    """Write `payload` as JSON. Raises OSError / SerializationError on failure.

    The document is written next to `path` first and moved over it, so a failed write
    leaves any previous file intact.
    """
    path = Path(path)
    try:
        text = json.dumps(payload, indent=2, ensure_ascii=False, sort_keys=True)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Failed to encode database: {e}") from e
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    try:
        tmp.write_text(text + "\n", encoding="utf-8")
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def from_file(path: Path) -> Dict[str, Any]:
    """Read a JSON document. Raises OSError / SerializationError on failure."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except UnicodeDecodeError as e:
        raise SerializationError(f"'{path}' is not valid UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise SerializationError(f"Failed to parse '{path}': {e}") from e
