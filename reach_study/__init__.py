from .types import JointState, Pose, ReachRecord, StudyResults, make_record

__version__ = "0.1.0"

__all__ = ["JointState", "Pose", "ReachRecord", "StudyResults", "make_record"]
