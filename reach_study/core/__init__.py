from .study_results import calculate_results
from .reach_database import DatabaseSaveError, ReachDatabase

__all__ = ["DatabaseSaveError", "ReachDatabase", "calculate_results"]
