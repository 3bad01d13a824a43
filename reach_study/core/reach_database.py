from __future__ import annotations

import threading
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..types import ReachRecord, StudyResults
from ..utils.diagnostics import Diagnostics, Level, get_diagnostics
from ..utils.serialization import (
    SerializationError,
    database_from_dict,
    database_to_dict,
    from_file,
    to_file,
)
from .study_results import calculate_results, format_results


class DatabaseSaveError(RuntimeError):
    """The database could not be written; callers must not assume anything reached disk."""


class ReachDatabase:
    """
    Thread-safe store of reach records keyed by record id, plus study aggregates.

    Notes
    -----
    - Every operation takes the same lock; keep scoring outside of `put`.
    - `load` merges by id into the current contents, so a study can be resumed,
      extended and saved again without losing earlier records.
    - Aggregates are only refreshed by `calculate_results` (or copied by `load`).
    """

    def __init__(self, diagnostics: Optional[Diagnostics] = None) -> None:
        self._diag = diagnostics if diagnostics is not None else get_diagnostics("reach_study.reach_database")
        self._lock = threading.Lock()
        self._map: Dict[str, ReachRecord] = {}
        self._results = StudyResults()

    def put(self, record: ReachRecord) -> None:
        with self._lock:
            self._map[str(record.id)] = record

    def get(self, id: str) -> Optional[ReachRecord]:
        with self._lock:
            return self._map.get(str(id))

    def size(self) -> int:
        with self._lock:
            return len(self._map)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, id: object) -> bool:
        with self._lock:
            return str(id) in self._map

    def records(self) -> List[ReachRecord]:
        with self._lock:
            return list(self._map.values())

    @property
    def results(self) -> StudyResults:
        with self._lock:
            return replace(self._results)

    def calculate_results(self) -> StudyResults:
        with self._lock:
            if not self._map:
                return replace(self._results)
            computed = calculate_results(self._map.values())
            # Neighbor metrics are not computed here; keep whatever was loaded.
            computed.avg_num_neighbors = self._results.avg_num_neighbors
            computed.avg_joint_distance = self._results.avg_joint_distance
            self._results = computed
            return replace(computed)

    def print_results(self) -> None:
        for line in format_results(self.results):
            self._diag.report(Level.INFO, line)

    def to_dict(self) -> Dict[str, Any]:
        with self._lock:
            return database_to_dict(self._map.values(), self._results)

    def save(self, filename: Path) -> None:
        with self._lock:
            payload = database_to_dict(self._map.values(), self._results)
            try:
                to_file(Path(filename), payload)
            except (OSError, SerializationError) as e:
                raise DatabaseSaveError(f"Unable to save database to file: {filename}") from e

    def load(self, filename: Path) -> bool:
        try:
            payload = from_file(Path(filename))
            records, results = database_from_dict(payload)
        except FileNotFoundError:
            self._diag.report(Level.ERROR, f"Database file '{filename}' does not exist")
            return False
        except (OSError, SerializationError) as e:
            self._diag.report(Level.ERROR, f"Unable to deserialize database from file '{filename}': {e}")
            return False

        with self._lock:
            for r in records:
                self._map[str(r.id)] = r
            self._results = results
        self._diag.report(Level.DEBUG, f"Loaded {len(records)} records from '{filename}'")
        return True
