from __future__ import annotations

from dataclasses import replace

from ..evaluation.base import EvaluationBase
from .reach_database import ReachDatabase


def rescore_database(db: ReachDatabase, evaluator: EvaluationBase) -> int:
    """
    Re-evaluate the goal state of every reached record with `evaluator`.

    Records whose planning group the evaluator was not configured for are left
    untouched; unreached records keep their 0.0 score. Scoring happens outside the
    database lock, one `put` per updated record. Returns the number of updated records.
    """
    groups = set(evaluator.planning_groups)
    updated = 0
    for record in db.records():
        if not record.reached or record.planning_group not in groups:
            continue
        score = evaluator.calculate_score(record.goal_state.to_map(), record.planning_group)
        db.put(replace(record, score=float(score)))
        updated += 1
    return updated
