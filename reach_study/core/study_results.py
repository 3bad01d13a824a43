from __future__ import annotations

from typing import Iterable, List

from ..types import ReachRecord, StudyResults


def calculate_results(records: Iterable[ReachRecord]) -> StudyResults:
    """
    Aggregate a record set in a single pass.

    - reach_percentage      = 100 * reached / total
    - total_pose_score      = sum of scores of reached records
    - norm_total_pose_score = total_pose_score / (reached / total)

    An empty record set gives the default (all-zero) results. A non-empty set with
    nothing reached gives zeros as well rather than 0/0.
    """
    success = 0
    total = 0
    score = 0.0
    for r in records:
        if r.reached:
            success += 1
            score += float(r.score)
        total += 1

    results = StudyResults()
    if total == 0:
        return results

    pct_success = float(success) / float(total)
    results.reach_percentage = 100.0 * pct_success
    results.total_pose_score = score
    results.norm_total_pose_score = score / pct_success if success > 0 else 0.0
    return results


def format_results(results: StudyResults) -> List[str]:
    sep = "------------------------------------------------"
    return [
        sep,
        f"Percent Reached = {results.reach_percentage}",
        f"Total points score = {results.total_pose_score}",
        f"Normalized total points score = {results.norm_total_pose_score}",
        sep,
    ]
