from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Mapping

import pandas as pd

from ..core.reach_database import ReachDatabase


def compare_databases(databases: Mapping[str, ReachDatabase]) -> pd.DataFrame:
    """
    Per-record score table across several studies.

    One row per record id seen in any database, one column per database. A cell is
    the record's score when it was reached there, 0.0 otherwise (missing or unreached).
    """
    columns: Dict[str, Dict[str, float]] = {}
    for db_name, db in databases.items():
        columns[str(db_name)] = {
            r.id: (float(r.score) if r.reached else 0.0) for r in db.records()
        }

    df = pd.DataFrame(columns, columns=list(columns))
    df = df.fillna(0.0)
    try:
        df = df.loc[sorted(df.index, key=lambda x: int(str(x)))]
    except ValueError:
        df = df.sort_index()
    df.index.name = "id"
    return df


def summarize_databases(databases: Mapping[str, ReachDatabase]) -> pd.DataFrame:
    """One row per database with its freshly computed aggregates."""
    rows: List[Dict[str, object]] = []
    for db_name, db in databases.items():
        res = db.calculate_results()
        rows.append(
            {
                "database": str(db_name),
                "records": int(db.size()),
                "reach_percentage": float(res.reach_percentage),
                "total_pose_score": float(res.total_pose_score),
                "norm_total_pose_score": float(res.norm_total_pose_score),
            }
        )
    return pd.DataFrame(
        rows,
        columns=["database", "records", "reach_percentage", "total_pose_score", "norm_total_pose_score"],
    ).set_index("database")


def write_comparison_csv(path: Path, df: pd.DataFrame) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path)
    return path
