import pandas as pd
import pytest

from reach_study.core.reach_database import ReachDatabase
from reach_study.types import ReachRecord
from reach_study.utils.reporting import compare_databases, summarize_databases, write_comparison_csv


def _db(diag, entries):
    db = ReachDatabase(diagnostics=diag)
    for id, reached, score in entries:
        db.put(ReachRecord(id=id, reached=reached, score=score))
    return db


@pytest.fixture
def studies(diag):
    return {
        "cell_a": _db(diag, [("0", True, 0.5), ("1", False, 0.0), ("10", True, 0.25)]),
        "cell_b": _db(diag, [("1", True, 0.75), ("2", True, 1.0)]),
    }


def test_compare_databases(studies):
    df = compare_databases(studies)

    assert list(df.columns) == ["cell_a", "cell_b"]
    assert list(df.index) == ["0", "1", "2", "10"]
    assert df.loc["1", "cell_a"] == 0.0
    assert df.loc["1", "cell_b"] == 0.75
    assert df.loc["10", "cell_b"] == 0.0


def test_summarize_databases(studies):
    df = summarize_databases(studies)

    assert df.loc["cell_a", "records"] == 3
    assert df.loc["cell_a", "reach_percentage"] == pytest.approx(200.0 / 3.0)
    assert df.loc["cell_b", "total_pose_score"] == pytest.approx(1.75)


def test_write_comparison_csv(tmp_path, studies):
    out = write_comparison_csv(tmp_path / "out" / "compare.csv", compare_databases(studies))

    df = pd.read_csv(out, dtype={"id": str}).set_index("id")
    assert list(df.columns) == ["cell_a", "cell_b"]
    assert df.loc["2", "cell_b"] == 1.0
