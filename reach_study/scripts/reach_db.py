from __future__ import annotations

import argparse
from pathlib import Path
from typing import Dict, List, Optional

from ..core.reach_database import DatabaseSaveError, ReachDatabase
from ..utils.config import ConfigError, load_study_parameters
from ..utils.diagnostics import Diagnostics, get_diagnostics
from ..utils.reporting import compare_databases, summarize_databases, write_comparison_csv


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="reach_db",
        description="Inspect a reach study database: print aggregates, recalculate them, compare studies.",
    )
    p.add_argument("--db", type=str, default="", help="Database file (reach.db.json).")
    p.add_argument(
        "--config",
        type=str,
        default="",
        help="Study config YAML; its results_directory/config_name locate --db and compare_dbs add comparisons.",
    )
    p.add_argument("--compare", type=str, nargs="*", default=[], help="Other database files to compare against.")
    p.add_argument("--recalculate", action="store_true", help="Recompute aggregates and save them back to --db.")
    p.add_argument("--csv", type=str, default="", help="Write the per-record comparison table to this CSV.")
    return p.parse_args(argv)


def _resolve_paths(args: argparse.Namespace) -> Dict[str, Path]:
    """Map of display name -> database path; the primary database comes first."""
    paths: Dict[str, Path] = {}
    if args.config:
        params = load_study_parameters(Path(args.config))
        primary = Path(args.db) if args.db else params.database_path
        paths[params.config_name if not args.db else primary.stem] = primary
        for name in params.compare_dbs:
            paths[name] = params.database_path_for(name)
    elif args.db:
        paths[Path(args.db).stem] = Path(args.db)
    else:
        raise ConfigError("Either --db or --config is required")

    for extra in args.compare:
        p = Path(extra)
        key = p.stem if p.stem not in paths else str(p)
        paths[key] = p
    return paths


def run(args: argparse.Namespace, diagnostics: Optional[Diagnostics] = None) -> int:
    diag = diagnostics if diagnostics is not None else get_diagnostics("reach_study.reach_db")
    try:
        paths = _resolve_paths(args)
    except ConfigError as e:
        print(f"[reach_db] {e}")
        return 2

    databases: Dict[str, ReachDatabase] = {}
    for name, path in paths.items():
        db = ReachDatabase(diagnostics=diag)
        if not db.load(path):
            print(f"[reach_db] failed to load '{path}'")
            return 2
        databases[name] = db

    primary_name, primary_path = next(iter(paths.items()))
    primary = databases[primary_name]
    print(f"[reach_db] {primary_name}: {primary.size()} records ({primary_path})")

    if args.recalculate:
        primary.calculate_results()
        try:
            primary.save(primary_path)
        except DatabaseSaveError as e:
            print(f"[reach_db] {e}")
            return 1
        print(f"[reach_db] aggregates recalculated -> {primary_path}")
    primary.print_results()

    if len(databases) > 1 or args.csv:
        summary = summarize_databases(databases)
        print("")
        print(summary.to_string())
        if args.csv:
            out = write_comparison_csv(Path(args.csv), compare_databases(databases))
            print(f"[reach_db] comparison -> {out}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    return run(_parse_args(argv))


if __name__ == "__main__":
    raise SystemExit(main())
