from __future__ import annotations

import argparse
import sys
from pathlib import Path

import rclpy
from moveit.planning import MoveItPy
from rclpy.logging import get_logger
from rclpy.utilities import remove_ros_args, try_shutdown

from ..core.reach_database import DatabaseSaveError, ReachDatabase
from ..core.rescore import rescore_database
from ..evaluation import create_evaluator
from ..utils.config import ConfigError, load_evaluation_config
from ..utils.diagnostics import LoggerDiagnostics
from ..utils.moveit_model import MoveItRobotModel


def _parse_args(argv) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="reach_rescore",
        description="Re-score the reached records of a reach study database with another evaluation plugin.",
    )
    p.add_argument("--db", type=str, required=True, help="Input database file.")
    p.add_argument("--config", type=str, required=True, help="YAML with ik_solver_config.evaluation_plugin.")
    p.add_argument("--out", type=str, default="", help="Output database file; empty -> overwrite --db.")
    p.add_argument("--node-name", type=str, default="reach_rescore", help="MoveItPy node name.")
    return p.parse_args(argv)


def main() -> int:
    rclpy.init(args=sys.argv)
    logger = get_logger("reach_study.rescore")
    diag = LoggerDiagnostics(logger)
    args = _parse_args(remove_ros_args(sys.argv)[1:])

    try:
        name, params = load_evaluation_config(Path(args.config))
    except ConfigError as e:
        logger.error(str(e))
        try_shutdown()
        return 2

    moveit_py = MoveItPy(node_name=args.node_name)
    try:
        evaluator = create_evaluator(name, diagnostics=diag)
        if not evaluator.initialize(name, params, MoveItRobotModel.from_moveit_py(moveit_py)):
            logger.error(f"Failed to initialize evaluation plugin '{name}'")
            return 2

        db = ReachDatabase(diagnostics=diag)
        if not db.load(Path(args.db)):
            return 2

        updated = rescore_database(db, evaluator)
        logger.info(f"Re-scored {updated}/{db.size()} records with '{name}'")
        db.calculate_results()
        db.print_results()

        out = Path(args.out) if args.out else Path(args.db)
        try:
            db.save(out)
        except DatabaseSaveError as e:
            logger.error(str(e))
            return 1
        logger.info(f"Saved database -> {out}")
        return 0
    finally:
        moveit_py.shutdown()
        try_shutdown()


if __name__ == "__main__":
    raise SystemExit(main())
