from __future__ import annotations

from enum import IntEnum
from typing import Protocol


class Level(IntEnum):
    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40
    FATAL = 50


class Diagnostics(Protocol):
    """Sink for diagnostic messages, passed explicitly to every component."""

    def report(self, level: Level, message: str) -> None:
        ...


class LoggerDiagnostics:
    """
    Adapt a logger object with `debug/info/warning/error/fatal` methods to `Diagnostics`.

    Works with `rclpy` loggers (RcutilsLogger). Loggers without `fatal` (e.g. stdlib)
    fall back to `critical`.
    """

    def __init__(self, logger) -> None:
        self._logger = logger

    @property
    def logger(self):
        return self._logger

    def report(self, level: Level, message: str) -> None:
        level = Level(level)
        if level == Level.DEBUG:
            self._logger.debug(message)
        elif level == Level.INFO:
            self._logger.info(message)
        elif level == Level.WARN:
            self._logger.warning(message)
        elif level == Level.ERROR:
            self._logger.error(message)
        else:
            fatal = getattr(self._logger, "fatal", None) or getattr(self._logger, "critical")
            fatal(message)


def get_diagnostics(name: str) -> LoggerDiagnostics:
    """Default sink: the ROS 2 logger `name`."""
    # Lazy import so the pure-Python parts work without a sourced ROS environment.
    from rclpy.logging import get_logger

    return LoggerDiagnostics(get_logger(name))
