"""Logging setup for applications that drive a rod simulation.

The simulation core only emits records through module loggers under the
`spring_rod` namespace. Scripts and frame loops call `setup_logging` once to
route them to the console and, optionally, to a log file.
"""

from __future__ import annotations

import logging
import sys

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: int = logging.INFO, log_file: str | None = None) -> logging.Logger:
    """Configure and return the `spring_rod` package logger.

    Calling it again replaces the handlers from the previous call.

    Args:
        level: Logging level, e.g. `logging.DEBUG`.
        log_file: Optional path of a file that receives the same records.
    """
    logger = logging.getLogger("spring_rod")
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(_FORMAT, datefmt="%H:%M:%S")
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug("logging initialized (level=%s, file=%s)", logging.getLevelName(level), log_file)
    return logger
