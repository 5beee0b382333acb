"""Logging utilities for orgtangle commands."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "orgtangle"
_CONSOLE_FORMAT = "[orgtangle] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a pipeline-stage logger under the orgtangle hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | str | None = None
) -> logging.Logger:
    """Send orgtangle records to stderr and, when ``log_file`` is given, to that file.

    Handlers from an earlier call are closed first, so repeated CLI
    invocations in one process neither duplicate lines nor leak file handles.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        # The file sink always records per-block detail, whatever the console level.
        logger.setLevel(logging.DEBUG)
        sink = logging.FileHandler(path, encoding="utf-8")
        sink.setLevel(logging.DEBUG)
        sink.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(sink)

    return logger


__all__ = ["configure_logging", "get_logger"]
