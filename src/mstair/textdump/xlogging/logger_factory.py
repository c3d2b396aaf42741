# File: src/mstair/textdump/xlogging/logger_factory.py
"""
Factory for CoreLogger instances with context-aware names.
"""

import inspect
import logging
import sys
from pathlib import Path

from mstair.textdump.xlogging.core_logger import CoreLogger


__all__ = ["create_logger", "get_caller_logger_name"]


def create_logger(
    name: str | None,
    *,
    level: int | str | None = None,
    stacklevel: int = 1,
) -> CoreLogger:
    """
    Return a CoreLogger registered in the standard logging hierarchy.

    Handles:
    - Normal imports (uses the given name)
    - Direct script execution (`__main__` becomes the script stem)
    - Anonymous loggers (uses the caller's module name)

    :param name: Logger name, usually `__name__`.
    :param level: Explicit level; None keeps the environment-driven level.
    :param stacklevel: Frames above the caller used to infer a missing name.
    """
    logger_name: str = name or ""
    if logger_name == "__main__":
        arg0 = Path(sys.argv[0]) if sys.argv and sys.argv[0] else None
        logger_name = arg0.stem if arg0 is not None and arg0.exists() else "embedded_main"
    if not logger_name:
        logger_name = get_caller_logger_name(stacklevel=stacklevel + 1)

    existing = logging.Logger.manager.loggerDict.get(logger_name)
    logger = existing if isinstance(existing, CoreLogger) else _get_core_logger_from_logging(logger_name)
    if level is not None:
        logger.setLevel(level)
    return logger


def _get_core_logger_from_logging(name: str) -> CoreLogger:
    """
    Create a CoreLogger through logging.getLogger() so parent links are set.

    :raises TypeError: If a plain Logger was already registered under `name`.
    """
    logging_class = logging.getLoggerClass()
    if logging_class is not CoreLogger:
        logging.setLoggerClass(CoreLogger)
    try:
        logger = logging.getLogger(name)
    finally:
        if logging_class is not CoreLogger:
            logging.setLoggerClass(logging_class)
    if not isinstance(logger, CoreLogger):
        raise TypeError(f"Failed to create CoreLogger: {logger!r}")
    return logger


def get_caller_logger_name(*, stacklevel: int = 1) -> str:
    """Return the module name `stacklevel` frames above the caller, or the script stem."""
    frame = inspect.currentframe()
    for _ in range(stacklevel + 1):
        if frame is None:
            break
        frame = frame.f_back
    name = frame.f_globals.get("__name__", "") if frame is not None else ""
    if not name or name == "__main__":
        executable = sys.argv[0] if sys.argv and sys.argv[0] else sys.executable
        name = Path(executable).stem
    return name


# End of file: src/mstair/textdump/xlogging/logger_factory.py
