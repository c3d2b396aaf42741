# File: src/mstair/textdump/xlogging/logger_constants.py
"""
Custom log levels and record attribute names shared by the xlogging modules.
"""

import logging


__all__ = [
    "K_KLASS_NAME",
    "SUPPRESS",
    "TRACE",
    "initialize_logger_constants",
]

K_KLASS_NAME = "klass_name"

TRACE = logging.DEBUG - 1  # (9) per-member and per-instruction detail of a dump
SUPPRESS = -1  # records at this level are never shown


_logging_constants_initialized = False


def initialize_logger_constants() -> None:
    """Register the custom level names with `logging` once per process."""
    global _logging_constants_initialized
    if _logging_constants_initialized:
        return
    _logging_constants_initialized = True
    for key, value in {
        "TRACE": TRACE,
        "SUPPRESS": SUPPRESS,
    }.items():
        if key not in logging.getLevelNamesMapping():
            logging.addLevelName(value, key)


# End of file: src/mstair/textdump/xlogging/logger_constants.py
