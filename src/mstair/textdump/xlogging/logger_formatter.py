# File: src/mstair/textdump/xlogging/logger_formatter.py
"""
Formatter used by the textdump root handler.

Adds three record fields to the standard set:
- `fileAndLine`: project-relative source location, e.g. `src/mstair/textdump/dump_state.py:88`
- `klassAndMethod`: `Klass.method()` or `function()` of the logging call site
- `levelName`: the level name, colorized in desktop mode
"""

from __future__ import annotations

import logging
import os
import re
import sys
import traceback
from datetime import datetime
from pathlib import Path
from types import TracebackType
from typing import Any, Literal, TypeAlias

import pytz
from colorama import Fore

import mstair.textdump.base.config as cfg
from mstair.textdump.base.fs_helpers import fs_find_pyproject_toml
from mstair.textdump.xlogging.logger_constants import K_KLASS_NAME


__all__ = ["CoreFormatter", "get_color_code", "rgb_code"]


FormatStyle: TypeAlias = Literal["%", "{", "$"]

_TRACEBACK_FRAME_RX = re.compile(r'^  File "([^"]+)", line (\d+), in (.*?)$')
_TRACEBACK_EXCLUDES = (r"[/\\]\.venv", r"[/\\]site-packages", "<frozen")


def rgb_code(r: int, g: int, b: int) -> str:
    """
    Convert RGB values to an ANSI 24-bit foreground escape code.

    :param r: Red component (0-255)
    :param g: Green component (0-255)
    :param b: Blue component (0-255)
    """
    return f"\033[38;2;{max(0, min(255, r))};{max(0, min(255, g))};{max(0, min(255, b))}m"


COLOR_MAP: dict[str | None, str] = {
    "fileAndLine": rgb_code(64, 128, 160),
    "klassAndMethod": rgb_code(48, 192, 160),
    "TRACE": rgb_code(96, 0, 64),
    "DEBUG": rgb_code(128, 128, 128),
    "INFO": rgb_code(184, 184, 216),
    "WARNING": rgb_code(192, 176, 0),
    "ERROR": rgb_code(224, 128, 0),
    "CRITICAL": rgb_code(255, 64, 64),
    None: Fore.RESET,
}


def get_color_code(key: str | None = None) -> str:
    """
    Return the escape code for `key`, or "" when colors are disabled.

    Keys are COLOR_MAP entries, `#rrggbb` strings or colorama `Fore` names.
    """
    if not cfg.in_desktop_mode():
        return ""
    if key in {None, "", "RESET"}:
        return Fore.RESET
    if key in COLOR_MAP:
        return COLOR_MAP[key]
    assert key is not None
    if key.startswith("#") and len(key) == 7:
        return rgb_code(*[int(key[i : i + 2], 16) for i in (1, 3, 5)])
    return getattr(Fore, key.upper(), Fore.RESET)


class CoreFormatter(logging.Formatter):
    """Formatter adding source location, call site and colored level fields."""

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: FormatStyle = "%",
        validate: bool = True,
        *,
        defaults: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt, style=style, validate=validate, defaults=defaults)
        self.tz = pytz.timezone(os.environ.get("LOG_TIMEZONE", "US/Eastern"))

    def format(self, record: logging.LogRecord) -> str:
        record.fileAndLine = self.format_fileAndLine(record.pathname, record.lineno)
        record.klassAndMethod = self.format_klassAndMethod(record)
        record.levelName = get_color_code(record.levelname) + record.levelname + get_color_code()
        message = super().format(record)
        return self.message_filter(message)

    @staticmethod
    def format_file(file: str) -> str:
        """Return `file` relative to the nearest project root, else as an absolute posix path."""
        if not file:
            return "<unknown file>"
        path = Path(file)
        pyproject = fs_find_pyproject_toml(start_dir=path.parent)
        if pyproject is not None:
            try:
                return path.relative_to(pyproject.parent).as_posix()
            except ValueError:
                pass
        return path.absolute().as_posix()

    def format_fileAndLine(self, file: str, lineno: int) -> str:
        return get_color_code("fileAndLine") + f"{self.format_file(file)}:{lineno}" + get_color_code()

    @staticmethod
    def format_klassAndMethod(record: logging.LogRecord) -> str:
        klass_name: str = getattr(record, K_KLASS_NAME, "") or ""
        if not klass_name:
            text = record.funcName if record.funcName == "<module>" else f"{record.funcName}()"
        elif record.funcName == "__init__":
            text = f"{klass_name}()"
        else:
            text = f"{klass_name}.{record.funcName}()"
        return get_color_code("klassAndMethod") + text + get_color_code()

    def formatException(
        self,
        ei: tuple[type[BaseException], BaseException, TracebackType | None] | tuple[None, None, None],
    ) -> str:
        return self.message_filter(super().formatException(ei))

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        """Format the record time in `LOG_TIMEZONE` (default US/Eastern); `%-I` style flags are accepted on every platform."""
        moment = datetime.fromtimestamp(record.created, self.tz)
        result = ""
        if datefmt:
            try:
                result = moment.strftime(datefmt.replace("%-", "%"))
                result = result.replace("AM", "am").replace("PM", "pm").lstrip("0")
            except ValueError:
                print(f"{traceback.format_exc().rstrip()}: {datefmt!r}", file=sys.stderr)
        return result or moment.isoformat()

    def message_filter(self, message: str) -> str:
        """
        Shorten traceback frames and drop frames from installed packages.

        :param message: Formatted record text, possibly containing a traceback.
        :return: The filtered text.
        """
        filtered: list[str] = []
        skip_source_line = False
        for line in message.splitlines():
            if skip_source_line and line.startswith("    "):
                continue
            skip_source_line = False

            match = _TRACEBACK_FRAME_RX.search(line)
            if match is None:
                filtered.append(line)
                continue
            if any(re.search(ex, match.group(1)) for ex in _TRACEBACK_EXCLUDES):
                skip_source_line = True
                continue
            location = self.format_fileAndLine(match.group(1), int(match.group(2)))
            filtered.append(f"  {location} {match.group(3)}()")
        return "\n".join(filtered)


# End of file: src/mstair/textdump/xlogging/logger_formatter.py
