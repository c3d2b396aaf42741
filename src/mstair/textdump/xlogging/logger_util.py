# File: src/mstair/textdump/xlogging/logger_util.py
"""
Environment-driven log level configuration.

Sources, all read after loading `.env` with python-dotenv:
- `LOG_LEVEL` / `LOG_LEVELS`: a small DSL of `pattern:LEVEL` fragments
  separated by `,`, `;` or spaces. A bare level sets the default.
- `LOG_LEVEL_<NAME>`: an override for one logger, where `<NAME>` is the
  dotted logger name with `.` written as `_` and `_` written as `__`.

Example:
    LOG_LEVELS="mstair.textdump.*:DEBUG, mstair.textdump.script_cache:TRACE; WARNING"
    LOG_LEVEL_MSTAIR_TEXTDUMP_DUMP__STATE=TRACE

Precedence: exact > ancestor > glob > default > fallback (WARNING).
"""

from __future__ import annotations

import fnmatch
import logging
import os
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Final, NamedTuple

from mstair.textdump.base.fs_helpers import fs_load_dotenv
from mstair.textdump.xlogging.logger_constants import initialize_logger_constants


__all__ = ["LogLevelConfig", "LogPatternLevel", "parse_log_variable"]

_FRAGMENT_SEPARATOR_RX: Final[re.Pattern[str]] = re.compile(r"[;, ]+")
_ASSIGNMENT_OPERATOR_RX: Final[re.Pattern[str]] = re.compile(r"[:=]+")
_VARIABLE_NAME_RX: Final[re.Pattern[str]] = re.compile(r"^LOG_LEVELS?(?P<SUFFIX>(?:_[A-Z][A-Z0-9_]*)*)$")
_GLOB_CHARS: Final[str] = "*?["

_log_level_config_instance: LogLevelConfig | None = None


class LogPatternLevel(NamedTuple):
    """One `pattern -> level` assignment parsed from the environment."""

    pattern: str
    level: int


def _logger_name_from_suffix(suffix: str) -> str:
    """Translate a `LOG_LEVEL_` variable suffix into a dotted logger name ("" for root)."""
    suffix = suffix.lstrip("_")
    if not suffix or suffix.upper() == "ROOT":
        return ""
    return suffix.replace("__", "\0").replace("_", ".").replace("\0", "_").lower()


def _level_names() -> dict[str, int]:
    """Uppercase level-name mapping, including TRACE and SUPPRESS."""
    initialize_logger_constants()
    return {
        name.upper(): level
        for name, level in logging.getLevelNamesMapping().items()
        if isinstance(name, str) and name.isupper() and isinstance(level, int)
    }


def parse_log_variable(name: str, value: str, level_names: dict[str, int]) -> Iterator[LogPatternLevel]:
    """
    Parse one `LOG_LEVEL*` environment variable into pattern/level pairs.

    Unknown level names are skipped rather than reported, matching how an
    unset variable behaves.

    :param name: Variable name, e.g. `LOG_LEVELS` or `LOG_LEVEL_MSTAIR_TEXTDUMP`.
    :param value: Variable value in the DSL described in the module docstring.
    :param level_names: Uppercase level name to number mapping.
    """
    match = _VARIABLE_NAME_RX.match(name)
    if match is None:
        return
    scope = _logger_name_from_suffix(match["SUFFIX"])

    for fragment in _FRAGMENT_SEPARATOR_RX.split(value):
        fragment = fragment.strip()
        if not fragment:
            continue
        parts = _ASSIGNMENT_OPERATOR_RX.split(fragment, maxsplit=1)
        pattern = parts[0].strip().strip("'\"") if len(parts) == 2 else ""
        level_text = parts[-1].strip().strip("'\"").upper()

        if scope:
            pattern = f"{scope}.{pattern}" if pattern not in {"", "root"} else scope
        if pattern.lower() == "root":
            pattern = ""

        level = level_names.get(level_text, logging.NOTSET)
        if level != logging.NOTSET:
            yield LogPatternLevel(pattern, level)


@dataclass(slots=True)
class LogLevelConfig:
    """
    Resolve per-logger levels from environment variables.

    The empty pattern holds the default level. Matching is case-insensitive.
    """

    pattern_to_level: dict[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.pattern_to_level:
            self.update_from_environment()

    def update_from_environment(self) -> None:
        """Rebuild the pattern table from the current environment."""
        fs_load_dotenv()
        level_names = _level_names()
        self.pattern_to_level.clear()
        # reverse order lets LOG_LEVEL_<NAME> entries win over the DSL for the same pattern
        for name, value in sorted(os.environ.items(), reverse=True):
            for pattern, level in parse_log_variable(name, value, level_names):
                self.pattern_to_level.setdefault(pattern, level)

    def get_effective_level(self, logger_name: str, *, default: int = logging.WARNING) -> int:
        """Return the configured level for `logger_name`, else `default`."""
        name_lc = logger_name.lower()
        named: dict[str, int] = {k.lower(): v for k, v in self.pattern_to_level.items() if k}

        if name_lc in named:
            return named[name_lc]

        parts = name_lc.split(".")
        for i in range(len(parts) - 1, 0, -1):
            ancestor = ".".join(parts[:i])
            if ancestor in named:
                return named[ancestor]

        best: tuple[int, int] | None = None
        for pattern, level in named.items():
            if not any(ch in pattern for ch in _GLOB_CHARS) or not fnmatch.fnmatch(name_lc, pattern):
                continue
            specificity = min((i for i, ch in enumerate(pattern) if ch in _GLOB_CHARS), default=len(pattern))
            if best is None or specificity > best[0]:
                best = (specificity, level)
        if best is not None:
            return best[1]

        return self.pattern_to_level.get("", default)

    @classmethod
    def get_instance(cls) -> LogLevelConfig:
        """Return the process-wide LogLevelConfig, creating it on first use."""
        global _log_level_config_instance
        if _log_level_config_instance is None:
            _log_level_config_instance = LogLevelConfig()
        return _log_level_config_instance


# End of file: src/mstair/textdump/xlogging/logger_util.py
