# File: src/mstair/textdump/base/config.py
"""
Execution context detection and environment-driven settings helpers.

The mode flags are kept in thread-local storage so that overrides made by a
test or by an analysis pass on one thread never leak into another thread.

Exports:
- analysis_mode_context(): context manager that silences logging output.
- in_analysis_mode(): check if analysis mode is active on this thread.
- in_lambda(): check or override whether code is running in AWS Lambda.
- in_test_mode(): check or override whether code is running under pytest.
- in_desktop_mode(): check or override whether log output may carry colors.
- env_bool(), env_int(), env_str(): typed reads of TEXTDUMP_* style variables.
"""

from __future__ import annotations

import os
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from mstair.textdump.base.fs_helpers import fs_load_dotenv
from mstair.textdump.base.types import int_from_string


__all__ = [
    "analysis_mode_context",
    "env_bool",
    "env_int",
    "env_str",
    "in_analysis_mode",
    "in_desktop_mode",
    "in_lambda",
    "in_test_mode",
]

_TRUE_STRINGS = frozenset({"1", "true", "yes", "on", "y", "t"})
_FALSE_STRINGS = frozenset({"0", "false", "no", "off", "n", "f"})

_tls = threading.local()


@dataclass
class TLSAttrs:
    """Thread-local flags for execution context."""

    in_code_analyzer: bool = False
    in_lambda_override: bool | None = None
    in_test_mode_override: bool | None = None
    in_desktop_mode_override: bool | None = None


def _get_tls() -> TLSAttrs:
    """Return the current thread's TLSAttrs instance, initializing if needed."""
    try:
        return _tls.state
    except AttributeError:
        _tls.state = TLSAttrs()
        return _tls.state


@contextmanager
def analysis_mode_context() -> Iterator[None]:
    """
    Temporarily enable analysis mode on this thread.

    While active, CoreLogger drops every record. Nested contexts restore the
    previous value on exit.
    """
    tls = _get_tls()
    previous_state = tls.in_code_analyzer
    tls.in_code_analyzer = True
    try:
        yield
    finally:
        tls.in_code_analyzer = previous_state


def in_analysis_mode() -> bool:
    """Return True if analysis mode is active on this thread."""
    return _get_tls().in_code_analyzer


def in_lambda(
    *,
    unset_override: bool = False,
    override: bool | None = None,
) -> bool:
    """
    Check if running in an AWS Lambda environment, with optional override.

    :param unset_override: If True, clears any prior override for this thread.
    :param override: If True or False, sets the override for this thread.
    :return: True if in Lambda context, False otherwise.
    """
    tls = _get_tls()
    if unset_override:
        tls.in_lambda_override = None
    if override is not None:
        tls.in_lambda_override = override
        return override
    if tls.in_lambda_override is not None:
        return tls.in_lambda_override
    return bool(os.environ.get("AWS_LAMBDA_FUNCTION_NAME") or os.environ.get("LAMBDA_RUNTIME_DIR"))


def in_test_mode(
    *,
    unset_override: bool = False,
    override: bool | None = None,
) -> bool:
    """
    Check if running under a test runner, with optional override.

    Test mode is never reported while analysis mode is active.

    :param unset_override: If True, clears any prior override for this thread.
    :param override: If True or False, sets the override for this thread.
    :return: True if test mode is active, False otherwise.
    """
    if in_analysis_mode():
        return False

    tls = _get_tls()
    if unset_override:
        tls.in_test_mode_override = None
    if override is not None:
        tls.in_test_mode_override = override
        return override
    if tls.in_test_mode_override is not None:
        return tls.in_test_mode_override
    if "pytest" in sys.modules:
        return True
    return bool(os.environ.get("PYTEST_CURRENT_TEST"))


def in_desktop_mode(
    *,
    unset_override: bool = False,
    override: bool | None = None,
) -> bool:
    """
    Determine if log output is meant for an interactive terminal.

    Rules:
      - Explicit override wins.
      - True in test mode.
      - False in analysis or Lambda environments.
      - Otherwise True.

    :param unset_override: If True, clears any prior override for this thread.
    :param override: If True or False, sets the override for this thread.
    :return: True if desktop mode is active, False otherwise.
    """
    tls = _get_tls()
    if unset_override:
        tls.in_desktop_mode_override = None
    if override is not None:
        tls.in_desktop_mode_override = override
        return override
    if tls.in_desktop_mode_override is not None:
        return tls.in_desktop_mode_override

    if in_test_mode():
        return True
    if in_analysis_mode():
        return False
    return not in_lambda()


def env_str(name: str, default: str = "") -> str:
    """
    Return the stripped value of an environment variable after loading `.env`.

    :param name: Environment variable name.
    :param default: Value returned when the variable is unset or blank.
    """
    fs_load_dotenv()
    value = os.environ.get(name, "").strip()
    return value or default


def env_bool(name: str, default: bool) -> bool:
    """
    Return an environment variable parsed as a boolean.

    Unrecognized values yield `default` rather than raising, so a typo in a
    `.env` file never prevents a dump from being produced.
    """
    value = env_str(name).lower()
    if value in _TRUE_STRINGS:
        return True
    if value in _FALSE_STRINGS:
        return False
    return default


def env_int(name: str, default: int) -> int:
    """Return an environment variable parsed as a decimal integer, else `default`."""
    return int_from_string(env_str(name), default)


# End of file: src/mstair/textdump/base/config.py
