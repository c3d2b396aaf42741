# File: src/mstair/textdump/xlogging/core_logger.py
"""
Logger class used by every textdump module.

Example:
    >>> from mstair.textdump.xlogging.logger_factory import create_logger
    >>> LOG = create_logger(__name__)
    >>> LOG.trace("built script for %s", "pkg.Klass")
    >>> with LOG.prefix_with("[cache]"):
    ...     LOG.debug("hit")

Design:
- Only the root logger owns a handler; CoreLogger instances propagate.
- Per-logger levels come from LogLevelConfig (environment driven).
- Non-primitive arguments are rendered with `dump_text()` before formatting,
  so a record never holds a reference to a live object graph.
"""

from __future__ import annotations

import contextvars
import inspect
import logging
import os
import re
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from types import FrameType
from typing import Any, ClassVar, TextIO

import mstair.textdump.base.config as cfg
from mstair.textdump.base.types import PRIMITIVE_TYPES
from mstair.textdump.xlogging.logger_constants import K_KLASS_NAME, TRACE, initialize_logger_constants
from mstair.textdump.xlogging.logger_formatter import CoreFormatter
from mstair.textdump.xlogging.logger_util import LogLevelConfig


__all__ = ["CoreLogger", "initialize_root"]

_LOG_KWARGS_FORBIDDEN: frozenset[str] = frozenset({"filename", "lineno", "msg", "args", "levelname", "levelno"})
_LOG_KWARGS_STANDARD: frozenset[str] = frozenset({"exc_info", "stack_info", "stacklevel"})
_LOG_ROOT_ATTR_NAME = "_textdump_corelogger_initialized"
_LOG_ARG_MAX_LENGTH = 4096


@dataclass(slots=True, frozen=True)
class _CallerInfo:
    filename: str
    lineno: int
    func_name: str
    class_name: str


_cached_caller_info: contextvars.ContextVar[_CallerInfo | None] = contextvars.ContextVar(
    "textdump_cached_caller_info", default=None
)
_log_prefix: contextvars.ContextVar[str] = contextvars.ContextVar("textdump_log_prefix", default="")


class CoreLogger(logging.Logger):
    """
    logging.Logger with a TRACE level, scoped prefixes and caller class names.

    Handlers are never attached here; records propagate to the root logger
    configured by initialize_root().
    """

    _INTERNAL_FRAME_OFFSET: ClassVar[int] = 2  # log() + the level wrapper

    def __init__(self, name: str, level: int | str = logging.NOTSET) -> None:
        initialize_logger_constants()
        if level in {logging.NOTSET, "NOTSET", ""}:
            level = LogLevelConfig.get_instance().get_effective_level(name)
        super().__init__(name, level)

        root_level = logging.getLogger().getEffectiveLevel()
        if self.level < root_level:
            self.setLevel(root_level)

    def __repr__(self) -> str:
        level = self.getEffectiveLevel()
        return f"<{type(self).__name__} '{self.name}' {logging.getLevelName(level)}={level}>"

    def log(self, level: int, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        """Emit a record through the standard handler chain with caller context attached."""
        initialize_root()
        if cfg.in_analysis_mode():
            return
        if not self.isEnabledFor(level):
            return

        _validate_and_move_kwargs_to_extra(kwargs)
        stacklevel: int = kwargs.pop("stacklevel", 1) + self._INTERNAL_FRAME_OFFSET
        caller = _find_caller(stacklevel)

        extra: dict[str, Any] = kwargs.setdefault("extra", {})
        if caller.class_name:
            extra[K_KLASS_NAME] = caller.class_name

        args = _normalize_unsupported_args(*args)
        msg: Any = args[0] if args else ""
        if prefix := _log_prefix.get():
            msg = f"{prefix}{msg}"

        token = _cached_caller_info.set(caller)
        try:
            super().log(
                level,
                msg,
                *args[1:],
                exc_info=kwargs.get("exc_info"),
                stack_info=kwargs.get("stack_info", False),
                stacklevel=1,
                extra=extra,
            )
        finally:
            _cached_caller_info.reset(token)

    def findCaller(self, stack_info: bool = False, stacklevel: int = 1) -> tuple[str, int, str, str | None]:
        """Return the call site resolved by log(), falling back to the stdlib walk."""
        if (info := _cached_caller_info.get()) is not None and not stack_info:
            return (info.filename, info.lineno, info.func_name, None)
        return super().findCaller(stack_info=stack_info, stacklevel=stacklevel)

    def trace(self, *args: Any, **kwargs: Any) -> None:
        """Log a message at TRACE level (below DEBUG)."""
        self.log(TRACE, *args, **kwargs)

    def debug(self, *args: Any, **kwargs: Any) -> None:
        self.log(logging.DEBUG, *args, **kwargs)

    def info(self, *args: Any, **kwargs: Any) -> None:
        self.log(logging.INFO, *args, **kwargs)

    def warning(self, *args: Any, **kwargs: Any) -> None:
        self.log(logging.WARNING, *args, **kwargs)

    def error(self, *args: Any, **kwargs: Any) -> None:
        self.log(logging.ERROR, *args, **kwargs)

    def critical(self, *args: Any, **kwargs: Any) -> None:
        self.log(logging.CRITICAL, *args, **kwargs)

    def exception(self, *args: Any, **kwargs: Any) -> None:
        """Log at ERROR level with the active exception attached."""
        kwargs.setdefault("exc_info", True)
        self.log(logging.ERROR, *args, **kwargs)

    @contextmanager
    def prefix_with(self, prefix: str) -> Iterator[None]:
        """
        Prefix every message logged in the current context.

        Nested prefixes accumulate; the state lives in a ContextVar so threads
        and tasks never see each other's prefixes.

        :param prefix: Text placed before each message, followed by " > ".
        """
        token = _log_prefix.set(_log_prefix.get() + prefix + " > ")
        try:
            yield
        finally:
            _log_prefix.reset(token)


def initialize_root(
    fmt: str | None = None,
    datefmt: str | None = None,
    level: int | str | None = None,
    force: bool = False,
) -> None:
    """
    Idempotently give the root logger one stderr handler with CoreFormatter.

    State is kept as an attribute of the root logger. Handlers the host
    application installed on other streams are left alone.

    :param fmt: Format string, default `LOG_FORMAT` or the package format.
    :param datefmt: Date format, default `LOG_DATEFMT` or `%-I:%M%p`. Without a
        `%` directive the timestamp is removed from the format.
    :param level: Root level; when None a NOTSET root is raised to WARNING.
    :param force: Replace an existing stderr handler.
    """
    root = logging.getLogger()
    if getattr(root, _LOG_ROOT_ATTR_NAME, False) and not force:
        return
    setattr(root, _LOG_ROOT_ATTR_NAME, True)
    initialize_logger_constants()

    if force:
        root.handlers = [h for h in root.handlers if not _is_stderr_handler(h)]

    fmt = fmt or os.environ.get("LOG_FORMAT", "%(levelName)s %(asctime)s %(fileAndLine)s %(klassAndMethod)s %(message)s")
    datefmt = os.environ.get("LOG_DATEFMT", "%-I:%M%p") if datefmt is None else datefmt
    if "%" not in datefmt:
        fmt = re.sub(r"\s*%\(asctime\)s\s*", " ", fmt)
        datefmt = None

    stderr_handlers = [h for h in root.handlers if _is_stderr_handler(h)]
    if not stderr_handlers:
        handler: logging.StreamHandler[TextIO] = logging.StreamHandler(sys.stderr)
        handler.setFormatter(CoreFormatter(fmt, datefmt))
        root.addHandler(handler)
    elif not any(isinstance(h.formatter, CoreFormatter) for h in stderr_handlers):
        stderr_handlers[0].setFormatter(CoreFormatter(fmt, datefmt))

    if level is not None:
        if isinstance(level, str):
            level = logging.getLevelNamesMapping().get(level.upper(), logging.WARNING)
        root.setLevel(level)
    elif root.getEffectiveLevel() == logging.NOTSET:
        root.setLevel(logging.WARNING)


def _is_stderr_handler(handler: logging.Handler) -> bool:
    return isinstance(handler, logging.StreamHandler) and handler.stream is sys.stderr


def _find_caller(stacklevel: int) -> _CallerInfo:
    """
    Walk `stacklevel` frames up from log(), skipping context-manager plumbing.

    :param stacklevel: 1 is the caller of log().
    """
    frame: FrameType | None = inspect.currentframe()
    frame = frame.f_back if frame is not None else None  # log()
    depth = 1
    while frame is not None and frame.f_back is not None:
        if depth >= stacklevel and frame.f_code.co_filename != __file__ and not _is_noise_frame(frame):
            break
        frame = frame.f_back
        depth += 1
    if frame is None:
        return _CallerInfo("<unknown file>", 0, "<unknown>", "")
    return _CallerInfo(
        filename=frame.f_code.co_filename,
        lineno=frame.f_lineno,
        func_name=frame.f_code.co_name,
        class_name=_frame_class_name(frame),
    )


def _is_noise_frame(frame: FrameType) -> bool:
    name = frame.f_code.co_name
    return name in {"__enter__", "__exit__", "__call__"} or frame.f_code.co_filename == "<string>"


def _frame_class_name(frame: FrameType) -> str:
    local_vars = frame.f_locals
    if (zelf := local_vars.get("self")) is not None:
        return type(zelf).__name__
    if isinstance(cls_obj := local_vars.get("cls"), type):
        return cls_obj.__name__
    return ""


def _validate_and_move_kwargs_to_extra(kwargs: dict[str, Any]) -> None:
    """
    Move non-standard keyword arguments into `extra`.

    :raises ValueError: If a keyword would overwrite a LogRecord field.
    """
    for key, value in list(kwargs.items()):
        if key in _LOG_KWARGS_FORBIDDEN:
            raise ValueError(f"Invalid keyword argument {key!r} for log()")
        if key not in _LOG_KWARGS_STANDARD and key != "extra":
            kwargs.pop(key)
            kwargs.setdefault("extra", {})[key] = value


def _normalize_unsupported_args(*args: Any) -> tuple[Any, ...]:
    """
    Replace non-primitive arguments with their dump text.

    A failing dump yields an `<unserializable: ...>` placeholder so that a
    broken object never prevents the record from being emitted.
    """
    from mstair.textdump.dump_api import dump_text  # dump_api logs through this module

    normalized: list[Any] = []
    for arg in args:
        if isinstance(arg, PRIMITIVE_TYPES):
            normalized.append(arg)
            continue
        try:
            normalized.append(dump_text(arg, max_dump_length=_LOG_ARG_MAX_LENGTH))
        except Exception as exc:
            normalized.append(f"<unserializable: {type(arg).__name__}: {exc}>")
    return tuple(normalized)


# End of file: src/mstair/textdump/xlogging/core_logger.py
