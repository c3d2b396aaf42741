# File: src/mstair/textdump/custom_format.py
"""
Custom value formatting declared with `value_format="ToString"`, `dump_class` or `dump_method`.

Resolution for one member:
1. `value_format == "ToString"`: `str(value)`.
2. `dump_class` given: a static one-parameter method named `dump_method`
   (default "dump") in the `dump_class` MRO; an exact parameter annotation
   match wins over an assignable one, an unannotated parameter counts as
   assignable. No match renders the `***` diagnostic.
3. only `dump_method` given: a no-argument instance method of the value,
   then a static one-parameter method of the value's class, then of the
   metadata class. No match falls back to default rendering.

A formatter returning something other than a str also falls back to
default rendering. Lookups are memoized per (value class, attribute, metadata).
"""

from __future__ import annotations

import enum
import inspect
from collections.abc import Callable
from typing import Any, Final, TypeAlias

from mstair.textdump.base.rw_lock import ReaderWriterLock
from mstair.textdump.dump_attribute import DumpAttribute
from mstair.textdump.dump_format import DumpFormat
from mstair.textdump.dump_text_writer import DumpTextWriter
from mstair.textdump.xlogging.logger_factory import create_logger


__all__ = ["DEFAULT_DUMP_METHOD", "MISSING", "dumped_custom", "find_formatter", "reset_formatters"]

LOG = create_logger(__name__)

DEFAULT_DUMP_METHOD: Final[str] = "dump"


class _Match(enum.IntEnum):
    NONE = 0
    ASSIGNABLE = 1
    EXACT = 2


class _Missing:
    """Marker for a `dump_class` without a matching method."""

    __slots__ = ()


MISSING: Final[_Missing] = _Missing()

Formatter: TypeAlias = Callable[[Any], Any]

_formatters: dict[tuple[type, DumpAttribute, type | None], Formatter | _Missing | None] = {}
_formatters_lock = ReaderWriterLock()


def _parameter_match(func: Any, value_type: type) -> _Match:
    """How well the single parameter of `func` accepts `value_type`."""
    try:
        signature = inspect.signature(func, eval_str=True)
    except (NameError, SyntaxError, TypeError):
        try:
            signature = inspect.signature(func)
        except (TypeError, ValueError):
            return _Match.NONE
    except ValueError:
        return _Match.NONE

    parameters = [
        p
        for p in signature.parameters.values()
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD) and p.default is p.empty
    ]
    if len(parameters) != 1:
        return _Match.NONE

    annotation = parameters[0].annotation
    if annotation is value_type:
        return _Match.EXACT
    if annotation is inspect.Parameter.empty or not isinstance(annotation, type):
        return _Match.ASSIGNABLE
    return _Match.ASSIGNABLE if issubclass(value_type, annotation) else _Match.NONE


def _static_method(owner: type, name: str, value_type: type) -> Formatter | None:
    """Best static (or class) one-parameter method `name` in the MRO of `owner`."""
    best: tuple[_Match, Formatter] | None = None
    for klass in owner.__mro__:
        raw = vars(klass).get(name)
        if isinstance(raw, staticmethod):
            func: Any = raw.__func__
        elif isinstance(raw, classmethod):
            func = getattr(owner, name)
        else:
            continue
        match = _parameter_match(func, value_type)
        if match is _Match.EXACT:
            return func
        if match is _Match.ASSIGNABLE and best is None:
            best = (match, func)
    return best[1] if best is not None else None


def _instance_method(value_type: type, name: str) -> Formatter | None:
    """A plain function `name` taking only `self`, called as a bound method."""
    raw = inspect.getattr_static(value_type, name, None)
    if inspect.isfunction(raw) and _parameter_match(raw, value_type) is not _Match.NONE:
        return lambda value: getattr(value, name)()
    return None


def find_formatter(
    value_type: type,
    dump_attribute: DumpAttribute,
    metadata: type | None = None,
) -> Formatter | _Missing | None:
    """
    Return the formatter for values of `value_type`, MISSING, or None for default rendering.

    :param value_type: Runtime class of the value.
    :param dump_attribute: Attribute declaring `dump_class` / `dump_method`.
    :param metadata: Metadata class of the class declaring the member.
    """
    key = (value_type, dump_attribute, metadata)
    with _formatters_lock.read_locked():
        if key in _formatters:
            return _formatters[key]

    found: Formatter | _Missing | None
    method_name = dump_attribute.dump_method or DEFAULT_DUMP_METHOD
    if dump_attribute.dump_class is not None:
        found = _static_method(dump_attribute.dump_class, method_name, value_type) or MISSING
    else:
        found = (
            _instance_method(value_type, method_name)
            or _static_method(value_type, method_name, value_type)
            or (_static_method(metadata, method_name, value_type) if metadata is not None else None)
        )

    with _formatters_lock.write_locked():
        found = _formatters.setdefault(key, found)
    LOG.debug("formatter for %s.%s: %s", value_type.__qualname__, method_name, repr(found))
    return found


def dumped_custom(
    writer: DumpTextWriter,
    value: Any,
    dump_attribute: DumpAttribute,
    metadata: type | None = None,
) -> bool:
    """
    Write `value` with its custom formatter.

    :return: False if the value must be rendered the default way.
    """
    if dump_attribute.is_to_string:
        writer.write(str(value))
        return True
    if dump_attribute.dump_class is None and not dump_attribute.dump_method:
        return False

    formatter = find_formatter(type(value), dump_attribute, metadata)
    if formatter is None:
        return False
    if isinstance(formatter, _Missing):
        dump_class = dump_attribute.dump_class
        writer.write(
            DumpFormat.CUSTOM_FORMATTER_NOT_FOUND.format(
                dump_attribute.dump_method or DEFAULT_DUMP_METHOD,
                type(value).__qualname__,
                dump_class.__qualname__ if dump_class is not None else "",
            )
        )
        return True

    text = formatter(value)
    if not isinstance(text, str):
        return False
    writer.write(text)
    return True


def reset_formatters() -> None:
    """Forget every resolved formatter."""
    with _formatters_lock.write_locked():
        _formatters.clear()


# End of file: src/mstair/textdump/custom_format.py
