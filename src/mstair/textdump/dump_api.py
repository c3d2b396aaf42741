# File: src/mstair/textdump/dump_api.py
"""
Module-level entry points.

Example:
    >>> print(dump_text(Point(1, 2)))
    Point (geometry.Point):
      x                        = 1
      y                        = 2
    >>> dump_text(big_graph, max_dump_length=4096, use_dump_script_cache=False)
"""

from __future__ import annotations

import dataclasses
from typing import Any, Final

from mstair.textdump.dump_attribute import DumpAttribute
from mstair.textdump.dump_script import Script
from mstair.textdump.dump_settings import DumpSettings
from mstair.textdump.errors import DumpConfigurationError
from mstair.textdump.object_text_dumper import ObjectTextDumper


__all__ = ["compile_script", "dump_text"]

_SETTINGS_OPTIONS: Final[frozenset[str]] = frozenset(f.name for f in dataclasses.fields(DumpSettings))
_DUMP_OPTIONS: Final[frozenset[str]] = frozenset({"dump_metadata", "dump_attribute", "initial_indent_level"})


def _settings_from_options(settings: DumpSettings | None, options: dict[str, Any]) -> DumpSettings:
    unknown = set(options) - _SETTINGS_OPTIONS
    if unknown:
        raise DumpConfigurationError(f"Unknown dump option(s): {', '.join(sorted(unknown))}")
    base = settings or ObjectTextDumper.default_dump_settings()
    return base.replace(**options) if options else base


def dump_text(value: Any, settings: DumpSettings | None = None, **options: Any) -> str:
    """
    Render `value` as indented text.

    :param value: Root of the object graph.
    :param settings: Base settings; the process-wide defaults when omitted.
    :param options: `dump_metadata`, `dump_attribute`, `initial_indent_level`,
        or any DumpSettings field overriding `settings`.
    :raises DumpConfigurationError: On an unknown option or an invalid value.
    """
    dump_options = {name: options.pop(name) for name in _DUMP_OPTIONS if name in options}
    dumper = ObjectTextDumper(settings=_settings_from_options(settings, options))
    return dumper.dump(value, **dump_options).text


def compile_script(
    cls: type,
    dump_metadata: type | None = None,
    dump_attribute: DumpAttribute | None = None,
    settings: DumpSettings | None = None,
) -> Script:
    """
    Return the compiled script for instances of `cls`, publishing it in the script cache when enabled.

    Call the script as `script(instance, script.class_dump_data, dumper)`.
    """
    return ObjectTextDumper(settings=settings).compile_script(cls, dump_metadata, dump_attribute)


# End of file: src/mstair/textdump/dump_api.py
