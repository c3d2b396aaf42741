# File: src/mstair/textdump/type_helpers.py
"""
Runtime classification of values and classes for the dumper.
"""

from __future__ import annotations

import datetime
import enum
import functools
import sys
import types
import uuid
from collections.abc import Collection, Mapping
from pathlib import PurePath
from typing import Any, Final

from mstair.textdump.base.types import BUFFER_TYPES, PRIMITIVE_TYPES


__all__ = [
    "BASIC_TYPES",
    "DELEGATE_TYPES",
    "MEMBER_INFO_TYPES",
    "is_basic_value",
    "is_collection_type",
    "is_custom_collection",
    "is_delegate",
    "is_dictionary",
    "is_member_info",
    "is_system_type",
    "type_identity",
]

BASIC_TYPES: Final[tuple[type, ...]] = (
    *PRIMITIVE_TYPES,
    *BUFFER_TYPES,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    datetime.tzinfo,
    uuid.UUID,
    PurePath,
    enum.Enum,
)

DELEGATE_TYPES: Final[tuple[type, ...]] = (
    types.FunctionType,
    types.LambdaType,
    types.MethodType,
    types.BuiltinFunctionType,
    types.BuiltinMethodType,
    types.MethodWrapperType,
    functools.partial,
)

MEMBER_INFO_TYPES: Final[tuple[type, ...]] = (type, types.ModuleType, property, staticmethod, classmethod)

_SYSTEM_MODULES: Final[frozenset[str]] = frozenset(sys.stdlib_module_names) | {"builtins"}


def is_basic_value(value: Any) -> bool:
    """True for values rendered on one line without a type header."""
    return isinstance(value, BASIC_TYPES)


def is_delegate(value: Any) -> bool:
    return isinstance(value, DELEGATE_TYPES)


def is_member_info(value: Any) -> bool:
    """True for class objects, modules, properties and method wrappers."""
    return isinstance(value, MEMBER_INFO_TYPES)


@functools.cache
def is_system_type(cls: type) -> bool:
    """True if `cls` is defined by the interpreter or the standard library."""
    module = getattr(cls, "__module__", None) or ""
    return module.split(".", 1)[0] in _SYSTEM_MODULES


def is_dictionary(value: Any) -> bool:
    return isinstance(value, Mapping)


def is_collection_type(cls: type) -> bool:
    """True for mapping and sequence classes other than strings and byte buffers."""
    return issubclass(cls, Collection) and not issubclass(cls, (str, *BUFFER_TYPES))


def is_custom_collection(cls: type) -> bool:
    """True for mappings and sequences whose class is not a system type."""
    return is_collection_type(cls) and not is_system_type(cls)


def type_identity(cls: type) -> tuple[str, str, str]:
    """Return (name, module, qualified name) of `cls` for header formats."""
    return (cls.__name__, cls.__module__, cls.__qualname__)


# End of file: src/mstair/textdump/type_helpers.py
