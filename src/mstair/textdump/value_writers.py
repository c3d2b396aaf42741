# File: src/mstair/textdump/value_writers.py
"""
Single-line renderers for basic values, callables and class objects.

These writers never recurse: anything they do not handle is rendered by the
dumper as a nested object.
"""

from __future__ import annotations

import enum
import functools
import types
from typing import Any

from mstair.textdump.class_metadata import get_max_to_dump
from mstair.textdump.dump_attribute import DumpAttribute
from mstair.textdump.dump_format import DumpFormat
from mstair.textdump.dump_text_writer import DumpTextWriter
from mstair.textdump.type_helpers import is_basic_value, is_delegate, is_member_info


__all__ = [
    "bytes_text",
    "delegate_text",
    "member_info_text",
    "write_basic_value",
    "write_delegate",
    "write_member_info",
]

_PLAIN_VALUE_FORMAT = "{0}"


def write_basic_value(writer: DumpTextWriter, value: Any, dump_attribute: DumpAttribute | None = None) -> bool:
    """
    Write `value` if it is None or a basic value.

    :param writer: Destination.
    :param value: The value to render.
    :param dump_attribute: Attribute of the member holding the value (masking, truncation, format).
    :return: True if the value was written.
    """
    if value is None:
        writer.write(DumpFormat.NULL)
        return True
    if not is_basic_value(value):
        return False

    attribute = dump_attribute or DumpAttribute.DEFAULT
    if attribute.mask:
        writer.write(attribute.mask_value)
    elif isinstance(value, (bytes, bytearray, memoryview)):
        writer.write(bytes_text(value, attribute))
    else:
        writer.write(_basic_text(value, attribute))
    return True


def _basic_text(value: Any, attribute: DumpAttribute) -> str:
    value_format = attribute.value_format
    if value_format is not None and value_format != _PLAIN_VALUE_FORMAT and not attribute.is_to_string:
        return value_format.format(value)
    if isinstance(value, enum.Flag):
        return _flag_text(value)
    if isinstance(value, enum.Enum):
        return DumpFormat.ENUM.format(type(value).__name__, value.name)
    if isinstance(value, str):
        if 0 < attribute.max_length < len(value):
            return value[: attribute.max_length] + DumpFormat.STRING_TRUNCATED
        return value
    return str(value)


def _flag_text(value: enum.Flag) -> str:
    names = [member.name for member in value if member.name]
    if len(names) == 1:
        return DumpFormat.ENUM.format(type(value).__name__, names[0])
    return DumpFormat.ENUM_FLAG.format(type(value).__name__, DumpFormat.ENUM_FLAG_SEPARATOR.join(names) or "0")


def bytes_text(value: bytes | bytearray | memoryview, dump_attribute: DumpAttribute | None = None) -> str:
    """Render a byte buffer as `bytes[3]: 0a-0b-0c`, truncated per `get_max_to_dump`."""
    data = value.tobytes() if isinstance(value, memoryview) else bytes(value)
    count = len(data)
    max_to_dump = get_max_to_dump(dump_attribute, count)
    text = DumpFormat.SEQUENCE_TYPE_NAME.format(type(value).__name__, count)
    text += DumpFormat.BYTES_SEPARATOR.join(f"{b:02x}" for b in data[:max_to_dump])
    if max_to_dump < count:
        text += DumpFormat.SEQUENCE_DUMP_TRUNCATED.format(max_to_dump, count)
    return text


def delegate_text(value: Any) -> str:
    """
    Render a callable as `static Owner.name` (functions) or `Owner.name` (bound methods).
    """
    if isinstance(value, functools.partial):
        return delegate_text(value.func)

    name = getattr(value, "__name__", type(value).__name__)
    bound_to = getattr(value, "__self__", None)
    if isinstance(value, types.MethodType | types.BuiltinMethodType | types.MethodWrapperType) and not (
        bound_to is None or isinstance(bound_to, types.ModuleType)
    ):
        if isinstance(bound_to, type):
            return DumpFormat.STATIC_DELEGATE.format(bound_to.__qualname__, name)
        return DumpFormat.DELEGATE.format(type(bound_to).__qualname__, name)

    qualname: str = getattr(value, "__qualname__", name)
    owner = qualname.rsplit(".", 1)[0] if "." in qualname else getattr(value, "__module__", None) or "builtins"
    return DumpFormat.STATIC_DELEGATE.format(owner, name)


def write_delegate(writer: DumpTextWriter, value: Any) -> bool:
    if not is_delegate(value):
        return False
    writer.write(delegate_text(value))
    return True


def member_info_text(value: Any) -> str:
    """Render a class, module, property or method wrapper by its identity."""
    if isinstance(value, type):
        return DumpFormat.TYPE_INFO.format(value.__module__, value.__qualname__)
    if isinstance(value, types.ModuleType):
        return DumpFormat.MODULE_INFO.format(value.__name__)
    if isinstance(value, property):
        getter = value.fget
        return DumpFormat.PROPERTY_INFO.format(getattr(getter, "__qualname__", repr(getter)))
    func = value.__func__
    kind = "StaticMethod" if isinstance(value, staticmethod) else "ClassMethod"
    return DumpFormat.METHOD_INFO.format(kind, getattr(func, "__qualname__", repr(func)))


def write_member_info(writer: DumpTextWriter, value: Any) -> bool:
    if not is_member_info(value):
        return False
    writer.write(member_info_text(value))
    return True


# End of file: src/mstair/textdump/value_writers.py
