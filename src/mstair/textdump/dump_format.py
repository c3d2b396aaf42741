# File: src/mstair/textdump/dump_format.py
"""
Format strings used for every piece of dump text.

All values are plain class attributes so an application can restyle the
output process-wide; `DumpFormat.reset()` restores the defaults. Positional
placeholders follow `str.format()`.
"""

from __future__ import annotations

from typing import ClassVar


__all__ = ["DumpFormat"]


class DumpFormat:
    """Process-wide dump text formats."""

    # {0}: type name, {1}: module, {2}: qualified name
    TYPE: ClassVar[str] = "{0} ({1}.{2}):"
    # {0}: type name
    CYCLICAL_REFERENCE: ClassVar[str] = "{0} (see above)"
    # {0}: member name
    DEFAULT_PROPERTY_LABEL: ClassVar[str] = "{0:<24} = "
    NULL: ClassVar[str] = "<null>"
    # {0}: exception message or class name
    GETTER_FAILED: ClassVar[str] = "<{0}>"
    STRING_TRUNCATED: ClassVar[str] = "..."
    MASK_VALUE: ClassVar[str] = "******"
    # {0}: enum class name, {1}: member name
    ENUM: ClassVar[str] = "{0}.{1}"
    # {0}: flag class name, {1}: member names joined by ENUM_FLAG_SEPARATOR
    ENUM_FLAG: ClassVar[str] = "{0} ({1})"
    ENUM_FLAG_SEPARATOR: ClassVar[str] = " | "
    # {0}: owner (class qualname or module), {1}: function name
    DELEGATE: ClassVar[str] = "{0}.{1}"
    STATIC_DELEGATE: ClassVar[str] = "static {0}.{1}"
    # {0}: module, {1}: qualified name
    TYPE_INFO: ClassVar[str] = "(Type): {0}.{1}"
    # {0}: module name
    MODULE_INFO: ClassVar[str] = "(Module): {0}"
    # {0}: getter qualified name
    PROPERTY_INFO: ClassVar[str] = "(Property): {0}"
    # {0}: wrapper kind, {1}: function qualified name
    METHOD_INFO: ClassVar[str] = "({0}): {1}"
    # {0}: type name, {1}: element count
    SEQUENCE_TYPE_NAME: ClassVar[str] = "{0}[{1}]: "
    # {0}: type name, {1}: module, {2}: qualified name
    SEQUENCE_TYPE: ClassVar[str] = "({1}.{2})"
    # {0}: dumped element count, {1}: total element count
    SEQUENCE_DUMP_TRUNCATED: ClassVar[str] = "... dumped the first {0}/{1} elements."
    BYTES_SEPARATOR: ClassVar[str] = "-"
    DICTIONARY_BEGIN: ClassVar[str] = "{"
    DICTIONARY_END: ClassVar[str] = "}"
    DICTIONARY_KEY_BEGIN: ClassVar[str] = "["
    DICTIONARY_KEY_END: ClassVar[str] = "] = "
    MAX_DEPTH_REACHED: ClassVar[str] = (
        "...object dump reached the maximum depth level. "
        "Use DumpAttribute.max_depth to increase the depth level if needed."
    )
    # {0}: maximum length
    LENGTH_EXCEEDED: ClassVar[str] = (
        "...\nThe dump exceeded the maximum length of {0} characters. Either increase the value of the "
        "dump settings max_dump_length or limit the object graph."
    )
    # {0}: method name, {1}: value type name, {2}: formatter class name
    CUSTOM_FORMATTER_NOT_FOUND: ClassVar[str] = (
        "*** Could not find a public, static, method {0}, with return type of str, "
        "with a single parameter of type {1} in the class {2}."
    )
    # {0}: formatted traceback
    DUMPER_EXCEPTION: ClassVar[str] = "ATTENTION:\nThe TextDumper threw an exception:\n{0}"

    _defaults: ClassVar[dict[str, str]] = {}

    @classmethod
    def reset(cls) -> None:
        """Restore every format to its default value."""
        for name, value in cls._defaults.items():
            setattr(cls, name, value)


DumpFormat._defaults = {
    name: value for name, value in vars(DumpFormat).items() if name.isupper() and isinstance(value, str)
}


# End of file: src/mstair/textdump/dump_format.py
