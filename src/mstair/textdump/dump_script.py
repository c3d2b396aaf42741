# File: src/mstair/textdump/dump_script.py
"""
Dump scripts: precompiled rendering procedures for one class and configuration.

A script is a frozen tuple of instructions. An instruction is a closure
over everything the build walk resolved for the class (member list, order,
attributes, labels, null policy, header text) and takes a `ScriptFrame`
holding the instance being rendered. An instruction returning True ends the
script early (None instance, object already rendered).

Property instructions are grouped into conditional blocks: the block reads
the member value once into the frame, skips itself for a None value when
nulls are not dumped, and otherwise runs its write-line, label and value
instructions.

The same instruction factories drive the uncached renderer, so cached and
uncached output are identical by construction.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeAlias

from mstair.textdump.class_metadata import ClassDumpData, get_max_to_dump
from mstair.textdump.custom_format import dumped_custom
from mstair.textdump.dump_attribute import DumpAttribute, ShouldDump
from mstair.textdump.dump_format import DumpFormat
from mstair.textdump.dump_settings import MemberVisibility
from mstair.textdump.member_info import DumpMember, MemberKind, undeclared_attribute_names
from mstair.textdump.member_resolver import get_member_dump_attribute
from mstair.textdump.type_helpers import is_dictionary, type_identity
from mstair.textdump.value_writers import (
    delegate_text,
    member_info_text,
    write_basic_value,
    write_delegate,
    write_member_info,
)
from mstair.textdump.xlogging.logger_factory import create_logger


if TYPE_CHECKING:
    from mstair.textdump.object_text_dumper import ObjectTextDumper


__all__ = [
    "DumpScript",
    "Instruction",
    "Script",
    "ScriptFrame",
    "dump_collection",
    "dump_member_value",
    "read_member_value",
]

LOG = create_logger(__name__)


@dataclass(slots=True)
class ScriptFrame:
    """Runtime state of one script invocation."""

    instance: Any
    class_dump_data: ClassDumpData
    dumper: ObjectTextDumper
    value: Any = None
    value_failed: bool = False


Instruction: TypeAlias = Callable[[ScriptFrame], bool]


# ---------- Runtime helpers ----------


def read_member_value(instance: Any, member: DumpMember) -> tuple[Any, bool]:
    """
    Read a member value; a failing getter yields its `<message>` text.

    :return: (value, failed)
    """
    try:
        return member.get_value(instance), False
    except Exception as exc:
        LOG.trace("getter %s failed: %s", repr(member), type(exc).__name__)
        return DumpFormat.GETTER_FAILED.format(str(exc) or type(exc).__name__), True


def dump_member_value(
    dumper: ObjectTextDumper,
    value: Any,
    dump_attribute: DumpAttribute,
    metadata: type | None,
) -> None:
    """Render one member value after its label: custom, basic, callable, class, else nested object."""
    writer = dumper.writer
    if value is None:
        writer.write(DumpFormat.NULL)
        return
    if dump_attribute.has_custom_format and dumped_custom(writer, value, dump_attribute, metadata):
        return
    if write_basic_value(writer, value, dump_attribute):
        return
    if write_delegate(writer, value) or write_member_info(writer, value):
        return
    dumper.dump_object(value, None, None if dump_attribute.is_default else dump_attribute)


def _dump_element(dumper: ObjectTextDumper, value: Any) -> None:
    if write_basic_value(dumper.writer, value) or write_delegate(dumper.writer, value):
        return
    if write_member_info(dumper.writer, value):
        return
    dumper.dump_object(value)


def dump_collection(
    dumper: ObjectTextDumper,
    instance: Any,
    class_dump_data: ClassDumpData,
    is_custom: bool,
) -> None:
    """
    Render a sequence or mapping: header, then one element per line, then a truncation line.

    Mappings wrap their `[key] = value` lines in braces. With recursion
    skipped only the header is written.
    """
    writer = dumper.writer
    dump_attribute = class_dump_data.dump_attribute
    object_type = type(instance)
    count = len(instance)
    max_to_dump = get_max_to_dump(dump_attribute, count)

    if is_custom:
        writer.write_line()
    writer.write(DumpFormat.SEQUENCE_TYPE_NAME.format(object_type.__name__, count))
    writer.write(DumpFormat.SEQUENCE_TYPE.format(*type_identity(object_type)))
    if class_dump_data.recurse_dump() is ShouldDump.SKIP:
        return

    if is_dictionary(instance):
        writer.write_line()
        writer.write(DumpFormat.DICTIONARY_BEGIN)
        dumper.indent()
        for index, (key, value) in enumerate(instance.items()):
            if index >= max_to_dump:
                break
            writer.write_line()
            writer.write(DumpFormat.DICTIONARY_KEY_BEGIN)
            _dump_element(dumper, key)
            writer.write(DumpFormat.DICTIONARY_KEY_END)
            _dump_element(dumper, value)
        if max_to_dump < count:
            writer.write_line()
            writer.write(DumpFormat.SEQUENCE_DUMP_TRUNCATED.format(max_to_dump, count))
        dumper.unindent()
        writer.write_line()
        writer.write(DumpFormat.DICTIONARY_END)
        return

    dumper.indent()
    for index, item in enumerate(instance):
        if index >= max_to_dump:
            break
        writer.write_line()
        _dump_element(dumper, item)
    if max_to_dump < count:
        writer.write_line()
        writer.write(DumpFormat.SEQUENCE_DUMP_TRUNCATED.format(max_to_dump, count))
    dumper.unindent()


# ---------- Instruction factories ----------


def write_text_instruction(text: str) -> Instruction:
    def write_text(frame: ScriptFrame) -> bool:
        frame.dumper.writer.write(text)
        return False

    return write_text


def write_line_instruction() -> Instruction:
    def write_line(frame: ScriptFrame) -> bool:
        frame.dumper.writer.write_line()
        return False

    return write_line


def indent_instruction() -> Instruction:
    def indent(frame: ScriptFrame) -> bool:
        frame.dumper.indent()
        return False

    return indent


def unindent_instruction() -> Instruction:
    def unindent(frame: ScriptFrame) -> bool:
        frame.dumper.unindent()
        return False

    return unindent


def null_guard_instruction() -> Instruction:
    def null_guard(frame: ScriptFrame) -> bool:
        if frame.instance is None:
            frame.dumper.writer.write(DumpFormat.NULL)
            return True
        return False

    return null_guard


def seen_guard_instruction() -> Instruction:
    """Render the cycle marker for an already rendered instance, else register it."""

    def seen_guard(frame: ScriptFrame) -> bool:
        dumped_objects = frame.dumper.dumped_objects
        if frame.instance in dumped_objects:
            frame.dumper.writer.write(DumpFormat.CYCLICAL_REFERENCE.format(type(frame.instance).__name__))
            return True
        dumped_objects.add(frame.instance)
        return False

    return seen_guard


def delegate_instruction() -> Instruction:
    def dump_delegate(frame: ScriptFrame) -> bool:
        frame.dumper.writer.write(delegate_text(frame.instance))
        return False

    return dump_delegate


def member_info_instruction() -> Instruction:
    def dump_member_info(frame: ScriptFrame) -> bool:
        frame.dumper.writer.write(member_info_text(frame.instance))
        return False

    return dump_member_info


def collection_instruction(is_custom: bool) -> Instruction:
    def dump_elements(frame: ScriptFrame) -> bool:
        dump_collection(frame.dumper, frame.instance, frame.class_dump_data, is_custom)
        return False

    return dump_elements


def property_value_instruction(dump_attribute: DumpAttribute, metadata: type | None) -> Instruction:
    def dump_value(frame: ScriptFrame) -> bool:
        if frame.value_failed:
            frame.dumper.writer.write(frame.value)
        else:
            dump_member_value(frame.dumper, frame.value, dump_attribute, metadata)
        return False

    return dump_value


def property_block_instruction(member: DumpMember, dont_dump_nulls: bool, block: tuple[Instruction, ...]) -> Instruction:
    def dump_property(frame: ScriptFrame) -> bool:
        frame.value, frame.value_failed = read_member_value(frame.instance, member)
        if frame.value is None and dont_dump_nulls:
            return False
        for instruction in block:
            if instruction(frame):
                return True
        return False

    return dump_property


def dynamic_members_instruction(
    object_type: type,
    metadata: type | None,
    field_visibility: MemberVisibility,
) -> Instruction:
    """Render instance attributes that no class declares, sorted by name."""

    def dump_dynamic_members(frame: ScriptFrame) -> bool:
        writer = frame.dumper.writer
        attributes = vars(frame.instance)
        for name in undeclared_attribute_names(frame.instance):
            if not field_visibility.allows(name):
                continue
            dump_attribute = get_member_dump_attribute(DumpMember(name, object_type, MemberKind.DYNAMIC), metadata)
            if dump_attribute.is_skipped:
                continue
            value = attributes[name]
            if value is None and frame.class_dump_data.dont_dump_nulls(dump_attribute):
                continue
            writer.write_line()
            writer.write(dump_attribute.format_label(name))
            dump_member_value(frame.dumper, value, dump_attribute, metadata)
        return False

    return dump_dynamic_members


# ---------- Builder and compiled script ----------


class Script:
    """
    Compiled dump script; immutable and safe to share between threads.

    Calling it renders one instance through the dumper's writer, with the
    dumper's depth budget decremented for the duration of the call.
    """

    __slots__ = ("_instructions", "class_dump_data", "object_type")

    def __init__(self, object_type: type, class_dump_data: ClassDumpData, instructions: tuple[Instruction, ...]) -> None:
        self.object_type = object_type
        self.class_dump_data = class_dump_data
        self._instructions = instructions

    def __call__(
        self,
        instance: Any,
        class_dump_data: ClassDumpData,
        dumper: ObjectTextDumper,
    ) -> None:
        frame = ScriptFrame(instance, class_dump_data, dumper)
        dumper.decrement_max_depth()
        try:
            for instruction in self._instructions:
                if instruction(frame):
                    return
        finally:
            dumper.increment_max_depth()

    def __len__(self) -> int:
        return len(self._instructions)

    def __repr__(self) -> str:
        return f"<Script {self.object_type.__qualname__} instructions={len(self._instructions)}>"


class DumpScript:
    """
    Builder of one Script.

    Instructions are appended to the innermost open segment; a property
    segment opened by `begin_dump_property()` becomes one conditional block
    when `end_dump_property()` closes it.
    """

    def __init__(self, object_type: type, class_dump_data: ClassDumpData) -> None:
        self.object_type = object_type
        self.class_dump_data = class_dump_data
        self._segments: list[list[Instruction]] = [[null_guard_instruction()]]
        self._compiled: Script | None = None

    def add(self, instruction: Instruction) -> None:
        if self._compiled is not None:
            raise RuntimeError(f"DumpScript for {self.object_type.__qualname__} is already compiled")
        self._segments[-1].append(instruction)

    def begin_dump_property(self, label: str) -> None:
        """Open a property segment holding the new line and the label."""
        self._segments.append([])
        self.add(write_line_instruction())
        self.add(write_text_instruction(label))

    def end_dump_property(self, member: DumpMember, dont_dump_nulls: bool) -> None:
        """Close the property segment into one conditional block."""
        if len(self._segments) < 2:
            raise RuntimeError("end_dump_property() without begin_dump_property()")
        block = tuple(self._segments.pop())
        self.add(property_block_instruction(member, dont_dump_nulls, block))

    def compile(self) -> Script:
        """Freeze the instructions into a Script; the builder cannot be extended afterwards."""
        if self._compiled is None:
            if len(self._segments) != 1:
                raise RuntimeError(f"DumpScript for {self.object_type.__qualname__} has an open property segment")
            self._compiled = Script(self.object_type, self.class_dump_data, tuple(self._segments[0]))
            self._segments = []
            LOG.debug("compiled script for %s (%d instructions)", self.object_type.__qualname__, len(self._compiled))
        return self._compiled


# End of file: src/mstair/textdump/dump_script.py
