# File: src/mstair/textdump/dump_state.py
"""
Traversal state machine: one `DumpState` per class level of one dumped instance.

The top-level state is created for the runtime class of the instance and
owns the depth bookkeeping: it takes one level of the dumper's depth budget
when created and gives it back on `close()`. `get_base_type_dump_state()`
walks one step up the MRO; base-level states share the top-level state's
recursion decisions and output strategy.

A level enumerates the members its class declares, in `MemberInfoComparer`
order, skipping:
- members hidden by visibility settings or `skip=SKIP`,
- members also declared by a base class (they render at the base level),
- everything but `default_property` when recursion is skipped.

The most-derived level also carries a pseudo-member for undeclared instance
attributes, sorted after the level's other default-order members.
"""

from __future__ import annotations

from types import TracebackType
from typing import TYPE_CHECKING, Any, Self

from mstair.textdump.class_metadata import ClassDumpData, get_class_dump_data
from mstair.textdump.dump_attribute import DumpAttribute, ShouldDump
from mstair.textdump.dump_format import DumpFormat
from mstair.textdump.dump_script import (
    collection_instruction,
    delegate_instruction,
    dynamic_members_instruction,
    indent_instruction,
    member_info_instruction,
    property_value_instruction,
    seen_guard_instruction,
    unindent_instruction,
    write_text_instruction,
)
from mstair.textdump.member_dumpers import MemberDumper
from mstair.textdump.member_info import (
    DYNAMIC_MEMBER_NAME,
    DumpMember,
    MemberKind,
    declared_members,
)
from mstair.textdump.member_resolver import get_member_dump_attribute
from mstair.textdump.type_helpers import (
    DELEGATE_TYPES,
    MEMBER_INFO_TYPES,
    is_collection_type,
    is_custom_collection,
    type_identity,
)
from mstair.textdump.xlogging.logger_factory import create_logger


if TYPE_CHECKING:
    from mstair.textdump.object_text_dumper import ObjectTextDumper


__all__ = ["DumpState", "DumpedObjects"]

LOG = create_logger(__name__)


class DumpedObjects:
    """
    Instances rendered so far in one dump call, keyed by identity and class.

    References are held until `clear()` so that the id of a temporary value
    cannot be reused by another object within the same dump.
    """

    __slots__ = ("_objects",)

    def __init__(self) -> None:
        self._objects: dict[tuple[int, type], Any] = {}

    def add(self, instance: Any) -> None:
        self._objects[(id(instance), type(instance))] = instance

    def __contains__(self, instance: Any) -> bool:
        return (id(instance), type(instance)) in self._objects

    def __len__(self) -> int:
        return len(self._objects)

    def clear(self) -> None:
        self._objects.clear()


class DumpState:
    """
    Enumeration state of one class level of one instance (or of one class, while building a script).

    :param dumper: The driver; supplies settings, comparer and depth budget.
    :param member_dumper: Output strategy (render now or record a script).
    :param instance_type: Runtime class of the dumped instance.
    :param class_dump_data: Configuration of this level's class.
    :param current_type: Class of this level; `instance_type` for the top level.
    :param instance_dump_attribute: Attribute of the member holding the instance.
    :param top: Top-level state of a base-level state.
    :param track_depth: Take one level of the depth budget (top level of a live rendering).
    """

    def __init__(
        self,
        dumper: ObjectTextDumper,
        member_dumper: MemberDumper,
        instance_type: type,
        class_dump_data: ClassDumpData,
        *,
        current_type: type | None = None,
        instance_dump_attribute: DumpAttribute | None = None,
        top: DumpState | None = None,
        track_depth: bool = False,
    ) -> None:
        self.dumper = dumper
        self.member_dumper = member_dumper
        self.instance_type = instance_type
        self.class_dump_data = class_dump_data
        self.current_type = current_type or instance_type
        self.instance_dump_attribute = instance_dump_attribute
        self.top = top or self
        self.current_member: DumpMember | None = None
        self.current_dump_attribute: DumpAttribute = DumpAttribute.DEFAULT
        self._members: list[tuple[DumpMember, DumpAttribute]] | None = None
        self._index = -1
        self._tracks_depth = track_depth and self.is_top_level
        self._closed = False

        if self.is_top_level:
            self.recurse_skipped = class_dump_data.recurse_dump() is ShouldDump.SKIP
            self.default_property = class_dump_data.default_property()
            if self._tracks_depth:
                dumper.decrement_max_depth()
        else:
            self.recurse_skipped = self.top.recurse_skipped
            self.default_property = self.top.default_property

    @property
    def is_top_level(self) -> bool:
        return self.top is self

    # ---------- Lifetime ----------

    def close(self) -> None:
        """Give back the depth level taken by a top-level state; safe to call twice."""
        if self._closed:
            return
        self._closed = True
        if self._tracks_depth:
            self.dumper.increment_max_depth()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    # ---------- Enumeration ----------

    def _is_visible(self, member: DumpMember) -> bool:
        settings = self.dumper.instance_settings
        if member.kind is MemberKind.PROPERTY:
            return settings.property_visibility.allows(member.name)
        return settings.field_visibility.allows(member.name)

    def _enumerate_members(self) -> list[tuple[DumpMember, DumpAttribute]]:
        metadata = self.class_dump_data.metadata
        mro = self.instance_type.__mro__
        base_names = frozenset(
            name for klass in mro[mro.index(self.current_type) + 1 :] for name in _member_names(klass)
        )

        members: list[tuple[DumpMember, DumpAttribute]] = []
        for member in declared_members(self.current_type):
            if member.name in base_names or not self._is_visible(member):
                continue
            if self.recurse_skipped and member.name != self.default_property:
                continue
            dump_attribute = get_member_dump_attribute(member, metadata)
            if dump_attribute.is_skipped:
                continue
            members.append((member, dump_attribute))

        if self.is_top_level and not self.recurse_skipped and _has_instance_dict(self.instance_type):
            dynamic = DumpMember(DYNAMIC_MEMBER_NAME, self.current_type, MemberKind.DYNAMIC)
            members.append((dynamic, DumpAttribute.DEFAULT))

        comparer = self.dumper.member_info_comparer(metadata)
        members.sort(key=lambda pair: comparer.sort_key(*pair))
        return members

    def move_next(self) -> bool:
        """Advance to the next member of this level; False when none is left."""
        if self._members is None:
            self._members = self._enumerate_members()
        self._index += 1
        if self._index >= len(self._members):
            self.current_member = None
            self.current_dump_attribute = DumpAttribute.DEFAULT
            return False
        self.current_member, self.current_dump_attribute = self._members[self._index]
        LOG.trace("member %s order=%d", repr(self.current_member), self.current_dump_attribute.order)
        return True

    def get_base_type_dump_state(self) -> DumpState:
        """State of the next class in the MRO of the instance, sharing this state's top level."""
        mro = self.instance_type.__mro__
        base = mro[mro.index(self.current_type) + 1]
        return DumpState(
            self.dumper,
            self.member_dumper,
            self.instance_type,
            get_class_dump_data(base, dump_attribute=self.instance_dump_attribute),
            current_type=base,
            instance_dump_attribute=self.instance_dump_attribute,
            top=self.top,
        )

    # ---------- Rendering steps ----------

    def indent(self) -> None:
        self.member_dumper.emit(indent_instruction())

    def unindent(self) -> None:
        self.member_dumper.emit(unindent_instruction())

    def dumped_already(self) -> bool:
        """Render the cycle marker for an instance rendered earlier in this dump."""
        return self.member_dumper.emit(seen_guard_instruction())

    def dumped_root_class(self) -> bool:
        """At the `object` level: write the type header of the instance."""
        if self.current_type is not object:
            return False
        self.member_dumper.emit(write_text_instruction(DumpFormat.TYPE.format(*type_identity(self.instance_type))))
        return True

    def dumped_delegate(self) -> bool:
        if not issubclass(self.current_type, DELEGATE_TYPES):
            return False
        self.member_dumper.emit(delegate_instruction())
        return True

    def dumped_member_info(self) -> bool:
        if not issubclass(self.current_type, MEMBER_INFO_TYPES):
            return False
        self.member_dumper.emit(member_info_instruction())
        return True

    def dumped_collection(self, enumerate_custom: bool) -> bool:
        """
        Render the elements of a collection instance.

        :param enumerate_custom: False for the first pass, where only system
            collections render (in place of members); True for the pass after
            the members, where custom collections with `enumerate=DUMP` render.
        :return: True if elements were rendered.
        """
        if not is_collection_type(self.instance_type):
            return False
        is_custom = is_custom_collection(self.instance_type)
        if is_custom != enumerate_custom:
            return False
        if is_custom and self.class_dump_data.dump_attribute.enumerate is not ShouldDump.DUMP:
            return False
        self.member_dumper.emit(collection_instruction(is_custom))
        return True

    def dumped_property_custom(self) -> bool:
        """Emit the value step of a member with a custom formatter."""
        if not self.current_dump_attribute.has_custom_format:
            return False
        self.member_dumper.emit(property_value_instruction(self.current_dump_attribute, self.class_dump_data.metadata))
        return True

    def dump_property(self) -> None:
        """Render the current member: new line, label, value; or nothing for a skipped None."""
        member = self.current_member
        if member is None:
            raise RuntimeError("dump_property() called without a current member")
        dump_attribute = self.current_dump_attribute
        metadata = self.class_dump_data.metadata

        if member.kind is MemberKind.DYNAMIC:
            field_visibility = self.dumper.instance_settings.field_visibility
            self.member_dumper.emit(dynamic_members_instruction(self.instance_type, metadata, field_visibility))
            return

        self.member_dumper.begin_dump_property(dump_attribute.format_label(member.name))
        if not self.dumped_property_custom():
            self.member_dumper.emit(property_value_instruction(dump_attribute, metadata))
        self.member_dumper.end_dump_property(member, self.class_dump_data.dont_dump_nulls(dump_attribute))

    def __repr__(self) -> str:
        return f"<DumpState {self.instance_type.__qualname__} at {self.current_type.__qualname__}>"


def _member_names(klass: type) -> list[str]:
    return [member.name for member in declared_members(klass)]


def _has_instance_dict(object_type: type) -> bool:
    return getattr(object_type, "__dictoffset__", 0) != 0


# End of file: src/mstair/textdump/dump_state.py
