# File: src/mstair/textdump/member_info.py
"""
Discovery and ordering of the members a class declares.

A class declares:
- fields: class-body annotations (`ClassVar` and `InitVar` excluded) and slot
  or C-level member descriptors,
- properties: `property`, `functools.cached_property` and C-level getset
  descriptors in the class `__dict__`.

Dunder names and name-mangled private names are never members. Instance
attributes no class declares are represented by one DYNAMIC pseudo-member
at the most-derived class.
"""

from __future__ import annotations

import dataclasses
import enum
import functools
import inspect
import sys
import types
import typing
from dataclasses import dataclass
from typing import Any, Final

from mstair.textdump.dump_attribute import TAIL_ORDER, DumpAttribute
from mstair.textdump.errors import DumpConfigurationError


__all__ = [
    "DYNAMIC_MEMBER_NAME",
    "DumpMember",
    "MemberInfoComparer",
    "MemberKind",
    "class_annotations",
    "declared_member_names",
    "declared_members",
    "is_synthesized_name",
    "undeclared_attribute_names",
]

DYNAMIC_MEMBER_NAME: Final[str] = "__dict__"

_CLASS_VAR_PREFIXES: Final[tuple[str, ...]] = (
    "ClassVar",
    "typing.ClassVar",
    "t.ClassVar",
    "InitVar",
    "dataclasses.InitVar",
)


class MemberKind(enum.IntEnum):
    FIELD = 0
    PROPERTY = 1
    DYNAMIC = 2


@dataclass(frozen=True, slots=True)
class DumpMember:
    """A member declared by one class."""

    name: str
    declaring_class: type
    kind: MemberKind

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not isinstance(self.declaring_class, type):
            raise DumpConfigurationError(f"Invalid DumpMember({self.name!r}, {self.declaring_class!r})")

    def get_value(self, instance: Any) -> Any:
        return getattr(instance, self.name)

    def __repr__(self) -> str:
        return f"{self.declaring_class.__qualname__}.{self.name} ({self.kind.name})"


def is_synthesized_name(name: str) -> bool:
    """True for dunder names and name-mangled private names."""
    if name.startswith("__") and name.endswith("__"):
        return True
    return name.startswith("_") and "__" in name[1:]


def class_annotations(cls: type) -> dict[str, Any]:
    """
    Return the annotations declared in the body of `cls`, evaluated where possible.

    Unresolvable forward references leave the annotations as strings.
    """
    try:
        return inspect.get_annotations(cls, eval_str=True)
    except (NameError, SyntaxError, TypeError, AttributeError):
        return inspect.get_annotations(cls, eval_str=False)


def _is_class_var(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return annotation.strip().startswith(_CLASS_VAR_PREFIXES)
    if annotation is typing.ClassVar or isinstance(annotation, dataclasses.InitVar):
        return True
    return typing.get_origin(annotation) is typing.ClassVar


@functools.cache
def declared_members(cls: type) -> tuple[DumpMember, ...]:
    """
    Return the fields and properties `cls` itself declares, in declaration order.

    Results are memoized per class; class bodies are not expected to change
    after the first dump.
    """
    namespace = vars(cls)
    members: dict[str, DumpMember] = {}

    if issubclass(cls, tuple) and isinstance(namespace.get("_fields"), tuple):
        # namedtuple fields are index accessors, not property or member descriptors
        for name in namespace["_fields"]:
            members[name] = DumpMember(name, cls, MemberKind.FIELD)

    for name, annotation in class_annotations(cls).items():
        if is_synthesized_name(name) or _is_class_var(annotation):
            continue
        if isinstance(namespace.get(name), (property, functools.cached_property)):
            continue
        members[name] = DumpMember(name, cls, MemberKind.FIELD)

    for name, value in namespace.items():
        if name in members or is_synthesized_name(name):
            continue
        if isinstance(value, property):
            if value.fget is not None:
                members[name] = DumpMember(name, cls, MemberKind.PROPERTY)
        elif isinstance(value, (functools.cached_property, types.GetSetDescriptorType)):
            members[name] = DumpMember(name, cls, MemberKind.PROPERTY)
        elif isinstance(value, types.MemberDescriptorType):
            members[name] = DumpMember(name, cls, MemberKind.FIELD)

    return tuple(members.values())


@functools.cache
def declared_member_names(object_type: type) -> frozenset[str]:
    """Names declared by any class in the MRO of `object_type`."""
    return frozenset(m.name for klass in object_type.__mro__ for m in declared_members(klass))


def undeclared_attribute_names(instance: Any) -> list[str]:
    """Sorted instance `__dict__` keys that no class in the MRO declares."""
    try:
        attributes = vars(instance)
    except TypeError:
        return []
    declared = declared_member_names(type(instance))
    return sorted(
        name
        for name in attributes
        if isinstance(name, str) and name not in declared and not is_synthesized_name(name)
    )


class MemberInfoComparer:
    """
    Orders the members of one class level.

    Members sort by display group (non-negative order, negative order,
    tail), then by `DumpAttribute.order`, then by their position in the
    metadata class body, then fields before properties, then by name.
    """

    def __init__(self, metadata: type | None = None) -> None:
        self.metadata = metadata
        self._metadata_positions: dict[str, int] = {}
        if metadata is not None:
            names: list[str] = []
            for klass in reversed(metadata.__mro__[:-1]):
                names.extend(n for n in vars(klass) if n not in names)
                names.extend(n for n in class_annotations(klass) if n not in names)
            self._metadata_positions = {name: i for i, name in enumerate(names)}

    @staticmethod
    def order_group(order: int) -> int:
        if order == TAIL_ORDER:
            return 2
        return 0 if order >= 0 else 1

    def sort_key(self, member: DumpMember, dump_attribute: DumpAttribute) -> tuple[int, int, int, int, str]:
        return (
            self.order_group(dump_attribute.order),
            dump_attribute.order,
            self._metadata_positions.get(member.name, sys.maxsize),
            int(member.kind),
            member.name,
        )


# End of file: src/mstair/textdump/member_info.py
