# File: src/mstair/textdump/dump_attribute.py
"""
Dump configuration attached to classes and members.

A `DumpAttribute` can be attached:
- to a class: `@dump_class(recurse_dump=ShouldDump.SKIP, default_property="name")`
- to a property: `@property` over `@dump_member(order=1)`, or `@dump_member(...)` over `@property`
- to a field: `x: Annotated[int, DumpAttribute(mask=True)]`
- to a dataclass field: `x: int = field(metadata={"dump": DumpAttribute(skip=ShouldDump.SKIP)})`
- to a shadow class: `name = DumpAttribute(order=0)` in a class linked with `@dump_metadata(Shadow)`

Example:
    >>> @dump_class(max_depth=3)
    ... @dataclass
    ... class Account:
    ...     owner: str
    ...     secret: Annotated[str, DumpAttribute(mask=True)] = ""
"""

from __future__ import annotations

import dataclasses
import enum
import functools
import sys
import typing
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, ClassVar, Final, TypeVar

from mstair.textdump.dump_format import DumpFormat
from mstair.textdump.errors import DumpConfigurationError


__all__ = [
    "DUMP_ATTRIBUTE_NAME",
    "DUMP_METADATA_NAME",
    "DUMP_METADATA_KEY",
    "TAIL_ORDER",
    "DumpAttribute",
    "ShouldDump",
    "dump_attribute_of",
    "dump_class",
    "dump_member",
    "dump_metadata",
]

DUMP_ATTRIBUTE_NAME: Final[str] = "__dump_attribute__"
DUMP_METADATA_NAME: Final[str] = "__dump_metadata__"
DUMP_METADATA_KEY: Final[str] = "dump"
TAIL_ORDER: Final[int] = -sys.maxsize - 1
TO_STRING: Final[str] = "ToString"

_T = TypeVar("_T", bound=type)
_F = TypeVar("_F")


class ShouldDump(enum.Enum):
    """Tri-state policy; DEFAULT defers to the enclosing scope."""

    DEFAULT = "default"
    DUMP = "dump"
    SKIP = "skip"


@dataclass(frozen=True, slots=True)
class DumpAttribute:
    """
    Immutable dump configuration of a class or member.

    :param order: Display order; negative orders render after all non-negative ones, TAIL_ORDER last.
    :param skip: SKIP hides the member.
    :param dump_null_values: SKIP hides None values, DUMP always shows them.
    :param recurse_dump: SKIP renders only the header and `default_property` of a nested object.
    :param enumerate: DUMP renders the elements of a custom collection after its members.
    :param default_property: Member rendered when recursion is skipped.
    :param max_depth: Nesting levels rendered below the outermost object.
    :param max_length: Elements of a collection to render; 0 means 10, negative means all.
        A positive value also truncates strings.
    :param mask: Render `mask_value` instead of a basic value.
    :param mask_value: Replacement text used by `mask`.
    :param label_format: Label format with the member name as `{0}`.
    :param value_format: `{0}` format of a basic value, or "ToString" to render with `str()`.
    :param dump_class: Class holding a static formatting method.
    :param dump_method: Formatting method name; "dump" when only `dump_class` is given.
    """

    order: int = sys.maxsize
    skip: ShouldDump = ShouldDump.DEFAULT
    dump_null_values: ShouldDump = ShouldDump.DEFAULT
    recurse_dump: ShouldDump = ShouldDump.DEFAULT
    enumerate: ShouldDump = ShouldDump.DEFAULT
    default_property: str = ""
    max_depth: int = 10
    max_length: int = 0
    mask: bool = False
    mask_value: str = DumpFormat.MASK_VALUE
    label_format: str | None = None
    value_format: str | None = None
    dump_class: type | None = None
    dump_method: str = ""

    DEFAULT: ClassVar[DumpAttribute]

    def __post_init__(self) -> None:
        for name in ("skip", "dump_null_values", "recurse_dump", "enumerate"):
            if not isinstance(getattr(self, name), ShouldDump):
                raise DumpConfigurationError(f"DumpAttribute.{name} must be a ShouldDump, got {getattr(self, name)!r}")
        for name in ("label_format", "value_format"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise DumpConfigurationError(f"DumpAttribute.{name} must be a str or None, got {value!r}")
        if not isinstance(self.order, int) or not isinstance(self.max_depth, int) or not isinstance(self.max_length, int):
            raise DumpConfigurationError("DumpAttribute.order, max_depth and max_length must be integers")
        if self.dump_class is not None and not isinstance(self.dump_class, type):
            raise DumpConfigurationError(f"DumpAttribute.dump_class must be a class, got {self.dump_class!r}")

    @classmethod
    def displayed(cls, display: bool) -> DumpAttribute:
        """Return an attribute that shows (DUMP) or hides (SKIP) a member."""
        return cls(skip=ShouldDump.DUMP if display else ShouldDump.SKIP)

    @classmethod
    def ordered(cls, order: int) -> DumpAttribute:
        return cls(order=order)

    @property
    def is_default(self) -> bool:
        return self == DumpAttribute.DEFAULT

    @property
    def is_skipped(self) -> bool:
        return self.skip is ShouldDump.SKIP

    @property
    def is_to_string(self) -> bool:
        return self.value_format == TO_STRING

    @property
    def has_custom_format(self) -> bool:
        """True if the value is rendered by `str()` or by a formatting method."""
        return self.is_to_string or self.dump_class is not None or bool(self.dump_method)

    @property
    def effective_label_format(self) -> str:
        return self.label_format if self.label_format is not None else DumpFormat.DEFAULT_PROPERTY_LABEL

    def format_label(self, name: str) -> str:
        return self.effective_label_format.format(name)

    def replace(self, **changes: Any) -> DumpAttribute:
        return dataclasses.replace(self, **changes)


DumpAttribute.DEFAULT = DumpAttribute()


def dump_attribute_of(obj: Any) -> DumpAttribute | None:
    """
    Return the DumpAttribute carried by a class-body object, if any.

    Recognized carriers are DumpAttribute instances, properties and
    cached_properties whose getter was decorated with `dump_member`,
    decorated functions, dataclass Field metadata and `Annotated` hints.
    """
    if isinstance(obj, DumpAttribute):
        return obj
    if isinstance(obj, property):
        obj = obj.fget
    elif isinstance(obj, functools.cached_property):
        obj = obj.func
    elif isinstance(obj, (staticmethod, classmethod)):
        obj = obj.__func__
    elif isinstance(obj, dataclasses.Field):
        found = obj.metadata.get(DUMP_METADATA_KEY)
        return found if isinstance(found, DumpAttribute) else None
    elif typing.get_origin(obj) is typing.Annotated:
        return next((m for m in obj.__metadata__ if isinstance(m, DumpAttribute)), None)
    found = getattr(obj, DUMP_ATTRIBUTE_NAME, None) if callable(obj) else None
    return found if isinstance(found, DumpAttribute) else None


def _attribute_from(attribute: DumpAttribute | None, changes: dict[str, Any]) -> DumpAttribute:
    if attribute is not None and not isinstance(attribute, DumpAttribute):
        raise DumpConfigurationError(f"Expected a DumpAttribute, got {attribute!r}")
    base = attribute or DumpAttribute.DEFAULT
    return base.replace(**changes) if changes else base


def dump_class(attribute: DumpAttribute | None = None, **changes: Any) -> Callable[[_T], _T]:
    """
    Class decorator attaching a class-level DumpAttribute.

    The attribute belongs to the decorated class only; subclasses do not inherit it.
    """
    dump_attribute = _attribute_from(attribute, changes)

    def decorate(cls: _T) -> _T:
        setattr(cls, DUMP_ATTRIBUTE_NAME, dump_attribute)
        return cls

    return decorate


def dump_member(attribute: DumpAttribute | None = None, **changes: Any) -> Callable[[_F], _F]:
    """Attach a DumpAttribute to a property, cached_property or getter function."""
    dump_attribute = _attribute_from(attribute, changes)

    def decorate(member: _F) -> _F:
        target: Any = member
        if isinstance(member, property):
            target = member.fget
        elif isinstance(member, functools.cached_property):
            target = member.func
        if not callable(target):
            raise DumpConfigurationError(f"dump_member() cannot decorate {member!r}")
        setattr(target, DUMP_ATTRIBUTE_NAME, dump_attribute)
        return member

    return decorate


def dump_metadata(shadow: type) -> Callable[[_T], _T]:
    """Class decorator linking a shadow class whose attributes configure the decorated class."""
    if not isinstance(shadow, type):
        raise DumpConfigurationError(f"dump_metadata() expects a class, got {shadow!r}")

    def decorate(cls: _T) -> _T:
        setattr(cls, DUMP_METADATA_NAME, shadow)
        return cls

    return decorate


# End of file: src/mstair/textdump/dump_attribute.py
