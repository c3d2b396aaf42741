# File: src/mstair/textdump/class_metadata.py
"""
Class-level dump configuration: the shadow (metadata) class and the class DumpAttribute.

`get_class_dump_data()` resolves, for one class:
- the registered ClassDumpData (also for the origin of a parametrized generic),
- else the class linked with `@dump_metadata(Shadow)`,
- else the class itself,
and combines an explicit member attribute with the class attribute.

`set_class_dump_data()` / `ClassMetadataRegistrar` register shadows for
classes that cannot be decorated.
"""

from __future__ import annotations

import typing
from dataclasses import dataclass
from typing import Any, Self

from mstair.textdump.base.rw_lock import ReaderWriterLock
from mstair.textdump.dump_attribute import (
    DUMP_ATTRIBUTE_NAME,
    DUMP_METADATA_NAME,
    DumpAttribute,
    ShouldDump,
)
from mstair.textdump.errors import DumpConfigurationError
from mstair.textdump.xlogging.logger_factory import create_logger


__all__ = [
    "ClassDumpData",
    "ClassMetadataRegistrar",
    "ExceptionDumpMetadata",
    "OSErrorDumpMetadata",
    "class_dump_attribute",
    "combine_dump_attributes",
    "get_class_dump_data",
    "get_max_to_dump",
    "reset_class_dump_data",
    "set_class_dump_data",
]

LOG = create_logger(__name__)

DEFAULT_MAX_TO_DUMP = 10


@dataclass(frozen=True, slots=True)
class ClassDumpData:
    """
    Metadata class and class DumpAttribute of one dumped class.

    Two instances are equal when both parts are equal, which makes the pair
    usable as part of a script cache key.
    """

    metadata: type | None = None
    dump_attribute: DumpAttribute = DumpAttribute.DEFAULT

    def dump_null_values(self, member_attribute: DumpAttribute | None = None) -> ShouldDump:
        """Member policy, else class policy, else DUMP."""
        if member_attribute is not None and member_attribute.dump_null_values is not ShouldDump.DEFAULT:
            return member_attribute.dump_null_values
        if self.dump_attribute.dump_null_values is not ShouldDump.DEFAULT:
            return self.dump_attribute.dump_null_values
        return ShouldDump.DUMP

    def recurse_dump(self, member_attribute: DumpAttribute | None = None) -> ShouldDump:
        """Member policy, else class policy, else DUMP."""
        if member_attribute is not None and member_attribute.recurse_dump is not ShouldDump.DEFAULT:
            return member_attribute.recurse_dump
        if self.dump_attribute.recurse_dump is not ShouldDump.DEFAULT:
            return self.dump_attribute.recurse_dump
        return ShouldDump.DUMP

    def default_property(self, member_attribute: DumpAttribute | None = None) -> str:
        if member_attribute is not None and member_attribute.default_property:
            return member_attribute.default_property
        return self.dump_attribute.default_property

    def dont_dump_nulls(self, member_attribute: DumpAttribute) -> bool:
        return self.dump_null_values(member_attribute) is ShouldDump.SKIP


_registered: dict[type, ClassDumpData] = {}
_combined: dict[tuple[type, type | None, DumpAttribute | None], ClassDumpData] = {}
_class_dump_data_lock = ReaderWriterLock()


def class_dump_attribute(cls: type, metadata: type | None = None) -> DumpAttribute:
    """The attribute declared on `metadata`, else on `cls`, else DEFAULT. Never inherited."""
    for owner in (metadata, cls):
        if owner is None:
            continue
        found = vars(owner).get(DUMP_ATTRIBUTE_NAME)
        if isinstance(found, DumpAttribute):
            return found
    return DumpAttribute.DEFAULT


def combine_dump_attributes(class_attribute: DumpAttribute, member_attribute: DumpAttribute) -> DumpAttribute:
    """
    Overlay a member attribute on a class attribute.

    DEFAULT member values of dump_null_values, recurse_dump, enumerate and
    default_property take the class values; max_depth always comes from the class.
    """
    changes: dict[str, Any] = {"max_depth": class_attribute.max_depth}
    for name in ("dump_null_values", "recurse_dump", "enumerate"):
        if getattr(member_attribute, name) is ShouldDump.DEFAULT:
            changes[name] = getattr(class_attribute, name)
    if not member_attribute.default_property:
        changes["default_property"] = class_attribute.default_property
    return member_attribute.replace(**changes)


def _registered_data(cls: Any) -> ClassDumpData | None:
    with _class_dump_data_lock.read_locked():
        found = _registered.get(cls)
        if found is None and (origin := typing.get_origin(cls)) is not None:
            found = _registered.get(origin)
    return found


def get_class_dump_data(
    cls: type,
    dump_metadata: type | None = None,
    dump_attribute: DumpAttribute | None = None,
) -> ClassDumpData:
    """
    Return the ClassDumpData used to dump an instance of `cls`.

    :param cls: The runtime class (or a parametrized generic alias).
    :param dump_metadata: Explicit metadata class; overrides registration and decoration.
    :param dump_attribute: Attribute of the member holding the instance.
    :raises DumpConfigurationError: If `cls` or `dump_metadata` is not a class.
    """
    if not isinstance(cls, type) and typing.get_origin(cls) is None:
        raise DumpConfigurationError(f"Expected a class, got {cls!r}")
    if dump_metadata is not None and not isinstance(dump_metadata, type):
        raise DumpConfigurationError(f"Expected a metadata class, got {dump_metadata!r}")

    key = (cls, dump_metadata, dump_attribute if dump_attribute is not None and not dump_attribute.is_default else None)
    with _class_dump_data_lock.read_locked():
        found = _combined.get(key)
    if found is not None:
        return found

    if dump_metadata is not None:
        data = ClassDumpData(dump_metadata, class_dump_attribute(cls, dump_metadata))
    elif (registered := _registered_data(cls)) is not None:
        data = registered
    else:
        klass: Any = typing.get_origin(cls) or cls
        metadata = vars(klass).get(DUMP_METADATA_NAME)
        metadata = metadata if isinstance(metadata, type) else None
        data = ClassDumpData(metadata, class_dump_attribute(klass, metadata))

    if key[2] is not None:
        data = ClassDumpData(data.metadata, combine_dump_attributes(data.dump_attribute, key[2]))

    with _class_dump_data_lock.write_locked():
        return _combined.setdefault(key, data)


def set_class_dump_data(
    cls: type,
    metadata: type | None = None,
    dump_attribute: DumpAttribute | None = None,
    replace: bool = False,
) -> ClassDumpData:
    """
    Register the metadata class and/or class attribute of `cls`.

    :param replace: Allow replacing a different earlier registration.
    :raises DumpConfigurationError: On bad arguments or a conflicting registration.
    """
    if not isinstance(cls, type):
        raise DumpConfigurationError(f"Expected a class, got {cls!r}")
    if metadata is None and dump_attribute is None:
        raise DumpConfigurationError(f"Registering {cls.__qualname__} needs a metadata class or a dump attribute")
    if metadata is not None and not isinstance(metadata, type):
        raise DumpConfigurationError(f"Expected a metadata class, got {metadata!r}")
    if dump_attribute is not None and not isinstance(dump_attribute, DumpAttribute):
        raise DumpConfigurationError(f"Expected a DumpAttribute, got {dump_attribute!r}")

    data = ClassDumpData(metadata, dump_attribute or class_dump_attribute(cls, metadata))
    with _class_dump_data_lock.write_locked():
        existing = _registered.get(cls)
        if existing is not None and existing != data and not replace:
            raise DumpConfigurationError(
                f"{cls.__qualname__} already has dump metadata {existing!r}; pass replace=True to change it"
            )
        _registered[cls] = data
        _combined.clear()
    LOG.debug("registered dump metadata for %s", cls.__qualname__)
    return data


def reset_class_dump_data() -> None:
    """Forget every registration and combined class data."""
    with _class_dump_data_lock.write_locked():
        _registered.clear()
        _combined.clear()


def get_max_to_dump(dump_attribute: DumpAttribute | None, count: int) -> int:
    """
    Number of elements of a `count`-element collection to render.

    A negative max_length renders all, 0 renders up to 10, positive renders up to max_length.
    """
    max_length = dump_attribute.max_length if dump_attribute is not None else 0
    if max_length < 0:
        return count
    if max_length == 0:
        return min(DEFAULT_MAX_TO_DUMP, count)
    return min(max_length, count)


class ExceptionDumpMetadata:
    """Shadow of BaseException: the constructor arguments first."""

    args = DumpAttribute(order=0)


class OSErrorDumpMetadata:
    """Shadow of OSError: hide empty slots and the write-only counter."""

    errno = DumpAttribute(order=1)
    strerror = DumpAttribute(order=2)
    filename = DumpAttribute(order=3, dump_null_values=ShouldDump.SKIP)
    filename2 = DumpAttribute(order=4, dump_null_values=ShouldDump.SKIP)
    characters_written = DumpAttribute.displayed(False)


class ClassMetadataRegistrar:
    """
    Fluent registration of shadow classes.

    Example:
        >>> ClassMetadataRegistrar().register_metadata().register(Point, PointDumpMetadata)
    """

    def register(
        self,
        cls: type,
        metadata: type | None = None,
        dump_attribute: DumpAttribute | None = None,
        replace: bool = False,
    ) -> Self:
        set_class_dump_data(cls, metadata, dump_attribute, replace)
        return self

    def register_metadata(self) -> Self:
        """Register the shadows of the standard exception classes."""
        return self.register(BaseException, ExceptionDumpMetadata, replace=True).register(
            OSError, OSErrorDumpMetadata, replace=True
        )


# End of file: src/mstair/textdump/class_metadata.py
