# File: src/mstair/textdump/member_resolver.py
"""
Resolve the effective DumpAttribute of a member.

Lookup order for `get_member_dump_attribute(member, metadata)`:
1. the metadata class MRO (most derived first): a same-named class attribute
   holding a DumpAttribute, a decorated property or function, or an
   `Annotated[..., DumpAttribute]` annotation,
2. the member's own declaration (decorated property, Annotated field,
   dataclass field metadata),
3. `DumpAttribute.DEFAULT`.

Results are memoized process-wide per (member, metadata) pair behind one
reader/writer lock. Class bodies are treated as immutable once dumped, so
there is no eviction.
"""

from __future__ import annotations

import dataclasses
from typing import Any

from mstair.textdump.base.rw_lock import ReaderWriterLock
from mstair.textdump.dump_attribute import DumpAttribute, dump_attribute_of
from mstair.textdump.errors import DumpConfigurationError
from mstair.textdump.member_info import DumpMember, MemberKind, class_annotations
from mstair.textdump.xlogging.logger_factory import create_logger


__all__ = [
    "DumpMember",
    "get_member_dump_attribute",
    "reset_member_dump_attributes",
]

LOG = create_logger(__name__)

_member_dump_attributes: dict[tuple[DumpMember, type | None], DumpAttribute] = {}
_member_dump_attributes_lock = ReaderWriterLock()


def get_member_dump_attribute(member: DumpMember, metadata: type | None = None) -> DumpAttribute:
    """
    Return the effective DumpAttribute of `member` under `metadata`.

    :param member: The member to resolve.
    :param metadata: Optional shadow class overriding the member's own attribute.
    :raises DumpConfigurationError: If `member` is not a DumpMember or `metadata` is not a class.
    """
    if not isinstance(member, DumpMember):
        raise DumpConfigurationError(f"Expected a DumpMember, got {member!r}")
    if metadata is not None and not isinstance(metadata, type):
        raise DumpConfigurationError(f"Expected a metadata class, got {metadata!r}")

    key = (member, metadata)
    with _member_dump_attributes_lock.read_locked():
        found = _member_dump_attributes.get(key)
    if found is not None:
        return found

    resolved = _find_in_metadata(member.name, metadata) or _find_on_member(member) or DumpAttribute.DEFAULT
    with _member_dump_attributes_lock.write_locked():
        resolved = _member_dump_attributes.setdefault(key, resolved)
    if not resolved.is_default:
        LOG.trace("resolved %s under %s: %s", repr(member), getattr(metadata, "__qualname__", None), repr(resolved))
    return resolved


def reset_member_dump_attributes() -> None:
    """Forget every resolved attribute."""
    with _member_dump_attributes_lock.write_locked():
        _member_dump_attributes.clear()


def _find_in_metadata(name: str, metadata: type | None) -> DumpAttribute | None:
    if metadata is None:
        return None
    for klass in metadata.__mro__:
        if klass is object:
            break
        namespace = vars(klass)
        if name in namespace and (found := dump_attribute_of(namespace[name])) is not None:
            return found
        annotation = class_annotations(klass).get(name)
        if annotation is not None and (found := dump_attribute_of(annotation)) is not None:
            return found
    return None


def _find_on_member(member: DumpMember) -> DumpAttribute | None:
    cls = member.declaring_class
    if member.kind is MemberKind.DYNAMIC:
        return None
    if member.kind is MemberKind.PROPERTY:
        return dump_attribute_of(vars(cls).get(member.name))

    annotation: Any = class_annotations(cls).get(member.name)
    if annotation is not None and (found := dump_attribute_of(annotation)) is not None:
        return found
    dataclass_fields: dict[str, dataclasses.Field[Any]] = getattr(cls, "__dataclass_fields__", {})
    if (field := dataclass_fields.get(member.name)) is not None:
        return dump_attribute_of(field)
    return None


# End of file: src/mstair/textdump/member_resolver.py
