# File: src/mstair/textdump/test_member_resolver.py
"""
Tests for member discovery and DumpAttribute resolution.

Covers:
- declared_members: fields, properties, slots, namedtuple fields, ClassVar and dunder exclusion
- undeclared_attribute_names
- get_member_dump_attribute lookup order and memoization
- MemberInfoComparer ordering
"""

from __future__ import annotations

import collections
import functools
import sys
import threading
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Annotated, ClassVar, NamedTuple

import pytest

from mstair.textdump import member_resolver
from mstair.textdump.dump_attribute import TAIL_ORDER, DumpAttribute, ShouldDump, dump_member
from mstair.textdump.errors import DumpConfigurationError
from mstair.textdump.member_info import (
    DumpMember,
    MemberInfoComparer,
    MemberKind,
    declared_members,
    undeclared_attribute_names,
)
from mstair.textdump.member_resolver import get_member_dump_attribute, reset_member_dump_attributes


# ---------- Fixtures ----------


@pytest.fixture(autouse=True)
def clean_cache() -> Iterator[None]:
    reset_member_dump_attributes()
    yield
    reset_member_dump_attributes()


@dataclass
class Sample:
    LIMIT: ClassVar[int] = 3
    name: str
    secret: Annotated[str, DumpAttribute(mask=True)] = ""
    hidden: int = field(default=0, metadata={"dump": DumpAttribute.displayed(False)})

    @property
    @dump_member(order=0)
    def title(self) -> str:
        return self.name.title()

    @functools.cached_property
    def length(self) -> int:
        return len(self.name)

    def method(self) -> None:
        pass


class Slotted:
    __slots__ = ("a", "_b")

    def __init__(self) -> None:
        self.a = 1
        self._b = 2


class SampleShadow:
    name = DumpAttribute(order=-1)
    secret: Annotated[str, DumpAttribute(skip=ShouldDump.SKIP)]


class SampleShadowChild(SampleShadow):
    title = DumpAttribute(order=7)


Pair = collections.namedtuple("Pair", "left right")


class TypedPair(NamedTuple):
    left: int
    right: int = 0


# ---------- Discovery ----------


class TestDeclaredMembers:
    def test_fields_and_properties(self) -> None:
        members = {m.name: m.kind for m in declared_members(Sample)}
        assert members == {
            "name": MemberKind.FIELD,
            "secret": MemberKind.FIELD,
            "hidden": MemberKind.FIELD,
            "title": MemberKind.PROPERTY,
            "length": MemberKind.PROPERTY,
        }

    def test_slots_are_fields(self) -> None:
        assert [(m.name, m.kind) for m in declared_members(Slotted)] == [
            ("a", MemberKind.FIELD),
            ("_b", MemberKind.FIELD),
        ]

    def test_namedtuple_fields(self) -> None:
        assert [(m.name, m.kind) for m in declared_members(Pair)] == [
            ("left", MemberKind.FIELD),
            ("right", MemberKind.FIELD),
        ]
        assert [m.name for m in declared_members(TypedPair)] == ["left", "right"]

    def test_plain_tuple_has_no_fields(self) -> None:
        assert declared_members(tuple) == ()

    def test_undeclared_attributes_sorted(self) -> None:
        s = Sample("n")
        s.zeta = 1  # type: ignore[attr-defined]
        s.alpha = 2  # type: ignore[attr-defined]
        assert undeclared_attribute_names(s) == ["alpha", "zeta"]

    def test_undeclared_excludes_cached_property_value(self) -> None:
        s = Sample("n")
        _ = s.length
        assert "length" not in undeclared_attribute_names(s)

    def test_dump_member_rejects_bad_arguments(self) -> None:
        with pytest.raises(DumpConfigurationError):
            DumpMember("x", "NotAClass", MemberKind.FIELD)  # type: ignore[arg-type]


# ---------- Resolution ----------


class TestResolution:
    def test_own_declarations(self) -> None:
        assert get_member_dump_attribute(DumpMember("secret", Sample, MemberKind.FIELD)).mask
        assert get_member_dump_attribute(DumpMember("hidden", Sample, MemberKind.FIELD)).is_skipped
        assert get_member_dump_attribute(DumpMember("title", Sample, MemberKind.PROPERTY)).order == 0
        assert get_member_dump_attribute(DumpMember("name", Sample, MemberKind.FIELD)).is_default

    def test_metadata_overrides_member(self) -> None:
        secret = DumpMember("secret", Sample, MemberKind.FIELD)
        assert get_member_dump_attribute(secret, SampleShadow).is_skipped
        name = DumpMember("name", Sample, MemberKind.FIELD)
        assert get_member_dump_attribute(name, SampleShadow).order == -1

    def test_metadata_mro_most_derived_first(self) -> None:
        title = DumpMember("title", Sample, MemberKind.PROPERTY)
        assert get_member_dump_attribute(title, SampleShadowChild).order == 7
        name = DumpMember("name", Sample, MemberKind.FIELD)
        assert get_member_dump_attribute(name, SampleShadowChild).order == -1

    def test_metadata_without_entry_falls_back_to_member(self) -> None:
        title = DumpMember("title", Sample, MemberKind.PROPERTY)
        assert get_member_dump_attribute(title, SampleShadow).order == 0

    def test_result_is_memoized(self, monkeypatch: pytest.MonkeyPatch) -> None:
        member = DumpMember("secret", Sample, MemberKind.FIELD)
        first = get_member_dump_attribute(member)
        monkeypatch.setattr(member_resolver, "_find_on_member", lambda m: DumpAttribute(order=99))
        assert get_member_dump_attribute(member) is first

    def test_bad_arguments(self) -> None:
        with pytest.raises(DumpConfigurationError):
            get_member_dump_attribute("secret")  # type: ignore[arg-type]
        with pytest.raises(DumpConfigurationError):
            get_member_dump_attribute(DumpMember("name", Sample, MemberKind.FIELD), "Shadow")  # type: ignore[arg-type]

    def test_concurrent_resolution_agrees(self) -> None:
        member = DumpMember("secret", Sample, MemberKind.FIELD)
        start = threading.Barrier(8, timeout=5)

        def resolve(_: int) -> DumpAttribute:
            start.wait()
            return get_member_dump_attribute(member, SampleShadow)

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(resolve, range(8), timeout=10))
        assert all(r is results[0] for r in results)


# ---------- Ordering ----------


class TestComparer:
    def test_groups_then_order(self) -> None:
        comparer = MemberInfoComparer()
        pairs = [
            (DumpMember("tail", Sample, MemberKind.FIELD), DumpAttribute(order=TAIL_ORDER)),
            (DumpMember("neg", Sample, MemberKind.FIELD), DumpAttribute(order=-1)),
            (DumpMember("b", Sample, MemberKind.FIELD), DumpAttribute()),
            (DumpMember("a", Sample, MemberKind.FIELD), DumpAttribute()),
            (DumpMember("first", Sample, MemberKind.FIELD), DumpAttribute(order=0)),
        ]
        ordered = sorted(pairs, key=lambda p: comparer.sort_key(*p))
        assert [m.name for m, _ in ordered] == ["first", "a", "b", "neg", "tail"]

    def test_metadata_declaration_order(self) -> None:
        class Shadow:
            zed = DumpAttribute()
            alpha = DumpAttribute()

        comparer = MemberInfoComparer(Shadow)
        pairs = [
            (DumpMember("alpha", Sample, MemberKind.FIELD), DumpAttribute()),
            (DumpMember("zed", Sample, MemberKind.FIELD), DumpAttribute()),
        ]
        ordered = sorted(pairs, key=lambda p: comparer.sort_key(*p))
        assert [m.name for m, _ in ordered] == ["zed", "alpha"]

    def test_order_group_boundaries(self) -> None:
        assert MemberInfoComparer.order_group(sys.maxsize) == 0
        assert MemberInfoComparer.order_group(-5) == 1
        assert MemberInfoComparer.order_group(TAIL_ORDER) == 2


# End of file: src/mstair/textdump/test_member_resolver.py
