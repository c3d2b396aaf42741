# File: src/mstair/textdump/test_dump_attribute.py
"""
Tests for DumpAttribute, its decorators and class-level metadata.

Covers:
- Validation and structural equality of DumpAttribute
- dump_class / dump_member / dump_metadata decorators
- get_class_dump_data resolution and attribute combination
- set_class_dump_data conflicts and ClassMetadataRegistrar
- get_max_to_dump
"""

from __future__ import annotations

import functools
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Annotated

import pytest

from mstair.textdump.class_metadata import (
    ClassDumpData,
    ClassMetadataRegistrar,
    ExceptionDumpMetadata,
    combine_dump_attributes,
    get_class_dump_data,
    get_max_to_dump,
    reset_class_dump_data,
    set_class_dump_data,
)
from mstair.textdump.dump_attribute import (
    DumpAttribute,
    ShouldDump,
    dump_attribute_of,
    dump_class,
    dump_member,
    dump_metadata,
)
from mstair.textdump.errors import DumpConfigurationError


# ---------- Fixtures ----------


@pytest.fixture(autouse=True)
def clean_registry() -> Iterator[None]:
    reset_class_dump_data()
    yield
    reset_class_dump_data()


class PointShadow:
    x = DumpAttribute(order=1)


@dump_metadata(PointShadow)
@dump_class(max_depth=3, recurse_dump=ShouldDump.SKIP, default_property="x")
@dataclass
class Point:
    x: int
    y: int = field(default=0, metadata={"dump": DumpAttribute(mask=True)})
    z: Annotated[int, DumpAttribute(order=5)] = 0


class Plain:
    pass


class DerivedPlain(Point):
    pass


# ---------- DumpAttribute ----------


class TestDumpAttribute:
    def test_default_is_structural(self) -> None:
        assert DumpAttribute() == DumpAttribute.DEFAULT
        assert DumpAttribute().is_default
        assert not DumpAttribute(order=1).is_default

    def test_hashable(self) -> None:
        assert len({DumpAttribute(order=1), DumpAttribute(order=1), DumpAttribute()}) == 2

    def test_shorthands(self) -> None:
        assert DumpAttribute.displayed(False).is_skipped
        assert DumpAttribute.displayed(True).skip is ShouldDump.DUMP
        assert DumpAttribute.ordered(-1).order == -1

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"skip": True},
            {"label_format": 5},
            {"order": "1"},
            {"dump_class": "NotAClass"},
        ],
    )
    def test_invalid_values_rejected(self, kwargs: dict[str, object]) -> None:
        with pytest.raises(DumpConfigurationError):
            DumpAttribute(**kwargs)  # type: ignore[arg-type]

    def test_label_format(self) -> None:
        assert DumpAttribute().format_label("name") == f"{'name':<24} = "
        assert DumpAttribute(label_format="{0}: ").format_label("name") == "name: "

    def test_custom_format_flags(self) -> None:
        assert DumpAttribute(value_format="ToString").has_custom_format
        assert DumpAttribute(dump_method="render").has_custom_format
        assert not DumpAttribute(value_format="{0:x}").has_custom_format


# ---------- Decorators ----------


class TestDecorators:
    def test_dump_class_not_inherited(self) -> None:
        assert get_class_dump_data(Point).dump_attribute.max_depth == 3
        assert get_class_dump_data(DerivedPlain).dump_attribute.max_depth == 10

    def test_dump_member_on_property_and_cached_property(self) -> None:
        class Holder:
            @property
            @dump_member(order=2)
            def a(self) -> int:
                return 1

            @dump_member(order=3)
            @functools.cached_property
            def b(self) -> int:
                return 2

        assert dump_attribute_of(vars(Holder)["a"]) == DumpAttribute(order=2)
        assert dump_attribute_of(vars(Holder)["b"]) == DumpAttribute(order=3)

    def test_dump_member_rejects_non_callable(self) -> None:
        with pytest.raises(DumpConfigurationError):
            dump_member(order=1)(42)

    def test_dump_metadata_requires_class(self) -> None:
        with pytest.raises(DumpConfigurationError):
            dump_metadata("Shadow")  # type: ignore[arg-type]

    def test_dump_attribute_of_field_and_annotated(self) -> None:
        fields = Point.__dataclass_fields__
        assert dump_attribute_of(fields["y"]) == DumpAttribute(mask=True)
        assert dump_attribute_of(Annotated[int, DumpAttribute(order=5)]) == DumpAttribute(order=5)
        assert dump_attribute_of(int) is None


# ---------- Class metadata ----------


class TestClassDumpData:
    def test_decorated_class(self) -> None:
        data = get_class_dump_data(Point)
        assert data.metadata is PointShadow
        assert data.recurse_dump() is ShouldDump.SKIP
        assert data.default_property() == "x"

    def test_plain_class(self) -> None:
        assert get_class_dump_data(Plain) == ClassDumpData()

    def test_explicit_metadata_wins(self) -> None:
        class Other:
            pass

        assert get_class_dump_data(Point, dump_metadata=Other).metadata is Other

    def test_member_attribute_combined(self) -> None:
        member = DumpAttribute(max_length=2, max_depth=99)
        data = get_class_dump_data(Point, dump_attribute=member)
        assert data.dump_attribute.max_length == 2
        assert data.dump_attribute.max_depth == 3
        assert data.dump_attribute.recurse_dump is ShouldDump.SKIP

    def test_member_policy_overrides_class(self) -> None:
        data = get_class_dump_data(Point, dump_attribute=DumpAttribute(recurse_dump=ShouldDump.DUMP))
        assert data.recurse_dump() is ShouldDump.DUMP

    def test_null_policy_falls_back_to_dump(self) -> None:
        data = ClassDumpData()
        assert data.dump_null_values() is ShouldDump.DUMP
        assert data.dont_dump_nulls(DumpAttribute(dump_null_values=ShouldDump.SKIP))

    def test_combine_keeps_member_values(self) -> None:
        combined = combine_dump_attributes(
            DumpAttribute(enumerate=ShouldDump.DUMP, max_depth=4),
            DumpAttribute(enumerate=ShouldDump.SKIP, default_property="p"),
        )
        assert combined.enumerate is ShouldDump.SKIP
        assert combined.default_property == "p"
        assert combined.max_depth == 4

    def test_rejects_non_class(self) -> None:
        with pytest.raises(DumpConfigurationError):
            get_class_dump_data("Point")  # type: ignore[arg-type]


class TestRegistration:
    def test_registered_shadow_used(self) -> None:
        class Shadow:
            pass

        set_class_dump_data(Plain, Shadow)
        assert get_class_dump_data(Plain).metadata is Shadow

    def test_conflict_requires_replace(self) -> None:
        class ShadowA:
            pass

        class ShadowB:
            pass

        set_class_dump_data(Plain, ShadowA)
        set_class_dump_data(Plain, ShadowA)
        with pytest.raises(DumpConfigurationError):
            set_class_dump_data(Plain, ShadowB)
        set_class_dump_data(Plain, ShadowB, replace=True)
        assert get_class_dump_data(Plain).metadata is ShadowB

    def test_registration_requires_something(self) -> None:
        with pytest.raises(DumpConfigurationError):
            set_class_dump_data(Plain)

    def test_registrar_standard_shadows(self) -> None:
        ClassMetadataRegistrar().register_metadata()
        assert get_class_dump_data(BaseException).metadata is ExceptionDumpMetadata

    def test_generic_alias_uses_origin_registration(self) -> None:
        class Shadow:
            pass

        set_class_dump_data(list, Shadow)
        assert get_class_dump_data(list[int]).metadata is Shadow


class TestMaxToDump:
    @pytest.mark.parametrize(
        ("max_length", "count", "expected"),
        [(0, 5, 5), (0, 50, 10), (3, 5, 3), (-1, 50, 50), (8, 2, 2)],
    )
    def test_limits(self, max_length: int, count: int, expected: int) -> None:
        assert get_max_to_dump(DumpAttribute(max_length=max_length), count) == expected

    def test_no_attribute_means_default(self) -> None:
        assert get_max_to_dump(None, 11) == 10


# End of file: src/mstair/textdump/test_dump_attribute.py
