# File: src/mstair/textdump/test_custom_format.py
"""
Tests for custom value formatting.

Covers:
- value_format="ToString"
- dump_class static methods: exact match before assignable match, missing method diagnostic
- dump_method on the value, its class, and the metadata class
- non-str formatter results fall back to default rendering
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from mstair.textdump.custom_format import MISSING, dumped_custom, find_formatter, reset_formatters
from mstair.textdump.dump_attribute import DumpAttribute
from mstair.textdump.dump_text_writer import DumpTextWriter


# ---------- Fixtures ----------


@pytest.fixture(autouse=True)
def clean_formatters() -> Iterator[None]:
    reset_formatters()
    yield
    reset_formatters()


class Money:
    def __init__(self, cents: int) -> None:
        self.cents = cents

    def __str__(self) -> str:
        return f"${self.cents / 100:.2f}"

    def render(self) -> str:
        return f"{self.cents}c"


class Euro(Money):
    pass


class Formatters:
    @staticmethod
    def dump(value: object) -> str:
        return "object"

    @staticmethod
    def dump_money(value: Money) -> str:
        return "money"


class ExactFormatters(Formatters):
    @staticmethod
    def dump(value: Euro) -> str:
        return "euro"


class Silent:
    @staticmethod
    def quiet(value: Money) -> int:
        return 42


class Metadata:
    @staticmethod
    def describe(value: Money) -> str:
        return f"meta:{value.cents}"


def _write(value: object, attribute: DumpAttribute, metadata: type | None = None) -> tuple[bool, str]:
    writer = DumpTextWriter()
    handled = dumped_custom(writer, value, attribute, metadata)
    return handled, writer.getvalue()


# ---------- Resolution ----------


class TestToString:
    def test_uses_str(self) -> None:
        assert _write(Money(150), DumpAttribute(value_format="ToString")) == (True, "$1.50")


class TestDumpClass:
    def test_assignable_match(self) -> None:
        assert _write(Money(1), DumpAttribute(dump_class=Formatters, dump_method="dump_money")) == (True, "money")

    def test_exact_match_wins(self) -> None:
        assert _write(Euro(1), DumpAttribute(dump_class=ExactFormatters)) == (True, "euro")

    def test_unannotated_default_method(self) -> None:
        assert _write(Money(1), DumpAttribute(dump_class=Formatters)) == (True, "object")

    def test_missing_method_diagnostic(self) -> None:
        handled, text = _write(Money(1), DumpAttribute(dump_class=Formatters, dump_method="nope"))
        assert handled
        assert text.startswith("***")
        assert "nope" in text and "Money" in text and "Formatters" in text

    def test_missing_is_memoized(self) -> None:
        attribute = DumpAttribute(dump_class=Formatters, dump_method="nope")
        assert find_formatter(Money, attribute) is MISSING
        assert find_formatter(Money, attribute) is MISSING


class TestDumpMethod:
    def test_instance_method(self) -> None:
        assert _write(Money(7), DumpAttribute(dump_method="render")) == (True, "7c")

    def test_metadata_static_method(self) -> None:
        assert _write(Money(7), DumpAttribute(dump_method="describe"), Metadata) == (True, "meta:7")

    def test_not_found_falls_back(self) -> None:
        assert _write(Money(7), DumpAttribute(dump_method="absent")) == (False, "")

    def test_non_str_result_falls_back(self) -> None:
        assert _write(Money(7), DumpAttribute(dump_class=Silent, dump_method="quiet")) == (False, "")

    def test_plain_attribute_not_custom(self) -> None:
        assert _write(Money(7), DumpAttribute()) == (False, "")


# End of file: src/mstair/textdump/test_custom_format.py
