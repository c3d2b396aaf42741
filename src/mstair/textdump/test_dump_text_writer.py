# File: src/mstair/textdump/test_dump_text_writer.py
"""
Tests for DumpTextWriter.

Covers:
- Indentation of non-empty lines only
- Length accounting including indentation
- Length-exceeded marker written once, later writes dropped until reset()
"""

from __future__ import annotations

import pytest

from mstair.textdump.dump_format import DumpFormat
from mstair.textdump.dump_text_writer import DumpTextWriter
from mstair.textdump.errors import DumpConfigurationError


# ---------- Indentation ----------


class TestIndentation:
    def test_indent_applies_after_newline(self) -> None:
        w = DumpTextWriter()
        w.write("a:")
        w.indent += 1
        w.write_line()
        w.write("b")
        assert w.getvalue() == "a:\n  b"

    def test_empty_lines_are_not_indented(self) -> None:
        w = DumpTextWriter(indent_size=4)
        w.indent = 1
        w.write("x\n\ny")
        assert str(w) == "    x\n\n    y"

    def test_indent_never_negative(self) -> None:
        w = DumpTextWriter()
        w.indent -= 3
        assert w.indent == 0

    def test_continuation_on_same_line_not_indented(self) -> None:
        w = DumpTextWriter()
        w.indent = 2
        w.write("key = ")
        w.write("value")
        assert w.getvalue() == "    key = value"


# ---------- Length limit ----------


class TestLengthLimit:
    def test_length_counts_indentation(self) -> None:
        w = DumpTextWriter()
        w.indent = 1
        w.write("ab")
        assert w.length == 4

    def test_marker_written_once(self) -> None:
        w = DumpTextWriter(max_length=10)
        w.write("abcdefghijkl")
        w.write("more")
        marker = DumpFormat.LENGTH_EXCEEDED.format(10)
        assert w.exceeded
        assert w.getvalue() == "abcdefghij" + marker

    def test_exact_fit_is_not_exceeded(self) -> None:
        w = DumpTextWriter(max_length=3)
        w.write("abc")
        assert not w.exceeded
        assert w.getvalue() == "abc"

    def test_reset_restarts_counting_and_keeps_text(self) -> None:
        w = DumpTextWriter(max_length=3)
        w.write("abcd")
        w.reset()
        assert w.length == 0
        w.write("z")
        assert w.getvalue().endswith("z")
        assert w.getvalue().startswith("abc...")

    def test_non_positive_max_length_rejected(self) -> None:
        with pytest.raises(DumpConfigurationError):
            DumpTextWriter(max_length=0)


# End of file: src/mstair/textdump/test_dump_text_writer.py
