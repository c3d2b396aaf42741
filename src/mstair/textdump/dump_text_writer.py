# File: src/mstair/textdump/dump_text_writer.py
"""
Indenting, length-limited text sink used by the dumper.

Every emitted character counts toward `max_length`, indentation included.
The first character past the limit is replaced by the length-exceeded
marker and later writes are dropped until `reset()`.

Example:
    >>> w = DumpTextWriter(max_length=1000)
    >>> w.write("a:")
    >>> w.indent += 1
    >>> w.write_line()
    >>> w.write("b")
    >>> w.getvalue()
    'a:\\n  b'
"""

from __future__ import annotations

from typing import Final

from mstair.textdump.dump_format import DumpFormat
from mstair.textdump.dump_settings import DEFAULT_MAX_DUMP_LENGTH, MIN_INDENT_SIZE
from mstair.textdump.errors import DumpConfigurationError


__all__ = ["DumpTextWriter"]

NEW_LINE: Final[str] = "\n"


class DumpTextWriter:
    """In-memory writer that indents each new line and stops at `max_length`."""

    def __init__(self, max_length: int = DEFAULT_MAX_DUMP_LENGTH, indent_size: int = MIN_INDENT_SIZE) -> None:
        if max_length <= 0:
            raise DumpConfigurationError(f"max_length must be positive, got {max_length}")
        self.max_length = max_length
        self.indent_size = indent_size
        self._indent = 0
        self._parts: list[str] = []
        self._length = 0
        self._exceeded = False
        self._at_line_start = True

    @property
    def indent(self) -> int:
        """Current indent level; each level is `indent_size` spaces."""
        return self._indent

    @indent.setter
    def indent(self, value: int) -> None:
        self._indent = max(0, value)

    @property
    def length(self) -> int:
        """Characters counted since the last reset."""
        return self._length

    @property
    def exceeded(self) -> bool:
        return self._exceeded

    def write(self, text: str) -> None:
        if self._exceeded or not text:
            return
        lines = text.split(NEW_LINE)
        for i, line in enumerate(lines):
            if i:
                self._emit(NEW_LINE)
                self._at_line_start = True
            if line:
                if self._at_line_start:
                    self._at_line_start = False
                    self._emit(" " * (self._indent * self.indent_size))
                self._emit(line)

    def write_line(self) -> None:
        self.write(NEW_LINE)

    def _emit(self, text: str) -> None:
        if self._exceeded or not text:
            return
        remaining = self.max_length - self._length
        if len(text) <= remaining:
            self._parts.append(text)
            self._length += len(text)
            return
        self._parts.append(text[:remaining])
        self._parts.append(DumpFormat.LENGTH_EXCEEDED.format(self.max_length))
        self._length = self.max_length
        self._exceeded = True

    def reset(self) -> None:
        """Restart length counting; text written so far is kept."""
        self._length = 0
        self._exceeded = False

    def getvalue(self) -> str:
        return "".join(self._parts)

    def __str__(self) -> str:
        return self.getvalue()


# End of file: src/mstair/textdump/dump_text_writer.py
