# File: src/mstair/textdump/member_dumpers.py
"""
Output strategies of the traversal state machine.

The traversal (see `dump_state.DumpState`) describes its output as
instructions. `WriterMemberDumper` runs each instruction at once against
the live instance; `ScriptMemberDumper` records it into a `DumpScript`.
Property segments are handled the same way by both: the instructions
between `begin_dump_property()` and `end_dump_property()` become one
conditional block, run at once or recorded.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from mstair.textdump.dump_script import (
    DumpScript,
    Instruction,
    ScriptFrame,
    property_block_instruction,
    write_line_instruction,
    write_text_instruction,
)
from mstair.textdump.member_info import DumpMember


__all__ = ["MemberDumper", "ScriptMemberDumper", "WriterMemberDumper"]


class MemberDumper(ABC):
    """Receives the instructions produced by a traversal."""

    @abstractmethod
    def emit(self, instruction: Instruction) -> bool:
        """
        Run or record `instruction`.

        :return: True if the instruction ran and ended the rendering of the instance.
        """

    @abstractmethod
    def begin_dump_property(self, label: str) -> None: ...

    @abstractmethod
    def end_dump_property(self, member: DumpMember, dont_dump_nulls: bool) -> None: ...


class WriterMemberDumper(MemberDumper):
    """Runs instructions immediately for one instance."""

    def __init__(self, frame: ScriptFrame) -> None:
        self.frame = frame
        self._segments: list[list[Instruction]] = []

    def emit(self, instruction: Instruction) -> bool:
        if self._segments:
            self._segments[-1].append(instruction)
            return False
        return instruction(self.frame)

    def begin_dump_property(self, label: str) -> None:
        self._segments.append([write_line_instruction(), write_text_instruction(label)])

    def end_dump_property(self, member: DumpMember, dont_dump_nulls: bool) -> None:
        block = tuple(self._segments.pop())
        self.emit(property_block_instruction(member, dont_dump_nulls, block))


class ScriptMemberDumper(MemberDumper):
    """Records instructions into a script builder; nothing is written."""

    def __init__(self, script: DumpScript) -> None:
        self.script = script

    def emit(self, instruction: Instruction) -> bool:
        self.script.add(instruction)
        return False

    def begin_dump_property(self, label: str) -> None:
        self.script.begin_dump_property(label)

    def end_dump_property(self, member: DumpMember, dont_dump_nulls: bool) -> None:
        self.script.end_dump_property(member, dont_dump_nulls)


# End of file: src/mstair/textdump/member_dumpers.py
