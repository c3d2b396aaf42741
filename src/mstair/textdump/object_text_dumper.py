# File: src/mstair/textdump/object_text_dumper.py
"""
ObjectTextDumper: renders an object graph as indented text.

One dumper renders one top-level `dump()` call at a time; it is not meant
to be shared between threads. The script cache, the configuration caches
and `default_dump_settings()` are shared and internally synchronized.

Rendering of one non-basic instance:
1. With the script cache enabled, the compiled script of (class,
   configuration, visibility) is looked up, built and published on a miss,
   and run. A key another caller is building right now is rendered without
   a script for this one call.
2. Otherwise the same traversal runs directly against the instance.

Example:
    >>> ObjectTextDumper().dump(Point(1, 2)).text
    'Point (geometry.Point):\\n  x                        = 1\\n  y                        = 2'
"""

from __future__ import annotations

import traceback
from collections import deque
from collections.abc import Callable
from typing import Any, ClassVar, Self, TypeAlias

from mstair.textdump.base.rw_lock import ReaderWriterLock
from mstair.textdump.class_metadata import ClassDumpData, get_class_dump_data
from mstair.textdump.dump_attribute import TAIL_ORDER, DumpAttribute
from mstair.textdump.dump_format import DumpFormat
from mstair.textdump.dump_script import DumpScript, Script, ScriptFrame
from mstair.textdump.dump_settings import DumpSettings
from mstair.textdump.dump_state import DumpedObjects, DumpState
from mstair.textdump.dump_text_writer import DumpTextWriter
from mstair.textdump.errors import DumpConfigurationError
from mstair.textdump.member_dumpers import ScriptMemberDumper, WriterMemberDumper
from mstair.textdump.member_info import MemberInfoComparer
from mstair.textdump.script_cache import DumpScriptCache, ScriptLookup
from mstair.textdump.value_writers import write_basic_value
from mstair.textdump.xlogging.logger_factory import create_logger


__all__ = ["ObjectTextDumper"]

LOG = create_logger(__name__)

ComparerFactory: TypeAlias = Callable[[type | None], MemberInfoComparer]


class ObjectTextDumper:
    """
    Driver of one dump: owns the writer, the seen-object set and the depth budget.

    :param writer: Destination; a new DumpTextWriter sized from the settings by default.
    :param member_info_comparer: Factory of the member comparer for a metadata class.
        Only the default comparer renders through cached scripts.
    :param settings: Settings of this dumper; `default_dump_settings()` by default.
    """

    _default_dump_settings: ClassVar[DumpSettings | None] = None
    _settings_lock: ClassVar[ReaderWriterLock] = ReaderWriterLock()

    def __init__(
        self,
        writer: DumpTextWriter | None = None,
        member_info_comparer: ComparerFactory | None = None,
        settings: DumpSettings | None = None,
    ) -> None:
        if settings is not None and not isinstance(settings, DumpSettings):
            raise DumpConfigurationError(f"Expected DumpSettings, got {settings!r}")
        self.instance_settings = settings or ObjectTextDumper.default_dump_settings()
        if writer is None:
            writer = DumpTextWriter(self.instance_settings.max_dump_length, self.instance_settings.indent_size)
        else:
            writer.indent_size = self.instance_settings.indent_size
        self.writer = writer
        self.member_info_comparer: ComparerFactory = member_info_comparer or MemberInfoComparer
        self.dumped_objects = DumpedObjects()
        self._max_depth: int | None = None

    # ---------- Process-wide defaults ----------

    @classmethod
    def default_dump_settings(cls) -> DumpSettings:
        """Settings used by dumpers created without explicit settings; read from the environment once."""
        with cls._settings_lock.read_locked():
            settings = cls._default_dump_settings
        if settings is not None:
            return settings
        settings = DumpSettings.from_environment()
        with cls._settings_lock.write_locked():
            if cls._default_dump_settings is None:
                cls._default_dump_settings = settings
            return cls._default_dump_settings

    @classmethod
    def set_default_dump_settings(cls, settings: DumpSettings | None) -> None:
        """Replace the process-wide default settings; None re-reads the environment on next use."""
        if settings is not None and not isinstance(settings, DumpSettings):
            raise DumpConfigurationError(f"Expected DumpSettings, got {settings!r}")
        with cls._settings_lock.write_locked():
            cls._default_dump_settings = settings

    # ---------- Output and depth ----------

    @property
    def text(self) -> str:
        return self.writer.getvalue()

    def indent(self) -> None:
        self.writer.indent += 1

    def unindent(self) -> None:
        self.writer.indent -= 1

    @property
    def max_depth(self) -> int | None:
        """Remaining nesting levels, or None outside a dump."""
        return self._max_depth

    def decrement_max_depth(self) -> None:
        if self._max_depth is not None:
            self._max_depth -= 1

    def increment_max_depth(self) -> None:
        if self._max_depth is not None:
            self._max_depth += 1

    # ---------- Entry points ----------

    def dump(
        self,
        value: Any,
        dump_metadata: type | None = None,
        dump_attribute: DumpAttribute | None = None,
        initial_indent_level: int = 0,
    ) -> Self:
        """
        Render `value` into the writer.

        :param value: Root of the object graph.
        :param dump_metadata: Metadata class overriding the one of `type(value)`.
        :param dump_attribute: Attribute applied to the root as if it were a member.
        :param initial_indent_level: Indent level of the first line.
        :raises DumpConfigurationError: On invalid arguments; no text is written.
        """
        if dump_metadata is not None and not isinstance(dump_metadata, type):
            raise DumpConfigurationError(f"Expected a metadata class, got {dump_metadata!r}")
        if dump_attribute is not None and not isinstance(dump_attribute, DumpAttribute):
            raise DumpConfigurationError(f"Expected a DumpAttribute, got {dump_attribute!r}")

        self.writer.indent = initial_indent_level
        try:
            self.dump_object(value, dump_metadata, dump_attribute)
        except DumpConfigurationError:
            raise
        except Exception:
            LOG.warning("dump of %s failed", type(value).__qualname__, exc_info=True)
            self.writer.write_line()
            self.writer.write(DumpFormat.DUMPER_EXCEPTION.format(traceback.format_exc()))
        finally:
            self.dumped_objects.clear()
            self.writer.reset()
            self._max_depth = None
        return self

    def dump_object(
        self,
        obj: Any,
        dump_metadata: type | None = None,
        dump_attribute: DumpAttribute | None = None,
    ) -> None:
        """
        Render one value at the current writer position; re-entered for nested objects.

        :param obj: The value.
        :param dump_metadata: Metadata class overriding the one of `type(obj)`.
        :param dump_attribute: Attribute of the member holding `obj`.
        """
        if write_basic_value(self.writer, obj, dump_attribute):
            return

        object_type = type(obj)
        class_dump_data = get_class_dump_data(object_type, dump_metadata, dump_attribute)
        if self._max_depth is None:
            self._max_depth = class_dump_data.dump_attribute.max_depth
        if self._max_depth < 0:
            self.writer.write(DumpFormat.MAX_DEPTH_REACHED)
            return

        if self._uses_script_cache:
            script = self._cached_script(object_type, class_dump_data, dump_attribute)
            if script is not None:
                script(obj, class_dump_data, self)
                return

        state = DumpState(
            self,
            WriterMemberDumper(ScriptFrame(obj, class_dump_data, self)),
            object_type,
            class_dump_data,
            instance_dump_attribute=dump_attribute,
            track_depth=True,
        )
        self._dump_state(state)

    def compile_script(
        self,
        object_type: type,
        dump_metadata: type | None = None,
        dump_attribute: DumpAttribute | None = None,
    ) -> Script:
        """
        Return the script rendering instances of `object_type`, through the cache when enabled.

        A key being built by another caller gets a private, unpublished script.
        """
        if not isinstance(object_type, type):
            raise DumpConfigurationError(f"Expected a class, got {object_type!r}")
        class_dump_data = get_class_dump_data(object_type, dump_metadata, dump_attribute)
        if self._uses_script_cache:
            script = self._cached_script(object_type, class_dump_data, dump_attribute)
            if script is not None:
                return script
        return self._build_script(object_type, class_dump_data, dump_attribute).compile()

    # ---------- Script cache ----------

    @property
    def _uses_script_cache(self) -> bool:
        return self.instance_settings.use_dump_script_cache and self.member_info_comparer is MemberInfoComparer

    def _cached_script(
        self,
        object_type: type,
        class_dump_data: ClassDumpData,
        dump_attribute: DumpAttribute | None,
    ) -> Script | None:
        cache = DumpScriptCache.get_instance()
        lookup = ScriptLookup(
            object_type,
            class_dump_data,
            self.instance_settings.property_visibility,
            self.instance_settings.field_visibility,
        )
        found, script = cache.try_find(lookup)
        if found:
            return script
        if not cache.building_script_for(lookup):
            return None
        try:
            builder = self._build_script(object_type, class_dump_data, dump_attribute)
        except BaseException:
            cache.discard_building(lookup)
            raise
        return cache.add(lookup, builder)

    def _build_script(
        self,
        object_type: type,
        class_dump_data: ClassDumpData,
        dump_attribute: DumpAttribute | None,
    ) -> DumpScript:
        builder = DumpScript(object_type, class_dump_data)
        state = DumpState(
            self,
            ScriptMemberDumper(builder),
            object_type,
            class_dump_data,
            instance_dump_attribute=dump_attribute,
        )
        self._dump_state(state)
        return builder

    # ---------- Traversal ----------

    def _dump_state(self, state: DumpState) -> None:
        """
        Walk the levels of one instance.

        Members with non-negative order render base class first; members with
        negative order render afterwards, derived class first; tail members
        render last, derived class first.
        """
        with state:
            if state.dumped_already():
                return
            if state.dumped_collection(enumerate_custom=False):
                return

            remaining: list[DumpState] = []
            if not self._dumped_top_properties(state, remaining):
                tail: deque[DumpState] = deque()
                self._dump_remaining_properties(remaining, tail)
                self._dump_tail_properties(tail)
                state.dumped_collection(enumerate_custom=True)
            state.unindent()

    def _dumped_top_properties(self, state: DumpState, remaining: list[DumpState]) -> bool:
        """
        Render the non-negative-order members of `state` and its base levels.

        :return: True if the instance was rendered completely by a terminal level.
        """
        if state.dumped_delegate() or state.dumped_member_info() or state.dumped_root_class():
            state.indent()
            return True

        self._dumped_top_properties(state.get_base_type_dump_state(), remaining)
        while state.move_next():
            if state.current_dump_attribute.order < 0:
                remaining.append(state)
                return False
            state.dump_property()
        return False

    def _dump_remaining_properties(self, remaining: list[DumpState], tail: deque[DumpState]) -> None:
        while remaining:
            state = remaining.pop()
            while True:
                if state.current_dump_attribute.order == TAIL_ORDER:
                    tail.append(state)
                    break
                state.dump_property()
                if not state.move_next():
                    break

    def _dump_tail_properties(self, tail: deque[DumpState]) -> None:
        while tail:
            state = tail.popleft()
            while True:
                state.dump_property()
                if not state.move_next():
                    break


# End of file: src/mstair/textdump/object_text_dumper.py
