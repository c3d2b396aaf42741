# File: src/mstair/textdump/script_cache.py
"""
Process-wide store of compiled dump scripts.

Scripts are keyed by `ScriptLookup` (class, class dump data, property and
field visibility). A key goes through two states:
- building: one caller has registered intent with `building_script_for()`,
- published: `add()` compiled the builder and stored the Script.

`try_find()` reports a building key as found without a script. The caller
then renders that one call without a script instead of waiting, so a class
that refers to itself (directly or through other classes) never blocks on
its own compilation.

Both maps are guarded by one `ReaderWriterLock`: lookups share it, mutations
hold it exclusively.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass

from mstair.textdump.base.rw_lock import ReaderWriterLock
from mstair.textdump.class_metadata import ClassDumpData
from mstair.textdump.dump_script import DumpScript, Script
from mstair.textdump.dump_settings import MemberVisibility
from mstair.textdump.xlogging.logger_factory import create_logger


__all__ = ["DumpScriptCache", "ScriptLookup"]

LOG = create_logger(__name__)

_dump_script_cache_instance: DumpScriptCache | None = None
_dump_script_cache_instance_lock = threading.Lock()


@dataclass(frozen=True, slots=True)
class ScriptLookup:
    """Cache key of one compiled script."""

    object_type: type
    class_dump_data: ClassDumpData
    property_visibility: MemberVisibility
    field_visibility: MemberVisibility


class DumpScriptCache:
    """Compiled scripts plus the set of keys being built right now."""

    def __init__(self) -> None:
        self._scripts: dict[ScriptLookup, Script] = {}
        self._building: set[ScriptLookup] = set()
        self._lock = ReaderWriterLock()
        self._build_count = 0

    @property
    def build_count(self) -> int:
        """Number of scripts published since creation or the last reset."""
        return self._build_count

    def try_find(self, lookup: ScriptLookup) -> tuple[bool, Script | None]:
        """
        Look up a script.

        :return: (True, script) when published, (True, None) when being built, (False, None) otherwise.
        """
        with self._lock.read_locked():
            script = self._scripts.get(lookup)
            if script is not None:
                return True, script
            if lookup in self._building:
                LOG.debug("script for %s is being built; rendering without it", lookup.object_type.__qualname__)
                return True, None
        return False, None

    def building_script_for(self, lookup: ScriptLookup) -> bool:
        """
        Register intent to build the script of `lookup`.

        :return: False if another caller registered or published it first.
        """
        with self._lock.write_locked():
            if lookup in self._scripts or lookup in self._building:
                return False
            self._building.add(lookup)
        LOG.debug("building script for %s", lookup.object_type.__qualname__)
        return True

    def discard_building(self, lookup: ScriptLookup) -> None:
        """Drop the building marker of a build that failed."""
        with self._lock.write_locked():
            self._building.discard(lookup)

    def add(self, lookup: ScriptLookup, builder: DumpScript) -> Script:
        """
        Compile `builder` and publish the result, removing the building marker.

        :return: The published script; an earlier one wins if the key was already published.
        """
        script = builder.compile()
        with self._lock.write_locked():
            published = self._scripts.setdefault(lookup, script)
            self._building.discard(lookup)
            if published is script:
                self._build_count += 1
        return published

    def reset(self) -> None:
        """Forget every script and building marker."""
        with self._lock.write_locked():
            self._scripts.clear()
            self._building.clear()
            self._build_count = 0

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._scripts)

    @classmethod
    def get_instance(cls) -> DumpScriptCache:
        """Return the process-wide cache, creating it on first use."""
        global _dump_script_cache_instance
        if _dump_script_cache_instance is None:
            with _dump_script_cache_instance_lock:
                if _dump_script_cache_instance is None:
                    _dump_script_cache_instance = DumpScriptCache()
        return _dump_script_cache_instance


# End of file: src/mstair/textdump/script_cache.py
