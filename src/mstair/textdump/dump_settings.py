# File: src/mstair/textdump/dump_settings.py
"""
Dumper-wide settings and member visibility flags.

Environment variables read by `DumpSettings.from_environment()` (after `.env`):
- TEXTDUMP_USE_SCRIPT_CACHE: true/false
- TEXTDUMP_INDENT_SIZE: spaces per indent level (minimum 2)
- TEXTDUMP_MAX_DUMP_LENGTH: maximum characters per dump
- TEXTDUMP_PROPERTY_VISIBILITY: e.g. "PUBLIC|NON_PUBLIC"
- TEXTDUMP_FIELD_VISIBILITY: e.g. "PUBLIC"
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field, replace
from typing import Any, Final, Self

from mstair.textdump.base.config import env_bool, env_int, env_str
from mstair.textdump.errors import DumpConfigurationError


__all__ = ["DEFAULT_MAX_DUMP_LENGTH", "MIN_INDENT_SIZE", "DumpSettings", "MemberVisibility"]

DEFAULT_MAX_DUMP_LENGTH: Final[int] = 4 * 1024 * 1024
MIN_INDENT_SIZE: Final[int] = 2

_VISIBILITY_SEPARATOR_RX: Final[re.Pattern[str]] = re.compile(r"[|,; ]+")


class MemberVisibility(enum.Flag):
    """Which member names are rendered: PUBLIC (`name`) and NON_PUBLIC (`_name`)."""

    NONE = 0
    PUBLIC = 1
    NON_PUBLIC = 2
    ALL = PUBLIC | NON_PUBLIC

    @classmethod
    def of_name(cls, name: str) -> MemberVisibility:
        return cls.NON_PUBLIC if name.startswith("_") else cls.PUBLIC

    def allows(self, name: str) -> bool:
        return bool(self & MemberVisibility.of_name(name))

    @classmethod
    def parse(cls, text: str) -> MemberVisibility:
        """
        Parse `PUBLIC|NON_PUBLIC` style text.

        :raises DumpConfigurationError: On an unknown flag name.
        """
        result = cls.NONE
        for part in _VISIBILITY_SEPARATOR_RX.split(text.strip()):
            if not part:
                continue
            try:
                result |= cls[part.upper().replace("-", "_")]
            except KeyError:
                raise DumpConfigurationError(f"Unknown member visibility {part!r} in {text!r}") from None
        return result


@dataclass(frozen=True, slots=True)
class DumpSettings:
    """
    Immutable settings of one ObjectTextDumper.

    :param use_dump_script_cache: Render through compiled, cached scripts.
    :param indent_size: Spaces per indent level; values below 2 are raised to 2.
    :param max_dump_length: Characters per dump before the length-exceeded marker.
    :param property_visibility: Visibility of properties.
    :param field_visibility: Visibility of fields and undeclared instance attributes.
    """

    use_dump_script_cache: bool = True
    indent_size: int = MIN_INDENT_SIZE
    max_dump_length: int = DEFAULT_MAX_DUMP_LENGTH
    property_visibility: MemberVisibility = field(default=MemberVisibility.ALL)
    field_visibility: MemberVisibility = field(default=MemberVisibility.PUBLIC)

    def __post_init__(self) -> None:
        if self.indent_size < MIN_INDENT_SIZE:
            object.__setattr__(self, "indent_size", MIN_INDENT_SIZE)
        if self.max_dump_length <= 0:
            raise DumpConfigurationError(f"max_dump_length must be positive, got {self.max_dump_length}")
        if not isinstance(self.property_visibility, MemberVisibility) or not isinstance(
            self.field_visibility, MemberVisibility
        ):
            raise DumpConfigurationError("property_visibility and field_visibility must be MemberVisibility flags")

    @classmethod
    def from_environment(cls) -> Self:
        """Return settings built from TEXTDUMP_* variables, defaults for unset ones."""
        default = cls()
        property_text = env_str("TEXTDUMP_PROPERTY_VISIBILITY")
        field_text = env_str("TEXTDUMP_FIELD_VISIBILITY")
        return cls(
            use_dump_script_cache=env_bool("TEXTDUMP_USE_SCRIPT_CACHE", default.use_dump_script_cache),
            indent_size=env_int("TEXTDUMP_INDENT_SIZE", default.indent_size),
            max_dump_length=env_int("TEXTDUMP_MAX_DUMP_LENGTH", default.max_dump_length),
            property_visibility=MemberVisibility.parse(property_text) if property_text else default.property_visibility,
            field_visibility=MemberVisibility.parse(field_text) if field_text else default.field_visibility,
        )

    def replace(self, **changes: Any) -> DumpSettings:
        return replace(self, **changes)


# End of file: src/mstair/textdump/dump_settings.py
