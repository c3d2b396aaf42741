"""
package: mstair.textdump
"""

# <AUTOGEN_INIT>
from mstair.textdump import (
    base,
    class_metadata,
    custom_format,
    dump_api,
    dump_attribute,
    dump_format,
    dump_script,
    dump_settings,
    dump_state,
    dump_text_writer,
    errors,
    member_dumpers,
    member_info,
    member_resolver,
    object_text_dumper,
    script_cache,
    type_helpers,
    value_writers,
    xlogging,
)


__all__ = [
    "base",
    "class_metadata",
    "custom_format",
    "dump_api",
    "dump_attribute",
    "dump_format",
    "dump_script",
    "dump_settings",
    "dump_state",
    "dump_text_writer",
    "errors",
    "member_dumpers",
    "member_info",
    "member_resolver",
    "object_text_dumper",
    "script_cache",
    "type_helpers",
    "value_writers",
    "xlogging",
]
# </AUTOGEN_INIT>

__version__ = "0.1.0"
