"""
package: mstair.textdump.base
"""

# <AUTOGEN_INIT>
from mstair.textdump.base import (
    config,
    fs_helpers,
    rw_lock,
    types,
)


__all__ = [
    "config",
    "fs_helpers",
    "rw_lock",
    "types",
]
# </AUTOGEN_INIT>
