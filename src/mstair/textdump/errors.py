# File: src/mstair/textdump/errors.py
"""
Exceptions raised by mstair.textdump.

Only configuration errors leave a dump call. Getter failures, missing
custom formatters and length overflow are rendered into the dump text.
"""

__all__ = ["DumpConfigurationError", "DumpError"]


class DumpError(Exception):
    """Base class for textdump errors."""


class DumpConfigurationError(DumpError, ValueError):
    """Invalid arguments or conflicting dump metadata, raised before rendering starts."""


# End of file: src/mstair/textdump/errors.py
