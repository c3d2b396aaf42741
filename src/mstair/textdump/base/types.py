# File: src/mstair/textdump/base/types.py
"""
Runtime type tuples shared by the dumper and the logger.
"""

from decimal import Decimal
from fractions import Fraction
from typing import Final


__all__ = [
    "BUFFER_TYPES",
    "PRIMITIVE_TYPES",
    "int_from_string",
]


BUFFER_TYPES: Final[tuple[type, ...]] = (bytes, bytearray, memoryview)
PRIMITIVE_NON_STRING_TYPES: Final[tuple[type, ...]] = (
    int,
    float,
    complex,
    bool,
    Decimal,
    Fraction,
    type(None),
)
PRIMITIVE_TYPES: Final[tuple[type, ...]] = (*PRIMITIVE_NON_STRING_TYPES, str)


def int_from_string(value: str | None, default: int = 0) -> int:
    """
    Parse a decimal integer, returning `default` for None, blank or invalid text.

    :param value: The text to parse.
    :param default: Value returned when `value` is not an integer.
    """
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip(), 10)
    except ValueError:
        return default


# End of file: src/mstair/textdump/base/types.py
