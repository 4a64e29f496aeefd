from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class TypeClass(Enum):
    TEXT = "text"
    REAL = "real"
    INTEGER = "integer"
    NESTED = "nested"
    BINARY = "binary"
    OTHER = "other"


NESTED_BUFFER_CODE = -3

# Inclusive (low, high) group-code ranges per type class.
_TYPE_CLASS_RANGES: tuple[tuple[int, int, TypeClass], ...] = (
    (0, 9, TypeClass.TEXT),
    (10, 59, TypeClass.REAL),
    (60, 99, TypeClass.INTEGER),
    (100, 102, TypeClass.TEXT),
    (110, 149, TypeClass.REAL),
    (160, 179, TypeClass.INTEGER),
    (210, 239, TypeClass.REAL),
    (270, 299, TypeClass.INTEGER),
    (300, 309, TypeClass.TEXT),
    (310, 319, TypeClass.BINARY),
    (320, 369, TypeClass.TEXT),
    (370, 389, TypeClass.INTEGER),
    (390, 399, TypeClass.TEXT),
    (400, 409, TypeClass.INTEGER),
    (410, 419, TypeClass.TEXT),
    (420, 429, TypeClass.INTEGER),
    (430, 439, TypeClass.TEXT),
    (440, 459, TypeClass.INTEGER),
    (460, 469, TypeClass.REAL),
    (470, 479, TypeClass.TEXT),
    (999, 999, TypeClass.TEXT),
    (1000, 1003, TypeClass.TEXT),
    (1004, 1004, TypeClass.BINARY),
    (1005, 1005, TypeClass.TEXT),
    (1010, 1059, TypeClass.REAL),
    (1060, 1071, TypeClass.INTEGER),
)


def type_class_for(code: int) -> TypeClass:
    if code == NESTED_BUFFER_CODE:
        return TypeClass.NESTED
    for low, high, type_class in _TYPE_CLASS_RANGES:
        if low <= code <= high:
            return type_class
    return TypeClass.OTHER


@dataclass(frozen=True)
class TaggedValue:
    """A (type code, payload) pair as attached to a drawing object.

    ``payload`` is ``str``, ``bytes``, ``int``, ``float``, a tuple of
    ``TaggedValue`` for nested buffers, a numeric tuple for points, or ``None``
    when the host reports no value.
    """

    code: int
    payload: Any = None

    @property
    def type_class(self) -> TypeClass:
        return type_class_for(self.code)


def nested(*values: TaggedValue) -> TaggedValue:
    return TaggedValue(NESTED_BUFFER_CODE, tuple(values))
