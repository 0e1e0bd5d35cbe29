"""
records_kernel.domain.kinds -- Field kinds and width markers.

A field's kind decides how its value is turned into text and back. The
kind is derived from the field's type hint; ``bool`` is checked before
``int`` because it subclasses it.

Fixed-width numeric fields are declared with the ``Annotated`` aliases
below (``Int8`` ... ``UInt64``, ``Float32``, ``Float64``). Plain ``int`` is
a signed 64-bit field and plain ``float`` a binary64 field.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Annotated


class FieldKind(str, Enum):
    """Coercion-relevant classification of a field's value type."""

    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    BOOL = "bool"
    STRING = "string"
    UNSUPPORTED = "unsupported"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class IntWidth:
    """Width marker for integer fields."""

    bits: int
    signed: bool = True

    def __post_init__(self) -> None:
        if self.bits not in (8, 16, 32, 64):
            raise ValueError(f"Unsupported integer width: {self.bits}")

    @property
    def min_value(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max_value(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1


@dataclass(frozen=True)
class FloatWidth:
    """Width marker for floating point fields."""

    bits: int

    def __post_init__(self) -> None:
        if self.bits not in (32, 64):
            raise ValueError(f"Unsupported float width: {self.bits}")


DEFAULT_INT_WIDTH = IntWidth(64)
DEFAULT_FLOAT_WIDTH = FloatWidth(64)

Int8 = Annotated[int, IntWidth(8)]
Int16 = Annotated[int, IntWidth(16)]
Int32 = Annotated[int, IntWidth(32)]
Int64 = Annotated[int, IntWidth(64)]
UInt8 = Annotated[int, IntWidth(8, signed=False)]
UInt16 = Annotated[int, IntWidth(16, signed=False)]
UInt32 = Annotated[int, IntWidth(32, signed=False)]
UInt64 = Annotated[int, IntWidth(64, signed=False)]
Float32 = Annotated[float, FloatWidth(32)]
Float64 = Annotated[float, FloatWidth(64)]

# Zero values per kind; UNSUPPORTED has none.
ZERO_VALUES: dict[FieldKind, object] = {
    FieldKind.INT: 0,
    FieldKind.UINT: 0,
    FieldKind.FLOAT: 0.0,
    FieldKind.BOOL: False,
    FieldKind.STRING: "",
}
