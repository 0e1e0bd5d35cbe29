"""
Value coercion: one text conversion per field kind, in both directions.

Pure functions. ``encode_value`` turns a native field value into its text
form; ``decode_value`` parses text into the field's native type. Both
raise ``FieldCodecError`` subclasses; the codec collects them.
"""

from __future__ import annotations

import math
import re
import struct
from collections.abc import Callable
from decimal import Decimal
from enum import Enum
from typing import Any

from records_kernel.domain.descriptors import FieldDescriptor
from records_kernel.domain.kinds import FieldKind, IntWidth
from records_kernel.exceptions import ParseFailureError, UnsupportedKindError

# ASCII only; \d would accept other Unicode digits
_SIGNED_INT_RE = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_INT_RE = re.compile(r"[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)
_INF_RE = re.compile(r"[+-]?inf(?:inity)?", re.IGNORECASE)

BOOL_LITERALS: dict[str, bool] = {
    "1": True, "t": True, "T": True, "TRUE": True, "true": True, "True": True,
    "0": False, "f": False, "F": False, "FALSE": False, "false": False, "False": False,
}


# -----------------------------------------------------------------------------
# Encode: native -> text
# -----------------------------------------------------------------------------


def _mismatch(fd: FieldDescriptor, value: Any) -> UnsupportedKindError:
    return UnsupportedKindError(
        fd.name, fd.column, fd.kind, f"value of type {type(value).__name__}"
    )


def _out_of_range(fd: FieldDescriptor, bits: int) -> UnsupportedKindError:
    return UnsupportedKindError(
        fd.name, fd.column, fd.kind, f"value out of range for {bits}-bit field"
    )


def _int_width(fd: FieldDescriptor) -> IntWidth:
    return IntWidth(fd.bits or 64, signed=fd.kind == FieldKind.INT)


def _to_float32(value: float) -> float:
    """Round to the nearest binary32 value; may return +-inf for finite input."""
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        # some interpreters raise here instead of rounding to inf
        return math.copysign(math.inf, value)


def overflows_float32(value: float) -> bool:
    """True if finite ``value`` has no finite binary32 neighbour."""
    return math.isfinite(value) and math.isinf(_to_float32(value))


def _shortest_float32(value: float) -> str:
    narrowed = _to_float32(value)
    for precision in range(1, 10):
        text = f"{narrowed:.{precision}g}"
        if _to_float32(float(text)) == narrowed:
            return text
    return repr(narrowed)


def format_float(value: float, bits: int = 64) -> str:
    """
    Shortest round-trippable decimal text, in positional notation.

    Raises:
        OverflowError: ``bits`` is 32 and finite ``value`` is outside the
            binary32 range.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    digits = repr(value)
    if bits == 32:
        if overflows_float32(value):
            raise OverflowError(f"{value!r} is out of range for a 32-bit float")
        digits = _shortest_float32(value)
    text = format(Decimal(digits), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def encode_value(fd: FieldDescriptor, value: Any) -> str:
    """Text form of ``value`` for field ``fd``."""
    kind = fd.kind
    if kind in (FieldKind.INT, FieldKind.UINT):
        if isinstance(value, bool) or not isinstance(value, int):
            raise _mismatch(fd, value)
        width = _int_width(fd)
        if not width.min_value <= value <= width.max_value:
            raise _out_of_range(fd, width.bits)
        return str(int(value))
    if kind == FieldKind.BOOL:
        if not isinstance(value, bool):
            raise _mismatch(fd, value)
        return "true" if value else "false"
    if kind == FieldKind.FLOAT:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise _mismatch(fd, value)
        bits = fd.bits or 64
        try:
            number = float(value)
        except OverflowError as exc:  # int too large for binary64
            raise _out_of_range(fd, bits) from exc
        if bits == 32 and overflows_float32(number):
            raise _out_of_range(fd, bits)
        return format_float(number, bits)
    if kind == FieldKind.STRING:
        if isinstance(value, Enum):
            value = value.value
        if not isinstance(value, str):
            raise _mismatch(fd, value)
        return str.__str__(value)
    raise UnsupportedKindError(fd.name, fd.column, kind, _describe_hint(fd))


def _describe_hint(fd: FieldDescriptor) -> str:
    hint = fd.annotation
    return f"declared as {getattr(hint, '__qualname__', None) or hint!r}"


# -----------------------------------------------------------------------------
# Decode: text -> native
# -----------------------------------------------------------------------------


def _parse_int(fd: FieldDescriptor, text: str) -> int:
    pattern = _SIGNED_INT_RE if fd.kind == FieldKind.INT else _UNSIGNED_INT_RE
    if not pattern.fullmatch(text):
        raise ParseFailureError(fd.name, fd.column, fd.kind, text, "invalid syntax")
    try:
        value = int(text)
    except ValueError as exc:  # exceeds the interpreter's int digit limit
        raise ParseFailureError(fd.name, fd.column, fd.kind, text, "value out of range") from exc
    width = _int_width(fd)
    if not width.min_value <= value <= width.max_value:
        raise ParseFailureError(
            fd.name, fd.column, fd.kind, text, f"value out of range for {width.bits}-bit field"
        )
    return value


def _parse_float(fd: FieldDescriptor, text: str) -> float:
    if not _FLOAT_RE.fullmatch(text):
        raise ParseFailureError(fd.name, fd.column, fd.kind, text, "invalid syntax")
    value = float(text)
    if math.isinf(value) and not _INF_RE.fullmatch(text):
        raise ParseFailureError(fd.name, fd.column, fd.kind, text, "value out of range")
    if fd.bits == 32:
        if overflows_float32(value):
            raise ParseFailureError(
                fd.name, fd.column, fd.kind, text, "value out of range for 32-bit field"
            )
        value = _to_float32(value)
    return value


def _parse_bool(fd: FieldDescriptor, text: str) -> bool:
    try:
        return BOOL_LITERALS[text]
    except KeyError:
        raise ParseFailureError(fd.name, fd.column, fd.kind, text, "invalid syntax") from None


def _parse_string(fd: FieldDescriptor, text: str) -> str:
    return text


_PARSERS: dict[FieldKind, Callable[[FieldDescriptor, str], Any]] = {
    FieldKind.INT: _parse_int,
    FieldKind.UINT: _parse_int,
    FieldKind.FLOAT: _parse_float,
    FieldKind.BOOL: _parse_bool,
    FieldKind.STRING: _parse_string,
}


def decode_value(fd: FieldDescriptor, text: str) -> Any:
    """Parse ``text`` into the native value of field ``fd``."""
    parser = _PARSERS.get(fd.kind)
    if parser is None:
        raise UnsupportedKindError(fd.name, fd.column, fd.kind, _describe_hint(fd))
    if not isinstance(text, str):
        raise ParseFailureError(
            fd.name, fd.column, fd.kind, repr(text), f"expected text, got {type(text).__name__}"
        )
    value = parser(fd, text)
    if fd.base_type is not None:
        try:
            value = fd.base_type(value)
        except (TypeError, ValueError) as exc:
            raise ParseFailureError(
                fd.name, fd.column, fd.kind, text, f"not a valid {fd.base_type.__name__}"
            ) from exc
    return value
