"""
Row codec: entries <-> rows of text, driven by column annotations.

``marshal`` derives the header from the entry type and emits one row per
entry; ``unmarshal`` matches header names to annotated fields and builds
one entry per data row. Neither stops on a field failure: every
``FieldCodecError`` is collected into the result next to the partial
output. Only a malformed top-level argument raises
(``InvalidInputShapeError``). ZERO I/O.
"""

from __future__ import annotations

from collections.abc import Iterable, MutableSequence, Sequence
from typing import Any

from records_config import get_active_config
from records_config.schema import CodecConfig
from records_kernel.domain.descriptors import EntryDescriptor, FieldDescriptor
from records_kernel.domain.dtos import MarshalResult, UnmarshalResult
from records_kernel.domain.kinds import FieldKind
from records_kernel.exceptions import (
    FieldCodecError,
    IndexOutOfRangeError,
    InvalidInputShapeError,
    UnsupportedKindError,
)
from records_kernel.logging_config import LogContext, get_logger

from records_codec.coercion import decode_value, encode_value
from records_codec.introspector import describe, is_record, is_record_sequence, is_record_type

logger = get_logger("codec.rows")

_UNSET = object()


# -----------------------------------------------------------------------------
# Header
# -----------------------------------------------------------------------------


def header(descriptor: EntryDescriptor | type, *, config: CodecConfig | None = None) -> list[str]:
    """Column names of annotated fields, in declaration order."""
    if not isinstance(descriptor, EntryDescriptor):
        if not is_record_type(descriptor):
            raise InvalidInputShapeError("header", "expected a dataclass type or EntryDescriptor")
        descriptor = describe(descriptor, config=config)
    return list(descriptor.columns)


def build_column_index(header_row: Sequence[str]) -> dict[str, int]:
    """Column name -> position. Later duplicates overwrite earlier ones."""
    index: dict[str, int] = {}
    for position, name in enumerate(header_row):
        index[name] = position
    return index


# -----------------------------------------------------------------------------
# Per-entry encode / per-row decode
# -----------------------------------------------------------------------------


def encode_entry(
    entry: Any,
    descriptor: EntryDescriptor,
    *,
    row_number: int | None = None,
) -> tuple[list[str], list[FieldCodecError]]:
    """
    Encode one entry into one row.

    Failed fields leave an empty placeholder so the row stays as long as
    the header.
    """
    row: list[str] = []
    errors: list[FieldCodecError] = []
    for fd in descriptor.included_fields:
        try:
            value = getattr(entry, fd.name, _UNSET)
            if value is _UNSET:
                # init=False field without a default that was never assigned
                raise UnsupportedKindError(fd.name, fd.column, fd.kind, "attribute is not set")
            row.append(encode_value(fd, value))
        except FieldCodecError as exc:
            exc.row = row_number
            errors.append(exc)
            row.append("")
    return row, errors


def _decode_field(fd: FieldDescriptor, row: Sequence[str], position: int) -> Any:
    if fd.kind == FieldKind.UNSUPPORTED:
        raise UnsupportedKindError(fd.name, fd.column, fd.kind, "cannot be set from text")
    if position >= len(row):
        raise IndexOutOfRangeError(fd.name, fd.column, fd.kind, position, len(row))
    return decode_value(fd, row[position])


def decode_row(
    row: Sequence[str],
    column_index: dict[str, int],
    descriptor: EntryDescriptor,
    *,
    row_number: int | None = None,
) -> tuple[Any, list[FieldCodecError]]:
    """
    Decode one row into a fresh entry of ``descriptor.entry_type``.

    Fields whose column is missing from the header keep their zero value
    (or declared default). Non-writable fields are skipped. Fields that
    fail are left at their zero value; the entry is always returned.
    """
    kwargs: dict[str, Any] = {}
    errors: list[FieldCodecError] = []

    for fd in descriptor.fields:
        if not fd.init:
            continue
        position = column_index.get(fd.column) if fd.included else None
        if position is not None and fd.writable:
            try:
                kwargs[fd.name] = _decode_field(fd, row, position)
                continue
            except FieldCodecError as exc:
                exc.row = row_number
                errors.append(exc)
        if not fd.has_default:
            kwargs[fd.name] = fd.zero

    return descriptor.entry_type(**kwargs), errors


# -----------------------------------------------------------------------------
# Shape guards
# -----------------------------------------------------------------------------


def _reject(operation: str, reason: str) -> InvalidInputShapeError:
    logger.warning("invalid_input_shape", extra={"operation": operation, "reason": reason})
    return InvalidInputShapeError(operation, reason)


def _sequence_problem(entries: Any) -> str:
    if isinstance(entries, (str, bytes, bytearray)) or not isinstance(entries, Sequence):
        return f"expected a sequence of dataclass instances, got {type(entries).__name__}"
    for position, entry in enumerate(entries):
        if not is_record(entry):
            return f"element {position} is not a dataclass instance: {type(entry).__name__}"
        if type(entry) is not type(entries[0]):
            return (
                f"element {position} is {type(entry).__qualname__}, "
                f"expected {type(entries[0]).__qualname__}"
            )
    return "not a sequence of one dataclass type"


def _marshal_entry_type(entries: Any, entry_type: type | None) -> type:
    if entry_type is not None and not is_record_type(entry_type):
        raise _reject("marshal", f"entry_type must be a dataclass type, got {entry_type!r}")
    if not is_record_sequence(entries):
        raise _reject("marshal", _sequence_problem(entries))
    if not entries:
        if entry_type is None:
            raise _reject("marshal", "cannot derive a header from an empty sequence without entry_type")
        return entry_type

    found = type(entries[0])
    if entry_type is not None and found is not entry_type:
        raise _reject("marshal", f"element 0 is {found.__qualname__}, expected {entry_type.__qualname__}")
    return found


def _unmarshal_table(rows: Any, entry_type: Any, into: Any) -> list[Sequence[str]]:
    if not is_record_type(entry_type):
        raise _reject("unmarshal", f"entry_type must be a dataclass type, got {entry_type!r}")
    if into is not None and not isinstance(into, MutableSequence):
        raise _reject("unmarshal", f"into must be a mutable sequence, got {type(into).__name__}")
    if isinstance(rows, (str, bytes, bytearray)) or not isinstance(rows, Iterable):
        raise _reject("unmarshal", f"expected rows of text fields, got {type(rows).__name__}")

    table = rows if isinstance(rows, Sequence) else list(rows)
    if not table:
        raise _reject("unmarshal", "table has no header row")
    for position, row in enumerate(table):
        if isinstance(row, (str, bytes, bytearray)) or not isinstance(row, Sequence):
            raise _reject("unmarshal", f"row {position} is not a sequence of text fields")
    return table


def _log_errors(errors: list[FieldCodecError]) -> None:
    for err in errors:
        logger.warning(
            "field_codec_failed",
            extra={
                "row": err.row,
                "field": err.field_name,
                "column": err.column,
                "kind": err.kind,
                "error_code": err.code,
                "error_message": str(err),
            },
        )


# -----------------------------------------------------------------------------
# Collection level
# -----------------------------------------------------------------------------


def marshal(
    entries: Sequence[Any],
    *,
    entry_type: type | None = None,
    config: CodecConfig | None = None,
) -> MarshalResult:
    """
    Map a homogeneous sequence of dataclass instances to rows of text.

    ``rows[0]`` is the header. Field failures are collected; the failed
    slot holds ``""`` and the remaining fields and entries are still
    encoded.

    Raises:
        InvalidInputShapeError: ``entries`` is not a sequence of instances
            of one dataclass type (or of ``entry_type`` when given).
    """
    config = config or get_active_config()
    entry_type = _marshal_entry_type(entries, entry_type)
    descriptor = describe(entry_type, config=config)

    rows: list[list[str]] = [header(descriptor)]
    errors: list[FieldCodecError] = []

    with LogContext.bind(operation="marshal", entry_type=entry_type.__qualname__):
        logger.debug("marshal_started", extra={"entry_count": len(entries)})
        for row_number, entry in enumerate(entries, start=1):
            row, row_errors = encode_entry(entry, descriptor, row_number=row_number)
            rows.append(row)
            errors.extend(row_errors)

        _log_errors(errors)
        logger.info(
            "marshal_completed",
            extra={"row_count": len(rows) - 1, "error_count": len(errors)},
        )

    return MarshalResult(rows=rows, errors=tuple(errors))


def unmarshal(
    rows: Iterable[Sequence[str]],
    entry_type: type,
    *,
    into: MutableSequence[Any] | None = None,
    config: CodecConfig | None = None,
) -> UnmarshalResult:
    """
    Map rows of text (``rows[0]`` is the header) to entries of ``entry_type``.

    Columns are matched to fields by annotated name. One entry is produced
    per data row, in row order, even when some of its fields fail. When
    ``into`` is given it is extended in place and returned as
    ``result.entries``.

    Raises:
        InvalidInputShapeError: ``entry_type`` is not a dataclass type,
            its constructor requires an ``InitVar`` argument, ``into`` is
            not a mutable sequence, or there is no header row.
    """
    config = config or get_active_config()
    table = _unmarshal_table(rows, entry_type, into)
    descriptor = describe(entry_type, config=config)
    if descriptor.required_init_vars:
        raise _reject(
            "unmarshal",
            f"{entry_type.__qualname__} needs constructor arguments that no column can supply: "
            f"{', '.join(descriptor.required_init_vars)}",
        )
    column_index = build_column_index(table[0])

    entries: MutableSequence[Any] = into if into is not None else []
    errors: list[FieldCodecError] = []

    with LogContext.bind(operation="unmarshal", entry_type=entry_type.__qualname__):
        logger.debug(
            "unmarshal_started",
            extra={"row_count": len(table) - 1, "column_count": len(table[0])},
        )
        for row_number in range(1, len(table)):
            entry, row_errors = decode_row(
                table[row_number], column_index, descriptor, row_number=row_number
            )
            entries.append(entry)
            errors.extend(row_errors)

        _log_errors(errors)
        logger.info(
            "unmarshal_completed",
            extra={"entry_count": len(table) - 1, "error_count": len(errors)},
        )

    return UnmarshalResult(entries=entries, errors=tuple(errors))
