"""
Typed Exception Hierarchy for the Records Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Conversion between entries and tables fails in a handful of well-defined
ways. Each one has its own exception class with a ``code`` class attribute
and structured attributes, so callers catch by type and report by code
instead of parsing messages.

Example:
    result = unmarshal(rows, Employee)
    for err in result.errors:
        if isinstance(err, ParseFailureError):
            log.warning(f"row {err.row}: bad {err.kind} in {err.column!r}")

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    RecordsError (base)
    |
    +-- InvalidInputShapeError      (raised; the call produces nothing)
    |
    +-- FieldCodecError             (collected; the call keeps going)
        +-- UnsupportedKindError
        +-- ParseFailureError
        +-- IndexOutOfRangeError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Code                 | When
---------------------|---------------------------------------------------------
INVALID_INPUT_SHAPE  | marshal input is not a sequence of one dataclass type,
                     | or unmarshal target is not a dataclass / list
UNSUPPORTED_KIND     | field kind has no text coercion (nested records,
                     | collections, optionals) or value does not match kind
PARSE_FAILURE        | text cannot be parsed into the field's kind
INDEX_OUT_OF_RANGE   | row is shorter than the header position of a column

===============================================================================
PROPAGATION
===============================================================================

FieldCodecError instances are never raised out of ``marshal``/``unmarshal``.
They are collected into the result (``MarshalResult.errors`` /
``UnmarshalResult.errors``) next to the partial output. Call
``result.raise_for_errors()`` to turn the first of them into an exception.
"""

from __future__ import annotations

from typing import Any


class RecordsError(Exception):
    """
    Base exception for all records errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "RECORDS_ERROR"


class InvalidInputShapeError(RecordsError):
    """The top-level argument is not a record collection."""

    code: str = "INVALID_INPUT_SHAPE"

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation}: {reason}")


# Field-level exceptions


class FieldCodecError(RecordsError):
    """
    Base exception for failures tied to one field of one row.

    ``row`` is the table row index of the failure (1 is the first data row)
    and is filled in by the codec when the error is collected.
    """

    code: str = "FIELD_CODEC_ERROR"

    def __init__(
        self,
        message: str,
        *,
        field_name: str,
        column: str | None,
        kind: Any,
        row: int | None = None,
    ):
        self.field_name = field_name
        self.column = column
        self.kind = kind
        self.row = row
        super().__init__(message)


class UnsupportedKindError(FieldCodecError):
    """Field kind (or runtime value type) has no text coercion."""

    code: str = "UNSUPPORTED_KIND"

    def __init__(
        self,
        field_name: str,
        column: str | None,
        kind: Any,
        detail: str = "",
        row: int | None = None,
    ):
        self.detail = detail
        message = f"field {field_name!r}: kind {kind!s} is not supported"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(
            message, field_name=field_name, column=column, kind=kind, row=row
        )


class ParseFailureError(FieldCodecError):
    """Text could not be parsed into the field's kind."""

    code: str = "PARSE_FAILURE"

    def __init__(
        self,
        field_name: str,
        column: str | None,
        kind: Any,
        text: str,
        reason: str = "",
        row: int | None = None,
    ):
        self.text = text
        self.reason = reason
        message = f"field {field_name!r}: cannot parse {text!r} as {kind!s}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message, field_name=field_name, column=column, kind=kind, row=row
        )


class IndexOutOfRangeError(FieldCodecError):
    """Row has fewer fields than the header position of a column."""

    code: str = "INDEX_OUT_OF_RANGE"

    def __init__(
        self,
        field_name: str,
        column: str | None,
        kind: Any,
        position: int,
        row_length: int,
        row: int | None = None,
    ):
        self.position = position
        self.row_length = row_length
        super().__init__(
            f"field {field_name!r}: column {column!r} is at position {position} "
            f"but the row has {row_length} fields",
            field_name=field_name,
            column=column,
            kind=kind,
            row=row,
        )
