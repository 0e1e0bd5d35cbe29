"""
Result DTOs for marshal / unmarshal.

Contract:
    Both results carry the (possibly partial) output next to every
    field-level failure collected while producing it. Failures never
    stop iteration; the caller decides whether a non-empty ``errors``
    tuple is fatal.

Guarantees:
    - Immutable (frozen dataclass)
    - ``errors`` is ordered by the location at which each failure occurred
    - ``error`` is the first collected failure (first wins)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from records_kernel.exceptions import FieldCodecError


@dataclass(frozen=True)
class _CodecResult:
    errors: tuple[FieldCodecError, ...] = ()

    @property
    def success(self) -> bool:
        return len(self.errors) == 0

    @property
    def error(self) -> FieldCodecError | None:
        return self.errors[0] if self.errors else None

    def errors_for_row(self, row: int) -> tuple[FieldCodecError, ...]:
        """Errors located at table row ``row`` (1 is the first data row)."""
        return tuple(e for e in self.errors if e.row == row)

    def raise_for_errors(self) -> None:
        """Raise the first collected error, if any."""
        if self.errors:
            raise self.errors[0]


@dataclass(frozen=True)
class MarshalResult(_CodecResult):
    """Rows produced by marshal; ``rows[0]`` is the header."""

    rows: list[list[str]] = field(default_factory=list)

    @property
    def header(self) -> list[str]:
        return self.rows[0] if self.rows else []


@dataclass(frozen=True)
class UnmarshalResult(_CodecResult):
    """Entries produced by unmarshal, one per data row, in row order."""

    entries: list[Any] = field(default_factory=list)
