"""
records_kernel.domain.descriptors -- Static metadata for one entry type.

Pure frozen dataclasses. Built by ``records_codec.introspector.describe``;
never mutated afterwards, so safe to cache per entry type.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from records_kernel.domain.kinds import FieldKind


@dataclass(frozen=True)
class FieldDescriptor:
    """One dataclass field as the codec sees it."""

    name: str  # Declared attribute name (diagnostics, constructor keyword)
    column: str | None  # Column annotation; None -> excluded from the table
    kind: FieldKind
    writable: bool  # init=True and not underscore-prefixed
    init: bool = True  # Accepted by the entry type's __init__
    annotation: Any = None  # Resolved type hint
    bits: int | None = None  # Numeric width; None for bool/string/unsupported
    signed: bool = True
    has_default: bool = False
    zero: Any = None  # Value used when the column is absent from the header

    @property
    def included(self) -> bool:
        return self.column is not None

    @property
    def base_type(self) -> type | None:
        """Concrete hint class when it narrows the kind (IntEnum, str enums)."""
        if isinstance(self.annotation, type) and self.annotation not in (int, float, bool, str):
            return self.annotation
        return None


@dataclass(frozen=True)
class EntryDescriptor:
    """Ordered field metadata for one entry type."""

    entry_type: type
    fields: tuple[FieldDescriptor, ...] = ()
    tag_key: str = "csv"
    # Constructor parameters without a default that are not fields (InitVar)
    required_init_vars: tuple[str, ...] = ()

    @property
    def included_fields(self) -> tuple[FieldDescriptor, ...]:
        return tuple(f for f in self.fields if f.included)

    @property
    def columns(self) -> tuple[str, ...]:
        return tuple(f.column for f in self.fields if f.column is not None)
