"""
Pure domain layer.

Field kinds, entry descriptors and result DTOs. No I/O, no logging,
no configuration; every object here is immutable.
"""

from records_kernel.domain.descriptors import EntryDescriptor, FieldDescriptor
from records_kernel.domain.dtos import MarshalResult, UnmarshalResult
from records_kernel.domain.kinds import (
    FieldKind,
    Float32,
    Float64,
    FloatWidth,
    Int8,
    Int16,
    Int32,
    Int64,
    IntWidth,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)

__all__ = [
    "EntryDescriptor",
    "FieldDescriptor",
    "FieldKind",
    "Float32",
    "Float64",
    "FloatWidth",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "IntWidth",
    "MarshalResult",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "UnmarshalResult",
]
