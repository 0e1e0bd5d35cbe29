"""
Field introspector: dataclass type -> EntryDescriptor.

Pure function of the type shape. Walks ``dataclasses.fields()`` in
declaration order and, for each field, records the column annotation
(the field metadata entry under ``tag_key``), the kind derived from the
resolved type hint, and whether the decoder may set it.
"""

from __future__ import annotations

import dataclasses
import functools
import inspect
import typing
from collections.abc import Sequence
from typing import Annotated, Any, get_args, get_origin

from records_config import get_active_config
from records_config.schema import CodecConfig
from records_kernel.domain.descriptors import EntryDescriptor, FieldDescriptor
from records_kernel.domain.kinds import (
    DEFAULT_FLOAT_WIDTH,
    DEFAULT_INT_WIDTH,
    ZERO_VALUES,
    FieldKind,
    FloatWidth,
    IntWidth,
)
from records_kernel.logging_config import get_logger

logger = get_logger("codec.introspector")

# String annotations that survive when get_type_hints cannot resolve a class.
_BUILTIN_HINTS: dict[str, type] = {"int": int, "float": float, "bool": bool, "str": str}


# -----------------------------------------------------------------------------
# Shape predicates
# -----------------------------------------------------------------------------


def is_record_type(obj: Any) -> bool:
    """True if ``obj`` is a dataclass class (not an instance)."""
    return isinstance(obj, type) and dataclasses.is_dataclass(obj)


def is_record(obj: Any) -> bool:
    """True if ``obj`` is a dataclass instance."""
    return dataclasses.is_dataclass(obj) and not isinstance(obj, type)


def is_record_sequence(value: Any) -> bool:
    """True if ``value`` is a non-string sequence of instances of one dataclass type."""
    if isinstance(value, (str, bytes, bytearray)) or not isinstance(value, Sequence):
        return False
    types = {type(item) for item in value}
    return len(types) <= 1 and all(is_record(item) for item in value)


# -----------------------------------------------------------------------------
# Kind classification
# -----------------------------------------------------------------------------


def classify(hint: Any) -> tuple[FieldKind, int | None, bool]:
    """
    Classify a type hint into (kind, bits, signed).

    ``Annotated`` width markers narrow int/float fields; a marker that does
    not fit the base type makes the field unsupported.
    """
    width: IntWidth | FloatWidth | None = None
    if get_origin(hint) is Annotated:
        base, *extras = get_args(hint)
        for extra in extras:
            if isinstance(extra, (IntWidth, FloatWidth)):
                width = extra
        hint = base

    if isinstance(hint, str):
        hint = _BUILTIN_HINTS.get(hint, hint)
    if get_origin(hint) is not None or not isinstance(hint, type):
        return FieldKind.UNSUPPORTED, None, True

    if issubclass(hint, bool):
        if width is not None:
            return FieldKind.UNSUPPORTED, None, True
        return FieldKind.BOOL, None, True
    if issubclass(hint, int):
        if isinstance(width, FloatWidth):
            return FieldKind.UNSUPPORTED, None, True
        w = width or DEFAULT_INT_WIDTH
        return (FieldKind.INT if w.signed else FieldKind.UINT), w.bits, w.signed
    if issubclass(hint, float):
        if isinstance(width, IntWidth):
            return FieldKind.UNSUPPORTED, None, True
        w = width or DEFAULT_FLOAT_WIDTH
        return FieldKind.FLOAT, w.bits, True
    if issubclass(hint, str):
        if width is not None:
            return FieldKind.UNSUPPORTED, None, True
        return FieldKind.STRING, None, True
    return FieldKind.UNSUPPORTED, None, True


def _resolve_hints(entry_type: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(entry_type, include_extras=True)
    except NameError:
        # Forward reference to a class that is not importable from the module
        return {f.name: f.type for f in dataclasses.fields(entry_type)}


def _strip_annotated(hint: Any) -> Any:
    return get_args(hint)[0] if get_origin(hint) is Annotated else hint


def _required_init_vars(entry_type: type, field_names: set[str]) -> tuple[str, ...]:
    params = inspect.signature(entry_type).parameters.values()
    return tuple(
        p.name
        for p in params
        if p.default is inspect.Parameter.empty
        and p.kind in (p.POSITIONAL_OR_KEYWORD, p.KEYWORD_ONLY)
        and p.name not in field_names
    )


# -----------------------------------------------------------------------------
# describe
# -----------------------------------------------------------------------------


def _build_descriptor(entry_type: type, tag_key: str) -> EntryDescriptor:
    hints = _resolve_hints(entry_type)
    descriptors: list[FieldDescriptor] = []

    for f in dataclasses.fields(entry_type):
        hint = hints.get(f.name, f.type)
        kind, bits, signed = classify(hint)
        column = f.metadata.get(tag_key)
        has_default = (
            f.default is not dataclasses.MISSING
            or f.default_factory is not dataclasses.MISSING
        )
        descriptors.append(
            FieldDescriptor(
                name=f.name,
                column=None if column is None else str(column),
                kind=kind,
                writable=f.init and not f.name.startswith("_"),
                init=f.init,
                annotation=_strip_annotated(hint),
                bits=bits,
                signed=signed,
                has_default=has_default,
                zero=ZERO_VALUES.get(kind),
            )
        )

    descriptor = EntryDescriptor(
        entry_type=entry_type,
        fields=tuple(descriptors),
        tag_key=tag_key,
        required_init_vars=_required_init_vars(
            entry_type, {fd.name for fd in descriptors if fd.init}
        ),
    )
    logger.debug(
        "descriptor_built",
        extra={
            "entry_type": entry_type.__qualname__,
            "field_count": len(descriptor.fields),
            "column_count": len(descriptor.columns),
        },
    )
    return descriptor


@functools.lru_cache(maxsize=256)
def _cached_descriptor(entry_type: type, tag_key: str) -> EntryDescriptor:
    return _build_descriptor(entry_type, tag_key)


def describe(entry_type: type, *, config: CodecConfig | None = None) -> EntryDescriptor:
    """
    Build the EntryDescriptor for a dataclass type.

    Preconditions:
        - ``entry_type`` is a dataclass class. Callers guard this; passing
          anything else raises ``TypeError`` from ``dataclasses.fields``.
    """
    config = config or get_active_config()
    if config.memoize_descriptors:
        return _cached_descriptor(entry_type, config.tag_key)
    return _build_descriptor(entry_type, config.tag_key)


def clear_descriptor_cache() -> None:
    """Drop memoized descriptors. FOR TESTING ONLY."""
    _cached_descriptor.cache_clear()


def column(name: str, **field_kwargs: Any) -> Any:
    """
    Declare a dataclass field mapped to table column ``name``.

    Shorthand for ``dataclasses.field(metadata={"csv": name}, ...)`` using
    the default tag key; extra metadata passed in ``metadata=`` is kept.
    """
    tag_key = field_kwargs.pop("tag_key", get_active_config().tag_key)
    metadata = dict(field_kwargs.pop("metadata", None) or {})
    metadata[tag_key] = name
    return dataclasses.field(metadata=metadata, **field_kwargs)
