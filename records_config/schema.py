"""
Codec configuration schema.

YAML files are parsed into these types by the loader; the codec only ever
sees the frozen dataclass.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_TAG_KEY = "csv"


@dataclass(frozen=True)
class CodecConfig:
    """Settings shared by marshal / unmarshal."""

    tag_key: str = DEFAULT_TAG_KEY  # Dataclass metadata key naming the column
    memoize_descriptors: bool = True
