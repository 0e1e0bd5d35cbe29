"""
Configuration Loader (``records_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into a typed
``records_config.schema.CodecConfig``.  The single public entry point for
runtime config is ``records_config.get_active_config()``.

Invariants enforced
-------------------
* Parse errors raise ``ValueError`` with descriptive messages; unknown
  keys are rejected rather than ignored.
* Every parsed object is a frozen dataclass from ``schema.py``.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Unknown key or wrong value type  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any

import yaml

from records_config.schema import CodecConfig


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Preconditions:
        - ``path`` must point to an existing, readable YAML file.
    Postconditions:
        - Returns a ``dict`` (possibly empty if the YAML is empty).
    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the top-level YAML node is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at top level, got {type(data).__name__}")
    return data


def parse_codec_config(data: dict[str, Any]) -> CodecConfig:
    """
    Parse a ``CodecConfig`` from a dict.

    Accepts either the bare settings or a ``codec:`` section wrapping them.
    Missing keys take the dataclass defaults.
    """
    if "codec" in data and len(data) == 1:
        data = data["codec"] or {}

    known = {f.name for f in fields(CodecConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown codec config keys: {unknown}")

    tag_key = data.get("tag_key", CodecConfig.tag_key)
    if not isinstance(tag_key, str) or not tag_key:
        raise ValueError(f"tag_key must be a non-empty string, got {tag_key!r}")

    memoize = data.get("memoize_descriptors", CodecConfig.memoize_descriptors)
    if not isinstance(memoize, bool):
        raise ValueError(f"memoize_descriptors must be a boolean, got {memoize!r}")

    return CodecConfig(tag_key=tag_key, memoize_descriptors=memoize)


def load_codec_config(path: Path) -> CodecConfig:
    """Load and parse a codec configuration file."""
    return parse_codec_config(load_yaml_file(path))


def compute_checksum(config: CodecConfig) -> str:
    """Deterministic SHA-256 of the canonical JSON form of ``config``."""
    canonical = json.dumps(asdict(config), sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
