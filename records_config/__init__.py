"""
records_config -- single public entrypoint for codec configuration.

Responsibility:
    Provides the way to obtain configuration at runtime through
    ``get_active_config()``.  Returns a frozen ``CodecConfig``.

Failure modes:
    - ``FileNotFoundError`` -- the requested configuration file is missing.
    - ``ValueError`` -- unknown keys or invalid values.

Audit relevance:
    Loading a configuration file emits a ``records_config_trace`` log entry
    with the source path and checksum, tying every conversion back to the
    settings that governed it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from records_config.loader import compute_checksum, load_codec_config
from records_config.schema import DEFAULT_TAG_KEY, CodecConfig

_logger = logging.getLogger("records.config")

_DEFAULT_CONFIG = CodecConfig()


def get_active_config(config_path: Path | str | None = None) -> CodecConfig:
    """
    Return the codec configuration.

    Args:
        config_path: YAML file to load. None returns the built-in defaults.
    """
    if config_path is None:
        return _DEFAULT_CONFIG

    path = Path(config_path)
    config = load_codec_config(path)
    _logger.info(
        "records_config_trace",
        extra={
            "config_path": str(path),
            "checksum": compute_checksum(config),
            "tag_key": config.tag_key,
            "memoize_descriptors": config.memoize_descriptors,
        },
    )
    return config


__all__ = [
    "CodecConfig",
    "DEFAULT_TAG_KEY",
    "compute_checksum",
    "get_active_config",
    "load_codec_config",
]
