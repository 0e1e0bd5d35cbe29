"""Tests for codec configuration loading."""

from pathlib import Path

import pytest
import yaml

from records_config import get_active_config
from records_config.loader import (
    compute_checksum,
    load_codec_config,
    load_yaml_file,
    parse_codec_config,
)
from records_config.schema import CodecConfig


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "codec.yaml"
    path.write_text(text)
    return path


class TestParseCodecConfig:
    def test_defaults(self):
        assert parse_codec_config({}) == CodecConfig(tag_key="csv", memoize_descriptors=True)

    def test_bare_settings(self):
        config = parse_codec_config({"tag_key": "col", "memoize_descriptors": False})
        assert config.tag_key == "col"
        assert config.memoize_descriptors is False

    def test_codec_section(self):
        assert parse_codec_config({"codec": {"tag_key": "tsv"}}).tag_key == "tsv"

    def test_unknown_key_rejected(self):
        with pytest.raises(ValueError, match="Unknown codec config keys"):
            parse_codec_config({"tag": "csv"})

    @pytest.mark.parametrize("value", ["", None, 5])
    def test_invalid_tag_key(self, value):
        with pytest.raises(ValueError, match="tag_key"):
            parse_codec_config({"tag_key": value})

    def test_invalid_memoize_flag(self):
        with pytest.raises(ValueError, match="memoize_descriptors"):
            parse_codec_config({"memoize_descriptors": "yes please"})


class TestLoadYaml:
    def test_load_file(self, tmp_path):
        path = _write(tmp_path, "codec:\n  tag_key: col\n")
        assert load_codec_config(path) == CodecConfig(tag_key="col")

    def test_empty_file_gives_defaults(self, tmp_path):
        assert load_codec_config(_write(tmp_path, "")) == CodecConfig()

    def test_non_mapping_rejected(self, tmp_path):
        with pytest.raises(ValueError, match="mapping"):
            load_yaml_file(_write(tmp_path, "- a\n- b\n"))

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_yaml_file(tmp_path / "absent.yaml")

    def test_malformed_yaml(self, tmp_path):
        with pytest.raises(yaml.YAMLError):
            load_yaml_file(_write(tmp_path, "codec: [unclosed\n"))


class TestChecksum:
    def test_deterministic(self):
        assert compute_checksum(CodecConfig()) == compute_checksum(CodecConfig())
        assert len(compute_checksum(CodecConfig())) == 64

    def test_differs_by_content(self):
        assert compute_checksum(CodecConfig()) != compute_checksum(CodecConfig(tag_key="col"))


class TestGetActiveConfig:
    def test_default(self):
        assert get_active_config() == CodecConfig()

    def test_from_path_logs_trace(self, tmp_path, captured_logs):
        path = _write(tmp_path, "tag_key: col\nmemoize_descriptors: false\n")
        config = get_active_config(path)
        assert config == CodecConfig(tag_key="col", memoize_descriptors=False)

        trace = [r for r in captured_logs() if r["message"] == "records_config_trace"]
        assert trace[0]["checksum"] == compute_checksum(config)
        assert trace[0]["config_path"] == str(path)
