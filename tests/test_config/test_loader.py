"""Tests for YAML config loading."""

import pytest

from croppy.config.loader import load_config_yaml, load_yaml
from croppy.config.schema import CroppyConfig


class TestLoadConfigYaml:
    def test_loads_valid_config(self, tmp_path):
        path = tmp_path / "croppy.yaml"
        path.write_text(
            "croppy:\n"
            "  path:\n"
            "    - '^uploads/(.+)$'\n"
            "  signing_key: abc\n"
            "  max_crops: 4\n"
        )
        config = load_config_yaml(path)
        assert isinstance(config, CroppyConfig)
        assert config.path == ["^uploads/(.+)$"]
        assert config.signing_enabled
        assert config.max_crops == 4

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config_yaml(tmp_path / "nonexistent.yaml")

    def test_missing_croppy_key(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("max_crops: 4\n")
        with pytest.raises(ValueError, match="croppy"):
            load_config_yaml(path)

    def test_invalid_values(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("croppy:\n  jpeg_quality: 1000\n")
        with pytest.raises(ValueError):
            load_config_yaml(path)


class TestLoadYaml:
    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n")
        with pytest.raises(ValueError, match="mapping"):
            load_yaml(path)
