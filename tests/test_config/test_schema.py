"""Tests for CroppyConfig."""

import pytest
from pydantic import ValidationError

from croppy.config.defaults import get_defaults
from croppy.config.schema import CroppyConfig


class TestDefaults:
    def test_defaults_match_model(self):
        config = CroppyConfig()
        for key, value in get_defaults().items():
            assert getattr(config, key) == value

    def test_signing_disabled_by_default(self):
        assert not CroppyConfig().signing_enabled


class TestPathPatterns:
    def test_string_wrapped(self):
        assert CroppyConfig(path=r"^u/(.+)$").path == [r"^u/(.+)$"]

    def test_compiled_in_order(self):
        config = CroppyConfig(path=[r"^a/(.+)$", r"^b/(.+)$"])
        assert [p.pattern for p in config.path_patterns] == [r"^a/(.+)$", r"^b/(.+)$"]

    def test_empty_rejected(self):
        with pytest.raises(ValidationError):
            CroppyConfig(path=[])

    def test_duplicate_rejected(self):
        with pytest.raises(ValidationError, match="duplicate"):
            CroppyConfig(path=[r"^(.+)$", r"^(.+)$"])

    def test_needs_capture_group(self):
        with pytest.raises(ValidationError, match="capture group"):
            CroppyConfig(path=[r"^uploads/.+$"])

    def test_invalid_regex(self):
        with pytest.raises(ValidationError, match="invalid 'path'"):
            CroppyConfig(path=[r"^(unclosed$"])

    def test_invalid_ignore(self):
        with pytest.raises(ValidationError):
            CroppyConfig(ignore="[")

    def test_ignore_compiled(self):
        assert CroppyConfig(ignore=r"\.gif$").ignore_pattern.search("a.gif")
        assert CroppyConfig(ignore="").ignore_pattern is None


class TestFields:
    def test_empty_strings_become_none(self):
        config = CroppyConfig(signing_key="", url_prefix="", crops_subdir="")
        assert config.signing_key is None
        assert config.url_prefix is None
        assert config.crops_subdir is None

    @pytest.mark.parametrize("quality", [0, 101])
    def test_quality_bounds(self, quality):
        with pytest.raises(ValidationError):
            CroppyConfig(jpeg_quality=quality)

    def test_max_crops_bounds(self):
        with pytest.raises(ValidationError):
            CroppyConfig(max_crops=0)
        assert CroppyConfig(max_crops=None).max_crops is None

    def test_timeout_positive(self):
        with pytest.raises(ValidationError):
            CroppyConfig(processing_timeout=0)

    def test_unknown_keys_ignored(self):
        assert not hasattr(CroppyConfig(unknown="x"), "unknown")


class TestProcessorDefaults:
    def test_from_config(self):
        cfg = CroppyConfig(jpeg_quality=80, interlace=False, upscale=True).processor_defaults()
        assert (cfg.jpeg_quality, cfg.interlace, cfg.upscale) == (80, False, True)

    def test_options_override(self):
        cfg = CroppyConfig().processor_defaults(
            {"quality": ["60"], "interlace": ["0"], "upscale": []}
        )
        assert cfg.jpeg_quality == 60
        assert cfg.interlace is False
        assert cfg.upscale is True

    def test_quality_clamped(self):
        assert CroppyConfig().processor_defaults({"quality": ["500"]}).jpeg_quality == 100

    def test_bad_quality_ignored(self):
        assert CroppyConfig().processor_defaults({"quality": ["high"]}).jpeg_quality == 95
