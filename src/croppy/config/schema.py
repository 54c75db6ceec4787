"""Pydantic model for croppy configuration."""

from __future__ import annotations

import contextlib
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from croppy.config import defaults
from croppy.types import ProcessorConfig

_TRUTHY = {"1", "true", "yes", "on"}


class CroppyConfig(BaseModel):
    """Settings passed explicitly into every component.

    ``path`` is an ordered list of regexes; the first one matching a request
    path wins and its first capture group is the storage-relative key.
    """

    model_config = ConfigDict(extra="ignore")

    path: list[str] = Field(default_factory=lambda: list(defaults.DEFAULT_PATH_PATTERNS))
    ignore: str | None = defaults.DEFAULT_IGNORE
    url_prefix: str | None = defaults.DEFAULT_URL_PREFIX
    signing_key: str | None = defaults.DEFAULT_SIGNING_KEY

    jpeg_quality: int = Field(default=defaults.DEFAULT_JPEG_QUALITY, ge=1, le=100)
    interlace: bool = defaults.DEFAULT_INTERLACE
    upscale: bool = defaults.DEFAULT_UPSCALE

    src_dir: str = defaults.DEFAULT_SRC_DIR
    crops_dir: str = defaults.DEFAULT_CROPS_DIR
    crops_subdir: str | None = defaults.DEFAULT_CROPS_SUBDIR

    max_crops: int | None = Field(default=defaults.DEFAULT_MAX_CROPS, ge=1)
    processing_timeout: float | None = Field(default=defaults.DEFAULT_PROCESSING_TIMEOUT, gt=0)
    log_level: str = defaults.DEFAULT_LOG_LEVEL

    _path_rx: list[re.Pattern[str]] = PrivateAttr(default_factory=list)
    _ignore_rx: re.Pattern[str] | None = PrivateAttr(default=None)

    @field_validator("path", mode="before")
    @classmethod
    def _coerce_path(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("path")
    @classmethod
    def _check_path(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("at least one 'path' pattern is required")
        seen: set[str] = set()
        for pattern in value:
            if pattern in seen:
                raise ValueError(f"duplicate 'path' pattern: {pattern!r}")
            seen.add(pattern)
            compiled = _compile(pattern, "path")
            if compiled.groups < 1:
                raise ValueError(f"'path' pattern needs a capture group: {pattern!r}")
        return value

    @field_validator("ignore")
    @classmethod
    def _check_ignore(cls, value: str | None) -> str | None:
        if value:
            _compile(value, "ignore")
        return value or None

    @field_validator("signing_key", "url_prefix", "crops_subdir")
    @classmethod
    def _empty_is_none(cls, value: str | None) -> str | None:
        return value or None

    def model_post_init(self, __context: Any) -> None:
        self._path_rx = [re.compile(p) for p in self.path]
        self._ignore_rx = re.compile(self.ignore) if self.ignore else None

    @property
    def path_patterns(self) -> list[re.Pattern[str]]:
        return self._path_rx

    @property
    def ignore_pattern(self) -> re.Pattern[str] | None:
        return self._ignore_rx

    @property
    def signing_enabled(self) -> bool:
        return bool(self.signing_key)

    def processor_defaults(self, options: dict[str, list[str]] | None = None) -> ProcessorConfig:
        """Merge URL options ``quality``, ``interlace`` and ``upscale`` over the defaults."""
        options = options or {}
        quality = self.jpeg_quality
        if options.get("quality"):
            with contextlib.suppress(ValueError):
                quality = max(1, min(100, int(options["quality"][0])))
        return ProcessorConfig(
            jpeg_quality=quality,
            interlace=_flag(options.get("interlace"), self.interlace),
            upscale=_flag(options.get("upscale"), self.upscale),
        )


def _compile(pattern: str, field: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ValueError(f"invalid '{field}' pattern {pattern!r}: {exc}") from exc


def _flag(args: list[str] | None, default: bool) -> bool:
    if args is None:
        return default
    # bare option (e.g. "-upscale") switches it on
    if not args:
        return True
    return args[0].lower() in _TRUTHY
