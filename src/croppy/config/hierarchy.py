"""Layered configuration for croppy.

Each layer overrides the one before it:

  defaults -> ~/.croppy/config.yaml -> croppy.yaml (cwd or a parent)
  -> CROPPY_* environment -> keyword overrides

YAML files may hold the settings at the top level or under a ``croppy:`` key.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import yaml

from croppy.config.defaults import get_defaults
from croppy.config.schema import CroppyConfig

logger = logging.getLogger(__name__)

_GLOBAL_CONFIG_PATH = Path.home() / ".croppy" / "config.yaml"
_PROJECT_CONFIG_NAME = "croppy.yaml"

_ENV_PREFIX = "CROPPY_"
_ENV_MAP: dict[str, str] = {_ENV_PREFIX + key.upper(): key for key in get_defaults()}

_TRUTHY = {"1", "true", "yes", "on"}


def _as_bool(raw: str) -> bool:
    return raw.strip().lower() in _TRUTHY


def _as_patterns(raw: str) -> list[str]:
    # several patterns share one variable, separated like PATH entries
    return [p for p in raw.split(os.pathsep) if p]


_PARSERS: dict[str, Callable[[str], Any]] = {
    "interlace": _as_bool,
    "upscale": _as_bool,
    "path": _as_patterns,
    "jpeg_quality": int,
    "max_crops": int,
    "processing_timeout": float,
}


def load_config_hierarchy(**runtime_overrides: Any) -> dict[str, Any]:
    """Merge every layer into one plain dict (not yet validated)."""
    merged: dict[str, Any] = {}
    for name, layer in _layers(runtime_overrides):
        if layer:
            logger.debug("Config layer %s sets %s", name, sorted(layer))
            merged.update(layer)
    return merged


def resolve_config(**runtime_overrides: Any) -> CroppyConfig:
    """Merged layers validated into a ``CroppyConfig``.

    Raises pydantic's ValidationError (a ValueError) on bad values.
    """
    return CroppyConfig(**load_config_hierarchy(**runtime_overrides))


def _layers(runtime_overrides: dict[str, Any]) -> Iterator[tuple[str, dict[str, Any] | None]]:
    yield "defaults", get_defaults()
    yield "global", _load_yaml_config(_GLOBAL_CONFIG_PATH)
    project = _find_project_config()
    yield "project", _load_yaml_config(project) if project else None
    yield "env", _load_env_vars()
    yield "runtime", {k: v for k, v in runtime_overrides.items() if v is not None}


def _load_yaml_config(path: Path) -> dict[str, Any] | None:
    """Settings mapping from ``path``; None when absent or unusable."""
    if not path.is_file():
        return None
    try:
        data = yaml.safe_load(path.read_text())
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: expected a mapping", path)
        return None
    section = data.get("croppy")
    return section if isinstance(section, dict) else data


def _find_project_config() -> Path | None:
    here = Path.cwd()
    candidates = (d / _PROJECT_CONFIG_NAME for d in (here, *here.parents))
    return next((c for c in candidates if c.exists()), None)


def _load_env_vars() -> dict[str, Any]:
    return {
        key: _coerce_env_value(key, os.environ[env])
        for env, key in _ENV_MAP.items()
        if env in os.environ
    }


def _coerce_env_value(key: str, value: str) -> Any:
    """Parse an env string for ``key``; unparseable numbers stay strings for validation."""
    parser = _PARSERS.get(key)
    if parser is None:
        return value
    try:
        return parser(value)
    except ValueError:
        logger.warning("CROPPY_%s=%r is not a valid %s", key.upper(), value, parser.__name__)
        return value
