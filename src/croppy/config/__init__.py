"""Configuration: schema, defaults, layered loading."""

from croppy.config.hierarchy import load_config_hierarchy, resolve_config
from croppy.config.loader import load_config_yaml
from croppy.config.schema import CroppyConfig

__all__ = ["CroppyConfig", "load_config_hierarchy", "load_config_yaml", "resolve_config"]
