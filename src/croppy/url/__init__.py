"""Derivative URL grammar, encoder and decoder."""

from croppy.url.builder import UrlBuilder
from croppy.url.pattern import (
    EXTENSIONS,
    PATTERN,
    format_options,
    match_path,
    normalize_options,
    parse_options,
)

__all__ = [
    "EXTENSIONS",
    "PATTERN",
    "UrlBuilder",
    "format_options",
    "match_path",
    "normalize_options",
    "parse_options",
]
