"""Builds derivative URLs and parses them back into transform requests."""

from __future__ import annotations

import logging
import posixpath
from typing import Any
from urllib.parse import urlsplit

from croppy.config.schema import CroppyConfig
from croppy.errors.exceptions import InvalidInput, UnconfiguredPath
from croppy.signing import Signer
from croppy.types import TransformRequest
from croppy.url.pattern import (
    decode_dimension,
    encode_dimension,
    format_options,
    match_path,
    normalize_options,
    parse_options,
)

logger = logging.getLogger(__name__)


class UrlBuilder:
    """Stateless over its config: encode, decode and relativize derivative paths."""

    def __init__(self, config: CroppyConfig, signer: Signer | None = None) -> None:
        self._config = config
        self._signer = signer or Signer(config.signing_key)

    @property
    def signer(self) -> Signer:
        return self._signer

    def generate(
        self,
        url: str,
        width: float | None = None,
        height: float | None = None,
        options: Any = None,
    ) -> str:
        """Insert the ``-WxH-options`` suffix into ``url``.

        Ignored paths and requests without dimensions pass through unchanged
        (apart from the prefix rewrite), so the helper can be applied to every
        image a page renders.
        """
        if not url:
            raise InvalidInput("Cannot build a derivative URL from an empty source")

        path = self.to_path(url)
        if not path:
            raise InvalidInput(f"No path in source URL: {url!r}")
        rooted = _is_rooted(url)

        ignore = self._config.ignore_pattern
        if ignore is not None and ignore.search(path):
            return self._publish(path, rooted)

        if not width and not height:
            return self._publish(path, rooted)

        suffix = (
            f"-{encode_dimension(width)}x{encode_dimension(height)}"
            + format_options(normalize_options(options))
        )

        directory, name = posixpath.split(path)
        stem, ext = posixpath.splitext(name)
        path = posixpath.join(directory, stem + suffix + ext)
        result = self._publish(path, rooted)

        token = self._signer.sign(result)
        if token:
            result += f"?token={token}"
        return result

    def parse(self, request: str) -> TransformRequest | None:
        """Decode a request path, or None when it is not a derivative path.

        Raises UnconfiguredPath when the path matches the grammar but none of
        the configured ``path`` patterns.
        """
        match = match_path(self.to_path(request))
        if match is None:
            return None
        return TransformRequest(
            source_path=self.relative_path(match.source),
            width=decode_dimension(match.width),
            height=decode_dimension(match.height),
            options=parse_options(match.options),
        )

    def matches(self, request: str) -> bool:
        """Does the path follow the derivative grammar?"""
        return match_path(self.to_path(request)) is not None

    def in_scope(self, request: str) -> bool:
        """Is the path under one of the configured ``path`` patterns?"""
        path = self.to_path(request)
        return any(rx.search(path) for rx in self._config.path_patterns)

    def is_route(self, request: str) -> bool:
        return self.in_scope(request) and self.matches(request)

    def relative_path(self, url: str) -> str:
        """Storage key for ``url``: the first capture of the first matching ``path``."""
        path = self.to_path(url)
        for rx in self._config.path_patterns:
            m = rx.search(path)
            if m:
                return m.group(1)
        raise UnconfiguredPath(
            f"{url} doesn't match any of the configured paths {self._config.path}",
            path=path,
            patterns=list(self._config.path),
        )

    def path_to_url(self, path: str) -> str:
        """Public URL for a storage path, honouring ``url_prefix``."""
        prefix = self._config.url_prefix
        if not prefix:
            return "/" + path
        return prefix.rstrip("/") + "/" + self.relative_path(path)

    @staticmethod
    def to_path(url: str) -> str:
        """Path part of a URL without its leading slash."""
        return urlsplit(url).path.lstrip("/")

    def _publish(self, path: str, rooted: bool) -> str:
        if self._config.url_prefix or rooted:
            return self.path_to_url(path)
        return path


def _is_rooted(url: str) -> bool:
    parts = urlsplit(url)
    return bool(parts.scheme or parts.netloc) or url.startswith("/")
