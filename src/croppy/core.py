"""Top-level entry point: Croppy wires the components from one config."""

from __future__ import annotations

import logging
from typing import Any

from croppy.cache.manager import DerivativeCache
from croppy.cache.stats import CacheStats
from croppy.config.schema import CroppyConfig
from croppy.handler import RequestHandler
from croppy.processing.base import ImageProcessor
from croppy.processing.pillow import PillowProcessor
from croppy.signing import Signer
from croppy.storage.base import BlobStore
from croppy.storage.local import LocalBlobStore
from croppy.storage.mount import Storage
from croppy.types import Delivery, TransformRequest
from croppy.url.builder import UrlBuilder

logger = logging.getLogger(__name__)


class Croppy:
    """Main facade with full lifecycle control.

    Stores default to local directories from ``src_dir``/``crops_dir``; pass
    any BlobStore (e.g. ``S3BlobStore``) to override either one.
    """

    def __init__(
        self,
        config: CroppyConfig | None = None,
        src_store: BlobStore | None = None,
        crops_store: BlobStore | None = None,
        processor: ImageProcessor | None = None,
    ) -> None:
        self._config = config or CroppyConfig()

        if src_store is None:
            src_store = LocalBlobStore(self._config.src_dir)
        if crops_store is None:
            if self._config.crops_dir == self._config.src_dir and isinstance(
                src_store, LocalBlobStore
            ):
                crops_store = src_store
            else:
                crops_store = LocalBlobStore(self._config.crops_dir)

        self._signer = Signer(self._config.signing_key)
        self._url = UrlBuilder(self._config, self._signer)
        self._storage = Storage(src_store, crops_store)
        self._cache = DerivativeCache(self._storage, processor or PillowProcessor(), self._config)
        self._handler = RequestHandler(self._config, self._url, self._cache, self._signer)

    @property
    def config(self) -> CroppyConfig:
        return self._config

    @property
    def url_builder(self) -> UrlBuilder:
        return self._url

    @property
    def signer(self) -> Signer:
        return self._signer

    @property
    def cache(self) -> DerivativeCache:
        return self._cache

    @property
    def handler(self) -> RequestHandler:
        return self._handler

    def url(
        self,
        url: str,
        width: float | None = None,
        height: float | None = None,
        options: Any = None,
    ) -> str:
        return self._url.generate(url, width, height, options)

    def parse(self, path: str) -> TransformRequest | None:
        return self._url.parse(path)

    def handle(self, path: str, token: str | None = None) -> Delivery:
        return self._handler.handle(path, token)

    def derivatives(self, url: str) -> list[str]:
        return self._cache.list_derivatives(self._url.relative_path(url))

    def reset(self, url: str) -> int:
        """Delete the derivatives of the image at ``url``."""
        return self._cache.reset(self._url.relative_path(url))

    def delete(self, url: str) -> int:
        """Delete the image at ``url`` and its derivatives."""
        return self._cache.delete(self._url.relative_path(url))

    def purge(self, dry_run: bool = False) -> list[str]:
        return self._cache.purge(dry_run=dry_run)

    def stats(self) -> CacheStats:
        return self._cache.stats()

    def close(self) -> None:
        self._cache.close()

    def __enter__(self) -> Croppy:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
