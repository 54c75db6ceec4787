"""Derivative cache manager: read-through population of the crops store."""

from __future__ import annotations

import logging
import posixpath
import threading
from concurrent.futures import ThreadPoolExecutor

from croppy.cache.locks import KeyedLock
from croppy.cache.stats import CacheStats
from croppy.config.schema import CroppyConfig
from croppy.errors.exceptions import (
    BlobNotFound,
    ProcessingFailed,
    PurgeRefused,
    SourceUnreadable,
    TooManyDerivatives,
)
from croppy.processing.base import ImageProcessor
from croppy.storage.mount import Storage
from croppy.types import Derivative, TransformRequest
from croppy.url.pattern import match_path

logger = logging.getLogger(__name__)


class DerivativeCache:
    """Sole writer of derivatives.

    ``ensure`` is a read-through: an existing derivative is returned as is
    (no staleness check against the source), otherwise it is generated once
    per key while concurrent requesters for the same key wait for it.

    The ``max_crops`` check reads a listing and is best effort: requests for
    different keys of one source can pass it together.
    """

    def __init__(
        self,
        storage: Storage,
        processor: ImageProcessor,
        config: CroppyConfig | None = None,
        max_workers: int | None = None,
    ) -> None:
        self._storage = storage
        self._processor = processor
        self._config = config or CroppyConfig()
        self._locks = KeyedLock()
        self._stats = CacheStats()
        self._stats_lock = threading.Lock()
        self._executor: ThreadPoolExecutor | None = None
        if self._config.processing_timeout is not None:
            self._executor = ThreadPoolExecutor(
                max_workers=max_workers, thread_name_prefix="croppy-process"
            )

    @property
    def storage(self) -> Storage:
        return self._storage

    def mounted(self, directory: str) -> Storage:
        """Storage for one source directory when ``crops_subdir`` is configured."""
        subdir = self._config.crops_subdir
        if not subdir:
            return self._storage
        return self._storage.mount(directory, posixpath.join(directory, subdir))

    def ensure(
        self,
        request: TransformRequest,
        store_key: str,
        storage: Storage | None = None,
        lock_key: str | None = None,
    ) -> Derivative:
        """Return the derivative at ``store_key``, generating it if needed.

        Raises TooManyDerivatives, SourceUnreadable or ProcessingFailed.
        """
        storage = storage or self._storage

        if storage.crop_exists(store_key):
            self._count("hits")
            logger.debug("Cache hit: %s", store_key)
            return Derivative(key=store_key, source_path=request.source_path, cached=True)

        with self._locks.hold(lock_key or store_key):
            # Another worker may have finished it while we waited
            if storage.crop_exists(store_key):
                self._count("hits")
                logger.debug("Cache hit after wait: %s", store_key)
                return Derivative(key=store_key, source_path=request.source_path, cached=True)

            self._count("misses")
            self._check_limit(storage, request.source_path)

            try:
                source = storage.read_src(request.source_path)
            except BlobNotFound as exc:
                logger.warning("Source unreadable: %s", request.source_path)
                raise SourceUnreadable(
                    f"Source image not found: {request.source_path}",
                    source_path=request.source_path,
                ) from exc

            data = self._process(source, request)
            storage.write_crop(store_key, data)
            self._count("generated")
            logger.info(
                "Generated %s from %s (%d bytes)", store_key, request.source_path, len(data)
            )
            return Derivative(
                key=store_key,
                source_path=request.source_path,
                size_bytes=len(data),
                cached=False,
            )

    def too_many(self, source_path: str, storage: Storage | None = None) -> bool:
        limit = self._config.max_crops
        if limit is None:
            return False
        storage = storage or self._storage
        return len(storage.list_crops(source_path)) >= limit

    def list_derivatives(self, source_path: str) -> list[str]:
        storage, name = self._split(source_path)
        return storage.list_crops(name)

    def reset(self, source_path: str) -> int:
        """Delete every derivative of ``source_path``; the source stays."""
        storage, name = self._split(source_path)
        removed = 0
        for key in storage.list_crops(name):
            if storage.delete_crop(key):
                removed += 1
        logger.info("Removed %d derivatives of %s", removed, source_path)
        return removed

    def delete(self, source_path: str) -> int:
        """Delete the source and all of its derivatives."""
        removed = self.reset(source_path)
        storage, name = self._split(source_path)
        if storage.delete_src(name):
            logger.info("Deleted source %s", source_path)
        return removed

    def purge(self, dry_run: bool = False) -> list[str]:
        """Delete derivatives whose source no longer exists.

        Returns the affected keys, relative to the crops store root. Refuses
        to run when sources and derivatives share a root without a
        ``crops_subdir``.
        """
        shared = self._storage.shares_root()
        if shared and not self._config.crops_subdir:
            raise PurgeRefused(
                "Sources and derivatives share one store; configure crops_subdir "
                "or a separate crops_dir before purging"
            )

        orphans: list[str] = []
        for key in self._storage.list_all_crops():
            source = self.source_for(key)
            if source is None or self._storage.src_exists(source):
                continue
            if not shared and self._storage.src_exists(key):
                # a source image that only looks like a derivative
                continue
            orphans.append(key)
            if not dry_run:
                self._storage.delete_crop(key)
        logger.info(
            "%s %d orphaned derivatives", "Found" if dry_run else "Purged", len(orphans)
        )
        return orphans

    def source_for(self, crop_key: str) -> str | None:
        """Source path a crops-store key was generated from.

        With ``crops_subdir`` set, keys outside such a directory are not
        derivatives and give None.
        """
        m = match_path(crop_key)
        if m is None:
            return None
        directory, name = posixpath.split(m.source)
        subdir = self._config.crops_subdir
        if subdir:
            if directory == subdir:
                directory = ""
            elif directory.endswith("/" + subdir):
                directory = directory[: -len(subdir) - 1]
            else:
                return None
        return posixpath.join(directory, name)

    def stats(self) -> CacheStats:
        with self._stats_lock:
            return self._stats.model_copy()

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)

    def _check_limit(self, storage: Storage, source_path: str) -> None:
        if self.too_many(source_path, storage):
            self._count("denied")
            logger.warning(
                "Refusing new derivative of %s: %d already exist",
                source_path,
                self._config.max_crops,
            )
            raise TooManyDerivatives(
                f"Too many derivatives of {source_path} (max {self._config.max_crops})",
                source_path=source_path,
                limit=self._config.max_crops or 0,
            )

    def _process(self, source: bytes, request: TransformRequest) -> bytes:
        config = self._config.processor_defaults(request.options)
        timeout = self._config.processing_timeout
        try:
            if self._executor is not None:
                future = self._executor.submit(
                    self._processor.process,
                    source,
                    request.width,
                    request.height,
                    request.options,
                    config,
                )
                data = future.result(timeout=timeout)
            else:
                data = self._processor.process(
                    source, request.width, request.height, request.options, config
                )
        except TimeoutError as exc:
            self._count("failures")
            logger.error("Processing %s timed out after %ss", request.source_path, timeout)
            raise ProcessingFailed(
                f"Processing {request.source_path} timed out after {timeout}s",
                source_path=request.source_path,
                original=exc,
            ) from exc
        except Exception as exc:
            self._count("failures")
            logger.error("Processing %s failed: %s", request.source_path, exc)
            raise ProcessingFailed(
                f"Processing {request.source_path} failed: {exc}",
                source_path=request.source_path,
                original=exc,
            ) from exc

        if not data:
            self._count("failures")
            raise ProcessingFailed(
                f"Processor returned no data for {request.source_path}",
                source_path=request.source_path,
            )
        return data

    def _split(self, source_path: str) -> tuple[Storage, str]:
        if not self._config.crops_subdir:
            return self._storage, source_path
        directory, name = posixpath.split(source_path)
        return self.mounted(directory), name

    def _count(self, field: str) -> None:
        with self._stats_lock:
            setattr(self._stats, field, getattr(self._stats, field) + 1)
