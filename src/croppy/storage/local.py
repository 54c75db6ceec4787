"""Filesystem blob store."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from croppy.errors.exceptions import BlobNotFound
from croppy.storage.base import BlobStore, PrefixedBlobStore, normalize_key

logger = logging.getLogger(__name__)


class LocalBlobStore:
    """Stores blobs as files under ``root``.

    Writes go through a temp file in the target directory and ``os.replace``,
    so readers never see a half-written derivative.
    """

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root).resolve()

    @property
    def root(self) -> Path:
        return self._root

    def exists(self, key: str) -> bool:
        return self._path(key).is_file()

    def read(self, key: str) -> bytes:
        path = self._path(key)
        try:
            return path.read_bytes()
        except FileNotFoundError as exc:
            raise BlobNotFound(f"No such blob: {key}", key=key) from exc
        except IsADirectoryError as exc:
            raise BlobNotFound(f"Not a blob: {key}", key=key) from exc

    def write(self, key: str, data: bytes) -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=".tmp-", suffix=path.suffix)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
        logger.debug("Wrote %s (%d bytes)", path, len(data))

    def delete(self, key: str) -> bool:
        path = self._path(key)
        if not path.is_file():
            return False
        path.unlink()
        return True

    def list(self, prefix: str = "", recursive: bool = False) -> list[str]:
        directory = self._path(prefix)
        if not directory.is_dir():
            return []
        entries = directory.rglob("*") if recursive else directory.iterdir()
        keys = [
            p.relative_to(self._root).as_posix()
            for p in entries
            if p.is_file() and not p.name.startswith(".tmp-")
        ]
        return sorted(keys)

    def is_remote(self) -> bool:
        return False

    def local_root_path(self) -> Path | None:
        return self._root

    def url(self, key: str) -> str | None:
        return None

    def scoped(self, root: str) -> BlobStore:
        return PrefixedBlobStore(self, root)

    def _path(self, key: str) -> Path:
        key = normalize_key(key)
        return self._root / key if key else self._root
