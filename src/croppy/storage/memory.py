"""In-process blob store."""

from __future__ import annotations

import posixpath
import threading
from pathlib import Path

from croppy.errors.exceptions import BlobNotFound
from croppy.storage.base import BlobStore, PrefixedBlobStore, normalize_key


class MemoryBlobStore:
    """Dict-backed store. Thread-safe; contents vanish with the process."""

    def __init__(self, blobs: dict[str, bytes] | None = None) -> None:
        self._blobs: dict[str, bytes] = {}
        self._lock = threading.Lock()
        for key, data in (blobs or {}).items():
            self.write(key, data)

    def __len__(self) -> int:
        return len(self._blobs)

    def __contains__(self, key: str) -> bool:
        return self.exists(key)

    def exists(self, key: str) -> bool:
        return normalize_key(key) in self._blobs

    def read(self, key: str) -> bytes:
        with self._lock:
            data = self._blobs.get(normalize_key(key))
        if data is None:
            raise BlobNotFound(f"No such blob: {key}", key=key)
        return data

    def write(self, key: str, data: bytes) -> None:
        with self._lock:
            self._blobs[normalize_key(key)] = bytes(data)

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._blobs.pop(normalize_key(key), None) is not None

    def list(self, prefix: str = "", recursive: bool = False) -> list[str]:
        prefix = normalize_key(prefix)
        with self._lock:
            keys = list(self._blobs)
        if recursive:
            if not prefix:
                return sorted(keys)
            return sorted(k for k in keys if k.startswith(prefix + "/"))
        return sorted(k for k in keys if posixpath.dirname(k) == prefix)

    def is_remote(self) -> bool:
        return False

    def local_root_path(self) -> Path | None:
        return None

    def url(self, key: str) -> str | None:
        return None

    def scoped(self, root: str) -> BlobStore:
        return PrefixedBlobStore(self, root)
