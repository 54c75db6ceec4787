"""Blob store interface shared by the source and derivative stores."""

from __future__ import annotations

import posixpath
from pathlib import Path
from typing import Protocol, runtime_checkable

from croppy.errors.exceptions import InvalidInput


@runtime_checkable
class BlobStore(Protocol):
    """Byte storage addressed by slash-separated keys relative to a root.

    Implementations may be local (``local_root_path()`` returns a directory
    the handler can stream from) or remote (``is_remote()`` is True and
    ``url()`` gives the address clients are redirected to).
    """

    def exists(self, key: str) -> bool: ...

    def read(self, key: str) -> bytes:
        """Raises BlobNotFound when nothing is stored at ``key``."""
        ...

    def write(self, key: str, data: bytes) -> None: ...

    def delete(self, key: str) -> bool:
        """True when something was removed."""
        ...

    def list(self, prefix: str = "", recursive: bool = False) -> list[str]:
        """Keys stored in the ``prefix`` directory, sorted."""
        ...

    def is_remote(self) -> bool: ...

    def local_root_path(self) -> Path | None: ...

    def url(self, key: str) -> str | None: ...

    def scoped(self, root: str) -> BlobStore: ...


def normalize_key(key: str) -> str:
    """Canonical relative key; refuses keys that climb out of the root."""
    if not key:
        return ""
    normalized = posixpath.normpath(key.replace("\\", "/")).lstrip("/")
    if normalized == ".":
        return ""
    if normalized == ".." or normalized.startswith("../"):
        raise InvalidInput(f"Key escapes the store root: {key!r}")
    return normalized


def join_key(root: str, key: str) -> str:
    root = normalize_key(root)
    key = normalize_key(key)
    if not root:
        return key
    return f"{root}/{key}" if key else root


class PrefixedBlobStore:
    """View of another store re-rooted under ``root``."""

    def __init__(self, inner: BlobStore, root: str) -> None:
        self._inner = inner
        self._root = normalize_key(root)

    @property
    def root(self) -> str:
        return self._root

    def exists(self, key: str) -> bool:
        return self._inner.exists(join_key(self._root, key))

    def read(self, key: str) -> bytes:
        return self._inner.read(join_key(self._root, key))

    def write(self, key: str, data: bytes) -> None:
        self._inner.write(join_key(self._root, key), data)

    def delete(self, key: str) -> bool:
        return self._inner.delete(join_key(self._root, key))

    def list(self, prefix: str = "", recursive: bool = False) -> list[str]:
        keys = self._inner.list(join_key(self._root, prefix), recursive=recursive)
        if not self._root:
            return keys
        strip = len(self._root) + 1
        return [k[strip:] for k in keys if k.startswith(self._root + "/")]

    def is_remote(self) -> bool:
        return self._inner.is_remote()

    def local_root_path(self) -> Path | None:
        root = self._inner.local_root_path()
        if root is None:
            return None
        return root / self._root if self._root else root

    def url(self, key: str) -> str | None:
        return self._inner.url(join_key(self._root, key))

    def scoped(self, root: str) -> BlobStore:
        return PrefixedBlobStore(self._inner, join_key(self._root, root))
