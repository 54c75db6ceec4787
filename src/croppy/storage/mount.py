"""Source and derivative stores bound together."""

from __future__ import annotations

import logging
import posixpath
from pathlib import Path

from croppy.storage.base import BlobStore, normalize_key
from croppy.url.pattern import match_path

logger = logging.getLogger(__name__)


class Storage:
    """The pair of stores one request works against.

    Sources are read from ``src``; derivatives are written to ``crops`` under
    the same relative directory as their source.
    """

    def __init__(self, src: BlobStore, crops: BlobStore) -> None:
        self.src = src
        self.crops = crops

    def mount(self, src_root: str, crops_root: str) -> Storage:
        """Re-root both stores, e.g. per request directory."""
        logger.debug("Mounting src=%r crops=%r", src_root, crops_root)
        return Storage(self.src.scoped(src_root), self.crops.scoped(crops_root))

    def crop_exists(self, key: str) -> bool:
        return self.crops.exists(key)

    def read_src(self, path: str) -> bytes:
        return self.src.read(path)

    def src_exists(self, path: str) -> bool:
        return self.src.exists(path)

    def write_crop(self, key: str, data: bytes) -> None:
        self.crops.write(key, data)

    def read_crop(self, key: str) -> bytes:
        return self.crops.read(key)

    def delete_crop(self, key: str) -> bool:
        return self.crops.delete(key)

    def delete_src(self, path: str) -> bool:
        return self.src.delete(path)

    def list_crops(self, source_path: str) -> list[str]:
        """Derivative keys generated from ``source_path``."""
        source_path = normalize_key(source_path)
        directory, name = posixpath.split(source_path)
        stem, ext = posixpath.splitext(name)
        expected_stem = posixpath.join(directory, stem)
        expected_ext = ext.lstrip(".").lower()

        crops: list[str] = []
        for key in self.crops.list(directory):
            m = match_path(key)
            if m and m.stem == expected_stem and m.extension.lower() == expected_ext:
                crops.append(key)
        return crops

    def list_all_crops(self) -> list[str]:
        return [k for k in self.crops.list("", recursive=True) if match_path(k)]

    def shares_root(self) -> bool:
        """Do sources and derivatives live side by side in one tree?"""
        if self.src is self.crops:
            return True
        src_root = self.src.local_root_path()
        return src_root is not None and src_root == self.crops.local_root_path()

    def crops_are_remote(self) -> bool:
        return self.crops.is_remote()

    def local_crop_path(self, key: str) -> Path | None:
        root = self.crops.local_root_path()
        if root is None:
            return None
        return root / normalize_key(key)

    def crop_url(self, key: str) -> str | None:
        return self.crops.url(key)
